"""Tests for input file discovery."""

import pytest

from wq_enrichment.pipeline.discovery import (
    PipelineError,
    classify_input_file,
    discover_input_files,
    extract_date_from_filename
)


def touch(directory, name):
    path = directory / name
    path.write_text("x", encoding="utf-8")
    return path


def test_extract_date_from_filename():
    assert extract_date_from_filename("samples-2025-05-08.csv") == "2025-05-08"
    assert extract_date_from_filename("rain_2025-05-08_v2.csv") == "2025-05-08"
    assert extract_date_from_filename("samples.csv") is None


@pytest.mark.parametrize("name,expected", [
    ("samples-2025-05-08.csv", "samples"),
    ("SAMPLE_2025-05-08.csv", "samples"),
    ("Rain-2025-05-08.csv", "rain"),
    ("rainfall_2025-05-08.csv", "rain"),
    ("sample-rain-2025-05-08.csv", "samples"),
    ("notes-2025-05-08.csv", None),
])
def test_classify_input_file(name, expected):
    assert classify_input_file(name) == expected


def test_pairs_files_by_date(tmp_path):
    samples = touch(tmp_path, "samples-2025-05-08.csv")
    rain = touch(tmp_path, "rain-2025-05-08.csv")
    touch(tmp_path, "samples-2025-05-09.csv")

    date_map = discover_input_files(tmp_path)

    assert set(date_map) == {"2025-05-08", "2025-05-09"}
    assert date_map["2025-05-08"].samples == samples
    assert date_map["2025-05-08"].rain == rain
    assert date_map["2025-05-08"].is_complete
    assert not date_map["2025-05-09"].is_complete


def test_ignores_unusable_names(tmp_path):
    touch(tmp_path, "samples.csv")
    touch(tmp_path, "notes-2025-05-08.csv")
    touch(tmp_path, "samples-2025-13-45.csv")
    (tmp_path / "rain-2025-05-08").mkdir()

    assert discover_input_files(tmp_path) == {}


def test_first_duplicate_wins(tmp_path, caplog):
    first = touch(tmp_path, "samples-2025-05-08-a.csv")
    touch(tmp_path, "samples-2025-05-08-b.csv")

    date_map = discover_input_files(tmp_path)

    assert date_map["2025-05-08"].samples == first
    assert "Multiple samples files" in caplog.text


def test_missing_input_dir(tmp_path):
    with pytest.raises(PipelineError):
        discover_input_files(tmp_path / "missing")
