"""Tests for quality buckets and history rebuilding."""

import json

import pytest

from wq_enrichment.enrichment.quality import (
    CAUTION,
    GOOD,
    POOR,
    QualityCounts,
    classify,
    dataset_directories,
    load_history,
    record_sample
)


@pytest.mark.parametrize("mpn,expected", [
    (0, GOOD),
    (34.99, GOOD),
    (35, CAUTION),
    (104, CAUTION),
    (104.01, POOR),
    (24196, POOR),
])
def test_classify_boundaries(mpn, expected):
    assert classify(mpn) == expected


def test_quality_counts():
    counts = QualityCounts()
    counts.add(GOOD)
    counts.add(POOR)
    counts.add(POOR)
    assert counts.total == 3
    assert counts.to_properties() == {'goodCount': 1, 'cautionCount': 0, 'poorCount': 2}


def test_record_sample_accumulates_per_site():
    history = {}
    record_sample(history, "Pier A", 10)
    counts = record_sample(history, "Pier A", 50)
    record_sample(history, "Pier B", 500)

    assert counts is history["Pier A"]
    assert (counts.good, counts.caution, counts.poor) == (1, 1, 0)
    assert history["Pier B"].poor == 1


def write_enriched(root, date, features):
    dataset_dir = root / date
    dataset_dir.mkdir(parents=True)
    with open(dataset_dir / "enriched.geojson", "w", encoding="utf-8") as f:
        json.dump({"type": "FeatureCollection", "features": features}, f)
    return dataset_dir


def feature(site, mpn):
    return {"type": "Feature", "properties": {"siteName": site, "mpn": mpn}}


class TestLoadHistory:

    def test_folds_over_all_datasets(self, tmp_path):
        write_enriched(tmp_path, "2025-05-01", [feature("Pier A", 10), feature("Pier B", 200)])
        write_enriched(tmp_path, "2025-05-08", [feature("Pier A", 50), feature("Pier A", 20)])

        history = load_history(tmp_path)

        assert history["Pier A"].to_properties() == {'goodCount': 2, 'cautionCount': 1, 'poorCount': 0}
        assert history["Pier B"].poor == 1

    def test_ignores_unusable_features(self, tmp_path):
        write_enriched(tmp_path, "2025-05-01", [
            feature("Pier A", 10),
            feature("", 10),
            feature("Pier A", None),
            feature("Pier A", "n/a"),
            {"type": "Feature"},
        ])

        history = load_history(tmp_path)
        assert history["Pier A"].total == 1

    def test_ignores_malformed_feature_entries(self, tmp_path):
        write_enriched(tmp_path, "2025-05-01", [
            "oops",
            None,
            {"type": "Feature", "properties": [1]},
            {"type": "Feature", "properties": {"siteName": ["Pier A"], "mpn": 10}},
            feature("Pier A", 10),
        ])

        history = load_history(tmp_path)
        assert list(history) == ["Pier A"]
        assert history["Pier A"].total == 1

    def test_skips_non_list_features(self, tmp_path, caplog):
        dataset_dir = tmp_path / "2025-05-01"
        dataset_dir.mkdir()
        (dataset_dir / "enriched.geojson").write_text(
            json.dumps({"type": "FeatureCollection", "features": {"siteName": "Pier A"}}),
            encoding="utf-8"
        )
        write_enriched(tmp_path, "2025-05-08", [feature("Pier A", 10)])

        history = load_history(tmp_path)

        assert history["Pier A"].total == 1
        assert "'features' is not a list" in caplog.text

    def test_skips_corrupt_files(self, tmp_path, caplog):
        dataset_dir = tmp_path / "2025-05-01"
        dataset_dir.mkdir()
        (dataset_dir / "enriched.geojson").write_text("{not json", encoding="utf-8")
        write_enriched(tmp_path, "2025-05-08", [feature("Pier A", 10)])

        history = load_history(tmp_path)

        assert history["Pier A"].total == 1
        assert "Failed to load history" in caplog.text

    def test_ignores_non_dataset_directories(self, tmp_path):
        write_enriched(tmp_path, "2025-05-01", [feature("Pier A", 10)])
        write_enriched(tmp_path, "archive", [feature("Pier A", 10)])

        assert [p.name for p in dataset_directories(tmp_path)] == ["2025-05-01"]
        assert load_history(tmp_path)["Pier A"].total == 1

    def test_missing_output_root(self, tmp_path):
        assert load_history(tmp_path / "missing") == {}
