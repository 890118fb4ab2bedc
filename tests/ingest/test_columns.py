"""Tests for CSV header resolution."""

from wq_enrichment.ingest import columns as cols


def test_normalize_header():
    assert cols.normalize_header("  Site   Name ") == "site name"


def test_first_alias_wins():
    headers = ["name", "Site Name", "lat", "lon"]
    assert cols.find_column(headers, cols.SAMPLE_COLUMN_ALIASES[cols.SITE_NAME]) == "Site Name"


def test_resolve_columns_reports_missing():
    mapping = cols.resolve_columns(["Site Name", "Latitude"], cols.SAMPLE_COLUMN_ALIASES)
    assert mapping[cols.SITE_NAME] == "Site Name"
    assert mapping[cols.LATITUDE] == "Latitude"
    assert mapping[cols.LONGITUDE] is None
    assert mapping[cols.MPN] is None


def test_rain_columns_substring_fallback():
    mapping = cols.resolve_rain_columns(["Date", "Total Rain (in)"])
    assert mapping[cols.RAIN_DATE] == "Date"
    assert mapping[cols.RAINFALL] == "Total Rain (in)"


def test_rain_columns_exact_alias():
    mapping = cols.resolve_rain_columns(["day", "precipitation"])
    assert mapping == {cols.RAIN_DATE: "day", cols.RAINFALL: "precipitation"}
