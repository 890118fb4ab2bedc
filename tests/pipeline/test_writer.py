"""Tests for the dataset artifact writers."""

import json

from wq_enrichment.pipeline.writer import (
    format_geojson,
    list_dataset_dates,
    remove_dataset,
    write_dataset,
    write_dates_index,
    write_latest
)

FEATURE = {
    'type': 'Feature',
    'geometry': {'type': 'Point', 'coordinates': [-74.01, 40.7]},
    'properties': {
        'siteName': 'Pier A',
        'mpn': 20.0,
        'rainByDay': [0.1, 0.0, 2.0],
        'tideState': 'Mid Tide – ⬆️ Rising (The Battery)',
    },
}


class TestFormatGeojson:

    def test_scalar_arrays_stay_on_one_line(self):
        text = format_geojson({'type': 'FeatureCollection', 'features': [FEATURE]})
        assert '"coordinates": [-74.01, 40.7]' in text
        assert '"rainByDay": [0.1, 0, 2]' in text

    def test_indented_and_round_trips(self):
        collection = {'type': 'FeatureCollection', 'features': [FEATURE]}
        text = format_geojson(collection)
        assert text.startswith('{\n  "type": "FeatureCollection",')
        assert json.loads(text)['features'][0]['properties']['siteName'] == 'Pier A'

    def test_integral_numbers_have_no_fraction(self):
        text = format_geojson({'properties': {'mpn': 20.0, 'totalRain': 0.7}})
        assert '"mpn": 20,' in text
        assert '"totalRain": 0.7' in text

    def test_non_ascii_written_verbatim(self):
        text = format_geojson({'properties': {'tideState': FEATURE['properties']['tideState']}})
        assert '⬆️' in text
        assert '–' in text
        assert '\\u' not in text

    def test_nested_and_empty_arrays(self):
        text = format_geojson({'features': [], 'ring': [[1, 2], [3, 4]]})
        data = json.loads(text)
        assert data == {'features': [], 'ring': [[1, 2], [3, 4]]}
        assert '[1, 2]' in text


def test_write_dataset(tmp_path):
    dataset_dir = write_dataset(tmp_path, '2025-05-08', [FEATURE], 0.7)

    assert dataset_dir == tmp_path / '2025-05-08'
    enriched = json.loads((dataset_dir / 'enriched.geojson').read_text(encoding='utf-8'))
    assert enriched['type'] == 'FeatureCollection'
    assert len(enriched['features']) == 1

    metadata = json.loads((dataset_dir / 'metadata.json').read_text(encoding='utf-8'))
    assert metadata == {
        'date': '2025-05-08',
        'totalRain': 0.7,
        'sampleCount': 1,
        'description': 'Water quality samples from 2025-05-08',
    }


def test_remove_dataset(tmp_path):
    write_dataset(tmp_path, '2025-05-08', [FEATURE], 0.7)
    assert remove_dataset(tmp_path, '2025-05-08')
    assert not (tmp_path / '2025-05-08').exists()
    assert remove_dataset(tmp_path, '2025-05-08')


def test_index_files(tmp_path):
    for date in ('2025-05-08', '2025-05-01'):
        (tmp_path / date).mkdir()
    (tmp_path / 'assets').mkdir()

    dates = list_dataset_dates(tmp_path)
    assert dates == ['2025-05-01', '2025-05-08']

    write_latest(tmp_path, dates[-1])
    write_dates_index(tmp_path, dates)

    assert (tmp_path / 'latest.txt').read_text(encoding='utf-8') == '2025-05-08'
    assert (tmp_path / 'dates.json').read_text(encoding='utf-8') == '[\n  "2025-05-01",\n  "2025-05-08"\n]'
