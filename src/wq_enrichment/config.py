from pathlib import Path
from typing import Any, Dict, Optional
import copy
import logging

import yaml

logger = logging.getLogger(__name__)

# Project structure configuration
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
SETTINGS_FILE = CONFIG_DIR / "enrichment_settings.yaml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    'api': {
        'stations_url': "https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi/stations.json",
        'datagetter_url': "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter",
        'requests_per_second': 2.0,
        'timeout': 30,
        'application': "nyc_water_app",
    },
    'tide': {
        'search_radii_km': [5.0, 10.0],
        'datum': "MLLW",
        'units': "english",
        'interval': "h",
        'min_readings': 4,
        'extreme_fraction': 0.2,
        'suppress_contradictory_trend': True,
    },
    'timestamps': {
        'timezone': "America/New_York",
        'default_time': "12:00",
    },
    'rainfall': {
        'window_days': 7,
    },
    'paths': {
        'input_dir': "scripts/input",
        'output_dir': "public/data",
        'log_dir': "output/logs",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load pipeline settings from YAML, layered over the built-in defaults.

    Args:
        settings_file: Optional path to a settings file. Defaults to
            config/enrichment_settings.yaml under the project root.

    Returns:
        Settings dictionary with every section of DEFAULT_SETTINGS present

    Raises:
        yaml.YAMLError: If the settings file exists but is not valid YAML
    """
    settings_file = Path(settings_file) if settings_file else SETTINGS_FILE

    if not settings_file.exists():
        logger.debug(f"No settings file at {settings_file}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    with open(settings_file) as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Settings file {settings_file} must contain a mapping")

    logger.debug(f"Loaded settings from {settings_file}")
    return _deep_merge(DEFAULT_SETTINGS, loaded)


def resolve_path(path_value: str) -> Path:
    """Resolve a settings path relative to the current working directory."""
    path = Path(path_value)
    return path if path.is_absolute() else Path.cwd() / path


SETTINGS = load_settings()


# Main directories, resolved against the working directory at run time
def input_dir(settings: Optional[Dict[str, Any]] = None) -> Path:
    return resolve_path((settings or SETTINGS)['paths']['input_dir'])


def output_dir(settings: Optional[Dict[str, Any]] = None) -> Path:
    return resolve_path((settings or SETTINGS)['paths']['output_dir'])


def log_dir(settings: Optional[Dict[str, Any]] = None) -> Path:
    return resolve_path((settings or SETTINGS)['paths']['log_dir'])
