import copy
import os

import yaml

# ----------------------------
# Configuration files
# ----------------------------
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
CONFIG_DIR = os.path.join(BASE_DIR, "config")
SET_FILE = os.getenv("SETTINGS_FILE", os.path.join(CONFIG_DIR, "settings.yaml"))

# Safe defaults if the YAML file is missing
DEFAULTS = {
    "api": {
        "title": "Employee Manager API",
        "version": "1.0.0",
        "prefix": "/api/v1",
        "cors_origins": ["http://localhost:4200"],
    },
    "database": {
        "create_tables": False,
    },
    "seed": {
        "enabled": False,
        "data_dir": os.path.join(BASE_DIR, "data"),
    },
    "statistics": {
        "founded_year": 2024,
        "projects_completed": 45,
        "client_satisfaction": 98.5,
        "annual_revenue": "$2.5M",
    },
    "logging": {
        "level": "INFO",
    },
}

def _load_yaml(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged

def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

def load_settings(path: str = SET_FILE) -> dict:
    settings = _merge(DEFAULTS, _load_yaml(path))

    # Environment wins over the YAML file
    settings["logging"]["level"] = os.getenv("LOG_LEVEL", settings["logging"]["level"])
    settings["seed"]["enabled"] = _env_flag("SEED_DATABASE", settings["seed"]["enabled"])
    settings["database"]["create_tables"] = _env_flag("CREATE_TABLES", settings["database"]["create_tables"])
    return settings

SETTINGS = load_settings()
