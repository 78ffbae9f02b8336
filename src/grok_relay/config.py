"""Configuration handling for the Grok relay."""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.x.ai/v1"

DEFAULT_CONFIG: Dict[str, Any] = {
    "upstream": {"name": "grok", "url": DEFAULT_API_BASE},
    "settings": {"timeout": 120},
    "server": {"host": "0.0.0.0", "port": 8000},
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def load_config() -> Dict[str, Any]:
    """
    Load configuration from config.yaml file.
    Returns a dictionary containing the configuration, or the built-in
    defaults when the file cannot be read.
    """
    try:
        config_path = Path(__file__).parent.parent.parent / "config.yaml"
        config_yaml = config_path.read_text()
        config = yaml.safe_load(config_yaml) or {}
        logger.info("Successfully loaded configuration from config.yaml")
    except Exception as e:
        logger.error(f"Error loading config.yaml: {str(e)}")
        return DEFAULT_CONFIG

    merged = {}
    for section, defaults in DEFAULT_CONFIG.items():
        merged[section] = {**defaults, **(config.get(section) or {})}
    return merged


config = load_config()

GROK_API_BASE = config["upstream"].get("url", "")
if not GROK_API_BASE:
    logger.warning("Upstream URL not set in config.yaml, using default value")
    GROK_API_BASE = DEFAULT_API_BASE
GROK_API_BASE = GROK_API_BASE.rstrip("/")

TIMEOUT = float(config["settings"].get("timeout", 120))
HOST = config["server"].get("host", "0.0.0.0")
PORT = int(config["server"].get("port", 8000))
