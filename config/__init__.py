from typing import Dict
import logging
import yaml
import os

logger = logging.getLogger(__name__)

CONFIG_FILES = {
    "rendering": "rendering.yaml",
    "aliases": "field_aliases.yaml",
    "styles": "style_presets.yaml"
}

def load_config(config_dir: str = None) -> Dict:
    base_dir = config_dir or os.path.dirname(os.path.abspath(__file__))

    config = {}
    for key, filename in CONFIG_FILES.items():
        filepath = os.path.join(base_dir, filename)
        try:
            with open(filepath, 'r') as f:
                config[key] = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Config file {filename} not found")
            config[key] = {}

    return config
