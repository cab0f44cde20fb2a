import json
import logging
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger("sunny_auto")

CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "shop_config.json"

def load_shop_config() -> Dict[str, Any]:
    """
    Loads shop configuration (name, owner e-mail, notification toggles) from JSON file.
    Raises FileNotFoundError if config is missing.
    """
    if not CONFIG_PATH.exists():
        logger.critical(f"❌ Shop config '{CONFIG_PATH}' not found! Cannot start.")
        raise FileNotFoundError(f"Configuration file not found at {CONFIG_PATH}")

    try:
        with open(CONFIG_PATH, 'r', encoding='utf-8') as f:
            config = json.load(f)
            logger.info(f"✅ Shop config loaded for: {config.get('shop_name', 'Unknown')}")
            return config
    except json.JSONDecodeError as e:
        logger.critical(f"❌ Invalid JSON in shop config: {e}")
        raise ValueError(f"Invalid JSON in config file: {e}")

def get_notification_config(config: Dict[str, Any]) -> Dict[str, Any]:
    return config.get("notifications", {})
