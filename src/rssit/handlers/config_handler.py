# ============================================
# file: src/rssit/handlers/config_handler.py
# ============================================
from __future__ import annotations

import json
import logging
from typing import List

from rssit.utils.config_manager import config_manager

logger = logging.getLogger(__name__)

config_help_text = """
  config
      Prints the effective configuration (settings.json plus any --set overrides) as JSON.
""".strip()


def apply_overrides(pairs: List[str]) -> bool:
    """Applies 'key.path=value' overrides to the in-memory configuration."""
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            print(f"❌ Error: Invalid override '{pair}', expected key.path=value.")
            return False
        if not config_manager.set_nested(key.strip(), value.strip()):
            print(f"❌ Error: Cannot set '{key.strip()}'.")
            return False
    return True


def handle_config(args: List[str]) -> int:
    if args:
        print(f"Unknown arguments: {' '.join(args)}")
        print(config_help_text)
        return 1
    print(json.dumps(config_manager.get_all(), indent=2, ensure_ascii=False))
    return 0
