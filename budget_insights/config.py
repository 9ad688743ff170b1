"""Configuration management for the budget insights engine.

This module centralizes all configuration values including paths,
logging defaults, environment variable overrides and the JSON rule file
that holds the 50/30/20 split and the narrative thresholds.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

# Base project root - assumes this file is in budget_insights/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGET_INSIGHTS_DATA_DIR", _PROJECT_ROOT / "data"))

# Persisted store (the whole household ledger as one JSON document)
STORE_PATH = Path(
    os.getenv("BUDGET_INSIGHTS_STORE_PATH", DATA_DIR / "finance_data.json")
).resolve()

# Rule files shipped with the package
RULES_DIR = Path(
    os.getenv("BUDGET_INSIGHTS_RULES_DIR", Path(__file__).parent / "rules")
).resolve()

# Logging
LOG_LEVEL = os.getenv("BUDGET_INSIGHTS_LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("BUDGET_INSIGHTS_LOG_JSON", "0").lower() in {"1", "true", "yes"}

DEFAULT_CURRENCY = os.getenv("BUDGET_INSIGHTS_CURRENCY", "USD")


@lru_cache(maxsize=None)
def load_rules(name: str = "budget_rules") -> Dict[str, Any]:
    """Load a rule file by name.

    Args:
        name: Name of the rule file (without .json extension)

    Returns:
        Dictionary containing the rules

    Raises:
        FileNotFoundError: If the rule file doesn't exist
        json.JSONDecodeError: If the rule file is invalid JSON

    Example:
        >>> load_rules()['split']['needs']
        0.5
    """
    rules_path = RULES_DIR / f"{name}.json"

    if not rules_path.exists():
        raise FileNotFoundError(f"Rule file not found: {rules_path}")

    with open(rules_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_rule(*keys: str, default: Any = None, name: str = "budget_rules") -> Any:
    """Get a nested rule value by key path.

    Args:
        *keys: Path to the nested value (e.g., 'split', 'needs')
        default: Default value if key path doesn't exist
        name: Rule file to read

    Returns:
        The value at the specified path, or default if not found

    Example:
        >>> get_rule('variance', 'monthly_absolute_threshold')
        100
    """
    try:
        value: Any = load_rules(name)
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError, FileNotFoundError):
        return default
