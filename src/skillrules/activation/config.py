"""ActivationConfig dataclass and loader for skill activation settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".skillrules.json"
DEFAULT_RULES_FILENAME = "skill-rules.json"
DEFAULT_MAX_SUGGESTIONS = 3

INTENT_MODES = ("regex", "substring")
# "rule": a full exclusion annuls the whole score; "file": only the file contribution.
EXCLUSION_SCOPES = ("rule", "file")


@dataclass
class ActivationConfig:
    enabled: bool = True
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    intent_mode: str = "regex"
    exclusion_scope: str = "rule"
    rules_filename: str = DEFAULT_RULES_FILENAME


def load_activation_config(path: Path | None = None) -> ActivationConfig:
    """Load activation config from .skillrules.json, then apply env overrides."""
    config = ActivationConfig()
    if path and path.exists():
        try:
            text = path.read_text()
            if text.strip():
                data = json.loads(text)
                section = data.get("activation", {}) if isinstance(data, dict) else {}
                if isinstance(section, dict):
                    _apply(config, section)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load activation config from {path}: {e}")

    if env_enabled := os.environ.get("SKILLRULES_ENABLED"):
        config.enabled = env_enabled.lower() in ("true", "1", "yes")
    if env_max := os.environ.get("SKILLRULES_MAX_SUGGESTIONS"):
        config.max_suggestions = _safe_int(env_max, config.max_suggestions)
    if env_mode := os.environ.get("SKILLRULES_INTENT_MODE"):
        if env_mode.lower() in INTENT_MODES:
            config.intent_mode = env_mode.lower()
    if env_scope := os.environ.get("SKILLRULES_EXCLUSION_SCOPE"):
        if env_scope.lower() in EXCLUSION_SCOPES:
            config.exclusion_scope = env_scope.lower()
    return config


def _safe_int(value: str, default: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _apply(cfg: ActivationConfig, data: dict[str, object]) -> None:
    if "enabled" in data and isinstance(data["enabled"], bool):
        cfg.enabled = data["enabled"]
    max_suggestions = data.get("max_suggestions")
    if isinstance(max_suggestions, int) and not isinstance(max_suggestions, bool):
        if max_suggestions >= 0:
            cfg.max_suggestions = max_suggestions
    if data.get("intent_mode") in INTENT_MODES:
        cfg.intent_mode = str(data["intent_mode"])
    if data.get("exclusion_scope") in EXCLUSION_SCOPES:
        cfg.exclusion_scope = str(data["exclusion_scope"])
    if "rules_filename" in data and isinstance(data["rules_filename"], str):
        if data["rules_filename"].strip():
            cfg.rules_filename = data["rules_filename"].strip()
