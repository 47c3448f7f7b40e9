"""Rule store: locate, parse and (optionally) cache skill-rules.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from skillrules.activation.models import Rule, RuleLoadError, RuleSet

logger = logging.getLogger(__name__)

# Legacy schema splits triggers into prompt and file halves.
_PROMPT_TRIGGERS_KEY = "promptTriggers"
_FILE_TRIGGERS_KEY = "fileTriggers"


def parse_rules(data: dict[str, Any], source: str | None = None) -> RuleSet:
    """Build a RuleSet from a decoded rules document.

    ``skills`` may be a mapping of name -> rule or a list of rules that carry
    their own ``name``. Malformed rules are recorded in ``errors`` and skipped.
    """
    version = str(data.get("version", ""))
    skills = data.get("skills")
    # (label for error reports, authoritative name or None, rule body)
    entries: list[tuple[str, str | None, object]] = []
    if isinstance(skills, dict):
        entries = [(str(name), str(name), body) for name, body in skills.items()]
    elif isinstance(skills, list):
        for i, body in enumerate(skills):
            name = body.get("name") if isinstance(body, dict) else None
            entries.append((str(name) if name else f"<skills[{i}]>", None, body))

    rules: list[Rule] = []
    errors: list[RuleLoadError] = []
    seen: set[str] = set()
    for label, name, body in entries:
        if not isinstance(body, dict):
            errors.append(RuleLoadError(rule_name=label, message="rule must be an object"))
            continue
        try:
            rule = Rule.model_validate(_normalize_entry(name, body))
        except ValidationError as e:
            errors.append(RuleLoadError(rule_name=label, message=_summarize(e)))
            continue
        if rule.name in seen:
            errors.append(RuleLoadError(rule_name=rule.name, message="duplicate rule name"))
            continue
        seen.add(rule.name)
        rules.append(rule)

    for err in errors:
        logger.warning(f"Skipping rule {err.rule_name!r}: {err.message}")
    return RuleSet(version=version, rules=rules, source=source, errors=errors)


def _normalize_entry(name: str | None, body: dict[str, Any]) -> dict[str, Any]:
    entry = dict(body)
    if name is not None:
        entry["name"] = name
    if "triggers" not in entry and (
        _PROMPT_TRIGGERS_KEY in entry or _FILE_TRIGGERS_KEY in entry
    ):
        merged: dict[str, Any] = {}
        for key in (_PROMPT_TRIGGERS_KEY, _FILE_TRIGGERS_KEY):
            part = entry.pop(key, None)
            if part is None:
                continue
            if not isinstance(part, dict):
                # Let validation report it against the triggers field.
                merged = part
                break
            merged.update(part)
        entry["triggers"] = merged
    return entry


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"]) or "rule"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


def load_rule_file(path: Path) -> RuleSet | None:
    """Parse one rules file. Returns None if it is missing or unusable."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to load skill rules from {path}: {e}")
        return None
    if not isinstance(data, dict) or not isinstance(data.get("skills"), (dict, list)):
        logger.warning(f"Ignoring skill rules at {path}: no 'skills' mapping or list")
        return None
    return parse_rules(data, source=str(path))


def load_rules(primary: Path | None, fallback: Path | None) -> RuleSet:
    """Load the first usable rules file. The primary file is never merged with the fallback."""
    for candidate in (primary, fallback):
        if candidate is None:
            continue
        ruleset = load_rule_file(candidate)
        if ruleset is not None:
            logger.debug(f"Loaded {len(ruleset.rules)} skill rules from {candidate}")
            return ruleset
    return RuleSet()


_Signature = tuple[str, int, int]


def _signature(path: Path | None) -> _Signature | None:
    if path is None:
        return None
    try:
        st = path.stat()
    except OSError:
        return None
    return (str(path), st.st_mtime_ns, st.st_size)


class RuleStore:
    """Primary/fallback rule loader with an mtime-keyed cache.

    The cache is reused only while both candidate files keep the same
    (path, mtime, size) signature, so any edit, creation or removal reloads.
    """

    def __init__(self, primary: Path | None, fallback: Path | None) -> None:
        self._primary = primary
        self._fallback = fallback
        self._cache_key: tuple[_Signature | None, _Signature | None] | None = None
        self._ruleset: RuleSet | None = None

    @property
    def candidates(self) -> list[Path]:
        return [p for p in (self._primary, self._fallback) if p is not None]

    def load(self) -> RuleSet:
        key = (_signature(self._primary), _signature(self._fallback))
        if self._ruleset is not None and key == self._cache_key:
            return self._ruleset
        self._ruleset = load_rules(self._primary, self._fallback)
        self._cache_key = key
        return self._ruleset

    def refresh(self) -> RuleSet:
        """Force reload."""
        self._ruleset = None
        return self.load()
