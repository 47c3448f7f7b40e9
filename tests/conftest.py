"""Shared fixtures for skillrules tests."""

import json
import logging
from pathlib import Path

import pytest


def _sample_rules() -> dict:
    """A small rules document in the name -> rule schema."""
    return {
        "version": "1.0",
        "skills": {
            "frontend-dev-guidelines": {
                "description": "React/MUI component conventions",
                "enforcement": "suggest",
                "priority": "high",
                "triggers": {
                    "keywords": ["react", "mui", "component"],
                    "intentPatterns": ["(create|add).*component"],
                    "filePatterns": ["src/**/*.tsx"],
                },
            },
            "database-safety": {
                "description": "Guardrails for destructive database work",
                "enforcement": "block",
                "priority": "critical",
                "triggers": {
                    "intentPatterns": ["delete.*production"],
                },
            },
            "sql-style": {
                "description": "SQL formatting rules",
                "mode": "warn",
                "priority": "medium",
                "triggers": {
                    "keywords": ["sql"],
                    "filePatterns": ["*.sql"],
                    "excludePatterns": ["*_test.sql"],
                },
            },
        },
    }


def _write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def sample_rules() -> dict:
    return _sample_rules()


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    """Sample rules written to tmp_path/rules/skill-rules.json."""
    return _write_json(tmp_path / "rules" / "skill-rules.json", _sample_rules())


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project dir with sample rules, isolated HOME, and CLAUDE_PROJECT_DIR set."""
    project_dir = tmp_path / "project"
    home = tmp_path / "home"
    home.mkdir()
    _write_json(project_dir / ".claude" / "skills" / "skill-rules.json", _sample_rules())
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("CLAUDE_PROJECT_DIR", str(project_dir))
    for var in (
        "SKILLRULES_PROJECT_ROOT",
        "SKILLRULES_ENABLED",
        "SKILLRULES_MAX_SUGGESTIONS",
        "SKILLRULES_INTENT_MODE",
        "SKILLRULES_EXCLUSION_SCOPE",
        "SKILLRULES_DEBUG_LOG",
    ):
        monkeypatch.delenv(var, raising=False)
    return project_dir


@pytest.fixture(autouse=True)
def _reset_hook_logging():
    """Detach the handler the hook installs so it never outlives a test's captured streams."""
    yield
    from skillrules.hooks import skill_activation

    handler = skill_activation._handler
    if handler is not None:
        logging.getLogger("skillrules").removeHandler(handler)
        handler.close()
        skill_activation._handler = None
