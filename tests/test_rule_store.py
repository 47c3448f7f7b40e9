"""Tests for activation/store.py — parsing, primary/fallback loading, caching."""

from __future__ import annotations

import json
import os
from pathlib import Path

from skillrules.activation.models import Enforcement, Priority
from skillrules.activation.store import RuleStore, load_rule_file, load_rules, parse_rules


def _write(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


class TestParseRules:
    def test_mapping_schema(self, sample_rules):
        rs = parse_rules(sample_rules, source="x.json")
        assert rs.version == "1.0"
        assert rs.source == "x.json"
        assert [r.name for r in rs.rules] == [
            "frontend-dev-guidelines",
            "database-safety",
            "sql-style",
        ]
        assert rs.errors == []

    def test_fields_preserved(self, sample_rules):
        rs = parse_rules(sample_rules)
        rule = rs.get("database-safety")
        assert rule is not None
        assert rule.enforcement == Enforcement.BLOCK
        assert rule.priority == Priority.CRITICAL
        assert rule.description.startswith("Guardrails")

    def test_mode_key_accepted(self, sample_rules):
        rule = parse_rules(sample_rules).get("sql-style")
        assert rule is not None
        assert rule.enforcement == Enforcement.WARN

    def test_mapping_key_is_the_name(self):
        rs = parse_rules({"skills": {"api-guide": {"name": "other", "triggers": {}}}})
        assert rs.rules[0].name == "api-guide"

    def test_list_schema(self):
        data = {
            "skills": [
                {"name": "a", "mode": "block", "triggers": {"keywords": ["x"]}},
                {"name": "b", "triggers": {"intentPatterns": ["y"]}},
            ]
        }
        rs = parse_rules(data)
        assert [r.name for r in rs.rules] == ["a", "b"]
        assert rs.rules[0].is_blocking

    def test_list_entry_without_name_is_error(self):
        rs = parse_rules({"skills": [{"triggers": {"keywords": ["x"]}}, {"name": "ok"}]})
        assert [r.name for r in rs.rules] == ["ok"]
        assert rs.errors[0].rule_name == "<skills[0]>"

    def test_prompt_and_file_triggers_merged(self):
        data = {
            "skills": {
                "backend": {
                    "promptTriggers": {"keywords": ["api"], "intentPatterns": ["route"]},
                    "fileTriggers": {
                        "pathPatterns": ["src/**/*.py"],
                        "pathExclusions": ["src/**/test_*.py"],
                    },
                }
            }
        }
        triggers = parse_rules(data).rules[0].triggers
        assert triggers.keywords == ["api"]
        assert triggers.intent_patterns == ["route"]
        assert triggers.file_patterns == ["src/**/*.py"]
        assert triggers.exclude_patterns == ["src/**/test_*.py"]

    def test_missing_triggers_is_dormant_not_error(self):
        rs = parse_rules({"skills": {"quiet": {"description": "no triggers"}}})
        assert rs.errors == []
        assert [r.name for r in rs.dormant] == ["quiet"]

    def test_malformed_rule_skipped_others_kept(self):
        data = {
            "skills": {
                "bad-mode": {"enforcement": "shout", "triggers": {"keywords": ["a"]}},
                "bad-triggers": {"triggers": {"keywords": "a"}},
                "not-object": "oops",
                "good": {"triggers": {"keywords": ["a"]}},
            }
        }
        rs = parse_rules(data)
        assert [r.name for r in rs.rules] == ["good"]
        assert {e.rule_name for e in rs.errors} == {"bad-mode", "bad-triggers", "not-object"}

    def test_non_object_prompt_triggers_is_error(self):
        rs = parse_rules({"skills": {"x": {"promptTriggers": ["react"]}}})
        assert rs.rules == []
        assert rs.errors[0].rule_name == "x"

    def test_duplicate_names_in_list_keep_first(self):
        rs = parse_rules({"skills": [{"name": "a", "description": "1"}, {"name": "a"}]})
        assert len(rs.rules) == 1
        assert rs.rules[0].description == "1"
        assert rs.errors[0].message == "duplicate rule name"

    def test_skills_missing_or_wrong_type(self):
        assert parse_rules({}).rules == []
        assert parse_rules({"skills": "nope"}).rules == []


class TestLoadRuleFile:
    def test_valid_file(self, rules_file):
        rs = load_rule_file(rules_file)
        assert rs is not None
        assert rs.source == str(rules_file)
        assert len(rs.rules) == 3

    def test_missing_file(self, tmp_path):
        assert load_rule_file(tmp_path / "none.json") is None

    def test_invalid_json(self, tmp_path):
        assert load_rule_file(_write(tmp_path / "bad.json", "{not json")) is None

    def test_not_an_object(self, tmp_path):
        assert load_rule_file(_write(tmp_path / "list.json", [1, 2])) is None

    def test_no_skills_entry(self, tmp_path):
        assert load_rule_file(_write(tmp_path / "v.json", {"version": "1"})) is None

    def test_directory_is_not_a_file(self, tmp_path):
        assert load_rule_file(tmp_path) is None

    def test_skills_of_wrong_type(self, tmp_path):
        assert load_rule_file(_write(tmp_path / "s.json", {"skills": "oops"})) is None
        assert load_rule_file(_write(tmp_path / "n.json", {"skills": None})) is None


class TestLoadRules:
    def test_primary_wins_without_merge(self, tmp_path):
        primary = _write(tmp_path / "p.json", {"skills": {"project-only": {}}})
        fallback = _write(tmp_path / "g.json", {"skills": {"global-only": {}}})
        rs = load_rules(primary, fallback)
        assert [r.name for r in rs.rules] == ["project-only"]

    def test_falls_back_when_primary_missing(self, tmp_path):
        fallback = _write(tmp_path / "g.json", {"skills": {"global-only": {}}})
        rs = load_rules(tmp_path / "missing.json", fallback)
        assert [r.name for r in rs.rules] == ["global-only"]
        assert rs.source == str(fallback)

    def test_falls_back_when_primary_corrupt(self, tmp_path):
        primary = _write(tmp_path / "p.json", "{{{")
        fallback = _write(tmp_path / "g.json", {"skills": {"global-only": {}}})
        assert [r.name for r in load_rules(primary, fallback).rules] == ["global-only"]

    def test_falls_back_when_primary_skills_wrong_type(self, tmp_path):
        primary = _write(tmp_path / "p.json", {"skills": "oops"})
        fallback = _write(tmp_path / "g.json", {"skills": {"global-only": {}}})
        rs = load_rules(primary, fallback)
        assert [r.name for r in rs.rules] == ["global-only"]
        assert rs.source == str(fallback)

    def test_both_corrupt_yields_empty(self, tmp_path):
        primary = _write(tmp_path / "p.json", "{{{")
        fallback = _write(tmp_path / "g.json", "")
        rs = load_rules(primary, fallback)
        assert rs.rules == []
        assert rs.source is None

    def test_none_paths(self):
        assert load_rules(None, None).rules == []


class TestRuleStore:
    def test_caches_until_file_changes(self, tmp_path):
        path = _write(tmp_path / "p.json", {"skills": {"a": {}}})
        store = RuleStore(path, None)
        first = store.load()
        assert store.load() is first

        _write(path, {"skills": {"a": {}, "b": {}}})
        st = path.stat()
        os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))
        second = store.load()
        assert second is not first
        assert [r.name for r in second.rules] == ["a", "b"]

    def test_creating_primary_invalidates(self, tmp_path):
        primary = tmp_path / "p.json"
        fallback = _write(tmp_path / "g.json", {"skills": {"global": {}}})
        store = RuleStore(primary, fallback)
        assert [r.name for r in store.load().rules] == ["global"]

        _write(primary, {"skills": {"project": {}}})
        assert [r.name for r in store.load().rules] == ["project"]

    def test_refresh_forces_reload(self, tmp_path):
        path = _write(tmp_path / "p.json", {"skills": {"a": {}}})
        store = RuleStore(path, None)
        first = store.load()
        assert store.refresh() is not first

    def test_candidates(self, tmp_path):
        store = RuleStore(None, tmp_path / "g.json")
        assert store.candidates == [tmp_path / "g.json"]
