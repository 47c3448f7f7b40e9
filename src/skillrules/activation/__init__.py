"""Skill activation engine: rule loading, matching, scoring and resolution."""

from skillrules.activation.config import ActivationConfig, load_activation_config
from skillrules.activation.formatter import HookOutput, OutputKind, decision_to_dict, render
from skillrules.activation.matchers import match_file, match_intent, match_keywords
from skillrules.activation.models import (
    Decision,
    Enforcement,
    HookInput,
    MatchResult,
    Priority,
    Rule,
    RuleLoadError,
    RuleSet,
    Triggers,
)
from skillrules.activation.resolver import resolve
from skillrules.activation.scorer import score_rule
from skillrules.activation.store import RuleStore, load_rule_file, load_rules, parse_rules

__all__ = [
    "ActivationConfig",
    "Decision",
    "Enforcement",
    "HookInput",
    "HookOutput",
    "MatchResult",
    "OutputKind",
    "Priority",
    "Rule",
    "RuleLoadError",
    "RuleSet",
    "RuleStore",
    "Triggers",
    "decision_to_dict",
    "load_activation_config",
    "load_rule_file",
    "load_rules",
    "match_file",
    "match_intent",
    "match_keywords",
    "parse_rules",
    "render",
    "resolve",
    "score_rule",
]
