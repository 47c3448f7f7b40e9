"""Score a single rule against a prompt and its file context."""

from __future__ import annotations

from collections.abc import Sequence

from skillrules.activation.matchers import (
    INTENT_REGEX,
    match_file,
    match_intent,
    match_keywords,
    matching_files,
)
from skillrules.activation.models import MatchResult, Rule

KEYWORD_WEIGHT = 2
INTENT_WEIGHT = 3
FILE_WEIGHT = 2

REASON_KEYWORD = "keyword match"
REASON_INTENT = "intent match"
REASON_EXCLUDED = "excluded by pattern"


def _file_reason(count: int) -> str:
    return f"file context ({count} files)"


def score_rule(
    rule: Rule,
    prompt: str,
    context_files: Sequence[str] = (),
    *,
    intent_mode: str = INTENT_REGEX,
    exclusion_scope: str = "rule",
) -> MatchResult:
    """Score one rule. Keyword, intent and file contributions are additive.

    When every context file that matched ``file_patterns`` is also covered by
    ``exclude_patterns`` the rule is excluded: with ``exclusion_scope="rule"``
    the whole score drops to 0, with ``"file"`` only the file contribution is
    withheld.
    """
    triggers = rule.triggers
    score = 0
    reasons: list[str] = []

    if match_keywords(prompt, triggers.keywords):
        score += KEYWORD_WEIGHT
        reasons.append(REASON_KEYWORD)

    if match_intent(prompt, triggers.intent_patterns, mode=intent_mode):
        score += INTENT_WEIGHT
        reasons.append(REASON_INTENT)

    if triggers.file_patterns and context_files:
        matched = matching_files(context_files, triggers.file_patterns)
        if matched:
            excluded = bool(triggers.exclude_patterns) and all(
                match_file(f, triggers.exclude_patterns) for f in matched
            )
            if not excluded:
                score += FILE_WEIGHT
                reasons.append(_file_reason(len(matched)))
            elif exclusion_scope == "rule":
                return MatchResult(rule=rule, score=0, reasons=[REASON_EXCLUDED])

    return MatchResult(rule=rule, score=score, reasons=reasons)
