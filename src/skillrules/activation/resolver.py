"""Resolve a rule collection against one prompt into a Decision."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from skillrules.activation.config import ActivationConfig
from skillrules.activation.models import Decision, HookInput, MatchResult, Rule, RuleSet
from skillrules.activation.scorer import score_rule

logger = logging.getLogger(__name__)


def resolve(
    rules: RuleSet | Sequence[Rule],
    request: HookInput | str,
    context_files: Sequence[str] | None = None,
    *,
    config: ActivationConfig | None = None,
) -> Decision:
    """Score every rule and partition the matches into blocking and suggested.

    Blocking matches keep declaration order and are never truncated.
    Suggestions are stable-sorted by descending score; ``suggested`` holds the
    first ``config.max_suggestions`` of them and ``all_suggested`` the rest too.
    """
    cfg = config or ActivationConfig()
    if isinstance(request, HookInput):
        prompt = request.prompt
        files = list(context_files) if context_files is not None else request.context_files
    else:
        prompt = request
        files = list(context_files or [])

    if not prompt or not prompt.strip():
        return Decision()

    rule_list = rules.rules if isinstance(rules, RuleSet) else list(rules)

    blocking: list[MatchResult] = []
    suggested: list[MatchResult] = []
    for rule in rule_list:
        try:
            result = score_rule(
                rule,
                prompt,
                files,
                intent_mode=cfg.intent_mode,
                exclusion_scope=cfg.exclusion_scope,
            )
        except Exception:
            logger.exception("Scoring failed for rule %r; treating as no match", rule.name)
            continue
        if result.score == 0:
            continue
        if rule.is_blocking:
            blocking.append(result)
        else:
            suggested.append(result)

    # list.sort is stable, so equal scores keep declaration order
    suggested.sort(key=lambda r: r.score, reverse=True)
    return Decision(
        blocking=blocking,
        suggested=suggested[: cfg.max_suggestions],
        all_suggested=suggested,
    )
