"""Turn a Decision into hook output: a blocking directive or an advisory line."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel

from skillrules.activation.models import Decision, MatchResult


class OutputKind(StrEnum):
    BLOCK = "block"
    SUGGEST = "suggest"
    NONE = "none"


class HookOutput(BaseModel):
    kind: OutputKind = OutputKind.NONE
    stdout: str = ""  # shown to the assistant; only a directive goes here
    stderr: str = ""  # log-level advisory, never interrupts


def format_directive(blocking: list[MatchResult]) -> str:
    lines = ["⛔ **SKILL REQUIRED BEFORE PROCEEDING**", ""]
    for match in blocking:
        lines.append(f"**{match.name}**")
        if match.rule.description:
            lines.append(match.rule.description)
        lines.append(f"Reason: {', '.join(match.reasons)}")
        lines.append("")
        lines.append(f"Use: `/skill {match.name}` before making changes.")
        lines.append("")
    return "\n".join(lines).strip()


def format_advisory(suggested: list[MatchResult]) -> str:
    parts = [f"{m.name} ({', '.join(m.reasons)})" for m in suggested]
    return f"Suggested skills: {'; '.join(parts)}"


def render(decision: Decision) -> HookOutput:
    if decision.blocking:
        return HookOutput(
            kind=OutputKind.BLOCK,
            stdout=format_directive(decision.blocking),
            stderr=format_advisory(decision.suggested) if decision.suggested else "",
        )
    if decision.suggested:
        return HookOutput(kind=OutputKind.SUGGEST, stderr=format_advisory(decision.suggested))
    return HookOutput()


def _match_to_dict(match: MatchResult) -> dict[str, Any]:
    return {
        "name": match.name,
        "description": match.rule.description,
        "enforcement": str(match.rule.enforcement),
        "priority": str(match.rule.priority),
        "score": match.score,
        "reasons": list(match.reasons),
    }


def decision_to_dict(decision: Decision, *, include_all: bool = False) -> dict[str, Any]:
    """JSON-safe view of a Decision for CLI output."""
    suggested = decision.all_suggested if include_all else decision.suggested
    return {
        "blocking": [_match_to_dict(m) for m in decision.blocking],
        "suggested": [_match_to_dict(m) for m in suggested],
        "truncated": max(0, len(decision.all_suggested) - len(decision.suggested)),
    }
