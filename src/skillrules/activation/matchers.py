"""Stateless trigger predicates: keywords, intent patterns, file globs."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import lru_cache

INTENT_REGEX = "regex"
INTENT_SUBSTRING = "substring"


@lru_cache(maxsize=512)
def _keyword_regex(keyword: str) -> re.Pattern[str]:
    # Lookarounds instead of \b so keywords ending in punctuation ("c++") still work.
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


def match_keywords(text: str, keywords: Sequence[str] | None) -> bool:
    """True if any keyword occurs in text as a whole word, ignoring case."""
    if not keywords or not text:
        return False
    for keyword in keywords:
        keyword = keyword.strip()
        if keyword and _keyword_regex(keyword).search(text):
            return True
    return False


def _contains(text: str, pattern: str) -> bool:
    return pattern.lower() in text.lower()


def match_intent(
    text: str,
    patterns: Sequence[str] | None,
    *,
    mode: str = INTENT_REGEX,
) -> bool:
    """True if any intent pattern is found anywhere in text, ignoring case.

    In regex mode each pattern is searched as a regular expression; a pattern
    that does not compile is treated as a literal. In substring mode every
    pattern is a literal.
    """
    if not patterns or not text:
        return False
    for pattern in patterns:
        if not pattern:
            continue
        if mode == INTENT_SUBSTRING:
            if _contains(text, pattern):
                return True
            continue
        try:
            if re.search(pattern, text, re.IGNORECASE):
                return True
        except re.error:
            if _contains(text, pattern):
                return True
    return False


@lru_cache(maxsize=512)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a glob into an anchored regex.

    ``**`` matches any sequence, ``*`` any run without ``/``, ``?`` one character.
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "*":
            if pattern[i + 1 : i + 2] == "*":
                parts.append(".*")
                i += 2
                continue
            parts.append("[^/]*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
        i += 1
    return re.compile("^" + "".join(parts) + "$")


def _normalize(path: str) -> str:
    return path.replace("\\", "/")


def match_file(path: str, patterns: Sequence[str] | None) -> bool:
    if not patterns or not path:
        return False
    normalized = _normalize(path)
    return any(glob_to_regex(p).match(normalized) for p in patterns if p)


def matching_files(paths: Iterable[str], patterns: Sequence[str] | None) -> list[str]:
    """Return the paths matching any pattern, preserving input order."""
    if not patterns:
        return []
    return [p for p in paths if match_file(p, patterns)]
