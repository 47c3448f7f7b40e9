"""UserPromptSubmit hook: surface skills whose rules match the prompt.

Blocking skills are printed to stdout as a directive the assistant must act
on. Suggestions only go to stderr. NEVER fails the prompt: every path exits 0.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from skillrules.activation.config import load_activation_config
from skillrules.activation.formatter import HookOutput, render
from skillrules.activation.models import HookInput
from skillrules.activation.resolver import resolve
from skillrules.activation.store import RuleStore
from skillrules.hooks._common import (
    get_config_path,
    get_project_root,
    get_rules_paths,
    read_hook_input,
)

logger = logging.getLogger(__name__)

_handler: logging.Handler | None = None


def _configure_logging() -> None:
    """Route package logs to SKILLRULES_DEBUG_LOG (debug level) or stderr (warnings)."""
    global _handler
    pkg_logger = logging.getLogger("skillrules")
    if _handler is not None:
        pkg_logger.removeHandler(_handler)
        _handler.close()

    log_file = os.environ.get("SKILLRULES_DEBUG_LOG")
    log_error: OSError | None = None
    _handler = None
    if log_file:
        try:
            _handler = logging.FileHandler(log_file, encoding="utf-8")
            _handler.setLevel(logging.DEBUG)
            pkg_logger.setLevel(logging.DEBUG)
        except OSError as e:
            log_error = e
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setLevel(logging.WARNING)
        pkg_logger.setLevel(logging.WARNING)
    _handler.setFormatter(logging.Formatter("[skillrules] %(levelname)s %(name)s: %(message)s"))
    pkg_logger.addHandler(_handler)
    if log_error is not None:
        logger.warning(f"Cannot open debug log {log_file}, logging to stderr: {log_error}")


def evaluate(payload: dict[str, Any], *, project_root: Path | None = None) -> HookOutput:
    """Resolve one hook payload into output. Reads config and rules, prints nothing."""
    try:
        hook_input = HookInput.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed hook input: {e.error_count()} error(s)")
        return HookOutput()

    if not hook_input.prompt.strip():
        return HookOutput()

    root = project_root or get_project_root(hook_input.cwd)
    config = load_activation_config(get_config_path(root))
    if not config.enabled:
        return HookOutput()

    primary, fallback = get_rules_paths(root, config.rules_filename)
    rules = RuleStore(primary, fallback).load()
    decision = resolve(rules, hook_input, config=config)

    logger.debug(
        f"prompt={hook_input.prompt[:80]!r} rules={len(rules.rules)} "
        f"blocking={[m.name for m in decision.blocking]} "
        f"suggested={[(m.name, m.score) for m in decision.all_suggested]}"
    )
    return render(decision)


def main() -> None:
    """Entry point for UserPromptSubmit hook."""
    try:
        _configure_logging()
        output = evaluate(read_hook_input())
        if output.stdout:
            print(output.stdout)
        if output.stderr:
            print(output.stderr, file=sys.stderr)
    except Exception:
        logger.exception("Skill activation hook failed")
    sys.exit(0)


if __name__ == "__main__":
    main()
