"""CLI entry point for skillrules."""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path
from typing import cast

from skillrules import __version__
from skillrules.activation.config import ActivationConfig, load_activation_config
from skillrules.activation.formatter import decision_to_dict
from skillrules.activation.models import MatchResult, RuleSet
from skillrules.activation.resolver import resolve
from skillrules.activation.store import RuleStore, load_rule_file, load_rules
from skillrules.hooks._common import get_config_path, get_project_root, get_rules_paths

SKILL_FILE = "SKILL.md"


def _load_config() -> tuple[Path | None, ActivationConfig]:
    root = get_project_root()
    return root, load_activation_config(get_config_path(root))


def _load_ruleset(rules_arg: str | None, root: Path | None, config: ActivationConfig) -> RuleSet:
    if rules_arg:
        path = Path(rules_arg)
        ruleset = load_rule_file(path)
        if ruleset is None:
            print(f"Error: cannot load skill rules from {path}", file=sys.stderr)
            sys.exit(1)
        return ruleset
    primary, fallback = get_rules_paths(root, config.rules_filename)
    return load_rules(primary, fallback)


def _print_match(match: MatchResult) -> None:
    print(f"  → {match.name} [{match.rule.priority}] score={match.score}")
    print(f"      {', '.join(match.reasons)}")


def _cmd_check(args: argparse.Namespace) -> None:
    prompt = cast(str, args.prompt)
    files = cast(list[str], args.files or [])
    root, config = _load_config()
    ruleset = _load_ruleset(cast(str | None, args.rules), root, config)
    decision = resolve(ruleset, prompt, files, config=config)

    if args.json:
        print(json.dumps(decision_to_dict(decision, include_all=bool(args.all)), indent=2))
        return

    print(f"Rules file: {ruleset.source or '(none found)'}")
    print(f"Skills:     {len(ruleset.rules)}")
    if decision.is_empty:
        print("\nNo skills matched.")
        return

    if decision.blocking:
        print("\nRequired (block):")
        for match in decision.blocking:
            _print_match(match)

    shown = decision.all_suggested if args.all else decision.suggested
    if shown:
        print("\nSuggested:")
        for match in shown:
            _print_match(match)
    hidden = len(decision.all_suggested) - len(shown)
    if hidden > 0:
        print(f"  ... {hidden} more (use --all)")


def _cmd_validate(args: argparse.Namespace) -> None:
    rules_arg = cast(str | None, args.rules)
    root, config = _load_config()
    if rules_arg:
        candidates = [Path(rules_arg)]
    else:
        candidates = RuleStore(*get_rules_paths(root, config.rules_filename)).candidates

    ruleset: RuleSet | None = None
    for path in candidates:
        if ruleset is not None:
            print(f"  - {path} (shadowed)")
            continue
        ruleset = load_rule_file(path)
        if ruleset is not None:
            print(f"  ✓ {path}")
        elif path.exists():
            print(f"  ✗ {path} (unreadable or invalid)")
        else:
            print(f"  - {path} (not found)")

    if ruleset is None:
        print("Error: no usable skill rules file found", file=sys.stderr)
        sys.exit(1)

    print(f"\nVersion: {ruleset.version or '(unset)'}")
    print(f"Skills:  {len(ruleset.rules)} loaded, {len(ruleset.errors)} invalid")

    skills_dir = Path(ruleset.source).parent if ruleset.source else None
    for rule in ruleset.rules:
        notes: list[str] = []
        if rule.triggers.is_empty:
            notes.append("no triggers, never activates")
        if skills_dir is not None and not (skills_dir / rule.name / SKILL_FILE).exists():
            notes.append(f"no {rule.name}/{SKILL_FILE} next to rules file")
        suffix = f"  ({'; '.join(notes)})" if notes else ""
        print(f"  {rule.name} [{rule.enforcement}, {rule.priority}]{suffix}")

    if ruleset.errors:
        print("\nInvalid rules:")
        for err in ruleset.errors:
            print(f"  ✗ {err.rule_name}: {err.message}")
        sys.exit(1)


def _cmd_hook(args: argparse.Namespace) -> None:
    mod = importlib.import_module(f"skillrules.hooks.{args.module}")
    mod.main()


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="skillrules",
        description="Rule-based skill activation for Claude Code prompts",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"skillrules {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command")

    # check subcommand
    check_p = subparsers.add_parser("check", help="Dry-run a prompt against the skill rules")
    _ = check_p.add_argument("prompt", help="Prompt text to evaluate")
    _ = check_p.add_argument(
        "-f",
        "--file",
        action="append",
        dest="files",
        metavar="PATH",
        help="Context file path (repeatable)",
    )
    _ = check_p.add_argument("--rules", default=None, help="Use this rules file instead")
    _ = check_p.add_argument("--json", action="store_true", help="Print the decision as JSON")
    _ = check_p.add_argument(
        "--all", action="store_true", help="Show every suggestion, not just the top ones"
    )

    # validate subcommand
    validate_p = subparsers.add_parser("validate", help="Check the skill rules file")
    _ = validate_p.add_argument("--rules", default=None, help="Validate this rules file instead")

    # hook subcommand
    hook_parser = subparsers.add_parser("hook", help="Run a hook module")
    _ = hook_parser.add_argument("module", help="Hook module name (e.g. skill_activation)")

    args = parser.parse_args()
    dispatch = {
        "check": _cmd_check,
        "validate": _cmd_validate,
        "hook": _cmd_hook,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler:
        handler(args)
    else:
        parser.print_help()
        sys.exit(1)
