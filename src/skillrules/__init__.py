"""skillrules: rule-based skill activation for Claude Code prompts."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("skillrules")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
