"""Pydantic models and enums for skill activation."""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Enforcement(StrEnum):
    BLOCK = "block"
    WARN = "warn"
    SUGGEST = "suggest"


class Priority(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Triggers(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    keywords: list[str] = Field(default_factory=list)
    intent_patterns: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("intentPatterns", "intent_patterns"),
    )
    file_patterns: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("filePatterns", "file_patterns", "pathPatterns"),
    )
    exclude_patterns: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("excludePatterns", "exclude_patterns", "pathExclusions"),
    )

    @property
    def is_empty(self) -> bool:
        return not (self.keywords or self.intent_patterns or self.file_patterns)


class Rule(BaseModel):
    """One skill's activation policy."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    description: str = ""
    enforcement: Enforcement = Field(
        default=Enforcement.SUGGEST,
        validation_alias=AliasChoices("enforcement", "mode"),
    )
    priority: Priority = Priority.LOW
    type: str | None = None  # "guardrail" | "domain", informational only
    triggers: Triggers = Field(default_factory=Triggers)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("rule name must not be empty")
        return value

    @field_validator("triggers", mode="before")
    @classmethod
    def _null_triggers(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def is_blocking(self) -> bool:
        return self.enforcement == Enforcement.BLOCK


class RuleLoadError(BaseModel):
    rule_name: str
    message: str


class RuleSet(BaseModel):
    version: str = ""
    rules: list[Rule] = Field(default_factory=list)
    source: str | None = None
    errors: list[RuleLoadError] = Field(default_factory=list)

    def get(self, name: str) -> Rule | None:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    @property
    def dormant(self) -> list[Rule]:
        return [r for r in self.rules if r.triggers.is_empty]


class MatchResult(BaseModel):
    rule: Rule
    score: int = Field(default=0, ge=0)
    reasons: list[str] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.rule.name


class Decision(BaseModel):
    blocking: list[MatchResult] = Field(default_factory=list)
    suggested: list[MatchResult] = Field(default_factory=list)
    # Full sorted suggestion list; `suggested` is its display-capped prefix.
    all_suggested: list[MatchResult] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.blocking or self.suggested or self.all_suggested)


class HookInput(BaseModel):
    """UserPromptSubmit payload as delivered on stdin."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    prompt: str = ""
    context_files: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("contextFiles", "context_files", "files"),
    )
    session_id: str | None = None
    cwd: str | None = None
    transcript_path: str | None = None
    permission_mode: str | None = None

    @field_validator("prompt", mode="before")
    @classmethod
    def _null_prompt(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("context_files", mode="before")
    @classmethod
    def _null_files(cls, value: object) -> list[str]:
        # Context files are optional; bad entries must not discard the prompt.
        if not isinstance(value, (list, tuple)):
            return []
        return [f for f in value if isinstance(f, str)]
