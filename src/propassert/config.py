from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from propassert.formatting import sanitize_reason


class ReasonSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")
    because: str = ""
    args: list[Any] = []

    @model_validator(mode="after")
    def reason_must_format(self) -> ReasonSpec:
        sanitize_reason(self.because, *self.args)
        return self


class MarkerSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")
    marker: str
    because: str = ""
    args: list[Any] = []

    @model_validator(mode="after")
    def reason_must_format(self) -> MarkerSpec:
        sanitize_reason(self.because, *self.args)
        return self


def _normalize_reason(v: Any) -> Any:
    if v is None:
        return ReasonSpec()
    if isinstance(v, str):
        return ReasonSpec(because=v)
    return v


def _normalize_marker(v: Any) -> Any:
    if isinstance(v, str):
        return MarkerSpec(marker=v)
    return v


class BeVirtualAssertion(BaseModel):
    model_config = ConfigDict(extra="forbid")
    be_virtual: ReasonSpec | None

    @field_validator("be_virtual", mode="before")
    @classmethod
    def normalize(cls, v: Any) -> Any:
        return _normalize_reason(v)


class NotBeVirtualAssertion(BaseModel):
    model_config = ConfigDict(extra="forbid")
    not_be_virtual: ReasonSpec | None

    @field_validator("not_be_virtual", mode="before")
    @classmethod
    def normalize(cls, v: Any) -> Any:
        return _normalize_reason(v)


class BeDecoratedWithAssertion(BaseModel):
    model_config = ConfigDict(extra="forbid")
    be_decorated_with: MarkerSpec

    @field_validator("be_decorated_with", mode="before")
    @classmethod
    def normalize(cls, v: Any) -> Any:
        return _normalize_marker(v)


class NotBeDecoratedWithAssertion(BaseModel):
    model_config = ConfigDict(extra="forbid")
    not_be_decorated_with: MarkerSpec

    @field_validator("not_be_decorated_with", mode="before")
    @classmethod
    def normalize(cls, v: Any) -> Any:
        return _normalize_marker(v)


Assertion = (
    BeVirtualAssertion
    | NotBeVirtualAssertion
    | BeDecoratedWithAssertion
    | NotBeDecoratedWithAssertion
)


class SelectConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    public_only: bool = False
    decorated_with: str | None = None
    not_decorated_with: str | None = None


class CheckConfig(BaseModel):
    name: str
    target: str
    select: SelectConfig = SelectConfig()
    assertions: list[Assertion]

    @field_validator("target")
    @classmethod
    def target_must_be_module_colon_name(cls, v: str) -> str:
        module, sep, attr = v.partition(":")
        if not sep or not module or not attr or ":" in attr:
            raise ValueError(f"target '{v}' must look like 'package.module:ClassName'")
        return v

    @field_validator("assertions")
    @classmethod
    def assertions_must_not_be_empty(cls, v: list[Assertion]) -> list[Assertion]:
        if not v:
            raise ValueError("assertions must not be empty")
        return v


class RulesConfig(BaseModel):
    checks: list[CheckConfig]

    @model_validator(mode="after")
    def checks_must_be_unique_and_present(self) -> RulesConfig:
        if not self.checks:
            raise ValueError("checks must not be empty")
        names = [check.name for check in self.checks]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate check names: {', '.join(duplicates)}")
        return self


def import_object(ref: str) -> Any:
    """Resolve a ``module:attr.path`` reference to the object it names."""
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid reference '{ref}', expected 'module:name'")

    try:
        obj = importlib.import_module(module_name)
    except Exception as e:
        raise ValueError(f"Cannot import module '{module_name}' for '{ref}': {e}") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ValueError(f"'{ref}' not found: no attribute '{part}'") from e
    return obj


def load_config(path: Path) -> RulesConfig:
    """Load and validate a rules file from YAML."""
    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping with a 'checks' key")

    return RulesConfig(**raw)
