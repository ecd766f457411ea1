"""
Rule contract.

Every rule declares which models, fields and validation modes it applies to
and implements ``validate_model`` and/or ``validate_field``. Either method may
return a list of diagnostics or an awaitable of one; ``Rule.validate`` awaits
them in order so diagnostics keep rule-declaration order.

A rule that targets something without overriding the matching method is a
bug in the rule and raises ``RuleNotImplementedError``.
"""

from __future__ import annotations

import inspect
from collections.abc import Collection
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Awaitable, Mapping, Optional, Union

import jinja2
from pydantic import BaseModel, Field

from ..core.model import Model
from ..core.model_node import ModelNode
from ..core.undefined import UNDEFINED
from ..exceptions import RuleNotImplementedError
from ..models.errors import (
    ValidationError,
    ValidationErrorCategory,
    ValidationErrorSeverity,
    ValidationErrorType,
)
from ..options import ValidationMode, ValidatorOptions

ALL = "*"

TargetModels = Union[str, Collection[str]]
TargetFields = Union[str, Mapping[str, Union[str, Collection[str]]]]
TargetModes = Union[str, Collection[ValidationMode]]
RuleOutcome = Union[list[ValidationError], Awaitable[list[ValidationError]]]

_templates = jinja2.Environment(autoescape=False, keep_trailing_newline=True)


@lru_cache(maxsize=512)
def _compile(message: str) -> jinja2.Template:
    return _templates.from_string(message)


def render_message(message: str, substitutions: Optional[Mapping[str, Any]] = None) -> str:
    """Fill ``{{name}}`` placeholders; missing names render empty."""
    return _compile(message).render(**dict(substitutions or {}))


class RuleTest(BaseModel):
    """One diagnostic a rule can emit."""

    description: Optional[str] = Field(default=None, description="What the test checks.")
    message: str = Field(description="Message template with ``{{name}}`` placeholders.")
    category: ValidationErrorCategory
    severity: ValidationErrorSeverity
    type: ValidationErrorType
    sample_values: dict[str, Any] = Field(
        default_factory=dict,
        description="Example substitutions used when documenting the rule.",
    )


class RuleMeta(BaseModel):
    name: str
    description: str = ""
    tests: dict[str, RuleTest] = Field(default_factory=dict)


def _matches(target: Union[str, Collection[str]], name: Optional[str]) -> bool:
    if target == ALL:
        return True
    if isinstance(target, str):
        return target == name
    return name in target


class Rule:
    target_models: TargetModels = ()
    target_fields: TargetFields = MappingProxyType({})
    target_validation_modes: TargetModes = ALL
    meta: RuleMeta = RuleMeta(name="Rule")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    # ------------------------------------------------------------------
    # Targeting
    # ------------------------------------------------------------------

    def is_model_targeted(self, model: Model) -> bool:
        return _matches(self.target_models, model.type)

    def is_field_targeted(self, model: Model, field: str) -> bool:
        if self.target_fields == ALL:
            return True
        if isinstance(self.target_fields, str) or model.type is None:
            return False
        targets = self.target_fields.get(model.type)
        if targets is None:
            return False
        return _matches(targets, field)

    def is_validation_mode_targeted(self, mode: ValidationMode) -> bool:
        if self.target_validation_modes == ALL:
            return True
        return mode in self.target_validation_modes

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def validate(self, node: ModelNode) -> list[ValidationError]:
        if not self.is_validation_mode_targeted(node.options.validation_mode):
            return []
        errors: list[ValidationError] = []
        if self.is_model_targeted(node.model):
            errors.extend(await _settle(self.validate_model(node)))
        if isinstance(node.value, dict):
            for field_name in list(node.value):
                if self.is_field_targeted(node.model, field_name):
                    errors.extend(await _settle(self.validate_field(node, field_name)))
        return errors

    def validate_model(self, node: ModelNode) -> RuleOutcome:
        raise RuleNotImplementedError(f"{type(self).__name__} targets models but does not implement validate_model")

    def validate_field(self, node: ModelNode, field: str) -> RuleOutcome:
        raise RuleNotImplementedError(f"{type(self).__name__} targets fields but does not implement validate_field")

    def create_error(
        self,
        test_key: str,
        extra: Optional[Mapping[str, Any]] = None,
        substitutions: Optional[Mapping[str, Any]] = None,
    ) -> ValidationError:
        test = self.meta.tests[test_key]
        payload = dict(extra or {})
        if payload.get("value") is UNDEFINED:
            payload["value"] = None
        return ValidationError(
            category=test.category,
            type=test.type,
            severity=test.severity,
            message=render_message(test.message, substitutions),
            **payload,
        )


async def _settle(outcome: RuleOutcome) -> list[ValidationError]:
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return list(outcome or [])


@dataclass
class RawRuleResult:
    """Diagnostics of a raw rule and, unless ``UNDEFINED``, the input to use from now on."""

    errors: list[ValidationError] = field(default_factory=list)
    data: Any = UNDEFINED


class RawRule(Rule):
    """Rule applied once to the whole input before any node is built."""

    def is_model_targeted(self, model: Model) -> bool:
        return False

    def is_field_targeted(self, model: Model, field: str) -> bool:
        return False

    async def validate_raw(self, data: Any, options: ValidatorOptions) -> RawRuleResult:
        raise RuleNotImplementedError(f"{type(self).__name__} does not implement validate_raw")
