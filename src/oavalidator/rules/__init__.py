"""
Rule registry.

Raw rules see the whole input once; core rules run on every document node in
the order listed here, which is also the order of their diagnostics.
"""

from __future__ import annotations

from .core import (
    BetaFieldsRule,
    FieldsCorrectTypeRule,
    FieldsNotInModelRule,
    RecommendedFieldsRule,
    RequiredFieldsRule,
    RequiredOptionalFieldsRule,
    ValidModelTypeRule,
)
from .raw import RpdeFeedRule, ValidInputRule, is_rpde_feed
from .rule import ALL, RawRule, RawRuleResult, Rule, RuleMeta, RuleTest, render_message

RAW_RULES: tuple[type[RawRule], ...] = (
    ValidInputRule,
    RpdeFeedRule,
)

CORE_RULES: tuple[type[Rule], ...] = (
    RequiredFieldsRule,
    RequiredOptionalFieldsRule,
    FieldsNotInModelRule,
    FieldsCorrectTypeRule,
    RecommendedFieldsRule,
    ValidModelTypeRule,
    BetaFieldsRule,
)


def default_raw_rules() -> list[RawRule]:
    return [rule() for rule in RAW_RULES]


def default_rules() -> list[Rule]:
    return [rule() for rule in CORE_RULES]


__all__ = [
    "ALL",
    "CORE_RULES",
    "RAW_RULES",
    "BetaFieldsRule",
    "FieldsCorrectTypeRule",
    "FieldsNotInModelRule",
    "RawRule",
    "RawRuleResult",
    "RecommendedFieldsRule",
    "RequiredFieldsRule",
    "RequiredOptionalFieldsRule",
    "RpdeFeedRule",
    "Rule",
    "RuleMeta",
    "RuleTest",
    "ValidInputRule",
    "ValidModelTypeRule",
    "default_raw_rules",
    "default_rules",
    "is_rpde_feed",
    "render_message",
]
