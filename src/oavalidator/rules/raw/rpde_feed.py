from __future__ import annotations

from typing import Any

from ...logging import logger
from ...models.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ...options import ValidatorOptions
from ..rule import RawRule, RawRuleResult, RuleMeta, RuleTest

RPDE_STATES = ("updated", "deleted")

_FEED_NOTE = (
    "Please note that validation on RPDE feeds within the model validator is limited to checking "
    "whether required fields are present, and that the data in each item is a valid data model."
)


def is_rpde_feed(data: Any) -> bool:
    """An untyped object whose ``items`` list holds at least one RPDE item."""
    if not isinstance(data, dict):
        return False
    if "type" in data or "@type" in data:
        return False
    items = data.get("items")
    if not isinstance(items, list):
        return False
    return any(isinstance(item, dict) and item.get("state") in RPDE_STATES for item in items)


class RpdeFeedRule(RawRule):
    meta = RuleMeta(
        name="RpdeFeedRule",
        description="Adds notices if the submission is detected to be an RPDE feed.",
        tests={
            "isRpdeFeed": RuleTest(
                description="Adds a notice if the submission is detected to be an RPDE feed.",
                message=f"The JSON you have submitted appears to be an RPDE feed. {_FEED_NOTE}",
                category=ValidationErrorCategory.INTERNAL,
                severity=ValidationErrorSeverity.NOTICE,
                type=ValidationErrorType.FOUND_RPDE_FEED,
            ),
            "isRpdeFeedWithLimit": RuleTest(
                description="Adds a notice if the submission is an RPDE feed and only some of its items are validated.",
                message=(
                    "The JSON you have submitted appears to be an RPDE feed. For performance reasons, "
                    "the validator has only checked the first {{limit}} items in this feed. " + _FEED_NOTE
                ),
                sample_values={"limit": 10},
                category=ValidationErrorCategory.INTERNAL,
                severity=ValidationErrorSeverity.NOTICE,
                type=ValidationErrorType.FOUND_RPDE_FEED,
            ),
        },
    )

    async def validate_raw(self, data: Any, options: ValidatorOptions) -> RawRuleResult:
        if not is_rpde_feed(data):
            return RawRuleResult()

        limit = options.rpde_item_limit
        items = data["items"]
        if not limit or len(items) <= limit:
            return RawRuleResult(errors=[self.create_error("isRpdeFeed", {"value": data, "path": "$"})])

        # Keep items up to and including the limit-th updated one; deleted items ride along.
        updated = 0
        cutoff = len(items)
        for position, item in enumerate(items):
            if isinstance(item, dict) and str(item.get("state", "")).lower() == "updated":
                updated += 1
                if updated == limit:
                    cutoff = position + 1
                    break
        if updated < limit:
            return RawRuleResult(errors=[self.create_error("isRpdeFeed", {"value": data, "path": "$"})])

        logger.debug(f"RpdeFeedRule: validating {cutoff} of {len(items)} feed items")
        limited = {**data, "items": items[:cutoff]}
        error = self.create_error("isRpdeFeedWithLimit", {"value": limited, "path": "$"}, {"limit": limit})
        return RawRuleResult(errors=[error], data=limited)
