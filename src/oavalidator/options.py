"""
Validator configuration.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_SPEC_VERSION = "latest"


class ValidationMode(str, Enum):
    """
    Feed or booking-flow context the document is validated for.

    Rules may restrict themselves to some modes via ``target_validation_modes``.
    """

    OPEN_DATA = "OpenData"
    C1_REQUEST = "C1Request"
    C1_RESPONSE = "C1Response"
    C2_REQUEST = "C2Request"
    C2_RESPONSE = "C2Response"
    P_REQUEST = "PRequest"
    P_RESPONSE = "PResponse"
    B_REQUEST = "BRequest"
    B_RESPONSE = "BResponse"
    ORDER_PROPOSAL_PATCH = "OrderProposalPatch"
    ORDER_PATCH = "OrderPatch"
    ORDER_FEED = "OrderFeed"
    ORDER_STATUS = "OrderStatus"
    OPEN_BOOKING_ERROR = "OpenBookingError"


class ValidatorOptions(BaseModel):
    """
    Options bag accepted by ``validate``.

    Keys may be supplied in camelCase (``activeSpecVersion``) or snake_case.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    active_spec_version: str = Field(
        default=DEFAULT_SPEC_VERSION,
        validation_alias=AliasChoices("activeSpecVersion", "active_spec_version", "version"),
        description="Specification version used to load models, contexts and enums.",
    )
    type: Optional[str] = Field(
        default=None,
        description="Explicit model type for the root document, overriding its own type.",
    )
    validation_mode: ValidationMode = Field(
        default=ValidationMode.OPEN_DATA,
        description="Feed or booking-flow mode used to gate mode-specific rules.",
    )
    rpde_item_limit: Optional[int] = Field(
        default=None,
        ge=0,
        description="Maximum number of updated RPDE items validated per feed page (0 or unset means all).",
    )
    schema_org_specifications: list[dict[str, Any]] = Field(
        default_factory=list,
        description="schema.org-style graph documents consulted for class and property membership.",
    )
    remote_fetch_enabled: bool = Field(
        default=False,
        description="Whether extension contexts referenced by documents may be fetched over HTTP.",
    )
    remote_cache_path: Optional[Path] = Field(
        default=None,
        description="Directory used to cache fetched JSON documents.",
    )
    remote_cache_ttl_seconds: int = Field(
        default=3600,
        ge=0,
        description="Time to live for cached JSON documents.",
    )
    data_model_path: Optional[Path] = Field(
        default=None,
        description="Directory of JSON model definitions used when no environment is supplied.",
    )

    @property
    def version(self) -> str:
        return self.active_spec_version


def coerce_options(options: "ValidatorOptions | dict[str, Any] | None") -> ValidatorOptions:
    """Normalize caller options into ``ValidatorOptions``."""
    if options is None:
        return ValidatorOptions()
    if isinstance(options, ValidatorOptions):
        return options
    return ValidatorOptions.model_validate(options)
