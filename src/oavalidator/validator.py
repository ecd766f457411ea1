"""
Validation driver.

Validation runs in two phases:

1. Raw rules inspect the whole input once. They report malformed input and
   may replace it (an RPDE feed page is cut down to ``rpde_item_limit``
   updated items).
2. Every keyed document in the input gets a root ``ModelNode``. Each core rule
   validates the node, then the driver descends into every field holding an
   object or a list of objects, resolving a model for each element.

Model resolution never fails: a missing definition yields a spec-less model
on which only specification-agnostic checks apply. Diagnostics are returned
in traversal order, and within one node in rule order.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Optional, Sequence

from .core.model import Model
from .core.model_node import ROOT, ModelNode
from .core.undefined import UNDEFINED
from .environment import Environment, get_default_environment
from .logging import logger
from .models.errors import ValidationError
from .options import ValidatorOptions, coerce_options
from .rules import RawRule, Rule, default_raw_rules, default_rules, is_rpde_feed

FEED_PAGE_MODEL = "FeedPage"


def _model_name(environment: Environment, name: Any, version: str) -> Optional[str]:
    """Name to load a model under; prefixed names resolve to their context term."""
    if not isinstance(name, str) or not name:
        return None
    return environment.properties.resolve(name, version).alias or name


def load_model(environment: Environment, name: Any, version: str) -> Model:
    model_name = _model_name(environment, name, version)
    if model_name is None:
        return Model.spec_less()
    return environment.load_model(model_name, version)


def _is_value_object(value: dict[str, Any]) -> bool:
    return "@value" in value and "@type" not in value and "type" not in value


def resolve_submodel(node: ModelNode, field: str, element: dict[str, Any]) -> Model:
    """
    Model for an object found under ``field`` of ``node``.

    The element's own type comes first. When that has no specification and the
    parent field names exactly one model and nothing else, that model is used.
    """
    environment = node.environment
    model = load_model(environment, environment.properties.get_object_field(element, "@type", node.version), node.version)
    if model.has_specification:
        return model

    definition = node.get_field_definition(field)
    if (
        definition is not None
        and definition.model
        and not definition.required_type
        and not definition.alternative_types
        and not definition.alternative_models
    ):
        declared = definition.model
        if declared.startswith("ArrayOf"):
            declared = declared[len("ArrayOf"):]
        fallback = load_model(environment, declared.lstrip("#"), node.version)
        if fallback.has_specification:
            logger.debug(f"Validator: {node.get_path(field)} falls back to declared model {fallback.type}")
            return fallback
    return model


async def apply_model_rules(rules: Sequence[Rule], node: ModelNode) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for rule in rules:
        errors.extend(await rule.validate(node))
    if isinstance(node.value, dict):
        for field in list(node.value):
            errors.extend(await apply_submodel_rules(rules, node, field))
    return errors


async def apply_submodel_rules(rules: Sequence[Rule], node: ModelNode, field: str) -> list[ValidationError]:
    value = node.value[field]
    if isinstance(value, list):
        elements: Iterable[tuple[Optional[int], Any]] = enumerate(value)
    elif isinstance(value, dict):
        elements = [(None, value)]
    else:
        return []

    errors: list[ValidationError] = []
    for index, element in elements:
        if not isinstance(element, dict) or _is_value_object(element):
            continue
        model = resolve_submodel(node, field, element)
        child = ModelNode(field, element, node, model, node.options, index)
        errors.extend(await apply_model_rules(rules, child))
    return errors


def _root_model(environment: Environment, options: ValidatorOptions, document: dict[str, Any], raw: Any) -> Model:
    if options.type:
        return load_model(environment, options.type, options.version)
    discriminator = environment.properties.get_object_field(document, "@type", options.version)
    if isinstance(discriminator, str) and discriminator:
        return load_model(environment, discriminator, options.version)
    if is_rpde_feed(raw):
        return load_model(environment, FEED_PAGE_MODEL, options.version)
    return Model.spec_less()


async def validate_async(
    value: Any,
    options: ValidatorOptions | dict[str, Any] | None = None,
    *,
    rules: Optional[Sequence[Rule]] = None,
    raw_rules: Optional[Sequence[RawRule]] = None,
    environment: Optional[Environment] = None,
) -> list[ValidationError]:
    """Validate ``value`` and return its diagnostics in order."""
    options = coerce_options(options)
    if environment is None:
        if options.data_model_path is not None:
            environment = Environment.from_options(options)
        else:
            environment = get_default_environment()
    rules = list(rules) if rules is not None else default_rules()
    raw_rules = list(raw_rules) if raw_rules is not None else default_raw_rules()

    errors: list[ValidationError] = []
    data = value
    for raw_rule in raw_rules:
        result = await raw_rule.validate_raw(data, options)
        errors.extend(result.errors)
        if result.data is not UNDEFINED:
            data = result.data

    if isinstance(data, list):
        documents = [(index, document) for index, document in enumerate(data)]
    elif isinstance(data, dict):
        documents = [(None, data)]
    else:
        documents = []

    for index, document in documents:
        if not isinstance(document, dict):
            continue
        model = _root_model(environment, options, document, data)
        logger.debug(
            f"Validator: validating {ROOT if index is None else f'{ROOT}[{index}]'} "
            f"as {model.type or 'untyped'} (specification: {model.has_specification})"
        )
        node = ModelNode(ROOT, document, None, model, options, index, environment=environment)
        errors.extend(await apply_model_rules(rules, node))

    logger.debug(f"Validator: {len(errors)} diagnostics")
    return errors


def validate(
    value: Any,
    options: ValidatorOptions | dict[str, Any] | None = None,
    *,
    rules: Optional[Sequence[Rule]] = None,
    raw_rules: Optional[Sequence[RawRule]] = None,
    environment: Optional[Environment] = None,
) -> list[ValidationError]:
    """Synchronous wrapper around ``validate_async``; not for use inside a running event loop."""
    return asyncio.run(
        validate_async(value, options, rules=rules, raw_rules=raw_rules, environment=environment)
    )
