import asyncio

import pytest

from oavalidator import validate
from oavalidator.core.model import Model
from oavalidator.core.model_node import ModelNode
from oavalidator.environment import Environment
from oavalidator.exceptions import RuleNotImplementedError
from oavalidator.loader import InMemoryLoader
from oavalidator.models import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from oavalidator.options import ValidationMode, ValidatorOptions
from oavalidator.rules import ALL, RawRule, Rule, RuleMeta, RuleTest, render_message

NOTICE = RuleTest(
    message="Saw {{field}} on {{model}}.",
    category=ValidationErrorCategory.DATA_QUALITY,
    severity=ValidationErrorSeverity.NOTICE,
    type=ValidationErrorType.FIELD_NOT_IN_SPEC,
)


class ModelOnlyRule(Rule):
    target_models = ALL


class FieldOnlyRule(Rule):
    target_fields = ALL


class UntargetedRule(Rule):
    pass


class SlowRule(Rule):
    target_models = ALL
    meta = RuleMeta(name="SlowRule", tests={"default": NOTICE})

    async def validate_model(self, node):
        await asyncio.sleep(0.01)
        return [self.create_error("default", {"path": node.get_path()}, {"field": "slow", "model": node.model.type})]


class FastRule(Rule):
    target_models = ALL
    meta = RuleMeta(name="FastRule", tests={"default": NOTICE})

    def validate_model(self, node):
        return [self.create_error("default", {"path": node.get_path()}, {"field": "fast", "model": node.model.type})]


class EventNameRule(Rule):
    target_fields = {"Event": ["name"], "Place": ALL}
    meta = RuleMeta(name="EventNameRule", tests={"default": NOTICE})

    def validate_field(self, node, field):
        return [
            self.create_error(
                "default",
                {"value": node.value[field], "path": node.get_path(field)},
                {"field": field, "model": node.model.type},
            )
        ]


class BookingOnlyRule(FastRule):
    target_validation_modes = [ValidationMode.C1_REQUEST, ValidationMode.C2_REQUEST]


def _node(value, model_type="Event", mode="OpenData") -> ModelNode:
    return ModelNode(
        "$",
        value,
        None,
        Model({"type": model_type}),
        ValidatorOptions(validationMode=mode),
        environment=Environment(InMemoryLoader()),
    )


def test_model_targeted_rule_must_implement_validate_model():
    with pytest.raises(RuleNotImplementedError):
        asyncio.run(ModelOnlyRule().validate(_node({})))


def test_field_targeted_rule_must_implement_validate_field():
    with pytest.raises(RuleNotImplementedError):
        asyncio.run(FieldOnlyRule().validate(_node({"name": "x"})))


def test_untargeted_rule_produces_nothing():
    assert asyncio.run(UntargetedRule().validate(_node({"name": "x"}))) == []


def test_default_field_targets_are_read_only():
    with pytest.raises(TypeError):
        UntargetedRule.target_fields["Event"] = ALL

    assert Rule.target_fields == {}
    assert not UntargetedRule().is_field_targeted(Model({"type": "Event"}), "name")


def test_field_targeting_by_model_type():
    rule = EventNameRule()

    assert rule.is_field_targeted(Model({"type": "Event"}), "name")
    assert not rule.is_field_targeted(Model({"type": "Event"}), "description")
    assert rule.is_field_targeted(Model({"type": "Place"}), "anything")
    assert not rule.is_field_targeted(Model({"type": "Offer"}), "name")
    assert not rule.is_field_targeted(Model.spec_less(), "name")

    errors = asyncio.run(rule.validate(_node({"name": "Yoga", "description": "Calm"})))
    assert [error.path for error in errors] == ["$.name"]
    assert errors[0].message == "Saw name on Event."
    assert errors[0].value == "Yoga"


def test_model_targeting():
    class PlaceRule(FastRule):
        target_models = ["Place"]

    assert PlaceRule().is_model_targeted(Model({"type": "Place"}))
    assert not PlaceRule().is_model_targeted(Model({"type": "Event"}))
    assert FastRule().is_model_targeted(Model.spec_less())


def test_validation_mode_targeting():
    rule = BookingOnlyRule()

    assert asyncio.run(rule.validate(_node({}, mode="OpenData"))) == []
    assert len(asyncio.run(rule.validate(_node({}, mode="C1Request")))) == 1


def test_async_rule_results_keep_rule_order():
    errors = validate(
        {"type": "Event"},
        rules=[SlowRule(), FastRule()],
        raw_rules=[],
        environment=Environment(InMemoryLoader({"Event": {"type": "Event"}})),
    )

    assert [error.message for error in errors] == ["Saw slow on Event.", "Saw fast on Event."]


def test_create_error_renders_message_and_replaces_undefined():
    from oavalidator.core.undefined import UNDEFINED

    error = FastRule().create_error("default", {"value": UNDEFINED, "path": "$.name"}, {"field": "name"})

    assert error.message == "Saw name on ."
    assert error.value is None
    assert error.path == "$.name"
    assert error.type is ValidationErrorType.FIELD_NOT_IN_SPEC


def test_render_message():
    assert render_message("Limit is {{limit}}.", {"limit": 10}) == "Limit is 10."
    assert render_message("No placeholders.") == "No placeholders."
    assert render_message("<{{value}}>", {"value": "a & b"}) == "<a & b>"


def test_raw_rule_must_implement_validate_raw():
    with pytest.raises(RuleNotImplementedError):
        asyncio.run(RawRule().validate_raw({}, ValidatorOptions()))


def test_raw_rule_is_never_targeted_at_nodes():
    rule = RawRule()

    assert not rule.is_model_targeted(Model({"type": "Event"}))
    assert not rule.is_field_targeted(Model({"type": "Event"}), "name")
