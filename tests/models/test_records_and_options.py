import pytest
from pydantic import ValidationError as PydanticValidationError

from oavalidator.core.cache import AppendOnlyCache
from oavalidator.core.model import Model
from oavalidator.core.undefined import UNDEFINED, is_missing
from oavalidator.models import (
    FieldDefinition,
    InheritRule,
    ModelDefinition,
    ValidationError,
    ValidationErrorCategory,
    ValidationErrorSeverity,
    ValidationErrorType,
    inherit_directive_admits,
)
from oavalidator.options import ValidationMode, ValidatorOptions, coerce_options


def test_options_accept_camel_and_snake_case():
    camel = ValidatorOptions.model_validate(
        {"activeSpecVersion": "2.0", "validationMode": "C1Request", "rpdeItemLimit": 5}
    )
    snake = ValidatorOptions.model_validate(
        {"active_spec_version": "2.0", "validation_mode": "C1Request", "rpde_item_limit": 5}
    )

    assert camel == snake
    assert camel.version == "2.0"
    assert camel.validation_mode is ValidationMode.C1_REQUEST


def test_options_defaults():
    options = coerce_options(None)

    assert options.version == "latest"
    assert options.type is None
    assert options.validation_mode is ValidationMode.OPEN_DATA
    assert options.schema_org_specifications == []
    assert not options.remote_fetch_enabled


def test_options_reject_unknown_mode_and_negative_limit():
    with pytest.raises(PydanticValidationError):
        ValidatorOptions.model_validate({"validationMode": "Booking"})
    with pytest.raises(PydanticValidationError):
        ValidatorOptions.model_validate({"rpdeItemLimit": -1})


def test_coerce_options_passes_instances_through():
    options = ValidatorOptions(type="Event")

    assert coerce_options(options) is options
    assert coerce_options({"type": "Event"}) == options


def test_validation_error_default_message_and_dump():
    error = ValidationError(
        category=ValidationErrorCategory.CONFORMANCE,
        type=ValidationErrorType.INVALID_TYPE,
        severity=ValidationErrorSeverity.FAILURE,
        path="$.field",
    )

    assert error.message == "Field is an invalid type"
    assert error.model_dump(mode="json") == {
        "category": "conformance",
        "type": "invalid_type",
        "severity": "failure",
        "message": "Field is an invalid type",
        "value": None,
        "path": "$.field",
    }


def test_model_definition_reads_camel_case_records():
    definition = ModelDefinition.model_validate(
        {
            "type": "SessionSeries",
            "derivedFrom": "schema:Event",
            "fields": {
                "subEvent": {"fieldName": "subEvent", "model": "ArrayOf#ScheduledSession", "inheritsTo": "*"},
            },
            "requiredFields": ["name"],
            "requiredOptions": [{"options": ["startDate", "eventSchedule"]}],
            "commonTypos": {"offer": "offers"},
            "validationMode": {"OpenData": "OpenData"},
        }
    )

    assert definition.derived_from == "schema:Event"
    assert definition.is_json_ld
    assert definition.fields["subEvent"].inherits_to == "*"
    assert definition.required_options[0].options == ["startDate", "eventSchedule"]
    assert definition.model_extra == {"validationMode": {"OpenData": "OpenData"}}


def test_inherit_directives():
    assert inherit_directive_admits("*", "name")
    assert not inherit_directive_admits(None, "name")
    assert inherit_directive_admits(InheritRule(include=["name"]), "name")
    assert not inherit_directive_admits(InheritRule(include=["name"]), "description")
    assert inherit_directive_admits(InheritRule(exclude=["id"]), "name")
    assert not inherit_directive_admits(InheritRule(exclude=["id"]), "id")
    assert not InheritRule(include=["name"], exclude=["name"]).admits("id")
    assert not InheritRule().admits("name")


def test_model_view():
    model = Model(
        {
            "type": "Event",
            "fields": {"location": {"fieldName": "location", "model": "#Place", "alternativeModels": ["#VirtualLocation"]}},
            "requiredFields": ["name"],
            "recommendedFields": ["description"],
            "inSpec": ["name", "description", "location"],
        }
    )

    assert model.has_specification
    assert model.has_required_field("name")
    assert model.has_recommended_field("description")
    assert model.has_field_in_spec("location")
    assert not model.has_field_in_spec("duration")
    assert model.get_possible_models_for_field("location") == ["#Place", "#VirtualLocation"]
    assert model.get_possible_models_for_field("name") == []
    assert isinstance(model.get_field("location"), FieldDefinition)


def test_spec_less_model():
    model = Model.spec_less("Mystery")

    assert not model.has_specification
    assert model.type == "Mystery"
    assert model.fields == {}


def test_undefined_is_falsy_and_missing():
    assert not UNDEFINED
    assert repr(UNDEFINED) == "UNDEFINED"
    assert is_missing(UNDEFINED)
    assert is_missing(None)
    assert not is_missing(0)
    assert not is_missing("")


def test_append_only_cache_keeps_first_entry():
    cache = AppendOnlyCache()

    assert cache.add("key", 1) == 1
    assert cache.add("key", 2) == 1
    assert cache.get("key") == 1
    assert cache.get("other") is None
    assert "key" in cache
    assert len(cache) == 1
