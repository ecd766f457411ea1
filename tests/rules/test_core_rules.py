import httpx

from oavalidator import validate
from oavalidator.environment import Environment
from oavalidator.loader import InMemoryLoader
from oavalidator.models import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from oavalidator.remote import RemoteDocumentFetcher
from oavalidator.rules import (
    BetaFieldsRule,
    FieldsCorrectTypeRule,
    FieldsNotInModelRule,
    RecommendedFieldsRule,
    RequiredFieldsRule,
    RequiredOptionalFieldsRule,
    ValidModelTypeRule,
)

TEXT = "https://schema.org/Text"
URL = "https://schema.org/URL"

CONTEXT = {
    "@context": {
        "type": "@type",
        "id": "@id",
        "schema": "https://schema.org/",
        "oa": "https://openactive.io/",
        "beta": "https://openactive.io/ns-beta#",
        "name": "schema:name",
        "description": "schema:description",
        "url": "schema:url",
        "duration": "schema:duration",
        "eventStatus": "schema:eventStatus",
        "eventStatusLegacy": "schema:eventStatusLegacy",
        "location": "schema:location",
        "Event": "schema:Event",
        "Place": "schema:Place",
    }
}

MODELS = {
    "Event": {
        "type": "Event",
        "derivedFrom": "schema:Event",
        "fields": {
            "name": {"fieldName": "name", "requiredType": TEXT},
            "url": {"fieldName": "url", "requiredType": URL, "alternativeTypes": [TEXT]},
            "location": {"fieldName": "location", "model": "#Place"},
            "superEvent": {"fieldName": "superEvent", "model": "#Event", "inheritsFrom": "*"},
        },
        "requiredFields": ["type", "name"],
        "recommendedFields": ["description"],
        "requiredOptions": [
            {"options": ["startDate", "eventSchedule"]},
            {"options": ["url", "location"], "description": ["An Event must have either a url or a location."]},
        ],
        "inSpec": ["@context", "type", "id", "name", "description", "url", "location", "superEvent", "startDate"],
        "commonTypos": {"offer": "offers"},
    },
    "Place": {"type": "Place", "inSpec": ["type", "name"]},
}

SCHEMA_ORG = {
    "@context": {"schema": "https://schema.org/", "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#"},
    "@id": "https://schema.org/",
    "@graph": [
        {"@id": "schema:Event", "@type": "rdfs:Class"},
        {"@id": "schema:duration", "@type": "rdf:Property", "schema:domainIncludes": {"@id": "schema:Event"}},
        {
            "@id": "schema:eventStatusLegacy",
            "@type": "rdf:Property",
            "schema:domainIncludes": {"@id": "schema:Event"},
            "schema:supersededBy": {"@id": "schema:eventStatus"},
        },
    ],
}


def _environment(**kwargs) -> Environment:
    return Environment(InMemoryLoader(MODELS, context=CONTEXT), **kwargs)


def _validate(document, rule, environment=None, **options):
    return validate(document, options, rules=[rule], raw_rules=[], environment=environment or _environment())


def test_required_fields():
    errors = _validate({"type": "Event", "url": "https://example.com/"}, RequiredFieldsRule())

    assert [(error.path, error.type) for error in errors] == [("$.name", ValidationErrorType.MISSING_REQUIRED_FIELD)]
    assert errors[0].message == 'Required field "name" is missing from "Event".'
    assert errors[0].severity is ValidationErrorSeverity.FAILURE


def test_required_fields_treat_null_as_missing():
    errors = _validate({"type": "Event", "name": None}, RequiredFieldsRule())

    assert [error.path for error in errors] == ["$.name"]


def test_required_fields_accept_aliases_and_inherited_values():
    document = {"@type": "Event", "superEvent": {"type": "Event", "schema:name": "Series"}}

    assert _validate(document, RequiredFieldsRule()) == []


def test_required_fields_reported_on_nested_nodes():
    errors = _validate({"type": "Event", "superEvent": {"type": "Event"}}, RequiredFieldsRule())

    assert [error.path for error in errors] == ["$.name", "$.superEvent.name"]


def test_required_fields_skip_models_without_specification():
    assert _validate({"type": "Mystery"}, RequiredFieldsRule()) == []


def test_required_options():
    errors = _validate({"type": "Event", "name": "Yoga"}, RequiredOptionalFieldsRule())

    assert [error.message for error in errors] == [
        'At least one of "startDate", "eventSchedule" is required in "Event".',
        "An Event must have either a url or a location.",
    ]
    assert all(error.path == "$" for error in errors)


def test_required_options_satisfied():
    document = {"type": "Event", "startDate": "2024-01-31", "location": {"type": "Place"}}

    assert _validate(document, RequiredOptionalFieldsRule()) == []


def test_recommended_fields():
    errors = _validate({"type": "Event"}, RecommendedFieldsRule())

    assert len(errors) == 1
    assert errors[0].category is ValidationErrorCategory.RECOMMENDATION
    assert errors[0].path == "$.description"
    assert _validate({"type": "Event", "description": "Calm"}, RecommendedFieldsRule()) == []


def test_fields_correct_type():
    document = {"type": "Event", "name": 3, "url": "https://example.com/", "location": "Hall"}

    errors = _validate(document, FieldsCorrectTypeRule())

    assert [(error.path, error.message) for error in errors] == [
        ("$.name", "Invalid type, expected Text but found Integer."),
        ("$.location", "Invalid type, expected Place but found Text."),
    ]
    assert errors[0].value == 3


def test_fields_correct_type_lists_alternatives():
    errors = _validate({"type": "Event", "url": 1.5}, FieldsCorrectTypeRule())

    assert errors[0].message == "Invalid type, expected one of URL, Text but found Float."


def test_fields_correct_type_ignores_undeclared_fields():
    assert _validate({"type": "Event", "madeUp": 3}, FieldsCorrectTypeRule()) == []


def test_fields_not_in_model_not_in_spec():
    errors = _validate({"type": "Event", "madeUp": 1}, FieldsNotInModelRule())

    assert [(error.path, error.type) for error in errors] == [("$.madeUp", ValidationErrorType.FIELD_NOT_IN_SPEC)]


def test_fields_not_in_model_typo_hint():
    errors = _validate({"type": "Event", "offer": []}, FieldsNotInModelRule())

    assert errors[0].type is ValidationErrorType.FIELD_COULD_BE_TYPO
    assert errors[0].message == 'Field "offer" is a common typo for "offers". Please correct this field to "offers".'


def test_fields_not_in_model_accepts_aliases_and_skips_beta():
    document = {
        "@context": "https://openactive.io/",
        "@type": "Event",
        "schema:name": "Yoga",
        "beta:isVirtual": True,
    }

    assert _validate(document, FieldsNotInModelRule()) == []


def test_fields_not_in_model_unknown_extension_prefix():
    errors = _validate({"type": "Event", "ext:thing": 1}, FieldsNotInModelRule())

    assert errors[0].type is ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED
    assert errors[0].severity is ValidationErrorSeverity.NOTICE


def test_fields_not_in_model_schema_org_fields():
    options = {"schemaOrgSpecifications": [SCHEMA_ORG]}
    document = {"type": "Event", "duration": "PT1H", "eventStatusLegacy": "x", "eventStatus": "y"}

    errors = _validate(document, FieldsNotInModelRule(), **options)

    assert [(error.path, error.type) for error in errors] == [
        ("$.duration", ValidationErrorType.SCHEMA_ORG_FIELDS_NOT_CHECKED),
        ("$.eventStatusLegacy", ValidationErrorType.FIELD_DEPRECATED),
        ("$.eventStatus", ValidationErrorType.FIELD_NOT_IN_SPEC),
    ]
    assert errors[1].message == 'This field has been superseded in schema.org by "https://schema.org/eventStatus".'


def test_fields_not_in_model_extension_context():
    extension = {
        "@context": {
            "ext": "https://example.org/ext#",
            "schema": "https://schema.org/",
            "oa": "https://openactive.io/",
            "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
        },
        "@graph": [
            {"@id": "ext:level", "@type": "rdf:Property", "schema:domainIncludes": {"@id": "oa:Event"}},
        ],
    }
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=extension)

    fetcher = RemoteDocumentFetcher(enabled=True, transport=httpx.MockTransport(handler))
    document = {
        "@context": ["https://openactive.io/", "https://example.org/ext.jsonld"],
        "type": "Event",
        "ext:level": "Beginner",
        "ext:unknown": 1,
    }

    errors = _validate(document, FieldsNotInModelRule(), environment=_environment(fetcher=fetcher))

    assert [(error.path, error.type) for error in errors] == [
        ('$["ext:unknown"]', ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED),
    ]
    assert requested == ["https://example.org/ext.jsonld"]


def test_fields_not_in_model_without_remote_fetching():
    document = {"@context": ["https://openactive.io/", "https://example.org/ext.jsonld"], "type": "Event", "ext:level": 1}

    errors = _validate(document, FieldsNotInModelRule())

    assert [error.type for error in errors] == [ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED]


def test_valid_model_type_missing_type():
    errors = _validate({"name": "Untyped"}, ValidModelTypeRule())

    assert errors[0].type is ValidationErrorType.MISSING_REQUIRED_FIELD
    assert errors[0].category is ValidationErrorCategory.DATA_QUALITY
    assert errors[0].path == "$"


def test_valid_model_type_hint_from_parent_field():
    errors = _validate({"type": "Event", "location": {"name": "Hall"}}, ValidModelTypeRule())

    assert [error.path for error in errors] == ["$.location"]
    assert "`Place`" in errors[0].message


def test_valid_model_type_unknown_model():
    errors = _validate({"type": "Mystery"}, ValidModelTypeRule())

    assert errors[0].type is ValidationErrorType.MODEL_NOT_FOUND
    assert errors[0].severity is ValidationErrorSeverity.SUGGESTION
    assert errors[0].value == "Mystery"


def test_valid_model_type_skips_non_json_ld_models():
    environment = Environment(InMemoryLoader({"Plain": {"type": "Plain", "isJsonLd": False}}))

    assert _validate({}, ValidModelTypeRule(), environment=environment, type="Plain") == []


def test_beta_fields():
    errors = _validate({"type": "Event", "beta:isVirtual": True, "ext:level": 1, "name": "x"}, BetaFieldsRule())

    assert [error.path for error in errors] == ['$["beta:isVirtual"]', '$["ext:level"]']
    assert all(error.type is ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED for error in errors)
