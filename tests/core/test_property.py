from oavalidator.core.cache import AppendOnlyCache
from oavalidator.core.property import PropertyDescriptor, PropertyResolver
from oavalidator.core.undefined import UNDEFINED
from oavalidator.loader import InMemoryLoader

CONTEXT = {
    "@context": {
        "type": "@type",
        "id": "@id",
        "schema": "https://schema.org/",
        "oa": "https://openactive.io/",
        "beta": "https://openactive.io/ns-beta#",
        "name": "schema:name",
        "location": {"@id": "schema:location", "@type": "@id"},
        "activity": "oa:activity",
    }
}


def _resolver() -> PropertyResolver:
    return PropertyResolver(InMemoryLoader(context=CONTEXT), AppendOnlyCache())


def test_bare_compact_and_full_forms_resolve_to_same_descriptor():
    resolver = _resolver()

    bare = resolver.resolve("name", "latest")
    compact = resolver.resolve("schema:name", "latest")
    full = resolver.resolve("https://schema.org/name", "latest")

    assert bare == PropertyDescriptor(alias="name", label="name", prefix="schema", namespace="https://schema.org/")
    assert compact == bare
    assert full == bare
    assert bare.iri == "https://schema.org/name"
    assert bare.compact == "schema:name"


def test_term_with_id_mapping_resolves():
    descriptor = _resolver().resolve("location", "latest")

    assert descriptor.label == "location"
    assert descriptor.prefix == "schema"


def test_keyword_aliases_resolve_both_ways():
    resolver = _resolver()

    assert resolver.resolve("type", "latest") == PropertyDescriptor(alias="type", label="@type")
    assert resolver.resolve("@type", "latest") == PropertyDescriptor(alias="type", label="@type")
    assert resolver.resolve("@id", "latest").alias == "id"


def test_keyword_aliases_work_without_context():
    resolver = PropertyResolver(InMemoryLoader(), AppendOnlyCache())

    assert resolver.resolve("type", "latest").label == "@type"
    assert resolver.get_object_field({"@type": "Event"}, "type", "latest") == "Event"
    assert resolver.get_object_field({"type": "Event"}, "@type", "latest") == "Event"


def test_longest_namespace_wins():
    descriptor = _resolver().resolve("https://openactive.io/ns-beta#sportsActivityLocation", "latest")

    assert descriptor.prefix == "beta"
    assert descriptor.label == "sportsActivityLocation"


def test_unresolvable_token_yields_empty_descriptor():
    resolver = _resolver()

    descriptor = resolver.resolve("madeUpField", "latest")

    assert descriptor == PropertyDescriptor()
    assert not descriptor.is_resolved
    assert resolver.resolve("", "latest") == PropertyDescriptor()
    assert resolver.resolve(None, "latest") == PropertyDescriptor()
    assert resolver.key_checks("madeUpField", "latest") == ["madeUpField"]


def test_unknown_prefix_is_not_resolved():
    descriptor = _resolver().resolve("ext:thing", "latest")

    assert not descriptor.is_resolved


def test_extra_context_adds_prefixes_without_touching_cache():
    resolver = _resolver()
    extension = {"@context": {"ext": "https://example.org/ext#"}}

    descriptor = resolver.resolve("ext:thing", "latest", [extension])

    assert descriptor.prefix == "ext"
    assert descriptor.iri == "https://example.org/ext#thing"
    assert len(resolver.cache) == 0


def test_results_are_cached_per_token_and_version():
    resolver = _resolver()

    resolver.resolve("name", "latest")
    resolver.resolve("name", "latest")
    resolver.resolve("name", "2.0")

    assert len(resolver.cache) == 2
    assert ("name", "latest") in resolver.cache


def test_key_checks_lists_every_spelling():
    resolver = _resolver()

    assert resolver.key_checks("name", "latest") == ["name", "schema:name", "https://schema.org/name"]
    assert resolver.key_checks("type", "latest") == ["type", "@type"]
    assert resolver.key_checks("schema:name", "latest") == ["schema:name", "name", "https://schema.org/name"]


def test_document_access_is_alias_transparent():
    resolver = _resolver()
    data = {"schema:name": "Morning Yoga", "@type": "Event"}

    assert resolver.object_mapped_field_name(data, "name", "latest") == "schema:name"
    assert resolver.object_has_field(data, "https://schema.org/name", "latest")
    assert resolver.get_object_field(data, "name", "latest") == "Morning Yoga"
    assert resolver.get_object_field(data, "location", "latest") is UNDEFINED
    assert resolver.get_object_field("not an object", "name", "latest") is UNDEFINED


def test_array_and_string_matching():
    resolver = _resolver()

    assert resolver.array_has_field(["schema:name", "description"], "name", "latest")
    assert not resolver.array_has_field(["description"], "name", "latest")
    assert not resolver.array_has_field("name", "name", "latest")
    assert resolver.string_matches_field("https://schema.org/name", "name", "latest")
    assert not resolver.string_matches_field(3, "name", "latest")
    assert resolver.matches_any("@type", ["name", "type"], "latest")
    assert not resolver.matches_any("activity", ["name", "type"], "latest")


def test_same_term_across_spellings():
    resolver = _resolver()

    assert resolver.same_term("name", "schema:name", "latest")
    assert resolver.same_term("https://schema.org/name", "name", "latest")
    assert resolver.same_term("Mystery", "Mystery", "latest")
    assert not resolver.same_term("name", "activity", "latest")
    assert not resolver.same_term("Mystery", "schema:Mystery", "latest")
    assert not resolver.same_term(None, None, "latest")
