"""
Collection Resolver -- define_collection Tests

Covers:
  - collection affordance defaults and explicit overrides
  - pagination / search shorthand expansion (True, partial mapping, False)
  - field override precedence over every inference layer
  - override keys without a schema field are ignored (and logged)
  - type_tag is always computed, never overridable
  - operations coerced from dicts, grouped by scope
  - derived field lists (visible / searchable / filterable / sortable / groupable)
  - invalid schema input raises TypeError
  - determinism and input immutability
  - describe() summary text
"""

import copy
import logging

import pytest

from affordance.kernel.collection import (
    DEFAULT_COLLECTION_AFFORDANCES,
    DEFAULT_PAGINATION,
    DEFAULT_SEARCH,
    CollectionDefinition,
    define_collection,
    resolve_collection_affordances,
)
from affordance.kernel.schema import (
    Check,
    DateNode,
    EnumNode,
    NumberNode,
    ObjectNode,
    StringNode,
    UnknownNode,
    obj,
    optional,
)
from affordance.kernel.types import OperationDefinition

# ============================================================================
# Fixtures
# ============================================================================


def product_schema() -> ObjectNode:
    return obj(
        id=StringNode(checks=(Check("uuid"),)),
        name=StringNode(),
        price=NumberNode(minimum=0),
        status=EnumNode(members=("draft", "active", "archived")),
        description=optional(StringNode()),
        created_at=DateNode(),
    )


def product_collection(config=None) -> CollectionDefinition:
    return define_collection(product_schema(), config)


# ============================================================================
# Collection affordances
# ============================================================================


class TestCollectionAffordances:
    def test_defaults(self):
        affordances = product_collection().affordances
        assert affordances["create"] is True
        assert affordances["delete"] is True
        assert affordances["bulk_delete"] is False
        assert affordances["selectable"] == "multi"
        assert affordances["views"] == ["table"]

    def test_pagination_partial_override(self):
        collection = product_collection({"affordances": {"pagination": {"default_page_size": 50}}})
        assert collection.affordances["pagination"] == {
            "default_page_size": 50,
            "page_size_options": [10, 25, 50, 100],
            "style": "pages",
            "server_side": False,
        }

    def test_pagination_true_is_full_default(self):
        assert resolve_collection_affordances({"pagination": True})["pagination"] == DEFAULT_PAGINATION

    def test_pagination_false_passes_through(self):
        assert resolve_collection_affordances({"pagination": False})["pagination"] is False

    def test_search_default_expanded(self):
        assert resolve_collection_affordances()["search"] == DEFAULT_SEARCH

    def test_search_partial_override(self):
        search = resolve_collection_affordances({"search": {"debounce": 100}})["search"]
        assert search["debounce"] == 100
        assert search["min_chars"] == 1
        assert search["placeholder"] == "Search..."

    def test_search_disabled(self):
        assert resolve_collection_affordances({"search": False})["search"] is False

    def test_extra_keys_kept(self):
        affordances = resolve_collection_affordances({"export": ["csv", "json"], "bulk_delete": True})
        assert affordances["export"] == ["csv", "json"]
        assert affordances["bulk_delete"] is True

    def test_defaults_not_shared(self):
        first = resolve_collection_affordances()
        first["pagination"]["page_size_options"].append(500)
        first["views"].append("grid")
        second = resolve_collection_affordances()
        assert second["pagination"]["page_size_options"] == [10, 25, 50, 100]
        assert DEFAULT_COLLECTION_AFFORDANCES["views"] == ["table"]


# ============================================================================
# Field affordances
# ============================================================================


class TestFieldOverrides:
    def test_override_beats_inference(self):
        collection = product_collection({"fields": {"price": {"sortable": False, "badge": True}}})
        price = collection.field_affordances["price"]
        assert price["sortable"] is False
        assert price["badge"] is True
        assert price["filterable"] == "range"

    def test_override_beats_inline_meta(self):
        schema = obj(name=StringNode(meta={"title": "Meta title", "sortable": "asc"}))
        collection = define_collection(schema, {"fields": {"name": {"sortable": "desc"}}})
        name = collection.field_affordances["name"]
        assert name["sortable"] == "desc"
        assert name["title"] == "Meta title"

    def test_override_beats_heuristic(self):
        collection = product_collection({"fields": {"id": {"visible": True}}})
        assert collection.field_affordances["id"]["visible"] is True
        assert collection.field_affordances["id"]["editable"] is False

    def test_empty_title_override_falls_back(self):
        collection = product_collection({"fields": {"created_at": {"title": ""}}})
        assert collection.field_affordances["created_at"]["title"] == "Created At"

    def test_unknown_field_override_ignored(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="affordance.kernel.collection"):
            collection = product_collection({"fields": {"ghost": {"visible": False}}})
        assert "ghost" not in collection.field_affordances
        assert list(collection.field_affordances) == list(product_schema().fields)
        assert "Ignoring override for unknown field 'ghost'" in caplog.text

    def test_type_tag_computed(self):
        collection = product_collection({"fields": {"price": {"type_tag": "string"}}})
        tags = {key: fa["type_tag"] for key, fa in collection.field_affordances.items()}
        assert tags == {
            "id": "string",
            "name": "string",
            "price": "number",
            "status": "enum",
            "description": "string",
            "created_at": "date",
        }

    def test_every_field_has_title(self):
        for key, fa in product_collection().field_affordances.items():
            assert fa["title"], key

    def test_empty_key_has_title(self):
        collection = define_collection(obj(**{"id": StringNode(), "": StringNode()}))
        assert collection.field_affordances[""]["title"] == "Field"


# ============================================================================
# Identity and operations
# ============================================================================


class TestIdentityAndOperations:
    def test_detected_identity(self):
        collection = product_collection()
        assert collection.id_field == "id"
        assert collection.label_field == "name"

    def test_explicit_identity(self):
        collection = product_collection({"id_field": "name", "label_field": "description"})
        assert collection.id_field == "name"
        assert collection.label_field == "description"

    def test_operations_coerced(self):
        collection = product_collection(
            {
                "operations": [
                    {"name": "archive", "label": "Archive", "scope": "selection", "variant": "danger"},
                    OperationDefinition(name="export", label="Export", scope="collection"),
                    {"name": "duplicate"},
                ]
            }
        )
        assert all(isinstance(op, OperationDefinition) for op in collection.operations)
        assert [op.name for op in collection.get_operations("selection")] == ["archive"]
        assert [op.name for op in collection.get_operations("collection")] == ["export"]
        duplicate = collection.get_operations("item")[0]
        assert duplicate.label == "duplicate"
        assert duplicate.scope == "item"

    def test_no_operations(self):
        assert product_collection().operations == ()


# ============================================================================
# Derived field lists
# ============================================================================


class TestDerivedLists:
    def test_visible_fields(self):
        assert product_collection().get_visible_fields() == [
            "name",
            "price",
            "status",
            "description",
            "created_at",
        ]

    def test_visible_fields_order(self):
        collection = product_collection(
            {"fields": {"created_at": {"order": 1}, "status": {"order": 2}, "price": {"hidden": True}}}
        )
        assert collection.get_visible_fields() == ["created_at", "status", "name", "description"]

    def test_detail_only_not_visible(self):
        schema = obj(id=StringNode(), title=StringNode(), address=ObjectNode())
        assert define_collection(schema).get_visible_fields() == ["title"]

    def test_searchable_fields(self):
        assert product_collection().get_searchable_fields() == ["name", "description"]

    def test_sortable_fields(self):
        collection = product_collection({"fields": {"price": {"sortable": "none"}}})
        assert [key for key, _ in collection.get_sortable_fields()] == ["id", "name", "status", "created_at"]

    def test_filterable_fields(self):
        collection = product_collection({"fields": {"name": {"filterable": None}, "price": {"filterable": False}}})
        assert [key for key, _ in collection.get_filterable_fields()] == [
            "id",
            "status",
            "description",
            "created_at",
        ]

    def test_groupable_fields(self):
        assert [key for key, _ in product_collection().get_groupable_fields()] == ["status"]


# ============================================================================
# Validation, determinism, immutability
# ============================================================================


class TestContract:
    @pytest.mark.parametrize("bad", [{"id": StringNode()}, StringNode(), None, "Product"])
    def test_rejects_non_object_schema(self, bad):
        with pytest.raises(TypeError, match="ObjectNode"):
            define_collection(bad)

    def test_deterministic(self):
        config = {"affordances": {"bulk_edit": True}, "fields": {"name": {"inline_editable": True}}}
        assert product_collection(config) == product_collection(config)

    def test_config_not_mutated(self):
        config = {
            "affordances": {"pagination": {"default_page_size": 50}},
            "fields": {"price": {"aggregatable": ["sum"]}},
            "operations": [{"name": "archive", "label": "Archive"}],
        }
        snapshot = copy.deepcopy(config)
        collection = product_collection(config)
        collection.field_affordances["price"]["aggregatable"].append("avg")
        assert config == snapshot

    def test_definition_is_frozen(self):
        collection = product_collection()
        with pytest.raises(AttributeError):
            collection.id_field = "sku"

    def test_empty_schema(self):
        collection = define_collection(ObjectNode())
        assert collection.field_affordances == {}
        assert collection.id_field == "id"
        assert collection.label_field == ""


# ============================================================================
# describe
# ============================================================================


class TestDescribe:
    def test_summary(self):
        collection = product_collection(
            {
                "affordances": {"bulk_delete": True},
                "operations": [{"name": "archive", "label": "Archive", "scope": "selection"}],
            }
        )
        text = collection.describe()
        lines = text.splitlines()

        assert lines[0] == "Collection with 6 fields (ID: id, Label: name)"
        assert "CRUD: Create, Read, Update, Delete" in lines
        assert "Bulk: Bulk Delete" in lines
        assert "Search: Yes (fields: name, description)" in lines
        assert "Pagination: pages (default: 25)" in lines
        assert "  id (string): sort:both, filter:exact, HIDDEN" in lines
        assert "  status (enum): sort:both, filter:select, group, edit" in lines
        assert lines[-2:] == ["Custom Operations:", "  archive [selection]: Archive"]

    def test_display_only_field(self):
        collection = define_collection(obj(payload=UnknownNode(source="bytes")))
        assert "  payload (unknown): display-only" in collection.describe().splitlines()

    def test_crud_subset(self):
        collection = product_collection({"affordances": {"create": False, "delete": False, "search": False}})
        lines = collection.describe().splitlines()
        assert "CRUD: Read, Update" in lines
        assert not any(line.startswith("Search:") for line in lines)
        assert not any(line.startswith("Bulk:") for line in lines)
