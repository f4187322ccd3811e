"""
Store Factory -- Initial State Tests

The initial state is derived once from the CollectionDefinition.

Covers:
  - empty data / query defaults
  - page size from resolved pagination, fallback when pagination is off
  - sorting seeded from default_sort
  - column visibility lists only hidden columns, always False
  - column order follows `order`, then declaration order
"""

import pytest

from affordance.kernel.collection import define_collection
from affordance.kernel.schema import Check, DateNode, EnumNode, NumberNode, StringNode, obj
from affordance.kernel.store import (
    DEFAULT_PAGE_SIZE,
    CollectionState,
    build_initial_order,
    build_initial_visibility,
    create_collection_store,
)

# ============================================================================
# Fixtures
# ============================================================================


def product_collection(config=None):
    schema = obj(
        id=StringNode(checks=(Check("uuid"),)),
        name=StringNode(),
        price=NumberNode(),
        status=EnumNode(members=("draft", "active")),
        updated_at=DateNode(),
    )
    return define_collection(schema, config)


def initial(config=None) -> CollectionState:
    return create_collection_store(product_collection(config)).initial_state


# ============================================================================
# Tests
# ============================================================================


class TestInitialState:
    def test_empty_defaults(self):
        state = initial()
        assert state.items == []
        assert state.total_count == 0
        assert state.loading is False
        assert state.error is None
        assert state.sorting == []
        assert state.column_filters == []
        assert state.global_filter == ""
        assert state.row_selection == {}
        assert state.grouping == []

    def test_default_page_size(self):
        assert initial().pagination == {"page_index": 0, "page_size": 25}

    def test_page_size_from_pagination(self):
        state = initial({"affordances": {"pagination": {"default_page_size": 50}}})
        assert state.pagination == {"page_index": 0, "page_size": 50}

    def test_pagination_disabled(self):
        state = initial({"affordances": {"pagination": False}})
        assert state.pagination["page_size"] == DEFAULT_PAGE_SIZE

    @pytest.mark.parametrize("direction,desc", [("asc", False), ("desc", True)])
    def test_default_sort(self, direction, desc):
        state = initial({"affordances": {"default_sort": {"field": "price", "direction": direction}}})
        assert state.sorting == [{"id": "price", "desc": desc}]

    def test_default_sort_without_field_ignored(self):
        assert initial({"affordances": {"default_sort": {"direction": "desc"}}}).sorting == []

    def test_state_is_frozen(self):
        with pytest.raises(AttributeError):
            initial().loading = True

    def test_store_keeps_collection(self):
        collection = product_collection()
        assert create_collection_store(collection).collection is collection


class TestColumnLayout:
    def test_visibility_lists_hidden_only(self):
        assert build_initial_visibility(product_collection()) == {"id": False, "updated_at": False}

    def test_visibility_from_hidden_override(self):
        collection = product_collection({"fields": {"price": {"hidden": True}, "id": {"visible": True}}})
        assert build_initial_visibility(collection) == {"price": False, "updated_at": False}

    def test_visibility_values_are_false(self):
        assert set(initial().column_visibility.values()) == {False}

    def test_order_is_declaration_order(self):
        assert build_initial_order(product_collection()) == ["id", "name", "price", "status", "updated_at"]

    def test_order_respects_order_override(self):
        collection = product_collection({"fields": {"status": {"order": 1}, "price": {"order": 2}}})
        assert build_initial_order(collection) == ["status", "price", "id", "name", "updated_at"]

    def test_initial_state_uses_layout(self):
        state = initial()
        assert state.column_order == ["id", "name", "price", "status", "updated_at"]
        assert state.column_visibility == {"id": False, "updated_at": False}
