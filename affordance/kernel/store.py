"""
Affordance Kernel — Store Factory

Framework-agnostic UI state for a collection: an initial state derived
from the CollectionDefinition, a pure reducer and derived selectors.

    store = create_collection_store(products)
    state = store.initial_state
    state = store.reduce(state, "items.set", {"items": rows, "total": 120})
    state = store.reduce(state, "filters.set", [{"id": "status", "value": "active"}])
    store.page_count(state)

reduce(state, action, payload) never mutates `state`; every handler returns
a new CollectionState. The initial state is the seed for whatever state
container the caller wires up and is not meant to be re-derived per render.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from affordance.kernel.collection import CollectionDefinition
from affordance.kernel.types import field_order

DEFAULT_PAGE_SIZE = 25


class UnknownAction(ValueError):
    """Raised by reduce() for an action name with no handler."""


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CollectionState:
    items: list[Any] = field(default_factory=list)
    total_count: int = 0
    loading: bool = False
    error: str | None = None

    # {id, desc} entries, first entry sorts first
    sorting: list[dict[str, Any]] = field(default_factory=list)
    # {id, value} entries
    column_filters: list[dict[str, Any]] = field(default_factory=list)
    global_filter: str = ""
    pagination: dict[str, int] = field(default_factory=lambda: {"page_index": 0, "page_size": DEFAULT_PAGE_SIZE})
    # row index (as str) -> selected
    row_selection: dict[str, bool] = field(default_factory=dict)
    # only hidden columns appear, always with False
    column_visibility: dict[str, bool] = field(default_factory=dict)
    column_order: list[str] = field(default_factory=list)
    grouping: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CollectionStore:
    collection: CollectionDefinition
    initial_state: CollectionState

    def reduce(self, state: CollectionState, action: str, payload: Any = None) -> CollectionState:
        """
        Apply one action. Returns a new state; `state` is left untouched.
        Raises UnknownAction for an unrecognised action name.
        """
        handler = _HANDLERS.get(action)
        if handler is None:
            raise UnknownAction(f"Unknown collection store action: {action}")
        return handler(self, state, copy.deepcopy(payload))

    # -- selectors ---------------------------------------------------------

    def selected_items(self, state: CollectionState) -> list[Any]:
        result = []
        for index, selected in state.row_selection.items():
            if not selected:
                continue
            position = int(index)
            if 0 <= position < len(state.items):
                result.append(state.items[position])
        return result

    def selected_count(self, state: CollectionState) -> int:
        return sum(1 for selected in state.row_selection.values() if selected)

    def page_count(self, state: CollectionState) -> int:
        page_size = state.pagination["page_size"]
        if page_size <= 0:
            return 0
        return math.ceil(state.total_count / page_size)

    def is_all_selected(self, state: CollectionState) -> bool:
        if not state.items:
            return False
        return self.selected_count(state) == len(state.items)

    def has_selection(self, state: CollectionState) -> bool:
        return any(state.row_selection.values())

    def visible_items(self, state: CollectionState) -> list[Any]:
        """Client-side page slice of `items`."""
        page_index = state.pagination["page_index"]
        page_size = state.pagination["page_size"]
        return state.items[page_index * page_size : (page_index + 1) * page_size]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def create_collection_store(collection: CollectionDefinition) -> CollectionStore:
    return CollectionStore(collection=collection, initial_state=initial_state(collection))


def initial_state(collection: CollectionDefinition) -> CollectionState:
    """
    Seed state: default sort, page size from pagination, hidden-column map
    and column order.
    """
    pagination = collection.affordances.get("pagination")
    page_size = DEFAULT_PAGE_SIZE
    if isinstance(pagination, dict):
        page_size = pagination.get("default_page_size") or DEFAULT_PAGE_SIZE

    default_sort = collection.affordances.get("default_sort")
    sorting = []
    if isinstance(default_sort, dict) and default_sort.get("field"):
        sorting = [{"id": default_sort["field"], "desc": default_sort.get("direction") == "desc"}]

    return CollectionState(
        sorting=sorting,
        pagination={"page_index": 0, "page_size": page_size},
        column_visibility=build_initial_visibility(collection),
        column_order=build_initial_order(collection),
    )


def build_initial_visibility(collection: CollectionDefinition) -> dict[str, bool]:
    return {
        key: False
        for key, fa in collection.field_affordances.items()
        if fa.get("visible") is False or fa.get("hidden")
    }


def build_initial_order(collection: CollectionDefinition) -> list[str]:
    keys = list(collection.field_affordances)
    return sorted(keys, key=lambda key: field_order(collection.field_affordances[key]))


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _first_page(state: CollectionState) -> dict[str, int]:
    return {**state.pagination, "page_index": 0}


def _handle_items_set(store: CollectionStore, state: CollectionState, payload: Any) -> CollectionState:
    payload = payload or {}
    if isinstance(payload, list):
        payload = {"items": payload}
    items = list(payload.get("items") or [])
    total = payload.get("total")
    return replace(state, items=items, total_count=len(items) if total is None else total)


def _handle_sorting_set(store, state, payload):
    return replace(state, sorting=list(payload or []))


def _handle_filters_set(store, state, payload):
    return replace(state, column_filters=list(payload or []), pagination=_first_page(state))


def _handle_global_filter_set(store, state, payload):
    return replace(state, global_filter=payload or "", pagination=_first_page(state))


def _handle_pagination_set(store, state, payload):
    return replace(state, pagination={**state.pagination, **(payload or {})})


def _handle_selection_set(store, state, payload):
    return replace(state, row_selection=dict(payload or {}))


def _handle_selection_clear(store, state, payload):
    return replace(state, row_selection={})


def _handle_selection_all(store, state, payload):
    return replace(state, row_selection={str(i): True for i in range(len(state.items))})


def _handle_visibility_set(store, state, payload):
    return replace(state, column_visibility=dict(payload or {}))


def _handle_order_set(store, state, payload):
    return replace(state, column_order=list(payload or []))


def _handle_grouping_set(store, state, payload):
    return replace(state, grouping=list(payload or []))


def _handle_loading_set(store, state, payload):
    return replace(state, loading=bool(payload))


def _handle_error_set(store, state, payload):
    return replace(state, error=payload)


def _handle_reset(store, state, payload):
    """Back to the default query, keeping items, page size and column layout."""
    return replace(
        state,
        sorting=copy.deepcopy(store.initial_state.sorting),
        column_filters=[],
        global_filter="",
        pagination={"page_index": 0, "page_size": state.pagination["page_size"]},
        row_selection={},
        grouping=[],
    )


_HANDLERS: dict[str, Callable[[CollectionStore, CollectionState, Any], CollectionState]] = {
    "items.set": _handle_items_set,
    "sorting.set": _handle_sorting_set,
    "filters.set": _handle_filters_set,
    "global_filter.set": _handle_global_filter_set,
    "pagination.set": _handle_pagination_set,
    "selection.set": _handle_selection_set,
    "selection.clear": _handle_selection_clear,
    "selection.all": _handle_selection_all,
    "visibility.set": _handle_visibility_set,
    "order.set": _handle_order_set,
    "grouping.set": _handle_grouping_set,
    "loading.set": _handle_loading_set,
    "error.set": _handle_error_set,
    "reset": _handle_reset,
}

ACTIONS: tuple[str, ...] = tuple(_HANDLERS)
