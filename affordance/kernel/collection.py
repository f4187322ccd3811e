"""
Affordance Kernel — Collection Resolver

define_collection(schema, config) is the entry point. It resolves
collection-level affordances, per-field affordances and identity fields in
one synchronous pass and returns an immutable CollectionDefinition.

Identical inputs always give structurally identical definitions: no
registry, no cache, and no input is mutated.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from affordance.kernel.identity import detect_id_field, detect_label_field
from affordance.kernel.inference import humanize_field_name, infer_field_affordances
from affordance.kernel.introspect import base_type
from affordance.kernel.pydantic_schema import is_model_class, schema_from_model
from affordance.kernel.schema import ObjectNode
from affordance.kernel.types import (
    CollectionConfig,
    OperationDefinition,
    field_order,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_PAGINATION: dict[str, Any] = {
    "default_page_size": 25,
    "page_size_options": [10, 25, 50, 100],
    "style": "pages",
    "server_side": False,
}

DEFAULT_SEARCH: dict[str, Any] = {
    "debounce": 300,
    "min_chars": 1,
    "highlight": False,
    "placeholder": "Search...",
}

DEFAULT_COLLECTION_AFFORDANCES: dict[str, Any] = {
    "create": True,
    "read": True,
    "update": True,
    "delete": True,
    "bulk_delete": False,
    "bulk_edit": False,
    "search": True,
    "pagination": DEFAULT_PAGINATION,
    "multi_sort": True,
    "filter_panel": True,
    "selectable": "multi",
    "column_visibility": True,
    "column_order": True,
    "column_resize": True,
    "refresh": True,
    "default_view": "table",
    "views": ["table"],
}


# ---------------------------------------------------------------------------
# CollectionDefinition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CollectionDefinition:
    """
    The resolved collection: schema, collection affordances, one resolved
    record per field (declaration order), operations and identity fields.

    Generators, the store factory and codegen only read from it.
    """

    schema: ObjectNode
    affordances: dict[str, Any]
    field_affordances: dict[str, dict[str, Any]]
    operations: tuple[OperationDefinition, ...] = ()
    id_field: str = "id"
    label_field: str = ""
    model: type | None = field(default=None, compare=False)

    def get_visible_fields(self) -> list[str]:
        """Visible, not hidden, not detail-only; ordered by `order` (stable)."""
        visible = [
            (key, fa)
            for key, fa in self.field_affordances.items()
            if fa.get("visible") is not False and not fa.get("hidden") and not fa.get("detail_only")
        ]
        visible.sort(key=lambda item: field_order(item[1]))
        return [key for key, _ in visible]

    def get_searchable_fields(self) -> list[str]:
        return [key for key, fa in self.field_affordances.items() if fa.get("searchable") is True]

    def get_filterable_fields(self) -> list[tuple[str, dict[str, Any]]]:
        return [(key, fa) for key, fa in self.field_affordances.items() if is_filterable(fa)]

    def get_sortable_fields(self) -> list[tuple[str, dict[str, Any]]]:
        return [(key, fa) for key, fa in self.field_affordances.items() if is_sortable(fa)]

    def get_groupable_fields(self) -> list[tuple[str, dict[str, Any]]]:
        return [(key, fa) for key, fa in self.field_affordances.items() if fa.get("groupable") is True]

    def get_operations(self, scope: str) -> list[OperationDefinition]:
        return [op for op in self.operations if op.scope == scope]

    def describe(self) -> str:
        return describe_collection(self)


def is_sortable(affordance: dict[str, Any]) -> bool:
    sortable = affordance.get("sortable", False)
    return sortable is not False and sortable != "none" and sortable is not None


def is_filterable(affordance: dict[str, Any]) -> bool:
    filterable = affordance.get("filterable")
    return filterable is not False and filterable is not None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def define_collection(
    schema: ObjectNode | type,
    config: CollectionConfig | None = None,
) -> CollectionDefinition:
    """
    Resolve a collection from an ObjectNode (or a Pydantic model class) and
    an optional override config.

        products = define_collection(
            Product,
            {
                "affordances": {"bulk_delete": True, "export": ["csv"]},
                "fields": {"name": {"inline_editable": True}},
                "operations": [{"name": "archive", "label": "Archive"}],
            },
        )
    """
    model = None
    if is_model_class(schema):
        model = schema
        schema = schema_from_model(schema)
    if not isinstance(schema, ObjectNode):
        raise TypeError(
            f"define_collection expects an ObjectNode or a pydantic BaseModel subclass, got {type(schema).__name__}"
        )

    config = config or {}

    affordances = resolve_collection_affordances(config.get("affordances"))
    field_affordances = resolve_field_affordances(schema, config.get("fields"))

    id_field = config.get("id_field") or detect_id_field(schema)
    label_field = config.get("label_field") or detect_label_field(schema, field_affordances)

    operations = tuple(OperationDefinition.coerce(op) for op in config.get("operations") or ())

    logger.debug(
        "Defined collection: %d fields, id=%s, label=%s, %d operations",
        len(field_affordances),
        id_field,
        label_field,
        len(operations),
    )

    return CollectionDefinition(
        schema=schema,
        affordances=affordances,
        field_affordances=field_affordances,
        operations=operations,
        id_field=id_field,
        label_field=label_field,
        model=model,
    )


def resolve_collection_affordances(explicit: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Shallow merge of `explicit` over the default record, then expand the
    `pagination` and `search` shorthands. True becomes the full default, a
    partial mapping is merged over the full default, False passes through.
    """
    merged = copy.deepcopy(DEFAULT_COLLECTION_AFFORDANCES)
    merged.update(copy.deepcopy(explicit or {}))

    merged["pagination"] = _normalize_sub_config(merged.get("pagination"), DEFAULT_PAGINATION)
    merged["search"] = _normalize_sub_config(merged.get("search"), DEFAULT_SEARCH)
    return merged


def resolve_field_affordances(
    schema: ObjectNode,
    overrides: dict[str, dict[str, Any]] | None = None,
) -> dict[str, dict[str, Any]]:
    """
    Infer each field (layers 1-4) and merge caller overrides on top.
    Override keys without a schema field are ignored.
    """
    overrides = overrides or {}
    for key in overrides:
        if key not in schema.fields:
            logger.debug("Ignoring override for unknown field %r", key)

    result: dict[str, dict[str, Any]] = {}
    for key, node in schema.fields.items():
        merged = infer_field_affordances(key, node)
        merged.update(copy.deepcopy(overrides.get(key) or {}))
        merged["title"] = merged.get("title") or humanize_field_name(key)
        merged["type_tag"] = base_type(node)
        result[key] = merged
    return result


def describe_collection(definition: CollectionDefinition) -> str:
    """Plain-text summary of what a collection can do."""
    affordances = definition.affordances
    lines: list[str] = []

    lines.append(
        f"Collection with {len(definition.field_affordances)} fields "
        f"(ID: {definition.id_field}, Label: {definition.label_field})"
    )
    lines.append("")

    crud = [
        label
        for flag, label in (("create", "Create"), ("read", "Read"), ("update", "Update"), ("delete", "Delete"))
        if affordances.get(flag)
    ]
    lines.append(f"CRUD: {', '.join(crud)}")

    bulk = [label for flag, label in (("bulk_delete", "Bulk Delete"), ("bulk_edit", "Bulk Edit")) if affordances.get(flag)]
    if bulk:
        lines.append(f"Bulk: {', '.join(bulk)}")

    if affordances.get("search"):
        lines.append(f"Search: Yes (fields: {', '.join(definition.get_searchable_fields())})")

    pagination = affordances.get("pagination")
    if isinstance(pagination, dict):
        lines.append(f"Pagination: {pagination.get('style')} (default: {pagination.get('default_page_size')})")

    lines.append("")
    lines.append("Fields:")
    for key, fa in definition.field_affordances.items():
        lines.append(f"  {key} ({fa['type_tag']}): {', '.join(_capabilities(fa)) or 'display-only'}")

    if definition.operations:
        lines.append("")
        lines.append("Custom Operations:")
        for op in definition.operations:
            lines.append(f"  {op.name} [{op.scope}]: {op.label}")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalize_sub_config(value: Any, default: dict[str, Any]) -> Any:
    if value is True:
        return copy.deepcopy(default)
    if isinstance(value, dict):
        return {**copy.deepcopy(default), **value}
    return value


def _capabilities(fa: dict[str, Any]) -> list[str]:
    caps: list[str] = []
    if is_sortable(fa):
        caps.append(f"sort:{_flag(fa['sortable'])}")
    if fa.get("filterable"):
        caps.append(f"filter:{_flag(fa['filterable'])}")
    if fa.get("searchable"):
        caps.append("search")
    if fa.get("groupable"):
        caps.append("group")
    if fa.get("editable"):
        caps.append("edit")
    if fa.get("inline_editable"):
        caps.append("inline-edit")
    if fa.get("visible") is False or fa.get("hidden"):
        caps.append("HIDDEN")
    if fa.get("detail_only"):
        caps.append("detail-only")
    return caps


def _flag(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
