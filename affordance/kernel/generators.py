"""
Affordance Kernel — Generators

Pure projections of a CollectionDefinition into the descriptors that
renderers consume:

  to_column_defs(collection)        -> list[ColumnConfig]    (table)
  to_form_config(collection, mode)  -> list[FormFieldConfig] (create / edit)
  to_filter_config(collection)      -> list[FilterFieldConfig] (filter panel)

Headless: these produce data, never UI. Every descriptor has a to_dict()
that drops None values.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from affordance.kernel.collection import CollectionDefinition, is_filterable, is_sortable
from affordance.kernel.introspect import default_value, enum_values, numeric_bounds
from affordance.kernel.types import Option, drop_none, option_label

# ---------------------------------------------------------------------------
# Function name tables
# ---------------------------------------------------------------------------

SORTING_FNS: dict[str, str] = {
    "string": "text",
    "enum": "text",
    "number": "basic",
    "boolean": "basic",
    "date": "datetime",
}

FILTER_FNS: dict[str, str] = {
    "exact": "equals_string",
    "search": "includes_string",
    "fuzzy": "includes_string",
    "select": "arr_includes",
    "multi_select": "arr_includes_some",
    "range": "in_number_range",
    "contains": "arr_includes_all",
    "boolean": "equals",
}

FORM_WIDGETS: dict[str, str] = {
    "string": "text",
    "number": "number",
    "boolean": "checkbox",
    "enum": "select",
    "date": "date",
    "array": "tags",
    "object": "json",
}

SELECT_COLUMN_SIZE = 40
ACTIONS_COLUMN_BASE_SIZE = 60
ACTIONS_COLUMN_STEP = 32


def sorting_fn_name(type_tag: str) -> str:
    return SORTING_FNS.get(type_tag, "basic")


def filter_fn_name(filter_type: Any) -> str:
    if isinstance(filter_type, bool):
        return "includes_string"
    return FILTER_FNS.get(filter_type, "includes_string")


def form_widget_type(type_tag: str, affordance: dict[str, Any]) -> str:
    """Explicit edit_widget wins, otherwise the type tag decides."""
    if affordance.get("edit_widget"):
        return affordance["edit_widget"]
    return FORM_WIDGETS.get(type_tag, "text")


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass
class ColumnMeta:
    type_tag: str
    filter_type: Any = False
    editable: bool = False
    inline_editable: bool = False
    display_format: str | None = None
    badge: dict[str, str] | None = None
    copyable: bool | None = None
    truncate: int | None = None
    tooltip: bool | None = None
    enum_values: list[Any] | None = None
    numeric_bounds: dict[str, Any] | None = None
    pinned: Any = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "type_tag": self.type_tag,
                "filter_type": self.filter_type,
                "editable": self.editable,
                "inline_editable": self.inline_editable,
                "display_format": self.display_format,
                "badge": self.badge,
                "copyable": self.copyable,
                "truncate": self.truncate,
                "tooltip": self.tooltip,
                "enum_values": self.enum_values,
                "numeric_bounds": self.numeric_bounds,
                "pinned": self.pinned,
            }
        )


@dataclass
class ColumnConfig:
    """One table column. Data columns use the field key as id."""

    id: str
    header: str
    meta: ColumnMeta
    accessor_key: str | None = None
    enable_sorting: bool = False
    enable_column_filter: bool = False
    enable_global_filter: bool = False
    enable_grouping: bool = False
    enable_hiding: bool = False
    enable_resizing: bool = False
    size: int | None = None
    min_size: int | None = None
    max_size: int | None = None
    sorting_fn: str | None = None
    sort_desc_first: bool | None = None
    filter_fn: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = drop_none(
            {
                "id": self.id,
                "header": self.header,
                "accessor_key": self.accessor_key,
                "enable_sorting": self.enable_sorting,
                "enable_column_filter": self.enable_column_filter,
                "enable_global_filter": self.enable_global_filter,
                "enable_grouping": self.enable_grouping,
                "enable_hiding": self.enable_hiding,
                "enable_resizing": self.enable_resizing,
                "size": self.size,
                "min_size": self.min_size,
                "max_size": self.max_size,
                "sorting_fn": self.sorting_fn,
                "sort_desc_first": self.sort_desc_first,
                "filter_fn": self.filter_fn,
            }
        )
        d["meta"] = self.meta.to_dict()
        return d


@dataclass
class FormFieldConfig:
    name: str
    label: str
    type: str
    required: bool
    disabled: bool
    hidden: bool
    order: int | float
    type_tag: str
    placeholder: str | None = None
    help_text: str | None = None
    default_value: Any = None
    options: list[Option] | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "name": self.name,
                "label": self.label,
                "type": self.type,
                "required": self.required,
                "disabled": self.disabled,
                "hidden": self.hidden,
                "placeholder": self.placeholder,
                "help_text": self.help_text,
                "default_value": self.default_value,
                "options": [o.to_dict() for o in self.options] if self.options is not None else None,
                "order": self.order,
                "type_tag": self.type_tag,
            }
        )


@dataclass
class FilterFieldConfig:
    name: str
    label: str
    filter_type: str
    type_tag: str
    options: list[Option] | None = None
    bounds: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "name": self.name,
                "label": self.label,
                "filter_type": self.filter_type,
                "options": [o.to_dict() for o in self.options] if self.options is not None else None,
                "bounds": self.bounds,
                "type_tag": self.type_tag,
            }
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def to_column_defs(collection: CollectionDefinition) -> list[ColumnConfig]:
    """
    Selection column (if selectable), one column per visible field in
    `order`, then an actions column when item-scoped operations exist.
    """
    columns: list[ColumnConfig] = []

    if collection.affordances.get("selectable"):
        columns.append(_display_column("select", SELECT_COLUMN_SIZE))

    for key in collection.get_visible_fields():
        node = collection.schema.fields.get(key)
        if node is None:
            continue
        columns.append(_data_column(key, collection.field_affordances[key], node))

    item_ops = collection.get_operations("item")
    if item_ops:
        size = ACTIONS_COLUMN_BASE_SIZE + (len(item_ops) - 1) * ACTIONS_COLUMN_STEP
        columns.append(_display_column("actions", size))

    return columns


def to_form_config(collection: CollectionDefinition, mode: str = "create") -> list[FormFieldConfig]:
    """
    Form fields for `mode` ('create' or 'edit'), schema declaration order
    unless `order` says otherwise.

    create: skips non-editable fields unless required_on_create.
    edit:   skips non-readable, non-editable and immutable_after_create.
    Both skip hidden fields.
    """
    fields: list[FormFieldConfig] = []
    counter = 0

    for key, node in collection.schema.fields.items():
        fa = collection.field_affordances[key]

        if not _in_form(fa, mode):
            continue

        order = fa.get("order")
        if order is None:
            order = counter
            counter += 1

        required_key = "required_on_create" if mode == "create" else "required_on_update"
        members = enum_values(node)

        fields.append(
            FormFieldConfig(
                name=key,
                label=fa["title"],
                type=form_widget_type(fa["type_tag"], fa),
                required=bool(fa.get(required_key, False)),
                disabled=fa.get("editable") is False,
                hidden=bool(fa.get("hidden", False)),
                order=order,
                type_tag=fa["type_tag"],
                placeholder=fa.get("edit_placeholder"),
                help_text=fa.get("edit_help") or fa.get("description"),
                default_value=copy.deepcopy(default_value(node)),
                options=_options(members) if members is not None else None,
            )
        )

    fields.sort(key=lambda f: f.order)
    return fields


def to_filter_config(collection: CollectionDefinition) -> list[FilterFieldConfig]:
    """
    One entry per filterable field. Options only for select / multi_select,
    bounds only for range.
    """
    filters: list[FilterFieldConfig] = []

    for key, fa in collection.get_filterable_fields():
        node = collection.schema.fields.get(key)
        if node is None:
            continue

        filterable = fa.get("filterable")
        filter_type = filterable if isinstance(filterable, str) else "search"

        options = None
        members = enum_values(node)
        if members is not None and filter_type in ("select", "multi_select"):
            options = _options(members)

        bounds = numeric_bounds(node) if filter_type == "range" else None

        filters.append(
            FilterFieldConfig(
                name=key,
                label=fa.get("title") or key,
                filter_type=filter_type,
                type_tag=fa["type_tag"],
                options=options,
                bounds=bounds,
            )
        )

    return filters


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _display_column(column_id: str, size: int) -> ColumnConfig:
    return ColumnConfig(
        id=column_id,
        header="",
        size=size,
        meta=ColumnMeta(type_tag="display"),
    )


def _data_column(key: str, fa: dict[str, Any], node: Any) -> ColumnConfig:
    type_tag = fa["type_tag"]
    filterable = fa.get("filterable", False)
    bounds = numeric_bounds(node)

    return ColumnConfig(
        id=key,
        header=fa["title"],
        accessor_key=key,
        enable_sorting=is_sortable(fa),
        enable_column_filter=is_filterable(fa),
        enable_global_filter=bool(fa.get("searchable", False)),
        enable_grouping=bool(fa.get("groupable", False)),
        enable_hiding=not fa.get("hidden"),
        enable_resizing=fa.get("resizable", True) is not False,
        size=fa.get("column_width"),
        min_size=fa.get("min_width"),
        max_size=fa.get("max_width"),
        sorting_fn=sorting_fn_name(type_tag),
        sort_desc_first=fa.get("sortable") == "desc",
        filter_fn=filter_fn_name(filterable) if filterable else None,
        meta=ColumnMeta(
            type_tag=type_tag,
            filter_type=filterable if filterable is not None else False,
            editable=bool(fa.get("editable", False)),
            inline_editable=bool(fa.get("inline_editable", False)),
            display_format=fa.get("display_format"),
            badge=copy.deepcopy(fa.get("badge")),
            copyable=fa.get("copyable"),
            truncate=fa.get("truncate"),
            tooltip=fa.get("tooltip"),
            enum_values=enum_values(node),
            numeric_bounds=bounds or None,
            pinned=fa.get("pinned"),
        ),
    )


def _in_form(fa: dict[str, Any], mode: str) -> bool:
    if fa.get("hidden"):
        return False
    if mode == "edit":
        if fa.get("readable") is False:
            return False
        if fa.get("editable") is False:
            return False
        if fa.get("immutable_after_create"):
            return False
        return True
    if fa.get("editable") is False and not fa.get("required_on_create"):
        return False
    return True


def _options(members: list[Any]) -> list[Option]:
    return [Option(label=option_label(value), value=value) for value in members]
