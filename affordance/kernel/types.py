"""
Affordance Kernel — Shared Types

Constants, data classes and typed dicts used across introspection,
inference, generators, store and codegen. These are the contracts that
bind the kernel together.

Resolved field affordances and collection affordances are plain dicts
(they carry open-ended keys and are serialized by codegen). Everything
with a fixed shape is a dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypedDict

# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

OperationScope = Literal["item", "selection", "collection"]

# Canonical property order for a field affordance record. Codegen walks this
# order; meta extraction only picks up these keys.
FIELD_PROP_ORDER: tuple[str, ...] = (
    # display
    "title",
    "description",
    # query capabilities
    "sortable",
    "filterable",
    "searchable",
    "groupable",
    "aggregatable",
    # CRUD capabilities
    "readable",
    "editable",
    "inline_editable",
    "required_on_create",
    "required_on_update",
    "immutable_after_create",
    # visibility & layout
    "visible",
    "hidden",
    "detail_only",
    "summary_field",
    "column_width",
    "min_width",
    "max_width",
    "resizable",
    "pinned",
    "order",
    # display formatting
    "display_format",
    "badge",
    "copyable",
    "truncate",
    "tooltip",
    # edit widget
    "edit_widget",
    "edit_placeholder",
    "edit_help",
)

# Keys computed by the resolver, never part of a config override.
COMPUTED_PROPS: frozenset[str] = frozenset({"type_tag"})

# Priority used when a field has no explicit `order`.
DEFAULT_ORDER = 999


# ---------------------------------------------------------------------------
# Config shapes (what callers pass in, what codegen writes out)
# ---------------------------------------------------------------------------


class CollectionConfig(TypedDict, total=False):
    """Override object accepted by define_collection and emitted by codegen."""

    affordances: dict[str, Any]
    fields: dict[str, dict[str, Any]]
    operations: list[Any]
    id_field: str
    label_field: str


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OperationDefinition:
    """
    A custom action invokable on an item, a selection, or the whole collection.
    Declared explicitly; never inferred.
    """

    name: str
    label: str
    scope: OperationScope = "item"
    icon: str | None = None
    variant: str | None = None
    confirm: bool | dict[str, Any] | None = None
    keyboard_shortcut: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "label": self.label,
            "scope": self.scope,
        }
        if self.icon is not None:
            d["icon"] = self.icon
        if self.variant is not None:
            d["variant"] = self.variant
        if self.confirm is not None:
            d["confirm"] = self.confirm
        if self.keyboard_shortcut is not None:
            d["keyboard_shortcut"] = self.keyboard_shortcut
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> OperationDefinition:
        return cls(
            name=d["name"],
            label=d.get("label", d["name"]),
            scope=d.get("scope", "item"),
            icon=d.get("icon"),
            variant=d.get("variant"),
            confirm=d.get("confirm"),
            keyboard_shortcut=d.get("keyboard_shortcut"),
        )

    @classmethod
    def coerce(cls, value: OperationDefinition | dict[str, Any]) -> OperationDefinition:
        if isinstance(value, cls):
            return value
        return cls.from_dict(value)


@dataclass
class Option:
    """One choice in a select widget or select filter."""

    label: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": self.value}


@dataclass
class WriteResult:
    """Outcome of a conditional file write."""

    written: bool
    reason: Literal["created", "updated", "unchanged"]
    file_path: str


@dataclass
class CodegenOptions:
    """
    Options for to_code. Defaults for indent, inline width and export name
    come from affordance.config.settings when left as None.
    """

    header: bool = True
    imports: bool = True
    export_name: str | None = None
    indent: int | None = None
    diff_only: bool = False
    import_from: str = "affordance"
    inline_width: int | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def drop_none(d: dict[str, Any]) -> dict[str, Any]:
    """Shallow copy of d without None values."""
    return {k: v for k, v in d.items() if v is not None}


def option_label(value: Any) -> str:
    """Label for an enum member: first character upper-cased, rest untouched."""
    text = str(value)
    return text[:1].upper() + text[1:]


def field_order(affordance: dict[str, Any]) -> int | float:
    """Sort key for a resolved field affordance."""
    order = affordance.get("order")
    if isinstance(order, (int, float)) and not isinstance(order, bool):
        return order
    return DEFAULT_ORDER
