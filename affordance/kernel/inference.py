"""
Affordance Kernel — Affordance Resolver

Infers one field affordance record per schema field. Layers, later
overriding earlier:

  1. Type defaults        terminal type tag -> baseline record
  2. Validation refinement  email / url / uuid checks on string nodes
  3. Name heuristics      ordered regex table matched against the field key
  4. Inline metadata      affordance keys carried on the node's meta

Caller overrides (CollectionConfig.fields) are merged on top of layer 4 by
the collection resolver with the same shallow, property-wins semantics.

Every function here returns a fresh dict. Nothing is cached and no table
entry is ever handed out by reference.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from typing import Any

from affordance.kernel.introspect import base_type, get_meta, has_check
from affordance.kernel.types import FIELD_PROP_ORDER

# ---------------------------------------------------------------------------
# Layer 1: type defaults
# ---------------------------------------------------------------------------

TYPE_DEFAULTS: dict[str, dict[str, Any]] = {
    "string": {
        "sortable": "both",
        "filterable": "search",
        "searchable": True,
        "groupable": False,
        "editable": True,
        "visible": True,
    },
    "number": {
        "sortable": "both",
        "filterable": "range",
        "searchable": False,
        "groupable": False,
        "editable": True,
        "visible": True,
        "aggregatable": ["sum", "avg", "min", "max"],
    },
    "boolean": {
        "sortable": "both",
        "filterable": "boolean",
        "searchable": False,
        "groupable": True,
        "editable": True,
        "visible": True,
    },
    "enum": {
        "sortable": "both",
        "filterable": "select",
        "searchable": False,
        "groupable": True,
        "editable": True,
        "visible": True,
    },
    "date": {
        "sortable": "both",
        "filterable": "range",
        "searchable": False,
        "groupable": False,
        "editable": True,
        "visible": True,
    },
    "array": {
        "sortable": False,
        "filterable": "contains",
        "searchable": False,
        "groupable": False,
        "editable": True,
        "visible": True,
    },
    "object": {
        "sortable": False,
        "filterable": False,
        "searchable": False,
        "groupable": False,
        "editable": True,
        "visible": True,
        "detail_only": True,
    },
    "unknown": {
        "sortable": False,
        "filterable": False,
        "searchable": False,
        "groupable": False,
        "editable": False,
        "visible": True,
    },
}


def type_defaults(type_tag: str) -> dict[str, Any]:
    """Fresh copy of the baseline record for a type tag."""
    return copy.deepcopy(TYPE_DEFAULTS.get(type_tag, TYPE_DEFAULTS["unknown"]))


# ---------------------------------------------------------------------------
# Layer 2: validation refinement
# ---------------------------------------------------------------------------

# (check kinds, patch). Patches only narrow the type-default record.
VALIDATION_REFINEMENTS: tuple[tuple[tuple[str, ...], dict[str, Any]], ...] = (
    (("email",), {"edit_widget": "email", "filterable": "search"}),
    (("url", "uri"), {"edit_widget": "url", "searchable": False, "filterable": "exact"}),
    (("uuid", "ulid", "cuid"), {"editable": False, "filterable": "exact", "searchable": False}),
)


def refine_by_validations(node: Any, affordances: dict[str, Any]) -> dict[str, Any]:
    """Apply check-driven refinements. String nodes only."""
    refined = dict(affordances)
    if base_type(node) != "string":
        return refined

    for kinds, patch in VALIDATION_REFINEMENTS:
        if any(has_check(node, kind) for kind in kinds):
            refined.update(copy.deepcopy(patch))
    return refined


# ---------------------------------------------------------------------------
# Layer 3: name heuristics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NameHeuristic:
    """
    One rule in the name heuristic table.

    `patch` overwrites whatever earlier layers or heuristics set; `defaults`
    only fills keys that are still unset.
    """

    name: str
    pattern: re.Pattern
    patch: dict[str, Any] = field(default_factory=dict)
    defaults: dict[str, Any] = field(default_factory=dict)

    def matches(self, key: str) -> bool:
        return self.pattern.search(key) is not None

    def apply(self, affordances: dict[str, Any]) -> dict[str, Any]:
        result = dict(affordances)
        result.update(copy.deepcopy(self.patch))
        for prop, value in self.defaults.items():
            if result.get(prop) is None:
                result[prop] = copy.deepcopy(value)
        return result


_ID_PATCH = {"editable": False, "filterable": "exact", "searchable": False}

# Order matters: every matching entry applies, later entries win.
NAME_HEURISTICS: tuple[NameHeuristic, ...] = (
    NameHeuristic(
        "identifier",
        re.compile(r"^(id|_id|uuid|uid|key|pk)$", re.IGNORECASE),
        patch=_ID_PATCH,
    ),
    NameHeuristic(
        "identifier_suffix",
        re.compile(r"(_id|Id|ID|_key|Key)$"),
        patch=_ID_PATCH,
    ),
    NameHeuristic(
        "identifier_exact",
        re.compile(r"^id$"),
        patch={"visible": False},
    ),
    NameHeuristic(
        "created_at",
        re.compile(r"^(created_?at|creation_?date|date_?created|ctime)$", re.IGNORECASE),
        patch={"editable": False, "sortable": "both", "filterable": "range"},
    ),
    NameHeuristic(
        "updated_at",
        re.compile(r"^(updated_?at|modified_?at|last_?modified|mtime|changed_?at)$", re.IGNORECASE),
        patch={"editable": False, "visible": False, "sortable": "both"},
    ),
    NameHeuristic(
        "deleted_at",
        re.compile(r"^(deleted_?at|removed_?at)$", re.IGNORECASE),
        patch={"editable": False, "visible": False},
    ),
    NameHeuristic(
        "secret",
        re.compile(r"^(password|secret|token|api_?key|access_?key|private_?key|hash|salt)$", re.IGNORECASE),
        patch={
            "readable": False,
            "searchable": False,
            "sortable": False,
            "filterable": False,
            "visible": False,
        },
    ),
    NameHeuristic(
        "email",
        re.compile(r"^(email|e_?mail)$", re.IGNORECASE),
        patch={"filterable": "search", "searchable": True},
        defaults={"edit_widget": "email"},
    ),
    NameHeuristic(
        "name",
        re.compile(r"^(name|title|label|display_?name|full_?name|username)$", re.IGNORECASE),
        patch={"searchable": True, "summary_field": True, "sortable": "both"},
    ),
    NameHeuristic(
        "description",
        re.compile(r"^(description|summary|body|content|text|bio|about|notes)$", re.IGNORECASE),
        patch={"tooltip": True, "sortable": False},
        defaults={"edit_widget": "textarea", "truncate": 100},
    ),
    NameHeuristic(
        "image",
        re.compile(r"^(image|photo|avatar|thumbnail|picture|icon|logo)(_?url)?$", re.IGNORECASE),
        patch={"sortable": False, "filterable": False, "searchable": False},
    ),
    NameHeuristic(
        "status",
        re.compile(r"^(status|state|phase|stage)$", re.IGNORECASE),
        patch={"groupable": True, "filterable": "select"},
    ),
)


def matching_heuristics(
    key: str,
    heuristics: tuple[NameHeuristic, ...] = NAME_HEURISTICS,
) -> list[str]:
    """Names of the heuristics that fire for `key`, in application order."""
    return [h.name for h in heuristics if h.matches(key)]


def apply_name_heuristics(
    key: str,
    affordances: dict[str, Any],
    heuristics: tuple[NameHeuristic, ...] = NAME_HEURISTICS,
) -> dict[str, Any]:
    result = dict(affordances)
    for heuristic in heuristics:
        if heuristic.matches(key):
            result = heuristic.apply(result)
    return result


# ---------------------------------------------------------------------------
# Layer 4: inline metadata
# ---------------------------------------------------------------------------


def extract_affordances_from_meta(meta: dict[str, Any]) -> dict[str, Any]:
    """
    Pick affordance keys out of a node's inline meta.

    Known keys are taken directly, then a nested `affordances` mapping is
    merged over them. Plain `title` / `description` only fill in when the
    nested mapping did not set them.
    """
    result: dict[str, Any] = {}
    for prop in FIELD_PROP_ORDER:
        if prop in meta:
            result[prop] = copy.deepcopy(meta[prop])

    nested = meta.get("affordances")
    if isinstance(nested, dict):
        result.update(copy.deepcopy(nested))

    if meta.get("title") and not result.get("title"):
        result["title"] = meta["title"]
    if meta.get("description") and not result.get("description"):
        result["description"] = meta["description"]

    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def infer_baseline(key: str, node: Any) -> dict[str, Any]:
    """
    Layers 1-3 only, plus the humanized title. This is what inference alone
    produces for a field and is the comparison point for diff-mode codegen.
    """
    affordances = type_defaults(base_type(node))
    affordances = refine_by_validations(node, affordances)
    affordances = apply_name_heuristics(key, affordances)
    affordances["title"] = humanize_field_name(key)
    return affordances


def infer_field_affordances(key: str, node: Any) -> dict[str, Any]:
    """
    Infer a field's affordances from its schema node and key.

    Runs all four layers. The result always carries a non-empty `title`.
    """
    affordances = type_defaults(base_type(node))
    affordances = refine_by_validations(node, affordances)
    affordances = apply_name_heuristics(key, affordances)

    meta = get_meta(node)
    if meta:
        affordances.update(extract_affordances_from_meta(meta))

    if not affordances.get("title"):
        affordances["title"] = humanize_field_name(key)

    return affordances


def humanize_field_name(key: str) -> str:
    """
    camelCase / snake_case / kebab-case key -> title-cased label.

    >>> humanize_field_name("createdAt")
    'Created At'
    >>> humanize_field_name("first_name")
    'First Name'
    >>> humanize_field_name("ID")
    'ID'
    """
    text = re.sub(r"([a-z])([A-Z])", r"\1 \2", key)
    text = re.sub(r"[_-]+", " ", text)
    text = re.sub(r"\b\w", lambda m: m.group(0).upper(), text)
    text = text.strip()
    return text or key or "Field"
