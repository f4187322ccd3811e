"""
Affordance Kernel — Identity Detector

Picks the identifier field and the human-readable label field of a
collection from naming conventions and resolved affordances.
"""

from __future__ import annotations

import re
from typing import Any

from affordance.kernel.schema import ObjectNode

ID_FIELD_NAMES: tuple[str, ...] = ("id", "_id", "uuid", "key")

LABEL_FIELD_NAMES: tuple[str, ...] = (
    "name",
    "title",
    "label",
    "displayName",
    "display_name",
    "username",
)

_ID_SUFFIX = re.compile(r"[iI]d$")


def detect_id_field(schema: ObjectNode) -> str:
    """
    Exact 'id' / '_id' / 'uuid' / 'key' first, then the first field whose
    name ends in an identifier suffix, then the first declared field.
    """
    keys = list(schema.fields)

    for name in ID_FIELD_NAMES:
        if name in schema.fields:
            return name

    for key in keys:
        if _ID_SUFFIX.search(key) or key.endswith("_id"):
            return key

    return keys[0] if keys else "id"


def detect_label_field(schema: ObjectNode, field_affordances: dict[str, dict[str, Any]]) -> str:
    """
    A field flagged summary_field wins. Then the common label names, then
    the first editable string field, then the first declared field.
    """
    for key, affordance in field_affordances.items():
        if affordance.get("summary_field"):
            return key

    for name in LABEL_FIELD_NAMES:
        if name in field_affordances:
            return name

    for key, affordance in field_affordances.items():
        if affordance.get("type_tag") == "string" and affordance.get("editable") is not False:
            return key

    keys = list(schema.fields) or list(field_affordances)
    return keys[0] if keys else ""
