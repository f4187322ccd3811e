"""
Affordance Kernel — Type Introspector

Reads the structural facts the resolver needs from a schema node:
terminal type tag, enum members, numeric bounds, named checks and
inline metadata. Wrapper chains (optional / nullable / default) are
walked through in every case.

Nothing here raises on a malformed node. Anything the introspector does
not recognise is reported as type `unknown`.
"""

from __future__ import annotations

import logging
from typing import Any

from affordance.kernel.schema import (
    NodeVisitor,
    UnknownNode,
    WrapperNode,
    is_node,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def unwrap(node: Any) -> Any:
    """
    Strip optional / nullable / default wrappers until a terminal node is
    reached. Unwrapping a terminal node returns it unchanged.
    """
    while isinstance(node, WrapperNode):
        node = node.inner
    return node


def base_type(node: Any) -> str:
    """Terminal type tag of a node, or 'unknown'."""
    return _BASE_TYPE.visit(node)


def enum_values(node: Any) -> list[Any] | None:
    """Enum members in declaration order, or None for non-enum nodes."""
    inner = unwrap(node)
    if is_node(inner) and inner.kind == "enum":
        return list(inner.members)
    return None


def numeric_bounds(node: Any) -> dict[str, Any]:
    """
    {min?, max?} for a node.

    Instance bounds (NumberNode.minimum / maximum) take precedence. Otherwise
    the first `min` check and the first `max` check win; later duplicates are
    ignored.
    """
    inner = unwrap(node)
    result: dict[str, Any] = {}
    if not is_node(inner):
        return result

    minimum = getattr(inner, "minimum", None)
    maximum = getattr(inner, "maximum", None)
    if minimum is not None:
        result["min"] = minimum
    if maximum is not None:
        result["max"] = maximum

    for check in getattr(inner, "checks", ()):
        if check.kind == "min" and "min" not in result:
            result["min"] = check.value
        if check.kind == "max" and "max" not in result:
            result["max"] = check.value

    return result


def has_check(node: Any, kind: str) -> bool:
    """True if the unwrapped node carries a check of `kind` or a matching format."""
    inner = unwrap(node)
    if not is_node(inner):
        return False
    if any(check.kind == kind for check in getattr(inner, "checks", ())):
        return True
    return getattr(inner, "format", None) == kind


def default_value(node: Any) -> Any:
    """Default carried by the outermost `default` wrapper, or None."""
    current = node
    while isinstance(current, WrapperNode):
        if current.wrapper == "default":
            return current.default
        current = current.inner
    return None


def get_meta(node: Any) -> dict[str, Any]:
    """
    Merged inline metadata along the wrapper chain. Outer wrappers override
    inner nodes, so meta attached last (outermost) wins.
    """
    chain: list[Any] = []
    current = node
    while is_node(current):
        chain.append(current)
        if not isinstance(current, WrapperNode):
            break
        current = current.inner

    merged: dict[str, Any] = {}
    for item in reversed(chain):
        meta = item.meta
        if isinstance(meta, dict):
            merged.update(meta)
    return merged


# ---------------------------------------------------------------------------
# Visitors
# ---------------------------------------------------------------------------


class _BaseTypeVisitor(NodeVisitor):
    def visit_string(self, node):
        return "string"

    def visit_number(self, node):
        return "number"

    def visit_boolean(self, node):
        return "boolean"

    def visit_enum(self, node):
        return "enum"

    def visit_date(self, node):
        return "date"

    def visit_array(self, node):
        return "array"

    def visit_object(self, node):
        return "object"

    def visit_wrapper(self, node):
        if node.inner is None:
            logger.warning("Wrapper node %r has no inner node, treating as unknown", node.kind)
            return "unknown"
        return self.visit(node.inner)

    def visit_unknown(self, node):
        if node is not None and not isinstance(node, UnknownNode):
            logger.warning("Unrecognised schema node %r, treating as unknown", type(node).__name__)
        return "unknown"


_BASE_TYPE = _BaseTypeVisitor()
