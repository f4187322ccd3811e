"""
Affordance Kernel — Schema Nodes

The structural schema the kernel reads. Each node is a frozen dataclass
with a `kind` discriminator; wrapper nodes (optional / nullable / default)
hold an `inner` node. Any node may carry an inline `meta` mapping of
affordance annotations.

NodeVisitor is the dispatch contract: one `visit_<kind>` method per kind,
plus `visit_unknown` for anything that is not a recognised node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Check:
    """A named validation on a node: email, url, uuid, min, max, regex, ..."""

    kind: str
    value: Any = None


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StringNode:
    checks: tuple[Check, ...] = ()
    format: str | None = None
    meta: dict[str, Any] | None = None
    kind: str = field(default="string", init=False)


@dataclass(frozen=True)
class NumberNode:
    minimum: float | None = None
    maximum: float | None = None
    checks: tuple[Check, ...] = ()
    integer: bool = False
    meta: dict[str, Any] | None = None
    kind: str = field(default="number", init=False)


@dataclass(frozen=True)
class BooleanNode:
    meta: dict[str, Any] | None = None
    kind: str = field(default="boolean", init=False)


@dataclass(frozen=True)
class EnumNode:
    members: tuple[Any, ...] = ()
    meta: dict[str, Any] | None = None
    kind: str = field(default="enum", init=False)


@dataclass(frozen=True)
class DateNode:
    meta: dict[str, Any] | None = None
    kind: str = field(default="date", init=False)


@dataclass(frozen=True)
class ArrayNode:
    item: Node | None = None
    meta: dict[str, Any] | None = None
    kind: str = field(default="array", init=False)


@dataclass(frozen=True)
class ObjectNode:
    """
    An object with named fields. Field order is declaration order and drives
    column, form and codegen ordering downstream.
    """

    fields: dict[str, Node] = field(default_factory=dict)
    meta: dict[str, Any] | None = None
    kind: str = field(default="object", init=False)


@dataclass(frozen=True)
class UnknownNode:
    """A field whose type could not be mapped. `source` names what was seen."""

    source: str = ""
    meta: dict[str, Any] | None = None
    kind: str = field(default="unknown", init=False)


@dataclass(frozen=True)
class WrapperNode:
    """optional / nullable / default around an inner node."""

    inner: Node
    wrapper: str = "optional"
    default: Any = None
    meta: dict[str, Any] | None = None

    @property
    def kind(self) -> str:
        return self.wrapper


Node = Union[
    StringNode,
    NumberNode,
    BooleanNode,
    EnumNode,
    DateNode,
    ArrayNode,
    ObjectNode,
    UnknownNode,
    WrapperNode,
]

NODE_TYPES: tuple[type, ...] = (
    StringNode,
    NumberNode,
    BooleanNode,
    EnumNode,
    DateNode,
    ArrayNode,
    ObjectNode,
    UnknownNode,
    WrapperNode,
)


def is_node(value: Any) -> bool:
    return isinstance(value, NODE_TYPES)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def optional(inner: Node, meta: dict[str, Any] | None = None) -> WrapperNode:
    return WrapperNode(inner=inner, wrapper="optional", meta=meta)


def nullable(inner: Node, meta: dict[str, Any] | None = None) -> WrapperNode:
    return WrapperNode(inner=inner, wrapper="nullable", meta=meta)


def with_default(inner: Node, default: Any, meta: dict[str, Any] | None = None) -> WrapperNode:
    return WrapperNode(inner=inner, wrapper="default", default=default, meta=meta)


def obj(**fields: Node) -> ObjectNode:
    """Shorthand: obj(id=StringNode(), price=NumberNode())."""
    return ObjectNode(fields=dict(fields))


# ---------------------------------------------------------------------------
# Visitor
# ---------------------------------------------------------------------------


class NodeVisitor:
    """
    Dispatch on node kind. Subclasses override the visit_<kind> methods they
    care about; the defaults route everything to generic_visit.
    """

    def visit(self, node: Any) -> Any:
        if not is_node(node):
            return self.visit_unknown(node)
        method = getattr(self, f"visit_{node.kind}", None)
        if method is None:
            return self.visit_unknown(node)
        return method(node)

    def generic_visit(self, node: Any) -> Any:
        return None

    def visit_string(self, node: StringNode) -> Any:
        return self.generic_visit(node)

    def visit_number(self, node: NumberNode) -> Any:
        return self.generic_visit(node)

    def visit_boolean(self, node: BooleanNode) -> Any:
        return self.generic_visit(node)

    def visit_enum(self, node: EnumNode) -> Any:
        return self.generic_visit(node)

    def visit_date(self, node: DateNode) -> Any:
        return self.generic_visit(node)

    def visit_array(self, node: ArrayNode) -> Any:
        return self.generic_visit(node)

    def visit_object(self, node: ObjectNode) -> Any:
        return self.generic_visit(node)

    def visit_optional(self, node: WrapperNode) -> Any:
        return self.visit_wrapper(node)

    def visit_nullable(self, node: WrapperNode) -> Any:
        return self.visit_wrapper(node)

    def visit_default(self, node: WrapperNode) -> Any:
        return self.visit_wrapper(node)

    def visit_wrapper(self, node: WrapperNode) -> Any:
        return self.visit(node.inner)

    def visit_unknown(self, node: Any) -> Any:
        return self.generic_visit(node)
