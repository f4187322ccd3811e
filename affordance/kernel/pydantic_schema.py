"""
Affordance Kernel — Pydantic Adapter

Turns a Pydantic model class into an ObjectNode tree so collections can be
declared straight from the models an application already has.

    class Product(BaseModel):
        id: UUID
        name: str = Field(json_schema_extra={"inline_editable": True})
        price: Annotated[float, Field(ge=0)]
        status: Literal["draft", "active", "archived"] = "draft"

    schema = schema_from_model(Product)

Mapping:
  str -> string, EmailStr -> string+email, AnyUrl/HttpUrl -> string+url,
  UUID -> string+uuid, int/float/Decimal -> number, bool -> boolean,
  Literal/Enum -> enum, date/datetime -> date, list/set/tuple -> array,
  dict/nested model -> object, Optional[X] -> nullable, defaulted -> default.

Field title / description and a dict json_schema_extra become inline meta.
Annotations that do not map degrade to UnknownNode with a warning.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import logging
import types
import typing
import uuid
from typing import Any

from pydantic import AnyUrl, BaseModel, EmailStr
from pydantic.fields import FieldInfo
from pydantic.networks import UrlConstraints

from affordance.kernel.schema import (
    ArrayNode,
    BooleanNode,
    Check,
    DateNode,
    EnumNode,
    Node,
    NumberNode,
    ObjectNode,
    StringNode,
    UnknownNode,
    WrapperNode,
)

logger = logging.getLogger(__name__)

_ARRAY_ORIGINS = (list, set, frozenset, tuple)
_OBJECT_ORIGINS = (dict,)
_UNION_ORIGINS = (typing.Union, types.UnionType)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def is_model_class(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, BaseModel)


def schema_from_model(model: type[BaseModel], _parents: frozenset[type] = frozenset()) -> ObjectNode:
    """
    Build an ObjectNode from a model class, fields in declaration order.

    A model met again inside its own fields (directly or through other
    models) maps to an empty ObjectNode.
    """
    parents = _parents | {model}
    fields: dict[str, Node] = {}
    for name, info in model.model_fields.items():
        fields[name] = node_from_field(info, parents)
    return ObjectNode(fields=fields)


def node_from_field(info: FieldInfo, _parents: frozenset[type] = frozenset()) -> Node:
    """One model field -> node, with wrappers and meta attached."""
    node = node_from_annotation(info.annotation, info.metadata, _parents)

    if not info.is_required():
        default = info.default if info.default_factory is None else None
        node = WrapperNode(inner=node, wrapper="default", default=default)

    meta = _field_meta(info)
    if meta:
        node = dataclasses.replace(node, meta={**(node.meta or {}), **meta})
    return node


def node_from_annotation(
    annotation: Any,
    metadata: typing.Iterable[Any] = (),
    _parents: frozenset[type] = frozenset(),
) -> Node:
    """
    Map a type annotation to a node. `metadata` carries Field / Annotated
    constraints (Ge, Le, pattern, url constraints, ...).
    """
    metadata = list(metadata)
    origin = typing.get_origin(annotation)

    if origin is typing.Annotated:
        inner, *extra = typing.get_args(annotation)
        return node_from_annotation(inner, [*metadata, *extra], _parents)

    if origin in _UNION_ORIGINS:
        args = typing.get_args(annotation)
        members = [a for a in args if a is not type(None)]
        if len(members) == 1:
            inner = node_from_annotation(members[0], metadata, _parents)
            if len(members) < len(args):
                return WrapperNode(inner=inner, wrapper="nullable")
            return inner
        return _unknown(annotation, "union of several types")

    if origin is typing.Literal:
        return EnumNode(members=tuple(typing.get_args(annotation)))

    if origin in _ARRAY_ORIGINS or annotation in _ARRAY_ORIGINS:
        args = [a for a in typing.get_args(annotation) if a is not Ellipsis]
        item = node_from_annotation(args[0], (), _parents) if args else None
        return ArrayNode(item=item)

    if origin in _OBJECT_ORIGINS or annotation in _OBJECT_ORIGINS:
        return ObjectNode()

    return _node_from_class(annotation, metadata, _parents)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _node_from_class(annotation: Any, metadata: list[Any], parents: frozenset[type]) -> Node:
    if not isinstance(annotation, type):
        return _unknown(annotation, "not a class")

    # Enum before str/int: str-valued enums subclass str.
    if issubclass(annotation, enum.Enum):
        return EnumNode(members=tuple(member.value for member in annotation))
    if issubclass(annotation, BaseModel):
        if annotation in parents:
            logger.debug("Recursive reference to %s, not expanding", annotation.__name__)
            return ObjectNode()
        return schema_from_model(annotation, parents)
    if annotation is bool:
        return BooleanNode()
    if issubclass(annotation, int):
        return NumberNode(checks=_constraint_checks(metadata), integer=True)
    if issubclass(annotation, (float, decimal.Decimal)):
        return NumberNode(checks=_constraint_checks(metadata))
    if issubclass(annotation, (datetime.date, datetime.datetime)):
        return DateNode()
    if annotation is EmailStr:
        return StringNode(checks=(Check("email"),))
    if issubclass(annotation, AnyUrl) or _has_url_constraint(metadata):
        return StringNode(checks=(Check("url"),))
    if issubclass(annotation, uuid.UUID):
        return StringNode(checks=(Check("uuid"),))
    if issubclass(annotation, str):
        return StringNode(checks=_constraint_checks(metadata))

    return _unknown(annotation, "unsupported class")


def _constraint_checks(metadata: list[Any]) -> tuple[Check, ...]:
    """Ge/Gt -> min, Le/Lt -> max, pattern -> regex, in declaration order."""
    checks: list[Check] = []
    for item in metadata:
        for attr, kind in (("ge", "min"), ("gt", "min"), ("le", "max"), ("lt", "max")):
            value = getattr(item, attr, None)
            if value is not None:
                checks.append(Check(kind, value))
        pattern = getattr(item, "pattern", None)
        if isinstance(pattern, str):
            checks.append(Check("regex", pattern))
    return tuple(checks)


def _has_url_constraint(metadata: list[Any]) -> bool:
    return any(isinstance(item, UrlConstraints) for item in metadata)


def _field_meta(info: FieldInfo) -> dict[str, Any]:
    meta: dict[str, Any] = {}
    if isinstance(info.json_schema_extra, dict):
        meta.update(info.json_schema_extra)
    if info.title is not None and "title" not in meta:
        meta["title"] = info.title
    if info.description is not None and "description" not in meta:
        meta["description"] = info.description
    return meta


def _unknown(annotation: Any, reason: str) -> UnknownNode:
    source = getattr(annotation, "__name__", None) or repr(annotation)
    logger.warning("Cannot map annotation %s (%s), treating as unknown", source, reason)
    return UnknownNode(source=source)
