"""
Affordance Kernel — Codegen

Materializes a resolved collection as Python source: a module exporting a
CollectionConfig dict that, passed back to define_collection(schema, config),
reproduces the same affordances.

Two modes:
  full       every defined property of every field, canonical order first
  diff_only  only properties that differ from pure inference (layers 1-3),
             so the file layers on top of inference instead of replacing it

Collection affordances and operations are always emitted in full.

Output is a pure function of (collection, options). Keys render in their
iteration order, so the same input always produces byte-identical text.
"""

from __future__ import annotations

import json
import keyword
from typing import Any

import chevron

from affordance.config import settings
from affordance.kernel.collection import CollectionDefinition
from affordance.kernel.inference import infer_baseline
from affordance.kernel.types import (
    COMPUTED_PROPS,
    FIELD_PROP_ORDER,
    CodegenOptions,
    drop_none,
)

# Triple braces everywhere: the module body is Python, not HTML.
MODULE_TEMPLATE = '''{{#header}}"""
Generated collection configuration.

Resolved affordances for fields:
    {{{field_names}}}

Usage:
    collection = define_collection(YourModel, {{{export_name}}})
"""

{{/header}}{{#imports}}from {{{import_from}}} import CollectionConfig

{{/imports}}{{{export_name}}}{{#imports}}: CollectionConfig{{/imports}} = {{{body}}}
'''

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def to_code(collection: CollectionDefinition, options: CodegenOptions | None = None) -> str:
    """
    Generate Python source capturing a collection's configuration.

        code = to_code(products)
        code = to_code(products, CodegenOptions(diff_only=True, header=False))
    """
    opts = options or CodegenOptions()
    indent = opts.indent if opts.indent is not None else settings.AFFORDANCE_CODEGEN_INDENT
    width = opts.inline_width if opts.inline_width is not None else settings.AFFORDANCE_INLINE_WIDTH
    export_name = opts.export_name or settings.AFFORDANCE_EXPORT_NAME
    if not export_name.isidentifier() or keyword.iskeyword(export_name):
        raise ValueError(f"export_name must be a valid Python identifier, got {export_name!r}")

    config = build_config(collection, diff_only=opts.diff_only)
    body = serialize(config, depth=0, indent=indent, width=width)

    context: dict[str, Any] = {
        "export_name": export_name,
        "body": body,
        "header": {"field_names": ", ".join(collection.field_affordances)} if opts.header else False,
        "imports": {"import_from": opts.import_from} if opts.imports else False,
    }
    return chevron.render(MODULE_TEMPLATE, context)


def build_config(collection: CollectionDefinition, diff_only: bool = False) -> dict[str, Any]:
    """The CollectionConfig dict that to_code serializes."""
    config: dict[str, Any] = {
        "id_field": collection.id_field,
        "label_field": collection.label_field,
    }

    affordances = drop_none(collection.affordances)
    if affordances:
        config["affordances"] = affordances

    fields = build_fields(collection, diff_only=diff_only)
    if fields:
        config["fields"] = fields

    if collection.operations:
        config["operations"] = [op.to_dict() for op in collection.operations]

    return config


def build_fields(collection: CollectionDefinition, diff_only: bool = False) -> dict[str, dict[str, Any]]:
    result: dict[str, dict[str, Any]] = {}

    for key, fa in collection.field_affordances.items():
        if diff_only:
            node = collection.schema.fields.get(key)
            if node is None:
                continue
            baseline = infer_baseline(key, node)
            props = {
                prop: value
                for prop, value in _ordered_props(fa)
                if not values_equal(value, baseline.get(prop))
            }
        else:
            props = dict(_ordered_props(fa))

        if props:
            result[key] = props

    return result


def values_equal(a: Any, b: Any) -> bool:
    """
    Scalars by value (bools never equal numbers), containers by their JSON
    rendering.
    """
    if isinstance(a, (dict, list, tuple)) or isinstance(b, (dict, list, tuple)):
        return _json(a) == _json(b)
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b
    return a == b


# ---------------------------------------------------------------------------
# Serialization: Python values -> Python source text
# ---------------------------------------------------------------------------


def serialize(value: Any, depth: int = 0, indent: int = 4, width: int = 60) -> str:
    """
    Render a value as a Python literal.

    Containers whose one-line form fits in `width` characters stay inline;
    longer ones put one entry per line with a trailing comma, indented by
    (depth + 1) * indent.
    """
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, dict):
        return _serialize_mapping(value, depth, indent, width)
    if isinstance(value, tuple):
        return _serialize_sequence(list(value), depth, indent, width, "(", ")", trailing_single=True)
    if isinstance(value, list):
        return _serialize_sequence(value, depth, indent, width, "[", "]")
    if isinstance(value, (set, frozenset)):
        return _serialize_sequence(sorted(value, key=repr), depth, indent, width, "[", "]")
    return quote(str(value))


def quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f"'{escaped}'"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ordered_props(fa: dict[str, Any]) -> list[tuple[str, Any]]:
    """Canonical properties first, then extras; computed keys and None dropped."""
    props = [(prop, fa[prop]) for prop in FIELD_PROP_ORDER if fa.get(prop) is not None]
    props.extend(
        (prop, value)
        for prop, value in fa.items()
        if value is not None and prop not in COMPUTED_PROPS and prop not in FIELD_PROP_ORDER
    )
    return props


def _serialize_sequence(
    items: list[Any],
    depth: int,
    indent: int,
    width: int,
    open_: str,
    close: str,
    trailing_single: bool = False,
) -> str:
    if not items:
        return open_ + close

    rendered = [serialize(item, depth + 1, indent, width) for item in items]

    one_line = ", ".join(rendered)
    if trailing_single and len(rendered) == 1:
        one_line += ","
    one_line = f"{open_}{one_line}{close}"
    if len(one_line) <= width and "\n" not in one_line:
        return one_line

    pad = " " * ((depth + 1) * indent)
    close_pad = " " * (depth * indent)
    lines = [f"{pad}{item}," for item in rendered]
    return open_ + "\n" + "\n".join(lines) + "\n" + close_pad + close


def _serialize_mapping(mapping: dict[Any, Any], depth: int, indent: int, width: int) -> str:
    if not mapping:
        return "{}"

    # Keys go through serialize too: True, 1 and None must stay literals.
    pairs = [
        (serialize(k, depth + 1, indent, width), serialize(v, depth + 1, indent, width))
        for k, v in mapping.items()
    ]

    one_line = "{" + ", ".join(f"{k}: {v}" for k, v in pairs) + "}"
    if len(one_line) <= width and "\n" not in one_line:
        return one_line

    pad = " " * ((depth + 1) * indent)
    close_pad = " " * (depth * indent)
    lines = [f"{pad}{k}: {v}," for k, v in pairs]
    return "{\n" + "\n".join(lines) + "\n" + close_pad + "}"


def _json(value: Any) -> str:
    return json.dumps(value, default=str)
