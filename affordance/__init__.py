"""
Collection affordances: infer sort / filter / search / edit capabilities
and display hints from a data schema, then project them into table, form,
filter and state descriptors and deterministic generated config.
"""

from affordance.kernel import (
    CollectionDefinition,
    create_collection_store,
    define_collection,
    generate_and_write,
    to_code,
    to_column_defs,
    to_filter_config,
    to_form_config,
    write_if_changed,
)
from affordance.kernel.schema import (
    ArrayNode,
    BooleanNode,
    Check,
    DateNode,
    EnumNode,
    NumberNode,
    ObjectNode,
    StringNode,
    UnknownNode,
    WrapperNode,
    nullable,
    obj,
    optional,
    with_default,
)
from affordance.kernel.types import CodegenOptions, CollectionConfig, OperationDefinition, WriteResult

__all__ = [
    "define_collection",
    "CollectionDefinition",
    "CollectionConfig",
    "OperationDefinition",
    "to_column_defs",
    "to_form_config",
    "to_filter_config",
    "create_collection_store",
    "to_code",
    "CodegenOptions",
    "write_if_changed",
    "generate_and_write",
    "WriteResult",
    "StringNode",
    "NumberNode",
    "BooleanNode",
    "EnumNode",
    "DateNode",
    "ArrayNode",
    "ObjectNode",
    "UnknownNode",
    "WrapperNode",
    "Check",
    "obj",
    "optional",
    "nullable",
    "with_default",
]
