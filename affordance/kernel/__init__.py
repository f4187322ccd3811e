"""
Affordance Kernel — the pure engine.

Components, leaves first:
  introspect   — unwrap wrapper chains, read enum members / bounds / checks
  inference    — four-layer field affordance resolution
  identity     — id field and label field detection
  collection   — define_collection: the resolved CollectionDefinition
  generators   — column / form / filter descriptors
  store        — initial UI state, pure reducer, selectors
  codegen      — deterministic Python source for a collection's config
  writer       — async write-only-if-changed (the only IO)
"""

from affordance.kernel.codegen import build_config, serialize, to_code
from affordance.kernel.collection import (
    CollectionDefinition,
    define_collection,
    resolve_collection_affordances,
)
from affordance.kernel.generators import (
    ColumnConfig,
    FilterFieldConfig,
    FormFieldConfig,
    to_column_defs,
    to_filter_config,
    to_form_config,
)
from affordance.kernel.identity import detect_id_field, detect_label_field
from affordance.kernel.inference import (
    NAME_HEURISTICS,
    NameHeuristic,
    humanize_field_name,
    infer_baseline,
    infer_field_affordances,
)
from affordance.kernel.introspect import base_type, enum_values, has_check, numeric_bounds, unwrap
from affordance.kernel.pydantic_schema import schema_from_model
from affordance.kernel.store import (
    CollectionState,
    CollectionStore,
    UnknownAction,
    create_collection_store,
)
from affordance.kernel.writer import generate_and_write, write_if_changed

__all__ = [
    "base_type",
    "unwrap",
    "enum_values",
    "numeric_bounds",
    "has_check",
    "infer_field_affordances",
    "infer_baseline",
    "humanize_field_name",
    "NameHeuristic",
    "NAME_HEURISTICS",
    "detect_id_field",
    "detect_label_field",
    "define_collection",
    "resolve_collection_affordances",
    "CollectionDefinition",
    "schema_from_model",
    "to_column_defs",
    "to_form_config",
    "to_filter_config",
    "ColumnConfig",
    "FormFieldConfig",
    "FilterFieldConfig",
    "create_collection_store",
    "CollectionStore",
    "CollectionState",
    "UnknownAction",
    "to_code",
    "build_config",
    "serialize",
    "write_if_changed",
    "generate_and_write",
]
