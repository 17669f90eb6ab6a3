"""Schema model and symbol table."""

from jsongenpy.schema.model import (
    BUILTIN_TYPE_NAMES,
    STRUCT_KEYWORD,
    Field,
    FieldType,
    SchemaModel,
    StructContainer,
    StructContainerBuilder,
)
from jsongenpy.schema.symbols import (
    DEFAULT_BUCKET_COUNT,
    DEFAULT_MAX_LOAD_FACTOR,
    SymbolTable,
    string_hash,
)

__all__ = [
    "BUILTIN_TYPE_NAMES",
    "DEFAULT_BUCKET_COUNT",
    "DEFAULT_MAX_LOAD_FACTOR",
    "STRUCT_KEYWORD",
    "Field",
    "FieldType",
    "SchemaModel",
    "StructContainer",
    "StructContainerBuilder",
    "SymbolTable",
    "string_hash",
]
