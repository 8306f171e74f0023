"""Core modules for subgraph client generation."""

from .auth import (
    ApiKeyAuth,
    Auth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
)
from .executor import GraphQLExecutor, QueryError, first_result
from .fetch_generator import FetchGenerator
from .generator import CodeGenerator, GeneratorConfig
from .hooks import (
    AddHeaderHook,
    FilterEntitiesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .introspection import fetch_schema_sdl
from .ir import (
    EntitySpec,
    IRArgument,
    IREnum,
    IREnumValue,
    IRField,
    IRInterface,
    IROperation,
    IRScalar,
    IRSchema,
    IRType,
)
from .options import MAX_PAGE, MultiQueryOptions, SingleQueryOptions
from .parser import SchemaParser
from .query_builder import QueryBuilder, build_query
from .scalars import (
    BigDecimalHandler,
    BigIntHandler,
    Normalization,
    PassThroughHandler,
    ScalarHandler,
    ScalarRegistry,
    normalize_value,
    to_big_decimal,
    to_big_int,
)
from .type_mapper import MappedType, MappingContext, SchemaMappingError, TypeMapper
from .types_emitter import TypesEmitter

__all__ = [
    # Auth
    "Auth",
    "ApiKeyAuth",
    "BearerAuth",
    "HeaderAuth",
    "NoAuth",
    # Options
    "MAX_PAGE",
    "MultiQueryOptions",
    "SingleQueryOptions",
    # Scalars
    "Normalization",
    "ScalarHandler",
    "ScalarRegistry",
    "BigIntHandler",
    "BigDecimalHandler",
    "PassThroughHandler",
    "normalize_value",
    "to_big_int",
    "to_big_decimal",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterEntitiesHook",
    "HookRunner",
    # IR types
    "EntitySpec",
    "IRArgument",
    "IREnum",
    "IREnumValue",
    "IRField",
    "IRInterface",
    "IROperation",
    "IRScalar",
    "IRSchema",
    "IRType",
    # Schema loading
    "SchemaParser",
    "fetch_schema_sdl",
    # Type mapping
    "MappedType",
    "MappingContext",
    "SchemaMappingError",
    "TypeMapper",
    "TypesEmitter",
    # Query Builder
    "QueryBuilder",
    "build_query",
    # Executor
    "GraphQLExecutor",
    "QueryError",
    "first_result",
    # Generation
    "FetchGenerator",
    "CodeGenerator",
    "GeneratorConfig",
]
