"""Maps schema type descriptors to Python type hints and normalization rules.

The same field maps differently depending on where it is used:

    Filter  - value types accepted in a `where` clause
    Result  - value types of a normalized record
    Fields  - selection flags (`bool`, or a nested selection for objects)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .ir import FILTER_SUFFIX, IRField, IRSchema
from .scalars import Normalization, ScalarRegistry

logger = logging.getLogger(__name__)

# Hint used for object shapes that have no generated declaration
OPAQUE_OBJECT = "dict[str, Any]"


class MappingContext(Enum):
    """Where a mapped type is going to be declared."""
    FILTER = "Filter"
    RESULT = "Result"
    FIELDS = "Fields"


class SchemaMappingError(Exception):
    """Raised when a type descriptor is not known to the schema."""

    def __init__(self, type_name: str, field_name: str | None = None):
        self.type_name = type_name
        self.field_name = field_name
        location = f" (field '{field_name}')" if field_name else ""
        super().__init__(f"Unrecognized type '{type_name}'{location}")


@dataclass(frozen=True)
class MappedType:
    """Result of mapping one field in one context.

    Attributes:
        type_name: Full Python hint, e.g. "list[int] | None"
        base_type: Element hint without list/optional wrapping
        normalization: How raw values are converted
        nested_structure: True for object references
        is_list: True when the field holds a list
        entity_ref: Entity whose generated declaration the hint refers to
        import_statement: Import the hint needs, or ""
    """
    type_name: str
    base_type: str
    normalization: Normalization
    nested_structure: bool = False
    is_list: bool = False
    entity_ref: str | None = None
    import_statement: str = ""


class TypeMapper:
    """Maps IR fields to Python types for generated entity modules."""

    def __init__(
        self,
        schema: IRSchema,
        scalars: ScalarRegistry | None = None,
        entity_names: Iterable[str] | None = None,
    ):
        """Initialize the mapper.

        Args:
            schema: Schema used to resolve type names
            scalars: Scalar handlers; defaults to the built-in registry
            entity_names: Entities that get generated declarations. Object
                references to anything else map to a plain dict.
        """
        self.schema = schema
        self.scalars = scalars or ScalarRegistry()
        if entity_names is None:
            entity_names = (spec.name for spec in schema.entities())
        self.entity_names = frozenset(entity_names)

    def map_field(self, field: IRField, context: MappingContext) -> MappedType:
        """Map a field's type descriptor for the given context."""
        mapped = self._map_named(field.type_name, context, field.name)

        if context is MappingContext.FIELDS:
            # A list of objects is selected the same way as a single object
            if not mapped.nested_structure:
                return MappedType("bool", "bool", mapped.normalization, is_list=field.is_list)
            return MappedType(
                mapped.base_type,
                mapped.base_type,
                mapped.normalization,
                nested_structure=True,
                is_list=field.is_list,
                entity_ref=mapped.entity_ref,
            )

        type_name = mapped.base_type
        if field.is_list:
            type_name = f"list[{type_name}]"
        if context is MappingContext.RESULT and field.is_optional:
            type_name = f"{type_name} | None"

        return MappedType(
            type_name,
            mapped.base_type,
            mapped.normalization,
            nested_structure=mapped.nested_structure,
            is_list=field.is_list,
            entity_ref=mapped.entity_ref,
            import_statement=mapped.import_statement,
        )

    def _map_named(self, type_name: str, context: MappingContext, field_name: str) -> MappedType:
        handler = self.scalars.get(type_name)
        if handler is not None:
            base = handler.python_type
            # Big numbers may also be given as their string form in filters
            if context is MappingContext.FILTER and handler.normalization in (
                Normalization.BIG_INT,
                Normalization.BIG_DECIMAL,
            ):
                base = f"{base} | str"
            return MappedType(
                base, base, handler.normalization, import_statement=handler.import_statement
            )

        if type_name in self.schema.scalars:
            logger.debug("No handler for scalar %s, passing through as str", type_name)
            return MappedType("str", "str", Normalization.PLAIN)

        if type_name in self.schema.enums:
            return MappedType("str", "str", Normalization.PLAIN)

        if type_name in self.schema.types or type_name in self.schema.interfaces:
            if type_name in self.entity_names:
                base = f"{type_name}{context.value}"
                return MappedType(base, base, Normalization.NESTED, True, entity_ref=type_name)
            return MappedType(OPAQUE_OBJECT, OPAQUE_OBJECT, Normalization.NESTED, True)

        if type_name in self.schema.inputs:
            entity_name = type_name.removesuffix(FILTER_SUFFIX)
            if type_name.endswith(FILTER_SUFFIX) and entity_name in self.entity_names:
                base = f"{entity_name}Filter"
                return MappedType(base, base, Normalization.NESTED, True, entity_ref=entity_name)
            return MappedType(OPAQUE_OBJECT, OPAQUE_OBJECT, Normalization.NESTED, True)

        raise SchemaMappingError(type_name, field_name)
