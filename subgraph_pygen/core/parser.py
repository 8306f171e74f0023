"""Subgraph schema parser using graphql-core.

Parses .graphql/.graphqls files (or SDL text) and produces an IRSchema.
Only the parts a subgraph client needs are kept: scalars, enums, entity
and interface types, filter inputs, and the fields of the Query type.
"""

import logging
import os
from typing import NamedTuple

from graphql import (
    DocumentNode,
    EnumTypeDefinitionNode,
    InputObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    TypeNode,
    parse,
)

from .ir import (
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

logger = logging.getLogger(__name__)

SCHEMA_EXTENSIONS = (".graphql", ".graphqls")

# Root types that never become entities
ROOT_TYPES = ("Query", "Mutation", "Subscription")


class TypeRef(NamedTuple):
    """A field's type descriptor with the wrappers stripped off."""
    name: str
    is_list: bool
    is_optional: bool


def unwrap_type(type_node: TypeNode) -> TypeRef:
    """Reduce `T`, `T!`, `[T]`, `[T!]!` and friends to a TypeRef.

    Raises:
        ValueError: For lists of lists, which subgraphs never declare
    """
    is_optional = not isinstance(type_node, NonNullTypeNode)
    if not is_optional:
        type_node = type_node.type

    is_list = isinstance(type_node, ListTypeNode)
    if is_list:
        type_node = type_node.type
        # Element nullability is not tracked
        if isinstance(type_node, NonNullTypeNode):
            type_node = type_node.type

    if not isinstance(type_node, NamedTypeNode):
        raise ValueError(f"Nested list types are not supported: {type_node}")
    return TypeRef(type_node.name.value, is_list, is_optional)


def _description(node) -> str | None:
    return node.description.value if node.description else None


class SchemaParser:
    """Parses subgraph schema files into IR.

    Example:
        ir = SchemaParser("./schema.graphql").parse_all()
        ir = SchemaParser().parse_text(sdl)
    """

    def __init__(self, schema_path: str | None = None):
        self.schema_path = schema_path
        self.ir = IRSchema()
        self.current_file = ""
        self._handlers = {
            ScalarTypeDefinitionNode: self._add_scalar,
            EnumTypeDefinitionNode: self._add_enum,
            InterfaceTypeDefinitionNode: self._add_interface,
            ObjectTypeDefinitionNode: self._add_object,
            ObjectTypeExtensionNode: self._extend_object,
            InputObjectTypeDefinitionNode: self._add_input,
        }

    def parse_all(self) -> IRSchema:
        """Parse every schema file under `schema_path` into one IR."""
        if self.schema_path is None:
            raise ValueError("No schema path given; use parse_text() for SDL strings")

        for path in self._schema_files():
            self.current_file = os.path.basename(path)
            with open(path) as f:
                self._load(f.read())
        return self.ir

    def parse_text(self, sdl: str, source_name: str = "<sdl>") -> IRSchema:
        """Parse SDL text, e.g. the output of introspection, and return the IR."""
        self.current_file = source_name
        self._load(sdl)
        return self.ir

    def _load(self, content: str):
        try:
            document = parse(content)
        except Exception as e:
            logger.error("Error parsing %s: %s", self.current_file, e)
            raise
        self._walk(document)

    def _schema_files(self) -> list[str]:
        if os.path.isfile(self.schema_path):
            return [self.schema_path] if self.schema_path.endswith(SCHEMA_EXTENSIONS) else []

        return sorted(
            os.path.join(directory, name)
            for directory, _, names in os.walk(self.schema_path)
            for name in names
            if name.endswith(SCHEMA_EXTENSIONS)
        )

    def _walk(self, document: DocumentNode):
        for definition in document.definitions:
            handler = self._handlers.get(type(definition))
            if handler is not None:
                handler(definition)

    # -------------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------------

    def _add_scalar(self, node: ScalarTypeDefinitionNode):
        name = node.name.value
        self.ir.scalars[name] = IRScalar(name, _description(node))

    def _add_enum(self, node: EnumTypeDefinitionNode):
        name = node.name.value
        values = [IREnumValue(v.name.value, _description(v)) for v in node.values or ()]
        self.ir.enums[name] = IREnum(name, values, _description(node))

    def _add_interface(self, node: InterfaceTypeDefinitionNode):
        name = node.name.value
        self.ir.interfaces[name] = IRInterface(name, self._fields(node.fields), _description(node))

    def _add_input(self, node: InputObjectTypeDefinitionNode):
        name = node.name.value
        self.ir.inputs[name] = IRType(
            name, self._fields(node.fields), description=_description(node), is_input=True
        )

    def _add_object(self, node: ObjectTypeDefinitionNode):
        name = node.name.value
        if name == "Query":
            self._add_operations(node)
            return
        if name in ROOT_TYPES:
            return

        fields = self._fields(node.fields)
        interfaces = [i.name.value for i in node.interfaces or ()]
        existing = self.ir.types.get(name)
        if existing is None:
            self.ir.types[name] = IRType(name, fields, interfaces, _description(node))
            return

        # An extension was seen first; base fields go before extension fields
        known = {f.name for f in existing.fields}
        existing.fields = [f for f in fields if f.name not in known] + existing.fields
        existing.interfaces = interfaces
        existing.description = _description(node) or existing.description

    def _extend_object(self, node: ObjectTypeExtensionNode):
        """Handle `extend type`: Query extensions add operations, others add fields."""
        name = node.name.value
        if name == "Query":
            self._add_operations(node)
            return
        if name in ROOT_TYPES:
            return

        target = self.ir.types.setdefault(name, IRType(name, []))
        known = {f.name for f in target.fields}
        for f in self._fields(node.fields):
            if f.name not in known:
                target.fields.append(f)
                known.add(f.name)

    def _add_operations(self, node: ObjectTypeDefinitionNode | ObjectTypeExtensionNode):
        for field_node in node.fields or ():
            ref = unwrap_type(field_node.type)
            self.ir.queries.append(
                IROperation(
                    name=field_node.name.value,
                    arguments=self._arguments(field_node.arguments),
                    return_type=ref.name,
                    is_return_list=ref.is_list,
                    is_return_optional=ref.is_optional,
                    description=_description(field_node),
                )
            )

    # -------------------------------------------------------------------------
    # Fields and arguments
    # -------------------------------------------------------------------------

    def _fields(self, nodes) -> list[IRField]:
        fields = []
        for node in nodes or []:
            ref = unwrap_type(node.type)
            fields.append(
                IRField(
                    name=node.name.value,
                    type_name=ref.name,
                    is_list=ref.is_list,
                    is_optional=ref.is_optional,
                    description=_description(node),
                    arguments=self._arguments(getattr(node, "arguments", None)),
                )
            )
        return fields

    @staticmethod
    def _arguments(nodes) -> list[IRArgument]:
        arguments = []
        for node in nodes or []:
            ref = unwrap_type(node.type)
            arguments.append(
                IRArgument(node.name.value, ref.name, ref.is_list, ref.is_optional, _description(node))
            )
        return arguments
