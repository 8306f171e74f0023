"""Intermediate Representation (IR) for subgraph schemas.

This module defines dataclasses that represent GraphQL schema constructs
in a language-agnostic way, suitable for generating entity clients.
"""

import re
from dataclasses import dataclass, field

# Suffix of the input type that The Graph derives for each entity's `where` argument
FILTER_SUFFIX = "_filter"


def lower_camel(name: str) -> str:
    """Lower-case the first character, e.g. 'TokenBalance' -> 'tokenBalance'."""
    return name[:1].lower() + name[1:]


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


@dataclass
class IRArgument:
    """Represents an argument to a query field."""
    name: str
    type_name: str
    is_list: bool = False
    is_optional: bool = True
    description: str | None = None


@dataclass
class IRField:
    """Represents a field in an entity, interface or filter input.

    `type_name`, `is_list` and `is_optional` together form the field's
    type descriptor.
    """
    name: str
    type_name: str
    is_list: bool = False
    is_optional: bool = True  # True if nullable (no ! in GraphQL)
    description: str | None = None
    arguments: list[IRArgument] = field(default_factory=list)


@dataclass
class IREnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None


@dataclass
class IREnum:
    """Represents a GraphQL enum type."""
    name: str
    values: list[IREnumValue]
    description: str | None = None


@dataclass
class IRType:
    """Represents a GraphQL object type or input type."""
    name: str
    fields: list[IRField]
    interfaces: list[str] = field(default_factory=list)
    description: str | None = None
    is_input: bool = False

    def get_field(self, name: str) -> IRField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class IRInterface:
    """Represents a GraphQL interface type."""
    name: str
    fields: list[IRField]
    description: str | None = None


@dataclass
class IRScalar:
    """Represents a GraphQL scalar type."""
    name: str
    description: str | None = None


@dataclass
class IROperation:
    """Represents a top-level field of the Query type, e.g. `tokens(...)`."""
    name: str
    arguments: list[IRArgument]
    return_type: str
    is_return_list: bool = False
    is_return_optional: bool = True
    description: str | None = None


@dataclass
class EntitySpec:
    """An entity paired with its filter input and query accessors.

    Attributes:
        entity: The object type being turned into a client module
        filter_entity: The `<Name>_filter` input type describing `where`
        single_accessor: Query field fetching one record, e.g. 'token'
        multi_accessor: Query field fetching a collection, e.g. 'tokens'
    """
    entity: IRType
    filter_entity: IRType
    single_accessor: str
    multi_accessor: str

    @property
    def name(self) -> str:
        return self.entity.name

    @property
    def module_name(self) -> str:
        """Python module name for the generated client, e.g. 'token_balance'."""
        return snake_case(self.entity.name)


@dataclass
class IRSchema:
    """Complete intermediate representation of a subgraph schema."""
    scalars: dict[str, IRScalar] = field(default_factory=dict)
    enums: dict[str, IREnum] = field(default_factory=dict)
    types: dict[str, IRType] = field(default_factory=dict)
    inputs: dict[str, IRType] = field(default_factory=dict)
    interfaces: dict[str, IRInterface] = field(default_factory=dict)
    queries: list[IROperation] = field(default_factory=list)

    def get_filter(self, entity_name: str) -> IRType | None:
        """Return the `<Name>_filter` input for an entity, if the schema has one."""
        return self.inputs.get(f"{entity_name}{FILTER_SUFFIX}")

    def entities(self) -> list[EntitySpec]:
        """Return every object type that can be queried with a `where` filter.

        Accessor names come from the Query type when it lists them; otherwise
        they fall back to 'token' / 'tokens' for an entity named 'Token'.
        """
        specs = []
        for name in sorted(self.types):
            filter_entity = self.get_filter(name)
            if filter_entity is None:
                continue
            single, multi = self._find_accessors(name)
            specs.append(
                EntitySpec(
                    entity=self.types[name],
                    filter_entity=filter_entity,
                    single_accessor=single or lower_camel(name),
                    multi_accessor=multi or f"{lower_camel(name)}s",
                )
            )
        return specs

    def _find_accessors(self, entity_name: str) -> tuple[str | None, str | None]:
        single = multi = None
        for op in self.queries:
            if op.return_type != entity_name:
                continue
            arg_names = {a.name for a in op.arguments}
            if op.is_return_list and multi is None and "where" in arg_names:
                multi = op.name
            elif not op.is_return_list and single is None and "id" in arg_names:
                single = op.name
        return single, multi
