"""Emits the TypedDict declarations of one entity module.

For an entity `Token` four declarations are produced:

    TokenFilter  - keys of the `where` clause, all optional
    TokenResult  - a normalized record, every field declared
    TokenFields  - a full field selection (bool, or nested selection)
    TokenArgs    - the selection a caller passes; every key optional
"""

import keyword

from .ir import IRField, IRType
from .type_mapper import MappedType, MappingContext, TypeMapper


def is_identifier(name: str) -> bool:
    """Check whether a key can be declared with class syntax."""
    return name.isidentifier() and not keyword.iskeyword(name)


class TypesEmitter:
    """Builds type declaration lines from an entity and its filter."""

    def __init__(self, mapper: TypeMapper):
        self.mapper = mapper

    def emit(self, entity: IRType, filter_entity: IRType) -> list[str]:
        """Return the four declarations as source lines."""
        name = entity.name
        filter_entries = self._entries(filter_entity.fields, MappingContext.FILTER)
        result_entries = self._entries(entity.fields, MappingContext.RESULT)
        field_entries = self._entries(entity.fields, MappingContext.FIELDS)

        lines: list[str] = []
        lines.extend(self._declare(
            f"{name}Filter", filter_entries, total=False,
            doc=f"Keys accepted in the `where` clause of {name} queries.",
        ))
        lines.extend(self._declare(
            f"{name}Result", result_entries, total=True,
            doc=f"A normalized {name} record. Only selected keys are populated.",
        ))
        lines.extend(self._declare(
            f"{name}Fields", field_entries, total=True,
            doc=f"Selection of every {name} field.",
        ))
        lines.extend(self._declare(
            f"{name}Args", field_entries, total=False,
            doc=f"Fields to request for {name}; omitted keys are not fetched.",
        ))
        return lines

    def mapped_fields(self, entity: IRType, filter_entity: IRType) -> list[MappedType]:
        """Every mapping the module needs, used to work out its imports."""
        mapped = [self.mapper.map_field(f, MappingContext.FILTER) for f in filter_entity.fields]
        for context in (MappingContext.RESULT, MappingContext.FIELDS):
            mapped.extend(self.mapper.map_field(f, context) for f in entity.fields)
        return mapped

    def _entries(self, fields: list[IRField], context: MappingContext) -> list[tuple[str, str]]:
        return [(f.name, self.mapper.map_field(f, context).type_name) for f in fields]

    @staticmethod
    def _declare(
        class_name: str,
        entries: list[tuple[str, str]],
        total: bool,
        doc: str,
    ) -> list[str]:
        total_arg = "" if total else ", total=False"

        # Keys such as `and`/`or` cannot be class attributes
        if all(is_identifier(key) for key, _ in entries):
            lines = [f"class {class_name}(TypedDict{total_arg}):", f'    """{doc}"""']
            if entries:
                lines.append("")
            lines.extend(f"    {key}: {hint}" for key, hint in entries)
            return lines + ["", ""]

        lines = [f"{class_name} = TypedDict(", f'    "{class_name}",', "    {"]
        lines.extend(f'        "{key}": "{hint}",' for key, hint in entries)
        lines.append("    },")
        if not total:
            lines.append("    total=False,")
        lines.append(")")
        return lines + ["", ""]
