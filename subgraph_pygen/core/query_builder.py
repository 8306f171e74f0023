"""Query builder for subgraph accessors.

Renders a query for one accessor from its options and a field selection:

    build_query("tokens", {"first": 10, "where": {"symbol": "ETH"}}, {"id": True})

produces

    {
      tokens(first: 10, where: {symbol: "ETH"}) {
        id
      }
    }
"""

import json
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel

# Option keys in the order they are rendered, with their GraphQL argument names
OPTION_ARGUMENTS = (
    ("id", "id"),
    ("block", "block"),
    ("first", "first"),
    ("where", "where"),
    ("order_by", "orderBy"),
    ("order_direction", "orderDirection"),
)

# Options whose values are enum names and must not be quoted
ENUM_OPTIONS = {"order_by", "order_direction"}

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class QueryBuilder:
    """Builds GraphQL query strings from accessor names, options and selections."""

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def build(
        self,
        accessor: str,
        options: Mapping[str, Any],
        selection: Mapping[str, Any],
    ) -> str:
        """Build a query string.

        Args:
            accessor: Query field name, e.g. 'token' or 'tokens'
            options: SingleQueryOptions or MultiQueryOptions
            selection: Field name -> True, or a nested selection mapping

        Returns:
            Complete GraphQL query string
        """
        if not any(selection.values()):
            raise ValueError(f"Selection for '{accessor}' does not request any field")

        arguments = self._build_arguments(options)
        body = self._build_selection(selection, depth=2)
        return f"{{\n{self.indent}{accessor}{arguments} {{\n{body}\n{self.indent}}}\n}}"

    def _build_arguments(self, options: Mapping[str, Any]) -> str:
        parts = []
        for key, argument in OPTION_ARGUMENTS:
            value = options.get(key)
            if value is None:
                continue
            if key in ENUM_OPTIONS:
                rendered = value.value if isinstance(value, Enum) else str(value)
            else:
                rendered = self.render_value(value)
            parts.append(f"{argument}: {rendered}")
        return f"({', '.join(parts)})" if parts else ""

    def _build_selection(self, selection: Mapping[str, Any], depth: int) -> str:
        indent = self.indent * depth
        lines = []
        for name, selected in selection.items():
            if not selected:
                continue
            if isinstance(selected, Mapping):
                lines.append(f"{indent}{name} {{")
                lines.append(self._build_selection(selected, depth + 1))
                lines.append(f"{indent}}}")
            else:
                lines.append(f"{indent}{name}")
        return "\n".join(lines)

    def render_value(self, value: Any) -> str:
        """Render a Python value as a GraphQL input literal."""
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, int):
            # BigInt inputs outside the Int range have to travel as strings
            if INT32_MIN <= value <= INT32_MAX:
                return str(value)
            return json.dumps(str(value))
        if isinstance(value, Decimal):
            return json.dumps(str(value))
        if isinstance(value, float):
            return repr(value)
        if isinstance(value, str):
            return json.dumps(value)
        if isinstance(value, BaseModel):
            return self.render_value(value.model_dump(by_alias=True, exclude_none=True))
        if isinstance(value, Mapping):
            items = ", ".join(f"{k}: {self.render_value(v)}" for k, v in value.items())
            return f"{{{items}}}"
        if isinstance(value, (list, tuple)):
            return f"[{', '.join(self.render_value(v) for v in value)}]"
        raise TypeError(f"Cannot render {type(value).__name__} as a GraphQL value")


_default_builder = QueryBuilder()


def build_query(
    accessor: str,
    options: Mapping[str, Any],
    selection: Mapping[str, Any],
) -> str:
    """Build a query with the default builder."""
    return _default_builder.build(accessor, options, selection)
