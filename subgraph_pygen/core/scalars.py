"""Scalar handlers for subgraph client generation.

Provides a protocol for defining how GraphQL scalars map to Python types
and how raw JSON values are normalized into them.

Example usage:
    from subgraph_pygen.core.scalars import ScalarRegistry, Normalization

    registry = ScalarRegistry()
    registry.get("BigDecimal").deserialize("1.50")  # Decimal('1.50')

    # Treat a custom scalar like BigInt
    class Int256Handler:
        python_type = "int"
        import_statement = ""
        normalization = Normalization.BIG_INT

        def serialize(self, value):
            return str(value)

        def deserialize(self, value):
            return to_big_int(value)

    registry.register("Int256", Int256Handler())
"""

from decimal import ROUND_DOWN, Decimal
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class Normalization(Enum):
    """How a raw JSON value becomes a Python value."""
    PLAIN = "plain"            # Passed through unchanged
    BIG_INT = "big_int"        # Arbitrary-precision integer, no fractional digits
    BIG_DECIMAL = "big_decimal"  # Arbitrary-precision decimal, fractional digits kept
    NESTED = "nested"          # Sub-selection object, passed through


def to_big_int(value: Any) -> int:
    """Parse a BigInt value, dropping any fractional digits.

    >>> to_big_int("123456789012345678901234567890")
    123456789012345678901234567890
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        # Values such as "1.0" or "1e3" still describe an integer amount
        return int(Decimal(text).to_integral_value(rounding=ROUND_DOWN))


def to_big_decimal(value: Any) -> Decimal:
    """Parse a BigDecimal value, preserving every fractional digit."""
    if isinstance(value, Decimal):
        return value
    # str() keeps floats at their shortest repr instead of binary expansion
    return Decimal(str(value))


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for scalar handlers.

    Attributes:
        python_type: The Python type name (e.g., "int", "Decimal")
        import_statement: The import needed for this type, or ""
        normalization: How raw values of this scalar are normalized
    """

    python_type: str
    import_statement: str
    normalization: Normalization

    def serialize(self, value: Any) -> Any:
        """Convert Python value to JSON-serializable format for GraphQL."""
        ...

    def deserialize(self, value: Any) -> Any:
        """Convert JSON value from GraphQL to Python type."""
        ...


class BigIntHandler:
    """Handler for BigInt scalars, sent by the server as decimal strings."""

    python_type = "int"
    import_statement = ""
    normalization = Normalization.BIG_INT

    def serialize(self, value: int) -> str:
        return str(value)

    def deserialize(self, value: Any) -> int:
        return to_big_int(value)


class BigDecimalHandler:
    """Handler for BigDecimal scalars."""

    python_type = "Decimal"
    import_statement = "from decimal import Decimal"
    normalization = Normalization.BIG_DECIMAL

    def serialize(self, value: Decimal) -> str:
        return str(value)

    def deserialize(self, value: Any) -> Decimal:
        return to_big_decimal(value)


class PassThroughHandler:
    """Handler for scalars whose JSON value is already the Python value."""

    import_statement = ""
    normalization = Normalization.PLAIN

    def __init__(self, python_type: str):
        self.python_type = python_type

    def serialize(self, value: Any) -> Any:
        return value

    def deserialize(self, value: Any) -> Any:
        return value


class ScalarRegistry:
    """Registry for scalar handlers.

    Manages the mapping between GraphQL scalar names and their handlers.
    The built-in GraphQL scalars and the subgraph scalars (BigInt,
    BigDecimal, Bytes, Int8, Timestamp) are registered by default.
    """

    def __init__(self):
        self._handlers: dict[str, ScalarHandler] = {}
        self._register_defaults()

    def _register_defaults(self):
        """Register built-in default handlers."""
        for name in ("String", "ID", "Bytes"):
            self.register(name, PassThroughHandler("str"))
        for name in ("Int", "Int8", "Timestamp"):
            self.register(name, PassThroughHandler("int"))
        self.register("Float", PassThroughHandler("float"))
        self.register("Boolean", PassThroughHandler("bool"))
        self.register("BigInt", BigIntHandler())
        self.register("BigDecimal", BigDecimalHandler())

    def register(self, scalar_name: str, handler: ScalarHandler):
        """Register a handler for a scalar type."""
        self._handlers[scalar_name] = handler

    def get(self, scalar_name: str) -> ScalarHandler | None:
        """Get the handler for a scalar type, or None if not registered."""
        return self._handlers.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        """Check if a handler is registered for a scalar type."""
        return scalar_name in self._handlers


def normalize_value(value: Any, normalization: Normalization) -> Any:
    """Normalize a raw field value; lists are normalized element-wise.

    `None` stays `None` so nullable fields keep their server value.
    """
    if value is None:
        return None
    if isinstance(value, list):
        return [normalize_value(v, normalization) for v in value]
    if normalization is Normalization.BIG_INT:
        return to_big_int(value)
    if normalization is Normalization.BIG_DECIMAL:
        return to_big_decimal(value)
    return value
