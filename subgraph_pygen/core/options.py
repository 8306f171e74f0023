"""Query options shared by every generated entity module."""

from typing import Any, Literal, TypedDict

# Largest page a subgraph endpoint returns for one collection query
MAX_PAGE = 1000


class BlockNumber(TypedDict):
    number: int


class BlockHash(TypedDict):
    hash: str


BlockPin = BlockNumber | BlockHash


class _SingleQueryOptionsBase(TypedDict):
    id: str


class SingleQueryOptions(_SingleQueryOptionsBase, total=False):
    """Options for fetching one record by id, optionally pinned to a block."""
    block: BlockPin


class MultiQueryOptions(TypedDict, total=False):
    """Options for fetching a collection.

    Attributes:
        first: Number of records wanted; pages past MAX_PAGE when larger
        where: Filter built from the entity's Filter keys
        block: Block pin
        order_by: Result field to order by
        order_direction: "asc" or "desc"
    """
    first: int
    where: dict[str, Any]
    block: BlockPin
    order_by: str
    order_direction: Literal["asc", "desc"]
