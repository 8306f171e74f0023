"""Shared fixtures: a small subgraph schema and a fake subgraph endpoint."""

import importlib
import json
import sys

import httpx
import pytest

from subgraph_pygen.core.generator import CodeGenerator, GeneratorConfig
from subgraph_pygen.core.parser import SchemaParser

SUBGRAPH_URL = "https://subgraph.test/subgraphs/name/org/tokens"

SUBGRAPH_SDL = '''
scalar BigInt
scalar BigDecimal
scalar Bytes

enum OrderDirection {
  asc
  desc
}

"""A token holder"""
type Account {
  id: ID!
  tokens: [Token!]!
}

type Token {
  id: ID!
  symbol: String!
  balance: BigInt!
  price: BigDecimal
  holders: [BigInt!]
  owner: Account!
  active: Boolean!
}

type _Meta_ {
  deployment: String!
}

input Block_height {
  hash: Bytes
  number: Int
  number_gte: Int
}

input Account_filter {
  id: ID
  id_gt: ID
  id_lt: ID
  tokens_: Token_filter
  and: [Account_filter]
  or: [Account_filter]
}

input Token_filter {
  id: ID
  id_gt: ID
  id_lt: ID
  id_in: [ID!]
  symbol: String
  balance_gt: BigInt
  price_gte: BigDecimal
  owner: String
  owner_: Account_filter
  and: [Token_filter]
  or: [Token_filter]
}

enum Token_orderBy {
  id
  symbol
  balance
}

type Query {
  token(id: ID!, block: Block_height): Token
  tokens(
    skip: Int = 0
    first: Int = 100
    orderBy: Token_orderBy
    orderDirection: OrderDirection
    where: Token_filter
    block: Block_height
  ): [Token!]!
  account(id: ID!, block: Block_height): Account
  accounts(first: Int, where: Account_filter): [Account!]!
  _meta(block: Block_height): _Meta_
}
'''


@pytest.fixture
def schema_ir():
    """The parsed test schema."""
    return SchemaParser().parse_text(SUBGRAPH_SDL)


@pytest.fixture
def token_spec(schema_ir):
    """EntitySpec of the Token entity."""
    return next(spec for spec in schema_ir.entities() if spec.name == "Token")


@pytest.fixture
def generated_client(tmp_path, schema_ir, monkeypatch):
    """Generate the test schema into a package and import it."""
    package_dir = tmp_path / "subgraph_client"
    CodeGenerator(schema_ir, GeneratorConfig(output_dir=str(package_dir))).generate()

    monkeypatch.syspath_prepend(str(tmp_path))
    for name in list(sys.modules):
        if name == "subgraph_client" or name.startswith("subgraph_client."):
            monkeypatch.delitem(sys.modules, name)
    importlib.invalidate_caches()
    return importlib.import_module("subgraph_client")


def token_record(index: int) -> dict:
    """A raw Token record as the server returns it."""
    return {"id": f"token-{index:05d}", "balance": str(10**30 + index)}


def token_page(start: int, count: int) -> dict:
    """A response envelope with `count` consecutive Token records."""
    return {"data": {"tokens": [token_record(i) for i in range(start, start + count)]}}


class FakeSubgraph:
    """Serves canned responses in order and records every query received."""

    def __init__(self, responses: list[dict]):
        self.responses = list(responses)
        self.queries: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.queries.append(json.loads(request.content)["query"])
        return httpx.Response(200, json=self.responses.pop(0))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> int:
        return len(self.queries)
