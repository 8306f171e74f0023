#!/usr/bin/env python3
"""Demonstration of a generated subgraph client.

This script shows how to:
1. Parse a subgraph schema
2. Generate one client module per entity
3. Fetch more than MAX_PAGE records with the generated paginated fetcher

Requests are answered by an in-process fake endpoint, so no network
access is needed.
"""

import asyncio
import importlib
import json
import sys
import tempfile
from pathlib import Path

import httpx

from subgraph_pygen.core import CodeGenerator, GeneratorConfig, SchemaParser

SCHEMA = '''
scalar BigInt

type Token {
  id: ID!
  symbol: String!
  totalSupply: BigInt!
}

input Token_filter {
  id: ID
  id_gt: ID
  symbol: String
}

type Query {
  token(id: ID!): Token
  tokens(first: Int, where: Token_filter): [Token!]!
}
'''

TOTAL_TOKENS = 2345


def serve(request: httpx.Request) -> httpx.Response:
    """Answer `tokens` queries with up to 1000 records after the id cursor."""
    query = json.loads(request.content)["query"]
    start = 0
    if "id_gt" in query:
        cursor = query.split('id_gt: "', 1)[1].split('"', 1)[0]
        start = int(cursor.rsplit("-", 1)[1]) + 1
    ids = range(start, min(start + 1000, TOTAL_TOKENS))
    records = [
        {"id": f"token-{i:05d}", "symbol": f"T{i}", "totalSupply": str(10**27 + i)}
        for i in ids
    ]
    return httpx.Response(200, json={"data": {"tokens": records}})


async def fetch(client):
    return await client.get_tokens(
        "https://example.invalid/subgraphs/name/demo",
        {"first": 2000},
        {"id": True, "totalSupply": True},
        transport=httpx.MockTransport(serve),
    )


def main():
    print("=== Subgraph Client Demo ===\n")

    print("1. Parsing schema...")
    ir = SchemaParser().parse_text(SCHEMA)
    print(f"   Entities: {[e.name for e in ir.entities()]}")

    with tempfile.TemporaryDirectory() as tmpdir:
        print("\n2. Generating client package...")
        output = Path(tmpdir) / "demo_client"
        written = CodeGenerator(ir, GeneratorConfig(output_dir=str(output))).generate()
        for path in written:
            print(f"   {path}")

        print("\n3. Fetching 2000 tokens (two pages)...")
        sys.path.insert(0, tmpdir)
        client = importlib.import_module("demo_client")
        tokens = asyncio.run(fetch(client))

        print(f"   Received {len(tokens)} tokens")
        print(f"   First: {tokens[0]}")
        print(f"   Last:  {tokens[-1]}")
        print(f"   totalSupply is {type(tokens[0]['totalSupply']).__name__}")

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
