"""Typed Python clients for subgraph GraphQL endpoints."""
