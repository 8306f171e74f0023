"""Tests for the TypedDict declarations of an entity module."""

import ast

import pytest

from subgraph_pygen.core.type_mapper import TypeMapper
from subgraph_pygen.core.types_emitter import TypesEmitter, is_identifier


@pytest.fixture
def token_source(schema_ir, token_spec):
    lines = TypesEmitter(TypeMapper(schema_ir)).emit(token_spec.entity, token_spec.filter_entity)
    return "\n".join(lines)


def declared_names(source: str) -> set[str]:
    tree = ast.parse(source)
    names = {node.name for node in tree.body if isinstance(node, ast.ClassDef)}
    for node in tree.body:
        if isinstance(node, ast.Assign):
            names.update(t.id for t in node.targets if isinstance(t, ast.Name))
    return names


class TestTypesEmitter:
    """Tests for TypesEmitter."""

    def test_declares_four_types(self, token_source):
        assert declared_names(token_source) == {
            "TokenFilter",
            "TokenResult",
            "TokenFields",
            "TokenArgs",
        }

    def test_result_hints(self, token_source):
        assert "class TokenResult(TypedDict):" in token_source
        assert "    balance: int" in token_source
        assert "    price: Decimal | None" in token_source
        assert "    holders: list[int] | None" in token_source
        assert "    owner: AccountResult" in token_source

    def test_fields_and_args(self, token_source):
        assert "class TokenFields(TypedDict):" in token_source
        assert "class TokenArgs(TypedDict, total=False):" in token_source
        assert "    owner: AccountFields" in token_source
        assert "    balance: bool" in token_source

    def test_filter_with_keyword_keys_uses_functional_form(self, token_source):
        # `and` and `or` cannot be class attributes
        assert 'TokenFilter = TypedDict(' in token_source
        assert '"and": "list[TokenFilter]",' in token_source
        assert '"balance_gt": "int | str",' in token_source
        assert '"owner_": "AccountFilter",' in token_source
        assert "    total=False," in token_source

    def test_filter_without_keywords_uses_class_form(self, schema_ir):
        schema_ir.inputs["Token_filter"].fields = [
            f for f in schema_ir.inputs["Token_filter"].fields if f.name not in ("and", "or")
        ]
        token_spec = next(s for s in schema_ir.entities() if s.name == "Token")
        lines = TypesEmitter(TypeMapper(schema_ir)).emit(token_spec.entity, token_spec.filter_entity)
        assert "class TokenFilter(TypedDict, total=False):" in lines

    def test_mapped_fields_cover_imports(self, schema_ir, token_spec):
        emitter = TypesEmitter(TypeMapper(schema_ir))
        mapped = emitter.mapped_fields(token_spec.entity, token_spec.filter_entity)
        assert "from decimal import Decimal" in {m.import_statement for m in mapped}
        assert "Account" in {m.entity_ref for m in mapped}


class TestIsIdentifier:
    """Tests for is_identifier."""

    @pytest.mark.parametrize("name", ["id", "owner_", "_change"])
    def test_valid(self, name):
        assert is_identifier(name)

    @pytest.mark.parametrize("name", ["and", "or", "from", "not-valid"])
    def test_invalid(self, name):
        assert not is_identifier(name)
