"""Tests for generating entity client packages."""

import ast
import logging

import pytest

from subgraph_pygen.core.generator import CodeGenerator, GeneratorConfig
from subgraph_pygen.core.hooks import HookRunner
from subgraph_pygen.core.ir import IRField
from subgraph_pygen.core.type_mapper import SchemaMappingError, TypeMapper


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "client"


def generate(schema_ir, output_dir, **config):
    generator = CodeGenerator(schema_ir, GeneratorConfig(output_dir=str(output_dir), **config))
    return generator, generator.generate()


# =============================================================================
# Output layout
# =============================================================================


class TestGenerate:
    """Tests for CodeGenerator.generate."""

    def test_writes_one_module_per_entity(self, schema_ir, output_dir):
        _, written = generate(schema_ir, output_dir)
        assert sorted(p.rsplit("/", 1)[-1] for p in written) == [
            "__init__.py",
            "account.py",
            "token.py",
        ]

    def test_output_is_valid_python(self, schema_ir, output_dir):
        _, written = generate(schema_ir, output_dir)
        for path in written:
            with open(path) as f:
                ast.parse(f.read())

    def test_deterministic(self, schema_ir, tmp_path):
        generate(schema_ir, tmp_path / "a")
        generate(schema_ir, tmp_path / "b")
        for name in ("__init__.py", "account.py", "token.py"):
            assert (tmp_path / "a" / name).read_text() == (tmp_path / "b" / name).read_text()

    def test_entity_module_contents(self, schema_ir, output_dir):
        generate(schema_ir, output_dir)
        source = (output_dir / "token.py").read_text()

        assert "from decimal import Decimal" in source
        assert "from .account import AccountFields, AccountFilter, AccountResult" in source
        assert "async def get_token_by_id(" in source
        assert "async def get_tokens(" in source
        assert "def _parse_token(obj: dict[str, Any]) -> TokenResult:" in source
        assert 'build_query("token", options, args)' in source
        assert 'build_query("tokens", paginated_options, selection)' in source

    def test_module_exports(self, schema_ir, output_dir):
        generate(schema_ir, output_dir)
        tree = ast.parse((output_dir / "token.py").read_text())
        exports = next(
            node.value for node in tree.body
            if isinstance(node, ast.Assign) and node.targets[0].id == "__all__"
        )
        assert [e.value for e in exports.elts] == [
            "TokenArgs",
            "TokenFields",
            "TokenFilter",
            "TokenResult",
            "get_token_by_id",
            "get_tokens",
        ]

    def test_package_reexports(self, generated_client):
        for name in ("get_tokens", "get_token_by_id", "get_accounts", "QueryError", "MAX_PAGE"):
            assert hasattr(generated_client, name)
        assert generated_client.MAX_PAGE == 1000

    def test_generated_types_are_typeddicts(self, generated_client):
        from subgraph_client import token

        assert token.TokenFilter.__total__ is False
        assert token.TokenResult.__total__ is True
        assert "and" in token.TokenFilter.__annotations__
        assert set(token.TokenArgs.__annotations__) == {
            "id", "symbol", "balance", "price", "holders", "owner", "active",
        }


# =============================================================================
# Configuration and hooks
# =============================================================================


class TestConfiguration:
    """Entity selection, headers and templates."""

    def test_include(self, schema_ir, output_dir):
        _, written = generate(schema_ir, output_dir, include=["Token"])
        assert len(written) == 2
        source = (output_dir / "token.py").read_text()
        # Account is not generated, so the reference stays an opaque dict
        assert "from .account import" not in source
        assert "owner: dict[str, Any]" in source

    def test_exclude_prefix(self, schema_ir, output_dir):
        generate(schema_ir, output_dir, exclude_prefix="Acc")
        assert not (output_dir / "account.py").exists()
        assert (output_dir / "token.py").exists()

    def test_header(self, schema_ir, output_dir):
        generate(schema_ir, output_dir, header="# Generated for org/tokens")
        for name in ("__init__.py", "token.py"):
            assert (output_dir / name).read_text().startswith("# Generated for org/tokens\n\n")

    def test_extra_hooks_run_after_config(self, schema_ir, output_dir):
        seen = []

        class Record:
            def post_generate(self, filename, content):
                seen.append(filename)
                return content

        hooks = HookRunner()
        hooks.add_post_hook(Record())
        CodeGenerator(schema_ir, GeneratorConfig(output_dir=str(output_dir)), hooks=hooks).generate()
        assert sorted(seen) == ["__init__.py", "account.py", "token.py"]

    def test_template_override(self, schema_ir, output_dir, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "__init__.py.j2").write_text('"""Custom package."""\n')

        generate(schema_ir, output_dir, template_dir=str(templates))
        assert (output_dir / "__init__.py").read_text() == '"""Custom package."""\n'

    def test_invalid_template_output_rejected(self, schema_ir, output_dir, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "__init__.py.j2").write_text("def broken(:\n")

        with pytest.raises(ValueError, match="invalid Python"):
            generate(schema_ir, output_dir, template_dir=str(templates))


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    """Entities whose fields cannot be mapped."""

    @pytest.fixture
    def broken_ir(self, schema_ir):
        schema_ir.types["Account"].fields.append(IRField(name="pool", type_name="Pool"))
        return schema_ir

    def test_failed_entity_skipped(self, broken_ir, output_dir, caplog):
        with caplog.at_level(logging.ERROR, logger="subgraph_pygen.core.generator"):
            generator, written = generate(broken_ir, output_dir)

        assert set(generator.failures) == {"Account"}
        assert "Pool" in generator.failures["Account"]
        assert not (output_dir / "account.py").exists()
        assert "Skipping entity Account" in caplog.text

    def test_remaining_modules_do_not_reference_failed_entity(self, broken_ir, output_dir):
        generate(broken_ir, output_dir)

        token = (output_dir / "token.py").read_text()
        init = (output_dir / "__init__.py").read_text()
        assert "account" not in init
        assert "AccountResult" not in token
        ast.parse(token)

    def test_render_entity_raises(self, broken_ir, output_dir):
        generator = CodeGenerator(broken_ir, GeneratorConfig(output_dir=str(output_dir)))
        spec = next(s for s in broken_ir.entities() if s.name == "Account")
        with pytest.raises(SchemaMappingError, match="Pool"):
            generator.render_entity(spec, TypeMapper(broken_ir))
