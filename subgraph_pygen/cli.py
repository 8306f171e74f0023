"""Command-line interface for subgraph-pygen."""

import logging
import sys
from pathlib import Path

import click

from .core.auth import Auth, BearerAuth
from .core.generator import CodeGenerator, GeneratorConfig
from .core.introspection import fetch_schema_sdl
from .core.ir import IRSchema
from .core.parser import SchemaParser


def load_schema(schema: str | None, url: str | None, api_key: str | None) -> IRSchema:
    """Parse the schema from files, or introspect it from an endpoint."""
    if schema:
        return SchemaParser(str(Path(schema).resolve())).parse_all()
    if url:
        auth: Auth | None = BearerAuth(api_key) if api_key else None
        return SchemaParser().parse_text(fetch_schema_sdl(url, auth), source_name=url)
    raise click.UsageError("Pass either --schema or --url.")


@click.group()
@click.version_option(package_name="subgraph-pygen")
def main():
    """Typed Python clients for subgraph GraphQL endpoints.

    Generates one module per entity with single-record and paginated
    collection fetchers.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True),
    help="Path to a schema file or directory (.graphql, .graphqls).",
)
@click.option(
    "--url",
    "-u",
    help="Subgraph endpoint to introspect instead of reading schema files.",
)
@click.option(
    "--api-key",
    envvar="SUBGRAPH_API_KEY",
    help="Bearer token for the endpoint (env: SUBGRAPH_API_KEY).",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(),
    help="Output directory for the generated package.",
)
@click.option(
    "--entity",
    "-e",
    "entities",
    multiple=True,
    help="Only generate this entity (repeatable).",
)
@click.option(
    "--exclude-prefix",
    help="Skip entities whose names start with this prefix.",
)
@click.option(
    "--header",
    help="Text to put at the top of every generated file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str | None,
    url: str | None,
    api_key: str | None,
    output: str,
    entities: tuple[str, ...],
    exclude_prefix: str | None,
    header: str | None,
    verbose: bool,
):
    """Generate entity client modules.

    Examples:

        subgraph-pygen generate --schema ./schema.graphql --output ./client

        subgraph-pygen generate -u https://api.example.com/subgraphs/name/org/app -o ./client

        subgraph-pygen generate -s ./schema -o ./client -e Token -e Account
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    output_path = Path(output).resolve()

    click.echo("Loading schema...")
    ir = load_schema(schema, url, api_key)

    if verbose:
        click.echo(f"  Types: {len(ir.types)}")
        click.echo(f"  Inputs: {len(ir.inputs)}")
        click.echo(f"  Enums: {len(ir.enums)}")
        click.echo(f"  Entities: {len(ir.entities())}")

    config = GeneratorConfig(
        output_dir=str(output_path),
        include=list(entities),
        exclude_prefix=exclude_prefix,
        header=header,
    )
    generator = CodeGenerator(ir, config)

    click.echo("Generating code...")
    written = generator.generate()

    if verbose:
        for path in written:
            click.echo(f"  {path}")

    for name, message in sorted(generator.failures.items()):
        click.echo(f"Failed to generate {name}: {message}", err=True)

    click.echo(f"Done! Generated {len(written) - 1} entity modules in {output_path}")
    if generator.failures:
        sys.exit(1)


@main.command()
@click.option(
    "--url",
    "-u",
    required=True,
    help="Subgraph endpoint to introspect.",
)
@click.option(
    "--api-key",
    envvar="SUBGRAPH_API_KEY",
    help="Bearer token for the endpoint (env: SUBGRAPH_API_KEY).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    help="File to write the SDL to (default: stdout).",
)
def schema(url: str, api_key: str | None, output: str | None):
    """Download an endpoint's schema as SDL.

    Examples:

        subgraph-pygen schema -u https://api.example.com/subgraphs/name/org/app -o schema.graphql
    """
    auth = BearerAuth(api_key) if api_key else None
    sdl = fetch_schema_sdl(url, auth)

    if output is None:
        click.echo(sdl)
        return

    output_path = Path(output).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(sdl)
    click.echo(f"Wrote schema to {output_path}")


if __name__ == "__main__":
    main()
