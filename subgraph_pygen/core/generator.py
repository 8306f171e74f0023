"""Code generator for subgraph entity clients.

Renders Jinja2 templates to produce one Python module per entity plus a
package `__init__.py`.

Supports custom templates via GeneratorConfig.template_dir:
    config = GeneratorConfig(output_dir="./generated", template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .fetch_generator import (
    FetchGenerator,
    multi_function_name,
    single_function_name,
)
from .hooks import AddHeaderHook, FilterEntitiesHook, HookRunner
from .ir import EntitySpec, IRSchema, snake_case
from .scalars import ScalarRegistry
from .type_mapper import SchemaMappingError, TypeMapper
from .types_emitter import TypesEmitter

logger = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """Settings for one generation run.

    Attributes:
        output_dir: Directory the generated package is written to
        include: Entity names to generate; empty means all
        exclude_prefix: Skip entities whose names start with this
        header: Text placed at the top of every generated file
        template_dir: Directory with templates overriding the built-in ones
    """
    output_dir: str
    include: list[str] = field(default_factory=list)
    exclude_prefix: str | None = None
    header: str | None = None
    template_dir: str | None = None


class CodeGenerator:
    """Generates entity client modules from a subgraph IR.

    Available templates to override:
        - entity.py.j2 - one entity module
        - __init__.py.j2 - package exports

    Example:
        generator = CodeGenerator(schema, GeneratorConfig(output_dir="./generated"))
        written = generator.generate()
        if generator.failures:
            ...
    """

    def __init__(
        self,
        ir: IRSchema,
        config: GeneratorConfig,
        scalars: ScalarRegistry | None = None,
        hooks: HookRunner | None = None,
    ):
        """Initialize the code generator.

        Args:
            ir: The intermediate representation of the subgraph schema
            config: Output directory and entity selection
            scalars: Scalar handlers; defaults to the built-in registry
            hooks: Extra hooks, run after the ones derived from config
        """
        self.ir = ir
        self.config = config
        self.scalars = scalars or ScalarRegistry()
        self.hooks = self._build_hooks(config, hooks)
        # Entity name -> error message for entities that could not be generated
        self.failures: dict[str, str] = {}

        loaders = []
        if config.template_dir:
            template_path = Path(config.template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("subgraph_pygen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @staticmethod
    def _build_hooks(config: GeneratorConfig, extra: HookRunner | None) -> HookRunner:
        runner = HookRunner()
        if config.include or config.exclude_prefix:
            runner.add_pre_hook(
                FilterEntitiesHook(include=config.include, exclude_prefix=config.exclude_prefix)
            )
        if config.header:
            runner.add_post_hook(AddHeaderHook(config.header))
        if extra is not None:
            runner.extend(extra)
        return runner

    def selected_entities(self) -> list[EntitySpec]:
        """Entities to generate, after pre-generation hooks."""
        return self.hooks.run_pre_hooks(self.ir.entities())

    def generate(self) -> list[str]:
        """Generate all files and return the paths written.

        An entity whose fields cannot be mapped is logged, recorded in
        `failures` and skipped; the remaining entities are still written.
        """
        os.makedirs(self.config.output_dir, exist_ok=True)
        self.failures = {}

        entities = self.selected_entities()
        rendered = self._render_entities(entities)
        if self.failures:
            # Re-render so nothing refers to the modules that were skipped
            entities = [e for e in entities if e.name not in self.failures]
            rendered = self._render_entities(entities)

        written = []
        for spec in entities:
            written.append(self._write_file(f"{spec.module_name}.py", rendered[spec.name]))

        init_content = self.render_init(entities)
        written.append(self._write_file("__init__.py", init_content))
        return written

    def _render_entities(self, entities: list[EntitySpec]) -> dict[str, str]:
        mapper = TypeMapper(self.ir, self.scalars, entity_names=[e.name for e in entities])
        rendered = {}
        for spec in entities:
            try:
                rendered[spec.name] = self.render_entity(spec, mapper)
            except SchemaMappingError as e:
                logger.error("Skipping entity %s: %s", spec.name, e)
                self.failures[spec.name] = str(e)
        return rendered

    def render_entity(self, spec: EntitySpec, mapper: TypeMapper) -> str:
        """Render one entity module.

        Raises:
            SchemaMappingError: If a field type is unknown to the schema
        """
        emitter = TypesEmitter(mapper)
        fetchers = FetchGenerator(mapper)

        mapped = emitter.mapped_fields(spec.entity, spec.filter_entity)
        scalar_imports = sorted({m.import_statement for m in mapped if m.import_statement})

        references: dict[str, set[str]] = {}
        for m in mapped:
            if m.entity_ref and m.entity_ref != spec.name:
                references.setdefault(m.entity_ref, set()).add(m.base_type)
        module_refs = [
            (snake_case(ref), sorted(names))
            for ref, names in sorted(references.items())
        ]

        body_lines: list[str] = []
        body_lines.extend(emitter.emit(spec.entity, spec.filter_entity))
        body_lines.extend(fetchers.generate_parse_function(spec))
        body_lines.extend(fetchers.generate_single_function(spec))
        body_lines.extend(fetchers.generate_multi_function(spec))

        return self._render(
            "entity.py.j2",
            {
                "name": spec.name,
                "scalar_imports": scalar_imports,
                "references": module_refs,
                "exports": self.exports(spec),
                "body": "\n".join(body_lines).rstrip() + "\n",
            },
        )

    def render_init(self, entities: list[EntitySpec]) -> str:
        """Render the package `__init__.py` re-exporting every entity module."""
        modules = [
            {"name": spec.module_name, "exports": self.exports(spec)}
            for spec in sorted(entities, key=lambda s: s.module_name)
        ]
        return self._render("__init__.py.j2", {"modules": modules})

    @staticmethod
    def exports(spec: EntitySpec) -> list[str]:
        """Public names of an entity module."""
        name = spec.name
        return [
            f"{name}Args",
            f"{name}Fields",
            f"{name}Filter",
            f"{name}Result",
            single_function_name(spec),
            multi_function_name(spec),
        ]

    def _render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template and check the result is valid Python."""
        template = self.env.get_template(template_name)
        content = template.render(context)

        try:
            ast.parse(content)
        except SyntaxError as e:
            raise ValueError(
                f"Generated invalid Python from {template_name}: {e}"
            ) from e
        return content

    def _write_file(self, filename: str, content: str) -> str:
        """Run post hooks and write one file."""
        content = self.hooks.run_post_hooks(filename, content)
        full_path = os.path.join(self.config.output_dir, filename)
        with open(full_path, "w") as f:
            f.write(content)
        logger.info("Wrote %s", full_path)
        return full_path
