"""Generation hooks.

Pre-generation hooks decide which entities get a client module;
post-generation hooks rewrite each file before it is written.

Example usage:
    from subgraph_pygen.core.hooks import HookRunner

    # Skip the daily snapshot entities many subgraphs keep
    class SkipSnapshots:
        def pre_generate(self, entities):
            return [e for e in entities if not e.name.endswith("DayData")]

    # Stamp the deployment the client was generated from
    class StampDeployment:
        def __init__(self, deployment):
            self.deployment = deployment

        def post_generate(self, filename, content):
            return f"# deployment: {self.deployment}\\n" + content

    hooks = HookRunner()
    hooks.add_pre_hook(SkipSnapshots())
    hooks.add_post_hook(StampDeployment("QmXyz"))
"""

from typing import Iterable, Protocol, runtime_checkable

from .ir import EntitySpec


@runtime_checkable
class PreGenerateHook(Protocol):
    """Chooses the entities to generate.

    Entities a hook drops are not generated at all; object references to
    them in the remaining modules are typed as plain dicts.
    """

    def pre_generate(self, entities: list[EntitySpec]) -> list[EntitySpec]:
        """Return the entities to generate, in output order."""
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Rewrites generated source before it reaches disk."""

    def post_generate(self, filename: str, content: str) -> str:
        """Return the content to write for `filename` (e.g. "token.py")."""
        ...


class AddHeaderHook:
    """Puts a fixed header, followed by one blank line, at the top of each file.

    Example:
        hook = AddHeaderHook("# Generated from the uniswap-v3 subgraph")
    """

    def __init__(self, header: str):
        self.header = header.rstrip("\n")

    def post_generate(self, _filename: str, content: str) -> str:
        return f"{self.header}\n\n{content}"


class FilterEntitiesHook:
    """Selects entities by name.

    Example:
        # Only two entities
        hook = FilterEntitiesHook(include=["Token", "Pool"])

        # Everything except internal and snapshot entities
        hook = FilterEntitiesHook(exclude_prefix="_", exclude_suffix="DayData")
    """

    def __init__(
        self,
        include: Iterable[str] = (),
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
    ):
        self.include = frozenset(include)
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix

    def matches(self, name: str) -> bool:
        """Check whether an entity name passes every configured criterion."""
        if self.include and name not in self.include:
            return False
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        return not (self.exclude_suffix and name.endswith(self.exclude_suffix))

    def pre_generate(self, entities: list[EntitySpec]) -> list[EntitySpec]:
        return [spec for spec in entities if self.matches(spec.name)]


class HookRunner:
    """Applies hooks in registration order, each to the previous output."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def extend(self, other: "HookRunner"):
        """Append every hook of another runner after the current ones."""
        self.pre_hooks.extend(other.pre_hooks)
        self.post_hooks.extend(other.post_hooks)

    def run_pre_hooks(self, entities: list[EntitySpec]) -> list[EntitySpec]:
        selected = list(entities)
        for hook in self.pre_hooks:
            selected = hook.pre_generate(selected)
        return selected

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
