"""Generates the fetch functions of an entity module.

For an entity `Token` queried through `token` and `tokens`:

    _parse_token(obj)                        normalizes one raw record
    get_token_by_id(url, options, args)      one record, one request
    get_tokens(url, options, args)           a collection, paging past MAX_PAGE
"""

from .ir import EntitySpec, snake_case
from .scalars import Normalization
from .type_mapper import MappingContext, TypeMapper

# Keyword-only parameters shared by both generated fetch functions
TRANSPORT_PARAMS = [
    "    *,",
    "    auth: Auth | None = None,",
    "    transport: httpx.AsyncBaseTransport | None = None,",
]


def parse_function_name(spec: EntitySpec) -> str:
    return f"_parse_{spec.module_name}"


def single_function_name(spec: EntitySpec) -> str:
    return f"get_{spec.module_name}_by_id"


def multi_function_name(spec: EntitySpec) -> str:
    return f"get_{snake_case(spec.multi_accessor)}"


class FetchGenerator:
    """Generates parse and fetch functions from an entity spec."""

    def __init__(self, mapper: TypeMapper):
        self.mapper = mapper

    def generate_parse_function(self, spec: EntitySpec) -> list[str]:
        """Generate the function normalizing one raw record.

        Only keys present in the raw object are set; values are converted
        according to the field's normalization.
        """
        name = spec.name
        lines = [
            f"def {parse_function_name(spec)}(obj: dict[str, Any]) -> {name}Result:",
            "    formatted: dict[str, Any] = {}",
        ]
        for field in spec.entity.fields:
            mapped = self.mapper.map_field(field, MappingContext.RESULT)
            key = f'"{field.name}"'
            lines.append(f"    if {key} in obj:")
            if mapped.normalization in (Normalization.BIG_INT, Normalization.BIG_DECIMAL):
                lines.append(
                    f"        formatted[{key}] = normalize_value(obj[{key}], "
                    f"Normalization.{mapped.normalization.name})"
                )
            else:
                lines.append(f"        formatted[{key}] = obj[{key}]")
        lines.append(f"    return cast({name}Result, formatted)")
        lines.extend(["", ""])
        return lines

    def generate_single_function(self, spec: EntitySpec) -> list[str]:
        """Generate the async function fetching one record by id."""
        name = spec.name
        lines = [f"async def {single_function_name(spec)}(", "    url: str,"]
        lines.append("    options: SingleQueryOptions,")
        lines.append(f"    args: {name}Args,")
        lines.extend(TRANSPORT_PARAMS)
        lines.append(f") -> {name}Result | None:")
        lines.extend([
            f'    """Fetch one {name} by id.',
            "",
            "    Only the keys selected in `args` are populated. Returns None when",
            "    no record matches. Raises QueryError when the response has errors.",
            '    """',
            "    async with GraphQLExecutor(url, auth=auth, transport=transport) as executor:",
            f"        data = await executor.execute(build_query(\"{spec.single_accessor}\", options, args))",
            "",
            "    obj = first_result(data)",
            "    if obj is None:",
            "        return None",
            f"    return {parse_function_name(spec)}(obj)",
            "",
            "",
        ])
        return lines

    def generate_multi_function(self, spec: EntitySpec) -> list[str]:
        """Generate the async function fetching a collection.

        When `first` exceeds MAX_PAGE the function pages through the
        collection with a `<order_by>_gt`/`<order_by>_lt` cursor on a copy of
        the caller's filter, requesting MAX_PAGE records at a time.
        """
        name = spec.name
        lines = [f"async def {multi_function_name(spec)}(", "    url: str,"]
        lines.append("    options: MultiQueryOptions,")
        lines.append(f"    args: {name}Args,")
        lines.extend(TRANSPORT_PARAMS)
        lines.append(f") -> list[{name}Result]:")
        lines.extend([
            f'    """Fetch {name} records matching `options`.',
            "",
            "    Requests for more than MAX_PAGE records are split into sequential",
            "    pages ordered by `order_by` (default: id, ascending). The result is",
            "    truncated to `first` and keeps server order; only the keys selected",
            "    in `args` are populated.",
            '    """',
            "    paginated_options: MultiQueryOptions = {**options}",
            "    selection: dict[str, Any] = dict(args)",
            "",
            "    pagination_key: str | None = None",
            "    pagination_value: Any = None",
            "    unrequested_key: str | None = None",
            "",
            '    first = options.get("first")',
            "    if first is not None and first > MAX_PAGE:",
            '        order_by = options.get("order_by") or "id"',
            '        order_direction = options.get("order_direction") or "asc"',
            '        paginated_options["first"] = MAX_PAGE',
            '        paginated_options["order_by"] = order_by',
            '        paginated_options["order_direction"] = order_direction',
            '        paginated_options["where"] = dict(options.get("where") or {})',
            '        pagination_key = order_by + ("_gt" if order_direction == "asc" else "_lt")',
            "        # The cursor is read from the last record of each page",
            "        if not selection.get(order_by):",
            "            selection[order_by] = True",
            "            unrequested_key = order_by",
            "",
            f"    results: list[{name}Result] = []",
            "",
            "    async with GraphQLExecutor(url, auth=auth, transport=transport) as executor:",
            "        while True:",
            "            if pagination_key is not None and pagination_value is not None:",
            '                paginated_options["where"][pagination_key] = pagination_value',
            "",
            "            data = await executor.execute(",
            f"                build_query(\"{spec.multi_accessor}\", paginated_options, selection)",
            "            )",
            "            raw_results = first_result(data) or []",
            "            results.extend(",
            f"                {parse_function_name(spec)}(",
            "                    {k: v for k, v in obj.items() if k != unrequested_key}",
            "                )",
            "                for obj in raw_results",
            "            )",
            "",
            "            if len(raw_results) < MAX_PAGE:",
            "                break",
            "            if pagination_key is None or len(results) >= first:",
            "                break",
            '            pagination_value = raw_results[-1][paginated_options["order_by"]]',
            "",
            "    return results[:first] if first is not None else results",
            "",
            "",
        ])
        return lines
