"""
OpenAPI Adapter - compiles the operations of an OpenAPI v3 document.

Each operation yields declarations under ``<base>.<operationId>``:
- ``Body``: the union of its request body media-type schemas
- ``Responses.$<status>``: the union of each response's media-type schemas
- ``Parameters.<name>``: each parameter's schema
- ``Input``: one field per body/parameter, referencing the above
- ``Output``: one variant per response with content: status, headers and body

Body and response schemas are placed in a scratch area of an overlay
document so that ordinary ``$ref`` resolution declares them; the caller's
document is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Final, Mapping

from ..shared import (
    ReferenceNotFoundError,
    SchemaValidationError,
    build_identifier,
    join_ref,
    slugify,
    split_ref,
    to_camel_case,
)
from .builder import BuildContext, build_declaration, build_types
from .ir import (
    ANY,
    Declaration,
    Field,
    NamespaceNode,
    ObjectOf,
    TypeExpression,
    Union,
    union_of,
)
from .resolver import ReferenceResolver, resolve_reference
from .tree import assemble

# HTTP methods that denote operations in a path item
HTTP_METHODS: Final[frozenset[str]] = frozenset({
    "get", "put", "post", "delete", "options", "head", "patch", "trace"
})

DEFAULT_BASE_NAME: Final[str] = "API"

# Scratch entries added to components.schemas of the overlay document
REQUEST_BODIES_KEY: Final[str] = "__api_request_bodies"
RESPONSES_KEY: Final[str] = "__api_responses"
PARAMETERS_KEY: Final[str] = "__api_parameters"

HEADER_PATTERN: Final[str] = "/a-z0-9/"
HEADER_VALUE_SCHEMA: Final[dict[str, Any]] = {
    "oneOf": [
        {"type": "string"},
        {"type": "array", "items": {"type": "string"}},
    ],
}


@dataclass(frozen=True, slots=True)
class CompileOptions:
    """Options for ``compile_openapi``.

    ``filter_statuses`` restricts which response statuses appear in the
    ``Output`` unions; ``generate_unused_schemas`` declares every schema of
    ``components.schemas`` even when no operation reaches it.
    """

    filter_statuses: frozenset[int] | None = None
    generate_unused_schemas: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> CompileOptions:
        """Build options from ``filterStatuses``/``generateUnusedSchemas`` keys."""
        statuses = options.get("filterStatuses", options.get("filter_statuses"))
        unused = options.get("generateUnusedSchemas", options.get("generate_unused_schemas"))
        filter_statuses: frozenset[int] | None = None
        if statuses is not None:
            try:
                filter_statuses = frozenset(int(s) for s in statuses)
            except (TypeError, ValueError) as e:
                raise SchemaValidationError(
                    f"status codes must be integers, got {statuses!r}",
                    field="filterStatuses",
                ) from e
        return cls(
            filter_statuses=filter_statuses,
            generate_unused_schemas=bool(unused),
        )

    def includes(self, status: str) -> bool:
        """Whether a response status takes part in ``Output``."""
        if self.filter_statuses is None:
            return True
        code = _status_code(status)
        return code is not None and code in self.filter_statuses


@dataclass(frozen=True, slots=True)
class OperationInput:
    name: str
    path: tuple[str, ...]
    required: bool


@dataclass(slots=True)
class OperationOutput:
    status: str
    path: tuple[str, ...]
    headers: dict[str, tuple[Any, bool]] = field(default_factory=dict)


def _status_code(status: str) -> int | None:
    return int(status) if status.isdigit() else None


def _media_schemas(content: Any) -> list[Any]:
    """Collect the schemas of every media type declaring one."""
    if not isinstance(content, dict):
        return []
    return [
        media["schema"]
        for media in content.values()
        if isinstance(media, dict) and "schema" in media
    ]


def _ensure_unique(base: str, used: dict[str, int]) -> str:
    """Ensure an operation id is unique by appending a suffix if needed."""
    if base not in used:
        used[base] = 1
        return base
    used[base] += 1
    return f"{base}_{used[base]}"


def _build_overlay(document: dict[str, Any]) -> tuple[dict[str, Any], dict[str, dict[str, Any]]]:
    """Copy the containers leading to components.schemas and add the
    scratch entries to the copy.
    """
    components = dict(document.get("components") or {})
    schemas = dict(components.get("schemas") or {})
    scratch: dict[str, dict[str, Any]] = {
        REQUEST_BODIES_KEY: {},
        RESPONSES_KEY: {},
        PARAMETERS_KEY: {},
    }
    schemas.update(scratch)
    components["schemas"] = schemas
    return {**document, "components": components}, scratch


def _scratch_ref(*parts: str) -> dict[str, str]:
    return {"$ref": join_ref(("components", "schemas") + parts)}


class OpenAPICompiler:
    """Compiles one OpenAPI document; not reusable across documents."""

    def __init__(
        self,
        document: dict[str, Any],
        base_name: str = DEFAULT_BASE_NAME,
        options: CompileOptions | None = None,
        *,
        build_identifier: Callable[[str], str] = build_identifier,
    ) -> None:
        self.document = document
        self.base_name = base_name
        self.options = options or CompileOptions()
        self.build_identifier = build_identifier
        self.overlay, self.scratch = _build_overlay(document)
        self.context = BuildContext(build_identifier=build_identifier)
        self.entries: list[tuple[tuple[str, ...], Declaration]] = []
        self._used_ids: dict[str, int] = {}

    def compile(self) -> NamespaceNode:
        paths = self.document.get("paths") or {}
        if not isinstance(paths, dict):
            raise SchemaValidationError("must be a mapping", field="paths")

        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                continue
            for method, operation in path_item.items():
                if method in HTTP_METHODS and isinstance(operation, dict):
                    self.context.current_path = f"{method.upper()} {path}"
                    self._compile_operation(path, method, path_item, operation)
        self.context.current_path = None

        if self.options.generate_unused_schemas:
            schemas = (self.document.get("components") or {}).get("schemas") or {}
            for name in schemas:
                self.context.register(join_ref(("components", "schemas", name)))

        resolved = ReferenceResolver(self.overlay, self.context).resolve()
        return assemble(self.entries + resolved, build_identifier=self.build_identifier)

    def _dereference(self, value: Any) -> tuple[Any, str | None]:
        """Follow ``$ref`` chains; returns the target and the last ref."""
        ref: str | None = None
        seen: set[str] = set()
        while isinstance(value, dict) and "$ref" in value and value["$ref"] not in seen:
            ref = value["$ref"]
            seen.add(ref)
            target = resolve_reference(self.overlay, ref)
            if target is None:
                raise ReferenceNotFoundError(ref, self.context.current_path)
            value = target
        return value, ref

    def _declare(self, operation_id: str, parts: tuple[str, ...], schema: Any) -> None:
        declaration = build_declaration(schema, self.context, parts[-1])
        self.entries.append(((self.base_name, operation_id) + parts, declaration))

    def _compile_operation(
        self,
        path: str,
        method: str,
        path_item: dict[str, Any],
        operation: dict[str, Any],
    ) -> None:
        raw_id = operation.get("operationId") or slugify(f"{method}_{path}")
        operation_id = _ensure_unique(str(raw_id), self._used_ids)
        inputs: list[OperationInput] = []

        body = self._compile_request_body(operation_id, operation.get("requestBody"))
        if body is not None:
            inputs.append(body)
        inputs.extend(self._compile_parameters(
            operation_id,
            list(path_item.get("parameters") or []) + list(operation.get("parameters") or []),
        ))
        outputs = self._compile_responses(operation_id, operation.get("responses") or {})

        self.entries.append((
            (self.base_name, operation_id, "Input"),
            Declaration("Input", self._input_type(operation_id, inputs)),
        ))
        self.entries.append((
            (self.base_name, operation_id, "Output"),
            Declaration("Output", self._output_type(operation_id, outputs)),
        ))

    def _compile_request_body(self, operation_id: str, request_body: Any) -> OperationInput | None:
        if request_body is None:
            return None
        request_body, _ = self._dereference(request_body)
        if not isinstance(request_body, dict):
            return None
        schemas = _media_schemas(request_body.get("content"))
        if not schemas:
            return None

        bodies = self.scratch[REQUEST_BODIES_KEY].setdefault(operation_id, {})
        branches = []
        for index, schema in enumerate(schemas):
            bodies[f"Body{index}"] = schema
            branches.append(_scratch_ref(REQUEST_BODIES_KEY, operation_id, f"Body{index}"))
        self._declare(operation_id, ("Body",), {"oneOf": branches})
        return OperationInput("body", ("Body",), bool(request_body.get("required")))

    def _compile_parameters(self, operation_id: str, raw_parameters: list[Any]) -> list[OperationInput]:
        parameters: dict[tuple[str, str], tuple[dict[str, Any], str | None]] = {}
        for raw in raw_parameters:
            parameter, ref = self._dereference(raw)
            if not isinstance(parameter, dict) or "name" not in parameter:
                continue
            # operation-level parameters override path-level ones
            parameters[(str(parameter["name"]), str(parameter.get("in", "")))] = (parameter, ref)

        inputs: list[OperationInput] = []
        for (name, _), (parameter, ref) in parameters.items():
            schema = self._parameter_schema(parameter)
            schema_is_ref = isinstance(parameter.get("schema"), dict) and "$ref" in parameter["schema"]
            if ref is None or schema_is_ref:
                self._declare(operation_id, ("Parameters", name), schema)
            else:
                # shared component parameters are declared once in the scratch area
                key = split_ref(ref)[-1]
                self.scratch[PARAMETERS_KEY][key] = schema
                self._declare(operation_id, ("Parameters", name), _scratch_ref(PARAMETERS_KEY, key))
            inputs.append(OperationInput(name, ("Parameters", name), bool(parameter.get("required"))))
        return inputs

    def _parameter_schema(self, parameter: dict[str, Any]) -> Any:
        if "schema" in parameter:
            return parameter["schema"]
        schemas = _media_schemas(parameter.get("content"))
        if schemas:
            return {"oneOf": schemas}
        return True

    def _compile_responses(self, operation_id: str, responses: Any) -> list[OperationOutput]:
        if not isinstance(responses, dict):
            return []
        outputs: list[OperationOutput] = []
        for code, raw_response in responses.items():
            status = str(code)
            response, _ = self._dereference(raw_response)
            if not isinstance(response, dict):
                continue

            schemas = _media_schemas(response.get("content"))
            if not schemas:
                continue

            stored = self.scratch[RESPONSES_KEY].setdefault(operation_id, {})
            variants = stored.setdefault(f"Response{status}", {})
            branches = []
            for index, schema in enumerate(schemas):
                variants[f"Schema{index}"] = schema
                branches.append(
                    _scratch_ref(RESPONSES_KEY, operation_id, f"Response{status}", f"Schema{index}")
                )
            output = OperationOutput(
                status=status,
                path=("Responses", f"${status}"),
                headers=self._collect_headers(response),
            )
            self._declare(operation_id, output.path, {"oneOf": branches})
            outputs.append(output)
        return outputs

    def _collect_headers(self, response: dict[str, Any]) -> dict[str, tuple[Any, bool]]:
        headers = response.get("headers")
        if not isinstance(headers, dict):
            return {}
        collected: dict[str, tuple[Any, bool]] = {}
        for name, raw_header in headers.items():
            header, _ = self._dereference(raw_header)
            if isinstance(header, dict) and "schema" in header:
                collected[name] = (header["schema"], bool(header.get("required")))
        return collected

    def _input_type(self, operation_id: str, inputs: list[OperationInput]) -> ObjectOf:
        return ObjectOf(fields=tuple(
            Field(
                name=to_camel_case(item.name),
                type=self.context.reference((self.base_name, operation_id) + item.path),
                required=item.required,
                read_only=True,
            )
            for item in inputs
        ))

    def _output_type(self, operation_id: str, outputs: list[OperationOutput]) -> TypeExpression:
        variants = [
            self._output_variant(operation_id, output)
            for output in outputs
            if self.options.includes(output.status)
        ]
        if not variants:
            return ANY
        return Union(tuple(variants))

    def _output_variant(self, operation_id: str, output: OperationOutput) -> ObjectOf:
        code = _status_code(output.status)
        status_schema: dict[str, Any] = {"type": "number"} if code is None else {"const": code}
        headers_schema = {
            "type": "object",
            "required": [to_camel_case(name) for name, (_, required) in output.headers.items() if required],
            "properties": {to_camel_case(name): schema for name, (schema, _) in output.headers.items()},
            "patternProperties": {HEADER_PATTERN: HEADER_VALUE_SCHEMA},
        }
        fields = [
            Field("status", union_of(build_types(status_schema, self.context)), required=True, read_only=True),
            Field(
                "headers",
                union_of(build_types(headers_schema, self.context)),
                required=any(required for _, required in output.headers.values()),
                read_only=True,
            ),
            Field(
                "body",
                self.context.reference((self.base_name, operation_id) + output.path),
                required=True,
                read_only=True,
            ),
        ]
        return ObjectOf(fields=tuple(fields))


def compile_openapi(
    document: dict[str, Any],
    base_name: str = DEFAULT_BASE_NAME,
    options: CompileOptions | Mapping[str, Any] | None = None,
    *,
    build_identifier: Callable[[str], str] = build_identifier,
) -> NamespaceNode:
    """Compile an OpenAPI v3 document into a declaration tree.

    Args:
        document: The parsed OpenAPI document; left untouched.
        base_name: Top-level namespace holding the operations.
        options: ``CompileOptions`` or a mapping with ``filterStatuses`` /
            ``generateUnusedSchemas`` keys.
        build_identifier: Maps path segments to identifiers.

    Returns:
        The root of the namespace tree.
    """
    if options is not None and not isinstance(options, CompileOptions):
        options = CompileOptions.from_mapping(options)
    compiler = OpenAPICompiler(
        document,
        base_name,
        options,
        build_identifier=build_identifier,
    )
    return compiler.compile()
