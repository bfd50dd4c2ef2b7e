"""Custom REST endpoint generation.

Generates:
- ``src/endpoints/<name>.ts`` -- one exported ``Endpoint`` object for a
  collection's, a global's or the root config's ``endpoints`` array
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field

from ..scaffolder.identifiers import is_identifier
from ..scaffolder.js import js_property, js_string, js_value
from ..scaffolder.naming import camel_name
from ..scaffolder.templates import TemplateRenderer
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


HttpMethod = Literal["get", "head", "post", "put", "patch", "delete", "connect", "options"]

BODY_METHODS: tuple[str, ...] = ("post", "put", "patch")


class EndpointOptions(GeneratorOptions):
    path: str
    method: HttpMethod = "get"
    name: Optional[str] = None
    handler: Optional[str] = None
    collection: Optional[str] = None
    global_: Optional[str] = Field(default=None, alias="global")
    is_authenticated: bool = Field(default=False, alias="isAuthenticated")
    process_request_data: bool = Field(default=False, alias="processRequestData")
    handle_cors: bool = Field(default=False, alias="handleCORS")
    custom: Optional[dict[str, Any]] = None
    description: Optional[str] = None


class EndpointGenerator:
    """Generates one endpoint module."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(EndpointOptions, options)
        owner = opts.collection or opts.global_
        name = opts.name or camel_name(f"{opts.method} {owner or ''} {opts.path} endpoint")
        self._check(opts, name)

        if opts.collection:
            location = f"collection '{opts.collection}' (mounted at /api/{opts.collection}{opts.path})"
        elif opts.global_:
            location = f"global '{opts.global_}' (mounted at /api/globals/{opts.global_}{opts.path})"
        else:
            location = f"root config (mounted at /api{opts.path})"
        context = {
            "name": name,
            "method": opts.method,
            "path_line": js_property("path", js_string(opts.path), 1),
            "method_line": js_property("method", js_string(opts.method), 1),
            "custom_line": js_property("custom", js_value(opts.custom, 1), 1) if opts.custom else None,
            "location": location,
            "description": opts.description,
            "authenticated": opts.is_authenticated,
            "read_body": opts.process_request_data and opts.method in BODY_METHODS,
            "params": [segment[1:] for segment in opts.path.split("/") if segment.startswith(":")],
            "cors": opts.handle_cors,
            "handler": opts.handler.strip() if opts.handler else None,
        }
        return GeneratedCode(
            code=self.renderer.render("generators/endpoint.ts.j2", context),
            file_name=f"src/endpoints/{name}.ts",
        )

    @staticmethod
    def _check(opts: EndpointOptions, name: str) -> None:
        errors = []
        if not opts.path.startswith("/"):
            errors.append(option_error("path", f"Endpoint path {opts.path!r} must start with '/'."))
        if opts.collection and opts.global_:
            errors.append(option_error("global", "An endpoint belongs to a collection or a global, not both."))
        if not is_identifier(name):
            errors.append(option_error("name", f"Endpoint name {name!r} is not a valid identifier."))
        for segment in opts.path.split("/"):
            if segment.startswith(":") and not is_identifier(segment[1:]):
                errors.append(option_error("path", f"Route parameter {segment!r} is not a valid identifier."))
        raise_for(errors)
