"""Dispatch table from template type to generator.

Each generator class takes the shared :class:`TemplateRenderer`; the config
and plugin generators also read :class:`ScaffoldSettings` for versions and
defaults.
"""

from __future__ import annotations

from typing import Any, Optional

from ..config import ScaffoldSettings
from ..scaffolder.render import ScaffoldContractError
from ..scaffolder.templates import TemplateRenderer
from .access_gen import AccessControlGenerator
from .component_gen import ComponentGenerator
from .config_gen import ConfigGenerator
from .endpoint_gen import EndpointGenerator
from .entity_gen import BlockGenerator, CollectionGenerator, FieldGenerator
from .hook_gen import HookGenerator
from .migration_gen import MigrationGenerator
from .models import GeneratedCode
from .plugin_gen import PluginGenerator


GENERATORS: dict[str, type] = {
    "collection": CollectionGenerator,
    "field": FieldGenerator,
    "config": ConfigGenerator,
    "access-control": AccessControlGenerator,
    "hook": HookGenerator,
    "endpoint": EndpointGenerator,
    "plugin": PluginGenerator,
    "block": BlockGenerator,
    "migration": MigrationGenerator,
    "component": ComponentGenerator,
}

GENERATOR_TYPES: tuple[str, ...] = tuple(GENERATORS)

# Generators whose constructor also accepts settings.
_SETTINGS_AWARE = (ConfigGenerator, PluginGenerator)


def get_generator(
    template_type: str,
    renderer: Optional[TemplateRenderer] = None,
    settings: Optional[ScaffoldSettings] = None,
) -> Any:
    """Instantiate the generator registered for *template_type*.

    Raises:
        ScaffoldContractError: *template_type* is not registered.
    """
    try:
        generator_cls = GENERATORS[template_type]
    except (KeyError, TypeError):
        raise ScaffoldContractError(
            f"Unsupported generator type: {template_type!r} (expected one of {', '.join(GENERATOR_TYPES)})"
        ) from None
    renderer = renderer or TemplateRenderer()
    if generator_cls in _SETTINGS_AWARE:
        return generator_cls(renderer, settings=settings)
    return generator_cls(renderer)


def generate_template(
    template_type: str,
    options: Optional[dict[str, Any]] = None,
    renderer: Optional[TemplateRenderer] = None,
    settings: Optional[ScaffoldSettings] = None,
) -> GeneratedCode:
    """Generate one piece of Payload code.

    Raises:
        ScaffoldContractError: *template_type* is not registered.
        GeneratorOptionsError: *options* fail the generator's checks.
    """
    generator = get_generator(template_type, renderer, settings)
    return generator.generate({} if options is None else options)
