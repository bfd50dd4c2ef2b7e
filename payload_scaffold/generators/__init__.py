"""Single-file generators for Payload CMS code.

Where the scaffolder writes a whole project, each generator here produces
one module (plus companion files) for an existing project: a collection,
field, block, access function, hook, endpoint, migration, admin component,
root config or a plugin package.

Quick usage::

    from payload_scaffold.generators import generate_template

    result = generate_template("hook", {"type": "beforeChange", "collection": "posts"})
    print(result.file_name, result.code)
"""

from payload_scaffold.generators.models import GeneratedCode, GeneratorOptionsError
from payload_scaffold.generators.registry import (
    GENERATOR_TYPES,
    GENERATORS,
    generate_template,
    get_generator,
)

__all__ = [
    "GENERATORS",
    "GENERATOR_TYPES",
    "GeneratedCode",
    "GeneratorOptionsError",
    "generate_template",
    "get_generator",
]
