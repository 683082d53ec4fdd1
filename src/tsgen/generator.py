"""Drive declaration building for a root set of types and render the result."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from tsgen.builder import build_enum_declaration, build_type_declaration
from tsgen.config import GeneratorOptions
from tsgen.context import GenerationContext
from tsgen.reflection import describe
from tsgen.rendering import TypeScriptRenderer

logger = logging.getLogger(__name__)


def populate_declarations(root_types: Iterable[Any], context: GenerationContext) -> None:
    """Dispatch each root, in order, to the enum or type builder."""
    for root_type in root_types:
        descriptor = describe(root_type)
        if descriptor.is_enum:
            build_enum_declaration(descriptor, context)
        elif descriptor.is_structural:
            build_type_declaration(descriptor, context)
        else:
            logger.warning("Ignoring root %s: not an enum or structural type", descriptor.display_name)


def collect_declarations(root_types: Iterable[Any], options: Optional[GeneratorOptions] = None) -> GenerationContext:
    """Build every declaration reachable from `root_types` without rendering."""
    context = GenerationContext(options)
    populate_declarations(root_types, context)
    return context


def generate(root_types: Iterable[Any], options: Optional[GeneratorOptions] = None) -> str:
    """Generate TypeScript declarations for Python types (or TypeDescriptors)."""
    context = collect_declarations(root_types, options)
    logger.debug(
        "Rendering %d type and %d enum declarations",
        len(context.types),
        len(context.enums),
    )
    renderer = TypeScriptRenderer(template=context.options.template)
    return renderer.render(context.type_declarations, context.enum_declarations)
