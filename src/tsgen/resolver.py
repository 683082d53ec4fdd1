"""Translate type descriptors into TypeScript type reference strings."""
from __future__ import annotations

from tsgen import builder
from tsgen.config import GeneratorOptions
from tsgen.context import GenerationContext
from tsgen.metadata import PrimitiveKind, TypeDescriptor

FALLBACK_TYPE_REFERENCE = "any"

PRIMITIVE_ALIASES: dict[PrimitiveKind, str] = {
    PrimitiveKind.BOOLEAN: "boolean",
    PrimitiveKind.NUMBER: "number",
    PrimitiveKind.STRING: "string",
    PrimitiveKind.NONE: "null",
    PrimitiveKind.ANY: FALLBACK_TYPE_REFERENCE,
}

RECORD_KEY_TYPES = ("string", "number")


def map_primitive(primitive_kind: PrimitiveKind, options: GeneratorOptions) -> str:
    """Return the fixed TypeScript alias for a primitive shape."""
    if primitive_kind is PrimitiveKind.DATE_TIME:
        return "Date" if options.use_date_for_datetime else "string"
    return PRIMITIVE_ALIASES.get(primitive_kind, FALLBACK_TYPE_REFERENCE)


def resolve_type_reference(descriptor: TypeDescriptor, context: GenerationContext) -> str:
    """
    Return the string a member, argument or clause should use to refer to `descriptor`.

    Always returns something: anything unrepresentable (or skipped) becomes `any`.
    User structures are built on the way, so the returned name is registered.
    """
    if descriptor.is_generic_parameter:
        return context.rename(descriptor.name)

    if descriptor.is_enum:
        enum_declaration = builder.build_enum_declaration(descriptor, context)
        return enum_declaration.name if enum_declaration is not None else FALLBACK_TYPE_REFERENCE

    mapped_alias = context.options.primitive_type_map.get(descriptor.display_name)
    if mapped_alias is not None:
        return mapped_alias

    primitive_kind = descriptor.primitive_kind
    if primitive_kind is not None:
        return map_primitive(primitive_kind, context.options)

    union_members = descriptor.union_members()
    if union_members:
        return " | ".join(dict.fromkeys(resolve_type_reference(member, context) for member in union_members))

    element_type = descriptor.element_type()
    if element_type is not None:
        return f"Array<{resolve_type_reference(element_type, context)}>"

    key_value_types = descriptor.key_value_types()
    if key_value_types is not None:
        key_type = resolve_type_reference(key_value_types[0], context)
        value_type = resolve_type_reference(key_value_types[1], context)
        if key_type not in RECORD_KEY_TYPES:
            key_type = "string"
        return f"Record<{key_type}, {value_type}>"

    tuple_elements = descriptor.tuple_elements()
    if tuple_elements is not None:
        return f"[{', '.join(resolve_type_reference(element, context) for element in tuple_elements)}]"

    if not descriptor.is_structural:
        return FALLBACK_TYPE_REFERENCE

    type_declaration = builder.build_type_declaration(descriptor, context)
    if type_declaration is None:
        return FALLBACK_TYPE_REFERENCE

    if descriptor.is_constructed_generic:
        generic_arguments = [resolve_type_reference(argument, context) for argument in descriptor.generic_arguments()]
    elif descriptor.is_generic_definition:
        # A bare generic class outside its own body: its parameters are not in scope.
        generic_arguments = [FALLBACK_TYPE_REFERENCE] * len(descriptor.generic_arguments())
    else:
        return type_declaration.name

    return f"{type_declaration.name}<{', '.join(generic_arguments)}>"
