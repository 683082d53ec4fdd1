"""Build class, interface and enum declarations from type descriptors."""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from tsgen import resolver
from tsgen.context import GenerationContext
from tsgen.declarations import (
    CLASS_KIND,
    INTERFACE_KIND,
    EnumDeclaration,
    EnumField,
    MemberDeclaration,
    TypeDeclaration,
)
from tsgen.metadata import TypeDescriptor

logger = logging.getLogger(__name__)


# ============================================================
# Class / interface declarations
# ============================================================

def build_type_declaration(descriptor: TypeDescriptor, context: GenerationContext) -> Optional[TypeDeclaration]:
    """
    Produce (or return the already produced) declaration for a structural type.

    Returns None only when the type matches a skip pattern. The declaration is
    claimed before recursing into supertypes and constraints, and registered
    before its members are resolved, so cyclic graphs find it instead of recursing.
    """
    if context.is_skipped(descriptor):
        logger.debug("Skipping %s (matched skip pattern)", descriptor.display_name)
        return None

    if descriptor.is_constructed_generic:
        descriptor = descriptor.generic_definition()

    existing = context.find_type(descriptor)
    if existing is not None:
        return existing

    as_interface = descriptor.is_interface or context.options.use_interface_for_classes
    type_declaration = TypeDeclaration(
        source=descriptor,
        name=context.rename(descriptor.name),
        kind=INTERFACE_KIND if as_interface else CLASS_KIND,
        is_abstract=descriptor.is_abstract and not as_interface,
    )
    context.claim_type(type_declaration)

    base_reference, emitted_base = resolve_base_reference(descriptor, context)
    interface_references = collect_interface_references(descriptor, emitted_base, context)

    if as_interface:
        type_declaration.extends = ([base_reference] if base_reference else []) + interface_references
    else:
        type_declaration.extends = [base_reference] if base_reference else []
        type_declaration.implements = interface_references

    type_declaration.type_parameters = collect_type_parameters(descriptor, as_interface, context)

    context.register_type(type_declaration)
    type_declaration.members.extend(collect_members(descriptor, context))

    logger.debug("Declared %s %s", type_declaration.kind, type_declaration.name)
    return type_declaration


def resolve_base_reference(
    descriptor: TypeDescriptor,
    context: GenerationContext,
) -> tuple[Optional[str], Optional[TypeDescriptor]]:
    """
    Return (extends reference, emitted base descriptor).

    Falls back to the default_base_type hook when a class base is the root,
    not a structure, or skipped. Interfaces never take the hook.
    """
    base = descriptor.base_type()
    if base is not None and base.is_structural and build_type_declaration(base, context) is not None:
        return resolver.resolve_type_reference(base, context), base

    default_base_type = context.options.default_base_type
    if default_base_type is None or descriptor.is_interface:
        return None, None
    return default_base_type(descriptor) or None, None


def collect_supertypes(descriptor: TypeDescriptor) -> set[TypeDescriptor]:
    """All strict supertypes (bases and interfaces, transitively), in normalized form."""
    found: set[TypeDescriptor] = set()
    pending = [descriptor.generic_definition()]
    while pending:
        current = pending.pop()
        direct_supertypes = list(current.interfaces())
        current_base = current.base_type()
        if current_base is not None:
            direct_supertypes.insert(0, current_base)

        for supertype in direct_supertypes:
            normalized = supertype.generic_definition()
            if normalized not in found:
                found.add(normalized)
                pending.append(normalized)
    return found


def collect_interface_references(
    descriptor: TypeDescriptor,
    emitted_base: Optional[TypeDescriptor],
    context: GenerationContext,
) -> list[str]:
    """Declared interfaces minus those already implied by the base or by another listed interface."""
    candidates = descriptor.interfaces()

    implied: set[TypeDescriptor] = set()
    if emitted_base is not None:
        implied.add(emitted_base.generic_definition())
        implied |= collect_supertypes(emitted_base)
    for candidate in candidates:
        implied |= collect_supertypes(candidate)

    references: list[str] = []
    listed: set[TypeDescriptor] = set()
    for candidate in candidates:
        normalized = candidate.generic_definition()
        if normalized in implied or normalized in listed:
            continue
        listed.add(normalized)

        if not candidate.is_structural:
            continue
        if build_type_declaration(candidate, context) is None:
            continue
        references.append(resolver.resolve_type_reference(candidate, context))
    return references


def collect_type_parameters(
    descriptor: TypeDescriptor,
    as_interface: bool,
    context: GenerationContext,
) -> list[str]:
    """Render `T`, `T extends Bound`, `T extends (A | B) & { new(): T }` for each parameter."""
    if not descriptor.is_generic_definition:
        return []

    rendered_parameters: list[str] = []
    for parameter in descriptor.generic_arguments():
        parameter_name = context.rename(parameter.name)
        constraint_parts: list[str] = []

        for constraint in parameter.generic_constraints():
            if constraint.is_structural and build_type_declaration(constraint, context) is None:
                continue
            constraint_reference = resolver.resolve_type_reference(constraint, context)
            if constraint_reference != resolver.FALLBACK_TYPE_REFERENCE:
                constraint_parts.append(constraint_reference)

        alternatives = [
            resolver.resolve_type_reference(alternative, context)
            for alternative in parameter.generic_alternatives()
        ]
        if alternatives:
            constraint_parts.append(" | ".join(dict.fromkeys(alternatives)))

        if parameter.requires_default_constructor and not as_interface:
            constraint_parts.append(f"{{ new(): {parameter_name} }}")

        if len(constraint_parts) > 1:
            constraint_parts = [f"({part})" if " | " in part else part for part in constraint_parts]

        if constraint_parts:
            rendered_parameters.append(f"{parameter_name} extends {' & '.join(constraint_parts)}")
        else:
            rendered_parameters.append(parameter_name)
    return rendered_parameters


def collect_members(descriptor: TypeDescriptor, context: GenerationContext) -> list[MemberDeclaration]:
    """Project the type's own public fields and properties, in declaration order."""
    return [
        MemberDeclaration(name=member_name, type_ref=resolver.resolve_type_reference(member_type, context))
        for member_name, member_type in descriptor.members()
    ]


# ============================================================
# Enum declarations
# ============================================================

def format_enum_value(value: Any) -> str:
    """Integers stay numeric; anything else becomes a string literal."""
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, str):
        return json.dumps(value)
    return json.dumps(str(value))


def build_enum_declaration(descriptor: TypeDescriptor, context: GenerationContext) -> Optional[EnumDeclaration]:
    """Produce (or return the already produced) enum declaration; None when skipped."""
    if context.is_skipped(descriptor):
        logger.debug("Skipping enum %s (matched skip pattern)", descriptor.display_name)
        return None

    existing = context.find_enum(descriptor)
    if existing is not None:
        return existing

    enum_declaration = EnumDeclaration(
        source=descriptor,
        name=context.rename(descriptor.name),
        fields=tuple(
            EnumField(name=member_name, value=format_enum_value(member_value))
            for member_name, member_value in descriptor.enum_members()
        ),
    )
    context.register_enum(enum_declaration)
    logger.debug("Declared enum %s", enum_declaration.name)
    return enum_declaration
