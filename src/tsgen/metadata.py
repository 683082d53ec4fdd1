"""Runtime type metadata consumed by the declaration builders."""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional


class PrimitiveKind(Enum):
    """Scalar shapes with a fixed TypeScript alias."""
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    DATE_TIME = "datetime"
    NONE = "none"
    ANY = "any"


class TypeDescriptor(ABC):
    """
    Handle for one type of the source runtime.

    Descriptors are hashable and compare equal when they describe the same
    runtime type; the context uses them directly as registry keys.
    """

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Fully qualified form, used for skip pattern matching."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name emitted for declarations and generic parameters."""

    @property
    @abstractmethod
    def is_enum(self) -> bool: ...

    @property
    @abstractmethod
    def is_interface(self) -> bool: ...

    @property
    @abstractmethod
    def is_abstract(self) -> bool: ...

    @property
    @abstractmethod
    def is_structural(self) -> bool:
        """True for user types whose fields can be projected into a declaration."""

    @property
    @abstractmethod
    def is_generic_parameter(self) -> bool: ...

    @property
    @abstractmethod
    def is_generic_definition(self) -> bool:
        """True for an open generic type (declares type parameters)."""

    @property
    @abstractmethod
    def is_constructed_generic(self) -> bool:
        """True for a generic type with concrete arguments bound."""

    @property
    @abstractmethod
    def requires_default_constructor(self) -> bool:
        """For generic parameters: whether a parameterless constructor is required."""

    @property
    @abstractmethod
    def primitive_kind(self) -> Optional[PrimitiveKind]: ...

    @abstractmethod
    def generic_definition(self) -> TypeDescriptor:
        """Open form of a constructed generic (self for anything else)."""

    @abstractmethod
    def generic_arguments(self) -> list[TypeDescriptor]:
        """Bound arguments of a constructed generic, or the parameters of a definition."""

    @abstractmethod
    def generic_constraints(self) -> list[TypeDescriptor]:
        """Upper bounds of a generic parameter."""

    @abstractmethod
    def generic_alternatives(self) -> list[TypeDescriptor]:
        """Value restrictions of a generic parameter (one of the listed types)."""

    @abstractmethod
    def base_type(self) -> Optional[TypeDescriptor]:
        """Base class, or None when the base is the universal root."""

    @abstractmethod
    def interfaces(self) -> list[TypeDescriptor]:
        """Supertypes declared directly on the type, other than the base type."""

    @abstractmethod
    def members(self) -> list[tuple[str, TypeDescriptor]]:
        """Public instance fields then properties declared on this type itself."""

    @abstractmethod
    def enum_members(self) -> list[tuple[str, Any]]:
        """Enum member names and raw values, in declaration order."""

    @abstractmethod
    def element_type(self) -> Optional[TypeDescriptor]:
        """Element type for sequence-shaped types, else None."""

    @abstractmethod
    def key_value_types(self) -> Optional[tuple[TypeDescriptor, TypeDescriptor]]:
        """Key and value types for mapping-shaped types, else None."""

    @abstractmethod
    def tuple_elements(self) -> Optional[list[TypeDescriptor]]:
        """Positional element types for fixed-length tuples, else None."""

    @abstractmethod
    def union_members(self) -> list[TypeDescriptor]:
        """Alternatives of a union type (empty for anything else)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.display_name})"
