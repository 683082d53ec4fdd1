"""Render-ready declaration records accumulated during one generation run."""
from __future__ import annotations

from dataclasses import dataclass, field

from tsgen.metadata import TypeDescriptor

CLASS_KIND = "class"
INTERFACE_KIND = "interface"


@dataclass(frozen=True)
class MemberDeclaration:
    """One `name: type` line of a class or interface body."""
    name: str
    type_ref: str


@dataclass
class TypeDeclaration:
    """A class or interface declaration built from one normalized descriptor."""
    source: TypeDescriptor
    name: str
    kind: str = CLASS_KIND
    is_abstract: bool = False
    type_parameters: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)
    members: list[MemberDeclaration] = field(default_factory=list)

    @property
    def is_interface(self) -> bool:
        return self.kind == INTERFACE_KIND

    @property
    def declaration(self) -> str:
        """
        Declaration header, ready to be followed by the body.

        Examples:
          export class Box<T> extends Base implements Sized
          export abstract class Shape
          export interface Named extends Labelled, Keyed
        """
        head = self.name
        if self.type_parameters:
            head = f"{head}<{', '.join(self.type_parameters)}>"

        if self.is_interface:
            extends_clause = f" extends {', '.join(self.extends)}" if self.extends else ""
            return f"export interface {head}{extends_clause}"

        keyword = "export abstract class" if self.is_abstract else "export class"
        extends_clause = f" extends {', '.join(self.extends)}" if self.extends else ""
        implements_clause = f" implements {', '.join(self.implements)}" if self.implements else ""
        return f"{keyword} {head}{extends_clause}{implements_clause}"


@dataclass(frozen=True)
class EnumField:
    """Enum member name and its TypeScript literal value."""
    name: str
    value: str


@dataclass(frozen=True)
class EnumDeclaration:
    source: TypeDescriptor
    name: str
    fields: tuple[EnumField, ...] = ()
