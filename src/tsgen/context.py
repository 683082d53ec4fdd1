"""Per-run registry of produced declarations."""
from __future__ import annotations

import re
from typing import Optional

from tsgen.config import GeneratorOptions
from tsgen.declarations import EnumDeclaration, TypeDeclaration
from tsgen.metadata import TypeDescriptor


class GenerationContext:
    """
    State for one generation run.

    - `types` and `enums` keep registration order; that order is handed to the renderer.
    - A declaration is "in progress" from the moment the builder claims its descriptor
      until it is registered, so cycles through bases/constraints find it instead of recursing.
    - Not thread-safe; create one per run.
    """

    def __init__(self, options: Optional[GeneratorOptions] = None) -> None:
        self.options = options or GeneratorOptions()
        self.types: dict[TypeDescriptor, TypeDeclaration] = {}
        self.enums: dict[TypeDescriptor, EnumDeclaration] = {}
        self._in_progress: dict[TypeDescriptor, TypeDeclaration] = {}
        self._skip_patterns = [re.compile(pattern) for pattern in self.options.skip_type_patterns]

    # ---- configuration hooks ----

    def is_skipped(self, descriptor: TypeDescriptor) -> bool:
        """Return True if any skip pattern matches the descriptor's display name."""
        display_name = descriptor.display_name
        return any(pattern.search(display_name) for pattern in self._skip_patterns)

    def rename(self, name: str) -> str:
        renamer = self.options.type_renamer
        return renamer(name) if renamer is not None else name

    # ---- type declarations ----

    def find_type(self, descriptor: TypeDescriptor) -> Optional[TypeDeclaration]:
        existing = self.types.get(descriptor)
        if existing is not None:
            return existing
        return self._in_progress.get(descriptor)

    def claim_type(self, type_declaration: TypeDeclaration) -> None:
        """Mark a declaration as being built (visible to lookups, not yet ordered)."""
        self._in_progress[type_declaration.source] = type_declaration

    def register_type(self, type_declaration: TypeDeclaration) -> None:
        self._in_progress.pop(type_declaration.source, None)
        self.types[type_declaration.source] = type_declaration

    # ---- enum declarations ----

    def find_enum(self, descriptor: TypeDescriptor) -> Optional[EnumDeclaration]:
        return self.enums.get(descriptor)

    def register_enum(self, enum_declaration: EnumDeclaration) -> None:
        self.enums[enum_declaration.source] = enum_declaration

    # ---- renderer inputs ----

    @property
    def type_declarations(self) -> list[TypeDeclaration]:
        return list(self.types.values())

    @property
    def enum_declarations(self) -> list[EnumDeclaration]:
        return list(self.enums.values())
