"""tsgen.

Project Python runtime types (classes, dataclasses, protocols, enums, generics)
into TypeScript declarations.
"""

from tsgen.config import GeneratorOptions, Settings
from tsgen.generator import collect_declarations, generate
from tsgen.reflection import constructible, describe

__version__ = "0.1.0"

__all__ = [
    "GeneratorOptions",
    "Settings",
    "collect_declarations",
    "constructible",
    "describe",
    "generate",
]
