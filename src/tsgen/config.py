"""Generator options, environment settings and type mapping files."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tsgen.metadata import TypeDescriptor


DEFAULT_PRIMITIVE_TYPE_MAP: dict[str, str] = {
    "uuid.UUID": "string",
}


# ============================================================
# Generator options
# ============================================================

@dataclass(frozen=True)
class GeneratorOptions:
    """Configuration for projecting runtime types into TypeScript declarations."""

    # Regexes searched in a type's display name (example: r"^pydantic\.")
    skip_type_patterns: tuple[str, ...] = ()

    # Emit every class as an interface (base type moves into the extends list)
    use_interface_for_classes: bool = False

    # datetime/date -> Date instead of string
    use_date_for_datetime: bool = False

    # Called with the class descriptor when its real base is the root or was skipped
    default_base_type: Optional[Callable[[TypeDescriptor], Optional[str]]] = None

    # Applied to every emitted class, interface, enum and generic parameter name
    type_renamer: Optional[Callable[[str], str]] = None

    # Display name -> TypeScript alias, checked before the built-in primitive table
    primitive_type_map: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_PRIMITIVE_TYPE_MAP))

    # Jinja2 source replacing the packaged template when non-empty
    template: Optional[str] = None


# ============================================================
# Environment settings
# ============================================================

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env",), env_file_encoding="utf-8", extra="ignore")

    skip_type_patterns: list[str] = Field(default_factory=list, alias="TSGEN_SKIP_TYPE_PATTERNS")
    use_interface_for_classes: bool = Field(default=False, alias="TSGEN_USE_INTERFACE_FOR_CLASSES")
    use_date_for_datetime: bool = Field(default=False, alias="TSGEN_USE_DATE_FOR_DATETIME")
    template_path: Path | None = Field(default=None, alias="TSGEN_TEMPLATE_PATH")
    type_map_path: Path | None = Field(default=None, alias="TSGEN_TYPE_MAP_PATH")


def load_type_mapping(path: Path) -> dict[str, str]:
    """Load display-name -> TypeScript alias overrides from a YAML-like file."""
    if not path.exists():
        return {}

    type_mapping: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if ":" not in stripped:
            continue
        key, value = stripped.split(":", 1)
        key = key.strip()
        value = value.strip()
        if key and value:
            type_mapping[key] = value
    return type_mapping


def options_from_settings(
    settings: Settings,
    *,
    skip_type_patterns: tuple[str, ...] = (),
    use_interface_for_classes: bool | None = None,
    use_date_for_datetime: bool | None = None,
    template_path: Path | None = None,
    type_map_path: Path | None = None,
) -> GeneratorOptions:
    """Merge environment settings with explicit (CLI) overrides; overrides win."""
    primitive_type_map = dict(DEFAULT_PRIMITIVE_TYPE_MAP)
    resolved_type_map_path = type_map_path or settings.type_map_path
    if resolved_type_map_path is not None:
        primitive_type_map.update(load_type_mapping(resolved_type_map_path))

    template: str | None = None
    resolved_template_path = template_path or settings.template_path
    if resolved_template_path is not None:
        template = resolved_template_path.read_text(encoding="utf-8")

    return GeneratorOptions(
        skip_type_patterns=(*settings.skip_type_patterns, *skip_type_patterns),
        use_interface_for_classes=(
            settings.use_interface_for_classes if use_interface_for_classes is None else use_interface_for_classes
        ),
        use_date_for_datetime=(
            settings.use_date_for_datetime if use_date_for_datetime is None else use_date_for_datetime
        ),
        primitive_type_map=primitive_type_map,
        template=template,
    )
