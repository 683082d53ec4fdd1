"""Jinja2 rendering of accumulated declarations into TypeScript source."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import jinja2

from tsgen.declarations import EnumDeclaration, TypeDeclaration
from tsgen.errors import TemplateError

TEMPLATE_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE_NAME = "declarations.ts.j2"


class TypeScriptRenderer:
    """Render declarations with the packaged template or a caller-supplied one."""

    def __init__(self, template: Optional[str] = None, template_dir: Optional[Path] = None):
        self.template_source = template
        self.template_env = self._setup_jinja_env(template_dir)

    def _setup_jinja_env(self, template_dir: Optional[Path] = None) -> jinja2.Environment:
        """Setup Jinja2 environment (no HTML escaping: the output is TypeScript)."""
        search_path = template_dir if template_dir and template_dir.exists() else TEMPLATE_DIR
        return jinja2.Environment(
            loader=jinja2.FileSystemLoader(search_path),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def _load_template(self) -> jinja2.Template:
        if self.template_source:
            return self.template_env.from_string(self.template_source)
        return self.template_env.get_template(DEFAULT_TEMPLATE_NAME)

    def render(self, types: Iterable[TypeDeclaration], enums: Iterable[EnumDeclaration]) -> str:
        """Render class/interface and enum declarations, in the given order."""
        try:
            template = self._load_template()
            return template.render(types=list(types), enums=list(enums))
        except jinja2.TemplateError as e:
            raise TemplateError(f"Template rendering failed: {e}") from e
