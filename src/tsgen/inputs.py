"""Resolve CLI inputs (modules, files, globs, directories) into root types."""
from __future__ import annotations

import glob as glob_module
import importlib
import importlib.util
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Iterable, Optional

from tsgen.errors import InputError

PATH_WILDCARDS = ("*", "?", "[")


@dataclass(frozen=True)
class InputModule:
    """An imported module and the names requested from it (empty: every public class)."""
    module: ModuleType
    requested_names: tuple[str, ...] = ()

    @property
    def source_file(self) -> Optional[Path]:
        module_file = getattr(self.module, "__file__", None)
        return Path(module_file).resolve() if module_file else None


def looks_like_path(raw_input: str) -> bool:
    """Return True if the input names a file, directory or glob rather than a module."""
    if raw_input.endswith(".py") or os.sep in raw_input or "/" in raw_input:
        return True
    if any(wildcard in raw_input for wildcard in PATH_WILDCARDS):
        return True
    return Path(raw_input).exists()


def collect_python_files(raw_inputs: Iterable[str]) -> list[Path]:
    """Collect Python files from paths, directories, or globs."""
    discovered_files: list[Path] = []

    for raw_input in raw_inputs:
        input_path = Path(raw_input)

        if input_path.is_dir():
            discovered_files.extend(sorted(input_path.rglob("*.py")))
            continue

        if input_path.is_file() and input_path.suffix == ".py":
            discovered_files.append(input_path)
            continue

        glob_matches = [Path(match) for match in glob_module.glob(raw_input, recursive=True)]
        discovered_files.extend(sorted(match for match in glob_matches if match.suffix == ".py"))

    seen_resolved_paths: set[Path] = set()
    unique_files: list[Path] = []
    for file_path in discovered_files:
        resolved_path = file_path.resolve()
        if resolved_path.name == "__init__.py" or resolved_path in seen_resolved_paths:
            continue
        seen_resolved_paths.add(resolved_path)
        unique_files.append(resolved_path)
    return unique_files


def module_name_for_file(file_path: Path) -> str:
    """Stable, import-safe module name for a loose source file."""
    safe = re.sub(r"\W", "_", file_path.with_suffix("").as_posix().strip("/"))
    return f"_tsgen_input__{safe}"


def load_module_from_file(file_path: Path) -> ModuleType:
    """Load a Python module from a file path; re-executes it only when the file changed."""
    source_dir = str(file_path.parent)
    if source_dir not in sys.path:
        sys.path.insert(0, source_dir)

    module_name = module_name_for_file(file_path)
    mtime = os.path.getmtime(file_path)

    cached = sys.modules.get(module_name)
    if cached is not None and getattr(cached, "__file_mtime__", None) == mtime:
        return cached

    sys.modules.pop(module_name, None)

    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise InputError(f"Cannot load {file_path}")

    module = importlib.util.module_from_spec(spec)

    # Registered before exec: dataclasses and get_type_hints look the module up by name.
    sys.modules[module_name] = module

    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise InputError(f"Failed to load {file_path}: {exc}") from exc

    setattr(module, "__file_mtime__", mtime)
    return module


def import_input_module(module_name: str, *, reload: bool = False) -> ModuleType:
    """Import a module by dotted name, optionally reloading an already imported one."""
    try:
        module = importlib.import_module(module_name)
        if reload:
            module = importlib.reload(module)
    except ImportError as exc:
        raise InputError(f"Cannot import module {module_name}: {exc}") from exc
    return module


def load_inputs(raw_inputs: Iterable[str], *, reload: bool = False) -> list[InputModule]:
    """Resolve every input into imported modules, in input order."""
    input_modules: list[InputModule] = []
    loaded_files: set[Path] = set()

    for raw_input in raw_inputs:
        if looks_like_path(raw_input):
            python_files = collect_python_files([raw_input])
            if not python_files:
                raise InputError(f"No .py files found from input {raw_input}")
            for file_path in python_files:
                if file_path in loaded_files:
                    continue
                loaded_files.add(file_path)
                input_modules.append(InputModule(load_module_from_file(file_path)))
            continue

        module_name, _, raw_names = raw_input.partition(":")
        requested_names = tuple(name.strip() for name in raw_names.split(",") if name.strip())
        input_modules.append(InputModule(import_input_module(module_name, reload=reload), requested_names))

    return input_modules


def collect_root_types(input_modules: Iterable[InputModule]) -> list[type]:
    """Requested names, or the public classes defined in each module, in definition order."""
    root_types: list[type] = []
    for input_module in input_modules:
        module = input_module.module

        if input_module.requested_names:
            for requested_name in input_module.requested_names:
                if not hasattr(module, requested_name):
                    raise InputError(f"Module {module.__name__} has no attribute {requested_name}")
                root_types.append(getattr(module, requested_name))
            continue

        for attribute_name, attribute in vars(module).items():
            if attribute_name.startswith("_") or not isinstance(attribute, type):
                continue
            if attribute.__module__ == module.__name__:
                root_types.append(attribute)
    return root_types
