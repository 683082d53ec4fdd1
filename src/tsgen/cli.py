"""Command line entry point: generate TypeScript declarations from Python modules."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, Optional

from watchfiles import DefaultFilter, watch

from tsgen.config import GeneratorOptions, Settings, options_from_settings
from tsgen.errors import InputError
from tsgen.generator import generate
from tsgen.inputs import collect_root_types, load_inputs


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser for generator settings."""
    parser = argparse.ArgumentParser(prog="tsgen", description="Generate TypeScript declarations from Python types.")
    parser.add_argument(
        "inputs",
        nargs="+",
        help="Modules (pkg.mod or pkg.mod:Name,Other), Python files, globs, or directories.",
    )
    parser.add_argument("--out", default=None, help="Write to file instead of stdout.")
    parser.add_argument(
        "--skip",
        dest="skip_patterns",
        action="append",
        default=[],
        help=r"Regex searched in qualified type names; matching types are not emitted. Example: --skip '^pydantic\.'",
    )
    parser.add_argument(
        "--interfaces",
        dest="use_interface_for_classes",
        action="store_true",
        default=None,
        help="Emit classes as interfaces.",
    )
    parser.add_argument(
        "--date",
        dest="use_date_for_datetime",
        action="store_true",
        default=None,
        help="Map datetime/date to Date instead of string.",
    )
    parser.add_argument("--template", default=None, help="Jinja2 template file replacing the default template.")
    parser.add_argument("--type-map", dest="type_map", default=None, help="File of `qualified.Name: alias` overrides.")
    parser.add_argument("--watch", action="store_true", help="Regenerate when input sources change.")
    parser.add_argument("--verbose", action="store_true", help="Log declaration decisions to stderr.")
    return parser


def build_options(args: argparse.Namespace, settings: Optional[Settings] = None) -> GeneratorOptions:
    """Merge TSGEN_* settings with parsed CLI arguments."""
    return options_from_settings(
        settings or Settings(),
        skip_type_patterns=tuple(args.skip_patterns),
        use_interface_for_classes=args.use_interface_for_classes,
        use_date_for_datetime=args.use_date_for_datetime,
        template_path=Path(args.template) if args.template else None,
        type_map_path=Path(args.type_map) if args.type_map else None,
    )


def write_output(generated_typescript: str, out_path: Optional[Path]) -> None:
    if out_path is None:
        print(generated_typescript, end="")
        return
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(generated_typescript, encoding="utf-8")
    print(f"[tsgen] OK -> {out_path}", flush=True)


def run_generation(
    raw_inputs: Iterable[str],
    options: GeneratorOptions,
    out_path: Optional[Path],
    *,
    reload: bool = False,
) -> int:
    """Load inputs, generate declarations and write them out."""
    root_types = collect_root_types(load_inputs(raw_inputs, reload=reload))
    if not root_types:
        raise InputError("No types found in inputs.")

    write_output(generate(root_types, options), out_path)
    return 0


# ============================================================
# Watch mode
# ============================================================

class InputsFilter(DefaultFilter):
    def __call__(self, change, path: str) -> bool:
        return super().__call__(change, path) and path.endswith(".py")


def _run_and_report(raw_inputs: list[str], options: GeneratorOptions, out_path: Optional[Path], *, reload: bool) -> int:
    try:
        return run_generation(raw_inputs, options, out_path, reload=reload)
    except Exception as exc:
        print(f"[tsgen] FAILED: {exc}", file=sys.stderr, flush=True)
        return 1


def watch_inputs(raw_inputs: list[str], options: GeneratorOptions, out_path: Optional[Path]) -> int:
    """Generate once, then regenerate on every .py change next to the inputs."""
    input_modules = load_inputs(raw_inputs)
    watch_dirs = sorted({str(m.source_file.parent) for m in input_modules if m.source_file is not None})
    if not watch_dirs:
        print("[tsgen] ERROR: no watchable source directories in inputs.", file=sys.stderr)
        return 2

    _run_and_report(raw_inputs, options, out_path, reload=False)

    print("[tsgen] Watching:", flush=True)
    for watch_dir in watch_dirs:
        print("  -", watch_dir, flush=True)

    for changes in watch(*watch_dirs, watch_filter=InputsFilter(), debounce=300, raise_interrupt=False):
        changed = sorted({path for (_change, path) in changes})
        print("\n[tsgen] Change detected:", flush=True)
        for path in changed:
            print("  -", path, flush=True)

        _run_and_report(raw_inputs, options, out_path, reload=True)
        time.sleep(0.05)

    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for generating TypeScript declarations."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[tsgen] %(levelname)s %(name)s: %(message)s")

    try:
        options = build_options(args)
        out_path = Path(args.out) if args.out else None
        if args.watch:
            return watch_inputs(args.inputs, options, out_path)
        return run_generation(args.inputs, options, out_path)
    except Exception as exc:
        print(f"tsgen: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
