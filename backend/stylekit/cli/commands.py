"""
StyleKit CLI - thin entrypoint for preset maintenance.

Commands:
- serve: Run the HTTP API
- list: List presets (built-in and custom)
- export: Export presets as JSON, CSS or design tokens
- import: Import presets, a collection or a theme from a JSON file
- backup: Create or list backups
- restore: Restore from a stored backup or a backup file
- cleanup: Drop dangling references and old backups
- palette: Derive a theme palette from a seed color

Exit Codes:
===========
- 0: Success
- 1: Validation error
- 2: Not found / built-in resource cannot be changed
- 4: File or JSON error
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

from ..config import StyleKitConfig, load_config
from ..exchange import (
    dumps_envelope,
    export_design_tokens,
    export_presets,
    export_presets_as_css,
    import_envelope,
    import_presets,
    loads_payload,
)
from ..exchange.importer import ImportResult
from ..main import build_catalog, run_server
from ..presets.catalog import PresetCatalog
from ..presets.errors import (
    ImmutableResourceError,
    ImportBatchError,
    NotFoundError,
    ValidationError,
)
from ..themes import generate_color_palette, validate_theme_colors

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VALIDATION = 1
EXIT_NOT_FOUND = 2
EXIT_FILE_ERROR = 4


def _config(args: argparse.Namespace) -> StyleKitConfig:
    config = load_config()
    if args.db:
        config = config.model_copy(update={"db_path": args.db})
    return config


def _catalog(args: argparse.Namespace) -> PresetCatalog:
    return build_catalog(_config(args))


def _fail(message: str, code: int) -> NoReturn:
    print(f"ERROR: {message}", file=sys.stderr)
    sys.exit(code)


def _read_json_file(path_arg: str) -> Any:
    """
    Raises:
        SystemExit(4): File not found or invalid JSON
    """
    path = Path(path_arg).resolve()
    if not path.exists():
        _fail(f"File not found: {path}", EXIT_FILE_ERROR)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}: {e}", EXIT_FILE_ERROR)
    try:
        return loads_payload(text)
    except ValidationError as e:
        _fail(f"Invalid JSON in {path}: {'; '.join(e.errors)}", EXIT_FILE_ERROR)


def _write_output(text: str, output: Optional[str]) -> None:
    if not output:
        print(text)
        return
    path = Path(output).resolve()
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot write {path}: {e}", EXIT_FILE_ERROR)
    print(f"Wrote {path}")


def cmd_serve(args: argparse.Namespace) -> NoReturn:
    """Run the HTTP API until interrupted."""
    config = _config(args)
    updates = {}
    if args.host:
        updates["host"] = args.host
    if args.port:
        updates["port"] = args.port
    if updates:
        config = config.model_copy(update=updates)
    try:
        run_server(config)
    except KeyboardInterrupt:
        print("\nServer stopped by user.", file=sys.stderr)
    sys.exit(EXIT_OK)


def cmd_list(args: argparse.Namespace) -> NoReturn:
    catalog = _catalog(args)
    filters = {}
    if args.category:
        filters["category"] = args.category
    if args.search:
        filters["search_term"] = args.search
    if args.custom:
        filters["is_custom"] = True

    try:
        presets = catalog.search(filters or None)
    except ValidationError as e:
        _fail(str(e), EXIT_VALIDATION)

    if args.json:
        print(json.dumps([p.to_wire() for p in presets], indent=2))
    else:
        for preset in presets:
            kind = "custom" if preset.is_custom else "built-in"
            print(f"{preset.id:40}  {preset.name:30}  {preset.category:13}  {kind}")
        print(f"{len(presets)} preset(s)")
    sys.exit(EXIT_OK)


def cmd_export(args: argparse.Namespace) -> NoReturn:
    """
    Exit codes:
        0: Exported
        1: Nothing selected
        2: Unknown preset id
        4: Output file could not be written
    """
    catalog = _catalog(args)
    try:
        if args.all_custom:
            presets = catalog.list_custom_presets()
        else:
            presets = [catalog.get_preset_or_raise(preset_id) for preset_id in args.preset_ids]
        if not presets:
            raise ValidationError(["No presets selected for export"])
    except NotFoundError as e:
        _fail(str(e), EXIT_NOT_FOUND)
    except ValidationError as e:
        _fail(str(e), EXIT_VALIDATION)

    if args.format == "css":
        text = export_presets_as_css(presets)
    elif args.format == "tokens":
        text = json.dumps(export_design_tokens(presets), indent=2)
    else:
        text = dumps_envelope(export_presets(presets, args.exported_by))

    _write_output(text, args.output)
    sys.exit(EXIT_OK)


def cmd_import(args: argparse.Namespace) -> NoReturn:
    """
    Exit codes:
        0: Everything imported
        1: Batch rejected, or some records were refused
        4: File not found or invalid JSON
    """
    payload = _read_json_file(args.file)
    catalog = _catalog(args)

    try:
        if isinstance(payload, dict) and "type" in payload:
            result = import_envelope(catalog, payload)
        else:
            result = import_presets(catalog, payload)
    except ImportBatchError as e:
        print("✗ Import rejected:", file=sys.stderr)
        for record_error in e.record_errors:
            print(f"  - {record_error}", file=sys.stderr)
        sys.exit(EXIT_VALIDATION)
    except ValidationError as e:
        _fail(str(e), EXIT_VALIDATION)

    if not isinstance(result, ImportResult):
        print(f"✓ Imported {result.name} ({result.id})")
        sys.exit(EXIT_OK)

    print(f"✓ Imported {result.imported_count} preset(s)")
    for record_error in result.errors:
        print(f"  ✗ Preset {record_error.index + 1} ({record_error.name}): {record_error.message}", file=sys.stderr)
    sys.exit(EXIT_VALIDATION if result.errors else EXIT_OK)


def cmd_backup(args: argparse.Namespace) -> NoReturn:
    store = _catalog(args).store
    if args.list:
        backups = store.list_backups()
        for entry in backups:
            print(f"{entry['key']}  {entry['timestamp']}")
        print(f"{len(backups)} backup(s)")
        sys.exit(EXIT_OK)

    snapshot = store.create_backup()
    print(f"✓ Backup created at {snapshot['timestamp']} ({len(snapshot['presets'])} preset(s))")
    if args.output:
        _write_output(json.dumps(snapshot, indent=2), args.output)
    sys.exit(EXIT_OK)


def cmd_restore(args: argparse.Namespace) -> NoReturn:
    """
    Exit codes:
        0: Restored
        1: Malformed backup
        2: Unknown backup key
        4: File not found or invalid JSON
    """
    if not args.key and not args.file:
        _fail("Provide a backup file or --key", EXIT_VALIDATION)

    store = _catalog(args).store
    if args.key:
        data = store.get_backup(args.key)
        if data is None:
            _fail(f"Backup not found: {args.key}", EXIT_NOT_FOUND)
    else:
        data = _read_json_file(args.file)

    try:
        store.restore_from_backup(data)
    except ValidationError as e:
        _fail(str(e), EXIT_VALIDATION)
    print(f"✓ Restored backup version {data['version']}")
    sys.exit(EXIT_OK)


def cmd_cleanup(args: argparse.Namespace) -> NoReturn:
    result = _catalog(args).garbage_collect()
    print(f"✓ Removed {result['favorites_removed']} favorite(s), "
          f"{result['recently_used_removed']} recently-used id(s), "
          f"{result['backups_removed']} backup(s)")
    sys.exit(EXIT_OK)


def cmd_palette(args: argparse.Namespace) -> NoReturn:
    """
    Exit codes:
        0: Palette generated (and passes checks, with --check)
        1: Invalid seed, or --check found problems
    """
    try:
        colors = generate_color_palette(args.seed)
    except ValidationError as e:
        _fail(str(e), EXIT_VALIDATION)

    print(json.dumps(colors.to_wire(), indent=2))

    if args.check:
        problems = validate_theme_colors(colors)
        for problem in problems:
            print(f"  ✗ {problem}", file=sys.stderr)
        if problems:
            sys.exit(EXIT_VALIDATION)
    sys.exit(EXIT_OK)


def _run(func, args: argparse.Namespace) -> NoReturn:
    try:
        func(args)
    except ImmutableResourceError as e:
        _fail(str(e), EXIT_NOT_FOUND)
    except NotFoundError as e:
        _fail(str(e), EXIT_NOT_FOUND)
    sys.exit(EXIT_OK)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stylekit",
        description="StyleKit - preset and theme management",
    )
    parser.add_argument("--db", default=None, help="SQLite database path (default: $STYLEKIT_DB_PATH or ./stylekit.db)")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $STYLEKIT_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to execute")

    parser_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    parser_serve.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    parser_serve.add_argument("--port", type=int, default=None, help="Port (default: 8085)")
    parser_serve.set_defaults(func=cmd_serve)

    parser_list = subparsers.add_parser("list", help="List presets")
    parser_list.add_argument("--category", default=None, help="Only presets in this category")
    parser_list.add_argument("--search", default=None, help="Match name, description or tags")
    parser_list.add_argument("--custom", action="store_true", help="Only custom presets")
    parser_list.add_argument("--json", action="store_true", help="Print presets as JSON")
    parser_list.set_defaults(func=cmd_list)

    parser_export = subparsers.add_parser("export", help="Export presets")
    parser_export.add_argument("preset_ids", nargs="*", help="Preset ids to export")
    parser_export.add_argument("--all-custom", action="store_true", help="Export every custom preset")
    parser_export.add_argument("--format", choices=["json", "css", "tokens"], default="json")
    parser_export.add_argument("--exported-by", default=None, help="Author recorded in the export metadata")
    parser_export.add_argument("--output", "-o", default=None, help="Output file (default: stdout)")
    parser_export.set_defaults(func=cmd_export)

    parser_import = subparsers.add_parser("import", help="Import presets, a collection or a theme")
    parser_import.add_argument("file", help="Path to exported JSON file")
    parser_import.set_defaults(func=cmd_import)

    parser_backup = subparsers.add_parser("backup", help="Create or list backups")
    parser_backup.add_argument("--list", action="store_true", help="List stored backups instead")
    parser_backup.add_argument("--output", "-o", default=None, help="Also write the snapshot to a file")
    parser_backup.set_defaults(func=cmd_backup)

    parser_restore = subparsers.add_parser("restore", help="Restore from a backup")
    parser_restore.add_argument("file", nargs="?", default=None, help="Backup JSON file")
    parser_restore.add_argument("--key", default=None, help="Key of a stored backup")
    parser_restore.set_defaults(func=cmd_restore)

    parser_cleanup = subparsers.add_parser("cleanup", help="Drop dangling references and old backups")
    parser_cleanup.set_defaults(func=cmd_cleanup)

    parser_palette = subparsers.add_parser("palette", help="Derive a theme palette from a seed color")
    parser_palette.add_argument("seed", help="Seed color, e.g. '#3b82f6'")
    parser_palette.add_argument("--check", action="store_true", help="Also validate syntax and text contrast")
    parser_palette.set_defaults(func=cmd_palette)

    return parser


def main(argv=None) -> NoReturn:
    """
    Main CLI entrypoint.

    Parses arguments, configures logging and dispatches to subcommands.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    level = (args.log_level or load_config().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    _run(args.func, args)


if __name__ == "__main__":
    main()
