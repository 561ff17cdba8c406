# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for cfgfs.

Commands:

    validate: Check a configuration file without building a mount
    tree: Print the virtual directory tree of a configuration file
    cat: Print the synthesized content of one virtual file
    mount: Build the tree and mount it as a read-only filesystem

Example:
    Validate the default mednafen configuration:
        ```bash
        $ cfgfs validate
        ```

    Inspect a specific file:
        ```bash
        $ cfgfs tree ~/.mednafen/mednafen-09x.cfg
        $ cfgfs cat /input/port1rc ~/.mednafen/mednafen-09x.cfg
        ```

    Mount it:
        ```bash
        $ cfgfs mount --mountpoint ./mnt -v
        ```

Exit Codes:

- 0: Success
- 1: Error (settings, unreadable source, malformed line, missing path)

Note:
    Settings come from the built-in defaults, the settings file
    (--settings, $CFGFS_SETTINGS or ~/.config/cfgfs/settings.yaml) and
    finally the flags given here. Verbose mode shows full tracebacks on
    errors; debug mode also traces every FUSE callback.
"""

from __future__ import annotations

import argparse
from importlib.metadata import version
from pathlib import Path
import sys
from typing import Any

from cfgfs.core import load_config_tree, summarize
from cfgfs.exceptions import CfgfsError
from cfgfs.logging import Logger, get_logger, set_global_logger
from cfgfs.settings import load_settings
from cfgfs.tree.builder import ON_CONFLICT_CHOICES
from cfgfs.validation import validate_source
from cfgfs.vfs import VfsAdapter


def _configure_logger(args: argparse.Namespace) -> Logger:
    logger = get_logger(verbose=args.verbose, debug=getattr(args, "debug", False))
    set_global_logger(logger)
    return logger


def _settings_from_args(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {
        "source": args.source,
        "root_file": args.root_file,
        "on_conflict": getattr(args, "on_conflict", None),
        "mountpoint": getattr(args, "mountpoint", None),
    }
    settings_path = Path(args.settings) if args.settings else None
    return load_settings(settings_path, overrides=overrides)


def _report_error(args: argparse.Namespace, err: Exception) -> int:
    print(f"Error: {err}")
    if args.verbose or getattr(args, "debug", False):
        import traceback

        traceback.print_exc()
    return 1


def _build_adapter(settings: dict[str, Any], logger: Logger) -> VfsAdapter:
    tree = load_config_tree(
        settings["source"],
        root_file=settings["root_file"],
        encoding=settings["encoding"],
        on_conflict=settings["on_conflict"],
        logger=logger,
    )
    return VfsAdapter(tree, encoding=settings["encoding"])


def _print_tree(adapter: VfsAdapter, path: str, depth: int) -> None:
    for name in adapter.list_directory(path):
        child = path.rstrip("/") + "/" + name
        if adapter.get_attributes(child).is_directory:
            print(f"{'    ' * depth}{name}/")
            _print_tree(adapter, child, depth + 1)
        else:
            print(f"{'    ' * depth}{name}")


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'cfgfs validate' command.

    Reads the whole source, reporting every malformed line and naming
    conflict instead of stopping at the first one.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for a valid source, 1 otherwise).
    """
    _configure_logger(args)

    try:
        settings = _settings_from_args(args)
    except CfgfsError as err:
        return _report_error(args, err)

    source = settings["source"]
    print(f"Validating configuration: {source}")
    print()

    result = validate_source(
        source, root_file=settings["root_file"], encoding=settings["encoding"]
    )

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Source:      {result.source_path}")
    print(f"Status:      {result.status.upper()}")
    print(f"Settings:    {result.setting_count}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Configuration is valid!")
        return 0
    print()
    print(f"[FAILED] Validation failed with {len(result.errors)} error(s).")
    return 1


def cmd_tree(args: argparse.Namespace) -> int:
    """Handler for 'cfgfs tree' command.

    Builds the tree exactly as a mount would and prints it, directories
    suffixed with a slash.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = _configure_logger(args)

    try:
        settings = _settings_from_args(args)
        adapter = _build_adapter(settings, logger)
    except CfgfsError as err:
        return _report_error(args, err)

    print("/")
    _print_tree(adapter, "/", 1)

    result = summarize(adapter.tree, settings["source"])
    logger.verbose(
        "TREE",
        f"{result.directory_count} director(ies), {result.file_count} file(s), "
        f"{result.conflict_count} conflict(s), {result.skipped_count} skipped",
    )
    return 0


def cmd_cat(args: argparse.Namespace) -> int:
    """Handler for 'cfgfs cat' command.

    Prints the content a mounted filesystem would return for one file.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 if the path is missing or a directory).
    """
    logger = _configure_logger(args)

    try:
        settings = _settings_from_args(args)
        adapter = _build_adapter(settings, logger)
        attributes = adapter.get_attributes(args.path)
    except CfgfsError as err:
        return _report_error(args, err)

    if attributes.is_directory:
        print(f"Error: {args.path} is a directory")
        return 1

    handle = adapter.open(args.path, 0)
    data = adapter.read(args.path, handle, 0, attributes.size)
    sys.stdout.write(data.decode(settings["encoding"]))
    return 0


def cmd_mount(args: argparse.Namespace) -> int:
    """Handler for 'cfgfs mount' command.

    Builds the tree to completion, then mounts it read-only. The mount is
    never attempted if construction fails.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 after a clean unmount, 1 for failure).
    """
    logger = _configure_logger(args)

    try:
        settings = _settings_from_args(args)
    except CfgfsError as err:
        return _report_error(args, err)

    source = settings["source"]
    mountpoint = settings["mountpoint"]
    fuse_settings = settings["fuse"]

    logger.step(1, 2, f"Building tree from {source}...")
    try:
        adapter = _build_adapter(settings, logger)
    except CfgfsError as err:
        return _report_error(args, err)

    for record in [*adapter.tree.conflicts, *adapter.tree.skipped]:
        print(f"  [WARNING] {record.describe()}")

    logger.step(2, 2, f"Mounting on {mountpoint}...")
    from cfgfs.vfs.fuse_ops import mount

    try:
        mount(
            adapter,
            Path(mountpoint),
            foreground=fuse_settings["foreground"],
            nothreads=fuse_settings["nothreads"],
            allow_other=fuse_settings["allow_other"],
            logger=logger,
        )
    except RuntimeError as err:
        # fusepy reports mount failures as RuntimeError
        return _report_error(args, err)

    return 0


def _add_common_arguments(parser: argparse.ArgumentParser, debug: bool = True) -> None:
    parser.add_argument(
        "--settings",
        default=None,
        help="YAML settings file (default: $CFGFS_SETTINGS or ~/.config/cfgfs/settings.yaml)",
    )
    parser.add_argument(
        "--root-file",
        default=None,
        help="Name of the file holding top-level settings (default: mednafenrc)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    if debug:
        parser.add_argument(
            "-d",
            "--debug",
            action="store_true",
            help="Show detailed debugging output (implies --verbose)",
        )


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--on-conflict",
        choices=ON_CONFLICT_CHOICES,
        default=None,
        help="What to do when a section collides with an existing entry (default: warn)",
    )


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the cfgfs CLI.

    This function is registered as the 'cfgfs' console script in
    pyproject.toml.
    """
    parser = argparse.ArgumentParser(
        prog="cfgfs",
        description="cfgfs - browse a dotted key/value configuration file as a read-only filesystem",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"cfgfs {version('cfgfs')}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Check a configuration file for malformed lines and conflicts",
        description="Report every malformed line and naming conflict without mounting.",
    )
    parser_validate.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Configuration file (default: from settings)",
    )
    _add_common_arguments(parser_validate, debug=False)
    parser_validate.set_defaults(func=cmd_validate)

    # 'tree' command
    parser_tree = subparsers.add_parser(
        "tree",
        help="Print the virtual directory tree",
        description="Build the virtual tree of a configuration file and print it.",
    )
    parser_tree.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Configuration file (default: from settings)",
    )
    _add_common_arguments(parser_tree)
    _add_build_arguments(parser_tree)
    parser_tree.set_defaults(func=cmd_tree)

    # 'cat' command
    parser_cat = subparsers.add_parser(
        "cat",
        help="Print the content of one virtual file",
        description="Print what reading a virtual file from the mount would return.",
    )
    parser_cat.add_argument(
        "path",
        help="Absolute virtual path, e.g. /input/port1rc",
    )
    parser_cat.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Configuration file (default: from settings)",
    )
    _add_common_arguments(parser_cat)
    _add_build_arguments(parser_cat)
    parser_cat.set_defaults(func=cmd_cat)

    # 'mount' command
    parser_mount = subparsers.add_parser(
        "mount",
        help="Mount a configuration file as a read-only filesystem",
        description="Build the virtual tree, then serve it through FUSE until unmounted.",
    )
    parser_mount.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Configuration file (default: from settings)",
    )
    parser_mount.add_argument(
        "--mountpoint",
        default=None,
        help="Directory to mount on (default: ./mnt)",
    )
    _add_common_arguments(parser_mount)
    _add_build_arguments(parser_mount)
    parser_mount.set_defaults(func=cmd_mount)

    # Parse and dispatch
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
