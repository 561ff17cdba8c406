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

"""Core orchestration for cfgfs.

This module turns a configuration source into a frozen ConfigTree and
summarizes the result. The construction pass is strictly sequential: each
line is classified, resolved and inserted before the next one is read,
and the tree is frozen only once the source is exhausted. Nothing can be
served from a tree that has not finished building.

Design Principles:

- One pass, no retries; a malformed line aborts the whole build
- The source file is closed as soon as the pass ends
- Errors use exceptions; the CLI layer formats them for display

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from cfgfs.core import load_config_tree, summarize
        from cfgfs.vfs import VfsAdapter

        tree = load_config_tree(Path("~/.mednafen/mednafen-09x.cfg").expanduser())
        print(summarize(tree, Path("mednafen-09x.cfg")))

        vfs = VfsAdapter(tree)
        print(vfs.list_directory("/"))
        ```
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import closing
from pathlib import Path

from cfgfs.exceptions import SourceUnavailableError
from cfgfs.logging import Logger, get_global_logger
from cfgfs.parsing.lines import strip_line_ending
from cfgfs.results import BuildResult
from cfgfs.tree.builder import DEFAULT_ROOT_FILE, ConfigTree, TreeBuilder
from cfgfs.tree.nodes import Directory

__all__ = [
    "build_config_tree",
    "iter_source_lines",
    "load_config_tree",
    "summarize",
]


def iter_source_lines(source: Path, encoding: str = "utf-8") -> Iterator[str]:
    """Yields the lines of a configuration file without line endings.

    The file stays open until the iterator is exhausted or closed; wrap
    it in ``contextlib.closing`` when the caller may stop early.

    Args:
        source: Path to the configuration file.
        encoding: Text encoding of the file.

    Yields:
        Each line with its trailing newline removed.

    Raises:
        SourceUnavailableError: If the file cannot be opened, read or
            decoded.
    """
    try:
        with source.open("r", encoding=encoding, newline="") as f:
            for raw in f:
                yield strip_line_ending(raw)
    except (OSError, UnicodeDecodeError, LookupError) as err:
        raise SourceUnavailableError(
            f"cannot read configuration source {source}: {err}"
        ) from err


def build_config_tree(
    lines: Iterable[str],
    *,
    root_file: str = DEFAULT_ROOT_FILE,
    on_conflict: str = "warn",
    logger: Logger | None = None,
) -> ConfigTree:
    """Builds a frozen tree from an iterable of lines.

    Args:
        lines: Configuration lines without trailing newlines, consumed to
            exhaustion.
        root_file: Name of the file collecting top-level settings.
        on_conflict: "warn" or "error" (see TreeBuilder).
        logger: Logger instance; defaults to the global logger.

    Returns:
        The frozen tree.

    Raises:
        MalformedLineError: On the first line that cannot be split.
        PathConflictError: On a naming conflict under the "error" policy.
    """
    logger = logger if logger is not None else get_global_logger()
    builder = TreeBuilder(root_file_name=root_file, on_conflict=on_conflict, logger=logger)

    for line_number, line in enumerate(lines, start=1):
        builder.add_line(line, line_number)

    tree = builder.build()
    logger.verbose(
        "BUILD",
        f"Read {tree.lines_read} line(s), applied {tree.settings_applied} setting(s)",
    )
    if tree.conflicts:
        logger.verbose("BUILD", f"Skipped {len(tree.conflicts)} conflicting setting(s)")
    if tree.skipped:
        logger.verbose("BUILD", f"Skipped {len(tree.skipped)} unplaceable setting(s)")
    return tree


def load_config_tree(
    source: Path,
    *,
    root_file: str = DEFAULT_ROOT_FILE,
    encoding: str = "utf-8",
    on_conflict: str = "warn",
    logger: Logger | None = None,
) -> ConfigTree:
    """Reads a configuration file and builds its frozen tree.

    Args:
        source: Path to the configuration file.
        root_file: Name of the file collecting top-level settings.
        encoding: Text encoding of the file.
        on_conflict: "warn" or "error".
        logger: Logger instance; defaults to the global logger.

    Returns:
        The frozen tree, ready to hand to a VfsAdapter.

    Raises:
        SourceUnavailableError: If the file cannot be read.
        MalformedLineError: On the first line that cannot be split.
        PathConflictError: On a naming conflict under the "error" policy.
    """
    logger = logger if logger is not None else get_global_logger()
    logger.verbose("BUILD", f"Reading configuration: {source}")
    with closing(iter_source_lines(source, encoding)) as lines:
        return build_config_tree(
            lines,
            root_file=root_file,
            on_conflict=on_conflict,
            logger=logger,
        )


def summarize(tree: ConfigTree, source: Path) -> BuildResult:
    """Counts what a construction pass produced."""
    directory_count = sum(isinstance(tree.get(path), Directory) for path in tree.index)
    return BuildResult(
        source=source,
        lines_read=tree.lines_read,
        settings_applied=tree.settings_applied,
        directory_count=directory_count,
        file_count=len(tree.files()),
        conflict_count=len(tree.conflicts),
        skipped_count=len(tree.skipped),
    )
