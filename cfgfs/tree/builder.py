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

"""Construction of the virtual configuration tree.

The builder consumes settings one at a time and grows a tree of Directory
and File nodes, registering every new node in an EntryIndex.

Naming Convention:
    For a setting ``s1.s2...sn.key value``:

    - directories are created at ``/s1``, ``/s1/s2`` ... ``/s1/.../s(n-1)``
    - the deepest level becomes the file ``/s1/.../sn`` + ``rc``, named
      ``sn`` + ``rc``, living in ``/s1/.../s(n-1)``
    - that file receives the line ``"key value\\n"``

    Settings without a dot go to the root settings file (``/mednafenrc``
    unless configured otherwise).

Conflicts:
    A level can collide with an entry of the other kind, for example
    ``a.b.k`` creates the file ``/a/brc`` and a later ``a.brc.c.k`` needs a
    directory at the same path. The colliding setting is never applied.
    Under the "warn" policy the collision is recorded on the tree and
    logged; under "error" a PathConflictError aborts construction.

    A dotted path with an empty section name (``.key``, ``a..b.key``) cannot
    be placed either. The same policy applies: "warn" records a
    SkippedSetting, "error" re-raises the MalformedLineError.

Example:
    ```python
    from cfgfs.tree.builder import TreeBuilder

    builder = TreeBuilder()
    for number, line in enumerate(["video.driver opengl", "fullscreen 1"], 1):
        builder.add_line(line, number)
    tree = builder.build()
    tree.get("/videorc").render()
    # 'driver opengl\\n'
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cfgfs.exceptions import ConfigError, MalformedLineError, PathConflictError
from cfgfs.logging import Logger, get_global_logger
from cfgfs.parsing.lines import Setting, classify_line
from cfgfs.parsing.paths import PATH_SEPARATOR, resolve_setting_path, split_level
from cfgfs.tree.index import EntryIndex
from cfgfs.tree.nodes import Directory, File, Node, node_kind

__all__ = [
    "DEFAULT_ROOT_FILE",
    "ON_CONFLICT_CHOICES",
    "RC_SUFFIX",
    "ROOT_PATH",
    "ConfigTree",
    "PathConflict",
    "SkippedSetting",
    "TreeBuilder",
]

DEFAULT_ROOT_FILE = "mednafenrc"
RC_SUFFIX = "rc"
ROOT_PATH = PATH_SEPARATOR
ON_CONFLICT_CHOICES = ("warn", "error")


@dataclass(frozen=True)
class PathConflict:
    """A setting that could not be placed because its path is taken.

    Attributes:
        path: The virtual path where the collision happened.
        expected: Kind the setting needed there ("directory" or "file").
        existing: Kind already registered at that path.
        setting_path: The dotted setting path of the skipped line.
        line_number: 1-based source position of the skipped line, if known.
    """

    path: str
    expected: str
    existing: str
    setting_path: str
    line_number: int | None = None

    def describe(self) -> str:
        where = f"line {self.line_number}: " if self.line_number is not None else ""
        return (
            f"{where}{self.setting_path} needs a {self.expected} at {self.path} "
            f"but a {self.existing} is already there; setting skipped"
        )


@dataclass(frozen=True)
class SkippedSetting:
    """A setting whose dotted path cannot name a directory."""

    setting_path: str
    reason: str
    line_number: int | None = None

    def describe(self) -> str:
        where = f"line {self.line_number}: " if self.line_number is not None else ""
        return f"{where}{self.reason}: {self.setting_path!r}; setting skipped"


@dataclass
class ConfigTree:
    """The result of one construction pass.

    Attributes:
        root: The ``/`` directory.
        root_file: The file holding top-level (undotted) settings.
        index: Path -> node lookup covering every node in the tree.
        conflicts: Naming conflicts recorded under the "warn" policy.
        skipped: Settings with an empty section name, recorded under the
            "warn" policy.
        lines_read: Number of raw lines consumed, comments included.
        settings_applied: Number of settings appended to a file.
    """

    root: Directory
    root_file: File
    index: EntryIndex
    conflicts: list[PathConflict] = field(default_factory=list)
    skipped: list[SkippedSetting] = field(default_factory=list)
    lines_read: int = 0
    settings_applied: int = 0

    @property
    def frozen(self) -> bool:
        return self.index.frozen

    def get(self, path: str) -> Node | None:
        return self.index.get(path)

    def files(self) -> list[tuple[str, File]]:
        """Every (path, file) pair, in creation order."""
        return [
            (path, node)
            for path, node in ((p, self.index.get(p)) for p in self.index)
            if isinstance(node, File)
        ]


def _new_tree(root_file_name: str) -> ConfigTree:
    root = Directory(name="")
    root_file = File(name=root_file_name)
    root.files.append(root_file)

    index = EntryIndex()
    index.set(ROOT_PATH, root)
    index.set(ROOT_PATH + root_file_name, root_file)
    return ConfigTree(root=root, root_file=root_file, index=index)


class TreeBuilder:
    """Builds a ConfigTree from configuration lines, one at a time.

    Args:
        root_file_name: Name of the file that collects top-level settings.
        on_conflict: "warn" to record and skip settings that cannot be
            placed, "error" to raise instead.
        logger: Logger for conflict warnings; defaults to the global logger.
    """

    def __init__(
        self,
        root_file_name: str = DEFAULT_ROOT_FILE,
        on_conflict: str = "warn",
        logger: Logger | None = None,
    ) -> None:
        if on_conflict not in ON_CONFLICT_CHOICES:
            raise ConfigError(
                f"on_conflict must be one of {', '.join(ON_CONFLICT_CHOICES)}, "
                f"got {on_conflict!r}"
            )
        if not root_file_name or PATH_SEPARATOR in root_file_name:
            raise ConfigError(f"invalid root file name: {root_file_name!r}")

        self._on_conflict = on_conflict
        self._logger = logger if logger is not None else get_global_logger()
        self._tree = _new_tree(root_file_name)
        self._built = False

    def add_line(self, line: str, line_number: int | None = None) -> bool:
        """Classifies a raw line and applies it if it is settable.

        Returns:
            True if a setting was appended to a file, False for comments,
            blank lines and skipped settings.

        Raises:
            MalformedLineError: If the line cannot be split.
            PathConflictError: On a collision under the "error" policy.
        """
        self._check_open()
        self._tree.lines_read += 1
        setting = classify_line(line, line_number)
        if setting is None:
            return False
        return self.add_setting(setting, line_number)

    def add_setting(self, setting: Setting, line_number: int | None = None) -> bool:
        """Places one setting in the tree, creating missing levels.

        Returns:
            True if the setting was appended, False if it was skipped
            because of a naming conflict or an empty section name.

        Raises:
            MalformedLineError: On an empty section name under the "error"
                policy.
            PathConflictError: On a collision under the "error" policy.
        """
        self._check_open()
        try:
            resolved = resolve_setting_path(setting.path, line_number)
        except MalformedLineError:
            if self._on_conflict == "error":
                raise
            self._record_skip(
                SkippedSetting(
                    setting_path=setting.path,
                    reason="empty section name",
                    line_number=line_number,
                )
            )
            return False

        if resolved.is_top_level:
            target: File | None = self._tree.root_file
        else:
            target = self._place_levels(resolved.levels, setting.path, line_number)
        if target is None:
            return False

        target.append(resolved.leaf_key, setting.value)
        self._tree.settings_applied += 1
        return True

    def build(self) -> ConfigTree:
        """Freezes and returns the tree. The builder accepts nothing after."""
        self._check_open()
        self._tree.index.freeze()
        self._built = True
        return self._tree

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("tree already built; no further lines accepted")

    def _place_levels(
        self, levels: tuple[str, ...], setting_path: str, line_number: int | None
    ) -> File | None:
        index = self._tree.index
        leaf_position = len(levels) - 1
        node: Node | None = None

        for position, level in enumerate(levels):
            is_leaf_level = position == leaf_position
            parent_path, base_name = split_level(level)

            if is_leaf_level:
                path, name, expected = level + RC_SUFFIX, base_name + RC_SUFFIX, File
            else:
                path, name, expected = level, base_name, Directory

            node = index.get(path)
            if node is None:
                node = self._attach(parent_path, path, expected(name=name))
            elif not isinstance(node, expected):
                self._report_conflict(
                    PathConflict(
                        path=path,
                        expected="file" if is_leaf_level else "directory",
                        existing=node_kind(node),
                        setting_path=setting_path,
                        line_number=line_number,
                    )
                )
                return None

        if not isinstance(node, File):
            raise TypeError(f"leaf level did not resolve to a file: {node!r}")
        return node

    def _attach(self, parent_path: str, path: str, node: Node) -> Node:
        parent = self._tree.index.get(parent_path)
        if not isinstance(parent, Directory):
            raise TypeError(f"parent of {path} is not a directory: {parent!r}")

        if isinstance(node, Directory):
            parent.directories.append(node)
        elif isinstance(node, File):
            parent.files.append(node)
        else:
            raise TypeError(f"not a tree node: {node!r}")
        self._tree.index.set(path, node)
        return node

    def _report_conflict(self, conflict: PathConflict) -> None:
        if self._on_conflict == "error":
            raise PathConflictError(conflict.describe(), conflict)
        self._tree.conflicts.append(conflict)
        self._logger.warning("TREE", conflict.describe())

    def _record_skip(self, skipped: SkippedSetting) -> None:
        self._tree.skipped.append(skipped)
        self._logger.warning("TREE", skipped.describe())
