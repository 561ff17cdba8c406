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

"""Read-only filesystem queries against a frozen ConfigTree.

Every operation is a pure function of the path and the tree. File content
is rendered from the tree on each read; there is no per-handle state and
no content cache.

Example:
    ```python
    from cfgfs.core import build_config_tree
    from cfgfs.vfs.adapter import VfsAdapter

    tree = build_config_tree(["video.driver opengl"])
    vfs = VfsAdapter(tree)
    vfs.list_directory("/")           # ['mednafenrc', 'videorc']
    vfs.get_attributes("/videorc").size  # 14
    vfs.read("/videorc", 0, 0, 6)     # b'driver'
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import os
import stat
import time
from typing import Any

from cfgfs.exceptions import NotFoundError
from cfgfs.tree.builder import ConfigTree
from cfgfs.tree.nodes import Directory, File

__all__ = [
    "DIRECTORY_MODE",
    "DIRECTORY_SIZE",
    "FILE_HANDLE",
    "FILE_MODE",
    "EntryAttributes",
    "VfsAdapter",
]

DIRECTORY_SIZE = 100
DIRECTORY_MODE = stat.S_IFDIR | 0o755
FILE_MODE = stat.S_IFREG | 0o644
FILE_HANDLE = 42


def _process_uid() -> int:
    return os.getuid() if hasattr(os, "getuid") else 0


def _process_gid() -> int:
    return os.getgid() if hasattr(os, "getgid") else 0


@dataclass(frozen=True)
class EntryAttributes:
    """Synthetic attributes of one virtual entry."""

    size: int
    mode: int
    nlink: int
    uid: int
    gid: int
    atime: float
    mtime: float
    ctime: float

    @property
    def is_directory(self) -> bool:
        return stat.S_ISDIR(self.mode)

    def as_stat(self) -> dict[str, Any]:
        """Returns the ``st_*`` mapping FUSE getattr callbacks expect."""
        return {
            "st_size": self.size,
            "st_mode": self.mode,
            "st_nlink": self.nlink,
            "st_uid": self.uid,
            "st_gid": self.gid,
            "st_atime": self.atime,
            "st_mtime": self.mtime,
            "st_ctime": self.ctime,
        }


class VfsAdapter:
    """Answers list, getattr, open and read queries for a frozen tree.

    Args:
        tree: The tree to serve. It must already be built.
        encoding: Encoding used to turn rendered file text into bytes.
        clock: Source of timestamps for attributes, called per query.
    """

    def __init__(
        self,
        tree: ConfigTree,
        encoding: str = "utf-8",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not tree.frozen:
            raise RuntimeError("cannot serve a tree that is still being built")
        self._tree = tree
        self._encoding = encoding
        self._clock = clock

    @property
    def tree(self) -> ConfigTree:
        return self._tree

    def list_directory(self, path: str) -> list[str]:
        """Child names of a directory, directories before files.

        Files and missing paths yield an empty list; get_attributes is the
        query that reports non-existence.
        """
        node = self._tree.get(path)
        if isinstance(node, Directory):
            return node.child_names()
        return []

    def get_attributes(self, path: str) -> EntryAttributes:
        """Attributes of a directory or file.

        Raises:
            NotFoundError: If nothing is registered at the path.
        """
        node = self._tree.get(path)
        if node is None:
            raise NotFoundError(path)

        if isinstance(node, Directory):
            size, mode, nlink = DIRECTORY_SIZE, DIRECTORY_MODE, 2
        elif isinstance(node, File):
            size, mode, nlink = len(node.content(self._encoding)), FILE_MODE, 1
        else:
            raise TypeError(f"not a tree node: {node!r}")

        now = self._clock()
        return EntryAttributes(
            size=size,
            mode=mode,
            nlink=nlink,
            uid=_process_uid(),
            gid=_process_gid(),
            atime=now,
            mtime=now,
            ctime=now,
        )

    def open(self, path: str, flags: int) -> int:
        """Always succeeds with the same handle; nothing is tracked per open."""
        return FILE_HANDLE

    def read(self, path: str, handle: int, offset: int, length: int) -> bytes:
        """Reads ``length`` bytes from ``offset`` of a file's rendered content.

        Missing paths, directories, and offsets at or past the end all
        yield ``b""``.
        """
        node = self._tree.get(path)
        if not isinstance(node, File):
            return b""
        if offset < 0 or length <= 0:
            return b""
        return node.content(self._encoding)[offset : offset + length]
