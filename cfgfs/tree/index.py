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

"""Flat path lookup for tree nodes.

The index maps absolute virtual paths to the nodes the tree already owns.
It never removes entries, and after freeze() it refuses new ones.
"""

from __future__ import annotations

from collections.abc import Iterator

from cfgfs.tree.nodes import Node

__all__ = ["EntryIndex"]


class EntryIndex:
    """Path -> node lookup shared by the builder and the VFS adapter."""

    def __init__(self) -> None:
        self._entries: dict[str, Node] = {}
        self._frozen = False

    def get(self, path: str) -> Node | None:
        return self._entries.get(path)

    def set(self, path: str, node: Node) -> None:
        """Registers a node under an absolute path.

        Raises:
            RuntimeError: If the index has been frozen.
            ValueError: If the path is already registered.
        """
        if self._frozen:
            raise RuntimeError(f"index is frozen, cannot register {path}")
        if path in self._entries:
            raise ValueError(f"path already registered: {path}")
        self._entries[path] = node

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def paths(self) -> list[str]:
        """Registered paths in registration order."""
        return list(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
