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

"""FUSE bridge for the virtual configuration tree.

ConfigOperations forwards fusepy callbacks to a VfsAdapter. Write
callbacks are inherited from fusepy's Operations, which refuses them
with EROFS, and the mount itself is requested read-only.

Importing this module loads libfuse through fusepy, so the CLI imports
it only when a mount is requested.
"""

from __future__ import annotations

import errno
from pathlib import Path
from typing import Any

from fuse import FUSE, FuseOSError, Operations

from cfgfs.exceptions import NotFoundError
from cfgfs.logging import Logger, get_global_logger
from cfgfs.vfs.adapter import VfsAdapter

__all__ = ["ConfigOperations", "mount"]


class ConfigOperations(Operations):
    """fusepy operations backed by a VfsAdapter."""

    def __init__(self, adapter: VfsAdapter, logger: Logger | None = None) -> None:
        self._adapter = adapter
        self._logger = logger if logger is not None else get_global_logger()

    def readdir(self, path: str, fh: int) -> list[str]:
        self._logger.debug("FUSE", f"readdir({path})")
        return [".", ".."] + self._adapter.list_directory(path)

    def getattr(self, path: str, fh: int | None = None) -> dict[str, Any]:
        self._logger.debug("FUSE", f"getattr({path})")
        try:
            return self._adapter.get_attributes(path).as_stat()
        except NotFoundError as err:
            raise FuseOSError(errno.ENOENT) from err

    def open(self, path: str, flags: int) -> int:
        self._logger.debug("FUSE", f"open({path}, {flags})")
        return self._adapter.open(path, flags)

    def read(self, path: str, size: int, offset: int, fh: int) -> bytes:
        self._logger.debug("FUSE", f"read({path}, {fh}, {size}, {offset})")
        return self._adapter.read(path, fh, offset, size)


def mount(
    adapter: VfsAdapter,
    mountpoint: Path,
    *,
    foreground: bool = True,
    nothreads: bool = False,
    allow_other: bool = False,
    logger: Logger | None = None,
) -> None:
    """Mounts the adapter's tree and serves it until unmounted.

    Blocks for the lifetime of the mount when running in the foreground.
    libfuse unmounts on SIGINT.

    Args:
        adapter: Adapter over an already built tree.
        mountpoint: Directory to mount on; created if missing.
        foreground: Keep the FUSE loop in this process.
        nothreads: Serve requests from a single thread.
        allow_other: Let users other than the mounting one see the mount.
        logger: Logger for progress and callback tracing.
    """
    logger = logger if logger is not None else get_global_logger()
    mountpoint.mkdir(parents=True, exist_ok=True)

    logger.verbose("FUSE", f"filesystem mounted on {mountpoint}")
    FUSE(
        ConfigOperations(adapter, logger=logger),
        str(mountpoint),
        foreground=foreground,
        nothreads=nothreads,
        allow_other=allow_other,
        ro=True,
    )
    logger.verbose("FUSE", f"filesystem at {mountpoint} unmounted")
