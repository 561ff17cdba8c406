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

"""Exception hierarchy for cfgfs.

This module defines a custom exception hierarchy that allows library users
to distinguish between errors that stop a tree from being built and errors
that only affect a single filesystem query. All exceptions inherit from
CfgfsError, allowing users to catch every cfgfs error with a single except
clause if needed.

Example:
    Catching construction errors:
        ```python
        from pathlib import Path
        from cfgfs.core import load_config_tree
        from cfgfs.exceptions import MalformedLineError, SourceUnavailableError

        try:
            tree = load_config_tree(Path("mednafen-09x.cfg"))
        except MalformedLineError as e:
            print(f"Bad line {e.line_number}: {e}")
        except SourceUnavailableError as e:
            print(f"Cannot read source: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "CfgfsError",
    "ConfigError",
    "SourceUnavailableError",
    "MalformedLineError",
    "PathConflictError",
    "NotFoundError",
]


class CfgfsError(Exception):
    """Base exception for all cfgfs errors.

    All cfgfs-specific exceptions inherit from this class, allowing users
    to catch all cfgfs errors with a single except clause if needed.
    """

    pass


class ConfigError(CfgfsError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parse errors in a settings file
    - Invalid setting values (unknown conflict policy, bad root file name)
    - The configuration source itself (see the subclasses)

    Anything in this family is fatal at startup: no filesystem is mounted.
    """

    pass


class SourceUnavailableError(ConfigError):
    """Raised when the configuration source cannot be opened or decoded."""

    pass


class MalformedLineError(ConfigError):
    """Raised for a settable line that cannot be split into path and value.

    Attributes:
        line: The offending line, without its trailing newline.
        line_number: 1-based position of the line in the source, or None
            when the line was classified outside of a source pass.
    """

    def __init__(self, message: str, line: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line = line
        self.line_number = line_number


class PathConflictError(ConfigError):
    """Raised when a section level collides with an entry of the other kind.

    Only raised when the conflict policy is "error"; under the default
    "warn" policy the conflict is recorded on the tree instead.

    Attributes:
        conflict: The PathConflict record describing the collision.
    """

    def __init__(self, message: str, conflict: object):
        super().__init__(message)
        self.conflict = conflict


class NotFoundError(CfgfsError):
    """Raised for a filesystem query against a path that does not exist.

    Never fatal to the process; the FUSE bridge maps it to ENOENT.

    Attributes:
        path: The absolute virtual path that was queried.
    """

    def __init__(self, path: str):
        super().__init__(f"No such entry: {path}")
        self.path = path
