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

"""Public API return types for cfgfs.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Domain types (like
    ConfigTree and PathConflict) stay next to the code that produces them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class BuildResult:
    """Summary of a successful construction pass.

    Attributes:
        source: Path of the configuration file that was read.
        lines_read: Raw lines consumed, comments and blanks included.
        settings_applied: Settings appended to a file.
        directory_count: Directories in the tree, root included.
        file_count: Files in the tree, root settings file included.
        conflict_count: Settings skipped because of naming conflicts.
        skipped_count: Settings skipped because of an empty section name.
    """

    source: Path
    lines_read: int
    settings_applied: int
    directory_count: int
    file_count: int
    conflict_count: int
    skipped_count: int


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a configuration source.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: Error messages (malformed lines, unreadable source).
        warnings: Warning messages (naming conflicts, skipped settings).
        setting_count: Settings that would be placed in the tree.
        source_path: String path to the validated source.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    setting_count: int
    source_path: str
