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

"""Configuration source validation.

A real build stops at the first malformed line. Validation runs the same
classifier and builder over the whole source but keeps going, so every
problem is reported in one pass. Nothing is mounted.

Validation Checks:

- The source can be opened and decoded
- Every settable line has a whitespace separator
- No section path contains an empty segment and no setting collides
  with an entry of the other kind (both reported as warnings, matching
  the default "warn" policy)

Example:
    Validate a source and handle results:
        ```python
        from pathlib import Path
        from cfgfs.validation import validate_source

        result = validate_source(Path("mednafen-09x.cfg"))
        if result.status == "valid":
            print(f"{result.setting_count} setting(s)")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```
"""

from __future__ import annotations

from pathlib import Path

from cfgfs.core import iter_source_lines
from cfgfs.exceptions import MalformedLineError, SourceUnavailableError
from cfgfs.logging import SilentLogger, get_global_logger
from cfgfs.results import ValidationResult
from cfgfs.tree.builder import DEFAULT_ROOT_FILE, TreeBuilder

__all__ = ["validate_source"]


def validate_source(
    source_path: Path,
    *,
    root_file: str = DEFAULT_ROOT_FILE,
    encoding: str = "utf-8",
) -> ValidationResult:
    """Validates a configuration source without mounting anything.

    Args:
        source_path: Path to the configuration file.
        root_file: Name of the root settings file, which can take part in
            naming conflicts.
        encoding: Text encoding of the file.

    Returns:
        The validation result. ``status`` is "invalid" if any error was
            found; conflicts alone leave it "valid".
    """
    logger = get_global_logger()
    errors: list[str] = []
    warnings: list[str] = []

    logger.verbose("VALIDATE", f"Validating source: {source_path}")

    # Conflicts are collected from the tree, not printed as they happen
    builder = TreeBuilder(root_file_name=root_file, logger=SilentLogger())
    try:
        for line_number, line in enumerate(
            iter_source_lines(source_path, encoding), start=1
        ):
            try:
                builder.add_line(line, line_number)
            except MalformedLineError as err:
                errors.append(str(err))
    except SourceUnavailableError as err:
        errors.append(str(err))

    tree = builder.build()
    warnings.extend(conflict.describe() for conflict in tree.conflicts)
    warnings.extend(skipped.describe() for skipped in tree.skipped)

    status = "invalid" if errors else "valid"
    logger.verbose(
        "VALIDATE",
        f"{status}: {len(errors)} error(s), {len(warnings)} warning(s)",
    )
    return ValidationResult(
        status=status,
        errors=errors,
        warnings=warnings,
        setting_count=tree.settings_applied,
        source_path=str(source_path),
    )
