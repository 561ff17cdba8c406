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

"""Parsing of dot-delimited configuration lines.

Public API:

- classify_line: Split a raw line into a Setting, or skip it
- resolve_setting_path: Turn a dotted setting path into filesystem levels
"""

from .lines import Setting, classify_line, strip_line_ending
from .paths import ResolvedPath, resolve_setting_path

__all__ = [
    "Setting",
    "classify_line",
    "strip_line_ending",
    "ResolvedPath",
    "resolve_setting_path",
]
