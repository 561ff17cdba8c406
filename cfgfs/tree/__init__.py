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

"""Virtual configuration tree: node types, path index and builder."""

from .builder import ConfigTree, PathConflict, SkippedSetting, TreeBuilder
from .index import EntryIndex
from .nodes import Directory, File, Node, SettingLine

__all__ = [
    "ConfigTree",
    "PathConflict",
    "SkippedSetting",
    "TreeBuilder",
    "EntryIndex",
    "Directory",
    "File",
    "Node",
    "SettingLine",
]
