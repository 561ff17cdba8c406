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

"""Virtual filesystem surface over a built configuration tree.

Public API:

- VfsAdapter: list, getattr, open and read queries
- EntryAttributes: synthetic attributes returned by getattr

The FUSE bridge lives in cfgfs.vfs.fuse_ops and is not imported here,
because importing fusepy requires libfuse to be installed.
"""

from .adapter import EntryAttributes, VfsAdapter

__all__ = ["EntryAttributes", "VfsAdapter"]
