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

"""cfgfs - configuration files as a read-only filesystem

cfgfs reads a hierarchical, dot-delimited key/value configuration file
(such as mednafen's ``mednafen-09x.cfg``) and exposes it through FUSE:

- every section level except the deepest becomes a directory
- the deepest level becomes an ``rc`` file holding ``key value`` lines
- settings without a section go to a root file (``/mednafenrc``)

For example ``input.port1.type gamepad`` shows up as the line
``type gamepad`` in ``/input/port1rc``.

Quick Start:
Check a configuration file:

    $ cfgfs validate ~/.mednafen/mednafen-09x.cfg

Browse it without mounting:

    $ cfgfs tree ~/.mednafen/mednafen-09x.cfg

Mount it:

    $ cfgfs mount ~/.mednafen/mednafen-09x.cfg --mountpoint ./mnt

For more details, see the individual module docstrings.
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Browse dotted key/value configuration files as a read-only filesystem"

# Re-export commonly used functions for convenience
from cfgfs.core import build_config_tree, load_config_tree
from cfgfs.exceptions import (
    CfgfsError,
    ConfigError,
    MalformedLineError,
    NotFoundError,
    PathConflictError,
    SourceUnavailableError,
)
from cfgfs.results import BuildResult, ValidationResult
from cfgfs.settings import load_settings
from cfgfs.validation import validate_source
from cfgfs.vfs import EntryAttributes, VfsAdapter

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "BuildResult",
    "ValidationResult",
    "build_config_tree",
    "load_config_tree",
    "load_settings",
    "validate_source",
    "VfsAdapter",
    "EntryAttributes",
    "CfgfsError",
    "ConfigError",
    "MalformedLineError",
    "NotFoundError",
    "PathConflictError",
    "SourceUnavailableError",
]
