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

"""Settings loading for cfgfs.

Settings are layered: built-in defaults, then an optional YAML settings
file, then explicit overrides (usually CLI flags). Dicts are deep-merged
and everything else is replaced, last layer wins.

Public API:

- load_settings: Load and merge the effective settings
- find_settings_file: Locate the settings file that applies

Example:
    Basic usage:

        from cfgfs.settings import load_settings

        settings = load_settings()
        print(settings["mountpoint"])  # PosixPath('mnt')

"""

from .loader import DEFAULT_SETTINGS, find_settings_file, load_settings

__all__ = ["DEFAULT_SETTINGS", "find_settings_file", "load_settings"]
