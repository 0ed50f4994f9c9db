# Copyright 2025 TIER IV, inc.
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

"""vstruct - runtime structural validation with validating deep proxies.

Public API:
- validate / check_node: Recursive schema validation
- Nullable, Optional, Union, MISSING: Schema combinators
- wrap / unwrap / ProxyCache: Validating deep proxy
- Struct / VStruct: Struct class builders
"""

from .exceptions import (
    VStructError,
    ValidationError,
    SchemaError,
    DataLoadError,
    SchemaResolutionError,
)
from .schema import MISSING, Nullable, Optional, Union, describe
from .validator import check_node, validate, kind_of
from .proxy import ProxyCache, ValidatingProxy, is_proxy, unwrap, wrap
from .struct import Struct, StructBase, VStruct

# Derive version from package metadata
try:
    from importlib.metadata import version, PackageNotFoundError
    __version__ = version("vstruct")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "VStructError",
    "ValidationError",
    "SchemaError",
    "DataLoadError",
    "SchemaResolutionError",
    "MISSING",
    "Nullable",
    "Optional",
    "Union",
    "describe",
    "check_node",
    "validate",
    "kind_of",
    "ProxyCache",
    "ValidatingProxy",
    "is_proxy",
    "unwrap",
    "wrap",
    "Struct",
    "StructBase",
    "VStruct",
]
