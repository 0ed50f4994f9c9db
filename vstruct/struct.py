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

"""Struct class builders.

``Struct`` builds plain attribute classes that merge default field values with
construction data. ``VStruct`` additionally validates the merged instance
against a schema and hands back a validating proxy.
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from .proxy import ProxyCache, unwrap, wrap
from .validator import validate

logger = logging.getLogger(__name__)


def _populate(instance: Any, defaults: Dict[str, Any], data: Any, fields: Dict[str, Any]) -> None:
    """Apply deep-copied defaults, then ``data``, then keyword fields."""
    for key, value in copy.deepcopy(defaults).items():
        setattr(instance, key, value)

    data = unwrap(data)
    if data is not None:
        if isinstance(data, Mapping):
            items = data.items()
        elif hasattr(data, "__dict__"):
            items = vars(data).items()
        else:
            raise TypeError(f"Struct data must be a mapping or an object, got {type(data).__name__}")
        for key, value in items:
            setattr(instance, key, value)

    for key, value in fields.items():
        setattr(instance, key, value)


class StructBase:
    """Base class of every class produced by :func:`Struct` and :func:`VStruct`."""

    _defaults: Dict[str, Any] = {}

    def __init__(self, data: Any = None, **fields: Any):
        _populate(self, self._defaults, data, fields)

    def as_dict(self) -> Dict[str, Any]:
        return dict(vars(self))

    def __eq__(self, other: Any) -> bool:
        other = unwrap(other)
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    __hash__ = None

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in vars(self).items())
        return f"{type(self).__name__}({fields})"


def Struct(defaults: Optional[Dict[str, Any]] = None, name: str = "Struct") -> type:
    """Build a struct class with default field values.

    Example:
        Vec2 = Struct({"x": 0, "y": 0})
        vec = Vec2({"x": 10})  # Vec2(x=10, y=0)
    """
    return type(name, (StructBase,), {"_defaults": dict(defaults or {})})


def VStruct(
    schema: Dict[str, Any],
    defaults: Optional[Dict[str, Any]] = None,
    quiet: bool = False,
    name: str = "VStruct",
) -> type:
    """Build a validated struct class.

    Constructing an instance merges defaults and data, validates the result
    against ``schema`` (always raising on mismatch) and returns a validating
    proxy around the instance with its own :class:`ProxyCache`. Later writes
    through the proxy raise, or are ignored when ``quiet`` is set.
    """

    def __new__(cls, data: Any = None, **fields: Any):
        instance = object.__new__(cls)
        _populate(instance, cls._defaults, data, fields)
        validate(cls._vs_schema, instance)
        logger.debug(f"Validated {cls.__name__} instance")
        return wrap(instance, cls._vs_schema, quiet=cls._vs_quiet, cache=ProxyCache())

    namespace = {
        "_defaults": dict(defaults or {}),
        "_vs_schema": schema,
        "_vs_quiet": quiet,
        "__new__": __new__,
    }
    return type(name, (StructBase,), namespace)
