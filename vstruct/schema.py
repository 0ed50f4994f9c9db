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

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Tuple


class _Missing:
    """Marker for an absent value (a key that is not set)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "MISSING"


MISSING = _Missing()


# Combinator tags are their own types, so they can never be mistaken for an
# object schema whatever keys the user picks.


@dataclass(frozen=True)
class Nullable:
    """Accept None (terminal, not recursed into) or a value matching ``type``.

    An absent value is rejected.
    """

    type: Any


@dataclass(frozen=True)
class Optional:
    """Accept any falsy value without validation, otherwise match ``type``."""

    type: Any


@dataclass(frozen=True, init=False)
class Union:
    """Accept a value matching at least one of ``types``, tried in order."""

    types: Tuple[Any, ...]

    def __init__(self, *types: Any) -> None:
        object.__setattr__(self, "types", tuple(types))


def is_array_schema(node: Any) -> bool:
    return isinstance(node, list)


def is_object_schema(node: Any) -> bool:
    return isinstance(node, Mapping)


def describe(node: Any) -> str:
    """Render a schema node for error messages."""
    if node is MISSING:
        return "undefined"
    if node is None:
        return "None"
    if isinstance(node, type):
        return node.__name__
    if isinstance(node, Nullable):
        return f"Nullable[{describe(node.type)}]"
    if isinstance(node, Optional):
        return f"Optional[{describe(node.type)}]"
    if isinstance(node, Union):
        return ", ".join(describe(t) for t in node.types)
    if is_array_schema(node):
        if len(node) == 1:
            return f"[{describe(node[0])}]"
        return "list"
    if is_object_schema(node):
        return "{" + ", ".join(str(k) for k in node) + "}"
    return type(node).__name__
