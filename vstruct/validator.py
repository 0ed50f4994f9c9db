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

"""Recursive schema validator.

The validator walks a schema node and a candidate value in lock-step and raises
:class:`~vstruct.exceptions.ValidationError` the first time the value cannot
satisfy the node. Nodes are checked in a fixed priority order:

1. ``MISSING`` (undefined schema)  -> always a :class:`SchemaError`
2. ``None``                        -> value must be None
3. a class                         -> primitive kind / isinstance check
4. ``[inner]``                     -> sequence of ``inner``
5. ``Nullable``                    -> None passes, absent fails
6. ``Optional``                    -> falsy passes
7. ``Union``                       -> first matching alternative wins
8. ``{key: node}``                 -> object schema, keys in insertion order
9. a primitive literal             -> same kind as the literal
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Dict

from .exceptions import SchemaError, ValidationError
from .schema import (
    MISSING,
    Nullable,
    Optional,
    Union,
    describe,
    is_array_schema,
    is_object_schema,
)

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


PRIMITIVE_KINDS: Dict[type, Callable[[Any], bool]] = {
    str: lambda value: isinstance(value, str),
    float: _is_number,
    int: _is_integer,
    bool: lambda value: isinstance(value, bool),
    bytes: lambda value: isinstance(value, (bytes, bytearray)),
    object: lambda value: value is not MISSING,
    Callable: callable,
}

# Literal nodes match on kind only; int and float literals both mean "number".
_LITERAL_KINDS: Dict[type, type] = {
    bool: bool,
    int: float,
    float: float,
    str: str,
    bytes: bytes,
}

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool)


def kind_of(value: Any) -> str:
    """Return the runtime kind name of a value, as used in error messages."""
    if value is MISSING:
        return "missing"
    if value is None:
        return "None"
    return type(value).__name__


def is_object(value: Any) -> bool:
    """True for a present, non-null, non-primitive value (mappings, sequences, instances)."""
    if value is MISSING or value is None:
        return False
    if isinstance(value, _SCALAR_TYPES):
        return False
    if callable(value) and not isinstance(value, Mapping):
        return False
    return True


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def get_field(value: Any, key: Any) -> Any:
    """Read ``key`` from a mapping or attribute object, MISSING when absent."""
    if isinstance(value, Mapping):
        return value.get(key, MISSING)
    if isinstance(key, str):
        return getattr(value, key, MISSING)
    return MISSING


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def join_path(base: str, token: Any) -> str:
    return f"{base}/{_jp_escape(str(token))}"


def _matches_kind(kind: type, value: Any) -> bool:
    predicate = PRIMITIVE_KINDS.get(kind)
    if predicate is not None:
        return predicate(value)
    return isinstance(value, kind)


def check_node(node: Any, value: Any, path: str = "") -> None:
    """Validate ``value`` against a single schema node.

    Unlike :func:`validate` there is no top-level object precondition, so any
    value may be checked against any node.

    Raises:
        SchemaError: If the schema itself is malformed
        ValidationError: If the value does not satisfy the node
    """
    if node is MISSING:
        raise SchemaError("Validation error: Schema is undefined.", path)

    if node is None:
        if value is not None:
            raise ValidationError(f"Validation error: Expected None but got {kind_of(value)}", path)
        return

    if isinstance(node, type):
        if not _matches_kind(node, value):
            raise ValidationError(
                f"Validation error: Expected {node.__name__} but got {kind_of(value)}", path
            )
        return

    if is_array_schema(node):
        if len(node) != 1:
            raise SchemaError(
                f"Validation error: Array schema must have exactly one element, got {len(node)}", path
            )
        if not is_sequence(value):
            raise ValidationError(f"Validation error: Expected array but got {kind_of(value)}", path)
        item_node = node[0]
        for idx, item in enumerate(value):
            check_node(item_node, item, join_path(path, idx))
        return

    if isinstance(node, Nullable):
        if value is MISSING:
            raise ValidationError(
                f"Validation error: Expected {describe(node.type)} but got missing", path
            )
        if value is not None:
            check_node(node.type, value, path)
        return

    if isinstance(node, Optional):
        if value:
            check_node(node.type, value, path)
        return

    if isinstance(node, Union):
        for option in node.types:
            try:
                check_node(option, value, path)
                return
            except SchemaError:
                raise
            except ValidationError:
                continue
        raise ValidationError(
            f"Validation error: Expected {describe(node)} but got {kind_of(value)}", path
        )

    if is_object_schema(node):
        if not is_object(value):
            raise ValidationError(f"Validation error: Expected object but got {kind_of(value)}", path)
        for key, field_node in node.items():
            field_path = join_path(path, key)
            field_value = get_field(value, key)
            if field_value is not MISSING:
                check_node(field_node, field_value, field_path)
                continue
            try:
                check_node(field_node, MISSING, field_path)
            except SchemaError:
                raise
            except ValidationError:
                raise ValidationError(
                    f"Validation error: Missing required key '{key}' (expected {describe(field_node)})",
                    field_path,
                ) from None
        return

    literal_kind = _LITERAL_KINDS.get(type(node))
    if literal_kind is not None:
        if not _matches_kind(literal_kind, value):
            raise ValidationError(
                f"Validation error: Expected {literal_kind.__name__} but got {kind_of(value)}", path
            )
        return

    raise SchemaError(f"Validation error: Unsupported schema node {node!r}", path)


def matches(node: Any, value: Any) -> bool:
    """Quiet variant of :func:`check_node`; malformed schemas still raise."""
    try:
        check_node(node, value)
    except SchemaError:
        raise
    except ValidationError:
        return False
    return True


def validate(schema: Any, value: Any, quiet: bool = False) -> bool:
    """Validate a top-level value against a schema.

    Args:
        schema: Schema node (usually an object schema)
        value: Value to validate; must be a non-null object
        quiet: Return False on mismatch instead of raising

    Returns:
        True when the value conforms, False on mismatch in quiet mode

    Raises:
        ValidationError: If the value is not an object (even in quiet mode),
            or on mismatch when not quiet
        SchemaError: If the schema is malformed (even in quiet mode)
    """
    if not is_object(value):
        raise ValidationError("Validation error: Input must be an object.")

    if not quiet:
        check_node(schema, value)
        return True

    try:
        check_node(schema, value)
    except SchemaError:
        raise
    except ValidationError as exc:
        logger.debug(f"Quiet validation failed: {exc}")
        return False
    return True
