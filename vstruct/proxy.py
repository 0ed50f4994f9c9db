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

"""Validating deep proxy.

A proxy forwards reads to the wrapped value and validates every write against
the matching schema sub-node before it reaches the value. Nested containers are
wrapped lazily on first read and memoized by identity in a :class:`ProxyCache`
shared by every proxy that descends from the same root.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from types import ModuleType, SimpleNamespace
from typing import Any, Callable, Dict, Iterator, List, Tuple

from .exceptions import SchemaError, ValidationError
from .schema import MISSING, Nullable, Optional, Union, describe, is_array_schema, is_object_schema
from .validator import check_node, is_object, join_path, kind_of, matches

logger = logging.getLogger(__name__)


class ProxyCache:
    """Identity-keyed memo of already wrapped sub-objects.

    Entries hold a strong reference to the wrapped object: the built-in dict
    and list are not weak-referenceable, and keeping the object alive keeps its
    id() from being reused. Entries live until :meth:`clear` or until the cache
    itself is dropped.
    """

    def __init__(self):
        self._entries: Dict[int, Tuple[Any, "ValidatingProxy"]] = {}

    def get(self, obj: Any) -> "ValidatingProxy | None":
        entry = self._entries.get(id(obj))
        if entry is not None and entry[0] is obj:
            return entry[1]
        return None

    def put(self, obj: Any, proxy: "ValidatingProxy") -> None:
        self._entries[id(obj)] = (obj, proxy)

    def clear(self) -> None:
        self._entries.clear()
        logger.debug("Proxy cache cleared")

    def __contains__(self, obj: Any) -> bool:
        return self.get(obj) is not None

    def __len__(self) -> int:
        return len(self._entries)


def is_proxy(obj: Any) -> bool:
    return isinstance(obj, ValidatingProxy)


def unwrap(obj: Any) -> Any:
    """Return the raw value behind a proxy, or the object itself."""
    if isinstance(obj, ValidatingProxy):
        return object.__getattribute__(obj, "_vs_target")
    return obj


def _is_wrappable(value: Any) -> bool:
    if isinstance(value, ValidatingProxy):
        return False
    if isinstance(value, (MutableMapping, MutableSequence)):
        return True
    if not is_object(value) or isinstance(value, (Mapping, Sequence, ModuleType)):
        return False
    return hasattr(value, "__dict__")


def _container_schema(node: Any, value: Any) -> Any:
    """Narrow a node to the object/array schema that governs ``value``'s children."""
    while True:
        if isinstance(node, (Nullable, Optional)):
            node = node.type
        elif isinstance(node, Union):
            node = next((option for option in node.types if matches(option, value)), MISSING)
        elif isinstance(node, type) and is_object_schema(getattr(node, "_vs_schema", None)):
            # VStruct classes carry their own schema.
            node = node._vs_schema
        else:
            return node


def _make_proxy(value: Any, node: Any, quiet: bool, cache: ProxyCache, path: str) -> "ValidatingProxy":
    if isinstance(value, MutableMapping):
        proxy_cls = MappingProxy
    elif isinstance(value, MutableSequence):
        proxy_cls = SequenceProxy
    else:
        proxy_cls = ObjectProxy
    proxy = proxy_cls(value, _container_schema(node, value), quiet, cache, path, node)
    logger.debug(f"Created {proxy_cls.__name__} at '{path or '/'}'")
    return proxy


def wrap(value: Any, schema: Any, quiet: bool = False, cache: ProxyCache = None) -> "ValidatingProxy":
    """Wrap an already validated value in a validating proxy.

    Args:
        value: Mapping, mutable sequence or attribute object to wrap
        schema: Schema node describing ``value``
        quiet: Silently ignore invalid writes instead of raising
        cache: Proxy cache to share; a new one is created when omitted

    Returns:
        The proxy for ``value`` (the cached one if ``value`` was wrapped before)

    Raises:
        TypeError: If ``value`` cannot be proxied (primitives, None, tuples)
    """
    if isinstance(value, ValidatingProxy):
        return value
    if not _is_wrappable(value):
        raise TypeError(f"Cannot wrap value of kind {kind_of(value)}")

    if cache is None:
        cache = ProxyCache()

    cached = cache.get(value)
    if cached is not None:
        return cached

    proxy = _make_proxy(value, schema, quiet, cache, "")
    cache.put(value, proxy)
    return proxy


PendingWrite = Tuple[Any, Any, Any]


class ValidatingProxy:
    """Shared machinery for the mapping, sequence and attribute proxies.

    ``_vs_node`` is the node the container was reached through and
    ``_vs_schema`` the object/array schema narrowed from it. When the node is a
    union, a write the current alternative rejects may still be accepted by
    switching to another alternative that matches the updated container.
    """

    # Prefixed so they never shadow fields of attribute objects.
    __slots__ = ("_vs_target", "_vs_schema", "_vs_node", "_vs_quiet", "_vs_cache", "_vs_path")

    def __init__(
        self,
        target: Any,
        schema: Any,
        quiet: bool,
        cache: ProxyCache,
        path: str = "",
        node: Any = MISSING,
    ):
        object.__setattr__(self, "_vs_target", target)
        object.__setattr__(self, "_vs_schema", schema)
        object.__setattr__(self, "_vs_node", schema if node is MISSING else node)
        object.__setattr__(self, "_vs_quiet", quiet)
        object.__setattr__(self, "_vs_cache", cache)
        object.__setattr__(self, "_vs_path", path)

    def _vs_child_node(self, key: Any, schema: Any = MISSING) -> Any:
        if schema is MISSING:
            schema = self._vs_schema
        if is_object_schema(schema):
            return schema.get(key, MISSING)
        return MISSING

    def _vs_wrap_child(self, key: Any, raw: Any, node: Any) -> Any:
        if not _is_wrappable(raw):
            return raw

        cached = self._vs_cache.get(raw)
        if cached is not None:
            return cached

        proxy = _make_proxy(raw, node, self._vs_quiet, self._vs_cache, join_path(self._vs_path, key))
        self._vs_cache.put(raw, proxy)
        return proxy

    def _vs_trial(self) -> Any:
        return copy.copy(self._vs_target)

    def _vs_renarrow(self, keys: List[Any], apply: Callable[[Any], None]) -> bool:
        """Switch to a union alternative that covers ``keys`` and matches the container after ``apply``."""
        node = self._vs_node
        while isinstance(node, (Nullable, Optional)):
            node = node.type
        if not isinstance(node, Union):
            return False

        trial = self._vs_trial()
        apply(trial)
        for option in node.types:
            schema = _container_schema(option, trial)
            if schema is MISSING or schema == self._vs_schema:
                continue
            if any(self._vs_child_node(key, schema) is MISSING for key in keys):
                continue
            if matches(schema, trial):
                object.__setattr__(self, "_vs_schema", schema)
                logger.debug(f"Switched '{self._vs_path or '/'}' to union alternative {describe(schema)}")
                return True
        return False

    def _vs_accept_writes(self, writes: List[PendingWrite], apply: Callable[[Any], None]) -> bool:
        """Validate pending ``(key, node, value)`` writes. False means a quiet rejection.

        Either every write is accepted or none is; ``apply`` performs all of
        them on a copy of the target when a union alternative has to be tried.
        """
        path = self._vs_path
        try:
            for key, node, new_value in writes:
                path = join_path(self._vs_path, key)
                if node is MISSING:
                    raise ValidationError(f"Validation error: No schema for key '{key}'", path)
                check_node(node, new_value, path)
        except SchemaError:
            raise
        except ValidationError as exc:
            if self._vs_renarrow([key for key, _, _ in writes], apply):
                return True
            if not self._vs_quiet:
                raise
            logger.debug(f"Rejected write to '{path}': {exc}")
            return False
        return True

    def _vs_accept_write(self, key: Any, node: Any, new_value: Any, apply: Callable[[Any], None]) -> bool:
        return self._vs_accept_writes([(key, node, new_value)], apply)

    def __eq__(self, other: Any) -> bool:
        return self._vs_target == unwrap(other)

    def __ne__(self, other: Any) -> bool:
        return not self == other

    __hash__ = None

    def __repr__(self) -> str:
        return repr(self._vs_target)


class MappingProxy(ValidatingProxy, MutableMapping):
    """Proxy for dict-like values validated against an object schema."""

    __slots__ = ()

    def __getitem__(self, key: Any) -> Any:
        raw = self._vs_target[key]
        return self._vs_wrap_child(key, raw, self._vs_child_node(key))

    def __setitem__(self, key: Any, value: Any) -> None:
        raw = unwrap(value)
        if self._vs_accept_write(key, self._vs_child_node(key), value, lambda trial: trial.__setitem__(key, raw)):
            self._vs_target[key] = raw

    def __delitem__(self, key: Any) -> None:
        if key not in self._vs_target:
            raise KeyError(key)
        if self._vs_accept_write(key, self._vs_child_node(key), MISSING, lambda trial: trial.__delitem__(key)):
            del self._vs_target[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._vs_target)

    def __len__(self) -> int:
        return len(self._vs_target)

    def __contains__(self, key: Any) -> bool:
        return key in self._vs_target


class SequenceProxy(ValidatingProxy, MutableSequence):
    """Proxy for list-like values validated against an ``[inner]`` schema."""

    __slots__ = ()

    def _vs_child_node(self, key: Any, schema: Any = MISSING) -> Any:
        if schema is MISSING:
            schema = self._vs_schema
        if is_array_schema(schema) and len(schema) == 1:
            return schema[0]
        return MISSING

    def __getitem__(self, index: Any) -> Any:
        target = self._vs_target
        node = self._vs_child_node(index)
        if isinstance(index, slice):
            return [self._vs_wrap_child(i, target[i], node) for i in range(*index.indices(len(target)))]
        raw = target[index]
        if index < 0:
            index += len(target)
        return self._vs_wrap_child(index, raw, node)

    def __setitem__(self, index: Any, value: Any) -> None:
        node = self._vs_child_node(index)
        if isinstance(index, slice):
            values: List[Any] = list(value)
            raw_values = [unwrap(item) for item in values]
            positions = range(*index.indices(len(self._vs_target)))
            writes = [
                (positions[i] if i < len(positions) else positions.start + i, node, item)
                for i, item in enumerate(values)
            ]
            if self._vs_accept_writes(writes, lambda trial: trial.__setitem__(index, raw_values)):
                self._vs_target[index] = raw_values
            return
        if index < 0:
            index += len(self._vs_target)
        raw = unwrap(value)
        if self._vs_accept_write(index, node, value, lambda trial: trial.__setitem__(index, raw)):
            self._vs_target[index] = raw

    def __delitem__(self, index: Any) -> None:
        del self._vs_target[index]

    def __len__(self) -> int:
        return len(self._vs_target)

    def insert(self, index: int, value: Any) -> None:
        position = min(max(index if index >= 0 else index + len(self._vs_target), 0), len(self._vs_target))
        raw = unwrap(value)
        if self._vs_accept_write(
            position, self._vs_child_node(position), value, lambda trial: trial.insert(index, raw)
        ):
            self._vs_target.insert(index, raw)

    def extend(self, values: Any) -> None:
        # All or nothing, unlike the item-by-item MutableSequence mixin.
        items = list(values)
        raw_items = [unwrap(item) for item in items]
        start = len(self._vs_target)
        node = self._vs_child_node(start)
        writes = [(start + i, node, item) for i, item in enumerate(items)]
        if self._vs_accept_writes(writes, lambda trial: trial.extend(raw_items)):
            self._vs_target.extend(raw_items)


class ObjectProxy(ValidatingProxy):
    """Proxy for attribute objects (e.g. Struct instances) validated against an object schema."""

    __slots__ = ()

    @property
    def __class__(self):
        # isinstance() checks against the wrapped object's class keep working.
        return type(self._vs_target)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not found on the proxy itself.
        if name in ValidatingProxy.__slots__:
            raise AttributeError(name)
        raw = getattr(self._vs_target, name)
        return self._vs_wrap_child(name, raw, self._vs_child_node(name))

    def __setattr__(self, name: str, value: Any) -> None:
        raw = unwrap(value)
        if self._vs_accept_write(name, self._vs_child_node(name), value, lambda trial: setattr(trial, name, raw)):
            setattr(self._vs_target, name, raw)

    def __delattr__(self, name: str) -> None:
        if not hasattr(self._vs_target, name):
            raise AttributeError(name)
        if self._vs_accept_write(name, self._vs_child_node(name), MISSING, lambda trial: delattr(trial, name)):
            delattr(self._vs_target, name)

    def __dir__(self) -> List[str]:
        return dir(self._vs_target)

    def _vs_trial(self) -> Any:
        return SimpleNamespace(**vars(self._vs_target))
