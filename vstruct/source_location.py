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

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[Path] = None
    path: Optional[str] = None  # JSON pointer
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


def lookup_source(source_map: Optional[Dict[str, Dict[str, int]]], path: Optional[str]) -> SourceLocation:
    """Find the closest known location for a JSON pointer.

    Missing keys have no node of their own, so the pointer is shortened until a
    recorded parent is found.
    """
    if not source_map or path is None:
        return SourceLocation(path=path)

    current = path
    while True:
        entry = source_map.get(current)
        if entry:
            return SourceLocation(path=path, line=entry.get("line"), column=entry.get("column"))
        if not current:
            return SourceLocation(path=path)
        current = current.rsplit("/", 1)[0]


def format_source(loc: Optional[SourceLocation]) -> str:
    if not loc:
        return ""

    parts = []
    if loc.file_path is not None:
        if loc.line is not None and loc.column is not None:
            parts.append(f"source={loc.file_path}:{loc.line}:{loc.column}")
        elif loc.line is not None:
            parts.append(f"source={loc.file_path}:{loc.line}")
        else:
            parts.append(f"source={loc.file_path}")

    if loc.path:
        parts.append(f"path={loc.path}")

    if not parts:
        return ""

    return " (" + " ".join(parts) + ")"
