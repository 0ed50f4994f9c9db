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

"""YAML/JSON data loader with caching and source maps."""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Union, Tuple

from .config import vstruct_config
from .exceptions import DataLoadError
from .validator import join_path

logger = logging.getLogger(__name__)

SourceMap = Dict[str, Dict[str, int]]


class DataLoader:
    """Loads data files to validate. JSON documents are parsed as YAML."""

    def __init__(self, cache_enabled: bool = None):
        """Initialize data loader.

        Args:
            cache_enabled: Whether to enable caching. If None, uses global config.
        """
        self.cache_enabled = cache_enabled if cache_enabled is not None else vstruct_config.cache_enabled
        self._cache: Dict[Path, Tuple[Any, SourceMap]] = {}

    @staticmethod
    def build_source_map(content: str) -> SourceMap:
        """Build a mapping from JSON pointers to 1-based line/column.

        This uses PyYAML's node tree (yaml.compose) so locations are tracked
        without changing the data returned by safe_load.
        """
        source_map: SourceMap = {}

        try:
            root = yaml.compose(content, Loader=yaml.SafeLoader)
        except yaml.YAMLError:
            # Parse errors surface from safe_load instead.
            return source_map

        if root is None:
            return source_map

        def _walk(node, path: str) -> None:
            mark = getattr(node, "start_mark", None)
            if mark is not None:
                # PyYAML uses 0-based line/column
                source_map[path] = {"line": int(mark.line) + 1, "column": int(mark.column) + 1}

            if isinstance(node, yaml.nodes.MappingNode):
                for key_node, value_node in node.value:
                    key = getattr(key_node, "value", None)
                    if key is None:
                        continue
                    _walk(value_node, join_path(path, key))
            elif isinstance(node, yaml.nodes.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    _walk(item_node, join_path(path, idx))

        _walk(root, "")
        return source_map

    def load_with_source(self, file_path: Union[str, Path]) -> Tuple[Any, SourceMap]:
        """Load a data file and return (data, source_map).

        Raises:
            DataLoadError: If the file is missing or cannot be parsed
        """
        path = Path(file_path)

        if not path.exists():
            raise DataLoadError(f"Data file not found: {path}")

        if not path.is_file():
            raise DataLoadError(f"Path is not a file: {path}")

        if self.cache_enabled and path in self._cache:
            logger.debug(f"Loading data from cache: {path}")
            return self._cache[path]

        logger.debug(f"Loading data file: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DataLoadError(f"Failed to read data file {path}: {exc}")

        data, source_map = self.load_string_with_source(content, origin=str(path))

        if self.cache_enabled:
            self._cache[path] = (data, source_map)

        return data, source_map

    def load_string_with_source(self, content: str, origin: str = "<string>") -> Tuple[Any, SourceMap]:
        """Parse YAML/JSON content and return (data, source_map)."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise DataLoadError(f"Failed to parse {origin}: {exc}")
        return data, self.build_source_map(content)

    def load(self, file_path: Union[str, Path]) -> Any:
        """Load a data file without its source map."""
        return self.load_with_source(file_path)[0]

    def clear_cache(self):
        """Clear the data cache."""
        self._cache.clear()
        logger.debug("Data cache cleared")


# Global loader instance
data_loader = DataLoader()
