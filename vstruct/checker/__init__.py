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

"""Checker package: validate YAML/JSON data files against a Python-defined schema."""

from pathlib import Path
from typing import Any, List

from ..exceptions import DataLoadError, SchemaError, ValidationError
from ..loader import DataLoader, data_loader
from ..source_location import lookup_source
from ..validator import validate
from .report import CheckResult
from .schema_ref import resolve_schema_ref

__all__ = ['check_files', 'check_file', 'CheckResult', 'resolve_schema_ref']


def check_file(schema: Any, file_path: Path, loader: DataLoader = None) -> CheckResult:
    """Validate a single data file.

    Raises:
        SchemaError: If the schema is malformed; this aborts the whole run
    """
    loader = loader or data_loader
    result = CheckResult(file_path)

    try:
        data, source_map = loader.load_with_source(file_path)
    except DataLoadError as e:
        result.add_error(str(e))
        return result

    try:
        validate(schema, data)
    except SchemaError:
        raise
    except ValidationError as e:
        loc = lookup_source(source_map, e.path)
        result.add_error(e.message, line=loc.line, column=loc.column, path=e.path)

    return result


def check_files(schema: Any, file_paths: List[Path], loader: DataLoader = None) -> List[CheckResult]:
    """Validate a list of data files.

    Args:
        schema: Schema node the files must satisfy
        file_paths: List of file paths to check
        loader: Loader to use (defaults to the shared loader)

    Returns:
        List of CheckResult objects, one per file
    """
    return [check_file(schema, file_path, loader) for file_path in file_paths]
