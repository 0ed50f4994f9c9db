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

"""Custom exceptions for vstruct."""


class VStructError(Exception):
    """Base exception for vstruct related errors."""
    pass


class ValidationError(VStructError):
    """Exception raised when a value does not satisfy its schema.

    Attributes:
        message: Human-readable description (expected vs. actual kind)
        path: JSON pointer to the offending value, "" for the root
    """

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (path={self.path})"
        return self.message


class SchemaError(ValidationError):
    """Exception raised for malformed schemas. Never silenced by quiet mode."""
    pass


class DataLoadError(VStructError):
    """Exception raised when a data file cannot be read or parsed."""
    pass


class SchemaResolutionError(VStructError):
    """Exception raised when a 'module:attribute' schema reference cannot be resolved."""
    pass
