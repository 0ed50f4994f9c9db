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

"""Resolution of 'package.module:ATTRIBUTE' schema references."""

import importlib
import logging
from typing import Any

from ..exceptions import SchemaResolutionError

logger = logging.getLogger(__name__)


def resolve_schema_ref(ref: str) -> Any:
    """Import the schema object named by ``ref``.

    Args:
        ref: Reference of the form 'package.module:ATTRIBUTE'; dotted
            attribute paths ('module:Config.SCHEMA') are followed

    Returns:
        The schema object

    Raises:
        SchemaResolutionError: If the module or attribute cannot be found
    """
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not module_name or not attr_path:
        raise SchemaResolutionError(
            f"Invalid schema reference: '{ref}'. Expected format: 'package.module:ATTRIBUTE'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise SchemaResolutionError(f"Cannot import schema module '{module_name}': {exc}")

    schema = module
    for attr in attr_path.split("."):
        try:
            schema = getattr(schema, attr)
        except AttributeError:
            raise SchemaResolutionError(f"Schema '{attr_path}' not found in module '{module_name}'")

    logger.debug(f"Resolved schema reference {ref}")
    return schema
