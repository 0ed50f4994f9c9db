#!/usr/bin/env python3
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

"""CLI entry point for checking data files against a vstruct schema."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from ..config import vstruct_config
from ..exceptions import SchemaError, SchemaResolutionError
from . import check_files, CheckResult, resolve_schema_ref
from .template_renderer import TemplateRenderer

logger = logging.getLogger(__name__)

DATA_EXTENSIONS = ['.yaml', '.yml', '.json']


def find_data_files(paths: List[str]) -> List[Path]:
    """Find all YAML/JSON data files in given paths."""
    data_files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
            continue

        if path.is_file():
            if path.suffix in DATA_EXTENSIONS:
                data_files.append(path)
            else:
                logger.warning(f"File does not have a data file extension: {path}")
        elif path.is_dir():
            for ext in DATA_EXTENSIONS:
                data_files.extend(path.rglob(f'*{ext}'))
        else:
            logger.warning(f"Path is neither file nor directory: {path}")

    return sorted(set(data_files))


def _print_results(results: List[CheckResult], output_format: str, schema_ref: str) -> None:
    failed = sum(1 for r in results if not r.ok)

    if output_format == 'json':
        output = {
            'schema': schema_ref,
            'files': len(results),
            'failed': failed,
            'results': [r.to_dict() for r in results],
        }
        print(json.dumps(output, indent=2))
    elif output_format == 'github-actions':
        for result in results:
            for error in result.errors:
                print(f"::error file={result.file_path},line={error.get('line', 1)}::{error['message']}")
    elif output_format == 'markdown':
        renderer = TemplateRenderer()
        print(renderer.render_template(
            'report.md.jinja2', results=results, failed=failed, schema_ref=schema_ref,
        ), end='')
    else:  # human-readable
        for result in results:
            if result.errors:
                print(f"\n{result.file_path}:")
                for error in result.errors:
                    line_info = f":{error['line']}" if 'line' in error else ""
                    path_info = f" (path={error['path']})" if 'path' in error else ""
                    print(f"  ERROR{line_info}: {error['message']}{path_info}")


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the checker CLI."""
    parser = argparse.ArgumentParser(
        description='Check YAML/JSON data files against a vstruct schema',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'schema',
        help="Schema reference, e.g. 'myapp.schemas:USER'",
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='File paths or directories to check (default: current directory)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions', 'markdown'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging',
    )

    args = parser.parse_args(argv)

    if args.verbose:
        vstruct_config.log_level = 'DEBUG'
    vstruct_config.set_logging()

    if not args.paths:
        args.paths = ['.']

    try:
        schema = resolve_schema_ref(args.schema)
    except SchemaResolutionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    data_files = find_data_files(args.paths)

    if not data_files:
        print("No data files found.", file=sys.stderr)
        sys.exit(1)

    try:
        results = check_files(schema, data_files)
    except SchemaError as e:
        print(f"Error: malformed schema '{args.schema}': {e}", file=sys.stderr)
        sys.exit(2)

    _print_results(results, args.format, args.schema)

    if any(not r.ok for r in results):
        sys.exit(1)
    if args.format == 'human':
        print(f"Checked {len(results)} file(s) with no errors.")
    sys.exit(0)


if __name__ == '__main__':
    main()
