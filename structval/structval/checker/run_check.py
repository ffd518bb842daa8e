#!/usr/bin/env python3
# Copyright 2026 TIER IV, inc.
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

"""CLI entry point for checking documents against a schema."""

import argparse
import json
import sys
from pathlib import Path
from typing import List

try:
    from . import check_documents, CheckResult
    from ..config import ValidatorConfig
    from ..exceptions import StructvalError
except ImportError:  # pragma: no cover
    # Allow direct execution: `python path/to/run_check.py ...`
    SCRIPT_DIR = Path(__file__).resolve().parent
    REPO_ROOT = SCRIPT_DIR.parent.parent
    if str(REPO_ROOT) not in sys.path:
        sys.path.insert(0, str(REPO_ROOT))

    from structval.checker import check_documents, CheckResult
    from structval.config import ValidatorConfig
    from structval.exceptions import StructvalError


def print_results(results: List[CheckResult], output_format: str) -> None:
    if output_format == 'json':
        output = {
            'files': len(results),
            'errors': sum(len(r.errors) for r in results),
            'results': [r.to_dict() for r in results],
        }
        print(json.dumps(output, indent=2))
    elif output_format == 'github-actions':
        for result in results:
            for error in result.errors:
                print(f"::error file={result.file_path},line={error.get('line', 1)}::{error['message']}")
    else:  # human-readable
        for result in results:
            if result.errors:
                print(f"\n{result.file_path}:")
                for error in result.errors:
                    line_info = f":{error['line']}" if 'line' in error else ""
                    where = f" (at {error['json_pointer'] or '/'})" if 'json_pointer' in error else ""
                    print(f"  ERROR{line_info}: {error['message']}{where}")


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the checker CLI."""
    config = ValidatorConfig.from_env()

    parser = argparse.ArgumentParser(
        description='Validate JSON/YAML documents against a JSON-Schema-style schema',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('schema', help='Schema document (JSON or YAML)')
    parser.add_argument('instances', nargs='+', help='Instance documents to validate')
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument(
        '--base-uri',
        default=config.base_uri,
        help=f'Base URI of the schema (default: {config.base_uri})',
    )
    parser.add_argument(
        '--schema-root',
        default=None,
        help='Directory holding schemas referenced through $ref (enables file lookup)',
    )
    parser.add_argument(
        '--validate-schema',
        action='store_true',
        default=config.validate_schema_itself,
        help='Check the schema against the draft-04 meta-schema before use',
    )

    args = parser.parse_args(argv)
    config.set_logging()

    try:
        results = check_documents(
            args.schema,
            args.instances,
            base_uri=args.base_uri,
            schema_root=args.schema_root,
            validate_schema_itself=args.validate_schema,
        )
    except StructvalError as e:
        print(f"Schema error: {e}", file=sys.stderr)
        sys.exit(2)

    print_results(results, args.format)

    # Exit with error code if any errors found
    if any(r.errors for r in results):
        sys.exit(1)
    if args.format == 'human':
        print(f"Check succeeded: {len(results)} document(s) valid.")
    sys.exit(0)


if __name__ == '__main__':
    main()
