#!/usr/bin/env python3

import argparse
import sys
from pathlib import Path
from typing import List


SCRIPT_DIR = Path(__file__).resolve().parent
PACKAGE_ROOT = SCRIPT_DIR.parent
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from structval.checker import check_documents  # noqa: E402
from structval.checker.run_check import print_results  # noqa: E402
from structval.config import ValidatorConfig  # noqa: E402
from structval.exceptions import StructvalError  # noqa: E402


DOCUMENT_EXTENSIONS = [
    ".json",
    ".yaml",
    ".yml",
]


def find_documents(paths: List[Path], exclude: Path) -> List[Path]:
    """Find all JSON/YAML documents in given paths, skipping the schema itself."""
    documents: List[Path] = []

    for path in paths:
        if not path.exists():
            print(f"Warning: Path does not exist: {path}", file=sys.stderr)
            continue

        if path.is_file():
            if path.suffix in DOCUMENT_EXTENSIONS:
                documents.append(path)
            else:
                print(
                    f"Warning: File is not a JSON/YAML document: {path}",
                    file=sys.stderr,
                )
        elif path.is_dir():
            for ext in DOCUMENT_EXTENSIONS:
                documents.extend(path.rglob(f"*{ext}"))
        else:
            print(f"Warning: Path is neither file nor directory: {path}", file=sys.stderr)

    excluded = exclude.resolve()
    return sorted({d for d in documents if d.resolve() != excluded})


def main() -> None:
    config = ValidatorConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Validate every document of a workspace against one schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("schema", help="Schema document (JSON or YAML)")
    parser.add_argument(
        "workspace",
        nargs="?",
        default=".",
        help="Workspace root (default: current directory)",
    )
    parser.add_argument(
        "--paths",
        nargs="*",
        default=None,
        help="Optional explicit paths to check (files or directories)",
    )
    parser.add_argument(
        "--format",
        choices=["human", "json", "github-actions"],
        default="human",
        help="Output format (default: human)",
    )

    args = parser.parse_args()
    config.set_logging()

    schema_path = Path(args.schema)
    workspace = Path(args.workspace).resolve()
    paths = [Path(p) for p in args.paths] if args.paths else [workspace]

    documents = find_documents(paths, exclude=schema_path)
    if not documents:
        print("No JSON/YAML documents found.", file=sys.stderr)
        sys.exit(1)

    try:
        results = check_documents(
            schema_path,
            documents,
            base_uri=config.base_uri,
            schema_root=schema_path.resolve().parent,
            validate_schema_itself=config.validate_schema_itself,
        )
    except StructvalError as e:
        print(f"Schema error: {e}", file=sys.stderr)
        sys.exit(2)

    print_results(results, args.format)
    sys.exit(1 if any(r.errors for r in results) else 0)


if __name__ == "__main__":
    main()
