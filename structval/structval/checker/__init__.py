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

"""Checker package: validate instance files against a schema file."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..exceptions import DocumentLoadError
from ..file_io import DocumentLoader, FileResolver
from ..schema import Context
from ..utils.source_location import format_source, lookup_source
from .report import CheckResult

__all__ = ['check_document', 'check_documents', 'CheckResult']

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def check_documents(
    schema_path: PathLike,
    instance_paths: Sequence[PathLike],
    *,
    base_uri: Optional[str] = None,
    schema_root: Optional[PathLike] = None,
    validate_schema_itself: Optional[bool] = None,
    loader: Optional[DocumentLoader] = None,
) -> List[CheckResult]:
    """Validate a list of instance files against one schema file.

    Args:
        schema_path: Path to the JSON/YAML schema document
        instance_paths: Paths of the instance documents to check
        base_uri: Base URI of the schema (default: configured base URI)
        schema_root: Directory used to resolve external references, if any
        validate_schema_itself: Check the schema against the draft-04 meta-schema
        loader: DocumentLoader to share between schema and instances

    Returns:
        List of CheckResult objects, one per instance file

    Raises:
        DocumentLoadError: If the schema file cannot be loaded
        CompilationError: If the schema cannot be compiled or a reference is unresolvable
    """
    loader = loader or DocumentLoader()
    schema_document = loader.load(schema_path)

    resolver = FileResolver(schema_root, base_uri=base_uri, loader=loader) if schema_root is not None else None
    context = Context(
        base_uri=base_uri,
        external_resolver=resolver,
        validate_schema_itself=validate_schema_itself,
    )
    schema = context.compile(schema_document, resolve_refs=True)

    results = []
    for instance_path in instance_paths:
        path = Path(instance_path)
        result = CheckResult(path)

        try:
            instance, source_map = loader.load_file(path)
        except DocumentLoadError as e:
            result.add_error(str(e))
            results.append(result)
            continue

        valid, errors = context.validate(schema, instance)
        for record in errors:
            loc = lookup_source(source_map, record.json_pointer, path)
            logger.debug(f"{record.message}{format_source(loc)}")
            result.add_error(
                record.message,
                line=loc.line,
                column=loc.column,
                json_pointer=record.json_pointer,
                keyword=record.keyword,
            )
        logger.debug(f"Checked {path}: {'valid' if valid else f'{len(errors)} error(s)'}")
        results.append(result)

    return results


def check_document(schema_path: PathLike, instance_path: PathLike, **kwargs) -> CheckResult:
    """Validate a single instance file; see check_documents for keyword arguments."""
    return check_documents(schema_path, [instance_path], **kwargs)[0]
