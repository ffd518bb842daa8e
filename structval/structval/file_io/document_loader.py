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

"""JSON/YAML document loader with source positions and caching support."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from ..config import default_config
from ..exceptions import DocumentLoadError
from ..utils.uri import json_pointer_escape

logger = logging.getLogger(__name__)

SourceMap = Dict[str, Dict[str, int]]


class DocumentLoader:
    """Loads schema and instance documents.

    JSON is a subset of YAML, so both formats go through ``yaml.safe_load``.
    """

    def __init__(self, cache_enabled: Optional[bool] = None):
        """Initialize the loader.

        Args:
            cache_enabled: Whether to cache documents by path. If None, uses global config.
        """
        self.cache_enabled = cache_enabled if cache_enabled is not None else default_config.cache_enabled
        self._cache: Dict[Path, Any] = {}
        self._source_cache: Dict[Path, SourceMap] = {}

    @staticmethod
    def build_source_map(content: str) -> SourceMap:
        """Build a mapping from JSON pointers to 1-based line/column.

        This uses PyYAML's node tree (yaml.compose) so we can track locations without
        changing the parsed data shapes returned by safe_load.
        """
        source_map: SourceMap = {}

        try:
            root = yaml.compose(content, Loader=yaml.SafeLoader)
        except yaml.YAMLError:
            # Parsing errors are reported by load_string/load_file.
            return source_map

        if root is None:
            return source_map

        def _record(path: str, node) -> None:
            mark = getattr(node, "start_mark", None)
            if mark is None:
                return
            # PyYAML uses 0-based line/column
            source_map[path] = {"line": int(mark.line) + 1, "column": int(mark.column) + 1}

        def _walk(node, path: str) -> None:
            _record(path, node)

            if isinstance(node, yaml.nodes.MappingNode):
                for key_node, value_node in node.value:
                    key = getattr(key_node, "value", None)
                    if key is None:
                        continue
                    _walk(value_node, f"{path}/{json_pointer_escape(str(key))}")
            elif isinstance(node, yaml.nodes.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    _walk(item_node, f"{path}/{idx}")

        _walk(root, "")
        return source_map

    def load_string(self, content: str) -> Tuple[Any, SourceMap]:
        """Parse document text and return (data, source_map)."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise DocumentLoadError(f"Failed to parse document content: {exc}") from exc
        return data, self.build_source_map(content)

    def load_file(self, file_path: Union[str, Path]) -> Tuple[Any, SourceMap]:
        """Load a JSON or YAML file and return (data, source_map).

        Raises:
            DocumentLoadError: If the file cannot be read or parsed
        """
        path = Path(file_path)

        if not path.exists():
            raise DocumentLoadError(f"Document file not found: {path}")

        if not path.is_file():
            raise DocumentLoadError(f"Path is not a file: {path}")

        if self.cache_enabled and path in self._cache:
            logger.debug(f"Loading document from cache: {path}")
            return self._cache[path], self._source_cache[path]

        logger.debug(f"Loading document file: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(f"Failed to read document file {path}: {exc}") from exc

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise DocumentLoadError(f"Failed to parse document file {path}: {exc}") from exc
        source_map = self.build_source_map(content)

        if self.cache_enabled:
            self._cache[path] = data
            self._source_cache[path] = source_map
        return data, source_map

    def load(self, file_path: Union[str, Path]) -> Any:
        """Load a document file without its source map."""
        return self.load_file(file_path)[0]

    def clear_cache(self) -> None:
        """Clear the document cache."""
        self._cache.clear()
        self._source_cache.clear()
        logger.debug("Document cache cleared")
