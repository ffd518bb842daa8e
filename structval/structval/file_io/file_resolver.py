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

"""External-reference resolver backed by schema files on disk."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import unquote, urljoin, urlparse
from urllib.request import url2pathname

from ..config import default_config
from ..utils.uri import document_uri
from .document_loader import DocumentLoader

logger = logging.getLogger(__name__)


class FileResolver:
    """Maps schema URIs onto files below ``root_dir``.

    ``file://`` URIs are used as-is; URIs below the directory of ``base_uri`` are
    taken relative to ``root_dir``.  Anything else, and any path escaping
    ``root_dir``, is left unresolved.
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        base_uri: Optional[str] = None,
        loader: Optional[DocumentLoader] = None,
    ):
        self.root_dir = Path(root_dir).resolve()
        self.base_prefix = urljoin(document_uri(base_uri or default_config.base_uri), ".")
        self.loader = loader or DocumentLoader()

    def path_for(self, uri: str) -> Optional[Path]:
        uri = document_uri(uri)
        parsed = urlparse(uri)
        if parsed.scheme == "file":
            candidate = Path(url2pathname(parsed.path))
        elif uri.startswith(self.base_prefix):
            candidate = self.root_dir / unquote(uri[len(self.base_prefix):])
        else:
            return None

        candidate = candidate.resolve()
        try:
            candidate.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Refusing to resolve {uri} outside of {self.root_dir}")
            return None
        return candidate

    def __call__(self, uri: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(uri)
        if path is None or not path.is_file():
            logger.debug(f"No schema file for {uri}")
            return None
        logger.debug(f"Resolving {uri} from {path}")
        return self.loader.load(path)
