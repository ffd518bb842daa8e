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

"""URI and JSON Pointer helpers used for schema ids and $ref resolution.

Every URI handled by the resolution table is kept in one canonical form,
``<uri-without-fragment>#<fragment>``, so that ``http://x/a.json``,
``http://x/a.json#`` and a root schema merged against ``#`` all share a key.
"""

from __future__ import annotations

from typing import List, Tuple, Union
from urllib.parse import unquote, urldefrag, urljoin

JsonPointer = str
PathToken = Union[str, int]


def normalize_uri(uri: str) -> str:
    base, fragment = urldefrag(uri)
    return f"{base}#{fragment}"


def merge_uri(base: str, reference: str) -> str:
    """Resolve *reference* against *base* and return the canonical form."""
    base_part, _ = urldefrag(base)
    if reference.startswith("#"):
        # urljoin drops empty fragments, so fragment-only references are joined by hand
        return normalize_uri(f"{base_part}{reference}")
    return normalize_uri(urljoin(base, reference))


def split_uri(uri: str) -> Tuple[str, str]:
    """Split a canonical URI into its document key (ending in ``#``) and fragment."""
    base, fragment = urldefrag(uri)
    return f"{base}#", fragment


def document_uri(uri: str) -> str:
    """Return *uri* without its fragment."""
    return urldefrag(uri)[0]


def is_json_pointer(fragment: str) -> bool:
    return fragment[:1] == "/"


def json_pointer_escape(token: str) -> str:
    # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
    return token.replace("~", "~0").replace("/", "~1")


def json_pointer_unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def split_json_pointer(pointer: JsonPointer) -> List[str]:
    """Split a URI-fragment JSON pointer into unescaped reference tokens."""
    return [json_pointer_unescape(unquote(p)) for p in pointer.split("/")[1:]]


def format_json_pointer(path: Tuple[PathToken, ...]) -> JsonPointer:
    """Render an instance path (property names and indices) as an RFC 6901 pointer."""
    return "".join(f"/{json_pointer_escape(str(token))}" for token in path)
