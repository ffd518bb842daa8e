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

"""Custom exceptions for the structval system."""


class StructvalError(Exception):
    """Base exception for structval related errors."""
    pass


class CompilationError(StructvalError):
    """Exception raised when a schema document cannot be compiled."""
    pass


class ReferenceResolutionError(CompilationError):
    """Exception raised when a $ref or JSON pointer cannot be resolved."""

    def __init__(self, uri: str, message: str = None):
        self.uri = uri
        super().__init__(message or f"Can't resolve reference: {uri}")


class SchemaDocumentError(CompilationError):
    """Exception raised for malformed schema documents."""

    def __init__(self, message: str, issues=None):
        self.issues = list(issues or [])
        super().__init__(message)


class DocumentLoadError(StructvalError):
    """Exception raised when a schema or instance document cannot be loaded."""
    pass
