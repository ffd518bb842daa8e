"""Schema compilation and validation engine.

The engine only sees already-parsed documents; file loading and the CLI live in
structval.file_io and structval.checker.
"""

from .context import Context, ExternalResolver
from .node import ReferenceNode, SchemaNode
from .records import ErrorRecord, ValidationResult
from .validators import Validator, ValidatorRegistry
