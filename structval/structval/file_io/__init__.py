from .document_loader import DocumentLoader, SourceMap
from .file_resolver import FileResolver

__all__ = ['DocumentLoader', 'FileResolver', 'SourceMap']
