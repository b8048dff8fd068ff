"""DocPlane - doc-block metadata for test runners."""

from docplane.annotation import DocBlock, NamedRow, SymbolDescriptor

__all__ = ["DocBlock", "NamedRow", "SymbolDescriptor"]
