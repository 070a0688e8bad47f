"""Luna Language Server package.

This package provides:
- A pygls-based Language Server for Luna.
- A static indexer that reads documents with luna's own reader, without evaluation.

Note: The LSP does not evaluate user buffers; it builds a static index from text.
"""

__all__ = [
    "server",
    "indexer",
]
