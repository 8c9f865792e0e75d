"""
Storage abstractions.

- DocumentStore -> users and posts (in-memory locally)
- ImageStorage  -> uploaded post images (filesystem locally)
"""

from postboard.storage.base import (
    DocumentStore,
    ImageStorage,
    Sort,
    SortOrder,
)
from postboard.storage.local import InMemoryDocumentStore, LocalImageStorage

__all__ = [
    "DocumentStore",
    "ImageStorage",
    "Sort",
    "SortOrder",
    "InMemoryDocumentStore",
    "LocalImageStorage",
]
