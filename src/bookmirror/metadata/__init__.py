# ABOUTME: Metadata package for the normalized book record read from sidecar files.
# ABOUTME: Exports the BookMetadata dataclass used by the naming and linking code.

from bookmirror.metadata.types import BookMetadata

__all__ = ["BookMetadata"]
