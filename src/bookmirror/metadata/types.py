# ABOUTME: Core metadata data structure extracted from a book's metadata.opf sidecar.
# ABOUTME: BookMetadata is the interchange format between parsing, naming, and linking.

import math
from dataclasses import dataclass


@dataclass
class BookMetadata:
    """Normalized metadata for one book in the source library.

    Every field is optional. A field is None when the sidecar document
    omits it, never an empty string stand-in. series_index may hold NaN
    when the document carries an index that is not a number.
    """

    id: str | None = None
    title: str | None = None
    creator: str | None = None
    series: str | None = None
    series_index: float | None = None

    @property
    def has_series(self) -> bool:
        """Whether the book can be placed by series name and position."""
        if not self.series:
            return False
        return self.series_index is not None and math.isfinite(self.series_index)
