# ABOUTME: Guarded file removal for the target tree.
# ABOUTME: Refuses paths at or near the filesystem root before unlinking anything.

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def safe_unlink(path: Path | str) -> bool:
    """Remove a single file unless its path looks unsafe.

    A path with fewer than two separators, or one starting with a doubled
    separator, is refused without touching the filesystem. Mirrored files
    always sit at least two levels down (target/directory/file.epub).

    Args:
        path: Absolute path of the file to remove.

    Returns:
        True if the file was removed, False if the path was refused.

    Raises:
        OSError: If the removal itself fails (missing file, permissions).
    """
    text = str(path)
    if text.count(os.sep) < 2 or text.startswith(os.sep * 2):
        logger.warning("Refusing possibly unsafe removal of %s", text)
        return False

    os.unlink(text)
    logger.info("Removed %s", text)
    return True
