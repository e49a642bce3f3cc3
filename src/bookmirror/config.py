# ABOUTME: Startup configuration for bookmirror: the source and target roots.
# ABOUTME: Validates both directories and that hardlinks can be made between them.

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SOURCE_ENV = "SOURCE_DIR"
TARGET_ENV = "TARGET_DIR"

PROBE_NAME = ".bookmirror-link-probe"


class ConfigurationError(Exception):
    """Raised when the source or target directory cannot be used."""


@dataclass(frozen=True)
class MirrorConfig:
    """Resolved source and target roots for a mirror."""

    source_dir: Path
    target_dir: Path


def _require_directory(value: Path | str | None, label: str, env_name: str) -> Path:
    if value is None or str(value) == "":
        raise ConfigurationError(f"{label} directory is not set (use --{label.lower()} or {env_name})")
    path = Path(value).expanduser()
    if not path.is_dir():
        raise ConfigurationError(f"{label} directory {path} is not a directory or does not exist")
    return path.resolve()


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove link probe %s: %s", path, exc)


def check_hardlink_support(source_dir: Path, target_dir: Path) -> None:
    """Verify that a file in source_dir can be hardlinked into target_dir.

    Writes a probe file into the source root, links it into the target
    root, then removes both copies.

    Raises:
        ConfigurationError: If the probe cannot be written, linked or removed.
    """
    probe = source_dir / PROBE_NAME
    linked = target_dir / PROBE_NAME
    try:
        probe.write_text("probe")
        linked.hardlink_to(probe)
        probe.unlink()
        linked.unlink()
    except OSError as exc:
        _remove_quietly(probe)
        _remove_quietly(linked)
        raise ConfigurationError(
            f"Cannot hardlink from {source_dir} to {target_dir}. Both directories "
            f"must live on the same filesystem (in Docker, mount a single volume "
            f"that contains both): {exc}"
        ) from exc


def load_config(
    source_dir: Path | str | None,
    target_dir: Path | str | None,
    *,
    check_links: bool = True,
) -> MirrorConfig:
    """Validate the source and target roots and build a MirrorConfig.

    Args:
        source_dir: Root of the Calibre-style source library.
        target_dir: Root of the flat mirror.
        check_links: Whether to probe hardlink support between the two.

    Returns:
        MirrorConfig with both paths resolved.

    Raises:
        ConfigurationError: If either directory is missing or unusable.
    """
    source = _require_directory(source_dir, "Source", SOURCE_ENV)
    target = _require_directory(target_dir, "Target", TARGET_ENV)
    if check_links:
        check_hardlink_support(source, target)
    logger.debug("Mirroring %s -> %s", source, target)
    return MirrorConfig(source_dir=source, target_dir=target)

