"""Artifact discovery: recursive directory scan filtered by extension and age."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from .config import ARTIFACT_EXTENSION
from .errors import DirectoryNotFound
from .models import ArtifactFile

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def _require_directory(directory: str | Path) -> Path:
    path = Path(directory)
    if not path.is_dir():
        raise DirectoryNotFound(str(directory))
    return path


def list_artifacts(
    directory: str | Path,
    *,
    extension: str = ARTIFACT_EXTENSION,
) -> list[ArtifactFile]:
    """Walk ``directory`` fully and return every regular file ending in ``extension``.

    Matching is case-insensitive. Results keep filesystem enumeration order.
    """
    root = _require_directory(directory)
    suffix = extension.lower()
    found: list[ArtifactFile] = []
    for candidate in root.rglob("*"):
        if not candidate.name.lower().endswith(suffix):
            continue
        try:
            if not candidate.is_file():
                continue
            stat = candidate.stat()
        except OSError as exc:
            # Vanished or unreadable between listing and stat
            logger.debug("Skipping %s: %s", candidate, exc)
            continue
        found.append(
            ArtifactFile(
                path=candidate.resolve(),
                name=candidate.name,
                last_modified=stat.st_mtime,
                size_bytes=stat.st_size,
            )
        )
    return found


def discover(
    directory: str | Path,
    lookback_days: int | None = None,
    *,
    extension: str = ARTIFACT_EXTENSION,
    oldest_first: bool = False,
    now: float | None = None,
) -> list[ArtifactFile]:
    """Return artifacts modified within the lookback window, most recent first.

    Parameters
    ----------
    directory : str | Path
        Root directory, scanned recursively.
    lookback_days : int | None
        Keep files whose mtime is at or after ``now - lookback_days * 24h``.
        ``None`` disables the window.
    oldest_first : bool
        Reverse the ordering (ascending mtime).
    now : float | None
        Reference epoch seconds; defaults to the current time.

    Raises
    ------
    DirectoryNotFound
        If ``directory`` does not exist or is not a directory.
    """
    artifacts = list_artifacts(directory, extension=extension)
    if lookback_days is not None:
        reference = time.time() if now is None else now
        cutoff = reference - lookback_days * SECONDS_PER_DAY
        artifacts = [a for a in artifacts if a.last_modified >= cutoff]
    # Stable sort: equal mtimes keep enumeration order
    artifacts = sorted(artifacts, key=lambda a: a.last_modified, reverse=not oldest_first)
    logger.debug(
        "Discovered %s artifact(s) under %s (lookback=%s)", len(artifacts), directory, lookback_days
    )
    return artifacts
