"""Transient on-disk handle for the live audio artifact.

The handle plays the role a blob URL plays in a browser: something a
player can open by path. It must be released exactly once when the
artifact it mirrors is replaced or dropped.
"""

import logging
import os
import tempfile
from pathlib import Path

from songscout.core.models import AudioArtifact

logger = logging.getLogger(__name__)


class ArtifactHandle:
    """Scratch file holding a copy of one artifact's bytes.

    Args:
        artifact: The artifact to materialise.
        directory: Scratch directory; ``None`` uses the system temp dir.
    """

    def __init__(self, artifact: AudioArtifact, directory: str | Path | None = None) -> None:
        if directory:
            Path(directory).mkdir(parents=True, exist_ok=True)
        suffix = Path(artifact.name).suffix
        fd, path = tempfile.mkstemp(prefix="songscout-", suffix=suffix, dir=directory or None)
        with os.fdopen(fd, "wb") as fh:
            fh.write(artifact.data)
        self._artifact = artifact
        self._path = Path(path)
        self._released = False
        logger.debug("Materialised %s (%d bytes) at %s", artifact.name, artifact.size, path)

    @property
    def artifact(self) -> AudioArtifact:
        return self._artifact

    @property
    def path(self) -> Path:
        return self._path

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        """Delete the scratch file. Returns False if it was already released."""
        if self._released:
            return False
        self._released = True
        self._path.unlink(missing_ok=True)
        logger.debug("Released %s", self._path)
        return True
