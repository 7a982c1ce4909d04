"""Persist generated artifacts to a directory.

Writing is best effort per artifact: a file that cannot be written is
logged by name and the remaining artifacts are still written. Once every
artifact has been attempted, ArtifactWriteError lists the failures so the
build stops before a registry could reference a missing launcher.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from fft_generator.artifacts import Artifact
from fft_generator.errors import ArtifactWriteError

logger = logging.getLogger(__name__)


def write_artifacts(artifacts: Iterable[Artifact], out_dir: str) -> list[Path]:
    """Write each artifact under out_dir and return the written paths."""
    root = Path(out_dir)
    root.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    failed: list[str] = []
    for artifact in artifacts:
        path = root / artifact.name
        try:
            path.write_text(artifact.text)
        except OSError as e:
            logger.error("File: %s could not be opened for writing: %s", path, e)
            failed.append(artifact.name)
            continue
        written.append(path)

    if failed:
        raise ArtifactWriteError(failed)
    logger.info("Wrote %d artifacts to %s", len(written), root)
    return written
