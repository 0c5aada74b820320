"""Atomic file writing for generated documents and the cache file."""

import hashlib
from dataclasses import dataclass
from pathlib import Path

import structlog


logger = structlog.get_logger()


@dataclass(frozen=True)
class WrittenFile:
    """Information about a file written by AtomicWriter."""

    path: str
    bytes_written: int
    sha256: str


class AtomicWriter:
    """Provides atomic file writing operations.

    Writes content to a temporary file next to the target, then renames it
    over the target, so readers see either the old or the new file.
    """

    def __init__(self, run_id: str | None = None) -> None:
        """Initialize the atomic writer.

        Args:
            run_id: Optional run ID for logging context.
        """
        self._log = logger.bind(component="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def write(self, path: Path, content: str) -> WrittenFile:
        """Write content to file with atomic semantics.

        Missing parent directories are created.

        Args:
            path: Target file path.
            content: Content to write (encoded as UTF-8).

        Returns:
            WrittenFile with path, size and checksum.
        """
        content_bytes = content.encode("utf-8")
        sha256 = hashlib.sha256(content_bytes).hexdigest()

        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_bytes(content_bytes)
        temp_path.replace(path)

        self._log.debug(
            "file_written",
            path=str(path),
            bytes=len(content_bytes),
            sha256=sha256[:12],
        )
        return WrittenFile(
            path=str(path),
            bytes_written=len(content_bytes),
            sha256=sha256,
        )
