"""Screenshot file saver for test reports."""

from __future__ import annotations

import io
import logging
import shutil
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path

logger = logging.getLogger("tcreport.screenshots")

CHUNK_SIZE = 64 * 1024


class ScreenshotSaver:
    """Save screenshots to files with structured naming.

    Writes issued with save_async() run on a background worker and are not
    awaited by the caller. Call drain() before exiting when the files must
    be on disk.
    """

    def __init__(self, output_dir: Path, max_workers: int = 1):
        """Initialize saver.

        Args:
            output_dir: Directory to save screenshots to
            max_workers: Number of background writer threads
        """
        self._output_dir = Path(output_dir)
        self._max_workers = max_workers
        self._pool: ThreadPoolExecutor | None = None
        self._pending: set[Future[Path]] = set()
        self._failed = 0
        self._lock = threading.Lock()

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def get_filename(self, index: int, token: str) -> str:
        """Generate filename for screenshot.

        Args:
            index: Screenshot index within the test (0-indexed)
            token: Unique token, usually a UUID

        Returns:
            Filename like "0-1b4e28ba-2fa1-11d2-883f-0016d3cca427.png"
        """
        return f"{index}-{token}.png"

    def save(self, data: bytes, filename: str) -> Path:
        """Stream screenshot bytes to a file.

        Args:
            data: Image bytes
            filename: Target file name inside the output directory

        Returns:
            Path to saved file
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)

        path = self._output_dir / filename
        with open(path, "wb") as f:
            shutil.copyfileobj(io.BytesIO(data), f, CHUNK_SIZE)

        logger.debug("Saved %s (%d bytes)", path, len(data))
        return path

    def save_async(self, data: bytes, filename: str) -> Future[Path]:
        """Queue a write without waiting for it.

        Failures are logged and counted, never raised to the caller.

        Returns:
            Future resolving to the saved path
        """
        with self._lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="tcreport-screenshots",
                )
            future = self._pool.submit(self._write, data, filename)
            self._pending.add(future)

        future.add_done_callback(self._on_done)
        return future

    def _write(self, data: bytes, filename: str) -> Path:
        try:
            return self.save(data, filename)
        except Exception as e:
            logger.warning("Screenshot write failed for %s: %s", filename, e)
            with self._lock:
                self._failed += 1
            raise

    def _on_done(self, future: Future[Path]) -> None:
        with self._lock:
            self._pending.discard(future)

    @property
    def pending(self) -> int:
        """Number of writes still in flight."""
        with self._lock:
            return len(self._pending)

    def drain(self, timeout: float | None = None) -> int:
        """Wait for all queued writes.

        Args:
            timeout: Maximum seconds to wait, None for no limit

        Returns:
            Number of writes that failed since the last drain, plus any
            that did not finish in time
        """
        with self._lock:
            futures = list(self._pending)

        not_done: set[Future[Path]] = set()
        if futures:
            _, not_done = wait(futures, timeout=timeout)
            if not_done:
                logger.warning(
                    "%d screenshot writes still pending after %ss", len(not_done), timeout
                )

        with self._lock:
            failed, self._failed = self._failed, 0
        return failed + len(not_done)

    def close(self) -> None:
        """Drain pending writes and stop the worker."""
        self.drain()
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True)
