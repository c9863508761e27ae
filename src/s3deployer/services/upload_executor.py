"""Concurrent upload of planned files to the object store."""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from s3deployer.constants import DEFAULT_MAX_CONCURRENCY, PUBLIC_READ
from s3deployer.errors import UploadFailed
from s3deployer.models import UploadPlanEntry


class UploadExecutor:
    """Uploads every plan entry and reports completion only when all succeeded.

    Uploads run on a thread pool bounded by ``max_concurrency`` (ten workers
    when unset). The first failure cancels queued uploads and raises
    ``UploadFailed``; objects that were already uploaded stay in the bucket.
    """

    def __init__(self, logger, console, max_concurrency: Optional[int] = None):
        self.logger = logger
        self.console = console
        self.max_concurrency = max_concurrency
        self._lock = threading.Lock()
        self._completed = 0

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def execute(self, entries: List[UploadPlanEntry], store) -> int:
        if not entries:
            return 0

        self._completed = 0
        failed = threading.Event()
        workers = min(len(entries), self.max_concurrency or DEFAULT_MAX_CONCURRENCY)

        def _upload(entry: UploadPlanEntry) -> int:
            if failed.is_set():
                return self.completed
            self.logger.info("Uploading file: %s", entry.destination_key)
            with open(entry.source_path, "rb") as body:
                store.upload(entry.destination_key, body, PUBLIC_READ, entry.content_type)
            with self._lock:
                self._completed += 1
                return self._completed

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
        ) as progress:
            task = progress.add_task("[cyan]Uploading files...", total=len(entries))
            executor = ThreadPoolExecutor(max_workers=workers)
            try:
                futures = {executor.submit(_upload, entry): entry for entry in entries}
                for future in as_completed(futures):
                    entry = futures[future]
                    try:
                        future.result()
                    except Exception as exc:
                        failed.set()
                        for pending in futures:
                            pending.cancel()
                        if isinstance(exc, UploadFailed):
                            raise
                        raise UploadFailed(
                            f"Upload failed for {entry.destination_key}: {exc}"
                        ) from exc

                    self.logger.info("Upload finished: %s", entry.destination_key)
                    progress.update(task, advance=1)
            finally:
                executor.shutdown(wait=True)

        return self.completed
