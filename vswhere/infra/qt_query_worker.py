import os
from pathlib import Path

from logly import logger
from PySide6.QtCore import QObject, Signal, Slot

from vswhere.application import discovery
from vswhere.core.errors import VsWhereError
from vswhere.core.selection import Selection


class QueryWorker(QObject):
    """Runs a vswhere query in a background Qt thread.

    The worker is meant to be moved to a `QThread` and started via a signal/slot.
    Exactly one of `finished` (list of `InstallationRecord`) or `failed`
    (`VsWhereError`) is emitted per run.
    """

    finished = Signal(object)
    failed = Signal(object)
    finished_with_job = Signal(int, object)
    failed_with_job = Signal(int, object)

    def __init__(
        self,
        selection: Selection,
        vswhere_path: "str | os.PathLike[str] | None" = None,
        job_id: int = 0,
    ):
        super().__init__()
        self._selection = selection
        self._vswhere_path = Path(vswhere_path) if vswhere_path is not None else None
        self._job_id = job_id

    @Slot()
    def run(self):
        """Executes the configured query and emits `finished` or `failed`."""
        try:
            logger.info(f"Starting vswhere query job={self._job_id} {self._selection!r}")
            instances = discovery.run(self._selection, self._vswhere_path)
        except VsWhereError as e:
            logger.warning(f"vswhere query job={self._job_id} failed: {e}")
            self.failed.emit(e)
            self.failed_with_job.emit(self._job_id, e)
            return

        logger.info(f"vswhere query job={self._job_id} returned {len(instances)}")
        self.finished.emit(instances)
        self.finished_with_job.emit(self._job_id, instances)
