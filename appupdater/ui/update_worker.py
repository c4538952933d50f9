"""Background update check for PyQt6 hosts.

The decision engine blocks on network I/O, so Qt apps run it through
UpdateWorker and receive the outcome as queued signals on the GUI thread.
PyQt6 is imported only when the worker class is first requested; the rest
of the package works without Qt installed.
"""

import logging

from appupdater.core.engine import UpdateDecisionEngine
from appupdater.core.models import SkipReason

logger = logging.getLogger(__name__)


def _build_worker_class():
    """Define UpdateWorker against the installed PyQt6."""
    from PyQt6.QtCore import QThread, pyqtSignal

    class UpdateWorker(QThread):
        """Runs one ``decide()`` off the UI thread and reports via signals."""

        update_available = pyqtSignal(object)    # UpdateInfo to present
        check_skipped = pyqtSignal(str)          # SkipReason value
        check_failed = pyqtSignal(str)           # for logs, not for the user

        def __init__(self, engine: UpdateDecisionEngine, force: bool = False, parent=None):
            super().__init__(parent)
            self._engine = engine
            self._force = force

        def check(self, force: bool = False):
            """Start a background decision; *force* skips the check interval."""
            self._force = force
            self.start()

        def run(self):
            try:
                outcome = self._engine.decide(force=self._force)
            except Exception as e:
                logger.warning("Background update check crashed: %s", e)
                self.check_failed.emit(str(e))
                return

            if outcome.should_present:
                self.update_available.emit(outcome.info)
            elif outcome.reason == SkipReason.ERROR:
                self.check_failed.emit(outcome.detail)
            else:
                self.check_skipped.emit(outcome.reason.value)

    return UpdateWorker


_worker_class = None


def get_update_worker_class():
    """Return the UpdateWorker class, importing PyQt6 on first use."""
    global _worker_class
    if _worker_class is None:
        _worker_class = _build_worker_class()
    return _worker_class
