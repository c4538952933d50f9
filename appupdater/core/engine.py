"""Update decision engine — decides whether an update prompt should be presented.

Each ``decide()`` runs one blocking sequence: read check state, fetch from the
source, compare versions, apply snooze. It is designed to run off the UI
thread (see ``appupdater.ui.update_worker``). Only one presentation per engine
can be outstanding at a time. Fetches are never cancelled or deduplicated.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from appupdater.core.actions import UpdateActionExecutor
from appupdater.core.models import Outcome, SkipReason, UpdateInfo, UpdatePolicy
from appupdater.core.state import CheckStateStore, as_utc, utc_now
from appupdater.host.detector import is_debug_runtime
from appupdater.sources.base import UpdateSource

logger = logging.getLogger(__name__)


class UpdateDecisionEngine:
    """Frequency gating, version comparison, snooze gating and the presentation guard."""

    def __init__(self, source: UpdateSource, store: CheckStateStore,
                 policy: UpdatePolicy | None = None,
                 executor: UpdateActionExecutor | None = None,
                 debug: bool | None = None,
                 on_error: Callable[[str], None] | None = None,
                 on_shown: Callable[[UpdateInfo], None] | None = None,
                 on_ignored: Callable[[], None] | None = None,
                 on_accepted: Callable[[], None] | None = None):
        self.source = source
        self.store = store
        self.policy = policy or UpdatePolicy()
        self.executor = executor or UpdateActionExecutor(on_error=on_error)
        self.debug = is_debug_runtime() if debug is None else debug
        self.on_error = on_error
        self.on_shown = on_shown
        self.on_ignored = on_ignored
        self.on_accepted = on_accepted

        self._lock = threading.Lock()
        self._presenting = False
        self._displayed = False   # for UpdatePolicy.display_once

    @property
    def presenting(self) -> bool:
        return self._presenting

    # ── Decide ───────────────────────────────────────────────────────

    def decide(self, now: datetime | None = None, force: bool = False,
               policy: UpdatePolicy | None = None) -> Outcome:
        """Run one update check. Never raises; failures become ``Skip(error)``.

        *force* bypasses only the check-interval rate limit.
        """
        policy = policy or self.policy
        now = as_utc(now) if now is not None else utc_now()
        try:
            outcome = self._decide(policy, now, force)
        except Exception as e:
            self._report(f"Update check failed: {e}")
            return Outcome.skip(SkipReason.ERROR, str(e))

        if outcome.should_present:
            logger.info("Presenting update %s -> %s",
                        outcome.info.current_version, outcome.info.latest_version)
            if self.on_shown:
                self._notify(self.on_shown, outcome.info)
        else:
            logger.debug("Update check skipped: %s", outcome.describe())
        return outcome

    def _decide(self, policy: UpdatePolicy, now: datetime, force: bool) -> Outcome:
        forced_show = policy.force_show_active(self.debug)
        state = self.store.load()

        # 1. Rate limit; the source is not contacted at all
        if (not force and policy.check_interval is not None and not forced_show
                and state.last_checked_at is not None
                and now - state.last_checked_at < policy.check_interval):
            return Outcome.skip(SkipReason.TOO_SOON,
                                f"last checked {state.last_checked_at.isoformat()}")

        # 2. Fetch
        result = self.source.fetch()
        if not result.has_info:
            return Outcome.skip(SkipReason.NO_DATA, result.error or "")
        info = result.info

        # 3. Persist even if a later step skips
        if policy.check_interval is not None:
            self.store.mark_checked(now)

        # 4-5. Availability
        if not (info.is_update_available or forced_show):
            return Outcome.skip(SkipReason.NOT_AVAILABLE,
                                f"{info.current_version} is up to date")

        # 6. Snooze
        if not forced_show and not info.is_critical:
            dismissed = state.last_dismissed_at
            if dismissed is not None and now - dismissed < policy.snooze_duration:
                return Outcome.skip(SkipReason.SNOOZED,
                                    f"dismissed {dismissed.isoformat()}")

        # 7. Single presentation per engine
        with self._lock:
            if policy.display_once and self._displayed:
                return Outcome.skip(SkipReason.ALREADY_DISPLAYED)
            if self._presenting:
                return Outcome.skip(SkipReason.ALREADY_PRESENTING)
            self._presenting = True
            self._displayed = True
        return Outcome.present(info)

    # ── Presentation feedback ────────────────────────────────────────

    def mark_dismissed(self, now: datetime | None = None):
        """User chose "Later": start the snooze window and end the presentation."""
        try:
            self.store.mark_dismissed(as_utc(now) if now is not None else utc_now())
        except Exception as e:
            self._report(f"Failed to record dismissal: {e}")
        finally:
            self._end_presentation()
        if self.on_ignored:
            self._notify(self.on_ignored)

    def mark_accepted(self):
        """User accepted the update. Check and snooze stamps are left untouched."""
        self._end_presentation()
        if self.on_accepted:
            self._notify(self.on_accepted)

    def mark_closed(self):
        """Presentation closed without an answer."""
        self._end_presentation()

    def perform_update(self, info: UpdateInfo) -> bool:
        """Hand *info* to the action executor; completion ends the presentation."""
        try:
            return self.executor.perform_update(info, on_accepted=self.mark_accepted)
        except Exception as e:
            self._report(f"Update action failed: {e}")
            self._end_presentation()
            return False

    # ── Internals ────────────────────────────────────────────────────

    def _end_presentation(self):
        with self._lock:
            self._presenting = False

    def _report(self, message: str):
        logger.error(message)
        if self.on_error:
            self._notify(self.on_error, message)

    def _notify(self, callback: Callable, *args):
        try:
            callback(*args)
        except Exception as e:
            logger.warning("Updater callback %r raised: %s", callback, e)
