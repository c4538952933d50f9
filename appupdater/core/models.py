"""Update system data models."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from semver import Version

from appupdater.core.version import is_newer


@dataclass(frozen=True)
class UpdateInfo:
    """Result of a successful source fetch."""

    current_version: Version
    latest_version: Version
    release_notes: str | None = None
    update_url: str | None = None   # Store listing or download page
    is_critical: bool = False       # Bypasses snooze
    platform_metadata: object | None = None  # e.g. NativeUpdateInfo from the Play check

    @property
    def is_update_available(self) -> bool:
        return is_newer(self.current_version, self.latest_version)


@dataclass(frozen=True)
class CheckState:
    """Persisted timestamps consulted before every decision."""

    last_checked_at: datetime | None = None
    last_dismissed_at: datetime | None = None


@dataclass(frozen=True)
class UpdatePolicy:
    """Options that gate when an update prompt may be presented."""

    check_interval: timedelta | None = None     # None = check every time
    snooze_duration: timedelta = timedelta(days=1)
    force_show: bool = False
    force_show_only_in_debug: bool = True
    display_once: bool = False                  # At most one presentation per engine

    def force_show_active(self, debug: bool) -> bool:
        """Whether ``force_show`` applies in the current runtime."""
        if not self.force_show:
            return False
        return debug or not self.force_show_only_in_debug


class SkipReason(Enum):
    TOO_SOON = "too-soon"
    NO_DATA = "no-data"
    NOT_AVAILABLE = "not-available"
    SNOOZED = "snoozed"
    ALREADY_PRESENTING = "already-presenting"
    ALREADY_DISPLAYED = "already-displayed"
    ERROR = "error"


@dataclass(frozen=True)
class Outcome:
    """Decision result: either present ``info`` or skip for ``reason``."""

    info: UpdateInfo | None = None
    reason: SkipReason | None = None
    detail: str = ""

    @classmethod
    def present(cls, info: UpdateInfo) -> 'Outcome':
        return cls(info=info)

    @classmethod
    def skip(cls, reason: SkipReason, detail: str = "") -> 'Outcome':
        return cls(reason=reason, detail=detail)

    @property
    def should_present(self) -> bool:
        return self.info is not None and self.reason is None

    def describe(self) -> str:
        if self.should_present:
            return (f"present: {self.info.current_version} -> "
                    f"{self.info.latest_version}")
        text = f"skip: {self.reason.value}"
        if self.detail:
            text += f" ({self.detail})"
        return text


@dataclass
class FetchResult:
    """Outcome of a single source fetch, before it is collapsed to ``UpdateInfo | None``."""

    info: UpdateInfo | None = None
    error: str | None = None

    @property
    def has_info(self) -> bool:
        return self.info is not None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class NativeUpdateInfo:
    """Handle returned by a platform in-app-update availability check."""

    update_available: bool
    immediate_allowed: bool = True
    flexible_allowed: bool = True
    available_version_code: int | None = None


class NativeFlow(Enum):
    NONE = "none"
    IMMEDIATE = "immediate"    # Blocks the app until installed
    FLEXIBLE = "flexible"      # Downloads in the background
