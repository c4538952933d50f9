"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from appupdater.core.actions import NativeUpdateClient, UrlLauncher
from appupdater.core.models import NativeUpdateInfo, UpdateInfo
from appupdater.core.state import MemoryCheckStateStore
from appupdater.core.version import parse_version
from appupdater.host.detector import PackageInfo
from appupdater.sources.base import UpdateSource

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
DEMO_PACKAGE = PackageInfo(app_name="Demo", package_name="com.example.demo", version="1.0.0")


def make_info(current: str = "1.0.0", latest: str = "1.1.0", **kwargs) -> UpdateInfo:
    return UpdateInfo(
        current_version=parse_version(current),
        latest_version=parse_version(latest),
        **kwargs,
    )


class FakeSource(UpdateSource):
    """Returns a canned UpdateInfo (or raises) and counts fetches."""

    name = "fake"

    def __init__(self, info: UpdateInfo | None = None, error: Exception | None = None):
        super().__init__(DEMO_PACKAGE)
        self.info = info
        self.error = error
        self.calls = 0

    def _fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.info


class FakeResponse:
    """Minimal stand-in for the object returned by urlopen()."""

    def __init__(self, body: str | bytes, status: int = 200):
        self._body = body.encode('utf-8') if isinstance(body, str) else body
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeNativeClient(NativeUpdateClient):
    """Records native flow calls; optionally fails the check or the flows."""

    def __init__(self, info: NativeUpdateInfo | None = None,
                 check_error: Exception | None = None,
                 flow_error: Exception | None = None):
        self.info = info if info is not None else NativeUpdateInfo(update_available=True)
        self.check_error = check_error
        self.flow_error = flow_error
        self.calls: list[str] = []

    def check_for_update(self) -> NativeUpdateInfo:
        self.calls.append('check')
        if self.check_error is not None:
            raise self.check_error
        return self.info

    def perform_immediate_update(self):
        self.calls.append('immediate')
        if self.flow_error is not None:
            raise self.flow_error

    def start_flexible_update(self):
        self.calls.append('start_flexible')
        if self.flow_error is not None:
            raise self.flow_error

    def complete_flexible_update(self):
        self.calls.append('complete_flexible')


class FakeLauncher(UrlLauncher):
    """Records launched URLs; only the given schemes are launchable."""

    def __init__(self, schemes: tuple[str, ...] = ('http', 'https', 'market')):
        self.schemes = schemes
        self.launched: list[tuple[str, bool]] = []

    def can_launch(self, url: str) -> bool:
        return url.split(':', 1)[0] in self.schemes

    def launch(self, url: str, external: bool = False) -> bool:
        self.launched.append((url, external))
        return True


@pytest.fixture
def store() -> MemoryCheckStateStore:
    return MemoryCheckStateStore()


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()
