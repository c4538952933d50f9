"""UpdateSource capability and the shared HTTP helper."""

import logging
from collections.abc import Callable
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from appupdater.branding import AppBranding
from appupdater.core.models import FetchResult, UpdateInfo
from appupdater.host.detector import PackageInfo

logger = logging.getLogger(__name__)

PackageInfoProvider = PackageInfo | Callable[[], PackageInfo]


def http_get(url: str, headers: dict[str, str] | None = None,
             timeout: float | None = None) -> tuple[int, str]:
    """GET *url* and return ``(status, body)``.

    HTTP error statuses are returned with an empty body; transport errors
    (URLError, OSError) propagate. No timeout unless *timeout* is given.
    """
    req_headers = {'User-Agent': AppBranding.user_agent()}
    req_headers.update(headers or {})
    req = Request(url, headers=req_headers)
    kwargs = {} if timeout is None else {'timeout': timeout}
    try:
        with urlopen(req, **kwargs) as resp:
            status = getattr(resp, 'status', 200)
            return status, resp.read().decode('utf-8', errors='replace')
    except HTTPError as e:
        return e.code, ""


class UpdateSource:
    """Produces an :class:`UpdateInfo` from some remote origin.

    Subclasses implement ``_fetch()``, which may raise. ``fetch()`` keeps the
    failure cause in :class:`FetchResult`; ``fetch_update_info()`` collapses
    "no update data" and "fetch failed" into ``None``.
    """

    name = "source"

    def __init__(self, package_info: PackageInfoProvider):
        self._package_info = package_info

    def fetch(self) -> FetchResult:
        try:
            return FetchResult(info=self._fetch())
        except Exception as e:
            logger.warning("%s fetch failed: %s", self.name, e)
            return FetchResult(error=f"{type(e).__name__}: {e}")

    def fetch_update_info(self) -> UpdateInfo | None:
        return self.fetch().info

    def _fetch(self) -> UpdateInfo | None:
        raise NotImplementedError

    def _resolve_package(self) -> PackageInfo:
        """Current package metadata; providers are re-read on every fetch."""
        if callable(self._package_info):
            return self._package_info()
        return self._package_info
