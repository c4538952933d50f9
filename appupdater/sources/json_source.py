"""Update source for self-hosted apps — a JSON document at a fixed URL.

Expected body::

    {
      "latestVersion": "1.2.3",          (required)
      "url": "https://example.com/get",  (optional)
      "releaseNotes": "Bug fixes.",      (optional)
      "critical": false                  (optional, default false)
    }
"""

import json
import logging

from appupdater.core.models import UpdateInfo
from appupdater.core.version import parse_version
from appupdater.sources.base import PackageInfoProvider, UpdateSource, http_get

logger = logging.getLogger(__name__)


class JsonUpdateSource(UpdateSource):
    """Fetches update metadata from a custom JSON endpoint."""

    name = "json"

    def __init__(self, url: str, package_info: PackageInfoProvider,
                 headers: dict[str, str] | None = None, timeout: float | None = None):
        super().__init__(package_info)
        self.url = url
        self.headers = dict(headers or {})
        self.timeout = timeout

    def _fetch(self) -> UpdateInfo | None:
        status, body = http_get(self.url, headers=self.headers, timeout=self.timeout)
        if status != 200:
            logger.warning("Update endpoint %s returned HTTP %d", self.url, status)
            return None

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            logger.warning("Update endpoint %s returned invalid JSON: %s", self.url, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Update endpoint %s did not return an object", self.url)
            return None

        latest = data.get('latestVersion')
        if not isinstance(latest, str) or not latest.strip():
            logger.warning("Update endpoint %s: missing 'latestVersion'", self.url)
            return None

        update_url = data.get('url')
        notes = data.get('releaseNotes')
        critical = data.get('critical', False)

        package = self._resolve_package()
        return UpdateInfo(
            current_version=parse_version(package.version),
            latest_version=parse_version(latest),
            release_notes=notes if isinstance(notes, str) else None,
            update_url=update_url if isinstance(update_url, str) else None,
            is_critical=critical is True,
        )
