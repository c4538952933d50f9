"""Public app store sources — Google Play listing and the iTunes lookup API."""

import json
import logging
from urllib.parse import quote, urlencode

from semver import Version

from appupdater.branding import AppBranding
from appupdater.core.actions import NativeUpdateClient
from appupdater.core.models import NativeUpdateInfo, UpdateInfo
from appupdater.core.version import ZERO_VERSION, bump_patch, parse_version
from appupdater.host.detector import HostPlatform
from appupdater.sources.base import PackageInfoProvider, UpdateSource, http_get
from appupdater.sources.scraper import scrape_release_notes, scrape_version

logger = logging.getLogger(__name__)

PLAY_LISTING_URL = "https://play.google.com/store/apps/details?id={package}&hl=en&gl=US"
ITUNES_LOOKUP_URL = "https://itunes.apple.com/lookup"


class PlayStoreSource(UpdateSource):
    """Android: native availability check plus a scrape of the Play listing.

    Every stage is best effort. A failed native check or scrape is skipped,
    and the result degrades toward "current version is latest".
    """

    name = "play_store"

    def __init__(self, package_info: PackageInfoProvider,
                 native_client: NativeUpdateClient | None = None,
                 timeout: float | None = None):
        super().__init__(package_info)
        self.native_client = native_client
        self.timeout = timeout

    def _fetch(self) -> UpdateInfo | None:
        package = self._resolve_package()
        current = parse_version(package.version)

        native = self._check_native()
        scraped_version, notes = self._scrape_listing(package.package_name, current)
        scraped = parse_version(scraped_version) if scraped_version else None

        if native is not None and native.update_available:
            # Native API confirms an update but carries no version string
            if scraped is not None and scraped != ZERO_VERSION:
                latest = scraped
            else:
                latest = bump_patch(current)
        elif scraped is not None and scraped > current:
            latest = scraped
        else:
            latest = current

        return UpdateInfo(
            current_version=current,
            latest_version=latest,
            release_notes=notes,
            platform_metadata=native,
        )

    def _check_native(self) -> NativeUpdateInfo | None:
        if self.native_client is None:
            return None
        try:
            return self.native_client.check_for_update()
        except Exception as e:
            # Side-loaded and debug builds are not known to the store
            logger.debug("Native update check unavailable: %s", e)
            return None

    def _scrape_listing(self, package_name: str,
                        current: Version) -> tuple[str | None, str | None]:
        url = PLAY_LISTING_URL.format(package=quote(package_name, safe='.'))
        try:
            status, page = http_get(
                url,
                headers={'User-Agent': AppBranding.mobile_user_agent()},
                timeout=self.timeout,
            )
            if status != 200:
                logger.warning("Play listing %s returned HTTP %d", url, status)
                return None, None
            return scrape_version(page, current), scrape_release_notes(page)
        except Exception as e:
            logger.warning("Play listing scrape failed: %s", e)
            return None, None


class AppStoreSource(UpdateSource):
    """iOS: reads version, listing URL and notes from the iTunes lookup API."""

    name = "app_store"

    def __init__(self, package_info: PackageInfoProvider, app_id: str | None = None,
                 country: str | None = None, timeout: float | None = None):
        super().__init__(package_info)
        self.app_id = app_id
        self.country = country
        self.timeout = timeout

    def lookup_url(self, bundle_id: str) -> str:
        params = {'id': self.app_id} if self.app_id else {'bundleId': bundle_id}
        if self.country:
            params['country'] = self.country
        return f"{ITUNES_LOOKUP_URL}?{urlencode(params)}"

    def _fetch(self) -> UpdateInfo | None:
        package = self._resolve_package()
        current = parse_version(package.version)

        url = self.lookup_url(package.package_name)
        status, body = http_get(url, timeout=self.timeout)
        if status != 200:
            logger.warning("App Store lookup %s returned HTTP %d", url, status)
            return None

        data = json.loads(body)
        results = data.get('results') or []
        if not data.get('resultCount') or not results:
            logger.info("App Store has no listing for %s", package.package_name)
            return None

        result = results[0]
        notes = result.get('releaseNotes')
        return UpdateInfo(
            current_version=current,
            latest_version=parse_version(result['version']),
            update_url=result.get('trackViewUrl'),
            release_notes=notes if isinstance(notes, str) else None,
        )


def store_source_for_platform(platform: str, package_info: PackageInfoProvider,
                              native_client: NativeUpdateClient | None = None,
                              app_id: str | None = None, country: str | None = None,
                              timeout: float | None = None) -> UpdateSource:
    """Pick the store source for *platform*. Desktop has no public store."""
    if platform == HostPlatform.ANDROID:
        return PlayStoreSource(package_info, native_client=native_client, timeout=timeout)
    if platform == HostPlatform.IOS:
        return AppStoreSource(package_info, app_id=app_id, country=country, timeout=timeout)
    raise ValueError(f"No app store source for platform '{platform}'; use a JSON source")
