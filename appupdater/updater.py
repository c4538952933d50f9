"""Assembles an UpdateDecisionEngine from settings and the host environment."""

import logging
from collections.abc import Callable

from appupdater.config.settings import UpdaterSettings
from appupdater.core.actions import NativeUpdateClient, UpdateActionExecutor, UrlLauncher
from appupdater.core.engine import UpdateDecisionEngine
from appupdater.core.models import UpdateInfo
from appupdater.core.state import CheckStateStore, JsonCheckStateStore
from appupdater.host.detector import HostPlatform, PlatformDetector
from appupdater.sources.base import PackageInfoProvider, UpdateSource
from appupdater.sources.json_source import JsonUpdateSource
from appupdater.sources.store_source import store_source_for_platform

logger = logging.getLogger(__name__)


def create_source(settings: UpdaterSettings, package_info: PackageInfoProvider,
                  platform: str,
                  native_client: NativeUpdateClient | None = None) -> UpdateSource:
    """JSON endpoint when configured, otherwise the platform's app store."""
    if settings.json_url:
        return JsonUpdateSource(settings.json_url, package_info,
                                headers=settings.json_headers, timeout=settings.timeout)
    return store_source_for_platform(
        platform, package_info,
        native_client=native_client,
        app_id=settings.ios_app_id or None,
        country=settings.country or None,
        timeout=settings.timeout,
    )


def create_updater(settings: UpdaterSettings, package_info: PackageInfoProvider,
                   platform: str | None = None,
                   native_client: NativeUpdateClient | None = None,
                   launcher: UrlLauncher | None = None,
                   store: CheckStateStore | None = None,
                   debug: bool | None = None,
                   on_error: Callable[[str], None] | None = None,
                   on_shown: Callable[[UpdateInfo], None] | None = None,
                   on_ignored: Callable[[], None] | None = None,
                   on_accepted: Callable[[], None] | None = None) -> UpdateDecisionEngine:
    """Build a ready-to-use engine.

    Raises ValueError for an unusable configuration: both native flows
    enabled, or no JSON URL on a platform without a public store.
    """
    platform = platform or PlatformDetector.get_platform()
    source = create_source(settings, package_info, platform, native_client)

    executor_kwargs = dict(
        launcher=launcher,
        native_client=native_client,
        native_flow=settings.native_flow(),
        on_error=on_error,
    )
    if platform == HostPlatform.ANDROID:
        try:
            package = package_info() if callable(package_info) else package_info
            package_name = package.package_name
        except Exception as e:
            logger.warning("Package metadata unavailable, no store intent: %s", e)
            package_name = ""
        executor = UpdateActionExecutor.for_play_store(package_name, **executor_kwargs)
    else:
        executor = UpdateActionExecutor(**executor_kwargs)

    logger.info("Updater ready: source=%s platform=%s", source.name, platform)
    return UpdateDecisionEngine(
        source,
        store or JsonCheckStateStore(settings.state_path),
        policy=settings.to_policy(),
        executor=executor,
        debug=debug,
        on_error=on_error,
        on_shown=on_shown,
        on_ignored=on_ignored,
        on_accepted=on_accepted,
    )
