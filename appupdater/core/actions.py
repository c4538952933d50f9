"""Update action dispatch — native in-app flow with a URL-launch fallback.

The native flow is only available on some platforms and build
configurations, so any failure there is reported and execution falls
through to the store intent, then to ``UpdateInfo.update_url``.
"""

import logging
import webbrowser
from collections.abc import Callable
from urllib.parse import urlparse

from appupdater.core.models import NativeFlow, NativeUpdateInfo, UpdateInfo

logger = logging.getLogger(__name__)

PLAY_STORE_INTENT = "market://details?id={package}"


class NativeUpdateClient:
    """Platform in-app-update API. Hosts supply a concrete implementation."""

    def check_for_update(self) -> NativeUpdateInfo:
        raise NotImplementedError

    def perform_immediate_update(self):
        raise NotImplementedError

    def start_flexible_update(self):
        raise NotImplementedError

    def complete_flexible_update(self):
        raise NotImplementedError


class UrlLauncher:
    """Opens URLs on behalf of the updater."""

    def can_launch(self, url: str) -> bool:
        raise NotImplementedError

    def launch(self, url: str, external: bool = False) -> bool:
        raise NotImplementedError


class BrowserLauncher(UrlLauncher):
    """Default launcher backed by :mod:`webbrowser`; handles web URLs only."""

    SCHEMES = ('http', 'https')

    def can_launch(self, url: str) -> bool:
        return urlparse(url).scheme.lower() in self.SCHEMES

    def launch(self, url: str, external: bool = False) -> bool:
        # new=2 asks for a new tab/window instead of reusing one
        return webbrowser.open(url, new=2 if external else 0)


def native_flow_from_flags(immediate: bool, flexible: bool) -> NativeFlow:
    """Map the two native-flow switches to a single flow. They are exclusive."""
    if immediate and flexible:
        raise ValueError("Immediate and flexible native updates are mutually exclusive")
    if immediate:
        return NativeFlow.IMMEDIATE
    if flexible:
        return NativeFlow.FLEXIBLE
    return NativeFlow.NONE


class UpdateActionExecutor:
    """Carries out the update once the user accepts it."""

    def __init__(self, launcher: UrlLauncher | None = None,
                 native_client: NativeUpdateClient | None = None,
                 native_flow: NativeFlow = NativeFlow.NONE,
                 store_intent: str | None = None,
                 on_error: Callable[[str], None] | None = None):
        self.launcher = launcher or BrowserLauncher()
        self.native_client = native_client
        self.native_flow = native_flow
        self.store_intent = store_intent   # e.g. market://details?id=<package>
        self.on_error = on_error

    @classmethod
    def for_play_store(cls, package_name: str, **kwargs) -> 'UpdateActionExecutor':
        intent = PLAY_STORE_INTENT.format(package=package_name) if package_name else None
        return cls(store_intent=intent, **kwargs)

    def perform_update(self, info: UpdateInfo,
                       on_accepted: Callable[[], None] | None = None) -> bool:
        """Run the native flow or open the store. Returns True if anything was started."""
        if self._try_native(info, on_accepted):
            return True

        if on_accepted:
            on_accepted()

        if self.store_intent and self.launcher.can_launch(self.store_intent):
            logger.info("Opening store listing: %s", self.store_intent)
            return bool(self.launcher.launch(self.store_intent))

        if info.update_url:
            logger.info("Opening update URL: %s", info.update_url)
            return bool(self.launcher.launch(info.update_url, external=True))

        logger.warning("No way to open an update for %s", info.latest_version)
        return False

    def _try_native(self, info: UpdateInfo,
                    on_accepted: Callable[[], None] | None) -> bool:
        if (self.native_client is None
                or self.native_flow == NativeFlow.NONE
                or not isinstance(info.platform_metadata, NativeUpdateInfo)):
            return False

        try:
            if self.native_flow == NativeFlow.IMMEDIATE:
                self.native_client.perform_immediate_update()
            else:
                self.native_client.start_flexible_update()
                self.native_client.complete_flexible_update()
        except Exception as e:
            label = self.native_flow.value.capitalize()
            self._report(f"Native {label} update failed: {e}")
            return False

        logger.info("Native %s update completed", self.native_flow.value)
        if on_accepted:
            on_accepted()
        return True

    def _report(self, message: str):
        logger.warning(message)
        if self.on_error:
            self.on_error(message)
