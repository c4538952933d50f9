"""Host detection — platform, installed package metadata, debug runtime."""

import logging
import os
import sys
from dataclasses import dataclass
from importlib import metadata

logger = logging.getLogger(__name__)

PLATFORM_ENV = 'APP_UPDATER_PLATFORM'
DEBUG_ENV = 'APP_UPDATER_DEBUG'

_TRUTHY = ('1', 'true', 'yes', 'on')


class HostPlatform:
    ANDROID = "android"
    IOS = "ios"
    DESKTOP = "desktop"

    ALL = (ANDROID, IOS, DESKTOP)


class PlatformDetector:
    """Detects which store family the running app belongs to."""

    @staticmethod
    def get_platform() -> str:
        """Return 'android', 'ios', or 'desktop'."""
        override = os.environ.get(PLATFORM_ENV, '').strip().lower()
        if override:
            if override in HostPlatform.ALL:
                return override
            logger.warning("Ignoring unknown %s value: %s", PLATFORM_ENV, override)

        # CPython reports these on its official mobile builds
        if sys.platform == 'android' or hasattr(sys, 'getandroidapilevel'):
            return HostPlatform.ANDROID
        if sys.platform == 'ios':
            return HostPlatform.IOS
        return HostPlatform.DESKTOP


def is_debug_runtime() -> bool:
    """True in a development runtime (env override, else ``python -X dev``)."""
    override = os.environ.get(DEBUG_ENV)
    if override is not None:
        return override.strip().lower() in _TRUTHY
    return bool(sys.flags.dev_mode)


@dataclass(frozen=True)
class PackageInfo:
    """Identity and installed version of the app being updated."""

    app_name: str
    package_name: str      # Store identifier: Android package / iOS bundle id
    version: str

    @staticmethod
    def from_distribution(dist_name: str, package_name: str | None = None) -> 'PackageInfo':
        """Read the installed version from Python distribution metadata.

        Raises ``importlib.metadata.PackageNotFoundError`` if *dist_name* is
        not installed.
        """
        meta = metadata.metadata(dist_name)
        return PackageInfo(
            app_name=meta.get('Name') or dist_name,
            package_name=package_name or dist_name,
            version=meta.get('Version') or metadata.version(dist_name),
        )
