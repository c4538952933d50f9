"""Tolerant semantic-version parsing on top of the semver package."""

import logging
import re

from semver import Version

logger = logging.getLogger(__name__)

ZERO_VERSION = Version(0, 0, 0)

_MAJOR_MINOR = re.compile(r"^\d+\.\d+$")


def parse_version(raw: str) -> Version:
    """Parse a loosely formatted version string. Never raises.

    Strips surrounding whitespace and one leading ``v``/``V``, pads a bare
    ``major.minor`` to ``major.minor.0`` and hands the rest to
    :meth:`semver.Version.parse`. Anything that is not a semantic version
    (``"2"``, ``"1.0.0.5"``, ``"Varies with device"``) becomes ``0.0.0``,
    which never compares as an available update.
    """
    try:
        clean = raw.strip()
        if clean[:1] in ('v', 'V'):
            clean = clean[1:]
        if _MAJOR_MINOR.match(clean):
            clean += '.0'
        return Version.parse(clean)
    except (ValueError, AttributeError, TypeError) as e:
        logger.debug("Unparseable version %r: %s", raw, e)
        return ZERO_VERSION


def is_newer(current: Version, candidate: Version) -> bool:
    """Return True if *candidate* is strictly greater than *current*."""
    return candidate > current


def bump_patch(version: Version) -> Version:
    """Return ``major.minor.(patch + 1)`` for *version*, dropping any pre-release."""
    return Version(version.major, version.minor, version.patch + 1)
