"""Best-effort version and release-notes extraction from a store listing page.

The listing HTML is undocumented and changes without notice, so several
independent patterns are tried in a fixed priority order until one yields a
plausible version string.
"""

import html as html_lib
import logging
import re

from semver import Version

from appupdater.core.version import is_newer, parse_version

logger = logging.getLogger(__name__)

NOTES_LIMIT = 500

# "140":[[["1.0.3"]]] or "3":["1.0.3"]: field indices inside the listing data blobs
_KEYED_ARRAY = re.compile(
    r"""["'](?:10|[1-9]|14[0-9]|150)["']:\s*\[{1,5}["']([^"'<]+)["']""",
    re.IGNORECASE,
)
_VERSION_SHAPE = re.compile(r"^\d+(?:\.\d+)+")
_DEEP_BRACKET = re.compile(r"""\[\s*\[\s*\[\s*["'](\d+\.\d+\.\d+)["']\s*\]\s*\]\s*\]""")
_BRACKET_COMMA = re.compile(r"""\]\]\],\s*["'](\d+\.\d+\.\d+)["']""")
_METADATA_TAGS = (
    re.compile(r"""["']softwareVersion["']\s*:\s*["']([^"'<]+)["']""", re.IGNORECASE),
    re.compile(r"""itemprop=["']softwareVersion["'][^>]*?content=["']([^"'<]+)["']""",
               re.IGNORECASE),
)
_VERSION_LABEL = re.compile(r"Version.{0,200}?(?<![\d.])(\d+\.\d+\.\d+)",
                            re.IGNORECASE | re.DOTALL)
# Standalone triples only: not part of a longer dotted number such as an IP
_ANY_TRIPLE = re.compile(r"(?<![\d.])\d+\.\d+\.\d+(?!\.?\d)")

_WHATS_NEW = re.compile(
    r"""What(?:'|&#39;|&#x27;|’)s new.*?itemprop=["']description["'][^>]*>(.*?)</div>""",
    re.IGNORECASE | re.DOTALL,
)
_DESCRIPTION = re.compile(r"""itemprop=["']description["'][^>]*>(.*?)</div>""",
                          re.IGNORECASE | re.DOTALL)
_BR = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")


# ── Version strategies ───────────────────────────────────────────────

def _keyed_array(page: str, current: Version) -> str | None:
    for match in _KEYED_ARRAY.finditer(page):
        raw = match.group(1).strip()
        if _VERSION_SHAPE.match(raw):
            return raw
    return None


def _deep_bracket(page: str, current: Version) -> str | None:
    match = _DEEP_BRACKET.search(page)
    return match.group(1) if match else None


def _bracket_comma(page: str, current: Version) -> str | None:
    match = _BRACKET_COMMA.search(page)
    return match.group(1) if match else None


def _metadata_tag(page: str, current: Version) -> str | None:
    for pattern in _METADATA_TAGS:
        match = pattern.search(page)
        if match:
            return match.group(1).strip()
    return None


def _version_label(page: str, current: Version) -> str | None:
    match = _VERSION_LABEL.search(page)
    return match.group(1) if match else None


def _closest_upgrade(page: str, current: Version) -> str | None:
    """Smallest version on the page that is strictly newer than *current*.

    Higher numbers elsewhere on the page usually belong to unrelated
    listings, so the closest upgrade wins.
    """
    best: Version | None = None
    for raw in _ANY_TRIPLE.findall(page):
        candidate = parse_version(raw)
        if is_newer(current, candidate) and (best is None or candidate < best):
            best = candidate
    return str(best) if best is not None else None


STRATEGIES = (
    ('keyed_array', _keyed_array),
    ('deep_bracket', _deep_bracket),
    ('bracket_comma', _bracket_comma),
    ('metadata_tag', _metadata_tag),
    ('version_label', _version_label),
    ('closest_upgrade', _closest_upgrade),
)


def scrape_version(page: str, current: Version) -> str | None:
    """Return the first version-shaped string any strategy finds, or None.

    A strategy that matches a non-version value (Play lists "Varies with
    device" for multi-APK apps) is passed over and the next one is tried.
    """
    for name, strategy in STRATEGIES:
        found = strategy(page, current)
        if not found:
            continue
        if not _VERSION_SHAPE.match(found):
            logger.debug("Ignoring %r from %s, not a version", found, name)
            continue
        logger.debug("Store version %s found by %s", found, name)
        return found
    logger.debug("No store version found in %d bytes of HTML", len(page))
    return None


# ── Release notes ────────────────────────────────────────────────────

def _clean_block(block: str) -> str:
    text = _BR.sub('\n', block)
    text = _TAG.sub('', text)
    return html_lib.unescape(text).strip()


def scrape_release_notes(page: str, limit: int = NOTES_LIMIT) -> str | None:
    """Extract "What's new" text, falling back to the listing description."""
    match = _WHATS_NEW.search(page) or _DESCRIPTION.search(page)
    if not match:
        return None
    notes = _clean_block(match.group(1))
    if not notes:
        return None
    if len(notes) > limit:
        notes = notes[:limit] + "..."
    return notes
