"""AppUpdater — command-line entry point."""

import argparse
import functools
import logging
import os
import sys

from appupdater.branding import AppBranding
from appupdater.config.settings import UpdaterSettings
from appupdater.core.state import JsonCheckStateStore, utc_now
from appupdater.host.detector import HostPlatform, PackageInfo
from appupdater.updater import create_updater


def setup_logging(data_dir: str, verbose: bool = False):
    """Configure logging to file and console."""
    log_dir = os.path.join(data_dir, 'logs')
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'appupdater.log')

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(),
        ],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='app-updater',
        description="Decide whether an app should prompt its user to update.",
    )
    parser.add_argument('--version', action='version',
                        version=f"%(prog)s {AppBranding.VERSION}")
    parser.add_argument('--settings', help="Path to settings.json")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")

    sub = parser.add_subparsers(dest='command', required=True)

    check = sub.add_parser('check', help="Run one update decision")
    check.add_argument('--json-url', help="Self-hosted JSON endpoint (overrides settings)")
    check.add_argument('--header', action='append', default=[], metavar='NAME:VALUE',
                       help="Extra request header for the JSON endpoint (repeatable)")
    who = check.add_mutually_exclusive_group(required=True)
    who.add_argument('--current-version', help="Installed version of the app")
    who.add_argument('--distribution', help="Read the installed version from this Python distribution")
    check.add_argument('--package-name', default="", help="Store package / bundle identifier")
    check.add_argument('--platform', choices=HostPlatform.ALL, help="Override platform detection")
    check.add_argument('--force', action='store_true', help="Ignore the check interval")
    check.add_argument('--open', action='store_true',
                       help="Open the update right away when one is presented")

    sub.add_parser('snooze', help="Record that the user chose 'Later'")
    return parser


def parse_headers(values: list[str]) -> dict[str, str]:
    headers = {}
    for value in values:
        name, sep, content = value.partition(':')
        if not sep or not name.strip():
            raise ValueError(f"Invalid header '{value}', expected NAME:VALUE")
        headers[name.strip()] = content.strip()
    return headers


def _package_info(args) -> PackageInfo | functools.partial:
    if args.distribution:
        # Resolved on every fetch so lookup errors surface as no-data
        return functools.partial(PackageInfo.from_distribution, args.distribution,
                                 args.package_name or None)
    return PackageInfo(
        app_name=args.package_name or AppBranding.APP_NAME,
        package_name=args.package_name,
        version=args.current_version,
    )


def run_check(args, settings: UpdaterSettings) -> int:
    if args.json_url:
        settings.json_url = args.json_url
    if args.header:
        settings.json_headers.update(parse_headers(args.header))

    engine = create_updater(settings, _package_info(args), platform=args.platform,
                            on_error=lambda message: print(message, file=sys.stderr))
    outcome = engine.decide(force=args.force)
    print(outcome.describe())

    if outcome.should_present:
        info = outcome.info
        if info.release_notes:
            print(info.release_notes)
        if info.update_url:
            print(f"Update URL: {info.update_url}")
        if args.open:
            engine.perform_update(info)
        else:
            engine.mark_closed()

    return 0


def run_snooze(settings: UpdaterSettings) -> int:
    JsonCheckStateStore(settings.state_path).mark_dismissed(utc_now())
    print(f"Snoozed for {settings.snooze_hours:g} hours")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = UpdaterSettings.load(args.settings)
    settings.ensure_dirs()
    setup_logging(settings.data_dir, args.verbose)
    logger = logging.getLogger(__name__)
    logger.debug("%s %s starting", AppBranding.APP_NAME, AppBranding.VERSION)

    try:
        if args.command == 'check':
            return run_check(args, settings)
        return run_snooze(settings)
    except ValueError as e:
        parser.error(str(e))
        return 2


if __name__ == '__main__':
    sys.exit(main())
