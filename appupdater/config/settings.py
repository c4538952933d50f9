"""Updater configuration, stored as a JSON file in the data directory."""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from datetime import timedelta

from appupdater.core.actions import native_flow_from_flags
from appupdater.core.models import NativeFlow, UpdatePolicy

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(
    os.environ.get('LOCALAPPDATA', os.path.expanduser('~')), 'AppUpdater'
)


@dataclass
class UpdaterSettings:
    """Options for scheduling, sources and native flows."""
    # Paths
    data_dir: str = ""

    # Scheduling
    check_interval_hours: float = 0     # 0 = check every time
    snooze_hours: float = 24

    # Debugging
    force_show: bool = False
    force_show_only_in_debug: bool = True
    display_once: bool = False

    # Sources
    json_url: str = ""                  # set = self-hosted JSON instead of the store
    json_headers: dict[str, str] = field(default_factory=dict)
    ios_app_id: str = ""
    country: str = ""
    request_timeout: float = 0          # seconds, 0 = no timeout

    # Native Android flows (mutually exclusive)
    use_native_immediate_update: bool = False
    use_native_flexible_update: bool = False

    def __post_init__(self):
        if not self.data_dir:
            self.data_dir = DEFAULT_DATA_DIR

    @property
    def state_path(self) -> str:
        return os.path.join(self.data_dir, 'update_state.json')

    @property
    def timeout(self) -> float | None:
        return self.request_timeout if self.request_timeout > 0 else None

    def to_policy(self) -> UpdatePolicy:
        interval = (timedelta(hours=self.check_interval_hours)
                    if self.check_interval_hours > 0 else None)
        return UpdatePolicy(
            check_interval=interval,
            snooze_duration=timedelta(hours=self.snooze_hours),
            force_show=self.force_show,
            force_show_only_in_debug=self.force_show_only_in_debug,
            display_once=self.display_once,
        )

    def native_flow(self) -> NativeFlow:
        """Raises ValueError when both native flows are enabled."""
        return native_flow_from_flags(self.use_native_immediate_update,
                                      self.use_native_flexible_update)

    @staticmethod
    def load(path: str | None = None) -> 'UpdaterSettings':
        """Read updater settings; a missing or unreadable file yields defaults."""
        if path is None:
            path = os.path.join(DEFAULT_DATA_DIR, 'settings.json')

        if not os.path.isfile(path):
            logger.info("No settings file, using defaults")
            return UpdaterSettings()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            settings = UpdaterSettings(**{k: v for k, v in data.items()
                                          if k in UpdaterSettings.__dataclass_fields__})
            logger.info("Loaded settings from %s", path)
            return settings
        except Exception as e:
            logger.warning("Failed to load settings: %s", e)
            return UpdaterSettings()

    def save(self, path: str | None = None):
        """Write settings as JSON, by default to ``data_dir/settings.json``."""
        if path is None:
            path = os.path.join(self.data_dir, 'settings.json')

        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self), f, indent=2)
            logger.info("Saved settings to %s", path)
        except Exception as e:
            logger.warning("Failed to save settings: %s", e)

    def ensure_dirs(self):
        """Create ``data_dir``, which holds the state file and logs."""
        os.makedirs(self.data_dir, exist_ok=True)
