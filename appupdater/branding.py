"""Centralized identity constants — single source of truth for version and User-Agents."""


class AppBranding:
    """Library identity constants."""

    APP_NAME = "AppUpdater"
    VERSION = "1.0.0"

    # Play Store serves a simpler listing layout to mobile browsers
    MOBILE_USER_AGENT = (
        "Mozilla/5.0 (Linux; Android 10; K) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/114.0.0.0 Mobile Safari/537.36"
    )

    @classmethod
    def user_agent(cls) -> str:
        return f"{cls.APP_NAME}/{cls.VERSION}"

    @classmethod
    def mobile_user_agent(cls) -> str:
        return cls.MOBILE_USER_AGENT
