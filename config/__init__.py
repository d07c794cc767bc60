import os
from typing import Optional

_SETTINGS_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Dotted path of the settings module for ``env`` (defaults to ``$APP_ENV``).

    Anything unrecognized runs with development settings.
    """

    env = (env or os.getenv("APP_ENV", "development")).lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")
