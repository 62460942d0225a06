from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc

DEFAULT_FILENAME = "settings.ini"
CONFIG_DIR_ENV = "PYDATAFILE_CONFIG_DIR"

# ---------------------------------------------------------------------------
# User directories
# ---------------------------------------------------------------------------


def user_config_dir(app_name: str = "pydatafile") -> Path:
    """Return the per-user configuration directory for *app_name*.

    ``PYDATAFILE_CONFIG_DIR`` replaces the platform root when set; the
    application name is still appended.
    """
    env = os.getenv(CONFIG_DIR_ENV)
    if env:
        return (Path(env).expanduser() / app_name).resolve()
    return Path(_uc(appname=app_name)).resolve()


def settings_file(app_name: str, filename: str = DEFAULT_FILENAME) -> Path:
    if not app_name or "/" in app_name or "\\" in app_name or ".." in app_name:
        raise ValueError(f"invalid application name: {app_name!r}")
    return user_config_dir(app_name) / filename
