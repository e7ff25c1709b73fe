"""Configuration management for tileplot.

Settings are loaded with Dynaconf from multiple locations in order of
increasing priority:

1. Global settings (/etc/tileplot/)
2. User settings (~/.config/tileplot/)
3. Current directory settings (./)
4. Environment variable specified file (TILEPLOT_SETTINGS_FILE_FOR_DYNACONF)

Values can also be set with ``TILEPLOT_`` prefixed environment variables,
e.g. ``TILEPLOT_TIMEOUT=10``.

The fetcher never reads these settings on its own; they are turned into
an explicit :class:`FetcherConfig` which is handed to ``TileFetcher``.

Attributes
----------
USER_DIR : pathlib.Path
    Path to user configuration directory.
GLOB_DIR : pathlib.Path
    Path to global configuration directory.
CURR_DIR : pathlib.Path
    Path to current working directory.
settings : Dynaconf
    The Dynaconf settings object with loaded configuration.
"""
import math
import os
import pathlib
from dataclasses import dataclass
from typing import Optional

from dynaconf import Dynaconf

from .exceptions import ValidationError

DEFAULT_BASE_URL = "http://tile.openstreetmap.org/cgi-bin/export?"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "tileplot/0.1 (+https://pypi.org/project/tileplot/)"

USER_DIR = pathlib.Path("~/.config/tileplot").expanduser()
GLOB_DIR = pathlib.Path("/etc/tileplot/")
CURR_DIR = pathlib.Path("./").absolute()
settings_files = [
    GLOB_DIR / "settings.toml",
    GLOB_DIR / ".secrets.toml",
    USER_DIR / "settings.toml",
    USER_DIR / ".secrets.toml",
    CURR_DIR / "settings.toml",
    CURR_DIR / ".secrets.toml"
    ]
extra_file = os.getenv("TILEPLOT_SETTINGS_FILE_FOR_DYNACONF")
if extra_file:
    settings_files.append(pathlib.Path(extra_file).absolute())

settings = Dynaconf(
    merge_enabled=True,
    envvar_prefix="TILEPLOT",
    settings_files=settings_files,
    environments=True,
    load_dotenv=True,
)


def change_env(new_env):
    """Change the active Dynaconf environment.

    Parameters
    ----------
    new_env : str
        The environment name to switch to (e.g., 'development', 'production').
    """
    settings.setenv(new_env)
    settings.reload()


@dataclass(frozen=True)
class FetcherConfig:
    """Provider settings for a ``TileFetcher``.

    Parameters
    ----------
    base_url : str
        Export endpoint, including the trailing ``?``.
    timeout : float
        Seconds to wait for the server before giving up.
    user_agent : str
        Sent with every request; OSM rejects anonymous clients.
    api_key : str, optional
        Appended as ``key=`` for providers that need registration.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    api_key: Optional[str] = None

    def __post_init__(self):
        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError):
            timeout = math.nan
        if not timeout > 0:
            raise ValidationError(
                f"timeout must be a positive number, got {self.timeout!r}", "timeout")
        object.__setattr__(self, "timeout", timeout)

    @classmethod
    def from_settings(cls, conf=None) -> "FetcherConfig":
        """Snapshot the relevant Dynaconf values into a config.

        Parameters
        ----------
        conf : Dynaconf or dict, optional
            Settings to read, by default the module ``settings``.
        """
        conf = settings if conf is None else conf
        return cls(
            base_url=conf.get("base_url", DEFAULT_BASE_URL),
            timeout=conf.get("timeout", DEFAULT_TIMEOUT),
            user_agent=conf.get("user_agent", DEFAULT_USER_AGENT),
            api_key=conf.get("api_key", None) or None,
        )
