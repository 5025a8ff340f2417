"""Runtime configuration for the local timezone."""
import logging
import os
from datetime import tzinfo
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, Optional

from dateutil import tz

logger = logging.getLogger(__name__)

LOCAL_TZ_ENV = "DATE_TASKS_LOCAL_TZ"

_ENV_LOADED = False
_ENV_LOCK = Lock()
_LOCAL_TZ: Optional[tzinfo] = None


def read_env_file(env_path: Path, keys: Iterable[str]) -> Dict[str, str]:
    """
    Read selected KEY=VALUE pairs from a .env style file.

    Args:
        env_path: File to read; a missing file yields no values
        keys: Names to keep, everything else is ignored

    Returns:
        dict of the wanted keys found in the file, quotes stripped
    """
    wanted = set(keys)
    values: Dict[str, str] = {}
    if not env_path.exists():
        return values

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("#") or "=" not in line:
            continue

        key, value = (part.strip() for part in line.split("=", 1))
        if key in wanted:
            values[key] = value.strip('"\'')

    return values


def _load_env(keys: Iterable[str]) -> None:
    """Export .env values for keys not already set in the environment."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        for key, value in read_env_file(Path(".env"), keys).items():
            os.environ.setdefault(key, value)

        _ENV_LOADED = True


def get_local_timezone() -> tzinfo:
    """
    Return the timezone used for local calendar fields.

    Returns:
        tzinfo resolved from DATE_TASKS_LOCAL_TZ, or the system local zone

    Behavior:
        - Reads .env once; real environment variables take precedence
        - Unknown zone names fall back to the system zone with a warning
        - Result is cached until reset_config_cache() is called
    """
    global _LOCAL_TZ

    if _LOCAL_TZ is not None:
        return _LOCAL_TZ

    _load_env([LOCAL_TZ_ENV])

    name = os.getenv(LOCAL_TZ_ENV, "").strip()
    zone = None
    if name:
        zone = tz.gettz(name)
        if zone is None:
            logger.warning("Unknown timezone %r in %s, using system local time", name, LOCAL_TZ_ENV)

    if zone is None:
        zone = tz.tzlocal()

    _LOCAL_TZ = zone
    return zone


def reset_config_cache() -> None:
    """Forget the cached timezone and .env state."""
    global _ENV_LOADED, _LOCAL_TZ

    with _ENV_LOCK:
        _ENV_LOADED = False
        _LOCAL_TZ = None
