from pathlib import Path
from pydantic import BaseModel
from dotenv import load_dotenv
import os
from xlib_host import __version__
# Optionally load a config.env file so hosts embedding the loader can keep
# their library directory and log level out of the process environment.
cfg_override = os.getenv('XLIB_HOST_CONFIG_FILE')
candidates = []
if cfg_override:
    candidates.append(Path(cfg_override))
candidates.append(Path.cwd() / 'config.env')

for p in candidates:
    try:
        if p and p.exists():
            load_dotenv(str(p))
            break
    except OSError:
        continue

"""Central configuration.

Env vars:
  XLIB_HOST_LIBRARY_DIR     - directory scanned by ExternalLoader.autoload()
  XLIB_HOST_LOG_LEVEL       - root log level (DEBUG, INFO, WARNING, ERROR)
  XLIB_HOST_VERSION         - override the host version libraries are checked against
  XLIB_HOST_STRICT_AUTOLOAD - raise the first autoload failure instead of logging it
"""


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    if not value or not value.strip():
        return None
    return Path(value.strip())


class Settings(BaseModel):
    version: str = os.getenv('XLIB_HOST_VERSION', __version__)
    library_dir: Path | None = _env_path('XLIB_HOST_LIBRARY_DIR')
    # Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = os.getenv('XLIB_HOST_LOG_LEVEL', 'INFO')
    strict_autoload: bool = _env_flag('XLIB_HOST_STRICT_AUTOLOAD')


settings = Settings()
