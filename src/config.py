"""Runtime settings for the to-do app.

Values come from environment variables, then an optional project .env file,
then defaults (priority: real env var > .env override > default).
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / '.env'
DEFAULT_STORAGE_PATH = PROJECT_ROOT / 'data' / 'storage.json'
DEFAULT_STORAGE_KEY = 'todos'
DEFAULT_LOG_LEVEL = 'WARNING'

PALETTE_KEYS = ('TODO_PRIMARY', 'TODO_HIGH', 'TODO_MEDIUM', 'TODO_LOW', 'TODO_DONE')
KNOWN_KEYS = frozenset(PALETTE_KEYS + (
    'TODO_STORAGE_PATH', 'TODO_STORAGE_KEY', 'TODO_SEED', 'TODO_ALT_SCREEN', 'TODO_LOG_LEVEL',
))


def truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def is_hex_color(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)


def read_env_file(path: Path = ENV_FILE) -> Dict[str, str]:
    """Parse KEY=VALUE lines of a .env file, keeping only known keys.

    Missing or unreadable files yield an empty mapping.
    """
    if not path.exists():
        return {}
    try:
        lines = path.read_text(encoding='utf-8').splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable env file %s: %s", path, exc)
        return {}
    values: Dict[str, str] = {}
    for line in lines:
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k not in KNOWN_KEYS:
            continue
        if k in PALETTE_KEYS:
            if not is_hex_color(v):
                continue
            v = '#' + v.lstrip('#')
        values[k] = v
    return values


@dataclass(frozen=True)
class Settings:
    storage_path: Path = DEFAULT_STORAGE_PATH
    storage_key: str = DEFAULT_STORAGE_KEY
    seed_on_first_run: bool = True
    alt_screen: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    palette: Mapping[str, str] = field(default_factory=dict)


def get_settings(environ: Optional[Mapping[str, str]] = None,
                 env_file: Optional[Path] = ENV_FILE) -> Settings:
    """Resolve Settings from the environment and the optional .env file.

    Args:
        environ: Mapping to read instead of os.environ (tests).
        env_file: .env path, or None to skip it.
    """
    env = os.environ if environ is None else environ
    file_values = read_env_file(env_file) if env_file is not None else {}

    def lookup(key: str) -> Optional[str]:
        value = env.get(key)
        if value:
            return value
        return file_values.get(key)

    palette: Dict[str, str] = {}
    for key in PALETTE_KEYS:
        value = lookup(key)
        if value and is_hex_color(value):
            palette[key] = '#' + value.lstrip('#')

    storage_path = lookup('TODO_STORAGE_PATH')
    return Settings(
        storage_path=Path(storage_path).expanduser() if storage_path else DEFAULT_STORAGE_PATH,
        storage_key=lookup('TODO_STORAGE_KEY') or DEFAULT_STORAGE_KEY,
        seed_on_first_run=truthy_env(lookup('TODO_SEED'), True),
        alt_screen=truthy_env(lookup('TODO_ALT_SCREEN'), True),
        log_level=(lookup('TODO_LOG_LEVEL') or DEFAULT_LOG_LEVEL).upper(),
        palette=palette,
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure root logging once; output goes to stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
