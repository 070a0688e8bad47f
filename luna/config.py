from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

# Resolve installation dir (luna package directory)
_LUNA_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE = _LUNA_DIR / 'prelude' / 'prelude.scm'
DEFAULT_RECURSION_LIMIT = 20000


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()).expanduser() for p in raw.split(sep) if p.strip()]


def get_data_dir() -> Path:
    """Directory holding REPL history; $LUNA_DATA_DIR, else the XDG data home."""
    xdg = os.environ.get('XDG_DATA_HOME')
    base = Path(xdg) if xdg else Path.home() / '.local' / 'share'
    return paths_from_env('LUNA_DATA_DIR', [base / 'luna'])[0]


def get_history_file() -> Path:
    return get_data_dir() / 'history.txt'


def get_prelude_paths() -> List[Path]:
    """Scheme files loaded into every Interpreter created with prelude='auto'.

    LUNA_PRELUDE_PATH may list several files separated like PATH; an empty
    value falls back to the prelude shipped with the package.
    """
    return paths_from_env('LUNA_PRELUDE_PATH', [_DEFAULT_PRELUDE])


def get_recursion_limit() -> int:
    raw = os.environ.get('LUNA_RECURSION_LIMIT')
    if not raw:
        return DEFAULT_RECURSION_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        raise ValueError(f"LUNA_RECURSION_LIMIT must be an integer, got {raw!r}") from None
    if limit < 100:
        raise ValueError(f"LUNA_RECURSION_LIMIT must be at least 100, got {limit}")
    return limit

