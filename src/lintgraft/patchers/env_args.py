"""Convert `.env` files into Flutter build arguments.

The build scripts pass environment values to `flutter run/build` either as
repeated ``--dart-define=KEY=VALUE`` flags or through a JSON file given to
``--dart-define-from-file``. Both are produced from the same parsed mapping.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from ..contracts import TargetLayout

logger = logging.getLogger(__name__)

_QUOTES = ('"', "'")


def _unquote(value: str) -> str:
    # Exactly one layer: '"a"' -> 'a', '"\'a\'"' -> "'a'".
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_env_lines(lines) -> dict[str, str]:
    args: dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        args[key] = _unquote(value.strip())
    return args


def to_build_args(env_file_path: str | Path) -> dict[str, str]:
    """Parse an env file into an ordered KEY -> VALUE mapping.

    Blank lines, ``#`` comments and lines without ``=`` are ignored. Later
    duplicates of a key win, keeping the position of its first occurrence.
    """
    path = Path(env_file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Env file not found: {path}")
    with open(path, "r", encoding="utf-8-sig") as f:
        return parse_env_lines(f)


def dart_define_args(args: dict[str, str]) -> list[str]:
    return [f"--dart-define={k}={v}" for k, v in args.items()]


def write_defines_file(args: dict[str, str], out_path: str | Path) -> Path:
    """Write ``args`` as the JSON object read by ``--dart-define-from-file``."""
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(args, indent=2, ensure_ascii=False), encoding="utf-8")
    return out


def defines_path(root: Path, env_name: str) -> Path:
    return Path(root) / TargetLayout.DART_DEFINES_DIR / f"{env_name}.json"


def sync_environment_defines(root: str | Path) -> dict[str, Path | None]:
    """Convert every known ``.<env>.env`` file under ``root``.

    Returns env name -> written JSON path, or None when the env file is
    missing (reported, not fatal).
    """
    root = Path(root)
    written: dict[str, Path | None] = {}
    for env_name, env_file in TargetLayout.ENV_FILES.items():
        src = root / env_file
        if not src.is_file():
            logger.warning("%s not found, skipping %s defines", env_file, env_name)
            written[env_name] = None
            continue
        written[env_name] = write_defines_file(to_build_args(src), defines_path(root, env_name))
    return written


__all__ = [
    "parse_env_lines",
    "to_build_args",
    "dart_define_args",
    "write_defines_file",
    "defines_path",
    "sync_environment_defines",
]
