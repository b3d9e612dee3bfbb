"""YAML file helpers for configs, traces and replay summaries.

Provides:
    - load_yaml(): safe YAML parsing with path-bearing errors
    - atomic_yaml_dump(): tmp file → fsync → rename, so a reader never sees
      a half-written summary
    - ensure_dir(): mkdir -p returning a Path

All paths use pathlib.Path.

Usage:
    from bitstroke.utils import fs
    data = fs.load_yaml("configs/stroke_engine.v1.yaml")
    fs.atomic_yaml_dump(summary, "outputs/replay/summary.yaml")
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory (and parents) if missing, return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to path via a sibling temporary file.

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Payload
    tmp_suffix : str
        Suffix of the temporary sibling, default ".tmp"

    Raises
    ------
    RuntimeError
        If writing or renaming fails; the temporary file is removed first
    """
    path = Path(path)
    ensure_dir(path.parent)
    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def atomic_yaml_dump(obj: Any, path: Union[str, Path]) -> None:
    """Serialize obj with yaml.safe_dump (insertion order kept) and write atomically."""
    text = yaml.safe_dump(
        obj,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True
    )
    atomic_write_bytes(path, text.encode('utf-8'))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Parse a YAML file with safe_load.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed content (None for an empty file)

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    yaml.YAMLError
        If parsing fails; the message names the file
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
