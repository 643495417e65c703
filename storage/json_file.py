"""JSON file helpers shared by the stores: tolerant reads, atomic writes."""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from utils.logging_utils import get_logger

logger = get_logger("json_file")

PathLike = Union[str, Path]


def read_json(path: PathLike, label: str = "store") -> Optional[Any]:
    """Return parsed JSON, or None when the file is absent or unreadable.

    Read failures are logged and never raised; callers start from empty state.
    """
    if not os.path.exists(path):
        logger.debug(f"[{label}] No file at {path}, starting empty")
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"[{label}] Failed to load {path}: {e}")
        return None


def write_json_atomic(path: PathLike, data: Any, label: str = "store") -> bool:
    """Persist data via temp file swap. Returns False if the write failed."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    temp_path = f"{path}.tmp"
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(temp_path, path)
        logger.debug(f"[{label}] Saved to {path}")
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"[{label}] Save failed: {e}")
        if os.path.exists(temp_path):
            os.remove(temp_path)
        return False
