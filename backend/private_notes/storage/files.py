import json
import os
from pathlib import Path
from typing import Any


def safe_user_dir(base_dir: Path, user_id: str) -> Path:
    # user ids become directory names; reject anything that could escape base_dir
    if not user_id or any(ch in user_id for ch in ["/", "\\", "\x00"]) or ".." in user_id:
        raise ValueError("Invalid user_id")
    return base_dir / "users" / user_id


def atomic_write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


def read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    return json.loads(path.read_text(encoding="utf-8"))
