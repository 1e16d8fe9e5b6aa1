"""JSON configuration file access."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from nxkit.core.errors import JsonFileError


def read_json_file(path: Union[str, Path]) -> Any:
    """Read and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        JsonFileError: If the file is not valid JSON.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise JsonFileError(f"Invalid JSON in {path}: {e}") from e


def file_exists(path: Union[str, Path]) -> bool:
    return Path(path).is_file()
