# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import json

from pathlib import Path
from typing import Any


def save_json(path: str | Path, data: Any) -> None:
    """
    Serialize an artifact as pretty-printed JSON and write it to a file.

    The JSON is written with:
    - `indent=2` for readability
    - `sort_keys=True` so repeated runs produce identical artifacts
    - a trailing newline

    Args:
        path: Destination file path (string or `Path`).
        data: Any JSON-serializable value, usually an artifact dict holding
            hex strings such as `msg_hash` or `stark_key`.

    Returns:
        None.

    Side effects:
        - Creates `path.parent` directories if they do not exist.
        - Overwrites the file if it already exists.

    Raises:
        TypeError: If `data` contains non-JSON-serializable objects.
        OSError: If the file cannot be created or written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")


def load_json(path: str | Path) -> Any:
    """
    Load and parse a JSON file.

    Args:
        path: Path to the JSON file (string or `Path`).

    Returns:
        The parsed JSON value, typed as `Any`.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_request(path: str | Path, required: tuple[str, ...] = ()) -> dict:
    """
    Load a JSON request object and check that the required keys are present.

    Requests are the inputs of the file driven commands, for example
    `{"private_key": "0x...", "msg_hash": "0x..."}` for signing.

    Args:
        path: Path to the request file.
        required: Keys that must be present at the top level.

    Returns:
        dict: The request object.

    Raises:
        ValueError: If the file does not hold an object or a key is missing.
    """
    data = load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    missing = [key for key in required if key not in data]
    if missing:
        raise ValueError(f"{path} is missing {', '.join(missing)}")
    return data
