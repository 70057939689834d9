import json
from pathlib import Path


def load_json(filepath: Path | str) -> list | dict:
    with open(filepath, "r") as file:
        return json.load(file)
