"""
YAML configuration loading for distilqa.

Model configurations may be given as YAML instead of ``config.json``; the
mapping is handed to ``DistilBertConfig.from_dict`` by the model factory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass
class Config:
    data: Dict[str, Any]


def load_yaml(path: str | Path) -> Config:
    """Read a YAML file whose root is a mapping."""

    with Path(path).open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle)
    if not isinstance(content, dict):
        raise ValueError(
            f"Configuration '{path}' must be a mapping of settings, "
            f"got {type(content).__name__}"
        )
    return Config(data=content)
