"""Factory helpers to assemble the question-answering model from saved artifacts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

import torch
import yaml

from ..errors import ConfigError, LoadError
from ..utils.config import load_yaml
from ..utils.io import read_state_dict
from ..utils.logging import get_logger
from .config import DistilBertConfig
from .qa_model import DistilBertForQuestionAnswering

logger = get_logger(__name__)

# Buffers that some exports persist but this model derives at construction
_DERIVED_SUFFIXES = ("position_ids",)


def load_model_config(path: str | Path) -> DistilBertConfig:
    """Read a ``config.json`` (or YAML) file into a :class:`DistilBertConfig`."""

    path = Path(path)
    if not path.is_file():
        raise LoadError("Model configuration not found", resource=path)

    try:
        if path.suffix in (".yaml", ".yml"):
            data = load_yaml(path).data
        else:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise LoadError(f"Model configuration is malformed: {exc}", resource=path) from exc
    except ValueError as exc:
        raise LoadError(str(exc), resource=path) from exc

    if not isinstance(data, dict):
        raise LoadError("Model configuration must be a mapping", resource=path)

    try:
        return DistilBertConfig.from_dict(data)
    except ConfigError as exc:
        raise LoadError(f"Model configuration is invalid: {exc}", resource=path) from exc


def build_qa_model(config: DistilBertConfig) -> DistilBertForQuestionAnswering:
    return DistilBertForQuestionAnswering(config)


def _select_state(
    model: torch.nn.Module, state: Dict[str, torch.Tensor], source: Path
) -> Dict[str, torch.Tensor]:
    """Keep the checkpoint tensors the model owns, checking names and shapes."""

    expected = model.state_dict()
    selected: Dict[str, torch.Tensor] = {}
    ignored = []

    for key, tensor in state.items():
        if key not in expected:
            ignored.append(key)
            continue
        if tuple(tensor.shape) != tuple(expected[key].shape):
            raise LoadError(
                f"Shape mismatch for '{key}': checkpoint {tuple(tensor.shape)}, "
                f"configuration expects {tuple(expected[key].shape)}",
                resource=source,
            )
        selected[key] = tensor

    missing = sorted(set(expected) - set(selected))
    if missing:
        preview = ", ".join(missing[:5]) + (" ..." if len(missing) > 5 else "")
        raise LoadError(f"Checkpoint is missing {len(missing)} tensors: {preview}", resource=source)

    # Sinusoidal position tables are derived, so a stored copy is expected and dropped
    unexpected = [
        k for k in ignored
        if not k.endswith(_DERIVED_SUFFIXES) and not k.endswith("position_embeddings.weight")
    ]
    if unexpected:
        logger.warning(
            "Ignoring %d unexpected checkpoint tensors: %s", len(unexpected), unexpected[:5]
        )
    return selected


def load_qa_weights(model: DistilBertForQuestionAnswering, path: str | Path) -> None:
    """Load a ``torch.save``d state dict into ``model`` with exact shape agreement."""

    source = Path(path)
    state = read_state_dict(source)
    model.load_state_dict(_select_state(model, state, source))
    logger.info(
        "Loaded %d parameters from %s",
        sum(p.numel() for p in model.parameters()),
        source,
    )
