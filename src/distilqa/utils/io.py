"""
Checkpoint I/O utilities for distilqa.

Reads and writes model state dicts produced by ``torch.save``. Keys written by
``torch.compile`` wrappers are normalized on both paths.
"""

from __future__ import annotations

import pickle
from pathlib import Path
from typing import Dict

import torch

from ..errors import LoadError


def _strip_compile_prefix(state: Dict[str, torch.Tensor]) -> Dict[str, torch.Tensor]:
    return {k.replace("_orig_mod.", ""): v for k, v in state.items()}


def save_state(model: torch.nn.Module, path: str | Path) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    torch.save(_strip_compile_prefix(model.state_dict()), destination)


def read_state_dict(path: str | Path) -> Dict[str, torch.Tensor]:
    """Load a state dict onto the CPU, raising :class:`LoadError` on unreadable files."""

    source = Path(path)
    if not source.is_file():
        raise LoadError("Weights file not found", resource=source)

    try:
        state = torch.load(source, map_location="cpu", weights_only=True)
    except (pickle.UnpicklingError, RuntimeError, EOFError, ValueError) as exc:
        raise LoadError(f"Weights file could not be read: {exc}", resource=source) from exc

    # Some exports nest the tensors under "state_dict"
    if isinstance(state, dict) and isinstance(state.get("state_dict"), dict):
        state = state["state_dict"]
    if not isinstance(state, dict) or not all(torch.is_tensor(v) for v in state.values()):
        raise LoadError("Weights file does not contain a tensor state dict", resource=source)

    return _strip_compile_prefix(state)


def load_state(model: torch.nn.Module, path: str | Path) -> None:
    model.load_state_dict(read_state_dict(path))
