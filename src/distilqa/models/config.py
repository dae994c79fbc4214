"""Model configuration for the DistilBERT question-answering stack."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from ..errors import ConfigError

ACTIVATIONS = ("gelu", "relu")


@dataclass(frozen=True)
class DistilBertConfig:
    """
    Immutable description of the encoder dimensions.

    Field names follow the ``config.json`` shipped with DistilBERT checkpoints,
    so a published configuration can be passed to :meth:`from_dict` as-is.

    Args:
        vocab_size: rows of the word-embedding table
        dim: embedding / hidden size
        max_position_embeddings: rows of the position-embedding table
        sinusoidal_pos_embds: use the fixed sinusoidal table instead of a learned one
        n_layers: number of transformer blocks
        n_heads: attention heads per block
        hidden_dim: inner size of the feed-forward network
        dropout: dropout applied to embeddings and sublayer outputs
        attention_dropout: dropout applied to attention probabilities
        activation: FFN activation ("gelu" or "relu")
        qa_dropout: dropout applied before the span classification head
        layer_norm_eps: epsilon of the embedding and block layer norms
        pad_token_id: padding index of the word-embedding table
    """

    vocab_size: int = 28996
    dim: int = 768
    max_position_embeddings: int = 512
    sinusoidal_pos_embds: bool = False
    n_layers: int = 6
    n_heads: int = 12
    hidden_dim: int = 3072
    dropout: float = 0.1
    attention_dropout: float = 0.1
    activation: str = "gelu"
    qa_dropout: float = 0.1
    layer_norm_eps: float = 1e-12
    pad_token_id: int = 0

    def __post_init__(self) -> None:
        sizes = {
            "vocab_size": self.vocab_size,
            "dim": self.dim,
            "max_position_embeddings": self.max_position_embeddings,
            "n_layers": self.n_layers,
            "n_heads": self.n_heads,
            "hidden_dim": self.hidden_dim,
        }
        for name, value in sizes.items():
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")
        if self.dim % self.n_heads != 0:
            raise ConfigError(f"dim ({self.dim}) must be divisible by n_heads ({self.n_heads})")
        for name in ("dropout", "attention_dropout", "qa_dropout"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ConfigError(f"{name} must be in [0, 1], got {value}")
        if self.activation not in ACTIVATIONS:
            raise ConfigError(f"activation must be one of {ACTIVATIONS}, got {self.activation!r}")
        if self.layer_norm_eps <= 0:
            raise ConfigError(f"layer_norm_eps must be positive, got {self.layer_norm_eps}")
        if not 0 <= self.pad_token_id < self.vocab_size:
            raise ConfigError(f"pad_token_id ({self.pad_token_id}) outside vocabulary")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DistilBertConfig":
        """Build a config from a mapping, ignoring keys that are not model dimensions."""

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for name, value in data.items():
            if name not in known or value is None:
                continue
            default = getattr(cls, name)
            try:
                if isinstance(default, bool):
                    kwargs[name] = bool(value)
                elif isinstance(default, int):
                    kwargs[name] = int(value)
                elif isinstance(default, float):
                    kwargs[name] = float(value)
                else:
                    kwargs[name] = str(value)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Invalid value for {name}: {value!r}") from exc
        return cls(**kwargs)
