"""
Input embeddings for the DistilBERT encoder.

Turns a (batch, seq_len) matrix of token ids into the (batch, seq_len, dim)
tensor consumed by the first transformer block:

    word(input_ids) + position(0..seq_len) -> LayerNorm -> dropout

Dropout is controlled by the explicit ``train`` argument rather than by
``Module.training``; with ``train=False`` the composer is deterministic.
"""

from __future__ import annotations

import torch
import torch.nn as nn
import torch.nn.functional as F

from ..errors import ConfigError
from .config import DistilBertConfig
from .positional_encoding import PositionEmbedding


class Embeddings(nn.Module):
    """
    Word + position embeddings followed by LayerNorm and dropout.

    Args:
        config: model configuration; ``sinusoidal_pos_embds`` selects the
            position table variant once, at construction
        word_embeddings: optional pre-built word table, must be
            (vocab_size, dim)

    Shape:
        Input: (batch, seq_len) LongTensor with ids in [0, vocab_size)
        Output: (batch, seq_len, dim)
    """

    def __init__(
        self, config: DistilBertConfig, *, word_embeddings: nn.Embedding | None = None
    ):
        super().__init__()
        self.config = config

        if word_embeddings is None:
            word_embeddings = nn.Embedding(
                config.vocab_size, config.dim, padding_idx=config.pad_token_id
            )
        elif tuple(word_embeddings.weight.shape) != (config.vocab_size, config.dim):
            raise ConfigError(
                f"word embeddings must be ({config.vocab_size}, {config.dim}), "
                f"got {tuple(word_embeddings.weight.shape)}"
            )
        self.word_embeddings = word_embeddings

        kind = "sinusoidal" if config.sinusoidal_pos_embds else "learned"
        self.position_embeddings = PositionEmbedding(
            config.max_position_embeddings, config.dim, kind=kind, padding_idx=0
        )
        # Checkpoint key is "LayerNorm", keep the attribute name
        self.LayerNorm = nn.LayerNorm(config.dim, eps=config.layer_norm_eps)
        self.dropout = config.dropout

    def __setattr__(self, name: str, value) -> None:
        # The word table is fixed once registered; replace it through with_word_embeddings
        if name == "word_embeddings" and "word_embeddings" in self._modules:
            raise AttributeError(
                "word_embeddings is read-only, use with_word_embeddings() to get a new instance"
            )
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if name == "word_embeddings":
            raise AttributeError("word_embeddings is read-only")
        super().__delattr__(name)

    def with_word_embeddings(self, word_embeddings: nn.Embedding) -> "Embeddings":
        """
        Return a new composer that owns ``word_embeddings``.

        Position table and LayerNorm are copied, so the new instance shares no
        mutable state with this one.
        """
        replacement = Embeddings(self.config, word_embeddings=word_embeddings)
        replacement.position_embeddings.load_state_dict(self.position_embeddings.state_dict())
        replacement.LayerNorm.load_state_dict(self.LayerNorm.state_dict())
        return replacement.to(self.LayerNorm.weight.device)

    def forward(self, input_ids: torch.Tensor, *, train: bool = False) -> torch.Tensor:
        seq_length = input_ids.size(-1)
        if seq_length > self.config.max_position_embeddings:
            raise ValueError(
                f"Sequence length {seq_length} exceeds max_position_embeddings "
                f"({self.config.max_position_embeddings})"
            )

        # Every row uses positions 0..seq_length
        position_ids = torch.arange(seq_length, dtype=torch.long, device=input_ids.device)
        position_ids = position_ids.unsqueeze(0).expand_as(input_ids)

        word_embeds = self.word_embeddings(input_ids)
        position_embeds = self.position_embeddings(position_ids)

        embeddings = self.LayerNorm(word_embeds + position_embeds)
        return F.dropout(embeddings, p=self.dropout, training=train)
