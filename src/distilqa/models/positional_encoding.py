"""
Position embeddings for the DistilBERT encoder.

Self-attention is permutation-invariant, so every token vector is summed with
a vector describing its position. Two variants exist:

- learned: a trainable table loaded from the checkpoint
- sinusoidal: the fixed table from "Attention Is All You Need", derived from
  (num_positions, dim) alone and frozen

Both are served by :class:`PositionEmbedding`, which exposes a single lookup
regardless of the variant.
"""

from __future__ import annotations

from typing import Literal

import torch
import torch.nn as nn
import torch.nn.functional as F

from ..errors import ConfigError

PositionKind = Literal["learned", "sinusoidal"]


def create_sinusoidal_embeddings(
    num_positions: int, dim: int, dtype: torch.dtype = torch.float32
) -> torch.Tensor:
    """
    Build the (num_positions, dim) sinusoidal table.

    Formula:
        PE(pos, j) = sin(pos / 10000^(2*floor(j/2)/dim))   for even j
        PE(pos, j) = cos(pos / 10000^(2*floor(j/2)/dim))   for odd j

    Each entry is computed independently in float64 and cast at the end, so the
    table does not depend on summation order.

    Example:
        >>> table = create_sinusoidal_embeddings(512, 768)
        >>> table.shape
        torch.Size([512, 768])
    """
    position = torch.arange(num_positions, dtype=torch.float64).unsqueeze(1)
    j = torch.arange(dim, dtype=torch.long)
    exponent = (2 * torch.div(j, 2, rounding_mode="floor")).to(torch.float64) / max(dim, 1)
    angles = position / torch.pow(torch.tensor(10000.0, dtype=torch.float64), exponent)
    table = torch.where(j % 2 == 0, torch.sin(angles), torch.cos(angles))
    return table.to(dtype)


class PositionEmbedding(nn.Module):
    """
    Position-id -> vector lookup backed by a learned or a sinusoidal table.

    The learned table is a parameter named ``weight`` (checkpoint key
    ``...position_embeddings.weight``). The sinusoidal table is a
    non-persistent buffer: it is never read from or written to checkpoints.

    Args:
        num_positions: maximum number of positions
        dim: embedding dimension
        kind: "learned" or "sinusoidal"
        padding_idx: index whose row is zero-initialized and receives no gradient

    Shape:
        Input: (batch, seq_len) LongTensor of position ids
        Output: (batch, seq_len, dim)
    """

    weight: torch.Tensor

    def __init__(
        self,
        num_positions: int,
        dim: int,
        *,
        kind: PositionKind = "learned",
        padding_idx: int = 0,
    ):
        super().__init__()
        self.num_positions = num_positions
        self.dim = dim
        self.kind = kind
        self.padding_idx = padding_idx

        if kind == "sinusoidal":
            table = create_sinusoidal_embeddings(num_positions, dim)
            self.register_buffer("weight", table, persistent=False)
        elif kind == "learned":
            self.weight = nn.Parameter(torch.empty(num_positions, dim))
            nn.init.normal_(self.weight)
            if num_positions > padding_idx:
                with torch.no_grad():
                    self.weight[padding_idx].zero_()
        else:
            raise ConfigError(f"Unknown position embedding kind: {kind!r}")

    @classmethod
    def learned(cls, num_positions: int, dim: int, padding_idx: int = 0) -> "PositionEmbedding":
        return cls(num_positions, dim, kind="learned", padding_idx=padding_idx)

    @classmethod
    def sinusoidal(cls, num_positions: int, dim: int, padding_idx: int = 0) -> "PositionEmbedding":
        return cls(num_positions, dim, kind="sinusoidal", padding_idx=padding_idx)

    @property
    def is_frozen(self) -> bool:
        return self.kind == "sinusoidal"

    def forward(self, position_ids: torch.Tensor) -> torch.Tensor:
        return F.embedding(position_ids, self.weight, padding_idx=self.padding_idx)

    def extra_repr(self) -> str:
        return f"{self.num_positions}, {self.dim}, kind={self.kind}"
