"""Position-wise feed-forward network of a DistilBERT block."""

from typing import Literal

import torch
import torch.nn as nn
import torch.nn.functional as F


class FeedForward(nn.Module):
    """
    FFN(x) = dropout(act(x W1 + b1) W2 + b2), with act = GELU or ReLU.

    ``lin1``/``lin2`` keep the checkpoint parameter names. Residual and
    normalization live in the enclosing block.
    """

    def __init__(
        self,
        dim: int,
        hidden_dim: int,
        dropout: float = 0.1,
        activation: Literal["gelu", "relu"] = "gelu",
    ):
        super().__init__()
        self.lin1 = nn.Linear(dim, hidden_dim)
        self.lin2 = nn.Linear(hidden_dim, dim)
        self.activation = nn.GELU() if activation == "gelu" else nn.ReLU()
        self.dropout = dropout

    def forward(self, x: torch.Tensor, *, train: bool = False) -> torch.Tensor:
        """
        x: (batch, seq_len, dim)
        returns: (batch, seq_len, dim)
        """
        x = self.lin1(x)  # (batch, seq_len, hidden_dim)
        x = self.activation(x)
        x = self.lin2(x)
        return F.dropout(x, p=self.dropout, training=train)
