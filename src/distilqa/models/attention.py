"""
Multi-head self-attention for the DistilBERT encoder.

Projection names (q_lin, k_lin, v_lin, out_lin) match the DistilBERT
checkpoint layout. The fast path uses PyTorch's fused
``F.scaled_dot_product_attention``; a manual path is kept for callers that
want the attention weights back.
"""

import math
from typing import Optional, Tuple

import torch
import torch.nn as nn
import torch.nn.functional as F


def _expand_padding_mask(mask: torch.Tensor) -> torch.Tensor:
    """(batch, seq_k) key mask -> (batch, 1, 1, seq_k) boolean, True = attend."""
    mask = mask.to(dtype=torch.bool)
    if mask.dim() == 2:
        mask = mask[:, None, None, :]
    elif mask.dim() == 3:
        mask = mask.unsqueeze(1)
    return mask


class MultiHeadSelfAttention(nn.Module):
    """
    Multi-head scaled dot-product self-attention.

    Args:
        dim: model hidden size
        n_heads: number of attention heads, must divide ``dim``
        attention_dropout: dropout applied to attention probabilities in train mode
    """

    def __init__(self, dim: int, n_heads: int, attention_dropout: float = 0.1):
        super().__init__()
        assert dim % n_heads == 0, "dim must be divisible by n_heads"

        self.dim = dim
        self.n_heads = n_heads
        self.d_k = dim // n_heads
        self.attention_dropout = attention_dropout

        self.q_lin = nn.Linear(dim, dim)
        self.k_lin = nn.Linear(dim, dim)
        self.v_lin = nn.Linear(dim, dim)
        self.out_lin = nn.Linear(dim, dim)

    def _split_heads(self, x: torch.Tensor) -> torch.Tensor:
        # (batch, seq, dim) -> (batch, n_heads, seq, d_k)
        batch_size = x.size(0)
        return x.view(batch_size, -1, self.n_heads, self.d_k).transpose(1, 2)

    def forward(
        self,
        x: torch.Tensor,
        mask: Optional[torch.Tensor] = None,
        *,
        train: bool = False,
        return_attn_weights: bool = False,
    ) -> Tuple[torch.Tensor, Optional[torch.Tensor]]:
        """
        Args:
            x: (batch, seq_len, dim)
            mask: optional (batch, seq_len) padding mask, True for real tokens
            train: apply attention dropout
            return_attn_weights: also return (batch, n_heads, seq_len, seq_len) weights

        Returns:
            output: (batch, seq_len, dim)
            attention_weights: optional
        """
        batch_size = x.size(0)
        q = self._split_heads(self.q_lin(x))
        k = self._split_heads(self.k_lin(x))
        v = self._split_heads(self.v_lin(x))

        attn_mask = _expand_padding_mask(mask).to(x.device) if mask is not None else None
        dropout_p = self.attention_dropout if train else 0.0

        weights = None
        if return_attn_weights:
            scores = torch.matmul(q, k.transpose(-2, -1)) / math.sqrt(self.d_k)
            if attn_mask is not None:
                scores = scores.masked_fill(~attn_mask, torch.finfo(scores.dtype).min)
            weights = F.softmax(scores.float(), dim=-1).type_as(scores)
            context = torch.matmul(F.dropout(weights, p=dropout_p, training=train), v)
        else:
            context = F.scaled_dot_product_attention(
                q, k, v, attn_mask=attn_mask, dropout_p=dropout_p, is_causal=False
            )

        # (batch, n_heads, seq, d_k) -> (batch, seq, dim)
        context = context.transpose(1, 2).contiguous().view(batch_size, -1, self.dim)
        return self.out_lin(context), weights
