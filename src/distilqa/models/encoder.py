"""
DistilBERT encoder (Post-LN).

Contains:
- TransformerBlock: self-attention and FFN sublayers, each followed by
  residual + LayerNorm, as in BERT/DistilBERT
- Transformer: a stack of blocks
- DistilBertModel: Embeddings + Transformer

Every forward takes an explicit ``train`` flag that switches dropout on; the
default is inference mode.
"""

from typing import List, Optional, Tuple, Union

import torch
import torch.nn as nn

from .attention import MultiHeadSelfAttention
from .config import DistilBertConfig
from .embeddings import Embeddings
from .feedforward import FeedForward


class TransformerBlock(nn.Module):
    """One encoder block. Parameter names follow the DistilBERT checkpoint."""

    def __init__(self, config: DistilBertConfig):
        super().__init__()
        self.attention = MultiHeadSelfAttention(
            dim=config.dim,
            n_heads=config.n_heads,
            attention_dropout=config.attention_dropout,
        )
        self.sa_layer_norm = nn.LayerNorm(config.dim, eps=config.layer_norm_eps)
        self.ffn = FeedForward(
            dim=config.dim,
            hidden_dim=config.hidden_dim,
            dropout=config.dropout,
            activation=config.activation,  # type: ignore[arg-type]
        )
        self.output_layer_norm = nn.LayerNorm(config.dim, eps=config.layer_norm_eps)

    def forward(
        self,
        x: torch.Tensor,
        mask: Optional[torch.Tensor] = None,
        *,
        train: bool = False,
        collect_attn: bool = False,
    ) -> Tuple[torch.Tensor, Optional[torch.Tensor]]:
        """
        Args:
            x: (batch, seq_len, dim)
            mask: optional (batch, seq_len) padding mask, True for real tokens

        Returns:
            x: (batch, seq_len, dim) and the attention weights when collect_attn is set
        """
        attn_out, attn_weights = self.attention(
            x, mask, train=train, return_attn_weights=collect_attn
        )
        x = self.sa_layer_norm(attn_out + x)

        ffn_out = self.ffn(x, train=train)
        x = self.output_layer_norm(ffn_out + x)
        return x, attn_weights


class Transformer(nn.Module):
    """Stack of ``config.n_layers`` blocks, stored as ``layer.N`` for checkpoint compatibility."""

    def __init__(self, config: DistilBertConfig):
        super().__init__()
        self.layer = nn.ModuleList([TransformerBlock(config) for _ in range(config.n_layers)])

    def forward(
        self,
        x: torch.Tensor,
        mask: Optional[torch.Tensor] = None,
        *,
        train: bool = False,
        collect_attn: bool = False,
    ) -> Union[torch.Tensor, Tuple[torch.Tensor, List[torch.Tensor]]]:
        attn_weights_per_layer: List[torch.Tensor] = []
        for block in self.layer:
            x, attn = block(x, mask, train=train, collect_attn=collect_attn)
            if collect_attn and attn is not None:
                attn_weights_per_layer.append(attn)
        if collect_attn:
            return x, attn_weights_per_layer
        return x


class DistilBertModel(nn.Module):
    """
    Embeddings followed by the transformer stack.

    Args:
        config: model configuration

    Shape:
        input_ids: (batch, seq_len)
        attention_mask: optional (batch, seq_len), 1/True for real tokens
        output: (batch, seq_len, dim)
    """

    def __init__(self, config: DistilBertConfig):
        super().__init__()
        self.config = config
        self.embeddings = Embeddings(config)
        self.transformer = Transformer(config)

    def forward(
        self,
        input_ids: torch.Tensor,
        attention_mask: Optional[torch.Tensor] = None,
        *,
        train: bool = False,
    ) -> torch.Tensor:
        if input_ids.dim() != 2:
            raise ValueError("input_ids must be (batch, seq_len) token ids")
        if attention_mask is None:
            attention_mask = torch.ones_like(input_ids, dtype=torch.bool)

        hidden = self.embeddings(input_ids, train=train)
        output = self.transformer(hidden, attention_mask, train=train)
        assert isinstance(output, torch.Tensor)
        return output
