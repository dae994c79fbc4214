"""
DistilBERT with a span classification head.

The model is the "encoder + QA head" collaborator of the inference pipeline:
it maps token ids (and a padding mask) to per-token start/end logits. Any
module with the same call signature can be handed to the pipeline instead.
"""

from typing import Optional, Tuple

import torch
import torch.nn as nn

from .config import DistilBertConfig
from .encoder import DistilBertModel
from .heads import SpanClassificationHead


class DistilBertForQuestionAnswering(nn.Module):
    """
    Usage:
        model = DistilBertForQuestionAnswering(config)
        start_logits, end_logits = model(input_ids, attention_mask=mask)

    Parameter names match the published DistilBERT QA checkpoints
    (``distilbert.*`` and ``qa_outputs.*``).
    """

    def __init__(self, config: DistilBertConfig):
        super().__init__()
        self.config = config
        self.distilbert = DistilBertModel(config)
        self.qa_outputs = SpanClassificationHead(config.dim, dropout=config.qa_dropout)

    @property
    def max_positions(self) -> int:
        return self.config.max_position_embeddings

    def forward(
        self,
        input_ids: torch.Tensor,
        attention_mask: Optional[torch.Tensor] = None,
        *,
        train: bool = False,
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        """
        input_ids: (batch, seq_len)
        attention_mask: optional (batch, seq_len)
        returns: start_logits, end_logits, each (batch, seq_len)
        """
        hidden_states = self.distilbert(input_ids, attention_mask, train=train)
        return self.qa_outputs(hidden_states, train=train)
