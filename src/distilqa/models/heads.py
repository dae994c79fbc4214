"""
Prediction heads on top of encoder outputs.

- SpanClassificationHead: per-token start/end logits for extractive QA.
"""

from typing import Tuple

import torch
import torch.nn as nn
import torch.nn.functional as F


class SpanClassificationHead(nn.Linear):
    """
    Linear(d_model, 2) split into start and end logits.

    Subclasses ``nn.Linear`` so its parameters are exactly ``weight`` and
    ``bias``, matching the ``qa_outputs.*`` checkpoint keys.

    Args:
        d_model: hidden size
        dropout: dropout probability applied to hidden states in train mode
    """

    def __init__(self, d_model: int, dropout: float = 0.1):
        super().__init__(d_model, 2)
        self.dropout = dropout

    def forward(  # type: ignore[override]
        self, hidden_states: torch.Tensor, *, train: bool = False
    ) -> Tuple[torch.Tensor, torch.Tensor]:
        """
        hidden_states: (batch, seq_len, d_model)
        returns: start_logits, end_logits, each (batch, seq_len)
        """
        hidden_states = F.dropout(hidden_states, p=self.dropout, training=train)
        logits = super().forward(hidden_states)
        start_logits, end_logits = logits.split(1, dim=-1)
        return start_logits.squeeze(-1), end_logits.squeeze(-1)
