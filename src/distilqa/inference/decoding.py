"""
Span decoding for extractive question answering.

Scores every (start, end) token pair of one window and keeps the best ones.
How start and end logits combine is a policy:

- "probability": softmax over context tokens for start and end independently,
  span score = p_start * p_end
- "logit_sum": span score = start_logit + end_logit
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal

import torch
import torch.nn.functional as F

from ..errors import ConfigError

ScoringPolicy = Literal["probability", "logit_sum"]
SCORING_POLICIES = ("probability", "logit_sum")


@dataclass(frozen=True)
class SpanCandidate:
    start: int  # token index, inclusive
    end: int  # token index, inclusive
    score: float


def _span_scores(
    start_logits: torch.Tensor,
    end_logits: torch.Tensor,
    context_mask: torch.Tensor,
    scoring: str,
) -> torch.Tensor:
    """(seq_len, seq_len) matrix, entry [i, j] scores the span from token i to token j."""
    if scoring == "probability":
        start = F.softmax(start_logits.masked_fill(~context_mask, float("-inf")), dim=-1)
        end = F.softmax(end_logits.masked_fill(~context_mask, float("-inf")), dim=-1)
        return start.unsqueeze(1) * end.unsqueeze(0)
    if scoring == "logit_sum":
        return start_logits.unsqueeze(1) + end_logits.unsqueeze(0)
    raise ConfigError(f"Unknown scoring policy {scoring!r}, expected one of {SCORING_POLICIES}")


def decode_spans(
    start_logits: torch.Tensor,
    end_logits: torch.Tensor,
    context_mask: torch.Tensor,
    *,
    top_k: int,
    max_answer_length: int,
    scoring: str = "probability",
) -> List[SpanCandidate]:
    """
    Return up to ``top_k`` valid spans of one window, best first.

    A span is valid when start <= end, it covers at most ``max_answer_length``
    tokens and both ends lie in the context segment. Equal scores keep the
    smaller start first, then the shorter span.

    Args:
        start_logits: (seq_len,)
        end_logits: (seq_len,)
        context_mask: (seq_len,) bool, True on context tokens
    """
    if scoring not in SCORING_POLICIES:
        raise ConfigError(f"Unknown scoring policy {scoring!r}, expected one of {SCORING_POLICIES}")

    context_mask = context_mask.to(dtype=torch.bool)
    if not bool(context_mask.any()):
        return []

    start_logits = start_logits.detach().to(torch.float32)
    end_logits = end_logits.detach().to(torch.float32)
    scores = _span_scores(start_logits, end_logits, context_mask, scoring)

    seq_len = scores.size(0)
    positions = torch.arange(seq_len, device=scores.device)
    length = positions.unsqueeze(0) - positions.unsqueeze(1)  # end - start
    valid = (length >= 0) & (length < max_answer_length)
    valid &= context_mask.unsqueeze(1) & context_mask.unsqueeze(0)

    flat_scores = scores.flatten()
    flat_valid = valid.flatten().nonzero().squeeze(1)
    if flat_valid.numel() == 0:
        return []

    # Row-major order is (start asc, end asc); a stable sort keeps it among ties
    candidate_scores = flat_scores[flat_valid]
    order = torch.sort(candidate_scores, descending=True, stable=True).indices[:top_k]

    spans = []
    for flat_index, score in zip(flat_valid[order].tolist(), candidate_scores[order].tolist()):
        start, end = divmod(flat_index, seq_len)
        spans.append(SpanCandidate(start=start, end=end, score=float(score)))
    return spans
