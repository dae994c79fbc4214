"""
Feature building for extractive question answering.

Turns (question, context) pairs into padded tensor windows plus the metadata
needed to map predicted token spans back to characters of the context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

import torch

from .tokenization import Tokenizer

# --------------- Inputs ---------------


@dataclass(frozen=True)
class QaInput:
    """One question about one context passage."""

    question: str
    context: str


# --------------- Batch Output ---------------


@dataclass
class QaFeatureBatch:
    """
    Tokenized windows ready for model consumption.

    A long context produces several windows; ``example_index[i]`` gives the
    position in the caller's input list that window ``i`` belongs to.
    """

    input_ids: torch.Tensor  # (num_features, seq_len) long
    attention_mask: torch.Tensor  # (num_features, seq_len) bool
    context_mask: torch.Tensor  # (num_features, seq_len) bool, True on context tokens
    offsets: List[List[Tuple[int, int]]]
    example_index: List[int]

    def __len__(self) -> int:
        return len(self.example_index)

    @classmethod
    def empty(cls) -> "QaFeatureBatch":
        blank = torch.zeros(0, 0, dtype=torch.long)
        return cls(
            input_ids=blank,
            attention_mask=blank.bool(),
            context_mask=blank.bool(),
            offsets=[],
            example_index=[],
        )

    def chunks(self, size: int) -> Iterator["QaFeatureBatch"]:
        """Yield consecutive sub-batches of at most ``size`` windows."""
        for begin in range(0, len(self), size):
            end = begin + size
            yield QaFeatureBatch(
                input_ids=self.input_ids[begin:end],
                attention_mask=self.attention_mask[begin:end],
                context_mask=self.context_mask[begin:end],
                offsets=self.offsets[begin:end],
                example_index=self.example_index[begin:end],
            )


# --------------- Builder ---------------


class FeatureBuilder:
    """Encodes QaInput sequences into a single :class:`QaFeatureBatch`."""

    def __init__(self, tokenizer: Tokenizer) -> None:
        self.tokenizer = tokenizer

    def build(self, inputs: Sequence[QaInput]) -> QaFeatureBatch:
        # Blank contexts have nothing to extract from
        answerable = [idx for idx, item in enumerate(inputs) if item.context.strip()]
        if not answerable:
            return QaFeatureBatch.empty()

        questions = [self.tokenizer.truncate_question(inputs[idx].question) for idx in answerable]
        contexts = [inputs[idx].context for idx in answerable]
        encoded = self.tokenizer.encode_pairs(questions, contexts)

        context_rows: List[List[bool]] = []
        offsets: List[List[Tuple[int, int]]] = []
        for row in range(len(encoded["input_ids"])):
            context_rows.append([sid == 1 for sid in encoded.sequence_ids(row)])
            row_offsets = encoded["offset_mapping"][row]
            offsets.append([(int(start), int(end)) for start, end in row_offsets])

        return QaFeatureBatch(
            input_ids=torch.tensor(encoded["input_ids"], dtype=torch.long),
            attention_mask=torch.tensor(encoded["attention_mask"], dtype=torch.bool),
            context_mask=torch.tensor(context_rows, dtype=torch.bool),
            offsets=offsets,
            example_index=[answerable[s] for s in encoded["overflow_to_sample_mapping"]],
        )
