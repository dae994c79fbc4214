"""
Question-answering inference pipeline for distilqa.

Batched extractive QA: tokenize (question, context) pairs, run the encoder
and span head, decode the best answer spans per input.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import List, Sequence, Tuple

import torch

from ..data.features import FeatureBuilder, QaFeatureBatch, QaInput
from ..data.tokenization import Tokenizer
from ..errors import ConfigError
from ..utils.logging import get_logger
from .decoding import SCORING_POLICIES, decode_spans
from .postprocessing import Answer, aggregate_answers, spans_to_answers

logger = get_logger(__name__)

# --------------- Configuration ---------------


@dataclass
class InferenceConfig:
    """Pipeline settings."""

    batch_size: int = 64  # windows per forward pass
    scoring: str = "probability"  # "probability" or "logit_sum"
    device: str | None = None

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ConfigError(f"batch_size must be positive, got {self.batch_size}")
        if self.scoring not in SCORING_POLICIES:
            raise ConfigError(f"scoring must be one of {SCORING_POLICIES}, got {self.scoring!r}")


def _validate_request(inputs: Sequence[QaInput], top_k: int, max_answer_length: int) -> None:
    if top_k <= 0:
        raise ConfigError(f"top_k must be a positive integer, got {top_k}")
    if max_answer_length <= 0:
        raise ConfigError(f"max_answer_length must be a positive integer, got {max_answer_length}")
    for idx, item in enumerate(inputs):
        if not isinstance(item, QaInput):
            raise ConfigError(f"inputs[{idx}] must be a QaInput, got {type(item).__name__}")
        for name in ("question", "context"):
            value = getattr(item, name)
            if not isinstance(value, str):
                raise ConfigError(
                    f"inputs[{idx}].{name} must be a string, got {type(value).__name__}"
                )


# --------------- Pipeline ---------------


class QuestionAnsweringPipeline:
    """
    Extractive QA with batched processing.

    ``model`` is any module called as ``model(input_ids, attention_mask=mask)``
    that returns ``(start_logits, end_logits)`` of shape (batch, seq_len).
    The model is moved to the device and switched to eval mode once; predict
    only reads it.
    """

    def __init__(
        self,
        model: torch.nn.Module,
        tokenizer: Tokenizer,
        *,
        config: InferenceConfig | None = None,
        device: torch.device | str | None = None,
    ) -> None:
        self.model = model
        self.tokenizer = tokenizer
        self.config = config or InferenceConfig()

        # Resolve device
        chosen = device or self.config.device
        if chosen is None:
            param = next(model.parameters(), None)
            chosen = param.device if param is not None else "cpu"
        self.device = torch.device(chosen)

        max_positions = getattr(model, "max_positions", None)
        if max_positions is not None and tokenizer.config.max_length > max_positions:
            raise ConfigError(
                f"Tokenizer max_length ({tokenizer.config.max_length}) exceeds the model's "
                f"{max_positions} positions"
            )

        self.model.to(self.device)
        self.model.eval()

        self.features = FeatureBuilder(tokenizer)

    @classmethod
    def from_files(
        cls,
        vocab_path: str | Path,
        config_path: str | Path,
        weights_path: str | Path,
        device: str | torch.device = "cpu",
        **kwargs,
    ) -> "QuestionAnsweringPipeline":
        """Load vocabulary, configuration and weights; see :func:`create_qa_pipeline`."""
        from .factory import create_qa_pipeline

        return create_qa_pipeline(vocab_path, config_path, weights_path, device=device, **kwargs)

    # --------------- Prediction ---------------

    def predict(
        self,
        inputs: Sequence[QaInput],
        top_k: int = 1,
        max_answer_length: int = 32,
    ) -> List[List[Answer]]:
        """
        Answer each input; the result is index-aligned with ``inputs``.

        Each inner list holds at most ``top_k`` answers in descending score.
        Inputs with an empty context get an empty list.
        """
        items = list(inputs)
        _validate_request(items, top_k, max_answer_length)
        if not items:
            return []

        features = self.features.build(items)
        logger.debug("Built %d windows for %d inputs", len(features), len(items))

        collected: List[Tuple[int, List[Answer]]] = []
        with torch.inference_mode():
            for chunk in features.chunks(self.config.batch_size):
                chunk = self._to_device(chunk)
                start_logits, end_logits = self.model(
                    chunk.input_ids, attention_mask=chunk.attention_mask
                )
                start_logits = start_logits.float().cpu()
                end_logits = end_logits.float().cpu()
                context_mask = chunk.context_mask.cpu()

                for row, example_index in enumerate(chunk.example_index):
                    spans = decode_spans(
                        start_logits[row],
                        end_logits[row],
                        context_mask[row],
                        top_k=top_k,
                        max_answer_length=max_answer_length,
                        scoring=self.config.scoring,
                    )
                    context = items[example_index].context
                    answers = spans_to_answers(spans, chunk.offsets[row], context)
                    collected.append((example_index, answers))

        return aggregate_answers(len(items), collected, top_k)

    # --------------- Helpers ---------------

    def _to_device(self, batch: QaFeatureBatch) -> QaFeatureBatch:
        """Move batch tensors to device with non_blocking for speed."""
        updates = {}
        for f in fields(batch):
            val = getattr(batch, f.name)
            if torch.is_tensor(val):
                updates[f.name] = val.to(self.device, non_blocking=True)
        return replace(batch, **updates) if updates else batch
