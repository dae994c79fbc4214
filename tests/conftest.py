"""Shared fixtures: a tiny WordPiece vocabulary and small model configurations."""
from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest
import torch

from distilqa.data.tokenization import Tokenizer, TokenizerConfig
from distilqa.models.config import DistilBertConfig

VOCAB = [
    "[PAD]",
    "[UNK]",
    "[CLS]",
    "[SEP]",
    "[MASK]",
    "where",
    "does",
    "amy",
    "live",
    "lives",
    "in",
    "amsterdam",
    "eric",
    "while",
    "is",
    "the",
    "hague",
    "what",
    "city",
    "capital",
    "of",
    "netherlands",
    "a",
    "and",
    "?",
    ",",
    ".",
]


@pytest.fixture
def vocab_file(tmp_path: Path) -> Path:
    path = tmp_path / "vocab.txt"
    path.write_text("\n".join(VOCAB) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def tokenizer_config(vocab_file: Path) -> TokenizerConfig:
    return TokenizerConfig(
        vocab_path=str(vocab_file),
        lower_case=True,
        max_length=64,
        doc_stride=16,
        max_query_length=16,
    )


@pytest.fixture
def tokenizer(tokenizer_config: TokenizerConfig) -> Tokenizer:
    return Tokenizer(tokenizer_config)


@pytest.fixture
def tiny_config() -> DistilBertConfig:
    return DistilBertConfig(
        vocab_size=len(VOCAB),
        dim=32,
        max_position_embeddings=64,
        n_layers=2,
        n_heads=4,
        hidden_dim=64,
    )


class KeywordSpanModel(torch.nn.Module):
    """Stand-in for trained weights: every token scores a fixed per-id bias."""

    def __init__(self, vocab_size: int, boosts: Dict[int, float]) -> None:
        super().__init__()
        bias = torch.zeros(vocab_size)
        for token_id, value in boosts.items():
            bias[token_id] = value
        self.register_buffer("bias", bias)
        self.calls = 0

    def forward(self, input_ids: torch.Tensor, attention_mask: torch.Tensor | None = None):
        self.calls += 1
        logits = self.bias[input_ids]
        return logits, logits.clone()


@pytest.fixture
def keyword_model(tokenizer: Tokenizer):
    """Factory: keyword_model({"amsterdam": 10.0}) -> KeywordSpanModel."""

    def build(boosts: Dict[str, float]) -> KeywordSpanModel:
        ids = tokenizer.convert_tokens_to_ids(list(boosts))
        return KeywordSpanModel(len(VOCAB), dict(zip(ids, boosts.values(), strict=True)))

    return build
