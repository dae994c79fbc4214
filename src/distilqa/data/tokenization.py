"""
Tokenizer facade for distilqa.

Wraps a HuggingFace *fast* WordPiece tokenizer. The fast implementation is
required because span decoding maps tokens back to characters through the
offset mapping.

Pairs are encoded as ``[CLS] question [SEP] context [SEP]``; only the
context is truncated, and long contexts overflow into additional windows that
overlap by ``doc_stride`` tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from transformers import AutoTokenizer, BatchEncoding, BertTokenizerFast, PreTrainedTokenizerBase

from ..errors import ConfigError, LoadError

# [CLS] q [SEP] c [SEP]
NUM_SPECIAL_TOKENS = 3
SPECIAL_TOKENS = ("cls", "sep", "unk", "pad")


@dataclass
class TokenizerConfig:
    vocab_path: str | None = None
    pretrained_model_name: str | None = None
    lower_case: bool = False
    max_length: int = 384
    doc_stride: int = 128
    max_query_length: int = 64

    def __post_init__(self) -> None:
        if self.vocab_path is None and self.pretrained_model_name is None:
            raise ConfigError("TokenizerConfig needs vocab_path or pretrained_model_name")
        if self.max_query_length <= 0 or self.doc_stride < 0:
            raise ConfigError("max_query_length must be positive and doc_stride non-negative")
        room = self.max_length - self.max_query_length - NUM_SPECIAL_TOKENS
        if room <= 0:
            raise ConfigError(
                f"max_length ({self.max_length}) leaves no room for context after a "
                f"{self.max_query_length}-token question"
            )
        if self.doc_stride >= room:
            raise ConfigError(f"doc_stride ({self.doc_stride}) must be smaller than {room}")


class Tokenizer:
    """Lightweight façade over a HuggingFace fast tokenizer."""

    def __init__(self, config: TokenizerConfig) -> None:
        self.config = config
        self._resource = config.vocab_path or config.pretrained_model_name
        self._tokenizer = self._load(config)
        if not self._tokenizer.is_fast:
            raise LoadError(
                "A fast tokenizer is required for offset mapping", resource=self._resource
            )
        self._check_special_tokens()

    @staticmethod
    def _load(config: TokenizerConfig) -> PreTrainedTokenizerBase:
        if config.vocab_path is not None:
            vocab = Path(config.vocab_path)
            if not vocab.is_file():
                raise LoadError("Vocabulary file not found", resource=vocab)
            try:
                vocab.read_bytes().decode("utf-8")
                return BertTokenizerFast(vocab_file=str(vocab), do_lower_case=config.lower_case)
            except (OSError, ValueError, UnicodeDecodeError) as exc:
                raise LoadError(f"Vocabulary could not be read: {exc}", resource=vocab) from exc
        try:
            return AutoTokenizer.from_pretrained(config.pretrained_model_name, use_fast=True)
        except (OSError, ValueError) as exc:
            raise LoadError(
                f"Tokenizer could not be loaded: {exc}", resource=config.pretrained_model_name
            ) from exc

    def _check_special_tokens(self) -> None:
        """Every special token must be an entry of the vocabulary, not an added token."""

        entries = self._tokenizer.backend_tokenizer.get_vocab(with_added_tokens=False)
        missing = [
            f"{name}_token"
            for name in SPECIAL_TOKENS
            if getattr(self._tokenizer, f"{name}_token") not in entries
        ]
        if missing:
            raise LoadError(
                f"Vocabulary lacks special tokens: {', '.join(missing)}", resource=self._resource
            )

    @property
    def tokenizer(self) -> PreTrainedTokenizerBase:
        return self._tokenizer

    @property
    def pad_token_id(self) -> int:
        return int(self._tokenizer.pad_token_id)

    @property
    def vocab_size(self) -> int:
        return len(self._tokenizer)

    def truncate_question(self, question: str) -> str:
        """Cut ``question`` to at most ``max_query_length`` tokens, on a token boundary."""

        encoded = self._tokenizer(
            question, add_special_tokens=False, return_offsets_mapping=True
        )
        offsets = encoded["offset_mapping"]
        if len(offsets) <= self.config.max_query_length:
            return question
        return question[: offsets[self.config.max_query_length - 1][1]]

    def encode_pairs(self, questions: Sequence[str], contexts: Sequence[str]) -> BatchEncoding:
        """
        Jointly encode question/context pairs into padded windows.

        Returns a BatchEncoding with ``input_ids``, ``attention_mask``,
        ``offset_mapping`` and ``overflow_to_sample_mapping`` (lists), plus
        ``sequence_ids(i)`` telling question tokens (0) from context tokens (1).
        """
        return self._tokenizer(
            list(questions),
            list(contexts),
            truncation="only_second",
            max_length=self.config.max_length,
            stride=self.config.doc_stride,
            return_overflowing_tokens=True,
            return_offsets_mapping=True,
            return_token_type_ids=False,
            padding="longest",
        )

    def convert_tokens_to_ids(self, tokens: List[str]) -> List[int]:
        return list(self._tokenizer.convert_tokens_to_ids(tokens))
