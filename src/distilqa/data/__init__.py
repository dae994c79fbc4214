"""Tokenization and feature building for distilqa."""

from .features import FeatureBuilder, QaFeatureBatch, QaInput
from .tokenization import Tokenizer, TokenizerConfig

__all__ = [
    "FeatureBuilder",
    "QaFeatureBatch",
    "QaInput",
    "Tokenizer",
    "TokenizerConfig",
]
