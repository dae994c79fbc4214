"""
distilqa: extractive question answering on a DistilBERT-style encoder.

Typical usage:

    >>> from distilqa import QaInput, create_qa_pipeline
    >>> qa = create_qa_pipeline("vocab.txt", "config.json", "pytorch_model.bin")
    >>> qa.predict([QaInput("Where does Amy live ?", "Amy lives in Amsterdam")], top_k=1)
"""

from .data.features import QaInput
from .errors import ConfigError, DistilQAError, LoadError
from .inference import Answer, InferenceConfig, QuestionAnsweringPipeline, create_qa_pipeline

__all__ = [
    "Answer",
    "ConfigError",
    "DistilQAError",
    "InferenceConfig",
    "LoadError",
    "QaInput",
    "QuestionAnsweringPipeline",
    "create_qa_pipeline",
]
