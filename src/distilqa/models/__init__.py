"""
distilqa model components.

From-scratch DistilBERT encoder for extractive question answering:
- PositionEmbedding (learned or sinusoidal), Embeddings
- MultiHeadSelfAttention, FeedForward, TransformerBlock, DistilBertModel
- SpanClassificationHead, DistilBertForQuestionAnswering
- factory helpers to load configuration and weights
"""

from .attention import MultiHeadSelfAttention
from .config import DistilBertConfig
from .embeddings import Embeddings
from .encoder import DistilBertModel, Transformer, TransformerBlock
from .factory import build_qa_model, load_model_config, load_qa_weights
from .feedforward import FeedForward
from .heads import SpanClassificationHead
from .positional_encoding import PositionEmbedding, create_sinusoidal_embeddings
from .qa_model import DistilBertForQuestionAnswering

__all__ = [
    "DistilBertConfig",
    "PositionEmbedding",
    "create_sinusoidal_embeddings",
    "Embeddings",
    "MultiHeadSelfAttention",
    "FeedForward",
    "TransformerBlock",
    "Transformer",
    "DistilBertModel",
    "SpanClassificationHead",
    "DistilBertForQuestionAnswering",
    "build_qa_model",
    "load_model_config",
    "load_qa_weights",
]
