"""Inference tools for distilqa."""

from .decoding import SpanCandidate, decode_spans
from .factory import create_qa_pipeline, default_tokenizer_config
from .pipeline import InferenceConfig, QuestionAnsweringPipeline
from .postprocessing import Answer, aggregate_answers, spans_to_answers

__all__ = [
	"Answer",
	"InferenceConfig",
	"QuestionAnsweringPipeline",
	"SpanCandidate",
	"aggregate_answers",
	"create_qa_pipeline",
	"decode_spans",
	"default_tokenizer_config",
	"spans_to_answers",
]
