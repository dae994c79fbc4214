"""
FastAPI dependency providers for distilqa.

Manages lazy initialization and caching of the question-answering pipeline.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from fastapi import HTTPException, status

from ..errors import LoadError
from ..inference.factory import create_qa_pipeline
from ..inference.pipeline import QuestionAnsweringPipeline
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL_DIR = Path("artifacts/distilbert-qa")


@lru_cache(maxsize=1)
def get_pipeline() -> QuestionAnsweringPipeline:
    """Lazily construct and cache the pipeline for the API."""

    model_dir = Path(os.environ.get("DISTILQA_MODEL_DIR", DEFAULT_MODEL_DIR))
    device = os.environ.get("DISTILQA_DEVICE", "cpu")

    try:
        return create_qa_pipeline(
            vocab_path=model_dir / "vocab.txt",
            config_path=model_dir / "config.json",
            weights_path=model_dir / "pytorch_model.bin",
            device=device,
        )
    except LoadError as exc:
        logger.exception("Pipeline initialization failed: missing or invalid artifact")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unavailable",
        ) from exc
