"""Helpers to assemble a question-answering pipeline from saved artifacts."""

from __future__ import annotations

import json
from pathlib import Path

import torch

from ..data.tokenization import Tokenizer, TokenizerConfig
from ..errors import ConfigError, LoadError
from ..models.factory import build_qa_model, load_model_config, load_qa_weights
from ..utils.logging import get_logger
from .pipeline import InferenceConfig, QuestionAnsweringPipeline

logger = get_logger(__name__)


def _detect_lower_case(vocab_path: Path) -> bool:
    """Read ``do_lower_case`` from a tokenizer_config.json next to the vocabulary, if any."""

    tokenizer_config = vocab_path.parent / "tokenizer_config.json"
    if not tokenizer_config.is_file():
        return False
    try:
        with tokenizer_config.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise LoadError(
            f"Tokenizer configuration is malformed: {exc}", resource=tokenizer_config
        ) from exc
    return bool(payload.get("do_lower_case", False))


def default_tokenizer_config(
    vocab_path: str | Path, max_positions: int, *, lower_case: bool | None = None
) -> TokenizerConfig:
    """Standard SQuAD windowing (384 / 128 / 64), shrunk for models with fewer positions."""

    vocab = Path(vocab_path)
    if lower_case is None:
        lower_case = _detect_lower_case(vocab)

    max_length = min(384, max_positions)
    doc_stride = 128 if max_length == 384 else max_length // 4
    max_query_length = 64 if max_length == 384 else max_length // 4
    return TokenizerConfig(
        vocab_path=str(vocab),
        lower_case=lower_case,
        max_length=max_length,
        doc_stride=doc_stride,
        max_query_length=max_query_length,
    )


def create_qa_pipeline(
    vocab_path: str | Path,
    config_path: str | Path,
    weights_path: str | Path,
    *,
    device: str | torch.device = "cpu",
    tokenizer_config: TokenizerConfig | None = None,
    inference_config: InferenceConfig | None = None,
) -> QuestionAnsweringPipeline:
    """
    Build a :class:`QuestionAnsweringPipeline` from a vocabulary, a model
    configuration and a weights file.

    Raises:
        LoadError: a file is missing or malformed, or the weights / vocabulary
            disagree with the configuration.
    """

    resources = (
        ("Vocabulary", vocab_path),
        ("Model configuration", config_path),
        ("Weights", weights_path),
    )
    for label, path in resources:
        if not Path(path).is_file():
            raise LoadError(f"{label} file not found", resource=path)

    model_config = load_model_config(config_path)
    if tokenizer_config is None:
        try:
            tokenizer_config = default_tokenizer_config(
                vocab_path, model_config.max_position_embeddings
            )
        except ConfigError as exc:
            raise LoadError(
                f"Model configuration leaves no usable input window: {exc}", resource=config_path
            ) from exc

    tokenizer = Tokenizer(tokenizer_config)
    if tokenizer.vocab_size > model_config.vocab_size:
        raise LoadError(
            f"Vocabulary has {tokenizer.vocab_size} entries but the model embeds only "
            f"{model_config.vocab_size}",
            resource=vocab_path,
        )
    if tokenizer.pad_token_id != model_config.pad_token_id:
        raise LoadError(
            f"Vocabulary pads with id {tokenizer.pad_token_id} but the model expects "
            f"{model_config.pad_token_id}",
            resource=vocab_path,
        )

    model = build_qa_model(model_config)
    load_qa_weights(model, weights_path)

    device_str = str(device) if isinstance(device, torch.device) else device
    pipeline_config = inference_config or InferenceConfig(device=device_str)
    logger.info(
        "QA pipeline ready: %d layers, dim %d, %s positions, device %s",
        model_config.n_layers,
        model_config.dim,
        "sinusoidal" if model_config.sinusoidal_pos_embds else "learned",
        device_str,
    )
    return QuestionAnsweringPipeline(
        model=model,
        tokenizer=tokenizer,
        config=pipeline_config,
        device=device,
    )
