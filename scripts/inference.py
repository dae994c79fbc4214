"""
Inference script for distilqa.

Command-line interface for extractive question answering over
question/context pairs.

Example:
    python scripts/inference.py --model-dir artifacts/distilbert-qa \
        --question "Where does Amy live ?" --context "Amy lives in Amsterdam"
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / "src"))

from distilqa import QaInput, create_qa_pipeline
from distilqa.inference import InferenceConfig
from distilqa.utils.logging import configure_logging


def _load_inputs(
    questions: List[str], contexts: List[str], file_path: Path | None
) -> List[QaInput]:
    if len(questions) != len(contexts):
        raise ValueError("Pass the same number of --question and --context arguments.")
    inputs = [QaInput(question=q, context=c) for q, c in zip(questions, contexts, strict=True)]
    if file_path is not None:
        if not file_path.exists():
            raise FileNotFoundError(file_path)
        with file_path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                record = json.loads(line)
                inputs.append(QaInput(question=record["question"], context=record["context"]))
    if not inputs:
        raise ValueError("No inputs provided. Pass --question/--context or use --file.")
    return inputs


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run distilqa question answering.")
    parser.add_argument("--question", action="append", default=[], help="Question text.")
    parser.add_argument("--context", action="append", default=[], help="Context passage.")
    parser.add_argument(
        "--file",
        type=Path,
        help="JSON-lines file with one {\"question\": ..., \"context\": ...} object per line.",
    )
    parser.add_argument(
        "--model-dir",
        type=Path,
        default=Path("artifacts/distilbert-qa"),
        help="Directory holding vocab.txt, config.json and pytorch_model.bin.",
    )
    parser.add_argument("--device", default="cpu", help="Device to run inference on (cpu or cuda).")
    parser.add_argument("--top-k", type=int, default=1, help="Answers to return per input.")
    parser.add_argument(
        "--max-answer-length", type=int, default=32, help="Maximum answer length in tokens."
    )
    parser.add_argument(
        "--scoring",
        choices=["probability", "logit_sum"],
        default="probability",
        help="How start and end logits combine into a span score.",
    )
    parser.add_argument("--batch-size", type=int, default=64, help="Windows per forward pass.")
    return parser.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()
    inputs = _load_inputs(args.question, args.context, args.file)

    pipeline = create_qa_pipeline(
        vocab_path=args.model_dir / "vocab.txt",
        config_path=args.model_dir / "config.json",
        weights_path=args.model_dir / "pytorch_model.bin",
        device=args.device,
        inference_config=InferenceConfig(
            batch_size=args.batch_size, scoring=args.scoring, device=args.device
        ),
    )
    results = pipeline.predict(inputs, top_k=args.top_k, max_answer_length=args.max_answer_length)

    packaged = [
        {
            "question": item.question,
            "answers": [asdict(answer) for answer in answers],
        }
        for item, answers in zip(inputs, results, strict=True)
    ]
    print(json.dumps(packaged, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
