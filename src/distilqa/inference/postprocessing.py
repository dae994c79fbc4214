"""
Answer postprocessing for distilqa.

Maps token spans to character spans of the context and merges the answers of
all windows of an input into one ranked, index-aligned list per input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .decoding import SpanCandidate


@dataclass(frozen=True)
class Answer:
    """An answer span; ``answer == context[start:end]``."""

    score: float
    start: int
    end: int
    answer: str


def spans_to_answers(
    spans: Sequence[SpanCandidate],
    offsets: Sequence[Tuple[int, int]],
    context: str,
) -> List[Answer]:
    answers = []
    for span in spans:
        start = offsets[span.start][0]
        end = offsets[span.end][1]
        answers.append(Answer(score=span.score, start=start, end=end, answer=context[start:end]))
    return answers


def _rank_key(answer: Answer) -> Tuple[float, int, int]:
    return (-answer.score, answer.start, answer.end - answer.start)


def aggregate_answers(
    num_inputs: int,
    per_feature: Iterable[Tuple[int, Sequence[Answer]]],
    top_k: int,
) -> List[List[Answer]]:
    """
    Group answers by input index.

    Returns ``num_inputs`` lists; inputs without answers get ``[]``. A
    character span found by several overlapping windows is kept once, with
    its best score.
    """
    buckets: List[Dict[Tuple[int, int], Answer]] = [{} for _ in range(num_inputs)]
    for example_index, answers in per_feature:
        bucket = buckets[example_index]
        for answer in answers:
            key = (answer.start, answer.end)
            if key not in bucket or answer.score > bucket[key].score:
                bucket[key] = answer

    return [sorted(bucket.values(), key=_rank_key)[:top_k] for bucket in buckets]
