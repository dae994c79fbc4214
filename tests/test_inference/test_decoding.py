import pytest
import torch

from distilqa.errors import ConfigError
from distilqa.inference.decoding import decode_spans


def _mask(length, context):
    mask = torch.zeros(length, dtype=torch.bool)
    mask[list(context)] = True
    return mask


def test_best_span_under_probability_scoring():
    start = torch.tensor([0.0, 0.0, 5.0, 0.0, 0.0, 0.0])
    end = torch.tensor([0.0, 0.0, 0.0, 0.0, 5.0, 0.0])
    spans = decode_spans(start, end, _mask(6, range(1, 5)), top_k=1, max_answer_length=10)
    assert [(s.start, s.end) for s in spans] == [(2, 4)]
    assert 0.0 < spans[0].score <= 1.0


def test_probability_scores_are_products_of_softmaxes():
    start = torch.tensor([1.0, 2.0, 3.0])
    end = torch.tensor([3.0, 2.0, 1.0])
    spans = decode_spans(start, end, _mask(3, range(3)), top_k=10, max_answer_length=3)
    p_start = torch.softmax(start, -1)
    p_end = torch.softmax(end, -1)
    for span in spans:
        expected = (p_start[span.start] * p_end[span.end]).item()
        assert span.score == pytest.approx(expected, rel=1e-6)


def test_max_answer_length_is_respected():
    start = torch.tensor([9.0, 0.0, 0.0, 0.0, 0.0])
    end = torch.tensor([0.0, 0.0, 0.0, 0.0, 9.0])
    spans = decode_spans(start, end, _mask(5, range(5)), top_k=20, max_answer_length=2)
    assert spans
    assert all(0 <= s.end - s.start < 2 for s in spans)


def test_spans_outside_context_are_excluded():
    start = torch.tensor([10.0, 0.0, 0.0, 10.0])
    end = torch.tensor([10.0, 0.0, 0.0, 10.0])
    spans = decode_spans(
        start, end, _mask(4, [1, 2]), top_k=10, max_answer_length=4, scoring="logit_sum"
    )
    assert {(s.start, s.end) for s in spans} == {(1, 1), (1, 2), (2, 2)}


def test_ties_prefer_smaller_start_then_shorter_span():
    zeros = torch.zeros(4)
    spans = decode_spans(
        zeros, zeros, _mask(4, range(4)), top_k=4, max_answer_length=2, scoring="logit_sum"
    )
    assert [(s.start, s.end) for s in spans] == [(0, 0), (0, 1), (1, 1), (1, 2)]


def test_top_k_bounded_by_valid_candidates():
    logits = torch.randn(6)
    spans = decode_spans(logits, logits, _mask(6, [2, 3]), top_k=50, max_answer_length=5)
    assert len(spans) == 3


def test_results_sorted_by_descending_score():
    torch.manual_seed(0)
    spans = decode_spans(
        torch.randn(12), torch.randn(12), _mask(12, range(3, 11)), top_k=15, max_answer_length=4
    )
    scores = [s.score for s in spans]
    assert len(spans) == 15
    assert scores == sorted(scores, reverse=True)


def test_logit_sum_policy():
    start = torch.tensor([0.0, 1.0, 4.0])
    end = torch.tensor([0.0, 3.0, 2.0])
    spans = decode_spans(
        start, end, _mask(3, range(3)), top_k=1, max_answer_length=3, scoring="logit_sum"
    )
    assert (spans[0].start, spans[0].end, spans[0].score) == (2, 2, 6.0)


def test_no_context_tokens():
    logits = torch.randn(5)
    assert decode_spans(logits, logits, _mask(5, []), top_k=3, max_answer_length=3) == []


def test_unknown_policy():
    logits = torch.randn(5)
    with pytest.raises(ConfigError):
        decode_spans(logits, logits, _mask(5, [1]), top_k=1, max_answer_length=1, scoring="max")
