from distilqa.inference.decoding import SpanCandidate
from distilqa.inference.postprocessing import Answer, aggregate_answers, spans_to_answers

CONTEXT = "Amy lives in Amsterdam"
OFFSETS = [(0, 0), (0, 3), (4, 9), (10, 12), (13, 22), (0, 0)]


def test_spans_to_answers_uses_character_offsets():
    answers = spans_to_answers(
        [SpanCandidate(4, 4, 0.9), SpanCandidate(2, 4, 0.1)], OFFSETS, CONTEXT
    )
    assert answers == [
        Answer(score=0.9, start=13, end=22, answer="Amsterdam"),
        Answer(score=0.1, start=4, end=22, answer="lives in Amsterdam"),
    ]


def test_aggregate_is_index_aligned():
    per_feature = [
        (2, [Answer(0.5, 0, 3, "Amy")]),
        (0, [Answer(0.7, 13, 22, "Amsterdam")]),
    ]
    grouped = aggregate_answers(4, per_feature, top_k=1)
    assert len(grouped) == 4
    assert grouped[0][0].answer == "Amsterdam"
    assert grouped[1] == []
    assert grouped[2][0].answer == "Amy"
    assert grouped[3] == []


def test_aggregate_merges_windows_and_keeps_best_duplicate():
    per_feature = [
        (0, [Answer(0.4, 13, 22, "Amsterdam"), Answer(0.3, 0, 3, "Amy")]),
        (0, [Answer(0.8, 13, 22, "Amsterdam"), Answer(0.1, 4, 9, "lives")]),
    ]
    (answers,) = aggregate_answers(1, per_feature, top_k=5)
    assert [(a.answer, a.score) for a in answers] == [
        ("Amsterdam", 0.8),
        ("Amy", 0.3),
        ("lives", 0.1),
    ]


def test_aggregate_truncates_and_breaks_ties():
    per_feature = [
        (0, [Answer(0.5, 4, 12, "lives in"), Answer(0.5, 4, 9, "lives"), Answer(0.5, 0, 3, "Amy")]),
    ]
    (answers,) = aggregate_answers(1, per_feature, top_k=2)
    assert [a.answer for a in answers] == ["Amy", "lives"]
