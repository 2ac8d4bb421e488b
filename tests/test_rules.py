import pytest

from falling_blocks_rl.game import ScoringRules


@pytest.mark.parametrize(
    "score,interval",
    [(0, 1000), (999, 1000), (1000, 900), (2500, 800), (9000, 100), (10000, 100), (250000, 100)],
)
def test_drop_interval(score, interval):
    assert ScoringRules().drop_interval(score) == interval


def test_drop_interval_is_monotonic_and_floored():
    rules = ScoringRules()
    intervals = [rules.drop_interval(s) for s in range(0, 20000, 100)]
    assert all(a >= b for a, b in zip(intervals, intervals[1:]))
    assert min(intervals) == 100


def test_line_scores():
    rules = ScoringRules()
    assert rules.score_for_lines(0) == 0
    assert rules.score_for_lines(1) == 100
    assert rules.score_for_lines(4) == 400
    assert rules.level(2999) == 2
