"""
Tests for quality indicators and statistical summaries.
"""
import pytest

from nsgaii.analysis import StatisticalSummary, compute_confidence_interval, hypervolume


def test_hypervolume_minimize():
    """
    Tests the area of a three step staircase.
    """
    points = [(1.0, 3.0), (2.0, 2.0), (3.0, 1.0)]
    assert hypervolume(points, (4.0, 4.0), maximize=False) == pytest.approx(6.0)


def test_hypervolume_maximize_ignores_dominated_points():
    """
    Tests that dominated points and points beyond the reference add nothing.
    """
    points = [(3.0, 1.0), (2.0, 2.0), (1.0, 3.0), (1.0, 1.0), (-1.0, 5.0)]
    assert hypervolume(points, (0.0, 0.0)) == pytest.approx(6.0)


def test_hypervolume_degenerate_inputs():
    """
    Tests empty input and invalid shapes.
    """
    assert hypervolume([], (0.0, 0.0)) == 0.0
    assert hypervolume([(5.0, 5.0)], (1.0, 1.0), maximize=False) == 0.0
    with pytest.raises(ValueError):
        hypervolume([(1.0, 1.0)], (0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        hypervolume([(1.0, 1.0, 1.0)], (0.0, 0.0))


def test_hypervolume_three_objectives():
    """
    Tests the volume of two overlapping boxes in three objectives.
    """
    points = [(0.0, 1.0, 1.0), (1.0, 0.0, 1.0)]
    # 2 + 2 minus the shared unit cube
    assert hypervolume(points, (2.0, 2.0, 2.0), maximize=False) == pytest.approx(3.0)
    assert hypervolume([(1.0, 1.0, 1.0)], (0.0, 0.0, 0.0)) == pytest.approx(1.0)


def test_confidence_interval():
    """
    Tests the Student t interval around the mean.
    """
    mean, lower, upper = compute_confidence_interval([1.0, 2.0, 3.0])
    assert mean == pytest.approx(2.0)
    assert lower < mean < upper
    assert mean - lower == pytest.approx(upper - mean)

    assert compute_confidence_interval([4.0]) == (4.0, 4.0, 4.0)
    assert compute_confidence_interval([]) == (0.0, 0.0, 0.0)

    # integer input still gives floats
    single = compute_confidence_interval([4])
    assert all(isinstance(value, float) for value in single)
    assert all(isinstance(value, float) for value in compute_confidence_interval([1, 2, 5]))


def test_statistical_summary():
    """
    Tests the computed statistics and their text rendering.
    """
    summary = StatisticalSummary([1.0, 2.0, 3.0, 4.0], "Hypervolume")
    stats = summary.compute()

    assert stats["n"] == 4
    assert stats["mean"] == pytest.approx(2.5)
    assert stats["min"] == 1.0
    assert stats["max"] == 4.0
    assert stats["median"] == pytest.approx(2.5)
    assert stats["ci_95_lower"] < 2.5 < stats["ci_95_upper"]

    text = summary.format_summary()
    assert "=== Hypervolume ===" in text
    assert "Mean:   2.5000" in text


def test_statistical_summary_empty():
    """
    Tests that an empty metric is reported as such.
    """
    summary = StatisticalSummary([], "Hall of fame size")
    assert summary.compute() == {"metric": "Hall of fame size", "n": 0}
    assert "No data available" in summary.format_summary()
