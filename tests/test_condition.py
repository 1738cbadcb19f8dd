import numpy
import pytest

from fuzzyspline.curve import condition
from fuzzyspline.curve import geometry


def _line(num=101):
    times = numpy.linspace(0, 1, num)
    positions = numpy.column_stack([times, numpy.zeros_like(times), numpy.zeros_like(times)])
    return geometry.make_points(positions, times)


def test_extrapolate_constant():
    points = [[1, 2, 3, 0, 0.2]]
    extended = condition.extrapolate(points, 0.3, 0.1, order=0)
    assert extended.shape == (7, 5)
    numpy.testing.assert_allclose(extended[:, geometry.T], [-0.3, -0.2, -0.1, 0, 0.1, 0.2, 0.3])
    numpy.testing.assert_array_equal(extended[:, :3], [[1, 2, 3]] * 7)
    numpy.testing.assert_array_equal(extended[:, geometry.F], [0, 0, 0, 0.2, 0, 0, 0])


def test_extrapolate_is_not_idempotent():
    once = condition.extrapolate([[1, 2, 3, 0]], 0.3, 0.1, order=0)
    twice = condition.extrapolate(once, 0.3, 0.1, order=0)
    assert len(twice) == 13
    numpy.testing.assert_allclose(twice[[0, -1], geometry.T], [-0.6, 0.6])


@pytest.mark.parametrize('order, expected', [(0, 3), (1, 3), (2, 4)])
def test_extrapolate_counts(order, expected):
    points = _line()
    extended = condition.extrapolate(points, 0.1, 0.03, order=order)
    assert len(extended) == len(points) + 2 * expected
    numpy.testing.assert_array_equal(extended[expected:-expected], points)


@pytest.mark.parametrize('order', [1, 2])
def test_extrapolate_guided_line(order):
    points = _line()
    extended = condition.extrapolate(points, 0.1, 0.01, order=order)
    assert len(extended) == len(points) + 20
    geometry.check_increasing(extended[:, geometry.T])
    before, after = extended[:10], extended[-10:]
    assert (before[:, geometry.T] >= -0.1 - 1e-12).all()
    assert (before[:, geometry.T] < 0).all()
    assert (after[:, geometry.T] > 1).all()
    assert (after[:, geometry.T] <= 1.1 + 1e-12).all()
    # the continuation of a straight stroke stays on its line
    numpy.testing.assert_allclose(extended[:, 1:3], 0, atol=1e-9)
    assert (before[:, 0] < 0).all()
    assert (numpy.diff(before[:, 0]) > 0).all()
    assert (after[:, 0] > 1).all()
    assert (numpy.diff(after[:, 0]) > 0).all()
    numpy.testing.assert_array_equal(extended[:, geometry.F], 0)


def test_extrapolate_single_point_is_padded():
    extended = condition.extrapolate([[1, 2, 3, 5]], 0.1, 0.01, order=2)
    assert len(extended) == 21
    geometry.check_increasing(extended[:, geometry.T])
    numpy.testing.assert_allclose(extended[:, :3], [[1, 2, 3]] * 21, atol=1e-9)


@pytest.mark.parametrize('args, kws', [
    (([[0, 0, 0, 0]], 0.1, 0.01), dict(order=3)),
    (([[0, 0, 0, 0]], 0, 0.01), {}),
    (([[0, 0, 0, 0]], 0.1, numpy.nan), {}),
    (([], 0.1, 0.01), {}),
])
def test_extrapolate_rejects_invalid(args, kws):
    with pytest.raises(ValueError):
        condition.extrapolate(*args, **kws)


def test_interpolate_gaps():
    points = [[1, 1, 0, 0, 0.5], [2, 2, 0, 0.35, 0.5]]
    filled = condition.interpolate_gaps(points, 0.1)
    numpy.testing.assert_allclose(filled[:, geometry.T], [0, 0.1, 0.2, 0.3, 0.35])
    numpy.testing.assert_array_equal(filled[1:4, :3], [[1, 1, 0]] * 3)
    numpy.testing.assert_array_equal(filled[1:4, geometry.F], 0)
    numpy.testing.assert_array_equal(filled[[0, -1]], geometry.as_points(points))


def test_interpolate_gaps_exact_multiple():
    filled = condition.interpolate_gaps([[0, 0, 0, 0], [1, 0, 0, 0.3]], 0.1)
    numpy.testing.assert_allclose(filled[:, geometry.T], [0, 0.1, 0.2, 0.3])


def test_interpolate_gaps_noop():
    points = _line(11)
    numpy.testing.assert_array_equal(condition.interpolate_gaps(points, 0.1), points)


def test_interpolate_gaps_idempotent():
    rng = numpy.random.default_rng(0)
    times = numpy.cumsum(rng.uniform(0, 0.5, 20))
    points = geometry.make_points(rng.normal(size=(20, 3)), times)
    once = condition.interpolate_gaps(points, 0.1)
    assert len(once) > len(points)
    assert (numpy.diff(once[:, geometry.T]) <= 0.1 + 1e-9).all()
    numpy.testing.assert_array_equal(condition.interpolate_gaps(once, 0.1), once)


def test_interpolate_gaps_rejects_decreasing_times():
    with pytest.raises(ValueError):
        condition.interpolate_gaps([[0, 0, 0, 1], [0, 0, 0, 0]], 0.1)
    with pytest.raises(ValueError):
        condition.interpolate_gaps([[0, 0, 0, 0]], 0)
