import numpy
import pytest

from fuzzyspline import fuzzy
from fuzzyspline.curve import geometry
from fuzzyspline.curve import interpolate
from fuzzyspline.curve import spline


def _stroke(num=101):
    times = numpy.linspace(0, 1, num)
    positions = numpy.column_stack([times, numpy.zeros_like(times), numpy.zeros_like(times)])
    return geometry.make_points(positions, times)


def test_fuzzy_spline_from_points():
    fsc = fuzzy.fuzzy_spline_from_points(_stroke(), rng=0)
    assert fsc.degree == 3
    assert fsc.range == (0, 1)
    assert len(fsc.knots) == len(fsc.control_points) + 2
    assert (fsc.fuzziness >= 0).all()
    points = spline.evaluate(fsc, [0, 0.5, 1])
    numpy.testing.assert_allclose(points[:, :2], [[0, 0], [0.5, 0], [1, 0]], atol=0.01)
    assert (points[:, geometry.F] >= 0).all()


def test_fuzziness_follows_speed():
    parameters = fuzzy.FuzzySplineParameters(jitter=0)
    fsc = fuzzy.fuzzy_spline_from_points(_stroke(), parameters)
    fuzziness = spline.evaluate(fsc, 0.5)[0, geometry.F]
    assert fuzziness == pytest.approx(parameters.velocity_coeff, rel=0.1)


def test_fuzzy_spline_is_reproducible():
    a = fuzzy.fuzzy_spline_from_points(_stroke(), rng=1)
    b = fuzzy.fuzzy_spline_from_points(_stroke(), rng=numpy.random.default_rng(1))
    numpy.testing.assert_array_equal(a.control_points, b.control_points)
    numpy.testing.assert_array_equal(a.fuzziness, b.fuzziness)
    c = fuzzy.fuzzy_spline_from_points(_stroke(), rng=2)
    assert not numpy.array_equal(a.control_points, c.control_points)


def test_fuzzy_spline_rejects_unordered_points():
    points = _stroke()
    points[[3, 4]] = points[[4, 3]]
    with pytest.raises(ValueError):
        fuzzy.fuzzy_spline_from_points(points, rng=0)


@pytest.mark.parametrize('changes', [
    dict(knot_interval=-1),
    dict(max_span=0),
    dict(resolution=numpy.nan),
    dict(jitter=-0.1),
    dict(velocity_coeff=-1),
    dict(degree=2),
])
def test_validate_parameters(changes):
    with pytest.raises(ValueError):
        fuzzy.validate_parameters(fuzzy.FuzzySplineParameters(**changes))


def _line_spline():
    times = numpy.linspace(0, 1, 50)
    positions = numpy.column_stack([2 * times, times, numpy.zeros_like(times)])
    return interpolate.fit_spline(geometry.make_points(positions, times), 3, 0.2)


def test_fuzzy_spline_from_observations():
    s = _line_spline()
    observations = spline.evaluate(s, numpy.linspace(0, 1, 50))
    observations[:, geometry.F] = 0.3
    fsc = fuzzy.fuzzy_spline_from_observations(s, observations)
    numpy.testing.assert_allclose(fsc.fuzziness, 0.3, atol=1e-6)
    numpy.testing.assert_array_equal(fsc.control_points, s.control_points)
    assert fsc.range == s.range


def test_add_fuzziness():
    s = spline.part(_line_spline(), (0.25, 0.75))
    fsc = fuzzy.add_fuzziness(s, 0.1, 1)
    assert fsc.range == (0.25, 0.75)
    speed = numpy.sqrt(5)
    numpy.testing.assert_allclose(spline.evaluate(fsc, [0.25, 0.5, 0.75])[:, geometry.F], 0.1 * speed, atol=1e-5)


def test_add_fuzziness_rejects_invalid():
    s = _line_spline()
    with pytest.raises(ValueError):
        fuzzy.add_fuzziness(s, -1, 0)
    with pytest.raises(ValueError):
        fuzzy.add_fuzziness(s, 0.1, 0, resolution=0)
    times = numpy.linspace(0, 1, 20)
    quadratic = interpolate.fit_spline(geometry.make_points(numpy.column_stack([times] * 3), times), 2, 0.25)
    with pytest.raises(ValueError):
        fuzzy.add_fuzziness(quadratic, 0.1, 0)
