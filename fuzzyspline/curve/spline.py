import collections

import numpy

from . import basis
from . import geometry

SplineCurve = collections.namedtuple('SplineCurve', ('degree', 'knots', 'control_points', 'fuzziness', 'range'))
SplineCurve.__doc__ = """Immutable B-spline curve whose control points each carry a fuzziness value.

degree: spline degree d >= 1
knots: non-decreasing knot vector with len(control_points) + d - 1 entries
control_points: array of shape (m, 3)
fuzziness: non-negative array of shape (m,)
range: Range of valid parameter (time) values, within [knots[d-1], knots[-d]]
"""

def make_spline(degree, knots, control_points, fuzziness=None, time_range=None):
    """Construct a SplineCurve, checking its consistency.

    Parameters:
    degree: integer >= 1
    knots: knot vector of length len(control_points) + degree - 1
    control_points: array of shape (m, 3)
    fuzziness: array of m non-negative values, or None for zero fuzziness.
    time_range: Range (or (start, end) pair) of valid parameters. If None,
        the whole knot domain [knots[degree-1], knots[-degree]] is used.
    """
    degree = int(degree)
    if degree < 1:
        raise ValueError('Degree must be at least 1.')
    knots = numpy.array(knots, dtype=float)
    control_points = numpy.array(control_points, dtype=float)
    if control_points.ndim != 2 or control_points.shape[1] != 3:
        raise ValueError('Control points must be an array of shape (m, 3).')
    if len(knots) != len(control_points) + degree - 1:
        raise ValueError('Knot vector length must equal number of control points + degree - 1.')
    if not numpy.isfinite(knots).all():
        raise ValueError('Knots must be finite.')
    if (numpy.diff(knots) < 0).any():
        raise ValueError('Knots must be non-decreasing.')
    if fuzziness is None:
        fuzziness = numpy.zeros(len(control_points))
    else:
        fuzziness = numpy.array(fuzziness, dtype=float)
        if fuzziness.shape != (len(control_points),):
            raise ValueError('Fuzziness must have one value per control point.')
        if not numpy.isfinite(fuzziness).all() or (fuzziness < 0).any():
            raise ValueError('Fuzziness must be finite and non-negative.')
    spline_domain = geometry.Range(knots[degree-1], knots[-degree])
    if time_range is None:
        time_range = spline_domain
    else:
        time_range = geometry.make_range(*time_range)
        if not geometry.range_contains(spline_domain, time_range):
            raise ValueError('Range {} is not within the knot domain {}.'.format(tuple(time_range), tuple(spline_domain)))
    return SplineCurve(degree, knots, control_points, fuzziness, time_range)

def domain(spline):
    """Return the Range over which the knot vector defines the spline."""
    return geometry.Range(spline.knots[spline.degree-1], spline.knots[-spline.degree])

def basis_matrix(spline, times):
    """Return the B-spline weight matrix of the spline at the given times."""
    return basis.bspline_basis_matrix(times, spline.degree, spline.knots)

def evaluate(spline, parameters):
    """Evaluate the spline at one or more parameter values.

    Parameters outside the valid range are evaluated by extending the first or
    last polynomial span.

    Returns a point series of shape (n, 5): x, y, z, the parameter as the time
    value, and the fuzziness blended from the control-point fuzziness."""
    parameters = numpy.atleast_1d(numpy.asarray(parameters, dtype=float))
    weights = basis_matrix(spline, parameters)
    out = numpy.empty((len(parameters), 5))
    out[:, :3] = weights @ spline.control_points
    out[:, geometry.T] = parameters
    out[:, geometry.F] = numpy.abs(weights) @ spline.fuzziness
    return out

def differentiate(spline):
    """Return the derivative spline (one degree lower, same range).

    The derivative carries zero fuzziness. Raises ValueError for degree-1
    splines, whose derivative is not a spline of degree >= 1."""
    d = spline.degree
    if d == 1:
        raise ValueError('Cannot differentiate a degree-1 spline.')
    knots = spline.knots
    spans = knots[d:d+len(spline.control_points)-1] - knots[:len(spline.control_points)-1]
    with numpy.errstate(divide='ignore'):
        w = numpy.where(spans > 0, d / spans, 0)
    control_points = w[:, numpy.newaxis] * numpy.diff(spline.control_points, axis=0)
    return SplineCurve(d - 1, knots[1:-1].copy(), control_points,
        numpy.zeros(len(control_points)), spline.range)

def part(spline, sub_range):
    """Return the same spline restricted to a sub-range of its valid range."""
    sub_range = geometry.make_range(*sub_range)
    if not geometry.range_contains(spline.range, sub_range):
        raise ValueError('Range {} is out of range {}.'.format(tuple(sub_range), tuple(spline.range)))
    return spline._replace(range=sub_range)

def with_fuzziness(spline, fuzziness):
    """Return the spline with its control-point fuzziness replaced."""
    return make_spline(spline.degree, spline.knots, spline.control_points, fuzziness, spline.range)

def invert(spline):
    """Return a spline tracing the same path in the opposite direction."""
    knots = spline.knots
    first, last = knots[0], knots[-1]
    inverted_knots = last - knots[::-1] + first
    inverted_range = geometry.Range(last - spline.range.end + first, last - spline.range.start + first)
    return SplineCurve(spline.degree, inverted_knots, spline.control_points[::-1].copy(),
        spline.fuzziness[::-1].copy(), inverted_range)

def insert_knot(spline, t):
    """Insert a knot at parameter t (Boehm's algorithm), returning an
    equivalent spline with one more control point.

    If the knot already has multiplicity equal to the degree, the spline is
    returned unchanged. Raises ValueError if t is outside the knot domain."""
    d = spline.degree
    knots = spline.knots
    if not geometry.range_contains(domain(spline), t):
        raise ValueError('Parameter {} is outside the knot domain.'.format(t))
    if (knots == t).sum() >= d:
        return spline
    n = min(int(numpy.searchsorted(knots, t, side='right')), len(knots) - d)
    new_knots = numpy.insert(knots, n, t)
    old = numpy.column_stack([spline.control_points, spline.fuzziness])
    new = numpy.empty((len(old) + 1, 4))
    new[:n-d+1] = old[:n-d+1]
    for k in range(n-d+1, n+1):
        right = new_knots[k+d] - t
        left = t - new_knots[k-1]
        new[k] = (right * old[k-1] + left * old[k]) / (right + left)
    new[n+1:] = old[n:]
    return SplineCurve(d, new_knots, new[:, :3], numpy.maximum(new[:, 3], 0), spline.range)

def insert_control_points(spline, num_points):
    """Return an equivalent spline with knots inserted, each in the middle of the
    currently widest knot interval, until it has num_points control points."""
    while len(spline.control_points) < num_points:
        knots = spline.knots
        d = spline.degree
        inner = knots[d-1:len(knots)-d+1]
        p = numpy.diff(inner).argmax()
        spline = insert_knot(spline, inner[p:p+2].mean())
    return spline
