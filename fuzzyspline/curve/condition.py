"""Conditioning of time-stamped point series before spline fitting.

Least-squares splines flare out near the ends of the data, so the series are
extended past both ends (extrapolate) and long pauses in sampling are filled
with held positions (interpolate_gaps) so every knot interval gets samples.
"""

import numpy

from . import geometry
from . import interpolate

# time span at each end of a series used to fit the extrapolation guide curve
BOUNDARY_WINDOW = 0.1

# guards floor/ceil of length/interval against representation error (0.3/0.1 < 3)
_COUNT_EPSILON = 1e-9

def _check_positive(value, name):
    if numpy.isnan(value) or value <= 0:
        raise ValueError('{} must be greater than 0 (got {}).'.format(name, value))

def _floor_count(length, interval):
    return int(numpy.floor(length / interval + _COUNT_EPSILON))

def _ceil_count(length, interval):
    return int(numpy.ceil(length / interval - _COUNT_EPSILON))

def extrapolate(points, length, interval, order=2, window=BOUNDARY_WINDOW):
    """Extend a point series with synthetic points before its start and after its end.

    Parameters:
    points: point series of shape (n, 4) or (n, 5), ordered by time.
    length: time span to extend by at each end; > 0.
    interval: time step between synthetic points; > 0.
    order: 0 holds the end positions constant; 1 and 2 continue a linear or
        quadratic Bezier guide curve fit to the points within `window` time
        units of each end.
    window: time span at each end used to fit the guide curve (orders 1, 2).

    Returns a new point series of shape (n + 2*num, 5), where num is
    floor(length/interval) for orders 0 and 1 and ceil(length/interval) for
    order 2. Synthetic points have zero fuzziness and lie in
    [start-length, start) and (end, end+length].

    Note: this is not idempotent. Extrapolating an extrapolated series adds
    another layer of points at each end."""
    points = geometry.as_points(points)
    _check_positive(length, 'Extrapolation length')
    _check_positive(interval, 'Extrapolation interval')
    if order == 0:
        before, after = _extrapolate_constant(points, length, interval)
    elif order in (1, 2):
        _check_positive(window, 'Boundary window')
        if order == 1:
            num = _floor_count(length, interval)
        else:
            num = _ceil_count(length, interval)
        before, after = _extrapolate_guided(points, length, num, order, window)
    else:
        raise ValueError('Extrapolation order must be 0, 1 or 2 (got {}).'.format(order))
    return numpy.concatenate([before, points, after])

def _extrapolate_constant(points, length, interval):
    num = _floor_count(length, interval)
    steps = interval * numpy.arange(1, num + 1)
    start, end = points[0], points[-1]
    before = geometry.repeat_point(start, start[geometry.T] - steps[::-1])
    after = geometry.repeat_point(end, end[geometry.T] + steps)
    return before, after

def _extrapolate_guided(points, length, num, order, window):
    if num == 0:
        empty = numpy.zeros((0, 5))
        return empty, empty
    start = points[0, geometry.T]
    end = points[-1, geometry.T]
    steps = numpy.arange(num) / num
    # guide curves live on [0, 1]; evaluate one unit past either end
    guide = interpolate.fit_bezier(_boundary_points(points, True, order, window), order)
    u = steps - 1
    before = interpolate.evaluate_bezier(guide, u)
    before[:, geometry.T] = start + length * u
    guide = interpolate.fit_bezier(_boundary_points(points, False, order, window), order)
    u = steps + 1 + 1 / num
    after = interpolate.evaluate_bezier(guide, u)
    after[:, geometry.T] = end + length * (u - 1)
    return before, after

def _boundary_points(points, at_start, order, window):
    """Points within window of the start (or end) of the series, padded with
    copies of the innermost one to the order+1 points needed for a
    degree-order fit."""
    times = points[:, geometry.T]
    if at_start:
        start = times[0]
        selected = points[(times >= start) & (times < start + window)]
        padding = [start + window * i / order for i in range(len(selected), order + 1)]
        return numpy.concatenate([selected, geometry.repeat_point(selected[-1], padding)])
    else:
        end = times[-1]
        selected = points[(times > end - window) & (times <= end)]
        padding = [end - window * (order - i) / order for i in range(order + 1 - len(selected))]
        return numpy.concatenate([geometry.repeat_point(selected[0], padding), selected])

def interpolate_gaps(points, max_span):
    """Insert points so that no two successive times are more than max_span apart.

    Wherever the gap from the previous point exceeds max_span, copies of the
    previous point's position are inserted every max_span until the remaining
    gap is at most max_span. Gaps within floating-point tolerance of max_span
    count as satisfied, so re-running on the output changes nothing.

    Parameters:
    points: point series of shape (n, 4) or (n, 5).
    max_span: largest permitted time gap; > 0.

    Returns a new point series with at least n points. Raises ValueError if
    the times ever decrease."""
    points = geometry.as_points(points)
    _check_positive(max_span, 'Maximum span')
    fixed = [points[0]]
    previous = points[0]
    for point in points[1:]:
        time = point[geometry.T]
        if time < previous[geometry.T]:
            raise ValueError('Point times must be non-decreasing.')
        tolerance = 1e-9 * max_span + 4 * numpy.spacing(abs(time))
        while time - previous[geometry.T] - max_span > tolerance:
            previous = geometry.repeat_point(previous, [previous[geometry.T] + max_span])[0]
            fixed.append(previous)
        previous = point
        fixed.append(point)
    return numpy.array(fixed)
