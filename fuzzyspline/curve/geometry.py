import collections

import numpy

# column layout of a point series: shape (n, 5)
X, Y, Z, T, F = range(5)

Range = collections.namedtuple('Range', ('start', 'end'))

def make_range(start, end):
    """Return a Range, checking that start <= end and neither is NaN."""
    start = float(start)
    end = float(end)
    if numpy.isnan(start) or numpy.isnan(end):
        raise ValueError('Range endpoints must not be NaN.')
    if start > end:
        raise ValueError('Range start {} is after end {}.'.format(start, end))
    return Range(start, end)

def range_length(r):
    return r.end - r.start

def range_contains(r, other):
    """Return True if a value or another Range lies within r (inclusive)."""
    if isinstance(other, Range):
        return r.start <= other.start and other.end <= r.end
    return r.start <= other <= r.end

def as_points(points):
    """Validate a point series and return it as a new float array of shape (n, 5).

    Parameters:
    points: array of n points; shape (n, 4) for x,y,z,time or (n, 5) for
        x,y,z,time,fuzziness. Missing fuzziness is taken to be zero.

    Raises ValueError for empty input, non-finite positions or times, and
    non-finite or negative fuzziness."""
    points = numpy.array(points, dtype=float)
    if points.ndim != 2 or points.shape[1] not in (4, 5):
        raise ValueError('Points must be an array of shape (n, 4) or (n, 5).')
    if len(points) == 0:
        raise ValueError('Points must contain at least one point.')
    if points.shape[1] == 4:
        points = numpy.concatenate([points, numpy.zeros((len(points), 1))], axis=1)
    if not numpy.isfinite(points[:, :3]).all():
        raise ValueError('Point positions must be finite.')
    if not numpy.isfinite(points[:, T]).all():
        raise ValueError('Point times must not be NaN or infinite.')
    fuzziness = points[:, F]
    if not numpy.isfinite(fuzziness).all() or (fuzziness < 0).any():
        raise ValueError('Point fuzziness must be finite and non-negative.')
    return points

def make_points(positions, times, fuzziness=None):
    """Build a point series from positions of shape (n, 3), n times, and
    optionally n fuzziness values."""
    positions = numpy.asarray(positions, dtype=float)
    times = numpy.asarray(times, dtype=float)
    if fuzziness is None:
        fuzziness = numpy.zeros(len(times))
    return as_points(numpy.column_stack([positions, times, fuzziness]))

def time_range(points):
    return make_range(points[0, T], points[-1, T])

def check_increasing(times):
    """Raise ValueError unless times are strictly increasing."""
    if (numpy.diff(times) <= 0).any():
        raise ValueError('Point times must be strictly increasing.')

def repeat_point(point, times):
    """Return copies of a single point placed at each of the given times, with
    zero fuzziness."""
    times = numpy.asarray(times, dtype=float)
    out = numpy.zeros((len(times), 5))
    out[:, :3] = point[:3]
    out[:, T] = times
    return out

def jitter_points(points, amount, rng=None):
    """Return a copy of the points with uniform noise in [-amount, amount)
    added to the x and y coordinates.

    Parameters:
    points: point series of shape (n, 5)
    amount: maximum absolute displacement
    rng: numpy.random.Generator, or a seed for numpy.random.default_rng.
        Pass a Generator or a seed for reproducible output."""
    if numpy.isnan(amount) or amount < 0:
        raise ValueError('Jitter amount must be non-negative.')
    rng = numpy.random.default_rng(rng)
    points = numpy.array(points, dtype=float)
    points[:, [X, Y]] += rng.uniform(-amount, amount, size=(len(points), 2))
    return points

def norms(vectors):
    """Euclidean lengths of an array of vectors of shape (n, d)."""
    vectors = numpy.asarray(vectors)
    return numpy.sqrt((vectors**2).sum(axis=1))

def cumulative_distances(points, unit=True):
    """Return cumulative distances along a polyline.

    Parameters:
    points: array of shape (n,m) consisting of n points in m dimensions
    unit: if True, return distances divided by total length of the curve,
          if False, return actual arc lengths."""
    points = numpy.asarray(points)
    distances = numpy.concatenate([[0], numpy.add.accumulate(norms(points[1:] - points[:-1]))])
    if unit:
        distances /= distances[-1]
    return distances

# Weight clamp policy for the shape recognizers that fit rational arcs to FSCs.
# A rational quadratic Bezier with middle weight w represents a conic arc: an
# ellipse for |w| < 1, a parabola at |w| = 1. Weights are kept strictly inside
# (-1, 1) so the arc stays elliptic (circular for matched representative points).
MAX_ARC_WEIGHT = 0.999

def clamp_weight(weight):
    """Apply the weight clamp policy: NaN becomes 0, and the result is clipped
    to [-MAX_ARC_WEIGHT, MAX_ARC_WEIGHT]. Works on scalars and arrays."""
    weight = numpy.nan_to_num(numpy.asarray(weight, dtype=float), nan=0.0)
    weight = numpy.clip(weight, -MAX_ARC_WEIGHT, MAX_ARC_WEIGHT)
    if weight.ndim == 0:
        return float(weight)
    return weight

def arc_weight(p0, p1, p2):
    """Weight of the middle control point of a rational quadratic Bezier arc
    through three representative points (start, middle, end).

    With L the half-chord from the midpoint of p0-p2 to p2, and H the distance
    from that midpoint to p1, the weight is (L^2 - H^2) / (L^2 + H^2). If all
    three points coincide this is NaN, which the clamp policy maps to 0."""
    p0, p1, p2 = (numpy.asarray(p, dtype=float)[:3] for p in (p0, p1, p2))
    mid = (p0 + p2) / 2
    L2 = ((p2 - mid)**2).sum()
    H2 = ((p1 - mid)**2).sum()
    with numpy.errstate(invalid='ignore', divide='ignore'):
        weight = (L2 - H2) / (L2 + H2)
    return clamp_weight(weight)
