import numpy

from . import geometry
from . import spline as spline_ops

def sample_count(time_range, resolution=0.01):
    """Number of evenly-spaced samples needed to cover a range at the given
    resolution (at least 2)."""
    return max(int(numpy.ceil(geometry.range_length(time_range) / resolution)), 2)

def get_points(spline, num_points=None, derivative=0):
    """Evaluate a spline (or its derivative) at evenly-spaced times across its range.

    Parameters:
        spline: SplineCurve
        num_points: number of equally-spaced points to evaluate at, or None,
            which uses one point per 0.01 time units (at least 2).
        derivative: order of the derivative to evaluate. Must be less than the
            spline degree.

    Returns: point series of shape (num_points, 5).
    """
    if num_points is None:
        num_points = sample_count(spline.range)
    for _ in range(derivative):
        spline = spline_ops.differentiate(spline)
    times = numpy.linspace(spline.range.start, spline.range.end, num_points)
    return spline_ops.evaluate(spline, times)

def arc_length(spline, num_points=None):
    """Approximate the arc-length of spline by evaluating it at num_points
    positions and calculating the length of the resulting polyline.
    If num_points is None, try to guess a sane default."""
    points = get_points(spline, num_points)
    return geometry.cumulative_distances(points[:, :3], unit=False)[-1]

def speeds(spline, num_points=None):
    """Return (times, velocity magnitudes, acceleration magnitudes) at
    evenly-spaced times across the spline's range. The spline must be at
    least of degree 3 so that the acceleration is itself a spline."""
    if spline.degree < 3:
        raise ValueError('Velocity and acceleration need a spline of degree >= 3.')
    if num_points is None:
        num_points = sample_count(spline.range)
    velocity = spline_ops.differentiate(spline)
    acceleration = spline_ops.differentiate(velocity)
    times = numpy.linspace(spline.range.start, spline.range.end, num_points)
    v = geometry.norms(spline_ops.evaluate(velocity, times)[:, :3])
    a = geometry.norms(spline_ops.evaluate(acceleration, times)[:, :3])
    return times, v, a
