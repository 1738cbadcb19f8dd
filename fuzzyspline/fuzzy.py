"""Construction of fuzzy spline curves (FSCs) from hand-drawn strokes.

An FSC is a spline whose control points each carry a non-negative fuzziness:
how uncertain the drawn position is near that control point. Fuzziness is
taken to grow with drawing speed and acceleration; per-sample values are
fit to the control points by non-negative least squares.
"""

import collections
import logging

import numpy

from . import nnls
from .curve import condition
from .curve import geometry
from .curve import interpolate
from .curve import spline as spline_ops
from .curve import spline_geometry

logger = logging.getLogger(__name__)

FuzzySplineParameters = collections.namedtuple('FuzzySplineParameters',
    ('extrapolation_length', 'extrapolation_interval', 'max_span', 'knot_interval',
     'velocity_coeff', 'acceleration_coeff', 'jitter', 'resolution', 'degree'),
    defaults=(0.1, 0.01, 0.01, 0.05, 0.02, 0.0005, 0.001, 0.01, 3))
FuzzySplineParameters.__doc__ = """Settings for fuzzy_spline_from_points().

extrapolation_length: time added before and after the stroke (order-2
    extrapolation) to keep the fit well-behaved at the ends.
extrapolation_interval: time step of the extrapolated points.
max_span: largest time gap allowed between successive samples.
knot_interval: maximum knot spacing of the fitted spline.
velocity_coeff, acceleration_coeff: fuzziness per unit speed and per unit
    acceleration magnitude.
jitter: amplitude of the uniform x/y noise added before fitting, which
    keeps coincident samples from making the fit degenerate.
resolution: time step at which fuzziness is observed along the spline.
degree: spline degree (>= 3, so the acceleration is a spline).
"""

def validate_parameters(parameters):
    """Raise ValueError if any FuzzySplineParameters value is unusable."""
    positive = ('extrapolation_length', 'extrapolation_interval', 'max_span', 'knot_interval', 'resolution')
    for name in positive:
        value = getattr(parameters, name)
        if numpy.isnan(value) or value <= 0:
            raise ValueError('{} must be greater than 0 (got {}).'.format(name, value))
    for name in ('velocity_coeff', 'acceleration_coeff', 'jitter'):
        value = getattr(parameters, name)
        if numpy.isnan(value) or value < 0:
            raise ValueError('{} must be non-negative (got {}).'.format(name, value))
    if parameters.degree < 3:
        raise ValueError('degree must be at least 3 (got {}).'.format(parameters.degree))

def fuzzy_spline_from_points(points, parameters=None, rng=None):
    """Fit a fuzzy spline curve to a time-stamped stroke.

    The points are jittered, extended at both ends (order-2 extrapolation),
    gap-filled, and fit with a spline; fuzziness is then derived from the
    spline's velocity and acceleration (see add_fuzziness) and the result is
    restricted to the time range of the input points.

    Parameters:
    points: point series of shape (n, 4) or (n, 5), strictly increasing in time.
    parameters: FuzzySplineParameters, or None for the defaults.
    rng: numpy.random.Generator or seed used for the jitter. The output is
        reproducible only if a Generator or seed is supplied.

    Returns a SplineCurve with per-control-point fuzziness.
    """
    if parameters is None:
        parameters = FuzzySplineParameters()
    validate_parameters(parameters)
    points = geometry.as_points(points)
    geometry.check_increasing(points[:, geometry.T])
    stroke_range = geometry.time_range(points)

    jittered = geometry.jitter_points(points, parameters.jitter, rng)
    fixed = condition.extrapolate(jittered, parameters.extrapolation_length,
        parameters.extrapolation_interval, order=2)
    fixed = condition.interpolate_gaps(fixed, parameters.max_span)
    if len(fixed) < parameters.degree + 1:
        raise ValueError('At least {} conditioned points are needed, got {}.'.format(parameters.degree + 1, len(fixed)))
    logger.debug('conditioned %d points to %d', len(points), len(fixed))

    spline = interpolate.fit_spline(fixed, parameters.degree, parameters.knot_interval)
    fsc = add_fuzziness(spline, parameters.velocity_coeff, parameters.acceleration_coeff, parameters.resolution)
    return spline_ops.part(fsc, stroke_range)

def add_fuzziness(spline, velocity_coeff, acceleration_coeff, resolution=0.01):
    """Return the spline with fuzziness derived from its own motion.

    The spline is sampled every `resolution` time units across its whole knot
    domain, each sample is given fuzziness
        velocity_coeff * |velocity| + acceleration_coeff * |acceleration|,
    and the control-point fuzziness is fit to those samples by non-negative
    least squares. The returned spline keeps the input's range.
    """
    if spline.degree < 3:
        raise ValueError('Velocity and acceleration need a spline of degree >= 3.')
    for name, value in (('velocity_coeff', velocity_coeff), ('acceleration_coeff', acceleration_coeff)):
        if numpy.isnan(value) or value < 0:
            raise ValueError('{} must be non-negative (got {}).'.format(name, value))
    if numpy.isnan(resolution) or resolution <= 0:
        raise ValueError('resolution must be greater than 0 (got {}).'.format(resolution))
    full = spline._replace(range=spline_ops.domain(spline))
    num_points = spline_geometry.sample_count(full.range, resolution)
    times, speed, acceleration = spline_geometry.speeds(full, num_points)
    observations = spline_ops.evaluate(full, times)
    observations[:, geometry.F] = velocity_coeff * speed + acceleration_coeff * acceleration
    fsc = fuzzy_spline_from_observations(full, observations)
    return spline_ops.part(fsc, spline.range)

def fuzzy_spline_from_observations(spline, observations):
    """Fit control-point fuzziness to observed fuzziness along a spline.

    Parameters:
    spline: SplineCurve whose shape is kept.
    observations: point series of shape (n, 5); only the time and fuzziness
        columns are used.

    Returns the spline with new control-point fuzziness, found by
    non-negative least squares against the spline's basis matrix at the
    observation times."""
    observations = geometry.as_points(observations)
    weight_matrix = spline_ops.basis_matrix(spline, observations[:, geometry.T])
    logger.debug('fitting fuzziness of %d control points to %d observations', *weight_matrix.shape[::-1])
    fuzziness = nnls.nnls(weight_matrix, observations[:, geometry.F])
    return spline_ops.with_fuzziness(spline, fuzziness)
