import warnings

import numpy
import scipy.linalg

from . import basis
from . import geometry
from . import spline
from .. import nnls

def fit_control_points(weight_matrix, values):
    """Solve the normal equations (B^T B) X = B^T Y for control points X.

    Parameters:
    weight_matrix: basis matrix B of shape (n, m): one row per sample, one
        column per control point.
    values: sample values Y of shape (n, k) (e.g. k=3 for x,y,z); all k columns
        are solved together.

    Returns X of shape (m, k). When n == m and B is non-singular the result
    interpolates the samples exactly; when n > m it is the least-squares fit.

    Raises scipy.linalg.LinAlgError if B^T B is singular or too badly
    conditioned to solve (e.g. too few samples with distinct parameters)."""
    weight_matrix = numpy.asarray(weight_matrix, dtype=float)
    values = numpy.asarray(values, dtype=float)
    if weight_matrix.shape[0] != values.shape[0]:
        raise ValueError('Basis matrix and values must have the same number of rows.')
    Bt = weight_matrix.T
    normal = Bt @ weight_matrix
    rhs = Bt @ values
    with warnings.catch_warnings():
        warnings.simplefilter('error', scipy.linalg.LinAlgWarning)
        try:
            return scipy.linalg.solve(normal, rhs, assume_a='sym')
        except (scipy.linalg.LinAlgError, scipy.linalg.LinAlgWarning) as e:
            raise scipy.linalg.LinAlgError('Normal equations are singular: {}'.format(e)) from e

def fit_bezier(points, degree):
    """Fit a Bezier curve of a given degree to a point series by least squares.

    Parameters:
    points: point series of shape (n, 4) or (n, 5). Each point's time, scaled
        so the earliest time maps to 0 and the latest to 1, is its curve
        parameter.
    degree: Bezier degree, >= 1. At least degree+1 points are required.

    Returns control points of shape (degree+1, 3)."""
    if degree < 1:
        raise ValueError('Degree must be at least 1.')
    points = geometry.as_points(points)
    if len(points) < degree + 1:
        raise ValueError('At least {} points are needed for a degree-{} Bezier fit.'.format(degree + 1, degree))
    parameters = basis.normalized_times(points[:, geometry.T])
    weight_matrix = basis.bezier_basis_matrix(parameters, degree)
    return fit_control_points(weight_matrix, points[:, :3])

def evaluate_bezier(control_points, parameters, fuzziness=None):
    """Evaluate a Bezier curve at any parameters, including outside [0, 1].

    Parameters:
    control_points: array of shape (degree+1, 3)
    parameters: scalar or array of n parameter values
    fuzziness: optional array of degree+1 control-point fuzziness values.

    Returns a point series of shape (n, 5) whose time column holds the
    parameters. Fuzziness is blended with absolute weights, so it never
    turns negative when extrapolating."""
    control_points = numpy.asarray(control_points, dtype=float)
    degree = len(control_points) - 1
    parameters = numpy.atleast_1d(numpy.asarray(parameters, dtype=float))
    out = numpy.zeros((len(parameters), 5))
    out[:, :3] = basis.bezier_basis_matrix(parameters, degree) @ control_points
    out[:, geometry.T] = parameters
    if fuzziness is not None:
        out[:, geometry.F] = basis.absolute_bernstein_weights(parameters, degree) @ numpy.asarray(fuzziness, dtype=float)
    return out

def fit_spline(points, degree, knot_interval):
    """Fit a B-spline to a time-stamped point series by least squares.

    Parameters:
    points: point series of shape (n, 4) or (n, 5), with strictly increasing
        times.
    degree: spline degree, >= 1.
    knot_interval: maximum spacing between knots; the knots are spread
        uniformly across the time range of the points.

    Returns a SplineCurve valid over the time range of the points. If any
    input point has non-zero fuzziness, the control-point fuzziness is fit to
    the point fuzziness by non-negative least squares; otherwise it is zero.

    Note: at least degree+1 points spread over distinct knot intervals are
    needed for the fit to be well-posed; otherwise LinAlgError is raised."""
    if degree < 1:
        raise ValueError('Degree must be at least 1.')
    if numpy.isnan(knot_interval) or knot_interval <= 0:
        raise ValueError('Knot interval must be greater than 0.')
    points = geometry.as_points(points)
    if len(points) < 2:
        raise ValueError('At least 2 points are needed for a spline fit.')
    times = points[:, geometry.T]
    geometry.check_increasing(times)
    time_range = geometry.time_range(points)
    knots = basis.make_knots(time_range, degree, knot_interval)
    weight_matrix = basis.bspline_basis_matrix(times, degree, knots)
    control_points = fit_control_points(weight_matrix, points[:, :3])
    fuzziness = None
    observed = points[:, geometry.F]
    if (observed > 0).any():
        fuzziness = nnls.nnls(weight_matrix, observed)
    return spline.make_spline(degree, knots, control_points, fuzziness, time_range)
