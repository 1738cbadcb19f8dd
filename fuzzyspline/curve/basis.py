import numpy

def _blend(left, right, degree):
    """De Casteljau blending of one-hot coefficient vectors.

    For each parameter, start with the identity (one one-hot vector per
    basis function) and repeatedly replace each coefficient k with
    left*c[k] + right*c[k+1]. After degree passes, c[0] of the i-th vector
    is the weight of control point i."""
    left = numpy.asarray(left, dtype=float)[:, numpy.newaxis, numpy.newaxis]
    right = numpy.asarray(right, dtype=float)[:, numpy.newaxis, numpy.newaxis]
    coefficients = numpy.tile(numpy.eye(degree + 1), (len(left), 1, 1))
    for j in range(degree):
        n = degree - j
        coefficients[:, :, :n] = left * coefficients[:, :, :n] + right * coefficients[:, :, 1:n+1]
    return coefficients[:, :, 0]

def bernstein_weights(t, degree):
    """Return Bernstein basis weights of the given degree at parameter(s) t.

    Parameters:
    t: scalar or array of n parameters. Values outside [0, 1] extrapolate the
        Bezier polynomial.
    degree: Bezier degree, >= 1.

    Returns an array of shape (n, degree+1) (or (degree+1,) for scalar t)."""
    if degree < 1:
        raise ValueError('Degree must be at least 1.')
    scalar = numpy.ndim(t) == 0
    t = numpy.atleast_1d(numpy.asarray(t, dtype=float))
    weights = _blend(1 - t, t, degree)
    return weights[0] if scalar else weights

def absolute_bernstein_weights(t, degree):
    """Bernstein weights computed with |1-t| and |t| as blend factors.

    Used to carry fuzziness through an evaluation: inside [0, 1] these equal
    the ordinary weights, outside it they keep fuzziness from cancelling."""
    if degree < 1:
        raise ValueError('Degree must be at least 1.')
    scalar = numpy.ndim(t) == 0
    t = numpy.atleast_1d(numpy.asarray(t, dtype=float))
    weights = _blend(numpy.abs(1 - t), numpy.abs(t), degree)
    return weights[0] if scalar else weights

def bezier_basis_matrix(parameters, degree):
    """Return the (n, degree+1) Bernstein weight matrix for n parameters."""
    return bernstein_weights(numpy.atleast_1d(parameters), degree)

def normalized_times(times):
    """Map times linearly so that the earliest is 0 and the latest is 1."""
    times = numpy.asarray(times, dtype=float)
    start, end = times.min(), times.max()
    if end == start:
        raise ValueError('Cannot normalize times spanning zero length.')
    return (times - start) / (end - start)

def make_knots(time_range, degree, knot_interval):
    """Construct a uniform knot vector for a spline over the given time range.

    The range is split into ceil(length / knot_interval) equal intervals, and
    the knot vector is extended by degree-1 further knots on each side with
    the same spacing, so that the valid domain of the resulting spline,
    [knots[degree-1], knots[-degree]], is exactly the time range.

    Returns an array of ceil(length / knot_interval) + 2*degree - 1 knots."""
    if degree < 1:
        raise ValueError('Degree must be at least 1.')
    if numpy.isnan(knot_interval) or knot_interval <= 0:
        raise ValueError('Knot interval must be greater than 0.')
    start, end = time_range
    intervals = int(numpy.ceil((end - start) / knot_interval))
    if intervals < 1:
        raise ValueError('Time range must have non-zero length.')
    w = (numpy.arange(intervals + 2*degree - 1) - degree + 1) / intervals
    return (1 - w) * start + w * end

def find_span(knots, degree, t):
    """Return the index s of the knot span containing t: knots[s-1] < t <= knots[s],
    clamped to [degree, len(knots) - degree] so that parameters outside the
    valid domain use the first or last span. Zero-length spans (repeated
    knots at either end of the domain) are skipped, so t equal to a repeated
    boundary knot falls in the adjacent non-empty span."""
    end = len(knots) - degree
    # first index in [degree, end) whose knot is >= t, else end
    span = int(min(degree + numpy.searchsorted(knots[degree:end], t, side='left'), end))
    while span < end and knots[span] == knots[span-1]:
        span += 1
    while span > degree and knots[span] == knots[span-1]:
        span -= 1
    return span

def bspline_weights(knots, degree, t):
    """Return the row of B-spline basis weights at parameter t by the
    Cox-de Boor recursion.

    Parameters:
    knots: non-decreasing knot vector; the spline has len(knots)-degree+1
        control points.
    degree: spline degree, >= 1.
    t: scalar parameter.

    Returns an array of len(knots)-degree+1 weights, whose only non-zero
    entries are the degree+1 contiguous ones starting at find_span()-degree."""
    knots = numpy.asarray(knots, dtype=float)
    if degree < 1:
        raise ValueError('Degree must be at least 1.')
    if len(knots) < 2*degree:
        raise ValueError('Knot vector too short for degree {}.'.format(degree))
    span = find_span(knots, degree, t)
    part = [1.0]
    for i in range(1, degree + 1):
        now = [0.0] * (i + 1)
        for j in range(i + 1):
            base = span + j - 1
            value = 0.0
            if j != 0:
                lo = knots[base - i]
                denominator = knots[base] - lo
                if denominator != 0:
                    value += (t - lo) * part[j-1] / denominator
            if j != i:
                hi = knots[base + 1]
                denominator = hi - knots[base + 1 - i]
                if denominator != 0:
                    value += (hi - t) * part[j] / denominator
            now[j] = value
        part = now
    weights = numpy.zeros(len(knots) - degree + 1)
    weights[span - degree:span + 1] = part
    return weights

def bspline_basis_matrix(times, degree, knots):
    """Return the (n, m) B-spline weight matrix: one row per time, one column
    per control point."""
    times = numpy.atleast_1d(numpy.asarray(times, dtype=float))
    rows = [bspline_weights(knots, degree, t) for t in times]
    return numpy.array(rows).reshape(len(times), len(knots) - degree + 1)
