"""Non-negative least squares by a projected quasi-Newton method.

Solves min ||Bx - y||^2 subject to x >= 0 with PQN-LBFGS: a limited-memory
BFGS direction restricted to the free variables, and a backtracking line
search along the projection arc (Armijo rule). See Kim, Sra & Dhillon,
"Tackling box-constrained optimization via a new projected quasi-Newton
approach", SIAM J. Sci. Comput. 32 (2010).
"""

import collections
import logging
import warnings

import numpy
import scipy.linalg

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 1000
HISTORY_SIZE = 7
TOLERANCE = 1e-14

# line search: step ratio shrink factor in (0, 1) and sufficient-decrease slope in (0, 0.5)
STEP_SHRINK = 0.5
ARMIJO_SLOPE = 0.25

CurvaturePair = collections.namedtuple('CurvaturePair', ('step', 'grad_change', 'curvature'))

class ConvergenceWarning(RuntimeWarning):
    pass

def nnls(weight_matrix, observations, max_iterations=MAX_ITERATIONS, history_size=HISTORY_SIZE, tolerance=TOLERANCE):
    """Find x >= 0 minimizing ||Bx - y||^2.

    Parameters:
    weight_matrix: matrix B of shape (n, m)
    observations: vector y of length n
    max_iterations: iteration cap. If reached, a ConvergenceWarning is issued
        and the current (feasible) estimate is returned.
    history_size: number of curvature pairs kept for the L-BFGS direction.
    tolerance: convergence threshold on the squared norm of the change in the
        free variables over one iteration.

    Returns an array of m non-negative values."""
    B = numpy.asarray(weight_matrix, dtype=float)
    y = numpy.asarray(observations, dtype=float)
    if B.ndim != 2 or y.ndim != 1 or B.shape[0] != len(y):
        raise ValueError('Weight matrix must have shape (n, m) for n observations.')
    if not (numpy.isfinite(B).all() and numpy.isfinite(y).all()):
        raise ValueError('Weight matrix and observations must be finite.')
    BtB = B.T @ B
    Bty = B.T @ y

    x = initial_vector(B, y)
    grad = BtB @ x - Bty
    history = collections.deque(maxlen=history_size)
    for iteration in range(max_iterations):
        free = ~((x == 0) & (grad > 0))
        x_free = x[free]
        grad_free = grad[free]
        direction = lbfgs_direction(history, grad_free, free)
        if not (numpy.isfinite(direction).all() and grad_free @ direction > 0):
            # not a descent direction on the free variables: use steepest descent
            direction = grad_free
        step = line_search(B[:, free], y, x_free, grad_free, direction)

        next_x = numpy.zeros_like(x)
        next_x[free] = step
        next_grad = BtB @ next_x - Bty
        change = step - x_free
        if (change**2).sum() < tolerance:
            x = next_x
            logger.debug('nnls converged after %d iterations', iteration + 1)
            break

        # deque with maxlen drops the oldest pair once full
        s = next_x - x
        g = next_grad - grad
        history.append(CurvaturePair(s, g, g @ s))
        x = next_x
        grad = next_grad
    else:
        warnings.warn('nnls did not converge in {} iterations'.format(max_iterations), ConvergenceWarning, stacklevel=2)
    return x

def initial_vector(weight_matrix, observations):
    """Unconstrained least-squares solution, with negative entries set to zero."""
    solution = scipy.linalg.lstsq(weight_matrix, observations)[0]
    return numpy.maximum(solution, 0)

def project(vector):
    """Project onto the non-negative orthant."""
    return numpy.maximum(vector, 0)

def _objective(matrix, vector, observations):
    residual = matrix @ vector - observations
    return (residual @ residual) / 2

def line_search(matrix, observations, x, grad, direction):
    """Armijo rule along the projection arc.

    Halves the step ratio, starting from 1, until the projected point
    p = project(x - ratio*direction) satisfies
        f(x) - f(p) >= ARMIJO_SLOPE * grad . (x - p)
    As ratio shrinks p tends to x, where the rule holds trivially, so the
    search always terminates."""
    objective = _objective(matrix, x, observations)
    slope = grad @ x
    ratio = 1.0
    while True:
        candidate = project(x - ratio * direction)
        decrease = objective - _objective(matrix, candidate, observations)
        if decrease >= ARMIJO_SLOPE * (slope - grad @ candidate):
            return candidate
        ratio *= STEP_SHRINK
        if ratio == 0:
            return x

def _ratio(numerator, denominator):
    with numpy.errstate(divide='ignore', invalid='ignore'):
        value = numpy.float64(numerator) / numpy.float64(denominator)
    return value if numpy.isfinite(value) else 1.0

def lbfgs_direction(history, grad, free=None):
    """L-BFGS two-loop recursion: approximate (inverse Hessian) * grad from the
    stored curvature pairs, oldest first.

    If a boolean mask `free` is given, grad holds only the free components and
    each pair is restricted to them. With no history the direction is grad
    itself. Ratios that come out NaN or infinite (e.g. 0/0 for a zero step)
    are replaced with 1."""
    pairs = list(history)
    if free is not None:
        pairs = [CurvaturePair(p.step[free], p.grad_change[free], p.grad_change[free] @ p.step[free]) for p in pairs]
    direction = numpy.array(grad, dtype=float)
    alphas = []
    for pair in reversed(pairs):
        alpha = _ratio(pair.step @ direction, pair.curvature)
        direction = direction - alpha * pair.grad_change
        alphas.append(alpha)
    for pair, alpha in zip(pairs, reversed(alphas)):
        beta = _ratio(pair.grad_change @ direction, pair.curvature)
        direction = direction + (alpha - beta) * pair.step
    return direction
