'''
# fuzzyspline

Fit noisy, time-stamped 3D point series (e.g. hand-drawn strokes) with smooth
B-spline curves whose control points carry a non-negative "fuzziness": the
local spatial uncertainty of the drawing. These fuzzy spline curves (FSCs)
are the input to later shape-recognition stages.

Curve
-----
Functions for time-stamped point series and the curves fit to them.
 - curve.geometry: point-series arrays, time ranges, input validation, jitter, and the rational-arc weight clamp policy.
 - curve.basis: Bernstein (Bezier) and Cox-de Boor (B-spline) basis matrices and uniform knot vectors.
 - curve.interpolate: least-squares Bezier and B-spline fitting via the normal equations.
 - curve.spline: the SplineCurve record: evaluation, differentiation, restriction to a sub-range, inversion, and knot insertion.
 - curve.spline_geometry: sampling spline positions, speeds and arc length.
 - curve.condition: extrapolation past the ends of a point series and filling of sampling gaps.

Fuzziness
---------
 - nnls: non-negative least squares by projected quasi-Newton (PQN-LBFGS).
 - fuzzy: build fuzzy spline curves from raw strokes or from observed fuzziness.

'''
