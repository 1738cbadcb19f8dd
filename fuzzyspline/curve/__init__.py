'''
Curve
-----
Functions for computations over time-stamped 3D point series and the Bezier
and B-spline curves fit to them.
 - curve.geometry: point-series arrays, time ranges, input validation, jitter, and the rational-arc weight clamp policy.
 - curve.basis: Bernstein (Bezier) and Cox-de Boor (B-spline) basis matrices and uniform knot vectors.
 - curve.interpolate: least-squares Bezier and B-spline fitting via the normal equations.
 - curve.spline: the SplineCurve record and its operations.
 - curve.spline_geometry: sampling spline positions, speeds and arc length.
 - curve.condition: extrapolation past the ends of a point series and filling of sampling gaps.
 '''
