import setuptools

setuptools.setup(
    name = 'fuzzyspline',
    version = '1.0',
    description = 'fuzzy spline curve fitting for hand-drawn strokes',
    packages = setuptools.find_packages(exclude=['tests']),
    python_requires = '>=3.7',
    install_requires = ['numpy>=1.17', 'scipy>=1.1'],
    extras_require = {'test': ['pytest']},
)
