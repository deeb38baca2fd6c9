'''
Optimization steps.
'''

from .descent import (
    Descent,
    NewtonDescent,
    NewtonKrylovDescent,
    NonlinearCGDescent,
    SecantDescent,
    SteepestDescent,
    make_descent,
)
from .line_search_step import LineSearchStep
from .step import Step

__all__ = [
    'Descent',
    'LineSearchStep',
    'NewtonDescent',
    'NewtonKrylovDescent',
    'NonlinearCGDescent',
    'SecantDescent',
    'Step',
    'SteepestDescent',
    'make_descent',
]
