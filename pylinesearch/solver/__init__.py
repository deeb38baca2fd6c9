'''
Optimization loops.
'''

from .linesearch import (
    LineSearchSolver,
    SolverParameters,
    SolverStats,
    SolverStatus,
)

__all__ = [
    'LineSearchSolver',
    'SolverParameters',
    'SolverStats',
    'SolverStatus',
]
