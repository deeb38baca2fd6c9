'''
Python library for line-search optimization with optional bound
constraints.
'''

from .bounds import BoundConstraint, BoxConstraint
from .krylov import Krylov, KrylovFlag
from .linesearch import (
    Backtracking,
    Bisection,
    CubicInterpolation,
    LineSearch,
    LineSearchResult,
    get_line_search,
)
from .nonlinear_cg import NonlinearCG
from .objective import Objective
from .parameters import (
    CurvatureCondition,
    DescentType,
    KrylovType,
    LineSearchType,
    NonlinearCGType,
    SecantType,
    StepParameters,
)
from .projected import ProjectedObjective
from .secant import (
    BarzilaiBorwein,
    LimitedMemoryBFGS,
    LimitedMemoryDFP,
    Secant,
    get_secant,
)
from .solver import (
    LineSearchSolver,
    SolverParameters,
    SolverStats,
    SolverStatus,
)
from .spaces import EuclideanVector
from .state import AlgorithmState, StepState
from .step import LineSearchStep, Step
from .typing import JSONSerializable
from .vector import Vector

__all__ = [
    'AlgorithmState',
    'Backtracking',
    'BarzilaiBorwein',
    'Bisection',
    'BoundConstraint',
    'BoxConstraint',
    'CubicInterpolation',
    'CurvatureCondition',
    'DescentType',
    'EuclideanVector',
    'JSONSerializable',
    'Krylov',
    'KrylovFlag',
    'KrylovType',
    'LimitedMemoryBFGS',
    'LimitedMemoryDFP',
    'LineSearch',
    'LineSearchResult',
    'LineSearchSolver',
    'LineSearchStep',
    'LineSearchType',
    'NonlinearCG',
    'NonlinearCGType',
    'Objective',
    'ProjectedObjective',
    'Secant',
    'SecantType',
    'SolverParameters',
    'SolverStats',
    'SolverStatus',
    'Step',
    'StepParameters',
    'StepState',
    'Vector',
    'get_line_search',
    'get_secant',
]
