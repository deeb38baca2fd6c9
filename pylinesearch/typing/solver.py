'''
Static typing protocols for step components.
'''

from typing import TYPE_CHECKING, Protocol

from ..bounds import BoundConstraint
from ..objective import Objective
from ..vector import Vector

if TYPE_CHECKING:
    from ..linesearch import LineSearchResult
    from ..parameters import CurvatureCondition, LineSearchType


__all__ = [
    'LineSearchOperator',
    'SecantOperator',
]


class SecantOperator(Protocol):
    '''Protocol for secant (quasi-Newton) operators.'''

    def update(self, grad: Vector, gp: Vector, s: Vector, snorm: float,
               iter: int) -> None:
        '''Store the curvature pair of the last step.'''
        ...

    def apply_h(self, hv: Vector, v: Vector, x: Vector) -> None:
        '''Apply the inverse Hessian approximation.'''
        ...

    def apply_b(self, bv: Vector, v: Vector, x: Vector) -> None:
        '''Apply the Hessian approximation.'''
        ...


class LineSearchOperator(Protocol):
    '''Protocol for line searches.'''

    @property
    def kind(self) -> 'LineSearchType':
        '''Algorithm name.'''
        ...

    @property
    def curvature_condition(self) -> 'CurvatureCondition':
        '''Curvature condition paired with sufficient decrease.'''
        ...

    def set_data(self, grad: Vector, eps: float) -> None:
        '''
        Provide the gradient at the current iterate and the active set
        tolerance.
        '''
        ...

    def run(self, x: Vector, s: Vector, fval: float, gs: float,
            obj: Objective, con: BoundConstraint) -> 'LineSearchResult':
        '''
        Search for an acceptable step length along `s`.

        :return: Step length, objective value at the trial point and
            the numbers of objective and gradient evaluations.
        '''
        ...
