# PyLineSearch - Python library for line-search optimization
# Copyright 2023 Mirko Hahn
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
'''
Generic base class for line searches.
'''

from abc import ABC, abstractmethod
import logging
from typing import ClassVar, NamedTuple, Optional

import numpy

from ..bounds import BoundConstraint
from ..objective import SQRT_EPS, Objective
from ..parameters import (
    CurvatureCondition,
    DescentType,
    LineSearchType,
    StepParameters,
)
from ..vector import Vector

__all__ = ['LineSearch', 'LineSearchResult']


logger = logging.getLogger(__name__)


class LineSearchResult(NamedTuple):
    '''Outcome of a line search.'''

    #: Accepted step length.
    alpha: float

    #: Objective value at the accepted trial point.
    fval: float

    #: Number of objective evaluations.
    nfval: int

    #: Number of gradient evaluations.
    ngrad: int


class LineSearch(ABC):
    '''
    Abstract base class for line searches along a descent direction.

    Subclasses implement :meth:`run` in terms of :meth:`initial_alpha`,
    :meth:`evaluate` and :meth:`status`. The base class keeps the
    evaluation counters of the current search, so an instance must not
    be shared between concurrent searches.

    :param params: Step parameters. Only the line-search related fields
        are read.
    :type params: :class:`StepParameters`
    '''

    #: Algorithm implemented by the subclass.
    kind: ClassVar[LineSearchType]

    _descent: DescentType
    _cond: CurvatureCondition
    _c1: float
    _c2: float
    _c3: float
    _max_eval: int
    _user_alpha: bool
    _alpha0: float
    _grad: Optional[Vector]
    _eps: float
    _nfval: int
    _ngrad: int

    def __init__(self, params: StepParameters):
        self._descent = params.descent_type
        self._cond = params.curvature_condition
        self._c1 = params.c1
        self._c2 = params.c2
        self._c3 = params.c3
        self._max_eval = params.ls_max_eval
        self._user_alpha = params.user_initial_step
        self._alpha0 = params.initial_step
        self._grad = None
        self._eps = 0.0
        self._nfval = 0
        self._ngrad = 0

    @property
    def curvature_condition(self) -> CurvatureCondition:
        '''Curvature condition paired with sufficient decrease.'''
        return self._cond

    def set_data(self, grad: Vector, eps: float) -> None:
        '''
        Provide the gradient at the current iterate and the active set
        tolerance for the next search.
        '''
        self._grad = grad
        self._eps = eps

    @staticmethod
    def update_iterate(xnew: Vector, x: Vector, s: Vector, alpha: float,
                       con: BoundConstraint) -> None:
        '''
        Compute the trial point `x + alpha * s`, projected onto the
        feasible set if the bounds are active.
        '''
        xnew.set(x)
        xnew.axpy(alpha, s)
        if con.is_activated():
            con.project(xnew)

    def _reset(self) -> None:
        self._nfval = 0
        self._ngrad = 0

    def _result(self, alpha: float, fval: float) -> LineSearchResult:
        return LineSearchResult(alpha, fval, self._nfval, self._ngrad)

    def evaluate(self, alpha: float, x: Vector, s: Vector, obj: Objective,
                 con: BoundConstraint) -> float:
        '''Evaluate the objective at the trial point for `alpha`.'''
        xnew = x.clone()
        self.update_iterate(xnew, x, s, alpha, con)
        obj.update(xnew, False)
        self._nfval += 1
        return obj.value(xnew, SQRT_EPS)

    def initial_alpha(self, x: Vector, fval: float, gs: float, s: Vector,
                      obj: Objective, con: BoundConstraint) -> float:
        '''
        First trial step length.

        Returns the user defined step if configured. For steepest descent
        and nonlinear CG, the minimizer of the quadratic interpolating
        `phi(0)`, `phi'(0)` and `phi(1)` is used unless it is smaller
        than `0.1`. All other directions start with `1`.
        '''
        if self._user_alpha:
            return self._alpha0
        if self._descent not in (DescentType.Steepest,
                                 DescentType.NonlinearCG):
            return 1.0

        fnew = self.evaluate(1.0, x, s, obj, con)
        denom = fnew - fval - gs
        alpha = (-0.5 * gs / denom
                 if denom > numpy.finfo(float).eps else 1.0)
        return alpha if alpha > 0.1 else 1.0

    def _sufficient_decrease(self, fnew: float, alpha: float, fold: float,
                             sgold: float, s: Vector, x: Vector,
                             con: BoundConstraint) -> bool:
        if not con.is_activated():
            return fnew <= fold + self._c1 * alpha * sgold

        d = x.clone()
        if self._descent is DescentType.Steepest:
            self.update_iterate(d, x, s, alpha, con)
            d.scale(-1.0)
            d.plus(x)
            gs = -s.dot(d)
        else:
            grad = self._grad if self._grad is not None else s
            d.set(s)
            d.scale(-1.0)
            con.prune_active(d, grad, x, self._eps)
            gs = alpha * grad.dot(d)
            self.update_iterate(d, x, s, alpha, con)
            d.scale(-1.0)
            d.plus(x)
            con.prune_inactive(d, grad, x, self._eps)
            gs += grad.dot(d)
        return fnew <= fold - self._c1 * gs

    def _curvature(self, fnew: float, alpha: float, fold: float,
                   sgold: float, s: Vector, x: Vector, obj: Objective,
                   con: BoundConstraint) -> bool:
        cond = self._cond
        if cond is CurvatureCondition.Goldstein:
            return fnew >= fold + (1.0 - self._c1) * alpha * sgold
        if cond is CurvatureCondition.Null:
            return True

        # Directional derivative at the trial point.
        xnew = x.clone()
        self.update_iterate(xnew, x, s, alpha, con)
        obj.update(xnew, False)
        gnew = x.clone()
        obj.gradient(gnew, xnew, SQRT_EPS)
        self._ngrad += 1

        if con.is_activated():
            d = s.copy()
            d.scale(-alpha)
            con.prune_active(d, s, x)
            sgnew = -d.dot(gnew)
        else:
            sgnew = s.dot(gnew)

        if cond is CurvatureCondition.Wolfe:
            return sgnew >= self._c2 * sgold
        if cond is CurvatureCondition.StrongWolfe:
            return abs(sgnew) <= self._c2 * abs(sgold)
        if cond is CurvatureCondition.GeneralizedWolfe:
            return self._c2 * sgold <= sgnew <= -self._c3 * sgold
        return (self._c2 * sgold <= sgnew
                <= (2.0 * self._c1 - 1.0) * sgold)

    def status(self, fnew: float, alpha: float, fold: float, sgold: float,
               s: Vector, x: Vector, obj: Objective,
               con: BoundConstraint) -> bool:
        '''
        Check whether the search is done.

        The search is done once the step length is acceptable or the
        evaluation limit has been reached. Backtracking and cubic
        interpolation only enforce sufficient decrease, except for
        nonlinear CG directions, which need the curvature condition for
        every search.

        :param fnew: Objective value at the trial point.
        :param alpha: Trial step length.
        :param fold: Objective value at `x`.
        :param sgold: Directional derivative at `x`.
        :param s: Search direction.
        :param x: Current iterate.
        '''
        itcond = self._nfval >= self._max_eval
        armijo = self._sufficient_decrease(fnew, alpha, fold, sgold, s, x,
                                           con)

        check_curv = (self.kind not in (LineSearchType.Backtracking,
                                        LineSearchType.CubicInterpolation)
                      or self._descent is DescentType.NonlinearCG)
        accept = armijo
        if armijo and check_curv:
            accept = self._curvature(fnew, alpha, fold, sgold, s, x, obj, con)

        if itcond and not accept:
            logger.debug(f'{self.kind.value}: evaluation limit '
                         f'{self._max_eval} reached at alpha = {alpha:.6e}')
        return accept or itcond

    @abstractmethod
    def run(self, x: Vector, s: Vector, fval: float, gs: float,
            obj: Objective, con: BoundConstraint) -> LineSearchResult:
        '''
        Search for an acceptable step length.

        :param x: Current iterate.
        :type x: :class:`Vector`
        :param s: Descent direction.
        :type s: :class:`Vector`
        :param fval: Objective value at `x`.
        :type fval: float
        :param gs: Directional derivative of the objective along `s`.
        :type gs: float
        :param obj: Objective.
        :type obj: :class:`Objective`
        :param con: Bound constraints.
        :type con: :class:`BoundConstraint`
        '''
        pass
