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
Nonlinear conjugate gradient directions.
'''

import logging
from typing import Optional

from .objective import SQRT_EPS, Objective
from .parameters import NonlinearCGType
from .vector import Vector

__all__ = ['NonlinearCG']


logger = logging.getLogger(__name__)


class NonlinearCG:
    '''
    Nonlinear conjugate gradient direction operator.

    Produces `s = g + beta * s_prev`, where `s_prev` is the previous output
    and `beta` depends on the chosen variant. Like the rest of the step
    code, the output is the *negative* search direction.

    The operator keeps the previous gradient and output between calls and
    must therefore be reused for the whole run. Every `restart` calls the
    history is ignored and the output reduces to the gradient.

    Parameters
    ----------
    nlcg_type : NonlinearCGType or str
        Formula for `beta`.
    restart : int
        Restart period.
    eta : float
        Lower bound parameter of the Hager-Zhang formula.
    '''
    _type: NonlinearCGType
    _restart: int
    _eta: float
    _iter: int
    _grad: Optional[Vector]
    _pstep: Optional[Vector]

    def __init__(self, nlcg_type: NonlinearCGType | str =
                 NonlinearCGType.HagerZhang, restart: int = 100,
                 eta: float = 1e-2):
        self._type = NonlinearCGType.parse(nlcg_type)
        self._restart = max(1, restart)
        self._eta = eta
        self._iter = 0
        self._grad = None
        self._pstep = None

    @property
    def nlcg_type(self) -> NonlinearCGType:
        '''Formula for `beta`.'''
        return self._type

    def reset(self) -> None:
        '''Discard history.'''
        self._iter = 0
        self._grad = None
        self._pstep = None

    def run(self, s: Vector, g: Vector, x: Vector, obj: Objective) -> None:
        '''
        Compute the next (negative) search direction.

        :param s: Output vector.
        :param g: Gradient at `x`.
        :param x: Current iterate.
        :param obj: Objective. Only used by the Daniels formula.
        '''
        beta = 0.0
        if (self._grad is not None and self._pstep is not None
                and self._iter % self._restart != 0):
            beta = self._beta(g, x, obj, self._grad, self._pstep)

        s.set(g)
        if beta != 0.0 and self._pstep is not None:
            s.axpy(beta, self._pstep)

        if self._grad is None:
            self._grad = g.copy()
            self._pstep = s.copy()
        else:
            self._grad.set(g)
            self._pstep.set(s)
        self._iter += 1

    def _beta(self, g: Vector, x: Vector, obj: Objective, g0: Vector,
              sp: Vector) -> float:
        y = g.copy()
        y.axpy(-1.0, g0)

        t = self._type
        if t is NonlinearCGType.FletcherReeves:
            num, den = g.dot(g), g0.dot(g0)
        elif t is NonlinearCGType.PolakRibiere:
            num, den = g.dot(y), g0.dot(g0)
        elif t is NonlinearCGType.HestenesStiefel:
            num, den = -g.dot(y), sp.dot(y)
        elif t is NonlinearCGType.FletcherConjDesc:
            num, den = g.dot(g), sp.dot(g0)
        elif t is NonlinearCGType.LiuStorey:
            num, den = g.dot(y), sp.dot(g0)
        elif t is NonlinearCGType.DaiYuan:
            num, den = -g.dot(g), sp.dot(y)
        elif t is NonlinearCGType.Daniels:
            hs = g.clone()
            obj.hess_vec(hs, sp, x, SQRT_EPS)
            num, den = -g.dot(hs), sp.dot(hs)
        else:
            sy = sp.dot(y)
            if sy == 0.0:
                return 0.0
            yd = y.copy()
            yd.axpy(-2.0 * y.dot(y) / sy, sp)
            beta = -yd.dot(g) / sy
            bound = -1.0 / (sp.norm() * min(self._eta, g0.norm()))
            return max(beta, bound)

        if den == 0.0:
            logger.debug(f'{self._type.value}: zero denominator, restarting')
            return 0.0
        return num / den
