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
Bracketing line search.
'''

from ..bounds import BoundConstraint
from ..objective import Objective
from ..parameters import LineSearchType, StepParameters
from ..vector import Vector
from .base import LineSearch, LineSearchResult

__all__ = ['Bisection']


class Bisection(LineSearch):
    '''
    Shrink a bracket `[tl, tr]` around the smallest objective value.

    Each iteration evaluates the midpoints `t1` and `t2` of the two
    halves of the bracket around its center `tc` and keeps the half
    width interval centered at the point with the lowest value among
    `tl`, `t1`, `tc`, `t2` and `tr`. The center is the current trial
    step. The search also stops once the bracket is narrower than the
    bracketing tolerance.
    '''
    kind = LineSearchType.Bisection

    _tol: float

    def __init__(self, params: StepParameters):
        super().__init__(params)
        self._tol = params.bracketing_tol

    def run(self, x: Vector, s: Vector, fval: float, gs: float,
            obj: Objective, con: BoundConstraint) -> LineSearchResult:
        self._reset()

        def phi(t: float) -> float:
            return self.evaluate(t, x, s, obj, con)

        def done(t: float, val: float) -> bool:
            return self.status(val, t, fval, gs, s, x, obj, con)

        tr = self.initial_alpha(x, fval, gs, s, obj, con)
        val_tr = phi(tr)
        if done(tr, val_tr):
            return self._result(tr, val_tr)

        tl, val_tl = 0.0, fval
        tc = 0.5 * tr
        val_tc = phi(tc)

        while not done(tc, val_tc) and abs(tr - tl) > self._tol:
            t1 = 0.5 * (tl + tc)
            val_t1 = phi(t1)
            t2 = 0.5 * (tc + tr)
            val_t2 = phi(t2)

            best = min(val_tl, val_t1, val_tc, val_t2, val_tr)
            if val_t1 == best:
                tr, val_tr = tc, val_tc
                tc, val_tc = t1, val_t1
            elif val_tc == best:
                tl, val_tl = t1, val_t1
                tr, val_tr = t2, val_t2
            elif val_t2 == best:
                tl, val_tl = tc, val_tc
                tc, val_tc = t2, val_t2
            elif val_tl == best:
                tr, val_tr = t1, val_t1
                tc = 0.5 * (tl + tr)
                val_tc = phi(tc)
            else:
                tl, val_tl = t2, val_t2
                tc = 0.5 * (tl + tr)
                val_tc = phi(tc)

        return self._result(tc, val_tc)
