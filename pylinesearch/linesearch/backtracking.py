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
Backtracking line search.
'''

from ..bounds import BoundConstraint
from ..objective import Objective
from ..parameters import LineSearchType, StepParameters
from ..vector import Vector
from .base import LineSearch, LineSearchResult

__all__ = ['Backtracking']


class Backtracking(LineSearch):
    '''
    Contract the step length by a constant factor until it is accepted.
    '''
    kind = LineSearchType.Backtracking

    _rate: float

    def __init__(self, params: StepParameters):
        super().__init__(params)
        self._rate = params.backtracking_rate

    def run(self, x: Vector, s: Vector, fval: float, gs: float,
            obj: Objective, con: BoundConstraint) -> LineSearchResult:
        self._reset()
        alpha = self.initial_alpha(x, fval, gs, s, obj, con)
        fnew = self.evaluate(alpha, x, s, obj, con)
        while not self.status(fnew, alpha, fval, gs, s, x, obj, con):
            alpha *= self._rate
            fnew = self.evaluate(alpha, x, s, obj, con)
        return self._result(alpha, fnew)
