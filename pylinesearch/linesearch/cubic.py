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
Line search with safeguarded polynomial interpolation.
'''

import math

import numpy

from ..bounds import BoundConstraint
from ..objective import Objective
from ..parameters import LineSearchType
from ..vector import Vector
from .base import LineSearch, LineSearchResult

__all__ = ['CubicInterpolation']


class CubicInterpolation(LineSearch):
    '''
    Backtracking with interpolated step lengths.

    The first contraction minimizes the quadratic through `phi(0)`,
    `phi'(0)` and `phi(alpha)`, every further one the cubic through the
    last two trial values. The new step length is kept within
    `[0.1 * alpha, 0.5 * alpha]`. Whenever the interpolant has no usable
    minimizer, the step length is halved.
    '''
    kind = LineSearchType.CubicInterpolation

    @staticmethod
    def _quadratic(alpha: float, fval: float, fold: float,
                   gs: float) -> float:
        denom = 2.0 * (fval - fold - gs * alpha)
        if not denom > 0.0:
            return 0.5 * alpha
        return -gs * alpha * alpha / denom

    @staticmethod
    def _cubic(alpha: float, fval: float, alphap: float, fvalp: float,
               fold: float, gs: float) -> float:
        eps = numpy.finfo(float).eps
        if alpha == alphap or alpha <= 0.0 or alphap <= 0.0:
            return 0.5 * alpha

        x1 = fval - fold - alpha * gs
        x2 = fvalp - fold - alphap * gs
        a = (x1 / alpha**2 - x2 / alphap**2) / (alpha - alphap)
        b = (-alphap * x1 / alpha**2 + alpha * x2 / alphap**2) \
            / (alpha - alphap)

        if abs(a) < eps:
            if b == 0.0:
                return 0.5 * alpha
            alpha1 = -gs / (2.0 * b)
        else:
            disc = b * b - 3.0 * a * gs
            if disc < 0.0:
                return 0.5 * alpha
            alpha1 = (-b + math.sqrt(disc)) / (3.0 * a)

        if not math.isfinite(alpha1):
            return 0.5 * alpha
        return min(alpha1, 0.5 * alpha)

    def run(self, x: Vector, s: Vector, fval: float, gs: float,
            obj: Objective, con: BoundConstraint) -> LineSearchResult:
        self._reset()
        alpha = self.initial_alpha(x, fval, gs, s, obj, con)
        fnew = self.evaluate(alpha, x, s, obj, con)

        alphap, fvalp = 0.0, 0.0
        first = True
        while not self.status(fnew, alpha, fval, gs, s, x, obj, con):
            if first:
                alpha1 = self._quadratic(alpha, fnew, fval, gs)
                first = False
            else:
                alpha1 = self._cubic(alpha, fnew, alphap, fvalp, fval, gs)

            alphap, fvalp = alpha, fnew
            if alpha1 <= 0.1 * alpha:
                alpha *= 0.1
            elif alpha1 >= 0.5 * alpha:
                alpha *= 0.5
            else:
                alpha = alpha1
            fnew = self.evaluate(alpha, x, s, obj, con)

        return self._result(alpha, fnew)
