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
Barzilai-Borwein scalar secant operator.
'''

from ..vector import Vector
from .base import Secant

__all__ = ['BarzilaiBorwein']


class BarzilaiBorwein(Secant):
    '''
    Barzilai-Borwein operator.

    Approximates the Hessian by a multiple of the identity derived from
    the newest curvature pair. Only one pair is stored.

    :param bb_type: Variant of the scaling factor. Type 1 scales the
        inverse Hessian by `<s, y> / <y, y>`, type 2 by `<s, s> / <s, y>`.
    :type bb_type: int
    :raise ValueError: `bb_type` is neither 1 nor 2.
    '''
    _type: int

    def __init__(self, bb_type: int = 1):
        if bb_type not in (1, 2):
            raise ValueError('bb_type')
        super().__init__(storage=1)
        self._type = bb_type

    @property
    def bb_type(self) -> int:
        '''Variant of the scaling factor.'''
        return self._type

    def _factor(self) -> float:
        state = self.state
        sy = state.product[state.current]
        if self._type == 1:
            y = state.grad_diff[state.current]
            return sy / y.dot(y)
        s = state.iter_diff[state.current]
        return s.dot(s) / sy

    def apply_h(self, hv: Vector, v: Vector, x: Vector) -> None:
        hv.set(v)
        if self._has_pairs():
            hv.scale(self._factor())

    def apply_b(self, bv: Vector, v: Vector, x: Vector) -> None:
        bv.set(v)
        if self._has_pairs():
            bv.scale(1.0 / self._factor())
