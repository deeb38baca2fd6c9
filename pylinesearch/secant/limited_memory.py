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
Limited-memory BFGS and DFP operators.

Both updates share the same two building blocks with the roles of the
iterate and gradient differences swapped:

* the two-loop recursion applies the operator whose update is of the
  "inverse" kind (BFGS inverse Hessian, DFP Hessian);
* the product form applies the operator whose update is a sum of rank-one
  corrections (BFGS Hessian, DFP inverse Hessian).
'''

import math
from typing import Callable, Sequence

from ..vector import Vector
from .base import Secant

__all__ = ['LimitedMemoryBFGS', 'LimitedMemoryDFP']


Apply0 = Callable[[Vector, Vector, Vector], None]


def _two_loop(out: Vector, v: Vector, x: Vector, a: Sequence[Vector],
              b: Sequence[Vector], products: Sequence[float],
              apply0: Apply0) -> None:
    out.set(v)
    alpha = [0.0] * len(products)
    for i in reversed(range(len(products))):
        alpha[i] = a[i].dot(out) / products[i]
        out.axpy(-alpha[i], b[i])

    tmp = out.copy()
    apply0(out, tmp, x)

    for i in range(len(products)):
        beta = b[i].dot(out) / products[i]
        out.axpy(alpha[i] - beta, a[i])


def _product_form(out: Vector, v: Vector, x: Vector, a: Sequence[Vector],
                  b: Sequence[Vector], products: Sequence[float],
                  apply0: Apply0) -> None:
    # `a` holds the differences the initial operator is applied to, `b` the
    # differences that enter the rank-one terms directly.
    apply0(out, v, x)

    u: list[Vector] = []
    w: list[Vector] = []
    for i in range(len(products)):
        wi = b[i].copy()
        wi.scale(1.0 / math.sqrt(products[i]))
        out.axpy(wi.dot(v), wi)

        ui = v.clone()
        apply0(ui, a[i], x)
        for j in range(i):
            ui.axpy(w[j].dot(a[i]), w[j])
            ui.axpy(-u[j].dot(a[i]), u[j])
        ui.scale(1.0 / math.sqrt(ui.dot(a[i])))
        out.axpy(-ui.dot(v), ui)

        u.append(ui)
        w.append(wi)


class LimitedMemoryBFGS(Secant):
    '''
    Limited-memory BFGS operator.

    The inverse Hessian is applied with the two-loop recursion, the
    Hessian with the equivalent sum of rank-one updates.
    '''

    def apply_h(self, hv: Vector, v: Vector, x: Vector) -> None:
        state = self.state
        _two_loop(hv, v, x, state.iter_diff, state.grad_diff, state.product,
                  self.apply_h0)

    def apply_b(self, bv: Vector, v: Vector, x: Vector) -> None:
        state = self.state
        _product_form(bv, v, x, state.iter_diff, state.grad_diff,
                      state.product, self.apply_b0)


class LimitedMemoryDFP(Secant):
    '''
    Limited-memory DFP operator.

    This is the dual of :class:`LimitedMemoryBFGS`: the inverse Hessian
    is a sum of rank-one updates and the Hessian follows from the
    two-loop recursion.
    '''

    def apply_h(self, hv: Vector, v: Vector, x: Vector) -> None:
        state = self.state
        _product_form(hv, v, x, state.grad_diff, state.iter_diff,
                      state.product, self.apply_h0)

    def apply_b(self, bv: Vector, v: Vector, x: Vector) -> None:
        state = self.state
        _two_loop(bv, v, x, state.grad_diff, state.iter_diff, state.product,
                  self.apply_b0)
