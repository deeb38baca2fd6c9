#
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
#
'''
Base class for smooth objective functions.
'''

from abc import ABC, abstractmethod

import numpy

from .vector import Vector

__all__ = ['Objective', 'SQRT_EPS']


#: Square root of machine epsilon. Default evaluation tolerance.
SQRT_EPS: float = float(numpy.sqrt(numpy.finfo(float).eps))


class Objective(ABC):
    '''
    Abstract base class for a twice differentiable objective function.

    Only `value` and `gradient` are mandatory. Hessian-vector products
    default to a one-sided finite difference of the gradient, the
    preconditioner defaults to the identity, and the inverse Hessian has
    no default.

    All evaluation methods receive a tolerance `tol` that implementations
    with inexact evaluation may use to control their accuracy. Exact
    implementations can ignore it.
    '''

    def update(self, x: Vector, flag: bool = True, iter: int = -1) -> None:
        '''
        Notify the objective of a new point.

        :param x: New point.
        :type x: :class:`Vector`
        :param flag: `True` if `x` is an accepted iterate, `False` if it
            is a trial point.
        :type flag: bool
        :param iter: Current iteration number or `-1` for trial points.
        :type iter: int
        '''
        pass

    @abstractmethod
    def value(self, x: Vector, tol: float) -> float:
        '''
        Evaluate objective.

        :param x: Point of evaluation.
        :type x: :class:`Vector`
        :param tol: Evaluation tolerance.
        :type tol: float
        '''
        pass

    @abstractmethod
    def gradient(self, g: Vector, x: Vector, tol: float) -> None:
        '''
        Evaluate gradient and store it in `g`.

        :param g: Output vector.
        :type g: :class:`Vector`
        :param x: Point of evaluation.
        :type x: :class:`Vector`
        :param tol: Evaluation tolerance.
        :type tol: float
        '''
        pass

    def hess_vec(self, hv: Vector, v: Vector, x: Vector, tol: float) -> None:
        '''
        Apply Hessian to a vector and store the result in `hv`.

        The default implementation uses a forward difference of the
        gradient with a step size scaled to the norms of `x` and `v`.
        '''
        vnorm = v.norm()
        if vnorm == 0.0:
            hv.zero()
            return
        h = max(1.0, x.norm() / vnorm) * tol

        g = x.clone()
        self.gradient(g, x, tol)

        xnew = x.copy()
        xnew.axpy(h, v)
        self.update(xnew, False)
        self.gradient(hv, xnew, tol)
        self.update(x, False)

        hv.axpy(-1.0, g)
        hv.scale(1.0 / h)

    def inv_hess_vec(self, hv: Vector, v: Vector, x: Vector,
                     tol: float) -> None:
        '''
        Apply inverse Hessian to a vector and store the result in `hv`.

        :raise NotImplementedError: The objective does not provide an
            inverse Hessian.
        '''
        raise NotImplementedError(
            f'{type(self).__name__} does not implement inv_hess_vec'
        )

    def precond(self, pv: Vector, v: Vector, x: Vector, tol: float) -> None:
        '''
        Apply preconditioner to a vector and store the result in `pv`.

        Defaults to the identity.
        '''
        pv.set(v)
