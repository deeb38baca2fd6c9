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
Krylov solvers for inexact Newton steps.
'''

from enum import IntEnum
import logging

from .objective import SQRT_EPS
from .parameters import KrylovType
from .projected import ProjectedObjective
from .vector import Vector

__all__ = ['Krylov', 'KrylovFlag']


logger = logging.getLogger(__name__)


class KrylovFlag(IntEnum):
    '''Termination reason of a Krylov solve.'''
    Converged = 0
    IterationMaximum = 1
    NegativeCurvature = 2


class Krylov:
    '''
    Krylov solver for the reduced Newton system `H s = g`.

    The solver works on the reduced operators of a
    :class:`ProjectedObjective`, so bound constraints and secant models
    are taken care of by the operator. The iteration stops once the
    residual norm drops below `min(abs_tol, rel_tol * ||g||)`.

    Parameters
    ----------
    krylov_type : KrylovType or str
        Conjugate gradients or conjugate residuals.
    abs_tol : float
        Absolute residual tolerance.
    rel_tol : float
        Residual tolerance relative to the norm of the right-hand side.
    max_iter : int
        Iteration limit.
    use_inexact : bool
        Request Hessian-vector products only as accurately as the current
        residual requires.
    '''
    _type: KrylovType
    _abs_tol: float
    _rel_tol: float
    _max_iter: int
    _inexact: bool

    def __init__(self, krylov_type: KrylovType | str = KrylovType.CG,
                 abs_tol: float = 1e-4, rel_tol: float = 1e-2,
                 max_iter: int = 20, use_inexact: bool = False):
        self._type = KrylovType.parse(krylov_type)
        self._abs_tol = abs_tol
        self._rel_tol = rel_tol
        self._max_iter = max_iter
        self._inexact = use_inexact

    @property
    def krylov_type(self) -> KrylovType:
        '''Krylov method.'''
        return self._type

    @property
    def max_iter(self) -> int:
        '''Iteration limit.'''
        return self._max_iter

    def run(self, s: Vector, g: Vector, x: Vector,
            pobj: ProjectedObjective) -> tuple[int, KrylovFlag]:
        '''
        Solve the reduced Newton system approximately.

        :param s: Output vector for the solution.
        :param g: Right-hand side, i.e., the gradient.
        :param x: Current iterate.
        :param pobj: Projected objective providing the operators.
        :return: Number of iterations and termination flag.
        '''
        if self._type is KrylovType.CR:
            return self._cr(s, g, x, pobj)
        return self._cg(s, g, x, pobj)

    def _tol(self, rtol: float, rnorm: float) -> float:
        if self._inexact and rnorm > 0.0:
            return rtol / (self._max_iter * rnorm)
        return SQRT_EPS

    def _finish(self, it: int, flag: KrylovFlag) -> tuple[int, KrylovFlag]:
        if it == self._max_iter:
            flag = KrylovFlag.IterationMaximum
        else:
            it += 1
        logger.debug(f'{self._type.value}: {it} iterations, flag {int(flag)}')
        return it, flag

    def _cg(self, s: Vector, g: Vector, x: Vector,
            pobj: ProjectedObjective) -> tuple[int, KrylovFlag]:
        rtol = min(self._abs_tol, self._rel_tol * g.norm())

        s.zero()
        r = g.copy()
        v = g.clone()
        pobj.reduced_precond(v, r, x, g, x, SQRT_EPS)
        p = v.copy()
        hp = g.clone()

        flag = KrylovFlag.Converged
        rv = v.dot(r)
        rnorm = r.norm()

        it = 0
        while it < self._max_iter:
            pobj.reduced_hess_vec(hp, p, x, g, x, self._tol(rtol, rnorm))
            kappa = p.dot(hp)
            if kappa <= 0.0:
                flag = KrylovFlag.NegativeCurvature
                break
            alpha = rv / kappa
            s.axpy(alpha, p)
            r.axpy(-alpha, hp)
            rnorm = r.norm()
            if rnorm < rtol:
                break

            pobj.reduced_precond(v, r, x, g, x, SQRT_EPS)
            tmp = rv
            rv = v.dot(r)
            p.scale(rv / tmp)
            p.plus(v)
            it += 1

        return self._finish(it, flag)

    def _cr(self, s: Vector, g: Vector, x: Vector,
            pobj: ProjectedObjective) -> tuple[int, KrylovFlag]:
        rtol = min(self._abs_tol, self._rel_tol * g.norm())

        s.zero()
        r = g.copy()
        z = g.clone()
        pobj.reduced_precond(z, r, x, g, x, SQRT_EPS)
        hz = g.clone()
        pobj.reduced_hess_vec(hz, z, x, g, x, SQRT_EPS)
        p = z.copy()
        hp = hz.copy()
        mhp = g.clone()

        flag = KrylovFlag.Converged
        zhz = z.dot(hz)
        rnorm = r.norm()

        it = 0
        while it < self._max_iter:
            if zhz <= 0.0:
                flag = KrylovFlag.NegativeCurvature
                break
            pobj.reduced_precond(mhp, hp, x, g, x, SQRT_EPS)
            kappa = hp.dot(mhp)
            alpha = zhz / kappa
            s.axpy(alpha, p)
            r.axpy(-alpha, hp)
            rnorm = r.norm()
            if rnorm < rtol:
                break

            z.axpy(-alpha, mhp)
            pobj.reduced_hess_vec(hz, z, x, g, x, self._tol(rtol, rnorm))
            tmp = zhz
            zhz = z.dot(hz)
            beta = zhz / tmp
            p.scale(beta)
            p.plus(z)
            hp.scale(beta)
            hp.plus(hz)
            it += 1

        return self._finish(it, flag)
