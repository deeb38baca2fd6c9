'''
Ready-made objective functions on Euclidean vectors.
'''

from typing import Optional

import numpy
from numpy.typing import ArrayLike, NDArray
import scipy.linalg
import scipy.optimize

from ..objective import Objective
from ..spaces.euclidean import EuclideanVector
from ..vector import Vector


__all__ = [
    'QuadraticObjective',
    'RosenbrockObjective',
]


def _array(vec: Vector) -> NDArray[numpy.float64]:
    if not isinstance(vec, EuclideanVector):
        raise TypeError(f'expected EuclideanVector, got {type(vec).__name__}')
    return vec.array


class QuadraticObjective(Objective):
    '''
    Quadratic `f(x) = x^T A x / 2 - b^T x + c` with symmetric `A`.

    The inverse Hessian is applied through a Cholesky factorization of `A`,
    which is computed on first use and requires `A` to be positive
    definite.
    '''
    _mat: NDArray[numpy.float64]
    _rhs: NDArray[numpy.float64]
    _const: float
    _factor: Optional[tuple[NDArray[numpy.float64], bool]]

    def __init__(self, mat: ArrayLike, rhs: Optional[ArrayLike] = None,
                 const: float = 0.0):
        self._mat = numpy.atleast_2d(numpy.asarray(mat, dtype=float))
        n = self._mat.shape[0]
        if self._mat.shape != (n, n):
            raise ValueError('mat')
        if rhs is None:
            self._rhs = numpy.zeros(n)
        else:
            self._rhs = numpy.asarray(rhs, dtype=float).ravel()
            if self._rhs.shape != (n,):
                raise ValueError('rhs')
        self._const = const
        self._factor = None

    @property
    def matrix(self) -> NDArray[numpy.float64]:
        '''Hessian matrix.'''
        return self._mat

    def solution(self) -> EuclideanVector:
        '''Unconstrained minimizer `A^{-1} b`.'''
        return EuclideanVector(scipy.linalg.solve(self._mat, self._rhs,
                                                  assume_a='sym'))

    def value(self, x: Vector, tol: float) -> float:
        xa = _array(x)
        return float(0.5 * xa @ (self._mat @ xa) - self._rhs @ xa
                     + self._const)

    def gradient(self, g: Vector, x: Vector, tol: float) -> None:
        _array(g)[:] = self._mat @ _array(x) - self._rhs

    def hess_vec(self, hv: Vector, v: Vector, x: Vector, tol: float) -> None:
        _array(hv)[:] = self._mat @ _array(v)

    def inv_hess_vec(self, hv: Vector, v: Vector, x: Vector,
                     tol: float) -> None:
        if self._factor is None:
            self._factor = scipy.linalg.cho_factor(self._mat)
        _array(hv)[:] = scipy.linalg.cho_solve(self._factor, _array(v))


class RosenbrockObjective(Objective):
    '''
    Generalized Rosenbrock function with minimizer `(1, ..., 1)`.
    '''

    def value(self, x: Vector, tol: float) -> float:
        return float(scipy.optimize.rosen(_array(x)))

    def gradient(self, g: Vector, x: Vector, tol: float) -> None:
        _array(g)[:] = scipy.optimize.rosen_der(_array(x))

    def hess_vec(self, hv: Vector, v: Vector, x: Vector, tol: float) -> None:
        _array(hv)[:] = scipy.optimize.rosen_hess_prod(_array(x), _array(v))

    def inv_hess_vec(self, hv: Vector, v: Vector, x: Vector,
                     tol: float) -> None:
        hess = scipy.optimize.rosen_hess(_array(x))
        _array(hv)[:] = scipy.linalg.solve(hess, _array(v), assume_a='sym')
