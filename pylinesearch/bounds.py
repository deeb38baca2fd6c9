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
Bound constraints and the associated projection and active-set pruning.
'''

import math
from typing import Optional

import numpy
from numpy.typing import ArrayLike, NDArray

from .spaces.euclidean import EuclideanVector
from .vector import Vector

__all__ = ['BoundConstraint', 'BoxConstraint']


class BoundConstraint:
    '''
    Bound constraint `a <= x <= b`.

    This base class represents the absence of bounds: it is deactivated
    and all of its operations are no-ops. Subclasses implement `project`,
    `prune_active` and `prune_inactive` and start out activated.

    The active-set operations work on the *binding set*, i.e., the points
    where `x` lies within `eps` of a bound and the reference direction
    `g` points out of the feasible set once negated::

        x <= a + eps and g > 0    (lower bound binding)
        x >= b - eps and g < 0    (upper bound binding)
    '''
    _active: bool

    def __init__(self, activated: bool = False):
        self._active = activated

    def is_activated(self) -> bool:
        '''Indicate whether the bounds are enforced.'''
        return self._active

    def activate(self) -> None:
        '''Enforce the bounds.'''
        self._active = True

    def deactivate(self) -> None:
        '''Ignore the bounds.'''
        self._active = False

    def project(self, x: Vector) -> None:
        '''Project `x` onto the feasible set in place.'''
        pass

    def prune_active(self, v: Vector, g: Vector, x: Vector,
                     eps: float = 0.0) -> None:
        '''Set `v` to zero on the binding set.'''
        pass

    def prune_inactive(self, v: Vector, g: Vector, x: Vector,
                       eps: float = 0.0) -> None:
        '''Set `v` to zero outside of the binding set.'''
        pass

    def is_feasible(self, x: Vector) -> bool:
        '''Check whether `x` satisfies the bounds.'''
        return True

    def compute_projected_gradient(self, g: Vector, x: Vector) -> None:
        '''
        Replace `g` with the projected gradient at `x`.

        The projected gradient is the gradient with all binding
        components removed.
        '''
        tmp = g.copy()
        self.prune_active(g, tmp, x)


class BoxConstraint(BoundConstraint):
    '''
    Element-wise bounds on an :class:`EuclideanVector`.

    Parameters
    ----------
    lower : array-like, optional
        Lower bounds. `None` or `-inf` entries mean no lower bound.
    upper : array-like, optional
        Upper bounds. `None` or `inf` entries mean no upper bound.
    dim : int, optional
        Dimension. Only required if both bounds are scalars or `None`.
    activated : bool, optional
        Whether the bounds are enforced initially. Defaults to `True`.

    Raises
    ------
    ValueError
        Some lower bound exceeds the corresponding upper bound.
    '''
    _lo: NDArray[numpy.float64]
    _up: NDArray[numpy.float64]
    _min_diff: float

    def __init__(self, lower: Optional[ArrayLike] = None,
                 upper: Optional[ArrayLike] = None,
                 dim: Optional[int] = None,
                 activated: bool = True):
        super().__init__(activated)

        if dim is None:
            for bnd in (lower, upper):
                if bnd is not None and numpy.ndim(bnd) > 0:
                    dim = len(numpy.atleast_1d(bnd))
                    break
            else:
                raise ValueError('dim must be given for scalar bounds')

        self._lo = numpy.broadcast_to(
            -math.inf if lower is None else numpy.asarray(lower, dtype=float),
            (dim,)
        ).copy()
        self._up = numpy.broadcast_to(
            math.inf if upper is None else numpy.asarray(upper, dtype=float),
            (dim,)
        ).copy()

        if numpy.any(self._lo > self._up):
            raise ValueError('lower bound exceeds upper bound')

        gap = self._up - self._lo
        gap = gap[numpy.isfinite(gap)]
        self._min_diff = 0.5 * float(numpy.min(gap)) if gap.size > 0 \
            else math.inf

    @property
    def lower(self) -> NDArray[numpy.float64]:
        '''Lower bounds.'''
        return self._lo

    @property
    def upper(self) -> NDArray[numpy.float64]:
        '''Upper bounds.'''
        return self._up

    def _binding(self, g: Vector, x: Vector,
                 eps: float) -> NDArray[numpy.bool_]:
        epsn = min(eps, self._min_diff)
        xa, ga = _array(x), _array(g)
        return (((xa <= self._lo + epsn) & (ga > 0.0))
                | ((xa >= self._up - epsn) & (ga < 0.0)))

    def project(self, x: Vector) -> None:
        xa = _array(x)
        numpy.clip(xa, self._lo, self._up, out=xa)

    def prune_active(self, v: Vector, g: Vector, x: Vector,
                     eps: float = 0.0) -> None:
        _array(v)[self._binding(g, x, eps)] = 0.0

    def prune_inactive(self, v: Vector, g: Vector, x: Vector,
                       eps: float = 0.0) -> None:
        _array(v)[~self._binding(g, x, eps)] = 0.0

    def is_feasible(self, x: Vector) -> bool:
        xa = _array(x)
        return bool(numpy.all((xa >= self._lo) & (xa <= self._up)))


def _array(vec: Vector) -> NDArray[numpy.float64]:
    if not isinstance(vec, EuclideanVector):
        raise TypeError(
            f'BoxConstraint requires EuclideanVector, got {type(vec).__name__}'
        )
    return vec.array
