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
Generic base class for limited-memory secant operators.
'''

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging

import numpy

from ..vector import Vector

__all__ = ['Secant', 'SecantState']


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SecantState:
    '''
    Curvature pair history of a secant operator.

    The lists are ordered from oldest to newest. `current` is the index
    of the newest pair or `-1` if no pair has been stored.
    '''

    #: Maximal number of stored pairs.
    storage: int

    #: Iterate differences `s = x_{k+1} - x_k`.
    iter_diff: list[Vector] = field(default_factory=list)

    #: Gradient differences `y = g_{k+1} - g_k`.
    grad_diff: list[Vector] = field(default_factory=list)

    #: Inner products `<s, y>`.
    product: list[float] = field(default_factory=list)

    #: Index of the newest pair.
    current: int = -1

    #: Iteration number passed with the last update.
    iter: int = 0


class Secant(ABC):
    '''
    Abstract base class for secant (quasi-Newton) operators.

    A secant operator keeps a limited history of curvature pairs and uses
    it to apply an approximation `B` of the Hessian and its inverse `H`.
    The history survives across iterations, so a secant must be reused
    for the whole optimization run.

    :param storage: Maximal number of curvature pairs. Must be positive.
    :type storage: int
    :raise ValueError: `storage` is not positive.
    '''
    _state: SecantState

    def __init__(self, storage: int = 10):
        if storage <= 0:
            raise ValueError('storage')
        self._state = SecantState(storage=storage)

    @property
    def state(self) -> SecantState:
        '''Curvature pair history.'''
        return self._state

    def reset(self) -> None:
        '''Discard all curvature pairs.'''
        self._state = SecantState(storage=self._state.storage)

    def update(self, grad: Vector, gp: Vector, s: Vector, snorm: float,
               iter: int) -> None:
        '''
        Store a new curvature pair.

        The pair is discarded unless it satisfies the curvature condition
        `<s, y> > eps * ||s||^2`. Once the storage limit is reached, the
        oldest pair is dropped.

        :param grad: Gradient at the new iterate.
        :type grad: :class:`Vector`
        :param gp: Gradient at the previous iterate.
        :type gp: :class:`Vector`
        :param s: Step between the two iterates.
        :type s: :class:`Vector`
        :param snorm: Norm of `s`.
        :type snorm: float
        :param iter: Iteration number.
        :type iter: int
        '''
        state = self._state
        state.iter = iter

        y = grad.copy()
        y.axpy(-1.0, gp)

        sy = s.dot(y)
        if sy <= numpy.finfo(float).eps * snorm * snorm:
            logger.debug(f'skipping secant update with <s, y> = {sy}')
            return

        if state.current < state.storage - 1:
            state.current += 1
        else:
            del state.iter_diff[0]
            del state.grad_diff[0]
            del state.product[0]
        state.iter_diff.append(s.copy())
        state.grad_diff.append(y)
        state.product.append(sy)

    def _has_pairs(self) -> bool:
        return self._state.iter != 0 and self._state.current != -1

    def apply_h0(self, hv: Vector, v: Vector, x: Vector) -> None:
        '''Apply the initial inverse Hessian approximation.'''
        hv.set(v)
        if self._has_pairs():
            state = self._state
            y = state.grad_diff[state.current]
            hv.scale(state.product[state.current] / y.dot(y))

    def apply_b0(self, bv: Vector, v: Vector, x: Vector) -> None:
        '''Apply the initial Hessian approximation.'''
        bv.set(v)
        if self._has_pairs():
            state = self._state
            y = state.grad_diff[state.current]
            bv.scale(y.dot(y) / state.product[state.current])

    @abstractmethod
    def apply_h(self, hv: Vector, v: Vector, x: Vector) -> None:
        '''
        Apply the inverse Hessian approximation.

        :param hv: Output vector.
        :type hv: :class:`Vector`
        :param v: Input vector.
        :type v: :class:`Vector`
        :param x: Current iterate.
        :type x: :class:`Vector`
        '''
        pass

    @abstractmethod
    def apply_b(self, bv: Vector, v: Vector, x: Vector) -> None:
        '''
        Apply the Hessian approximation.

        :param bv: Output vector.
        :type bv: :class:`Vector`
        :param v: Input vector.
        :type v: :class:`Vector`
        :param x: Current iterate.
        :type x: :class:`Vector`
        '''
        pass
