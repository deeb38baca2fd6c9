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
Generic base classes.
'''

from abc import ABC, abstractmethod
from typing import Optional

from ..bounds import BoundConstraint
from ..objective import Objective
from ..state import AlgorithmState, StepState
from ..vector import Vector

__all__ = ['Step']


class Step(ABC):
    '''
    Abstract base class for optimization steps.

    A step is driven by an outer loop that calls :meth:`initialize` once
    and then alternates between :meth:`compute` and :meth:`update`. The
    step owns a :class:`StepState` for the entire run while the
    :class:`AlgorithmState` is shared with the driver.
    '''
    _state: Optional[StepState]

    def __init__(self):
        self._state = None

    @property
    def state(self) -> StepState:
        '''
        Per-step storage.

        :raise ValueError: The step has not been initialized.
        '''
        if self._state is None:
            raise ValueError('step state is not set; call initialize first')
        return self._state

    @abstractmethod
    def initialize(self, x: Vector, obj: Objective, con: BoundConstraint,
                   algo_state: AlgorithmState) -> None:
        '''
        Prepare the step for a run starting at `x`.

        :param x: Initial iterate. Projected in place if the bounds are
            active.
        :param obj: Objective.
        :param con: Bound constraints.
        :param algo_state: Algorithm state to be filled in.
        '''
        pass

    @abstractmethod
    def compute(self, s: Vector, x: Vector, obj: Objective,
                con: BoundConstraint, algo_state: AlgorithmState) -> None:
        '''
        Compute the next step and store it in `s`.

        :raise ValueError: The step has not been initialized.
        '''
        pass

    @abstractmethod
    def update(self, x: Vector, s: Vector, obj: Objective,
               con: BoundConstraint, algo_state: AlgorithmState) -> None:
        '''
        Apply the step `s` to `x` and refresh the derived quantities.

        :raise ValueError: The step has not been initialized.
        '''
        pass

    def print_name(self) -> str:
        '''Describe the algorithm.'''
        return f'\n{type(self).__name__}\n'

    def print_header(self) -> str:
        '''Column header of the iteration log.'''
        return ''

    def print(self, algo_state: AlgorithmState,
              print_header: bool = False) -> str:
        '''Format one line of the iteration log.'''
        return ''
