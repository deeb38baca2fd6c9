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
Mutable records shared between the optimization loop and its steps.
'''

from dataclasses import dataclass
from typing import Optional

from .vector import Vector

__all__ = ['AlgorithmState', 'StepState']


@dataclass(slots=True)
class AlgorithmState:
    '''
    State of an optimization run.

    The record is shared between the driver and the step. Only the step
    call in progress writes to it:

    * `iter`, `gnorm` and `iterate_vec` are written by `initialize` and
      `update`;
    * `value` and `snorm` are written by `initialize` and `compute`;
    * `nfval` and `ngrad` are incremented by all three.
    '''

    #: Number of accepted iterations.
    iter: int = 0

    #: Objective value at the current iterate.
    value: float = 0.0

    #: Criticality measure at the current iterate.
    gnorm: float = 0.0

    #: Norm of the last step.
    snorm: float = 0.0

    #: Cumulative number of objective evaluations.
    nfval: int = 0

    #: Cumulative number of gradient evaluations.
    ngrad: int = 0

    #: Copy of the current iterate.
    iterate_vec: Optional[Vector] = None


@dataclass(slots=True)
class StepState:
    '''
    Per-step storage.

    Lives for the entire run. `descent_vec` and `search_size` are
    overwritten by every call to `compute`, `gradient_vec` by every call
    to `update` and always holds the gradient at the current iterate.
    '''

    #: Gradient at the current iterate.
    gradient_vec: Vector

    #: Last accepted step.
    descent_vec: Vector

    #: Last accepted step length.
    search_size: float = 0.0
