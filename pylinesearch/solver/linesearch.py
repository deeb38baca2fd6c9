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
"""
Implementation of the line-search optimization loop.
"""

from dataclasses import dataclass
from enum import IntEnum
import logging
import time
from typing import Callable, Optional, Self

from ..bounds import BoundConstraint
from ..logging import TabularLogger
from ..objective import Objective
from ..state import AlgorithmState
from ..step import LineSearchStep, Step
from ..typing import JSONSerializable
from ..vector import Vector

__all__ = [
    'LineSearchSolver',
    'SolverParameters',
    'SolverStats',
    'SolverStatus',
]


logger = logging.getLogger(__name__)


@dataclass
class SolverParameters(JSONSerializable):
    '''
    User specified parameters for the algorithm.

    Attributes
    ----------
    gtol : float
        Criticality tolerance. The loop stops once the criticality
        measure drops to or below this value. Defaults to ``1e-6``.
    stol : float
        Step tolerance. The loop stops once the norm of a step drops to
        or below this value. Defaults to ``1e-12``.
    max_iter : int
        Iteration limit. Defaults to ``100``.
    '''

    #: Criticality tolerance.
    gtol: float = 1e-6

    #: Step norm tolerance.
    stol: float = 1e-12

    #: Maximum number of iterations.
    max_iter: int = 100

    def sanitize(self) -> None:
        '''
        Sanitizes parameters.
        '''
        if self.gtol <= 0.0:
            self.gtol = 1e-6

        if self.stol < 0.0:
            self.stol = 1e-12

        if self.max_iter < 0:
            self.max_iter = 100


@dataclass(slots=True)
class SolverStats:
    '''
    Statistics collected during the optimization loop.
    '''

    #: Number of accepted iterations.
    n_iter: int = 0

    #: Total wall time spent in the optimization loop (in seconds).
    t_total: float = 0.0

    #: Norm of last step.
    last_step: float = 0.0


class SolverStatus(IntEnum):
    Running = 0
    Solved = 1
    UnknownError = 64
    SmallStep = 66
    IterationMaximum = 67

    Message: dict[Self, str]

    @property
    def is_running(self) -> bool:
        return self == SolverStatus.Running

    @property
    def is_error(self) -> bool:
        return self >= SolverStatus.UnknownError

    @property
    def message(self) -> str:
        '''Describe status.'''
        return type(self).Message.get(self, '(missing status message)')


SolverStatus.Message = {
    SolverStatus.Running: "still running",
    SolverStatus.Solved: "solution found",
    SolverStatus.UnknownError: "unknown error",
    SolverStatus.IterationMaximum: "iteration maximum exceeded",
    SolverStatus.SmallStep: "step too small",
}


class LineSearchSolver:
    """
    Line-search optimization loop.

    Drives a :class:`Step` from the initial point until the criticality
    measure, the step norm or the iteration count trigger termination.
    The iterate `x` is modified in place.
    """
    #: Objective function.
    objective: Objective

    #: Bound constraints.
    constraint: BoundConstraint

    #: Step.
    step: Step

    #: Current iterate.
    x: Vector

    #: Current status flag.
    status: SolverStatus

    #: Parameters.
    param: SolverParameters

    #: Statistics.
    stats: SolverStats

    #: Shared algorithm state.
    algo_state: AlgorithmState

    #: Callback.
    callback: Optional[Callable[[Self], None]]

    #: Logger for tabular output.
    logger: TabularLogger

    def __init__(self, obj: Objective, x0: Vector,
                 con: Optional[BoundConstraint] = None,
                 step: Optional[Step] = None,
                 param: Optional[SolverParameters] = None,
                 callback: Optional[Callable[[Self], None]] = None,
                 **kwargs):
        # Retain reference to objective and constraints.
        self.objective = obj
        self.constraint = con if con is not None else BoundConstraint()
        self.x = x0

        # Set up step.
        if step is None:
            self.step = LineSearchStep()
        else:
            self.step = step

        # Set up parameter structure.
        if param is not None:
            self.param = param
        else:
            self.param = SolverParameters(**kwargs)
        self.param.sanitize()

        # Set up remaining data.
        self.status = SolverStatus.Running
        self.stats = SolverStats()
        self.algo_state = AlgorithmState()
        self.callback = callback

        # Set up logger.
        self.logger = TabularLogger(
            cols=['time', 'iter', 'obj', 'gnorm', 'step', 'nfval', 'ngrad'],
            format={
                'time': '8.2f',
                'iter': '4d',
                'obj': '13.6e',
                'gnorm': '13.6e',
                'step': '13.6e',
                'nfval': '6d',
                'ngrad': '6d',
            },
            width={
                'time': 8,
                'iter': 4,
                'obj': 13,
                'gnorm': 13,
                'step': 13,
                'nfval': 6,
                'ngrad': 6,
            },
            flush=True
        )

    def _check_status(self) -> None:
        if self.algo_state.gnorm <= self.param.gtol:
            self.status = SolverStatus.Solved
        elif self.algo_state.iter > 0 and \
                self.algo_state.snorm <= self.param.stol:
            self.status = SolverStatus.SmallStep
        elif self.stats.n_iter >= self.param.max_iter:
            self.status = SolverStatus.IterationMaximum

    def iterate(self) -> None:
        '''
        Perform a single optimization step.
        '''
        s = self.x.clone()
        self.step.compute(s, self.x, self.objective, self.constraint,
                          self.algo_state)
        self.step.update(self.x, s, self.objective, self.constraint,
                         self.algo_state)
        self.stats.n_iter += 1
        self.stats.last_step = self.algo_state.snorm

    def solve(self) -> None:
        '''
        Run the main optimization loop.
        '''
        # Record start time.
        start_time = time.perf_counter()

        self.status = SolverStatus.Running
        self.step.initialize(self.x, self.objective, self.constraint,
                             self.algo_state)

        # Print initial log line.
        self.logger.push_line(
            time=time.perf_counter() - start_time,
            iter=self.algo_state.iter,
            obj=self.algo_state.value,
            gnorm=self.algo_state.gnorm,
            nfval=self.algo_state.nfval,
            ngrad=self.algo_state.ngrad
        )
        if self.callback is not None:
            self.callback(self)

        self._check_status()
        while self.status.is_running:
            self.iterate()
            self.logger.push_line(
                time=time.perf_counter() - start_time,
                iter=self.algo_state.iter,
                obj=self.algo_state.value,
                gnorm=self.algo_state.gnorm,
                step=self.algo_state.snorm,
                nfval=self.algo_state.nfval,
                ngrad=self.algo_state.ngrad
            )
            if self.callback is not None:
                self.callback(self)
            self._check_status()

        self.stats.t_total += time.perf_counter() - start_time

        # Log termination reason.
        logger.info(f'Terminated: {self.status.message}')
