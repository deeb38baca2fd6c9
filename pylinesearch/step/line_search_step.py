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
Line-search globalized optimization step.
'''

import logging
from typing import Optional

from ..bounds import BoundConstraint
from ..krylov import KrylovFlag
from ..linesearch import get_line_search
from ..logging import TabularLogger
from ..objective import SQRT_EPS, Objective
from ..parameters import DescentType, StepParameters
from ..projected import ProjectedObjective
from ..secant import Secant
from ..state import AlgorithmState, StepState
from ..typing import LineSearchOperator
from ..vector import Vector
from .descent import (
    Descent,
    NewtonDescent,
    NewtonKrylovDescent,
    NonlinearCGDescent,
    SecantDescent,
    SteepestDescent,
    make_descent,
)
from .step import Step

__all__ = ['LineSearchStep']


logger = logging.getLogger(__name__)


class LineSearchStep(Step):
    '''
    Optimization step that globalizes a search direction by a line search.

    Every call to :meth:`compute` determines a search direction with the
    configured strategy, falls back to the (projected) negative gradient
    if that direction is not a descent direction, runs the line search and
    turns the scaled direction into a feasible step. :meth:`update` then
    applies the step and refreshes gradient, criticality measure and
    secant history.

    Parameters
    ----------
    params : StepParameters, optional
        Algorithmic options. Built from `kwargs` if omitted.
    secant : Secant, optional
        Secant operator to use in place of the one described by `params`.
        Only used by the quasi-Newton strategy and by Newton-Krylov with
        secant preconditioning.
    line_search : LineSearchOperator, optional
        Line search to use in place of the one described by `params`.
    **kwargs
        Fields of :class:`StepParameters`.
    '''
    _params: StepParameters
    _descent: Descent
    _line_search: LineSearchOperator
    _secant_hess_vec: bool
    _krylov_iter: int
    _krylov_flag: KrylovFlag
    _ls_nfval: int
    _ls_ngrad: int
    _table: TabularLogger

    def __init__(self, params: Optional[StepParameters] = None, *,
                 secant: Optional[Secant] = None,
                 line_search: Optional[LineSearchOperator] = None, **kwargs):
        super().__init__()

        if params is None:
            params = StepParameters(**kwargs)
        params.sanitize()
        self._params = params

        self._descent = make_descent(params, secant)
        self._line_search = (line_search if line_search is not None
                             else get_line_search(params))
        self._secant_hess_vec = (params.use_secant_hess_vec
                                 or params.descent_type is DescentType.Secant)

        self._krylov_iter = 0
        self._krylov_flag = KrylovFlag.Converged
        self._ls_nfval = 0
        self._ls_ngrad = 0

        cols = ['iter', 'value', 'gnorm', 'snorm', '#fval', '#grad',
                'ls_#fval', 'ls_#grad']
        if isinstance(self._descent, NewtonKrylovDescent):
            cols += ['iterCG', 'flagCG']
        self._table = TabularLogger(
            cols=cols,
            format={
                'iter': 'd',
                'value': '.6e',
                'gnorm': '.6e',
                'snorm': '.6e',
                '#fval': 'd',
                '#grad': 'd',
                'ls_#fval': 'd',
                'ls_#grad': 'd',
                'iterCG': 'd',
                'flagCG': 'd',
            },
            width={col: 6 if col == 'iter' else
                   15 if col in ('value', 'gnorm', 'snorm') else 10
                   for col in cols},
            sep='',
            align='<',
            indent='  ',
        )

    @property
    def params(self) -> StepParameters:
        '''Algorithmic options.'''
        return self._params

    @property
    def descent(self) -> Descent:
        '''Search direction strategy.'''
        return self._descent

    @property
    def line_search(self) -> LineSearchOperator:
        '''Line search.'''
        return self._line_search

    @property
    def krylov_iterations(self) -> int:
        '''Krylov iterations of the last Newton-Krylov direction.'''
        return self._krylov_iter

    @property
    def krylov_flag(self) -> KrylovFlag:
        '''Krylov termination flag of the last Newton-Krylov direction.'''
        return self._krylov_flag

    @property
    def ls_nfval(self) -> int:
        '''Objective evaluations of the last line search.'''
        return self._ls_nfval

    @property
    def ls_ngrad(self) -> int:
        '''Gradient evaluations of the last line search.'''
        return self._ls_ngrad

    def _criticality(self, g: Vector, x: Vector,
                     con: BoundConstraint) -> float:
        if not con.is_activated():
            return g.norm()
        if self._params.use_projected_grad:
            d = g.copy()
            con.compute_projected_gradient(d, x)
            return d.norm()
        d = x.copy()
        d.axpy(-1.0, g)
        con.project(d)
        d.axpy(-1.0, x)
        return d.norm()

    def initialize(self, x: Vector, obj: Objective, con: BoundConstraint,
                   algo_state: AlgorithmState) -> None:
        self._state = StepState(gradient_vec=x.clone(), descent_vec=x.clone())
        g = self._state.gradient_vec

        if con.is_activated():
            con.project(x)

        obj.update(x, True, algo_state.iter)
        algo_state.value = obj.value(x, SQRT_EPS)
        algo_state.nfval += 1
        obj.gradient(g, x, SQRT_EPS)
        algo_state.ngrad += 1

        algo_state.gnorm = self._criticality(g, x, con)
        algo_state.snorm = 0.0
        algo_state.iterate_vec = x.copy()

    def _directional_derivative(self, s: Vector, g: Vector, x: Vector,
                                con: BoundConstraint, eps: float) -> float:
        if not con.is_activated():
            return -g.dot(s)

        d = x.copy()
        if isinstance(self._descent, SteepestDescent):
            d.axpy(-1.0, s)
            con.project(d)
            d.scale(-1.0)
            d.plus(x)
            return -g.dot(d)

        d.set(s)
        con.prune_active(d, g, x, eps)
        gs = -g.dot(d)

        # Contribution of the binding set.
        d.set(x)
        d.axpy(-1.0, g)
        con.project(d)
        d.scale(-1.0)
        d.plus(x)
        con.prune_inactive(d, g, x, eps)
        return gs - g.dot(d)

    def compute(self, s: Vector, x: Vector, obj: Objective,
                con: BoundConstraint, algo_state: AlgorithmState) -> None:
        step_state = self.state
        g = step_state.gradient_vec
        descent = self._descent

        eps = algo_state.gnorm if con.is_activated() else 0.0
        pobj = ProjectedObjective(obj, con, descent.secant,
                                  self._params.use_secant_precond,
                                  self._secant_hess_vec, eps)

        # Search direction (negated).
        self._krylov_flag = KrylovFlag.Converged
        self._krylov_iter = 0
        if isinstance(descent, NewtonKrylovDescent):
            self._krylov_iter, self._krylov_flag = descent.krylov.run(
                s, g, x, pobj
            )
        elif isinstance(descent, NewtonDescent | SecantDescent):
            pobj.reduced_inv_hess_vec(s, g, x, g, x, SQRT_EPS)
        elif isinstance(descent, NonlinearCGDescent):
            descent.nlcg.run(s, g, x, obj)
        else:
            s.set(g)

        gs = self._directional_derivative(s, g, x, con, eps)
        self._line_search.set_data(g, eps)

        if gs >= 0.0 or (self._krylov_flag is KrylovFlag.NegativeCurvature
                         and self._krylov_iter <= 1):
            logger.debug(f'iteration {algo_state.iter}: no descent direction '
                         f'(gs = {gs:.6e}); using steepest descent')
            s.set(g)
            if con.is_activated():
                d = s.copy()
                con.prune_active(d, s, x)
                gs = -g.dot(d)
            else:
                gs = -g.dot(s)
        s.scale(-1.0)

        result = self._line_search.run(x, s, algo_state.value, gs, obj, con)
        step_state.search_size = result.alpha
        self._ls_nfval = result.nfval
        self._ls_ngrad = result.ngrad
        algo_state.nfval += result.nfval
        algo_state.ngrad += result.ngrad

        # Feasible step.
        s.scale(result.alpha)
        if con.is_activated():
            d = x.copy()
            d.plus(s)
            con.project(d)
            d.axpy(-1.0, x)
            s.set(d)

        step_state.descent_vec.set(s)
        algo_state.snorm = s.norm()
        algo_state.value = result.fval

    def update(self, x: Vector, s: Vector, obj: Objective,
               con: BoundConstraint, algo_state: AlgorithmState) -> None:
        step_state = self.state
        g = step_state.gradient_vec
        secant = self._descent.secant

        algo_state.iter += 1
        x.plus(s)
        obj.update(x, True, algo_state.iter)

        gold = g.copy() if secant is not None else None
        obj.gradient(g, x, SQRT_EPS)
        algo_state.ngrad += 1

        if secant is not None and gold is not None:
            secant.update(g, gold, s, algo_state.snorm, algo_state.iter + 1)

        if algo_state.iterate_vec is None:
            algo_state.iterate_vec = x.copy()
        else:
            algo_state.iterate_vec.set(x)

        algo_state.gnorm = self._criticality(g, x, con)

    def print_name(self) -> str:
        params = self._params
        out = (f'\n{params.descent_type.value} with '
               f'{self._line_search.kind.value} Linesearch satisfying '
               f'{self._line_search.curvature_condition.value}\n')

        descent = self._descent
        if isinstance(descent, NewtonKrylovDescent):
            out += f'Krylov Type: {descent.krylov.krylov_type.value}\n'
        if descent.secant is not None:
            out += f'Secant Type: {params.secant_type.value}\n'
        if isinstance(descent, NonlinearCGDescent):
            out += f'Nonlinear CG Type: {descent.nlcg.nlcg_type.value}\n'
        return out

    def print_header(self) -> str:
        return self._table.format_header() + '\n'

    def print(self, algo_state: AlgorithmState,
              print_header: bool = False) -> str:
        out = ''
        if algo_state.iter == 0:
            out += self.print_name()
        if print_header:
            out += self.print_header()

        values: dict[str, int | float] = {
            'iter': algo_state.iter,
            'value': algo_state.value,
            'gnorm': algo_state.gnorm,
        }
        if algo_state.iter > 0:
            values.update({
                'snorm': algo_state.snorm,
                '#fval': algo_state.nfval,
                '#grad': algo_state.ngrad,
                'ls_#fval': self._ls_nfval,
                'ls_#grad': self._ls_ngrad,
            })
            if isinstance(self._descent, NewtonKrylovDescent):
                values['iterCG'] = self._krylov_iter
                values['flagCG'] = int(self._krylov_flag)
        return out + self._table.format_line(**values) + '\n'
