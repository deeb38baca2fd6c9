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
Search direction strategies.

Each strategy is a small record that carries exactly the collaborators it
needs. The set of strategies is closed; :class:`LineSearchStep`
dispatches on the record type.
'''

from dataclasses import dataclass
import logging
from typing import ClassVar, Optional

from ..krylov import Krylov
from ..nonlinear_cg import NonlinearCG
from ..parameters import DescentType, StepParameters
from ..secant import Secant, get_secant

__all__ = [
    'Descent',
    'NewtonDescent',
    'NewtonKrylovDescent',
    'NonlinearCGDescent',
    'SecantDescent',
    'SteepestDescent',
    'make_descent',
]


logger = logging.getLogger(__name__)


class Descent:
    '''Base class of the search direction strategies.'''
    descent_type: ClassVar[DescentType]

    @property
    def secant(self) -> Optional[Secant]:
        '''Secant operator whose history is updated after every step.'''
        return None


@dataclass(frozen=True, slots=True)
class SteepestDescent(Descent):
    '''Negative gradient.'''
    descent_type: ClassVar[DescentType] = DescentType.Steepest


@dataclass(frozen=True, slots=True)
class NonlinearCGDescent(Descent):
    '''Nonlinear conjugate gradient direction.'''
    descent_type: ClassVar[DescentType] = DescentType.NonlinearCG

    nlcg: NonlinearCG


@dataclass(frozen=True, slots=True)
class SecantDescent(Descent):
    '''Quasi-Newton direction from a secant inverse Hessian model.'''
    descent_type: ClassVar[DescentType] = DescentType.Secant

    secant_op: Secant

    @property
    def secant(self) -> Secant:
        return self.secant_op


@dataclass(frozen=True, slots=True)
class NewtonDescent(Descent):
    '''Newton direction from the objective's inverse Hessian.'''
    descent_type: ClassVar[DescentType] = DescentType.Newton


@dataclass(frozen=True, slots=True)
class NewtonKrylovDescent(Descent):
    '''Inexact Newton direction, optionally secant preconditioned.'''
    descent_type: ClassVar[DescentType] = DescentType.NewtonKrylov

    krylov: Krylov
    secant_op: Optional[Secant] = None

    @property
    def secant(self) -> Optional[Secant]:
        return self.secant_op


def make_descent(params: StepParameters,
                 secant: Optional[Secant] = None) -> Descent:
    '''
    Create the search direction strategy selected by `params`.

    :param params: Step parameters.
    :type params: :class:`StepParameters`
    :param secant: Secant operator to use instead of one built from
        `params`. Only used by strategies that need a secant.
    :type secant: :class:`Secant`, optional
    :raise ValueError: The descent type is unsupported.
    '''
    def new_secant() -> Secant:
        if secant is not None:
            return secant
        return get_secant(params.secant_type, params.secant_storage,
                          params.bb_type)

    descent_type = DescentType.parse(params.descent_type)
    if descent_type is DescentType.Steepest:
        return SteepestDescent()
    if descent_type is DescentType.NonlinearCG:
        return NonlinearCGDescent(NonlinearCG(params.nonlinear_cg_type))
    if descent_type is DescentType.Secant:
        return SecantDescent(new_secant())
    if descent_type is DescentType.Newton:
        return NewtonDescent()
    if descent_type is DescentType.NewtonKrylov:
        krylov = Krylov(params.krylov_type, params.krylov_abs_tol,
                        params.krylov_rel_tol, params.krylov_max_iter,
                        params.use_inexact_hess_vec)
        if params.use_secant_hess_vec and not params.use_secant_precond:
            logger.debug('secant Hessian-vector products require secant '
                         'preconditioning for Newton-Krylov; using the '
                         'objective Hessian')
        return NewtonKrylovDescent(
            krylov, new_secant() if params.use_secant_precond else None
        )
    raise ValueError(f'unsupported descent type: {descent_type}')
