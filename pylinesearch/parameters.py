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
Algorithmic options of the line-search step.
'''

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Self

from .typing.io import JSONSerializable

__all__ = [
    'CurvatureCondition',
    'DescentType',
    'KrylovType',
    'LineSearchType',
    'NonlinearCGType',
    'SecantType',
    'StepParameters',
]


class OptionEnum(StrEnum):
    '''
    String enumeration whose members can be looked up by their display
    name regardless of case and surrounding whitespace.
    '''

    @classmethod
    def parse(cls, value: 'str | OptionEnum') -> Self:
        '''
        Look up a member by value.

        :raise ValueError: No member has the given value.
        '''
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f'unknown {cls.__name__}: {value!r}')


class DescentType(OptionEnum):
    '''Strategy used to compute the search direction.'''
    Steepest = 'Steepest Descent'
    NonlinearCG = 'Nonlinear CG'
    Secant = 'Quasi-Newton Method'
    Newton = "Newton's Method"
    NewtonKrylov = 'Newton-Krylov'


class LineSearchType(OptionEnum):
    '''Step length selection algorithm.'''
    Backtracking = 'Backtracking'
    CubicInterpolation = 'Cubic Interpolation'
    Bisection = 'Bisection'


class CurvatureCondition(OptionEnum):
    '''Condition paired with sufficient decrease to accept a step length.'''
    Wolfe = 'Wolfe Conditions'
    StrongWolfe = 'Strong Wolfe Conditions'
    GeneralizedWolfe = 'Generalized Wolfe Conditions'
    ApproximateWolfe = 'Approximate Wolfe Conditions'
    Goldstein = 'Goldstein Conditions'
    Null = 'Null Curvature Condition'


class NonlinearCGType(OptionEnum):
    '''Formula for the nonlinear CG update parameter.'''
    HestenesStiefel = 'Hestenes-Stiefel'
    FletcherReeves = 'Fletcher-Reeves'
    Daniels = 'Daniels'
    PolakRibiere = 'Polak-Ribiere'
    FletcherConjDesc = 'Fletcher Conjugate Descent'
    LiuStorey = 'Liu-Storey'
    DaiYuan = 'Dai-Yuan'
    HagerZhang = 'Hager-Zhang'


class SecantType(OptionEnum):
    '''Quasi-Newton update formula.'''
    LBFGS = 'Limited-Memory BFGS'
    LDFP = 'Limited-Memory DFP'
    BarzilaiBorwein = 'Barzilai-Borwein'


class KrylovType(OptionEnum):
    '''Krylov method used for inexact Newton steps.'''
    CG = 'Conjugate Gradients'
    CR = 'Conjugate Residuals'


_ENUM_FIELDS: dict[str, type[OptionEnum]] = {
    'descent_type': DescentType,
    'linesearch_type': LineSearchType,
    'curvature_condition': CurvatureCondition,
    'nonlinear_cg_type': NonlinearCGType,
    'secant_type': SecantType,
    'krylov_type': KrylovType,
}


@dataclass
class StepParameters(JSONSerializable):
    '''
    User specified parameters for the line-search step.

    Enumeration fields accept either members or their display names.
    The record can also be built from a key/value parameter list with
    :meth:`from_parameter_list`; :attr:`PARAMETER_NAMES` lists the
    recognized keys.
    '''

    #: Search direction strategy.
    descent_type: DescentType = DescentType.Secant

    #: Step length selection algorithm.
    linesearch_type: LineSearchType = LineSearchType.CubicInterpolation

    #: Curvature condition.
    curvature_condition: CurvatureCondition = CurvatureCondition.StrongWolfe

    #: Nonlinear CG variant.
    nonlinear_cg_type: NonlinearCGType = NonlinearCGType.HagerZhang

    #: Secant update formula.
    secant_type: SecantType = SecantType.LBFGS

    #: Krylov method.
    krylov_type: KrylovType = KrylovType.CG

    #: Objective values are inexact. Recorded only; objective values are
    #: always requested with tolerance `SQRT_EPS`.
    use_inexact_objective: bool = False

    #: Gradients are inexact. Recorded only; gradients are always
    #: requested with tolerance `SQRT_EPS`.
    use_inexact_gradient: bool = False

    #: Hessian-vector products are inexact.
    use_inexact_hess_vec: bool = False

    #: Model the Hessian with the secant operator. Forced for the secant
    #: descent type.
    use_secant_hess_vec: bool = False

    #: Precondition the Krylov solver with the secant operator.
    use_secant_precond: bool = False

    #: Use the norm of the projected gradient as criticality measure under
    #: bound constraints.
    use_projected_grad: bool = False

    #: Absolute Krylov residual tolerance.
    krylov_abs_tol: float = 1e-4

    #: Krylov residual tolerance relative to the gradient norm.
    krylov_rel_tol: float = 1e-2

    #: Krylov iteration limit.
    krylov_max_iter: int = 20

    #: Number of stored curvature pairs.
    secant_storage: int = 10

    #: Barzilai-Borwein variant (1 or 2).
    bb_type: int = 1

    #: Function evaluation limit of the line search.
    ls_max_eval: int = 20

    #: Sufficient decrease parameter. Must be in (0, 1).
    c1: float = 1e-4

    #: Curvature condition parameter. Must be in (c1, 1).
    c2: float = 0.9

    #: Upper curvature parameter of the generalized Wolfe conditions.
    c3: float = 0.9

    #: Contraction rate of backtracking. Must be in (0, 1).
    backtracking_rate: float = 0.5

    #: Bracket width at which bisection stops.
    bracketing_tol: float = 1e-8

    #: Always start the line search from `initial_step`.
    user_initial_step: bool = False

    #: Initial step length if `user_initial_step` is set.
    initial_step: float = 1.0

    #: Mapping of parameter list keys to field names.
    PARAMETER_NAMES = {
        'Descent Type': 'descent_type',
        'Linesearch Type': 'linesearch_type',
        'Linesearch Curvature Condition': 'curvature_condition',
        'Nonlinear CG Type': 'nonlinear_cg_type',
        'Secant Type': 'secant_type',
        'Krylov Type': 'krylov_type',
        'Use Inexact Objective Function': 'use_inexact_objective',
        'Use Inexact Gradient': 'use_inexact_gradient',
        'Use Inexact Hessian-Times-A-Vector': 'use_inexact_hess_vec',
        'Use Secant Hessian-Times-A-Vector': 'use_secant_hess_vec',
        'Use Secant Preconditioning': 'use_secant_precond',
        'Use Projected Gradient Criticality Measure': 'use_projected_grad',
        'Absolute Krylov Tolerance': 'krylov_abs_tol',
        'Relative Krylov Tolerance': 'krylov_rel_tol',
        'Maximum Number of Krylov Iterations': 'krylov_max_iter',
        'Maximum Secant Storage': 'secant_storage',
        'Barzilai-Borwein Type': 'bb_type',
        'Function Evaluation Limit': 'ls_max_eval',
        'Sufficient Decrease Parameter': 'c1',
        'Curvature Conditions Parameter': 'c2',
        'Curvature Conditions Parameter: Generalized Wolfe': 'c3',
        'Backtracking Rate': 'backtracking_rate',
        'Bracketing Tolerance': 'bracketing_tol',
        'User Defined Initial Step Size': 'user_initial_step',
        'Initial Step Size': 'initial_step',
    }

    def __post_init__(self) -> None:
        for name, enum_type in _ENUM_FIELDS.items():
            setattr(self, name, enum_type.parse(getattr(self, name)))

    @classmethod
    def from_parameter_list(cls, parlist: Mapping[str, Any]) -> Self:
        '''
        Build parameters from a key/value parameter list.

        Keys are matched case-insensitively. Keys that are not recognized
        are ignored so that one list can configure several components.
        '''
        names = {key.strip().lower(): name
                 for key, name in cls.PARAMETER_NAMES.items()}
        kwargs = {}
        for key, val in parlist.items():
            name = names.get(key.strip().lower())
            if name is not None:
                kwargs[name] = val
        return cls(**kwargs)

    def sanitize(self) -> None:
        '''
        Sanitizes parameters.
        '''
        if self.krylov_abs_tol <= 0.0:
            self.krylov_abs_tol = 1e-4

        if self.krylov_rel_tol <= 0.0:
            self.krylov_rel_tol = 1e-2

        if self.krylov_max_iter <= 0:
            self.krylov_max_iter = 20

        if self.secant_storage <= 0:
            self.secant_storage = 10

        if self.bb_type not in (1, 2):
            self.bb_type = 1

        if self.ls_max_eval <= 0:
            self.ls_max_eval = 20

        if self.c1 <= 0.0 or self.c1 >= 1.0:
            self.c1 = 1e-4

        if self.c2 <= self.c1 or self.c2 >= 1.0:
            self.c2 = 0.9

        if self.c3 <= 0.0 or self.c3 >= 1.0:
            self.c3 = 0.9

        if self.backtracking_rate <= 0.0 or self.backtracking_rate >= 1.0:
            self.backtracking_rate = 0.5

        if self.bracketing_tol <= 0.0:
            self.bracketing_tol = 1e-8

        if self.initial_step <= 0.0:
            self.initial_step = 1.0
