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
Objective proxy that provides reduced second-order operators.
'''

from typing import Callable, Optional

from .bounds import BoundConstraint
from .objective import Objective
from .typing.solver import SecantOperator
from .vector import Vector

__all__ = ['ProjectedObjective']


Operator = Callable[[Vector, Vector, Vector, float], None]


class ProjectedObjective(Objective):
    '''
    Proxy for an objective under bound constraints.

    Evaluations are forwarded to the underlying objective. Second-order
    operators are replaced by secant models if requested, and the
    `reduced_*` methods restrict them to the free variables: binding
    components (as determined by the reference direction `d` at the
    point `p` within tolerance `eps`) are passed through unchanged while
    the operator acts on the remaining ones.

    Parameters
    ----------
    obj : Objective
        Underlying objective.
    con : BoundConstraint
        Bound constraints.
    secant : SecantOperator, optional
        Secant operator used to model the Hessian or precondition.
    use_secant_precond : bool
        Use the secant inverse Hessian as preconditioner.
    use_secant_hess_vec : bool
        Use the secant operator in place of the Hessian and its inverse.
    eps : float
        Active set tolerance.
    '''
    _obj: Objective
    _con: BoundConstraint
    _secant: Optional[SecantOperator]
    _precond: bool
    _hessvec: bool
    _eps: float

    def __init__(self, obj: Objective, con: BoundConstraint,
                 secant: Optional[SecantOperator] = None,
                 use_secant_precond: bool = False,
                 use_secant_hess_vec: bool = False,
                 eps: float = 0.0):
        super().__init__()
        self._obj = obj
        self._con = con
        self._secant = secant
        self._precond = use_secant_precond and secant is not None
        self._hessvec = use_secant_hess_vec and secant is not None
        self._eps = eps

    @property
    def objective(self) -> Objective:
        '''Underlying objective.'''
        return self._obj

    @property
    def constraint(self) -> BoundConstraint:
        '''Bound constraints.'''
        return self._con

    @property
    def eps(self) -> float:
        '''Active set tolerance.'''
        return self._eps

    def update(self, x: Vector, flag: bool = True, iter: int = -1) -> None:
        self._obj.update(x, flag, iter)

    def value(self, x: Vector, tol: float) -> float:
        return self._obj.value(x, tol)

    def gradient(self, g: Vector, x: Vector, tol: float) -> None:
        self._obj.gradient(g, x, tol)

    def hess_vec(self, hv: Vector, v: Vector, x: Vector, tol: float) -> None:
        if self._hessvec:
            self._secant.apply_b(hv, v, x)
        else:
            self._obj.hess_vec(hv, v, x, tol)

    def inv_hess_vec(self, hv: Vector, v: Vector, x: Vector,
                     tol: float) -> None:
        if self._hessvec:
            self._secant.apply_h(hv, v, x)
        else:
            self._obj.inv_hess_vec(hv, v, x, tol)

    def precond(self, pv: Vector, v: Vector, x: Vector, tol: float) -> None:
        if self._precond:
            self._secant.apply_h(pv, v, x)
        else:
            self._obj.precond(pv, v, x, tol)

    def _reduced(self, op: Operator, out: Vector, v: Vector, p: Vector,
                 d: Vector, x: Vector, tol: float) -> None:
        if not self._con.is_activated():
            op(out, v, x, tol)
            return

        # Apply the operator to the free components only.
        vnew = v.copy()
        self._con.prune_active(vnew, d, p, self._eps)
        op(out, vnew, x, tol)
        self._con.prune_active(out, d, p, self._eps)

        # Pass the binding components through.
        vnew.set(v)
        self._con.prune_inactive(vnew, d, p, self._eps)
        out.plus(vnew)

    def reduced_hess_vec(self, hv: Vector, v: Vector, p: Vector, d: Vector,
                         x: Vector, tol: float) -> None:
        '''
        Apply the reduced Hessian.

        :param hv: Output vector.
        :param v: Input vector.
        :param p: Point at which the binding set is determined.
        :param d: Reference direction for the binding set.
        :param x: Point at which the Hessian is evaluated.
        :param tol: Evaluation tolerance.
        '''
        self._reduced(self.hess_vec, hv, v, p, d, x, tol)

    def reduced_inv_hess_vec(self, hv: Vector, v: Vector, p: Vector,
                             d: Vector, x: Vector, tol: float) -> None:
        '''Apply the reduced inverse Hessian. See `reduced_hess_vec`.'''
        self._reduced(self.inv_hess_vec, hv, v, p, d, x, tol)

    def reduced_precond(self, pv: Vector, v: Vector, p: Vector, d: Vector,
                        x: Vector, tol: float) -> None:
        '''Apply the reduced preconditioner. See `reduced_hess_vec`.'''
        self._reduced(self.precond, pv, v, p, d, x, tol)
