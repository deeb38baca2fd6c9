# PyLineSearch - Python library for line-search optimization
# Copyright 2023 Mirko Hahn
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import math

import numpy
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from pylinesearch.bounds import BoundConstraint, BoxConstraint
from pylinesearch.helpers import QuadraticObjective, RosenbrockObjective
from pylinesearch.krylov import KrylovFlag
from pylinesearch.linesearch import LineSearch, LineSearchResult
from pylinesearch.objective import SQRT_EPS, Objective
from pylinesearch.parameters import (
    DescentType,
    LineSearchType,
    StepParameters,
)
from pylinesearch.secant import LimitedMemoryBFGS
from pylinesearch.spaces import EuclideanVector
from pylinesearch.state import AlgorithmState
from pylinesearch.step import (
    LineSearchStep,
    NewtonKrylovDescent,
    SecantDescent,
    SteepestDescent,
)


# RAW DATA
_diag = numpy.diag([1.0, 10.0, 100.0])


# FIXTURES
@pytest.fixture(params=list(DescentType))
def descent_type(request):
    return request.param


# HELPERS
class RecordingLineSearch(LineSearch):
    '''Accepts the unit step and records its input.'''
    kind = LineSearchType.Backtracking

    def __init__(self, params):
        super().__init__(params)
        self.calls = []

    def run(self, x, s, fval, gs, obj, con):
        self.calls.append((s.array.copy(), gs))
        return LineSearchResult(1.0, fval, 0, 0)


class NegatingSecant(LimitedMemoryBFGS):
    def apply_h(self, hv, v, x):
        hv.set(v)
        hv.scale(-1.0)


class CountingSecant(LimitedMemoryBFGS):
    def __init__(self, storage=10):
        super().__init__(storage)
        self.count = 0

    def update(self, grad, gp, s, snorm, iter):
        self.count += 1
        super().update(grad, gp, s, snorm, iter)


class NegatedNewtonQuadratic(QuadraticObjective):
    def inv_hess_vec(self, hv, v, x, tol):
        super().inv_hess_vec(hv, v, x, tol)
        hv.scale(-1.0)


class ToleranceRecordingQuadratic(QuadraticObjective):
    def __init__(self, mat):
        super().__init__(mat)
        self.tols = []

    def value(self, x, tol):
        self.tols.append(tol)
        return super().value(x, tol)

    def gradient(self, g, x, tol):
        self.tols.append(tol)
        super().gradient(g, x, tol)


class FirstOrderObjective(Objective):
    def value(self, x, tol):
        return 0.5 * x.dot(x)

    def gradient(self, g, x, tol):
        g.set(x)


def vec(*data):
    return EuclideanVector(data)


def start(step, x, obj, con=None):
    if con is None:
        con = BoundConstraint()
    algo_state = AlgorithmState()
    step.initialize(x, obj, con, algo_state)
    return algo_state


def iterate(step, x, obj, con, algo_state):
    s = x.clone()
    step.compute(s, x, obj, con, algo_state)
    step.update(x, s, obj, con, algo_state)
    return s


def recording_step(descent_type, **kwargs):
    params = StepParameters(descent_type=descent_type)
    ls = RecordingLineSearch(params)
    return LineSearchStep(params, line_search=ls, **kwargs), ls


# TESTS
def test_initialize():
    obj = QuadraticObjective(numpy.eye(2))
    step = LineSearchStep(descent_type=DescentType.Steepest)
    x = vec(3.0, 4.0)
    algo_state = start(step, x, obj)

    assert algo_state.iter == 0
    assert algo_state.value == 12.5
    assert algo_state.gnorm == 5.0
    assert algo_state.snorm == 0.0
    assert algo_state.nfval == 1
    assert algo_state.ngrad == 1
    assert_array_equal(step.state.gradient_vec.array, [3.0, 4.0])
    assert_array_equal(algo_state.iterate_vec.array, [3.0, 4.0])


def test_state_requires_initialize():
    step = LineSearchStep()
    x = vec(1.0, 1.0)
    with pytest.raises(ValueError):
        step.compute(x.clone(), x, QuadraticObjective(numpy.eye(2)),
                     BoundConstraint(), AlgorithmState())


def test_steepest_descent_on_identity():
    obj = QuadraticObjective(numpy.eye(2))
    step = LineSearchStep(descent_type=DescentType.Steepest)
    x = vec(3.0, 4.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)

    s = iterate(step, x, obj, con, algo_state)
    assert step.state.search_size == 1.0
    assert step.ls_nfval == 2
    assert_array_equal(s.array, [-3.0, -4.0])
    assert_array_equal(x.array, [0.0, 0.0])
    assert algo_state.iter == 1
    assert algo_state.value == 0.0
    assert algo_state.gnorm == 0.0
    assert algo_state.snorm == 5.0
    assert algo_state.nfval == 3
    assert algo_state.ngrad == 2


def test_initialize_projects_onto_bounds():
    obj = QuadraticObjective(numpy.eye(2))
    con = BoxConstraint(lower=[1.0, 1.0])
    step = LineSearchStep(descent_type=DescentType.Steepest)
    x = vec(0.0, 0.0)
    algo_state = start(step, x, obj, con)

    assert_array_equal(x.array, [1.0, 1.0])
    assert algo_state.gnorm == 0.0


def test_infeasible_iterate_is_clamped_by_step():
    obj = QuadraticObjective(numpy.eye(2))
    con = BoxConstraint(lower=[1.0, 1.0])
    step = LineSearchStep(descent_type=DescentType.Steepest,
                          linesearch_type=LineSearchType.Backtracking)
    x = vec(0.0, 0.0)
    # Start without bounds so that the iterate stays at the origin.
    algo_state = start(step, x, obj)

    s = iterate(step, x, obj, con, algo_state)
    assert_array_equal(s.array, [1.0, 1.0])
    assert_array_equal(x.array, [1.0, 1.0])
    assert algo_state.value == 1.0
    assert algo_state.gnorm == 0.0


def test_projected_steepest_descent():
    # Unconstrained minimizer (2, 2) lies outside of the box.
    obj = QuadraticObjective(numpy.eye(2), [2.0, 2.0])
    con = BoxConstraint(upper=[1.0, 1.0])
    step = LineSearchStep(descent_type=DescentType.Steepest,
                          linesearch_type=LineSearchType.Backtracking)
    x = vec(0.0, 0.0)
    algo_state = start(step, x, obj, con)
    assert algo_state.gnorm == pytest.approx(math.sqrt(2.0))

    s = x.clone()
    step.compute(s, x, obj, con, algo_state)
    assert step.state.search_size == 2.0
    assert_array_equal(s.array, [1.0, 1.0])
    assert algo_state.snorm == pytest.approx(math.sqrt(2.0))
    assert algo_state.value == -3.0

    step.update(x, s, obj, con, algo_state)
    assert_array_equal(x.array, [1.0, 1.0])
    assert algo_state.gnorm == 0.0


def test_projected_gradient_criticality():
    obj = QuadraticObjective(numpy.eye(2), [2.0, 2.0])
    con = BoxConstraint(upper=[1.0, 1.0])
    step = LineSearchStep(descent_type=DescentType.Steepest,
                          use_projected_grad=True)
    # Only the second component is binding.
    algo_state = start(step, vec(0.0, 1.0), obj, con)
    assert algo_state.gnorm == 2.0


def test_step_is_feasible():
    obj = RosenbrockObjective()
    con = BoxConstraint(lower=[-2.0, 0.5], upper=[0.5, 2.0])
    step = LineSearchStep(descent_type=DescentType.Secant)
    x = vec(-1.2, 1.0)
    algo_state = start(step, x, obj, con)

    for _ in range(5):
        s = x.clone()
        step.compute(s, x, obj, con, algo_state)
        xnew = x.copy()
        xnew.plus(s)

        # Projection does not change the step.
        proj = xnew.copy()
        con.project(proj)
        assert_allclose(proj.array, xnew.array, rtol=0.0, atol=1e-12)

        step.update(x, s, obj, con, algo_state)


def test_newton_krylov_on_identity():
    obj = QuadraticObjective(numpy.eye(2))
    step = LineSearchStep(descent_type=DescentType.NewtonKrylov)
    assert isinstance(step.descent, NewtonKrylovDescent)
    x = vec(3.0, 4.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)

    s = iterate(step, x, obj, con, algo_state)
    assert step.krylov_iterations == 1
    assert step.krylov_flag is KrylovFlag.Converged
    assert_array_equal(s.array, [-3.0, -4.0])
    assert_array_equal(x.array, [0.0, 0.0])


def test_descent_direction(descent_type):
    obj = QuadraticObjective(_diag)
    step, ls = recording_step(descent_type)
    x = vec(1.0, 1.0, 1.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)

    s = x.clone()
    step.compute(s, x, obj, con, algo_state)
    direction, gs = ls.calls[0]
    assert gs < 0.0
    assert gs == pytest.approx(numpy.dot(_diag @ [1.0, 1.0, 1.0], direction))


def test_fallback_for_secant_ascent():
    obj = QuadraticObjective(_diag)
    step, ls = recording_step(DescentType.Secant, secant=NegatingSecant())
    assert isinstance(step.descent.secant, NegatingSecant)
    x = vec(1.0, 1.0, 1.0)
    algo_state = start(step, x, obj)

    s = x.clone()
    step.compute(s, x, obj, BoundConstraint(), algo_state)
    g = _diag @ [1.0, 1.0, 1.0]
    direction, gs = ls.calls[0]
    assert_array_equal(direction, -g)
    assert gs == -(g @ g)


def test_descent_direction_with_bounds():
    obj = QuadraticObjective(numpy.diag([1.0, 4.0]), [-2.0, 4.0])
    con = BoxConstraint(lower=[0.0, -10.0])
    step, ls = recording_step(DescentType.Newton)
    x = vec(0.0, 0.0)
    # The first component sits on its bound with positive gradient.
    algo_state = start(step, x, obj, con)
    assert algo_state.gnorm == 4.0

    s = x.clone()
    step.compute(s, x, obj, con, algo_state)
    direction, gs = ls.calls[0]
    assert_array_equal(direction, [-2.0, 1.0])
    assert gs == -4.0


def test_fallback_for_secant_ascent_with_bounds():
    obj = QuadraticObjective(numpy.diag([1.0, 4.0]), [-2.0, 4.0])
    con = BoxConstraint(lower=[0.0, -10.0])
    step, ls = recording_step(DescentType.Secant, secant=NegatingSecant())
    x = vec(0.0, 0.0)
    algo_state = start(step, x, obj, con)

    s = x.clone()
    step.compute(s, x, obj, con, algo_state)
    g = vec(2.0, -4.0)
    d = g.copy()
    con.prune_active(d, g, x)
    direction, gs = ls.calls[0]
    assert_array_equal(direction, -g.array)
    assert gs == -g.dot(d)
    assert gs == -16.0


def test_fallback_for_newton_ascent():
    obj = NegatedNewtonQuadratic(_diag)
    step, ls = recording_step(DescentType.Newton)
    x = vec(1.0, 1.0, 1.0)
    algo_state = start(step, x, obj)

    s = x.clone()
    step.compute(s, x, obj, BoundConstraint(), algo_state)
    g = _diag @ [1.0, 1.0, 1.0]
    direction, gs = ls.calls[0]
    assert_array_equal(direction, -g)
    assert gs == -(g @ g)


def test_fallback_for_early_negative_curvature():
    obj = QuadraticObjective(numpy.diag([1.0, -1.0]))
    step, ls = recording_step(DescentType.NewtonKrylov)
    x = vec(0.0, -1.0)
    algo_state = start(step, x, obj)

    s = x.clone()
    step.compute(s, x, obj, BoundConstraint(), algo_state)
    assert step.krylov_flag is KrylovFlag.NegativeCurvature
    direction, gs = ls.calls[0]
    assert_array_equal(direction, [0.0, -1.0])
    assert gs == -1.0


def test_newton_requires_inverse_hessian():
    step = LineSearchStep(descent_type=DescentType.Newton)
    x = vec(1.0, 2.0)
    obj = FirstOrderObjective()
    algo_state = start(step, x, obj)
    with pytest.raises(NotImplementedError):
        step.compute(x.clone(), x, obj, BoundConstraint(), algo_state)


def test_gnorm_after_update():
    obj = RosenbrockObjective()
    step = LineSearchStep(descent_type=DescentType.NonlinearCG)
    x = vec(-1.2, 1.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)

    for k in range(1, 4):
        iterate(step, x, obj, con, algo_state)
        g = x.clone()
        obj.gradient(g, x, 0.0)
        assert algo_state.iter == k
        assert algo_state.gnorm == pytest.approx(g.norm())
        assert_array_equal(step.state.gradient_vec.array, g.array)
        assert_array_equal(algo_state.iterate_vec.array, x.array)


@pytest.mark.parametrize('descent_type,kwargs,count', [
    (DescentType.Secant, {}, 5),
    (DescentType.NewtonKrylov, {'use_secant_precond': True}, 5),
    (DescentType.NewtonKrylov, {}, 0),
    (DescentType.Steepest, {}, 0),
    (DescentType.NonlinearCG, {}, 0),
    (DescentType.Newton, {}, 0),
])
def test_secant_updates(descent_type, kwargs, count):
    secant = CountingSecant()
    step = LineSearchStep(descent_type=descent_type, secant=secant, **kwargs)
    obj = RosenbrockObjective()
    x = vec(-1.2, 1.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)

    for _ in range(5):
        iterate(step, x, obj, con, algo_state)
    assert secant.count == count


def test_secant_descent_converges():
    obj = QuadraticObjective(_diag, [1.0, 2.0, 3.0])
    step = LineSearchStep(descent_type=DescentType.Secant)
    assert isinstance(step.descent, SecantDescent)
    x = vec(0.0, 0.0, 0.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)

    for _ in range(100):
        if algo_state.gnorm <= 1e-10:
            break
        iterate(step, x, obj, con, algo_state)
    assert_allclose(x.array, obj.solution().array, rtol=0.0, atol=1e-8)


def test_inexact_flags_keep_tolerance():
    obj = ToleranceRecordingQuadratic(_diag)
    step = LineSearchStep(descent_type=DescentType.Steepest,
                          use_inexact_objective=True,
                          use_inexact_gradient=True)
    assert step.params.use_inexact_objective
    assert step.params.use_inexact_gradient
    x = vec(1.0, 1.0, 1.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)
    iterate(step, x, obj, con, algo_state)

    assert len(obj.tols) >= 4
    assert set(obj.tols) == {SQRT_EPS}


def test_secant_hess_vec_without_preconditioning(caplog):
    with caplog.at_level(logging.DEBUG, logger='pylinesearch.step.descent'):
        step = LineSearchStep(descent_type=DescentType.NewtonKrylov,
                              use_secant_hess_vec=True)
    assert step.descent.secant is None
    assert 'secant preconditioning' in caplog.text
    assert 'Secant Type' not in step.print_name()
    assert 'Krylov Type: Conjugate Gradients\n' in step.print_name()


def test_print_name():
    step = LineSearchStep()
    assert step.print_name() == (
        '\nQuasi-Newton Method with Cubic Interpolation Linesearch '
        'satisfying Strong Wolfe Conditions\n'
        'Secant Type: Limited-Memory BFGS\n'
    )

    step = LineSearchStep(descent_type=DescentType.NewtonKrylov,
                          use_secant_precond=True)
    assert 'Krylov Type: Conjugate Gradients\n' in step.print_name()
    assert 'Secant Type: Limited-Memory BFGS\n' in step.print_name()

    step = LineSearchStep(descent_type=DescentType.NonlinearCG)
    assert step.print_name().endswith('Nonlinear CG Type: Hager-Zhang\n')

    step = LineSearchStep(descent_type=DescentType.Steepest)
    assert isinstance(step.descent, SteepestDescent)
    assert 'Type' not in step.print_name()


def test_print_header():
    header = LineSearchStep().print_header().split()
    assert header == ['iter', 'value', 'gnorm', 'snorm', '#fval', '#grad',
                      'ls_#fval', 'ls_#grad']

    step = LineSearchStep(descent_type=DescentType.NewtonKrylov)
    assert step.print_header().split()[-2:] == ['iterCG', 'flagCG']


def test_print_header_layout():
    header = LineSearchStep().print_header()
    assert header == (
        '  ' + 'iter'.ljust(6) + 'value'.ljust(15) + 'gnorm'.ljust(15)
        + 'snorm'.ljust(15) + '#fval'.ljust(10) + '#grad'.ljust(10)
        + 'ls_#fval'.ljust(10) + 'ls_#grad'.ljust(10) + '\n'
    )


def test_print():
    obj = QuadraticObjective(numpy.eye(2))
    step = LineSearchStep(descent_type=DescentType.Steepest)
    x = vec(3.0, 4.0)
    con = BoundConstraint()
    algo_state = start(step, x, obj)

    out = step.print(algo_state, print_header=True)
    assert out.startswith(step.print_name() + step.print_header())
    assert out.splitlines()[-1].split() == ['0', '1.250000e+01',
                                            '5.000000e+00']
    row = out.splitlines()[-1]
    assert row.startswith('  0     1.250000e+01   5.000000e+00')

    iterate(step, x, obj, con, algo_state)
    out = step.print(algo_state)
    assert out.count('\n') == 1
    assert out.split() == ['1', '0.000000e+00', '0.000000e+00',
                           '5.000000e+00', '3', '2', '2', '0']
