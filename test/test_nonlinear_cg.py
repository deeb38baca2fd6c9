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

import numpy
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from pylinesearch.helpers import QuadraticObjective
from pylinesearch.nonlinear_cg import NonlinearCG
from pylinesearch.parameters import NonlinearCGType
from pylinesearch.spaces import EuclideanVector


# RAW DATA
_hessian = numpy.diag([1.0, 4.0, 9.0])
_g0 = numpy.array([1.0, 2.0, -1.0])
_g1 = numpy.array([0.5, -1.0, 0.25])


def _hager_zhang(g, g0, sp, y):
    sy = sp @ y
    yd = y - 2.0 * sp * (y @ y) / sy
    beta = -(yd @ g) / sy
    return max(beta, -1.0 / (numpy.linalg.norm(sp)
                             * min(1e-2, numpy.linalg.norm(g0))))


_betas = {
    NonlinearCGType.FletcherReeves: lambda g, g0, sp, y: (g @ g) / (g0 @ g0),
    NonlinearCGType.PolakRibiere: lambda g, g0, sp, y: (g @ y) / (g0 @ g0),
    NonlinearCGType.HestenesStiefel: lambda g, g0, sp, y: -(g @ y) / (sp @ y),
    NonlinearCGType.FletcherConjDesc:
        lambda g, g0, sp, y: (g @ g) / (sp @ g0),
    NonlinearCGType.LiuStorey: lambda g, g0, sp, y: (g @ y) / (sp @ g0),
    NonlinearCGType.DaiYuan: lambda g, g0, sp, y: -(g @ g) / (sp @ y),
    NonlinearCGType.Daniels: lambda g, g0, sp, y:
        -(g @ (_hessian @ sp)) / (sp @ (_hessian @ sp)),
    NonlinearCGType.HagerZhang: _hager_zhang,
}


# FIXTURES
@pytest.fixture(params=list(NonlinearCGType))
def nlcg_type(request):
    return request.param


@pytest.fixture
def objective():
    return QuadraticObjective(_hessian)


# HELPERS
def direction(nlcg, g, obj):
    g = EuclideanVector(g)
    s = g.clone()
    nlcg.run(s, g, g.copy(), obj)
    return s.array.copy()


# TESTS
def test_first_direction_is_gradient(nlcg_type, objective):
    nlcg = NonlinearCG(nlcg_type)
    assert_array_equal(direction(nlcg, _g0, objective), _g0)


def test_update_formula(nlcg_type, objective):
    nlcg = NonlinearCG(nlcg_type)
    s0 = direction(nlcg, _g0, objective)
    s1 = direction(nlcg, _g1, objective)

    beta = _betas[nlcg_type](_g1, _g0, s0, _g1 - _g0)
    assert_allclose(s1, _g1 + beta * s0, rtol=1e-12, atol=1e-14)


def test_zero_denominator_restarts(objective):
    nlcg = NonlinearCG(NonlinearCGType.HestenesStiefel)
    direction(nlcg, _g0, objective)
    # The gradient difference vanishes.
    assert_array_equal(direction(nlcg, _g0, objective), _g0)


def test_periodic_restart(objective):
    nlcg = NonlinearCG(NonlinearCGType.FletcherReeves, restart=2)
    direction(nlcg, _g0, objective)
    assert not numpy.array_equal(direction(nlcg, _g1, objective), _g1)
    assert_array_equal(direction(nlcg, _g0, objective), _g0)


def test_reset(objective):
    nlcg = NonlinearCG(NonlinearCGType.PolakRibiere)
    direction(nlcg, _g0, objective)
    nlcg.reset()
    assert_array_equal(direction(nlcg, _g1, objective), _g1)


def test_type_by_name():
    assert NonlinearCG('fletcher-reeves').nlcg_type \
        is NonlinearCGType.FletcherReeves
    with pytest.raises(ValueError):
        NonlinearCG('Fletcher')
