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

import copy

import numpy
from numpy.testing import assert_allclose, assert_array_equal
import pytest

from pylinesearch.spaces import EuclideanVector
from pylinesearch.vector import Vector


# RAW DATA
_arrays = [
    [0.0],
    [3.0, 4.0],
    [1.0, -2.0, 0.5, 8.0],
    [-0.25, 0.0, 0.125, 7.5, -3.0, 2.0],
]


# FIXTURES
@pytest.fixture(scope='module', params=_arrays)
def data(request):
    return numpy.array(request.param)


# HELPERS
class ListVector(Vector):
    '''Minimal vector relying on the default implementations.'''

    def __init__(self, data):
        self.data = list(data)

    def clone(self):
        return ListVector([0.0] * len(self.data))

    def set(self, other):
        self.data = list(other.data)
        return self

    def plus(self, other):
        self.data = [a + b for a, b in zip(self.data, other.data)]
        return self

    def scale(self, alpha):
        self.data = [alpha * a for a in self.data]
        return self

    def dot(self, other):
        return sum(a * b for a, b in zip(self.data, other.data))

    def dimension(self):
        return len(self.data)


# TESTS
def test_constructor_copies(data):
    vec = EuclideanVector(data)
    assert vec.array is not data
    assert vec.array.dtype == numpy.float64
    assert vec.dimension() == len(data) == len(vec)
    assert_array_equal(vec.array, data)


def test_clone_has_same_layout(data):
    vec = EuclideanVector(data)
    other = vec.clone()
    assert other.dimension() == vec.dimension()
    assert other.array is not vec.array


def test_copy_is_independent(data):
    vec = EuclideanVector(data)
    other = vec.copy()
    other.scale(2.0)
    assert_array_equal(vec.array, data)
    assert_array_equal(other.array, 2.0 * data)
    assert_array_equal(copy.deepcopy(vec).array, data)


def test_in_place_arithmetic(data):
    vec = EuclideanVector(data)
    other = EuclideanVector(numpy.ones_like(data))

    assert vec.plus(other) is vec
    assert_allclose(vec.array, data + 1.0)
    vec.axpy(-2.0, other)
    assert_allclose(vec.array, data - 1.0)
    vec.scale(0.5)
    assert_allclose(vec.array, 0.5 * (data - 1.0))
    vec.set(other)
    assert_array_equal(vec.array, numpy.ones_like(data))
    vec.zero()
    assert_array_equal(vec.array, numpy.zeros_like(data))


def test_inner_product_and_norm(data):
    vec = EuclideanVector(data)
    assert vec.dot(vec) == pytest.approx(float(numpy.dot(data, data)))
    assert vec.norm() == pytest.approx(float(numpy.linalg.norm(data)))
    assert isinstance(vec.dot(vec), float)


def test_array_protocol():
    vec = EuclideanVector([1.0, 2.0])
    assert_array_equal(numpy.asarray(vec), [1.0, 2.0])


def test_mixed_vector_types_rejected():
    vec = EuclideanVector([1.0, 2.0])
    with pytest.raises(TypeError):
        vec.plus(ListVector([1.0, 2.0]))


def test_default_operations():
    vec = ListVector([3.0, 4.0])
    assert vec.norm() == pytest.approx(5.0)

    other = vec.copy()
    other.axpy(2.0, ListVector([1.0, 1.0]))
    assert other.data == [5.0, 6.0]
    assert vec.data == [3.0, 4.0]

    vec.zero()
    assert vec.data == [0.0, 0.0]
