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
Finite-dimensional Euclidean space with NumPy arrays as storage.
"""

from typing import Self

import numpy
from numpy.typing import ArrayLike, NDArray

from ..vector import Vector


__all__ = ['EuclideanVector']


class EuclideanVector(Vector):
    """
    Vector in R^n with the standard inner product.

    The data array is always a one-dimensional array of 64-bit floats
    owned by the vector. Use `array` to access it directly.
    """
    _data: NDArray[numpy.float64]

    def __init__(self, data: ArrayLike):
        super().__init__()
        self._data = numpy.array(data, dtype=numpy.float64).ravel()

    @classmethod
    def zeros(cls, n: int) -> Self:
        """Create zero vector of given dimension."""
        return cls(numpy.zeros(n))

    @property
    def array(self) -> NDArray[numpy.float64]:
        """Underlying data array."""
        return self._data

    def clone(self) -> 'EuclideanVector':
        return EuclideanVector(numpy.zeros_like(self._data))

    def set(self, other: Vector) -> Self:
        self._data[:] = _data(other)
        return self

    def plus(self, other: Vector) -> Self:
        self._data += _data(other)
        return self

    def scale(self, alpha: float) -> Self:
        self._data *= alpha
        return self

    def axpy(self, alpha: float, other: Vector) -> Self:
        self._data += alpha * _data(other)
        return self

    def dot(self, other: Vector) -> float:
        return float(numpy.dot(self._data, _data(other)))

    def norm(self) -> float:
        return float(numpy.linalg.norm(self._data))

    def zero(self) -> Self:
        self._data[:] = 0.0
        return self

    def dimension(self) -> int:
        return self._data.shape[0]

    def __len__(self) -> int:
        return self._data.shape[0]

    def __array__(self, dtype=None, copy=None) -> NDArray:
        if dtype is None and not copy:
            return self._data
        return self._data.astype(dtype or numpy.float64, copy=True)

    def __repr__(self) -> str:
        return f'EuclideanVector({self._data.tolist()!r})'


def _data(vec: Vector) -> NDArray[numpy.float64]:
    if not isinstance(vec, EuclideanVector):
        raise TypeError(f'expected EuclideanVector, got {type(vec).__name__}')
    return vec.array
