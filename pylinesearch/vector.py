#
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
#
'''
Base type for elements of the search space.
'''

from abc import ABC, abstractmethod

__all__ = ['Vector']


class Vector(ABC):
    '''
    Abstract base class for elements of a Hilbert space.

    Iterates, steps and gradients are all represented by this class. The
    optimization code only ever interacts with vectors through the narrow,
    mostly in-place interface prescribed here, so the storage and
    discretization are entirely up to the implementation.

    The in-place operations follow the usual naming::

        y.set(x)        # y = x
        y.plus(x)       # y = y + x
        y.scale(a)      # y = a * y
        y.axpy(a, x)    # y = y + a * x

    All in-place operations return `self` to allow chaining.
    '''

    @abstractmethod
    def clone(self) -> 'Vector':
        '''
        Create a new vector in the same space.

        :return: A new vector with the same layout as this one. Its content
            is unspecified; callers must overwrite it before use.
        :rtype: :class:`Vector`
        '''
        pass

    @abstractmethod
    def set(self, other: 'Vector') -> 'Vector':
        '''
        Overwrite content with that of another vector.

        :param other: Source vector.
        :type other: :class:`Vector`
        '''
        pass

    @abstractmethod
    def plus(self, other: 'Vector') -> 'Vector':
        '''
        Add another vector in place.

        :param other: Summand.
        :type other: :class:`Vector`
        '''
        pass

    @abstractmethod
    def scale(self, alpha: float) -> 'Vector':
        '''
        Scale in place.

        :param alpha: Scaling factor.
        :type alpha: float
        '''
        pass

    @abstractmethod
    def dot(self, other: 'Vector') -> float:
        '''
        Inner product with another vector.

        :param other: Second factor.
        :type other: :class:`Vector`
        :return: Value of the inner product.
        :rtype: float
        '''
        pass

    @abstractmethod
    def dimension(self) -> int:
        '''Dimension of the underlying space.'''
        pass

    def axpy(self, alpha: float, other: 'Vector') -> 'Vector':
        '''
        Add a multiple of another vector in place.

        Implementations should override this if a more efficient fused
        operation is available.

        :param alpha: Factor for `other`.
        :type alpha: float
        :param other: Vector to be added.
        :type other: :class:`Vector`
        '''
        tmp = other.copy()
        tmp.scale(alpha)
        return self.plus(tmp)

    def norm(self) -> float:
        '''Norm induced by the inner product.'''
        return self.dot(self) ** 0.5

    def zero(self) -> 'Vector':
        '''Set all entries to zero.'''
        return self.scale(0.0)

    def copy(self) -> 'Vector':
        '''Create an independent copy of this vector.'''
        return self.clone().set(self)

    def __copy__(self) -> 'Vector':
        return self.copy()

    def __deepcopy__(self, memo) -> 'Vector':
        return self.copy()
