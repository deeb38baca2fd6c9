'''
Concrete vector space implementations.
'''

from .euclidean import EuclideanVector

__all__ = ['EuclideanVector']
