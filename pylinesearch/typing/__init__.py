'''
Static typing protocols and helpers.
'''

from .io import JSONSerializable
from .solver import LineSearchOperator, SecantOperator

__all__ = [
    'JSONSerializable',
    'LineSearchOperator',
    'SecantOperator',
]
