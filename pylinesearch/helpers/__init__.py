'''
Useful helper classes for model construction.
'''

from .objectives import QuadraticObjective, RosenbrockObjective


__all__ = [
    'QuadraticObjective',
    'RosenbrockObjective',
]
