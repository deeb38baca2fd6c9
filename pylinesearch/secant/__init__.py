'''
Secant (quasi-Newton) operators.
'''

from ..parameters import SecantType
from .barzilai_borwein import BarzilaiBorwein
from .base import Secant, SecantState
from .limited_memory import LimitedMemoryBFGS, LimitedMemoryDFP

__all__ = [
    'BarzilaiBorwein',
    'LimitedMemoryBFGS',
    'LimitedMemoryDFP',
    'Secant',
    'SecantState',
    'get_secant',
]


def get_secant(secant_type: SecantType | str = SecantType.LBFGS,
               storage: int = 10, bb_type: int = 1) -> Secant:
    '''
    Create a secant operator.

    :param secant_type: Kind of secant update.
    :type secant_type: :class:`SecantType` or str
    :param storage: Number of stored curvature pairs. Ignored for
        Barzilai-Borwein.
    :type storage: int
    :param bb_type: Barzilai-Borwein variant. Ignored for other types.
    :type bb_type: int
    :raise ValueError: The secant type is unknown or unsupported.
    '''
    secant_type = SecantType.parse(secant_type)
    if secant_type is SecantType.LBFGS:
        return LimitedMemoryBFGS(storage)
    if secant_type is SecantType.LDFP:
        return LimitedMemoryDFP(storage)
    if secant_type is SecantType.BarzilaiBorwein:
        return BarzilaiBorwein(bb_type)
    raise ValueError(f'unsupported secant type: {secant_type}')
