'''
Line searches along descent directions.
'''

from ..parameters import LineSearchType, StepParameters
from .backtracking import Backtracking
from .base import LineSearch, LineSearchResult
from .bisection import Bisection
from .cubic import CubicInterpolation

__all__ = [
    'Backtracking',
    'Bisection',
    'CubicInterpolation',
    'LineSearch',
    'LineSearchResult',
    'get_line_search',
]


def get_line_search(params: StepParameters) -> LineSearch:
    '''
    Create the line search selected by `params.linesearch_type`.

    :raise ValueError: The line search type is unsupported.
    '''
    ls_type = LineSearchType.parse(params.linesearch_type)
    if ls_type is LineSearchType.Backtracking:
        return Backtracking(params)
    if ls_type is LineSearchType.CubicInterpolation:
        return CubicInterpolation(params)
    if ls_type is LineSearchType.Bisection:
        return Bisection(params)
    raise ValueError(f'unsupported line search type: {ls_type}')
