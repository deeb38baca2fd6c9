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
'''
Tabular progress output.
'''

from collections.abc import Mapping, Sequence
import sys
from typing import Any, Optional, TextIO

__all__ = ['TabularLogger']


class TabularLogger:
    '''
    Fixed-width table printer for iteration logs.

    The header is printed before the first line. Columns that are
    missing from a line are left blank.

    Parameters
    ----------
    cols : sequence of str
        Column names in display order.
    format : mapping of str to str, optional
        Format specification per column. Columns without a specification
        are formatted with `str`.
    width : mapping of str to int, optional
        Column width. Defaults to the length of the column name.
    flush : bool
        Flush the output stream after every line.
    file : text stream, optional
        Output stream. Defaults to `sys.stdout` at the time of printing.
    sep : str
        Column separator.
    align : str
        Cell alignment, `'>'` (right) or `'<'` (left).
    indent : str
        Prefix of every line.
    '''
    cols: list[str]
    format: dict[str, str]
    width: dict[str, int]
    flush: bool
    file: Optional[TextIO]
    sep: str
    align: str
    indent: str
    _header_done: bool

    def __init__(self, cols: Sequence[str],
                 format: Optional[Mapping[str, str]] = None,
                 width: Optional[Mapping[str, int]] = None,
                 flush: bool = False, file: Optional[TextIO] = None,
                 sep: str = '  ', align: str = '>', indent: str = ''):
        if align not in ('<', '>'):
            raise ValueError(f'unsupported alignment: {align!r}')
        self.cols = list(cols)
        self.format = dict(format) if format is not None else {}
        self.width = {col: len(col) for col in self.cols}
        if width is not None:
            for col, w in width.items():
                self.width[col] = max(w, len(col))
        self.flush = flush
        self.file = file
        self.sep = sep
        self.align = align
        self.indent = indent
        self._header_done = False

    def format_header(self) -> str:
        '''Format the header line.'''
        return self.indent + self.sep.join(
            f'{col:{self.align}{self.width[col]}}' for col in self.cols
        )

    def format_line(self, **values: Any) -> str:
        '''Format one line of the table.'''
        cells = []
        for col in self.cols:
            w = self.width[col]
            if (val := values.get(col)) is None:
                cells.append(' ' * w)
            else:
                cell = f'{val:{self.format.get(col, "")}}'
                cells.append(cell.ljust(w) if self.align == '<'
                             else cell.rjust(w))
        return self.indent + self.sep.join(cells)

    def reset(self) -> None:
        '''Print the header again before the next line.'''
        self._header_done = False

    def push_line(self, **values: Any) -> None:
        '''Print one line of the table, preceded by the header if needed.'''
        out = self.file if self.file is not None else sys.stdout
        if not self._header_done:
            print(self.format_header(), file=out)
            self._header_done = True
        print(self.format_line(**values), file=out, flush=self.flush)
