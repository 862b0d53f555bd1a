# Nara language package
# This package provides the parser and tree-walking interpreter for the Nara language.
from .ast import Program
from .environment import Environment
from .errors import ErrorKind, NaraError
from .interpreter import Interpreter, run_program
from .parser import parse
from .types import UNIT

__version__ = '0.1.0'

__all__ = [
    'parse',
    'run_program',
    'Program',
    'Environment',
    'Interpreter',
    'NaraError',
    'ErrorKind',
    'UNIT',
]
