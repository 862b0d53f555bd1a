"""Error types shared by the Nara parser and interpreter."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    SYNTAX = 'SyntaxError'
    UNCONSUMED_INPUT = 'UnconsumedInputError'
    NAME = 'NameError'
    ARITY = 'ArityError'
    TYPE = 'TypeError'
    DIVISION_BY_ZERO = 'DivisionByZeroError'
    NOT_ITERABLE = 'NotIterableError'
    OVERFLOW = 'OverflowError'
    RECURSION = 'RecursionError'


@dataclass(frozen=True)
class ErrorVal:
    """A failure reported by the parser or the evaluator.

    `fragment` is the remaining source text at the point a syntax error was
    detected, used by the CLI to point at the offending input.
    """
    kind: ErrorKind
    message: str
    fragment: Optional[str] = None

    @property
    def name(self) -> str:
        return self.kind.value


class NaraError(Exception):
    """Exception type used to propagate Nara parse and runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(err.message)
        self.err = err

    @property
    def kind(self) -> ErrorKind:
        return self.err.kind

    @property
    def message(self) -> str:
        return self.err.message


def syntax_error(message: str, fragment: Optional[str] = None) -> NaraError:
    return NaraError(ErrorVal(ErrorKind.SYNTAX, message, fragment))


def runtime_error(kind: ErrorKind, message: str) -> NaraError:
    return NaraError(ErrorVal(kind, message))
