"""Abstract Syntax Tree (AST) definitions for the Nara language.

Nodes are immutable and built once by `nara.parser`. The interpreter walks
them directly; see `nara.interpreter`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Union

if TYPE_CHECKING:
    from .environment import Environment
    from .interpreter import Interpreter


class Op(Enum):
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    FLOOR_DIV = '//'
    EQ = '=='
    NE = '!='
    LT = '<'
    LE = '<='
    GT = '>'
    GE = '>='
    AND = '&&'
    OR = '||'


class UnaryOperator(Enum):
    NOT = '!'
    NEG = '-'


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Number(Node):
    value: int


@dataclass(frozen=True)
class Float(Node):
    value: float


@dataclass(frozen=True)
class Str(Node):
    value: str


@dataclass(frozen=True)
class Bool(Node):
    value: bool


@dataclass(frozen=True)
class FStringText:
    text: str


@dataclass(frozen=True)
class FStringInterpolation:
    source: str  # parsed when the f-string is evaluated


FStringPart = Union[FStringText, FStringInterpolation]


@dataclass(frozen=True)
class FString(Node):
    parts: List[FStringPart]


@dataclass(frozen=True)
class ListLit(Node):
    elements: List[Node]


@dataclass(frozen=True)
class BinaryOp(Node):
    lhs: Node
    rhs: Node
    op: Op


@dataclass(frozen=True)
class UnaryOp(Node):
    operand: Node
    op: UnaryOperator


@dataclass(frozen=True)
class Block(Node):
    statements: List[Node]


@dataclass(frozen=True)
class If(Node):
    condition: Node
    then_block: Block
    else_branch: Optional[Union[Block, 'If']] = None


@dataclass(frozen=True)
class While(Node):
    condition: Node
    body: Block


@dataclass(frozen=True)
class For(Node):
    name: str
    iterable: Node
    body: Block


@dataclass(frozen=True)
class FuncCall(Node):
    name: str
    args: List[Node]


@dataclass(frozen=True)
class BindingUsage(Node):
    name: str


@dataclass(frozen=True)
class BindingDef(Node):
    name: str
    value: Node


@dataclass(frozen=True)
class FunctionDef(Node):
    name: str
    params: List[str]
    body: Node  # a single statement, usually an ExprStmt wrapping a Block


@dataclass(frozen=True)
class ExprStmt(Node):
    expr: Node


@dataclass(frozen=True)
class Program(Node):
    statements: List[Node]

    def eval(self, env: 'Environment', interpreter: Optional['Interpreter'] = None) -> Any:
        """Evaluate every statement in order and return the last value (Unit if empty)."""
        from .interpreter import Interpreter
        if interpreter is None:
            interpreter = Interpreter()
        return interpreter.run(self, env)
