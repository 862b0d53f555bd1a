"""Tree-walking interpreter for the Nara language.

`Interpreter.run` executes a parsed `Program` against an `Environment`.
Statements go through `execute`, expressions through `evaluate`; both
dispatch on the node type and recurse directly on the Python stack. Every
user function call and every block entered counts as one level of nesting,
and going past `max_depth` fails with a recursion error instead of
overflowing the host stack.

Function calls bind their parameters in a child of the *calling* scope,
so names a function body does not define itself are resolved where the
function is called, not where it was defined.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Callable, Dict, List, Optional

from .ast import (
    Node, Program, Number, Float, Str, Bool, FString, FStringText, ListLit,
    BinaryOp, UnaryOp, If, While, For, FuncCall, BindingUsage, Block,
    BindingDef, FunctionDef, ExprStmt, Op, UnaryOperator,
)
from .environment import Environment
from .errors import ErrorKind, runtime_error, syntax_error
from .parser import parse, parse_expression
from .types import (
    UNIT, FunctionVal, UnitVal, fits_int64, is_int, is_number, repr_value,
    to_string, type_name,
)

DEFAULT_MAX_DEPTH = 1000
# Python frames allowed per level of Nara nesting while a program runs
FRAMES_PER_LEVEL = 6

Builtin = Callable[[List[Any], Environment], Any]


class Interpreter:
    """Core interpreter that executes a Nara AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        self.max_depth = max_depth
        self.depth = 0
        self.builtins: Dict[str, Builtin] = {
            'print': self.builtin_print,
            'len': self.builtin_len,
            'range': self.builtin_range,
        }

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Environment) -> Any:
        """Execute every statement of `program` in `env` and return the last value."""
        result: Any = UNIT
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(limit + self.max_depth * FRAMES_PER_LEVEL)
        try:
            for stmt in program.statements:
                result = self.execute(stmt, env)
                if self.debug_level >= 1:
                    self.debug(f"result: {repr_value(result)}")
        except RecursionError:
            self.depth = 0
            raise runtime_error(ErrorKind.RECURSION, 'maximum recursion depth exceeded')
        finally:
            sys.setrecursionlimit(limit)
        return result

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, ExprStmt):
            return self.evaluate(node.expr, env)
        if isinstance(node, BindingDef):
            value = self.evaluate(node.value, env)
            env.store(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"bind {node.name}: {type_name(value)} = {repr_value(value)}")
            return UNIT
        if isinstance(node, FunctionDef):
            env.store(node.name, FunctionVal(node.name, list(node.params), node.body))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return UNIT
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Number):
            return node.value
        if isinstance(node, Float):
            return node.value
        if isinstance(node, Bool):
            return node.value
        if isinstance(node, Str):
            return env.intern(node.value)
        if isinstance(node, FString):
            return self.evaluate_fstring(node, env)
        if isinstance(node, ListLit):
            return [self.evaluate(el, env) for el in node.elements]
        if isinstance(node, BindingUsage):
            return env.lookup(node.name)
        if isinstance(node, BinaryOp):
            # No short-circuit: both sides always run, left first.
            left = self.evaluate(node.lhs, env)
            right = self.evaluate(node.rhs, env)
            return self.apply_binary_op(node.op, left, right, env)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            return self.apply_unary_op(node.op, operand)
        if isinstance(node, Block):
            return self.evaluate_block(node, env)
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = self.is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {repr_value(cond)} -> {truthy}")
            if truthy:
                return self.evaluate(node.then_block, env)
            if node.else_branch is not None:
                return self.evaluate(node.else_branch, env)
            return UNIT
        if isinstance(node, While):
            result: Any = UNIT
            while True:
                cond = self.evaluate(node.condition, env)
                if not self.is_truthy(cond):
                    break
                if self.debug_level >= 3:
                    self.debug(f"while condition {repr_value(cond)}")
                result = self.evaluate(node.body, env)
            return result
        if isinstance(node, For):
            return self.evaluate_for(node, env)
        if isinstance(node, FuncCall):
            return self.call_function(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def enter(self):
        """Count one level of block or call nesting."""
        if self.depth >= self.max_depth:
            raise runtime_error(
                ErrorKind.RECURSION,
                f'maximum recursion depth of {self.max_depth} exceeded')
        self.depth += 1

    def evaluate_block(self, node: Block, env: Environment) -> Any:
        if not node.statements:
            return UNIT
        block_env = env.create_child()
        self.enter()
        try:
            for stmt in node.statements[:-1]:
                self.execute(stmt, block_env)
            return self.execute(node.statements[-1], block_env)
        finally:
            self.depth -= 1

    def evaluate_for(self, node: For, env: Environment) -> Any:
        iterable = self.evaluate(node.iterable, env)
        if not isinstance(iterable, list):
            raise runtime_error(ErrorKind.NOT_ITERABLE, f'cannot iterate over {type_name(iterable)}')
        result: Any = UNIT
        for item in list(iterable):
            # each iteration gets its own scope holding the loop variable
            iter_env = env.create_child()
            iter_env.store(node.name, item)
            if self.debug_level >= 3:
                self.debug(f"for {node.name} = {repr_value(item)}")
            result = self.evaluate(node.body, iter_env)
        return result

    def evaluate_fstring(self, node: FString, env: Environment) -> str:
        pieces: List[str] = []
        for part in node.parts:
            if isinstance(part, FStringText):
                pieces.append(part.text)
                continue
            rest, expr = parse_expression(part.source)
            if rest.strip():
                raise syntax_error(
                    f'invalid f-string interpolation {{{part.source}}}: unexpected {rest.strip()!r}', rest)
            pieces.append(to_string(self.evaluate(expr, env)))
        return env.intern(''.join(pieces))

    def call_function(self, node: FuncCall, env: Environment) -> Any:
        builtin = self.builtins.get(node.name)
        if builtin is not None:
            args = [self.evaluate(arg, env) for arg in node.args]
            return builtin(args, env)
        func = env.lookup(node.name)
        if not isinstance(func, FunctionVal):
            raise runtime_error(ErrorKind.TYPE, f"'{node.name}' is not a function, it is {type_name(func)}")
        if len(node.args) != len(func.params):
            raise runtime_error(
                ErrorKind.ARITY,
                f'{func.name} expects {len(func.params)} argument(s), got {len(node.args)}')
        args = [self.evaluate(arg, env) for arg in node.args]
        if self.debug_level >= 2:
            self.debug(f"call {func.name}({', '.join(repr_value(a) for a in args)})")
        call_env = env.create_child()
        for name, value in zip(func.params, args):
            call_env.store(name, value)
        self.enter()
        try:
            return self.execute(func.body, call_env)
        finally:
            self.depth -= 1

    # Built-in functions
    def builtin_print(self, args: List[Any], env: Environment) -> Any:
        print(' '.join(to_string(a) for a in args))
        return UNIT

    def builtin_len(self, args: List[Any], env: Environment) -> Any:
        if len(args) != 1:
            raise runtime_error(ErrorKind.ARITY, f'len expects 1 argument, got {len(args)}')
        value = args[0]
        if isinstance(value, (str, list)):
            return len(value)
        raise runtime_error(ErrorKind.TYPE, f'len expects a string or list, got {type_name(value)}')

    def builtin_range(self, args: List[Any], env: Environment) -> Any:
        if len(args) == 1:
            start, end = 0, args[0]
        elif len(args) == 2:
            start, end = args
        else:
            raise runtime_error(ErrorKind.ARITY, f'range expects 1 or 2 arguments, got {len(args)}')
        if not is_int(start) or not is_int(end):
            raise runtime_error(
                ErrorKind.TYPE,
                'range arguments must be int, got ' + ', '.join(type_name(a) for a in args))
        return list(range(start, end))

    def is_truthy(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, (str, list)):
            return len(value) > 0
        if isinstance(value, FunctionVal):
            return True
        if isinstance(value, UnitVal):
            return False
        return bool(value)

    def apply_unary_op(self, op: UnaryOperator, operand: Any) -> Any:
        if op is UnaryOperator.NOT:
            if isinstance(operand, bool):
                return not operand
            raise runtime_error(ErrorKind.TYPE, f'unary ! expects bool, got {type_name(operand)}')
        if is_int(operand):
            return self.check_int(-operand, op.value)
        if isinstance(operand, float):
            return -operand
        raise runtime_error(ErrorKind.TYPE, f'unary - expects int or float, got {type_name(operand)}')

    def apply_binary_op(self, op: Op, a: Any, b: Any, env: Environment) -> Any:
        if op is Op.AND:
            return self.is_truthy(a) and self.is_truthy(b)
        if op is Op.OR:
            return self.is_truthy(a) or self.is_truthy(b)
        if op is Op.EQ:
            return self.equal_values(a, b)
        if op is Op.NE:
            return not self.equal_values(a, b)
        if is_int(a) and is_int(b):
            return self.int_op(op, a, b)
        if is_number(a) and is_number(b):
            return self.float_op(op, float(a), float(b))
        if isinstance(a, str) and isinstance(b, str):
            if op is Op.ADD:
                return env.intern(a + b)
            if op in (Op.LT, Op.LE, Op.GT, Op.GE):
                return self.compare(op, a, b)
        if isinstance(a, list) and isinstance(b, list) and op is Op.ADD:
            return a + b
        raise runtime_error(
            ErrorKind.TYPE,
            f'unsupported operand types for {op.value}: {type_name(a)} and {type_name(b)}')

    def int_op(self, op: Op, a: int, b: int) -> Any:
        if op is Op.ADD:
            return self.check_int(a + b, op.value)
        if op is Op.SUB:
            return self.check_int(a - b, op.value)
        if op is Op.MUL:
            return self.check_int(a * b, op.value)
        if op in (Op.DIV, Op.FLOOR_DIV):
            if b == 0:
                raise runtime_error(ErrorKind.DIVISION_BY_ZERO, 'division by zero')
            if op is Op.FLOOR_DIV:
                return self.check_int(a // b, op.value)
            # `/` truncates toward zero
            quotient = abs(a) // abs(b)
            return self.check_int(quotient if (a < 0) == (b < 0) else -quotient, op.value)
        return self.compare(op, a, b)

    def float_op(self, op: Op, a: float, b: float) -> Any:
        if op is Op.ADD:
            return a + b
        if op is Op.SUB:
            return a - b
        if op is Op.MUL:
            return a * b
        if op in (Op.DIV, Op.FLOOR_DIV):
            if b == 0.0:
                # IEEE 754: x/0 is +-inf, 0/0 is NaN
                if a == 0.0 or math.isnan(a):
                    return math.nan
                return math.copysign(math.inf, a) * math.copysign(1.0, b)
            quotient = a / b
            if op is Op.FLOOR_DIV and math.isfinite(quotient):
                return float(math.floor(quotient))
            return quotient
        return self.compare(op, a, b)

    @staticmethod
    def compare(op: Op, a: Any, b: Any) -> bool:
        if op is Op.LT:
            return a < b
        if op is Op.LE:
            return a <= b
        if op is Op.GT:
            return a > b
        return a >= b

    @staticmethod
    def check_int(value: int, op: str) -> int:
        if not fits_int64(value):
            raise runtime_error(ErrorKind.OVERFLOW, f'integer overflow in {op}')
        return value

    def equal_values(self, a: Any, b: Any) -> bool:
        if isinstance(a, bool) or isinstance(b, bool):
            return isinstance(a, bool) and isinstance(b, bool) and a == b
        if is_number(a) and is_number(b):
            return a == b
        if isinstance(a, list) and isinstance(b, list):
            return len(a) == len(b) and all(self.equal_values(x, y) for x, y in zip(a, b))
        if type(a) is not type(b):
            return False
        return a == b


def run_program(source: str, debug_level: int = 0, env: Optional[Environment] = None) -> Any:
    """Parse and execute Nara source, returning the value of its last statement."""
    program = parse(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(program, env if env is not None else Environment())
    finally:
        interpreter.close()
