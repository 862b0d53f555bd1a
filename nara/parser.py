"""Parser for the Nara language.

There is no tokenizer: every `parse_*` function takes the remaining source
text and returns `(remainder, node)`, built from the cursor primitives in
`nara.scanner`. Alternatives are tried in a fixed order and the first one
that succeeds wins; a failed alternative raises `NaraError`, which the
caller catches before trying the next one.

Binary operations are deliberately flat: both operands are parsed without
recursing into another binary operation, so `1 + 2 * 3` yields `1 + 2`
followed by the remainder ` * 3`. Blocks group: `{1 + 2} * 3`.

`parse` is the public entry point and returns a `Program` for the whole
source, failing if any input is left over.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

from .ast import (
    Node, Number, Float, Str, Bool, FString, ListLit, BinaryOp, UnaryOp,
    If, While, For, FuncCall, BindingUsage, Block, BindingDef, FunctionDef,
    ExprStmt, Program, Op, UnaryOperator,
)
from .errors import ErrorKind, ErrorVal, NaraError, syntax_error
from .scanner import (
    tag, keyword, extract_whitespace, extract_whitespace_required, extract_ident,
    extract_digits, extract_float, extract_string_literal, extract_fstring,
    extract_semicolon, extract_params, sequence,
)
from .types import fits_int64

Parser = Callable[[str], Tuple[str, Node]]

# Longest operators first so `//` is never read as `/` and `<=` never as `<`.
OPERATORS = sorted(Op, key=lambda op: len(op.value), reverse=True)
UNARY_OPERATORS = list(UnaryOperator)


def first_of(parsers: Sequence[Parser], s: str, what: str) -> Tuple[str, Node]:
    for parser in parsers:
        try:
            return parser(s)
        except NaraError:
            continue
    raise syntax_error(f'expected {what}', s.lstrip())


###############################################################################
# Literals
###############################################################################

def parse_number(s: str) -> Tuple[str, Number]:
    s, _ = extract_whitespace(s)
    rest, digits = extract_digits(s)
    value = int(digits)
    if not fits_int64(value):
        raise syntax_error(f'integer literal {digits} out of range', s)
    return rest, Number(value)


def parse_float(s: str) -> Tuple[str, Float]:
    s, _ = extract_whitespace(s)
    s, text = extract_float(s)
    return s, Float(float(text))


def parse_bool(s: str) -> Tuple[str, Bool]:
    s, _ = extract_whitespace(s)
    try:
        return keyword('true', s), Bool(True)
    except NaraError:
        return keyword('false', s), Bool(False)


def parse_string(s: str) -> Tuple[str, Str]:
    s, _ = extract_whitespace(s)
    s, value = extract_string_literal(s)
    return s, Str(value)


def parse_fstring(s: str) -> Tuple[str, FString]:
    s, _ = extract_whitespace(s)
    s, parts = extract_fstring(s)
    return s, FString(parts)


def parse_binding_usage(s: str) -> Tuple[str, BindingUsage]:
    s, _ = extract_whitespace(s)
    s, name = extract_ident(s)
    return s, BindingUsage(name)


def parse_arguments(s: str, open_: str, close: str) -> Tuple[str, List[Node]]:
    """Comma separated expressions between `open_` and `close`."""
    s = tag(open_, s)
    s, _ = extract_whitespace(s)
    items: List[Node] = []
    if s.startswith(close):
        return s[len(close):], items
    while True:
        s, item = parse_expression(s)
        items.append(item)
        s, _ = extract_whitespace(s)
        if s.startswith(close):
            return s[len(close):], items
        s = tag(',', s)


def parse_list(s: str) -> Tuple[str, ListLit]:
    s, _ = extract_whitespace(s)
    s, elements = parse_arguments(s, '[', ']')
    return s, ListLit(elements)


def parse_block(s: str) -> Tuple[str, Block]:
    s, _ = extract_whitespace(s)
    s = tag('{', s)
    s, statements = sequence(parse_statement, s)
    s, _ = extract_whitespace(s)
    s = tag('}', s)
    s, _ = extract_semicolon(s)
    return s, Block(statements)


###############################################################################
# Compound expressions
###############################################################################

def parse_func_call(s: str) -> Tuple[str, FuncCall]:
    s, _ = extract_whitespace(s)
    s, name = extract_ident(s)
    s, args = parse_arguments(s, '(', ')')
    return s, FuncCall(name, args)


def parse_op(s: str) -> Tuple[str, Op]:
    for op in OPERATORS:
        if s.startswith(op.value):
            return s[len(op.value):], op
    raise syntax_error(
        'expected one of the operators: ' + ', '.join(op.value for op in Op), s)


def parse_unary(s: str) -> Tuple[str, UnaryOp]:
    s, _ = extract_whitespace(s)
    for op in UNARY_OPERATORS:
        if s.startswith(op.value):
            rest, operand = parse_operand(s[len(op.value):])
            return rest, UnaryOp(operand, op)
    raise syntax_error('expected unary operator', s)


def parse_operand(s: str) -> Tuple[str, Node]:
    """Anything that may stand on either side of a binary operator."""
    return first_of(OPERAND_PARSERS, s, 'operand')


def parse_binary_rest(s: str, lhs: Node) -> Tuple[str, BinaryOp]:
    """Finish `lhs op rhs` given the text that follows an already parsed `lhs`."""
    s, _ = extract_whitespace(s)
    s, op = parse_op(s)
    s, _ = extract_whitespace(s)
    s, rhs = parse_operand(s)
    return s, BinaryOp(lhs, rhs, op)


def parse_binary(s: str) -> Tuple[str, BinaryOp]:
    s, lhs = parse_operand(s)
    return parse_binary_rest(s, lhs)


def parse_if(s: str) -> Tuple[str, If]:
    s, _ = extract_whitespace(s)
    s = keyword('if', s)
    s, _ = extract_whitespace_required(s)
    s, condition = parse_expression(s)
    s, then_block = parse_block(s)
    try:
        rest, _ = extract_whitespace(s)
        rest = keyword('else', rest)
        rest, else_branch = first_of((parse_if, parse_block), rest, 'block or if after else')
    except NaraError:
        return s, If(condition, then_block, None)
    return rest, If(condition, then_block, else_branch)


def parse_while(s: str) -> Tuple[str, While]:
    s, _ = extract_whitespace(s)
    s = keyword('while', s)
    s, _ = extract_whitespace_required(s)
    s, condition = parse_expression(s)
    s, body = parse_block(s)
    return s, While(condition, body)


def parse_for(s: str) -> Tuple[str, For]:
    s, _ = extract_whitespace(s)
    s = keyword('for', s)
    s, _ = extract_whitespace_required(s)
    s, name = extract_ident(s)
    s, _ = extract_whitespace_required(s)
    s = keyword('in', s)
    s, _ = extract_whitespace_required(s)
    s, iterable = parse_expression(s)
    s, body = parse_block(s)
    return s, For(name, iterable, body)


OPERAND_PARSERS: Tuple[Parser, ...] = (
    parse_unary,
    parse_func_call,
    parse_list,
    parse_bool,
    parse_float,
    parse_number,
    parse_fstring,
    parse_string,
    parse_binding_usage,
    parse_block,
)

# Expressions that can never be operands; none of them starts the way an
# operand does, so they are only tried once no operand matches.
KEYWORD_EXPRESSION_PARSERS: Tuple[Parser, ...] = (
    parse_if,
    parse_while,
    parse_for,
)


def parse_expression(s: str) -> Tuple[str, Node]:
    """Parse a binary operation, or failing that a single expression.

    The leading operand is parsed once and reused whether or not an
    operator follows it, so nested blocks cost linear time.
    """
    try:
        rest, operand = parse_operand(s)
    except NaraError:
        return first_of(KEYWORD_EXPRESSION_PARSERS, s, 'expression')
    try:
        return parse_binary_rest(rest, operand)
    except NaraError:
        return rest, operand


###############################################################################
# Statements
###############################################################################

def parse_binding_def(s: str) -> Tuple[str, BindingDef]:
    s, _ = extract_whitespace(s)
    s = tag('val', s)
    s, _ = extract_whitespace_required(s)
    s, name = extract_ident(s)
    s, _ = extract_whitespace(s)
    s = tag('=', s)
    s, value = parse_expression(s)
    s, _ = extract_whitespace(s)
    s, _ = extract_semicolon(s)
    return s, BindingDef(name, value)


def parse_function_def(s: str) -> Tuple[str, FunctionDef]:
    s, _ = extract_whitespace(s)
    s = tag('fn', s)
    s, _ = extract_whitespace_required(s)
    s, name = extract_ident(s)
    s, _ = extract_whitespace(s)
    s, params = extract_params(s)
    s, body = parse_statement(s)
    return s, FunctionDef(name, params, body)


def parse_expr_stmt(s: str) -> Tuple[str, ExprStmt]:
    s, expr = parse_expression(s)
    return s, ExprStmt(expr)


STATEMENT_PARSERS: Tuple[Parser, ...] = (
    parse_binding_def,
    parse_function_def,
    parse_expr_stmt,
)


def parse_statement(s: str) -> Tuple[str, Node]:
    return first_of(STATEMENT_PARSERS, s, 'statement')


def parse(source: str) -> Program:
    """Parse Nara source code into a `Program`.

    The whole input must be consumed and must contain at least one
    statement.
    """
    try:
        rest, statements = sequence(parse_statement, source)
    except RecursionError:
        raise NaraError(ErrorVal(ErrorKind.RECURSION, 'input is nested too deeply to parse', source))
    if rest:
        raise NaraError(ErrorVal(
            ErrorKind.UNCONSUMED_INPUT,
            f'input was not consumed fully by parser, stopped at {rest[:20]!r}',
            rest,
        ))
    if not statements:
        raise syntax_error('expected at least one statement', source)
    return Program(statements)
