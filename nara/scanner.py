"""Cursor primitives for the Nara parser.

Every function here takes the remaining source text and returns a tuple of
`(remainder, extracted)`. Nothing is ever mutated: parsing only narrows the
view of the input. A primitive that cannot match raises a syntax
`NaraError`; the grammar catches it when trying the next alternative.
"""

from __future__ import annotations

from typing import Callable, List, Tuple, TypeVar

from .ast import FStringInterpolation, FStringPart, FStringText
from .errors import NaraError, syntax_error

T = TypeVar('T')

RESERVED = frozenset({'val', 'fn', 'if', 'else', 'while', 'for', 'in', 'true', 'false'})

STRING_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '\\': '\\', '"': '"'}
FSTRING_ESCAPES = dict(STRING_ESCAPES, **{'{': '{', '}': '}'})


def is_ident_char(c: str) -> bool:
    return (c.isascii() and c.isalnum()) or c == '_'


def take_while(accept: Callable[[str], bool], s: str) -> Tuple[str, str]:
    end = 0
    for c in s:
        if not accept(c):
            break
        end += 1
    return s[end:], s[:end]


def take_while_required(accept: Callable[[str], bool], s: str, message: str) -> Tuple[str, str]:
    remainder, extracted = take_while(accept, s)
    if not extracted:
        raise syntax_error(message, s)
    return remainder, extracted


def tag(literal: str, s: str) -> str:
    if s.startswith(literal):
        return s[len(literal):]
    raise syntax_error(f'expected {literal}', s)


def keyword(word: str, s: str) -> str:
    """Like `tag`, but `word` must not run into an identifier (`iffy` is not `if`)."""
    remainder = tag(word, s)
    if remainder and is_ident_char(remainder[0]):
        raise syntax_error(f'expected {word}', s)
    return remainder


def extract_whitespace(s: str) -> Tuple[str, str]:
    return take_while(str.isspace, s)


def extract_whitespace_required(s: str) -> Tuple[str, str]:
    return take_while_required(str.isspace, s, 'expected whitespace')


def extract_ident(s: str) -> Tuple[str, str]:
    if not s or not (s[0].isascii() and (s[0].isalpha() or s[0] == '_')):
        raise syntax_error('expected identifier', s)
    remainder, ident = take_while(is_ident_char, s)
    if ident in RESERVED:
        raise syntax_error(f'expected identifier, found keyword {ident!r}', s)
    return remainder, ident


def extract_digits(s: str) -> Tuple[str, str]:
    return take_while_required(lambda c: c.isascii() and c.isdigit(), s, 'expected digits')


def extract_float(s: str) -> Tuple[str, str]:
    s, integer_part = extract_digits(s)
    if not s.startswith('.'):
        raise syntax_error('expected decimal point', s)
    s, fractional_part = take_while_required(
        lambda c: c.isascii() and c.isdigit(), s[1:], 'expected digits after decimal point')
    return s, f'{integer_part}.{fractional_part}'


def extract_string_literal(s: str) -> Tuple[str, str]:
    if not s.startswith('"'):
        raise syntax_error('expected opening double quote', s)
    result: List[str] = []
    i = 1
    length = len(s)
    while i < length:
        ch = s[i]
        if ch == '"':
            return s[i + 1:], ''.join(result)
        if ch == '\\':
            if i + 1 >= length:
                raise syntax_error('unexpected end of string after backslash', s)
            escaped = s[i + 1]
            result.append(STRING_ESCAPES.get(escaped, '\\' + escaped))
            i += 2
            continue
        result.append(ch)
        i += 1
    raise syntax_error('unclosed string literal', s)


def extract_fstring(s: str) -> Tuple[str, List[FStringPart]]:
    """Split an f-string into literal text and interpolation source fragments.

    Interpolations are returned unparsed; they are parsed when the f-string
    is evaluated.
    """
    if not s.startswith('f"'):
        raise syntax_error('expected f-string starting with f"', s)
    parts: List[FStringPart] = []
    text: List[str] = []
    i = 2
    length = len(s)
    while i < length:
        ch = s[i]
        if ch == '"':
            if text:
                parts.append(FStringText(''.join(text)))
            return s[i + 1:], parts
        if ch == '{':
            if text:
                parts.append(FStringText(''.join(text)))
                text = []
            depth = 1
            start = i + 1
            i += 1
            while i < length:
                if s[i] == '{':
                    depth += 1
                elif s[i] == '}':
                    depth -= 1
                    if depth == 0:
                        break
                i += 1
            if depth != 0:
                raise syntax_error('unclosed interpolation in f-string', s)
            parts.append(FStringInterpolation(s[start:i]))
            i += 1
            continue
        if ch == '\\':
            if i + 1 >= length:
                raise syntax_error('unexpected end of f-string after backslash', s)
            escaped = s[i + 1]
            text.append(FSTRING_ESCAPES.get(escaped, '\\' + escaped))
            i += 2
            continue
        text.append(ch)
        i += 1
    raise syntax_error('unclosed f-string literal', s)


def extract_semicolon(s: str) -> Tuple[str, str]:
    if s.startswith(';'):
        return s[1:].lstrip(), ';'
    return s, ''


def extract_params(s: str) -> Tuple[str, List[str]]:
    if not s.startswith('('):
        raise syntax_error('expected opening parenthesis', s)
    remainder, inside = take_while(lambda c: c != ')', s[1:])
    if not remainder.startswith(')'):
        raise syntax_error('expected closing parenthesis', s)
    params: List[str] = []
    for raw in inside.split(','):
        name = raw.strip()
        if not name:
            continue
        rest, ident = extract_ident(name)
        if rest:
            raise syntax_error(f'invalid parameter name {name!r}', s)
        if ident in params:
            raise syntax_error(f'duplicate parameter {ident!r}', s)
        params.append(ident)
    return remainder[1:].lstrip(), params


def sequence(parser: Callable[[str], Tuple[str, T]], s: str) -> Tuple[str, List[T]]:
    """Apply `parser` until it fails, skipping separators between items."""
    items: List[T] = []
    s, _ = extract_whitespace(s)
    while True:
        try:
            s, item = parser(s)
        except NaraError:
            break
        items.append(item)
        s, _ = extract_whitespace(s)
        s, _ = extract_semicolon(s)
    return s, items
