"""CLI entry point for the Nara interpreter.

Usage:
    python -m nara [-v|-vv|-vvv] [<program_file>]
    python -m nara [-v...] --emit-ast <program_file>
    python -m nara [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .nara file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --no-color    Print error diagnostics without ANSI colors

Without a program file an interactive REPL is started; every line shares
one environment. Debug information is written to `debug.txt` in the
current directory when verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, TextIO

from termcolor import colored

from . import __version__
from .ast_json import ast_to_obj, ast_from_obj
from .environment import Environment
from .errors import ErrorKind, NaraError
from .interpreter import Interpreter
from .parser import parse
from .types import UnitVal, repr_value

ERROR = "red"


def diagnose(source: str, fragment: str, no_color: bool = False) -> Optional[str]:
    """Point at the line where `fragment` (a suffix of `source`) starts."""
    if not source.endswith(fragment):
        return None
    offset = len(source) - len(fragment)
    line_num = source.count('\n', 0, offset) + 1
    line_start = source.rfind('\n', 0, offset) + 1
    line_end = source.find('\n', offset)
    line = source[line_start:line_end if line_end != -1 else len(source)]
    col = offset - line_start
    caret = colored("^", ERROR, attrs=["bold"], no_color=no_color)
    return f"  line {line_num}, column {col + 1}:\n    {line}\n    {' ' * col}{caret}"


def report(prefix: str, error: NaraError, source: str, no_color: bool = False,
           stream: Optional[TextIO] = None):
    stream = stream if stream is not None else sys.stderr
    label = colored(f"{error.err.name}:", ERROR, attrs=["bold"], no_color=no_color)
    print(f"{prefix}: {label} {error.message}", file=stream)
    if error.err.fragment is not None and error.kind in (ErrorKind.SYNTAX, ErrorKind.UNCONSUMED_INPUT):
        diagnosis = diagnose(source, error.err.fragment, no_color)
        if diagnosis:
            print(diagnosis, file=stream)


def execute_file(path: Path, interpreter: Interpreter, no_color: bool) -> int:
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read().strip()
    if not source:
        return 0
    try:
        program = parse(source)
    except NaraError as e:
        report(f"Parse error in '{path}'", e, source, no_color)
        return 1
    try:
        program.eval(Environment(), interpreter)
    except NaraError as e:
        report(f"Evaluation error in '{path}'", e, source, no_color)
        return 1
    return 0


def repl(interpreter: Interpreter, no_color: bool) -> int:
    env = Environment()
    print(f"Nara REPL v{__version__}")
    print("Type your expressions below. Press Ctrl+D to exit.")
    print()
    while True:
        print("-> ", end="", flush=True)
        line = sys.stdin.readline()
        if not line:
            print()
            return 0
        source = line.strip()
        if not source:
            continue
        try:
            program = parse(source)
        except NaraError as e:
            report("Parse error", e, source, no_color)
            continue
        try:
            value = program.eval(env, interpreter)
        except NaraError as e:
            report("Evaluation error", e, source, no_color)
            continue
        if not isinstance(value, UnitVal):
            print(repr_value(value))


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Nara language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--no-color', action='store_true', help='print diagnostics without colors')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='NARA_FILE', help='emit AST JSON for the given .nara file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Nara program file (.nara) to execute; omit for a REPL')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read().strip()
        try:
            program = parse(source)
        except NaraError as e:
            report(f"Parse error in '{program_file}'", e, source, args.no_color)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    interpreter = Interpreter(debug_level=args.v)
    try:
        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                sys.exit(1)
            with open(ast_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            program = ast_from_obj(data)
            try:
                program.eval(Environment(), interpreter)
            except NaraError as e:
                report(f"Evaluation error in '{ast_path}'", e, '', args.no_color)
                sys.exit(1)
            return

        if not args.program:
            sys.exit(repl(interpreter, args.no_color))
        program_file = Path(args.program)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        code = execute_file(program_file, interpreter, args.no_color)
        if code:
            sys.exit(code)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
