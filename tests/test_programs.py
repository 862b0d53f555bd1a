from pathlib import Path

from nara.environment import Environment
from nara.interpreter import Interpreter
from nara.parser import parse

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def run_example(name):
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse(source)
    interp = Interpreter()
    return interp.run(ast, Environment())


def test_program_hello(capsys):
    run_example('hello.nara')
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'


def test_program_fib(capsys):
    run_example('fib.nara')
    out = capsys.readouterr().out.strip()
    assert out == '610'


def test_program_scoping(capsys):
    run_example('scoping.nara')
    out = capsys.readouterr().out.strip().splitlines()
    # the inner `val x` shadows without touching the outer binding
    assert out == ['1 20', 'zero negative positive']


def test_program_loops(capsys):
    run_example('loops.nara')
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['step 1', 'step 2', 'step 3', '30', '()']


def test_program_fstrings(capsys):
    run_example('fstrings.nara')
    out = capsys.readouterr().out.strip().splitlines()
    assert out == [
        'Hello, Nara! 4 letters, 6 total',
        'scores: [3, 4.5, "x"], escaped: {name}',
    ]
