import pytest

from nara.ast import (
    BinaryOp, BindingDef, BindingUsage, Block, Bool, ExprStmt, Float, For,
    FString, FStringInterpolation, FStringText, FuncCall, FunctionDef, If,
    ListLit, Number, Op, Program, Str, UnaryOp, UnaryOperator, While,
)
from nara.errors import ErrorKind, NaraError
from nara.parser import (
    parse, parse_binary, parse_binding_def, parse_block, parse_expression, parse_function_def,
    parse_number, parse_op, parse_statement,
)


def test_parse_num():
    assert parse_number('321312') == ('', Number(321312))


def test_parse_number_as_expression():
    assert parse_expression('475') == ('', Number(475))


@pytest.mark.parametrize('text, op', [
    ('+', Op.ADD), ('-', Op.SUB), ('*', Op.MUL), ('/', Op.DIV), ('//', Op.FLOOR_DIV),
    ('==', Op.EQ), ('!=', Op.NE), ('<', Op.LT), ('<=', Op.LE), ('>', Op.GT),
    ('>=', Op.GE), ('&&', Op.AND), ('||', Op.OR),
])
def test_parse_op(text, op):
    assert parse_op(text) == ('', op)


def test_parse_single_float():
    assert parse_expression(' 3.14') == ('', Float(3.14))


def test_parse_expression_with_whitespace():
    assert parse_expression('3   //     4') == ('', BinaryOp(Number(3), Number(4), Op.FLOOR_DIV))


def test_binary_operation_is_not_chained():
    rest, node = parse_expression('1 + 2 * 3')
    assert node == BinaryOp(Number(1), Number(2), Op.ADD)
    assert rest == ' * 3'


def test_chained_arithmetic_is_unconsumed_input():
    with pytest.raises(NaraError) as exc:
        parse('1 + 2 * 3')
    assert exc.value.kind is ErrorKind.UNCONSUMED_INPUT
    assert exc.value.err.fragment == '* 3'


def test_blocks_group_operands():
    program = parse('{1 + 2} * 3')
    assert program.statements == [ExprStmt(BinaryOp(
        Block([ExprStmt(BinaryOp(Number(1), Number(2), Op.ADD))]),
        Number(3),
        Op.MUL,
    ))]


def test_comparison_operators_match_longest_first():
    assert parse_expression('a <= b') == ('', BinaryOp(BindingUsage('a'), BindingUsage('b'), Op.LE))
    assert parse_expression('a != b') == ('', BinaryOp(BindingUsage('a'), BindingUsage('b'), Op.NE))


def test_parse_unary_operations():
    assert parse_expression('-x') == ('', UnaryOp(BindingUsage('x'), UnaryOperator.NEG))
    assert parse_expression('!true') == ('', UnaryOp(Bool(True), UnaryOperator.NOT))
    assert parse_expression('-5 + 1') == ('', BinaryOp(
        UnaryOp(Number(5), UnaryOperator.NEG), Number(1), Op.ADD))


def test_boolean_needs_word_boundary():
    assert parse_expression('trueish') == ('', BindingUsage('trueish'))
    assert parse_expression('false') == ('', Bool(False))


def test_integer_literal_has_no_sign_and_fits_64_bits():
    assert parse_expression('9223372036854775807') == ('', Number(2 ** 63 - 1))
    with pytest.raises(NaraError):
        parse('9223372036854775808')


def test_trailing_point_is_not_a_float():
    with pytest.raises(NaraError) as exc:
        parse('1.')
    assert exc.value.kind is ErrorKind.UNCONSUMED_INPUT


def test_parse_string_and_fstring():
    assert parse_expression('"hi there"') == ('', Str('hi there'))
    assert parse_expression('f"x = {x}"') == ('', FString([FStringText('x = '), FStringInterpolation('x')]))


def test_parse_list_literal():
    assert parse_expression('[1, 2.5, "a", []]') == ('', ListLit([
        Number(1), Float(2.5), Str('a'), ListLit([]),
    ]))


def test_parse_function_call():
    assert parse_expression('add(1, mul(2, 3))') == ('', FuncCall('add', [
        Number(1), FuncCall('mul', [Number(2), Number(3)]),
    ]))
    assert parse_expression('nothing()') == ('', FuncCall('nothing', []))


def test_parse_binding_def():
    assert parse_binding_def('val x = 10 / 5;    ') == (
        '', BindingDef('x', BinaryOp(Number(10), Number(5), Op.DIV)))


def test_cannot_parse_binding_def_without_space_after_val():
    with pytest.raises(NaraError, match='expected whitespace'):
        parse_binding_def('valaaa=1+2')


def test_parse_empty_block():
    assert parse_block('{}') == ('', Block([]))
    assert parse_block('{    };') == ('', Block([]))


def test_parse_block_in_one_line():
    assert parse_block('{val one=1;one}') == ('', Block([
        BindingDef('one', Number(1)),
        ExprStmt(BindingUsage('one')),
    ]))


def test_parse_block_requires_closing_brace():
    with pytest.raises(NaraError, match='expected }'):
        parse_block('{1 2')


def test_parse_function_def_with_no_params_and_empty_body():
    assert parse_function_def('fn nothing() {}') == ('', FunctionDef('nothing', [], ExprStmt(Block([]))))


def test_parse_function_def_with_operation():
    assert parse_statement('fn operation(par1, par2) 4 + 3') == ('', FunctionDef(
        'operation', ['par1', 'par2'], ExprStmt(BinaryOp(Number(4), Number(3), Op.ADD))))


def test_parse_function_def_with_number():
    assert parse_statement('fn number() 42') == ('', FunctionDef('number', [], ExprStmt(Number(42))))


def test_parse_nested_functions():
    source = """fn outer() {
        fn inner() {3 + 2}
        inner
    }"""
    assert parse_statement(source) == ('', FunctionDef('outer', [], ExprStmt(Block([
        FunctionDef('inner', [], ExprStmt(Block([ExprStmt(BinaryOp(Number(3), Number(2), Op.ADD))]))),
        ExprStmt(BindingUsage('inner')),
    ]))))


def test_parse_binary_requires_an_operator():
    assert parse_binary('1 + 2') == ('', BinaryOp(Number(1), Number(2), Op.ADD))
    with pytest.raises(NaraError):
        parse_binary('1')


def test_operand_without_complete_operation_is_returned_alone():
    assert parse_expression('1 + ') == (' + ', Number(1))
    assert parse_expression('{ 2 } ') == (' ', Block([ExprStmt(Number(2))]))


def test_directly_nested_blocks():
    depth = 40
    node = parse('{' * depth + '1' + '}' * depth).statements[0].expr
    for _ in range(depth - 1):
        assert isinstance(node, Block)
        node = node.statements[0].expr
    assert node == Block([ExprStmt(Number(1))])


def test_parse_if_else_if_chain():
    rest, node = parse_expression('if x < 0 { 1 } else if x == 0 { 2 } else { 3 }')
    assert rest == ''
    assert node == If(
        BinaryOp(BindingUsage('x'), Number(0), Op.LT),
        Block([ExprStmt(Number(1))]),
        If(
            BinaryOp(BindingUsage('x'), Number(0), Op.EQ),
            Block([ExprStmt(Number(2))]),
            Block([ExprStmt(Number(3))]),
        ),
    )


def test_parse_if_without_else_leaves_rest():
    assert parse_expression('if c { 1 } 2') == (' 2', If(
        BindingUsage('c'), Block([ExprStmt(Number(1))]), None))


def test_if_needs_whitespace_after_keyword():
    with pytest.raises(NaraError):
        parse('if(x) { 1 }')


def test_parse_loops():
    assert parse_expression('while false { 1 }') == ('', While(Bool(False), Block([ExprStmt(Number(1))])))
    assert parse_expression('for x in range(3) { x }') == ('', For(
        'x', FuncCall('range', [Number(3)]), Block([ExprStmt(BindingUsage('x'))])))


def test_parse_program():
    program = parse('val x = 10; x')
    assert program == Program([BindingDef('x', Number(10)), ExprStmt(BindingUsage('x'))])


def test_parse_program_with_newlines_and_separators():
    program = parse('\n  val a = 1\n  val b = 2;\n\n  a + b;\n')
    assert len(program.statements) == 3


def test_empty_program_is_an_error():
    with pytest.raises(NaraError) as exc:
        parse('   ')
    assert exc.value.kind is ErrorKind.SYNTAX
    assert exc.value.message == 'expected at least one statement'


def test_unclosed_string_fails_the_whole_parse():
    with pytest.raises(NaraError):
        parse('val s = "oops')


def test_deep_nesting_fails_gracefully():
    with pytest.raises(NaraError) as exc:
        parse('{' * 2000 + '1' + '}' * 2000)
    assert exc.value.kind is ErrorKind.RECURSION
