from pipesh.shell.evaluator import PythonEvaluator, format_value


def test_evaluate_statement():
    evaluator = PythonEvaluator()
    assert evaluator.evaluate_statement('1 + 1') == ('2', [])
    assert evaluator.evaluate_statement(' 1 + 1 ') == ('2', [])


def test_evaluate_statement_namespace():
    evaluator = PythonEvaluator()
    assert evaluator.evaluate_statement('x = 10') == (None, [])
    assert evaluator.evaluate_statement('x * 2') == ('20', [])

    evaluator.evaluate_statement('def f(s):\n    return s * 2')
    assert evaluator.evaluate_statement('f("ab")') == ('abab', [])


def test_evaluate_statement_print():
    value, errors = PythonEvaluator().evaluate_statement('print("hi")')
    assert value.strip() == 'hi'
    assert errors == []


def test_evaluate_statement_error():
    value, errors = PythonEvaluator().evaluate_statement('1 / 0')
    assert value is None
    assert errors[-1].startswith('ZeroDivisionError')

    value, errors = PythonEvaluator().evaluate_statement('def')
    assert value is None
    assert any('SyntaxError' in line for line in errors)


def test_evaluate_expression():
    evaluator = PythonEvaluator()
    assert evaluator.evaluate_expression('lambda s: s.upper()', 'abc') == ('ABC', [])
    assert evaluator.evaluate_expression('len', ['a', 'b']) == ('2', [])
    assert evaluator.evaluate_expression('sorted', ['b', 'a']) == ('a\nb', [])


def test_evaluate_expression_not_callable():
    value, errors = PythonEvaluator().evaluate_expression('10', 'abc')
    assert value is None
    assert errors[-1].startswith('TypeError')


def test_evaluate_payload():
    evaluator = PythonEvaluator()
    assert evaluator.evaluate_expression('*', '1 + 2') == ('3', [])
    assert evaluator.evaluate_expression(' * ', ['x = 3', 'y = 4']) == (None, [])
    assert evaluator.evaluate_statement('x + y') == ('7', [])


def test_format_value():
    assert format_value(None) == ''
    assert format_value('a') == 'a'
    assert format_value(['a', 'b']) == 'a\nb'
    assert format_value(3) == '3'
    assert format_value([1, 2]) == '[1, 2]'


def test_evaluate_statement_exit():
    evaluator = PythonEvaluator()
    assert evaluator.evaluate_statement('raise SystemExit(2)') == (None, ['SystemExit: 2'])

    evaluator.evaluate_statement('import sys')
    assert evaluator.evaluate_expression('sys.exit', 'a') == (None, ['SystemExit: a'])
