from pipesh.shell.grammar.classifier import parse
from pipesh.shell.render import segments, text
from pipesh.shell.terminal import Colors


def test_segments():
    assert segments(parse('echo a |> (len)')) == [
        ('echo', Colors.command),
        (' ', None),
        ('a', Colors.argument),
        (' ', None),
        ('|>', Colors.pipe),
        (' ', None),
        ('(len)', Colors.code)]


def test_segments_redirect():
    assert segments(parse('ls >> out.txt')) == [
        ('ls', Colors.command),
        (' ', None),
        ('>>', Colors.pipe),
        (' ', None),
        ('out.txt', Colors.argument)]


def test_segments_whitespace():
    assert segments(parse(' echo a  b')) == [
        (' ', None),
        ('echo', Colors.command),
        (' ', None),
        ('a', Colors.argument),
        ('  ', None),
        ('b', Colors.argument)]


def test_segments_text():
    lines = ['echo hello world',
             'echo "a b" |> (lambda s: s.upper()) >> out.txt',
             'ls |>\n(len)',
             'echo a >  out.txt',
             '(def f():\n    return 1)']

    for line in lines:
        assert text(segments(parse(line))) == line


def test_segments_redirect_spacing():
    assert segments(parse('ls >   out.txt')) == [
        ('ls', Colors.command),
        (' ', None),
        ('>', Colors.pipe),
        ('   ', None),
        ('out.txt', Colors.argument)]
