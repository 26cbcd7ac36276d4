from pytest import raises

from pipesh.shell.builtins import Builtins
from pipesh.shell.errors import ShellError
from pipesh.shell.session import Session
from pipesh.shell.sink import Sink


def init(tmp_path) -> Builtins:
    (tmp_path / 'a.txt').write_text('abc')
    (tmp_path / 'd').mkdir()
    return Builtins(Session(cwd=tmp_path))


def run(builtins: Builtins, name: str, *args) -> str:
    out, err = Sink(), Sink()
    builtins.invoke(name, list(args), out, err)
    return out.text


def test_names():
    builtins = Builtins(Session())
    assert builtins.names()[:3] == ['clear', 'echo', 'dir']
    assert 'ls' in builtins
    assert 'exit' in builtins
    assert 'grep' not in builtins


def test_unknown():
    with raises(ShellError):
        run(Builtins(Session()), 'grep')


def test_echo():
    builtins = Builtins(Session())
    assert run(builtins, 'echo', 'a', 'b') == 'a b'
    assert run(builtins, 'echo') == ''
    assert run(builtins, 'echo', 'a', '   ', 'b', ' ') == 'a   b '


def test_pwd_cd(tmp_path):
    builtins = init(tmp_path)
    assert run(builtins, 'pwd') == str(tmp_path)

    run(builtins, 'cd', 'd')
    assert builtins.session.cwd == (tmp_path / 'd').resolve()

    run(builtins, 'cd', '..')
    assert builtins.session.cwd == tmp_path.resolve()

    with raises(ShellError):
        run(builtins, 'cd', 'missing')

    with raises(ShellError):
        run(builtins, 'cd')


def test_ls(tmp_path):
    builtins = init(tmp_path)
    assert run(builtins, 'ls') == 'd/\na.txt'
    assert run(builtins, 'dir', '.', '*.txt') == 'a.txt'
    assert run(builtins, 'ls', 'a.txt') == 'a.txt'
    assert run(builtins, 'ls', '*.txt') == 'a.txt'

    with raises(ShellError):
        run(builtins, 'ls', 'missing/x')


def test_mkdir_rmdir(tmp_path):
    builtins = init(tmp_path)
    assert run(builtins, 'mkdir', 'new') == 'directory created'
    assert (tmp_path / 'new').is_dir()

    with raises(ShellError):
        run(builtins, 'mkdir', 'new')

    assert run(builtins, 'rmdir', 'new') == 'directory deleted'
    assert not (tmp_path / 'new').exists()

    (tmp_path / 'd' / 'b.txt').write_text('')
    with raises(ShellError):
        run(builtins, 'rmdir', 'd')


def test_cat(tmp_path):
    builtins = init(tmp_path)
    assert run(builtins, 'cat', 'a.txt') == 'abc'

    with raises(ShellError):
        run(builtins, 'cat', 'missing.txt')


def test_cp_mv(tmp_path):
    builtins = init(tmp_path)
    assert run(builtins, 'cp', 'a.txt', 'd') == 'file copied'
    assert (tmp_path / 'd' / 'a.txt').read_text() == 'abc'

    with raises(ShellError):
        run(builtins, 'cp', 'a.txt', 'd')

    with raises(ShellError):
        run(builtins, 'cp', 'a.txt')

    assert run(builtins, 'mv', 'a.txt', 'b.txt') == 'file moved'
    assert not (tmp_path / 'a.txt').exists()
    assert (tmp_path / 'b.txt').read_text() == 'abc'


def test_spacing_ignored(tmp_path):
    builtins = init(tmp_path)
    assert run(builtins, 'cp', 'a.txt', '  ', 'd') == 'file copied'
    assert (tmp_path / 'd' / 'a.txt').read_text() == 'abc'


def test_rm(tmp_path):
    builtins = init(tmp_path)
    assert run(builtins, 'rm', 'a.txt') == 'file deleted'
    assert run(builtins, 'del', 'd') == 'directory deleted'

    with raises(ShellError):
        run(builtins, 'rm', 'a.txt')


def test_help():
    builtins = Builtins(Session())
    assert '\techo' in run(builtins, 'help')
    assert run(builtins, '?', 'echo') == \
        'echo: Write all arguments to the output, keeping the spaces between them.'


def test_add():
    builtins = Builtins(Session())

    def do_hello(args, out, err):
        """Say hello.
        """
        out.write('hello')

    builtins.add('hello', do_hello)
    assert builtins.names()[-1] == 'hello'
    assert run(builtins, 'hello') == 'hello'
    assert run(builtins, 'help', 'hello') == 'hello: Say hello.'


def test_exit():
    with raises(ShellError):
        run(Builtins(Session()), 'exit')
