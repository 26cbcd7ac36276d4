from pipesh.shell.completion import Completer, common_prefix, complete, complete_buffer, current_part
from pipesh.shell.session import Session


def init(tmp_path) -> Completer:
    (tmp_path / 'dir1').mkdir()
    (tmp_path / 'dir2').mkdir()
    (tmp_path / 'dir1' / 'inner.txt').write_text('')
    (tmp_path / 'file.txt').write_text('')
    (tmp_path / 'my file.txt').write_text('')
    (tmp_path / '.hidden').write_text('')
    return Completer(Session(cwd=tmp_path), ['dir', 'echo'])


def test_common_prefix():
    assert common_prefix(['dir1/', 'dir2/']) == 'dir'
    assert common_prefix(['abc', 'abd', 'x']) == ''
    assert common_prefix(['abc']) == 'abc'
    assert common_prefix(['abc', 'ab']) == 'ab'
    assert common_prefix([]) == ''


def test_complete():
    assert complete('di', ['dir1/', 'dir2/']) == 'dir'
    assert complete('di', ['dir']) == 'dir'
    assert complete('x', []) == 'x'

    # never remove typed text
    assert complete('dir1', ['dir1/', 'dir2/']) == 'dir1'


def test_candidates(tmp_path):
    completer = init(tmp_path)
    assert completer.candidates('di') == ['dir', 'dir1/', 'dir2/']
    assert completer.candidates('DI') == ['dir', 'dir1/', 'dir2/']
    assert completer.candidates('dir1/') == ['dir1/inner.txt']
    assert completer.candidates('fi') == ['file.txt']
    assert completer.candidates('missing/') == []


def test_candidates_hidden(tmp_path):
    completer = init(tmp_path)
    assert '.hidden' not in completer.candidates('')
    assert completer.candidates('.h') == ['.hidden']


def test_current_part():
    assert current_part('cd di') == 'di'
    assert current_part('cd ') == ''
    assert current_part('cat my\\ ') == 'my\\ '
    assert current_part('ls\n') == ''
    assert current_part('') == ''


def test_complete_buffer(tmp_path):
    completer = init(tmp_path)
    assert complete_buffer('cd di', 5, completer) == ('cd dir', 6)
    assert complete_buffer('cat fi', 6, completer) == ('cat file.txt', 12)
    assert complete_buffer('cd dir1/in', 10, completer) == ('cd dir1/inner.txt', 17)

    # no matches
    assert complete_buffer('cd xyz', 6, completer) == ('cd xyz', 6)


def test_complete_buffer_cursor(tmp_path):
    completer = init(tmp_path)
    assert complete_buffer('cat fi |> (len)', 6, completer) == ('cat file.txt |> (len)', 12)


def test_complete_buffer_spaces(tmp_path):
    completer = init(tmp_path)
    assert complete_buffer('cat my', 6, completer) == ('cat my\\ file.txt', 16)
    assert complete_buffer('cat "my', 7, completer) == ('cat "my file.txt', 16)


def test_complete_buffer_code(tmp_path):
    completer = init(tmp_path)
    assert complete_buffer('(di', 3, completer) == ('(di', 3)
