from pipesh.shell.sink import Error, Ok, Sink, outcome


def test_sink():
    sink = Sink()
    assert not sink.written
    assert sink.text == ''

    sink.write('a\n')
    sink.write(None)
    sink.writeline('b')
    assert sink.written
    assert sink.text == 'a\nb'
    assert not sink.echoed


def test_sink_echo():
    echoed = []
    sink = Sink(echoed.append)
    sink.write('a')
    sink.writeline('b')

    assert echoed == ['a', 'b\n']
    assert sink.echoed


def test_outcome():
    out, err = Sink(), Sink()
    out.write('a\n\n')
    assert outcome(out, err) == Ok('a')

    err.write('oops\n')
    result = outcome(out, err)
    assert result == Error('oops')
    assert not result.ok
    assert not result.shown


def test_outcome_equality():
    assert Ok('a', shown=True) == Ok('a')
    assert Ok('a') != Error('a')
    assert Ok().text == ''
