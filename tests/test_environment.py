import pytest

from nara.environment import Environment
from nara.errors import ErrorKind, NaraError
from nara.interner import StringInterner


def test_intern_same_string():
    interner = StringInterner()
    s1 = interner.intern('hello')
    s2 = interner.intern(''.join(['hel', 'lo']))
    assert s1 == s2
    assert s1 is s2


def test_intern_different_strings():
    interner = StringInterner()
    assert interner.intern('hello') != interner.intern('world')


def test_interner_len():
    interner = StringInterner()
    assert len(interner) == 0
    interner.intern('hello')
    assert len(interner) == 1
    interner.intern('hello')
    assert len(interner) == 1
    interner.intern('world')
    assert len(interner) == 2
    assert 'world' in interner


def test_store_and_lookup():
    env = Environment.default()
    env.store('ten', 10)
    assert env.lookup('ten') == 10


def test_store_overwrites_in_current_scope():
    env = Environment()
    env.store('x', 1)
    env.store('x', 2)
    assert env.lookup('x') == 2


def test_lookup_missing_binding():
    with pytest.raises(NaraError) as exc:
        Environment().lookup('ghost')
    assert exc.value.kind is ErrorKind.NAME
    assert str(exc.value) == "binding with name 'ghost' does not exist"


def test_child_sees_parent_bindings():
    root = Environment()
    root.store('x', 1)
    grandchild = root.create_child().create_child()
    assert grandchild.lookup('x') == 1


def test_shadowing_does_not_touch_parent():
    root = Environment()
    root.store('x', 1)
    child = root.create_child()
    child.store('x', 2)
    child.store('y', 3)
    assert child.lookup('x') == 2
    assert root.lookup('x') == 1
    with pytest.raises(NaraError):
        root.lookup('y')


def test_single_interner_at_the_root():
    root = Environment()
    child = root.create_child().create_child()
    assert child.interner is None
    assert child.root is root
    first = child.intern(''.join(['a', 'b']))
    assert root.intern('ab') is first
    assert len(root.interner) == 1


def test_each_session_has_its_own_interner():
    assert Environment().interner is not Environment().interner
