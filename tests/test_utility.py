import pytest

from nachos.utility import debug, debug_init, debug_is_enabled


@pytest.fixture(autouse=True)
def _reset_flags():
    debug_init(None)
    yield
    debug_init(None)


def test_disabled_by_default():
    assert debug_is_enabled("t") is False


def test_specific_flag_enabled():
    debug_init("tn")
    assert debug_is_enabled("t") is True
    assert debug_is_enabled("n") is True
    assert debug_is_enabled("s") is False


def test_plus_enables_everything():
    debug_init("+")
    assert all(debug_is_enabled(flag) for flag in "tsimdfan")


def test_empty_flags_enable_nothing():
    debug_init("")
    assert debug_is_enabled("t") is False


def test_debug_prints_when_enabled(capsys):
    debug_init("t")
    debug("t", "Forking thread \"%s\" with arg = %d\n", "worker", 3)
    assert capsys.readouterr().out == 'Forking thread "worker" with arg = 3\n'


def test_debug_silent_when_disabled(capsys):
    debug_init("n")
    debug("t", "Entering main")
    assert capsys.readouterr().out == ""


def test_debug_without_args_keeps_percent(capsys):
    debug_init("+")
    debug("t", "100% done")
    assert capsys.readouterr().out == "100% done"


def test_reinit_replaces_flags():
    debug_init("t")
    debug_init("s")
    assert debug_is_enabled("t") is False
    assert debug_is_enabled("s") is True