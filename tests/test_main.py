import pytest

from nachos.main import Options, initialize, main
from nachos.threadtest import SyncMode
from nachos.utility import debug_init, debug_is_enabled


@pytest.fixture(autouse=True)
def _reset_debug():
    debug_init(None)
    yield
    debug_init(None)


def test_defaults_without_arguments():
    options = initialize([])
    assert options == Options()
    assert options.thread_count == 1
    assert options.random_yield is False
    assert debug_is_enabled("t") is False


def test_q_sets_thread_count():
    assert initialize(["-q", "3"]).thread_count == 3


def test_q_value_is_parsed_like_atoi():
    assert initialize(["-q", "abc"]).thread_count == 0
    assert initialize(["-q", "12xyz"]).thread_count == 12


def test_bare_d_enables_everything():
    options = initialize(["-d"])
    assert options.debug_flags == "+"
    assert debug_is_enabled("t")
    assert debug_is_enabled("n")


def test_d_with_flags_enables_only_those():
    options = initialize(["-d", "ts"])
    assert options.debug_flags == "ts"
    assert debug_is_enabled("s")
    assert not debug_is_enabled("l")


def test_other_arguments_reset_thread_count_unless_q_follows():
    assert initialize(["-q", "3", "-d", "t"]).thread_count == -1
    assert initialize(["-d", "t", "-q", "3"]).thread_count == 3


def test_d_consumes_following_argument_in_system_pass():
    options = initialize(["-d", "-q", "3"])
    assert options.debug_flags == "-q"
    assert options.thread_count == 3


def test_rs_records_seed():
    options = initialize(["-rs", "7"])
    assert options.random_seed == 7
    assert options.random_yield is True


@pytest.mark.parametrize("argv", [["-rs"], ["-q"], ["-laundry", "-load"]])
def test_missing_argument_raises(argv):
    with pytest.raises(ValueError):
        initialize(argv)


def test_mode_flags_and_laundry():
    options = initialize(["-laundry", "-semaphores", "-q", "2", "-load", "0.5"])
    assert options.laundry is True
    assert options.mode is SyncMode.SEMAPHORES
    assert options.customers == 2
    assert options.thread_count == 1
    assert options.load_seconds == 0.5


def test_last_mode_flag_wins():
    assert initialize(["-semaphores", "-locks"]).mode is SyncMode.LOCKS


def test_main_reports_missing_argument(capsys):
    assert main(["-rs"]) == 1
    assert "-rs" in capsys.readouterr().err


def test_main_unsynchronized_counter(capsys):
    assert main(["-q", "2"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert sum(line.startswith("*** thread") for line in lines) == 3 * 5
    finals = [line for line in lines if line.startswith("Thread ")]
    assert len(finals) == 3


@pytest.mark.parametrize("mode_flag", ["-locks", "-semaphores"])
def test_main_synchronized_counter(capsys, mode_flag):
    assert main([mode_flag, "-q", "2"]) == 0
    lines = capsys.readouterr().out.splitlines()
    finals = [line for line in lines if line.startswith("Thread ")]
    assert len(finals) == 3
    assert all(line.endswith("final value 15") for line in finals)


def test_main_negative_count_uses_four(capsys):
    assert main(["-locks", "-q", "-1"]) == 0
    out = capsys.readouterr().out
    assert "Setting argument -q to 4" in out
    finals = [line for line in out.splitlines() if "sees final value" in line]
    assert len(finals) == 5
    assert all(line.endswith("final value 25") for line in finals)


def test_main_laundry_serves_every_customer(capsys):
    assert main(["-laundry", "-q", "3", "-load", "0", "-d", "l"]) == 0
    out = capsys.readouterr().out
    for person in range(3):
        assert f"Person {person} is doing laundry" in out
        assert f"Person {person} is done with laundry" in out