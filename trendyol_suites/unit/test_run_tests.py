import run_tests
from run_tests import build_parser, default_parallel_workers


def test_live_runs_default_to_configured_workers(monkeypatch):
    monkeypatch.setattr(
        run_tests,
        "get_config",
        lambda key, default=None: {"execution.parallel_workers": 3}.get(key, default),
    )

    assert default_parallel_workers(live=True) == 3
    assert default_parallel_workers(live=False) == 1


def test_parallel_flag_is_unset_unless_given():
    assert build_parser().parse_args([]).parallel is None
    assert build_parser().parse_args(["-n", "2"]).parallel == 2


def test_pytest_command_carries_workers():
    cmd = run_tests.TestRunner(suite="ui", live=True, parallel=3, allure_report=False).build_pytest_command()

    assert cmd[cmd.index("-n") + 1] == "3"
    assert "--live" in cmd
    assert "-n" not in run_tests.TestRunner(suite="unit", allure_report=False).build_pytest_command()
