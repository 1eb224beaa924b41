from unittest.mock import patch

from seashell import shell as shell_module
from seashell.shell import main, prompt


def test_prompt_shows_user_and_cwd(sandbox, monkeypatch):
    monkeypatch.setenv("USER", "alice")
    text = prompt()
    assert text.startswith("alice@")
    assert str(sandbox) in text
    assert text.endswith("seashell$ ")


def test_run_line_executes_pipeline(shell, capfd):
    assert shell.run_line("printf hello | tr a-z A-Z") is True
    out, _ = capfd.readouterr()
    assert out == "HELLO"
    assert shell.last_status == 0


def test_nonzero_status_is_reported(shell, capfd):
    assert shell.run_line("false") is True
    assert shell.last_status == 1
    _, err = capfd.readouterr()
    assert "exited with code 1" in err


def test_parse_error_is_reported_and_recovered(shell, capfd):
    assert shell.run_line("ls |") is True
    assert shell.last_status == 2
    _, err = capfd.readouterr()
    assert "seashell: missing command around '|': ls |" in err


def test_unknown_command(shell, capfd):
    assert shell.run_line("nosuchcmd123") is True
    assert shell.last_status == 127
    _, err = capfd.readouterr()
    assert "command not found: nosuchcmd123" in err


def test_exit_builtin_stops_loop(shell):
    assert shell.run_line("exit") is False


def test_builtin_runs_in_process(shell, sandbox):
    (sandbox / "d").mkdir()
    shell.run_line("cd d")
    assert shell.last_status == 0
    shell.run_line("pwd > here.txt")
    assert (sandbox / "d" / "here.txt").read_text().strip() == str(sandbox / "d")


def test_autocomplete_line_is_not_executed(shell, sandbox):
    with patch.object(shell_module, "prefill") as prefill:
        shell.run_line("touch made.txt?")
    prefill.assert_called_once_with("touch made.txt")
    assert not (sandbox / "made.txt").exists()


def test_background_job_is_reaped_on_next_prompt(shell, capsys):
    shell.run_line("true &")
    assert len(shell.jobs) == 1
    job = next(iter(shell.jobs.jobs.values()))
    for p in job.procs:
        p.wait()
    with patch.object(shell_module, "read_line", return_value=None):
        assert shell.main_loop() == 0
    assert len(shell.jobs) == 0
    assert "done (0): true" in capsys.readouterr().out


def test_main_loop_ends_on_exit(shell, capfd):
    lines = iter(["echo first", "exit", "echo never"])
    with patch.object(shell_module, "read_line", side_effect=lambda _: next(lines)):
        assert shell.main_loop() == 0
    out, _ = capfd.readouterr()
    assert "first" in out
    assert "never" not in out


def test_main_loop_survives_ctrl_c(shell):
    events = iter([KeyboardInterrupt(), None])

    def read(_):
        event = next(events)
        if isinstance(event, BaseException):
            raise event
        return event

    with patch.object(shell_module, "read_line", side_effect=read):
        assert shell.main_loop() == 0


def test_main_with_command(sandbox, capfd):
    assert main(["-c", "echo hi | tr a-z A-Z"]) == 0
    out, _ = capfd.readouterr()
    assert out == "HI\n"
    assert main(["-c", "nosuchcmd123"]) == 127


def test_main_debug_dumps_pipeline(sandbox, capfd):
    main(["--debug", "-c", "true | true"])
    _, err = capfd.readouterr()
    assert "Stage 1: <true>" in err


def test_main_end_of_input_exits_zero(sandbox):
    with patch.object(shell_module, "read_line", return_value=None):
        assert main(["--no-history"]) == 0


def feed(*lines):
    pending = iter(lines)

    def read(_):
        item = next(pending, None)
        if isinstance(item, BaseException):
            raise item
        return item

    return patch.object(shell_module, "read_line", side_effect=read)


def test_prompt_survives_deleted_cwd(sandbox, monkeypatch):
    gone = sandbox / "gone"
    gone.mkdir()
    monkeypatch.chdir(gone)
    gone.rmdir()
    monkeypatch.setenv("PWD", str(gone))
    assert str(gone) in prompt()


def test_loop_keeps_running_after_cwd_is_removed(shell, sandbox, capfd):
    gone = sandbox / "gone"
    gone.mkdir()
    with feed("cd gone", f"rmdir {gone}", "echo still-here"):
        assert shell.main_loop() == 0
    out, _ = capfd.readouterr()
    assert "still-here" in out
    assert shell.last_status == 0


def test_loop_reports_unexpected_os_error_and_continues(shell, capfd):
    with patch.object(shell_module, "execute_pipeline", side_effect=[OSError(24, "Too many open files"), 0]):
        with feed("true", "true"):
            assert shell.main_loop() == 0
    _, err = capfd.readouterr()
    assert "Too many open files" in err
    assert shell.last_status == 0


def test_ctrl_c_during_launch_does_not_end_loop(shell, capfd):
    with patch("seashell.executor.run_external", side_effect=KeyboardInterrupt):
        with feed("true", "exit"):
            assert shell.main_loop() == 0
    assert shell.last_status == 130
