"""Tests for the command-line interface."""

from unittest.mock import MagicMock, patch

import pytest

from dooit.cli import _build_parser, main
from dooit.engine.model import Task
from dooit.engine.ops import write_task
from dooit.engine.parse import parse_task


@pytest.fixture
def dirs(tmp_path, monkeypatch):
    """Point data/config dirs into tmp_path and clear editor variables."""
    data_dir = tmp_path / "data"
    config_dir = tmp_path / "config"
    monkeypatch.setenv("DOOIT_DATA_DIR", str(data_dir))
    monkeypatch.setenv("DOOIT_CONFIG_DIR", str(config_dir))
    for name in ("DOOIT_EDITOR", "VISUAL", "EDITOR", "DOOIT_LOG_LEVEL", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)
    return data_dir, config_dir


class TestParser:
    """Test suite for argument parsing."""

    def test_list_defaults(self):
        """Test parsing 'list' with no options."""
        args = _build_parser().parse_args(["list"])
        assert args.command == "list"
        assert args.sort is None
        assert args.completed is False
        assert args.overdue is False

    def test_list_options(self):
        """Test parsing 'list' with every option."""
        args = _build_parser().parse_args(["list", "-s", "days-left-ascending", "-c", "-o"])
        assert args.sort == "days-left-ascending"
        assert args.completed is True
        assert args.overdue is True

    def test_list_rejects_unknown_sort(self):
        """Test that an unknown sort mode is a usage error."""
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["list", "--sort", "random"])

    def test_add_arguments(self):
        """Test parsing 'add' with fields."""
        args = _build_parser().parse_args(
            ["add", "project/sub", "Some details", "-d", "2024-01-02", "-u", "high", "-c"]
        )
        assert args.name == "project/sub"
        assert args.description == "Some details"
        assert args.due == "2024-01-02"
        assert args.urgency == "high"
        assert args.completed is True

    def test_add_defaults(self):
        """Test 'add' defaults."""
        args = _build_parser().parse_args(["add", "solo"])
        assert args.description is None
        assert args.due is None
        assert args.urgency == "low"
        assert args.completed is False

    def test_global_editor(self):
        """Test the global --editor option."""
        args = _build_parser().parse_args(["--editor", "vim", "config"])
        assert args.editor == "vim"
        assert args.command == "config"

    def test_command_required(self):
        """Test that a subcommand is required."""
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])


class TestList:
    """Test suite for the list command."""

    def test_missing_store(self, dirs, capsys):
        """Test that a missing store lists nothing without failing."""
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        assert "No tasks to do!" in out
        assert "dooit add" in out

    def test_empty_after_filter(self, dirs, capsys):
        """Test the message when every task is filtered out."""
        data_dir, _ = dirs
        write_task(data_dir, Task("finished", completed=True))
        assert main(["list"]) == 0
        assert capsys.readouterr().out == "No tasks to do!\n"

    def test_lists_sorted(self, dirs, capsys):
        """Test default urgency-descending listing."""
        data_dir, _ = dirs
        write_task(data_dir, Task("low"))
        write_task(data_dir, Task("high", urgency="high"))
        write_task(data_dir, Task("medium", urgency="medium", description="middle"))

        assert main(["list"]) == 0
        assert capsys.readouterr().out == (
            "- [ ] !! high\n"
            "- [ ] ! medium\n"
            "    middle\n"
            "- [ ]   low\n"
        )

    def test_sort_option(self, dirs, capsys):
        """Test an explicit sort mode."""
        data_dir, _ = dirs
        for name in ["b", "c", "a"]:
            write_task(data_dir, Task(name))

        assert main(["list", "--sort", "name-descending"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert [ln.split()[-1] for ln in lines] == ["c", "b", "a"]

    def test_sort_from_config_file(self, dirs, capsys):
        """Test that config.yml supplies the default sort mode."""
        data_dir, config_dir = dirs
        config_dir.mkdir(parents=True)
        (config_dir / "config.yml").write_text("sort: name-ascending\n", encoding="utf-8")
        for name in ["b", "c", "a"]:
            write_task(data_dir, Task(name))

        assert main(["list"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert [ln.split()[-1] for ln in lines] == ["a", "b", "c"]

    def test_completed_flag(self, dirs, capsys):
        """Test that --completed shows finished tasks."""
        data_dir, _ = dirs
        write_task(data_dir, Task("finished", completed=True))

        assert main(["list", "--completed"]) == 0
        assert capsys.readouterr().out == "- [x]   finished\n"

    def test_overdue_flag(self, dirs, capsys):
        """Test that --overdue shows past-due tasks."""
        assert main(["add", "late", "-d", "2000-01-01"]) == 0
        assert main(["add", "future", "-d", "2999-01-01"]) == 0
        capsys.readouterr()

        assert main(["list"]) == 0
        out = capsys.readouterr().out
        assert "future" in out
        assert "late" not in out

        assert main(["list", "--overdue"]) == 0
        out = capsys.readouterr().out
        assert "late" in out
        assert "future" in out

    def test_malformed_record(self, dirs, capsys):
        """Test that a malformed file aborts the listing."""
        data_dir, _ = dirs
        write_task(data_dir, Task("good"))
        (data_dir / "bad.yml").write_text("urgency: high\n", encoding="utf-8")

        assert main(["list"]) == 1
        out = capsys.readouterr().out
        assert out.startswith("Error:")
        assert "good" not in out

    def test_invalid_config_file(self, dirs, capsys):
        """Test that a broken config.yml is reported."""
        _, config_dir = dirs
        config_dir.mkdir(parents=True)
        (config_dir / "config.yml").write_text("- not a mapping\n", encoding="utf-8")

        assert main(["list"]) == 1
        assert capsys.readouterr().out.startswith("Error:")

    def test_out_of_range_stored_due(self, dirs, capsys):
        """Test that a stored due date with no UTC equivalent is reported."""
        data_dir, _ = dirs
        data_dir.mkdir(parents=True)
        (data_dir / "a.yml").write_text("name: a\ndue: '0001-01-01T00:00:00+05:00'\n", encoding="utf-8")

        assert main(["list", "-o"]) == 1
        out = capsys.readouterr().out
        assert out.startswith("Error:")
        assert "out of range" in out


class TestAdd:
    """Test suite for the add command."""

    def test_creates_store_and_file(self, dirs, capsys):
        """Test the first add creates the store directory."""
        data_dir, _ = dirs
        assert main(["add", "project/sub", "details", "-u", "medium"]) == 0

        out = capsys.readouterr().out
        assert "The task directory doesn't exist, creating it..." in out

        path = data_dir / "project" / "sub.yml"
        assert str(path) in out
        assert parse_task(path) == Task("project/sub", description="details", urgency="medium")

    def test_second_add_is_quiet(self, dirs, capsys):
        """Test that the creation notice only appears once."""
        main(["add", "a"])
        capsys.readouterr()
        main(["add", "b"])
        assert "creating it" not in capsys.readouterr().out

    def test_due_and_completed(self, dirs):
        """Test that due and completed flags are stored."""
        data_dir, _ = dirs
        assert main(["add", "a", "-d", "2024-01-02T10:00", "-c"]) == 0
        task = parse_task(data_dir / "a.yml")
        assert task.completed is True
        assert task.due is not None
        assert task.due.utcoffset().total_seconds() == 0

    def test_invalid_due(self, dirs, capsys):
        """Test that an unparseable date aborts without writing."""
        data_dir, _ = dirs
        assert main(["add", "a", "-d", "someday"]) == 1
        assert capsys.readouterr().out.startswith("Error: Invalid due date")
        assert not (data_dir / "a.yml").exists()

    def test_out_of_range_due(self, dirs, capsys):
        """Test that an offset pushing the date past datetime.min is rejected."""
        data_dir, _ = dirs
        assert main(["add", "x", "-d", "0001-01-01T00:00+01:00"]) == 1
        assert capsys.readouterr().out.startswith("Error: Invalid due date")
        assert not (data_dir / "x.yml").exists()

    def test_invalid_name(self, dirs, capsys):
        """Test that names escaping the store are rejected."""
        assert main(["add", "../outside"]) == 1
        assert capsys.readouterr().out.startswith("Error:")


class TestConfig:
    """Test suite for the config command."""

    def test_no_editor(self, dirs, capsys):
        """Test the failure when no editor is configured."""
        _, config_dir = dirs
        assert main(["config"]) == 1
        out = capsys.readouterr().out
        assert "No editor configured" in out
        assert "EDITOR" in out
        # The placeholder is still created.
        assert (config_dir / "config.yml").read_text(encoding="utf-8") == "# This is the sample config\n"

    def test_editor_flag(self, dirs):
        """Test launching the editor given with --editor."""
        _, config_dir = dirs
        with patch("dooit.engine.ops.subprocess.run", return_value=MagicMock(returncode=0)) as run:
            assert main(["--editor", "vim", "config"]) == 0
        run.assert_called_once_with(["vim", str(config_dir / "config.yml")])

    def test_editor_env(self, dirs, monkeypatch):
        """Test launching the editor from $EDITOR with arguments."""
        _, config_dir = dirs
        monkeypatch.setenv("EDITOR", "code --wait")
        with patch("dooit.engine.ops.subprocess.run", return_value=MagicMock(returncode=0)) as run:
            assert main(["config"]) == 0
        run.assert_called_once_with(["code", "--wait", str(config_dir / "config.yml")])

    def test_existing_config_kept(self, dirs):
        """Test that an existing config file is not overwritten."""
        _, config_dir = dirs
        config_dir.mkdir(parents=True)
        (config_dir / "config.yml").write_text("editor: nano\n", encoding="utf-8")
        with patch("dooit.engine.ops.subprocess.run", return_value=MagicMock(returncode=0)) as run:
            assert main(["config"]) == 0
        run.assert_called_once_with(["nano", str(config_dir / "config.yml")])
        assert (config_dir / "config.yml").read_text(encoding="utf-8") == "editor: nano\n"

    def test_broken_config_still_editable(self, dirs, capsys):
        """Test that config opens a malformed config.yml with the --editor flag."""
        _, config_dir = dirs
        config_dir.mkdir(parents=True)
        (config_dir / "config.yml").write_text("sort: [oops\n", encoding="utf-8")

        with patch("dooit.engine.ops.subprocess.run", return_value=MagicMock(returncode=0)) as run:
            assert main(["--editor", "vim", "config"]) == 0
        run.assert_called_once_with(["vim", str(config_dir / "config.yml")])

        captured = capsys.readouterr()
        assert "Error" not in captured.out
        assert "Ignoring invalid config file" in captured.err
        # The broken file is handed to the editor untouched.
        assert (config_dir / "config.yml").read_text(encoding="utf-8") == "sort: [oops\n"

    def test_broken_config_uses_env_editor(self, dirs, monkeypatch):
        """Test that $EDITOR still applies when config.yml cannot be parsed."""
        _, config_dir = dirs
        config_dir.mkdir(parents=True)
        (config_dir / "config.yml").write_text("editor: [vi]\n", encoding="utf-8")
        monkeypatch.setenv("EDITOR", "nano")

        with patch("dooit.engine.ops.subprocess.run", return_value=MagicMock(returncode=0)) as run:
            assert main(["config"]) == 0
        run.assert_called_once_with(["nano", str(config_dir / "config.yml")])

    def test_editor_not_found(self, dirs, capsys):
        """Test that an editor which cannot start is reported."""
        with patch("dooit.engine.ops.subprocess.run", side_effect=FileNotFoundError("nope")):
            assert main(["--editor", "missing-editor", "config"]) == 1
        assert "missing-editor" in capsys.readouterr().out

    def test_editor_failure_status(self, dirs, capsys):
        """Test that a non-zero editor exit is reported."""
        with patch("dooit.engine.ops.subprocess.run", return_value=MagicMock(returncode=3)):
            assert main(["--editor", "vim", "config"]) == 1
        assert "status 3" in capsys.readouterr().out
