"""
Tests for the shellkit command line and interactive shell.
"""

import errno
import io
import pytest
from pathlib import Path

from click.testing import CliRunner

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import ShellkitConfig
from core.errors import InvalidArgumentError, IOFailureError
from core.options import CatOptions
from modules.text_ops import StdinSource
from shellkit import execute, find_pipe, run_reader, shellkit, split_command_line, unescape


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Settings that keep the audit log inside the test directory."""
    path = tmp_path / "config.yaml"
    path.write_text(f"""shellkit:
  audit:
    enabled: true
    log_path: {tmp_path / 'audit.jsonl'}
""", encoding="utf-8")
    return str(path)


@pytest.fixture
def invoke(runner, config_file):
    def _invoke(args, input=None):
        return runner.invoke(shellkit, ["--config", config_file] + list(args), input=input)
    return _invoke


class TestHelpers:
    """Test argument-line helpers."""

    def test_unescape(self):
        assert unescape(r"a\tb\nc\x41\\") == b"a\tb\ncA\\"

    def test_unknown_escape_kept(self):
        assert unescape(r"\q\xZZ") == b"\\q\\xZZ"

    def test_split_plain_line(self):
        tokens, stdin_data = split_command_line("-n 'my file.txt'", "cat")

        assert tokens == ["-n", "my file.txt"]
        assert stdin_data is None

    def test_split_drops_command_name(self):
        tokens, _ = split_command_line("wc -l notes.txt", "wc")

        assert tokens == ["-l", "notes.txt"]

    def test_split_echo_pipeline(self):
        tokens, stdin_data = split_command_line(r"echo 'a\tb' | cat -T", "cat")

        assert tokens == ["-T"]
        assert stdin_data == b"a\tb\n"

    def test_split_pipe_inside_quotes(self):
        tokens, stdin_data = split_command_line("echo 'a|b' | wc -c", "wc")

        assert tokens == ["-c"]
        assert stdin_data == b"a|b\n"

    def test_find_pipe_skips_quoted_bars(self):
        assert find_pipe("echo \"x|y\" | cat") == 11
        assert find_pipe("'only|quoted'") == -1

    def test_split_rejects_other_pipelines(self):
        with pytest.raises(InvalidArgumentError):
            split_command_line("ls | wc", "wc")

    def test_split_unbalanced_quote(self):
        with pytest.raises(InvalidArgumentError):
            split_command_line("'open", "cat")


class TestCommands:
    """Test the one-shot subcommands."""

    def test_version(self, runner):
        result = runner.invoke(shellkit, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_wc_from_stdin(self, invoke):
        result = invoke(["wc"], input="a b\nc\n")

        assert result.exit_code == 0
        assert "      2       3       6" in result.output

    def test_cat_numbered(self, invoke, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"one\ntwo\n")

        result = invoke(["cat", "-n", str(path)])

        assert result.exit_code == 0
        assert "     1\tone\n     2\ttwo\n" in result.output

    def test_cat_missing_file(self, invoke, tmp_path):
        result = invoke(["cat", str(tmp_path / "absent.txt")])

        assert result.exit_code == 1
        assert "No such file or directory" in result.output

    def test_invalid_flag(self, invoke):
        result = invoke(["cat", "-x"])

        assert result.exit_code == 1
        assert "invalid option -- 'x'" in result.output

    def test_head_count(self, invoke, tmp_path):
        path = tmp_path / "lines.txt"
        path.write_bytes(b"1\n2\n3\n")

        result = invoke(["head", "-n", "2", str(path)])

        assert result.exit_code == 0
        assert result.output == "1\n2\n"

    def test_cp_interactive_decline(self, invoke, tmp_path):
        src, dst = tmp_path / "a.txt", tmp_path / "b.txt"
        src.write_text("alpha\n")
        dst.write_text("beta\n")

        result = invoke(["cp", "-i", str(src), str(dst)], input="n\n")

        assert result.exit_code == 0
        assert "not overwritten" in result.output
        assert dst.read_text() == "beta\n"

    def test_mv_verbose(self, invoke, tmp_path):
        src, dst = tmp_path / "a.txt", tmp_path / "c.txt"
        src.write_text("alpha\n")

        result = invoke(["mv", "-v", str(src), str(dst)])

        assert result.exit_code == 0
        assert f"renamed '{src}' -> '{dst}'" in result.output
        assert not src.exists()

    def test_ls(self, invoke, tmp_path):
        folder = tmp_path / "folder"
        folder.mkdir()
        (folder / "b.txt").write_text("")
        (folder / "a.txt").write_text("")

        result = invoke(["ls", str(folder)])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["a.txt", "b.txt"]

    def test_rm(self, invoke, tmp_path):
        path = tmp_path / "old.txt"
        path.write_text("x")

        result = invoke(["rm", str(path)])

        assert result.exit_code == 0
        assert "removed" in result.output
        assert not path.exists()

    def test_subcommand_help(self, invoke):
        result = invoke(["head", "--help"])

        assert result.exit_code == 0
        assert "Usage: head" in result.output
        assert "--lines" in result.output

    def test_subcommand_version(self, invoke):
        result = invoke(["rm", "--version"])

        assert result.exit_code == 0
        assert "rm (shellkit) 0.1.0" in result.output

    def test_audit_lists_commands(self, invoke):
        invoke(["wc"], input="x\n")

        result = invoke(["audit"])

        assert result.exit_code == 0
        assert "wc" in result.output
        assert "executed" in result.output

    def test_config_init(self, invoke, tmp_path):
        target = tmp_path / "written.yaml"

        result = invoke(["config", "--init", str(target)])

        assert result.exit_code == 0
        assert target.exists()
        assert ShellkitConfig.load(str(target)).audit_log_path == str(tmp_path / "audit.jsonl")


class TestShell:
    """Test the interactive menu."""

    def test_echo_into_wc(self, invoke):
        result = invoke(["shell"], input="6\necho 'a b\\nc' | wc\nquit\n")

        assert result.exit_code == 0
        assert "      2       3       6" in result.output
        assert "Goodbye!" in result.output

    def test_choice_by_name(self, invoke, tmp_path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"hello\n")

        result = invoke(["shell"], input=f"cat\n-E {path}\nquit\n")

        assert "hello$" in result.output

    def test_help_from_menu(self, invoke):
        result = invoke(["shell"], input="2\n--help\nquit\n")

        assert result.exit_code == 0
        assert "Usage: cat" in result.output
        assert "unrecognized option" not in result.output

    def test_version_from_menu(self, invoke):
        result = invoke(["shell"], input="wc\n--version\nquit\n")

        assert "wc (shellkit) 0.1.0" in result.output

    def test_invalid_choice(self, invoke):
        result = invoke(["shell"], input="9\nquit\n")

        assert result.exit_code == 0
        assert "Invalid option '9', please try again." in result.output

    def test_error_keeps_shell_running(self, invoke, tmp_path):
        result = invoke(["shell"], input=f"5\n{tmp_path / 'absent'}\nquit\n")

        assert result.exit_code == 0
        assert "cannot remove" in result.output
        assert "Goodbye!" in result.output

    def test_end_of_input_exits(self, invoke):
        result = invoke(["shell"], input="")

        assert result.exit_code == 0
        assert "Goodbye!" in result.output


class BrokenStream:
    """Binary stream whose reads and writes fail like a bad device."""

    def __iter__(self):
        return self

    def __next__(self):
        raise OSError(errno.EIO, "Input/output error")

    def read(self, size=-1):
        raise OSError(errno.EIO, "Input/output error")

    def write(self, data):
        raise OSError(errno.ENOSPC, "No space left on device")

    def flush(self):
        pass


class TestIOFailures:
    """Test that read and write errors are reported, not raised."""

    @pytest.mark.parametrize("command", ["cat", "wc", "head"])
    def test_read_error_returns_failure(self, command, capsys):
        config = ShellkitConfig(audit_enabled=False)

        code = execute(command, [], config, stdin=BrokenStream())

        assert code == 1
        assert "Input/output error" in capsys.readouterr().out

    def test_write_error_becomes_io_failure(self):
        source = StdinSource(io.BytesIO(b"data\n"))

        with pytest.raises(IOFailureError, match="cannot write 'standard output'"):
            run_reader("cat", CatOptions(), source, BrokenStream())



if __name__ == "__main__":
    pytest.main([__file__, "-v"])
