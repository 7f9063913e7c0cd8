"""shell.py 命令执行器单元测试"""

from __future__ import annotations

import pytest

from vbuilder_composer.core.exceptions import ExecutionError
from vbuilder_composer.utils import shell
from vbuilder_composer.utils.shell import CommandResult, LocalExecutor, get_executor, set_executor


class TestLocalExecutor:
    def test_success(self, tmp_path) -> None:
        r = LocalExecutor().execute(["echo", "hello"], cwd=str(tmp_path))
        assert r.success
        assert "hello" in r.stdout

    def test_string_command_is_split(self, tmp_path) -> None:
        r = LocalExecutor().execute("echo 'a b'", cwd=str(tmp_path))
        assert r.stdout.strip() == "a b"

    def test_failure_returns_exit_code(self, tmp_path) -> None:
        r = LocalExecutor().execute(["false"], cwd=str(tmp_path))
        assert not r.success
        assert r.returncode != 0

    def test_missing_command_raises(self, tmp_path) -> None:
        with pytest.raises(ExecutionError, match="命令不存在"):
            LocalExecutor().execute(["definitely-not-a-command-xyz"], cwd=str(tmp_path))


class TestDefaultExecutor:
    def test_replace_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(shell, "_default_executor", LocalExecutor())

        class Fake:
            def execute(self, cmd, *, cwd=".", timeout=None) -> CommandResult:
                return CommandResult(returncode=0)

        fake = Fake()
        set_executor(fake)
        assert get_executor() is fake
