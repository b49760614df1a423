from __future__ import annotations

import logging
import os
import signal
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

from .errors import GitExecutionError, GitPolicyError
from .models import GitRunResult
from .security import resolve_root

logger = logging.getLogger(__name__)


def _kill_process_tree_windows(pid: int) -> None:
    """
    Kill a process tree on Windows (git may spawn helper processes such as
    credential managers, ssh, pagers, etc.).
    """
    subprocess.run(
        ["taskkill", "/PID", str(pid), "/T", "/F"],
        capture_output=True,
        text=True,
    )


def _kill_process_group_posix(p: subprocess.Popen) -> None:
    """
    Kill entire process group on POSIX when start_new_session=True.
    Falls back to p.kill() if group kill fails.
    """
    try:
        os.killpg(p.pid, signal.SIGKILL)
    except OSError:
        try:
            p.kill()
        except OSError:
            pass


def _kill(p: subprocess.Popen) -> None:
    if os.name == "nt":
        _kill_process_tree_windows(p.pid)
    else:
        _kill_process_group_posix(p)


def require_ok(res: GitRunResult, context: str, *, require_complete: bool = False) -> GitRunResult:
    """
    require_complete: also reject output cut by the output ceiling
    (parsers must never see a partial last record).
    """
    if res.timed_out:
        raise GitExecutionError(f"{context} timed out after {res.duration_ms} ms")
    if res.exit_code != 0:
        raise GitExecutionError(f"{context} failed: {res.stderr.strip()}")
    if require_complete and res.output_truncated:
        raise GitExecutionError(f"{context} output exceeded the output limit and was truncated")
    return res


@dataclass(frozen=True)
class GitRunnerConfig:
    """
    Runner limits. `timeout_s=None` waits for git to exit on its own.
    """
    timeout_s: float | None = None
    max_output_chars: int = 200_000

    # Subcommands allowed when read_only=True.
    read_only_allowlist: tuple[str, ...] = (
        "rev-parse",
        "status",
        "log",
        "diff",
        "show",
        "branch",
        "config",
        "remote",
    )


class GitRunner(Protocol):
    """Anything that can run a git subcommand inside one workspace."""

    root: Path

    def run(
        self,
        args: Iterable[str],
        *,
        read_only: bool = True,
        env: dict[str, str] | None = None,
    ) -> GitRunResult:
        ...


class SafeGitRunner:
    """
    Local-only git runner:
      - No shell
      - Enforces cwd=root
      - Optional hard timeout, killing stuck process trees/groups
      - Output ceiling (stdout+stderr) with deterministic truncation
      - Standardized result: stdout/stderr/exit_code/duration_ms (+ flags)
    """

    def __init__(self, root: str | Path, config: GitRunnerConfig | None = None) -> None:
        self.root = resolve_root(root)
        self.config = config or GitRunnerConfig()

    def run(
        self,
        args: Iterable[str],
        *,
        read_only: bool = True,
        env: dict[str, str] | None = None,
    ) -> GitRunResult:
        args_list = list(args)
        self._validate_args(args_list, read_only=read_only)

        argv = ["git", *args_list]
        merged_env = self._build_env(env)

        logger.debug("Running %s in %s", argv, self.root)
        start = time.perf_counter()
        stdout, stderr, exit_code, timed_out = self._run_process(
            argv=argv,
            cwd=self.root,
            env=merged_env,
            timeout_s=self.config.timeout_s,
        )
        duration_ms = int((time.perf_counter() - start) * 1000)

        stdout, stderr, output_truncated = self._apply_output_ceiling(stdout, stderr)

        if timed_out:
            logger.warning("git %s timed out after %d ms in %s", args_list[0], duration_ms, self.root)
        elif exit_code != 0:
            logger.info("git %s exited with %d in %s", args_list[0], exit_code, self.root)
        if output_truncated:
            logger.warning("git %s output truncated to %d chars", args_list[0], self.config.max_output_chars)

        return GitRunResult(
            argv=argv,
            root=str(self.root),
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            duration_ms=duration_ms,
            timed_out=timed_out,
            output_truncated=output_truncated,
        )

    def _validate_args(self, args_list: list[str], *, read_only: bool) -> None:
        if not args_list:
            raise GitPolicyError("Empty git args are not allowed.")

        if not read_only:
            return
        lowered = [a.strip().lower() for a in args_list]
        subcmd = lowered[0]
        if subcmd not in self.config.read_only_allowlist:
            raise GitPolicyError(
                f"Blocked git subcommand in read-only mode: '{subcmd}'. "
                f"Allowed: {', '.join(self.config.read_only_allowlist)}"
            )

        dangerous_flags = {
            "--global", "--system",
            "--unset", "--unset-all", "--add", "--replace-all",
            "--delete",
            "--force", "-f",
        }
        if any(f in lowered for f in dangerous_flags):
            raise GitPolicyError(f"Blocked potentially mutating git flags in read-only mode: {args_list}")

        # lowered, so -D/-M/-C are covered too
        if subcmd == "branch" and any(t in lowered for t in {"-d", "-m", "-c", "--move", "--copy"}):
            raise GitPolicyError("Blocked branch mutation in read-only mode.")

        if subcmd == "remote" and len(lowered) >= 2:
            if lowered[1] in {"set-url", "add", "remove", "rename", "prune"}:
                raise GitPolicyError("Blocked remote mutation in read-only mode.")

        if subcmd == "config" and len(lowered) >= 3:
            raise GitPolicyError("Blocked config write in read-only mode.")

    def _build_env(self, extra_env: dict[str, str] | None) -> dict[str, str]:
        """
        Build a controlled environment that prevents interactive hangs
        and keeps machine-readable output locale-independent.
        """
        merged_env = dict(os.environ)
        merged_env.update(
            {
                "GIT_TERMINAL_PROMPT": "0",
                "GCM_INTERACTIVE": "Never",
                "GIT_PAGER": "cat",
                "LC_ALL": "C",
                "GIT_OPTIONAL_LOCKS": "0",
            }
        )

        if extra_env:
            merged_env.update(extra_env)

        return merged_env

    def _run_process(
        self,
        *,
        argv: list[str],
        cwd: Path,
        env: dict[str, str],
        timeout_s: float | None,
    ) -> tuple[str, str, int, bool]:
        """
        Run a command using Popen + communicate(timeout).
        Returns: (stdout, stderr, exit_code, timed_out)
        """
        # POSIX: allow killing full process group
        popen_kwargs: dict = {}
        if os.name != "nt":
            popen_kwargs["start_new_session"] = True

        try:
            p = subprocess.Popen(
                argv,
                cwd=str(cwd),
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                shell=False,
                **popen_kwargs,
            )
        except FileNotFoundError as e:
            raise GitExecutionError("git executable not found in PATH.") from e
        except OSError as e:
            raise GitExecutionError(f"Failed to spawn git: {type(e).__name__}: {e}") from e

        try:
            out, err = p.communicate(timeout=timeout_s)
            return out or "", err or "", int(p.returncode or 0), False

        except subprocess.TimeoutExpired:
            try:
                out, err = p.communicate(timeout=0.2)
            except (subprocess.TimeoutExpired, OSError, ValueError):
                out, err = ("", "")

            # Hard cleanup
            try:
                _kill(p)
            finally:
                try:
                    p.wait(timeout=0.5)
                except subprocess.TimeoutExpired:
                    logger.warning("git process %s did not exit after kill", p.pid)

            return out or "", err or "", 124, True

        except Exception as e:
            # Ensure process is not left running
            try:
                _kill(p)
            except OSError:
                pass
            raise GitExecutionError(f"Failed while running git: {type(e).__name__}: {e}") from e

    def _apply_output_ceiling(self, stdout: str, stderr: str) -> tuple[str, str, bool]:
        """
        Enforce output ceiling (stdout+stderr). Prefer keeping stderr.
        Deterministic truncation: keep up to half for stderr, rest for stdout.
        """
        max_chars = max(1, int(self.config.max_output_chars))
        if len(stdout) + len(stderr) <= max_chars:
            return stdout, stderr, False

        keep_stderr = min(len(stderr), max_chars // 2)
        keep_stdout = max_chars - keep_stderr

        return stdout[:keep_stdout], stderr[:keep_stderr], True
