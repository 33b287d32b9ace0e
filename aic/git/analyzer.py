"""Git Analyzer - Read the staged diff and history, run commit/push/tag."""

import subprocess

from aic import AicError

# Minimal, uncoloured, prefix-free hunks keep the prompt small
DIFF_OPTIONS = ("--minimal", "--unified=0", "--no-prefix", "--color=never")


class GitError(AicError):
    """Raised when git operations fail."""
    pass


class GitAnalyzer:
    """Thin wrapper over the git command line."""

    def __init__(self, verify: bool = True):
        if verify:
            self._verify_git_available()
            self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _run_git_passthrough(self, *args: str) -> None:
        """Run a git command with its output going straight to the terminal."""
        try:
            subprocess.run(['git', *args], check=True)
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git work tree."""
        try:
            inside = self._run_git('rev-parse', '--is-inside-work-tree').strip()
        except GitError:
            raise GitError("not a git repository (run 'git init')")
        if inside != "true":
            raise GitError("not inside a git work tree")

    def staged_diff(self) -> str:
        """Staged diff, retrying with --staged for gits that reject --cached."""
        last_error = None
        for flag in ('--cached', '--staged'):
            try:
                return self._run_git('diff', flag, *DIFF_OPTIONS)
            except GitError as e:
                if "unknown option" not in str(e):
                    raise
                last_error = e
        raise last_error

    def recent_subjects(self, limit: int = 500) -> list[str]:
        """Subjects of recent non-merge commits, newest first."""
        if limit <= 0:
            limit = 500
        try:
            output = self._run_git('log', f'-n{limit}', '--pretty=%s', '--no-merges')
        except GitError as e:
            # A fresh repository has no HEAD yet
            if "does not have any commits" in str(e):
                return []
            raise
        return [line.strip() for line in output.split('\n') if line.strip()]

    def repo_root(self) -> str:
        return self._run_git('rev-parse', '--show-toplevel').strip()

    def commit(self, message: str) -> None:
        self._run_git_passthrough('commit', '-m', message)

    def push(self) -> None:
        self._run_git_passthrough('push')

    def tag(self, name: str) -> None:
        self._run_git_passthrough('tag', name)
