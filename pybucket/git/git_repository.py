#-
# #%L
# PyBucket
# %%
# Copyright (C) 2025 PyBucket contributors
# %%
# License: MIT
# See the LICENSE file distributed with this project for the full terms.
# #L%
#

from pathlib import Path
from typing import Dict, Optional

from pybucket.config import get_config
from pybucket.git.credentials import GitCredentials
from pybucket.utils import run_command, debug_log, log


class RepositoryClosedError(RuntimeError):
    """Raised when a GitRepository is used outside of its open scope."""


class GitRepository:
    """
    Handle on a local git working copy.

    The handle must be opened before use, normally through a ``with`` block:

        with GitRepository(path) as repository:
            repository.stage("readme.md")

    Every operation runs the git executable inside the working copy.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._is_open = False

    @classmethod
    def clone(cls, url: str, directory, credentials: GitCredentials) -> "GitRepository":
        """Clones ``url`` into ``directory`` and returns a (closed) handle on the result."""
        log(f"Cloning {url} into {directory}...")
        git = get_config().git_executable
        run_command([git, "clone", url, str(directory)], env=credentials.to_git_env())
        return cls(directory)

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> "GitRepository":
        if not (self.path / ".git").exists():
            raise FileNotFoundError(f"No git working copy found at {self.path}")
        self._is_open = True
        debug_log(f"Opened repository {self.path}")
        return self

    def close(self):
        if self._is_open:
            debug_log(f"Closed repository {self.path}")
        self._is_open = False

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _git(self, *args, env: Optional[Dict[str, str]] = None) -> str:
        if not self._is_open:
            raise RepositoryClosedError(f"Repository {self.path} is not open")
        return run_command([get_config().git_executable, *args], env=env, cwd=str(self.path))

    def stage(self, relative_path: str):
        self._git("add", "--", relative_path)

    def remove(self, relative_path: str):
        """Deletes the file from the working tree and stages the deletion."""
        self._git("rm", "--", relative_path)

    def move(self, source: str, destination: str):
        """Renames a tracked file and stages the rename."""
        self._git("mv", "--", source, destination)

    def commit(self, message: str, author, committer=None) -> str:
        """
        Commits the staged changes.

        Args:
            message: The commit message
            author: CommitSignature used as author
            committer: CommitSignature used as committer, defaults to the author

        Returns:
            str: SHA of the new commit
        """
        committer = committer or author
        env = dict(author.to_git_env("AUTHOR"))
        env.update(committer.to_git_env("COMMITTER"))
        log(f"Committing changes with message: '{message}'")
        # Signing and hooks from the user configuration would change or reject the commits
        self._git("-c", "commit.gpgsign=false", "commit", "--no-verify", "-m", message, env=env)
        return self.head_sha()

    def head_sha(self) -> str:
        return self._git("rev-parse", "HEAD")

    def current_branch(self) -> str:
        return self._git("symbolic-ref", "--short", "HEAD")

    def create_branch(self, branch_name: str, remote: str = "origin"):
        """Creates ``branch_name`` at HEAD and makes it track the same-named branch on ``remote``."""
        debug_log(f"Creating branch {branch_name} tracking {remote}/{branch_name}")
        self._git("branch", branch_name)
        self._git("config", f"branch.{branch_name}.remote", remote)
        self._git("config", f"branch.{branch_name}.merge", f"refs/heads/{branch_name}")

    def checkout(self, branch_name: str):
        self._git("checkout", branch_name)

    def push(self, branch_name: str, credentials: GitCredentials, remote: str = "origin"):
        """Pushes a single branch and records ``remote`` as its upstream."""
        log(f"Pushing branch {branch_name} to {remote}...")
        self._git("push", "--set-upstream", remote, branch_name, env=credentials.to_git_env())

    def push_all(self, credentials: GitCredentials, remote: str = "origin"):
        """Pushes every local branch in a single operation."""
        log(f"Pushing all branches to {remote}...")
        self._git("push", "--all", remote, env=credentials.to_git_env())
