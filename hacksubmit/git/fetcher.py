"""Shallow clones of remote repositories into scratch directories."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Iterable
from urllib.parse import urlsplit, urlunsplit

from ..logging import get_logger

_ALLOWED_SCHEMES = {"http", "https", "ssh", "git", "file"}


class CloneError(RuntimeError):
    """Raised when a repository cannot be cloned."""


class RepositoryFetcher:
    """Clones repositories with the git CLI; callers remove the working copy."""

    def __init__(
        self,
        *,
        token: str | None = None,
        runner: Callable[..., str] | None = None,
    ) -> None:
        self._token = token
        self._runner = runner or self._default_runner
        self.logger = get_logger("git.fetcher")

    def clone(self, repo_url: str, destination: Path | None = None) -> Path:
        """Clone ``repo_url`` with depth 1 and return the absolute working-copy path."""
        self._validate_url(repo_url)
        if destination is None:
            target = Path(tempfile.mkdtemp(prefix="hacksubmit-"))
        else:
            target = destination
        target = target.expanduser().resolve()

        self.logger.info("Cloning %s into %s", repo_url, target)
        args = ["git", "clone", "--depth", "1", self._authenticated_url(repo_url), str(target)]
        try:
            self._run_clone(args, target, repo_url)
        except CloneError:
            # Scratch directories are ours to discard; caller destinations are left alone.
            if destination is None:
                self.remove(target)
            raise
        return target

    def remove(self, path: Path) -> None:
        """Delete a working copy created by :meth:`clone`."""
        self.logger.debug("Removing working copy %s", path)
        shutil.rmtree(path, ignore_errors=True)

    # ------------------------------------------------------------------
    # Helpers

    def _run_clone(self, args: list[str], target: Path, repo_url: str) -> None:
        try:
            self._runner(args, cwd=target.parent)
        except FileNotFoundError as exc:
            raise CloneError("Unable to locate the git executable.") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
            message = detail or f"git exited with status {exc.returncode}"
            raise CloneError(f"Failed to clone {repo_url}: {self._redact(message)}") from exc

    @staticmethod
    def _validate_url(repo_url: str) -> None:
        if not repo_url or not repo_url.strip():
            raise CloneError("Repository URL must not be empty.")
        if repo_url.startswith("git@") and ":" in repo_url:
            return
        scheme = urlsplit(repo_url).scheme.lower()
        if scheme not in _ALLOWED_SCHEMES:
            raise CloneError(f"Unsupported repository URL: {repo_url}")

    def _authenticated_url(self, repo_url: str) -> str:
        if not self._token:
            return repo_url
        parts = urlsplit(repo_url)
        if parts.scheme != "https" or parts.hostname != "github.com" or parts.username:
            return repo_url
        netloc = f"x-access-token:{self._token}@{parts.netloc}"
        return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))

    def _redact(self, message: str) -> str:
        if self._token:
            return message.replace(self._token, "***")
        return message

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


__all__ = ["CloneError", "RepositoryFetcher"]
