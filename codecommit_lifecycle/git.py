"""
Git helper for cloning repositories.

Wraps the external ``git`` executable; the clone job resolves the URL and
destination and only then hands over to GitCloner.
"""

import subprocess
from pathlib import Path

from codecommit_lifecycle.exceptions import GitCommandError
from codecommit_lifecycle.logging import get_logger, mask_sensitive_data

logger = get_logger("git")


class GitCloner:
    """
    Runs ``git clone`` for lifecycle jobs.

    Example:
        ```python
        from codecommit_lifecycle.git import GitCloner

        cloner = GitCloner(credential_helper="!aws codecommit credential-helper $@")
        cloner.clone(
            "https://git-codecommit.us-east-1.amazonaws.com/v1/repos/demo",
            "./demo",
        )
        ```
    """

    def __init__(
        self,
        git_executable: str = "git",
        credential_helper: str | None = None,
    ) -> None:
        """
        Args:
            git_executable: Name or path of the git binary
            credential_helper: Optional credential helper passed with ``-c``
        """
        self.git_executable = git_executable
        self.credential_helper = credential_helper

    def build_clone_command(
        self,
        clone_url: str,
        local_path: str | Path,
        depth: int | None = None,
        branch: str | None = None,
    ) -> list[str]:
        cmd = [self.git_executable]

        if self.credential_helper:
            # An empty helper first resets any inherited helpers.
            cmd.extend(["-c", "credential.helper=", "-c", f"credential.helper={self.credential_helper}"])
            cmd.extend(["-c", "credential.UseHttpPath=true"])

        cmd.append("clone")

        if depth is not None:
            cmd.extend(["--depth", str(depth)])

        if branch is not None:
            cmd.extend(["--branch", branch])

        cmd.append(clone_url)
        cmd.append(str(local_path))
        return cmd

    def clone(
        self,
        clone_url: str,
        local_path: str | Path,
        depth: int | None = None,
        branch: str | None = None,
    ) -> Path:
        """
        Clone a repository to a local path.

        Args:
            clone_url: The repository clone URL
            local_path: Local directory to clone into
            depth: Optional shallow clone depth
            branch: Optional specific branch to clone

        Returns:
            The local path

        Raises:
            GitCommandError: If git is missing or the clone fails
        """
        local_path = Path(local_path)
        cmd = self.build_clone_command(clone_url, local_path, depth, branch)

        logger.info("Cloning %s into %s", mask_sensitive_data(clone_url), local_path)

        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise GitCommandError(
                "GIT_NOT_FOUND", f"git executable not found: {self.git_executable}"
            ) from e
        except subprocess.CalledProcessError as e:
            message = (e.stderr or "").strip() or f"git clone exited with status {e.returncode}"
            raise GitCommandError("GIT_CLONE_FAILED", mask_sensitive_data(message)) from e

        return local_path
