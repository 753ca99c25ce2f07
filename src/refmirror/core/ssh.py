"""SSH credential handling for refmirror.

Remotes reached over SSH are authenticated with a private key passed in
through configuration (usually a CI secret). The key and the optional
known_hosts content are written to a private temporary directory for
the duration of a mirror run and handed to ``ssh`` on its command line.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import shutil
import tempfile
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)

SSH_URL_PATTERNS = [
    r"^ssh://",  # SSH protocol
    r"^git\+ssh://",  # Explicit git over SSH
    r"^[\w.+-]+@[\w.-]+:(?!//)",  # scp-like shorthand (git@github.com:user/repo)
]


def is_ssh_url(url: str) -> bool:
    """Check whether ``url`` points at an SSH remote."""
    return any(re.match(pattern, url) for pattern in SSH_URL_PATTERNS)


class SSHCredentials:
    """Private key and known hosts material for one mirror run.

    Use as a context manager; the files are removed on exit::

        with SSHCredentials(key, known_hosts) as creds:
            client, path = get_transport_and_path(url, ssh_command=creds.ssh_command)

    Attributes:
        private_key: PEM/OpenSSH private key text.
        known_hosts: known_hosts content. When empty, host keys are not
            verified and a warning is logged.
    """

    def __init__(self, private_key: str, known_hosts: str | None = None):
        self.private_key = private_key
        self.known_hosts = known_hosts or ""
        self._dir: Path | None = None
        self.key_path: Path | None = None
        self.known_hosts_path: Path | None = None

    @property
    def strict_host_checking(self) -> bool:
        return bool(self.known_hosts.strip())

    def __enter__(self) -> "SSHCredentials":
        self._dir = Path(tempfile.mkdtemp(prefix="refmirror-ssh-"))
        os.chmod(self._dir, 0o700)

        key = self.private_key
        if not key.endswith("\n"):
            # OpenSSH refuses keys without a trailing newline
            key += "\n"
        self.key_path = self._dir / "id_key"
        self.key_path.write_text(key)
        os.chmod(self.key_path, 0o600)

        self.known_hosts_path = self._dir / "known_hosts"
        self.known_hosts_path.write_text(self.known_hosts)
        os.chmod(self.known_hosts_path, 0o600)

        if not self.strict_host_checking:
            logger.warning("No SSH known hosts configured, host keys will not be verified")

        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        """Remove the key material from disk."""
        if self._dir is not None:
            shutil.rmtree(self._dir, ignore_errors=True)
            logger.debug(f"Removed SSH material in {self._dir}")
        self._dir = None
        self.key_path = None
        self.known_hosts_path = None

    @property
    def ssh_command(self) -> str:
        """The ``ssh`` command line using this key and known hosts file."""
        if self.key_path is None or self.known_hosts_path is None:
            raise RuntimeError("SSH credentials used outside of their context")
        args = [
            "ssh",
            "-i",
            str(self.key_path),
            "-o",
            "IdentitiesOnly=yes",
            "-o",
            f"UserKnownHostsFile={self.known_hosts_path}",
            "-o",
            f"StrictHostKeyChecking={'yes' if self.strict_host_checking else 'no'}",
        ]
        return shlex.join(args)
