"""
Error types for GitLab Mirror.

Everything raised on purpose by this package derives from MirrorError so
the command-line entry point can report it without a traceback.
"""

from pathlib import Path
from typing import Optional, Union


class MirrorError(Exception):
    """Base class for all GitLab Mirror errors."""


class ConfigError(MirrorError):
    """Invalid or unresolvable configuration value."""


class MirrorIOError(MirrorError, OSError):
    """Terminal prompt or local filesystem failure."""


class RemoteError(MirrorError):
    """Authentication, network or malformed response from the GitLab API."""


class CredentialError(MirrorError):
    """The git transport asked for a credential we cannot provide."""


class CloneError(MirrorError):
    """A single project could not be cloned."""

    def __init__(self, destination: Union[str, Path], cause: BaseException, reason: Optional[str] = None):
        self.destination = Path(destination)
        self.cause = cause
        self.reason = reason if reason is not None else str(cause)
        super().__init__(f"Failed to clone into '{self.destination}': {self.reason}")
