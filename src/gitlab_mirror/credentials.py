"""
Credential handling for GitLab Mirror.

Resolves the personal access token and SSH private key before the run, and
decides which credential to hand to git for each remote URL.
"""

import re
import sys
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional, Tuple, Union
from urllib.parse import urlsplit

import click

from .errors import ConfigError, CredentialError, MirrorIOError


TOKEN_PROMPT = "Enter GitLab personal access token"
CONTROLLING_TERMINAL = "/dev/tty"

# user@host:path, as accepted by git for SSH remotes
_SCP_LIKE_URL = re.compile(r'^(?:(?P<user>[^@/:]+)@)?(?P<host>[^/:]+):(?!//)(?P<path>.+)$')


class CredentialType(enum.Enum):
    USERPASS_PLAINTEXT = "userpass_plaintext"
    SSH_KEY = "ssh_key"
    DEFAULT = "default"


@dataclass(frozen=True)
class UserPassCredential:
    username: str
    password: str


@dataclass(frozen=True)
class SshKeyCredential:
    username: str
    private_key: Path
    passphrase: Optional[str] = None


Credential = Union[UserPassCredential, SshKeyCredential]


def terminal_available() -> bool:
    """
    Whether a hidden prompt has a terminal to read from.

    The hidden prompt reads the controlling terminal (``/dev/tty``), so a
    redirected stdin still allows prompting when the process has one.
    """
    if sys.stdin is not None and sys.stdin.isatty():
        return True
    try:
        with open(CONTROLLING_TERMINAL):
            return True
    except OSError:
        return False


def resolve_token(token: Optional[str] = None) -> str:
    """
    Return the personal access token, prompting for it if needed.

    Args:
        token: Token supplied on the command line or in the config file

    Returns:
        The token, verbatim

    Raises:
        MirrorIOError: If there is no terminal to prompt on or the prompt is aborted
    """
    if token is not None:
        return token
    if not terminal_available():
        raise MirrorIOError("No personal access token given and no terminal available to prompt for one")
    try:
        return click.prompt(TOKEN_PROMPT, hide_input=True)
    except click.Abort as e:
        raise MirrorIOError("Personal access token prompt was aborted") from e


def resolve_ssh_key_path(path: Union[str, Path]) -> Path:
    """
    Expand a leading ``~`` component of an SSH key path.

    Only ``~`` and ``~/...`` are expanded; ``~user`` is left untouched.

    Raises:
        ConfigError: If the home directory cannot be determined
    """
    key_path = Path(path)
    if not key_path.parts or key_path.parts[0] != '~':
        return key_path
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise ConfigError("Can't find home directory to locate SSH private key") from e
    return home.joinpath(*key_path.parts[1:])


def parse_remote_url(url: str) -> Tuple[FrozenSet[CredentialType], Optional[str]]:
    """
    Work out which credential types git will ask for when talking to ``url``.

    Returns:
        Allowed credential types and the username embedded in the URL, if any
    """
    if '://' not in url:
        match = _SCP_LIKE_URL.match(url)
        # A single-letter host is a Windows drive, not an SSH remote
        if match and len(match.group('host')) > 1:
            return frozenset({CredentialType.SSH_KEY}), match.group('user')
        return frozenset({CredentialType.DEFAULT}), None

    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme in ('http', 'https'):
        return frozenset({CredentialType.USERPASS_PLAINTEXT}), parts.username
    if scheme in ('ssh', 'git+ssh', 'ssh+git'):
        return frozenset({CredentialType.SSH_KEY}), parts.username
    return frozenset({CredentialType.DEFAULT}), parts.username


class CredentialNegotiator:
    """
    Pick the credential for a git transport request.

    Calling an instance has no side effects, so it can be invoked as often
    as the transport asks.
    """

    def __init__(self, username: str, token: str, ssh_private_key: Path):
        self.username = username
        self.token = token
        self.ssh_private_key = Path(ssh_private_key)

    def __call__(self, url: str, username_from_url: Optional[str],
                 allowed_types: FrozenSet[CredentialType]) -> Credential:
        """
        Args:
            url: Remote URL being cloned
            username_from_url: Username component of the URL, if any
            allowed_types: Credential types the transport accepts

        Returns:
            UserPassCredential or SshKeyCredential

        Raises:
            CredentialError: No username in an SSH URL, or no supported type
        """
        if CredentialType.USERPASS_PLAINTEXT in allowed_types:
            return UserPassCredential(self.username, self.token)

        if CredentialType.SSH_KEY in allowed_types:
            if not username_from_url:
                raise CredentialError("No username in URL for SSH")
            return SshKeyCredential(username_from_url, self.ssh_private_key)

        names = ', '.join(sorted(t.value for t in allowed_types)) or 'none'
        raise CredentialError(f"Unsupported requested credential type '{names}' for {url}")
