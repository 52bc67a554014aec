"""
Data model for GitLab Mirror.

Plain read-only records built from GitLab API attribute dictionaries,
plus the mapping from the ``-A`` repetition count to GitLab access levels.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from gitlab.const import AccessLevel

from .errors import ConfigError, RemoteError


MIN_ACCESS_ORDINAL = 1
MAX_ACCESS_ORDINAL = 5

ACCESS_LEVELS = {
    1: AccessLevel.GUEST,
    2: AccessLevel.REPORTER,
    3: AccessLevel.DEVELOPER,
    4: AccessLevel.MAINTAINER,
    5: AccessLevel.OWNER,
}


def clamp_access_ordinal(count: int) -> int:
    """Clamp a raw ``-A`` repetition count into the 1..5 range."""
    return max(MIN_ACCESS_ORDINAL, min(MAX_ACCESS_ORDINAL, count))


def into_access_level(count: int) -> AccessLevel:
    """
    Map a raw ``-A`` repetition count to a GitLab access level.

    Args:
        count: Number of times ``-A`` was given (any integer)

    Returns:
        Guest, Reporter, Developer, Maintainer or Owner

    Raises:
        ConfigError: If the clamped ordinal has no access level
    """
    ordinal = clamp_access_ordinal(count)
    try:
        return ACCESS_LEVELS[ordinal]
    except KeyError:
        # Unreachable while clamp_access_ordinal matches ACCESS_LEVELS
        raise ConfigError(f"Casting AccessLevel from invalid number {ordinal}.") from None


def _require(attributes: Dict[str, Any], key: str, kind: str) -> Any:
    try:
        value = attributes[key]
    except (KeyError, TypeError):
        raise RemoteError(f"Malformed {kind} in API response: missing '{key}'") from None
    if value is None:
        raise RemoteError(f"Malformed {kind} in API response: '{key}' is null")
    return value


@dataclass(frozen=True)
class Identity:
    """The authenticated user."""

    username: str

    @classmethod
    def from_attributes(cls, attributes: Dict[str, Any]) -> 'Identity':
        return cls(username=_require(attributes, 'username', 'user'))


@dataclass(frozen=True)
class Group:
    """A group or subgroup; ``full_path`` already contains parent groups."""

    full_path: str

    @classmethod
    def from_attributes(cls, attributes: Dict[str, Any]) -> 'Group':
        return cls(full_path=_require(attributes, 'full_path', 'group'))


@dataclass(frozen=True)
class Namespace:
    full_path: str

    @classmethod
    def from_attributes(cls, attributes: Dict[str, Any]) -> 'Namespace':
        return cls(full_path=_require(attributes, 'full_path', 'namespace'))


@dataclass(frozen=True)
class Project:
    """A project together with its owning namespace."""

    name: str
    http_url_to_repo: str
    namespace: Namespace
    ssh_url_to_repo: Optional[str] = None

    @classmethod
    def from_attributes(cls, attributes: Dict[str, Any]) -> 'Project':
        return cls(
            name=_require(attributes, 'name', 'project'),
            http_url_to_repo=_require(attributes, 'http_url_to_repo', 'project'),
            namespace=Namespace.from_attributes(_require(attributes, 'namespace', 'project')),
            ssh_url_to_repo=attributes.get('ssh_url_to_repo'),
        )


@dataclass(frozen=True)
class ClonePlanEntry:
    """Where one project gets cloned, and from which URL."""

    destination: Path
    remote_url: str
