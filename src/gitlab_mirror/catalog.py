"""
Remote catalog fetcher.

Reads the current user, the groups and the projects visible to them from a
GitLab instance through python-gitlab.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, TypeVar

import gitlab
import requests

from .errors import RemoteError
from .models import Group, Identity, Project


T = TypeVar('T')

DEFAULT_PER_PAGE = 100


@dataclass
class Catalog:
    """Everything fetched from GitLab for one run."""

    identity: Identity
    groups: List[Group] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)


class CatalogFetcher:
    """Fetch identity, groups and projects, walking every page."""

    def __init__(self, gl: gitlab.Gitlab, per_page: int = DEFAULT_PER_PAGE,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            gl: Configured python-gitlab client
            per_page: Page size requested from the API
            logger: Logger to report progress on
        """
        self.gl = gl
        self.per_page = per_page
        self.logger = logger or logging.getLogger('gitlab_mirror')

    def fetch_identity(self) -> Identity:
        """
        Authenticate and return the current user.

        Raises:
            RemoteError: On authentication, network or response errors
        """
        try:
            self.gl.auth()
            user = self.gl.user
        except (gitlab.exceptions.GitlabError, requests.exceptions.RequestException) as e:
            raise RemoteError(f"Authentication failed: {e}") from e
        if user is None:
            raise RemoteError("Authentication failed: no current user returned")
        identity = Identity.from_attributes(user.attributes)
        self.logger.info(f"Successfully authenticated as: {identity.username}")
        return identity

    def _list_all(self, manager: Any, kind: str, build: Callable[[dict], T], **filters: Any) -> List[T]:
        """
        List every item of ``manager``, following the API's next-page links.

        Raises:
            RemoteError: If any page fails or an item is malformed
        """
        try:
            objects = manager.list(get_all=True, per_page=self.per_page, **filters)
        except (gitlab.exceptions.GitlabError, requests.exceptions.RequestException) as e:
            raise RemoteError(f"Failed to list {kind}: {e}") from e
        return [build(obj.attributes) for obj in objects]

    def fetch_groups(self, access_level: int) -> List[Group]:
        groups = self._list_all(self.gl.groups, 'groups', Group.from_attributes,
                                min_access_level=int(access_level))
        self.logger.info(f"Found {len(groups)} groups")
        return groups

    def fetch_projects(self, access_level: int) -> List[Project]:
        projects = self._list_all(self.gl.projects, 'projects', Project.from_attributes,
                                  min_access_level=int(access_level))
        self.logger.info(f"Found {len(projects)} projects")
        return projects

    def fetch(self, access_level: int) -> Catalog:
        """
        Fetch the complete catalog.

        Args:
            access_level: Minimum GitLab access level (10, 20, 30, 40 or 50)

        Returns:
            Catalog with identity, all groups and all projects

        Raises:
            RemoteError: If any request fails; no partial catalog is returned
        """
        identity = self.fetch_identity()
        return Catalog(
            identity=identity,
            groups=self.fetch_groups(access_level),
            projects=self.fetch_projects(access_level),
        )
