"""
Namespace and clone planning.

Pure functions: no network, no filesystem.
"""

from pathlib import Path
from typing import Iterable, List, Set, Union

from .models import ClonePlanEntry, Group, Identity, Project


def plan_namespaces(identity: Identity, groups: Iterable[Group]) -> Set[str]:
    """
    Collect the namespace paths to mirror.

    Args:
        identity: Current user; their personal namespace is always included
        groups: Groups visible to the user

    Returns:
        Unordered set of unique namespace paths
    """
    namespaces = {group.full_path for group in groups}
    namespaces.add(identity.username)
    return namespaces


def plan_clones(root: Union[str, Path], projects: Iterable[Project],
                use_ssh: bool = False) -> List[ClonePlanEntry]:
    """
    Map every project to ``root/<namespace>/<name>``.

    Projects that map to the same destination are all kept.

    Args:
        root: Mirror root directory
        projects: Projects to clone
        use_ssh: Prefer ``ssh_url_to_repo`` when the project has one

    Returns:
        One ClonePlanEntry per project, in input order
    """
    root = Path(root)
    plan = []
    for project in projects:
        url = project.http_url_to_repo
        if use_ssh and project.ssh_url_to_repo:
            url = project.ssh_url_to_repo
        plan.append(ClonePlanEntry(root / project.namespace.full_path / project.name, url))
    return plan
