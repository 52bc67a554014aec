#!/usr/bin/env python3
"""
GitLab Mirror

Mirrors the group hierarchy of a GitLab account onto the local filesystem
and optionally clones every accessible project into its namespace directory.
"""

import shlex
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import gitlab
from git import Repo, GitCommandError

from .catalog import Catalog, CatalogFetcher
from .config import MirrorSettings
from .credentials import (
    Credential,
    CredentialNegotiator,
    SshKeyCredential,
    UserPassCredential,
    parse_remote_url,
    resolve_ssh_key_path,
)
from .errors import CloneError
from .materializer import materialize
from .models import ClonePlanEntry, into_access_level
from .planner import plan_clones, plan_namespaces
from .progress import CloneProgress, ProgressSink, TqdmProgressSink


LOGGER_NAME = 'gitlab_mirror'

USERNAME_ENV = 'GITLAB_MIRROR_USERNAME'
TOKEN_ENV = 'GITLAB_MIRROR_TOKEN'

# Answers git's "get" requests from the environment; "store" and "erase" are ignored
CREDENTIAL_HELPER = (
    '!f() { if [ "$1" = get ]; then '
    'printf "username=%s\\npassword=%s\\n" "$GITLAB_MIRROR_USERNAME" "$GITLAB_MIRROR_TOKEN"; fi; }; f'
)


def setup_logging(quiet: bool = False, verbose: bool = False) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        quiet: Only show warnings and errors
        verbose: Show debug messages (wins over quiet)

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    if verbose:
        log_level = logging.DEBUG
    elif quiet:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(log_level)

    return logger


def credential_helper_env(credential: UserPassCredential) -> Dict[str, str]:
    """
    Environment handing ``credential`` to git through a credential helper.

    git only asks the helper when the server requests authentication, and
    the token never appears in the clone URL, the command line or
    ``.git/config``.
    """
    return {
        'GIT_TERMINAL_PROMPT': '0',
        'GIT_CONFIG_COUNT': '2',
        # An empty value drops helpers configured by the user
        'GIT_CONFIG_KEY_0': 'credential.helper',
        'GIT_CONFIG_VALUE_0': '',
        'GIT_CONFIG_KEY_1': 'credential.helper',
        'GIT_CONFIG_VALUE_1': CREDENTIAL_HELPER,
        USERNAME_ENV: credential.username,
        TOKEN_ENV: credential.password,
    }


@dataclass
class CloneReport:
    """Outcome of a clone pass."""

    attempted: int = 0
    cloned: List[Path] = field(default_factory=list)
    failures: List[CloneError] = field(default_factory=list)


class CloneOrchestrator:
    """Clone every planned project, one at a time, isolating failures."""

    def __init__(self, negotiator: CredentialNegotiator, sink: ProgressSink,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            negotiator: Picks the credential for each remote URL
            sink: Progress indicator shared by all clones
            logger: Logger for details; user-facing lines go through ``sink``
        """
        self.negotiator = negotiator
        self.sink = sink
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def _environment(self, credential: Credential) -> Dict[str, str]:
        """Turn a credential into the git environment for ``Repo.clone_from``."""
        if isinstance(credential, UserPassCredential):
            return credential_helper_env(credential)
        if isinstance(credential, SshKeyCredential):
            ssh_command = f"ssh -i {shlex.quote(str(credential.private_key))} -o IdentitiesOnly=yes"
            return {'GIT_SSH_COMMAND': ssh_command}
        raise TypeError(f"Unknown credential {credential!r}")

    def clone_repository(self, entry: ClonePlanEntry) -> Repo:
        """
        Clone a single repository into its planned destination.

        Args:
            entry: Destination directory and remote URL

        Returns:
            The cloned repository

        Raises:
            CredentialError: If no usable credential exists for the URL
            GitCommandError: If git fails
            OSError: If the destination cannot be created
        """
        entry.destination.mkdir(parents=True, exist_ok=True)

        allowed_types, username_from_url = parse_remote_url(entry.remote_url)
        credential = self.negotiator(entry.remote_url, username_from_url, allowed_types)
        self.logger.debug(f"Clone URL: {entry.remote_url}")

        return Repo.clone_from(
            entry.remote_url,
            entry.destination,
            progress=CloneProgress(self.sink),
            env=self._environment(credential),
        )

    def clone_all(self, plan: List[ClonePlanEntry]) -> CloneReport:
        """
        Attempt every entry of ``plan``; a failure never stops the pass.

        Args:
            plan: Clone plan, in order

        Returns:
            CloneReport listing clones and failures
        """
        report = CloneReport()
        try:
            for entry in plan:
                report.attempted += 1
                try:
                    self.clone_repository(entry)
                except Exception as e:
                    error = CloneError(entry.destination, e)
                    report.failures.append(error)
                    self.sink.println(f"{error}\n")
                    kind = "Git error" if isinstance(e, GitCommandError) else type(e).__name__
                    self.logger.debug(f"{kind} cloning {entry.destination}: {error.reason}")
                    continue
                report.cloned.append(entry.destination)
                self.sink.println(f"Cloning into '{entry.destination}'...")
        finally:
            self.sink.finish()
        return report


class GitLabMirror:
    """Main class for mirroring a GitLab account."""

    def __init__(self, settings: MirrorSettings, access_token: str, quiet: bool = False,
                 verbose: bool = False,
                 sink_factory: Callable[[], ProgressSink] = TqdmProgressSink):
        """
        Initialize the GitLab mirror.

        Args:
            settings: Resolved settings for this run
            access_token: GitLab personal access token
            quiet: If True, only log warnings and errors
            verbose: If True, log debug messages
            sink_factory: Builds the progress indicator used while cloning
        """
        self.settings = settings
        self.access_token = access_token
        self.destination_path = Path(settings.destination).expanduser()
        self.sink_factory = sink_factory

        # Initialize GitLab connection
        self.gl = gitlab.Gitlab(settings.gitlab_url, private_token=self.access_token)

        self.logger = setup_logging(quiet=quiet, verbose=verbose)

        self.catalog: Optional[Catalog] = None
        self.report: Optional[CloneReport] = None

        # Statistics
        self.stats = {
            'groups_found': 0,
            'projects_found': 0,
            'namespaces_created': 0,
            'repositories_cloned': 0,
            'errors': 0,
        }

    def fetch_catalog(self) -> Catalog:
        access_level = into_access_level(self.settings.access_level)
        self.logger.info(f"Minimum access level: {access_level.name.title()}")
        fetcher = CatalogFetcher(self.gl, logger=self.logger)
        self.catalog = fetcher.fetch(access_level)
        self.stats['groups_found'] = len(self.catalog.groups)
        self.stats['projects_found'] = len(self.catalog.projects)
        return self.catalog

    def mirror_namespaces(self, catalog: Catalog) -> List[Path]:
        """
        Create one directory per namespace under the destination.

        Raises:
            MirrorIOError: If a directory cannot be created
        """
        namespaces = plan_namespaces(catalog.identity, catalog.groups)
        created = materialize(self.destination_path, namespaces)
        self.stats['namespaces_created'] = len(created)
        return created

    def clone_projects(self, catalog: Catalog) -> CloneReport:
        """
        Clone every project of ``catalog`` into its namespace directory.

        Raises:
            ConfigError: If the SSH key path cannot be resolved
        """
        ssh_private_key = resolve_ssh_key_path(self.settings.ssh_private_key)
        negotiator = CredentialNegotiator(catalog.identity.username, self.access_token, ssh_private_key)
        plan = plan_clones(self.destination_path, catalog.projects, use_ssh=self.settings.use_ssh)

        self.logger.info(f"Cloning {len(plan)} repositories into {self.destination_path}")
        orchestrator = CloneOrchestrator(negotiator, self.sink_factory(), self.logger)
        self.report = orchestrator.clone_all(plan)

        self.stats['repositories_cloned'] = len(self.report.cloned)
        self.stats['errors'] = len(self.report.failures)
        return self.report

    def run(self) -> bool:
        """
        Fetch, mirror the namespaces and, if requested, clone.

        Returns:
            False only when clone failures occurred and
            ``fail_on_clone_error`` is set, True otherwise

        Raises:
            MirrorError: On any failure before the clone pass
        """
        catalog = self.fetch_catalog()
        self.mirror_namespaces(catalog)

        if self.settings.clone:
            report = self.clone_projects(catalog)
            self._print_statistics()
            if report.failures:
                self.logger.warning(f"{len(report.failures)} of {report.attempted} repositories failed to clone")
                if self.settings.fail_on_clone_error:
                    return False
        else:
            self._print_statistics()

        return True

    def _print_statistics(self):
        """Print mirroring statistics."""
        self.logger.info("=" * 50)
        self.logger.info("MIRROR STATISTICS")
        self.logger.info("=" * 50)
        self.logger.info(f"Groups found: {self.stats['groups_found']}")
        self.logger.info(f"Projects found: {self.stats['projects_found']}")
        self.logger.info(f"Namespaces created: {self.stats['namespaces_created']}")
        if self.settings.clone:
            self.logger.info(f"Repositories cloned: {self.stats['repositories_cloned']}")
            self.logger.info(f"Errors encountered: {self.stats['errors']}")
        self.logger.info("=" * 50)
