#!/usr/bin/env python3
"""
Command-line interface for GitLab Mirror.
"""

import sys
from typing import Optional

import click

from .cloner import GitLabMirror, setup_logging
from .config import Config
from .credentials import resolve_token
from .errors import MirrorError


ACCESS_LEVEL_HELP = """Access level of groups (and projects if --clone is given):
-A => Guest [default], -AA => Reporter, -AAA => Developer,
-AAAA => Maintainer, -AAAAA => Owner"""


@click.command()
@click.option('-A', 'access_level', count=True, help=ACCESS_LEVEL_HELP)
@click.option('--clone/--no-clone', '-c', default=None, help='Clone all repositories')
@click.option('--destination', '-d', default=None,
              help='The destination directory in which the hierarchy should be mirrored [default: .]')
@click.option('--host', '-H', default=None, help='GitLab remote host [default: gitlab.com]')
@click.option('--personal-access-token', '-p', default=None,
              help='GitLab personal access token (prompted for when omitted)')
@click.option('--ssh-private-key', '-s', default=None, help='SSH private key [default: ~/.ssh/id_rsa]')
@click.option('--use-ssh/--no-use-ssh', default=None, help='Clone over SSH instead of HTTPS')
@click.option('--fail-on-clone-error/--no-fail-on-clone-error', default=None,
              help='Exit with status 1 if any repository failed to clone')
@click.option('--config', 'config_file', default=None,
              help='JSON configuration file [default: ~/.gitlab_mirror_config.json]')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Quiet mode - show only progress bar and errors')
def main(access_level: int, clone: Optional[bool], destination: str, host: str,
         personal_access_token: str, ssh_private_key: str, use_ssh: Optional[bool],
         fail_on_clone_error: Optional[bool], config_file: str,
         verbose: bool, quiet: bool):
    """
    Mirror the group hierarchy of a GitLab account onto the local filesystem.

    One directory is created per group (subgroups nested inside their
    parents) plus one for your personal namespace. With --clone every
    accessible project is cloned into its namespace directory; a project
    that fails to clone is reported and skipped.
    """
    logger = setup_logging(quiet=quiet, verbose=verbose)

    try:
        settings = Config(config_file).resolve(
            access_level=access_level,
            clone=clone,
            destination=destination,
            host=host,
            personal_access_token=personal_access_token,
            ssh_private_key=ssh_private_key,
            use_ssh=use_ssh,
            fail_on_clone_error=fail_on_clone_error,
        )
        token = resolve_token(settings.personal_access_token)
        mirror = GitLabMirror(settings, token, quiet=quiet, verbose=verbose)
        success = mirror.run()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(1)
    except MirrorError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
