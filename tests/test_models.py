#!/usr/bin/env python3
"""
Unit tests for the data model and access-level mapping.
"""

import unittest

from gitlab.const import AccessLevel

from gitlab_mirror.errors import RemoteError
from gitlab_mirror.models import (
    Group,
    Identity,
    Project,
    clamp_access_ordinal,
    into_access_level,
)


class TestAccessLevel(unittest.TestCase):
    """Test cases for the -A count mapping."""

    def test_clamp(self):
        """Raw counts 0, 1, 5 and 9 clamp to 1, 1, 5 and 5."""
        self.assertEqual([clamp_access_ordinal(n) for n in (0, 1, 5, 9)], [1, 1, 5, 5])

    def test_mapping(self):
        self.assertEqual(into_access_level(0), AccessLevel.GUEST)
        self.assertEqual(into_access_level(1), AccessLevel.GUEST)
        self.assertEqual(into_access_level(2), AccessLevel.REPORTER)
        self.assertEqual(into_access_level(3), AccessLevel.DEVELOPER)
        self.assertEqual(into_access_level(4), AccessLevel.MAINTAINER)
        self.assertEqual(into_access_level(5), AccessLevel.OWNER)
        self.assertEqual(into_access_level(9), AccessLevel.OWNER)

    def test_levels_are_ordered(self):
        levels = [into_access_level(n) for n in range(1, 6)]
        self.assertEqual(levels, sorted(levels))
        self.assertEqual(int(into_access_level(1)), 10)
        self.assertEqual(int(into_access_level(5)), 50)


class TestFromAttributes(unittest.TestCase):
    """Test cases for building records from API attributes."""

    def test_identity(self):
        identity = Identity.from_attributes({'username': 'alice', 'id': 7})
        self.assertEqual(identity, Identity('alice'))

    def test_group(self):
        self.assertEqual(Group.from_attributes({'full_path': 'acme/tools'}).full_path, 'acme/tools')

    def test_project(self):
        project = Project.from_attributes({
            'name': 'api',
            'http_url_to_repo': 'https://gitlab.example.com/acme/api.git',
            'ssh_url_to_repo': 'git@gitlab.example.com:acme/api.git',
            'namespace': {'full_path': 'acme', 'kind': 'group'},
        })
        self.assertEqual(project.name, 'api')
        self.assertEqual(project.namespace.full_path, 'acme')
        self.assertEqual(project.ssh_url_to_repo, 'git@gitlab.example.com:acme/api.git')

    def test_project_without_ssh_url(self):
        project = Project.from_attributes({
            'name': 'api',
            'http_url_to_repo': 'https://gitlab.example.com/acme/api.git',
            'namespace': {'full_path': 'acme'},
        })
        self.assertIsNone(project.ssh_url_to_repo)

    def test_missing_key_is_remote_error(self):
        with self.assertRaises(RemoteError) as context:
            Project.from_attributes({'name': 'api', 'namespace': {'full_path': 'acme'}})
        self.assertIn('http_url_to_repo', str(context.exception))

    def test_malformed_namespace_is_remote_error(self):
        with self.assertRaises(RemoteError):
            Project.from_attributes({
                'name': 'api',
                'http_url_to_repo': 'https://gitlab.example.com/acme/api.git',
                'namespace': None,
            })

    def test_missing_username(self):
        with self.assertRaises(RemoteError):
            Identity.from_attributes({})


if __name__ == '__main__':
    unittest.main(verbosity=2)
