#!/usr/bin/env python3
"""
Unit tests for namespace and clone planning.
"""

import unittest
from pathlib import Path
from unittest.mock import patch

from gitlab_mirror.models import ClonePlanEntry, Group, Identity, Namespace, Project
from gitlab_mirror.planner import plan_clones, plan_namespaces


def make_project(name, namespace, ssh=True):
    return Project(
        name=name,
        http_url_to_repo=f"https://gitlab.example.com/{namespace}/{name}.git",
        namespace=Namespace(namespace),
        ssh_url_to_repo=f"git@gitlab.example.com:{namespace}/{name}.git" if ssh else None,
    )


class TestPlanNamespaces(unittest.TestCase):
    """Test cases for plan_namespaces."""

    def setUp(self):
        self.identity = Identity('alice')
        self.groups = [Group('acme'), Group('acme/tools'), Group('acme/tools/ci'), Group('oss')]

    def test_username_added(self):
        plan = plan_namespaces(self.identity, self.groups)
        self.assertEqual(len(plan), len(self.groups) + 1)
        self.assertIn('alice', plan)
        self.assertIn('acme/tools/ci', plan)

    def test_username_matching_group_collapses(self):
        groups = self.groups + [Group('alice')]
        plan = plan_namespaces(self.identity, groups)
        self.assertEqual(len(plan), len(groups))

    def test_duplicate_groups_collapse(self):
        plan = plan_namespaces(self.identity, [Group('acme'), Group('acme')])
        self.assertEqual(plan, {'acme', 'alice'})

    def test_no_groups(self):
        self.assertEqual(plan_namespaces(self.identity, []), {'alice'})

    def test_no_filesystem_access(self):
        with patch('pathlib.Path.mkdir') as mock_mkdir, patch('os.makedirs') as mock_makedirs:
            plan_namespaces(self.identity, self.groups)
            plan_clones('/mirror', [make_project('api', 'acme')])
        mock_mkdir.assert_not_called()
        mock_makedirs.assert_not_called()


class TestPlanClones(unittest.TestCase):
    """Test cases for plan_clones."""

    def test_destination_layout(self):
        plan = plan_clones('/mirror', [make_project('ci-runner', 'acme/tools')])
        self.assertEqual(plan, [ClonePlanEntry(
            Path('/mirror/acme/tools/ci-runner'),
            'https://gitlab.example.com/acme/tools/ci-runner.git',
        )])

    def test_same_destination_is_not_deduplicated(self):
        projects = [make_project('api', 'acme'), make_project('api', 'acme')]
        plan = plan_clones('/mirror', projects)
        self.assertEqual(len(plan), 2)
        self.assertEqual(plan[0].destination, plan[1].destination)

    def test_order_preserved(self):
        projects = [make_project('b', 'acme'), make_project('a', 'alice')]
        plan = plan_clones('/mirror', projects)
        self.assertEqual([e.destination.name for e in plan], ['b', 'a'])

    def test_use_ssh(self):
        plan = plan_clones('/mirror', [make_project('api', 'acme')], use_ssh=True)
        self.assertEqual(plan[0].remote_url, 'git@gitlab.example.com:acme/api.git')

    def test_use_ssh_falls_back_to_http(self):
        plan = plan_clones('/mirror', [make_project('api', 'acme', ssh=False)], use_ssh=True)
        self.assertEqual(plan[0].remote_url, 'https://gitlab.example.com/acme/api.git')


if __name__ == '__main__':
    unittest.main(verbosity=2)
