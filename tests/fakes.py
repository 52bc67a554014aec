"""
Test doubles shared by the test modules.
"""

from unittest.mock import Mock


class RecordingSink:
    """ProgressSink that records every call."""

    def __init__(self):
        self.calls = []
        self.lines = []
        self.finished = False

    def set_phase(self, label):
        self.calls.append(('phase', label))

    def set_total(self, total):
        self.calls.append(('total', total))

    def set_position(self, position):
        self.calls.append(('position', position))

    def println(self, text):
        self.lines.append(text)

    def finish(self):
        self.finished = True


def api_object(**attributes):
    """Mimic a python-gitlab RESTObject."""
    obj = Mock()
    obj.attributes = attributes
    return obj


def paged_manager(pages):
    """
    Mimic a python-gitlab manager over ``pages``.

    Like the real manager, list() only returns the first page unless
    ``get_all`` or ``iterator`` is passed.
    """
    manager = Mock()

    def list_items(get_all=False, iterator=False, page=None, per_page=20, **filters):
        if get_all or iterator:
            return [item for batch in pages for item in batch]
        index = (page or 1) - 1
        return pages[index] if index < len(pages) else []

    manager.list.side_effect = list_items
    return manager


def group_page(start, size):
    return [api_object(full_path=f"group-{i}") for i in range(start, start + size)]


def project_object(name, namespace, http_url=None, ssh_url=None):
    return api_object(
        name=name,
        http_url_to_repo=http_url or f"https://gitlab.example.com/{namespace}/{name}.git",
        ssh_url_to_repo=ssh_url or f"git@gitlab.example.com:{namespace}/{name}.git",
        namespace={'full_path': namespace},
    )
