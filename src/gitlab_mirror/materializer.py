"""
Directory materializer: creates the mirrored namespace tree.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from .errors import MirrorIOError


logger = logging.getLogger('gitlab_mirror')


def materialize(root: Union[str, Path], paths: Iterable[Union[str, Path]]) -> List[Path]:
    """
    Create ``root/<path>`` for every path, parents included.

    Existing directories are left alone, so calling this twice is harmless.

    Args:
        root: Mirror root directory
        paths: Namespace paths relative to ``root``

    Returns:
        The directories that now exist

    Raises:
        MirrorIOError: On the first directory that cannot be created
    """
    root = Path(root)
    created = []
    for path in paths:
        directory = root / path
        logger.info(f"mkdir '{directory}'")
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MirrorIOError(f"failed to create the directory '{directory}': {e}") from e
        created.append(directory)
    return created
