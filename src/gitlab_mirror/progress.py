"""
Progress reporting for GitLab Mirror.

The clone orchestrator reports through a ProgressSink so that the
terminal rendering (tqdm) can be swapped for a recording fake in tests.
"""

from dataclasses import dataclass
from typing import Optional

from git import RemoteProgress
from tqdm import tqdm


RECEIVING_OBJECTS = "Receiving objects"
RESOLVING_DELTAS = "Resolving deltas"


class ProgressSink:
    """Interface for a single progress indicator shared by all clones."""

    def set_phase(self, label: str) -> None:
        raise NotImplementedError

    def set_total(self, total: int) -> None:
        raise NotImplementedError

    def set_position(self, position: int) -> None:
        raise NotImplementedError

    def println(self, text: str) -> None:
        """Print a line above the indicator without disturbing it."""
        raise NotImplementedError

    def finish(self) -> None:
        """Finalize and clear the indicator."""
        raise NotImplementedError


class TqdmProgressSink(ProgressSink):
    """Render progress with a tqdm bar that is cleared when finished."""

    BAR_FORMAT = "[{elapsed}] {desc:18}: {bar:40} {n_fmt}/{total_fmt}"

    def __init__(self, disable: bool = False):
        self.bar = tqdm(total=0, bar_format=self.BAR_FORMAT, leave=False, disable=disable)

    def set_phase(self, label: str) -> None:
        self.bar.set_description_str(label, refresh=False)

    def set_total(self, total: int) -> None:
        self.bar.total = total

    def set_position(self, position: int) -> None:
        self.bar.n = position
        self.bar.refresh()

    def println(self, text: str) -> None:
        self.bar.write(text)

    def finish(self) -> None:
        self.bar.close()


@dataclass
class TransferStats:
    """Running counters of one clone's object transfer."""

    received_objects: int = 0
    total_objects: int = 0
    indexed_deltas: int = 0
    total_deltas: int = 0


def report_transfer(sink: ProgressSink, stats: TransferStats) -> None:
    """
    Show the current transfer phase on ``sink``.

    Objects are shown until all have been received, then the same
    indicator switches to delta resolution.
    """
    if stats.received_objects < stats.total_objects:
        sink.set_phase(RECEIVING_OBJECTS)
        sink.set_total(stats.total_objects)
        sink.set_position(stats.received_objects)
    else:
        sink.set_phase(RESOLVING_DELTAS)
        sink.set_total(stats.total_deltas)
        sink.set_position(stats.indexed_deltas)


def _count(value: Optional[float]) -> int:
    return int(value) if value else 0


class CloneProgress(RemoteProgress):
    """GitPython progress handler feeding a ProgressSink."""

    def __init__(self, sink: ProgressSink):
        super().__init__()
        self.sink = sink
        self.stats = TransferStats()

    def update(self, op_code: int, cur_count, max_count=None, message: str = '') -> None:
        op = op_code & self.OP_MASK
        if op == self.RECEIVING:
            self.stats.received_objects = _count(cur_count)
            self.stats.total_objects = _count(max_count)
        elif op == self.RESOLVING:
            # Deltas are only resolved once every object has arrived
            self.stats.received_objects = self.stats.total_objects
            self.stats.indexed_deltas = _count(cur_count)
            self.stats.total_deltas = _count(max_count)
        else:
            return
        report_transfer(self.sink, self.stats)
