"""Aggregate of all host metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from easeprobe.host.basic import Basic
from easeprobe.host.cpu import CPU
from easeprobe.host.disk import Disks
from easeprobe.host.load import Load
from easeprobe.host.mem import Mem

HostMetric = Union[Basic, CPU, Mem, Disks, Load]


@dataclass
class Info:
    """Everything collected from one host."""

    basic: Basic = field(default_factory=Basic)
    cpu: CPU = field(default_factory=CPU)
    memory: Mem = field(default_factory=Mem)
    disks: Disks = field(default_factory=Disks)
    load: Load = field(default_factory=Load)

    def metrics(self) -> List[HostMetric]:
        """Return the metrics in the order their command output appears."""
        return [self.basic, self.cpu, self.memory, self.disks, self.load]