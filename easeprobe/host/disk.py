"""Disk usage metric parsed from df output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Tuple

from easeprobe.host.common import (
    DEFAULT_DISK_THRESHOLD,
    ResourceUsage,
    Threshold,
    str_float,
    str_int,
)

log = logging.getLogger(__name__)


@dataclass
class Disks:
    """Usage of each monitored mount point."""

    mount: List[str] = field(default_factory=list)
    usage: List[ResourceUsage] = field(default_factory=list)
    threshold: float = 0.0

    def name(self) -> str:
        return "disk"

    def command(self) -> str:
        return (
            "df -h "
            + " ".join(self.mount)
            + " 2>/dev/null | awk '(NR>1){printf \"%d %d %s %s\\n\", $3,$2,$5,$6}'"
        )

    def output_lines(self) -> int:
        return len(self.mount)

    def config(self, server: Any) -> None:
        if not server.disks:
            server.disks = ["/"]
        self.mount = list(server.disks)
        self.usage = [ResourceUsage() for _ in self.mount]
        if server.threshold.disk == 0:
            server.threshold.disk = DEFAULT_DISK_THRESHOLD
            log.debug(
                "Disk threshold is not set, using default value: %.2f",
                server.threshold.disk,
            )
        self.set_threshold(server.threshold)

    def set_threshold(self, threshold: Threshold) -> None:
        self.threshold = threshold.disk

    def parse(self, lines: List[str]) -> None:
        if len(lines) != self.output_lines():
            raise ValueError("invalid disk output")
        usage = []
        for line in lines:
            fields = line.split(" ")
            if len(fields) < 4:
                raise ValueError("invalid disk output")
            usage.append(
                ResourceUsage(
                    used=str_int(fields[0]),
                    total=str_int(fields[1]),
                    usage=str_float(fields[2][:-1]),
                    tag=fields[3],
                )
            )
        self.usage = usage

    def usage_info(self) -> str:
        return "Disk: " + ", ".join(f"`{d.tag}` {d.usage:.2f}%" for d in self.usage)

    def check_threshold(self) -> Tuple[bool, str]:
        low = [
            d.tag
            for d in self.usage
            if self.threshold > 0 and self.threshold <= d.usage / 100
        ]
        if low:
            return False, f"Disk Space threshold alert! - [{', '.join(low)}]"
        return True, ""