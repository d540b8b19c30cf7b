"""CPU usage metric parsed from top output."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Tuple

from easeprobe.host.common import DEFAULT_CPU_THRESHOLD, Threshold, first, str_float

log = logging.getLogger(__name__)


@dataclass
class CPU:
    """CPU time percentages, e.g. "1.6 us, 1.6 sy, 3.2 ni, 91.9 id, ..."."""

    user: float = 0.0
    sys: float = 0.0
    nice: float = 0.0
    idle: float = 0.0
    wait: float = 0.0
    hard: float = 0.0
    soft: float = 0.0
    steal: float = 0.0
    threshold: float = 0.0

    def name(self) -> str:
        return "cpu"

    def command(self) -> str:
        return "top -b -n 1 | grep Cpu | awk -F \":\" '{print $2}'"

    def output_lines(self) -> int:
        return 1

    def config(self, server: Any) -> None:
        if server.threshold.cpu == 0:
            server.threshold.cpu = DEFAULT_CPU_THRESHOLD
            log.debug(
                "CPU threshold is not set, using default value: %.2f",
                server.threshold.cpu,
            )
        self.set_threshold(server.threshold)

    def set_threshold(self, threshold: Threshold) -> None:
        self.threshold = threshold.cpu

    def parse(self, lines: List[str]) -> None:
        if len(lines) < self.output_lines():
            raise ValueError("invalid cpu output")
        fields = lines[0].split(",")
        if len(fields) < 8:
            raise ValueError("invalid cpu output")
        (
            self.user,
            self.sys,
            self.nice,
            self.idle,
            self.wait,
            self.hard,
            self.soft,
            self.steal,
        ) = (str_float(first(f)) for f in fields[:8])

    def usage_info(self) -> str:
        return f"CPU: {100 - self.idle:.2f}%"

    def check_threshold(self) -> Tuple[bool, str]:
        if self.threshold > 0 and self.threshold <= (100 - self.idle) / 100:
            return False, "CPU threshold alert!"
        return True, ""