"""Basic host information: hostname, operating system and core count."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from easeprobe.host.common import Threshold, str_int


@dataclass
class Basic:
    """Hostname, operating system name and number of processors."""

    hostname: str = ""
    os: str = ""
    core: int = 0
    threshold: Optional[Threshold] = field(default=None, repr=False, compare=False)

    def name(self) -> str:
        return "basic"

    def command(self) -> str:
        return (
            "hostname;\n"
            "awk -F= '/^NAME/{print $2}' /etc/os-release | tr -d '\\\"';\n"
            "grep -c ^processor /proc/cpuinfo;"
        )

    def output_lines(self) -> int:
        return 3

    def config(self, server: Any) -> None:
        self.set_threshold(server.threshold)

    def set_threshold(self, threshold: Threshold) -> None:
        """Keep the server's thresholds; basic information never checks them."""
        self.threshold = threshold

    def parse(self, lines: List[str]) -> None:
        if len(lines) < self.output_lines():
            raise ValueError("invalid basic output")
        self.hostname = lines[0]
        self.os = lines[1]
        self.core = str_int(lines[2])

    def usage_info(self) -> str:
        return ""

    def check_threshold(self) -> Tuple[bool, str]:
        return True, ""