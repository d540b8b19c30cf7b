"""Host probe: combines the metric commands and evaluates their output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from easeprobe.host.common import Threshold, add_message
from easeprobe.host.info import HostMetric, Info
from easeprobe.textcheck import check_empty

log = logging.getLogger(__name__)


@dataclass
class Server:
    """One monitored host with its thresholds and disks."""

    name: str = ""
    host: str = ""
    threshold: Threshold = field(default_factory=Threshold)
    disks: List[str] = field(default_factory=list)
    kind: str = ""
    tag: str = ""
    command: str = ""
    endpoint: str = ""
    info: Info = field(default_factory=Info)

    _output_lines: int = field(default=0, init=False, repr=False)
    _metrics: List[HostMetric] = field(default_factory=list, init=False, repr=False)

    def config(self) -> None:
        """Configure every metric and build the combined command."""
        self.kind = "host"
        self.tag = "server"
        self._metrics = self.info.metrics()
        self._output_lines = 0
        commands = []
        for metric in self._metrics:
            metric.config(self)
            commands.append(metric.command() + "\n")
            self._output_lines += metric.output_lines()
            log.debug("[%s / %s] - metric [%s] configured!", self.kind, self.name, metric.name())
        self.command = "".join(commands)
        self.endpoint = str(self.threshold)

    def parse_host_info(self, output: str) -> Info:
        """Feed each metric its share of the output lines."""
        lines = output.split("\n")
        if len(lines) < self._output_lines:
            raise ValueError("invalid output lines")
        idx = 0
        for metric in self._metrics:
            count = metric.output_lines()
            metric.parse(lines[idx : idx + count])
            idx += count
        return self.info

    def usage(self) -> str:
        """Summarise the usage of all resources."""
        if not self._metrics:
            return " (  )"
        parts = [u for u in (m.usage_info() for m in self._metrics[:-1]) if u]
        parts.append(self._metrics[-1].usage_info())
        return " ( " + " - ".join(parts) + " )"

    def check_threshold(self) -> Tuple[bool, str]:
        """Check every metric against its threshold."""
        status = True
        message = ""
        for metric in self._metrics:
            ok, msg = metric.check_threshold()
            if not ok:
                status = False
                message = add_message(message, msg)
        if not message:
            message = "Fine!"
        return status, message + self.usage()

    def evaluate(self, output: str) -> Tuple[bool, str]:
        """Parse the command output and report the host status."""
        log.debug("[%s / %s] - %s", self.kind, self.name, check_empty(output))
        try:
            info = self.parse_host_info(output)
        except ValueError as exc:
            log.error("[%s / %s] %s", self.kind, self.name, exc)
            return False, f"Parse the output failed: {exc}"
        log.debug("[%s / %s] - %r", self.kind, self.name, info)
        return self.check_threshold()


@dataclass
class Host:
    """Host probe configuration: the servers to monitor."""

    servers: List[Server] = field(default_factory=list)