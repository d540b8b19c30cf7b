"""Load average metric parsed from /proc/loadavg."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from easeprobe.host.common import (
    DEFAULT_LOAD_THRESHOLD,
    Threshold,
    str_float,
    str_int,
)

log = logging.getLogger(__name__)

_PERIODS = ("m1", "m5", "m15")


def _per_core(value: float, core: int) -> float:
    if core:
        return value / core
    if value > 0:
        return math.inf
    if value < 0:
        return -math.inf
    return math.nan


@dataclass
class Load:
    """Load averages over 1, 5 and 15 minutes and the processor count."""

    core: int = 0
    metrics: Dict[str, float] = field(default_factory=dict)
    threshold: Dict[str, float] = field(default_factory=dict)

    def name(self) -> str:
        return "load"

    def command(self) -> str:
        return (
            "grep -c ^processor /proc/cpuinfo;\n"
            "cat /proc/loadavg | awk '{print $1,$2,$3}';"
        )

    def output_lines(self) -> int:
        return 2

    def config(self, server: Any) -> None:
        self.metrics = {}
        load = server.threshold.load
        if load is None:
            server.threshold.load = {p: DEFAULT_LOAD_THRESHOLD for p in _PERIODS}
            log.debug(
                "Load average threshold is not set, using default value: %.2f",
                DEFAULT_LOAD_THRESHOLD,
            )
        else:
            for key, value in list(load.items()):
                load[key.lower()] = value
            for period in _PERIODS:
                if period not in load:
                    load[period] = DEFAULT_LOAD_THRESHOLD
                    log.debug(
                        "Load average threshold for %s is not set, using default value: %.2f",
                        period,
                        DEFAULT_LOAD_THRESHOLD,
                    )
        self.set_threshold(server.threshold)

    def set_threshold(self, threshold: Threshold) -> None:
        self.threshold = threshold.load if threshold.load is not None else {}

    def parse(self, lines: List[str]) -> None:
        if len(lines) < self.output_lines():
            raise ValueError("invalid load average output")
        self.core = str_int(lines[0])
        fields = lines[1].split(" ")
        if len(fields) < 3:
            raise ValueError("invalid load average output")
        for period, text in zip(_PERIODS, fields):
            self.metrics[period] = str_float(text)

    def usage_info(self) -> str:
        return "Load: " + "/".join(f"{v:.2f}" for v in self.metrics.values())

    def check_threshold(self) -> Tuple[bool, str]:
        for period, value in self.metrics.items():
            if _per_core(value, self.core) > self.threshold.get(period, 0.0):
                return False, f"Load Average threshold {period} alert! - {value:.2f}"
        return True, ""