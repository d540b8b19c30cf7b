"""Native client probe that dispatches to a server-specific driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from easeprobe.client.conf import Driver, DriverType, Options
from easeprobe.client.memcache import Memcache
from easeprobe.client.mongo import Mongo
from easeprobe.client.mysql import MySQL
from easeprobe.client.redis_client import Redis

log = logging.getLogger(__name__)

_DRIVERS: Dict[DriverType, Callable[[Options], Driver]] = {
    DriverType.MYSQL: MySQL,
    DriverType.REDIS: Redis,
    DriverType.MEMCACHE: Memcache,
    DriverType.MONGO: Mongo,
}


@dataclass
class Client:
    """A probe that health-checks a server through its native client."""

    options: Options = field(default_factory=Options)
    _driver: Optional[Driver] = field(default=None, init=False, repr=False)

    def config(self) -> None:
        """Validate the options and create the driver; raise ValueError on failure."""
        opts = self.options
        opts.kind = "client"
        opts.tag = str(opts.driver_type)
        opts.check()
        factory = _DRIVERS.get(opts.driver_type)
        if factory is None:
            opts.driver_type = DriverType.UNKNOWN
            raise ValueError("Unknown Driver Type")
        self._driver = factory(opts)
        log.debug("[%s / %s / %s] configuration: %r", opts.kind, opts.tag, opts.name, opts)

    def do_probe(self) -> Tuple[bool, str]:
        """Run the driver's health check."""
        if self.options.driver_type is DriverType.UNKNOWN:
            return False, "Wrong Driver Type"
        if self._driver is None:
            return False, "Client is not configured"
        return self._driver.probe()