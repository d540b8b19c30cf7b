# easeprobe

Health probes for servers and the services that run on them.

The package has three parts:

- **Text checks**: `easeprobe.textcheck.TextChecker` checks that some output
  contains one string and does not contain another. Both can be plain
  substrings or regular expressions.
- **Host resource checks**: `easeprobe.host` builds a shell command that
  collects the hostname, OS, CPU, memory, disk and load-average figures. It
  then parses that command's output and compares the figures with thresholds.
- **Service clients**: `easeprobe.client` checks MySQL, Redis, Memcache and
  MongoDB servers. Each check either pings the server or verifies that
  configured keys hold the expected values.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Text checks

```python
from easeprobe.textcheck import TextChecker, check_empty

checker = TextChecker(contain="hello", not_contain="bad")
checker.check("easeprobe hello world")      # passes

checker = TextChecker(contain=r"word[0-9]+", regexp=True)
checker.config()                             # compiles the patterns
checker.check("word word10 word")            # passes

check_empty("   ")                           # "empty"
```

A failed check raises `ValueError`, and the message says which condition
failed. In regular-expression mode, `config()` must run before checking. It
raises `ValueError` for an invalid pattern. It also rejects lookarounds such as
`(?=...)` and backreferences such as `\1`. `str(checker)` describes the mode
and both strings.

## Host checks

`easeprobe.host.server.Server` holds the metrics from
`easeprobe.host.info.Info`: `Basic`, `CPU`, `Mem`, `Disks` and `Load`. Each one
lives in its own module under `easeprobe.host`.

`Server.config()` does three things:

- fills in default thresholds for any that are unset;
- sets the disks to `["/"]` when none are listed;
- builds the combined shell command in `Server.command`.

| Metric | Default threshold |
| ------ | ----------------- |
| CPU    | 0.8               |
| Memory | 0.8               |
| Disk   | 0.95              |
| Load   | 0.8 (m1, m5, m15) |

Pass the text that command prints to `Server.evaluate()`. It returns a
`(status, message)` pair. The message is `Fine!` or the threshold alerts joined
by ` | `, followed by a usage summary such as
` ( CPU: 73.20% - Memory: 28.04% - Disk: ... - Load: ... )`. If the output
cannot be parsed, the status is `False` and the message starts with
`Parse the output failed:`.

```python
from easeprobe.host.common import Threshold
from easeprobe.host.server import Server

server = Server(name="web-1", threshold=Threshold(cpu=0.5), disks=["/", "/data"])
server.config()
print(server.command)            # run this on the host
ok, message = server.evaluate(output_of_that_command)
```

Thresholds are set through `easeprobe.host.common.Threshold`, which has the
fields `cpu`, `mem`, `disk` and `load`. `load` is a dict keyed by `m1`, `m5` and
`m15`, and keys are matched case-insensitively. The load average is divided by
the core count before it is compared with its threshold.

## Service clients

Describe the target with `easeprobe.client.conf.Options`. It takes:

- `host` as `host:port`;
- a `DriverType`;
- `username` and `password`;
- `timeout` in seconds (default 30);
- optional `data` to verify;
- optional TLS files `ca`, `cert` and `key`.

Then wrap the options in `easeprobe.client.client.Client`:

```python
from easeprobe.client.client import Client
from easeprobe.client.conf import DriverType, Options

password = "password"
options = Options(host="localhost:6379", driver_type=DriverType.REDIS,
                  password=password, data={"key1": "value1"})
client = Client(options)
client.config()                   # raises ValueError on a bad host, port or driver
ok, message = client.do_probe()
```

The drivers can also be used directly:

- `easeprobe.client.mysql.MySQL`
- `easeprobe.client.redis_client.Redis`
- `easeprobe.client.memcache.Memcache`
- `easeprobe.client.mongo.Mongo`

Each takes an `Options`, and each has `kind()` and `probe()`.
`DriverType.from_name()`, `to_json()` and `from_json()` convert a driver to and
from its name (`mysql`, `redis`, `memcache`, `mongo`, ...).

Data formats for `data` keys:

- MySQL: `database:table:column:key:value`. The value must be an integer. The
  probe selects `column` from the row where `key = value` and compares the
  result with the expected string. `easeprobe.client.mysql.get_sql()` shows the
  statement that is built.
- MongoDB: `database:collection`, mapped to an extended-JSON filter document.
  The check passes when a matching document exists.
- Redis and Memcache: the key name, mapped to its expected value. For
  Memcache, every key must be present, and a blank expected value skips the
  value comparison.

## What this package does not do

- It does not run anything on remote hosts. You run the command from
  `Server.command` yourself, for example over SSH, and pass the output to
  `Server.evaluate()`.
- It has no scheduler, command-line program, notification channels, metrics
  export or storage of past results. Each check runs once when called.
- `DriverType` also names `kafka`, `postgres` and `zookeeper`, but no driver
  exists for them. `Client.config()` raises `ValueError("Unknown Driver Type")`
  for those.