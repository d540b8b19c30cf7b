[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "easeprobe"
version = "2.0.0"
description = "Health probes for hosts and service clients: text checks, host resource thresholds and MySQL/Redis/Memcache/MongoDB checks"
requires-python = ">=3.10"
keywords = ["monitoring", "health-check", "probe", "mysql", "redis", "mongodb", "memcache"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "pymysql",
    "redis",
    "pymongo",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["easeprobe"]

[tool.pytest.ini_options]
addopts = "-ra"
