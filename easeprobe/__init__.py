"""Health probes: text checks, host resource thresholds and service client checks."""

__version__ = "2.0.0"