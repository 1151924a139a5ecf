"""taxcore: deterministic tax liability and capital gains computations."""

__version__ = "0.1.0"
