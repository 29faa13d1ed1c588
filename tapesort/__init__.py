"""External sorting of int32 data on simulated file tapes, with operation counts."""

__version__ = "0.1.0"
__all__ = ["__version__"]