"""shiftwatch: drift detection between local reference files and their remote counterparts."""

__version__ = "0.1.0"
