"""Simulation of photomultiplier hits and digitised PMT signals."""

__version__ = "0.1.0"