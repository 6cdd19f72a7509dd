"""Reverse-mode autograd engine, gradient kernels and runtime utilities."""

__version__ = "0.1.0"
__all__ = ["engine", "kernels", "logger", "timer", "idbroker", "nodetracker"]