"""A command shell with pipes, redirections, variable expansion and built-ins."""

__version__ = "0.1.0"
__all__ = ["__version__"]