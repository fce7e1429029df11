"""node-janitor - find, report on, and clean up node_modules folders."""

__version__ = "1.0.0"
