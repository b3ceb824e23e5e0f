"""Shared helpers: random labels, passwords, a generic state machine, scanners and a SQL WHERE-clause parser."""

__version__ = "0.1.0"