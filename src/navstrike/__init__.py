"""NAVSTRIKE - naval standoff strike management with live TTI tracking."""

__version__ = "0.1.0"
