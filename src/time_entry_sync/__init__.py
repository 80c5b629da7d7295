"""Reconcile and synchronize time entries between two time-tracking services."""

__version__ = "0.1.0"
