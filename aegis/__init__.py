"""Aegis backup — host provisioning wizard for automated backups."""

__version__ = "0.1.0"
