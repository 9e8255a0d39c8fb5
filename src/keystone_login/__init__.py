"""Keystone Login: password logins against an OpenStack Keystone identity endpoint."""

__version__ = "0.1.0"
