"""Clerk user sync service.

Receives Svix-signed user lifecycle webhooks from Clerk and mirrors them into
the local user table.
"""

__version__ = "0.1.0"
