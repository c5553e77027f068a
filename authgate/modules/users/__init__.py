"""
Users Module - Black Box Interface

Purpose: Look up user records by name and list users without passwords
Interface: UserDirectory protocol, find(), list_all()
Hidden: Storage backend

Any store implementing the protocol can replace the in-memory directory
without touching credential validation.
"""

from .directory import InMemoryUserDirectory, UserDirectory, UserIdentity, UserRecord

__all__ = ["InMemoryUserDirectory", "UserDirectory", "UserIdentity", "UserRecord"]
