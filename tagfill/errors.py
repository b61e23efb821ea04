#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error taxonomy for tagfill.

Lookup misses and unparsable filenames are not exceptions; they end as
Unresolved outcomes. The classes here cover faults that either get absorbed
by a resolver (SourceLookupError) or escape to the runner and CLI.
"""

from typing import Optional


class TagfillError(Exception):
    """Base error with a CLI exit code"""

    exit_code: int = 1


class SourceLookupError(TagfillError):
    """
    A lookup provider could not be queried or returned garbage.

    Args:
        source: Provider name (e.g. "musicbrainz")
        message: Human readable reason
        transient: True for connection-level failures (DNS, refused, timeout)
    """

    def __init__(self, source: str, message: str, transient: bool = False):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.reason = message
        self.transient = transient


class NetworkUnavailableError(TagfillError):
    """Every provider in a chain failed at the connection level"""

    def __init__(self, sources: Optional[list] = None):
        names = ", ".join(sources or []) or "no sources"
        super().__init__(f"All lookup sources unreachable ({names})")
        self.sources = list(sources or [])


class TagStoreError(TagfillError, OSError):
    """
    Tag container could not be read or written.

    Raised OSError-style: TagStoreError(errno.EIO, message, path).
    """

    exit_code = 3


class CatalogError(TagfillError):
    """Library root is missing or not a directory"""

    exit_code = 1


class ConfigError(TagfillError):
    """Configuration file is unreadable or invalid"""

    exit_code = 2


class RetriesExhaustedError(TagfillError):
    """The runner gave up after too many faulted passes"""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Giving up after {attempts} faulted passes: {last_error}")
        self.attempts = attempts
        self.last_error = last_error
