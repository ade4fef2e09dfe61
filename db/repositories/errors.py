"""
Repository-layer exceptions for the contribution store.
"""

from __future__ import annotations


class ContributionStoreError(Exception):
    """Base exception for contribution store failures."""


class UpstreamUnavailableError(ContributionStoreError):
    """
    Raised when the store fails to answer a query or accept a write.

    Fatal to the profile being computed only; the run moves on.
    """


class StoreConnectionLostError(UpstreamUnavailableError):
    """
    Raised when the connection to the store itself is gone.

    Unrecoverable for the current run: the loop stops, bundles already
    persisted stay in place.
    """
