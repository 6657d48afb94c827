"""User identity for cloud storage requests."""

from .identity import IdentityProvider, StaticIdentityProvider, StoredIdentityProvider

__all__ = ['IdentityProvider', 'StaticIdentityProvider', 'StoredIdentityProvider']
