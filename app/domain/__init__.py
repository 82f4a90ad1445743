"""
Domain layer - core records of the species catalogue.

Models here are isolated from HTTP and backend concerns.
"""

from .models import Kingdom, AuthorSummary, Species, Profile, SessionUser, AuthSession

__all__ = ['Kingdom', 'AuthorSummary', 'Species', 'Profile', 'SessionUser', 'AuthSession']
