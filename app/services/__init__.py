"""
Services Package

- SpeciesService: species CRUD against the hosted backend
- ProfileService: user directory reads
- wikipedia_service: encyclopedia lookups for the species form
- speed_chart: species speed bar chart rendering
"""

from .species_service import SpeciesService
from .profile_service import ProfileService

_species_service = None
_profile_service = None


def _get_species_service():
    """Get species service instance with lazy initialization."""
    global _species_service
    if _species_service is None:
        _species_service = SpeciesService()
    return _species_service


def _get_profile_service():
    """Get profile service instance with lazy initialization."""
    global _profile_service
    if _profile_service is None:
        _profile_service = ProfileService()
    return _profile_service


class _LazyService:
    """Lazy service that initializes on first access."""
    def __init__(self, service_getter):
        self._service_getter = service_getter
        self._service = None

    def __getattr__(self, name):
        if self._service is None:
            self._service = self._service_getter()
        return getattr(self._service, name)


species_service = _LazyService(_get_species_service)
profile_service = _LazyService(_get_profile_service)

__all__ = [
    'SpeciesService',
    'ProfileService',
    'species_service',
    'profile_service',
]
