# Utils package for the Biodiversity Hub

from .species_search import species_matches_query, filter_species
from .animal_speed import AnimalSpeed, load_animal_speeds, parse_animal_rows
from .notifications import flash_toast, flash_backend_error

__all__ = [
    'species_matches_query',
    'filter_species',
    'AnimalSpeed',
    'load_animal_speeds',
    'parse_animal_rows',
    'flash_toast',
    'flash_backend_error',
]
