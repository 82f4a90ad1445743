"""
Species Service

CRUD operations on the backend ``species`` table. Row level security on the
backend decides who may write; this service only issues the calls.
"""

import logging
from typing import List, Optional, Dict, Any

from ..domain.models import Species
from ..supabase_client import SupabaseError, execute, get_supabase

logger = logging.getLogger(__name__)

SPECIES_TABLE = 'species'
SPECIES_WITH_AUTHOR = '*, profiles!author(display_name, email)'


class SpeciesService:
    """Species operations against the hosted backend."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        return self._client or get_supabase()

    def list_species(self) -> List[Species]:
        """All species, newest first, with the author's display name and email."""
        response = execute(
            self.client.table(SPECIES_TABLE)
            .select(SPECIES_WITH_AUTHOR)
            .order('id', desc=True)
        )
        return [Species.from_row(row) for row in (response.data or [])]

    def get_species(self, species_id: int) -> Optional[Species]:
        response = execute(
            self.client.table(SPECIES_TABLE)
            .select(SPECIES_WITH_AUTHOR)
            .eq('id', species_id)
            .limit(1)
        )
        rows = response.data or []
        return Species.from_row(rows[0]) if rows else None

    def create_species(self, author_id: str, values: Dict[str, Any]) -> Species:
        row = dict(values)
        row['author'] = author_id
        response = execute(self.client.table(SPECIES_TABLE).insert([row]))
        rows = response.data or []
        logger.info(f"Species '{row.get('scientific_name')}' added by {author_id}")
        return Species.from_row(rows[0]) if rows else Species.from_row(row)

    def update_species(self, species_id: int, values: Dict[str, Any]) -> Species:
        row = {k: v for k, v in values.items() if k not in ('id', 'author')}
        response = execute(self.client.table(SPECIES_TABLE).update(row).eq('id', species_id))
        rows = response.data or []
        if not rows:
            raise SupabaseError("Species not found or you are not allowed to edit it.", status_code=404)
        logger.info(f"Species {species_id} updated")
        return Species.from_row(rows[0])

    def delete_species(self, species_id: int) -> Species:
        """Delete exactly one species row and return what was removed."""
        response = execute(self.client.table(SPECIES_TABLE).delete().eq('id', species_id))
        rows = response.data or []
        if len(rows) != 1:
            raise SupabaseError("Species not found or you are not allowed to delete it.", status_code=404)
        logger.info(f"Species {species_id} deleted")
        return Species.from_row(rows[0])
