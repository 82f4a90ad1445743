"""Read access to the backend ``profiles`` table (user directory)."""

import logging
from typing import List

from ..domain.models import Profile
from ..supabase_client import execute, get_supabase

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = 'id, email, display_name, biography'


class ProfileService:

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        return self._client or get_supabase()

    def list_profiles(self) -> List[Profile]:
        """Every profile ordered by display name."""
        response = execute(
            self.client.table('profiles')
            .select(PROFILE_COLUMNS)
            .order('display_name')
        )
        return [Profile.from_row(row) for row in (response.data or [])]
