"""
Domain models for the species catalogue.

These models represent the records owned by the hosted backend (species and
profiles) and the signed-in user context, independent of HTTP concerns.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any
import time


class Kingdom(Enum):
    """Taxonomic kingdom enumeration."""
    ANIMALIA = "Animalia"
    PLANTAE = "Plantae"
    FUNGI = "Fungi"
    PROTISTA = "Protista"
    ARCHAEA = "Archaea"
    BACTERIA = "Bacteria"

    @classmethod
    def choices(cls):
        return [(k.value, k.value) for k in cls]


@dataclass
class AuthorSummary:
    """Embedded author profile of a species row (``profiles!author``)."""
    display_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.display_name} ({self.email})"


@dataclass
class Species:
    """A taxonomic entry with population and conservation metadata."""
    id: Optional[int] = None
    scientific_name: str = ""
    common_name: Optional[str] = None
    kingdom: Kingdom = Kingdom.ANIMALIA
    total_population: Optional[int] = None
    image: Optional[str] = None
    description: Optional[str] = None
    endangered: Optional[bool] = None  # None means "not set"
    author: Optional[str] = None
    author_profile: Optional[AuthorSummary] = None

    DESCRIPTION_PREVIEW_LENGTH = 150

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Species':
        profile = row.get('profiles')
        kingdom_value = row.get('kingdom') or Kingdom.ANIMALIA.value
        try:
            kingdom = Kingdom(kingdom_value)
        except ValueError:
            kingdom = Kingdom.ANIMALIA
        return cls(
            id=row.get('id'),
            scientific_name=row.get('scientific_name') or "",
            common_name=row.get('common_name'),
            kingdom=kingdom,
            total_population=row.get('total_population'),
            image=row.get('image'),
            description=row.get('description'),
            endangered=row.get('endangered'),
            author=row.get('author'),
            author_profile=AuthorSummary(
                display_name=profile.get('display_name'),
                email=profile.get('email'),
            ) if isinstance(profile, dict) else None,
        )

    @property
    def description_preview(self) -> str:
        if not self.description:
            return ""
        return self.description[:self.DESCRIPTION_PREVIEW_LENGTH].strip() + "..."

    @property
    def endangered_label(self) -> str:
        if self.endangered is None:
            return "Not set"
        return "Yes" if self.endangered else "No"

    @property
    def population_label(self) -> str:
        if self.total_population is None:
            return "—"
        return f"{self.total_population:,}"

    def is_authored_by(self, user_id: Optional[str]) -> bool:
        return bool(user_id) and self.author == user_id


@dataclass
class Profile:
    """A user's directory entry."""
    id: str = ""
    email: str = ""
    display_name: str = ""
    biography: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Profile':
        return cls(
            id=row.get('id') or "",
            email=row.get('email') or "",
            display_name=row.get('display_name') or "",
            biography=row.get('biography'),
        )


@dataclass
class SessionUser:
    """Signed-in user as reported by the auth backend."""
    id: str = ""
    email: str = ""
    user_metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_auth_payload(cls, payload: Dict[str, Any]) -> 'SessionUser':
        return cls(
            id=payload.get('id') or "",
            email=payload.get('email') or "",
            user_metadata=payload.get('user_metadata') or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'email': self.email, 'user_metadata': self.user_metadata}

    # Flask-Login compatibility
    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_active(self) -> bool:
        return True

    @property
    def is_anonymous(self) -> bool:
        return False

    def get_id(self) -> str:
        return self.id


@dataclass
class AuthSession:
    """Backend session tokens kept server side in the Flask session."""
    access_token: str
    refresh_token: str
    expires_at: int
    user: SessionUser

    @classmethod
    def from_token_response(cls, payload: Dict[str, Any]) -> 'AuthSession':
        expires_at = payload.get('expires_at')
        if not expires_at:
            expires_at = int(time.time()) + int(payload.get('expires_in') or 3600)
        return cls(
            access_token=payload['access_token'],
            refresh_token=payload.get('refresh_token') or "",
            expires_at=int(expires_at),
            user=SessionUser.from_auth_payload(payload.get('user') or {}),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuthSession':
        return cls(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token') or "",
            expires_at=int(data.get('expires_at') or 0),
            user=SessionUser.from_auth_payload(data.get('user') or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_at': self.expires_at,
            'user': self.user.to_dict(),
        }

    def is_expired(self, leeway: int = 60) -> bool:
        return time.time() + leeway >= self.expires_at
