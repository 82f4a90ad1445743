"""Navigation bar links, rendered differently for signed-in visitors."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class NavLink:
    label: str
    endpoint: str


PUBLIC_LINKS = (
    NavLink('Home', 'main.index'),
)

MEMBER_LINKS = (
    NavLink('Species', 'species.species_list'),
    NavLink('Users', 'users.users_list'),
    NavLink('Species Speed', 'charts.species_speed'),
)


def build_nav_links(is_authenticated: bool) -> List[NavLink]:
    """Return the ordered navigation links for the current visitor."""
    links = list(PUBLIC_LINKS)
    if is_authenticated:
        links.extend(MEMBER_LINKS)
    return links
