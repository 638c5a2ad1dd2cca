from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Union

from ..collaborators import ArtistDirectory, call_collaborator
from ..schemas import Artist


def as_artist(artist: Union[Artist, Mapping[str, Any]]) -> Artist:
    if isinstance(artist, Artist):
        return artist
    return Artist.model_validate(dict(artist))


async def load_artists(directory: ArtistDirectory, event_id: Optional[str]) -> List[Artist]:
    """Fetch the event's artists; directory failures surface as CollaboratorError."""
    rows = await call_collaborator("list_artists", directory.list_artists, event_id)
    return [as_artist(r) for r in (rows or [])]


def filter_artists(artists: Sequence[Artist], search_term: str = "", *, role: Optional[str] = None) -> List[Artist]:
    term = (search_term or "").strip().lower()
    role_norm = (role or "").strip().lower()
    out: List[Artist] = []
    for a in artists:
        if role_norm and (a.role or "").strip().lower() != role_norm:
            continue
        if term and term not in (a.name or "").lower():
            continue
        out.append(a)
    return out


def find_artist(artists: Sequence[Artist], artist_id: str) -> Optional[Artist]:
    for a in artists:
        if a.id == str(artist_id):
            return a
    return None
