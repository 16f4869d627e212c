"""Nomination rules for films."""

import re
import uuid
from datetime import datetime, timezone

from filmclub.models import Film

MAX_TITLE_LENGTH = 200

_WHITESPACE = re.compile(r"\s+")


class FilmValidationError(ValueError):
    """Raised when a film title cannot be nominated."""
    pass


def normalize_film_title(title: str) -> str:
    """Lowercase, trim and collapse runs of whitespace."""
    return _WHITESPACE.sub(" ", title.lower().strip())


def are_titles_duplicate(title1: str, title2: str) -> bool:
    return normalize_film_title(title1) == normalize_film_title(title2)


def validate_film_title(title: str | None) -> str:
    """Return the trimmed title, or raise FilmValidationError."""
    if not title or not title.strip():
        raise FilmValidationError("Film title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise FilmValidationError(
            f"Film title must be less than {MAX_TITLE_LENGTH} characters"
        )
    return title.strip()


def find_duplicate(title: str, existing_films: list[Film]) -> Film | None:
    for film in existing_films:
        if are_titles_duplicate(film.title, title):
            return film
    return None


def can_nominate_film(
    title: str, nominated_films: list[Film], watched_films: list[Film] | None = None
) -> tuple[bool, str | None]:
    """Check a title against current nominations and watched films.

    Returns:
        (True, None) if the film can be nominated, otherwise
        (False, reason)
    """
    already_nominated = find_duplicate(title, nominated_films)
    if already_nominated:
        return False, f'"{already_nominated.title}" is already nominated'

    recently_watched = find_duplicate(title, watched_films or [])
    if recently_watched:
        return False, f'"{recently_watched.title}" was already watched'

    return True, None


def create_film_nomination(
    title: str,
    added_by: str,
    film_id: str | None = None,
    added_at: datetime | None = None,
) -> Film:
    """Create a new nominated film.

    Raises:
        FilmValidationError: If the title is empty or too long
    """
    return Film(
        id=film_id or f"film-{uuid.uuid4().hex}",
        title=validate_film_title(title),
        added_by=added_by,
        added_at=added_at or datetime.now(timezone.utc),
        status="nominated",
    )


def mark_film_as_watched(film: Film, watched_at: datetime | None = None) -> Film:
    """Return a copy of the film marked as watched."""
    return film.with_status("watched", watched_at or datetime.now(timezone.utc))


def sort_films_by_date(films: list[Film]) -> list[Film]:
    """Most recent first, using watched_at when set, else added_at."""
    return sorted(films, key=lambda f: f.watched_at or f.added_at, reverse=True)
