"""
Sequential unlock rules for the artworks of a course.

Everything here is pure: it reads artworks and their progress entries and
never touches the session, so the result is recomputed on every request.
"""
import enum
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Sequence


class ArtworkStatus(str, enum.Enum):
    completed = "Completed"
    in_progress = "In Progress"
    not_started = "Not Started"


class ResolvedArtwork(NamedTuple):
    artwork: Any
    progress: Optional[Any]
    is_accessible: bool
    status: ArtworkStatus


def sort_artworks(artworks: Iterable[Any]) -> list:
    """Order by ``order``; ties keep creation order (ascending id)."""
    return sorted(artworks, key=lambda artwork: (artwork.order, artwork.id))


def _is_completed(progress) -> bool:
    return bool(progress is not None and progress.is_completed)


def _is_viewed(progress) -> bool:
    return progress is not None and progress.viewed_at is not None


def get_accessible_artwork_ids(
    artworks: Sequence[Any],
    progress_by_artwork: Mapping[int, Any],
) -> set[int]:
    """
    Ids of the artworks the student may open.

    The first artwork, every completed one, the one right after the
    furthest completion and every viewed one are open; the rest are locked.
    """
    ordered = sort_artworks(artworks)
    if not ordered:
        return set()

    accessible = {ordered[0].id}

    last_completed_index = -1
    for index, artwork in enumerate(ordered):
        progress = progress_by_artwork.get(artwork.id)
        if _is_completed(progress):
            accessible.add(artwork.id)
            last_completed_index = index
        elif _is_viewed(progress):
            accessible.add(artwork.id)

    if last_completed_index + 1 < len(ordered):
        accessible.add(ordered[last_completed_index + 1].id)

    return accessible


def get_artwork_status(
    progress,
    *,
    is_first: bool,
    is_accessible: bool,
) -> ArtworkStatus:
    if _is_completed(progress):
        return ArtworkStatus.completed
    if _is_viewed(progress) or is_first or is_accessible:
        return ArtworkStatus.in_progress
    return ArtworkStatus.not_started


def resolve_artworks(
    artworks: Sequence[Any],
    progress_by_artwork: Mapping[int, Any],
) -> list[ResolvedArtwork]:
    ordered = sort_artworks(artworks)
    accessible = get_accessible_artwork_ids(ordered, progress_by_artwork)

    resolved = []
    for index, artwork in enumerate(ordered):
        progress = progress_by_artwork.get(artwork.id)
        is_accessible = artwork.id in accessible
        resolved.append(
            ResolvedArtwork(
                artwork=artwork,
                progress=progress,
                is_accessible=is_accessible,
                status=get_artwork_status(
                    progress,
                    is_first=index == 0,
                    is_accessible=is_accessible,
                ),
            )
        )

    return resolved
