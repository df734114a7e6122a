# models.py
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from services import FetchError


def _require_str(item: dict, key: str) -> str:
    value = item[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class AppDetail:
    """Display metadata for a single App Store application."""
    artist_name: str
    track_name: str
    release_notes: str
    description: str
    screenshot_urls: Tuple[str, ...]
    artwork_url: str

    @classmethod
    def from_dict(cls, item: dict) -> "AppDetail":
        """Parses a single raw lookup item into our AppDetail data model.

        Raises KeyError or TypeError when the item does not have the expected shape.
        """
        if not isinstance(item, dict):
            raise TypeError(f"result entry must be an object, got {type(item).__name__}")
        screenshots = item["screenshotUrls"]
        if not isinstance(screenshots, list) or not all(isinstance(s, str) for s in screenshots):
            raise TypeError("'screenshotUrls' must be a list of strings")
        artwork_key = "artworkUrl512" if "artworkUrl512" in item else "artworkUrl"
        return cls(
            artist_name=_require_str(item, "artistName"),
            track_name=_require_str(item, "trackName"),
            release_notes=_require_str(item, "releaseNotes"),
            description=_require_str(item, "description"),
            screenshot_urls=tuple(screenshots),
            artwork_url=_require_str(item, artwork_key),
        )


@dataclass(frozen=True)
class AppDetailResults:
    """The lookup envelope: a count and the list of matching records."""
    result_count: int
    results: Tuple[AppDetail, ...]

    @classmethod
    def from_dict(cls, payload: dict) -> "AppDetailResults":
        if not isinstance(payload, dict):
            raise TypeError(f"envelope must be an object, got {type(payload).__name__}")
        count = payload["resultCount"]
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError("'resultCount' must be an integer")
        items = payload["results"]
        if not isinstance(items, list):
            raise TypeError("'results' must be a list")
        return cls(result_count=count, results=tuple(AppDetail.from_dict(i) for i in items))

    @property
    def first(self) -> Optional[AppDetail]:
        return self.results[0] if self.results else None


class LoadState(Enum):
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class AppState:
    """A single object to hold the entire screen state."""
    status: LoadState = LoadState.EMPTY
    detail: Optional[AppDetail] = None
    error: Optional["FetchError"] = None
