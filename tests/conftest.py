import pytest

from models import AppDetail


@pytest.fixture
def lookup_payload():
    """A lookup envelope shaped like the iTunes API response."""
    return {
        "resultCount": 1,
        "results": [
            {
                "artistName": "Brian Voong",
                "trackName": "Lets Build That App",
                "releaseNotes": "Bug fixes.",
                "description": "Learn to build apps.",
                "screenshotUrls": ["https://example.com/1.png", "https://example.com/2.png"],
                "artworkUrl512": "https://example.com/icon.png",
                "trackId": 547702041,
            }
        ],
    }


@pytest.fixture
def app_detail():
    return AppDetail(
        artist_name="Brian Voong",
        track_name="Lets Build That App",
        release_notes="Bug fixes.",
        description="Learn to build apps.",
        screenshot_urls=("https://example.com/1.png", "https://example.com/2.png"),
        artwork_url="https://example.com/icon.png",
    )
