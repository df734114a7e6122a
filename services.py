# services.py
import logging
from typing import Optional, Tuple

import requests

from models import AppDetail, AppDetailResults

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when the lookup request fails for any reason.

    Network failures, non-2xx responses and undecodable bodies are all
    collapsed into this one kind; the original exception is kept in `cause`.
    """
    def __init__(self, track_id: int, cause: BaseException):
        super().__init__(f"Failed fetching app detail for id {track_id}: {cause}")
        self.track_id = track_id
        self.cause = cause
        self.__cause__ = cause


class AppLookupService:
    """A service to handle interactions with the iTunes lookup API."""
    def __init__(self, lookup_url: str, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.lookup_url = lookup_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_url(self, track_id: int) -> str:
        return self.lookup_url.format(id=track_id)

    def lookup(self, track_id: int) -> AppDetailResults:
        """Performs the GET and decodes the envelope, raising FetchError on any failure."""
        url = self.build_url(track_id)
        logger.info("Fetching app detail from %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return AppDetailResults.from_dict(response.json())
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            raise FetchError(track_id, e) from e

    def fetch_app_detail(self, track_id: int) -> Tuple[Optional[AppDetail], Optional[FetchError]]:
        """Returns the first matching record, or (None, None) when the lookup found nothing."""
        try:
            envelope = self.lookup(track_id)
        except FetchError as e:
            logger.error("%s", e)
            return None, e
        logger.debug("Lookup for id %s returned %d result(s)", track_id, envelope.result_count)
        return envelope.first, None

    def close(self) -> None:
        self.session.close()
