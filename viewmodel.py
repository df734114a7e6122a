# viewmodel.py
import asyncio
import logging
from typing import Callable, List, Optional

from models import AppDetail, AppState, LoadState
from services import AppLookupService, FetchError

logger = logging.getLogger(__name__)

Subscriber = Callable[[AppState], None]


class AppDetailViewModel:
    """Mediates between the lookup service and the rendering layer for one screen.

    Construction does no work. `load()` starts the single fetch and returns
    its task; calling it again returns the same task. Subscribers are pushed
    every state change.
    """
    def __init__(self, track_id: int, lookup_service: AppLookupService):
        self.track_id = track_id
        self.lookup_service = lookup_service
        self._state = AppState()
        self._subscribers: List[Subscriber] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def detail(self) -> Optional[AppDetail]:
        return self._state.detail

    @property
    def error(self) -> Optional[FetchError]:
        return self._state.error

    @property
    def started(self) -> bool:
        return self._task is not None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Registers a callback for state changes and returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def load(self) -> "asyncio.Task[AppState]":
        """Starts the fetch once; must be called from a running event loop."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._fetch())
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _fetch(self) -> AppState:
        self._publish(AppState(status=LoadState.LOADING))
        try:
            detail, error = await asyncio.to_thread(self.lookup_service.fetch_app_detail, self.track_id)
        except asyncio.CancelledError:
            logger.info("Fetch for id %s cancelled", self.track_id)
            self._publish(AppState())
            raise
        except Exception as e:
            logger.exception("Unexpected error fetching app detail for id %s", self.track_id)
            detail, error = None, FetchError(self.track_id, e)

        if error is not None:
            self._publish(AppState(status=LoadState.FAILED, error=error))
        elif detail is None:
            logger.info("No app found for id %s", self.track_id)
            self._publish(AppState())
        else:
            self._publish(AppState(status=LoadState.LOADED, detail=detail))
        return self._state

    def _publish(self, state: AppState) -> None:
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("State subscriber %r failed", callback)
