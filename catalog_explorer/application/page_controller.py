"""Page load controller.

Drives one page's state machine through its loads. Each load runs as a
task tied to the controller: issuing a new load or closing the page
cancels the one in flight, and results from superseded loads are dropped.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog

from catalog_explorer.domain.exceptions import CatalogFetchError, EntityNotFoundError
from catalog_explorer.domain.state_machines import (
    LoadFailed,
    LoadStarted,
    LoadSucceeded,
    PageError,
    PageErrorKind,
    PageEvent,
    PageState,
    PageStatus,
    transition,
)

logger = structlog.get_logger()

T = TypeVar("T")


class PageController(Generic[T]):
    """Owns the load lifecycle of a single page view.

    Example usage:
        page = PageController("brand details", lambda: service.brand_detail(brand_id))
        state = await page.load()
        if state.status is PageStatus.ERROR and state.error.retryable:
            state = await page.retry()
        await page.close()
    """

    def __init__(
        self,
        name: str,
        loader: Callable[[], Awaitable[T]],
    ) -> None:
        """Initialize the controller.

        Args:
            name: Page name used in error messages (e.g., "brand details").
            loader: Coroutine factory producing the page data.
        """
        self.name = name
        self._loader = loader
        self._state: PageState[T] = PageState()
        self._generation = 0
        self._task: asyncio.Future[T] | None = None
        self._closed = False

    @property
    def state(self) -> PageState[T]:
        """Current page state."""
        return self._state

    @property
    def closed(self) -> bool:
        """Whether the page has been torn down."""
        return self._closed

    async def load(self) -> PageState[T]:
        """Load (or reload) the page.

        Returns:
            The page state after this load settles. If the load was
            superseded by a newer one or the page was closed, the current
            state is returned unchanged.

        Raises:
            RuntimeError: If the page has been closed.
            Exception: Any unexpected loader error, re-raised after the page
                moves to ERROR.
        """
        if self._closed:
            raise RuntimeError(f"Page '{self.name}' is closed")

        self._cancel_in_flight()
        self._generation += 1
        generation = self._generation
        self._state = transition(self._state, LoadStarted(generation=generation))

        task = asyncio.ensure_future(self._loader())
        self._task = task
        event: PageEvent
        try:
            data = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.debug("Page load superseded", page=self.name, generation=generation)
            return self._state
        except EntityNotFoundError as e:
            logger.info("Page entity not found", page=self.name, **e.details)
            event = LoadFailed(
                generation=generation,
                error=PageError(
                    kind=PageErrorKind.NOT_FOUND,
                    message=f"{e.entity_type} not found",
                    details=e.details,
                ),
            )
        except CatalogFetchError as e:
            logger.warning(
                "Page load failed",
                page=self.name,
                error=e.message,
                **e.details,
            )
            event = LoadFailed(
                generation=generation,
                error=PageError(
                    kind=PageErrorKind.FETCH_FAILED,
                    message=f"Failed to load {self.name}",
                    details=e.details,
                ),
            )
        except Exception as e:
            logger.exception("Page load crashed", page=self.name, generation=generation)
            self._state = transition(
                self._state,
                LoadFailed(
                    generation=generation,
                    error=PageError(
                        kind=PageErrorKind.UNEXPECTED,
                        message=f"Failed to load {self.name}",
                        details={"error_type": type(e).__name__},
                    ),
                ),
            )
            raise
        else:
            event = LoadSucceeded(generation=generation, data=data)
        finally:
            if self._task is task:
                self._task = None

        self._state = transition(self._state, event)
        return self._state

    async def retry(self) -> PageState[T]:
        """Reload a page whose last load failed with a retryable error.

        Raises:
            ValueError: If the page is not in a retryable error state.
        """
        error = self._state.error
        if self._state.status is not PageStatus.ERROR or error is None or not error.retryable:
            raise ValueError(f"Page '{self.name}' has no retryable error")
        return await self.load()

    async def close(self) -> None:
        """Tear the page down, cancelling any load in flight."""
        self._closed = True
        task = self._task
        self._cancel_in_flight()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def _cancel_in_flight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
