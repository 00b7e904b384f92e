# =============================================================================
# contacts_core/data/readiness.py
# Awaitable Initialization of the Remote Store Handle
# =============================================================================

from __future__ import annotations
import asyncio
from typing import Any, Awaitable, Callable, Optional

from contacts_core.config import DEFAULT_READINESS_TIMEOUT
from contacts_core.errors import RemoteUnavailableError
from contacts_core.logging import get_logger

logger = get_logger(__name__)

ClientFactory = Callable[[], Awaitable[Any]]


class ClientReadiness:
    """
    One-shot asynchronous initialization of the remote store handle.

    The first `wait()` on an event loop starts the factory; every later
    `wait()` on that loop shares the same task. Waiting is capped by
    `timeout` seconds, after which RemoteUnavailableError is raised. A new
    event loop (a new Streamlit run) starts a new initialization.

    Usage:
        readiness = ClientReadiness(lambda: create_async_store(settings))
        store = await readiness.wait()
    """

    def __init__(self, factory: ClientFactory, timeout: float = DEFAULT_READINESS_TIMEOUT):
        self._factory = factory
        self.timeout = timeout
        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @classmethod
    def resolved(cls, handle: Any) -> ClientReadiness:
        """Readiness that is satisfied immediately with `handle`."""
        async def factory():
            return handle
        return cls(factory)

    @property
    def ready(self) -> bool:
        task = self._task
        return (
            task is not None
            and task.done()
            and not task.cancelled()
            and task.exception() is None
        )

    def start(self) -> None:
        """Schedule initialization on the running loop if not already started."""
        loop = asyncio.get_running_loop()
        if self._task is None or self._loop is not loop:
            self._loop = loop
            self._task = loop.create_task(self._factory())

    async def wait(self) -> Any:
        """
        Wait for the handle.

        Raises:
            RemoteUnavailableError: on timeout or when initialization fails
        """
        self.start()
        task = self._task
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Remote client not ready after {self.timeout:.1f}s")
            raise RemoteUnavailableError(
                "Could not connect to the database",
                timeout=self.timeout,
            )
        except Exception as e:
            # Let the next navigation retry initialization
            if self._task is task:
                self._task = None
            logger.error(f"Remote client initialization failed: {e}")
            raise RemoteUnavailableError(
                f"Could not connect to the database: {e}",
                timeout=self.timeout,
            ) from e
