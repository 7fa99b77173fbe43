"""
Once-only lazy initialization of external collaborators (embedders, generators).
"""

import threading
from typing import Any, Callable, Dict, Generic, Optional, Tuple, Type, TypeVar

from .errors import ProviderUnavailableFault
from ..util.logging import logger

T = TypeVar("T")
R = TypeVar("R")


class ProviderHandle(Generic[T]):
    """
    Thread-safe lazy holder for a collaborator instance.

    The factory runs at most once per initialization, even under concurrent
    first calls. A ProviderUnavailableFault drops the instance so the next
    attempt re-initializes; call() retries that a bounded number of times.
    """

    def __init__(self, name: str, factory: Callable[[], T], max_retries: int = 2):
        self.name = name
        self._factory = factory
        self._max_retries = max_retries
        self._instance: Optional[T] = None
        self._lock = threading.Lock()
        self._init_count = 0

    @property
    def is_ready(self) -> bool:
        return self._instance is not None

    @property
    def init_count(self) -> int:
        """How many times the factory has produced an instance."""
        return self._init_count

    def get(self) -> T:
        """Return the instance, building it on first use."""
        instance = self._instance
        if instance is not None:
            return instance

        with self._lock:
            if self._instance is None:
                try:
                    self._instance = self._factory()
                except ProviderUnavailableFault:
                    raise
                except Exception as e:
                    logger.log_provider_event(self.name, "init", {"error": str(e)}, status="failed")
                    raise ProviderUnavailableFault(self.name, f"Failed to initialize {self.name}: {e}") from e
                self._init_count += 1
                logger.log_provider_event(self.name, "init", {"init_count": self._init_count})
            return self._instance

    def reset(self, expected: Optional[T] = None) -> None:
        """
        Drop the instance; the next get() re-initializes.

        With expected, only that instance is dropped. A replacement another
        caller built in the meantime is left in place.
        """
        with self._lock:
            instance = self._instance
            if instance is None or (expected is not None and instance is not expected):
                return
            self._instance = None

        close = getattr(instance, "close", None)
        if callable(close):
            close()
        logger.log_provider_event(self.name, "reset")

    def call(self, fn: Callable[[T], R], drop_on: Tuple[Type[Exception], ...] = ()) -> R:
        """
        Run fn against the instance.

        ProviderUnavailableFault drops the failing instance and retries up to
        max_retries times. Exceptions in drop_on drop it and propagate.
        """
        attempt = 0
        while True:
            instance = None
            try:
                instance = self.get()
                return fn(instance)
            except ProviderUnavailableFault as e:
                if attempt >= self._max_retries:
                    logger.log_provider_event(self.name, "call", {"attempts": attempt + 1, "error": e.message}, status="failed")
                    raise
                attempt += 1
                logger.log_provider_event(self.name, "call", {"attempt": attempt, "error": e.message}, status="retry")
                if instance is not None:
                    self.reset(expected=instance)
            except drop_on:
                self.reset(expected=instance)
                raise

    def get_status(self) -> Dict[str, Any]:
        """Handle state, merged with the instance's own status when it reports one."""
        status = {
            "name": self.name,
            "ready": self.is_ready,
            "init_count": self._init_count,
        }
        instance = self._instance
        instance_status = getattr(instance, "get_status", None)
        if instance is not None and callable(instance_status):
            status.update(instance_status())
        return status
