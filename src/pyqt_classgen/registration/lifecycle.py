"""Post-construction ready hook scheduling."""

import inspect
import logging
from typing import Any, Awaitable, Callable

from pyqt_classgen.core.async_bridge import spawn
from pyqt_classgen.core.scheduling import idle_add
from pyqt_classgen.exceptions import RuntimeCallbackError
from pyqt_classgen.protocols.classgen_config import get_classgen_config

logger = logging.getLogger(__name__)


def report_ready_failure(class_name: str, error: BaseException) -> None:
    """Log a ready hook failure; never raises."""
    config = get_classgen_config()
    wrapped = RuntimeCallbackError(class_name, error)
    logger.error(str(wrapped), exc_info=error if config.log_ready_tracebacks else None)


def _watch_awaitable(class_name: str, result: Awaitable[Any]) -> None:
    async def guarded() -> None:
        try:
            await result
        except Exception as e:
            report_ready_failure(class_name, e)

    spawn(guarded())


def run_ready(instance: Any, class_name: str, hook: Callable[[Any], Any]) -> None:
    """Invoke hook on instance, logging synchronous and asynchronous failures."""
    try:
        result = hook(instance)
    except Exception as e:
        report_ready_failure(class_name, e)
        return
    if inspect.isawaitable(result):
        _watch_awaitable(class_name, result)


def schedule_ready(instance: Any, class_name: str, hook: Callable[[Any], Any]) -> None:
    """
    Queue hook to run once on the next idle pass after construction.

    Ready hooks queued in the same pass run in construction order.
    """
    idle_add(lambda: run_ready(instance, class_name, hook))
    logger.debug(f"Scheduled ready hook for {class_name}")
