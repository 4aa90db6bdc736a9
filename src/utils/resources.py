"""
Best-effort release of closeable resources.

**Conceptual**: Cleanup code runs after the interesting work is done, often
while an exception from that work is already on its way up. If closing a
stream then fails too (typically because the client on the other end hung
up), raising that second error would replace the first one and hide what
actually went wrong. Best-effort release means: try to close, and if the
close fails with an I/O error, log a warning and carry on.

**Functionally**:
  - close_quietly(resource): None is a no-op; otherwise resource.close() is
    called and an OSError is logged at WARNING (with traceback) and
    swallowed. Anything that is not an OSError is a programming error and
    propagates.
  - closing_quietly(resource): context manager form. The resource is
    released on every exit path of the with-block (normal completion, early
    return, exception). An OSError from the release is suppressed, so it
    never masks the block's own exception. Any other release error is a
    programming error: it propagates and, when the block is already
    failing, replaces the block's exception (chained as its __context__).

Both accept an injected logger as the diagnostic sink; the module logger is
used otherwise.

**Usage**:
    with closing_quietly(open(path, "rb")) as stream:
        payload = stream.read()

    stream = None
    try:
        stream = open(path, "rb")
        ...
    finally:
        close_quietly(stream)
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

CLOSE_FAILURE_MESSAGE = "Exception while closing resource."

T = TypeVar("T")


class Closeable(Protocol):
    def close(self) -> Any:
        ...


def _release_quietly(release: Callable[[], Any], diagnostic_logger: logging.Logger) -> None:
    try:
        release()
    except OSError:
        diagnostic_logger.warning(CLOSE_FAILURE_MESSAGE, exc_info=True)


def close_quietly(
    resource: Optional[Closeable],
    diagnostic_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Close a resource, logging and swallowing I/O failures.

    Args:
        resource: Object with a close() method, or None.
        diagnostic_logger: Logger for the warning (module logger if None).
    """
    if resource is None:
        return
    _release_quietly(resource.close, diagnostic_logger or logger)


@contextmanager
def closing_quietly(
    resource: T,
    release: Optional[Callable[[], Any]] = None,
    diagnostic_logger: Optional[logging.Logger] = None,
) -> Iterator[T]:
    """
    Yield resource and release it best-effort when the block exits.

    Args:
        resource: Resource to hand to the with-block (may be None).
        release: Release operation; defaults to resource.close.
        diagnostic_logger: Logger for release failures (module logger if None).
    """
    log = diagnostic_logger or logger
    try:
        yield resource
    finally:
        if release is not None:
            _release_quietly(release, log)
        else:
            close_quietly(resource, log)
