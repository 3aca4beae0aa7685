"""Navigation retry with a fixed delay between attempts."""

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)
import structlog

from catalog_scraper.exceptions import NavigationError
from catalog_scraper.schemas.profile import NavigationPolicy


logger = structlog.get_logger(__name__)

DEFAULT_RETRY_DELAY = 2.0  # seconds


async def navigate_with_retry(
    renderer,
    url: str,
    policy: NavigationPolicy,
    delay: float = DEFAULT_RETRY_DELAY,
) -> None:
    """Navigate the renderer to a URL, retrying per the navigation policy.

    Makes up to `policy.max_retries` attempts with `delay` seconds between
    them.

    Args:
        renderer: DocumentRenderer to drive
        url: Absolute URL to load
        policy: Navigation policy (attempt count and per-attempt timeout)
        delay: Seconds to wait between attempts

    Raises:
        NavigationError: If every attempt failed
    """

    def log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "navigation_attempt_failed",
            url=url,
            attempt=retry_state.attempt_number,
            max_attempts=policy.max_retries,
            error=str(error),
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_retries),
        wait=wait_fixed(delay),
        retry=retry_if_exception_type(Exception),
        before_sleep=log_retry,
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                await renderer.navigate(url, policy.timeout)
    except Exception as e:
        logger.error("navigation_failed", url=url, attempts=policy.max_retries, error=str(e))
        raise NavigationError(url, policy.max_retries, e) from e
