"""
Public Share Token Allocator.

Issues the short, unguessable tokens that public entry URLs are built
from. Each allocation draws a random candidate, probes the store for an
entry already bound to it, and returns the first free candidate. The
loop is bounded; running out of attempts is a hard failure for the
request.

The allocator only reads. Binding the token to an entry is the caller's
job, done in the same write that publishes the entry. The probe is not
atomic with that write, so the unique constraint on
`entries.public_share_id` remains the final guard against two concurrent
requests picking the same token.

Usage:
    allocator = ShareTokenAllocator(entry_repo.share_id_exists)
    share_id = await allocator.allocate()
"""

import secrets
from collections.abc import Awaitable, Callable

from jotter.backend.core.exceptions import ShareTokenExhaustedError
from jotter.backend.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_TOKEN_BYTES = 8

ShareIdProbe = Callable[[str], Awaitable[bool]]
TokenFactory = Callable[[], str]


class ShareTokenAllocator:
    """
    Bounded probe-and-check allocator for public share tokens.

    Args:
        exists: Async probe returning True if a token is already bound to an entry
        max_attempts: Maximum number of candidates to try before giving up
        token_bytes: Random bytes per token; the token is their hex encoding
        token_factory: Candidate generator, defaults to `secrets.token_hex`
    """

    def __init__(
        self,
        exists: ShareIdProbe,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        token_bytes: int = DEFAULT_TOKEN_BYTES,
        token_factory: TokenFactory | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if token_bytes < DEFAULT_TOKEN_BYTES:
            raise ValueError(f"token_bytes must be at least {DEFAULT_TOKEN_BYTES}")

        self._exists = exists
        self.max_attempts = max_attempts
        self.token_bytes = token_bytes
        self._token_factory = token_factory or (lambda: secrets.token_hex(token_bytes))

    @property
    def token_length(self) -> int:
        """Length of tokens produced by the default generator."""
        return self.token_bytes * 2

    def generate(self) -> str:
        """Draw a fresh random candidate."""
        return self._token_factory()

    async def allocate(self) -> str:
        """
        Return a token not bound to any entry at the time of the probe.

        Raises:
            ShareTokenExhaustedError: If every candidate collided
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate()
            if not await self._exists(candidate):
                if attempt > 1:
                    logger.info(
                        "Share token allocated after collisions",
                        extra={"share_token_event": "allocated", "attempts": attempt},
                    )
                return candidate

            logger.warning(
                "Share token collision",
                extra={"share_token_event": "collision", "attempt": attempt},
            )

        raise ShareTokenExhaustedError(attempts=self.max_attempts)
