"""
MODULE OVERVIEW:
A cancellation signal scoped to one logical feed session.

WHAT IS HAPPENING HERE:
HTTP requests already on the wire are allowed to finish. Every component checks
`scope.cancelled` after it wakes up from a request, and if the session has been torn
down in the meantime it drops the response on the floor instead of touching state.
"""
from loguru import logger


class SessionScope:
    def __init__(self, name: str = "session"):
        self.name = name
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            logger.debug(f"scope={self.name} event=cancelled")

    def discard(self, op: str, **extra) -> None:
        """Log a response that arrived after teardown and is being ignored."""
        log_str = f"scope={self.name} op={op} event=late_response reason=discarded"
        for k, v in extra.items():
            log_str += f" {k}={v}"
        logger.debug(log_str)
