"""Login access decisions backed by the whitelist cache."""
import logging
from dataclasses import dataclass

from core.whitelist_cache import ExpiringCache

logger = logging.getLogger(__name__)

DEFAULT_ACTIVATION_URL = "http://whitelist.twitchapps.com"


def rejection_message(activation_url: str) -> str:
    """Message shown to a player whose login was denied."""
    return (
        "You are not on the Twitch subserver whitelist!\n\n"
        f"Head to {activation_url} to activate your whitelist."
    )


@dataclass
class LoginDecision:
    """Outcome of a login check for one connecting player."""

    username: str
    whitelisted: bool
    allowed: bool
    message: str | None  # Rejection message when not allowed


class AccessGate:
    """
    Answers "may this player log in?" from the cache alone.

    Lookups never touch the network and never wait on a refresh, so they are
    safe to call while handling a live connection.
    """

    def __init__(
        self, cache: ExpiringCache, activation_url: str = DEFAULT_ACTIVATION_URL,
    ) -> None:
        self._cache = cache
        self._activation_url = activation_url

    def is_whitelisted(self, username: str, now: float | None = None) -> bool:
        """Check if `username` is currently whitelisted."""
        return self._cache.get(username, now)

    def check_login(
        self, username: str, bypass: bool = False, now: float | None = None,
    ) -> LoginDecision:
        """
        Decide whether `username` may log in.

        Login is denied only when the player is not whitelisted and the game
        server has not granted them the bypass capability.
        """
        whitelisted = self.is_whitelisted(username, now)
        if whitelisted or bypass:
            return LoginDecision(
                username=username, whitelisted=whitelisted, allowed=True, message=None,
            )

        logger.info("login_denied", extra={"username": username})
        return LoginDecision(
            username=username,
            whitelisted=False,
            allowed=False,
            message=rejection_message(self._activation_url),
        )
