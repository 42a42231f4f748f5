"""Whitelist fetcher for retrieving usernames from the remote whitelist server."""
import logging

import httpx

USER_AGENT = 'Mozilla/5.0 (compatible; TwitchWhitelist/1.0)'
DEFAULT_LIST_URL = 'http://whitelist.twitchapps.com/list.php'
DEFAULT_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


class WhitelistFetchError(Exception):
    """Raised when the whitelist server does not return a usable username list."""

    pass


def parse_usernames(body: str) -> list[str]:
    """
    Split a newline-delimited response body into usernames.

    Pure function with no I/O. Order is preserved and duplicates are kept;
    a trailing newline does not produce an extra entry.

    Args:
        body:
            Plain-text response body, one username per line.

    Returns:
        The lines of the body.
    """
    return body.splitlines()


class WhitelistFetcher:
    """Fetches the username list for one service identifier at a time."""

    def __init__(
        self,
        list_url: str = DEFAULT_LIST_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._list_url = list_url
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, service_id: str) -> list[str]:
        """
        Fetch the usernames whitelisted under `service_id`.

        Best-effort fetch that never raises: any failure is logged as a warning
        and yields an empty list. The number of usernames loaded is logged once
        the attempt concludes, whether it succeeded or not.

        Args:
            service_id:
                Identifier of the whitelist partition to fetch.

        Returns:
            Usernames in the order the server sent them.
        """
        usernames: list[str] = []
        try:
            usernames = await self._fetch_usernames(service_id)
        except WhitelistFetchError as e:
            logger.warning(
                'Error attempting to retrieve usernames for whitelist ID "%s": %s',
                service_id,
                e,
            )
        finally:
            logger.info(
                'Loaded %d username%s from the whitelist server for ID "%s"',
                len(usernames),
                '' if len(usernames) == 1 else 's',
                service_id,
            )
        return usernames

    async def _fetch_usernames(self, service_id: str) -> list[str]:
        """Perform the request, raising WhitelistFetchError on any failure."""
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self._timeout,
                headers={'User-Agent': USER_AGENT},
                transport=self._transport,
            ) as client:
                # httpx percent-encodes query parameter values
                response = await client.get(self._list_url, params={'id': service_id})
        except httpx.TimeoutException as e:
            raise WhitelistFetchError("Request timed out") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise WhitelistFetchError(f"Request failed: {e}") from e

        if not response.is_success:
            raise WhitelistFetchError(f"HTTP {response.status_code}")

        try:
            body = response.content.decode(response.encoding or 'utf-8')
        except (UnicodeDecodeError, LookupError) as e:
            raise WhitelistFetchError(f"Malformed response body: {e}") from e

        return parse_usernames(body)
