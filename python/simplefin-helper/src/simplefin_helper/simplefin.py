"""Retrieve accounts and transactions from a SimpleFIN server."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

import httpx


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


DateLike = date | datetime
"""A `date` (local midnight) or a `datetime` (naive values are local time)."""

_module_logger = logging.getLogger(__name__)


class SimpleFINError(Exception):
    """Raised on any error specific to the `SimpleFIN` client."""


@dataclass(frozen=True)
class Credential:
    """Parsed SimpleFIN access key."""

    base_url: str
    """Server root, `scheme//host[/path]`, without the basic-auth part."""
    username: str
    """Basic-auth username."""
    password: str
    """Basic-auth password."""

    def authorization(self) -> str:
        """Return the value of the `Authorization` header for this credential."""
        userpass = f"{self.username}:{self.password}".encode()
        return "Basic " + base64.b64encode(userpass).decode("ascii")


def normalize_date(d: DateLike) -> int | float:
    """Convert a date to the epoch-seconds value expected by the server.

    The value is epoch milliseconds minus the local UTC offset, divided by
    1000, i.e. the local wall-clock time read as if it were UTC.

    Args:
        d: date or datetime. A `date` is treated as local midnight; a naive
            `datetime` as local time.

    Returns:
        Normalized seconds; an `int` when whole, otherwise a `float`.

    """
    if not isinstance(d, datetime):
        d = datetime.combine(d, datetime.min.time())
    local = d.astimezone()
    offset = local.utcoffset()
    # utcoffset() is local - UTC; the server wants UTC - local subtracted.
    tz_offset_minutes = -offset.total_seconds() / 60 if offset is not None else 0
    epoch_ms = local.timestamp() * 1000
    seconds = (epoch_ms - tz_offset_minutes * 60 * 1000) / 1000
    return int(seconds) if seconds.is_integer() else seconds


def month_bounds(today: date) -> tuple[datetime, datetime]:
    """Return local-midnight start of `today`'s month and of the next month."""
    start = datetime(today.year, today.month, 1)
    # Day 28 plus four days always lands in the following month.
    end = (start.replace(day=28) + timedelta(days=4)).replace(day=1)
    return start, end


class SimpleFIN:
    """Async client for a SimpleFIN server.

    Every call opens its own connection; instances hold configuration only.
    """

    def __init__(
        self,
        *,
        logger: logging.Logger | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize new instance.

        Args:
            logger: logger for progress and error messages. Defaults to the
                module logger.
            timeout: per-request timeout in seconds. `None` waits forever.
            transport: httpx transport, e.g. `httpx.MockTransport` in tests.
            clock: returns the current local time, for default date ranges.

        """
        self._logger = logger or _module_logger
        self._timeout = timeout
        self._transport = transport
        self._clock = clock

    def parse_access_key(self, access_key: str) -> Credential:
        """Split an access key of the form `scheme//username:password@host`.

        Args:
            access_key: the access key (a.k.a. access URL).

        Returns:
            The parsed credential.

        Raises:
            SimpleFINError: if a delimiter is missing or a field is empty.

        """
        self._logger.debug("Parsing access key")
        try:
            scheme, rest = _split_pair(access_key, "//")
            auth, host = _split_pair(rest, "@")
            username, password = _split_pair(auth, ":")
        except ValueError as e:
            msg = f"Malformed access key: {e}"
            self._logger.error("Error parsing access key: %s", e)
            raise SimpleFINError(msg) from e
        return Credential(
            base_url=f"{scheme}//{host}", username=username, password=password
        )

    async def resolve_credential(
        self, access_key: str, setup_token: str | None = None
    ) -> Credential:
        """Parse `access_key`, claiming a fresh one once if it is malformed.

        Args:
            access_key: the access key to parse.
            setup_token: base64 setup token used to claim a replacement access
                key. Without it a malformed key is an error.

        Returns:
            The parsed credential.

        Raises:
            SimpleFINError: if the key is malformed and cannot be replaced.

        """
        try:
            return self.parse_access_key(access_key)
        except SimpleFINError:
            if setup_token is None:
                raise
        self._logger.info("Retrying to fetch access key")
        try:
            return self.parse_access_key(await self.get_access_key(setup_token))
        except Exception as e:
            self._logger.error("Error fetching access key on retry: %s", e)
            raise

    async def get_access_key(self, base64_token: str) -> str:
        """Exchange a setup token for an access key.

        Args:
            base64_token: base64-encoded claim URL.

        Returns:
            The access key returned by the server.

        Raises:
            SimpleFINError: if the token does not decode to text.
            httpx.HTTPError: on transport failure or a non-2xx response.

        """
        self._logger.info("Requesting access key")
        try:
            claim_url = base64.b64decode(base64_token.strip(), validate=True).decode(
                "utf-8"
            )
        except (binascii.Error, UnicodeDecodeError) as e:
            msg = "Setup token is not valid base64 text"
            self._logger.error("Error in get_access_key: %s", e)
            raise SimpleFINError(msg) from e
        try:
            async with self._client() as client:
                resp = await client.post(
                    claim_url.strip(), headers={"Content-Length": "0"}
                )
                _ = resp.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Request error: %s", e)
            raise
        return resp.text.strip()

    async def get_accounts(
        self,
        access_key: str,
        start: DateLike | None = None,
        end: DateLike | None = None,
        *,
        setup_token: str | None = None,
    ) -> object:
        """Retrieve the account set, optionally bounded by transaction date.

        Args:
            access_key: SimpleFIN access key.
            start: include transactions on or after this time.
            end: include transactions before this time.
            setup_token: optional setup token to claim a new access key if
                `access_key` is malformed.

        Returns:
            The server's JSON response, unmodified.

        Raises:
            SimpleFINError: if the access key is malformed.
            httpx.HTTPError: on transport failure or a non-2xx response.
            ValueError: if the response body is not JSON.

        """
        self._logger.info("Fetching accounts")
        try:
            cred = await self.resolve_credential(access_key, setup_token)
            async with self._client() as client:
                resp = await client.get(
                    f"{cred.base_url}/accounts",
                    params=self._date_params(start, end),
                    headers={"Authorization": cred.authorization()},
                )
                _ = resp.raise_for_status()
            return resp.json()  # pyright: ignore[reportAny]
        except Exception as e:
            self._logger.error("Error fetching accounts: %s", e)
            raise

    async def get_transactions(
        self,
        access_key: str,
        start: DateLike | None = None,
        end: DateLike | None = None,
        *,
        setup_token: str | None = None,
    ) -> object:
        """Retrieve transactions, defaulting to the current calendar month.

        Args:
            access_key: SimpleFIN access key.
            start: start time, inclusive. Defaults to the first of this month.
            end: end time, exclusive. Defaults to the first of next month.
            setup_token: see `get_accounts`.

        Returns:
            The server's JSON response, unmodified.

        """
        self._logger.info("Retrieving transactions")
        default_start, default_end = month_bounds(self._clock().date())
        start = start if start is not None else default_start
        end = end if end is not None else default_end
        self._logger.info("%s - %s", _day(start), _day(end))
        try:
            return await self.get_accounts(
                access_key, start, end, setup_token=setup_token
            )
        except Exception as e:
            self._logger.error("Error getting transactions: %s", e)
            raise

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    @staticmethod
    def _date_params(
        start: DateLike | None, end: DateLike | None
    ) -> Mapping[str, str]:
        params: dict[str, str] = {}
        if start is not None:
            params["start-date"] = str(normalize_date(start))
        if end is not None:
            params["end-date"] = str(normalize_date(end))
        return params


def _split_pair(s: str, sep: str) -> tuple[str, str]:
    parts = s.split(sep)
    if len(parts) < 2:  # noqa: PLR2004
        msg = f"missing '{sep}'"
        raise ValueError(msg)
    first, second = parts[0], parts[1]
    if not first or not second:
        msg = f"empty field around '{sep}'"
        raise ValueError(msg)
    return first, second


def _day(d: DateLike) -> str:
    return (d.date() if isinstance(d, datetime) else d).isoformat()


async def get_access_key(base64_token: str) -> str:
    """Exchange a setup token for an access key. See `SimpleFIN.get_access_key`."""
    return await SimpleFIN().get_access_key(base64_token)


def parse_access_key(access_key: str) -> Credential:
    """Parse an access key. See `SimpleFIN.parse_access_key`."""
    return SimpleFIN().parse_access_key(access_key)


async def get_accounts(
    access_key: str,
    start: DateLike | None = None,
    end: DateLike | None = None,
    *,
    setup_token: str | None = None,
) -> object:
    """Retrieve the account set. See `SimpleFIN.get_accounts`."""
    return await SimpleFIN().get_accounts(
        access_key, start, end, setup_token=setup_token
    )


async def get_transactions(
    access_key: str,
    start: DateLike | None = None,
    end: DateLike | None = None,
    *,
    setup_token: str | None = None,
) -> object:
    """Retrieve transactions. See `SimpleFIN.get_transactions`."""
    return await SimpleFIN().get_transactions(
        access_key, start, end, setup_token=setup_token
    )
