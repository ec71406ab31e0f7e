"""HTTP clients for the prayer-time calendar and geocoding providers."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

ALADHAN_BASE_URL = "https://api.aladhan.com/v1"
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"

RATE_LIMIT_SECONDS = 1.0
REQUEST_TIMEOUT_SECONDS = 5.0
CACHE_MAX_SIZE = 50
CACHE_EXPIRY_SECONDS = 30 * 60

CALCULATION_METHODS: Dict[str, str] = {
    "auto": "Automatic",
    "1": "Karachi",
    "2": "North America (ISNA)",
    "3": "Muslim World League",
    "4": "Makkah",
    "5": "Egypt",
    "7": "Tehran",
    "8": "Gulf Region",
    "9": "Kuwait",
    "10": "Qatar",
    "11": "Singapore",
    "12": "France",
    "13": "Turkey",
    "14": "Russia",
    "15": "Moonsighting.com",
    "16": "Dubai",
    "17": "Malaysia (JAKIM)",
    "18": "Tunisia",
    "19": "Algeria",
    "20": "Indonesia",
    "21": "Morocco",
    "22": "Lisbon, Portugal",
    "23": "Jordan",
}


def calculation_method_name(method: int | str) -> str:
    return CALCULATION_METHODS.get(str(method), "Unknown")


class ProviderError(RuntimeError):
    """Raised when a provider request fails or returns an error payload."""


class RequestCancelled(ProviderError):
    """Raised when a request is aborted through its cancellation token."""


class CancellationToken:
    """Per-call cancellation flag shared between the caller and the client."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled("Request aborted")

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return ``True`` if cancelled meanwhile."""
        return self._event.wait(seconds)


class TTLCache:
    """Insertion-ordered cache with a size cap and per-entry expiry."""

    def __init__(
        self,
        *,
        max_size: int = CACHE_MAX_SIZE,
        expiry_seconds: float = CACHE_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_size = max_size
        self.expiry_seconds = expiry_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.expiry_seconds:
                logger.debug("Removing expired cache entry for %s", key)
                del self._entries[key]
                return None
        logger.debug("Cache hit for %s", key)
        return value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                oldest, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, removed oldest entry: %s", oldest)
            self._entries[key] = (self._clock(), value)


class _ProviderClient:
    """Shared cache, rate limiting and in-flight tracking for provider clients."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        cache: TTLCache | None = None,
        rate_limit_seconds: float = RATE_LIMIT_SECONDS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session or requests.Session()
        self.cache = cache or TTLCache(clock=clock)
        self.rate_limit_seconds = rate_limit_seconds
        self.timeout = timeout
        self._clock = clock
        self._last_request_at: float | None = None
        self._in_flight: CancellationToken | None = None
        self._lock = threading.Lock()

    def _begin(self, cancel_token: CancellationToken | None, abort_previous: bool) -> CancellationToken:
        token = cancel_token or CancellationToken()
        with self._lock:
            if abort_previous and self._in_flight is not None and self._in_flight is not token:
                logger.debug("Aborting previous request")
                self._in_flight.cancel()
            self._in_flight = token
        return token

    def _finish(self, token: CancellationToken) -> None:
        with self._lock:
            if self._in_flight is token:
                self._in_flight = None

    def _respect_rate_limit(self, token: CancellationToken) -> None:
        """Reserve the next request slot under the lock, then wait for it outside."""
        with self._lock:
            now = self._clock()
            slot = now
            if self._last_request_at is not None:
                slot = max(now, self._last_request_at + self.rate_limit_seconds)
            self._last_request_at = slot

        wait_for = slot - now
        if wait_for > 0:
            logger.debug("Rate limiting: waiting %.3fs before next request", wait_for)
            if token.wait(wait_for):
                raise RequestCancelled("Request aborted")

    def _get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        cache_key: str,
        cancel_token: CancellationToken | None = None,
        abort_previous: bool = True,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        token = self._begin(cancel_token, abort_previous)
        try:
            token.raise_if_cancelled()
            self._respect_rate_limit(token)
            token.raise_if_cancelled()

            logger.info("Fetching %s", url)
            started = time.perf_counter()
            try:
                response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            except requests.Timeout as exc:
                raise ProviderError(f"Request timed out after {self.timeout:g} seconds") from exc
            except requests.RequestException as exc:
                raise ProviderError(f"Request to {url} failed: {exc}") from exc
            logger.debug(
                "Responded in %.2fms with status %s",
                (time.perf_counter() - started) * 1000,
                response.status_code,
            )

            token.raise_if_cancelled()
            if not response.ok:
                raise ProviderError(self._error_message(response))

            payload = response.json()
            self.cache.put(cache_key, payload)
            return payload
        finally:
            self._finish(token)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            detail = response.json().get("data")
        except (ValueError, AttributeError):
            detail = None
        return f"Provider error {response.status_code}: {detail or 'Unknown error occurred'}"


class AladhanClient(_ProviderClient):
    """Yearly prayer-time calendars from api.aladhan.com."""

    def __init__(self, session: requests.Session | None = None, *, base_url: str = ALADHAN_BASE_URL, **kwargs: Any) -> None:
        super().__init__(session, **kwargs)
        self.base_url = base_url.rstrip("/")

    def calendar_url(
        self,
        latitude: float,
        longitude: float,
        year: int | str,
        *,
        method: int | str = "auto",
        hijri: bool = False,
    ) -> str:
        endpoint = "hijriCalendar" if hijri else "calendar"
        return f"{self.base_url}/{endpoint}/{year}?latitude={latitude}&longitude={longitude}&method={method}"

    def fetch_calendar(
        self,
        latitude: float,
        longitude: float,
        year: int | str,
        *,
        method: int | str = "auto",
        hijri: bool = False,
        cancel_token: CancellationToken | None = None,
    ) -> Dict[str, Any]:
        """Return the provider's month→days payload; identical requests are served from cache."""
        url = self.calendar_url(latitude, longitude, year, method=method, hijri=hijri)
        payload = self._get_json(url, cache_key=url, cancel_token=cancel_token, abort_previous=False)
        if not isinstance(payload, dict) or "data" not in payload:
            raise ProviderError("Unexpected calendar payload: missing 'data'")
        return payload


class NominatimGeocoder(_ProviderClient):
    """Address search against OpenStreetMap Nominatim, one request per second."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        search_url: str = NOMINATIM_SEARCH_URL,
        user_agent: str = "prayer-stats",
        **kwargs: Any,
    ) -> None:
        super().__init__(session, **kwargs)
        self.search_url = search_url
        self.user_agent = user_agent

    def search(
        self,
        query: str,
        *,
        cancel_token: CancellationToken | None = None,
        abort_previous: bool = True,
    ) -> list[dict[str, Any]]:
        query = query.strip()
        if not query:
            return []
        return self._get_json(
            self.search_url,
            params={"format": "json", "q": query},
            cache_key=query,
            cancel_token=cancel_token,
            abort_previous=abort_previous,
            headers={"User-Agent": self.user_agent},
        )

    def geocode(self, address: str, **kwargs: Any) -> tuple[float, float, str]:
        """Coordinates and display name of the best match for ``address``."""
        results = self.search(address, **kwargs)
        if not results:
            raise ProviderError(f"No results found for address: {address}")
        best = results[0]
        return float(best["lat"]), float(best["lon"]), str(best.get("display_name", address))
