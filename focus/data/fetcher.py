"""HTTP client for the token analytics API with retry logic."""
import asyncio
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import quote

import aiohttp
import requests

from focus.config import (
    BACKOFF_MULTIPLIER,
    MAX_CONCURRENT,
    MAX_RETRIES,
    REQUEST_TIMEOUT,
    RETRY_STATUS_CODES,
    RETRY_WAIT,
    TOKENS_PAGE_SIZE,
    TRANSACTIONS_PAGE_SIZE,
    get_api_url,
)
from focus.constants import ORDER_ASC, ORDER_DESC
from focus.data.models import MarketCapSnapshot, Token, TransactionPage, WalletStats
from focus.data.transformer import paginate
from focus.exceptions import ApiError, NotFoundError, TokenNotFoundError, WalletNotFoundError
from focus.utils import setup_logger

logger = setup_logger(__name__)

NotFoundFactory = Callable[[str], NotFoundError]


class ApiClient:
    """
    Thin wrapper over the backend REST API.

    Every method returns typed records from ``focus.data.models``. Retryable
    statuses (429 and 5xx gateway errors) and transport errors are retried
    with exponential backoff; 404 raises a ``NotFoundError`` straight away.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_wait: float = RETRY_WAIT,
    ):
        self.base_url = (base_url or get_api_url()).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_wait = retry_wait

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get_json(
        self,
        path: str,
        error_message: str,
        params: Optional[Dict[str, Any]] = None,
        not_found: Optional[NotFoundFactory] = None,
    ) -> Any:
        url = self._url(path)
        cur_wait = self.retry_wait
        last_err: Optional[Exception] = None
        last_status: Optional[int] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                r = self.session.get(url, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                last_err = e
                logger.error(f"{url}: Request error (try {attempt}/{self.max_retries}) -> {e}")
                cur_wait = self._backoff(attempt, cur_wait)
                continue

            logger.debug(f"{url}: API request (attempt {attempt}/{self.max_retries}) - Status: {r.status_code}")

            if r.status_code in RETRY_STATUS_CODES:
                last_status = r.status_code
                last_err = None
                logger.warning(f"{url}: HTTP {r.status_code} (try {attempt}/{self.max_retries})")
                cur_wait = self._backoff(attempt, cur_wait)
                continue

            if r.status_code == 404:
                logger.error(f"{url}: 404 (not found)")
                if not_found is not None:
                    raise not_found(url)
                raise NotFoundError(error_message, status_code=404, url=url)

            if not 200 <= r.status_code < 300:
                logger.error(
                    f"{error_message}: status={r.status_code} "
                    f"statusText={getattr(r, 'reason', '')} url={url}"
                )
                raise ApiError(error_message, status_code=r.status_code, url=url)

            try:
                return r.json()
            except ValueError as e:
                logger.error(f"{url}: Invalid JSON body -> {e}")
                raise ApiError(f"{error_message}: invalid JSON", status_code=r.status_code, url=url) from e

        detail = last_err if last_err is not None else f"HTTP {last_status}"
        logger.error(f"{url}: failed after {self.max_retries} retries. last_err={detail}")
        raise ApiError(error_message, status_code=last_status, url=url)

    def _backoff(self, attempt: int, cur_wait: float) -> float:
        """Sleep before the next attempt (never after the last one)."""
        if attempt < self.max_retries:
            if cur_wait > 0:
                time.sleep(cur_wait)
            return cur_wait * BACKOFF_MULTIPLIER
        return cur_wait

    def fetch_accepted_tokens(self, page: int = 1, limit: int = TOKENS_PAGE_SIZE) -> List[Token]:
        """Fetch one page of accepted tokens.

        The endpoint returns every token, so the page is sliced client side.
        """
        if page < 1 or limit < 1:
            raise ValueError(f"page and limit must be positive (page={page}, limit={limit})")

        all_tokens = self._get_json("/api/tokens", "Failed to fetch tokens")
        if not isinstance(all_tokens, list):
            logger.warning(f"Token list response is not a list ({type(all_tokens).__name__}); treating as empty")
            return []

        # Rows without an id are dropped before slicing so full pages stay full
        valid = [item for item in all_tokens if isinstance(item, dict) and item.get("token_id")]
        tokens = [Token.from_api(item) for item in paginate(valid, page, limit)]
        logger.info(f"Loaded {len(tokens)} tokens for page {page}")
        return tokens

    def fetch_token(self, token_id: str) -> Token:
        path = f"/api/tokens/{_segment(token_id)}"
        data = self._get_json(
            path,
            "Failed to fetch token",
            not_found=lambda url: TokenNotFoundError(token_id, url=url),
        )
        data = self._expect_object(data, path, "Failed to fetch token")
        if not data.get("token_id"):
            logger.error(f"{self._url(path)}: token body has no token_id")
            raise ApiError("Failed to fetch token: unexpected body", url=self._url(path))
        return Token.from_api(data)

    def fetch_token_transactions(
        self, token_id: str, page: int = 1, limit: int = TRANSACTIONS_PAGE_SIZE
    ) -> TransactionPage:
        path = f"/api/tokens/{_segment(token_id)}/transactions"
        data = self._get_json(
            path,
            "Failed to fetch transactions",
            params={"page": page, "limit": limit},
            not_found=lambda url: TokenNotFoundError(token_id, url=url),
        )
        return TransactionPage.from_api(self._expect_object(data, path, "Failed to fetch transactions"))

    def fetch_token_market_caps(
        self, token_id: str, snapshot_type: Optional[str] = None, order: str = ORDER_DESC
    ) -> List[MarketCapSnapshot]:
        params = _market_cap_params(snapshot_type, order)
        data = self._get_json(
            f"/api/tokens/{_segment(token_id)}/marketcaps", "Failed to fetch market caps", params=params
        )
        return _parse_snapshots(data)

    def fetch_wallet_stats(self, address: str) -> WalletStats:
        path = f"/api/wallets/{_segment(address)}/stats"
        logger.info(f"Fetching wallet stats from: {self._url(path)}")
        data = self._get_json(
            path,
            "Failed to fetch wallet stats",
            not_found=lambda url: WalletNotFoundError(address, url=url),
        )
        return WalletStats.from_api(self._expect_object(data, path, "Failed to fetch wallet stats"))

    def _expect_object(self, data: Any, path: str, error_message: str) -> Dict[str, Any]:
        """Reject a 2xx body that is valid JSON but not an object."""
        if not isinstance(data, dict):
            url = self._url(path)
            logger.error(f"{url}: expected a JSON object, got {type(data).__name__}")
            raise ApiError(f"{error_message}: unexpected body", url=url)
        return data

    async def _fetch_market_caps_async(
        self, session: aiohttp.ClientSession, token_id: str, params: Dict[str, str]
    ) -> Tuple[str, List[MarketCapSnapshot]]:
        """Async version of fetch_token_market_caps for parallel prefetching."""
        url = self._url(f"/api/tokens/{_segment(token_id)}/marketcaps")
        cur_wait = self.retry_wait
        last_err: Optional[Exception] = None
        last_status: Optional[int] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                async with session.get(
                    url, params=params, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as r:
                    logger.debug(f"{token_id}: API request (attempt {attempt}/{self.max_retries}) - Status: {r.status}")

                    if r.status in RETRY_STATUS_CODES:
                        last_status = r.status
                        logger.warning(f"{token_id}: HTTP {r.status} (try {attempt}/{self.max_retries})")
                        if attempt < self.max_retries:
                            await asyncio.sleep(cur_wait)
                            cur_wait *= BACKOFF_MULTIPLIER
                        continue

                    if r.status == 404:
                        logger.error(f"{url}: 404 (not found)")
                        raise NotFoundError("Failed to fetch market caps", status_code=404, url=url)
                    if not 200 <= r.status < 300:
                        logger.error(
                            f"Failed to fetch market caps: status={r.status} statusText={r.reason} url={url}"
                        )
                        raise ApiError("Failed to fetch market caps", status_code=r.status, url=url)

                    try:
                        data = await r.json(content_type=None)
                    except ValueError as e:
                        logger.error(f"{url}: Invalid JSON body -> {e}")
                        raise ApiError(
                            "Failed to fetch market caps: invalid JSON", status_code=r.status, url=url
                        ) from e

                return token_id, _parse_snapshots(data)

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_err = e
                logger.error(f"{token_id}: Request error (try {attempt}/{self.max_retries}) -> {e}")
                if attempt < self.max_retries:
                    await asyncio.sleep(cur_wait)
                    cur_wait *= BACKOFF_MULTIPLIER

        logger.error(f"{token_id}: failed after {self.max_retries} retries. last_err={last_err}")
        raise ApiError("Failed to fetch market caps", status_code=last_status, url=url)

    async def _fetch_batch_async(
        self, token_ids: List[str], params: Dict[str, str]
    ) -> Dict[str, Union[List[MarketCapSnapshot], Exception]]:
        async with aiohttp.ClientSession() as session:
            tasks = [self._fetch_market_caps_async(session, token_id, params) for token_id in token_ids]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        out: Dict[str, Union[List[MarketCapSnapshot], Exception]] = {}
        for token_id, result in zip(token_ids, results):
            if isinstance(result, Exception):
                logger.error(f"Async market cap fetch failed for {token_id}: {result}")
                out[token_id] = result
            else:
                out[token_id] = result[1]
        return out

    def fetch_market_caps_many(
        self,
        token_ids: Iterable[str],
        max_concurrent: int = MAX_CONCURRENT,
        snapshot_type: Optional[str] = None,
        order: str = ORDER_DESC,
    ) -> Dict[str, Union[List[MarketCapSnapshot], Exception]]:
        """
        Fetch market cap snapshots for several tokens in parallel.

        Args:
            token_ids: Tokens to fetch
            max_concurrent: Maximum concurrent requests per batch

        Returns:
            Dictionary mapping token ids to snapshots, or to the exception
            that token's fetch ended with
        """
        params = _market_cap_params(snapshot_type, order)
        ids = list(dict.fromkeys(token_ids))
        batch_size = max(1, max_concurrent)
        batches = [ids[i:i + batch_size] for i in range(0, len(ids), batch_size)]

        all_results: Dict[str, Union[List[MarketCapSnapshot], Exception]] = {}
        for batch_idx, batch in enumerate(batches):
            logger.info(f"Fetching market caps batch {batch_idx + 1}/{len(batches)} ({len(batch)} tokens)")
            all_results.update(asyncio.run(self._fetch_batch_async(batch, params)))
        return all_results


def _segment(value: str) -> str:
    """Encode an id for use as a single URL path segment."""
    return quote(str(value), safe="")


def _market_cap_params(snapshot_type: Optional[str], order: str) -> Dict[str, str]:
    if order not in (ORDER_ASC, ORDER_DESC):
        raise ValueError(f"order must be {ORDER_ASC} or {ORDER_DESC}, got {order!r}")
    params = {}
    if snapshot_type:
        params["snapshot_type"] = snapshot_type
    params["order"] = order
    return params


def _parse_snapshots(data: Any) -> List[MarketCapSnapshot]:
    if not isinstance(data, list):
        return []
    return [MarketCapSnapshot.from_api(item) for item in data if isinstance(item, dict)]
