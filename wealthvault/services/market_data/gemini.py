# wealthvault/services/market_data/gemini.py
"""
Gemini market data provider implementation.

Asks the Gemini generateContent REST endpoint for structured JSON:
prices and exchange rates use Google Search grounding, the ticker catalog
does not. Every call is a single HTTP request; there is no retry.

Request shape:
    POST {base_url}/models/{model}:generateContent
    x-goog-api-key: <key>
    {
        "contents": [{"parts": [{"text": "..."}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": {...}
        },
        "tools": [{"google_search": {}}]
    }

The JSON answer is read from candidates[0].content.parts[*].text.
Numbers are parsed straight into Decimal.

Limitations:
- Prices come from a language model with search grounding; they are
  best-effort and may lag the market
- Latency is seconds, not milliseconds
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from wealthvault.services.constants import QUOTED_CURRENCIES
from wealthvault.services.exceptions import (
    MalformedResponseError,
    MarketDataError,
    ProviderUnavailableError,
    RateLimitError,
)
from wealthvault.services.market_data.base import (
    MarketDataProvider,
    MarketQuote,
    TickerGroup,
    parse_ticker_catalog,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

QUOTE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "symbol": {"type": "STRING"},
        "price": {"type": "NUMBER"},
        "name": {"type": "STRING"},
        "currency": {"type": "STRING"},
    },
    "required": ["symbol", "price", "name", "currency"],
}

RATES_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {code: {"type": "NUMBER"} for code in QUOTED_CURRENCIES},
    "required": list(QUOTED_CURRENCIES),
}

CATALOG_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "group": {"type": "STRING"},
            "options": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "value": {"type": "STRING"},
                        "label": {"type": "STRING"},
                    },
                    "required": ["value", "label"],
                },
            },
        },
        "required": ["group", "options"],
    },
}

CATALOG_PROMPT = (
    "Return a grouped JSON of 50 popular investment tickers for global investors. "
    'Format label as "SYMBOL - Descriptive Name" (e.g. "VWRP - Vanguard All-World"). '
    'Groups: "Global ETFs", "S&P 500 & US Stocks", "UK & Europe", "Bonds & Alternatives". '
    "Include VWRP, VUSA, VUAG, SWDA, AAPL, MSFT, NVDA, ISF, VAGS, and TBLA (Taboola). "
    "Be extremely concise."
)


class GeminiProvider(MarketDataProvider):
    """
    Gemini implementation of MarketDataProvider.

    Configuration:
        api_key: Gemini API key; calls fail with ProviderUnavailableError without one
        model: Model name (default from settings)
        base_url: REST root
        timeout: Per-request timeout in seconds
        client: Optional httpx.Client (tests inject one with a MockTransport)

    Example:
        provider = GeminiProvider(api_key="...", model="gemini-3-flash-preview")
        quote = provider.get_quote("VWRP")
        print(quote.price, quote.currency)
    """

    def __init__(
            self,
            api_key: str | None,
            model: str,
            base_url: str,
            timeout: float = 30.0,
            client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        logger.info(f"GeminiProvider initialized (model={model}, timeout={timeout}s)")

    @property
    def name(self) -> str:
        return "gemini"

    def close(self) -> None:
        self._client.close()

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_quote(self, symbol: str) -> MarketQuote:
        symbol = symbol.strip().upper()
        logger.debug(f"Fetching quote for {symbol}")
        prompt = (
            f"Current price for ticker: {symbol}. "
            "Return JSON with symbol, price, name, and currency (ISO 4217)."
        )
        data = self._generate(prompt, QUOTE_SCHEMA, grounded=True)

        if not isinstance(data, dict):
            raise MalformedResponseError(self.name, "quote is not a JSON object")
        try:
            return MarketQuote(
                symbol=str(data.get("symbol") or symbol),
                price=_as_decimal(data["price"]),
                currency=str(data["currency"]),
                name=str(data.get("name") or symbol),
            )
        except (KeyError, ValueError, InvalidOperation) as e:
            raise MalformedResponseError(self.name, f"invalid quote for {symbol}: {e}") from e

    def get_exchange_rates(self, base_currency: str) -> dict[str, Decimal]:
        base = base_currency.strip().upper()
        logger.debug(f"Fetching exchange rates for {base}")
        prompt = (
            f"Fetch current exchange rates for {base} against "
            f"{', '.join(QUOTED_CURRENCIES[:-1])}, and {QUOTED_CURRENCIES[-1]}. "
            'Return as a JSON object: { "USD": rate, "EUR": rate, "GBP": rate }.'
        )
        data = self._generate(prompt, RATES_SCHEMA, grounded=True)

        if not isinstance(data, dict):
            raise MalformedResponseError(self.name, "rates are not a JSON object")

        rates: dict[str, Decimal] = {}
        for code in QUOTED_CURRENCIES:
            try:
                rate = _as_decimal(data[code])
            except (KeyError, InvalidOperation, ValueError) as e:
                raise MalformedResponseError(self.name, f"missing or invalid rate for {code}") from e
            if rate <= 0:
                raise MalformedResponseError(self.name, f"non-positive rate for {code}: {rate}")
            rates[code] = rate
        return rates

    def get_ticker_catalog(self) -> list[TickerGroup]:
        logger.debug("Fetching ticker catalog")
        data = self._generate(CATALOG_PROMPT, CATALOG_SCHEMA, grounded=False)
        return parse_ticker_catalog(data, provider=self.name)

    # =========================================================================
    # HTTP
    # =========================================================================

    def _generate(self, prompt: str, schema: dict[str, Any], grounded: bool) -> Any:
        """
        Run one generateContent call and return the decoded JSON answer.

        Raises:
            ProviderUnavailableError: No API key, network error or 5xx
            RateLimitError: HTTP 429
            MarketDataError: Any other non-2xx status
            MalformedResponseError: Missing text or text that is not JSON
        """
        if not self._api_key:
            raise ProviderUnavailableError(self.name, "GEMINI_API_KEY is not configured")

        body: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }
        if grounded:
            body["tools"] = [{"google_search": {}}]

        url = f"{self._base_url}/models/{self._model}:generateContent"
        try:
            response = self._client.post(url, json=body, headers={"x-goog-api-key": self._api_key})
        except httpx.TimeoutException as e:
            logger.error(f"Gemini request timed out: {e}")
            raise ProviderUnavailableError(self.name, "request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Gemini request failed: {e}")
            raise ProviderUnavailableError(self.name, str(e)) from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(self.name, int(retry_after) if retry_after and retry_after.isdigit() else None)
        if response.status_code >= 500:
            raise ProviderUnavailableError(self.name, f"HTTP {response.status_code}")
        if response.status_code >= 400:
            raise MarketDataError(
                f"Provider '{self.name}' rejected the request: HTTP {response.status_code}",
                provider=self.name,
            )

        text = _extract_text(response, self.name)
        try:
            return json.loads(text, parse_float=Decimal, parse_int=Decimal)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(self.name, f"answer is not JSON: {e}") from e


# =============================================================================
# HELPERS
# =============================================================================

def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    result = value if isinstance(value, Decimal) else Decimal(str(value))
    if not result.is_finite():
        raise ValueError(f"non-finite number {value!r}")
    return result


def _extract_text(response: httpx.Response, provider: str) -> str:
    try:
        payload = response.json()
        parts = payload["candidates"][0]["content"]["parts"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(provider, "response has no candidate content") from e

    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        raise MalformedResponseError(provider, "empty answer")
    return text
