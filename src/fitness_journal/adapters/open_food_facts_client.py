"""OpenFoodFacts ingredient finder."""

import logging
import math
from dataclasses import dataclass, field

import httpx

from fitness_journal.domain.errors import InfrastructureError
from fitness_journal.domain.ingredients import IngredientSearchResult
from fitness_journal.services.ingredients import IngredientFinder
from fitness_journal.services.rate_limit import TokenBucket

PRODUCTION_BASE_URL = "https://world.openfoodfacts.org"
STAGING_BASE_URL = "https://world.openfoodfacts.net"
SOURCE = "openfoodfacts"
_STAGING_AUTH = ("off", "off")

logger = logging.getLogger(__name__)


@dataclass
class OpenFoodFactsIngredientFinder(IngredientFinder):
    """HTTPX-backed OpenFoodFacts client with per-endpoint rate limits."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    search_limiter: TokenBucket = field(default_factory=lambda: TokenBucket(10))
    product_limiter: TokenBucket = field(default_factory=lambda: TokenBucket(100))

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "OpenFoodFactsIngredientFinder":
        """Create a finder with a managed httpx session."""
        auth = _STAGING_AUTH if base_url.startswith(STAGING_BASE_URL) else None
        http_client = httpx.AsyncClient(
            headers={"User-Agent": user_agent}, auth=auth, timeout=15
        )
        return cls(base_url=base_url, user_agent=user_agent, http_client=http_client)

    async def search_by_fuzzy_name(self, name: str) -> list[IngredientSearchResult]:
        """Search products by name."""
        self.search_limiter.acquire("OpenFoodFacts search")
        response = await self._get(
            f"{self.base_url}/cgi/search.pl",
            params={
                "search_terms": name,
                "search_simple": 1,
                "action": "process",
                "json": 1,
            },
        )
        products = _json_body(response).get("products") or []
        return [
            result
            for result in (_parse_product(product) for product in products)
            if result is not None
        ]

    async def search_by_barcode(self, barcode: str) -> IngredientSearchResult | None:
        """Fetch one product by barcode."""
        self.product_limiter.acquire("OpenFoodFacts product")
        response = await self._get(
            f"{self.base_url}/api/v2/product/{barcode}", allow_not_found=True
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        product = _json_body(response).get("product")
        if not isinstance(product, dict):
            return None
        return _parse_product(product, barcode=barcode)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(
        self,
        url: str,
        params: dict[str, object] | None = None,
        *,
        allow_not_found: bool = False,
    ) -> httpx.Response:
        try:
            response = await self.http_client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise InfrastructureError(f"OpenFoodFacts request failed: {exc}") from exc
        if allow_not_found and response.status_code == httpx.codes.NOT_FOUND:
            return response
        if response.is_error:
            logger.warning(
                "OpenFoodFacts returned %s for %s", response.status_code, url
            )
            raise InfrastructureError(
                f"OpenFoodFacts request failed with status {response.status_code}"
            )
        return response


def _json_body(response: httpx.Response) -> dict[str, object]:
    try:
        body = response.json()
    except ValueError as exc:
        logger.warning("OpenFoodFacts returned a non-JSON body for %s", response.url)
        raise InfrastructureError("OpenFoodFacts returned an invalid response") from exc
    if not isinstance(body, dict):
        raise InfrastructureError("OpenFoodFacts returned an invalid response")
    return body


def _parse_product(
    product: dict[str, object], barcode: str | None = None
) -> IngredientSearchResult | None:
    """Map an OpenFoodFacts product; products without a name are skipped."""
    name = _clean(product.get("product_name")) or _clean(
        product.get("product_name_en")
    )
    external_id = _clean(product.get("_id")) or _clean(product.get("code"))
    if not name or not external_id:
        return None
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}
    return IngredientSearchResult(
        name=name,
        calories_per_100g=_as_float(nutriments.get("energy-kcal_100g")),
        protein_per_100g=_as_float(nutriments.get("proteins_100g")),
        external_id=external_id,
        source=SOURCE,
        image_url=_clean(product.get("image_thumb_url"))
        or _clean(product.get("image_front_url")),
        barcode=barcode or _clean(product.get("code")),
    )


def _clean(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_float(value: object) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) and number >= 0 else 0.0
