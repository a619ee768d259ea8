"""Tests for the OpenFoodFacts ingredient finder."""

import asyncio
from collections.abc import Callable

import httpx
import pytest

from fitness_journal.adapters.open_food_facts_client import (
    STAGING_BASE_URL,
    OpenFoodFactsIngredientFinder,
)
from fitness_journal.domain.errors import InfrastructureError
from fitness_journal.services.rate_limit import TokenBucket


def _finder(
    handler: Callable[[httpx.Request], httpx.Response], **kwargs: object
) -> OpenFoodFactsIngredientFinder:
    transport = httpx.MockTransport(handler)
    return OpenFoodFactsIngredientFinder(
        base_url="https://off.test",
        user_agent="fitness-journal-tests",
        http_client=httpx.AsyncClient(transport=transport),
        **kwargs,
    )


def test_search_parses_products_and_skips_nameless_ones() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "products": [
                    {
                        "_id": "3017620422003",
                        "code": "3017620422003",
                        "product_name": " Nutella ",
                        "nutriments": {"energy-kcal_100g": 539, "proteins_100g": "6.3"},
                        "image_thumb_url": "https://images.test/nutella.jpg",
                    },
                    {"_id": "1", "product_name": "", "nutriments": {}},
                    {"_id": "2", "product_name": "Water"},
                ]
            },
        )

    results = asyncio.run(_finder(handler).search_by_fuzzy_name("nutella"))

    assert [result.name for result in results] == ["Nutella", "Water"]
    nutella = results[0]
    assert (nutella.calories_per_100g, nutella.protein_per_100g) == (539, 6.3)
    assert nutella.source == "openfoodfacts"
    assert nutella.external_id == "3017620422003"
    assert nutella.image_url == "https://images.test/nutella.jpg"
    assert results[1].calories_per_100g == 0
    assert seen[0].url.path == "/cgi/search.pl"
    assert seen[0].url.params["search_terms"] == "nutella"
    assert seen[0].url.params["json"] == "1"


def test_barcode_lookup() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/0000"):
            return httpx.Response(404, json={"status": 0})
        return httpx.Response(
            200,
            json={
                "product": {
                    "code": "737628064502",
                    "product_name_en": "Rice noodles",
                    "nutriments": {"energy-kcal_100g": 385, "proteins_100g": 9.6},
                }
            },
        )

    finder = _finder(handler)
    found = asyncio.run(finder.search_by_barcode("737628064502"))
    missing = asyncio.run(finder.search_by_barcode("0000"))

    assert found is not None
    assert found.name == "Rice noodles"
    assert found.barcode == "737628064502"
    assert missing is None


def test_server_errors_raise_infrastructure_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="oops")

    with pytest.raises(InfrastructureError):
        asyncio.run(_finder(handler).search_by_fuzzy_name("rice"))


def test_transport_errors_raise_infrastructure_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(InfrastructureError):
        asyncio.run(_finder(handler).search_by_barcode("123"))


def test_non_json_bodies_raise_infrastructure_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            text="<html>Down for maintenance</html>",
            headers={"content-type": "text/html"},
        )

    with pytest.raises(InfrastructureError):
        asyncio.run(_finder(handler).search_by_fuzzy_name("rice"))
    with pytest.raises(InfrastructureError):
        asyncio.run(_finder(handler).search_by_barcode("123"))


def test_search_is_rate_limited() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"products": []})

    finder = _finder(handler, search_limiter=TokenBucket(1, clock=lambda: 0.0))

    assert asyncio.run(finder.search_by_fuzzy_name("rice")) == []
    with pytest.raises(InfrastructureError):
        asyncio.run(finder.search_by_fuzzy_name("rice"))


def test_create_uses_staging_credentials_and_user_agent() -> None:
    finder = OpenFoodFactsIngredientFinder.create(STAGING_BASE_URL, "fj/1.0")

    assert finder.http_client.headers["User-Agent"] == "fj/1.0"
    assert finder.http_client.auth is not None
    asyncio.run(finder.close())
