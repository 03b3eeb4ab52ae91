"""Remote catalog HTTP client.

Thin async client over the catalog REST API. Every call is a GET that
returns whole collections or single records; failures are raised as
domain exceptions so page loads can map them to error states.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from catalog_explorer.catalog.models import (
    Brand,
    CatalogRecord,
    CatalogSnapshot,
    Model,
    Product,
    ProductVariant,
    Series,
)
from catalog_explorer.domain.exceptions import CatalogFetchError, EntityNotFoundError
from catalog_explorer.infrastructure.config import settings

logger = structlog.get_logger()

R = TypeVar("R", bound=CatalogRecord)

BRANDS_PATH = "/brands"
SERIES_PATH = "/series"
MODELS_PATH = "/models"
PRODUCTS_PATH = "/products"
VARIANTS_PATH = "/product-variants"

_ENVELOPE_KEYS = {"data", "success", "message"}


def _entity_path(collection_path: str, entity_id: str) -> str:
    """Build a by-id path; the id is escaped as a single path segment."""
    return f"{collection_path}/{quote(entity_id, safe='')}"


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently as one batch.

    The batch succeeds only if every awaitable succeeds. On the first
    failure, or if the caller is cancelled, all outstanding awaitables are
    cancelled and awaited before the error propagates.

    Args:
        aws: Awaitables to run.

    Returns:
        Results in argument order.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class CatalogAPIClient:
    """HTTP client for the remote catalog REST API.

    Example usage:
        async with CatalogAPIClient(base_url) as client:
            snapshot = await client.fetch_snapshot()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        request_id: str | None = None,
    ) -> None:
        """Initialize the catalog client.

        Args:
            base_url: Catalog API base URL.
            timeout: Request timeout in seconds.
            request_id: Optional request ID for correlation.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.request_id = request_id
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "CatalogAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.request_id:
                headers["X-Request-ID"] = self.request_id
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # Transport
    # =========================================================================

    async def _request(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Issue a GET request.

        Raises:
            CatalogFetchError: On timeout or transport failure.
        """
        client = await self._get_client()

        # Filter out None params
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("Fetching catalog resource", path=path, params=params or None)

        try:
            return await client.request("GET", path, params=params or None)
        except httpx.TimeoutException as e:
            logger.error("Catalog request timeout", path=path, error=str(e))
            raise CatalogFetchError(path, "request timed out", status_code=504) from e
        except httpx.RequestError as e:
            logger.error("Catalog request failed", path=path, error=str(e))
            raise CatalogFetchError(path, f"request failed: {e}") from e

    def _decode(self, path: str, response: httpx.Response) -> Any:
        """Check status and unwrap the JSON payload.

        The API returns bare arrays/objects; an `{"data": ..., "success": ...}`
        envelope is unwrapped as well.

        Raises:
            CatalogFetchError: On error status or undecodable body.
        """
        if response.status_code >= 400:
            logger.error(
                "Catalog request rejected",
                path=path,
                status_code=response.status_code,
            )
            raise CatalogFetchError(
                path,
                f"unexpected status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogFetchError(
                path, "response is not valid JSON", status_code=response.status_code
            ) from e

        if isinstance(payload, dict) and "data" in payload and set(payload) <= _ENVELOPE_KEYS:
            if payload.get("success") is False:
                raise CatalogFetchError(
                    path,
                    payload.get("message") or "API reported failure",
                    status_code=response.status_code,
                )
            return payload["data"]
        return payload

    async def _get_list(
        self,
        path: str,
        record_type: type[R],
        params: dict[str, Any] | None = None,
    ) -> list[R]:
        """Fetch and parse a collection."""
        payload = self._decode(path, await self._request(path, params))
        if not isinstance(payload, list):
            raise CatalogFetchError(path, "expected a JSON array")
        try:
            return [record_type.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.error(
                "Malformed catalog payload",
                path=path,
                record_type=record_type.__name__,
                error_count=e.error_count(),
            )
            raise CatalogFetchError(path, f"malformed {record_type.__name__} record") from e

    async def _get_one(
        self,
        path: str,
        record_type: type[R],
        entity_id: str,
    ) -> R:
        """Fetch and parse a single record.

        Raises:
            EntityNotFoundError: On 404 or an empty body.
            CatalogFetchError: On any other failure.
        """
        response = await self._request(path)
        if response.status_code == 404:
            raise EntityNotFoundError(record_type.__name__, entity_id)

        payload = self._decode(path, response)
        if payload is None:
            raise EntityNotFoundError(record_type.__name__, entity_id)
        try:
            return record_type.model_validate(payload)
        except ValidationError as e:
            raise CatalogFetchError(path, f"malformed {record_type.__name__} record") from e

    async def health_check(self) -> bool:
        """Check that the catalog API answers.

        Returns:
            True if the brands collection responds without an error status.
        """
        try:
            response = await self._request(BRANDS_PATH)
        except CatalogFetchError as e:
            logger.warning("Catalog health check failed", error=e.message)
            return False
        return response.status_code < 400

    # =========================================================================
    # Brands
    # =========================================================================

    async def list_brands(self) -> list[Brand]:
        """Fetch all brands."""
        return await self._get_list(BRANDS_PATH, Brand)

    async def get_brand(self, brand_id: str) -> Brand:
        """Fetch a brand by ID."""
        return await self._get_one(_entity_path(BRANDS_PATH, brand_id), Brand, brand_id)

    # =========================================================================
    # Series
    # =========================================================================

    async def list_series(self, brand_id: str | None = None) -> list[Series]:
        """Fetch series, optionally filtered server-side by brand.

        Args:
            brand_id: Optional brand filter.

        Returns:
            Series records.
        """
        return await self._get_list(SERIES_PATH, Series, params={"brandId": brand_id})

    async def get_series(self, series_id: str) -> Series:
        """Fetch a series by ID."""
        return await self._get_one(_entity_path(SERIES_PATH, series_id), Series, series_id)

    # =========================================================================
    # Models
    # =========================================================================

    async def list_models(self, series_id: str | None = None) -> list[Model]:
        """Fetch models, optionally filtered server-side by series.

        Args:
            series_id: Optional series filter.

        Returns:
            Model records.
        """
        return await self._get_list(MODELS_PATH, Model, params={"seriesId": series_id})

    async def get_model(self, model_id: str) -> Model:
        """Fetch a model by ID."""
        return await self._get_one(_entity_path(MODELS_PATH, model_id), Model, model_id)

    # =========================================================================
    # Products
    # =========================================================================

    async def list_products(self) -> list[Product]:
        """Fetch all products."""
        return await self._get_list(PRODUCTS_PATH, Product)

    async def get_product(self, product_id: str) -> Product:
        """Fetch a product by ID."""
        return await self._get_one(
            _entity_path(PRODUCTS_PATH, product_id), Product, product_id
        )

    # =========================================================================
    # Variants
    # =========================================================================

    async def list_variants(self, model_id: str | None = None) -> list[ProductVariant]:
        """Fetch product variants, optionally filtered server-side by model.

        Args:
            model_id: Optional model filter.

        Returns:
            Variant records.
        """
        return await self._get_list(
            VARIANTS_PATH, ProductVariant, params={"modelId": model_id}
        )

    # =========================================================================
    # Snapshot
    # =========================================================================

    async def fetch_snapshot(self, generation: int = 0) -> CatalogSnapshot:
        """Fetch all five collections as one parallel batch.

        Args:
            generation: Generation number to stamp on the snapshot.

        Returns:
            Catalog snapshot.

        Raises:
            CatalogFetchError: If any collection fails; the remaining
                requests are cancelled.
        """
        brands, series, models, products, variants = await gather_or_cancel(
            self.list_brands(),
            self.list_series(),
            self.list_models(),
            self.list_products(),
            self.list_variants(),
        )
        snapshot = CatalogSnapshot(
            brands=tuple(brands),
            series=tuple(series),
            models=tuple(models),
            products=tuple(products),
            variants=tuple(variants),
            generation=generation,
        )
        logger.info(
            "Fetched catalog snapshot",
            generation=generation,
            request_id=self.request_id,
            **snapshot.counts,
        )
        return snapshot


# ============================================================================
# Client Factory
# ============================================================================


def get_catalog_client(request_id: str | None = None) -> CatalogAPIClient:
    """Create a catalog client from settings.

    Args:
        request_id: Request ID for correlation.

    Returns:
        CatalogAPIClient instance.
    """
    return CatalogAPIClient(
        base_url=settings.catalog_api_url,
        timeout=settings.catalog_api_timeout,
        request_id=request_id,
    )
