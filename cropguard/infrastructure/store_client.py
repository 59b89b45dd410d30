"""
Infrastructure layer: Plot store API client with retry logic.
"""
from datetime import datetime
from typing import List, Dict, Any, Optional
import logging
from pydantic import BaseModel
import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from cropguard.config import settings
from cropguard.domain.errors import PlantNotFoundError, PlotNotFoundError
from cropguard.domain.models import (
    DeadStatus,
    DiseasedStatus,
    DiseaseRef,
    GridPosition,
    HealthyStatus,
    Plant,
    PlantCreate,
    PlantRecord,
    Plot,
    RecoveringStatus,
    StatusKind,
    UnderObservationStatus,
)
from cropguard.infrastructure.api_constants import APIConstants, StoreAPIEndpoints

logger = logging.getLogger(__name__)


# Pydantic models for store responses
class PlantPayload(BaseModel):
    """Plant as stored: flat status string plus optional disease."""
    id: str
    plot_id: str
    name: str = ""
    crop_type: Optional[str] = None
    position: Optional[GridPosition] = None
    status: StatusKind = StatusKind.HEALTHY
    current_disease: Optional[DiseaseRef] = None
    planted_date: Optional[str] = None
    last_diagnosis_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    def to_domain(self) -> Plant:
        """Convert to the domain Plant, folding the disease into its status."""
        if self.status is StatusKind.DISEASED and self.current_disease is None:
            logger.warning(f"Plant {self.id} is Diseased without a disease reference, "
                           f"treating it as UnderObservation")
            status = UnderObservationStatus()
        elif self.status is StatusKind.DISEASED:
            status = DiseasedStatus(
                disease=self.current_disease,
                diagnosed_at=self.last_diagnosis_date,
            )
        elif self.status is StatusKind.RECOVERING:
            status = RecoveringStatus(disease=self.current_disease)
        elif self.status is StatusKind.UNDER_OBSERVATION:
            status = UnderObservationStatus()
        elif self.status is StatusKind.DEAD:
            status = DeadStatus()
        else:
            status = HealthyStatus()

        return Plant(
            id=self.id,
            plot_id=self.plot_id,
            name=self.name,
            crop_type=self.crop_type,
            position=self.position,
            status=status,
            planted_date=self.planted_date,
            last_diagnosis_date=self.last_diagnosis_date,
            last_updated=self.last_updated,
        )

    @classmethod
    def from_domain(cls, plant: Plant) -> "PlantPayload":
        return cls(
            id=plant.id,
            plot_id=plant.plot_id,
            name=plant.name,
            crop_type=plant.crop_type,
            position=plant.position,
            status=plant.status_kind,
            current_disease=plant.disease,
            planted_date=plant.planted_date,
            last_diagnosis_date=plant.last_diagnosis_date,
            last_updated=plant.last_updated,
        )


class PlantsResponse(BaseModel):
    """Response from plot plants endpoint."""
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[PlantPayload]


class PlotsResponse(BaseModel):
    """Response from farm plots endpoint."""
    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[Plot]


class ExternalAPIError(Exception):
    """Custom exception for store API errors."""

    def __init__(self, message: str, status_code: int = 502):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StoreClient:
    """
    Client for the plot/plant store API.
    Implements retry logic with exponential backoff.
    """

    def __init__(self):
        """Initialize the store client with configuration."""
        self.base_url = settings.store_api_base_url
        self.api_key = settings.store_api_key
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "accept": APIConstants.CONTENT_TYPE_JSON,
            },
            timeout=settings.store_timeout_seconds,
        )

    async def __aenter__(self) -> "StoreClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
        reraise=True,
    )
    async def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Send a request, retrying on server and transport errors.

        Raises:
            ExternalAPIError: On client errors (4xx), which are not retried
            httpx.HTTPStatusError: On server errors (5xx) once retries run out
            httpx.RequestError: On transport errors once retries run out
        """
        response = await self.client.request(method, endpoint, **kwargs)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            # Retry on server errors (5xx)
            if e.response.status_code >= 500:
                logger.warning(f"Store returned {e.response.status_code} for {method} {endpoint}")
                raise
            # Don't retry on client errors (4xx)
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        return response

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Response data as dictionary (empty for bodiless responses)

        Raises:
            ExternalAPIError: If the request fails after retries
        """
        try:
            response = await self._send(method, endpoint, **kwargs)
        except httpx.HTTPStatusError as e:
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            raise ExternalAPIError(f"API request error: {str(e)}")

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    async def _get_all_pages(self, endpoint: str, params: Optional[dict] = None) -> List[dict]:
        """Collect ``results`` across paginated responses."""
        results = []
        data = await self._make_request(
            "GET",
            endpoint,
            params={"page_size": APIConstants.DEFAULT_PAGE_SIZE, **(params or {})},
        )
        results.extend(data.get("results", []))
        while data.get("next"):
            data = await self._make_request("GET", data["next"])
            results.extend(data.get("results", []))
        return results

    async def get_plot_by_id(self, plot_id: str) -> Plot:
        """
        Fetch a plot.

        Args:
            plot_id: Unique identifier for the plot

        Returns:
            Plot instance

        Raises:
            PlotNotFoundError: If the store has no such plot
            ExternalAPIError: If the request fails
        """
        try:
            data = await self._make_request("GET", StoreAPIEndpoints.plot(plot_id))
        except ExternalAPIError as e:
            if e.status_code == 404:
                raise PlotNotFoundError(plot_id)
            raise
        return Plot(**data)

    async def find_plants_by_plot_id(self, plot_id: str) -> List[Plant]:
        """
        Fetch all plants of a plot, in store (creation) order.

        Args:
            plot_id: Unique identifier for the plot

        Returns:
            List of Plant instances
        """
        results = await self._get_all_pages(StoreAPIEndpoints.plot_plants(plot_id))
        response = PlantsResponse(count=len(results), results=results)
        return [payload.to_domain() for payload in response.results]

    async def find_plant_by_plot_id_and_position(
        self,
        plot_id: str,
        row: int,
        column: int,
    ) -> Optional[Plant]:
        """
        Fetch the plant occupying a cell, if any.

        Args:
            plot_id: Unique identifier for the plot
            row: Cell row
            column: Cell column

        Returns:
            Plant instance or None when the cell is free
        """
        data = await self._make_request(
            "GET",
            StoreAPIEndpoints.plot_plants(plot_id),
            params={"row": row, "column": column},
        )
        response = PlantsResponse(**data)
        if not response.results:
            return None
        return response.results[0].to_domain()

    async def find_plots_by_farm_id(self, farm_id: str) -> List[Plot]:
        """Fetch all plots of a farm."""
        results = await self._get_all_pages(StoreAPIEndpoints.farm_plots(farm_id))
        return PlotsResponse(count=len(results), results=results).results

    async def get_plant_by_id(self, plant_id: str) -> Plant:
        """
        Fetch a plant.

        Raises:
            PlantNotFoundError: If the store has no such plant
            ExternalAPIError: If the request fails
        """
        try:
            data = await self._make_request("GET", StoreAPIEndpoints.plant(plant_id))
        except ExternalAPIError as e:
            if e.status_code == 404:
                raise PlantNotFoundError(plant_id)
            raise
        return PlantPayload(**data).to_domain()

    async def create_plant(self, data: PlantCreate) -> Plant:
        """Create a Healthy plant from creation data."""
        created = await self._make_request(
            "POST",
            StoreAPIEndpoints.PLANTS,
            json={**data.model_dump(mode="json"), "status": StatusKind.HEALTHY.value},
        )
        return PlantPayload(**created).to_domain()

    async def update_plant(self, plant: Plant) -> Plant:
        """Persist a plant, returning the stored version."""
        payload = PlantPayload.from_domain(plant)
        updated = await self._make_request(
            "PUT",
            StoreAPIEndpoints.plant(plant.id),
            json=payload.model_dump(mode="json"),
        )
        return PlantPayload(**updated).to_domain()

    async def delete_plant(self, plant_id: str) -> None:
        """Delete a plant; the store cascades to its records."""
        await self._make_request("DELETE", StoreAPIEndpoints.plant(plant_id))

    async def create_plant_record(self, record: PlantRecord) -> PlantRecord:
        """Attach a historical record to a plant."""
        created = await self._make_request(
            "POST",
            StoreAPIEndpoints.plant_records(record.plant_id),
            json=record.model_dump(mode="json", exclude_none=True),
        )
        return PlantRecord(**created)


# Singleton instance
_store_client: Optional[StoreClient] = None


def get_store_client() -> StoreClient:
    """
    Get or create the singleton store client instance.

    Returns:
        StoreClient instance
    """
    global _store_client
    if _store_client is None:
        _store_client = StoreClient()
    return _store_client
