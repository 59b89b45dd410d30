"""
Unit tests for the plot store client.

Tests cover:
- Successful store responses
- Wire format conversion to domain plants
- Retry logic on 5xx errors
- No retry on 4xx errors
- Async context manager
"""
import pytest
import httpx
import respx
from tenacity import wait_none
from unittest.mock import AsyncMock

from cropguard.domain.errors import PlantNotFoundError, PlotNotFoundError
from cropguard.domain.models import (
    Plant,
    Plot,
    PlantCreate,
    StatusKind,
)
from cropguard.infrastructure.store_client import (
    ExternalAPIError,
    PlantPayload,
    StoreClient,
    get_store_client,
)

from conftest import BLIGHT, FIXED_TIME, make_plant


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    """Retry immediately instead of backing off."""
    monkeypatch.setattr(StoreClient._send.retry, "wait", wait_none())


def plant_json(plant_id, row=None, column=None, status="Healthy", disease=None):
    data = {"id": plant_id, "plot_id": "plot_1", "name": plant_id, "status": status}
    if row is not None:
        data["position"] = {"row": row, "column": column}
    if disease is not None:
        data["current_disease"] = disease
    return data


def page(results, next_url=None):
    return {"count": len(results), "next": next_url, "previous": None, "results": results}


# ============================================================
# Client Initialization Tests
# ============================================================

class TestClientInitialization:
    """Tests for store client initialization."""
    
    def test_client_initialization(self):
        client = StoreClient()
        
        assert client.base_url is not None
        assert client.client is not None
    
    def test_singleton_pattern(self):
        """get_store_client should return the same instance."""
        import cropguard.infrastructure.store_client as module
        module._store_client = None
        
        client1 = get_store_client()
        client2 = get_store_client()
        
        assert client1 is client2
    
    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        client = StoreClient()
        client.close = AsyncMock()
        
        async with client as ctx_client:
            assert ctx_client is client
        
        client.close.assert_called_once()


# ============================================================
# Wire Format Tests
# ============================================================

class TestPlantPayload:
    """Tests for store record to domain conversion."""
    
    def test_diseased_record(self):
        payload = PlantPayload(**plant_json(
            "p1", 0, 0, "Diseased", {"disease_id": "d_blight", "disease_name": "Late blight"}
        ))
        
        plant = payload.to_domain()
        
        assert plant.status_kind is StatusKind.DISEASED
        assert plant.disease == BLIGHT
    
    def test_diseased_without_disease_downgraded(self):
        plant = PlantPayload(**plant_json("p1", 0, 0, "Diseased")).to_domain()
        
        assert plant.status_kind is StatusKind.UNDER_OBSERVATION
        assert plant.disease is None
    
    def test_healthy_record_drops_stale_disease(self):
        plant = PlantPayload(**plant_json(
            "p1", 0, 0, "Healthy", {"disease_id": "d_blight", "disease_name": "Late blight"}
        )).to_domain()
        
        assert plant.is_healthy
        assert plant.disease is None
    
    def test_recovering_keeps_disease(self):
        plant = PlantPayload(**plant_json(
            "p1", 0, 0, "Recovering", {"disease_id": "d_blight", "disease_name": "Late blight"}
        )).to_domain()
        
        assert plant.disease == BLIGHT
    
    def test_from_domain_flattens_status(self):
        plant = make_plant("p1", 0, 0, "Diseased", BLIGHT).model_copy(
            update={"last_diagnosis_date": FIXED_TIME}
        )
        
        payload = PlantPayload.from_domain(plant)
        
        assert payload.status is StatusKind.DISEASED
        assert payload.current_disease == BLIGHT
        assert payload.to_domain().status.diagnosed_at == FIXED_TIME


# ============================================================
# Store Response Tests
# ============================================================

class TestStoreResponses:
    """Tests for store response handling."""
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_get_plot(self):
        client = StoreClient()
        respx.get(f"{client.base_url}/plots/plot_1/").mock(
            return_value=httpx.Response(200, json={
                "id": "plot_1", "farm_id": "farm_1", "rows": 3, "columns": 4,
            })
        )
        
        plot = await client.get_plot_by_id("plot_1")
        
        assert isinstance(plot, Plot)
        assert (plot.rows, plot.columns) == (3, 4)
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_get_plot_not_found(self):
        client = StoreClient()
        respx.get(f"{client.base_url}/plots/nope/").mock(
            return_value=httpx.Response(404, text="Not Found")
        )
        
        with pytest.raises(PlotNotFoundError):
            await client.get_plot_by_id("nope")
        
        assert respx.calls.call_count == 1
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_get_plant_not_found(self):
        client = StoreClient()
        respx.get(f"{client.base_url}/plants/nope/").mock(
            return_value=httpx.Response(404, text="Not Found")
        )
        
        with pytest.raises(PlantNotFoundError):
            await client.get_plant_by_id("nope")
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_find_plants_follows_pages(self):
        client = StoreClient()
        next_url = f"{client.base_url}/plots/plot_1/plants/?page=2"
        route = respx.get(f"{client.base_url}/plots/plot_1/plants/")
        route.side_effect = [
            httpx.Response(200, json=page([plant_json("a", 0, 0)], next_url)),
            httpx.Response(200, json=page([plant_json("b", 0, 1, "Dead")])),
        ]
        
        plants = await client.find_plants_by_plot_id("plot_1")
        
        assert [p.id for p in plants] == ["a", "b"]
        assert all(isinstance(p, Plant) for p in plants)
        assert plants[1].status_kind is StatusKind.DEAD
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_find_plant_by_position(self):
        client = StoreClient()
        route = respx.get(f"{client.base_url}/plots/plot_1/plants/").mock(
            return_value=httpx.Response(200, json=page([plant_json("a", 1, 2)]))
        )
        
        plant = await client.find_plant_by_plot_id_and_position("plot_1", 1, 2)
        
        assert plant.id == "a"
        request = route.calls.last.request
        assert request.url.params["row"] == "1"
        assert request.url.params["column"] == "2"
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_find_plant_by_position_free_cell(self):
        client = StoreClient()
        respx.get(f"{client.base_url}/plots/plot_1/plants/").mock(
            return_value=httpx.Response(200, json=page([]))
        )
        
        assert await client.find_plant_by_plot_id_and_position("plot_1", 0, 0) is None
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_create_plant_posts_healthy(self):
        client = StoreClient()
        route = respx.post(f"{client.base_url}/plants/").mock(
            return_value=httpx.Response(201, json=plant_json("new", 0, 1))
        )
        
        plant = await client.create_plant(PlantCreate(plot_id="plot_1", name="Tomato"))
        
        assert plant.id == "new"
        assert b'"status":"Healthy"' in route.calls.last.request.content.replace(b" ", b"")
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_delete_plant_no_content(self):
        client = StoreClient()
        respx.delete(f"{client.base_url}/plants/p1/").mock(
            return_value=httpx.Response(204)
        )
        
        assert await client.delete_plant("p1") is None
        await client.close()


# ============================================================
# Error Handling Tests
# ============================================================

class TestErrorHandling:
    """Tests for error handling and retries."""
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_error_no_retry(self):
        client = StoreClient()
        respx.get(f"{client.base_url}/test").mock(
            return_value=httpx.Response(400, text="Bad Request")
        )
        
        with pytest.raises(ExternalAPIError, match="400") as exc_info:
            await client._make_request("GET", "/test")
        
        assert exc_info.value.status_code == 400
        assert respx.calls.call_count == 1
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_error_triggers_retry(self):
        client = StoreClient()
        route = respx.get(f"{client.base_url}/test")
        route.side_effect = [
            httpx.Response(500, text="Internal Server Error"),
            httpx.Response(200, json={"result": "success"}),
        ]
        
        result = await client._make_request("GET", "/test")
        
        assert result == {"result": "success"}
        assert respx.calls.call_count == 2
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_persistent_5xx_surfaces_after_retries(self):
        client = StoreClient()
        respx.get(f"{client.base_url}/test").mock(
            return_value=httpx.Response(503, text="Unavailable")
        )
        
        with pytest.raises(ExternalAPIError) as exc_info:
            await client._make_request("GET", "/test")
        
        assert exc_info.value.status_code == 503
        assert respx.calls.call_count == 3
        await client.close()
    
    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_wrapped(self):
        client = StoreClient()
        respx.get(f"{client.base_url}/test").mock(
            side_effect=httpx.ConnectError("connection refused")
        )
        
        with pytest.raises(ExternalAPIError, match="API request error"):
            await client._make_request("GET", "/test")
        
        assert respx.calls.call_count == 3
        await client.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
