"""
HTTP tests for the property endpoints.
"""

import pytest
import uuid
from httpx import AsyncClient

from conftest import make_image_bytes, property_form


async def create_via_api(client: AsyncClient, files=None, **overrides):
    response = await client.post("/api/properties", data=property_form(**overrides), files=files)
    assert response.status_code == 201, response.text
    return response.json()


class TestPropertyCreate:
    """Test POST /api/properties."""

    @pytest.mark.asyncio
    async def test_create_returns_camel_case_record(self, async_client: AsyncClient):
        body = await create_via_api(async_client, featured="true")

        assert body["id"]
        assert body["propertyId"] == "PROP-001"
        assert body["houseNumber"] == "12"
        assert body["areaSize"] == "10 Marla"
        assert body["propertyType"] == "house"
        assert body["price"] == 250000
        assert body["featured"] is True
        assert body["features"] == ["Garden", "Solar panels"]
        assert body["images"] == []
        assert body["imageUrls"] == []
        assert "createdAt" in body
        assert "updatedAt" in body

    @pytest.mark.asyncio
    async def test_create_with_trailing_slash(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties/", data=property_form())
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_create_with_images(self, async_client: AsyncClient, png_bytes: bytes):
        files = [
            ("images", ("front.png", png_bytes, "image/png")),
            ("images", ("side.jpg", make_image_bytes("JPEG"), "image/jpeg")),
        ]
        body = await create_via_api(async_client, files=files)

        assert len(body["images"]) == 2
        assert body["images"][0].startswith("uploads/properties/property-")
        assert body["images"][1].endswith(".jpg")
        assert body["imageUrls"][0] == f"http://testserver/{body['images'][0]}"

    @pytest.mark.asyncio
    async def test_uploaded_image_is_served(self, async_client: AsyncClient, png_bytes: bytes):
        body = await create_via_api(async_client, files=[("images", ("front.png", png_bytes, "image/png"))])

        response = await async_client.get(f"/{body['images'][0]}")

        assert response.status_code == 200
        assert response.content == png_bytes
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET"

    @pytest.mark.asyncio
    async def test_create_missing_fields(self, async_client: AsyncClient):
        form = property_form()
        del form["title"]
        del form["price"]

        response = await async_client.post("/api/properties", data=form)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "title is required" in error["message"]
        assert "price is required" in error["message"]
        assert {detail["field"] for detail in error["details"]} == {"title", "price"}

    @pytest.mark.asyncio
    async def test_create_invalid_property_type(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties", data=property_form(propertyType="castle"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_create_features_not_array(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties", data=property_form(features="Garden"))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "features must be a JSON array"

    @pytest.mark.asyncio
    async def test_create_duplicate_property_id(self, async_client: AsyncClient):
        await create_via_api(async_client)

        response = await async_client.post("/api/properties", data=property_form(title="Copy"))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "DUPLICATE_KEY"
        assert error["message"] == "Property with this propertyId already exists"

    @pytest.mark.asyncio
    async def test_create_rejects_non_image(self, async_client: AsyncClient):
        files = [("images", ("notes.txt", b"plain text", "text/plain"))]

        response = await async_client.post("/api/properties", data=property_form(), files=files)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Only image files are allowed!"
        assert (await async_client.get("/api/properties")).json() == []

    @pytest.mark.asyncio
    async def test_create_too_many_images(self, async_client: AsyncClient, png_bytes: bytes):
        files = [("images", (f"{n}.png", png_bytes, "image/png")) for n in range(11)]

        response = await async_client.post("/api/properties", data=property_form(), files=files)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "TOO_MANY_FILES"


class TestPropertyRead:
    """Test the property listing, lookup and search endpoints."""

    @pytest.mark.asyncio
    async def test_list_all(self, async_client: AsyncClient):
        await create_via_api(async_client, propertyId="P-1")
        await create_via_api(async_client, propertyId="P-2")

        response = await async_client.get("/api/properties")

        assert response.status_code == 200
        assert [p["propertyId"] for p in response.json()] == ["P-1", "P-2"]

    @pytest.mark.asyncio
    async def test_list_empty(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, async_client: AsyncClient):
        created = await create_via_api(async_client)

        response = await async_client.get(f"/api/properties/{created['id']}")

        assert response.status_code == 200
        assert response.json()["propertyId"] == "PROP-001"

    @pytest.mark.asyncio
    async def test_get_invalid_id(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/not-an-id")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_ID"
        assert error["message"] == "Invalid property ID format"

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/properties/{uuid.uuid4()}")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "Property not found"

    @pytest.mark.asyncio
    async def test_featured(self, async_client: AsyncClient):
        await create_via_api(async_client, propertyId="P-1", featured="true")
        await create_via_api(async_client, propertyId="P-2")

        response = await async_client.get("/api/properties/featured")

        assert response.status_code == 200
        assert [p["propertyId"] for p in response.json()] == ["P-1"]

    @pytest.mark.asyncio
    async def test_search_price_range_and_bedrooms(self, async_client: AsyncClient):
        await create_via_api(async_client, propertyId="P-1", price="90000", bedrooms="3")
        await create_via_api(async_client, propertyId="P-2", price="150000", bedrooms="3")
        await create_via_api(async_client, propertyId="P-3", price="300000", bedrooms="4")
        await create_via_api(async_client, propertyId="P-4", price="200000", bedrooms="2")

        response = await async_client.get(
            "/api/properties/search", params={"minPrice": "100000", "maxPrice": "300000", "bedrooms": "3"}
        )

        assert response.status_code == 200
        assert sorted(p["propertyId"] for p in response.json()) == ["P-2", "P-3"]

    @pytest.mark.asyncio
    async def test_search_location_and_type(self, async_client: AsyncClient):
        await create_via_api(async_client, propertyId="P-1", location="Gulberg, Lahore", propertyType="apartment")
        await create_via_api(async_client, propertyId="P-2", location="Gulberg, Lahore")
        await create_via_api(async_client, propertyId="P-3", location="Clifton, Karachi", propertyType="apartment")

        response = await async_client.get(
            "/api/properties/search", params={"location": "LAHORE", "propertyType": "apartment"}
        )

        assert [p["propertyId"] for p in response.json()] == ["P-1"]

    @pytest.mark.asyncio
    async def test_search_ignores_empty_parameters(self, async_client: AsyncClient):
        await create_via_api(async_client)

        response = await async_client.get("/api/properties/search", params={"location": "", "bedrooms": ""})

        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_search_invalid_number(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/search", params={"minPrice": "cheap"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_paginated(self, async_client: AsyncClient):
        for number in range(1, 4):
            await create_via_api(async_client, propertyId=f"P-{number}")

        response = await async_client.get("/api/properties/paginated", params={"page": 1, "limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert [p["propertyId"] for p in body["properties"]] == ["P-3", "P-2"]
        assert body["pagination"] == {
            "currentPage": 1,
            "totalPages": 2,
            "totalProperties": 3,
            "limit": 2,
            "hasNext": True,
            "hasPrev": False,
        }

    @pytest.mark.asyncio
    async def test_paginated_past_last_page(self, async_client: AsyncClient):
        await create_via_api(async_client)

        response = await async_client.get("/api/properties/paginated", params={"page": 9})

        body = response.json()
        assert body["properties"] == []
        assert body["pagination"]["currentPage"] == 9
        assert body["pagination"]["hasNext"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params, page, limit",
        [
            ({"page": "0"}, 1, 10),
            ({"page": "-3"}, 1, 10),
            ({"page": "abc"}, 1, 10),
            ({"page": ""}, 1, 10),
            ({"limit": "0"}, 1, 10),
            ({"limit": "many"}, 1, 10),
            ({"limit": "101"}, 1, 100),
            ({"page": "2", "limit": "x"}, 2, 10),
        ],
    )
    async def test_paginated_invalid_parameters_fall_back(self, async_client: AsyncClient, params, page, limit):
        response = await async_client.get("/api/properties/paginated", params=params)

        assert response.status_code == 200
        pagination = response.json()["pagination"]
        assert pagination["currentPage"] == page
        assert pagination["limit"] == limit

    @pytest.mark.asyncio
    async def test_search_paginated(self, async_client: AsyncClient):
        for number in range(1, 4):
            await create_via_api(async_client, propertyId=f"P-{number}", bathrooms=str(number))

        response = await async_client.get(
            "/api/properties/search/paginated", params={"bathrooms": "2", "limit": "1"}
        )

        body = response.json()
        assert [p["propertyId"] for p in body["properties"]] == ["P-3"]
        assert body["pagination"]["totalProperties"] == 2
        assert body["pagination"]["totalPages"] == 2


class TestPropertyUpdate:
    """Test PUT /api/properties/{id}."""

    @pytest.mark.asyncio
    async def test_partial_update(self, async_client: AsyncClient):
        created = await create_via_api(async_client)

        response = await async_client.put(
            f"/api/properties/{created['id']}", data={"title": "Renovated", "price": ""}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renovated"
        assert body["price"] == 250000
        assert body["features"] == ["Garden", "Solar panels"]

    @pytest.mark.asyncio
    async def test_update_price(self, async_client: AsyncClient):
        created = await create_via_api(async_client)

        response = await async_client.put(f"/api/properties/{created['id']}", data={"price": "150"})

        assert response.json()["price"] == 150

    @pytest.mark.asyncio
    async def test_update_featured_never_switches_off(self, async_client: AsyncClient):
        created = await create_via_api(async_client, featured="true")

        response = await async_client.put(f"/api/properties/{created['id']}", data={"featured": "false"})

        assert response.json()["featured"] is True

    @pytest.mark.asyncio
    async def test_update_appends_images(self, async_client: AsyncClient, png_bytes: bytes):
        created = await create_via_api(async_client, files=[("images", ("a.png", png_bytes, "image/png"))])

        response = await async_client.put(
            f"/api/properties/{created['id']}",
            data={"features": '["Pool"]'},
            files=[("images", ("b.png", png_bytes, "image/png"))],
        )

        body = response.json()
        assert body["images"][0] == created["images"][0]
        assert len(body["images"]) == 2
        assert body["features"] == ["Pool"]

    @pytest.mark.asyncio
    async def test_update_unknown(self, async_client: AsyncClient):
        response = await async_client.put(f"/api/properties/{uuid.uuid4()}", data={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_invalid_id(self, async_client: AsyncClient):
        response = await async_client.put("/api/properties/123", data={"title": "x"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid property ID format"


class TestPropertyDelete:
    """Test the property delete endpoints."""

    @pytest.mark.asyncio
    async def test_delete(self, async_client: AsyncClient, png_bytes: bytes):
        created = await create_via_api(async_client, files=[("images", ("a.png", png_bytes, "image/png"))])

        response = await async_client.delete(f"/api/properties/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Property removed"}
        assert (await async_client.get(f"/api/properties/{created['id']}")).status_code == 404
        assert (await async_client.get(f"/{created['images'][0]}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, async_client: AsyncClient):
        response = await async_client.delete(f"/api/properties/{uuid.uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_image(self, async_client: AsyncClient, png_bytes: bytes):
        files = [("images", (f"{name}.png", png_bytes, "image/png")) for name in ("a", "b", "c")]
        created = await create_via_api(async_client, files=files)
        first, middle, last = created["images"]

        response = await async_client.delete(f"/api/properties/{created['id']}/images/1")

        assert response.status_code == 200
        assert response.json()["images"] == [first, last]
        assert (await async_client.get(f"/{middle}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_image_out_of_range(self, async_client: AsyncClient):
        created = await create_via_api(async_client)

        response = await async_client.delete(f"/api/properties/{created['id']}/images/0")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid image index"
