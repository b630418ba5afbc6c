"""
Tests for error handling and request validation.
Covers exception classes, error response formatting, the request middleware
and payload schemas.
"""

import json

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, OperationalError

from bayhomes.middleware import RequestContextMiddleware
from bayhomes.schemas.project import ProjectCreate
from bayhomes.schemas.property import (
    PropertyCreate,
    PropertyStatusUpdate,
    PropertyUpdate,
    parse_property_update
)
from bayhomes.services.error_handler import ErrorHandlerService, register_exception_handlers
from bayhomes.utils.exceptions import (
    BlobStoreError,
    DuplicateResourceError,
    NotFoundError,
    RelatedEntityNotFoundError,
    ValidationError
)


class TestExceptions:
    """Status codes and error codes of the API exceptions."""

    def test_not_found(self):
        exc = NotFoundError("Property", "123")
        assert exc.status_code == 404
        assert exc.detail == "Property not found with ID: 123"

    def test_related_entity_not_found(self):
        exc = RelatedEntityNotFoundError("Area", "Downtown")
        assert exc.status_code == 400
        assert exc.error_code == "RELATED_ENTITY_NOT_FOUND"
        assert "Please create the area first" in exc.detail

    def test_duplicate(self):
        exc = DuplicateResourceError("Area", "Downtown")
        assert exc.status_code == 409
        assert "Downtown" in exc.detail

    def test_blob_store_error(self):
        exc = BlobStoreError("upload", "timeout")
        assert exc.status_code == 500
        assert exc.error_code == "BLOB_STORE_ERROR"
        assert exc.detail == "Blob store upload failed: timeout"


class TestErrorHandlerService:
    """Error envelope formatting."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "title", "message": "Field required"}],
            request_id="test1234"
        )

        assert response["success"] is False
        assert response["message"] == "Test error message"
        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["request_id"] == "test1234"
        assert response["error"]["details"][0]["field"] == "title"
        assert response["error"]["timestamp"].endswith("Z")

    def test_details_omitted_when_empty(self):
        response = ErrorHandlerService.format_error_response("X", "message")
        assert "details" not in response["error"]

    def test_handle_api_exception(self):
        response = ErrorHandlerService.handle_api_exception(
            ValidationError("Bad body", field_errors=[{"field": "status", "message": "nope"}])
        )

        assert response.status_code == 422
        body = json.loads(response.body)
        assert body["message"] == "Bad body"
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["error"]["details"] == [{"field": "status", "message": "nope"}]

    def test_handle_pydantic_validation_error(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            PropertyStatusUpdate.model_validate({"status": "sold"})

        response = ErrorHandlerService.handle_validation_error(exc_info.value)

        assert response.status_code == 422
        body = json.loads(response.body)
        assert body["error"]["details"][0]["field"] == "status"
        assert body["message"].startswith("Request validation failed: status:")
        assert "input" not in body["error"]["details"][0]

    def test_handle_integrity_error(self):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: areas.area_name"))

        response = ErrorHandlerService.handle_database_error(exc)

        assert response.status_code == 409
        body = json.loads(response.body)
        assert body["error"]["code"] == "INTEGRITY_ERROR"
        assert body["message"] == "Constraint violation: Duplicate value for unique field"

    def test_handle_other_database_error(self):
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))

        response = ErrorHandlerService.handle_database_error(exc)

        assert response.status_code == 500
        assert json.loads(response.body)["error"]["code"] == "DATABASE_ERROR"

    def test_handle_unexpected_error(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("boom"))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["message"] == "boom"
        assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"


class TestRequestContextMiddleware:
    """Request ids and body size limits."""

    @pytest.fixture
    def small_app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(RequestContextMiddleware, max_request_size=32, enable_request_logging=False)
        register_exception_handlers(app)

        @app.post("/echo")
        async def echo(payload: dict):
            return payload

        @app.get("/fail")
        async def fail():
            raise RuntimeError("kaboom")

        return app

    @pytest.mark.asyncio
    async def test_small_body_passes(self, small_app):
        async with AsyncClient(transport=ASGITransport(app=small_app), base_url="http://test") as client:
            response = await client.post("/echo", json={"a": 1})

        assert response.status_code == 200
        assert response.json() == {"a": 1}
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_oversized_body_is_rejected(self, small_app):
        async with AsyncClient(transport=ASGITransport(app=small_app), base_url="http://test") as client:
            response = await client.post("/echo", json={"image": "x" * 100})

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "BAD_REQUEST"
        assert "exceeds maximum allowed size" in body["message"]

    @pytest.mark.asyncio
    async def test_unexpected_error_envelope(self, small_app):
        transport = ASGITransport(app=small_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/fail")

        assert response.status_code == 500
        assert response.json()["message"] == "kaboom"


class TestPropertyPayloads:
    """Property command schemas."""

    def test_create_requires_core_fields(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            PropertyCreate.model_validate({"title": "Only a title"})

        missing = {error["loc"][0] for error in exc_info.value.errors()}
        assert {"propertyType", "propImages", "areaName", "email"} <= missing

    def test_create_accepts_ui_names(self):
        command = PropertyCreate.model_validate({
            "title": "  Loft  ",
            "propertyType": "Apartment",
            "propImages": [],
            "areaName": "Downtown",
            "email": "Agent@BayHomes.ae",
            "numOfrooms": 3,
            "location": {"city": "Dubai"},
        })

        assert command.title == "Loft"
        assert command.email == "agent@bayhomes.ae"
        assert command.num_of_rooms == 3
        assert command.location == {"city": "Dubai"}

    def test_negative_price_rejected(self):
        with pytest.raises(PydanticValidationError):
            PropertyUpdate.model_validate({"price": -1})

    def test_changes_only_lists_supplied_values(self):
        command = PropertyUpdate.model_validate({"title": "New", "description": None})
        assert command.changes() == {"title": "New"}

    def test_parse_status_only(self):
        command = parse_property_update({"status": "archived"})
        assert isinstance(command, PropertyStatusUpdate)
        assert command.status.value == "archived"

    def test_parse_field_update(self):
        command = parse_property_update({"title": "New", "propImages": ["http://old1"]})
        assert isinstance(command, PropertyUpdate)
        assert command.prop_images == ["http://old1"]

    def test_parse_status_with_other_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_property_update({"status": "archived", "price": 10, "title": "x"})

        assert [error["field"] for error in exc_info.value.field_errors] == ["price", "title"]

    def test_parse_status_ignores_unknown_keys(self):
        command = parse_property_update({"status": "active", "_id": "abc"})
        assert isinstance(command, PropertyStatusUpdate)

    def test_parse_rejects_non_object(self):
        with pytest.raises(ValidationError):
            parse_property_update(["status"])


class TestProjectPayloads:
    """Project command schemas."""

    def test_amenities_accept_both_spellings(self):
        base = {"projectName": "P", "areaName": "A", "developerName": "D", "email": "a@bayhomes.ae"}

        misspelled = ProjectCreate.model_validate({**base, "aminities": ["Pool"]})
        spelled = ProjectCreate.model_validate({**base, "amenities": ["Gym"]})

        assert misspelled.amenities == ["Pool"]
        assert spelled.amenities == ["Gym"]

    def test_numeric_text_fields_are_coerced(self):
        command = ProjectCreate.model_validate({
            "projectName": "P", "areaName": "A", "developerName": "D", "email": "a@bayhomes.ae",
            "size": 1200, "handoverDate": 2027,
            "floorPlans": [{"floorType": "1BR", "floorSize": 650.5}],
        })

        assert command.size == "1200"
        assert command.handover_date == "2027"
        assert command.floor_plans[0].floor_size == "650.5"
