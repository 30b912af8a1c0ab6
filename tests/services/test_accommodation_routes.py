import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from uuid import uuid4

from src.common.exceptions import (
    AccommodationNotFound,
    AvailabilityRegistrationFailed,
    ImageNotFound,
    UnsupportedSearchCriteria,
)
from src.services.accommodations_service.dependencies import get_accommodation_service
from src.services.accommodations_service.routes import router
from src.shared.models.accommodation_dto import SearchCriteria


@pytest.fixture
def mock_service():
    return AsyncMock()


@pytest.fixture
def client(mock_service):
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    app.dependency_overrides[get_accommodation_service] = lambda: mock_service
    return TestClient(app)


def test_search_maps_query_parameters(client, mock_service, accommodation_factory):
    mock_service.search_accommodations.return_value = [accommodation_factory(name="Sunny Flat")]

    response = client.get("/api/v1/accommodations/search", params=[
        ("city", "Novi Sad"),
        ("numOfVisitors", "2"),
        ("startDate", "2024-01-01"),
        ("endDate", "2024-01-03"),
        ("conveniences", "wifi"),
        ("conveniences", "parking"),
        ("distinguished", "true"),
    ])

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Sunny Flat"
    criteria = mock_service.search_accommodations.call_args[0][0]
    assert criteria == SearchCriteria(
        city="Novi Sad",
        num_of_visitors=2,
        start_date="2024-01-01",
        end_date="2024-01-03",
        conveniences=["wifi", "parking"],
        distinguished=True,
    )


def test_search_distinguished_only_when_literal_true(client, mock_service):
    mock_service.search_accommodations.return_value = []

    client.get("/api/v1/accommodations/search", params={"distinguished": "yes"})

    assert mock_service.search_accommodations.call_args[0][0].distinguished is False


def test_search_unsupported_is_501(client, mock_service):
    mock_service.search_accommodations.side_effect = UnsupportedSearchCriteria("not supported")

    response = client.get("/api/v1/accommodations/search", params={"maxPrice": "80"})

    assert response.status_code == 501


def test_create_accommodation_multipart(client, mock_service, accommodation_factory):
    created = accommodation_factory(name="Sunny Flat")
    mock_service.create_accommodation.return_value = created
    payload = {"name": "Sunny Flat", "user_id": "u1", "address": "A 1", "city": "Novi Sad", "country": "Serbia"}

    response = client.post(
        "/api/v1/accommodations/",
        data={"accommodation": json.dumps(payload)},
        files={"image": ("flat.jpg", b"jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 201
    assert response.json()["id"] == str(created.id)
    request, image = mock_service.create_accommodation.call_args[0]
    assert request.city == "Novi Sad"
    assert image == b"jpeg-bytes"


def test_create_accommodation_malformed_json(client, mock_service):
    response = client.post(
        "/api/v1/accommodations/",
        data={"accommodation": "{not json"},
        files={"image": ("flat.jpg", b"jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 400
    mock_service.create_accommodation.assert_not_called()


def test_create_accommodation_registration_failure(client, mock_service):
    mock_service.create_accommodation.side_effect = AvailabilityRegistrationFailed(
        "Service is not responding correctly"
    )

    response = client.post(
        "/api/v1/accommodations/",
        data={"accommodation": json.dumps({"name": "Sunny Flat"})},
        files={"image": ("flat.jpg", b"jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "Service is not responding correctly"


def test_get_accommodation_not_found(client, mock_service):
    mock_service.get_accommodation.side_effect = AccommodationNotFound("Accommodation not found")

    response = client.get(f"/api/v1/accommodations/{uuid4()}")

    assert response.status_code == 404


def test_get_accommodation_invalid_id(client):
    response = client.get("/api/v1/accommodations/not-a-uuid")

    assert response.status_code == 422


def test_find_by_ids(client, mock_service, accommodation_factory):
    mock_service.find_accommodations_by_ids.return_value = [accommodation_factory()]

    response = client.post("/api/v1/accommodations/find", json={"ids": ["a1", "a2"]})

    assert response.status_code == 200
    mock_service.find_accommodations_by_ids.assert_called_once_with(["a1", "a2"])


def test_get_image(client, mock_service):
    mock_service.get_image.return_value = b"jpeg-bytes"

    response = client.get("/api/v1/accommodations/images/0f8fad5bd9cb469fa16570867728950e")

    assert response.status_code == 200
    assert response.content == b"jpeg-bytes"
    assert response.headers["content-type"] == "image/jpeg"


def test_get_image_missing(client, mock_service):
    mock_service.get_image.side_effect = ImageNotFound("Image not found")

    response = client.get("/api/v1/accommodations/images/0f8fad5bd9cb469fa16570867728950e")

    assert response.status_code == 404


def test_put_rating(client, mock_service):
    accommodation_id = uuid4()

    response = client.put(f"/api/v1/accommodations/{accommodation_id}/rating", json={"rating": 4.5})

    assert response.status_code == 204
    mock_service.put_accommodation_rating.assert_called_once_with(accommodation_id, 4.5)


def test_delete_by_user(client, mock_service, accommodation_factory):
    mock_service.delete_accommodations_by_user.return_value = [accommodation_factory(user_id="u9")]

    response = client.delete("/api/v1/accommodations/user/u9")

    assert response.status_code == 200
    assert response.json()[0]["user_id"] == "u9"
