from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from src.common.constants import DISTINGUISHED_TRUE
from src.common.exceptions import ServiceError
from src.services.accommodations_service.dependencies import get_accommodation_service
from src.services.accommodations_service.service import AccommodationService
from src.shared.models.accommodation_dto import (
    AccommodationDTO,
    AccommodationIdsRequest,
    CreateAccommodationRequest,
    RatingRequest,
    SearchCriteria,
    UpdateAccommodationRequest,
)

router = APIRouter(prefix="/accommodations", tags=["Accommodations"])


@router.get("/search", response_model=List[AccommodationDTO])
async def search_accommodations(
    city: str = "",
    country: str = "",
    num_of_visitors: int = Query(0, alias="numOfVisitors"),
    start_date: str = Query("", alias="startDate"),
    end_date: str = Query("", alias="endDate"),
    max_price: float = Query(0, alias="maxPrice"),
    conveniences: List[str] = Query([]),
    distinguished: str = "",
    service: AccommodationService = Depends(get_accommodation_service)
):
    criteria = SearchCriteria(
        city=city,
        country=country,
        num_of_visitors=num_of_visitors,
        start_date=start_date,
        end_date=end_date,
        max_price=max_price,
        conveniences=[item for item in conveniences if item],
        distinguished=distinguished == DISTINGUISHED_TRUE,
    )
    try:
        return await service.search_accommodations(criteria)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/", response_model=List[AccommodationDTO])
async def get_all_accommodations(
    service: AccommodationService = Depends(get_accommodation_service)
):
    return await service.get_all_accommodations()


@router.post("/", response_model=AccommodationDTO, status_code=status.HTTP_201_CREATED)
async def create_accommodation(
    accommodation: str = Form(...),
    image: UploadFile = File(...),
    service: AccommodationService = Depends(get_accommodation_service)
):
    """Multipart form: `accommodation` holds the JSON body, `image` the single picture."""
    try:
        request = CreateAccommodationRequest.model_validate_json(accommodation)
    except PydanticValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    content = await image.read()
    try:
        return await service.create_accommodation(request, content)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/find", response_model=List[AccommodationDTO])
async def find_accommodations_by_ids(
    request: AccommodationIdsRequest,
    service: AccommodationService = Depends(get_accommodation_service)
):
    return await service.find_accommodations_by_ids(request.ids)


@router.get("/images/{image_id}")
async def get_image(
    image_id: str,
    service: AccommodationService = Depends(get_accommodation_service)
):
    try:
        content = await service.get_image(image_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(content=content, media_type="image/jpeg")


@router.delete("/user/{user_id}", response_model=List[AccommodationDTO])
async def delete_accommodations_by_user(
    user_id: str,
    service: AccommodationService = Depends(get_accommodation_service)
):
    return await service.delete_accommodations_by_user(user_id)


@router.get("/{accommodation_id}", response_model=AccommodationDTO)
async def get_accommodation(
    accommodation_id: UUID,
    service: AccommodationService = Depends(get_accommodation_service)
):
    try:
        return await service.get_accommodation(accommodation_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{accommodation_id}", response_model=AccommodationDTO)
async def update_accommodation(
    accommodation_id: UUID,
    request: UpdateAccommodationRequest,
    service: AccommodationService = Depends(get_accommodation_service)
):
    try:
        return await service.update_accommodation(accommodation_id, request)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{accommodation_id}", response_model=AccommodationDTO)
async def delete_accommodation(
    accommodation_id: UUID,
    service: AccommodationService = Depends(get_accommodation_service)
):
    try:
        return await service.delete_accommodation(accommodation_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{accommodation_id}/rating", status_code=status.HTTP_204_NO_CONTENT)
async def put_accommodation_rating(
    accommodation_id: UUID,
    request: RatingRequest,
    service: AccommodationService = Depends(get_accommodation_service)
):
    try:
        await service.put_accommodation_rating(accommodation_id, request.rating)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
