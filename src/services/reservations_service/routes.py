from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from src.common.exceptions import ServiceError
from src.services.reservations_service.dependencies import get_reservation_service
from src.services.reservations_service.service import ReservationService
from src.shared.models.reservation_dto import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    AvailabilityDTO,
    CreateReservationRequest,
    RegisterAvailabilityRequest,
    ReservationDTO,
)

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post("/availability", response_model=List[AvailabilityDTO], status_code=status.HTTP_201_CREATED)
async def register_availability(
    request: RegisterAvailabilityRequest,
    service: ReservationService = Depends(get_reservation_service)
):
    try:
        return await service.register_availability(request)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/availability/{accommodation_id}", response_model=List[AvailabilityDTO])
async def get_availability(
    accommodation_id: str,
    service: ReservationService = Depends(get_reservation_service)
):
    return await service.get_availability(accommodation_id)


@router.post("/availability/check", response_model=AvailabilityCheckResponse)
async def check_availability(
    request: AvailabilityCheckRequest,
    service: ReservationService = Depends(get_reservation_service)
):
    reserved_ids = await service.check_availability(request.accommodation_ids, request.dates)
    return AvailabilityCheckResponse(reserved_ids=reserved_ids)


@router.post("/", response_model=ReservationDTO, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    request: CreateReservationRequest,
    service: ReservationService = Depends(get_reservation_service)
):
    try:
        return await service.create_reservation(request)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/accommodation/{accommodation_id}", response_model=List[ReservationDTO])
async def get_reservations_by_accommodation(
    accommodation_id: str,
    service: ReservationService = Depends(get_reservation_service)
):
    return await service.get_reservations_by_accommodation(accommodation_id)


@router.delete("/{reservation_id}", response_model=ReservationDTO)
async def cancel_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service)
):
    try:
        return await service.cancel_reservation(reservation_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
