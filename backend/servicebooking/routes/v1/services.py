# backend/servicebooking/routes/v1/services.py
"""
Service offering routes - API v1

Endpoints:
    GET / - List service offerings (public, paginated)
    GET /{service_id} - Service offering with its providers (public)
    POST / - Create a service offering (admin)
    PUT /{service_id} - Partially update a service offering (admin)
    PUT /{service_id}/providers - Replace the providers offering it (admin)
    DELETE /{service_id} - Delete a service offering without bookings (admin)
"""

import logging

from fastapi import APIRouter, Depends, Path, Response, status

from ...api.dependencies import get_query_parameters, get_service_offering_service, require_admin
from ...core.exceptions import NotFoundException
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.common import QueryParameters
from ...schemas.service_offering import (
    ServiceOfferingCreate,
    ServiceOfferingDetailResponse,
    ServiceOfferingResponse,
    ServiceOfferingUpdate,
    ServiceProvidersUpdate,
)
from ...services.service_offering_service import ServiceOfferingService
from ._pagination import paginated_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["services-v1"])


def _service_not_found(service_id: int) -> NotFoundException:
    return NotFoundException(
        "Service offering not found",
        code="SERVICE_OFFERING_NOT_FOUND",
        details={"service_offering_id": service_id},
    )


@router.get("", response_model=PaginatedResponse[ServiceOfferingResponse])
def list_services(
    response: Response,
    params: QueryParameters = Depends(get_query_parameters),
    service_offering_service: ServiceOfferingService = Depends(get_service_offering_service),
) -> PaginatedResponse[ServiceOfferingResponse]:
    paged = service_offering_service.list_services(params)
    return paginated_response(response, paged, ServiceOfferingResponse.model_validate)


@router.get("/{service_id}", response_model=ServiceOfferingDetailResponse)
def get_service(
    service_id: int = Path(..., ge=1),
    service_offering_service: ServiceOfferingService = Depends(get_service_offering_service),
) -> ServiceOfferingDetailResponse:
    service = service_offering_service.get_service(service_id)
    if service is None:
        raise _service_not_found(service_id)
    return ServiceOfferingDetailResponse.model_validate(service)


@router.post("", response_model=ServiceOfferingResponse, status_code=status.HTTP_201_CREATED)
def register_service(
    payload: ServiceOfferingCreate,
    response: Response,
    _: Principal = Depends(require_admin),
    service_offering_service: ServiceOfferingService = Depends(get_service_offering_service),
) -> ServiceOfferingResponse:
    service = service_offering_service.register_service(payload)
    response.headers["Location"] = f"/api/v1/services/{service.id}"
    return ServiceOfferingResponse.model_validate(service)


@router.put("/{service_id}", response_model=ServiceOfferingResponse)
def update_service(
    payload: ServiceOfferingUpdate,
    service_id: int = Path(..., ge=1),
    _: Principal = Depends(require_admin),
    service_offering_service: ServiceOfferingService = Depends(get_service_offering_service),
) -> ServiceOfferingResponse:
    service = service_offering_service.update_service(service_id, payload)
    if service is None:
        raise _service_not_found(service_id)
    return ServiceOfferingResponse.model_validate(service)


@router.put("/{service_id}/providers", response_model=ServiceOfferingDetailResponse)
def update_service_providers(
    payload: ServiceProvidersUpdate,
    service_id: int = Path(..., ge=1),
    _: Principal = Depends(require_admin),
    service_offering_service: ServiceOfferingService = Depends(get_service_offering_service),
) -> ServiceOfferingDetailResponse:
    service = service_offering_service.update_service_providers(service_id, payload)
    if service is None:
        raise _service_not_found(service_id)
    return ServiceOfferingDetailResponse.model_validate(service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    service_id: int = Path(..., ge=1),
    _: Principal = Depends(require_admin),
    service_offering_service: ServiceOfferingService = Depends(get_service_offering_service),
) -> Response:
    if not service_offering_service.delete_service(service_id):
        raise _service_not_found(service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
