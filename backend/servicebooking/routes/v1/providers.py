# backend/servicebooking/routes/v1/providers.py
"""
Provider routes - API v1

Endpoints:
    GET / - List providers (public, paginated)
    GET /{provider_id} - Provider with its services (public)
    POST / - Register a provider and its managing user (admin)
    PUT /{provider_id} - Partially update a provider (admin)
    PUT /{provider_id}/services - Replace the provider's services (admin)
    DELETE /{provider_id} - Delete a provider without bookings (admin)
"""

import logging

from fastapi import APIRouter, Depends, Path, Response, status

from ...api.dependencies import get_provider_service, get_query_parameters, require_admin
from ...core.exceptions import NotFoundException
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.common import QueryParameters
from ...schemas.provider import (
    ProviderCreate,
    ProviderDetailResponse,
    ProviderResponse,
    ProviderServicesUpdate,
    ProviderUpdate,
)
from ...services.provider_service import ProviderService
from ._pagination import paginated_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["providers-v1"])


def _provider_not_found(provider_id: int) -> NotFoundException:
    return NotFoundException(
        "Provider not found", code="PROVIDER_NOT_FOUND", details={"provider_id": provider_id}
    )


@router.get("", response_model=PaginatedResponse[ProviderResponse])
def list_providers(
    response: Response,
    params: QueryParameters = Depends(get_query_parameters),
    provider_service: ProviderService = Depends(get_provider_service),
) -> PaginatedResponse[ProviderResponse]:
    paged = provider_service.list_providers(params)
    return paginated_response(response, paged, ProviderResponse.model_validate)


@router.get("/{provider_id}", response_model=ProviderDetailResponse)
def get_provider(
    provider_id: int = Path(..., ge=1),
    provider_service: ProviderService = Depends(get_provider_service),
) -> ProviderDetailResponse:
    provider = provider_service.get_provider(provider_id)
    if provider is None:
        raise _provider_not_found(provider_id)
    return ProviderDetailResponse.model_validate(provider)


@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
def register_provider(
    payload: ProviderCreate,
    response: Response,
    _: Principal = Depends(require_admin),
    provider_service: ProviderService = Depends(get_provider_service),
) -> ProviderResponse:
    provider = provider_service.register_provider(payload)
    response.headers["Location"] = f"/api/v1/providers/{provider.id}"
    return ProviderResponse.model_validate(provider)


@router.put("/{provider_id}", response_model=ProviderResponse)
def update_provider(
    payload: ProviderUpdate,
    provider_id: int = Path(..., ge=1),
    _: Principal = Depends(require_admin),
    provider_service: ProviderService = Depends(get_provider_service),
) -> ProviderResponse:
    provider = provider_service.update_provider(provider_id, payload)
    if provider is None:
        raise _provider_not_found(provider_id)
    return ProviderResponse.model_validate(provider)


@router.put("/{provider_id}/services", response_model=ProviderDetailResponse)
def update_provider_services(
    payload: ProviderServicesUpdate,
    provider_id: int = Path(..., ge=1),
    _: Principal = Depends(require_admin),
    provider_service: ProviderService = Depends(get_provider_service),
) -> ProviderDetailResponse:
    provider = provider_service.update_provider_services(provider_id, payload)
    if provider is None:
        raise _provider_not_found(provider_id)
    return ProviderDetailResponse.model_validate(provider)


@router.delete("/{provider_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_provider(
    provider_id: int = Path(..., ge=1),
    _: Principal = Depends(require_admin),
    provider_service: ProviderService = Depends(get_provider_service),
) -> Response:
    if not provider_service.delete_provider(provider_id):
        raise _provider_not_found(provider_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
