"""
Factory Router — customer / MO lookups from the external factory API.
"""
from typing import List

from fastapi import APIRouter, Depends

from smarthourly.dependencies import get_current_user
from smarthourly.models.user import User
from smarthourly.schemas.factory import FactoryClient, MONumberListResponse
from smarthourly.services.factory_api_client import FactoryApiClient, get_factory_api_client


router = APIRouter(prefix="/factory", tags=["Factory API"])


@router.get("/clients", response_model=List[FactoryClient])
def list_clients(
    client: FactoryApiClient = Depends(get_factory_api_client),
    _: User = Depends(get_current_user),
):
    return client.get_clients()


@router.get("/clients/{client_id}/mo-numbers", response_model=MONumberListResponse)
def list_mo_numbers(
    client_id: int,
    client: FactoryApiClient = Depends(get_factory_api_client),
    _: User = Depends(get_current_user),
):
    return MONumberListResponse(client_id=client_id, mo_numbers=client.get_mo_numbers(client_id))
