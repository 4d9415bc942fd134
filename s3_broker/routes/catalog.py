from __future__ import annotations

from fastapi import APIRouter, Depends

from s3_broker.models.catalog import Catalog
from s3_broker.services.dependencies import get_catalog, require_broker_auth

router = APIRouter(prefix="/v2", tags=["catalog"], dependencies=[Depends(require_broker_auth)])


@router.get("/catalog", response_model=Catalog, response_model_exclude_none=True)
async def list_catalog(catalog: Catalog = Depends(get_catalog)) -> Catalog:
    return catalog
