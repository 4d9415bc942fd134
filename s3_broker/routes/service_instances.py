from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Response
from starlette import status

from s3_broker.models.broker import (
    CreateServiceInstanceRequest,
    EmptyResponse,
)
from s3_broker.services.dependencies import get_plan, require_broker_auth
from s3_broker.services.plan import Plan

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/v2/service_instances",
    tags=["service_instances"],
    dependencies=[Depends(require_broker_auth)],
)


@router.put("/{instance_id}", response_model=EmptyResponse, status_code=status.HTTP_201_CREATED)
async def provision(
    payload: CreateServiceInstanceRequest,
    response: Response,
    instance_id: str = Path(..., description="Service instance id"),
    plan: Plan = Depends(get_plan),
) -> EmptyResponse:
    if await plan.get_instance(instance_id=instance_id) is not None:
        logger.info("Service instance '%s' already exists", instance_id)
        response.status_code = status.HTTP_409_CONFLICT
        return EmptyResponse()

    await plan.provision(
        instance_id=instance_id,
        service_id=payload.service_id,
        plan_id=payload.plan_id,
        organization_guid=payload.organization_guid,
        space_guid=payload.space_guid,
    )
    return EmptyResponse()


@router.patch("/{instance_id}", response_model=EmptyResponse)
async def update(
    instance_id: str = Path(..., description="Service instance id"),
    payload: Optional[Any] = Body(default=None),
    plan: Plan = Depends(get_plan),
) -> EmptyResponse:
    # The body is not validated; every update is rejected the same way.
    await plan.update_instance(instance_id=instance_id, request=payload)
    return EmptyResponse()


@router.delete("/{instance_id}", response_model=EmptyResponse)
async def deprovision(
    response: Response,
    instance_id: str = Path(..., description="Service instance id"),
    service_id: Optional[str] = Query(default=None),
    plan_id: Optional[str] = Query(default=None),
    plan: Plan = Depends(get_plan),
) -> EmptyResponse:
    if await plan.get_instance(instance_id=instance_id) is None:
        logger.info("Service instance '%s' does not exist", instance_id)
        response.status_code = status.HTTP_410_GONE
        return EmptyResponse()

    logger.info(
        "Deprovisioning service instance '%s' (service_id=%s, plan_id=%s)", instance_id, service_id, plan_id
    )
    await plan.deprovision(instance_id=instance_id)
    return EmptyResponse()
