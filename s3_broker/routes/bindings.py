from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from starlette import status

from s3_broker.models.broker import (
    CreateServiceInstanceBindingRequest,
    CreateServiceInstanceBindingResponse,
    EmptyResponse,
)
from s3_broker.services.dependencies import get_plan, require_broker_auth
from s3_broker.services.plan import Plan, ServiceInstanceDoesNotExistError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/v2/service_instances/{instance_id}/service_bindings",
    tags=["service_bindings"],
    dependencies=[Depends(require_broker_auth)],
)


@router.put(
    "/{binding_id}",
    response_model=CreateServiceInstanceBindingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def bind(
    payload: CreateServiceInstanceBindingRequest,
    instance_id: str = Path(..., description="Service instance id"),
    binding_id: str = Path(..., description="Service binding id"),
    plan: Plan = Depends(get_plan),
) -> CreateServiceInstanceBindingResponse:
    instance = await plan.get_instance(instance_id=instance_id)
    if instance is None:
        raise ServiceInstanceDoesNotExistError(instance_id)

    binding = await plan.bind(
        binding_id=binding_id,
        instance=instance,
        service_id=payload.service_id,
        plan_id=payload.plan_id,
        app_guid=payload.app_guid,
    )
    return CreateServiceInstanceBindingResponse(credentials=binding.credentials)


@router.delete("/{binding_id}", response_model=EmptyResponse)
async def unbind(
    response: Response,
    instance_id: str = Path(..., description="Service instance id"),
    binding_id: str = Path(..., description="Service binding id"),
    service_id: Optional[str] = Query(default=None),
    plan_id: Optional[str] = Query(default=None),
    plan: Plan = Depends(get_plan),
) -> EmptyResponse:
    instance = await plan.get_instance(instance_id=instance_id)
    if instance is None:
        logger.info("Service instance '%s' does not exist", instance_id)
        response.status_code = status.HTTP_410_GONE
        return EmptyResponse()

    logger.info(
        "Unbinding '%s' from service instance '%s' (service_id=%s, plan_id=%s)",
        binding_id,
        instance_id,
        service_id,
        plan_id,
    )
    await plan.unbind(binding_id=binding_id, instance=instance)
    return EmptyResponse()
