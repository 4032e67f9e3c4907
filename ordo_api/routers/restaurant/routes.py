"""
Restaurant router - /api/restaurant/*
Configuration, opening status, dashboard stats and dining tables.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from ordo_api.services.domain import RestaurantService
from ordo_api.services.permissions import (
    RequestContext,
    admin_procedure,
    protected_procedure,
    public_procedure,
    staff_procedure,
)
from ordo_shared.utils.schemas import (
    DiningTableCreate,
    DiningTableOutput,
    DiningTableUpdate,
    IsOpenOutput,
    RestaurantConfigCreate,
    RestaurantConfigOutput,
    RestaurantConfigUpdate,
    RestaurantStats,
)

router = APIRouter(prefix="/api/restaurant", tags=["restaurant"])


@router.get("/config", response_model=Optional[RestaurantConfigOutput])
def get_config(ctx: RequestContext = Depends(public_procedure)) -> Optional[RestaurantConfigOutput]:
    """Active configuration, or null before the restaurant is set up."""
    config = RestaurantService(ctx.db).get_active_config()
    return RestaurantConfigOutput.model_validate(config) if config else None


@router.get("/by-slug/{slug}", response_model=RestaurantConfigOutput)
def get_by_slug(slug: str, ctx: RequestContext = Depends(public_procedure)) -> RestaurantConfigOutput:
    return RestaurantConfigOutput.model_validate(RestaurantService(ctx.db).get_by_slug(slug))


@router.get("/is-open", response_model=IsOpenOutput)
def is_open(ctx: RequestContext = Depends(public_procedure)) -> IsOpenOutput:
    return RestaurantService(ctx.db).is_open()


@router.post("/config", response_model=RestaurantConfigOutput, status_code=status.HTTP_201_CREATED)
def create_config(
    body: RestaurantConfigCreate,
    ctx: RequestContext = Depends(admin_procedure),
) -> RestaurantConfigOutput:
    return RestaurantConfigOutput.model_validate(RestaurantService(ctx.db).create_config(body))


@router.patch("/config", response_model=RestaurantConfigOutput)
def update_config(
    body: RestaurantConfigUpdate,
    ctx: RequestContext = Depends(admin_procedure),
) -> RestaurantConfigOutput:
    return RestaurantConfigOutput.model_validate(RestaurantService(ctx.db).update_config(body))


@router.get("/stats", response_model=RestaurantStats)
def get_stats(ctx: RequestContext = Depends(protected_procedure)) -> RestaurantStats:
    """Today's counters for the dashboard header."""
    return RestaurantService(ctx.db).get_stats()


# =============================================================================
# Dining tables
# =============================================================================


@router.get("/tables", response_model=list[DiningTableOutput])
def list_tables(
    include_inactive: bool = False,
    ctx: RequestContext = Depends(staff_procedure),
) -> list[DiningTableOutput]:
    tables = RestaurantService(ctx.db).list_tables(include_inactive=include_inactive)
    return [DiningTableOutput.model_validate(t) for t in tables]


@router.post("/tables", response_model=DiningTableOutput, status_code=status.HTTP_201_CREATED)
def create_table(
    body: DiningTableCreate,
    ctx: RequestContext = Depends(admin_procedure),
) -> DiningTableOutput:
    return DiningTableOutput.model_validate(RestaurantService(ctx.db).create_table(body))


@router.patch("/tables/{table_id}", response_model=DiningTableOutput)
def update_table(
    table_id: int,
    body: DiningTableUpdate,
    ctx: RequestContext = Depends(admin_procedure),
) -> DiningTableOutput:
    return DiningTableOutput.model_validate(RestaurantService(ctx.db).update_table(table_id, body))
