"""
Menu router - /api/menu/*
Public browsing plus staff management of categories, items and modifiers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ordo_api.services.domain import MenuService
from ordo_api.services.permissions import RequestContext, public_procedure, staff_procedure
from ordo_shared.utils.schemas import (
    CategoryCreate,
    CategoryOutput,
    CategoryPreviewOutput,
    CategoryUpdate,
    CategoryWithItemsOutput,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
    ModifierCreate,
    ModifierOutput,
    ModifierUpdate,
    ToggleAvailabilityRequest,
)

router = APIRouter(prefix="/api/menu", tags=["menu"])


# =============================================================================
# Public browsing
# =============================================================================


@router.get("/categories", response_model=list[CategoryPreviewOutput])
def get_categories(ctx: RequestContext = Depends(public_procedure)) -> list[CategoryPreviewOutput]:
    return MenuService(ctx.db).list_categories_with_preview()


@router.get("/full", response_model=list[CategoryWithItemsOutput])
def get_full_menu(ctx: RequestContext = Depends(public_procedure)) -> list[CategoryWithItemsOutput]:
    """Every active category with its available items."""
    return [
        CategoryWithItemsOutput(
            **CategoryOutput.model_validate(entry["category"]).model_dump(),
            items=[MenuItemOutput.model_validate(item) for item in entry["items"]],
        )
        for entry in MenuService(ctx.db).get_full_menu()
    ]


@router.get("/categories/{category_id}/items", response_model=list[MenuItemOutput])
def get_items_by_category(
    category_id: int,
    ctx: RequestContext = Depends(public_procedure),
) -> list[MenuItemOutput]:
    items = MenuService(ctx.db).list_items_by_category(category_id)
    return [MenuItemOutput.model_validate(item) for item in items]


@router.get("/items/featured", response_model=list[MenuItemOutput])
def get_featured_items(ctx: RequestContext = Depends(public_procedure)) -> list[MenuItemOutput]:
    return [MenuItemOutput.model_validate(item) for item in MenuService(ctx.db).list_featured()]


@router.get("/items/search", response_model=list[MenuItemOutput])
def search_items(
    q: str = Query(min_length=2, max_length=100),
    category_id: Optional[int] = None,
    ctx: RequestContext = Depends(public_procedure),
) -> list[MenuItemOutput]:
    items = MenuService(ctx.db).search_items(q, category_id=category_id)
    return [MenuItemOutput.model_validate(item) for item in items]


@router.get("/items/{item_id}", response_model=MenuItemOutput)
def get_item(item_id: int, ctx: RequestContext = Depends(public_procedure)) -> MenuItemOutput:
    return MenuItemOutput.model_validate(MenuService(ctx.db).get_item(item_id))


# =============================================================================
# Categories (staff)
# =============================================================================


@router.post("/categories", response_model=CategoryOutput, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    ctx: RequestContext = Depends(staff_procedure),
) -> CategoryOutput:
    return CategoryOutput.model_validate(MenuService(ctx.db).create_category(body))


@router.patch("/categories/{category_id}", response_model=CategoryOutput)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    ctx: RequestContext = Depends(staff_procedure),
) -> CategoryOutput:
    return CategoryOutput.model_validate(MenuService(ctx.db).update_category(category_id, body))


@router.delete("/categories/{category_id}", response_model=CategoryOutput)
def delete_category(
    category_id: int,
    ctx: RequestContext = Depends(staff_procedure),
) -> CategoryOutput:
    """Soft delete. Fails with 412 while the category has available items."""
    return CategoryOutput.model_validate(MenuService(ctx.db).delete_category(category_id))


# =============================================================================
# Items (staff)
# =============================================================================


@router.post("/items", response_model=MenuItemOutput, status_code=status.HTTP_201_CREATED)
def create_item(
    body: MenuItemCreate,
    ctx: RequestContext = Depends(staff_procedure),
) -> MenuItemOutput:
    return MenuItemOutput.model_validate(MenuService(ctx.db).create_item(body))


@router.patch("/items/{item_id}", response_model=MenuItemOutput)
def update_item(
    item_id: int,
    body: MenuItemUpdate,
    ctx: RequestContext = Depends(staff_procedure),
) -> MenuItemOutput:
    return MenuItemOutput.model_validate(MenuService(ctx.db).update_item(item_id, body))


@router.post("/items/{item_id}/availability", response_model=MenuItemOutput)
def toggle_availability(
    item_id: int,
    body: ToggleAvailabilityRequest,
    ctx: RequestContext = Depends(staff_procedure),
) -> MenuItemOutput:
    item = MenuService(ctx.db).toggle_availability(item_id, body.is_available)
    return MenuItemOutput.model_validate(item)


# =============================================================================
# Modifiers (staff)
# =============================================================================


@router.post("/modifiers", response_model=ModifierOutput, status_code=status.HTTP_201_CREATED)
def create_modifier(
    body: ModifierCreate,
    ctx: RequestContext = Depends(staff_procedure),
) -> ModifierOutput:
    return ModifierOutput.model_validate(MenuService(ctx.db).create_modifier(body))


@router.patch("/modifiers/{modifier_id}", response_model=ModifierOutput)
def update_modifier(
    modifier_id: int,
    body: ModifierUpdate,
    ctx: RequestContext = Depends(staff_procedure),
) -> ModifierOutput:
    return ModifierOutput.model_validate(MenuService(ctx.db).update_modifier(modifier_id, body))


@router.delete("/modifiers/{modifier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_modifier(
    modifier_id: int,
    ctx: RequestContext = Depends(staff_procedure),
) -> None:
    MenuService(ctx.db).delete_modifier(modifier_id)
