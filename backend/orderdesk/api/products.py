# backend/orderdesk/api/products.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.api.deps import get_current_user
from orderdesk.core.config import settings
from orderdesk.core.database import get_db
from orderdesk.models.user import User
from orderdesk.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    ProductFormRequest,
    ProductFormFieldsResponse,
)
from orderdesk.services.display import product_options
from orderdesk.services.listing import filter_products, paginate
from orderdesk.services.product_form import build_product_payload, describe_form, flatten_product
from orderdesk.services.product_service import ProductInUseError, ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


def validation_detail(e: ValidationError) -> list[dict]:
    return [{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in e.errors()]


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str = "",
    status: Optional[str] = None,
    product_type: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Product catalog with search, status/type filters and pagination."""
    products = await ProductService(db).list_all()
    result = paginate(filter_products(products, search, status, product_type), page, page_size)
    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/options")
async def get_product_options():
    return product_options()


@router.get("/form-fields/{product_type}", response_model=ProductFormFieldsResponse)
async def get_form_fields(product_type: str):
    """Editor sections and labels for one product type."""
    return describe_form(product_type)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await ProductService(db).create_product(data, author=current_user.username)
    return ProductResponse.model_validate(product)


@router.post("/from-form", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product_from_form(
    form: ProductFormRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a product from flat editor values."""
    try:
        data = ProductCreate.model_validate(build_product_payload(form.model_dump()))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=validation_detail(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    product = await ProductService(db).create_product(data, author=current_user.username)
    return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await ProductService(db).get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductResponse.model_validate(product)


@router.get("/{product_id}/form")
async def get_product_form(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Flat editor values for an existing product."""
    product = await ProductService(db).get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return flatten_product(product.to_document())


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await ProductService(db).update_product(product_id, data, author=current_user.username)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductResponse.model_validate(product)


@router.post("/{product_id}/archive", response_model=ProductResponse)
async def archive_product(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await ProductService(db).archive_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        deleted = await ProductService(db).delete_product(product_id)
    except ProductInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"message": "Product deleted"}
