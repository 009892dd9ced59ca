"""Product API endpoints. Every route requires a valid access token."""

import math

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_claims, get_product_service
from app.schemas.common import ErrorResponse
from app.schemas.product import (
    ProductCreate,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from app.services.product import ProductService

router = APIRouter(
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(get_current_claims)],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)


@router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    """List products with pagination."""
    products, total = await service.list(page=page, limit=limit)
    return ProductListResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        totalPages=math.ceil(total / limit),
    )


@router.post("", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductEnvelope:
    """Create a new product."""
    product = await service.create(
        name=data.name,
        price=data.price,
        description=data.description,
    )
    return ProductEnvelope(
        message="Product created successfully",
        data=ProductResponse.model_validate(product),
    )


@router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ProductEnvelope:
    """Get a product by ID."""
    product = await service.get(product_id)
    return ProductEnvelope(data=ProductResponse.model_validate(product))


@router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductEnvelope:
    """Update a product. Only fields present in the body are changed."""
    product = await service.update(product_id, data.model_dump(exclude_unset=True))
    return ProductEnvelope(
        message="Product updated successfully",
        data=ProductResponse.model_validate(product),
    )


@router.delete("/{product_id}", response_model=ProductEnvelope)
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ProductEnvelope:
    """Delete a product."""
    product = await service.delete(product_id)
    return ProductEnvelope(
        message="Product deleted successfully",
        data=ProductResponse.model_validate(product),
    )
