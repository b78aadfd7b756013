"""Investment product catalog endpoints."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Principal, get_current_principal
from core.database import get_session
from core.exceptions import ConflictError, ProductNotFoundError, UserNotFoundError
from core.logging import get_logger
from core.patching import build_assignments
from domain.product.descriptions import generate_description, recommended_risk_levels
from domain.product.models import DEFAULT_MIN_INVESTMENT, InvestmentProduct
from domain.product.repository import ProductRepository
from domain.product.schemas import (
    PRODUCT_COLUMNS,
    ProductCreate,
    ProductPatch,
    ProductResponse,
    RecommendationResponse,
)
from domain.user.repository import UserRepository

logger = get_logger(__name__)
router = APIRouter()

RECOMMENDATION_LIMIT = 10


@router.get("", response_model=list[ProductResponse])
async def list_products(session: AsyncSession = Depends(get_session)):
    """List the catalog, newest first."""
    return await ProductRepository(session).list_all()


# Registered ahead of "/{product_id}" so the literal path wins
@router.get("/recommendations", response_model=RecommendationResponse)
async def recommendations(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Products whose risk level suits the caller's risk appetite."""
    user = await UserRepository(session).get_by_id(principal.user_id)
    if user is None:
        raise UserNotFoundError()

    products = await ProductRepository(session).list_by_risk(
        recommended_risk_levels(user.risk_appetite), limit=RECOMMENDATION_LIMIT
    )
    appetite = getattr(user.risk_appetite, "value", user.risk_appetite)
    return RecommendationResponse(
        products=[ProductResponse.model_validate(product) for product in products],
        rationale=f"Based on your {appetite} risk appetite",
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, session: AsyncSession = Depends(get_session)):
    product = await ProductRepository(session).get_by_id(product_id)
    if product is None:
        raise ProductNotFoundError()
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductCreate,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Add a product; a description is generated when none is given."""
    product = InvestmentProduct(
        name=request.name,
        investment_type=request.investment_type,
        tenure_months=request.tenure_months,
        annual_yield=request.annual_yield,
        risk_level=request.risk_level,
        min_investment=request.min_investment or DEFAULT_MIN_INVESTMENT,
        max_investment=request.max_investment,
        description=request.description
        or generate_description(request.name, request.investment_type, request.risk_level),
    )
    product = await ProductRepository(session).create(product)
    logger.info("Product added", product_id=product.id, user_id=principal.user_id)
    return product


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    patch: ProductPatch,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Apply a partial update. An empty patch is a no-op."""
    assignments = build_assignments(patch, PRODUCT_COLUMNS)
    if not assignments:
        return {}

    products = ProductRepository(session)
    if await products.get_by_id(product_id) is None:
        raise ProductNotFoundError()

    product = await products.apply_changes(product_id, assignments)
    logger.info("Product updated", product_id=product_id, fields=list(assignments))
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    try:
        await ProductRepository(session).delete(product_id)
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Product has investments and cannot be deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
