from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import admin_only, get_cache, get_invalidator, get_store
from app.core.cache import CacheStore, InvalidationCoordinator, InvalidationEvent, keys, read_through
from app.core.config import PRODUCT_PER_PAGE
from app.core.store import Store
from app.models.db.Product import Product
from app.models.product.ProductModels import NewProductModel, ProductOut, UpdateProductModel

router = APIRouter()

LATEST_PRODUCTS_LIMIT = 5


def dump_products(products: list[Product]) -> list[dict]:
    return [ProductOut.model_validate(p).model_dump(mode="json") for p in products]


@router.post("/new", status_code=status.HTTP_201_CREATED)
async def new_product(
    product_data: NewProductModel,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    await store.products.create(**product_data.model_dump())

    invalidator.invalidate(InvalidationEvent(product_affected=True, admin_affected=True))

    return JSONResponse(
        content={"success": True, "message": "Product created successfully"},
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/all", status_code=status.HTTP_200_OK)
async def get_all_products(
    search: Optional[str] = Query(None, description="Case-insensitive name search"),
    price: Optional[float] = Query(None, gt=0, description="Maximum price"),
    category: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, pattern="^(asc|desc)$", description="Sort by price"),
    page: int = Query(1, ge=1),
    store: Store = Depends(get_store),
):
    """
    Searchable, paginated catalogue. Filter combinations are unbounded, so
    this listing is never cached.
    """
    filters = []
    if search:
        filters.append(Product.name.ilike(f"%{search}%"))
    if price is not None:
        filters.append(Product.price <= price)
    if category:
        filters.append(Product.category == category.strip().lower())

    order_by = None
    if sort == "asc":
        order_by = Product.price.asc()
    elif sort == "desc":
        order_by = Product.price.desc()

    limit = PRODUCT_PER_PAGE
    products = await store.products.find(
        *filters, order_by=order_by, limit=limit, offset=limit * (page - 1)
    )
    total = await store.products.count(*filters)

    return JSONResponse(
        content={
            "success": True,
            "products": dump_products(products),
            "total_page": (total + limit - 1) // limit,
        }
    )


@router.get("/latest", status_code=status.HTTP_200_OK)
async def get_latest_products(
    store: Store = Depends(get_store), cache: CacheStore = Depends(get_cache)
):
    async def load():
        products = await store.products.find(
            order_by=Product.created_at.desc(), limit=LATEST_PRODUCTS_LIMIT
        )
        return dump_products(products)

    products = await read_through(cache, keys.LATEST_PRODUCTS, load)
    return JSONResponse(content={"success": True, "products": products})


@router.get("/categories", status_code=status.HTTP_200_OK)
async def get_all_categories(
    store: Store = Depends(get_store), cache: CacheStore = Depends(get_cache)
):
    async def load():
        return await store.products.distinct(Product.category)

    categories = await read_through(cache, keys.CATEGORIES, load)
    return JSONResponse(content={"success": True, "categories": categories})


@router.get("/admin-products", status_code=status.HTTP_200_OK)
async def get_admin_products(
    store: Store = Depends(get_store),
    cache: CacheStore = Depends(get_cache),
    admin=Depends(admin_only),
):
    async def load():
        return dump_products(await store.products.find(order_by=Product.created_at.desc()))

    products = await read_through(cache, keys.ALL_PRODUCTS, load)
    return JSONResponse(content={"success": True, "products": products})


@router.get("/{product_id}", status_code=status.HTTP_200_OK)
async def get_product_details(
    product_id: str,
    store: Store = Depends(get_store),
    cache: CacheStore = Depends(get_cache),
):
    async def load():
        product = await store.products.get_or_404(product_id)
        return ProductOut.model_validate(product).model_dump(mode="json")

    product = await read_through(cache, keys.product_key(product_id), load)
    return JSONResponse(content={"success": True, "product": product})


@router.put("/{product_id}", status_code=status.HTTP_200_OK)
async def update_product(
    product_id: str,
    product_data: UpdateProductModel,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    changes = product_data.model_dump(exclude_none=True)
    product = await store.products.update(product_id, **changes)

    invalidator.invalidate(
        InvalidationEvent(
            product_affected=True, product_ids=[product.id], admin_affected=True
        )
    )

    return JSONResponse(
        content={"success": True, "message": "Product updated successfully"}
    )


@router.delete("/{product_id}", status_code=status.HTTP_200_OK)
async def delete_product(
    product_id: str,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    product = await store.products.delete(product_id)

    invalidator.invalidate(
        InvalidationEvent(
            product_affected=True, product_ids=[product.id], admin_affected=True
        )
    )

    return JSONResponse(
        content={"success": True, "message": "Product deleted successfully"}
    )
