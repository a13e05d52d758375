from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from amanice.api.dependencies import get_services
from amanice.catalog.projector import (
    default_description,
    featured_items,
    price_display,
    project,
    recently_added,
    stock_display,
)
from amanice.errors import NotFoundError
from amanice.integrations.contracts.interfaces import Product
from amanice.integrations.contracts.products import filter_by_category, product_to_dict

router = APIRouter()


def product_view(product: Product, services) -> Dict[str, Any]:
    data = product_to_dict(product)
    data["imageUrl"] = services.images.resolve_image_url(product.image)
    data["priceDisplay"] = price_display(product)
    data["stockDisplay"] = stock_display(product)
    data["displayDescription"] = default_description(product)
    return data


@router.get("/products", tags=["Products"])
async def list_products(category: Optional[str] = None, services=Depends(get_services)):
    products = services.engine.refresh()
    if category:
        products = filter_by_category(products, category)
    return {"products": [product_view(p, services) for p in products], "count": len(products)}


@router.post("/products/refresh", tags=["Products"])
async def refresh_products(services=Depends(get_services)):
    products = services.engine.refresh()
    return {"status": "success", "count": len(products)}


@router.get("/products/{product_id}", tags=["Products"])
async def get_product(product_id: str, services=Depends(get_services)):
    product = services.engine.get_product(product_id)
    if product is None:
        raise NotFoundError(f"Product not found: {product_id}")
    return product_view(product, services)


@router.get("/categories/{category}", tags=["Products"])
async def category_view(category: str, services=Depends(get_services)):
    view = project(services.engine.refresh(), category, services.config.projector)
    return {
        "category": view.category,
        "groups": [
            {
                "type": group.type_name,
                "href": group.link.href,
                "count": len(group.products),
                "products": [product_view(p, services) for p in group.products],
            }
            for group in view.groups
        ],
        "links": [{"label": link.label, "href": link.href} for link in view.links],
        "placeholder": view.placeholder,
    }


@router.get("/featured", tags=["Products"])
async def featured(services=Depends(get_services)):
    items = featured_items(services.engine.refresh())
    return {
        "items": [
            {
                "title": item.title,
                "image": services.images.resolve_image_url(item.image),
                "description": item.description,
                "price": item.price,
                "link": item.link,
            }
            for item in items
        ]
    }


@router.get("/recently-added", tags=["Products"])
async def recently_added_products(services=Depends(get_services)):
    limit = services.config.projector.recently_added_limit
    products = recently_added(services.engine.refresh(), limit=limit)
    return {"products": [product_view(p, services) for p in products], "count": len(products)}
