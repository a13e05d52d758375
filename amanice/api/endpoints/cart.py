from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from amanice.api.dependencies import get_services

router = APIRouter()


class CartItemRequest(BaseModel):
    name: str = Field(..., min_length=1)
    priceRange: str = ""


@router.get("/cart/{cart_id}", tags=["Cart"])
async def get_cart(cart_id: str, services=Depends(get_services)):
    return services.cart(cart_id).to_dict()


@router.post("/cart/{cart_id}/items", tags=["Cart"])
async def add_item(cart_id: str, item: CartItemRequest, services=Depends(get_services)):
    cart = services.cart(cart_id)
    cart.add_item(item.name, item.priceRange)
    return cart.to_dict()


@router.delete("/cart/{cart_id}/items/{index}", tags=["Cart"])
async def remove_item(cart_id: str, index: int, services=Depends(get_services)):
    cart = services.cart(cart_id)
    cart.remove_item(index)
    return cart.to_dict()


@router.post("/cart/{cart_id}/checkout", tags=["Cart"])
async def checkout(cart_id: str, services=Depends(get_services)):
    cart = services.cart(cart_id)
    return {"status": "success", "link": cart.checkout(), "count": cart.count}


@router.delete("/cart/{cart_id}", tags=["Cart"])
async def clear_cart(cart_id: str, services=Depends(get_services)):
    cart = services.cart(cart_id)
    cart.clear()
    return cart.to_dict()
