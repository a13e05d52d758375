import base64
import binascii
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from amanice.api.dependencies import require_admin_key, get_services
from amanice.errors import ValidationError
from amanice.integrations.contracts.interfaces import WriteReceipt

router = APIRouter(dependencies=[Depends(require_admin_key)])


class ImageUploadRequest(BaseModel):
    image: str = Field(..., description="Base64 image content, optionally as a data: URL")
    fileName: str
    fileType: str


class ImageDeleteRequest(BaseModel):
    imagePath: str = ""


def _receipt(receipt: WriteReceipt) -> Dict[str, Any]:
    return {
        "status": "success",
        "id": receipt.product_id,
        "source": receipt.source.value,
        "message": receipt.message,
    }


@router.post("/admin/products", tags=["Admin"])
async def save_product(payload: Dict[str, Any] = Body(...), services=Depends(get_services)):
    return _receipt(services.engine.save_product(payload))


@router.put("/admin/products/{product_id}", tags=["Admin"])
async def update_product(product_id: str, updates: Dict[str, Any] = Body(...), services=Depends(get_services)):
    return _receipt(services.engine.update_product(product_id, updates))


@router.delete("/admin/products/{product_id}", tags=["Admin"])
async def delete_product(product_id: str, services=Depends(get_services)):
    return _receipt(services.engine.delete_product(product_id))


@router.post("/admin/images", tags=["Admin"])
async def upload_image(request: ImageUploadRequest, services=Depends(get_services)):
    encoded = request.image.split(",", 1)[1] if request.image.startswith("data:") else request.image
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Image is not valid base64.", field_errors={"image": str(e)}) from e

    stored = services.images.ingest(request.fileName, request.fileType, data)
    return {
        "status": "success",
        "path": stored.path,
        "fileName": stored.file_name,
        "fileSize": stored.file_size,
        "storage": stored.storage,
    }


@router.post("/admin/images/delete", tags=["Admin"])
async def delete_image(request: ImageDeleteRequest, services=Depends(get_services)):
    deleted = services.images.delete(request.imagePath)
    return {"status": "success", "message": "Image deleted successfully.", "deletedPath": deleted}
