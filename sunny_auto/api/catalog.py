from typing import List, Optional

from fastapi import APIRouter, Depends

from sunny_auto.core.config import settings
from sunny_auto.core.security import verify_admin_secret
from sunny_auto.models.catalog import CatalogService, CatalogServiceIn, ServiceListing
from sunny_auto.models.checkout import CheckoutRequest, CheckoutSummary
from sunny_auto.services import catalog_service
from sunny_auto.services.pricing import CHECKOUT_PRICES, checkout_summary

router = APIRouter(prefix="/api")
admin_router = APIRouter(prefix="/api/admin/services", dependencies=[Depends(verify_admin_secret)])


@router.get("/services", response_model=List[CatalogService])
async def services():
    return await catalog_service.list_available_services()


@router.get("/pricing")
async def pricing():
    return {
        "prices": CHECKOUT_PRICES.as_dict(),
        "default_price": CHECKOUT_PRICES.default,
        "tax_rate": settings.TAX_RATE,
    }


@router.post("/checkout/summary", response_model=CheckoutSummary)
async def summary(req: CheckoutRequest):
    return checkout_summary(req.services)


# --- Admin services screen ---

@admin_router.get("", response_model=ServiceListing)
async def list_services(q: str = "", category: Optional[str] = None):
    return await catalog_service.admin_listing(q, category)


@admin_router.post("", response_model=CatalogService, status_code=201)
async def add_service(service: CatalogServiceIn):
    return await catalog_service.create_service(service)


@admin_router.put("/{service_id}", response_model=CatalogService)
async def save_service(service_id: str, service: CatalogServiceIn):
    return await catalog_service.update_service(service_id, service)


@admin_router.delete("/{service_id}")
async def remove_service(service_id: str, confirm: bool = False):
    await catalog_service.delete_service(service_id, confirmed=confirm)
    return {"message": "Service deleted successfully!"}
