"""
Services catalog: the public listing and the admin screen that maintains it.

Rows live in the `services` table. Customers only ever see available
services; admins see everything and can add, edit and delete.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from sunny_auto.core.errors import BackendUnavailable, ConfirmationRequired, NotFound, ValidationFailed
from sunny_auto.core.logger import logger
from sunny_auto.models.catalog import CatalogService, CatalogServiceIn, ServiceListing
from sunny_auto.services.db_service import db_service

ALL_CATEGORIES = "All Categories"
REQUIRED_TEXT_FIELDS = ("name", "category", "description", "image_url")


def _parse(rows: Iterable[Dict[str, Any]]) -> List[CatalogService]:
    services = []
    for row in rows:
        try:
            services.append(CatalogService.model_validate(row))
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping malformed service row {row.get('id')}: {e.error_count()} errors")
    return services


async def list_available_services() -> List[CatalogService]:
    """Services offered on the public services page, newest first."""
    return _parse(await db_service.fetch_available_services())


def validate_service(service: CatalogServiceIn):
    missing_text = any(not getattr(service, field).strip() for field in REQUIRED_TEXT_FIELDS)
    if missing_text or not service.price or not service.duration_minutes:
        raise ValidationFailed("Please fill in all required fields")
    if service.price < 0 or service.duration_minutes < 0:
        raise ValidationFailed("Price and duration cannot be negative")


def matches_search(service: CatalogService, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in service.name.lower() or needle in (service.description or "").lower()


def filter_services(services: Iterable[CatalogService], query: str = "",
                    category: Optional[str] = None) -> List[CatalogService]:
    return [
        s for s in services
        if matches_search(s, query) and (not category or category == ALL_CATEGORIES or s.category == category)
    ]


def categories(services: Iterable[CatalogService]) -> List[str]:
    """Filter options: the catch-all first, then each category once, in listing order."""
    seen = [ALL_CATEGORIES]
    for service in services:
        if service.category and service.category not in seen:
            seen.append(service.category)
    return seen


async def admin_listing(query: str = "", category: Optional[str] = None) -> ServiceListing:
    services = _parse(await db_service.list_services())
    return ServiceListing(
        services=filter_services(services, query, category),
        categories=categories(services),
        total=len(services),
        available=sum(1 for s in services if s.is_available),
    )


async def _existing(service_id: str) -> CatalogService:
    row = await db_service.get_service(service_id)
    if not row:
        raise NotFound(f"Service {service_id} not found")
    return CatalogService.model_validate(row)


async def create_service(service: CatalogServiceIn) -> CatalogService:
    validate_service(service)
    created = await db_service.insert_service(service.model_dump())
    if not created:
        raise BackendUnavailable("Error adding service")
    return CatalogService.model_validate(created)


async def update_service(service_id: str, service: CatalogServiceIn) -> CatalogService:
    """Full replace of the editable fields, stamped with `updated_at`."""
    current = await _existing(service_id)
    validate_service(service)

    changes = service.model_dump()
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()
    if not await db_service.update_service(service_id, changes):
        raise BackendUnavailable("Error updating service")
    return CatalogService.model_validate({**current.model_dump(), **changes})


async def delete_service(service_id: str, confirmed: bool = False):
    current = await _existing(service_id)
    if not confirmed:
        raise ConfirmationRequired(f'Are you sure you want to delete "{current.name}"?')
    if not await db_service.delete_service(service_id):
        raise BackendUnavailable("Error deleting service")
