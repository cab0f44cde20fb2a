from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CatalogService(BaseModel):
    id: str
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration_minutes: Optional[int] = None
    image_url: Optional[str] = None
    is_available: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CatalogServiceIn(BaseModel):
    """Admin form for adding or editing a service; emptiness is checked by the catalog service."""
    name: str = ""
    category: str = ""
    description: str = ""
    price: Optional[float] = None
    duration_minutes: Optional[int] = None
    image_url: str = ""
    is_available: bool = True


class ServiceListing(BaseModel):
    services: List[CatalogService]
    categories: List[str]
    total: int
    available: int
