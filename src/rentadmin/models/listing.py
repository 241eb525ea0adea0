"""
Rentalist Listing Data Models
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum


class RoomType(Enum):
    """Room types offered on the marketplace"""
    SINGLE = "single"
    DOUBLE = "double"
    MASTER = "master"


class ListingStatus(Enum):
    """Listing publication status"""
    DRAFT = "draft"
    PUBLISHED = "published"
    RESERVED = "reserved"
    RENTED = "rented"


class Locale(Enum):
    """Language the listing copy is written in"""
    ES = "es"
    EN = "en"


_SLUG_STRIP = re.compile(r'[^\w\s-]', re.ASCII)
_SLUG_SEPARATORS = re.compile(r'[\s_-]+')


def slugify(title: str) -> str:
    """
    Derive a URL slug from a listing title.

    "Double Room, Near Metro!" -> "double-room-near-metro"
    """
    slug = _SLUG_STRIP.sub('', (title or '').lower())
    slug = _SLUG_SEPARATORS.sub('-', slug)
    return slug.strip('-')


def date_only(value: Optional[str]) -> str:
    """Keep the YYYY-MM-DD part of an ISO timestamp"""
    if not value:
        return ''
    return str(value).split('T')[0]


@dataclass
class Listing:
    """
    A rentable room as returned by the admin API.

    Only `_id` is required; everything else falls back to the same defaults
    the edit form uses so a partially populated backend record still renders.
    """
    id: str
    title: str = ""
    slug: str = ""
    price_per_week: float = 0
    bond: float = 0
    bills_included: bool = False
    address: str = ""
    suburb: Optional[str] = None
    room_type: str = RoomType.SINGLE.value
    available_from: Optional[str] = None
    min_term_weeks: int = 1
    preferred_tenants: List[str] = field(default_factory=list)
    house_features: List[str] = field(default_factory=list)
    rules: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    status: str = ListingStatus.DRAFT.value
    locale: str = Locale.ES.value
    owner_partner_id: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def cover_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    @property
    def is_published(self) -> bool:
        return self.status == ListingStatus.PUBLISHED.value

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Listing':
        """Build from an API record (`_id`, camelCase timestamps)"""
        return cls(
            id=str(data.get('_id') or data.get('id') or ''),
            title=data.get('title') or '',
            slug=data.get('slug') or '',
            price_per_week=data.get('price_per_week') or 0,
            bond=data.get('bond') or 0,
            bills_included=bool(data.get('bills_included', False)),
            address=data.get('address') or '',
            suburb=data.get('suburb'),
            room_type=data.get('room_type') or RoomType.SINGLE.value,
            available_from=data.get('available_from'),
            min_term_weeks=data.get('min_term_weeks') or 1,
            preferred_tenants=list(data.get('preferred_tenants') or []),
            house_features=list(data.get('house_features') or []),
            rules=list(data.get('rules') or []),
            images=list(data.get('images') or []),
            status=data.get('status') or ListingStatus.DRAFT.value,
            locale=data.get('locale') or Locale.ES.value,
            owner_partner_id=data.get('owner_partner_id'),
            location=data.get('location'),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the API wire shape"""
        data = {
            '_id': self.id,
            'title': self.title,
            'slug': self.slug,
            'price_per_week': self.price_per_week,
            'bond': self.bond,
            'bills_included': self.bills_included,
            'address': self.address,
            'suburb': self.suburb,
            'room_type': self.room_type,
            'available_from': self.available_from,
            'min_term_weeks': self.min_term_weeks,
            'preferred_tenants': list(self.preferred_tenants),
            'house_features': list(self.house_features),
            'rules': list(self.rules),
            'images': list(self.images),
            'status': self.status,
            'locale': self.locale,
            'owner_partner_id': self.owner_partner_id,
            'location': self.location,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        return {k: v for k, v in data.items() if v is not None}
