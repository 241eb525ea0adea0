"""
Rentalist Lead Data Models
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any, Union
from enum import Enum


class LeadStatus(Enum):
    """Lead pipeline status"""
    NEW = "new"
    CONTACTED = "contacted"
    CONVERTED = "converted"
    DISCARDED = "discarded"


@dataclass
class ListingRef:
    """
    Reference from a lead to the listing it asked about.

    The API sends either the bare listing id or the populated listing
    (`{_id, title, slug}`); both are folded into this one shape.
    """
    id: Optional[str] = None
    title: Optional[str] = None
    slug: Optional[str] = None
    expanded: bool = False

    DELETED_LABEL = "Listing eliminado"

    @classmethod
    def parse(cls, value: Union[str, Dict[str, Any], None]) -> Optional['ListingRef']:
        if value is None or value == '':
            return None
        if isinstance(value, dict):
            ref_id = value.get('_id') or value.get('id')
            return cls(
                id=str(ref_id) if ref_id else None,
                title=value.get('title') or None,
                slug=value.get('slug') or None,
                expanded=True,
            )
        return cls(id=str(value))

    @property
    def label(self) -> str:
        return self.title or self.DELETED_LABEL

    @property
    def can_link(self) -> bool:
        """Only a populated reference is known to still exist"""
        return self.expanded and bool(self.id)


@dataclass
class Lead:
    """A prospective tenant's contact submission"""
    id: str
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    message: Optional[str] = None
    listing: Optional[ListingRef] = None
    status: str = LeadStatus.NEW.value
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Lead':
        return cls(
            id=str(data.get('_id') or data.get('id') or ''),
            name=data.get('name') or '',
            email=data.get('email') or '',
            phone=data.get('phone') or None,
            message=data.get('message') or None,
            listing=ListingRef.parse(data.get('listing_id')),
            status=data.get('status') or LeadStatus.NEW.value,
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            '_id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'message': self.message,
            'listing_id': self.listing.id if self.listing else None,
            'status': self.status,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        return {k: v for k, v in data.items() if v is not None}
