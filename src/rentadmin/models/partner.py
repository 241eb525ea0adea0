"""
Rentalist Partner Data Models
"""
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
from enum import Enum


class PartnerStatus(Enum):
    """Partner account status"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


@dataclass
class Partner:
    """A property owner or manager account"""
    id: str
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    company_name: Optional[str] = None
    status: str = PartnerStatus.PENDING.value
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Partner':
        return cls(
            id=str(data.get('_id') or data.get('id') or ''),
            name=data.get('name') or '',
            email=data.get('email') or '',
            phone=data.get('phone') or None,
            company_name=data.get('company_name') or None,
            status=data.get('status') or PartnerStatus.PENDING.value,
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['_id'] = data.pop('id')
        data['createdAt'] = data.pop('created_at')
        data['updatedAt'] = data.pop('updated_at')
        return {k: v for k, v in data.items() if v is not None}
