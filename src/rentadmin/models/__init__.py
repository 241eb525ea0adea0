"""
Rentalist Models Package
"""
from .listing import (
    Listing,
    ListingStatus,
    RoomType,
    Locale,
    slugify,
    date_only
)
from .lead import Lead, LeadStatus, ListingRef
from .partner import Partner, PartnerStatus
from .response import ApiResponse

__all__ = [
    'Listing',
    'ListingStatus',
    'RoomType',
    'Locale',
    'slugify',
    'date_only',
    'Lead',
    'LeadStatus',
    'ListingRef',
    'Partner',
    'PartnerStatus',
    'ApiResponse'
]
