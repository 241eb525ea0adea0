"""
Page data loaders

Each loader runs at request time, before a table or form is built, and never
raises: a failed read becomes an empty collection plus a message (collection
pages) or a not-found outcome (detail and edit pages).
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..api import RentalistClient, RentalistAPIError, Config
from .tables import count_by_status


LOGGER = logging.getLogger(__name__)

RECENT_LIMIT = 5


@dataclass
class PageData:
    """What a page needs to render: a collection, a record, or why not"""
    items: List[Any] = field(default_factory=list)
    item: Any = None
    error: Optional[str] = None
    hint: Optional[str] = None
    not_found: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.not_found


def _load_collection(fetch: Callable[[], List[Any]], label: str) -> PageData:
    try:
        items = fetch()
    except RentalistAPIError as e:
        LOGGER.error("Failed to fetch %s: %s", label, e.message)
        return PageData(error=e.message, hint=Config.api_host())
    except Exception as e:
        LOGGER.exception("Unexpected error fetching %s", label)
        return PageData(error=f'Failed to load {label}: {e}', hint=Config.api_host())
    return PageData(items=list(items))


def _load_record(fetch: Callable[[str], Any], record_id: str, label: str) -> PageData:
    try:
        item = fetch(record_id)
    except RentalistAPIError as e:
        LOGGER.error("Error loading %s %s: %s", label, record_id, e.message)
        return PageData(not_found=True, error=e.message)
    except Exception as e:
        LOGGER.exception("Unexpected error loading %s %s", label, record_id)
        return PageData(not_found=True, error=str(e))
    return PageData(item=item)


def load_listings(client: RentalistClient, status: str = None) -> PageData:
    return _load_collection(lambda: client.get_listings(status=status), 'listings')


def load_leads(client: RentalistClient, status: str = None) -> PageData:
    return _load_collection(lambda: client.get_leads(status), 'leads')


def load_partners(client: RentalistClient, status: str = None) -> PageData:
    return _load_collection(lambda: client.get_partners(status), 'partners')


def load_listing(client: RentalistClient, listing_id: str) -> PageData:
    return _load_record(client.get_listing, listing_id, 'listing')


def load_lead(client: RentalistClient, lead_id: str) -> PageData:
    return _load_record(client.get_lead, lead_id, 'lead')


def load_partner(client: RentalistClient, partner_id: str) -> PageData:
    return _load_record(client.get_partner, partner_id, 'partner')


COLLECTION_LOADERS = {
    'listings': load_listings,
    'leads': load_leads,
    'partners': load_partners,
}

RECORD_LOADERS = {
    'listings': load_listing,
    'leads': load_lead,
    'partners': load_partner,
}


@dataclass
class DashboardData:
    """Home page aggregate over the three collections"""
    listings: PageData
    leads: PageData
    partners: PageData

    @property
    def errors(self) -> Dict[str, str]:
        return {
            name: page.error
            for name, page in (('listings', self.listings), ('leads', self.leads), ('partners', self.partners))
            if page.error
        }

    @property
    def stats(self) -> Dict[str, Dict[str, int]]:
        return {
            'listings': count_by_status(self.listings.items, ('published',)),
            'leads': count_by_status(self.leads.items, ('new',)),
            'partners': count_by_status(self.partners.items, ('active',)),
        }

    @property
    def recent_listings(self) -> List[Any]:
        return self.listings.items[:RECENT_LIMIT]

    @property
    def recent_leads(self) -> List[Any]:
        return self.leads.items[:RECENT_LIMIT]


def load_dashboard(client: RentalistClient) -> DashboardData:
    """Read the three collections in parallel; each one fails on its own"""
    with ThreadPoolExecutor(max_workers=3) as executor:
        futures = {
            name: executor.submit(loader, client)
            for name, loader in COLLECTION_LOADERS.items()
        }
        pages = {name: future.result() for name, future in futures.items()}
    return DashboardData(**pages)
