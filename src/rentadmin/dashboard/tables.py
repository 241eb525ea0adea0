"""
List table state

Each table holds its own copy of a collection, seeded from the page loader,
and keeps it in line with the backend after every call it issues:

- delete asks for confirmation first, then drops the row only once the
  backend confirmed the delete;
- a status change writes back the status the backend answered with, which
  is not necessarily the one that was asked for.

Nothing is changed locally before the backend answers, so a failed call
leaves `rows` exactly as it was.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ..api import RentalistClient, RentalistAPIError
from ..models import ListingStatus
from ..services.i18n import translate


LOGGER = logging.getLogger(__name__)

# Receives the question to ask, returns True for "yes"
ConfirmFn = Callable[[str], bool]


@dataclass
class TableResult:
    """Outcome of a table action"""
    ok: bool
    message: Optional[str] = None
    row: Any = None
    cancelled: bool = False


def count_by_status(rows: Iterable[Any], statuses: Sequence[str]) -> Dict[str, int]:
    """`{'total': n, <status>: count, ...}` for the given statuses"""
    rows = list(rows)
    counts = {'total': len(rows)}
    for status in statuses:
        counts[status] = sum(1 for row in rows if row.status == status)
    return counts


class RecordTable:
    """
    Base table for one entity collection.

    Subclasses name the entity and wire the two remote calls.
    """
    entity = ''
    stat_statuses: Sequence[str] = ()

    def __init__(self, client: RentalistClient, rows: Iterable[Any] = (), lang: str = None):
        self.client = client
        self.rows: List[Any] = list(rows)
        self.deleting: Optional[str] = None
        self.error: Optional[str] = None
        self.lang = lang

    def _t(self, key: str, **vars) -> str:
        return translate(f'table.{self.entity}.{key}', self.lang, **vars)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def find(self, record_id: str) -> Optional[Any]:
        for row in self.rows:
            if row.id == record_id:
                return row
        return None

    def stats(self) -> Dict[str, int]:
        return count_by_status(self.rows, self.stat_statuses)

    # ==================== REMOTE CALLS ====================

    def _remote_delete(self, record_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    def _remote_status(self, record_id: str, status: str) -> Any:
        raise NotImplementedError

    # ==================== ACTIONS ====================

    def _fail(self, key: str, error: RentalistAPIError) -> TableResult:
        message = self._t(key)
        if error.server_error:
            message = f'{message}: {error.server_error}'
        LOGGER.warning("%s table: %s (%s)", self.entity, message, error.message)
        self.error = message
        return TableResult(ok=False, message=message)

    def delete(self, record_id: str, confirm: ConfirmFn) -> TableResult:
        """
        Delete one row after confirmation.

        Args:
            record_id: Id of the row to delete
            confirm: Blocking yes/no prompt; a "no" makes this a no-op
        """
        if not confirm(self._t('confirm_delete')):
            return TableResult(ok=False, cancelled=True)

        self.error = None
        self.deleting = record_id
        try:
            self._remote_delete(record_id)
        except RentalistAPIError as e:
            return self._fail('delete_error', e)
        finally:
            self.deleting = None

        self.rows = [row for row in self.rows if row.id != record_id]
        LOGGER.info("%s table: deleted %s", self.entity, record_id)
        return TableResult(ok=True, message=self._t('deleted'))

    def change_status(self, record_id: str, status: str) -> TableResult:
        """Ask the backend for a new status and keep whatever it confirms"""
        self.error = None
        try:
            updated = self._remote_status(record_id, status)
        except RentalistAPIError as e:
            return self._fail('status_error', e)

        confirmed = updated.status
        self.rows = [
            replace(row, status=confirmed) if row.id == record_id else row
            for row in self.rows
        ]
        if confirmed != status:
            LOGGER.info("%s table: %s requested %s, backend kept %s", self.entity, record_id, status, confirmed)
        return TableResult(ok=True, message=self._t('status_updated'), row=self.find(record_id))


class ListingsTable(RecordTable):
    entity = 'listings'
    stat_statuses = ('published', 'draft', 'reserved')

    def _remote_delete(self, record_id):
        return self.client.delete_listing(record_id)

    def _remote_status(self, record_id, status):
        # Listings have no status endpoint; a partial PUT does the job
        return self.client.update_listing(record_id, {'status': status})

    @staticmethod
    def next_toggle_status(current: str) -> str:
        """The row toggle only flips between published and draft"""
        if current == ListingStatus.PUBLISHED.value:
            return ListingStatus.DRAFT.value
        return ListingStatus.PUBLISHED.value

    def toggle_status(self, record_id: str) -> TableResult:
        row = self.find(record_id)
        if row is None:
            self.error = self._t('missing_row')
            return TableResult(ok=False, message=self.error)
        return self.change_status(record_id, self.next_toggle_status(row.status))


class LeadsTable(RecordTable):
    entity = 'leads'
    stat_statuses = ('new', 'contacted', 'converted')

    def _remote_delete(self, record_id):
        return self.client.delete_lead(record_id)

    def _remote_status(self, record_id, status):
        return self.client.update_lead_status(record_id, status)


class PartnersTable(RecordTable):
    entity = 'partners'
    stat_statuses = ('active', 'pending')

    def _remote_delete(self, record_id):
        return self.client.delete_partner(record_id)

    def _remote_status(self, record_id, status):
        return self.client.update_partner_status(record_id, status)


TABLES = {
    'listings': ListingsTable,
    'leads': LeadsTable,
    'partners': PartnersTable,
}
