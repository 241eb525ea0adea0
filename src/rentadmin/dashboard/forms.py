"""
Create / edit form state

A form is in edit mode when it was given an existing record and in create
mode otherwise. The draft is seeded field by field with explicit defaults so
it never holds None, is updated from submitted HTML form data, and is sent
as a whole on submit.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..api import RentalistClient, RentalistAPIError, MissingDataError
from ..api.client import UploadFile
from ..models import Listing, Lead, Partner, slugify, date_only
from ..services.i18n import translate


LOGGER = logging.getLogger(__name__)

TAG_FIELDS = ('preferred_tenants', 'house_features', 'rules')


def parse_tag_list(text: Optional[str]) -> List[str]:
    """'WiFi, , Terraza ' -> ['WiFi', 'Terraza']"""
    return [item.strip() for item in (text or '').split(',') if item.strip()]


def move_item(items: List[Any], old_index: int, new_index: int) -> List[Any]:
    """Return a copy of `items` with one element moved to a new position"""
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


def _parse_number(value: Any, default: float = 0) -> float:
    """Read an <input type=number>; integral values stay ints"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    return int(number) if number.is_integer() else number


def _is_checked(value: Any) -> bool:
    return str(value).lower() in ('on', 'true', '1', 'yes')


def _getlist(form_data: Any, key: str) -> List[str]:
    if hasattr(form_data, 'getlist'):
        return list(form_data.getlist(key))
    value = form_data.get(key)
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple)) else [value]


@dataclass
class FormResult:
    """Outcome of a form submit"""
    ok: bool
    redirect: Optional[str] = None
    error: Optional[str] = None
    record: Any = None


class RecordForm:
    """Shared create-or-update flow; subclasses describe their fields"""
    entity = ''
    defaults: Dict[str, Any] = {}

    def __init__(self, client: RentalistClient, record: Any = None, lang: str = None):
        self.client = client
        self.record = record
        self.lang = lang
        self.draft: Dict[str, Any] = self._seed(record)
        self.is_submitting = False
        self.error: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.record is not None

    @property
    def record_id(self) -> Optional[str]:
        return self.record.id if self.record is not None else None

    @property
    def list_url(self) -> str:
        return f'/{self.entity}'

    def _t(self, key: str, **vars) -> str:
        return translate(f'form.{self.entity}.{key}', self.lang, **vars)

    def _seed(self, record: Any) -> Dict[str, Any]:
        draft = {}
        for name, default in self.defaults.items():
            value = getattr(record, name, None) if record is not None else None
            draft[name] = value if value not in (None, '') else default
        return draft

    def apply(self, form_data: Any) -> None:
        """Copy submitted text fields over the draft"""
        for name in self.defaults:
            if name in form_data:
                self.draft[name] = (form_data.get(name) or '').strip()

    def payload(self) -> Dict[str, Any]:
        return dict(self.draft)

    def _create(self, payload: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def _update(self, record_id: str, payload: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def submit(self) -> FormResult:
        """
        Create or update the record from the draft.

        On failure the draft is left untouched so the user can retry.
        """
        self.is_submitting = True
        self.error = None
        try:
            payload = self.payload()
            if self.is_editing:
                saved = self._update(self.record_id, payload)
            else:
                saved = self._create(payload)
        except MissingDataError:
            # Saved, but the backend did not echo the record back
            saved = None
        except RentalistAPIError as e:
            detail = e.server_error
            self.error = f'Error: {detail}' if detail else self._t('save_error')
            LOGGER.warning("%s form: save failed (%s)", self.entity, e.message)
            return FormResult(ok=False, error=self.error)
        finally:
            self.is_submitting = False

        LOGGER.info("%s form: saved %s", self.entity, getattr(saved, 'id', None))
        return FormResult(ok=True, redirect=self.list_url, record=saved)


class ListingForm(RecordForm):
    entity = 'listings'
    defaults = {
        'title': '',
        'price_per_week': 0,
        'bond': 0,
        'bills_included': False,
        'address': '',
        'suburb': '',
        'room_type': 'single',
        'available_from': '',
        'min_term_weeks': 1,
        'preferred_tenants': [],
        'house_features': [],
        'rules': [],
        'status': 'draft',
        'locale': 'es',
        'owner_partner_id': '',
    }

    def __init__(self, client: RentalistClient, record: Listing = None, lang: str = None):
        super().__init__(client, record, lang)
        self.images: List[str] = list(record.images) if record is not None else []
        self.uploading = False
        self.deleting_image: Optional[str] = None

    def _seed(self, record):
        draft = super()._seed(record)
        draft['available_from'] = date_only(draft['available_from'])
        for name in TAG_FIELDS:
            draft[name] = list(draft[name])
        return draft

    def apply(self, form_data: Any) -> None:
        for name in ('title', 'address', 'suburb', 'room_type', 'available_from',
                     'status', 'locale', 'owner_partner_id'):
            if name in form_data:
                self.draft[name] = (form_data.get(name) or '').strip()
        for name in ('price_per_week', 'bond'):
            if name in form_data:
                self.draft[name] = _parse_number(form_data.get(name), 0)
        if 'min_term_weeks' in form_data:
            self.draft['min_term_weeks'] = int(_parse_number(form_data.get('min_term_weeks'), 1)) or 1
        # Unchecked checkboxes are simply absent from the submission
        self.draft['bills_included'] = _is_checked(form_data.get('bills_included', ''))
        for name in TAG_FIELDS:
            if name in form_data:
                self.set_tags(name, form_data.get(name))
        self.images = [url.strip() for url in _getlist(form_data, 'images') if url.strip()]

    def set_tags(self, name: str, text: str) -> None:
        self.draft[name] = parse_tag_list(text)

    def tags_text(self, name: str) -> str:
        return ', '.join(self.draft.get(name) or [])

    def payload(self) -> Dict[str, Any]:
        data = dict(self.draft)
        if not data.get('owner_partner_id'):
            data.pop('owner_partner_id', None)
        data['images'] = list(self.images)
        data['slug'] = slugify(data['title'])
        return data

    def _create(self, payload):
        return self.client.create_listing(payload)

    def _update(self, record_id, payload):
        return self.client.update_listing(record_id, payload)

    # ==================== IMAGES ====================

    def add_image_url(self, url: str) -> bool:
        """Append a manually entered URL unless it is blank or already listed"""
        url = (url or '').strip()
        if not url or url in self.images:
            return False
        self.images.append(url)
        return True

    def merge_uploaded(self, urls: Iterable[str]) -> int:
        added = 0
        for url in urls:
            if url and url not in self.images:
                self.images.append(url)
                added += 1
        return added

    def upload_images(self, files: Iterable[UploadFile], folder: str = None) -> bool:
        """Send files to the upload endpoint and append the returned URLs"""
        files = list(files)
        if not files:
            return False
        self.uploading = True
        self.error = None
        try:
            urls = self.client.upload_images(files, folder)
        except RentalistAPIError as e:
            self.error = self._t('upload_error', error=e.server_error or e.message)
            LOGGER.warning("listing form: upload failed (%s)", e.message)
            return False
        finally:
            self.uploading = False
        self.merge_uploaded(urls)
        return True

    def move_image(self, old_index: int, new_index: int) -> bool:
        """Drag-reorder: same URLs, only positions change"""
        size = len(self.images)
        if not (0 <= old_index < size and 0 <= new_index < size) or old_index == new_index:
            return False
        self.images = move_item(self.images, old_index, new_index)
        return True

    def remove_image(self, index: int) -> bool:
        """Drop an image from the list without touching storage"""
        if not 0 <= index < len(self.images):
            return False
        self.images = [url for i, url in enumerate(self.images) if i != index]
        return True

    def delete_image(self, url: str, confirm: Callable[[str], bool]) -> bool:
        """Delete an uploaded image from storage, then drop it from the list"""
        if url not in self.images or not confirm(self._t('confirm_delete_image')):
            return False
        self.deleting_image = url
        self.error = None
        try:
            self.client.delete_image(url)
        except RentalistAPIError as e:
            self.error = self._t('delete_image_error', error=e.server_error or e.message)
            LOGGER.warning("listing form: image delete failed (%s)", e.message)
            return False
        finally:
            self.deleting_image = None
        self.images = [image for image in self.images if image != url]
        return True


class LeadForm(RecordForm):
    entity = 'leads'
    defaults = {
        'name': '',
        'email': '',
        'phone': '',
        'message': '',
        'status': 'new',
    }

    def _create(self, payload):
        return self.client.create_lead(payload)

    def _update(self, record_id, payload):
        return self.client.update_lead(record_id, payload)


class PartnerForm(RecordForm):
    entity = 'partners'
    defaults = {
        'name': '',
        'email': '',
        'phone': '',
        'company_name': '',
        'status': 'pending',
    }

    def _create(self, payload):
        return self.client.create_partner(payload)

    def _update(self, record_id, payload):
        return self.client.update_partner(record_id, payload)


FORMS = {
    'listings': ListingForm,
    'leads': LeadForm,
    'partners': PartnerForm,
}
