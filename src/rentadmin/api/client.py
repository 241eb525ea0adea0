"""
Rentalist REST API Client

Thin typed gateway to the marketplace backend used by the admin dashboard.

Every endpoint answers with the envelope

    {"success": true, "data": ..., "count": 3}
    {"success": false, "error": "Listing not found"}

which is unwrapped here; callers only ever see domain objects or a
RentalistAPIError. One attempt per call: no retries, no cache.
"""
import json
import logging
import requests
from typing import Optional, Dict, Any, List, Iterable, Tuple, IO
from .config import Config
from ..models import Listing, Lead, Partner, ApiResponse


LOGGER = logging.getLogger(__name__)


class RentalistAPIError(Exception):
    """Custom exception for Rentalist API errors"""
    def __init__(self, message: str, status_code: int = None, response: Any = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404

    @property
    def server_error(self) -> Optional[str]:
        """The `error` text the backend sent, if it sent one"""
        if isinstance(self.response, dict):
            error = self.response.get('error')
            if isinstance(error, str) and error.strip():
                return error
        return None


class MissingDataError(RentalistAPIError):
    """The backend reported success but sent no record"""


# (filename, stream, mimetype) as taken from an uploaded form file
UploadFile = Tuple[str, IO[bytes], Optional[str]]


class RentalistClient:
    """
    Rentalist backend API client

    Base URL defaults to Config.API_BASE_URL (http://localhost:4000/api).
    """

    def __init__(self, base_url: str = None, timeout: int = None, session: requests.Session = None):
        """
        Initialize the client

        Args:
            base_url: API base URL (uses env if not provided)
            timeout: Per-request timeout in seconds
            session: Pre-built requests session (tests inject a stub here)
        """
        self.base_url = (base_url or Config.API_BASE_URL).rstrip('/')
        self.timeout = timeout or Config.REQUEST_TIMEOUT

        self.session = session or requests.Session()
        # Avoid picking up unrelated HTTP_PROXY/HTTPS_PROXY from the environment
        self.session.trust_env = False
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': Config.USER_AGENT,
        })

    # ==================== REQUEST HANDLER ====================

    def _send(
        self,
        method: str,
        endpoint: str,
        data: dict = None,
        params: dict = None,
        files: list = None,
        form: dict = None
    ) -> Any:
        """
        Issue one request and return the decoded JSON body.

        Raises RentalistAPIError for transport failures, non-JSON bodies and
        non-2xx statuses.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        if params:
            params = {k: str(v) for k, v in params.items() if v is not None}

        LOGGER.debug("%s %s params=%s", method, url, params or {})
        if data is not None:
            LOGGER.debug("Data: %s", json.dumps(data, ensure_ascii=False, default=str)[:500])

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                params=params or None,
                files=files,
                data=form,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            LOGGER.warning("%s %s failed: %s", method, url, e)
            raise RentalistAPIError(f"Request failed: {e}")

        LOGGER.debug("Response Status: %s", response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            error_msg = None
            if isinstance(body, dict):
                error_msg = body.get('error') or body.get('message')
            if not error_msg:
                error_msg = f"HTTP error! status: {response.status_code}"
            LOGGER.warning("%s %s -> %s: %s", method, url, response.status_code, error_msg)
            raise RentalistAPIError(
                message=error_msg,
                status_code=response.status_code,
                response=body
            )

        if body is None:
            raise RentalistAPIError(
                f"Invalid JSON response from {endpoint}",
                status_code=response.status_code
            )
        return body

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Send a request and unwrap the `{success, data}` envelope"""
        body = self._send(method, endpoint, **kwargs)
        envelope = ApiResponse.parse(body)
        if not envelope.success:
            raise RentalistAPIError(
                envelope.error or 'Request failed',
                response=body
            )
        return envelope.data

    def _make_record_request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Like _make_request, for endpoints that answer with one record"""
        data = self._make_request(method, endpoint, **kwargs)
        if not isinstance(data, dict):
            LOGGER.warning("%s %s: success without a record", method, endpoint)
            raise MissingDataError("Invalid response: missing data", response=data)
        return data

    @staticmethod
    def _require_id(record_id: str, kind: str) -> str:
        if not record_id or not str(record_id).strip():
            raise RentalistAPIError(f"A {kind} id is required")
        return str(record_id).strip()

    @staticmethod
    def _as_list(data: Any) -> List[Dict[str, Any]]:
        return [item for item in (data or []) if isinstance(item, dict)]

    # ==================== HEALTH ====================

    def health_check(self) -> Dict[str, Any]:
        """
        Ping the backend

        Returns:
            The raw health body, e.g. {'ok': True, 'status': 'healthy', 'timestamp': ...}
        """
        return self._send('GET', '/health')

    # ==================== LISTING OPERATIONS ====================

    def get_listings(self, status: str = None, limit: int = None, **filters) -> List[Listing]:
        """
        Get all listings through the admin route (drafts included)

        Args:
            status: Optional status filter (draft, published, reserved, rented)
            limit: Optional maximum number of records
            **filters: Any other query parameters; None values are dropped
        """
        params = {'status': status, 'limit': limit, **filters}
        data = self._make_request('GET', '/listings/admin/all', params=params)
        return [Listing.from_api(item) for item in self._as_list(data)]

    def get_listing(self, listing_id: str) -> Listing:
        """Get a single listing by ID through the admin route"""
        listing_id = self._require_id(listing_id, 'listing')
        return Listing.from_api(self._make_record_request('GET', f'/listings/admin/{listing_id}'))

    def get_listing_by_slug(self, slug: str) -> Listing:
        """Public lookup by slug"""
        slug = self._require_id(slug, 'listing slug')
        return Listing.from_api(self._make_record_request('GET', f'/listings/slug/{slug}'))

    def get_published_listings(self, **filters) -> List[Listing]:
        """
        Public collection read

        Args:
            **filters: suburb, room_type, min_price, max_price, limit
        """
        data = self._make_request('GET', '/listings', params=filters)
        return [Listing.from_api(item) for item in self._as_list(data)]

    def create_listing(self, listing_data: Dict[str, Any]) -> Listing:
        """Create a new listing"""
        return Listing.from_api(self._make_record_request('POST', '/listings', data=listing_data))

    def update_listing(self, listing_id: str, listing_data: Dict[str, Any]) -> Listing:
        """
        Update an existing listing

        Also used for the status toggle with a partial `{'status': ...}` body.
        """
        listing_id = self._require_id(listing_id, 'listing')
        return Listing.from_api(self._make_record_request('PUT', f'/listings/{listing_id}', data=listing_data))

    def delete_listing(self, listing_id: str) -> Dict[str, Any]:
        """Delete a listing"""
        listing_id = self._require_id(listing_id, 'listing')
        return self._make_request('DELETE', f'/listings/{listing_id}') or {}

    def upload_images(self, files: Iterable[UploadFile], folder: str = None) -> List[str]:
        """
        Upload images to storage through the backend

        Args:
            files: (filename, stream, mimetype) tuples
            folder: Storage folder (defaults to Config.UPLOAD_FOLDER)

        Returns:
            Public URLs of the stored images, in upload order
        """
        parts = [('images', (name, stream, mimetype or 'application/octet-stream'))
                 for name, stream, mimetype in files]
        if not parts:
            return []
        data = self._make_request(
            'POST',
            '/listings/upload-images',
            files=parts,
            form={'folder': folder or Config.UPLOAD_FOLDER}
        )
        urls = data.get('uploadedUrls') if isinstance(data, dict) else data
        return [str(url) for url in (urls or [])]

    def delete_image(self, image_url: str) -> Dict[str, Any]:
        """Remove an uploaded image from storage"""
        image_url = self._require_id(image_url, 'image url')
        return self._make_request('DELETE', '/listings/delete-image', data={'imageUrl': image_url}) or {}

    # ==================== LEAD OPERATIONS ====================

    def get_leads(self, status: str = None) -> List[Lead]:
        """Get leads, optionally filtered by status"""
        data = self._make_request('GET', '/leads', params={'status': status or None})
        return [Lead.from_api(item) for item in self._as_list(data)]

    def get_lead(self, lead_id: str) -> Lead:
        lead_id = self._require_id(lead_id, 'lead')
        return Lead.from_api(self._make_record_request('GET', f'/leads/{lead_id}'))

    def create_lead(self, lead_data: Dict[str, Any]) -> Lead:
        return Lead.from_api(self._make_record_request('POST', '/leads', data=lead_data))

    def update_lead(self, lead_id: str, lead_data: Dict[str, Any]) -> Lead:
        lead_id = self._require_id(lead_id, 'lead')
        return Lead.from_api(self._make_record_request('PUT', f'/leads/{lead_id}', data=lead_data))

    def update_lead_status(self, lead_id: str, status: str) -> Lead:
        lead_id = self._require_id(lead_id, 'lead')
        return Lead.from_api(self._make_record_request('PATCH', f'/leads/{lead_id}/status', data={'status': status}))

    def delete_lead(self, lead_id: str) -> Dict[str, Any]:
        lead_id = self._require_id(lead_id, 'lead')
        return self._make_request('DELETE', f'/leads/{lead_id}') or {}

    # ==================== PARTNER OPERATIONS ====================

    def get_partners(self, status: str = None) -> List[Partner]:
        """Get partners, optionally filtered by status"""
        data = self._make_request('GET', '/partners', params={'status': status or None})
        return [Partner.from_api(item) for item in self._as_list(data)]

    def get_partner(self, partner_id: str) -> Partner:
        partner_id = self._require_id(partner_id, 'partner')
        return Partner.from_api(self._make_record_request('GET', f'/partners/{partner_id}'))

    def create_partner(self, partner_data: Dict[str, Any]) -> Partner:
        return Partner.from_api(self._make_record_request('POST', '/partners', data=partner_data))

    def update_partner(self, partner_id: str, partner_data: Dict[str, Any]) -> Partner:
        partner_id = self._require_id(partner_id, 'partner')
        return Partner.from_api(self._make_record_request('PUT', f'/partners/{partner_id}', data=partner_data))

    def update_partner_status(self, partner_id: str, status: str) -> Partner:
        partner_id = self._require_id(partner_id, 'partner')
        return Partner.from_api(self._make_record_request('PATCH', f'/partners/{partner_id}/status', data={'status': status}))

    def delete_partner(self, partner_id: str) -> Dict[str, Any]:
        partner_id = self._require_id(partner_id, 'partner')
        return self._make_request('DELETE', f'/partners/{partner_id}') or {}
