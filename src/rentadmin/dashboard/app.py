#!/usr/bin/env python3
"""
Rentalist Admin Dashboard - Web UI for managing listings, leads and partners

Every page reads from the backend at request time. Row actions (delete,
status) rebuild the page's table from that read, apply the change through
the table, and render the table's reconciled rows.
"""
import logging
import os
from datetime import datetime
from functools import wraps
from pathlib import Path

from flask import Flask, render_template, request, jsonify, redirect, url_for, flash, session, g, abort
from werkzeug.utils import secure_filename

from ..api import RentalistClient, RentalistAPIError, Config, configure_logging
from ..models import Listing, Lead, Partner
from ..services.i18n import (
    SUPPORTED_LANGUAGES, get_language, translate, status_label, status_options, normalize_language
)
from .forms import ListingForm, LeadForm, PartnerForm, RecordForm
from .loaders import PageData, load_dashboard, load_partners, COLLECTION_LOADERS, RECORD_LOADERS
from .tables import TABLES, RecordTable, ListingsTable, TableResult


LOGGER = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / 'templates'
STATIC_DIR = Path(__file__).parent / 'static'

app = Flask(__name__, template_folder=str(TEMPLATE_DIR), static_folder=str(STATIC_DIR))
app.secret_key = Config.SECRET_KEY
app.config['MAX_CONTENT_LENGTH'] = Config.MAX_UPLOAD_MB * 1024 * 1024

NAVIGATION = [
    ('index', 'nav.dashboard'),
    ('listings', 'nav.listings'),
    ('leads', 'nav.leads'),
    ('partners', 'nav.partners'),
]


def get_client():
    """Get Rentalist API client"""
    return RentalistClient()


def wants_json() -> bool:
    return request.is_json or request.accept_mimetypes.best == 'application/json'


def api_error_handler(f):
    """Decorator to handle API errors that escape a table or form"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except RentalistAPIError as e:
            LOGGER.warning("API error in %s: %s", request.path, e.message)
            if wants_json():
                return jsonify({'success': False, 'error': e.message, 'status_code': e.status_code}), e.status_code or 500
            flash(f'API Error: {e.message}', 'error')
            return redirect(request.referrer or url_for('index'))
    return decorated_function


# ==================== REQUEST CONTEXT ====================

@app.before_request
def load_language():
    """Resolve the UI language before each request"""
    g.lang = get_language(session_obj=session, request_obj=request, default=Config.DEFAULT_LANGUAGE)


@app.context_processor
def inject_helpers():
    """Make translation and status helpers available in all templates"""
    lang = getattr(g, 'lang', Config.DEFAULT_LANGUAGE)
    return dict(
        lang=lang,
        languages=SUPPORTED_LANGUAGES,
        t=lambda key, **vars: translate(key, lang, **vars),
        status_label=lambda entity, status: status_label(entity, status, lang),
        status_options=lambda entity: status_options(entity, lang),
        navigation=NAVIGATION,
        public_url=Config.PUBLIC_URL.rstrip('/'),
        api_host=Config.api_host(),
    )


@app.template_filter('currency')
def format_currency(amount):
    """es-ES euro formatting: 1234.5 -> '1.234,50 €'"""
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        return str(amount)
    text = f'{value:,.2f}'.replace(',', '_').replace('.', ',').replace('_', '.')
    return f'{text} €'


@app.template_filter('date')
def format_date(value, with_time=False):
    """ISO timestamp -> dd/mm/yyyy (es-ES)"""
    if not value:
        return ''
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return str(value)
    return parsed.strftime('%d/%m/%Y %H:%M' if with_time else '%d/%m/%Y')


@app.errorhandler(404)
def not_found(e):
    if wants_json():
        return jsonify({'success': False, 'error': 'Not found'}), 404
    return render_template('not_found.html'), 404


# ==================== SHARED VIEW HELPERS ====================

def _list_template(entity: str) -> str:
    return f'{entity}/list.html'


def _build_table(entity: str, client: RentalistClient):
    page = COLLECTION_LOADERS[entity](client)
    table = TABLES[entity](client, page.items, lang=g.lang)
    return page, table


def _render_table(entity: str, page: PageData, table: RecordTable, result: TableResult = None):
    """Render a list page from the table's local rows"""
    if result is not None and wants_json():
        body = {'success': result.ok}
        if result.ok:
            body['data'] = result.row.to_dict() if result.row is not None else None
        elif result.cancelled:
            body['cancelled'] = True
        else:
            body['error'] = result.message
        return jsonify(body), (200 if result.ok or result.cancelled else 400)

    if result is not None and result.message:
        flash(result.message, 'success' if result.ok else 'error')
    return render_template(_list_template(entity), page=page, table=table, entity=entity)


def _list_view(entity: str):
    client = get_client()
    page, table = _build_table(entity, client)
    return _render_table(entity, page, table)


def _detail_or_404(entity: str, client: RentalistClient, record_id: str):
    page = RECORD_LOADERS[entity](client, record_id)
    if page.not_found:
        abort(404)
    return page.item


def _delete_view(entity: str, record_id: str):
    """GET asks for confirmation, POST carries the answer"""
    if request.method == 'GET':
        return render_template(
            'confirm_delete.html',
            entity=entity,
            record_id=record_id,
            question=translate(f'table.{entity}.confirm_delete', g.lang)
        )

    answer = (request.form.get('confirm') or (request.get_json(silent=True) or {}).get('confirm') or 'no').lower()
    client = get_client()
    page, table = _build_table(entity, client)
    result = table.delete(record_id, confirm=lambda question: answer == 'yes')
    return _render_table(entity, page, table, result)


def _status_view(entity: str, record_id: str):
    payload = request.get_json(silent=True) or request.form
    status = (payload.get('status') or '').strip()
    client = get_client()
    page, table = _build_table(entity, client)
    if isinstance(table, ListingsTable) and not status:
        result = table.toggle_status(record_id)
    elif not status:
        result = TableResult(ok=False, message=translate('table.status_required', g.lang))
    else:
        result = table.change_status(record_id, status)
    return _render_table(entity, page, table, result)


def _submit_form(form: RecordForm):
    """Save the draft; returns a redirect on success, None to re-render"""
    result = form.submit()
    if result.ok:
        flash(translate(f'form.{form.entity}.saved', g.lang), 'success')
        return redirect(result.redirect)
    flash(result.error, 'error')
    return None


def _partner_choices(client: RentalistClient):
    """Owner selector options; a failed read just leaves the selector empty"""
    return load_partners(client).items


# ==================== PAGES ====================

@app.route('/')
def index():
    """Dashboard home page"""
    dashboard = load_dashboard(get_client())
    return render_template('index.html', dashboard=dashboard)


@app.route('/health')
def health():
    """Proxy the backend health check"""
    try:
        body = get_client().health_check()
    except RentalistAPIError as e:
        return jsonify({'ok': False, 'error': e.message, 'api': Config.API_BASE_URL}), 503
    return jsonify(body)


@app.route('/language', methods=['POST'])
def set_language():
    session['ui_lang'] = normalize_language(request.form.get('lang'))
    return redirect(request.referrer or url_for('index'))


# ==================== LISTINGS ====================

@app.route('/listings')
def listings():
    """Listings table"""
    return _list_view('listings')


@app.route('/listings/<listing_id>/view')
def view_listing(listing_id):
    """View single listing"""
    listing = _detail_or_404('listings', get_client(), listing_id)
    return render_template('listings/view.html', listing=listing)


def _listing_form_view(form: ListingForm, client: RentalistClient):
    """
    Handle a listing form post.

    Image buttons (`action=add_image`, `upload`, `move:<from>:<to>`,
    `remove:<i>`, `delete_image:<i>`) edit the draft's image list and
    re-render; anything else saves.
    """
    if request.method == 'POST':
        form.apply(request.form)
        action = request.form.get('action', 'save')
        if action == 'save':
            response = _submit_form(form)
            if response is not None:
                return response
        elif action == 'add_image':
            if not form.add_image_url(request.form.get('new_image_url')):
                flash(translate('form.listings.image_not_added', g.lang), 'warning')
        elif action == 'upload':
            files = [
                (secure_filename(f.filename) or 'image', f.stream, f.mimetype)
                for f in request.files.getlist('image_files') if f and f.filename
            ]
            if not form.upload_images(files, Config.UPLOAD_FOLDER) and form.error:
                flash(form.error, 'error')
        elif action.startswith(('move:', 'remove:', 'delete_image:')):
            _image_action(form, action)
        else:
            LOGGER.warning("Unknown listing form action %r", action)

    return render_template('listings/form.html', form=form, partners=_partner_choices(client))


def _image_action(form: ListingForm, action: str) -> None:
    name, _, args = action.partition(':')
    try:
        indexes = [int(part) for part in args.split(':')]
    except ValueError:
        LOGGER.warning("Malformed image action %r", action)
        return
    if name == 'move' and len(indexes) == 2:
        form.move_image(indexes[0], indexes[1])
    elif name == 'remove':
        form.remove_image(indexes[0])
    elif name == 'delete_image' and 0 <= indexes[0] < len(form.images):
        # The browser already asked before posting this button
        if not form.delete_image(form.images[indexes[0]], confirm=lambda question: True) and form.error:
            flash(form.error, 'error')


@app.route('/listings/create', methods=['GET', 'POST'])
@api_error_handler
def create_listing():
    """New listing form"""
    client = get_client()
    return _listing_form_view(ListingForm(client, lang=g.lang), client)


@app.route('/listings/<listing_id>/edit', methods=['GET', 'POST'])
@api_error_handler
def edit_listing(listing_id):
    """Edit listing form"""
    client = get_client()
    if request.method == 'GET':
        listing = _detail_or_404('listings', client, listing_id)
    else:
        listing = Listing(id=listing_id)
    return _listing_form_view(ListingForm(client, listing, lang=g.lang), client)


@app.route('/listings/<listing_id>/delete', methods=['GET', 'POST'])
@api_error_handler
def delete_listing(listing_id):
    return _delete_view('listings', listing_id)


@app.route('/listings/<listing_id>/status', methods=['POST'])
@api_error_handler
def listing_status(listing_id):
    """Publish/draft toggle (or an explicit `status`)"""
    return _status_view('listings', listing_id)


# ==================== LEADS ====================

@app.route('/leads')
def leads():
    """Leads table"""
    return _list_view('leads')


@app.route('/leads/<lead_id>/view')
def view_lead(lead_id):
    lead = _detail_or_404('leads', get_client(), lead_id)
    return render_template('leads/view.html', lead=lead)


def _simple_form_view(form: RecordForm, template: str):
    if request.method == 'POST':
        form.apply(request.form)
        response = _submit_form(form)
        if response is not None:
            return response
    return render_template(template, form=form)


@app.route('/leads/create', methods=['GET', 'POST'])
@api_error_handler
def create_lead():
    return _simple_form_view(LeadForm(get_client(), lang=g.lang), 'leads/form.html')


@app.route('/leads/<lead_id>/edit', methods=['GET', 'POST'])
@api_error_handler
def edit_lead(lead_id):
    client = get_client()
    lead = _detail_or_404('leads', client, lead_id) if request.method == 'GET' else Lead(id=lead_id)
    return _simple_form_view(LeadForm(client, lead, lang=g.lang), 'leads/form.html')


@app.route('/leads/<lead_id>/delete', methods=['GET', 'POST'])
@api_error_handler
def delete_lead(lead_id):
    return _delete_view('leads', lead_id)


@app.route('/leads/<lead_id>/status', methods=['POST'])
@api_error_handler
def lead_status(lead_id):
    return _status_view('leads', lead_id)


# ==================== PARTNERS ====================

@app.route('/partners')
def partners():
    """Partners table"""
    return _list_view('partners')


@app.route('/partners/<partner_id>/view')
def view_partner(partner_id):
    partner = _detail_or_404('partners', get_client(), partner_id)
    return render_template('partners/view.html', partner=partner)


@app.route('/partners/create', methods=['GET', 'POST'])
@api_error_handler
def create_partner():
    return _simple_form_view(PartnerForm(get_client(), lang=g.lang), 'partners/form.html')


@app.route('/partners/<partner_id>/edit', methods=['GET', 'POST'])
@api_error_handler
def edit_partner(partner_id):
    client = get_client()
    partner = _detail_or_404('partners', client, partner_id) if request.method == 'GET' else Partner(id=partner_id)
    return _simple_form_view(PartnerForm(client, partner, lang=g.lang), 'partners/form.html')


@app.route('/partners/<partner_id>/delete', methods=['GET', 'POST'])
@api_error_handler
def delete_partner(partner_id):
    return _delete_view('partners', partner_id)


@app.route('/partners/<partner_id>/status', methods=['POST'])
@api_error_handler
def partner_status(partner_id):
    return _status_view('partners', partner_id)


def main():
    configure_logging()
    print("=" * 50)
    print("Rentalist Admin Dashboard")
    print("=" * 50)

    if not Config.validate():
        print("\n⚠ Warning: RENTALIST_API_URL is not a valid URL")

    port = int(os.environ.get('PORT', 5000))

    print(f"\nBackend API: {Config.API_BASE_URL}")
    print(f"Starting server at http://localhost:{port}")
    print("Press Ctrl+C to stop\n")

    app.run(debug=Config.DEBUG, host='0.0.0.0', port=port)


if __name__ == '__main__':
    main()
