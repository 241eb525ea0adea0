"""Tests for the Flask views, driven through Flask's test client."""

from __future__ import annotations

import re

from flask import render_template
from werkzeug.datastructures import MultiDict

from rentadmin.dashboard.app import app, format_currency, format_date
from rentadmin.dashboard.loaders import PageData
from rentadmin.dashboard.tables import LeadsTable
from rentadmin.models import Lead

from conftest import FakeResponse, failed, lead_data, listing_data, ok, partner_data


def _body(response) -> str:
    return response.get_data(as_text=True)


def test_currency_and_date_filters():
    assert format_currency(1234.5) == "1.234,50 €"
    assert format_currency(None) == "0,00 €"
    assert format_date("2025-08-03T09:30:00.000Z") == "03/08/2025"
    assert format_date("") == ""


def test_dashboard_home(web, session):
    session.add("GET", "/listings/admin/all", ok([listing_data()]))
    session.add("GET", "/leads", ok([lead_data()]))
    session.add("GET", "/partners", ok([partner_data()]))

    response = web.get("/")

    body = _body(response)
    assert response.status_code == 200
    assert "Resumen general de tu plataforma Rentalist" in body
    assert "Listings Recientes" in body
    assert "Ana García" in body


def test_empty_listings_table_invites_creation(web, session):
    session.add("GET", "/listings/admin/all", ok([]))

    body = _body(web.get("/listings"))

    assert "No hay propiedades registradas" in body
    assert "Crear primera propiedad" in body


def test_listings_load_error_shows_hint(web, session):
    session.add("GET", "/listings/admin/all", failed(500))

    body = _body(web.get("/listings"))

    assert "Error al cargar las listings" in body
    assert "Asegúrate de que la API esté ejecutándose en" in body
    assert "No hay propiedades registradas" not in body


def test_listings_table_rows(web, session):
    session.add("GET", "/listings/admin/all", ok([listing_data()]))

    body = _body(web.get("/listings"))

    assert 'id="row-L1"' in body
    assert "180,00 €" in body
    assert "Publicado" in body


def test_missing_listing_renders_not_found(web, session):
    session.add("GET", "/listings/admin/999", failed(404, "Listing not found"))

    view = web.get("/listings/999/view")
    edit = web.get("/listings/999/edit")

    assert view.status_code == 404
    assert "No encontrado" in _body(view)
    assert edit.status_code == 404


def test_listing_view_links_public_page(web, session):
    session.add("GET", "/listings/admin/L1", ok(listing_data()))

    body = _body(web.get("/listings/L1/view"))

    assert "/listings/double-room-near-metro" in body
    assert "WiFi" in body


def test_lead_with_bare_listing_id_shows_deleted_label(web, session):
    session.add("GET", "/leads/D1", ok(lead_data(listing_id="L9")))

    body = _body(web.get("/leads/D1/view"))

    assert "Listing eliminado" in body
    assert "/listings/L9/view" not in body


def test_lead_with_expanded_listing_links_to_it(web, session):
    session.add("GET", "/leads/D1", ok(lead_data()))

    body = _body(web.get("/leads/D1/view"))

    assert "Double Room, Near Metro!" in body
    assert "/listings/L1/view" in body
    assert "Ver listing" in body


def test_create_lead_redirects_to_leads(web, session):
    session.add("POST", "/leads", ok(lead_data(_id="D9")))

    response = web.post("/leads/create", data={"name": "Luis", "email": "luis@example.com", "status": "new"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/leads")
    assert session.calls_to("POST", "/leads")[0].json["name"] == "Luis"


def test_failed_create_rerenders_draft(web, session):
    session.add("POST", "/leads", failed(400, "Email already exists"))

    response = web.post("/leads/create", data={"name": "Luis", "email": "luis@example.com"})

    body = _body(response)
    assert response.status_code == 200
    assert "Error: Email already exists" in body
    assert 'value="Luis"' in body


def test_delete_confirmation_page(web, session):
    body = _body(web.get("/listings/L1/delete"))

    assert "¿Estás seguro de que quieres eliminar esta propiedad?" in body
    assert session.calls == []


def test_confirmed_delete_rerenders_without_row(web, session):
    session.add("GET", "/listings/admin/all", ok([listing_data(_id="L1"), listing_data(_id="L2")]))
    session.add("DELETE", "/listings/L2", ok({"message": "Listing deleted"}))

    body = _body(web.post("/listings/L2/delete", data={"confirm": "yes"}))

    assert "Propiedad eliminada" in body
    assert 'id="row-L1"' in body
    assert 'id="row-L2"' not in body


def test_unconfirmed_delete_sends_nothing(web, session):
    session.add("GET", "/listings/admin/all", ok([listing_data()]))

    web.post("/listings/L1/delete", data={"confirm": "no"})

    assert session.calls_to("DELETE") == []


def test_delete_failure_as_json(web, session):
    session.add("GET", "/partners", ok([partner_data()]))
    session.add("DELETE", "/partners/P1", failed(409, "Partner owns listings"))

    response = web.post("/partners/P1/delete", json={"confirm": "yes"})

    assert response.status_code == 400
    assert response.get_json() == {"success": False, "error": "Error al eliminar el partner: Partner owns listings"}


def test_status_change_as_json_returns_server_value(web, session):
    session.add("GET", "/leads", ok([lead_data()]))
    session.add("PATCH", "/leads/D1/status", ok(lead_data(status="converted")))

    response = web.post("/leads/D1/status", json={"status": "contacted"})

    payload = response.get_json()
    assert payload["success"] is True
    assert payload["data"]["status"] == "converted"


def test_listing_toggle_without_status(web, session):
    session.add("GET", "/listings/admin/all", ok([listing_data(status="draft")]))
    session.add("PUT", "/listings/L1", ok(listing_data(status="published")))

    body = _body(web.post("/listings/L1/status"))

    assert session.calls_to("PUT", "/listings/L1")[0].json == {"status": "published"}
    assert "Estado actualizado" in body


def test_listing_form_moves_image(web, session):
    session.add("GET", "/partners", ok([partner_data()]))
    form = MultiDict([
        ("title", "Habitación"),
        ("images", "https://cdn.test/a.jpg"),
        ("images", "https://cdn.test/b.jpg"),
        ("images", "https://cdn.test/c.jpg"),
        ("action", "move:2:0"),
    ])

    body = _body(web.post("/listings/create", data=form))

    first = body.index('name="images" value="https://cdn.test/c.jpg"')
    second = body.index('name="images" value="https://cdn.test/a.jpg"')
    assert first < second
    assert session.calls_to("POST") == []
    assert "Ruiz Rentals" in body


def test_listing_edit_saves_and_redirects(web, session):
    session.add("PUT", "/listings/L1", ok(listing_data()))

    response = web.post("/listings/L1/edit", data={"title": "Nuevo piso centro", "action": "save"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/listings")
    assert session.calls_to("PUT", "/listings/L1")[0].json["slug"] == "nuevo-piso-centro"


def test_language_switch(web, session):
    session.add("GET", "/listings/admin/all", ok([]))

    web.post("/language", data={"lang": "en"})
    body = _body(web.get("/listings"))

    assert "No properties yet" in body


def test_health_proxy(web, session):
    session.add("GET", "/health", FakeResponse(200, {"ok": True, "status": "healthy"}))

    assert web.get("/health").get_json() == {"ok": True, "status": "healthy"}


def test_health_proxy_backend_down(web, session):
    session.add("GET", "/health", failed(503))

    response = web.get("/health")

    assert response.status_code == 503
    assert response.get_json()["ok"] is False


def test_create_without_echoed_record_redirects(web, session):
    session.add("POST", "/leads", FakeResponse(201, {"success": True, "message": "Lead created"}))

    response = web.post("/leads/create", data={"name": "Luis", "email": "luis@example.com"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/leads")


def test_status_change_without_echoed_record_reports_error(web, session):
    session.add("GET", "/leads", ok([lead_data()]))
    session.add("PATCH", "/leads/D1/status", ok(None))

    response = web.post("/leads/D1/status", json={"status": "contacted"})

    assert response.status_code == 400
    assert response.get_json() == {"success": False, "error": "Error al actualizar el estado"}


def test_accept_header_with_json_first_gets_json(web, session):
    session.add("GET", "/partners", ok([partner_data()]))
    session.add("PATCH", "/partners/P1/status", ok(partner_data(status="inactive")))

    response = web.post(
        "/partners/P1/status",
        data={"status": "inactive"},
        headers={"Accept": "application/json, text/plain"},
    )

    assert response.get_json()["data"]["status"] == "inactive"


def test_row_delete_disabled_while_in_flight(client):
    table = LeadsTable(client, [Lead.from_api(lead_data(_id="D1")), Lead.from_api(lead_data(_id="D2"))])
    table.deleting = "D1"

    with app.test_request_context("/leads"):
        app.preprocess_request()
        body = render_template("leads/list.html", page=PageData(items=table.rows), table=table, entity="leads")

    assert len(re.findall(r'class="btn-link danger"\s+disabled>', body)) == 1
