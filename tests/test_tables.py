"""Tests for the list tables: confirm-then-delete and server-echoed status."""

from __future__ import annotations

import copy

from rentadmin.dashboard.tables import LeadsTable, ListingsTable, PartnersTable, count_by_status
from rentadmin.models import Lead, Listing, Partner

from conftest import failed, lead_data, listing_data, ok, partner_data


def _listings():
    return [
        Listing.from_api(listing_data(_id="L1", status="published")),
        Listing.from_api(listing_data(_id="L2", status="draft")),
        Listing.from_api(listing_data(_id="L3", status="reserved")),
    ]


def _leads():
    return [Lead.from_api(lead_data(_id="D1")), Lead.from_api(lead_data(_id="D2", status="contacted"))]


def yes(question):
    return True


def no(question):
    return False


# ── delete ─────────────────────────────────────────────────────────────────


def test_delete_removes_exactly_that_row(client, session):
    session.add("DELETE", "/listings/L2", ok({"message": "Listing deleted"}))
    table = ListingsTable(client, _listings())

    result = table.delete("L2", confirm=yes)

    assert result.ok
    assert result.message == "Propiedad eliminada"
    assert [row.id for row in table.rows] == ["L1", "L3"]
    assert table.deleting is None


def test_delete_asks_the_entity_question(client, session):
    session.add("DELETE", "/leads/D1", ok({"message": "Lead deleted"}))
    asked = []
    table = LeadsTable(client, _leads())

    table.delete("D1", confirm=lambda question: asked.append(question) or True)

    assert asked == ["¿Estás seguro de que quieres eliminar este lead?"]


def test_declined_delete_is_a_noop(client, session):
    table = ListingsTable(client, _listings())
    before = copy.deepcopy(table.rows)

    result = table.delete("L2", confirm=no)

    assert result.cancelled
    assert not result.ok
    assert table.rows == before
    assert session.calls == []


def test_delete_marks_row_while_in_flight(client, session):
    table = PartnersTable(client, [Partner.from_api(partner_data())])
    seen = []

    def respond(call):
        seen.append(table.deleting)
        return ok({"message": "Partner deleted"})

    session.add("DELETE", "/partners/P1", respond)

    table.delete("P1", confirm=yes)

    assert seen == ["P1"]
    assert table.deleting is None
    assert table.is_empty


def test_failed_delete_keeps_rows_and_reports_server_error(client, session):
    session.add("DELETE", "/listings/L1", failed(409, "Listing has active leads"))
    table = ListingsTable(client, _listings())
    before = copy.deepcopy(table.rows)

    result = table.delete("L1", confirm=yes)

    assert not result.ok
    assert result.message == "Error al eliminar la propiedad: Listing has active leads"
    assert table.error == result.message
    assert table.rows == before
    assert table.deleting is None


def test_failed_delete_without_server_text_uses_generic_message(client, session):
    session.add("DELETE", "/leads/D1", failed(500))
    table = LeadsTable(client, _leads())

    result = table.delete("D1", confirm=yes)

    assert result.message == "Error al eliminar el lead"
    assert len(table.rows) == 2


# ── status ─────────────────────────────────────────────────────────────────


def test_change_status_keeps_server_echoed_value(client, session):
    # Backend answers with a different status than the one requested
    session.add("PATCH", "/leads/D1/status", ok(lead_data(_id="D1", status="converted")))
    table = LeadsTable(client, _leads())

    result = table.change_status("D1", "contacted")

    assert result.ok
    assert session.calls[0].json == {"status": "contacted"}
    assert table.find("D1").status == "converted"
    assert result.row.status == "converted"
    assert table.find("D2").status == "contacted"


def test_failed_status_change_leaves_rows_untouched(client, session):
    session.add("PATCH", "/partners/P1/status", failed(400, "Invalid status"))
    table = PartnersTable(client, [Partner.from_api(partner_data())])
    before = copy.deepcopy(table.rows)

    result = table.change_status("P1", "inactive")

    assert not result.ok
    assert result.message == "Error al actualizar el estado: Invalid status"
    assert table.rows == before


def test_status_change_without_echoed_record_is_a_failure(client, session):
    session.add("PATCH", "/leads/D1/status", ok(None))
    table = LeadsTable(client, _leads())
    before = copy.deepcopy(table.rows)

    result = table.change_status("D1", "contacted")

    assert not result.ok
    assert result.message == "Error al actualizar el estado"
    assert table.rows == before


def test_listing_status_goes_through_update(client, session):
    session.add("PUT", "/listings/L3", ok(listing_data(_id="L3", status="rented")))
    table = ListingsTable(client, _listings())

    table.change_status("L3", "rented")

    assert session.calls[0].json == {"status": "rented"}
    assert table.find("L3").status == "rented"


def test_toggle_unpublishes_published_listing(client, session):
    session.add("PUT", "/listings/L1", ok(listing_data(_id="L1", status="draft")))
    table = ListingsTable(client, _listings())

    result = table.toggle_status("L1")

    assert result.ok
    assert session.calls[0].json == {"status": "draft"}
    assert table.find("L1").status == "draft"


def test_toggle_publishes_anything_else():
    assert ListingsTable.next_toggle_status("draft") == "published"
    assert ListingsTable.next_toggle_status("reserved") == "published"
    assert ListingsTable.next_toggle_status("rented") == "published"
    assert ListingsTable.next_toggle_status("published") == "draft"


def test_toggle_unknown_row(client, session):
    table = ListingsTable(client, _listings())

    result = table.toggle_status("nope")

    assert not result.ok
    assert session.calls == []


# ── misc ───────────────────────────────────────────────────────────────────


def test_stats_count_statuses(client):
    table = ListingsTable(client, _listings())

    assert table.stats() == {"total": 3, "published": 1, "draft": 1, "reserved": 1}


def test_count_by_status_empty():
    assert count_by_status([], ("new",)) == {"total": 0, "new": 0}


def test_messages_follow_language(client, session):
    session.add("DELETE", "/partners/P1", failed(500))
    table = PartnersTable(client, [Partner.from_api(partner_data())], lang="en")

    result = table.delete("P1", confirm=yes)

    assert result.message == "Error deleting the partner"


def test_rows_are_a_private_copy(client):
    source = _listings()
    table = ListingsTable(client, source)
    table.rows.pop()

    assert len(source) == 3
