"""Tests for the travel request list store."""

import pytest

from travel_desk.domain.errors import ApiError
from travel_desk.domain.messages import LIST_FAILED
from travel_desk.domain.models import TravelRequest, TravelStatus
from travel_desk.services import TravelRequestStore, extract_messages


def request_payload(request_id, status="requested", **overrides):
    payload = {
        "id": request_id,
        "city_id": "10",
        "requester_name": "Ana Souza",
        "departure_date": "2024-03-15T00:00:00.000000Z",
        "return_date": "2024-03-20",
        "status": status,
        "notes": None,
        "created_at": "2024-03-01T12:00:00Z",
        "updated_at": "2024-03-01T12:00:00Z",
        "city": {
            "name": "Campinas",
            "state": {"name": "São Paulo", "code": "SP"},
            "country": {"name": "Brasil"},
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def store(api):
    return TravelRequestStore(api=api)


class TestFetch:
    def test_default_query_omits_status_all(self, store, http):
        http.reply(200, {"data": []})

        store.fetch()

        assert http.calls[0].params == {"page": 1, "per_page": 15}

    def test_filters_are_sent_in_api_format(self, store, http):
        store.set_filters(
            status="approved",
            location=" Campinas ",
            departure_from="01/03/2024",
            return_to="2024-03-31",
        )
        http.reply(200, {"data": []})

        store.fetch()

        assert http.calls[0].params == {
            "status": "approved",
            "location": "Campinas",
            "departure_from": "2024-03-01",
            "return_to": "2024-03-31",
            "page": 1,
            "per_page": 15,
        }

    def test_items_are_normalized(self, store, http):
        http.reply(200, {"data": [request_payload(1)]})

        items = store.fetch()

        item = items[0]
        assert item.id == 1
        assert item.city_id == 10
        assert item.departure_date == "2024-03-15"
        assert item.return_date == "2024-03-20"
        assert item.status is TravelStatus.REQUESTED
        assert item.location_label == "Campinas, SP, Brasil"
        assert store.items == items

    def test_server_label_wins_over_derived_one(self, store, http):
        http.reply(200, {"data": [request_payload(1, location_label="Campinas (VCP)")]})
        assert store.fetch()[0].location_label == "Campinas (VCP)"

    def test_unknown_status_falls_back_to_requested(self, store, http):
        http.reply(200, {"data": [request_payload(1, status="archived")]})
        assert store.fetch()[0].status is TravelStatus.REQUESTED

    def test_pagination_from_meta(self, store, http):
        http.reply(
            200,
            {
                "data": [request_payload(1)],
                "meta": {"current_page": 2, "per_page": 5, "total": 12, "last_page": 3},
            },
        )

        store.fetch()

        p = store.pagination
        assert (p.current_page, p.per_page, p.total, p.last_page) == (2, 5, 12, 3)

    def test_pagination_from_top_level_body(self, store, http):
        http.reply(
            200,
            {"data": [], "current_page": 1, "per_page": 10, "total": 25, "last_page": 3},
        )

        store.fetch()

        assert store.pagination.total == 25
        assert store.pagination.per_page == 10

    def test_pagination_fallbacks(self, store, http):
        http.reply(200, {"data": [request_payload(i) for i in range(1, 4)]})

        store.fetch()

        p = store.pagination
        assert p.total == 3
        assert p.last_page == 1
        assert p.current_page == 1
        assert p.per_page == 15

    def test_failure_is_reported_not_raised(self, store, http):
        http.reply(200, {"data": [request_payload(1)]})
        store.fetch()

        http.reply(500, {"message": "Falha no servidor"})
        items = store.fetch()

        assert store.error == "Falha no servidor"
        assert [item.id for item in items] == [1]
        assert not store.loading

    def test_status_filter_returns_only_matching_records(self, store, http):
        store.set_filters(status="approved")
        http.reply(
            200,
            {
                "data": [
                    request_payload(1, status="approved"),
                    request_payload(2, status="APPROVED"),
                ]
            },
        )

        items = store.fetch()

        assert http.calls[0].params["status"] == "approved"
        assert [item.id for item in items] == [1, 2]
        assert all(item.status is TravelStatus.APPROVED for item in store.items)

    def test_non_string_dates_are_left_empty(self, store, http):
        payload = request_payload(1, departure_date=20240315, return_date=[])
        http.reply(200, {"data": [payload]})

        (item,) = store.fetch()

        assert item.departure_date == ""
        assert item.return_date == ""
        assert store.error == ""

    def test_unnormalizable_page_is_reported_not_raised(self, store, http, monkeypatch):
        http.reply(200, {"data": [request_payload(1)]})
        store.fetch()

        def broken(payload):
            raise ValueError("bad record")

        monkeypatch.setattr(TravelRequest, "from_api", broken)
        http.reply(200, {"data": [request_payload(2)]})

        items = store.fetch()

        assert store.error == LIST_FAILED
        assert [item.id for item in items] == [1]
        assert not store.loading

    def test_error_is_cleared_by_next_successful_fetch(self, store, http):
        http.reply(500, {"message": "Falha no servidor"})
        store.fetch()

        http.reply(200, {"data": []})
        store.fetch()

        assert store.error == ""


class TestCreate:
    def test_create_normalizes_body_and_prepends(self, store, http):
        http.reply(200, {"data": [request_payload(1)], "meta": {"total": 1}})
        store.fetch()

        http.reply(201, {"data": request_payload(2, notes="  ")})
        created = store.create(
            {
                "city_id": 10,
                "requester_name": "Ana Souza",
                "departure_date": "15/03/2024",
                "return_date": "20/03/2024",
                "notes": "   ",
            }
        )

        body = http.calls[-1].json
        assert body["departure_date"] == "2024-03-15"
        assert body["return_date"] == "2024-03-20"
        assert body["notes"] is None
        assert created.id == 2
        assert [item.id for item in store.items] == [2, 1]
        assert store.pagination.total == 2

    def test_create_accepts_unwrapped_response(self, store, http):
        http.reply(201, request_payload(9))
        assert store.create({"city_id": 10}).id == 9

    def test_validation_messages_are_attached(self, store, http):
        http.reply(
            422,
            {
                "message": "The given data was invalid.",
                "errors": {
                    "departure_date": ["A data de ida é obrigatória."],
                    "return_date": ["A data de volta deve ser posterior à ida."],
                },
            },
        )

        with pytest.raises(ApiError) as exc_info:
            store.create({"city_id": 10})

        assert exc_info.value.messages == [
            "A data de ida é obrigatória.",
            "A data de volta deve ser posterior à ida.",
        ]
        assert store.error == (
            "A data de ida é obrigatória. A data de volta deve ser posterior à ida."
        )
        assert store.items == []
        assert not store.loading


class TestUpdateStatus:
    def test_only_matching_item_is_replaced(self, store, http):
        http.reply(200, {"data": [request_payload(1), request_payload(2)]})
        store.fetch()

        http.reply(200, {"data": request_payload(2, status="approved")})
        updated = store.update_status(2, "approved")

        assert http.calls[-1].method == "PATCH"
        assert http.calls[-1].url.endswith("/travel-requests/2/status")
        assert http.calls[-1].json == {"status": "approved"}
        assert updated.status is TravelStatus.APPROVED
        assert [item.status for item in store.items] == [
            TravelStatus.REQUESTED,
            TravelStatus.APPROVED,
        ]

    def test_string_id_matches_numeric_item(self, store, http):
        http.reply(200, {"data": [request_payload(5)]})
        store.fetch()

        http.reply(200, {"data": request_payload(5, status="cancelled")})
        store.update_status("5", TravelStatus.CANCELLED)

        assert store.items[0].status is TravelStatus.CANCELLED

    def test_unknown_status_is_rejected_before_any_request(self, store, http):
        with pytest.raises(ValueError):
            store.update_status(1, "archived")
        assert http.calls == []

    def test_failure_keeps_items_and_sets_error(self, store, http):
        http.reply(200, {"data": [request_payload(1)]})
        store.fetch()

        http.reply(403, {"message": "Somente gestores podem aprovar."})
        with pytest.raises(ApiError) as exc_info:
            store.update_status(1, "approved")

        assert exc_info.value.messages == ["Somente gestores podem aprovar."]
        assert store.error == "Somente gestores podem aprovar."
        assert store.items[0].status is TravelStatus.REQUESTED


class TestPaging:
    def test_go_to_page_is_clamped_and_fetches(self, store, http):
        http.reply(200, {"data": [], "meta": {"total": 30, "last_page": 2}})
        store.fetch()

        http.reply(200, {"data": [], "meta": {"current_page": 2, "total": 30, "last_page": 2}})
        store.go_to_page(99)

        assert http.calls[-1].params["page"] == 2
        assert store.pagination.current_page == 2

    def test_go_to_current_page_does_not_refetch(self, store, http):
        http.reply(200, {"data": []})
        store.fetch()

        store.go_to_page(1)
        store.go_to_page(0)

        assert len(http.calls) == 1

    def test_set_per_page_resets_to_first_page(self, store, http):
        store.pagination.current_page = 3
        store.pagination.last_page = 3
        http.reply(200, {"data": []})

        store.set_per_page(50)

        assert http.calls[0].params["per_page"] == 50
        assert http.calls[0].params["page"] == 1


class TestFilters:
    def test_filtered_applies_all_filters_locally(self, store, http):
        http.reply(
            200,
            {
                "data": [
                    request_payload(1),
                    request_payload(2, status="approved"),
                    request_payload(3, status="approved", departure_date="2024-05-01"),
                    request_payload(4, status="approved", city={"name": "Recife"}),
                ]
            },
        )
        store.fetch()

        store.set_filters(status="approved", location="campinas", departure_to="30/04/2024")

        assert [item.id for item in store.filtered] == [2]
        assert len(http.calls) == 1

    def test_reset_filters_restores_defaults(self, store):
        store.set_filters(status="cancelled", location="x")
        store.reset_filters()
        assert store.filters.is_empty
        assert store.filters.status == "all"

    def test_unknown_filter_is_rejected(self, store):
        with pytest.raises(TypeError):
            store.set_filters(colour="red")


class TestExtractMessages:
    def test_field_errors_come_first(self):
        error = ApiError("invalid", field_errors={"a": ["x"], "b": ["y", "z"]})
        assert extract_messages(error, LIST_FAILED) == ["x", "y", "z"]

    def test_message_then_fallback(self):
        assert extract_messages(ApiError("boom"), LIST_FAILED) == ["boom"]
        assert extract_messages(ApiError(""), LIST_FAILED) == [LIST_FAILED]

    def test_plain_exceptions(self):
        assert extract_messages(RuntimeError("oops"), LIST_FAILED) == ["oops"]
        assert extract_messages(RuntimeError(), LIST_FAILED) == [LIST_FAILED]
