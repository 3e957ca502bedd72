"""Unit tests for trigger-event parsing."""

import json

import pytest

from jobrules.domain.errors import MalformedPayloadError
from jobrules.domain.events import parse_event_name, parse_job_request


class TestParseJobRequest:
    def test_parses_snapshot_string(self):
        payload = json.dumps(
            {
                "$id": "jr1",
                "$createdAt": "2024-01-01T09:00:00.000+00:00",
                "clientId": "c1",
                "driverId": "d1",
                "status": "ACCEPTED",
                "estimatedPickupAt": "2024-01-01T10:00:00Z",
                "pickupAddress": "Terminal 2",
            }
        )
        job = parse_job_request(payload)
        assert job.id == "jr1"
        assert job.client_id == "c1"
        assert job.driver_id == "d1"
        assert job.status == "ACCEPTED"
        assert job.estimated_pickup_at == "2024-01-01T10:00:00Z"

    def test_accepts_bytes_and_dicts(self):
        assert parse_job_request(b'{"$id": "jr1"}').id == "jr1"
        assert parse_job_request({"$id": "jr2"}).id == "jr2"

    @pytest.mark.parametrize("payload", [None, "", "   ", b""])
    def test_empty_payload_is_empty_document(self, payload):
        job = parse_job_request(payload)
        assert job.id is None
        assert job.client_id is None

    def test_missing_fields_are_not_parse_errors(self):
        job = parse_job_request('{"$id": "jr1", "status": "PENDING"}')
        assert job.driver_id is None
        assert job.estimated_pickup_at is None

    def test_only_wire_attribute_names_are_read(self):
        job = parse_job_request(
            '{"id": "jr1", "client_id": "c1", "driver_id": "d1", "status": "ACCEPTED"}'
        )
        assert job.id is None
        assert job.client_id is None
        assert job.driver_id is None
        assert job.status == "ACCEPTED"

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            "[1, 2, 3]",
            '"jr1"',
            '{"$id": "jr1", "clientId": 42}',
            b"\xff\xfe",
        ],
    )
    def test_malformed_payloads(self, payload):
        with pytest.raises(MalformedPayloadError) as exc_info:
            parse_job_request(payload)
        assert exc_info.value.status_code == 400


class TestParseEventName:
    def test_document_event(self):
        assert parse_event_name(
            "databases.main.collections.job_requests.documents.jr1.update"
        ) == ("job_requests", "update")

    @pytest.mark.parametrize(
        "event",
        ["", "users.u1.create", "databases.main.collections.job_requests.documents"],
    )
    def test_unknown_shapes(self, event):
        assert parse_event_name(event) == (None, None)
