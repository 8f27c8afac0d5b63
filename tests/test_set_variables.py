"""Tests for the set-variables upsert policy."""

import json

import pytest
import responses

from conftest import MOCK_PROJECT_URL, make_args, make_settings
from gl_ci_sync.document import InputDocumentError
from gl_ci_sync.operations import SetVariablesOperation


def make_operation(client, path) -> SetVariablesOperation:
    return SetVariablesOperation(client, make_settings(env_file_path=str(path)), make_args())


class TestUpsert:
    """Update first, create on 404, fail on anything else."""

    @responses.activate
    def test_existing_key_only_updates(self, mock_client, write_document):
        responses.add(responses.PUT, f"{MOCK_PROJECT_URL}/variables/A", json={"key": "A", "value": "1"})

        op = make_operation(mock_client, write_document('{"A": "1"}'))
        op.run()

        assert [c.request.method for c in responses.calls] == ["PUT"]
        assert op.results[0].action == "updated"
        assert op.summary().succeeded == 1

    @responses.activate
    def test_missing_key_updates_then_creates(self, mock_client, write_document):
        responses.add(
            responses.PUT, f"{MOCK_PROJECT_URL}/variables/A", status=404, json={"message": "404 Variable Not Found"}
        )
        responses.add(responses.POST, f"{MOCK_PROJECT_URL}/variables", status=201, json={"key": "A"})

        op = make_operation(mock_client, write_document('{"A": 1}'))
        op.run()

        assert [c.request.method for c in responses.calls] == ["PUT", "POST"]
        body = json.loads(responses.calls[1].request.body)
        assert body == {
            "key": "A",
            "value": "1",
            "protected": False,
            "masked": False,
            "environment_scope": "uat",
        }
        assert op.results[0].action == "created"

    @responses.activate
    def test_update_failure_other_than_404_does_not_create(self, mock_client, write_document):
        responses.add(responses.PUT, f"{MOCK_PROJECT_URL}/variables/A", status=403, json={"message": "403 Forbidden"})

        op = make_operation(mock_client, write_document('{"A": "x"}'))
        op.run()

        assert [c.request.method for c in responses.calls] == ["PUT"]
        assert op.results[0].action == "error"
        assert "403" in op.results[0].detail

    @responses.activate
    def test_create_failure_is_item_failure(self, mock_client, write_document):
        responses.add(responses.PUT, f"{MOCK_PROJECT_URL}/variables/A", status=404)
        responses.add(
            responses.POST,
            f"{MOCK_PROJECT_URL}/variables",
            status=400,
            json={"message": {"key": ["is invalid"]}},
        )

        op = make_operation(mock_client, write_document('{"A": "x"}'))
        op.run()

        assert op.results[0].action == "error"
        assert "is invalid" in op.results[0].detail
        assert op.summary().failed == 1

    @responses.activate
    def test_failures_do_not_stop_other_keys(self, mock_client, write_document):
        responses.add(responses.PUT, f"{MOCK_PROJECT_URL}/variables/A", json={"key": "A"})
        responses.add(responses.PUT, f"{MOCK_PROJECT_URL}/variables/B", status=500)
        responses.add(responses.PUT, f"{MOCK_PROJECT_URL}/variables/C", json={"key": "C"})

        op = make_operation(mock_client, write_document('{"A": "1", "B": "2", "C": "3"}'))
        op.run()

        summary = op.summary()
        assert (summary.attempted, summary.succeeded, summary.failed) == (3, 2, 1)


class TestDocumentHandling:
    """Document-level behavior of set-variables."""

    @responses.activate
    def test_non_primitive_values_are_skipped(self, mock_client, write_document, caplog):
        responses.add(responses.PUT, f"{MOCK_PROJECT_URL}/variables/A", json={"key": "A"})

        op = make_operation(mock_client, write_document('{"A": "1", "NESTED": {"x": 1}, "LIST": [1]}'))
        op.run()

        summary = op.summary()
        assert (summary.attempted, summary.succeeded, summary.failed, summary.skipped) == (1, 1, 0, 2)
        assert len(responses.calls) == 1
        assert "NESTED" in caplog.text

    @responses.activate
    def test_bad_document_fails_before_network(self, mock_client, write_document):
        op = make_operation(mock_client, write_document("[1, 2, 3]"))

        with pytest.raises(InputDocumentError):
            op.run()

        assert len(responses.calls) == 0
