"""Tests for the ContactsClient REST wrapper."""

import http.client
import io
import json
import logging
from unittest.mock import MagicMock, patch
from urllib import error as urlerror

import pytest

from contact_manager.contact_list import ContactListState
from contact_manager.contacts_client import ContactsClient
from contact_manager.errors import ContactsAPIError
from contact_manager.models import Contact


def _response(body: bytes) -> MagicMock:
    resp = MagicMock()
    resp.read.return_value = body
    cm = MagicMock()
    cm.__enter__.return_value = resp
    cm.__exit__.return_value = False
    return cm


@pytest.fixture
def client(settings):
    return ContactsClient(settings)


@pytest.fixture
def mock_urlopen():
    with patch("contact_manager.contacts_client.urlrequest.urlopen") as mocked:
        yield mocked


@pytest.fixture
def mock_request(settings):
    """A client whose HTTP layer is replaced by a mock."""
    with patch.object(ContactsClient, "_request") as mocked:
        client = ContactsClient(settings)
        client._mock_request = mocked
        yield client


class TestListContacts:
    """Tests for ContactsClient.list_contacts()"""

    def test_returns_contacts_in_server_order(self, client, mock_urlopen):
        body = [
            {"id": 2, "name": "B", "phone_number": "2", "email": "b@x.com"},
            {"id": 1, "name": "A", "phone_number": "1", "email": "a@x.com"},
        ]
        mock_urlopen.return_value = _response(json.dumps(body).encode("utf-8"))

        contacts = client.list_contacts()

        assert [c.id for c in contacts] == [2, 1]
        req = mock_urlopen.call_args[0][0]
        assert req.get_method() == "GET"
        assert req.full_url == "http://contacts.test/api/"
        assert req.data is None
        assert mock_urlopen.call_args[1]["timeout"] == 5

    def test_non_array_response_raises(self, client, mock_urlopen):
        mock_urlopen.return_value = _response(b'{"contacts": []}')

        with pytest.raises(ContactsAPIError, match="Expected a JSON array"):
            client.list_contacts()

    def test_invalid_json_raises(self, client, mock_urlopen):
        mock_urlopen.return_value = _response(b"<html>oops</html>")

        with pytest.raises(ContactsAPIError, match="invalid JSON"):
            client.list_contacts()

    def test_http_error_carries_status(self, client, mock_urlopen):
        mock_urlopen.side_effect = urlerror.HTTPError(
            "http://contacts.test/api/", 503, "Unavailable", hdrs=None, fp=io.BytesIO(b"down")
        )

        with pytest.raises(ContactsAPIError) as excinfo:
            client.list_contacts()

        assert excinfo.value.status == 503
        assert "down" in str(excinfo.value)

    def test_network_error_raises(self, client, mock_urlopen):
        mock_urlopen.side_effect = urlerror.URLError("connection refused")

        with pytest.raises(ContactsAPIError, match="Network error"):
            client.list_contacts()

    def test_timeout_raises(self, client, mock_urlopen):
        mock_urlopen.side_effect = TimeoutError("timed out")

        with pytest.raises(ContactsAPIError, match="timed out"):
            client.list_contacts()

    def test_dropped_connection_raises(self, client, mock_urlopen):
        mock_urlopen.side_effect = http.client.RemoteDisconnected(
            "Remote end closed connection without response"
        )

        with pytest.raises(ContactsAPIError, match="Connection error"):
            client.list_contacts()

    def test_truncated_body_raises(self, client, mock_urlopen):
        cm = _response(b"")
        cm.__enter__.return_value.read.side_effect = http.client.IncompleteRead(b"[{")
        mock_urlopen.return_value = cm

        with pytest.raises(ContactsAPIError, match="Connection error"):
            client.list_contacts()

    def test_non_utf8_body_raises(self, client, mock_urlopen):
        mock_urlopen.return_value = _response(b"[\xff\xfe]")

        with pytest.raises(ContactsAPIError, match="not UTF-8"):
            client.list_contacts()


class TestWrites:
    """Tests for create/update/delete requests."""

    def test_create_posts_json_without_id(self, client, mock_urlopen):
        mock_urlopen.return_value = _response(b'{"id": 7}')
        contact = Contact(
            id=99,
            name="Ann",
            phone_number="555",
            email="a@x.com",
            created_at="2024-01-01T00:00:00.000Z",
        )

        result = client.create_contact(contact)

        assert result == {"id": 7}
        req = mock_urlopen.call_args[0][0]
        assert req.get_method() == "POST"
        assert req.full_url == "http://contacts.test/api/"
        assert req.get_header("Content-type") == "application/json"
        assert json.loads(req.data) == {
            "name": "Ann",
            "phone_number": "555",
            "email": "a@x.com",
            "createdAt": "2024-01-01T00:00:00.000Z",
        }

    def test_update_puts_full_record_to_item_url(self, client, mock_urlopen):
        mock_urlopen.return_value = _response(b"")
        contact = Contact(
            id="abc 1",
            name="Ann",
            phone_number="555",
            email="a@x.com",
            created_at="2024-01-01T00:00:00.000Z",
            last_updated="2024-02-01T00:00:00.000Z",
        )

        assert client.update_contact(contact) is None

        req = mock_urlopen.call_args[0][0]
        assert req.get_method() == "PUT"
        assert req.full_url == "http://contacts.test/api/abc%201"
        body = json.loads(req.data)
        assert body["id"] == "abc 1"
        assert body["lastUpdated"] == "2024-02-01T00:00:00.000Z"

    def test_update_without_id_raises(self, client):
        with pytest.raises(ValueError, match="without an id"):
            client.update_contact(Contact(name="Ann"))

    def test_delete_accepts_empty_body(self, client, mock_urlopen):
        mock_urlopen.return_value = _response(b"")

        client.delete_contact(4)

        req = mock_urlopen.call_args[0][0]
        assert req.get_method() == "DELETE"
        assert req.full_url == "http://contacts.test/api/4"

    def test_write_ignores_non_json_body(self, client, mock_urlopen):
        mock_urlopen.return_value = _response(b"Created")

        assert client.create_contact(Contact(name="A", phone_number="1", email="a@b")) is None

    def test_create_error_is_wrapped(self, mock_request):
        mock_request._mock_request.side_effect = ContactsAPIError("boom", status=400)

        with pytest.raises(ContactsAPIError, match="Failed to create contact") as excinfo:
            mock_request.create_contact(Contact(name="A", phone_number="1", email="a@b"))

        assert excinfo.value.status == 400

    def test_update_error_is_wrapped(self, mock_request):
        mock_request._mock_request.side_effect = ContactsAPIError("boom", status=404)

        with pytest.raises(ContactsAPIError, match="Failed to update contact 3"):
            mock_request.update_contact(Contact(id=3, name="A"))

    def test_delete_error_is_wrapped(self, mock_request):
        mock_request._mock_request.side_effect = ContactsAPIError("boom")

        with pytest.raises(ContactsAPIError, match="Failed to delete contact 3"):
            mock_request.delete_contact(3)

        call_args = mock_request._mock_request.call_args
        assert call_args[0][0] == "DELETE"
        assert call_args[0][1] == "3"


def test_malformed_list_entry_raises(client, mock_urlopen):
    mock_urlopen.return_value = _response(b'[{"id": 1, "name": null}]')

    with pytest.raises(ContactsAPIError, match="Malformed contact"):
        client.list_contacts()


class TestTransportFailuresDuringRefresh:
    """A dropped connection must not escape ContactListState.refresh()."""

    def test_refresh_survives_dropped_connection(self, client, mock_urlopen, caplog):
        mock_urlopen.return_value = _response(b'[{"id": 1, "name": "Ann"}]')
        contact_list = ContactListState(client)
        assert contact_list.refresh() is True

        mock_urlopen.return_value = None
        mock_urlopen.side_effect = http.client.RemoteDisconnected("closed")
        with caplog.at_level(logging.ERROR):
            assert contact_list.refresh() is False

        assert [c.name for c in contact_list.contacts] == ["Ann"]
        assert "Failed to load contacts" in caplog.text

    def test_delete_reports_connection_reset(self, client, mock_urlopen):
        mock_urlopen.side_effect = ConnectionResetError("reset by peer")

        with pytest.raises(ContactsAPIError, match="Failed to delete contact 4"):
            client.delete_contact(4)
