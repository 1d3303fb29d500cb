"""
Tests for the /api/contacts routes.
"""

from unittest.mock import patch

CSV_TEXT = (
    "Notes:\n"
    '"When exporting your connection data, you may notice that some of the email addresses are missing."\n'
    "\n"
    "First Name,Last Name,URL,Email Address,Company,Position,Connected On\n"
    "Ada,Lovelace,https://www.linkedin.com/in/ada,,Engines,Founder,01 Jan 2024\n"
    ",,,,,CEO,\n"
)


def _upload(client, headers, content=CSV_TEXT, filename="Connections.csv", session=None):
    if session:
        headers = {**headers, "X-Session-Id": session}
    data = content.encode("utf-8") if isinstance(content, str) else content
    return client.post(
        "/api/contacts/upload",
        files={"file": (filename, data, "text/csv")},
        headers=headers,
    )


def test_upload_requires_auth(client):
    response = client.post("/api/contacts/upload", files={"file": ("c.csv", b"a,b", "text/csv")})
    assert response.status_code == 401


def test_upload_success(client, auth_headers):
    response = _upload(client, auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["imported"] == 1
    assert body["skipped"] == 1
    assert body["contacts"][0]["firstName"] == "Ada"
    assert body["contacts"][0]["id"].startswith("contact-")
    assert body["notifications"] == [
        {"level": "success", "message": "Successfully imported 1 contacts (1 rows skipped)"}
    ]


def test_list_after_upload(client, auth_headers):
    _upload(client, auth_headers)

    response = client.get("/api/contacts", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["total"] == 1
    assert response.json()["contacts"][0]["company"] == "Engines"


def test_sessions_are_isolated(client, auth_headers):
    _upload(client, auth_headers, session="alice")

    alice = client.get("/api/contacts", headers={**auth_headers, "X-Session-Id": "alice"})
    bob = client.get("/api/contacts", headers={**auth_headers, "X-Session-Id": "bob"})

    assert alice.json()["total"] == 1
    assert bob.json()["total"] == 0


def test_wrong_extension(client, auth_headers):
    response = _upload(client, auth_headers, filename="contacts.xlsx")

    assert response.status_code == 400
    assert response.json()["notifications"] == [{"level": "error", "message": "Please upload a CSV file"}]


def test_unreadable_file(client, auth_headers):
    response = _upload(client, auth_headers, content=b"\xff\xfe\xfd")

    assert response.status_code == 400
    assert response.json()["notifications"][0]["message"] == "Error reading file"


def test_no_valid_contacts(client, auth_headers):
    response = _upload(client, auth_headers, content="First Name,Last Name,Company,Position\n,,,CEO\n")

    assert response.status_code == 400
    assert response.json()["notifications"][0]["message"] == "No valid contacts found in CSV file"


def test_failed_upload_keeps_previous_contacts(client, auth_headers):
    _upload(client, auth_headers)
    _upload(client, auth_headers, filename="oops.txt")

    assert client.get("/api/contacts", headers=auth_headers).json()["total"] == 1


def test_file_too_large(client, auth_headers):
    with patch("api_service.routes.contacts.settings") as mock_settings:
        mock_settings.max_upload_bytes = 10
        response = _upload(client, auth_headers)

    assert response.status_code == 413


def test_clear_contacts(client, auth_headers):
    _upload(client, auth_headers)

    response = client.delete("/api/contacts", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["notifications"] == [{"level": "success", "message": "All contacts cleared"}]
    assert client.get("/api/contacts", headers=auth_headers).json()["total"] == 0
