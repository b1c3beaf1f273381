import io

from fastapi.testclient import TestClient

from models.incident import Incident, IncidentPhoto


def create_incident(client: TestClient, **fields) -> dict:
    payload = {"driverName": "Alice", "truckId": "T1", **fields}
    response = client.post("/api/incidents/", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def upload(client: TestClient, names, report_id=None, content_type="image/jpeg"):
    files = [("files", (name, io.BytesIO(b"test-image"), content_type)) for name in names]
    data = {"reportId": str(report_id)} if report_id is not None else {}
    return client.post("/api/incidents/upload-photo", files=files, data=data)


def test_create_incident_returns_camel_case_record_with_id(client: TestClient, db_session):
    body = create_incident(client, severity="Low", dateAndTime="2026-10-19T08:30:00.000Z")

    assert isinstance(body["id"], int)
    assert body["driverName"] == "Alice"
    assert body["truckId"] == "T1"
    assert body["severity"] == "Low"
    assert body["photos"] == ""
    assert body["dateAndTime"].startswith("2026-10-19T08:30:00")
    assert db_session.query(Incident).count() == 1


def test_get_incident_and_missing_incident(client: TestClient):
    created = create_incident(client)

    response = client.get(f"/api/incidents/{created['id']}")
    assert response.status_code == 200
    assert response.json()["driverName"] == "Alice"

    response = client.get("/api/incidents/9999")
    assert response.status_code == 404


def test_update_overwrites_record(client: TestClient):
    created = create_incident(client, witnesses="Carl")
    payload = {**created, "severity": "High", "witnesses": "", "dateAndTime": "2026-10-20T10:00:00.000Z"}

    response = client.put(f"/api/incidents/{created['id']}", json=payload)
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["severity"] == "High"
    assert body["witnesses"] == ""
    assert body["dateAndTime"].startswith("2026-10-20T10:00:00")

    response = client.put("/api/incidents/9999", json=payload)
    assert response.status_code == 404


def test_list_incidents(client: TestClient):
    create_incident(client, truckId="T1")
    create_incident(client, truckId="T2")

    response = client.get("/api/incidents/")
    assert response.status_code == 200
    assert sorted(item["truckId"] for item in response.json()) == ["T1", "T2"]


def test_upload_photo_for_existing_incident(client: TestClient, db_session, upload_dir):
    created = create_incident(client)

    response = upload(client, ["front.jpg", "side,left.jpg"], report_id=created["id"])
    assert response.status_code == 200, response.text
    photos = response.json()["photos"]

    assert len(photos) == 2
    assert all(url.startswith(f"/uploads/incidents/{created['id']}/") for url in photos)
    assert all("," not in url for url in photos)
    stored = db_session.query(IncidentPhoto).filter(IncidentPhoto.incident_id == created["id"]).count()
    assert stored == 2
    assert len(list((upload_dir / "incidents" / str(created["id"])).iterdir())) == 2


def test_upload_photo_without_report_is_associated_on_create(client: TestClient, db_session):
    response = upload(client, ["captured_image.jpg"])
    assert response.status_code == 200, response.text
    url = response.json()["photos"][0]
    assert url.startswith("/uploads/incidents/unassigned/")

    created = create_incident(client, photos=url)

    photo = db_session.query(IncidentPhoto).filter(IncidentPhoto.url == url).first()
    assert photo is not None
    assert photo.incident_id == created["id"]


def test_upload_photo_rejects_unknown_report_and_non_images(client: TestClient):
    assert upload(client, ["a.jpg"], report_id=9999).status_code == 404
    assert upload(client, ["notes.txt"], content_type="text/plain").status_code == 400


def test_health_endpoints(client: TestClient):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/api/health").json()["status"] == "operational"


def test_uploaded_photo_is_served_from_its_url(client: TestClient):
    created = create_incident(client)
    url = upload(client, ["front.jpg"], report_id=created["id"]).json()["photos"][0]

    response = client.get(url)

    assert response.status_code == 200
    assert response.content == b"test-image"
