"""API tests for /api/persons and person-document associations."""

import uuid


def test_create_and_get_person(client, make_person):
    created = make_person(first_name="")

    assert created["first_name"] == ""

    response = client.get(f"/api/persons/{created['id']}")
    assert response.status_code == 200
    assert response.json()["data"] == created


def test_create_person_requires_last_name(client):
    response = client.post("/api/persons", json={"first_name": "Taro"})

    assert response.status_code == 400
    assert "last_name" in response.json()["details"]


def test_update_person(client, make_person):
    created = make_person()

    response = client.put(f"/api/persons/{created['id']}", json={"first_name": "Hanako"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Person updated successfully"
    assert body["data"]["first_name"] == "Hanako"
    assert body["data"]["last_name"] == "Tanaka"

    response = client.put(f"/api/persons/{created['id']}", json={"last_name": ""})
    assert response.status_code == 400


def test_missing_person(client):
    missing = uuid.uuid4()

    assert client.get(f"/api/persons/{missing}").json()["code"] == "PERSON_NOT_FOUND"
    assert client.put(f"/api/persons/{missing}", json={"first_name": "x"}).status_code == 404
    assert client.delete(f"/api/persons/{missing}").status_code == 404
    assert client.get(f"/api/persons/{missing}/documents").json()["code"] == "PERSON_NOT_FOUND"


def test_delete_person(client, make_person):
    created = make_person()

    assert client.delete(f"/api/persons/{created['id']}").status_code == 204
    assert client.get(f"/api/persons/{created['id']}").status_code == 404


def test_list_and_search(client, make_person):
    make_person(last_name="Yamada", first_name="Jiro")
    make_person(last_name="Suzuki", first_name="Ichiro")
    make_person(last_name="Tanaka", first_name="Taro")

    body = client.get("/api/persons").json()
    assert [p["last_name"] for p in body["data"]] == ["Suzuki", "Tanaka", "Yamada"]
    assert body["pagination"] == {"total": 3, "page": 1, "limit": 20, "pages": 1}

    body = client.get("/api/persons", params={"search": "yama"}).json()
    assert [p["last_name"] for p in body["data"]] == ["Yamada"]
    assert body["pagination"]["total"] == 1


def test_associate_document(client, make_person, make_document):
    person = make_person()
    document = make_document()

    response = client.post(
        f"/api/persons/{person['id']}/documents",
        json={"document_id": document["id"], "order": 1},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Person associated with document successfully"
    assert body["data"]["person_id"] == person["id"]
    assert body["data"]["document_id"] == document["id"]
    assert body["data"]["order"] == 1


def test_associate_duplicate(client, make_person, make_document):
    person = make_person()
    document = make_document()
    url = f"/api/persons/{person['id']}/documents"

    assert client.post(url, json={"document_id": document["id"], "order": 1}).status_code == 201

    response = client.post(url, json={"document_id": document["id"], "order": 2})
    assert response.status_code == 400
    assert response.json()["code"] == "UNIQUE_CONSTRAINT"


def test_associate_unknown_document(client, make_person):
    person = make_person()

    response = client.post(
        f"/api/persons/{person['id']}/documents",
        json={"document_id": str(uuid.uuid4()), "order": 1},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "FOREIGN_KEY_CONSTRAINT"


def test_associate_validation(client, make_person):
    person = make_person()
    url = f"/api/persons/{person['id']}/documents"

    response = client.post(url, json={"document_id": str(uuid.uuid4()), "order": 0})
    assert response.status_code == 400
    assert "order" in response.json()["details"]

    response = client.post(url, json={"order": 1})
    assert response.status_code == 400
    assert "document_id" in response.json()["details"]


def test_list_person_documents_by_order(client, make_person, make_document):
    person = make_person()
    second = make_document(title="Second")
    first = make_document(title="First")
    url = f"/api/persons/{person['id']}/documents"
    client.post(url, json={"document_id": second["id"], "order": 2})
    client.post(url, json={"document_id": first["id"], "order": 1})

    response = client.get(url)

    assert response.status_code == 200
    body = response.json()
    assert [a["order"] for a in body["data"]] == [1, 2]
    assert body["data"][0]["document"]["title"] == "First"
    assert body["pagination"]["total"] == 2


def test_dissociate(client, make_person, make_document):
    person = make_person()
    document = make_document()
    url = f"/api/persons/{person['id']}/documents"
    client.post(url, json={"document_id": document["id"], "order": 1})

    response = client.delete(f"{url}/{document['id']}")
    assert response.status_code == 204

    response = client.delete(f"{url}/{document['id']}")
    assert response.status_code == 404
    assert response.json()["code"] == "RESOURCE_NOT_FOUND"

    response = client.delete(f"{url}/not-a-uuid")
    assert response.json()["code"] == "INVALID_ID_FORMAT"


def test_deleting_document_removes_it_from_person(client, make_person, make_document):
    person = make_person()
    document = make_document()
    url = f"/api/persons/{person['id']}/documents"
    client.post(url, json={"document_id": document["id"], "order": 1})

    client.delete(f"/api/documents/{document['id']}")

    body = client.get(url).json()
    assert body["data"] == []
    assert body["pagination"]["total"] == 0
