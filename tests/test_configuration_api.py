def test_configuration_is_public_and_starts_empty(client):
    r = client.get("/api/configuration")
    assert r.status_code == 200
    assert r.get_json() == []


def test_set_requires_session(client):
    r = client.post("/api/configuration", json={"key": "whatsapp_number", "value": "123"})
    assert r.status_code == 401


def test_upsert_creates_then_updates(auth_client):
    r = auth_client.post("/api/configuration", json={"key": "whatsapp_number", "value": "+54 11 1111"})
    assert r.status_code == 200
    created = r.get_json()["config"]
    assert created["key"] == "whatsapp_number"

    r = auth_client.post("/api/configuration", json={"key": "whatsapp_number", "value": "+54 11 2222"})
    updated = r.get_json()["config"]
    assert updated == {"id": created["id"], "key": "whatsapp_number", "value": "+54 11 2222"}

    entries = auth_client.get("/api/configuration").get_json()
    assert entries == [updated]


def test_set_validates_and_sanitizes(auth_client):
    r = auth_client.post("/api/configuration", json={"key": "whatsapp_number", "value": ""})
    assert r.status_code == 400
    assert r.get_json()["errors"][0]["path"] == "value"

    r = auth_client.post("/api/configuration",
                         json={"key": "banner", "value": "<script>x()</script>Rebajas"})
    assert "<script>" not in r.get_json()["config"]["value"]
