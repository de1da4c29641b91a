def test_auth_required_missing_header(client):
    response = client.post("/generate", json={"style": "cozy"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


def test_auth_invalid_token(client):
    response = client.post("/scrape", json={"urls": ["https://example.org"]}, headers={"Authorization": "Bearer not-a-real-token"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_read_routes_are_public(client):
    assert client.get("/recipes").status_code == 200
    assert client.get("/health").json() == {"status": "ok"}
