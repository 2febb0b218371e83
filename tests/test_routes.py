import time

from fastapi.testclient import TestClient

from core.config import Settings
from main import create_app


def _future() -> int:
    return int(time.time()) + 3600


def test_referrer_page_for_valid_token(client, codec):
    token = codec.encode("https://example.com", _future())
    r = client.get(f"/url/{token}")
    assert r.status_code == 200
    assert "<title>Referrer . . .</title>" in r.text
    assert 'content="10;url=https://example.com"' in r.text
    assert 'id="countdown" data-delay="10"' in r.text


def test_percent_encoded_target_is_decoded(client, codec):
    token = codec.encode("https%3A%2F%2Fexample.com%2Fpath", _future())
    r = client.get(f"/url/{token}")
    assert r.status_code == 200
    assert 'href="https://example.com/path"' in r.text


def test_invalid_url_format_is_400(client, codec):
    token = codec.encode("not-a-url", _future())
    r = client.get(f"/url/{token}")
    assert r.status_code == 400
    assert "Invalid URL format" in r.text


def test_expired_token_is_500(client, codec):
    token = codec.encode("https://example.com", int(time.time()) - 3600)
    r = client.get(f"/url/{token}")
    assert r.status_code == 500
    assert "INVALID HASH URL!" in r.text
    assert "example.com" not in r.text


def test_invalid_hash_is_500(client):
    r = client.get("/url/invalid-hash")
    assert r.status_code == 500
    assert "INVALID HASH URL!" in r.text


def test_production_hides_error_detail(production_client):
    r = production_client.get("/url/invalid-hash")
    assert r.status_code == 500
    assert "An error occurred" in r.text
    assert "INVALID HASH URL!" not in r.text


def test_only_development_shows_error_detail():
    app = create_app(Settings(referrer_secret="test-secret-key", environment="staging"))
    with TestClient(app) as c:
        r = c.get("/url/invalid-hash")
    assert "An error occurred" in r.text


def test_redirect_delay_comes_from_settings(codec):
    app = create_app(Settings(referrer_secret="test-secret-key", redirect_delay=3))
    with TestClient(app) as c:
        r = c.get(f"/url/{codec.encode('https://example.com', _future())}")
    assert 'content="3;url=https://example.com"' in r.text


def test_index_and_legal_pages(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Welcome to Yakuza Referrer" in r.text

    for path, title in (("/privacy", "Privacy Policy"), ("/tos", "Terms of Service")):
        r = client.get(path)
        assert r.status_code == 200
        assert f"<title>{title}</title>" in r.text
        assert "Last updated: 2025-12-12" in r.text


def test_unknown_route_renders_404_page(client):
    r = client.get("/does/not/exist")
    assert r.status_code == 404
    assert "Page Not Found" in r.text


def test_method_not_allowed_is_not_404(client):
    r = client.post("/api/health")
    assert r.status_code == 405


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "brand": "Yakuza Referrer"}


def test_static_assets_are_served(client):
    assert client.get("/static/js/script.js").status_code == 200
    assert client.get("/static/css/style.css").status_code == 200


def test_non_http_scheme_is_rejected(client, codec):
    for url in ("javascript://x%0Aalert(1)", "ftp://example.com/file"):
        r = client.get(f"/url/{codec.encode(url, _future())}")
        assert r.status_code == 400
        assert "Invalid URL format" in r.text
        assert "javascript:" not in r.text


def test_overlong_expiry_renders_error_page(client):
    from cryptography.hazmat.primitives.ciphers.aead import AESGCM

    from core.security import b64url_encode, derive_key

    nonce = b"\x00" * 12
    sealed = AESGCM(derive_key("test-secret-key")).encrypt(nonce, b"https://example.com|" + b"9" * 5000, None)
    r = client.get(f"/url/{b64url_encode(nonce + sealed)}")
    assert r.status_code == 500
    assert "INVALID HASH URL!" in r.text
