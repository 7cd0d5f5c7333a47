from app import SECURITY_HEADERS
from config import ProductionConfig, config_for_env
import storage


def test_security_headers_on_every_response(client):
    for path in ("/api/products", "/api/products/missing", "/api/admin/me"):
        r = client.get(path)
        for name, value in SECURITY_HEADERS.items():
            assert r.headers[name] == value


def test_cors_only_for_allowed_origins(client):
    allowed = client.get("/api/products", headers={"Origin": "http://localhost:5173"})
    assert allowed.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert allowed.headers["Access-Control-Allow-Credentials"] == "true"

    other = client.get("/api/products", headers={"Origin": "https://evil.example"})
    assert "Access-Control-Allow-Origin" not in other.headers


def test_unexpected_errors_are_generic(app):
    @app.get("/boom")
    def boom():
        raise RuntimeError("database exploded")

    r = app.test_client().get("/boom")
    assert r.status_code == 500
    assert r.get_json() == {"ok": False, "message": "Server error"}


def test_create_admin_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "lucia", "--password", "s3cret!"])
    assert result.exit_code == 0, result.output
    with app.app_context():
        assert storage.get_admin_by_username("lucia").check_password("s3cret!")

    again = runner.invoke(args=["create-admin", "lucia", "--password", "other"])
    assert again.exit_code != 0


def test_production_config_is_selected_from_env():
    assert config_for_env("production") is ProductionConfig
    assert ProductionConfig.SESSION_COOKIE_SECURE is True
    assert ProductionConfig.SQLALCHEMY_ENGINE_OPTIONS["max_overflow"] == 0
