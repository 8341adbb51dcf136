import pytest
import requests

from portfolio_proxy.dependencies import get_ssl_labs_client
from portfolio_proxy.main import app
from portfolio_proxy.services import SSLLabsClient

URL = "/.netlify/functions/sslgrade"
API_URL = "https://api.ssllabs.test/api/v3/analyze"

ASSESSMENT = {
    "host": "example.com",
    "status": "READY",
    "endpoints": [{"ipAddress": "93.184.216.34", "grade": "A+", "details": {"protocols": []}}],
}


@pytest.fixture
def ssl_client(client, session):
    ssl_labs = SSLLabsClient(api_url=API_URL, timeout=5.0, session=session)
    app.dependency_overrides[get_ssl_labs_client] = lambda: (ssl_labs, None)
    return ssl_labs


@pytest.mark.parametrize(
    "host", ["localhost", "127.0.0.1", "192.168.1.5", "10.0.0.1", "172.20.1.1"]
)
def test_private_hosts_are_rejected(client, ssl_client, session, host):
    response = client.get(URL, params={"host": host})

    assert response.status_code == 400
    assert response.json() == {"error": "SSL Labs only supports public domains."}
    session.request.assert_not_called()


@pytest.mark.parametrize("params", [{}, {"host": ""}, {"host": "  "}])
def test_missing_host_is_rejected(client, ssl_client, session, params):
    response = client.get(URL, params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing host parameter"}
    session.request.assert_not_called()


def test_public_host_relays_assessment(client, ssl_client, session, make_response):
    session.request.return_value = make_response(200, ASSESSMENT)

    response = client.get(URL, params={"host": "example.com"})

    assert response.status_code == 200
    assert response.json() == ASSESSMENT
    session.request.assert_called_once_with(
        "GET",
        API_URL,
        timeout=5.0,
        params={"publish": "off", "fromCache": "on", "all": "done", "host": "example.com"},
    )


def test_upstream_error_payload_is_relayed(client, ssl_client, session, make_response):
    body = {
        "host": "example.com",
        "status": "ERROR",
        "statusMessage": "Unable to resolve domain name",
    }
    session.request.return_value = make_response(200, body)

    response = client.get(URL, params={"host": "example.com"})

    assert response.status_code == 200
    assert response.json() == body


def test_api_alias_route(client, ssl_client, session, make_response):
    session.request.return_value = make_response(200, ASSESSMENT)

    response = client.get("/api/sslgrade", params={"host": "example.com"})

    assert response.status_code == 200
    assert response.json() == ASSESSMENT


def test_network_failure_is_server_error_and_isolated(client, ssl_client, session, make_response):
    session.request.side_effect = [
        requests.exceptions.ConnectionError("connection refused"),
        make_response(200, ASSESSMENT),
    ]

    failed = client.get(URL, params={"host": "example.com"})
    assert failed.status_code == 500
    assert "connection refused" in failed.json()["error"]

    recovered = client.get(URL, params={"host": "example.com"})
    assert recovered.status_code == 200
    assert recovered.json() == ASSESSMENT


def test_non_json_body_is_server_error(client, ssl_client, session, make_response):
    session.request.return_value = make_response(529, text="<html>overloaded</html>")

    response = client.get(URL, params={"host": "example.com"})

    assert response.status_code == 500
    assert "invalid json" in response.json()["error"]


def test_timeout_is_gateway_timeout(client, ssl_client, session):
    session.request.side_effect = requests.exceptions.ReadTimeout("read timed out")

    response = client.get(URL, params={"host": "example.com"})

    assert response.status_code == 504
    assert response.json()["error"]
