from unittest.mock import MagicMock

import pytest
import requests
import urllib3

from artifactfetch.exceptions import HTTPError, NetworkError
from artifactfetch.fetcher import create_session, fetch


def _response(status=200, headers=None, chunks=()):
    response = MagicMock()
    response.status_code = status
    response.headers = headers or {}
    response.raw.stream.return_value = list(chunks)
    return response


def _session(responses):
    """Session double answering GETs from a {url: response} mapping."""
    session = MagicMock()
    session.get.side_effect = lambda url, **_kwargs: responses[url]
    return session


@pytest.mark.unit
def test_fetch_accumulates_chunks():
    session = _session(
        {"https://host/a.br": _response(chunks=[b"abc", b"", b"def", b"g"])}
    )

    assert fetch("https://host/a.br", session=session) == b"abcdefg"
    session.get.assert_called_once_with(
        "https://host/a.br", stream=True, allow_redirects=False, timeout=30
    )


@pytest.mark.unit
def test_fetch_empty_body_returns_empty_bytes():
    session = _session({"https://host/a.gz": _response(chunks=[])})
    assert fetch("https://host/a.gz", session=session) == b""


@pytest.mark.unit
def test_redirect_chain_resolves_to_final_content():
    final = "https://cdn.example.com/final.br"
    chain = {
        "https://host/start.br": _response(302, {"Location": "https://host/hop1"}),
        "https://host/hop1": _response(301, {"Location": "https://host/hop2"}),
        "https://host/hop2": _response(307, {"Location": final}),
        final: _response(chunks=[b"payload"]),
    }

    redirected = fetch("https://host/start.br", session=_session(chain))
    direct = fetch(final, session=_session(chain))

    assert redirected == direct == b"payload"


@pytest.mark.unit
def test_relative_redirect_location_is_joined():
    session = _session(
        {
            "https://host/releases/a.br": _response(
                302, {"Location": "/storage/a.br"}
            ),
            "https://host/storage/a.br": _response(chunks=[b"x"]),
        }
    )

    assert fetch("https://host/releases/a.br", session=session) == b"x"


@pytest.mark.unit
@pytest.mark.parametrize("status", [204, 404, 403, 500, 503])
def test_non_200_status_raises_http_error(status):
    session = _session({"https://host/a.br": _response(status)})

    with pytest.raises(HTTPError) as exc_info:
        fetch("https://host/a.br", session=session)

    assert exc_info.value.status_code == status
    assert exc_info.value.url == "https://host/a.br"


@pytest.mark.unit
def test_redirect_without_location_raises_http_error():
    session = _session({"https://host/a.br": _response(302)})

    with pytest.raises(HTTPError) as exc_info:
        fetch("https://host/a.br", session=session)

    assert exc_info.value.status_code == 302


@pytest.mark.unit
def test_transport_failure_raises_network_error():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(NetworkError) as exc_info:
        fetch("https://host/a.br", session=session)

    assert exc_info.value.url == "https://host/a.br"
    assert "connection refused" in str(exc_info.value)


@pytest.mark.unit
def test_failure_mid_stream_raises_network_error():
    response = _response()
    response.raw.stream.side_effect = urllib3.exceptions.ProtocolError("truncated")
    session = _session({"https://host/a.br": response})

    with pytest.raises(NetworkError):
        fetch("https://host/a.br", session=session)


@pytest.mark.unit
def test_responses_are_closed():
    redirect = _response(302, {"Location": "https://host/b"})
    final = _response(chunks=[b"1"])
    session = _session({"https://host/a": redirect, "https://host/b": final})

    fetch("https://host/a", session=session)

    assert redirect.close.called
    assert final.close.called


@pytest.mark.unit
def test_fetch_without_session_creates_and_closes_one(mocker):
    session = _session({"https://host/a.gz": _response(chunks=[b"z"])})
    session.__enter__.return_value = session
    create = mocker.patch("artifactfetch.fetcher.create_session", return_value=session)

    assert fetch("https://host/a.gz") == b"z"

    create.assert_called_once_with()
    session.__exit__.assert_called_once()


@pytest.mark.unit
def test_create_session_disables_retries_and_redirects():
    session = create_session()
    adapter = session.get_adapter("https://github.com")
    assert adapter.max_retries.total == 0
    assert adapter.max_retries.redirect is False
    session.close()


@pytest.mark.unit
def test_content_encoding_is_not_decoded():
    compressed = b"\x1f\x8b already gzip"
    response = _response(headers={"Content-Encoding": "gzip"}, chunks=[compressed])
    session = _session({"https://mirror/a.gz": response})

    assert fetch("https://mirror/a.gz", session=session) == compressed
    response.raw.stream.assert_called_once_with(8192, decode_content=False)
    response.iter_content.assert_not_called()
