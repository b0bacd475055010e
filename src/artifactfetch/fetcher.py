"""
HTTP retrieval of release assets.
"""

from typing import Optional
from urllib.parse import urljoin

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry  # type: ignore

from artifactfetch.constants import DEFAULT_CHUNK_SIZE, DEFAULT_REQUEST_TIMEOUT
from artifactfetch.exceptions import HTTPError, NetworkError
from artifactfetch.log_utils import logger


def create_session() -> requests.Session:
    """
    Create a requests session that neither retries nor follows redirects on its own.

    Redirects are chased explicitly by fetch(); retries are out of scope since
    any failure routes to the local build.
    """
    session = requests.Session()
    retry_strategy: Retry = Retry(total=0, redirect=False, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _get(session: requests.Session, url: str) -> bytes:
    response = None
    try:
        logger.debug(f"GET {url}")
        response = session.get(
            url,
            stream=True,
            allow_redirects=False,
            timeout=DEFAULT_REQUEST_TIMEOUT,
        )
        status = response.status_code
        logger.debug(f"Received HTTP response status code: {status} for URL: {url}")

        location = response.headers.get("Location")
        if 300 <= status < 400 and location:
            target = urljoin(url, location)
            logger.debug(f"Following redirect from {url} to {target}")
            response.close()
            return _get(session, target)

        if status != 200:
            raise HTTPError(f"Status {status} for {url}", status_code=status, url=url)

        buffer = bytearray()
        # Raw bytes: a Content-Encoding header must not decode the asset twice
        for chunk in response.raw.stream(DEFAULT_CHUNK_SIZE, decode_content=False):
            if chunk:
                buffer.extend(chunk)
        logger.debug(f"Finished downloading {url}: {len(buffer)} bytes")
        return bytes(buffer)
    except (requests.RequestException, urllib3.exceptions.HTTPError) as exc:
        raise NetworkError(f"Request failed for {url}", url=url, details=str(exc))
    finally:
        if response is not None:
            response.close()


def fetch(url: str, session: Optional[requests.Session] = None) -> bytes:
    """
    Download `url` into memory, following 3xx redirects that carry a Location.

    There is no redirect depth limit. The whole body is buffered before it is
    returned, exactly as sent: any Content-Encoding is left undecoded.

    Raises:
        HTTPError: For any final status other than 200.
        NetworkError: For transport-level failures.
    """
    if session is not None:
        return _get(session, url)
    with create_session() as own_session:
        return _get(own_session, url)
