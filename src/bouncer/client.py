"""HTTP client for the bucket bouncer service."""

import asyncio
import base64
import hashlib
from email.utils import formatdate
from typing import Any
from urllib.parse import quote, urlencode

import aiohttp
from yarl import URL

from bouncer.auth.canonical import HttpVerb
from bouncer.auth.credentials import Credential
from bouncer.auth.signer import build_auth_header
from bouncer.common.logging import get_logger
from bouncer.common.settings import Settings

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
ACCEPT = "multipart/mixed, */*;q=0.9"


class BucketBouncerError(Exception):
    """Error communicating with the bucket bouncer."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# === URL assembly ===


def root_url(host: str, port: int, ssl: bool) -> str:
    """Root URL of a bucket bouncer instance."""
    scheme = "https" if ssl else "http"
    return f"{scheme}://{host}:{port}/"


def ping_url(host: str, port: int, ssl: bool) -> str:
    return f"{root_url(host, port, ssl)}ping/"


def stats_url(host: str, port: int, ssl: bool) -> str:
    return f"{root_url(host, port, ssl)}stats/"


def buckets_url(host: str, port: int, ssl: bool) -> str:
    return f"{root_url(host, port, ssl)}buckets"


def bucket_url(host: str, port: int, ssl: bool, bucket: str) -> str:
    return f"{root_url(host, port, ssl)}buckets/{quote(bucket, safe='')}"


def list_buckets_url(host: str, port: int, ssl: bool, owner: str) -> str:
    return f"{buckets_url(host, port, ssl)}?{urlencode({'owner': owner})}"


def content_md5(body: str | bytes) -> str:
    """Base64 MD5 digest of a request body, as carried in ``Content-MD5``."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return base64.b64encode(hashlib.md5(body).digest()).decode("ascii")


def http_date() -> str:
    """Current time in RFC 1123 format."""
    return formatdate(usegmt=True)


class BucketBouncerClient:
    """
    HTTP client for bucket bouncer management calls.

    Requests are signed with the admin credential when one is given. The
    signed resource is taken from the exact URL object handed to aiohttp, so
    what is signed is what goes on the wire.
    """

    def __init__(self, settings: Settings, credential: Credential | None = None):
        """
        Initialize the client.

        Args:
            settings: Application settings
            credential: Credential used to sign requests (unsigned if None)
        """
        self._host = settings.bouncer_host
        self._port = settings.bouncer_port
        self._ssl = settings.bouncer_ssl
        self._scheme_tag = settings.auth_scheme_tag
        self._custom_prefix = settings.custom_header_prefix
        self._credential = credential
        self._timeout = aiohttp.ClientTimeout(total=settings.http_timeout)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "BucketBouncerClient":
        """Enter async context."""
        self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._session:
            await self._session.close()
            self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session exists."""
        if not self._session:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    def _signed_headers(
        self,
        verb: HttpVerb,
        url: URL,
        headers: dict[str, str],
    ) -> dict[str, str]:
        """Add an Authorization header covering ``url`` when a credential is configured."""
        if self._credential is None:
            return headers
        authorization = build_auth_header(
            verb,
            headers,
            url.raw_path_qs,
            self._credential,
            scheme_tag=self._scheme_tag,
            prefix=self._custom_prefix,
        )
        return {"Authorization": authorization, **headers}

    def _form_headers(self, body: str) -> dict[str, str]:
        return {
            "Content-Type": FORM_CONTENT_TYPE,
            "Content-Md5": content_md5(body),
            "Date": http_date(),
        }

    async def _request(
        self,
        method: str,
        url: URL,
        **kwargs: Any,
    ) -> aiohttp.ClientResponse:
        """
        Execute an HTTP request against the bouncer.

        Raises:
            BucketBouncerError: On connection failure or timeout
        """
        session = self._ensure_session()

        headers = {"Accept": ACCEPT, **kwargs.pop("headers", {})}
        try:
            return await session.request(method, url, headers=headers, **kwargs)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Bouncer request failed", method=method, url=str(url), error=str(e))
            raise BucketBouncerError(f"Request failed: {e}") from e

    async def _expect(
        self,
        response: aiohttp.ClientResponse,
        expected: tuple[int, ...],
        action: str,
    ) -> None:
        if response.status not in expected:
            text = await response.text()
            raise BucketBouncerError(
                f"Failed to {action}: HTTP {response.status}",
                response.status,
                text,
            )

    # === Bucket operations ===

    async def create_bucket(self, bucket: str, requester: str) -> None:
        """
        Register a bucket for a requesting party.

        Args:
            bucket: Bucket name
            requester: Key id of the requesting user
        """
        body = urlencode({"name": bucket, "requester": requester})
        url = URL(buckets_url(self._host, self._port, self._ssl), encoded=True)
        headers = self._signed_headers(HttpVerb.POST, url, self._form_headers(body))

        logger.debug("Creating bucket", bucket=bucket, requester=requester)

        response = await self._request("POST", url, headers=headers, data=body)
        async with response:
            await self._expect(response, (204,), f"create bucket {bucket}")

    async def delete_bucket(self, bucket: str, requester: str) -> None:
        """Delete a bucket. The bucket must be owned by the requesting party."""
        body = urlencode({"requester": requester})
        url = URL(bucket_url(self._host, self._port, self._ssl, bucket), encoded=True)
        headers = self._signed_headers(HttpVerb.DELETE, url, self._form_headers(body))

        logger.debug("Deleting bucket", bucket=bucket, requester=requester)

        response = await self._request("DELETE", url, headers=headers, data=body)
        async with response:
            await self._expect(response, (204,), f"delete bucket {bucket}")

    async def list_buckets(self, owner: str | None = None) -> list[dict[str, Any]]:
        """
        List buckets that currently have owners.

        Args:
            owner: Only list buckets owned by this key id

        Returns:
            List of bucket records as returned by the bouncer
        """
        if owner is None:
            url = URL(buckets_url(self._host, self._port, self._ssl), encoded=True)
        else:
            url = URL(list_buckets_url(self._host, self._port, self._ssl, owner), encoded=True)
        headers = self._signed_headers(HttpVerb.GET, url, {"Date": http_date()})

        response = await self._request("GET", url, headers=headers)
        async with response:
            await self._expect(response, (200,), "list buckets")
            payload = await response.json()
        if isinstance(payload, dict):
            return list(payload.get("buckets", []))
        return list(payload)

    async def ping(self) -> None:
        """Ping the bouncer by requesting the ``/ping`` resource."""
        url = URL(ping_url(self._host, self._port, self._ssl), encoded=True)
        response = await self._request("GET", url)
        async with response:
            await self._expect(response, (200, 204), "ping")

    async def stats(self) -> dict[str, Any]:
        """Fetch the bouncer's ``/stats`` resource."""
        url = URL(stats_url(self._host, self._port, self._ssl), encoded=True)
        headers = self._signed_headers(HttpVerb.GET, url, {"Date": http_date()})

        response = await self._request("GET", url, headers=headers)
        async with response:
            await self._expect(response, (200,), "fetch stats")
            return await response.json()
