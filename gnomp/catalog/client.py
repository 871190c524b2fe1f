"""Client for the extensions.gnome.org extension catalog.

The catalog answers ``/extension-info/?uuid=<uuid>&shell_version=<version>``
with a JSON document whose ``download_url`` field points at a zip of the
extension build matching that shell version.
"""

import asyncio
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Dict, Optional

import aiohttp
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .. import __version__
from ..errors import ExtensionFetchError
from ..util.compression import extract_zip
from ..util.logging import get_logger

logger = get_logger(__name__)

HTTP_NOT_FOUND = 404

_TRANSIENT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class ExtensionCatalog:
    """Looks up and downloads extensions from the remote catalog."""

    def __init__(
        self,
        base_url: str = "https://extensions.gnome.org",
        info_path: str = "/extension-info/",
        timeout: int = 30,
        retries: int = 3,
    ) -> None:
        """Initialize the catalog client.

        Args:
            base_url: Catalog root URL
            info_path: Path of the extension info endpoint
            timeout: Total timeout per request in seconds
            retries: Attempts per request for transient network errors
        """
        self.base_url = base_url.rstrip("/")
        self.info_path = info_path
        self.timeout = timeout
        self.retries = max(1, retries)

    def create_session(self) -> aiohttp.ClientSession:
        """Create an HTTP session configured for the catalog."""
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={"User-Agent": f"gnomp/{__version__}"},
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            reraise=True,
        )

    def absolute_url(self, location: str) -> str:
        """Resolve a catalog-relative download location."""
        if location.startswith(("http://", "https://")):
            return location
        return f"{self.base_url}/{location.lstrip('/')}"

    async def _get_json(
        self, session: aiohttp.ClientSession, url: str, params: Dict[str, str]
    ) -> Optional[Dict[str, Any]]:
        """GET a JSON document, None on 404."""
        async for attempt in self._retrying():
            with attempt:
                async with session.get(url, params=params) as response:
                    if response.status == HTTP_NOT_FOUND:
                        return None
                    response.raise_for_status()
                    return await response.json(content_type=None)
        return None

    async def _get_bytes(self, session: aiohttp.ClientSession, url: str) -> bytes:
        async for attempt in self._retrying():
            with attempt:
                async with session.get(url) as response:
                    response.raise_for_status()
                    return await response.read()
        return b""

    async def get_download_url(
        self, session: aiohttp.ClientSession, uuid: str, shell_version: str
    ) -> str:
        """Absolute download URL of the build of uuid matching shell_version.

        Raises:
            ExtensionFetchError: If the catalog has no matching build or cannot be reached
        """
        params = {"uuid": uuid, "shell_version": shell_version}
        url = f"{self.base_url}{self.info_path}"
        logger.debug(f"Querying catalog {url} with {params}")

        try:
            info = await self._get_json(session, url, params)
        except _TRANSIENT_ERRORS as e:
            raise ExtensionFetchError(f"Catalog lookup failed for {uuid}: {e}") from e
        except ValueError as e:
            raise ExtensionFetchError(f"Invalid catalog response for {uuid}: {e}") from e

        if not isinstance(info, dict) or not info.get("download_url"):
            raise ExtensionFetchError(f"No download for {uuid} on GNOME Shell {shell_version}")

        return self.absolute_url(info["download_url"])

    async def install(
        self,
        session: aiohttp.ClientSession,
        uuid: str,
        shell_version: str,
        extensions_dir: Path,
    ) -> Path:
        """Download an extension and unpack it into extensions_dir/uuid.

        Returns:
            The extension's installation directory

        Raises:
            ExtensionFetchError: If lookup, download or unpacking fails
        """
        download_url = await self.get_download_url(session, uuid, shell_version)
        logger.debug(f"Downloading {uuid} from {download_url}")

        try:
            payload = await self._get_bytes(session, download_url)
        except _TRANSIENT_ERRORS as e:
            raise ExtensionFetchError(f"Download failed for {uuid}: {e}") from e

        target = extensions_dir / uuid
        with tempfile.TemporaryDirectory(prefix="gnomp-") as tmp:
            zip_path = Path(tmp) / "ext.zip"
            zip_path.write_bytes(payload)
            try:
                extract_zip(zip_path, target)
            except zipfile.BadZipFile as e:
                raise ExtensionFetchError(f"Downloaded archive for {uuid} is not a zip: {e}") from e

        return target
