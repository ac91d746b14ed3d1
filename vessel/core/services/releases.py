"""
Package-set releases: find the latest published set and pin it.

A pinned set is a ``(url, hash)`` pair where the hash is the
``sha256:<hex>`` digest of the downloaded file, ready to paste into
the ``upstream`` section of a package set file.
"""

from __future__ import annotations

import json
import logging

from vessel.adapters.base import Transport
from vessel.core.config.package_set import content_hash
from vessel.core.config.settings import Settings
from vessel.core.errors import NetworkError

logger = logging.getLogger(__name__)

RELEASES_API = "https://api.github.com/repos/{repo}/releases"
RELEASE_ASSET_URL = "https://github.com/{repo}/releases/download/{tag}/{asset}"
GITHUB_JSON = {"Accept": "application/vnd.github.v3+json"}

# Used by init when no usable release can be fetched. init seeds the
# upstream cache with these bytes, so the pin resolves without a download.
FALLBACK_PACKAGE_SET_URL = (
    "https://github.com/dfinity/vessel-package-set/releases/download/"
    "mo-0.6.21-20220215/package-set.yml"
)
FALLBACK_PACKAGE_SET = """\
- name: base
  repo: https://github.com/dfinity/motoko-base
  version: moc-0.6.21
  dependencies: []
- name: matchers
  repo: https://github.com/kritzcreek/motoko-matchers
  version: v1.2.0
  dependencies: [base]
"""
FALLBACK_PACKAGE_SET_HASH = content_hash(FALLBACK_PACKAGE_SET.encode("utf-8"))


def fetch_latest_tag(transport: Transport, settings: Settings) -> str:
    """Tag name of the newest package-set release.

    Raises:
        NetworkError: If the API can't be reached, answers with an
            error, or lists no releases.
    """
    url = RELEASES_API.format(repo=settings.package_set_repo)
    response = transport.fetch(url, headers=GITHUB_JSON)
    if not response.ok:
        raise NetworkError(
            f"Failed to retrieve the latest package set release from {url}, "
            f'with "{response.status}": {response.error or response.text()}',
            status=response.status,
        )

    try:
        releases = json.loads(response.body)
    except ValueError as e:
        raise NetworkError(f"Unexpected response from {url}: {e}") from e

    if not isinstance(releases, list) or not releases:
        raise NetworkError(f"No package set releases found at {url}")
    tag = releases[0].get("tag_name") if isinstance(releases[0], dict) else None
    if not isinstance(tag, str) or not tag:
        raise NetworkError(f"The newest release at {url} has no tag name")
    return tag


def download_package_set(tag: str, transport: Transport, settings: Settings) -> tuple[str, bytes]:
    """Download the package set published under ``tag``.

    Returns:
        The asset URL and the raw bytes of the file.

    Raises:
        NetworkError: If the asset can't be downloaded.
    """
    url = RELEASE_ASSET_URL.format(
        repo=settings.package_set_repo, tag=tag, asset=settings.package_set_asset
    )
    logger.info("Fetching package set %s", url)
    response = transport.fetch(url)
    if not response.ok:
        raise NetworkError(
            f"Failed to download the package set from {url}, "
            f'with "{response.status}": {response.error or response.text()}',
            status=response.status,
        )
    return url, response.body


def download_latest_package_set(transport: Transport, settings: Settings) -> tuple[str, bytes]:
    """URL and bytes of the newest package-set release."""
    tag = fetch_latest_tag(transport, settings)
    logger.debug("Latest package set release is %s", tag)
    return download_package_set(tag, transport, settings)


def fetch_package_set(tag: str, transport: Transport, settings: Settings) -> tuple[str, str]:
    """The ``(url, hash)`` pin for the package set published under ``tag``."""
    url, data = download_package_set(tag, transport, settings)
    return url, content_hash(data)
