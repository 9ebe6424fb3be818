"""Streaming HTTP download of direct video links."""

from pathlib import Path

import requests

from cliptrim.errors import FetchHttpError, FetchIoError, FetchNetworkError
from cliptrim.logging_utils import get_logger

log = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def fetch_url(url: str, output_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Download *url* to *output_path* chunk by chunk and return the byte count.

    The body is never held in memory as a whole; each chunk is written as it
    arrives.
    """
    log.info("Downloading %s", url)
    try:
        resp = requests.get(url, stream=True)
    except requests.RequestException as e:
        raise FetchNetworkError(f"Failed to fetch URL: {e}") from e

    with resp:
        if not 200 <= resp.status_code < 300:
            raise FetchHttpError(
                f"Failed to download video: HTTP status {resp.status_code}",
                status_code=resp.status_code,
            )

        written = 0
        try:
            with open(output_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=chunk_size):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
        except requests.RequestException as e:
            raise FetchNetworkError(f"Error while downloading chunk: {e}") from e
        except OSError as e:
            raise FetchIoError(f"Failed to write {output_path}: {e}") from e

    log.info("Downloaded %d bytes to %s", written, output_path)
    return written
