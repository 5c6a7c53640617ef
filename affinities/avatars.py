import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence
import requests
from PIL import Image
from affinities.constants import *
from affinities.request_models import Contact

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Optional[Image.Image]]

def avatar_url(contact: Contact, size: int = AVATAR_CDN_SIZE) -> str:
    if contact.avatar:
        return AVATAR_URL.format(user_id=contact.id, avatar=contact.avatar, size=size)
    index = int(contact.id) % DEFAULT_AVATAR_COUNT if contact.id.isdigit() else 0
    return DEFAULT_AVATAR_URL.format(index=index)

def fetch_avatar(url: str, session: Optional[requests.Session] = None,
                 timeout: float = AVATAR_TIMEOUT) -> Optional[Image.Image]:
    """Download and decode one avatar. Failures are logged and yield None."""
    getter = session or requests
    try:
        response = getter.get(url, stream=True, timeout=timeout)
        response.raise_for_status()
        buf = io.BytesIO()
        for chunk in response.iter_content(chunk_size=8192):
            buf.write(chunk)
        buf.seek(0)
        im = Image.open(buf)
        return im.convert("RGBA")
    except requests.exceptions.RequestException as e:
        logger.warning("could not fetch avatar %s: %s", url, e)
    except (OSError, Image.DecompressionBombError) as e:
        logger.warning("could not decode avatar %s: %s", url, e)
    return None

def fetch_avatars(urls: Sequence[Optional[str]], fetcher: Fetcher = fetch_avatar,
                  max_workers: int = FETCH_WORKERS) -> List[Optional[Image.Image]]:
    """Fetch concurrently; results line up with `urls`, None where a url is missing or failed."""
    def one(url):
        return fetcher(url) if url else None

    if not urls:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(urls)))) as pool:
        return list(pool.map(one, urls))
