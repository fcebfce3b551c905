"""
Images for emoji placements.

Each placement is drawn from a Twemoji PNG. Images are downloaded on first use
and kept in a cache directory; lookups are remembered in memory for the
lifetime of the process, including emoji that have no image.
"""

import logging
import os
import urllib.error
import urllib.request

from .config import TWEMOJI_URL
from .emoji_lexer import VARIATION_SELECTOR_16

_LOGGER = logging.getLogger(__name__)

# Cache directory for emoji images (None: .emoji_cache next to this module)
EMOJI_CACHE_DIR = None

# Emoji text -> image path, or None if no image is available
_IMAGE_PATHS = {}


def strip_variation_selectors(s):
    """Remove U+FE0F; Twemoji names most emoji without it (U+2764 U+FE0F is 2764.png)."""
    return s.replace(VARIATION_SELECTOR_16, "")


def emoji_codepoint(s):
    """
    Dash-separated lowercase hex codepoints, as used in Twemoji filenames.

    :param s: Emoji text
    :return: e.g. "1f600" or "1f3c3-200d-2640"
    """
    return "-".join(f"{ord(c):x}" for c in s)


def set_emoji_cache_dir(cache_dir):
    """
    Set the directory where emoji images will be cached.

    :param cache_dir: Path to cache directory
    """
    global EMOJI_CACHE_DIR
    EMOJI_CACHE_DIR = cache_dir
    if cache_dir and not os.path.exists(cache_dir):
        os.makedirs(cache_dir, exist_ok=True)


def get_emoji_cache_dir():
    cache_dir = EMOJI_CACHE_DIR or os.path.join(os.path.dirname(__file__), ".emoji_cache")
    os.makedirs(cache_dir, exist_ok=True)
    return cache_dir


def clear_emoji_caches():
    """Forget the in-memory lookups, including emoji without an image."""
    _IMAGE_PATHS.clear()


def _image_names(emoji_text):
    names = [emoji_codepoint(emoji_text)]
    stripped = strip_variation_selectors(emoji_text)
    if stripped != emoji_text:
        names.append(emoji_codepoint(stripped))
    return names


def _fetch(name, path):
    """
    Download one Twemoji PNG.

    :return: False if Twemoji has no image of that name
    :raises OSError: On network and file errors
    """
    try:
        urllib.request.urlretrieve(TWEMOJI_URL.format(codepoint=name), path)
    except urllib.error.HTTPError as e:
        if e.code == 404:
            return False
        raise
    _LOGGER.info(f"Downloaded emoji image {name}.png")
    return True


def _find_image(emoji_text):
    cache_dir = get_emoji_cache_dir()
    paths = [(name, os.path.join(cache_dir, f"{name}.png")) for name in _image_names(emoji_text)]

    for _, path in paths:
        if os.path.exists(path):
            return path

    try:
        for name, path in paths:
            if _fetch(name, path):
                return path
        reason = "not found"
    except OSError as e:
        reason = e

    _LOGGER.warning(f"No image for emoji {emoji_text}: {reason}")
    return None


def get_emoji_image_path(emoji_text):
    """
    Get the path to the image of an emoji, downloading it if necessary.

    Both hits and misses are remembered, so each emoji is looked up (and a
    missing image reported) once per process.

    :param emoji_text: Emoji text of a placement
    :return: Path to a PNG file, or None if no image is available
    """
    if emoji_text not in _IMAGE_PATHS:
        _IMAGE_PATHS[emoji_text] = _find_image(emoji_text)
    return _IMAGE_PATHS[emoji_text]


def precache_emojis(emojis):
    """
    Look up the images of emoji placements ahead of drawing.

    :param emojis: Iterable of Emoji placements
    :return: Dict of emoji text -> image path (None where no image is available)
    """
    images = {}
    for e in emojis:
        if e.text not in images:
            images[e.text] = get_emoji_image_path(e.text)
    return images
