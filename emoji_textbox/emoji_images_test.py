import io
import os
import urllib.error
import urllib.request

import pytest

from emoji_textbox import emoji_images
from emoji_textbox.emoji_images import (
    clear_emoji_caches,
    emoji_codepoint,
    get_emoji_image_path,
    precache_emojis,
    set_emoji_cache_dir,
    strip_variation_selectors,
)
from emoji_textbox.rich_text import Emoji

GRIN = "\U0001F600"
HEART = "\u2764\ufe0f"


def not_found(url):
    return urllib.error.HTTPError(url, 404, "Not Found", {}, io.BytesIO())


@pytest.fixture
def cache_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(emoji_images, "EMOJI_CACHE_DIR", None)
    set_emoji_cache_dir(str(tmp_path / "emoji"))
    clear_emoji_caches()
    yield tmp_path / "emoji"
    clear_emoji_caches()


@pytest.fixture
def downloads(monkeypatch):
    """Record requested URLs; answer 404 for URLs in the returned `missing` set."""
    requested = []
    missing = set()

    def fake_urlretrieve(url, filename):
        requested.append(url)
        if url in missing:
            raise not_found(url)
        with open(filename, "wb") as f:
            f.write(b"png")
        return filename, None

    monkeypatch.setattr(urllib.request, "urlretrieve", fake_urlretrieve)
    return requested, missing


def test_codepoints():
    assert emoji_codepoint(GRIN) == "1f600"
    assert emoji_codepoint(HEART) == "2764-fe0f"
    assert strip_variation_selectors(HEART) == "\u2764"


def test_set_cache_dir_creates_directory(cache_dir):
    assert os.path.isdir(cache_dir)


def test_download_once_then_cached(cache_dir, downloads):
    requested, _ = downloads
    path = get_emoji_image_path(GRIN)
    assert path == os.path.join(str(cache_dir), "1f600.png")
    assert os.path.exists(path)
    assert get_emoji_image_path(GRIN) == path
    assert len(requested) == 1
    assert requested[0].endswith("/1f600.png")


def test_existing_file_is_not_downloaded(cache_dir, downloads):
    requested, _ = downloads
    (cache_dir / "1f600.png").write_bytes(b"png")
    assert get_emoji_image_path(GRIN) == os.path.join(str(cache_dir), "1f600.png")
    assert requested == []


def test_falls_back_to_stripped_codepoint(cache_dir, downloads):
    requested, missing = downloads
    missing.add(emoji_images.TWEMOJI_URL.format(codepoint="2764-fe0f"))
    path = get_emoji_image_path(HEART)
    assert path == os.path.join(str(cache_dir), "2764.png")
    assert [url.rsplit("/", 1)[1] for url in requested] == ["2764-fe0f.png", "2764.png"]


def test_failure_is_remembered(cache_dir, downloads, caplog):
    requested, missing = downloads
    missing.add(emoji_images.TWEMOJI_URL.format(codepoint="1f600"))
    assert get_emoji_image_path(GRIN) is None
    assert get_emoji_image_path(GRIN) is None
    assert len(requested) == 1
    assert sum("No image for emoji" in r.message for r in caplog.records) == 1


def test_network_error_stops_candidates(cache_dir, monkeypatch):
    requested = []

    def offline(url, filename):
        requested.append(url)
        raise urllib.error.URLError("offline")

    monkeypatch.setattr(urllib.request, "urlretrieve", offline)
    assert get_emoji_image_path(HEART) is None
    assert len(requested) == 1


def test_precache(cache_dir, downloads):
    requested, _ = downloads
    images = precache_emojis([Emoji(GRIN, 0, 0, 10), Emoji(GRIN, 5, 0, 10)])
    assert images == {GRIN: os.path.join(str(cache_dir), "1f600.png")}
    assert len(requested) == 1
    assert os.path.exists(cache_dir / "1f600.png")


def test_cached_stripped_image_is_reused(cache_dir, downloads):
    requested, _ = downloads
    (cache_dir / "2764.png").write_bytes(b"png")
    assert get_emoji_image_path(HEART) == os.path.join(str(cache_dir), "2764.png")
    assert requested == []
