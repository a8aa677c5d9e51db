"""Tests for downloading, resizing and validating uploaded photos."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from PIL import Image
from telegram.error import TelegramError

from models.event import PhotoSize
from services.image_pipeline import ImagePipeline, fit_inside
from utils.errors import DownloadError, PayloadTooLargeError, ResolutionError
from utils.temp_files import TempFileArena


def _write_image(path: Path, size, fmt="JPEG", mode="RGB") -> Path:
    Image.new(mode, size, "orange").save(path, format=fmt)
    return path


def _fake_file(file_id: str, source: Path = None, file_path="photos/file_1.jpg"):
    async def _download(custom_path):
        Path(custom_path).write_bytes(source.read_bytes())
        return Path(custom_path)

    return SimpleNamespace(
        file_id=file_id,
        file_path=file_path,
        download_to_drive=AsyncMock(side_effect=_download),
    )


def test_fit_inside_shrinks_keeping_aspect_ratio(tmp_path):
    path = _write_image(tmp_path / "wide.jpg", (2048, 1024))

    assert fit_inside(path) == "JPEG"

    with Image.open(path) as img:
        assert img.size == (1024, 512)
        assert img.format == "JPEG"
    assert not (tmp_path / "wide.jpg.resized").exists()


def test_fit_inside_never_enlarges(tmp_path):
    path = _write_image(tmp_path / "small.jpg", (300, 200))

    fit_inside(path)

    with Image.open(path) as img:
        assert img.size == (300, 200)


def test_fit_inside_keeps_png_format(tmp_path):
    path = _write_image(tmp_path / "file.jpg", (1500, 3000), fmt="PNG", mode="RGBA")

    assert fit_inside(path) == "PNG"

    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size == (512, 1024)


def test_check_size_requires_strictly_less_than_limit(tmp_path):
    pipeline = ImagePipeline(bot=None, temp_dir=str(tmp_path), max_bytes=10)
    ok = tmp_path / "ok.jpg"
    ok.write_bytes(b"x" * 9)
    too_big = tmp_path / "big.jpg"
    too_big.write_bytes(b"x" * 10)

    assert pipeline.check_size(ok) == 9
    with pytest.raises(PayloadTooLargeError, match="too large"):
        pipeline.check_size(too_big)


@pytest.mark.asyncio
async def test_resolve_without_file_path_raises(fake_bot, tmp_path):
    fake_bot.get_file.return_value = SimpleNamespace(file_id="abc", file_path=None)
    pipeline = ImagePipeline(fake_bot, temp_dir=str(tmp_path))

    with pytest.raises(ResolutionError, match="Could not get file path"):
        await pipeline.resolve(PhotoSize("abc"))


@pytest.mark.asyncio
async def test_download_failure_is_wrapped_and_path_registered(fake_bot, tmp_path):
    file = SimpleNamespace(
        file_id="abc",
        file_path="photos/abc.jpg",
        download_to_drive=AsyncMock(side_effect=TelegramError("Timed out")),
    )
    pipeline = ImagePipeline(fake_bot, temp_dir=str(tmp_path))

    with TempFileArena() as arena:
        with pytest.raises(DownloadError, match="Timed out"):
            await pipeline.download(file, arena)
        assert arena.paths == [tmp_path / "abc.jpg"]


@pytest.mark.asyncio
async def test_prepare_uses_largest_photo_and_returns_bytes(fake_bot, tmp_path):
    source = _write_image(tmp_path / "source.jpg", (2000, 1000))
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    fake_bot.get_file.return_value = _fake_file("large-id", source)
    pipeline = ImagePipeline(fake_bot, temp_dir=str(work_dir))

    with TempFileArena() as arena:
        image = await pipeline.prepare([PhotoSize("small-id"), PhotoSize("large-id")], arena)
        assert (work_dir / "large-id.jpg").exists()

    fake_bot.get_file.assert_awaited_once_with("large-id")
    assert image.filename == "image.jpg"
    assert image.mime_type == "image/jpeg"
    assert image.content.startswith(b"\xff\xd8\xff")
    assert list(work_dir.iterdir()) == []
