"""Multipart submission parsing and attachment storage."""

import time
from pathlib import Path

import structlog
from quart.datastructures import FileStorage
from werkzeug.datastructures import MultiDict

from config.constants import IMAGE_FIELD, UPLOADS_URL_PREFIX
from config.settings import settings
from storage.models import FieldValue

log = structlog.get_logger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def build_filename(original: str, now_ms: int | None = None) -> str:
    """``<millisecond timestamp><original extension>``."""
    if now_ms is None:
        now_ms = _now_ms()
    return f"{now_ms}{Path(original).suffix}"


def _claim_target(directory: Path, original: str) -> Path:
    # Create the file exclusively; bump the timestamp while the name is taken
    now_ms = _now_ms()
    while True:
        target = directory / build_filename(original, now_ms)
        try:
            target.open("xb").close()
        except FileExistsError:
            now_ms += 1
            continue
        return target


async def save_upload(file: FileStorage | None, upload_dir: Path | None = None) -> str | None:
    """Write an uploaded file into the content directory.

    Returns the URL path the file is served under, or None when no file was
    submitted.
    """
    if file is None or not file.filename:
        return None

    directory = upload_dir or settings.upload_dir
    directory.mkdir(parents=True, exist_ok=True)

    target = _claim_target(directory, file.filename)
    await file.save(target)
    log.info(
        "upload_stored",
        original=file.filename,
        stored=target.name,
        size=target.stat().st_size,
    )
    return f"{UPLOADS_URL_PREFIX}/{target.name}"


async def parse_submission(
    form: MultiDict,
    files: MultiDict,
    upload_dir: Path | None = None,
) -> tuple[dict[str, FieldValue], str | None]:
    """Split a multipart submission into text fields and a stored image path.

    A repeated field becomes a list of its values; only the first file under
    the image field is stored.
    """
    fields: dict[str, FieldValue] = {}
    for key in form.keys():
        values = form.getlist(key)
        fields[key] = values[0] if len(values) == 1 else values
    image_path = await save_upload(files.get(IMAGE_FIELD), upload_dir)
    return fields, image_path


def resolve_upload(filename: str, upload_dir: Path | None = None) -> Path | None:
    """Map a requested name to a stored file, rejecting anything outside the directory."""
    directory = (upload_dir or settings.upload_dir).resolve()
    candidate = (directory / filename).resolve()
    if candidate.parent != directory or not candidate.is_file():
        return None
    return candidate
