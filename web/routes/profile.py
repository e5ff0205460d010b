"""Profile form page, submission handling and stored uploads."""

import structlog
from quart import Blueprint, abort, render_template, request, send_file

from storage.repositories.profile_repo import save_profile
from storage.uploads import parse_submission, resolve_upload

log = structlog.get_logger(__name__)

profile_bp = Blueprint("profile_routes", __name__)


@profile_bp.route("/")
async def form_page():
    return await render_template("index.html")


@profile_bp.route("/save-profile", methods=["POST"])
async def save_profile_route():
    """Store the optional image, persist the record and render a confirmation."""
    try:
        form = await request.form
        files = await request.files
        log.info("profile_save_request", fields=sorted(form.keys()), files=sorted(files.keys()))

        fields, image_path = await parse_submission(form, files)
        status = await save_profile(fields, image_path)

        return await render_template(
            "saved.html",
            name=fields.get("name"),
            email=fields.get("email"),
            interests=fields.get("interests"),
            image_path=image_path,
            status=status.value,
        )
    except Exception:
        log.exception("profile_save_failed")
        return await render_template("error.html"), 500


@profile_bp.route("/uploads/<path:filename>")
async def uploaded_file(filename: str):
    path = resolve_upload(filename)
    if path is None:
        abort(404)
    return await send_file(path)
