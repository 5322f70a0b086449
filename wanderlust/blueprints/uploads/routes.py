"""Static serving of uploaded listing images (/uploads/<filename>)."""

from flask import Blueprint, current_app, send_from_directory

uploads_bp = Blueprint("uploads", __name__, url_prefix="/uploads")


@uploads_bp.route("/<path:filename>")
def serve(filename: str):
    # send_from_directory refuses paths that escape UPLOAD_FOLDER (404)
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
