from flask import Blueprint, abort, current_app, jsonify, send_from_directory

from sitegate.app.extensions import limiter
from sitegate.utils.timeutils import isoformat, utc_now

main = Blueprint('main', __name__)


@main.route('/health', methods=['GET'])
@limiter.exempt
def health():
    return jsonify({
        "success": True,
        "message": "Server is running",
        "data": {"timestamp": isoformat(utc_now())},
    })


@main.route('/uploads/<filename>', methods=['GET'])
def uploaded_file(filename):
    store = current_app.extensions["uploads"]
    path = store.resolve(filename)
    if path is None or not path.is_file():
        abort(404)
    return send_from_directory(store.directory, path.name)
