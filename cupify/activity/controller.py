from quart import Blueprint, jsonify, request

from .service import live_activity

bp = Blueprint("activity", __name__)


@bp.get("/activity")
async def activity_get():
    return jsonify(await live_activity(request.args.get("lang", "ar")))
