from quart import Blueprint, jsonify

from .service import get_public_settings, list_packs

bp = Blueprint("store", __name__)


@bp.get("/packs")
async def packs_list():
    return jsonify(await list_packs())


@bp.get("/settings/public")
async def public_settings():
    return jsonify(await get_public_settings())
