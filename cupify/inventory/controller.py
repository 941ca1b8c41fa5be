from quart import Blueprint, jsonify

from .service import get_item, list_inventory
from ..common.errors import UnknownColor

bp = Blueprint("inventory", __name__)


@bp.get("/inventory")
async def inventory_list():
    return jsonify(await list_inventory())


@bp.get("/inventory/<color_code>")
async def inventory_detail(color_code: str):
    item = await get_item(color_code)
    if item is None:
        raise UnknownColor(color_code)
    return jsonify(item)
