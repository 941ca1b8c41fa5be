from quart import Blueprint, jsonify, request

from .service import parse_order_request, place_order
from ..inventory.service import list_inventory
from ..notify.whatsapp import order_whatsapp_link
from ..store.service import get_public_settings

bp = Blueprint("orders", __name__)


@bp.post("/orders")
async def orders_post():
    data = await request.get_json(force=True, silent=True)
    order_request = parse_order_request(data)
    order = await place_order(order_request)

    lang = order_request.language
    names = {
        item["colorCode"]: item["nameAr"] if lang == "ar" else item["nameEn"]
        for item in await list_inventory()
    }
    store = await get_public_settings()
    order["whatsappUrl"] = order_whatsapp_link(order, names, store["whatsapp_number"], lang)
    return jsonify(order), 201
