from quart import Blueprint, jsonify, request

from . import auth
from ..common.errors import NotFound
from ..inventory.service import list_inventory, update_item
from ..orders.service import get_order, list_orders, set_status
from ..store.service import get_settings, update_pack, update_settings

bp = Blueprint("admin", __name__, url_prefix="/admin")


@bp.post("/login")
async def login_post():
    data = await request.get_json(force=True, silent=True) or {}
    token = await auth.login(data.get("username"), data.get("password"))
    return jsonify({"token": token})


@bp.post("/logout")
async def logout_post():
    await auth.logout(auth.bearer_token())
    return jsonify({"success": True})


@bp.get("/orders")
@auth.require_admin
async def orders_list():
    return jsonify(await list_orders())


@bp.get("/orders/<order_id>")
@auth.require_admin
async def order_detail(order_id: str):
    order = await get_order(order_id)
    if order is None:
        raise NotFound("Order not found")
    return jsonify(order)


@bp.put("/orders/<order_id>/status")
@auth.require_admin
async def order_status_put(order_id: str):
    data = await request.get_json(force=True, silent=True) or {}
    return jsonify(await set_status(order_id, data.get("status")))


@bp.get("/inventory")
@auth.require_admin
async def inventory_list():
    return jsonify(await list_inventory())


@bp.put("/inventory/<color_code>")
@auth.require_admin
async def inventory_put(color_code: str):
    data = await request.get_json(force=True, silent=True) or {}
    return jsonify(await update_item(color_code, data))


@bp.get("/settings")
@auth.require_admin
async def settings_get():
    return jsonify(await get_settings())


@bp.put("/settings")
@auth.require_admin
async def settings_put():
    data = await request.get_json(force=True, silent=True) or {}
    return jsonify(await update_settings(data))


@bp.put("/packs/<int:size>")
@auth.require_admin
async def pack_put(size: int):
    data = await request.get_json(force=True, silent=True) or {}
    return jsonify(await update_pack(size, data))
