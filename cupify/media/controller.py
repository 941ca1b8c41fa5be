from quart import Blueprint, Response, jsonify, request

from .service import delete_image, list_images, save_image
from .storage import OBJECT_PREFIX, get_storage
from ..admin.auth import require_admin

bp = Blueprint("media", __name__)


@bp.get("/images")
async def images_list():
    return jsonify(await list_images())


@bp.get("/admin/images")
@require_admin
async def admin_images_list():
    return jsonify(await list_images())


@bp.put("/admin/images")
@require_admin
async def admin_images_put():
    data = await request.get_json(force=True, silent=True) or {}
    return jsonify(await save_image(data))


@bp.delete("/admin/images/<image_id>")
@require_admin
async def admin_images_delete(image_id: str):
    await delete_image(image_id)
    return jsonify({"success": True})


@bp.post("/uploads/request-url")
@require_admin
async def upload_url_post():
    data = await request.get_json(force=True, silent=True) or {}
    content_type = data.get("contentType") or data.get("type")
    result = await get_storage().request_upload_url(data.get("name"), data.get("size"), content_type)
    return jsonify(result)


@bp.put("/objects/uploads/<object_id>")
async def object_put(object_id: str):
    body = await request.get_data()
    path = await get_storage().put_object(object_id, body, request.headers.get("Content-Type"))
    return jsonify({"objectPath": path})


@bp.get("/objects/<path:object_path>")
async def object_get(object_path: str):
    data, content_type = await get_storage().get_object(f"{OBJECT_PREFIX}{object_path}")
    return Response(data, mimetype=content_type, headers={"Cache-Control": "public, max-age=3600"})
