import logging
import os
import time

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from quart import Quart, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from .activity.controller import bp as activity_bp
from .admin.controller import bp as admin_bp
from .common.config import settings
from .common.database import dispose_engine, init_db
from .common.errors import StoreError
from .common.redis_client import close_redis
from .inventory.controller import bp as inventory_bp
from .media.controller import bp as media_bp
from .orders.controller import bp as orders_bp
from .realtime.controller import bp as realtime_bp
from .store.controller import bp as store_bp

log = logging.getLogger(__name__)

INSTANCE_ID = os.getenv("INSTANCE_ID", "unknown")

REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"])
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0, float("inf")),
)
ORDER_OUTCOMES = Counter("orders_total", "Order placement attempts by outcome", ["outcome"])

# Dynamic routes collapse to one label each to keep metric cardinality bounded.
_ENDPOINT_GROUPS = (
    ("/admin/orders/", "/admin/orders/<id>"),
    ("/admin/inventory/", "/admin/inventory/<colorCode>"),
    ("/admin/packs/", "/admin/packs/<size>"),
    ("/admin/images/", "/admin/images/<id>"),
    ("/inventory/", "/inventory/<colorCode>"),
    ("/objects/", "/objects/*"),
)


def normalize_endpoint(path: str) -> str:
    for prefix, label in _ENDPOINT_GROUPS:
        if path.startswith(prefix):
            return label
    return path


def create_app() -> Quart:
    app = Quart(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.MAX_UPLOAD_BYTES

    for bp in (inventory_bp, store_bp, orders_bp, activity_bp, admin_bp, media_bp, realtime_bp):
        app.register_blueprint(bp)

    @app.before_request
    async def before_request():
        request._start_time = time.time()
        log.debug("[Instance %s] %s %s", INSTANCE_ID, request.method, request.path)

    @app.after_request
    async def after_request(response):
        try:
            if hasattr(request, "_start_time"):
                duration = time.time() - request._start_time
                endpoint = normalize_endpoint(request.path)
                REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
                REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=str(response.status_code)).inc()
                if request.path == "/orders" and request.method == "POST":
                    outcome = "placed" if response.status_code == 201 else "rejected"
                    ORDER_OUTCOMES.labels(outcome=outcome).inc()
                response.headers["X-Instance-ID"] = INSTANCE_ID
        except Exception as e:
            log.error("Error recording metrics: %s", e)
        return response

    @app.errorhandler(StoreError)
    async def store_error(err: StoreError):
        if err.status >= 500:
            log.error("Store error | code=%s msg=%s", err.code, err.message)
        return jsonify(err.to_dict()), err.status

    @app.errorhandler(SQLAlchemyError)
    async def database_error(err: SQLAlchemyError):
        log.exception("Database error on %s %s", request.method, request.path)
        return jsonify({"error": "Database error", "code": "database_error"}), 500

    @app.get("/metrics")
    async def metrics():
        data = generate_latest()
        return app.response_class(data, mimetype=CONTENT_TYPE_LATEST)

    @app.get("/health")
    async def health():
        return jsonify({"status": "ok"})

    @app.before_serving
    async def startup():
        logging.basicConfig(level=settings.LOG_LEVEL)
        log.info("Initializing database...")
        await init_db()
        log.info("Database ready.")

    @app.after_serving
    async def shutdown():
        await close_redis()
        await dispose_engine()
        log.info("Shutdown complete.")

    return app
