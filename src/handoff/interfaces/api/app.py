"""Falcon ASGI application."""

import logging

import falcon.asgi
from falcon.asgi import App

from handoff.interfaces.api.resources.artifacts import OriginalResource, SignatureResource
from handoff.interfaces.api.resources.deliveries import (
    DeliveriesResource,
    DeliveryResource,
    FinalizeResource,
)
from handoff.interfaces.api.resources.downloads import DownloadResource
from handoff.interfaces.api.resources.health import HealthResource

logger = logging.getLogger(__name__)


async def handle_unexpected_error(req, resp, ex, params) -> None:
    """Log unhandled exceptions and answer 500."""
    logger.error("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(
    deliveries_resource: DeliveriesResource,
    delivery_resource: DeliveryResource,
    finalize_resource: FinalizeResource,
    signature_resource: SignatureResource,
    original_resource: OriginalResource,
    download_resource: DownloadResource,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/deliveries", deliveries_resource)
    app.add_route("/v1/deliveries/{delivery_id}", delivery_resource)
    app.add_route("/v1/deliveries/{delivery_id}/finalize", finalize_resource)
    app.add_route("/v1/deliveries/{delivery_id}/signature", signature_resource)
    app.add_route("/v1/deliveries/{delivery_id}/original", original_resource)
    app.add_route("/v1/downloads/{token}", download_resource)
    app.add_route("/v1/downloads/{token}/info", download_resource, suffix="info")
    app.add_route("/v1/downloads/{token}/revoke", download_resource, suffix="revoke")
    return app
