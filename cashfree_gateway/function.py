"""Appwrite-style entry point for the payment function.

The runtime awaits ``main(context)`` with ``context.req``, ``context.res``,
``context.log`` and ``context.error``.
"""

from cashfree_gateway.config import get_settings
from cashfree_gateway.logging_config import CallbackHandler, configure_logging, logger
from cashfree_gateway.routes import get_adapter

configure_logging(get_settings().log_level)


async def main(context, adapter=None):
    adapter = adapter or get_adapter()
    req = context.req

    handler = CallbackHandler(context.log, context.error)
    logger.addHandler(handler)
    try:
        result = await adapter.handle(req.method, getattr(req, "path", None) or "/", req.body)
    finally:
        logger.removeHandler(handler)

    return context.res.json(result.payload, result.status_code, result.headers)
