from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from cashfree_gateway.adapter import GatewayAdapter
from cashfree_gateway.cashfree_service import CashfreeClient
from cashfree_gateway.config import get_settings

router = APIRouter()

ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def get_adapter() -> GatewayAdapter:
    settings = get_settings()
    client = CashfreeClient(
        settings.cashfree_base_url,
        settings.cashfree_api_version,
        timeout=settings.request_timeout,
    )
    return GatewayAdapter(settings, client)


@router.api_route("/{path:path}", methods=ROUTE_METHODS)
async def dispatch(request: Request, adapter: GatewayAdapter = Depends(get_adapter)):
    body = await request.body()
    result = await adapter.handle(request.method, request.url.path, body)
    return JSONResponse(content=result.payload, status_code=result.status_code, headers=result.headers)
