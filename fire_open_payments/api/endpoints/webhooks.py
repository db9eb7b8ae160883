from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from fire_open_payments.integrations.webhooks.decoder import WebhookHandler


def build_webhook_router(handler: WebhookHandler, path: str = "/webhook") -> APIRouter:
    """
    Router receiving fire.com webhooks.
    The raw body is the token, so it is read as bytes rather than parsed as JSON.
    """
    router = APIRouter()

    @router.post(path, tags=["Webhooks"], response_class=PlainTextResponse)
    async def fire_webhook(request: Request):
        body = await request.body()
        result = await handler.handle(body)
        if result.status_code == 200:
            return PlainTextResponse("OK", status_code=200)
        return PlainTextResponse("Unauthorized", status_code=401)

    return router
