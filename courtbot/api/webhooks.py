from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Request, Response

from courtbot.application.dto.telegram_update import TelegramUpdateDTO
from courtbot.core.config import settings
from courtbot.infrastructure.telegram.webhook_verify import verify_secret_token
from courtbot.wiring.dependencies import get_handle_interaction_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/telegram")
async def telegram_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
) -> Response:
    try:
        try:
            use_case = get_handle_interaction_use_case()
        except Exception as e:
            logger.exception("Failed to initialize use case", extra={"reason": str(e)})
            return Response(status_code=500)

        secret = request.headers.get("X-Telegram-Bot-Api-Secret-Token")
        if not verify_secret_token(secret, settings.TELEGRAM_WEBHOOK_SECRET, settings.ENV):
            return Response(status_code=403)

        body = await request.body()
        try:
            payload = json.loads(body.decode("utf-8")) if body else {}
        except ValueError:
            logger.exception("Failed to parse webhook body")
            return Response(status_code=400)

        try:
            update = TelegramUpdateDTO.model_validate(payload)
        except ValueError:
            logger.warning("Webhook body is not a Telegram update")
            return Response(status_code=400)

        interaction = update.extract_interaction()
        if interaction is None:
            logger.info("Update ignored", extra={"reason": "no message or callback"})
            return Response(status_code=200)

        background_tasks.add_task(use_case.handle, interaction)
        return Response(status_code=200)
    except Exception as e:
        logger.exception("Fatal error in webhook handler", extra={"reason": str(e)})
        return Response(status_code=500)
