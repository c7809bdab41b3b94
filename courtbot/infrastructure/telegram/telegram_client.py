from __future__ import annotations

import logging
from typing import Any

import httpx

from courtbot.application.exceptions import PlatformError


class TelegramClient:
    def __init__(self, token: str, base_url: str = "https://api.telegram.org") -> None:
        self._endpoint = f"{base_url.rstrip('/')}/bot{token}"
        self._client = httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_message(self, chat_id: int, text: str, reply_markup: dict[str, Any] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        return self._call("sendMessage", payload)

    def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"chat_id": chat_id, "message_id": message_id, "text": text}
        if reply_markup:
            payload["reply_markup"] = reply_markup
        return self._call("editMessageText", payload)

    def answer_callback_query(self, callback_query_id: str, text: str | None = None, show_alert: bool = False) -> None:
        payload: dict[str, Any] = {"callback_query_id": callback_query_id, "show_alert": show_alert}
        if text:
            payload["text"] = text
        self._call("answerCallbackQuery", payload)

    def set_webhook(self, url: str, secret_token: str | None = None) -> None:
        payload: dict[str, Any] = {"url": url, "allowed_updates": ["message", "callback_query"]}
        if secret_token:
            payload["secret_token"] = secret_token
        self._call("setWebhook", payload)

    def _call(self, method: str, payload: dict[str, Any]) -> Any:
        try:
            resp = self._client.post(f"{self._endpoint}/{method}", json=payload)
        except httpx.HTTPError as e:
            self._logger.error("Telegram request failed", extra={"reason": str(e), "chat_id": payload.get("chat_id")})
            raise PlatformError(f"Telegram {method} failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {"ok": False, "description": resp.text}

        if resp.status_code >= 400 or not body.get("ok"):
            self._logger.error(
                "Telegram API error",
                extra={
                    "status": resp.status_code,
                    "error_code": body.get("error_code"),
                    "reason": body.get("description"),
                    "chat_id": payload.get("chat_id"),
                },
            )
            raise PlatformError(f"Telegram {method} failed: {body.get('description')}")
        return body.get("result")
