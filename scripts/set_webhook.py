#!/usr/bin/env python3
"""
Register the bot's webhook URL with Telegram.

Usage:
  PUBLIC_BASE_URL=https://bot.example.com python3 scripts/set_webhook.py
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from courtbot.application.exceptions import PlatformError
from courtbot.core.config import settings
from courtbot.wiring.dependencies import get_telegram_client


def main() -> int:
    if not settings.PUBLIC_BASE_URL:
        print("PUBLIC_BASE_URL is not set")
        return 1

    url = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/webhooks/telegram"
    try:
        get_telegram_client().set_webhook(url, secret_token=settings.TELEGRAM_WEBHOOK_SECRET)
    except (ValueError, PlatformError) as e:
        print(f"❌ Failed to set webhook: {e}")
        return 1

    print(f"✅ Webhook set to {url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
