import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from courtbot.api.webhooks import router as webhooks_router
from courtbot.core.config import settings
from courtbot.wiring.dependencies import get_handle_interaction_use_case, get_ledger

# Context fields passed through `extra=` across the bot, in display order
CONTEXT_KEYS = (
    "chat_id",
    "user_id",
    "message_id",
    "intent",
    "booking_id",
    "slot",
    "reply_text",
    "reason",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Build the dispatcher up front so a missing token or project fails at boot, not on the first update
    get_handle_interaction_use_case()
    logging.getLogger(__name__).info(
        "%s ready (ENV=%s, ledger=%s)", settings.BUSINESS_NAME, settings.ENV, type(get_ledger()).__name__
    )
    yield


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.BUSINESS_NAME, version="1.0.0", lifespan=lifespan)

app.include_router(webhooks_router, tags=["webhooks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
