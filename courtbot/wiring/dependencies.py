from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from courtbot.core.config import settings
from courtbot.application.ports.ledger import LedgerPort
from courtbot.application.ports.message_platform import MessagePlatformPort
from courtbot.application.ports.session_store import SessionStorePort
from courtbot.application.use_cases.availability import AvailabilityOracle
from courtbot.application.use_cases.booking import BookingUseCase
from courtbot.application.use_cases.handle_interaction import HandleInteractionUseCase
from courtbot.application.use_cases.page_window import PageWindow
from courtbot.application.use_cases.reply_composer import ReplyComposer
from courtbot.application.use_cases.selection import SelectionUseCase
from courtbot.infrastructure.ledger.memory_ledger import MemoryLedger
from courtbot.infrastructure.store.memory_store import MemorySessionStore
from courtbot.infrastructure.telegram.mock_platform import MockTelegramPlatform
from courtbot.infrastructure.telegram.telegram_client import TelegramClient
from courtbot.infrastructure.telegram.telegram_platform import TelegramPlatform


logger = logging.getLogger(__name__)


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_session_store() -> SessionStorePort:
    return MemorySessionStore()


@lru_cache
def get_ledger() -> LedgerPort:
    if _is_dev() or not settings.FIRESTORE_PROJECT_ID:
        logger.info("Using MemoryLedger (ENV=%s, project set=%s)", settings.ENV, bool(settings.FIRESTORE_PROJECT_ID))
        return MemoryLedger()

    # Imported lazily so dev runs don't need Google credentials
    from courtbot.infrastructure.ledger.firestore_ledger import FirestoreLedger

    logger.info("Using FirestoreLedger project=%s", settings.FIRESTORE_PROJECT_ID)
    return FirestoreLedger()


def get_telegram_client() -> TelegramClient:
    if not settings.TELEGRAM_BOT_TOKEN:
        raise ValueError("TELEGRAM_BOT_TOKEN is required to talk to Telegram.")
    return TelegramClient(token=settings.TELEGRAM_BOT_TOKEN, base_url=settings.TELEGRAM_API_BASE_URL)


@lru_cache
def get_message_platform() -> MessagePlatformPort:
    logger.info("TELEGRAM_BOT_TOKEN present=%s ENV=%s", bool(settings.TELEGRAM_BOT_TOKEN), settings.ENV)

    if not settings.TELEGRAM_BOT_TOKEN:
        if _is_dev():
            logger.info("Using MockTelegramPlatform (token missing, ENV=dev/local)")
            return MockTelegramPlatform()
        raise ValueError("TELEGRAM_BOT_TOKEN is required to send Telegram replies.")

    logger.info("Using real TelegramPlatform")
    return TelegramPlatform(client=get_telegram_client())


def get_selection_use_case() -> SelectionUseCase:
    return SelectionUseCase(store=get_session_store())


def get_booking_use_case() -> BookingUseCase:
    return BookingUseCase(ledger=get_ledger(), selection=get_selection_use_case())


def get_page_window() -> PageWindow:
    return PageWindow(
        oracle=AvailabilityOracle(ledger=get_ledger()),
        page_size=settings.SLOTS_PER_PAGE,
        row_size=settings.SLOTS_PER_ROW,
    )


def get_handle_interaction_use_case() -> HandleInteractionUseCase:
    return HandleInteractionUseCase(
        store=get_session_store(),
        platform=get_message_platform(),
        selection=get_selection_use_case(),
        booking=get_booking_use_case(),
        page_window=get_page_window(),
        composer=ReplyComposer(business_name=settings.BUSINESS_NAME),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
    )
