#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no Telegram).

Usage:
  ENV=dev python3 scripts/chat_local.py

What it does:
- Keeps a stable chat/user id for the session
- Plain text is delivered as a chat message (shows the main menu)
- "!<token>" is delivered as a button press, e.g. "!date_2024-06-01" or "!toggle-time_2024-06-01_09:00"
- Prints every message/edit the bot would send, with its keyboard tokens
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from courtbot.application.utils.callback_data import decode_intent
from courtbot.domain.entities.intent import Start
from courtbot.domain.entities.interaction import Interaction
from courtbot.domain.entities.reply import Reply
from courtbot.infrastructure.telegram.mock_platform import MockTelegramPlatform
from courtbot.wiring.dependencies import get_handle_interaction_use_case, get_message_platform


def _print_header(chat_id: int) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"chat_id/user_id: {chat_id}")
    print("Type a message, or !<callback-token> to press a button.")
    print("Commands: /user <id> (switch user), /quit, /help")
    print("-" * 60)


def _print_reply(prefix: str, reply: Reply) -> None:
    print(f"{prefix} {reply.text}")
    for row in reply.keyboard:
        print("   " + " | ".join(f"[{b.text}] !{b.callback_data}" for b in row))


def main() -> None:
    user_id = int(os.getenv("CHAT_USER_ID", "1001"))
    platform = get_message_platform()
    if not isinstance(platform, MockTelegramPlatform):
        print("Refusing to run against the real Telegram platform; unset TELEGRAM_BOT_TOKEN and use ENV=dev.")
        return
    use_case = get_handle_interaction_use_case()
    _print_header(user_id)

    update_id = 0
    last_message_id: int | None = None
    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue
        if user_text in ("/quit", "/exit"):
            print("Bye!")
            return
        if user_text == "/help":
            print("Commands:")
            print("  /user <id> -> act as another user (try booking the same slots)")
            print("  /quit -> exit")
            continue
        if user_text.startswith("/user "):
            user_id = int(user_text.split()[1])
            print(f"Now acting as user {user_id}")
            continue

        update_id += 1
        is_press = user_text.startswith("!")
        interaction = Interaction(
            update_id=update_id,
            chat_id=user_id,
            user_id=user_id,
            first_name=f"user{user_id}",
            intent=decode_intent(user_text[1:]) if is_press else Start(),
            callback_id=f"cb_{update_id}" if is_press else None,
            message_id=last_message_id if is_press else None,
        )

        sent_before, edited_before, answers_before = len(platform.sent), len(platform.edited), len(platform.answers)
        use_case.handle(interaction)

        for _, reply in platform.sent[sent_before:]:
            _print_reply("(bot)", reply)
            last_message_id = len(platform.sent)
        for _, message_id, reply in platform.edited[edited_before:]:
            _print_reply(f"(edit #{message_id})", reply)
        for _, text, show_alert in platform.answers[answers_before:]:
            if text:
                print(f"({'alert' if show_alert else 'toast'}) {text}")


if __name__ == "__main__":
    main()
