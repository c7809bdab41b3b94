import os

# Settings are read at import time; keep tests on the in-memory ledger and mock platform
# regardless of the developer's .env.
os.environ["ENV"] = "dev"
os.environ["TELEGRAM_BOT_TOKEN"] = ""
os.environ["TELEGRAM_WEBHOOK_SECRET"] = ""
os.environ["FIRESTORE_PROJECT_ID"] = ""
os.environ["OPENING_HOUR"] = "7"
os.environ["CLOSING_HOUR"] = "22"
