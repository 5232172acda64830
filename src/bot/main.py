"""Belaynish bot entry point."""

import logging
import sys

from src.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
# httpx logs every request at INFO, including URLs with the bot token.
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def main() -> None:
    """Start the bot with long polling."""
    if not settings.telegram_token:
        logger.error("Missing TELEGRAM_TOKEN in env.")
        sys.exit(1)

    from src.bot.telegram.app import create_app

    logger.info("Starting Belaynish on Telegram...")
    app = create_app()
    app.run_polling()


if __name__ == "__main__":
    main()
