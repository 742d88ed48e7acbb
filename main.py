"""
Точка входа бота
"""

import asyncio
import logging
import sys

from bot.core.bot import VoiceBot
from config import ConfigError, load_config
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def run(bot: VoiceBot) -> bool:
    try:
        return await bot.start()
    finally:
        await bot.stop()


def main() -> int:
    """Главная функция запуска бота"""
    try:
        config = load_config()
    except ConfigError as e:
        setup_logging()
        logger.critical(f"❌ {e}")
        return 1

    setup_logging(config.LOG_LEVEL, config.STRUCTURED_LOGGING, config.DEBUG_MODE)

    logger.info("=" * 60)
    logger.info("Запуск Telegram Voice Summarizer")
    logger.info("=" * 60)
    logger.info(str(config))

    bot = VoiceBot(config)
    try:
        started = asyncio.run(run(bot))
    except KeyboardInterrupt:
        logger.info("Остановлено пользователем")
        return 0

    if not started:
        logger.critical("❌ Бот не запущен: проверьте TELEGRAM_BOT_TOKEN")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
