import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from sleepbot.config import TOKEN, load_settings
from sleepbot.database import Base, engine
from sleepbot.models import sleep_record  # registers the sleep_records table
from sleepbot.handlers import start  # shared router used by every handler module
from sleepbot.scheduler import start_scheduler, stop_scheduler
from sleepbot.services.actions import TrackerContext


def build_dispatcher(tracker: TrackerContext) -> Dispatcher:
    dp = Dispatcher(tracker=tracker)
    dp.include_router(start.router)
    return dp


async def main(handle_signals: bool = True):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("aiogram").setLevel(logging.INFO)

    # Create the table if it does not exist yet
    Base.metadata.create_all(bind=engine)

    settings = load_settings()
    tracker = TrackerContext.create(settings)

    bot = Bot(
        token=TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = build_dispatcher(tracker)

    await start.register_commands(bot, settings.lang)
    start_scheduler(bot, tracker)

    logging.info("Sleep tracker bot started")
    try:
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types(),
            handle_signals=handle_signals,
        )
    finally:
        stop_scheduler()
        await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())
