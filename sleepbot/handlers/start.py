from aiogram import Bot, Router, html, types
from aiogram.filters import Command
from aiogram.types import BotCommand

from sleepbot.services.actions import TrackerContext
from sleepbot.services.board import build_tracker_kb
from sleepbot.services.i18n import t

router = Router()

COMMANDS = ("start", "status", "stats", "setstatus", "clear")


async def register_commands(bot: Bot, lang: str) -> None:
    await bot.set_my_commands([BotCommand(command=name, description=t(lang, f"cmd.{name}")) for name in COMMANDS])


@router.message(Command("start"))
async def cmd_start(message: types.Message, tracker: TrackerContext):
    lang = tracker.lang
    text = f"{html.bold(t(lang, 'panel.title'))}\n{t(lang, 'panel.desc')}"
    await message.answer(text, reply_markup=build_tracker_kb(lang).as_markup())
