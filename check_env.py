#!/usr/bin/env python3
"""
Environment check for the sleep tracker bot.
Run it to see which settings the bot will pick up.
"""

import os
from dotenv import load_dotenv

load_dotenv()

print("🔍 Environment variables:")
print("=" * 50)

bot_token = os.getenv("BOT_TOKEN")
if bot_token:
    print(f"✅ BOT_TOKEN: {bot_token[:10]}... (found)")
else:
    print("❌ BOT_TOKEN: NOT FOUND!")

db_url = os.getenv("DB_URL")
print(f"📊 DB_URL: {db_url if db_url else 'not set (sqlite:///sleep_tracker.db)'}")
print(f"🕘 TRACKER_TZ: {os.getenv('TRACKER_TZ', 'Asia/Tokyo')}")
print(f"📢 TRACKER_CHAT_TITLE: {os.getenv('TRACKER_CHAT_TITLE', 'Super Automaton Tracker')}")
print(f"🛡 TRACKER_ROLE_TITLE: {os.getenv('TRACKER_ROLE_TITLE') or 'not set'}")
print(f"👤 TRACKER_ALLOWED_USERS: {os.getenv('TRACKER_ALLOWED_USERS') or 'not set'}")
print(f"🌐 TRACKER_LANG: {os.getenv('TRACKER_LANG', 'en')}")
print(f"⏰ REMINDER_THRESHOLD_MINUTES: {os.getenv('REMINDER_THRESHOLD_MINUTES', '720')}")

if not bot_token:
    print("\n⚠️  The bot cannot start without BOT_TOKEN.")
    print("   Get a token from @BotFather in Telegram")
