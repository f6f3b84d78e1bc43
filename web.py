import asyncio
import logging
import threading

from flask import Flask, jsonify

from main import main as run_polling
from sleepbot.config import TOKEN

# Flask app for hosts that expect an HTTP port
app = Flask(__name__)

bot_thread = None
bot_running = False


def run_bot():
    """Run the polling bot in its own event loop."""
    global bot_running

    if not TOKEN:
        logging.error("BOT_TOKEN is not set!")
        return

    logging.info("Starting bot with token %s...", TOKEN[:10])
    bot_running = True
    try:
        asyncio.run(run_polling(handle_signals=False))
    except Exception as e:
        logging.error("Bot stopped with error: %s", e)
    finally:
        bot_running = False


def start_bot_thread() -> threading.Thread:
    global bot_thread
    if bot_thread is None or not bot_thread.is_alive():
        bot_thread = threading.Thread(target=run_bot, daemon=False)
        bot_thread.start()
    return bot_thread


@app.route('/health')
def health():
    """Bot health check"""
    alive = bool(bot_thread and bot_thread.is_alive())
    return jsonify({
        'status': 'running' if bot_running and alive else 'error',
        'bot_running': bot_running,
        'thread_alive': alive,
        'token': f"{TOKEN[:10]}..." if TOKEN else 'not_set',
    })


@app.route('/start_bot', methods=['POST'])
def start_bot():
    """Start the bot if it is not running"""
    if bot_thread and bot_thread.is_alive() and bot_running:
        return jsonify({'status': 'already_running'})
    if not TOKEN:
        return jsonify({'status': 'error', 'message': 'BOT_TOKEN is not set'})
    start_bot_thread()
    return jsonify({'status': 'started'})


if __name__ == '__main__':
    if TOKEN:
        logging.info("Starting bot automatically...")
        start_bot_thread()
    else:
        logging.warning("BOT_TOKEN is not set, bot will not start")

    app.run(host='0.0.0.0', port=5000, debug=False)
