from __future__ import annotations

from typing import Dict

DEFAULT_LANG = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "duration": "{hours}h {minutes}m",
        "na": "N/A",
        "error.generic": "An error occurred.",
        "error.command": "An error occurred while executing the command.",
        "error.denied": "🚫 You do not have permission!",
        "error.no_target": "❌ Please specify a target user (reply to their message or pass their id).",
        "error.bad_status": "❌ Status can only be ☀️ (Awake) or 🌙 (Asleep).",
        "error.clear_failed": "❌ An error occurred while resetting user records.",
        "error.setstatus_failed": "❌ An error occurred while updating status.",
        "error.stats_failed": "An error occurred while fetching statistics.",
        "panel.title": "🐈 Super Automaton Tracker 🐈",
        "panel.desc": "😈 Press buttons to change status ❗",
        "btn.wake": "☀️ Awake",
        "btn.sleep": "🌙 Asleep",
        "btn.reset": "🌀 Reset Status",
        "btn.stats": "🐻 Show Stats",
        "action.woke": "{user} woke up!",
        "action.slept": "{user} went to sleep!",
        "action.reset_done": "{user}'s status has been reset.",
        "action.reset_confirm": (
            "{user}, are you sure you want to reset your status?\n"
            "Press \"🌀 Reset Status\" again to confirm (within {seconds} seconds)."
        ),
        "action.status_updated": "Status updated.",
        "action.ranking_updated": "Weekly statistics updated.",
        "admin.cleared": "🗑️ {user}'s sleep tracker records have been reset.\n(Executed by: {executor})",
        "admin.status_set": "✅ {user}'s status has been changed to <b>\"{status}\"</b>.",
        "state.awake": "Awake",
        "state.asleep": "Asleep",
        "state.unknown": "N/A",
        "status.awake_label": "Awake ☀️",
        "status.asleep_label": "Asleep 🌙",
        "board.title": "Current Status",
        "board.empty": "No one has recorded yet.",
        "board.last_wake": "Last Awake: {value}",
        "board.last_sleep": "Last Asleep: {value}",
        "board.sleep_duration": "Sleep Duration: {value}",
        "board.awake_duration": "Awake Duration: {value}",
        "board.since_wake": "Time Since Awake: {value}",
        "board.since_sleep": "Time Since Asleep: {value}",
        "board.average": "Average Sleep: {value}",
        "board.predicted": "Expected Wake-up: {value}",
        "board.no_prev_sleep": "No previous sleep record",
        "board.no_prev_wake": "No previous wake record",
        "ranking.title": "🛌 Weekly Sleep Ranking",
        "ranking.empty": "No sleep data for this week.",
        "ranking.row": "<b>#{rank}</b>: {user} - {total}",
        "ranking.footer": "Based on total sleep duration over the past 7 days.",
        "stats.title": "📊 Sleep Statistics",
        "stats.avg_sleep": "😴 Your Average Sleep Duration ({name}): {value}",
        "stats.avg_awake": "🕰 Your Average Awake Duration ({name}): {value}",
        "stats.server_avg": "🛌 Server Average Sleep Duration: {value}",
        "stats.footer": "Calculated from past records.",
        "reminder.awake_too_long": "You have been awake for more than {hours} hours! You should probably go to sleep! 😴",
        "cmd.start": "Starts the sleep tracker",
        "cmd.status": "Displays current status",
        "cmd.stats": "Displays sleep statistics",
        "cmd.setstatus": "Changes a member's sleep status (admin only)",
        "cmd.clear": "Resets a member's sleep records (admin only)",
    },
    "ja": {
        "duration": "{hours}時間 {minutes}分",
        "na": "未記録",
        "error.generic": "エラーが発生しました。",
        "error.command": "コマンドの実行中にエラーが発生しました。",
        "error.denied": "🚫 権限がありません！",
        "error.no_target": "❌ 対象のユーザーを指定してください。",
        "error.bad_status": "❌ ステータスは ☀️（起きている） または 🌙（寝ている） のみ設定できます。",
        "error.clear_failed": "❌ ユーザーの記録をリセット中にエラーが発生しました。",
        "error.setstatus_failed": "❌ ステータスの更新中にエラーが発生しました。",
        "error.stats_failed": "統計の取得中にエラーが発生しました。",
        "panel.title": "🐈スーパーオートマトントラッカー🐈",
        "panel.desc": "😈ボタンを押してステータスを変更❗",
        "btn.wake": "☀️ 起きた",
        "btn.sleep": "🌙 寝た",
        "btn.reset": "🌀 状態リセット",
        "btn.stats": "🐻 ステータス表示",
        "action.woke": "{user} さんは起きました！",
        "action.slept": "{user} さんは寝ました！",
        "action.reset_done": "{user} さんの状態はリセットされました。",
        "action.reset_confirm": (
            "{user} 本当に状態をリセットしますか？\n"
            "もう一度「🌀 状態リセット」を押すと確定します（{seconds}秒以内）。"
        ),
        "action.status_updated": "ステータスを更新しました。",
        "action.ranking_updated": "週間統計を更新しました。",
        "admin.cleared": "🗑️ {user} の睡眠トラッカー記録をリセットしました。\n（実行者: {executor}）",
        "admin.status_set": "✅ {user} の状態を <b>「{status}」</b> に変更しました。",
        "state.awake": "起きている",
        "state.asleep": "寝ている",
        "state.unknown": "未記録",
        "status.awake_label": "起きている ☀️",
        "status.asleep_label": "寝ている 🌙",
        "board.title": "現在のステータス",
        "board.empty": "まだ誰も記録されていません。",
        "board.last_wake": "最後に起きた時間: {value}",
        "board.last_sleep": "最後に寝た時間: {value}",
        "board.sleep_duration": "寝ていた時間: {value}",
        "board.awake_duration": "起きていた時間: {value}",
        "board.since_wake": "起きてからの経過時間: {value}",
        "board.since_sleep": "寝てからの経過時間: {value}",
        "board.average": "平均睡眠時間: {value}",
        "board.predicted": "起床予定: {value}",
        "board.no_prev_sleep": "前回の睡眠記録なし",
        "board.no_prev_wake": "前回の起床記録なし",
        "ranking.title": "🛌 週間睡眠ランキング",
        "ranking.empty": "今週の睡眠データがありません。",
        "ranking.row": "<b>{rank}位</b>: {user} - {total}",
        "ranking.footer": "過去7日間の総睡眠時間に基づいています。",
        "stats.title": "📊 睡眠統計",
        "stats.avg_sleep": "😴 あなたの平均睡眠時間（{name}）: {value}",
        "stats.avg_awake": "🕰 あなたの平均起きていた時間（{name}）: {value}",
        "stats.server_avg": "🛌 サーバー全体の平均睡眠時間: {value}",
        "stats.footer": "過去の記録を元に計算しています。",
        "reminder.awake_too_long": "{hours}時間以上起きていますね！そろそろ寝た方がいいですよ！😴",
        "cmd.start": "睡眠トラッカーを開始します",
        "cmd.status": "現在のステータスを表示します",
        "cmd.stats": "睡眠統計を表示します",
        "cmd.setstatus": "メンバーの睡眠ステータスを変更します（管理者専用）",
        "cmd.clear": "メンバーの睡眠記録をリセットします（管理者専用）",
    },
}


def t(lang: str, key: str, **kwargs) -> str:
    """Translate ``key`` for ``lang``, falling back to English, then to the key itself."""
    catalog = MESSAGES.get(lang) or MESSAGES[DEFAULT_LANG]
    template = catalog.get(key) or MESSAGES[DEFAULT_LANG].get(key) or key
    return template.format(**kwargs) if kwargs else template
