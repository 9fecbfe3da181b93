import asyncio
import logging

import discord
from tech_news import NewsBoard, NewsFetcher, load_settings
from tech_news.messages import message
from tech_news.render import render_batch

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("discord_bot")

# .env ファイルから環境変数を読み込みます。
settings = load_settings()

# .env ファイルに DISCORD_BOT_TOKEN="YOUR_BOT_TOKEN" 形式でトークンを保存してください。
TOKEN = settings.discord_token

if not TOKEN:
    raise ValueError("DISCORD_BOT_TOKEN 環境変数が設定されていません。.env ファイルを確認してください。")

# Discord クライアントに必要なインテントを設定します。
intents = discord.Intents.default()
intents.message_content = True  # メッセージ内容を読むための権限

client = discord.Client(intents=intents)

# 最新のリフレッシュ結果だけが表示中のニュースを上書きします。
fetcher = NewsFetcher(settings, require_credential=False)
board = NewsBoard(fetcher.fetch, language=settings.language)


@client.event
async def on_ready():
    """ボットのログインに成功すると呼ばれます。"""
    logger.info("%s としてログインしました", client.user)


@client.event
async def on_message(msg):
    """ユーザーがメッセージを送るたびに呼ばれます。"""
    # ボット自身のメッセージは無視します。
    if msg.author == client.user:
        return

    if not msg.content.startswith('!news'):
        return

    language = settings.language
    await msg.channel.send(message("loading", language))

    # requests と SDK はブロッキングなのでスレッドで実行します。
    published = await asyncio.to_thread(board.refresh)
    if not published:
        # より新しい !news がすでに走っています。
        return

    if board.error:
        await msg.channel.send(f"⚠️ {board.error}\n`!news` → {message('retry', language)}")
        return

    for chunk in render_batch(board.items, updated_at=board.updated_at, language=language):
        await msg.channel.send(chunk)


if __name__ == "__main__":
    # ボットを実行します。
    client.run(TOKEN)
