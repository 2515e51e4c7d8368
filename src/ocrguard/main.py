"""
OCRGuard Discord Bot
====================

A Discord bot that reads the text inside posted images, and when it finds
scam phrases deletes the author's recent burst of messages, times the author
out, and reports the action to a log channel.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. OCRGUARD_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("OCRGUARD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from ocrguard.bot.cogs import message_listener
from ocrguard.configuration.app_configuration import AppConfig, app_config
from ocrguard.moderation.message_batch_manager import MessageBatchManager
from ocrguard.moderation.scam_action_executor import ScamActionExecutor
from ocrguard.ocr.message_analyzer import MessageAnalyzer
from ocrguard.ocr.ocr_lifecycle import OCREngineLifecycle, create_message_analyzer
from ocrguard.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Construct the Discord intents OCRGuard needs: guild messages with content, and members."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.messages = True
    intents.members = True
    return intents


def create_bot() -> discord.Bot:
    """Instantiate the Discord bot with the intents OCRGuard relies on."""
    return discord.Bot(intents=build_intents())


def attach_moderation(bot: discord.Bot, analyzer: MessageAnalyzer, config: AppConfig) -> MessageBatchManager:
    """Wire analyzer, action executor and batch manager together and load the listener cog."""
    executor = ScamActionExecutor.from_config(bot, config)
    batch_manager = MessageBatchManager(
        analyzer.analyze_message,
        executor.execute,
        delay_ms=config.batch_delay_ms,
    )
    message_listener.setup(bot, batch_manager, config)
    logger.info("All cogs loaded successfully.")
    return batch_manager


async def initialize_ocr(config: AppConfig) -> OCREngineLifecycle | None:
    """Build and start the OCR engines, returning None when the fast engine is unusable."""
    ocr_lifecycle = OCREngineLifecycle(create_message_analyzer(config))
    if not await ocr_lifecycle.initialize():
        logger.critical("OCR engines unavailable (%s). Bot cannot start.", ocr_lifecycle.init_error)
        await ocr_lifecycle.shutdown()
        return None
    return ocr_lifecycle


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and log around the connection lifetime."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(
    bot: discord.Bot | None,
    batch_manager: MessageBatchManager | None,
    ocr_lifecycle: OCREngineLifecycle | None,
) -> None:
    """Gracefully stop batching, the OCR engines, and the Discord client."""
    if batch_manager is not None:
        try:
            await batch_manager.shutdown()
        except Exception as exc:
            logger.exception("Error during batch manager shutdown: %s", exc)

    if ocr_lifecycle is not None:
        await ocr_lifecycle.shutdown()

    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing Discord client: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap OCR engines, batching, and the bot, returning an exit code."""
    token = load_environment()

    ocr_lifecycle = await initialize_ocr(app_config)
    if ocr_lifecycle is None:
        return 1

    bot: discord.Bot | None = None
    batch_manager: MessageBatchManager | None = None
    exit_code = 0
    try:
        bot = create_bot()
        batch_manager = attach_moderation(bot, ocr_lifecycle.analyzer, app_config)
        await start_bot(bot, token)
    except discord.LoginFailure as exc:
        logger.critical("Failed to authenticate with Discord: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, batch_manager, ocr_lifecycle)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting OCRGuard…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
