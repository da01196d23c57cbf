import logging

import discord
from discord import app_commands
from discord.ext import commands

from . import config
from .catalog import ReferenceData
from .commands import register_commands
from .messages import report_error, send_content_as_embed
from .querylog import ensure_log_files_exist

logger = logging.getLogger(__name__)


class CerebroBot(commands.Bot):
    """Slash-command bot serving one ReferenceData snapshot."""

    def __init__(self, reference: ReferenceData):
        super().__init__(command_prefix="$", intents=discord.Intents.default())
        self.reference = reference
        register_commands(self.tree)
        self.tree.error(self.on_app_command_error)

    async def on_ready(self):
        logger.info("Logged in as %s (ID: %s)", self.user, self.user.id)
        try:
            synced = await self.tree.sync()
            logger.info("Synced %d command(s)", len(synced))
        except discord.HTTPException:
            logger.exception("Could not sync the command tree.")

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        if isinstance(error, app_commands.TransformerError):
            await send_content_as_embed(interaction, "I couldn't understand the value you provided for one of the options. Please pick an item from the list.", ephemeral=True)
        elif isinstance(error, app_commands.CheckFailure):
            await send_content_as_embed(interaction, "You don't have permission to use this command.", ephemeral=True)
        else:
            await report_error(interaction, getattr(error, 'original', error))


def create_bot(reference: ReferenceData = None) -> CerebroBot:
    return CerebroBot(reference or ReferenceData.load())


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("PIL").setLevel(logging.ERROR)
    if not config.TOKEN:
        logger.critical("DISCORD_TOKEN is not set, add it to the environment or a .env file.")
        raise SystemExit(1)
    reference = ReferenceData.load()
    ensure_log_files_exist(reference.data_dir)
    create_bot(reference).run(config.TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
