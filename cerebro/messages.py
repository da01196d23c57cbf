import logging

import discord

from .config import ERROR_APOLOGY
from .embeds import create_embed

logger = logging.getLogger(__name__)


async def send_content_as_embed(interaction: discord.Interaction, content: str, view: discord.ui.View = None, ephemeral: bool = False):
    kwargs = {'embed': create_embed(content), 'ephemeral': ephemeral}
    if view is not None: kwargs['view'] = view
    if interaction.response.is_done():
        return await interaction.followup.send(wait=True, **kwargs)
    await interaction.response.send_message(**kwargs)
    return await interaction.original_response()


async def send_message_with_options(interaction: discord.Interaction, embeds=(), files=(), view: discord.ui.View = None, content: str = None):
    kwargs = {'content': content, 'embeds': list(embeds), 'files': list(files)}
    if view is not None: kwargs['view'] = view
    if interaction.response.is_done():
        return await interaction.followup.send(wait=True, **kwargs)
    await interaction.response.send_message(**kwargs)
    return await interaction.original_response()


async def remove_components(message: discord.Message, content: str = None, remove_files: bool = True, notice: str = None):
    """Strip the interactive components from ``message``.

    ``content`` replaces the embed, ``notice`` is set as plain message text.
    """
    kwargs = {'view': None}
    if remove_files: kwargs['attachments'] = []
    if content: kwargs['embed'] = create_embed(content)
    if notice: kwargs['content'] = notice
    try:
        await message.edit(**kwargs)
    except discord.NotFound:
        logger.info("Message %s was deleted before its components could be removed.", message.id)
    except discord.HTTPException:
        logger.exception("Could not remove the components from message %s.", message.id)


async def report_error(interaction: discord.Interaction, error: Exception):
    command = getattr(interaction.command, 'name', 'unknown_command')
    logger.error("Unhandled error during %s for %s", command, interaction.user, exc_info=error)
    try:
        if not interaction.response.is_done():
            await interaction.response.send_message(embed=create_embed(ERROR_APOLOGY), ephemeral=True)
        else:
            await interaction.followup.send(embed=create_embed(ERROR_APOLOGY), ephemeral=True)
    except discord.HTTPException:
        logger.exception("Could not deliver the error notice for %s.", command)
