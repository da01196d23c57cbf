import logging
from io import BytesIO
from typing import Optional, Union

import discord
from discord import app_commands

from . import config
from .cards import build_collection_from_batch
from .compositor import compose_batch
from .config import MAX_IMAGES_APOLOGY, NO_RESULTS
from .messages import remove_components, report_error, send_content_as_embed
from .navigation import initial_state
from .querylog import log_card_result, log_command
from .resolver import match_collections, name_matches
from .store import apply_filters
from .text import has_alphanumeric
from .views import CardPresenter, CardSelectView, CollectionSelectView, SelectorOutcome, selection_prompt

logger = logging.getLogger(__name__)


# --- 1. CHECKS ---
async def authorized(interaction: discord.Interaction, reference) -> bool:
    permissions = interaction.app_permissions
    if interaction.guild_id and not (permissions.embed_links and permissions.attach_files):
        await send_content_as_embed(interaction, "I need the `Embed Links` and `Attach Files` permissions in this channel to show cards.", ephemeral=True)
        return False
    if not reference.configuration.has_beta_access(interaction.user.id):
        await send_content_as_embed(interaction, "This bot is currently in a closed beta for donors only.", ephemeral=True)
        return False
    return True


async def unofficial_allowed(interaction: discord.Interaction, reference) -> bool:
    if reference.configuration.allows_unofficial(interaction.guild_id, interaction.channel_id): return True
    restrictions = reference.configuration.restricted_channels(interaction.guild_id)
    channels = ''.join(f"\n<#{channel_id}>" for channel_id in restrictions)
    await send_content_as_embed(interaction, f"Unofficial content queries are restricted to the following channel{'s' if len(restrictions) > 1 else ''}:{channels}", ephemeral=True)
    return False


def _presenter(interaction: discord.Interaction, reference, collection) -> CardPresenter:
    return CardPresenter(reference, collection, interaction.user.id, config.CARD_IMAGE_PATH, config.CARD_IMAGE_URL)


# --- 2. PRESENTATION ---
async def queue_card_result(interaction: discord.Interaction, reference, card, message: discord.Message = None):
    log_card_result(interaction, card, reference.data_dir)
    collection = reference.store.find_faces_and_elements(card)
    await _presenter(interaction, reference, collection).show(interaction, initial_state(collection, card), message)


async def queue_batch_result(interaction: discord.Interaction, reference, cards, message: discord.Message = None):
    collection = build_collection_from_batch(reference.store.expand_faces(cards))
    await _presenter(interaction, reference, collection).show(interaction, initial_state(collection), message)


async def queue_compiled_result(interaction: discord.Interaction, reference, cards, message: discord.Message):
    batch = await compose_batch(cards, config.CARD_IMAGE_PATH)
    files = [discord.File(BytesIO(row.data), filename=row.filename) for row in batch.rows]
    await message.edit(content=MAX_IMAGES_APOLOGY if batch.overloaded else None, embeds=[], attachments=files, view=None)


async def queue_collection_result(interaction: discord.Interaction, reference, entity, message: discord.Message = None):
    collection = reference.store.retrieve_by_collection(entity)
    if not collection.cards:
        content = f"No cards were found in **{entity.name}**..."
        if message is not None: await remove_components(message, content)
        else: await send_content_as_embed(interaction, content)
        return
    await _presenter(interaction, reference, collection).show(interaction, initial_state(collection), message)


async def select_card(interaction: discord.Interaction, reference, cards):
    view = CardSelectView(interaction.user.id, cards, reference)
    view.message = await send_content_as_embed(interaction, selection_prompt(len(cards)), view)
    outcome = await view.wait_for_outcome()
    if outcome is SelectorOutcome.RESOLVED: await queue_card_result(interaction, reference, view.selection, view.message)
    elif outcome is SelectorOutcome.BATCH: await queue_batch_result(interaction, reference, cards, view.message)
    elif outcome is SelectorOutcome.SHOW_ALL: await queue_compiled_result(interaction, reference, cards, view.message)


async def select_collection(interaction: discord.Interaction, reference, entities, type: str):
    view = CollectionSelectView(interaction.user.id, entities, reference, type)
    view.message = await send_content_as_embed(interaction, selection_prompt(len(entities)), view)
    if await view.wait_for_outcome() is SelectorOutcome.RESOLVED:
        await queue_collection_result(interaction, reference, view.selection, view.message)


# --- 3. COMMAND HANDLERS ---
async def browse_collection(interaction: discord.Interaction, reference, official: bool, type: str, name: str):
    if not await authorized(interaction, reference): return
    try:
        if not official and not await unofficial_allowed(interaction, reference): return
        if not has_alphanumeric(name):
            await send_content_as_embed(interaction, f"`{name}` is not a valid query...", ephemeral=True); return
        log_command(interaction, f"/browse {'official' if official else 'unofficial'} {type}", {'name': name}, reference.data_dir)

        results = match_collections(name, reference.collections(type), official)
        if not results: await send_content_as_embed(interaction, NO_RESULTS)
        elif len(results) == 1: await queue_collection_result(interaction, reference, results[0])
        else: await select_collection(interaction, reference, results, type)
    except Exception as e:
        await report_error(interaction, e)


async def card_search(interaction: discord.Interaction, reference, origin: str, aspect: str = None, author: str = None, cost: str = None,
                      name: str = None, resource: str = None, text: str = None, traits: str = None, type: str = None):
    if not await authorized(interaction, reference): return
    try:
        aspect = aspect.lower() if aspect else None
        name = name.lower() if name else None
        resource = resource.lower() if resource else None
        text = text.lower() if text else None
        trait_list = [t.strip() for t in traits.split(',') if t.strip()] if traits else None
        type = type.lower() if type else None

        if origin != 'official' and not await unofficial_allowed(interaction, reference): return
        if not any((aspect, author, cost, name, resource, text, trait_list, type)):
            await send_content_as_embed(interaction, "You must specify at least one search criteria...", ephemeral=True); return

        log_command(interaction, "/card", {'origin': origin, 'aspect': aspect, 'author': author, 'cost': cost, 'name': name,
                                           'resource': resource, 'text': text, 'traits': traits, 'type': type}, reference.data_dir)

        if name:
            if not has_alphanumeric(name):
                await send_content_as_embed(interaction, f"`{name}` is not a valid query..."); return
            results = reference.store.retrieve_by_name(name, origin)
            results = apply_filters(results, aspect, author, cost, resource, text, trait_list, type)
        else:
            results = reference.store.retrieve_with_filters(origin, aspect, author, cost, resource, text, trait_list, type)

        if not results: await send_content_as_embed(interaction, NO_RESULTS)
        elif len(results) == 1: await queue_card_result(interaction, reference, results[0])
        else: await select_card(interaction, reference, results)
    except Exception as e:
        await report_error(interaction, e)


# --- 4. SLASH COMMANDS ---
ORIGINS = [app_commands.Choice(name=o, value=o) for o in ('official', 'unofficial', 'all')]
ASPECTS = [app_commands.Choice(name=a, value=a) for a in ('aggression', 'basic', 'determination', 'encounter', 'hero', 'justice', 'leadership', 'protection')]
RESOURCES = [app_commands.Choice(name=r, value=r) for r in ('energy', 'mental', 'physical', 'wild', 'none')]
TYPES = [app_commands.Choice(name=t, value=t) for t in ('ally', 'alter-ego', 'attachment', 'environment', 'event', 'hero', 'main scheme', 'minion',
                                                          'obligation', 'resource', 'side scheme', 'support', 'treachery', 'upgrade', 'villain')]


@app_commands.command(name="card", description="Query cards.")
@app_commands.describe(origin="The origin of the card.", aspect="Query cards by their aspect.", author="Query unofficial cards by their author.",
                       cost="Query cards by their cost.", name="Query cards by their title and subtitle.", resource="Query cards by their printed resource.",
                       text="Query cards by the text in their textbox.", traits="Query cards by their traits.", type="Query cards by their type.")
@app_commands.choices(origin=ORIGINS, aspect=ASPECTS, resource=RESOURCES, type=TYPES)
async def card_command(interaction: discord.Interaction, origin: app_commands.Choice[str], aspect: Optional[app_commands.Choice[str]] = None,
                       author: Optional[Union[discord.Member, discord.User, discord.Role]] = None, cost: Optional[str] = None, name: Optional[str] = None,
                       resource: Optional[app_commands.Choice[str]] = None, text: Optional[str] = None, traits: Optional[str] = None,
                       type: Optional[app_commands.Choice[str]] = None):
    await card_search(interaction, interaction.client.reference, origin.value, aspect.value if aspect else None, str(author.id) if author else None,
                      cost, name, resource.value if resource else None, text, traits, type.value if type else None)


browse_group = app_commands.Group(name="browse", description="Browse all of the cards in a collection.")
official_group = app_commands.Group(name="official", description="Browse all of the cards in an official collection.", parent=browse_group)
unofficial_group = app_commands.Group(name="unofficial", description="Browse all of the cards in an unofficial collection.", parent=browse_group)


def collection_autocomplete(official: bool, type: str):
    async def autocomplete(interaction: discord.Interaction, current: str) -> list[app_commands.Choice[str]]:
        entities = [e for e in interaction.client.reference.collections(type) if e.official == official]
        names = sorted({e.name for e in entities if not current or not has_alphanumeric(current) or name_matches(current, e.name)})
        return [app_commands.Choice(name=name, value=name) for name in names][:25]
    return autocomplete


@official_group.command(name="pack", description="Browse all of the cards in an official pack.")
@app_commands.describe(name="The name of the pack being queried.")
@app_commands.autocomplete(name=collection_autocomplete(True, 'pack'))
async def browse_official_pack(interaction: discord.Interaction, name: str):
    await browse_collection(interaction, interaction.client.reference, True, 'pack', name)


@official_group.command(name="set", description="Browse all of the cards in an official set.")
@app_commands.describe(name="The name of the set being queried.")
@app_commands.autocomplete(name=collection_autocomplete(True, 'set'))
async def browse_official_set(interaction: discord.Interaction, name: str):
    await browse_collection(interaction, interaction.client.reference, True, 'set', name)


@unofficial_group.command(name="pack", description="Browse all of the cards in an unofficial pack.")
@app_commands.describe(name="The name of the pack being queried.")
@app_commands.autocomplete(name=collection_autocomplete(False, 'pack'))
async def browse_unofficial_pack(interaction: discord.Interaction, name: str):
    await browse_collection(interaction, interaction.client.reference, False, 'pack', name)


@unofficial_group.command(name="set", description="Browse all of the cards in an unofficial set.")
@app_commands.describe(name="The name of the set being queried.")
@app_commands.autocomplete(name=collection_autocomplete(False, 'set'))
async def browse_unofficial_set(interaction: discord.Interaction, name: str):
    await browse_collection(interaction, interaction.client.reference, False, 'set', name)


# --- 5. ADMIN COMMANDS ---
config_group = app_commands.Group(name="config", description="Admin commands for this server.", default_permissions=discord.Permissions(manage_guild=True), guild_only=True)


@config_group.command(name="unofficial_channel_add", description="Restrict unofficial card queries to a channel.")
@app_commands.describe(channel="The text channel to allow unofficial queries in.")
async def unofficial_channel_add(interaction: discord.Interaction, channel: discord.TextChannel):
    configuration = interaction.client.reference.configuration
    if configuration.add_restriction(interaction.guild_id, channel.id):
        await interaction.response.send_message(f"✅ Unofficial queries are now allowed in {channel.mention}.", ephemeral=True)
    else: await interaction.response.send_message(f"⚠️ {channel.mention} already allows unofficial queries.", ephemeral=True)


@config_group.command(name="unofficial_channel_remove", description="Remove a channel from the unofficial query allow-list.")
@app_commands.describe(channel="The text channel to remove.")
async def unofficial_channel_remove(interaction: discord.Interaction, channel: discord.TextChannel):
    configuration = interaction.client.reference.configuration
    if configuration.remove_restriction(interaction.guild_id, channel.id):
        await interaction.response.send_message(f"✅ {channel.mention} no longer allows unofficial queries.", ephemeral=True)
    else: await interaction.response.send_message(f"⚠️ {channel.mention} was not on the list.", ephemeral=True)


@config_group.command(name="unofficial_channels", description="View the channels unofficial queries are restricted to.")
async def unofficial_channels(interaction: discord.Interaction):
    restrictions = interaction.client.reference.configuration.restricted_channels(interaction.guild_id)
    desc = "**Unofficial queries are allowed in:**\n" + ("\n".join(f"- <#{channel_id}>" for channel_id in restrictions) if restrictions else "Every channel.")
    embed = discord.Embed(title="Unofficial Content Channels", description=desc, color=discord.Color.orange())
    await interaction.response.send_message(embed=embed, ephemeral=True)


@config_group.command(name="reload", description="Reload the card database (bot owner only).")
async def reload_reference(interaction: discord.Interaction):
    if not await interaction.client.is_owner(interaction.user):
        await interaction.response.send_message("❌ Only the bot owner can reload the card database.", ephemeral=True); return
    await interaction.response.defer(ephemeral=True)
    interaction.client.reference.reload()
    await interaction.followup.send(f"✅ Reloaded {len(interaction.client.reference.store)} cards.", ephemeral=True)


def register_commands(tree: app_commands.CommandTree):
    tree.add_command(card_command)
    tree.add_command(browse_group)
    tree.add_command(config_group)
