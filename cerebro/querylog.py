import csv
import logging
import os
from datetime import datetime, timezone

import discord

from . import config

logger = logging.getLogger(__name__)

COMMAND_LOG_HEADER = ["timestamp", "guild_id", "user_id", "username", "command", "options"]
CARD_LOG_HEADER = ["timestamp", "guild_id", "user_id", "username", "card_id", "card_name", "official"]


def ensure_log_files_exist(data_dir: str = None):
    for filename, header in ((config.COMMAND_LOG_CSV_FILE, COMMAND_LOG_HEADER), (config.CARD_LOG_CSV_FILE, CARD_LOG_HEADER)):
        filepath = config.data_path(filename, data_dir)
        if not os.path.exists(filepath):
            with open(filepath, 'w', newline='', encoding='utf-8') as f:
                csv.writer(f).writerow(header)


def _append(filename: str, row: list, data_dir: str = None):
    try:
        with open(config.data_path(filename, data_dir), 'a', newline='', encoding='utf-8') as f:
            csv.writer(f).writerow(row)
    except OSError:
        logger.exception("Could not write to %s.", filename)


def log_command(interaction: discord.Interaction, command: str, options: dict = None, data_dir: str = None):
    used = ' '.join(f"{k}:{v}" for k, v in (options or {}).items() if v)
    _append(config.COMMAND_LOG_CSV_FILE, [datetime.now(timezone.utc).isoformat(), interaction.guild_id, interaction.user.id, interaction.user.name, command, used], data_dir)
    logger.info("%s used %s %s", interaction.user.name, command, used)


def log_card_result(interaction: discord.Interaction, card, data_dir: str = None):
    _append(config.CARD_LOG_CSV_FILE, [datetime.now(timezone.utc).isoformat(), interaction.guild_id, interaction.user.id, interaction.user.name, card.id, card.name, card.official], data_dir)
    logger.info("Presented '%s' (%s) to %s", card.name, card.id, interaction.user.name)
