import re

import discord

from .config import SYMBOLS

_TAGS = (
    (re.compile(r'<b>(.+?)</b>', re.IGNORECASE | re.DOTALL), r'**\1**'),
    (re.compile(r'<i>(.+?)</i>', re.IGNORECASE | re.DOTALL), r'*\1*'),
    (re.compile(r'<em>(.+?)</em>', re.IGNORECASE | re.DOTALL), r'***\1***'),
)


def format_symbols(text: str) -> str:
    if not text: return text
    for token, emoji in SYMBOLS.items():
        text = re.sub(re.escape(token), emoji, text, flags=re.IGNORECASE)
    return text


def format_text(text: str, card_name: str = None) -> str:
    """Card text with markup tags rendered as Markdown and icons as emoji.

    ``[name]`` placeholders are replaced with the card's own name.
    """
    if not text: return text
    if card_name: text = text.replace('[name]', card_name)
    for pattern, replacement in _TAGS:
        text = pattern.sub(replacement, text)
    return format_symbols(text)


def spoiler_if_incomplete(text: str, incomplete: bool) -> str:
    return f"||{text}||" if incomplete and text else text


def quote_text(text: str) -> str:
    return '\n'.join(f"> {line}" for line in text.split('\n'))


def italicize_text(text: str) -> str:
    return '\n'.join(f"*{line}*" if line.strip() else line for line in text.split('\n'))


def escape(text: str) -> str:
    return discord.utils.escape_markdown(text)
