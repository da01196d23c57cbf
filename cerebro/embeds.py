import discord

from .cards import build_card_image_url, evaluate_rules, get_printing, is_villainous
from .config import AFFIRMATIVE_EMOJI, COLORS, NEGATIVE_EMOJI, SYMBOLS
from .formatting import escape, format_symbols, format_text, italicize_text, quote_text, spoiler_if_incomplete
from .models import Card, Printing


def create_embed(content: str, color: int = COLORS['Default'], title: str = None) -> discord.Embed:
    embed = discord.Embed(description=content, color=color)
    if title is not None: embed.title = title
    return embed


def card_color(card: Card) -> int:
    return COLORS.get('Villain' if is_villainous(card) else card.classification, COLORS['Default'])


def card_title(card: Card) -> str:
    title = (SYMBOLS['{u}'] if card.unique else '') + card.name + (f" — {card.subname}" if card.subname else '')
    return spoiler_if_incomplete(title, card.incomplete)


def summary(printing: Printing, reference) -> str:
    parts = []
    pack = reference.find_pack(printing.pack_id)
    if pack: parts.append(f"{pack.name} #{printing.pack_number}" if printing.pack_number else pack.name)
    card_set = reference.find_set(printing.set_id)
    if card_set: parts.append(f"{card_set.name} #{printing.set_number}" if printing.set_number else card_set.name)
    return ' | '.join(parts) or printing.artificial_id


def build_header(card: Card) -> str:
    header = ''
    if card.classification != 'Encounter' and card.type not in ('Hero', 'Alter-Ego'): header += f"**{card.classification}** "
    header += f"**{card.type}**"
    if card.stage: header += f" — *Stage {card.stage}*"
    return header


def build_stats(card: Card) -> str:
    components = []

    economy = []
    if card.cost: economy.append(f"Cost: {card.cost}")
    if card.resource: economy.append(f"Resource: {card.resource}")
    if card.boost: economy.append(f"Boost: {card.boost}")
    if economy: components.append('\n'.join(economy))

    abilities = []
    if card.recover: abilities.append(f"REC: {card.recover}")
    if card.scheme: abilities.append(f"SCH{'/THW' if card.slash else ''}: {card.scheme}")
    if card.thwart: abilities.append(f"{'SCH/' if card.slash else ''}THW: {card.thwart}")
    if card.attack: abilities.append(f"ATK: {card.attack}")
    if card.defense: abilities.append(f"DEF: {card.defense}")
    if abilities: components.append('\n'.join(abilities))

    features = []
    if card.hand: features.append(f"Hand Size: {card.hand}")
    if card.health: features.append(f"Health: {card.health}")
    if card.starting_threat: features.append(f"Starting Threat: {card.starting_threat}")
    if card.acceleration: features.append(f"Acceleration: {card.acceleration}")
    if card.target_threat: features.append(f"Target Threat: {card.target_threat}")
    if features: components.append('\n'.join(features))

    return '\n\n'.join(components)


def build_credits(card: Card, reference) -> str:
    printing = get_printing(card, card.id)
    card_set = reference.find_set(printing.set_id) if printing else None
    credits = [f"**Author**: <@{card.author_id}>"]
    if card_set and card_set.council_number: credits.append(f"{AFFIRMATIVE_EMOJI} Released in Council Set #{card_set.council_number}!")
    else: credits.append(f"{NEGATIVE_EMOJI} Not yet released...")
    return '\n'.join(credits)


def build_footer(card: Card, reference) -> str:
    footer = []
    printing = get_printing(card, card.id)
    if printing: footer.append(summary(printing, reference))
    reprints = [p for p in card.printings if p.artificial_id != card.id]
    if len(reprints) <= 3:
        footer.extend(summary(p, reference) for p in reprints)
    else:
        footer.extend(summary(p, reference) for p in reprints[:2])
        footer.append(f"...and {len(reprints) - 2} more reprints.")
    return '\n'.join(footer)


def _decorate(embed: discord.Embed, card: Card, reference, artificial_id: str, image_url: str = None):
    url = build_card_image_url(card, artificial_id, image_url)
    embed.title = card_title(card)
    embed.color = card_color(card)
    if url: embed.url = url
    footer = build_footer(card, reference)
    if footer: embed.set_footer(text=footer)
    printing = get_printing(card, artificial_id or card.id)
    card_set = reference.find_set(printing.set_id) if printing else None
    if url and not card.incomplete and not (card_set and card_set.incomplete): embed.set_thumbnail(url=url)
    return embed


def build_embed(card: Card, reference, artificial_id: str = None, image_url: str = None) -> discord.Embed:
    description = []

    subheader = [build_header(card)]
    if card.traits: subheader.append(italicize_text(f"**{', '.join(card.traits)}**"))
    description.append(spoiler_if_incomplete('\n'.join(subheader), card.incomplete))

    stats = build_stats(card)
    if stats: description.append(spoiler_if_incomplete(format_symbols(stats), card.incomplete))

    body = []
    if card.rules: body.append(quote_text(spoiler_if_incomplete(format_text(card.rules, card.name), card.incomplete)))
    if card.special: body.append(quote_text(spoiler_if_incomplete(format_text(card.special, card.name), card.incomplete)))
    if card.flavor: body.append(spoiler_if_incomplete(italicize_text(escape(card.flavor)), card.incomplete))
    if not card.official: body.append(build_credits(card, reference))
    if body: description.append('\n\n'.join(body))

    embed = discord.Embed(description='\n\n'.join(description))
    return _decorate(embed, card, reference, artificial_id, image_url)


def build_rules_embed(card: Card, reference, artificial_id: str = None, image_url: str = None) -> discord.Embed:
    embed = discord.Embed()
    for entry in evaluate_rules(card, reference.rules):
        embed.add_field(name=format_symbols(entry.title), value=format_symbols(entry.description), inline=False)
    return _decorate(embed, card, reference, artificial_id, image_url)
