import os
import re
from typing import Optional

from .config import ID_LENGTH
from .models import Card, Collection, Element, Printing, Rule


def get_base_id(card: Card) -> str:
    threshold = ID_LENGTH if card.official else ID_LENGTH + len(card.author_id or '') + 1
    return card.id[:threshold]


def has_faces(card: Card) -> bool:
    return len(card.id) != len(get_base_id(card))


def share_faces(this: Card, that: Card) -> bool:
    return this.id != that.id and get_base_id(this) == get_base_id(that)


def share_groups(this: Card, that: Card) -> bool:
    return bool(this.group_id) and bool(that.group_id) and this.group_id == that.group_id


def find_unique_arts(card: Card) -> list:
    return [p.artificial_id for p in card.printings if p.unique_art]


def get_printing(card: Card, artificial_id: str) -> Optional[Printing]:
    return next((p for p in card.printings if p.artificial_id == artificial_id), None)


def image_name(card: Card, artificial_id: str = None) -> str:
    return f"{'official' if card.official else 'unofficial'}/{artificial_id or card.id}.jpg"


def build_card_image_path(card: Card, artificial_id: str = None, base_path: str = '') -> str:
    return os.path.join(base_path, *image_name(card, artificial_id).split('/'))


def build_card_image_url(card: Card, artificial_id: str = None, base_url: str = None) -> Optional[str]:
    if not base_url: return None
    return f"{base_url.rstrip('/')}/{image_name(card, artificial_id)}"


def is_villainous(card: Card) -> bool:
    return card.type in ('Villain', 'Main Scheme')


def evaluate_rules(card: Card, rules) -> list:
    """Keyword and icon reference entries whose pattern appears in the card's text."""
    if not card.rules and not card.special: return []
    entries = []
    for rule in rules:
        pattern = re.compile(rule.regex, re.IGNORECASE)
        for text in (card.rules, card.special):
            match = pattern.search(text or '')
            if not match: continue
            groups = match.groupdict()
            description = rule.description
            for replacement in ('quantity', 'start', 'type'):
                description = description.replace(f'{{{replacement}}}', groups.get(replacement) or '')
            entry = Rule(rule.title, description, rule.regex)
            if not any(e.title == entry.title and e.description == entry.description for e in entries):
                entries.append(entry)
    return entries


def group_faces(cards) -> list:
    """Elements for an ordered card list, one per base id, carrying the ids of its faces."""
    elements, seen = [], {}
    for card in cards:
        base_id = get_base_id(card)
        if base_id in seen:
            seen[base_id].append(card.id)
            continue
        seen[base_id] = [card.id]
        elements.append((card.id, base_id))
    return [Element(card_id, tuple(seen[base_id]) if len(seen[base_id]) > 1 else ()) for card_id, base_id in elements]


def build_collection_from_batch(cards, tag: str = 'Card') -> Collection:
    cards = list(cards)
    elements = group_faces(cards)
    collection = Collection(cards=cards, elements=elements, tag=tag)
    if elements: collection.faces = list(elements[0].faces)
    return collection
