from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from cerebro.catalog import ReferenceData
from cerebro.config import BotConfiguration
from cerebro.models import Author, Card, CardCollection, Rule
from cerebro.store import CardStore


def printing(artificial_id, pack_id='core', pack_number=None, set_id=None, set_number=None, unique_art=True):
    return {'ArtificialId': artificial_id, 'PackId': pack_id, 'PackNumber': pack_number, 'SetId': set_id, 'SetNumber': set_number, 'UniqueArt': unique_art}


CARD_DOCUMENTS = [
    {'Id': '01001a', 'Name': 'Spider-Man', 'Subname': 'Peter Parker', 'Type': 'Hero', 'Classification': 'Hero', 'Traits': ['Avenger'],
     'Attack': 2, 'Thwart': 1, 'Defense': 3, 'Health': 10, 'Rules': 'Spider-Sense: <b>Interrupt</b>: When the villain initiates an attack against you, draw 1 card.',
     'Printings': [printing('01001a', pack_number=1, set_id='spiderman', set_number=1)]},
    {'Id': '01001b', 'Name': 'Peter Parker', 'Subname': 'Spider-Man', 'Type': 'Alter-Ego', 'Classification': 'Hero', 'Traits': ['Genius'],
     'Hand': 6, 'Health': 10, 'Printings': [printing('01001b', pack_number=1, set_id='spiderman', set_number=1)]},
    {'Id': '01002', 'Name': 'Spider-Tracer', 'Type': 'Upgrade', 'Classification': 'Hero', 'Cost': 1, 'Resource': '{energy}',
     'Printings': [printing('01002', pack_number=2, set_id='spiderman', set_number=2), printing('40002', pack_id='promo', pack_number=1),
                   printing('50002', pack_id='reprint', pack_number=9, unique_art=False)]},
    {'Id': '01003', 'Name': 'Spider-Sense', 'Type': 'Event', 'Classification': 'Justice', 'Cost': 0, 'Resource': '{mental}',
     'Traits': ['Superpower'], 'Rules': 'Retaliate 1. Hero Interrupt: Cancel the attack.',
     'Printings': [printing('01003', pack_number=3)]},
    {'Id': '01004', 'Name': 'Web-Shooter', 'Type': 'Upgrade', 'Classification': 'Aggression', 'Cost': 1, 'Traits': ['Item', 'Tech'],
     'Printings': [printing('01004', pack_number=4)]},
    {'Id': '01094', 'Name': 'Rhino', 'Type': 'Villain', 'Classification': 'Encounter', 'GroupId': 'rhino', 'Stage': 'I',
     'Printings': [printing('01094', pack_number=94, set_id='rhino', set_number=1)]},
    {'Id': '01095', 'Name': 'Rhino', 'Type': 'Villain', 'Classification': 'Encounter', 'GroupId': 'rhino', 'Stage': 'II',
     'Printings': [printing('01095', pack_number=95, set_id='rhino', set_number=2)]},
    {'Id': '01096', 'Name': 'Rhino', 'Type': 'Villain', 'Classification': 'Encounter', 'GroupId': 'rhino', 'Stage': 'III',
     'Printings': [printing('01096', pack_number=96, set_id='rhino', set_number=3)]},
    {'Id': '01097a', 'Name': 'The Break-In!', 'Type': 'Main Scheme', 'Classification': 'Encounter', 'GroupId': 'breakin',
     'Printings': [printing('01097a', pack_number=97, set_id='rhino', set_number=4)]},
    {'Id': '01097b', 'Name': 'The Break-In!', 'Type': 'Main Scheme', 'Classification': 'Encounter', 'GroupId': 'breakin',
     'Printings': [printing('01097b', pack_number=97, set_id='rhino', set_number=4)]},
    {'Id': '01098a', 'Name': 'Undercover', 'Type': 'Main Scheme', 'Classification': 'Encounter', 'GroupId': 'breakin',
     'Printings': [printing('01098a', pack_number=98, set_id='rhino', set_number=5)]},
    {'Id': '01098b', 'Name': 'Undercover', 'Type': 'Main Scheme', 'Classification': 'Encounter', 'GroupId': 'breakin',
     'Printings': [printing('01098b', pack_number=98, set_id='rhino', set_number=5)]},
    {'Id': '27001', 'Name': 'Red Skull', 'Type': 'Villain', 'Classification': 'Encounter',
     'Printings': [printing('27001', pack_id='rise', pack_number=1)]},
    {'Id': '27002', 'Name': 'Hydra Soldier', 'Type': 'Minion', 'Classification': 'Encounter', 'Incomplete': True,
     'Printings': [printing('27002', pack_id='rise', pack_number=2)]},
    {'Id': '42-90001', 'Name': 'Spider-Ham', 'Type': 'Ally', 'Classification': 'Basic', 'Official': False, 'AuthorId': '42',
     'Flavor': 'Th-th-that\'s all folks!', 'Printings': [printing('42-90001', pack_id='fanpack', pack_number=1, set_id='fanset', set_number=1)]},
]

AUTHOR_DOCUMENTS = [{'Id': '42', 'Name': 'Porker'}]

PACK_DOCUMENTS = [
    {'Id': 'core', 'Name': 'Core Set'},
    {'Id': 'rise', 'Name': 'Rise of Red Skull'},
    {'Id': 'rise-plus', 'Name': 'Rise of Red Skull Expansion'},
    {'Id': 'promo', 'Name': 'Promo Cards'},
    {'Id': 'fanpack', 'Name': 'Rise of Red Skull', 'Official': False, 'AuthorId': '42'},
]

SET_DOCUMENTS = [
    {'Id': 'spiderman', 'Name': 'Spider-Man'},
    {'Id': 'rhino', 'Name': 'Rhino'},
    {'Id': 'fanset', 'Name': 'Spider-Verse', 'Official': False, 'AuthorId': '42', 'CouncilNumber': 3},
]

RULE_DOCUMENTS = [
    {'Title': 'Retaliate', 'Description': 'After this character is attacked, deal {quantity} damage to the attacker.', 'Regex': r'Retaliate (?P<quantity>\d+)'},
    {'Title': 'Interrupt', 'Description': 'Resolves before the triggering condition.', 'Regex': r'Interrupt'},
]


@pytest.fixture
def cards():
    return [Card.from_document(doc) for doc in CARD_DOCUMENTS]


@pytest.fixture
def store(cards):
    return CardStore(cards)


@pytest.fixture
def reference(store, tmp_path):
    return ReferenceData(
        store,
        authors=[Author.from_document(doc) for doc in AUTHOR_DOCUMENTS],
        packs=[CardCollection.from_document(doc, 'Pack') for doc in PACK_DOCUMENTS],
        sets=[CardCollection.from_document(doc, 'Set') for doc in SET_DOCUMENTS],
        rules=[Rule.from_document(doc) for doc in RULE_DOCUMENTS],
        configuration=BotConfiguration(filepath=str(tmp_path / 'configuration.json')),
        data_dir=str(tmp_path),
    )


def make_message(message_id=555):
    message = MagicMock(id=message_id)
    message.edit = AsyncMock(return_value=message)
    return message


def make_interaction(user_id=1, guild_id=10, channel_id=100, message=None):
    """A mocked interaction whose responses all succeed and hand back ``message``."""
    message = message or make_message()
    interaction = MagicMock()
    interaction.user.id = user_id
    interaction.user.name = f"user{user_id}"
    interaction.guild_id = guild_id
    interaction.channel_id = channel_id
    interaction.app_permissions = discord.Permissions(embed_links=True, attach_files=True)
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.send_message = AsyncMock()
    interaction.response.edit_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.original_response = AsyncMock(return_value=message)
    interaction.followup.send = AsyncMock(return_value=message)
    return interaction


@pytest.fixture
def interaction():
    return make_interaction()
