import json
import logging
import os
import shutil
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- 1. ENVIRONMENT ---
load_dotenv()
TOKEN = os.getenv('DISCORD_TOKEN')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
DATA_DIR = os.environ.get('DATA_DIR', os.path.dirname(os.path.dirname(os.path.realpath(__file__))))
CARD_IMAGE_PATH = os.environ.get('CARD_IMAGE_PATH', os.path.join(DATA_DIR, 'images'))
CARD_IMAGE_URL = os.environ.get('CARD_IMAGE_URL')

# --- File Paths ---
CARDS_FILE = 'cards.json'
AUTHORS_FILE = 'authors.json'
PACKS_FILE = 'packs.json'
SETS_FILE = 'sets.json'
RULES_FILE = 'rules.json'
CONFIG_FILE = 'configuration.json'
COMMAND_LOG_CSV_FILE = 'command_log.csv'
CARD_LOG_CSV_FILE = 'card_log.csv'

# --- PRESENTATION CONSTANTS ---
ID_LENGTH = 5
SELECT_TIMEOUT = 20.0
NAVIGATION_TIMEOUT = 15.0
MAX_SELECT_OPTIONS = 25
FUZZY_THRESHOLD = 70.0

IMAGE_WIDTH, IMAGE_HEIGHT = 300, 419
IMAGES_PER_ROW = 5
MAX_ATTACHMENTS = 10
MAX_IMAGES = IMAGES_PER_ROW * MAX_ATTACHMENTS

LOAD_APOLOGY = 'Loading...'
TIMEOUT_APOLOGY = 'The timeout was reached...'
CANCEL_APOLOGY = 'Selection was canceled...'
NO_RESULTS = 'No results were found for the given query...'
ERROR_APOLOGY = 'Something went wrong... Check the logs to find out more.'
INTERACT_APOLOGY = "Sorry, but you can't interact with another user's query."
MAX_IMAGES_APOLOGY = f'Sorry, only the first {MAX_IMAGES} results could be shown.'

AFFIRMATIVE_EMOJI = '✅'
NEGATIVE_EMOJI = '❌'

COLORS = {
    'Default': 0x2F3136,
    'Aggression': 0xE11D24,
    'Basic': 0x808080,
    'Determination': 0x7D3C98,
    'Encounter': 0x8B5A2B,
    'Hero': 0x2980B9,
    'Justice': 0xF1C40F,
    'Leadership': 0x3498DB,
    'Player': 0x95A5A6,
    'Protection': 0x2ECC71,
    'Villain': 0x6E2C00,
}

SYMBOLS = {
    '{boost}': '💥',
    '{crisis}': '⚠️',
    '{energy}': '⚡',
    '{hazard}': '☢️',
    '{mental}': '🧠',
    '{physical}': '👊',
    '{star}': '⭐',
    '{u}': '◆',
    '{wild}': '🌀',
    '{acceleration}': '⏩',
    '{amplify}': '📢',
    '{per_hero}': '🧑',
}

RESOURCE_CONVERTER = {
    'energy': '{energy}',
    'mental': '{mental}',
    'physical': '{physical}',
    'wild': '{wild}',
}


def data_path(filename: str, data_dir: str = None) -> str:
    return os.path.join(data_dir or DATA_DIR, filename)


def load_json(filepath, default):
    try:
        with open(filepath, 'r', encoding='utf-8') as f: return json.load(f)
    except FileNotFoundError:
        logger.warning("No data file found at %s.", filepath)
        return default


def safe_atomic_write_json(filepath, data):
    temp_file = filepath + ".tmp"
    with open(temp_file, 'w', encoding='utf-8') as f: json.dump(data, f, indent=4)
    shutil.move(temp_file, filepath)


# --- 2. BOT CONFIGURATION ---
@dataclass
class BotConfiguration:
    """Per-guild settings plus the beta allow-list, persisted to configuration.json."""

    unofficial_restrictions: dict = field(default_factory=dict)
    donors: list = field(default_factory=list)
    beta_only: bool = False
    filepath: str = None

    @classmethod
    def load(cls, filepath: str) -> 'BotConfiguration':
        try:
            with open(filepath, 'r', encoding='utf-8') as f: raw = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            logger.info("No configuration file found, using defaults.")
            raw = {}
        restrictions = {str(guild_id): [str(c) for c in channels] for guild_id, channels in raw.get('UnofficialRestrictions', {}).items()}
        config = cls(restrictions, [str(d) for d in raw.get('Donors', [])], bool(raw.get('BetaOnly', False)), filepath)
        logger.info("Loaded unofficial restrictions for %d server(s).", len(config.unofficial_restrictions))
        return config

    def save(self):
        if not self.filepath: return
        safe_atomic_write_json(self.filepath, {
            'UnofficialRestrictions': self.unofficial_restrictions,
            'Donors': self.donors,
            'BetaOnly': self.beta_only,
        })

    def restricted_channels(self, guild_id) -> list:
        return self.unofficial_restrictions.get(str(guild_id), [])

    def allows_unofficial(self, guild_id, channel_id) -> bool:
        if guild_id is None: return True
        restrictions = self.restricted_channels(guild_id)
        return not restrictions or str(channel_id) in restrictions

    def add_restriction(self, guild_id, channel_id) -> bool:
        channels = self.unofficial_restrictions.setdefault(str(guild_id), [])
        if str(channel_id) in channels: return False
        channels.append(str(channel_id))
        self.save()
        return True

    def remove_restriction(self, guild_id, channel_id) -> bool:
        channels = self.unofficial_restrictions.get(str(guild_id), [])
        if str(channel_id) not in channels: return False
        channels.remove(str(channel_id))
        if not channels: del self.unofficial_restrictions[str(guild_id)]
        self.save()
        return True

    def has_beta_access(self, user_id) -> bool:
        return not self.beta_only or str(user_id) in self.donors
