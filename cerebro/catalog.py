import logging
from typing import Optional

from . import config
from .config import BotConfiguration, data_path, load_json
from .models import Author, Card, CardCollection, Rule
from .store import CardStore

logger = logging.getLogger(__name__)


class ReferenceData:
    """Read-only snapshot of everything the bot serves, loaded once from DATA_DIR.

    Commands and views receive the snapshot explicitly. ``reload`` swaps in
    freshly loaded data without restarting the process.
    """

    def __init__(self, store: CardStore, authors=(), packs=(), sets=(), rules=(), configuration: BotConfiguration = None, data_dir: str = None):
        self.store = store
        self.authors = list(authors)
        self.packs = list(packs)
        self.sets = list(sets)
        self.rules = list(rules)
        self.configuration = configuration or BotConfiguration()
        self.data_dir = data_dir

    @classmethod
    def load(cls, data_dir: str = None) -> 'ReferenceData':
        data_dir = data_dir or config.DATA_DIR
        logger.info("Loading reference data from %s...", data_dir)
        cards = [Card.from_document(doc) for doc in load_json(data_path(config.CARDS_FILE, data_dir), [])]
        authors = [Author.from_document(doc) for doc in load_json(data_path(config.AUTHORS_FILE, data_dir), [])]
        packs = [CardCollection.from_document(doc, 'Pack') for doc in load_json(data_path(config.PACKS_FILE, data_dir), [])]
        sets = [CardCollection.from_document(doc, 'Set') for doc in load_json(data_path(config.SETS_FILE, data_dir), [])]
        rules = [Rule.from_document(doc) for doc in load_json(data_path(config.RULES_FILE, data_dir), [])]
        if not cards: logger.error("No cards were loaded, every query will come back empty.")
        configuration = BotConfiguration.load(data_path(config.CONFIG_FILE, data_dir))
        logger.info("Loaded %d cards, %d authors, %d packs, %d sets and %d rules.", len(cards), len(authors), len(packs), len(sets), len(rules))
        return cls(CardStore(cards), authors, packs, sets, rules, configuration, data_dir)

    def reload(self):
        fresh = ReferenceData.load(self.data_dir)
        self.store, self.authors, self.packs, self.sets = fresh.store, fresh.authors, fresh.packs, fresh.sets
        self.rules, self.configuration = fresh.rules, fresh.configuration

    def find_author(self, author_id) -> Optional[Author]:
        return next((a for a in self.authors if a.id == str(author_id)), None)

    def find_set(self, set_id) -> Optional[CardCollection]:
        return next((s for s in self.sets if s.id == set_id), None)

    def find_pack(self, pack_id) -> Optional[CardCollection]:
        return next((p for p in self.packs if p.id == pack_id), None)

    def collections(self, type: str) -> list:
        return self.packs if type == 'pack' else self.sets
