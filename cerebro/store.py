import logging
import re

from rapidfuzz import fuzz

from .cards import build_collection_from_batch, get_base_id, group_faces, has_faces, is_villainous, share_faces, share_groups
from .config import FUZZY_THRESHOLD, RESOURCE_CONVERTER
from .models import Collection
from .text import normalize, strip_diacritics

logger = logging.getLogger(__name__)

NAME_FIELDS = ('Name', 'TokenizedName', 'StrippedName', 'Subname', 'TokenizedSubname', 'StrippedSubname')


def trim_duplicates(cards) -> list:
    results = []
    for card in cards:
        if not any(share_faces(card, kept) or share_groups(card, kept) for kept in results):
            results.append(card)
    return results


def _terms(value: str) -> list:
    return re.findall(r'[a-z0-9]+', value)


def _index_fields(card) -> dict:
    fields = {'id': card.id.lower()}
    for prefix, value in (('Name', card.name), ('Subname', card.subname)):
        if value is None: continue
        normalized = normalize(value)
        fields[prefix] = strip_diacritics(value)
        fields[f'Tokenized{prefix}'] = ' '.join(normalized.tokens)
        fields[f'Stripped{prefix}'] = normalized.stripped
    return fields


def _sort_key(card):
    return card.id


def _number_key(number):
    return (0, int(number), '') if str(number).isdigit() else (1, 0, str(number))


class CardStore:
    """In-memory card index split into an official and an unofficial index.

    Name lookups run the same three tiers against the name, subname and id
    fields: a full-text search where every query term must appear, then a
    substring search, then a fuzzy match. A later tier only runs when the
    previous one found nothing.
    """

    def __init__(self, cards=()):
        self.indexes = {True: [], False: []}
        for card in sorted(cards, key=_sort_key):
            self.indexes[card.official].append((card, _index_fields(card)))

    def __len__(self):
        return sum(len(index) for index in self.indexes.values())

    def _entries(self, origin):
        if origin in ('all', None): return self.indexes[True] + self.indexes[False]
        official = origin if isinstance(origin, bool) else origin == 'official'
        return self.indexes[official]

    def cards(self, origin='all') -> list:
        return [card for card, _ in self._entries(origin)]

    def get(self, card_id: str):
        return next((card for card, _ in self._entries('all') if card.id == card_id), None)

    # --- Name search ---
    def _search(self, entries, queries: dict) -> list:
        results = []
        for card, fields in entries:
            for name, query in queries.items():
                value = fields.get(name)
                if value is None or not query: continue
                if name == 'id':
                    if value == query: results.append(card); break
                    continue
                query_terms = _terms(query)
                if query_terms and all(term in _terms(value) for term in query_terms):
                    results.append(card); break
        return results

    def _substring(self, entries, queries: dict) -> list:
        results = []
        for card, fields in entries:
            if any(fields.get(name) is not None and query and query in fields[name] for name, query in queries.items()):
                results.append(card)
        return results

    def _fuzzy(self, entries, queries: dict) -> list:
        scored = []
        for card, fields in entries:
            scores = [fuzz.ratio(query, fields[name]) for name, query in queries.items() if fields.get(name) is not None and query]
            best = max(scores, default=0)
            if best >= FUZZY_THRESHOLD: scored.append((-best, card.id, card))
        return [card for _, _, card in sorted(scored, key=lambda s: (s[0], s[1]))]

    def find_by_name(self, terms: str, origin='all') -> list:
        entries = self._entries(origin)
        converted = strip_diacritics(terms)
        normalized = normalize(terms)
        tokenized, stripped = ' '.join(normalized.tokens), normalized.stripped
        queries = {
            'id': converted, 'Name': converted, 'TokenizedName': tokenized, 'StrippedName': stripped,
            'Subname': converted, 'TokenizedSubname': tokenized, 'StrippedSubname': stripped,
        }
        documents = self._search(entries, queries)
        if not documents:
            documents = self._substring(entries, dict(queries, id=converted.replace(' ', '')))
        if not documents:
            documents = self._fuzzy(entries, {name: queries[name] for name in NAME_FIELDS})
            logger.debug("Fuzzy fallback for %r matched %d card(s).", terms, len(documents))
        return documents

    def retrieve_by_name(self, terms: str, origin='all') -> list:
        terms = terms.lower()
        results = self.find_by_name(terms, origin)
        if not results: return []
        matches = [card for card in results if card.name.lower() == terms or (card.subname is not None and card.subname.lower() == terms) or card.id.lower() == terms]
        return trim_duplicates(matches or results)

    # --- Filter search ---
    def retrieve_with_filters(self, origin='all', aspect=None, author=None, cost=None, resource=None, text=None, traits=None, type=None) -> list:
        return trim_duplicates(apply_filters(self.cards(origin), aspect, author, cost, resource, text, traits, type))

    # --- Related cards ---
    def find_faces(self, card):
        if not has_faces(card): return None
        base_id = get_base_id(card)
        results = [c for c in self.cards(card.official) if c.id.startswith(base_id)]
        return results if len(results) > 1 else None

    def expand_faces(self, cards) -> list:
        """``cards`` with every face of each double-sided card alongside it, keeping result order."""
        expanded = []
        for card in cards:
            for face in self.find_faces(card) or [card]:
                if face not in expanded: expanded.append(face)
        return expanded

    def find_stages(self, card):
        if not card.group_id: return None
        results = [c for c in self.cards(card.official) if c.group_id == card.group_id]
        return results if len(results) > 1 else None

    def find_faces_and_elements(self, card) -> Collection:
        if is_villainous(card):
            stages = self.find_stages(card)
            if stages:
                collection = Collection(cards=stages, elements=group_faces(stages), tag='Stage' if card.type == 'Villain' else 'Phase')
                current = next((e for e in collection.elements if card.id in (e.card_id, *e.faces)), None)
                if current: collection.faces = list(current.faces)
                return collection
        faces = self.find_faces(card)
        if faces: return Collection(cards=faces, faces=[face.id for face in faces])
        return Collection(cards=[card])

    def retrieve_by_collection(self, entity) -> Collection:
        """Every card printed in a pack or set, in printing order, as a browsable collection."""
        is_pack = entity.type == 'Pack'
        printed = []
        for card in self.cards(entity.official):
            for printing in card.printings:
                if (printing.pack_id if is_pack else printing.set_id) == entity.id:
                    printed.append((_number_key(printing.pack_number if is_pack else printing.set_number), card.id, card))
                    break
        return build_collection_from_batch([card for _, _, card in sorted(printed, key=lambda p: (p[0], p[1]))])


def apply_filters(cards, aspect=None, author=None, cost=None, resource=None, text=None, traits=None, type=None) -> list:
    results = list(cards)
    if aspect: results = [c for c in results if c.classification.lower() == aspect]
    if author: results = [c for c in results if c.author_id == str(author)]
    if cost: results = [c for c in results if c.cost and c.cost.lower() == cost.lower()]
    if resource:
        if resource == 'none': results = [c for c in results if not c.resource]
        else: results = [c for c in results if c.resource and RESOURCE_CONVERTER[resource] in c.resource.lower()]
    if text: results = [c for c in results if (c.rules and text in c.rules.lower()) or (c.special and text in c.special.lower())]
    if traits:
        wanted = [normalize(t).stripped for t in traits]
        results = [c for c in results if c.traits and all(w in [normalize(t).stripped for t in c.traits] for w in wanted)]
    if type: results = [c for c in results if c.type.lower() == type]
    return results
