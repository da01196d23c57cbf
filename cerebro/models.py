from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Printing:
    artificial_id: str
    pack_id: Optional[str] = None
    pack_number: Optional[str] = None
    set_id: Optional[str] = None
    set_number: Optional[str] = None
    unique_art: bool = False

    @classmethod
    def from_document(cls, doc: dict) -> 'Printing':
        return cls(
            artificial_id=doc['ArtificialId'],
            pack_id=doc.get('PackId'),
            pack_number=doc.get('PackNumber'),
            set_id=doc.get('SetId'),
            set_number=doc.get('SetNumber'),
            unique_art=bool(doc.get('UniqueArt', False)),
        )


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    type: str
    classification: str
    official: bool = True
    author_id: Optional[str] = None
    group_id: Optional[str] = None
    subname: Optional[str] = None
    traits: tuple = ()
    cost: Optional[str] = None
    resource: Optional[str] = None
    boost: Optional[str] = None
    recover: Optional[str] = None
    scheme: Optional[str] = None
    thwart: Optional[str] = None
    attack: Optional[str] = None
    defense: Optional[str] = None
    hand: Optional[str] = None
    health: Optional[str] = None
    acceleration: Optional[str] = None
    starting_threat: Optional[str] = None
    target_threat: Optional[str] = None
    stage: Optional[str] = None
    slash: bool = False
    unique: bool = False
    rules: Optional[str] = None
    special: Optional[str] = None
    flavor: Optional[str] = None
    printings: tuple = ()
    incomplete: bool = False

    @classmethod
    def from_document(cls, doc: dict) -> 'Card':
        def text(key):
            value = doc.get(key)
            return None if value is None else str(value)

        return cls(
            id=doc['Id'],
            name=doc['Name'],
            type=doc.get('Type', ''),
            classification=doc.get('Classification', ''),
            official=bool(doc.get('Official', True)),
            author_id=text('AuthorId'),
            group_id=text('GroupId'),
            subname=doc.get('Subname'),
            traits=tuple(doc.get('Traits') or ()),
            cost=text('Cost'),
            resource=text('Resource'),
            boost=text('Boost'),
            recover=text('Recover'),
            scheme=text('Scheme'),
            thwart=text('Thwart'),
            attack=text('Attack'),
            defense=text('Defense'),
            hand=text('Hand'),
            health=text('Health'),
            acceleration=text('Acceleration'),
            starting_threat=text('StartingThreat'),
            target_threat=text('TargetThreat'),
            stage=text('Stage'),
            slash=bool(doc.get('Slash', False)),
            unique=bool(doc.get('Unique', False)),
            rules=doc.get('Rules'),
            special=doc.get('Special'),
            flavor=doc.get('Flavor'),
            printings=tuple(Printing.from_document(p) for p in doc.get('Printings') or ()),
            incomplete=bool(doc.get('Incomplete', False)),
        )

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.subname})" if self.subname else self.name


@dataclass(frozen=True)
class Author:
    id: str
    name: str

    @classmethod
    def from_document(cls, doc: dict) -> 'Author':
        return cls(id=str(doc['Id']), name=doc['Name'])


@dataclass(frozen=True)
class CardCollection:
    """A pack or a set, the two kinds of named groupings a card can be printed in."""

    id: str
    name: str
    type: str
    official: bool = True
    incomplete: bool = False
    author_id: Optional[str] = None
    council_number: Optional[int] = None

    @classmethod
    def from_document(cls, doc: dict, type: str) -> 'CardCollection':
        author_id = doc.get('AuthorId')
        return cls(
            id=doc['Id'],
            name=doc['Name'],
            type=type,
            official=bool(doc.get('Official', True)),
            incomplete=bool(doc.get('Incomplete', False)),
            author_id=None if author_id is None else str(author_id),
            council_number=doc.get('CouncilNumber'),
        )


@dataclass(frozen=True)
class Rule:
    title: str
    description: str
    regex: str

    @classmethod
    def from_document(cls, doc: dict) -> 'Rule':
        return cls(title=doc['Title'], description=doc['Description'], regex=doc['Regex'])


@dataclass(frozen=True)
class Element:
    card_id: str
    faces: tuple = ()


@dataclass
class Collection:
    cards: list = field(default_factory=list)
    faces: list = field(default_factory=list)
    elements: list = field(default_factory=list)
    tag: str = 'Card'

    def find(self, card_id: str) -> Optional[Card]:
        return next((card for card in self.cards if card.id == card_id), None)

    def element_index(self, card_id: str) -> int:
        return next((i for i, element in enumerate(self.elements) if element.card_id == card_id), -1)
