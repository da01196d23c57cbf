from dataclasses import dataclass, replace
from enum import Enum

from .cards import evaluate_rules, find_unique_arts
from .models import Card, Collection


class Event(str, Enum):
    CYCLE_ART = 'cycleArt'
    CYCLE_FACE = 'cycleFace'
    PREVIOUS_ELEMENT = 'previousElement'
    NEXT_ELEMENT = 'nextElement'
    TOGGLE_RULES = 'toggleRules'
    TOGGLE_ART = 'toggleArt'
    CLEAR_COMPONENTS = 'clearComponents'


class Mode(str, Enum):
    CARD = 'card'
    RULES = 'rules'
    ART = 'art'


@dataclass(frozen=True)
class NavigationState:
    card_id: str
    art_style: int = 0
    face: int = -1
    element: int = 0
    faces: tuple = ()
    rules_toggle: bool = False
    art_toggle: bool = False


@dataclass(frozen=True)
class ButtonModel:
    event: Event
    label: str
    style: str
    row: int


@dataclass(frozen=True)
class ViewModel:
    card: Card
    mode: Mode
    artificial_id: str
    buttons: tuple


def initial_state(collection: Collection, card: Card = None) -> NavigationState:
    """Opening state for ``card``, or for the first card of the collection."""
    active = collection.find(card.id) if card else None
    if active is None: active = card or collection.cards[0]
    arts = find_unique_arts(active)
    faces = tuple(collection.faces)
    element = collection.element_index(active.id)
    if element < 0:
        element = next((i for i, e in enumerate(collection.elements) if active.id in e.faces), 0)
    return NavigationState(
        card_id=active.id,
        art_style=arts.index(active.id) if active.id in arts else 0,
        face=faces.index(active.id) if active.id in faces else (0 if faces else -1),
        element=element,
        faces=faces,
    )


def _step_element(state: NavigationState, collection: Collection, step: int) -> NavigationState:
    if not collection.elements: return state
    element = (state.element + step) % len(collection.elements)
    target = collection.elements[element]
    faces = tuple(target.faces)
    return replace(state, card_id=target.card_id, art_style=0, element=element, faces=faces,
                   face=faces.index(target.card_id) if target.card_id in faces else -1, rules_toggle=False)


def transition(state: NavigationState, event: Event, collection: Collection) -> NavigationState:
    if event is Event.CYCLE_ART:
        count = len(find_unique_arts(collection.find(state.card_id))) or 1
        return replace(state, art_style=(state.art_style + 1) % count)

    if event is Event.CYCLE_FACE:
        if not state.faces: return state
        face = (state.face + 1) % len(state.faces)
        card_id = state.faces[face]
        element = collection.element_index(card_id)
        if element < 0: element = state.element
        faces = state.faces
        if collection.elements and collection.elements[element].faces and tuple(collection.elements[element].faces) != faces:
            faces = tuple(collection.elements[element].faces)
            face = faces.index(card_id) if card_id in faces else 0
        return replace(state, card_id=card_id, art_style=0, face=face, element=element, faces=faces, rules_toggle=False)

    if event is Event.PREVIOUS_ELEMENT: return _step_element(state, collection, -1)
    if event is Event.NEXT_ELEMENT: return _step_element(state, collection, 1)
    if event is Event.TOGGLE_RULES: return replace(state, rules_toggle=not state.rules_toggle, art_toggle=False)
    if event is Event.TOGGLE_ART: return replace(state, rules_toggle=False, art_toggle=not state.art_toggle)
    return state


def render(state: NavigationState, collection: Collection, rules=()) -> ViewModel:
    card = collection.find(state.card_id)
    arts = find_unique_arts(card)
    artificial_id = arts[state.art_style] if 0 <= state.art_style < len(arts) else card.id

    buttons = []
    if collection.elements:
        style = 'secondary' if collection.tag == 'Card' else 'primary'
        buttons.append(ButtonModel(Event.PREVIOUS_ELEMENT, f"Previous {collection.tag}", style, 0))
        buttons.append(ButtonModel(Event.NEXT_ELEMENT, f"Next {collection.tag}", style, 0))
    if state.faces: buttons.append(ButtonModel(Event.CYCLE_FACE, 'Flip Card', 'primary', 0))
    if len(arts) > 1: buttons.append(ButtonModel(Event.CYCLE_ART, 'Change Art', 'primary', 0))
    if evaluate_rules(card, rules): buttons.append(ButtonModel(Event.TOGGLE_RULES, 'Toggle Rules', 'secondary', 1))
    buttons.append(ButtonModel(Event.TOGGLE_ART, 'Toggle Art', 'success', 1))
    buttons.append(ButtonModel(Event.CLEAR_COMPONENTS, 'Clear Buttons', 'danger', 1))

    if state.art_toggle: mode = Mode.ART
    elif state.rules_toggle: mode = Mode.RULES
    else: mode = Mode.CARD
    return ViewModel(card, mode, artificial_id, tuple(buttons))
