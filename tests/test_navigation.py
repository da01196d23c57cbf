from dataclasses import replace

import pytest

from cerebro.cards import build_collection_from_batch
from cerebro.navigation import Event, Mode, initial_state, render, transition


@pytest.fixture
def rhino_set(reference):
    return reference.store.retrieve_by_collection(reference.find_set("rhino"))


def events(model):
    return [button.event for button in model.buttons]


class TestTransitions:
    def test_cycle_art_wraps_and_changes_nothing_else(self, store):
        collection = store.find_faces_and_elements(store.get("01002"))
        state = initial_state(collection, store.get("01002"))

        cycled = transition(state, Event.CYCLE_ART, collection)
        assert cycled == replace(state, art_style=1)
        assert transition(cycled, Event.CYCLE_ART, collection) == state

    def test_cycle_art_with_a_single_art(self, store):
        collection = store.find_faces_and_elements(store.get("01004"))
        state = initial_state(collection)
        assert transition(state, Event.CYCLE_ART, collection) == state

    def test_next_then_previous_returns_to_the_same_element(self, rhino_set):
        state = initial_state(rhino_set)
        forward = transition(state, Event.NEXT_ELEMENT, rhino_set)
        assert forward.card_id == "01095"
        assert transition(forward, Event.PREVIOUS_ELEMENT, rhino_set) == state

    def test_previous_wraps_to_the_last_element(self, rhino_set):
        state = transition(initial_state(rhino_set), Event.PREVIOUS_ELEMENT, rhino_set)
        assert state.card_id == "01098a"
        assert state.element == 4
        assert state.faces == ("01098a", "01098b")
        assert state.face == 0

    def test_stepping_elements_resets_art_and_rules(self, rhino_set):
        state = replace(initial_state(rhino_set), art_style=1, rules_toggle=True)
        stepped = transition(state, Event.NEXT_ELEMENT, rhino_set)
        assert stepped.art_style == 0
        assert not stepped.rules_toggle

    def test_cycle_face_stays_on_the_element(self, rhino_set):
        state = transition(initial_state(rhino_set), Event.PREVIOUS_ELEMENT, rhino_set)
        flipped = transition(state, Event.CYCLE_FACE, rhino_set)
        assert (flipped.card_id, flipped.face, flipped.element) == ("01098b", 1, 4)
        assert transition(flipped, Event.CYCLE_FACE, rhino_set).card_id == "01098a"

    def test_cycle_face_on_a_double_sided_card(self, store):
        collection = store.find_faces_and_elements(store.get("01001b"))
        state = initial_state(collection, store.get("01001b"))
        assert (state.card_id, state.face) == ("01001b", 1)

        flipped = transition(state, Event.CYCLE_FACE, collection)
        assert (flipped.card_id, flipped.face) == ("01001a", 0)

    def test_cycle_face_without_faces(self, store):
        collection = store.find_faces_and_elements(store.get("01004"))
        state = initial_state(collection)
        assert transition(state, Event.CYCLE_FACE, collection) == state

    def test_toggles_are_mutually_exclusive(self, store):
        collection = store.find_faces_and_elements(store.get("01003"))
        state = initial_state(collection)

        rules = transition(state, Event.TOGGLE_RULES, collection)
        assert rules.rules_toggle and not rules.art_toggle
        art = transition(rules, Event.TOGGLE_ART, collection)
        assert art.art_toggle and not art.rules_toggle
        assert transition(art, Event.TOGGLE_RULES, collection).art_toggle is False
        assert transition(art, Event.TOGGLE_ART, collection) == state

    def test_clear_leaves_the_state_alone(self, rhino_set):
        state = initial_state(rhino_set)
        assert transition(state, Event.CLEAR_COMPONENTS, rhino_set) is state


class TestRender:
    def test_alternate_art_adds_change_art(self, store):
        collection = store.find_faces_and_elements(store.get("01002"))
        state = initial_state(collection)
        assert events(render(state, collection)) == [Event.CYCLE_ART, Event.TOGGLE_ART, Event.CLEAR_COMPONENTS]
        assert render(transition(state, Event.CYCLE_ART, collection), collection).artificial_id == "40002"

    def test_stage_collection_buttons(self, store):
        collection = store.find_faces_and_elements(store.get("01094"))
        model = render(initial_state(collection), collection)
        assert [b.label for b in model.buttons[:2]] == ["Previous Stage", "Next Stage"]
        assert {b.style for b in model.buttons[:2]} == {"primary"}

    def test_batch_collection_uses_secondary_card_buttons(self, store):
        collection = build_collection_from_batch([store.get("01002"), store.get("01004")])
        model = render(initial_state(collection), collection)
        assert model.buttons[0].label == "Previous Card"
        assert model.buttons[0].style == "secondary"

    def test_flip_card_only_with_faces(self, store, rhino_set):
        double_sided = store.find_faces_and_elements(store.get("01001a"))
        assert Event.CYCLE_FACE in events(render(initial_state(double_sided), double_sided))
        assert Event.CYCLE_FACE not in events(render(initial_state(rhino_set), rhino_set))

    def test_rules_button_needs_matching_rules(self, reference):
        store = reference.store
        with_rules = store.find_faces_and_elements(store.get("01003"))
        without_rules = store.find_faces_and_elements(store.get("01004"))
        assert Event.TOGGLE_RULES in events(render(initial_state(with_rules), with_rules, reference.rules))
        assert Event.TOGGLE_RULES not in events(render(initial_state(without_rules), without_rules, reference.rules))

    def test_mode_follows_toggles(self, store):
        collection = store.find_faces_and_elements(store.get("01003"))
        state = initial_state(collection)
        assert render(state, collection).mode is Mode.CARD
        assert render(replace(state, rules_toggle=True), collection).mode is Mode.RULES
        assert render(replace(state, art_toggle=True), collection).mode is Mode.ART
