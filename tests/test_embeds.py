from cerebro.embeds import build_embed, build_header, card_title


def test_subname_is_set_off_in_the_title(store):
    assert card_title(store.get("01001a")) == "Spider-Man — Peter Parker"
    assert card_title(store.get("01004")) == "Web-Shooter"


def test_stage_follows_the_type(store):
    assert build_header(store.get("01095")) == "**Villain** — *Stage II*"


def test_embed_title_and_spoilers(store, reference):
    assert build_embed(store.get("01001a"), reference).title == "Spider-Man — Peter Parker"
    assert build_embed(store.get("27002"), reference).title == "||Hydra Soldier||"
