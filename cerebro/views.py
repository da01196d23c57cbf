import logging
from enum import Enum

import discord
from discord import ui

from .cards import build_card_image_path, get_printing
from .config import (CANCEL_APOLOGY, INTERACT_APOLOGY, LOAD_APOLOGY, MAX_SELECT_OPTIONS, NAVIGATION_TIMEOUT,
                     SELECT_TIMEOUT, SYMBOLS, TIMEOUT_APOLOGY)
from .embeds import build_embed, build_rules_embed, create_embed
from .messages import remove_components, report_error, send_message_with_options
from .navigation import Event, Mode, NavigationState, render, transition

logger = logging.getLogger(__name__)

BUTTON_STYLES = {
    'primary': discord.ButtonStyle.primary,
    'secondary': discord.ButtonStyle.secondary,
    'success': discord.ButtonStyle.success,
    'danger': discord.ButtonStyle.danger,
}


class RequesterView(ui.View):
    """A view only the user who issued the command may drive."""

    def __init__(self, requester_id: int, timeout: float):
        super().__init__(timeout=timeout)
        self.requester_id, self.message = requester_id, None

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id == self.requester_id: return True
        await interaction.response.send_message(embed=create_embed(INTERACT_APOLOGY), ephemeral=True)
        return False

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: ui.Item):
        await report_error(interaction, error)


# --- CARD PRESENTER ---
class CardPresenter:
    """One navigation session: the requester, the related cards and the single message being edited."""

    def __init__(self, reference, collection, requester_id: int, image_path: str = '', image_url: str = None):
        self.reference, self.collection, self.requester_id = reference, collection, requester_id
        self.image_path, self.image_url = image_path, image_url

    def art_file(self, card, artificial_id: str) -> discord.File:
        printing = get_printing(card, artificial_id)
        card_set = self.reference.find_set(printing.set_id) if printing else None
        spoiler = card.incomplete or bool(card_set and card_set.incomplete)
        return discord.File(build_card_image_path(card, artificial_id, self.image_path), filename=f"{artificial_id}.jpg", spoiler=spoiler)

    def message_options(self, state: NavigationState) -> dict:
        model = render(state, self.collection, self.reference.rules)
        if model.mode is Mode.ART:
            return {'embeds': [], 'attachments': [self.art_file(model.card, model.artificial_id)]}
        builder = build_rules_embed if model.mode is Mode.RULES else build_embed
        return {'embeds': [builder(model.card, self.reference, model.artificial_id, self.image_url)], 'attachments': []}

    async def show(self, interaction: discord.Interaction, state: NavigationState, message: discord.Message = None) -> 'NavigatorView':
        view = NavigatorView(self, state)
        options = self.message_options(state)
        if message is not None:
            view.message = await message.edit(content=None, view=view, **options)
        else:
            view.message = await send_message_with_options(interaction, options['embeds'], options['attachments'], view)
        return view


class NavigationButton(ui.Button):
    def __init__(self, event: Event, label: str, style: str, row: int):
        super().__init__(label=label, style=BUTTON_STYLES[style], custom_id=event.value, row=row)
        self.event = event

    async def callback(self, interaction: discord.Interaction):
        await self.view.navigate(interaction, self.event)


class NavigatorView(RequesterView):
    def __init__(self, presenter: CardPresenter, state: NavigationState):
        super().__init__(presenter.requester_id, timeout=NAVIGATION_TIMEOUT)
        self.presenter, self.state = presenter, state
        for button in render(state, presenter.collection, presenter.reference.rules).buttons:
            self.add_item(NavigationButton(button.event, button.label, button.style, button.row))

    async def navigate(self, interaction: discord.Interaction, event: Event):
        self.stop()
        if event is Event.CLEAR_COMPONENTS:
            if self.state.art_toggle: await interaction.response.edit_message(view=None)
            else: await interaction.response.edit_message(view=None, attachments=[])
            return
        state = transition(self.state, event, self.presenter.collection)
        view = NavigatorView(self.presenter, state)
        view.message = self.message
        await interaction.response.edit_message(view=view, **self.presenter.message_options(state))

    async def on_timeout(self):
        if self.message is None: return
        await remove_components(self.message, remove_files=not self.state.art_toggle, notice=TIMEOUT_APOLOGY)


# --- RESULT SELECTORS ---
class SelectorOutcome(Enum):
    RESOLVED = 'resolved'
    BATCH = 'batch'
    SHOW_ALL = 'showAll'
    CANCELLED = 'cancelled'
    TIMED_OUT = 'timedOut'


def selection_prompt(count: int) -> str:
    prompt = f"{count} results were found for the given query!"
    if count > MAX_SELECT_OPTIONS: prompt += f" Only the top {MAX_SELECT_OPTIONS} results could be shown."
    return prompt + "\n\nPlease select from the following..."


class SelectorView(RequesterView):
    """Single-use choice menu: the first valid action from the requester settles ``outcome``."""

    def __init__(self, requester_id: int, timeout: float = SELECT_TIMEOUT):
        super().__init__(requester_id, timeout=timeout)
        self.outcome, self.selection = None, None

    async def resolve(self, interaction: discord.Interaction, outcome: SelectorOutcome, selection=None):
        if self.outcome is not None:
            await interaction.response.defer(); return
        self.outcome, self.selection = outcome, selection
        content = CANCEL_APOLOGY if outcome is SelectorOutcome.CANCELLED else LOAD_APOLOGY
        try:
            await interaction.response.edit_message(embed=create_embed(content), view=None)
        finally:
            # The waiting command edits this message next.
            self.stop()

    async def on_timeout(self):
        if self.outcome not in (None, SelectorOutcome.TIMED_OUT): return
        self.outcome = SelectorOutcome.TIMED_OUT
        if self.message is not None: await remove_components(self.message, TIMEOUT_APOLOGY)

    async def wait_for_outcome(self) -> SelectorOutcome:
        timed_out = await self.wait()
        if timed_out and self.outcome is None: self.outcome = SelectorOutcome.TIMED_OUT
        return self.outcome or SelectorOutcome.TIMED_OUT


def card_option_description(card, reference) -> str:
    description = card.type
    printing = get_printing(card, card.id)
    card_set = reference.find_set(printing.set_id) if printing and printing.set_id else None
    if card_set:
        if card.classification == 'Hero' and card.type not in ('Alter-Ego', 'Hero'): description = f"{card_set.name} {description}"
        elif card.classification == 'Encounter': description = f"{description} ({card_set.name})"
    else:
        description = f"{card.classification} {description}"
    return description


class CardSelect(ui.Select):
    def __init__(self, cards, reference):
        self.cards = cards[:MAX_SELECT_OPTIONS]
        options = [discord.SelectOption(
            label=card.display_name[:100],
            description=card_option_description(card, reference)[:100],
            emoji=SYMBOLS.get(card.resource) if card.resource else None,
            value=card.id,
        ) for card in self.cards]
        super().__init__(placeholder="No card selected...", options=options, row=0)

    async def callback(self, interaction: discord.Interaction):
        card = next(c for c in self.cards if c.id == self.values[0])
        await self.view.resolve(interaction, SelectorOutcome.RESOLVED, card)


class CardSelectView(SelectorView):
    def __init__(self, requester_id: int, cards, reference, timeout: float = SELECT_TIMEOUT):
        super().__init__(requester_id, timeout=timeout)
        self.cards = list(cards)
        self.add_item(CardSelect(self.cards, reference))

    @ui.button(label="Browse Results", style=discord.ButtonStyle.primary, row=1)
    async def browse(self, interaction: discord.Interaction, button: ui.Button):
        await self.resolve(interaction, SelectorOutcome.BATCH)

    @ui.button(label="Show All", style=discord.ButtonStyle.primary, row=1)
    async def show_all(self, interaction: discord.Interaction, button: ui.Button):
        await self.resolve(interaction, SelectorOutcome.SHOW_ALL)

    @ui.button(label="Cancel Selection", style=discord.ButtonStyle.danger, row=1)
    async def cancel(self, interaction: discord.Interaction, button: ui.Button):
        await self.resolve(interaction, SelectorOutcome.CANCELLED)


class CollectionSelect(ui.Select):
    def __init__(self, entities, reference, type: str):
        self.entities = entities[:MAX_SELECT_OPTIONS]
        options = []
        for entity in self.entities:
            author = reference.find_author(entity.author_id) if not entity.official else None
            options.append(discord.SelectOption(
                label=entity.name[:100],
                description=f"{entity.type}{f' by {author.name}' if author else ''}"[:100],
                value=entity.id,
            ))
        super().__init__(placeholder=f"No {type} selected...", options=options)

    async def callback(self, interaction: discord.Interaction):
        entity = next(e for e in self.entities if e.id == self.values[0])
        await self.view.resolve(interaction, SelectorOutcome.RESOLVED, entity)


class CollectionSelectView(SelectorView):
    def __init__(self, requester_id: int, entities, reference, type: str, timeout: float = SELECT_TIMEOUT):
        super().__init__(requester_id, timeout=timeout)
        self.add_item(CollectionSelect(list(entities), reference, type))
