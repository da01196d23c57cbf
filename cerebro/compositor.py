import asyncio
import logging
from dataclasses import dataclass
from io import BytesIO

from PIL import Image

from .cards import build_card_image_path
from .config import IMAGE_HEIGHT, IMAGE_WIDTH, IMAGES_PER_ROW, MAX_ATTACHMENTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowImage:
    index: int
    data: bytes
    count: int

    @property
    def filename(self) -> str:
        return f"Row {self.index}.png"


@dataclass(frozen=True)
class CompositeBatch:
    rows: list
    overloaded: bool


def chunk_rows(items, per_row: int = IMAGES_PER_ROW) -> list:
    return [items[i:i + per_row] for i in range(0, len(items), per_row)]


def load_tile(path: str, width: int = IMAGE_WIDTH, height: int = IMAGE_HEIGHT) -> Image.Image:
    with Image.open(path) as img:
        tile = img.convert('RGBA')
    # Landscape scans are portrait cards lying sideways: turn them 270 degrees clockwise.
    if tile.width > tile.height: tile = tile.rotate(90, expand=True)
    return tile.resize((width, height))


def compose_row(paths, width: int = IMAGE_WIDTH, height: int = IMAGE_HEIGHT) -> bytes:
    canvas = Image.new('RGBA', (width * len(paths), height))
    for x, path in enumerate(paths):
        canvas.paste(load_tile(path, width, height), (width * x, 0))
    buffer = BytesIO()
    canvas.save(buffer, format='PNG')
    return buffer.getvalue()


async def compose_batch(cards, image_path: str, per_row: int = IMAGES_PER_ROW, max_rows: int = MAX_ATTACHMENTS,
                        width: int = IMAGE_WIDTH, height: int = IMAGE_HEIGHT) -> CompositeBatch:
    """Lay the cards' art out in rows, one PNG per row, composing every row concurrently.

    Cards past ``per_row * max_rows`` are dropped and flagged with ``overloaded``.
    A failure in any row propagates and no rows are returned.
    """
    cards = list(cards)
    overloaded = len(cards) > per_row * max_rows
    if overloaded: cards = cards[:per_row * max_rows]

    rows = chunk_rows([build_card_image_path(card, card.id, image_path) for card in cards], per_row)
    images = await asyncio.gather(*(asyncio.to_thread(compose_row, row, width, height) for row in rows))
    logger.debug("Composed %d row(s) for %d card(s).", len(rows), len(cards))
    return CompositeBatch(sorted((RowImage(i, data, len(rows[i])) for i, data in enumerate(images)), key=lambda r: r.index), overloaded)
