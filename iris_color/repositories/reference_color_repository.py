from pathlib import Path
from typing import Union
import json
import logging
import os
from dotenv import load_dotenv
from ..models.reference_color import ReferenceColor, ReferencePalette
from ..services.color_space import hex_to_rgb

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_COLORS_PATH = Path(__file__).resolve().parent.parent / "data" / "reference_colors.json"


class ReferenceDataError(ValueError):
    """Reference-color dataset is missing or malformed."""


class ReferenceColorRepository:
    """
    Loads the named reference-color dataset (flat JSON list of {name, hex}).
    """
    def __init__(self, path: Union[str, Path, None] = None):
        if path is None:
            path = os.getenv("REFERENCE_COLORS_PATH") or DEFAULT_REFERENCE_COLORS_PATH
        self.path = Path(path)

    @staticmethod
    def parse(entries) -> ReferencePalette:
        """
        Build a palette from decoded JSON. Entries without a name or with an
        unparseable hex are skipped; table order is preserved.
        """
        if not isinstance(entries, list):
            raise ReferenceDataError("Reference colors must be a JSON list")

        colors = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ReferenceDataError(f"Reference color #{i} is not an object")
            name, hex_color = entry.get("name"), entry.get("hex")
            if not name or hex_to_rgb(hex_color) is None:
                logger.warning(f"Skipping reference color #{i}: name={name!r} hex={hex_color!r}")
                continue
            colors.append(ReferenceColor(name=str(name), hex=hex_color))
        return ReferencePalette(colors=tuple(colors))

    def load(self) -> ReferencePalette:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as err:
            raise ReferenceDataError(f"Cannot read reference colors from {self.path}: {err}") from err
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as err:
            raise ReferenceDataError(f"Invalid JSON in {self.path}: {err}") from err

        palette = self.parse(entries)
        logger.info(f"Loaded {len(palette)} reference colors from {self.path.name}")
        return palette
