"""In-memory state for the HTTP API."""

import logging
import os
from typing import Optional

from bdscore.config import Settings, load_config
from bdscore.models import TagWeighting

logger = logging.getLogger(__name__)


class WeightingStore:
    """
    Holds the active settings and weighting table.

    The table is never edited in place: ``replace`` swaps in a new
    TagWeighting, so a request always sees one whole table.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._weighting = self.settings.get_weighting()

    @property
    def weighting(self) -> TagWeighting:
        return self._weighting

    def replace(self, weightings: dict) -> TagWeighting:
        """Replace the active table wholesale."""
        weighting = TagWeighting(weightings)
        self.settings.tag_weightings = weighting.to_dict()
        self._weighting = weighting
        logger.info("Weighting table replaced (%d tags)", len(weighting))
        return weighting


def create_store() -> WeightingStore:
    """Build the store from BDSCORE_CONFIG (if set) and the environment."""
    return WeightingStore(load_config(os.environ.get("BDSCORE_CONFIG")))
