"""Pick a usable wallpaper out of a list of candidate files.

The candidate list is explicit state owned by the chooser: a candidate that
fails to load, has an unsupported pixel format or is rejected with Skip is
removed so it is never tried again, and another one is drawn at random.
"""

import logging
import os
import random
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import WallpaperConfig
from .domain import Dimensions, PlacementMode, WallpaperDecision
from .engine import decide
from .image_source import LOAD_ERRORS, load_image
from .trace import TraceLog

logger = logging.getLogger(__name__)


def enumerate_candidates(paths: Iterable[str], extensions: Optional[Iterable[str]] = None) -> list[str]:
    """Expand directories (recursively) and files into a sorted file list."""
    exts = {e.lower() for e in extensions} if extensions else None
    files: list[str] = []
    for p in paths:
        p = os.path.expanduser(p)
        if os.path.isfile(p):
            candidates = [p]
        elif os.path.isdir(p):
            candidates = [os.path.join(root, f) for root, _, names in os.walk(p) for f in names]
        else:
            logger.warning(f"[chooser] Skipping missing path: {p}")
            continue
        for f in candidates:
            if exts is None or os.path.splitext(f)[1].lower() in exts:
                files.append(os.path.abspath(f))
    return sorted(set(files))


@dataclass(frozen=True)
class ChosenWallpaper:
    path: str
    decision: WallpaperDecision


class WallpaperChooser:
    def __init__(
        self,
        candidates: Iterable[str],
        screen: Dimensions,
        config: WallpaperConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.file_list = list(candidates)
        self.screen = screen
        self.config = config or WallpaperConfig()
        self.rng = rng or random.Random()
        self.current: Optional[str] = None
        self.trace = TraceLog()
        logger.info(f"[chooser] {len(self.file_list)} candidate files")

    def _try(self, path: str) -> Optional[WallpaperDecision]:
        try:
            loaded = load_image(path, self.config)
            self.trace.write("Opened file")
            decision = decide(loaded.buffer, self.screen, self.config, image_size=loaded.size, trace=self.trace)
        except LOAD_ERRORS as e:
            self.trace.write(f"File not usable, skipping: {e}")
            logger.info(f"[chooser] Dropping {path}: {e}")
            return None
        if decision.mode == PlacementMode.SKIP:
            self.trace.write("Image too small for screen, skipping")
            return None
        return decision

    def next_wallpaper(self) -> Optional[ChosenWallpaper]:
        """Draw candidates until one is usable; None once the list is empty."""
        self.trace = TraceLog()
        while self.file_list:
            path = self.rng.choice(self.file_list)
            self.trace.write(f"Loading file {path}")
            decision = self._try(path)
            if decision is None:
                self.file_list.remove(path)
                continue
            self.current = path
            decision.trace = self.trace.lines
            return ChosenWallpaper(path, decision)
        logger.warning("[chooser] No usable wallpaper left")
        return None
