"""Status icon generation for the menu bar.

The icon color shows poll health: gray while loading, green after a
successful sample, yellow while the menu is stale because sampling fails.
Icons are written once to a temp directory and cached by path.

Usage:
    from app.views.icons import IconGenerator

    icons = IconGenerator()
    path = icons.status_icon("ok")
"""
import tempfile
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw

from config import COLORS, STORAGE, UI, get_logger

logger = get_logger(__name__)

STATUS_COLORS: Dict[str, Tuple[int, int, int, int]] = {
    UI.STATUS_LOADING: COLORS.GRAY_RGBA,
    UI.STATUS_OK: COLORS.GREEN_RGBA,
    UI.STATUS_STALE: COLORS.YELLOW_RGBA,
}


class IconGenerator:
    """Generates and caches status icons."""

    def __init__(self, temp_dir: Optional[Path] = None):
        self._temp_dir = temp_dir or Path(tempfile.gettempdir()) / STORAGE.ICON_TEMP_DIR
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        self._cache: Dict[str, str] = {}
        logger.debug(f"IconGenerator initialized, temp dir: {self._temp_dir}")

    def status_icon(self, status: str, size: Optional[int] = None) -> str:
        """Return the path of a PNG ring icon for a poll status.

        Unknown statuses fall back to the loading (gray) icon.
        """
        size = size or UI.STATUS_ICON_SIZE
        if status not in STATUS_COLORS:
            status = UI.STATUS_LOADING
        cache_key = f"{status}_{size}"

        if cache_key in self._cache:
            return self._cache[cache_key]

        img = Image.new('RGBA', (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)
        fill = STATUS_COLORS[status]

        # Outer ring with a solid center dot: a "listening" socket
        padding = 2
        ring = max(1, size // 9)
        draw.ellipse([padding, padding, size - padding, size - padding], outline=fill, width=ring)
        center = size / 2
        dot = size / 6
        draw.ellipse([center - dot, center - dot, center + dot, center + dot], fill=fill)

        icon_path = self._temp_dir / f'status_{cache_key}.png'
        img.save(icon_path, 'PNG')

        self._cache[cache_key] = str(icon_path)
        return str(icon_path)

    def cleanup(self) -> None:
        """Remove generated icons."""
        for path in self._cache.values():
            Path(path).unlink(missing_ok=True)
        self._cache.clear()
