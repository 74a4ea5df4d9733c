"""Document Helpers Module

Convenience lookups over documents produced by the Contentful source:
included assets/entries by id, and image URLs / ``<img>`` tags built with
the Contentful Images API query parameters.
"""

from enum import Enum
from typing import Any, List, Mapping, Optional
import html
import re

from . import keys
from .models import Asset, Entry

HEX_COLOR_RE = re.compile(r'^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$')


class ImageResizeBehaviour(str, Enum):
    DEFAULT = ""
    PAD = "pad"
    FILL = "fill"
    SCALE = "scale"
    CROP = "crop"
    THUMB = "thumb"


class ImageFormat(str, Enum):
    DEFAULT = ""
    JPG = "jpg"
    PNG = "png"
    WEBP = "webp"
    GIF = "gif"
    AVIF = "avif"


class ImageFocusArea(str, Enum):
    DEFAULT = ""
    CENTER = "center"
    TOP = "top"
    RIGHT = "right"
    LEFT = "left"
    BOTTOM = "bottom"
    TOP_RIGHT = "top_right"
    TOP_LEFT = "top_left"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM_LEFT = "bottom_left"
    FACE = "face"
    FACES = "faces"


def _metadata(doc: Any) -> Mapping[str, Any]:
    metadata = getattr(doc, "metadata", doc)
    return metadata if isinstance(metadata, Mapping) else {}


def _find_by_id(resources: Optional[List[Any]], resource_id: str) -> Optional[Any]:
    for resource in resources or []:
        if resource.id == resource_id:
            return resource
    return None


def get_included_asset(doc: Any, asset_id: str) -> Optional[Asset]:
    """Included asset with ``asset_id`` attached to ``doc``, or None."""
    return _find_by_id(_metadata(doc).get(keys.INCLUDED_ASSETS), asset_id)


def get_included_entry(doc: Any, entry_id: str) -> Optional[Entry]:
    """Included entry with ``entry_id`` attached to ``doc``, or None."""
    return _find_by_id(_metadata(doc).get(keys.INCLUDED_ENTRIES), entry_id)


def _normalize_color(color: str) -> str:
    match = HEX_COLOR_RE.match(color.strip())
    if not match:
        raise ValueError(f"Invalid background color {color!r}; expected a hex color like #ff00aa")
    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"rgb:{digits}"


def build_image_query(
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Optional[int] = None,
    corner_radius: Optional[int] = None,
    resize_behaviour: ImageResizeBehaviour = ImageResizeBehaviour.DEFAULT,
    image_format: ImageFormat = ImageFormat.DEFAULT,
    focus_area: ImageFocusArea = ImageFocusArea.DEFAULT,
    background_color: Optional[str] = None,
) -> str:
    """Build the Images API query string, keys sorted.

    Returns an empty string when no transform is requested, otherwise a
    string starting with ``?``.

    Raises:
        ValueError: On a quality outside 1-100 or a malformed color.
    """
    params = {}
    if width is not None:
        params["w"] = int(width)
    if height is not None:
        params["h"] = int(height)
    if quality is not None:
        if not 1 <= quality <= 100:
            raise ValueError(f"Image quality must be between 1 and 100, got {quality}")
        params["q"] = int(quality)
    if corner_radius is not None:
        params["r"] = int(corner_radius)
    if resize_behaviour:
        params["fit"] = ImageResizeBehaviour(resize_behaviour).value
    if image_format:
        params["fm"] = ImageFormat(image_format).value
    if focus_area:
        params["f"] = ImageFocusArea(focus_area).value
    if background_color:
        params["bg"] = _normalize_color(background_color)

    if not params:
        return ""
    return "?" + "&".join(f"{key}={params[key]}" for key in sorted(params))


def image_url(asset: Asset, locale: str, **transforms: Any) -> Optional[str]:
    """URL of ``asset``'s file in ``locale`` with optional image transforms."""
    base_url = asset.url(locale)
    if base_url is None:
        return None
    return base_url + build_image_query(**transforms)


def image_tag_for_asset(
    doc: Any,
    asset_id: str,
    alt: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Optional[int] = None,
    corner_radius: Optional[int] = None,
    resize_behaviour: ImageResizeBehaviour = ImageResizeBehaviour.DEFAULT,
    image_format: ImageFormat = ImageFormat.DEFAULT,
    focus_area: ImageFocusArea = ImageFocusArea.DEFAULT,
    background_color: Optional[str] = None,
) -> str:
    """Render an ``<img>`` tag for an asset included with ``doc``.

    The asset is resolved in the document's own locale. ``alt`` defaults to
    the asset title. Returns an empty string when the asset is not included
    or has no file for the locale.
    """
    asset = get_included_asset(doc, asset_id)
    if asset is None:
        return ""

    locale = _metadata(doc).get(keys.ENTRY_LOCALE, "")
    src = image_url(
        asset,
        locale,
        width=width,
        height=height,
        quality=quality,
        corner_radius=corner_radius,
        resize_behaviour=resize_behaviour,
        image_format=image_format,
        focus_area=focus_area,
        background_color=background_color,
    )
    if src is None:
        return ""

    if alt is None:
        alt = asset.title(locale) or ""

    attrs = [f'src="{html.escape(src)}"', f'alt="{html.escape(alt)}"']
    if height is not None:
        attrs.append(f'height="{int(height)}"')
    if width is not None:
        attrs.append(f'width="{int(width)}"')
    return f"<img {' '.join(attrs)} />"
