import re

from ..config.constants import CSS_ANIMATION_MARKERS, RAW_PREVIEW_CHARS, SMIL_ANIMATION_MARKERS, SVG_ROOT_TAG

LEADING_FENCE = re.compile(r"^```(?:svg|xml)?\s*", re.IGNORECASE)
TRAILING_FENCE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """
    Removes a markdown code fence wrapped around the model's reply.
    Args:
        text (str): Raw model text.
    Returns:
        str: The unwrapped content without leading or trailing whitespace.
    """
    text = (text or "").strip()
    text = LEADING_FENCE.sub("", text)
    text = TRAILING_FENCE.sub("", text)
    return text.strip()


def is_svg_markup(text: str) -> bool:
    return text.startswith(SVG_ROOT_TAG)


def has_animation(svg: str) -> bool:
    """
    Checks for CSS keyframes or SMIL animation elements in the markup.
    """
    return any(marker in svg for marker in CSS_ANIMATION_MARKERS + SMIL_ANIMATION_MARKERS)


def raw_preview(text: str, limit: int = RAW_PREVIEW_CHARS) -> str:
    return text[:limit]
