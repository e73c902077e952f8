import pytest

from svgrelay.utils.svg_utils import has_animation, is_svg_markup, raw_preview, strip_code_fences

SVG = '<svg viewBox="0 0 10 10"><rect width="10" height="10"/></svg>'


@pytest.mark.parametrize("wrapped", [
    "```svg\n" + SVG + "\n```",
    "```xml\n" + SVG + "\n```",
    "```SVG " + SVG + "```",
    "```\n" + SVG + "\n```\n",
    "\n\n  " + SVG + "  \n",
])
def test_strip_code_fences(wrapped):
    assert strip_code_fences(wrapped) == SVG


def test_strip_code_fences_keeps_inner_backticks():
    text = "<svg><text>`code`</text></svg>"
    assert strip_code_fences(text) == text


def test_strip_code_fences_handles_none():
    assert strip_code_fences(None) == ""


def test_is_svg_markup():
    assert is_svg_markup(SVG)
    assert not is_svg_markup("<?xml version='1.0'?>" + SVG)
    assert not is_svg_markup("Here is your SVG: " + SVG)


def test_has_animation():
    assert has_animation("<svg><style>@keyframes pulse {}</style></svg>")
    assert has_animation('<svg><rect><animate attributeName="x" dur="1s"/></rect></svg>')
    assert has_animation('<svg><g><animateTransform type="rotate"/></g></svg>')
    assert not has_animation(SVG)


def test_raw_preview():
    assert raw_preview("a" * 500) == "a" * 300
    assert raw_preview("short") == "short"
