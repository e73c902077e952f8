"""
Allow-list sanitizer for SVG markup returned by the model.

The markup is parsed with `defusedxml` (no entity expansion, no external DTD)
and rebuilt keeping only known drawing, styling and animation elements.
Event handler attributes, non-fragment links and external CSS references are
dropped before anything is handed to a renderer.
"""
import re
import xml.etree.ElementTree as ET

import structlog
from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

logger = structlog.get_logger()

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

ALLOWED_TAGS = frozenset({
    "svg", "g", "defs", "symbol", "use", "title", "desc", "style",
    "path", "rect", "circle", "ellipse", "line", "polyline", "polygon",
    "text", "tspan", "textPath",
    "linearGradient", "radialGradient", "stop", "pattern", "clipPath", "mask",
    "filter", "feGaussianBlur", "feOffset", "feBlend", "feColorMatrix", "feComposite",
    "feFlood", "feMerge", "feMergeNode", "feMorphology", "feTurbulence", "feDisplacementMap",
    "feDropShadow",
    "animate", "animateTransform", "animateMotion", "mpath", "set",
})

ALLOWED_ATTRIBUTES = frozenset({
    # structure
    "id", "class", "style", "viewBox", "preserveAspectRatio", "version", "width", "height",
    "x", "y", "x1", "y1", "x2", "y2", "cx", "cy", "r", "rx", "ry", "fx", "fy",
    "d", "points", "transform", "href", "pathLength", "role", "aria-label", "aria-hidden",
    # paint
    "fill", "fill-opacity", "fill-rule", "stroke", "stroke-width", "stroke-opacity",
    "stroke-linecap", "stroke-linejoin", "stroke-dasharray", "stroke-dashoffset",
    "stroke-miterlimit", "opacity", "color", "display", "visibility", "overflow",
    "clip-path", "clip-rule", "mask", "filter", "mix-blend-mode", "vector-effect",
    # gradients, patterns, filters
    "offset", "stop-color", "stop-opacity", "gradientUnits", "gradientTransform",
    "spreadMethod", "patternUnits", "patternContentUnits", "patternTransform",
    "clipPathUnits", "maskUnits", "maskContentUnits", "filterUnits", "primitiveUnits",
    "in", "in2", "result", "stdDeviation", "dx", "dy", "mode", "type", "values",
    "operator", "k1", "k2", "k3", "k4", "radius", "baseFrequency", "numOctaves", "seed",
    "scale", "xChannelSelector", "yChannelSelector", "flood-color", "flood-opacity",
    # text
    "font-family", "font-size", "font-weight", "font-style", "text-anchor",
    "dominant-baseline", "letter-spacing", "startOffset",
    # animation
    "attributeName", "attributeType", "from", "to", "by", "begin", "dur", "end",
    "repeatCount", "repeatDur", "fill", "calcMode", "keyTimes", "keySplines",
    "keyPoints", "rotate", "path", "additive", "accumulate", "restart", "min", "max",
})

UNSAFE_VALUE = re.compile(r"^\s*(?:javascript|vbscript|data)\s*:", re.IGNORECASE)
CSS_IMPORT = re.compile(r"@import[^;]*;?", re.IGNORECASE)
CSS_EXTERNAL_URL = re.compile(r"url\(\s*(?!['\"]?#)[^)]*\)", re.IGNORECASE)
CSS_EXPRESSION = re.compile(r"expression\s*\(|javascript\s*:", re.IGNORECASE)

ANIMATION_TAGS = frozenset({"animate", "animateTransform", "animateMotion", "set"})
ANIMATION_VALUE_ATTRIBUTES = ("values", "from", "to", "by")


class UnsafeMarkupError(ValueError):
    """The markup could not be parsed into an SVG document."""


def _split_tag(tag):
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


def _clean_css(css: str) -> str:
    css = CSS_IMPORT.sub("", css)
    css = CSS_EXTERNAL_URL.sub("none", css)
    return CSS_EXPRESSION.sub("", css)


def _is_allowed_element(element) -> bool:
    if not isinstance(element.tag, str):
        # comments and processing instructions
        return False
    namespace, local = _split_tag(element.tag)
    if namespace not in (None, SVG_NS) or local not in ALLOWED_TAGS:
        return False
    if local in ANIMATION_TAGS:
        return _is_safe_animation(element)
    return True


def _is_safe_animation(element) -> bool:
    """
    Animations may not retarget links or event handlers, and every animated
    value must pass the same checks as a static attribute.
    """
    target = element.get("attributeName", "").strip().lower()
    target = target.split(":", 1)[-1]
    if target == "href" or target.startswith("on"):
        return False
    for name in ANIMATION_VALUE_ATTRIBUTES:
        entries = element.get(name, "").split(";")
        if any(UNSAFE_VALUE.match(entry) for entry in entries):
            return False
    return True


def _clean_attributes(element):
    for name in list(element.attrib):
        namespace, local = _split_tag(name)
        value = element.attrib[name]
        keep = (
            namespace in (None, XLINK_NS)
            and local in ALLOWED_ATTRIBUTES
            and not local.lower().startswith("on")
            and not UNSAFE_VALUE.match(value)
        )
        if keep and local == "href":
            keep = value.strip().startswith("#")
        if keep and local == "style":
            element.attrib[name] = _clean_css(value)
        if not keep:
            logger.debug("Dropped SVG attribute", attribute=local, element=_split_tag(element.tag)[1])
            del element.attrib[name]


def _keep_tail(parent, previous, child):
    if not child.tail:
        return
    if previous is None:
        parent.text = (parent.text or "") + child.tail
    else:
        previous.tail = (previous.tail or "") + child.tail


def _clean_tree(parent):
    previous = None
    for child in list(parent):
        if not _is_allowed_element(child):
            logger.debug("Dropped SVG element", element=str(child.tag))
            _keep_tail(parent, previous, child)
            parent.remove(child)
            continue
        previous = child
        _clean_attributes(child)
        if _split_tag(child.tag)[1] == "style" and child.text:
            child.text = _clean_css(child.text)
        _clean_tree(child)


def sanitize_svg(markup: str) -> str:
    """
    Rebuilds model-returned SVG markup using only allow-listed elements and attributes.
    Args:
        markup (str): SVG document text, root element `<svg>`.
    Returns:
        str: Serialized, sanitized SVG document.
    Raises:
        UnsafeMarkupError: If the markup is not well-formed XML, uses forbidden DTD
        features, or its root is not `<svg>`.
    """
    try:
        root = fromstring(markup)
    except (ET.ParseError, DefusedXmlException) as e:
        raise UnsafeMarkupError(f"SVG markup could not be parsed: {e}") from e

    namespace, local = _split_tag(root.tag)
    if local != "svg" or namespace not in (None, SVG_NS):
        raise UnsafeMarkupError(f"Root element must be <svg>, got <{local}>")

    _clean_attributes(root)
    _clean_tree(root)
    return ET.tostring(root, encoding="unicode")
