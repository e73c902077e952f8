MODEL_NAME = "gemini-2.0-flash-lite"
DEFAULT_UI_URL = "http://localhost:4200"
PROCESS_ROUTE = "/api/process"

# Raised from the framework default so inline base64 images fit in one body
MAX_UPLOAD_MB = 20

RAW_PREVIEW_CHARS = 300
SVG_ROOT_TAG = "<svg"

# Markers that count as animation in a model reply
CSS_ANIMATION_MARKERS = ("@keyframes",)
SMIL_ANIMATION_MARKERS = ("<animate", "<animateTransform", "<animateMotion", "<set")

REQUIRED_FIELDS = ("imageData", "mimeType")

IMAGE_PROMPT = "Create the animated SVG for this image."

SVG_ANIMATION_PROMPT = """You are an expert SVG artist and animator.
Analyze the provided image and create a beautiful, self-contained animated SVG inspired by its content, colors, shapes, and mood.

Requirements:
- Output a single complete SVG element with a viewBox (e.g. viewBox="0 0 800 600")
- Use CSS @keyframes animations defined inside a <style> block within the SVG
- Faithfully reflect the key visual elements, palette, and atmosphere of the image
- Make the animation smooth, creative, and visually appealing
- All styles must be inline inside the SVG, no external resources

CRITICAL: Reply with ONLY the raw SVG markup. Start with <svg and end with </svg>. No markdown, no code fences, no explanation."""
