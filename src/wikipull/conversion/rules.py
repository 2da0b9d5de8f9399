"""Declarative selector rules for MediaWiki page cleanup.

Pure data. Selectors are CSS strings evaluated by BeautifulSoup's
``select()``; fragments are matched against individual class tokens.
"""

# Markers identifying a genuine rendered wiki page (any one suffices)
VALIDITY_MARKERS = [
    "#mw-content-text",
    ".mw-parser-output",
    "#firstHeading",
    "#mw-head",
]

# Primary content container, then fallbacks in priority order
CONTENT_SELECTORS = [
    "#mw-content-text .mw-parser-output",
    ".mw-parser-output",
    "#mw-content-text",
    ".mw-body-content",
    "#content .mw-content-ltr",
]

# Subtrees deleted by the sanitizer. Removals are independent of each other.
REMOVE_SELECTORS = [
    ".mw-editsection",  # edit-section markers
    ".navbox",  # navigation boxes
    ".metadata",
    ".stub",
    ".ambox",  # message boxes
    ".hatnote",  # disambiguation notes
    ".mw-jump-link",
    ".printfooter",
    ".catlinks",
    "#toc + .mw-empty-elt",
    "script",
    "style",
    'link[rel="mw-deduplicated-inline-style"]',
    ".reference .mw-reflink-text",
    ".mw-cite-backlink",  # citation backlinks
    ".toctogglespan",  # collapsible TOC toggle
    ".toctogglelabel",
    ".toctogglecheckbox",
    ".searchaux",
    ".sprite-file",
    ".pixel-image",
    ".cite-bracket",
    ".mw-parser-output > .mw-empty-elt",
    ".mw-references-wrap",
    ".reflist",
    ".citation",
    ".noprint",
    ".mw-collapsible-toggle",  # collapsible toggle controls
    ".wikitable-caption",
    ".mw-headline-anchor",
    ".mw-reference-text",
    ".NavFrame",
    ".NavHead",
    ".collapseButton",
    "sup.reference",
    "span.mw-reflink-text",
    ".mw-headline-number",
    ".nomobile",
]

# Structures that always survive sanitization on pattern match alone
PRESERVE_SELECTORS = [
    ".infobox",
    ".thumbinner",
    ".gallery",
    "#toc",
    ".wikitable",
    ".mw-highlight",
]

# Leaf tags removed when they end up with neither children nor text
EMPTY_LEAF_TAGS = ["p", "div", "span"]

# Class fragments kept when markup is simplified; anything else is dropped
KEEP_CLASS_FRAGMENTS = (
    "infobox",
    "wikitable",
    "thumb",
    "gallery",
    "toc",
    "mw-parser-output",
    "mw-headline",
    "mw-highlight",
    "reference",
    "navbox",
    "navframe",
    "ambox",
    "mbox",
    "messagebox",
    "template",
)

# Class names kept only on exact match
KEEP_CLASS_NAMES = ("fn", "mw-selflink", "selflink")

# Attributes dropped from tables during simplification
TABLE_PRESENTATION_ATTRS = ("style", "border", "cellpadding", "cellspacing")

# Markdown rule engine: class fragments per node kind
CHROME_CLASS_FRAGMENTS = ("navbox", "navframe", "ambox", "mbox", "messagebox", "template")
FOOTNOTE_CLASS_FRAGMENTS = ("reference", "cite")
IMAGE_BLOCK_CLASSES = ("thumb", "thumbinner")
EDIT_SECTION_CLASS = "mw-editsection"
INFOBOX_CLASS = "infobox"

# Table of contents containers
TOC_SELECTORS = ["#toc", ".toc"]
TOC_MAX_LEVEL = 6

# Candidate wrappers removed together with a too-small image, outermost first
SMALL_IMAGE_WRAPPERS = [".gallerybox", ".thumb", ".thumbinner", "figure"]

# Candidate caption locations inside an image wrapper
IMAGE_CAPTION_SELECTORS = [".thumbcaption", "figcaption", ".gallerytext"]

# Candidate title locations inside an info box, tried in order
INFOBOX_TITLE_SELECTORS = [".infobox-title", ".fn", "caption", "th"]

# Link classification
EDIT_LINK_MARKERS = ("action=edit", "redlink=1")
UTILITY_NAMESPACES = ("Special:", "File:", "Category:")
UTILITY_LINK_CLASSES = ("mw-cite-backlink", "mw-reflink-text")
SELF_LINK_CLASS = "mw-selflink"

# Full-width CJK punctuation that must not carry adjacent spaces
CJK_PUNCTUATION = "，。！？；："
