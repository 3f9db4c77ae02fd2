"""
Fixed signature tables used by the EXIF authenticity heuristics.

Matching is lowercase substring, so every entry is stored lowercase.
"""

EDITING_SOFTWARE_HINTS = (
    "photoshop",
    "lightroom",
    "snapseed",
    "picsart",
    "vsco",
    "canva",
    "gimp",
    "pixelmator",
    "affinity",
    "sketch",
    "figma",
    "paint.net",
    "krita",
    "darktable",
    "capture one",
    "luminar",
    "on1",
    "dxo",
)

AI_GENERATION_HINTS = (
    "midjourney",
    "dall-e",
    "dalle",
    "stable diffusion",
    "firefly",
    "imagen",
    "leonardo",
    "nightcafe",
    "artbreeder",
)

NO_METADATA_REASON = "No EXIF metadata found; cannot verify camera origin."
NO_EDIT_SIGNS_REASON = "No obvious signs of editing were found in EXIF metadata."

# Pillow's EXIF tag names → the names the classifier reads
TAG_ALIASES = {
    "DateTime": "ModifyDate",
    "DateTimeDigitized": "CreateDate",
    "ISOSpeedRatings": "ISO",
    "PhotographicSensitivity": "ISO",
}
