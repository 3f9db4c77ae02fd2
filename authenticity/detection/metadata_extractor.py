"""
Embedded image metadata extraction.

Functions:
  - extract_metadata: Flattens EXIF, GPS, XMP and text chunks of an image into one bag.
  - log_metadata_debug: Dumps the interesting tag groups of a bag at DEBUG level.

The bag uses the tag vocabulary the classifier reads (see TAG_ALIASES), and its
values are JSON-safe so they can be returned to the browser untouched.
"""

import io
import logging
import math
from types import MappingProxyType
from typing import Any, Mapping, Optional
from xml.etree.ElementTree import Element, ParseError

import pillow_heif
from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeElementTree
from PIL import ExifTags, Image
from PIL.TiffImagePlugin import IFDRational

from authenticity.detection.constants import TAG_ALIASES

logger = logging.getLogger(__name__)

# Lets Image.open read HEIC / HEIF camera originals and their EXIF
pillow_heif.register_heif_opener()

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
XML_NS = "http://www.w3.org/XML/1998/namespace"

# dc:creator keeps its lowercase local name in XMP
XMP_TAG_ALIASES = {"creator": "Creator"}

# Keys Pillow puts in `img.info` that describe the container, not the content
SKIPPED_INFO_KEYS = {"exif", "xmp", "XML:com.adobe.xmp", "icc_profile"}

DEBUG_GROUPS = {
    "Camera Information": ["Make", "Model", "LensMake", "LensModel", "BodySerialNumber"],
    "Software Information": ["Software", "ProcessingSoftware", "CreatorTool", "HostComputer", "Creator"],
    "Date & Time": ["DateTimeOriginal", "CreateDate", "ModifyDate", "MetadataDate"],
    "GPS Information": ["GPSLatitude", "GPSLongitude", "GPSAltitude", "GPSDateStamp"],
    "Image Properties": ["ExifImageWidth", "ExifImageHeight", "Orientation", "XResolution", "YResolution", "ColorSpace"],
    "Camera Settings": ["ISO", "ExposureTime", "FNumber", "FocalLength", "Flash", "WhiteBalance", "MeteringMode"],
    "Edit History & Flags": ["History", "DerivedFrom", "DocumentID", "InstanceID", "OriginalDocumentID"],
}


def _to_plain(value: Any) -> Any:
    """Convert Pillow tag values (rationals, bytes, tuples) to JSON-safe types."""
    if isinstance(value, IFDRational):
        # a zero denominator yields nan, which JSON cannot carry
        number = float(value)
        return None if math.isnan(number) else number
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").strip("\x00").strip()
    if isinstance(value, str):
        return value.strip("\x00").strip()
    if isinstance(value, (bool, int, float)) or value is None:
        return value
    if isinstance(value, (tuple, list)):
        return [_to_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_plain(v) for k, v in value.items()}
    return str(value)


def _put(metadata: dict, name: str, value: Any) -> None:
    """Store a tag under its classifier name; the first source to provide it wins."""
    name = TAG_ALIASES.get(name, name)
    value = _to_plain(value)
    if value is None or value == "":
        return
    metadata.setdefault(name, value)


def _dms_to_decimal(dms: Any, ref: Any) -> Optional[float]:
    try:
        degrees, minutes, seconds = (float(part) for part in dms)
    except (TypeError, ValueError):
        return None
    decimal = degrees + minutes / 60 + seconds / 3600
    if str(ref).upper() in ("S", "W"):
        decimal = -decimal
    return round(decimal, 6)


def _read_exif(img: Image.Image, metadata: dict) -> None:
    exif = img.getexif()
    if not exif:
        return

    for tag, value in exif.items():
        if tag in (ExifTags.IFD.Exif, ExifTags.IFD.GPSInfo):
            continue
        _put(metadata, ExifTags.TAGS.get(tag, str(tag)), value)

    for tag, value in exif.get_ifd(ExifTags.IFD.Exif).items():
        _put(metadata, ExifTags.TAGS.get(tag, str(tag)), value)

    gps = exif.get_ifd(ExifTags.IFD.GPSInfo)
    for tag, value in gps.items():
        _put(metadata, ExifTags.GPSTAGS.get(tag, str(tag)), value)

    if gps:
        lat = _dms_to_decimal(metadata.get("GPSLatitude"), metadata.get("GPSLatitudeRef"))
        lon = _dms_to_decimal(metadata.get("GPSLongitude"), metadata.get("GPSLongitudeRef"))
        if lat is not None and lon is not None:
            metadata.setdefault("latitude", lat)
            metadata.setdefault("longitude", lon)


def _xmp_text(element: Element) -> str:
    """Flatten a property element (plain, rdf:Seq/Bag/Alt or structure) to text."""
    pieces = []
    for node in element.iter():
        if node.text and node.text.strip():
            pieces.append(node.text.strip())
        for attr, value in node.attrib.items():
            if attr.startswith(f"{{{RDF_NS}}}") or attr.startswith(f"{{{XML_NS}}}"):
                continue
            if value.strip():
                pieces.append(value.strip())
    return ", ".join(pieces)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_xmp(packet: Any) -> dict:
    """Parse an XMP packet into a flat {local name: text} mapping."""
    if isinstance(packet, bytes):
        packet = packet.decode("utf-8", errors="ignore")
    if not isinstance(packet, str):
        return {}

    start = packet.find("<x:xmpmeta")
    end_tag = "</x:xmpmeta>"
    if start == -1:
        start = packet.find("<rdf:RDF")
        end_tag = "</rdf:RDF>"
    end = packet.find(end_tag)
    if start == -1 or end == -1:
        return {}

    try:
        root = SafeElementTree.fromstring(packet[start:end + len(end_tag)])
    except (ParseError, DefusedXmlException) as e:
        logger.warning(f"[EXIF] Malformed XMP packet ignored: {e}")
        return {}

    rdf = root if root.tag == f"{{{RDF_NS}}}RDF" else root.find(f"{{{RDF_NS}}}RDF")
    if rdf is None:
        return {}

    result = {}
    for desc in rdf.findall(f"{{{RDF_NS}}}Description"):
        for attr, value in desc.attrib.items():
            if attr.startswith(f"{{{RDF_NS}}}"):
                continue
            name = _local_name(attr)
            result.setdefault(XMP_TAG_ALIASES.get(name, name), value)
        for child in desc:
            name = _local_name(child.tag)
            text = _xmp_text(child)
            if text:
                result.setdefault(XMP_TAG_ALIASES.get(name, name), text)
    return result


def extract_metadata(data: bytes) -> Optional[Mapping[str, Any]]:
    """
    Extract the embedded metadata of an image as a read-only flat mapping.

    Sources, in precedence order: EXIF base IFD, Exif sub-IFD, GPS IFD, XMP
    packet, then textual container chunks (PNG tEXt/iTXt, e.g. a generator's
    "parameters"). Returns None when nothing is found or the bytes cannot be
    decoded.
    """
    metadata: dict = {}
    try:
        with Image.open(io.BytesIO(data)) as img:
            _read_exif(img, metadata)

            packet = img.info.get("xmp") or img.info.get("XML:com.adobe.xmp")
            if packet:
                for name, value in parse_xmp(packet).items():
                    _put(metadata, name, value)

            for key, value in img.info.items():
                if isinstance(key, str) and key not in SKIPPED_INFO_KEYS and isinstance(value, str):
                    _put(metadata, key, value)
    except Exception as e:
        logger.warning(f"[EXIF] Metadata extraction failed: {e}")
        return None

    if not metadata:
        logger.info("[EXIF] No metadata found in image")
        return None

    return MappingProxyType(metadata)


def log_metadata_debug(metadata: Optional[Mapping[str, Any]], filename: str) -> None:
    """Log the grouped metadata fields of an image. Only runs when DEBUG logging is active."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    metadata = metadata or {}
    logger.debug(f"[EXIF] Debug info for: {filename}")
    for group, keys in DEBUG_GROUPS.items():
        fields = ", ".join(f"{key}={metadata.get(key, 'N/A')}" for key in keys)
        logger.debug(f"[EXIF]   {group}: {fields}")
    logger.debug(f"[EXIF]   Complete raw metadata: {dict(metadata)}")
