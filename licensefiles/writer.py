"""Serialize a manifest to XML or JSON."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from pathlib import Path

from licensefiles.models import Manifest, ManifestEntry

FORMATS = ("xml", "json")

# XML attribute name -> ManifestEntry field
_XML_ATTRS = (
    ("product", "product"),
    ("subproduct", "sub_product"),
    ("version", "version"),
    ("type", "license_type"),
    ("filename", "license_filename"),
    ("status", "status"),
)


def entry_to_dict(entry: ManifestEntry) -> dict:
    return {
        "dependency": entry.dependency,
        "product": entry.product,
        "sub_product": entry.sub_product,
        "version": entry.version,
        "license_type": entry.license_type,
        "license_filename": entry.license_filename,
        "status": entry.status,
    }


def to_xml(manifest: Manifest, xsl: str | None = None) -> str:
    """Render the manifest as ``<licenses><license .../></licenses>``.

    Empty attributes are omitted. When *xsl* is given the document starts with
    an ``xml-stylesheet`` processing instruction referencing it.
    """
    root = ET.Element("licenses")
    for entry in manifest.entries:
        attrs = {}
        for attr, field_name in _XML_ATTRS:
            value = getattr(entry, field_name)
            if value:
                attrs[attr] = str(value)
        ET.SubElement(root, "license", attrs)
    ET.indent(root)

    header = '<?xml version="1.0" encoding="utf-8"?>\n'
    if xsl:
        pi = ET.ProcessingInstruction("xml-stylesheet", f'type="text/xsl" href="{xsl}"')
        header += ET.tostring(pi, encoding="unicode") + "\n"
    return header + ET.tostring(root, encoding="unicode") + "\n"


def to_json(manifest: Manifest) -> str:
    return json.dumps([entry_to_dict(e) for e in manifest.entries], indent=2) + "\n"


def write_manifest(
    manifest: Manifest, path: Path, fmt: str = "xml", xsl: str | None = None
) -> Path:
    if fmt == "xml":
        text = to_xml(manifest, xsl)
    elif fmt == "json":
        text = to_json(manifest)
    else:
        raise ValueError(f"unsupported manifest format: {fmt}")
    path.write_text(text, encoding="utf-8")
    return path
