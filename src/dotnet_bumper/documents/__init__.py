"""Format-aware document reading, token location and patching."""

from .candidates import Candidate, TokenSelector, find_candidates, resolve_overlaps
from .dockerfile_locator import DockerfileLocator
from .json_locator import JsonLocator
from .locator import DocumentLocator, DocumentSyntaxError, ScalarSite
from .metadata import FileMetadata, read_document
from .patch import apply_edits, write_document
from .source import DocumentParseFailure, SourceDocument, load_document, parse_text
from .spans import EditSpan, SourceSpan
from .xml_locator import XmlLocator
from .yaml_locator import YamlLocator

__all__ = [
    "Candidate",
    "DockerfileLocator",
    "DocumentLocator",
    "DocumentParseFailure",
    "DocumentSyntaxError",
    "EditSpan",
    "FileMetadata",
    "JsonLocator",
    "ScalarSite",
    "SourceDocument",
    "SourceSpan",
    "TokenSelector",
    "XmlLocator",
    "YamlLocator",
    "apply_edits",
    "find_candidates",
    "load_document",
    "parse_text",
    "read_document",
    "resolve_overlaps",
    "write_document",
]
