"""
Document loader for the Match Service.
Turns uploaded resumes and job descriptions into plain-text Documents.
"""

from pathlib import Path
from typing import Any, Iterable

import pdfplumber
import yaml
from loguru import logger

from shared.exceptions import DocumentLoadError
from shared.models import Document

YAML_SUFFIXES = {".yaml", ".yml"}


def _extract_pdf_text(path: Path) -> str:
    """Join the text of every page with single spaces."""
    try:
        with pdfplumber.open(path) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        raise DocumentLoadError(f"Failed to parse PDF {path.name}: {e}") from e
    return " ".join(pages)


def _flatten_yaml(node: Any, depth: int = 1) -> list[str]:
    """Render nested YAML (e.g. a structured CV) as headings and bullet lines."""
    lines: list[str] = []
    if isinstance(node, dict):
        for key, value in node.items():
            title = str(key).replace("_", " ").title()
            if isinstance(value, (dict, list)):
                lines.append(f"\n{'#' * min(depth, 6)} {title}")
                lines.extend(_flatten_yaml(value, depth + 1))
            elif value not in (None, ""):
                lines.append(f"**{title}:** {value}")
    elif isinstance(node, list):
        for item in node:
            if isinstance(item, (dict, list)):
                lines.extend(_flatten_yaml(item, depth))
            elif item not in (None, ""):
                lines.append(f"- {item}")
    elif node not in (None, ""):
        lines.append(str(node))
    return lines


def _extract_yaml_text(path: Path) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"Invalid YAML in {path.name}: {e}") from e
    return "\n".join(_flatten_yaml(data)).strip()


def load_document(path: Path) -> Document:
    """
    Load one file as a Document named after the file.

    Raises:
        DocumentLoadError: if the file is missing, unreadable, or yields no text
    """
    path = Path(path)
    if not path.exists():
        raise DocumentLoadError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".pdf":
        text = _extract_pdf_text(path)
    elif suffix in YAML_SUFFIXES:
        text = _extract_yaml_text(path)
    else:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentLoadError(f"Could not read {path.name}: {e}") from e

    if not text.strip():
        raise DocumentLoadError(
            f"No text found in {path.name}. Please ensure it is a valid text-based file."
        )

    logger.info(f"Loaded {path.name} ({len(text)} chars)")
    return Document(display_name=path.name, text=text)


def load_documents(paths: Iterable[Path]) -> list[Document]:
    """Load several files, keeping their order."""
    return [load_document(Path(p)) for p in paths]
