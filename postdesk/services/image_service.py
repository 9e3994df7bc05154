import logging
import re
from pathlib import Path
from typing import Optional, Tuple

from postdesk.services.content_parser import extract_code_blocks

logger = logging.getLogger(__name__)

_OBSIDIAN_PATTERN = re.compile(r"!\[\[([^\]]+\.(?:png|jpg|jpeg|gif|svg|webp))\]\]")
_ABSOLUTE_PATH_PATTERN = re.compile(r"!\[\s*(.*?)\s*\]\(\s*/img/([^)\s]+)\s*\)")


def get_image(image_path: str, root: Path | str) -> Tuple[Optional[bytes], Optional[str]]:
    """
    Read an image below ``root``; paths escaping it are treated as missing
    """
    root = Path(root).resolve()
    try:
        path = (root / image_path).resolve()
        if not path.is_relative_to(root):
            logger.warning(f"Rejected image path outside {root}: {image_path}")
            return None, None
        image_data = path.read_bytes()
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        logger.warning(f"Image not found: {image_path}")
        return None, None
    except OSError as e:
        logger.error(f"Error reading image {image_path}: {e}")
        return None, None

    if not image_data:
        logger.warning(f"Image is empty: {image_path}")
        return None, None

    return image_data, get_content_type_from_filename(image_path)


def get_content_type_from_filename(filename: str) -> str:
    """
    Determine content type from file extension
    """
    filename = filename.lower()
    if filename.endswith((".jpg", ".jpeg")):
        return "image/jpeg"
    elif filename.endswith(".png"):
        return "image/png"
    elif filename.endswith(".gif"):
        return "image/gif"
    elif filename.endswith(".svg"):
        return "image/svg+xml"
    elif filename.endswith(".webp"):
        return "image/webp"
    else:
        return "application/octet-stream"


def process_image_references(content: str, base_url: str) -> str:
    """
    Point markdown image references at the API image endpoint.
    Lines inside fenced code blocks are left alone.
    """
    # Same line numbering as extract_code_blocks: split on "\n" only
    lines = content.split("\n")
    fenced = set()
    for block in extract_code_blocks(content):
        end = block.end_line if block.closed else len(lines)
        fenced.update(range(block.start_line, end + 1))

    for number, line in enumerate(lines, start=1):
        if number in fenced:
            continue
        line = _OBSIDIAN_PATTERN.sub(lambda m: f"![]({base_url}/{m.group(1)})", line)
        line = _ABSOLUTE_PATH_PATTERN.sub(
            lambda m: f"![{m.group(1)}]({base_url}/{m.group(2)})", line
        )
        lines[number - 1] = line
    return "\n".join(lines)
