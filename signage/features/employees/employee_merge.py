"""
Employee Image Merge

Rewrites the image cell of employee sheet rows so photos stored on Drive
are served through the backend's image proxy.

Author: Signage Development Team
"""

import re
from typing import Dict, Iterable, List, Optional

from signage.shared.config import proxy_url

DRIVE_FILE_ID_PATTERN = re.compile(r"/d/([a-zA-Z0-9_-]+)/")
EMPLOYEE_IMAGES_PATH = "/api/employee-images"
IMAGE_URL_COLUMN = 2


def extract_drive_file_id(url: Optional[str]) -> Optional[str]:
    """Return the file id in a Drive share link (".../d/<id>/..."), if any."""
    if not url:
        return None
    match = DRIVE_FILE_ID_PATTERN.search(url)
    return match.group(1) if match else None


def build_image_map(media: Iterable, base_url: str) -> Dict[str, str]:
    """Map image file ids to their proxied URLs. Videos are skipped."""
    return {
        item.id: proxy_url(base_url, EMPLOYEE_IMAGES_PATH, item.id)
        for item in media
        if item.type == "image"
    }


def merge_employee_rows(rows: List[List[str]], image_map: Dict[str, str],
                        url_column: int = IMAGE_URL_COLUMN) -> List[List[str]]:
    """
    Replace Drive share links with proxy URLs.

    The header row is passed through. A data row's URL cell becomes the
    proxied URL when a file id can be extracted and is in image_map;
    otherwise the original cell is kept. Input rows are not modified.
    """
    merged = []
    for index, row in enumerate(rows):
        row = list(row)
        if index > 0 and len(row) > url_column:
            file_id = extract_drive_file_id(row[url_column])
            if file_id and file_id in image_map:
                row[url_column] = image_map[file_id]
        merged.append(row)
    return merged
