"""
Test Employee Highlights

This module tests the employee section including:
- Drive link id extraction
- Row merge with proxied image URLs
- The employees endpoint
- The employee image proxy
"""

import copy

from signage.features.employees.employee_merge import (
    build_image_map,
    extract_drive_file_id,
    merge_employee_rows,
)
from tests.conftest import BASE_URL, descriptor, metadata

HEADER = ["Employee name", "Employee detail", "Employee image url"]

RAW_ROWS = [
    HEADER,
    ["Ada", "Engineering lead", "https://example.com/ada.png"],
    ["Grace", "Joined in March", "https://drive.google.com/file/d/XYZ/view"],
    ["Linus", "Ops", "https://drive.google.com/file/d/MISSING123/view?usp=sharing"],
]


def test_extract_id_from_share_link():
    assert extract_drive_file_id("https://drive.google.com/file/d/ABC123/view") == "ABC123"


def test_extract_id_keeps_dashes_and_underscores():
    assert extract_drive_file_id("https://drive.google.com/file/d/a-B_9/view") == "a-B_9"


def test_extract_id_without_pattern():
    assert extract_drive_file_id("https://example.com/photo.jpg") is None
    assert extract_drive_file_id("") is None
    assert extract_drive_file_id(None) is None


def test_build_image_map_skips_videos():
    media = [descriptor("IMG1", "a.jpg"), descriptor("VID1", "clip.mp4", "video")]
    assert build_image_map(media, BASE_URL) == {
        "IMG1": f"{BASE_URL}/api/employee-images/IMG1",
    }


def test_merge_rewrites_known_ids_only():
    image_map = {"XYZ": f"{BASE_URL}/api/employee-images/XYZ"}

    merged = merge_employee_rows(RAW_ROWS, image_map)

    assert merged[0] == HEADER
    assert merged[1][2] == "https://example.com/ada.png"
    assert merged[2] == ["Grace", "Joined in March", f"{BASE_URL}/api/employee-images/XYZ"]
    assert merged[3][2] == RAW_ROWS[3][2]


def test_merge_is_idempotent_and_does_not_mutate_input():
    image_map = {"XYZ": f"{BASE_URL}/api/employee-images/XYZ"}
    original = copy.deepcopy(RAW_ROWS)

    first = merge_employee_rows(RAW_ROWS, image_map)
    second = merge_employee_rows(RAW_ROWS, image_map)

    assert first == second
    assert RAW_ROWS == original


def test_merge_never_treats_header_as_data():
    rows = [["Name", "Detail", "https://drive.google.com/file/d/XYZ/view"]]
    assert merge_employee_rows(rows, {"XYZ": "proxied"}) == rows


def test_merge_leaves_short_rows_alone():
    rows = [HEADER, ["Solo"]]
    assert merge_employee_rows(rows, {}) == rows


def test_employees_endpoint_rewrites_drive_links(test_client, sheet_reader, drive_media):
    sheet_reader.sheets[("emp-sheet", "Staff!A1:C")] = RAW_ROWS
    drive_media.folders["emp-folder"] = [descriptor("XYZ", "grace.jpg")]

    response = test_client.get("/api/employees")

    assert response.status_code == 200
    rows = response.json()
    assert rows[0] == HEADER
    assert rows[2][2] == f"{BASE_URL}/api/employee-images/XYZ"
    assert rows[3][2] == RAW_ROWS[3][2]
    assert drive_media.list_calls == ["emp-folder"]


def test_employees_endpoint_folder_failure(test_client, sheet_reader):
    sheet_reader.sheets[("emp-sheet", "Staff!A1:C")] = RAW_ROWS

    response = test_client.get("/api/employees")

    assert response.status_code == 500
    assert "emp-folder" in response.json()["error"]


def test_employee_image_stream_headers(test_client, drive_media, modified_at):
    drive_media.files["XYZ"] = (metadata("XYZ", "grace.jpg", "image/jpeg"), b"\xff\xd8jpegdata")

    response = test_client.get("/api/employee-images/XYZ")

    assert response.status_code == 200
    assert response.content == b"\xff\xd8jpegdata"
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["content-disposition"] == 'inline; filename="grace.jpg"'
    assert response.headers["cache-control"] == "public, max-age=31536000, immutable"
    assert response.headers["etag"] == f"XYZ-{int(modified_at.timestamp() * 1000)}"


def test_employee_image_exposes_headers_cross_origin(test_client, drive_media):
    drive_media.files["XYZ"] = (metadata("XYZ", "grace.jpg", "image/jpeg"), b"jpegdata")

    response = test_client.get("/api/employee-images/XYZ", headers={"Origin": "http://kiosk.test"})

    assert response.headers["access-control-allow-origin"] == "*"
    exposed = response.headers["access-control-expose-headers"]
    assert "ETag" in exposed
    assert "Content-Disposition" in exposed
    assert drive_media.streams[0].closed


def test_employee_image_missing_file(test_client):
    response = test_client.get("/api/employee-images/unknown")
    assert response.status_code == 500
    assert "unknown" in response.json()["error"]
