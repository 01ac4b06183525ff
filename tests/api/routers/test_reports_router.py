"""Tests for reports router."""

import uuid

from patchpoint.exceptions import ImageUploadError
from patchpoint.services.address_service import ADDRESS_UNAVAILABLE


class TestReportsAuthentication:
    """Tests for reports endpoint authentication."""

    def test_list_reports_unauthenticated_allowed(self, unauthenticated_client):
        response = unauthenticated_client.get("/api/reports")

        assert response.status_code == 200

    def test_create_report_requires_auth(self, unauthenticated_client, mock_report_repo):
        response = unauthenticated_client.post("/api/reports", json={"gpsLat": 1, "gpsLon": 2})

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["code"] == "MISSING_TOKEN"
        mock_report_repo.create.assert_not_called()

    def test_device_endpoints_need_no_auth(self, unauthenticated_client, mock_report_repo, make_report):
        mock_report_repo.create.return_value = make_report()

        response = unauthenticated_client.post("/api/reports/device", json={"gps_lat": 1, "gps_lon": 2})

        assert response.status_code == 200


class TestListReportsEndpoint:
    """Tests for GET /api/reports."""

    def test_list_empty(self, client):
        response = client.get("/api/reports")

        assert response.status_code == 200
        assert response.json() == {"success": True, "reports": []}

    def test_list_uses_camel_case(self, client, mock_report_repo, make_report):
        report = make_report(address="MG Road", image_url="https://x/y.jpg")
        mock_report_repo.list_all.return_value = [report]

        response = client.get("/api/reports")

        item = response.json()["reports"][0]
        assert item["id"] == str(report.id)
        assert item["gpsLat"] == 12.9716
        assert item["gpsLon"] == 77.5946
        assert item["depthCm"] == 4.5
        assert item["imageUrl"] == "https://x/y.jpg"
        assert item["address"] == "MG Road"

    def test_list_backfills_in_same_response(self, client, mock_report_repo, mock_resolver, make_report):
        mock_report_repo.list_all.return_value = [make_report(address="-"), make_report()]
        mock_resolver.resolve.side_effect = ["1 Main St, Springfield", None]

        response = client.get("/api/reports")

        addresses = [r["address"] for r in response.json()["reports"]]
        assert addresses == ["1 Main St, Springfield", ADDRESS_UNAVAILABLE]
        assert mock_report_repo.update_address.await_count == 2


class TestCreateReportEndpoint:
    """Tests for POST /api/reports."""

    def test_create_report(self, client, mock_report_repo, mock_user, make_report):
        mock_report_repo.create.return_value = make_report(created_by=mock_user.id)

        response = client.post(
            "/api/reports",
            json={"gpsLat": 12.9716, "gpsLon": "77.5946", "depthCm": 4.5, "address": ""},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["report"]["createdBy"] == str(mock_user.id)
        kwargs = mock_report_repo.create.call_args.kwargs
        assert kwargs["created_by"] == mock_user.id
        assert kwargs["address"] is None

    def test_missing_latitude_rejected(self, client, mock_report_repo):
        response = client.post("/api/reports", json={"gpsLon": 77.5946})

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INVALID_COORDINATES"
        assert data["details"] == {"lat": None, "lon": "77.5946"}
        mock_report_repo.create.assert_not_called()

    def test_negative_depth_rejected(self, client, mock_report_repo):
        response = client.post("/api/reports", json={"gpsLat": 1, "gpsLon": 2, "depthCm": -3})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DEPTH"
        mock_report_repo.create.assert_not_called()


class TestDeviceReportEndpoints:
    """Tests for the sensor unit ingestion endpoints."""

    def test_device_json_geocodes(self, client, mock_report_repo, mock_resolver, make_report):
        mock_report_repo.create.return_value = make_report(address="1 Main St, Springfield")

        response = client.post(
            "/api/reports/device",
            json={"gps_lat": 12.97, "gps_lon": 77.59, "lidar_cm": 6.1, "timestamp": "2025-01-15T10:30:00Z"},
        )

        assert response.status_code == 200
        assert response.json()["report"]["address"] == "1 Main St, Springfield"
        mock_resolver.resolve.assert_awaited_once_with(12.97, 77.59)

    def test_device_json_bad_coordinates(self, client, mock_report_repo):
        response = client.post("/api/reports/device", json={"gps_lat": "abc", "gps_lon": 2})

        assert response.status_code == 400
        mock_report_repo.create.assert_not_called()

    def test_device_image(self, client, mock_report_repo, mock_image_host, make_report):
        mock_report_repo.create.return_value = make_report(
            image_url="https://res.cloudinary.com/demo/image/upload/p.jpg"
        )

        response = client.post(
            "/api/reports/device/image",
            data={"lat": "12.97", "lon": "77.59", "depth": "5", "timestamp": "1736937000"},
            files={"image": ("p.jpg", b"\xff\xd8jpeg", "image/jpeg")},
        )

        assert response.status_code == 200
        mock_image_host.upload_image.assert_awaited_once()
        kwargs = mock_report_repo.create.call_args.kwargs
        assert kwargs["image_url"] == "https://res.cloudinary.com/demo/image/upload/p.jpg"
        assert kwargs["depth_cm"] == 5.0

    def test_device_image_upload_failure(self, client, mock_report_repo, mock_image_host):
        mock_image_host.upload_image.side_effect = ImageUploadError()

        response = client.post(
            "/api/reports/device/image",
            data={"lat": "12.97", "lon": "77.59"},
            files={"image": ("p.jpg", b"\xff\xd8jpeg", "image/jpeg")},
        )

        assert response.status_code == 502
        data = response.json()
        assert data["message"] == "Image upload failed"
        assert data["code"] == "IMAGE_UPLOAD_FAILED"
        mock_report_repo.create.assert_not_called()

    def test_device_image_missing_file(self, client, mock_image_host):
        response = client.post("/api/reports/device/image", data={"lat": "1", "lon": "2"})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FILE"
        mock_image_host.upload_image.assert_not_called()

    def test_device_image_rejects_non_image(self, client, mock_image_host):
        response = client.post(
            "/api/reports/device/image",
            data={"lat": "1", "lon": "2"},
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"
        mock_image_host.upload_image.assert_not_called()


class TestGetReportEndpoint:
    """Tests for GET /api/reports/{id}."""

    def test_get_report(self, client, mock_report_repo, make_report):
        report = make_report(address="MG Road")
        mock_report_repo.get_by_id.return_value = report

        response = client.get(f"/api/reports/{report.id}")

        assert response.status_code == 200
        assert response.json()["report"]["id"] == str(report.id)

    def test_unknown_report(self, client):
        response = client.get(f"/api/reports/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "RESOURCE_NOT_FOUND"

    def test_malformed_id(self, client, mock_report_repo):
        response = client.get("/api/reports/not-a-uuid")

        assert response.status_code == 404
        mock_report_repo.get_by_id.assert_not_called()


class TestGeocodeReportEndpoint:
    """Tests for POST /api/reports/{id}/geocode."""

    def test_geocode_stores_address(self, client, mock_report_repo, mock_resolver, make_report):
        report = make_report()
        mock_report_repo.get_by_id.return_value = report

        response = client.post(f"/api/reports/{report.id}/geocode")

        assert response.status_code == 200
        assert response.json()["report"]["address"] == "1 Main St, Springfield"
        mock_report_repo.update_address.assert_awaited_once_with(report, "1 Main St, Springfield")

    def test_geocode_twice_resolves_once(self, client, mock_report_repo, mock_resolver, make_report):
        report = make_report()
        mock_report_repo.get_by_id.return_value = report

        client.post(f"/api/reports/{report.id}/geocode")
        response = client.post(f"/api/reports/{report.id}/geocode")

        assert response.status_code == 200
        assert mock_resolver.resolve.await_count == 1

    def test_geocode_unknown_report(self, client):
        response = client.post(f"/api/reports/{uuid.uuid4()}/geocode")

        assert response.status_code == 404
