"""Tests for screenshot and log resources."""

from pathlib import Path

import pytest

from dusk_mcp.context import ActiveProject
from dusk_mcp.exceptions import ResourceReadError, UnknownResourceError
from dusk_mcp.resources import ResourceContent, ResourceDescriptor, list_resources, read_resource

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


@pytest.fixture
def project_with_artifacts(active_project: ActiveProject) -> ActiveProject:
    """Active project with two screenshots, one log and some noise files."""
    screenshots = active_project.screenshots_path
    logs = active_project.logs_path
    screenshots.mkdir(parents=True)
    logs.mkdir(parents=True)
    (screenshots / "failure-login.png").write_bytes(PNG_BYTES)
    (screenshots / "a-cart.png").write_bytes(PNG_BYTES)
    (screenshots / ".gitignore").write_text("*\n")
    (screenshots / "nested.png").mkdir()
    (logs / "console.log").write_text("[SEVERE] boom\n")
    (logs / "notes.txt").write_text("ignore me")
    return active_project


class TestListResources:
    """Tests for list_resources."""

    def test_screenshots_then_logs(self, project_with_artifacts: ActiveProject) -> None:
        """Test PNG files are listed before logs, each group in name order."""
        assert list_resources(project_with_artifacts) == [
            ResourceDescriptor("screenshot://a-cart.png", "Screenshot: a-cart.png", "image/png"),
            ResourceDescriptor(
                "screenshot://failure-login.png", "Screenshot: failure-login.png", "image/png"
            ),
            ResourceDescriptor("log://console.log", "Log: console.log", "text/plain"),
        ]

    def test_missing_directories(self, active_project: ActiveProject) -> None:
        """Test missing artifact directories yield an empty listing."""
        assert list_resources(active_project) == []

    def test_only_logs(self, active_project: ActiveProject) -> None:
        """Test a missing screenshots directory does not hide logs."""
        active_project.logs_path.mkdir(parents=True)
        (active_project.logs_path / "browser.log").write_text("x")
        uris = [r.uri for r in list_resources(active_project)]
        assert uris == ["log://browser.log"]


class TestReadResource:
    """Tests for read_resource."""

    def test_read_screenshot(self, project_with_artifacts: ActiveProject) -> None:
        """Test screenshots are returned as raw bytes."""
        content = read_resource(project_with_artifacts, "screenshot://a-cart.png")
        assert content == ResourceContent("screenshot://a-cart.png", "image/png", PNG_BYTES)

    def test_read_log(self, project_with_artifacts: ActiveProject) -> None:
        """Test logs are returned verbatim as text."""
        content = read_resource(project_with_artifacts, "log://console.log")
        assert content == ResourceContent("log://console.log", "text/plain", "[SEVERE] boom\n")

    def test_missing_screenshot(self, project_with_artifacts: ActiveProject) -> None:
        """Test a missing file raises rather than returning empty content."""
        with pytest.raises(ResourceReadError) as exc_info:
            read_resource(project_with_artifacts, "screenshot://missing.png")
        assert exc_info.value.uri == "screenshot://missing.png"

    def test_missing_log(self, active_project: ActiveProject) -> None:
        """Test a missing log raises ResourceReadError."""
        with pytest.raises(ResourceReadError):
            read_resource(active_project, "log://missing.log")

    def test_unknown_scheme(self, active_project: ActiveProject) -> None:
        """Test unsupported schemes raise UnknownResourceError."""
        with pytest.raises(UnknownResourceError) as exc_info:
            read_resource(active_project, "video://run.mp4")
        assert exc_info.value.to_dict()["uri"] == "video://run.mp4"

    @pytest.mark.parametrize(
        "uri",
        ["log://../../.env", "screenshot://", "log://..", "screenshot://sub/x.png"],
    )
    def test_rejects_path_traversal(self, project_with_artifacts: ActiveProject, uri: str) -> None:
        """Test names with separators or parent references are rejected."""
        with pytest.raises(ResourceReadError):
            read_resource(project_with_artifacts, uri)

    def test_follows_active_project(self, tmp_path: Path, project_with_artifacts) -> None:
        """Test reads resolve against the given project's directories."""
        other = ActiveProject(path=tmp_path / "other")
        with pytest.raises(ResourceReadError):
            read_resource(other, "log://console.log")
