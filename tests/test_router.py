"""Tests for the Opener HTTP endpoints and the launcher."""

import json
import sys

import pytest
from fastapi.testclient import TestClient

import opener_bridge
from opener.log_sink import MemoryChannel

TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def settings_path(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"opener.customFolders": [
        {"folderName": "server", "label": "Touch", "command": "touch", "args": ["made by opener"]},
        {"folderName": "broken", "label": "Broken", "command": "opener-no-such-command-xyz", "args": ["My App"]},
        {"folderName": "", "label": "skipped", "command": "c", "args": []},
    ]}), encoding="utf-8")
    return path


@pytest.fixture
def sink():
    return MemoryChannel()


@pytest.fixture
def client(settings_path, sink):
    app = opener_bridge.create_app(settings_path, api_token=TOKEN, sink=sink)
    with TestClient(app) as c:
        yield c


class TestOpenerRouter:
    """Test suite for /opener endpoints."""

    def test_health_needs_no_token(self, client):
        resp = client.get("/opener/health")
        assert resp.status_code == 200
        assert resp.json()["commands"] == 6

    def test_bad_token_rejected(self, client):
        resp = client.get("/opener/commands", headers={"Authorization": "Bearer wrong"})
        assert resp.status_code == 401

    def test_list_commands(self, client, sink):
        resp = client.get("/opener/commands", headers=AUTH)
        body = resp.json()
        ids = [c["id"] for c in body["commands"]]
        assert "opener.openXcode" in ids
        assert ids[-2:] == ["opener.custom.0", "opener.custom.1"]
        assert body["commands"][-1]["folderName"] == "broken"
        assert "folderName" not in body["commands"][0]
        assert len(sink.at_level("WARN")) == 1

    def test_unknown_command_is_404(self, client, tmp_path):
        resp = client.post("/opener/commands/opener.custom.7", json={"folder": str(tmp_path)}, headers=AUTH)
        assert resp.status_code == 404

    def test_missing_folder_is_422(self, client):
        resp = client.post("/opener/commands/opener.custom.0", json={}, headers=AUTH)
        assert resp.status_code == 422

    @pytest.mark.skipif(sys.platform == "win32", reason="commands assume a POSIX sh")
    def test_run_command_success(self, client, tmp_path):
        resp = client.post("/opener/commands/opener.custom.0", json={"folder": str(tmp_path)}, headers=AUTH)
        body = resp.json()
        assert resp.status_code == 200
        assert body["ok"] is True
        assert body["command_line"] == 'touch "made by opener"'
        assert body["notification"] is None
        assert (tmp_path / "made by opener").exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="commands assume a POSIX sh")
    def test_run_command_failure_returns_notification(self, client, tmp_path, sink):
        resp = client.post("/opener/commands/opener.custom.1", json={"folder": str(tmp_path)}, headers=AUTH)
        body = resp.json()
        assert resp.status_code == 200
        assert body["ok"] is False
        assert body["error"]
        assert body["notification"].startswith("Failed to execute: Broken\n")
        assert 'opener-no-such-command-xyz "My App"' in body["notification"]
        assert len(sink.at_level("ERROR")) == 1

    def test_reload_picks_up_new_settings(self, client, settings_path):
        settings_path.write_text(json.dumps({"opener.customFolders": [
            {"folderName": "only", "label": "Only", "command": "true", "args": []},
        ]}), encoding="utf-8")
        resp = client.post("/opener/reload", headers=AUTH)
        assert resp.json()["custom_commands"] == ["opener.custom.0"]
        listed = client.get("/opener/commands", headers=AUTH).json()
        assert listed["count"] == 5

    def test_shutdown_deactivates(self, settings_path, sink):
        app = opener_bridge.create_app(settings_path, api_token=TOKEN, sink=sink)
        with TestClient(app):
            pass
        assert sink.lines[-1] == "[INFO] Opener deactivating..."


class TestLauncher:
    """Test suite for the command-line entry point."""

    def test_list(self, settings_path, capsys):
        assert opener_bridge.main(["--config", str(settings_path), "--list"]) == 0
        out = capsys.readouterr().out
        assert "opener.custom.1\tBroken" in out
        assert "opener.openNewWindow" in out
        assert 'opener.openAndroidStudio\t🤖 Open in Android Studio\topen -a "Android Studio" .' in out
        assert "opener.openCurrentWindow\t💠 Open here in VSCode\tcode .\n" in out

    def test_unknown_command(self, settings_path, tmp_path):
        assert opener_bridge.main(["--config", str(settings_path), "--run", "opener.nope", str(tmp_path)]) == 2

    @pytest.mark.skipif(sys.platform == "win32", reason="commands assume a POSIX sh")
    def test_run_failure_prints_notification(self, settings_path, tmp_path, capsys):
        code = opener_bridge.main(["--config", str(settings_path), "--run", "opener.custom.1", str(tmp_path)])
        assert code == 1
        err = capsys.readouterr().err
        assert "Failed to execute: Broken" in err
        assert "[ERROR] Failed to execute: opener-no-such-command-xyz" in err

    @pytest.mark.skipif(sys.platform == "win32", reason="commands assume a POSIX sh")
    def test_run_success(self, settings_path, tmp_path):
        code = opener_bridge.main(["--config", str(settings_path), "--run", "opener.custom.0", str(tmp_path)])
        assert code == 0
        assert (tmp_path / "made by opener").exists()
