"""
Tests for the klaviyo-dashboard command line
"""

import sqlite3
from unittest.mock import AsyncMock, patch

import pytest

from klaviyo_dashboard.cli import build_parser, main
from klaviyo_dashboard.domain import DashboardMetrics, SimpleSummary
from klaviyo_dashboard.storage import AdminRepository, ClientRepository


class TestParser:
    """Test argument parsing"""

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_render_options(self):
        args = build_parser().parse_args(["render-dashboard", "owner@acme.com", "--simple", "--output", "x.html"])

        assert args.email == "owner@acme.com"
        assert args.simple is True
        assert args.output == "x.html"


class TestDatabaseCommands:
    """Test init-db, add-client, add-admin and list-clients"""

    def test_init_db(self, test_env, capsys):
        assert main(["init-db"]) == 0

        assert test_env.exists()
        assert "Database ready" in capsys.readouterr().out

    def test_add_client(self, test_env, capsys, api_key):
        assert main(["add-client", "Acme Store", "Owner@Acme.com", "client-pass-123", api_key]) == 0

        assert "email=owner@acme.com" in capsys.readouterr().out
        assert ClientRepository().authenticate("owner@acme.com", "client-pass-123") is not None

    def test_add_client_duplicate(self, sample_client, capsys, api_key):
        assert main(["add-client", "Again", "owner@acme.com", "pw", api_key]) == 1

        assert "[ERROR]" in capsys.readouterr().err

    def test_add_client_invalid_key(self, test_env, capsys):
        assert main(["add-client", "Acme", "owner@acme.com", "pw", "not-a-key"]) == 1

        err = capsys.readouterr().err
        assert "[ERROR]" in err
        assert "pk_" in err

    def test_add_admin(self, test_env, capsys):
        assert main(["add-admin", "admin@agency.com", "admin-pass-123"]) == 0

        assert "Admin created" in capsys.readouterr().out
        assert AdminRepository().authenticate("admin@agency.com", "admin-pass-123") is not None

    def test_list_clients_empty(self, db_path, capsys):
        assert main(["list-clients"]) == 0

        assert "No clients registered" in capsys.readouterr().out

    def test_list_clients_fresh_install(self, test_env, capsys):
        assert main(["list-clients"]) == 0

        assert "No clients registered" in capsys.readouterr().out

    def test_database_error_exits_1(self, db_path, capsys):
        with patch.object(ClientRepository, "list_clients", side_effect=sqlite3.OperationalError("disk I/O error")):
            assert main(["list-clients"]) == 1

        assert "[ERROR] Database error: disk I/O error" in capsys.readouterr().err

    def test_list_clients(self, sample_client, capsys):
        assert main(["list-clients"]) == 0

        out = capsys.readouterr().out
        assert "Acme Store" in out
        assert "owner@acme.com" in out
        assert "pk_" not in out


class TestRenderDashboard:
    """Test render-dashboard"""

    def test_detailed(self, sample_client, api_key, tmp_path, capsys):
        output = tmp_path / "acme.html"

        with patch(
            "klaviyo_dashboard.cli.collect_metrics", new=AsyncMock(return_value=DashboardMetrics.zeroed())
        ) as collect:
            assert main(["render-dashboard", "owner@acme.com", "--output", str(output)]) == 0

        collect.assert_awaited_once_with(api_key, "all")
        assert "Welcome back, Acme Store" in output.read_text(encoding="utf-8")
        assert "Dashboard written" in capsys.readouterr().out

    def test_simple(self, sample_client, api_key, tmp_path):
        output = tmp_path / "simple.html"

        with patch(
            "klaviyo_dashboard.cli.collect_metrics", new=AsyncMock(return_value=SimpleSummary.zeroed())
        ) as collect:
            assert main(["render-dashboard", "owner@acme.com", "--simple", "--output", str(output)]) == 0

        collect.assert_awaited_once_with(api_key, "simple")
        assert "Total Emails Sent" in output.read_text(encoding="utf-8")

    def test_default_output_name(self, sample_client, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with patch("klaviyo_dashboard.cli.collect_metrics", new=AsyncMock(return_value=DashboardMetrics.zeroed())):
            assert main(["render-dashboard", "owner@acme.com"]) == 0

        assert (tmp_path / "owner_dashboard.html").exists()

    def test_unknown_client(self, db_path, capsys):
        assert main(["render-dashboard", "nobody@acme.com"]) == 1

        assert "nobody@acme.com" in capsys.readouterr().err

    def test_unknown_client_fresh_install(self, test_env, capsys):
        assert main(["render-dashboard", "nobody@acme.com"]) == 1

        assert "[ERROR] No client with email nobody@acme.com" in capsys.readouterr().err


class TestServe:
    """Test serve"""

    def test_runs_uvicorn(self):
        with patch("uvicorn.run") as run:
            assert main(["serve", "--port", "8080"]) == 0

        assert run.call_args.args[0] == "klaviyo_dashboard.api.app:app"
        assert run.call_args.kwargs["port"] == 8080
