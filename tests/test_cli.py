"""
Layout Migrator — Command Line Tests

`main(args)` is driven directly; the pipeline and upload are replaced with mocks.
"""

import json
from unittest.mock import AsyncMock

import pytest

from layout_migrator import cli
from layout_migrator.client import ProlibuApiError
from layout_migrator.config import settings
from layout_migrator.models import CreatedTemplate, ValidationIssue, ValidationResult
from layout_migrator.pipeline import migrate_from_layout


@pytest.fixture
def migrated(e2e_layout):
    return migrate_from_layout(e2e_layout)


@pytest.fixture
def mock_migrate(monkeypatch, migrated):
    mock = AsyncMock(return_value=migrated)
    monkeypatch.setattr(cli, "migrate", mock)
    return mock


@pytest.fixture
def mock_create(monkeypatch):
    mock = AsyncMock(return_value=CreatedTemplate(id="new-1", name="Proposal [migrated]"))
    monkeypatch.setattr(cli, "create_content_template", mock)
    return mock


class TestParseArgs:
    """Tests for parse_args."""

    def test_migrate_defaults(self):
        """Defaults: main-layout, layout type, font sync on, no JSON."""
        args = cli.parse_args(["migrate"])
        assert args.command == "migrate"
        assert args.id == "main-layout"
        assert args.type == "layout"
        assert args.sync_fonts is True
        assert args.save_json is None
        assert args.dry_run is False

    def test_transfer_flags(self):
        """--from/--to, bare --save-json and --no-sync-fonts."""
        args = cli.parse_args(["transfer", "--from", "acme", "--to", "globex", "--save-json", "--no-sync-fonts"])
        assert (args.source, args.destination) == ("acme", "globex")
        assert args.save_json is True
        assert args.sync_fonts is False

    def test_transfer_requires_accounts(self):
        """transfer without --from/--to is a usage error."""
        with pytest.raises(SystemExit):
            cli.parse_args(["transfer"])


class TestMain:
    """Tests for the migrate and transfer commands."""

    def test_dry_run(self, mock_migrate, mock_create, capsys):
        """Dry run reports and exits 0 without uploading."""
        assert cli.main(["migrate", "--dry-run"]) == cli.EXIT_OK

        out = capsys.readouterr().out
        assert "Document validation: PASSED" in out
        assert "Dry run" in out
        mock_create.assert_not_awaited()
        assert mock_migrate.call_args.args[0] == "main-layout"
        assert mock_migrate.call_args.kwargs["config"].base_url == "https://acme.prolibu.com/api"

    def test_upload(self, mock_migrate, mock_create, capsys):
        """A normal run uploads and prints the editor URL."""
        assert cli.main(["migrate", "--id", "proposal", "--name", "Copy"]) == cli.EXIT_OK

        assert mock_create.call_args.args[2:] == ("Copy", "layout")
        out = capsys.readouterr().out
        assert "https://acme.prolibu.com/ui/spa/suite/contentTemplates/edit/new-1" in out

    def test_json_only(self, mock_migrate, mock_create, tmp_path):
        """--json-only writes the document and skips the upload."""
        target = tmp_path / "out" / "doc.json"
        assert cli.main(["migrate", "--json-only", "--save-json", str(target)]) == cli.EXIT_OK

        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["name"] == "Proposal"
        assert len(data["pages"]) == 2
        mock_create.assert_not_awaited()

    def test_default_json_path(self, mock_migrate, mock_create, tmp_path, monkeypatch):
        """Without a path the file lands in the output directory under a sanitized name."""
        monkeypatch.setattr(settings, "output_dir", str(tmp_path))
        cli.main(["migrate", "--json-only"])
        assert (tmp_path / "proposal.json").is_file()

    def test_invalid_document_exit_code(self, mock_migrate, migrated, mock_create):
        """A document failing validation exits 2."""
        migrated.validation = ValidationResult(
            valid=False, errors=[ValidationIssue(path="pages[0].rootId", message="Page is missing rootId", code="PAGE_MISSING_ROOT_ID")]
        )
        assert cli.main(["migrate", "--dry-run"]) == cli.EXIT_INVALID

    def test_api_failure(self, monkeypatch, capsys):
        """Handled failures exit 1 with an error code."""
        monkeypatch.setattr(cli, "migrate", AsyncMock(side_effect=ProlibuApiError("API error: 404", 404, "missing")))

        assert cli.main(["migrate"]) == cli.EXIT_FAILURE
        out = capsys.readouterr().out
        assert "Migrate failed [LM-" in out
        assert "Response body: missing" in out

    def test_missing_token(self, monkeypatch, capsys):
        """No token anywhere is a configuration error."""
        monkeypatch.setattr(settings, "prolibu_auth_token", "")

        assert cli.main(["migrate"]) == cli.EXIT_FAILURE
        assert "Auth token required" in capsys.readouterr().out

    def test_transfer(self, mock_migrate, mock_create, tmp_path, monkeypatch):
        """Fetch from the source account; fonts and upload go to the destination."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("PROLIBU_API_URL", raising=False)
        (tmp_path / ".srcacct.env").write_text(
            "PROLIBU_API_URL=https://src.prolibu.com/api\nPROLIBU_AUTH_TOKEN=src-token\n", encoding="utf-8"
        )
        (tmp_path / ".dstacct.env").write_text("PROLIBU_AUTH_TOKEN=dst-token\n", encoding="utf-8")

        assert cli.main(["transfer", "--from", "srcacct", "--to", "dstacct"]) == cli.EXIT_OK

        kwargs = mock_migrate.call_args.kwargs
        assert kwargs["config"].base_url == "https://src.prolibu.com/api"
        assert kwargs["config"].auth_token == "Bearer src-token"
        assert kwargs["font_api_config"].base_url == "https://dstacct.prolibu.com/api"
        assert mock_create.call_args.args[1].auth_token == "Bearer dst-token"

    def test_transfer_missing_account_file(self, tmp_path, monkeypatch, capsys):
        """A missing account file exits 1."""
        monkeypatch.chdir(tmp_path)
        assert cli.main(["transfer", "--from", "ghost", "--to", "other"]) == cli.EXIT_FAILURE


class TestHelpers:
    """Tests for output helpers."""

    def test_sanitize_filename(self):
        """Unsafe characters are removed, whitespace dashed, result lowercased."""
        assert cli.sanitize_filename("Proposal: Q1 / 2024!") == "proposal-q1-2024"
        assert cli.sanitize_filename("!!!") == "unnamed-template"
        assert len(cli.sanitize_filename("x" * 300)) == 100
