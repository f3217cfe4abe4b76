"""Tests for the command line entry point."""

from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import TransportError
from googleapiclient.errors import HttpError
from httplib2 import ServerNotFoundError

from main import build_parser, main
from transfer.errors import CalendarAccessDeniedError, TransferFileNotFoundError
from transfer.payload import TransferFile


@pytest.fixture
def mock_transfer():
    with patch("main.CalendarFileTransfer") as mock_cls:
        yield mock_cls.return_value


class TestParser:
    def test_download_arguments(self) -> None:
        args = build_parser().parse_args(["download", "a.txt", "/tmp"])
        assert args.command == "download"
        assert args.file_name == "a.txt"
        assert args.save_directory == "/tmp"

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_verbose_flag(self) -> None:
        args = build_parser().parse_args(["-v", "list"])
        assert args.verbose is True


class TestCommands:
    def test_list_empty(self, mock_transfer, capsys) -> None:
        mock_transfer.list_available_files.return_value = []

        assert main(["list"]) == 0
        assert "No files available for transfer" in capsys.readouterr().out

    def test_list_files(self, mock_transfer, capsys) -> None:
        mock_transfer.list_available_files.return_value = [
            TransferFile("a.txt", 3),
            TransferFile("b.bin", 1024),
        ]

        assert main(["list"]) == 0

        out = capsys.readouterr().out
        assert "Available files:" in out
        assert "File: a.txt\nSize: 3 bytes" in out
        assert "File: b.bin\nSize: 1024 bytes" in out

    def test_upload(self, mock_transfer, capsys) -> None:
        mock_transfer.upload_file.return_value = TransferFile("report.pdf", 10)

        assert main(["upload", "/home/me/report.pdf"]) == 0

        mock_transfer.upload_file.assert_called_once_with("/home/me/report.pdf")
        out = capsys.readouterr().out
        assert "Uploading file: report.pdf" in out
        assert "Success! File uploaded successfully" in out

    def test_download(self, mock_transfer, capsys) -> None:
        assert main(["download", "report.pdf", "/tmp/in"]) == 0

        mock_transfer.download_file.assert_called_once_with("report.pdf", "/tmp/in")
        out = capsys.readouterr().out
        assert "Downloading file: report.pdf" in out
        assert "File downloaded successfully to: /tmp/in" in out

    def test_delete(self, mock_transfer, capsys) -> None:
        assert main(["delete", "report.pdf"]) == 0

        mock_transfer.delete_file.assert_called_once_with("report.pdf")
        assert "Deleted file: report.pdf" in capsys.readouterr().out


class TestErrors:
    def test_transfer_error(self, mock_transfer, capsys) -> None:
        mock_transfer.download_file.side_effect = TransferFileNotFoundError("No uploaded file named 'x'.")

        assert main(["download", "x", "/tmp"]) == 1
        assert "Error: No uploaded file named 'x'." in capsys.readouterr().err

    def test_access_denied_during_connect(self, capsys) -> None:
        with patch("main.CalendarFileTransfer", side_effect=CalendarAccessDeniedError("Token file not found")):
            assert main(["list"]) == 1
        assert "Error: Token file not found" in capsys.readouterr().err

    def test_http_error(self, mock_transfer, capsys) -> None:
        resp = MagicMock(status=403, reason="Forbidden")
        mock_transfer.list_available_files.side_effect = HttpError(
            resp, b'{"error": {"message": "Insufficient Permission"}}'
        )

        assert main(["list"]) == 1
        assert "Calendar API request failed: Insufficient Permission" in capsys.readouterr().err

    def test_os_error(self, mock_transfer, capsys) -> None:
        mock_transfer.download_file.side_effect = PermissionError("Permission denied: '/root/x'")

        assert main(["download", "x", "/root"]) == 1
        assert "Error: Permission denied" in capsys.readouterr().err

    def test_connection_error_during_token_refresh(self, capsys) -> None:
        error = TransportError("Failed to resolve 'oauth2.googleapis.com'")
        with patch("main.CalendarFileTransfer", side_effect=error):
            assert main(["list"]) == 1
        assert "Calendar API request failed: Failed to resolve" in capsys.readouterr().err

    def test_server_not_found(self, mock_transfer, capsys) -> None:
        mock_transfer.list_available_files.side_effect = ServerNotFoundError(
            "Unable to find the server at www.googleapis.com"
        )

        assert main(["list"]) == 1
        assert "Calendar API request failed: Unable to find the server" in capsys.readouterr().err


class TestConfiguration:
    def test_unknown_timezone(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("TRANSFER_TIMEZONE", "Mars/Olympus")

        assert main(["list"]) == 1
        assert "Error: Unknown TRANSFER_TIMEZONE 'Mars/Olympus'" in capsys.readouterr().err

    def test_invalid_date(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("TRANSFER_DATE", "01/01/2024")

        assert main(["list"]) == 1
        assert "Error: Invalid TRANSFER_DATE '01/01/2024'" in capsys.readouterr().err
