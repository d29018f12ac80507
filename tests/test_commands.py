"""Tests for the subcommand handlers (cli/commands.py).

Handlers run against a real :class:`CertificateService` wrapping a
``MagicMock`` client, so assertions can count API calls directly.
Standard input is replaced with ``io.StringIO`` for confirmations.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from factories import context, fake_client, record
from now_certs.cli import exit_codes
from now_certs.cli.commands import CommandRequest, run_command
from now_certs.core.certificate_service import CertificateService
from now_certs.core.models import Team
from now_certs.exceptions import (
    CertificateNotFoundError,
    DuplicateCertificateError,
    UsageError,
    UserAbortError,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

LONG_CN = "a-very-long-subdomain-" + "x" * 60 + ".example.com"


def _request(subcommand: str, *args: str, **overrides: Any) -> CommandRequest:
    defaults: dict[str, Any] = {
        "subcommand": subcommand,
        "args": args,
        "context": context(),
    }
    defaults.update(overrides)
    return CommandRequest(**defaults)


def _run(request: CommandRequest, client: MagicMock) -> int:
    return run_command(request, CertificateService(client))


def _answer(monkeypatch: pytest.MonkeyPatch, text: str) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


@pytest.fixture()
def pem_files(tmp_path: Path) -> dict[str, str]:
    paths = {}
    for name, body in (("crt", "CRT-PEM"), ("key", "KEY-PEM"), ("ca", "CA-PEM")):
        path = tmp_path / f"domain.{name}"
        path.write_text(body, encoding="utf-8")
        paths[name] = str(path)
    return paths


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

class TestList:
    def test_lists_sorted_by_cn(self, capsys: pytest.CaptureFixture[str]) -> None:
        client = fake_client(
            [
                record(uid="u_b", cn="b.com"),
                record(uid="u_a", cn="a.com"),
                record(uid="u_c", cn="c.com"),
            ],
        )
        assert _run(_request("ls"), client) == exit_codes.SUCCESS

        output = capsys.readouterr().out
        assert "3 certificates found" in output
        assert "under alice" in output
        assert output.index("a.com") < output.index("b.com") < output.index("c.com")

    def test_list_alias(self) -> None:
        assert _run(_request("list"), fake_client([])) == exit_codes.SUCCESS

    def test_empty_prints_count_only(self, capsys: pytest.CaptureFixture[str]) -> None:
        _run(_request("ls"), fake_client([]))
        output = capsys.readouterr().out
        assert "0 certificates found" in output
        assert "auto-renew" not in output

    def test_team_scope_in_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        ctx = context(team=Team(slug="acme"))
        _run(_request("ls", context=ctx), fake_client([record()]))
        output = capsys.readouterr().out
        assert "1 certificate found" in output
        assert "under acme" in output

    def test_incomplete_record_shows_placeholder(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        client = fake_client(
            [
                record(uid="u_a", cn="a.com"),
                {"uid": "u_b", "cn": "b.com", "created": None, "expiration": None},
            ],
        )
        assert _run(_request("ls"), client) == exit_codes.SUCCESS

        output = capsys.readouterr().out
        assert "2 certificates found" in output
        b_row = next(line for line in output.splitlines() if "b.com" in line)
        assert b_row.split()[1:3] == ["-", "-"]

    def test_long_domains_are_not_wrapped(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        ctx = context(team=Team(slug=LONG_CN))
        _run(_request("ls", context=ctx), fake_client([record(cn=LONG_CN)]))
        lines = capsys.readouterr().out.splitlines()
        assert any(f"under {LONG_CN}" in line for line in lines)
        assert any(line.strip().startswith(LONG_CN) for line in lines)

    def test_extra_args_rejected(self) -> None:
        client = fake_client()
        with pytest.raises(UsageError, match="now-certs ls"):
            _run(_request("ls", "extra"), client)
        client.ls.assert_not_called()


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------

class TestCreate:
    def test_standard(self, capsys: pytest.CaptureFixture[str]) -> None:
        client = fake_client()
        client.create.return_value = record(uid="cert_new", cn="new.com")

        assert _run(_request("create", "new.com"), client) == exit_codes.SUCCESS
        client.create.assert_called_once_with("new.com")
        output = capsys.readouterr().out
        assert "Success!" in output
        assert "cert_new" in output

    def test_uid_only_response(self, capsys: pytest.CaptureFixture[str]) -> None:
        client = fake_client()
        client.create.return_value = {"uid": "cert_new", "created_at": 1700000000000}

        assert _run(_request("create", "new.com"), client) == exit_codes.SUCCESS
        output = capsys.readouterr().out
        assert "new.com (cert_new) created" in output

    @pytest.mark.parametrize("args", [(), ("a.com", "b.com")])
    def test_wrong_arg_count(self, args: tuple[str, ...]) -> None:
        client = fake_client()
        with pytest.raises(UsageError, match="Invalid number of arguments"):
            _run(_request("create", *args), client)
        client.create.assert_not_called()
        client.put.assert_not_called()

    @pytest.mark.parametrize("args", [(), ("a.com", "b.com")])
    def test_wrong_arg_count_with_cert_flags(
        self, args: tuple[str, ...], pem_files: dict[str, str],
    ) -> None:
        client = fake_client()
        request = _request("create", *args, crt=pem_files["crt"], key=pem_files["key"])
        with pytest.raises(UsageError):
            _run(request, client)
        client.put.assert_not_called()

    def test_custom(self, pem_files: dict[str, str]) -> None:
        client = fake_client()
        client.put.return_value = record(uid="cert_custom", cn="new.com")
        request = _request("create", "new.com", **pem_files)

        assert _run(request, client) == exit_codes.SUCCESS
        client.put.assert_called_once_with("new.com", "CRT-PEM", "KEY-PEM", "CA-PEM")
        client.create.assert_not_called()

    def test_custom_without_ca(self, pem_files: dict[str, str]) -> None:
        client = fake_client()
        client.put.return_value = record(cn="new.com")
        request = _request("create", "new.com", crt=pem_files["crt"], key=pem_files["key"])

        _run(request, client)
        client.put.assert_called_once_with("new.com", "CRT-PEM", "KEY-PEM", "")

    @pytest.mark.parametrize(
        "flags",
        [{"crt": "domain.crt"}, {"key": "domain.key"}, {"ca": "ca.crt"}],
    )
    def test_partial_flags_rejected_before_reading(self, flags: dict[str, str]) -> None:
        client = fake_client()
        with patch("now_certs.cli.commands.load_bundle") as mock_load:
            with pytest.raises(UsageError, match="Missing required arguments"):
                _run(_request("create", "new.com", **flags), client)
        mock_load.assert_not_called()
        client.put.assert_not_called()
        client.create.assert_not_called()

    def test_already_issued(self) -> None:
        client = fake_client()
        client.create.return_value = None
        with pytest.raises(DuplicateCertificateError):
            _run(_request("create", "new.com"), client)

    def test_missing_file_propagates(self) -> None:
        client = fake_client()
        request = _request("create", "new.com", crt="nope.crt", key="nope.key")
        with pytest.raises(FileNotFoundError):
            _run(request, client)
        client.put.assert_not_called()


# ---------------------------------------------------------------------------
# renew
# ---------------------------------------------------------------------------

class TestRenew:
    def test_confirmed(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _answer(monkeypatch, "Y\n")
        client = fake_client([record(uid="existing-id", cn="a.com")])

        assert _run(_request("renew", "existing-id"), client) == exit_codes.SUCCESS
        client.renew.assert_called_once_with("a.com")
        output = capsys.readouterr().out
        assert "will be renewed" in output
        assert "Success!" in output

    def test_declined_makes_no_renew_call(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _answer(monkeypatch, "n\n")
        client = fake_client([record(uid="existing-id", cn="a.com")])

        with pytest.raises(UserAbortError) as exc_info:
            _run(_request("renew", "existing-id"), client)
        assert exc_info.value.exit_code == exit_codes.SUCCESS
        client.renew.assert_not_called()

    def test_unknown(self) -> None:
        client = fake_client([record(cn="a.com")])
        with pytest.raises(CertificateNotFoundError, match="under alice"):
            _run(_request("renew", "b.com"), client)
        client.renew.assert_not_called()

    def test_wrong_arg_count(self) -> None:
        client = fake_client()
        with pytest.raises(UsageError, match=r"renew <id \| cn>"):
            _run(_request("renew"), client)
        client.ls.assert_not_called()


# ---------------------------------------------------------------------------
# replace
# ---------------------------------------------------------------------------

class TestReplace:
    def test_confirmed(
        self, monkeypatch: pytest.MonkeyPatch, pem_files: dict[str, str],
    ) -> None:
        _answer(monkeypatch, "y\n")
        client = fake_client([record(uid="cert_1", cn="a.com")])

        code = _run(_request("replace", "a.com", **pem_files), client)
        assert code == exit_codes.SUCCESS
        client.put.assert_called_once_with("a.com", "CRT-PEM", "KEY-PEM", "CA-PEM")

    def test_declined(
        self, monkeypatch: pytest.MonkeyPatch, pem_files: dict[str, str],
    ) -> None:
        _answer(monkeypatch, "no\n")
        client = fake_client([record(uid="cert_1", cn="a.com")])

        with pytest.raises(UserAbortError):
            _run(_request("replace", "cert_1", **pem_files), client)
        client.put.assert_not_called()

    @pytest.mark.parametrize("flags", [{}, {"crt": "domain.crt"}, {"key": "domain.key"}])
    def test_requires_crt_and_key(self, flags: dict[str, str]) -> None:
        client = fake_client([record(cn="a.com")])
        with patch("now_certs.cli.commands.load_bundle") as mock_load:
            with pytest.raises(UsageError, match="replace --crt"):
                _run(_request("replace", "a.com", **flags), client)
        mock_load.assert_not_called()
        client.ls.assert_not_called()
        client.put.assert_not_called()

    def test_requires_target(self, pem_files: dict[str, str]) -> None:
        client = fake_client()
        with pytest.raises(UsageError):
            _run(_request("replace", **pem_files), client)
        client.ls.assert_not_called()


# ---------------------------------------------------------------------------
# rm
# ---------------------------------------------------------------------------

class TestRemove:
    @pytest.mark.parametrize("subcommand", ["rm", "remove"])
    def test_confirmed(self, subcommand: str, monkeypatch: pytest.MonkeyPatch) -> None:
        _answer(monkeypatch, " y \n")
        client = fake_client([record(uid="cert_1", cn="a.com")])

        assert _run(_request(subcommand, "cert_1"), client) == exit_codes.SUCCESS
        client.delete.assert_called_once_with("a.com")

    def test_unknown_id_never_deletes(self) -> None:
        client = fake_client([record(uid="cert_1", cn="a.com")])
        with pytest.raises(CertificateNotFoundError):
            _run(_request("rm", "cert_404"), client)
        client.delete.assert_not_called()

    def test_long_domain_lines_are_not_wrapped(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _answer(monkeypatch, "y\n")
        client = fake_client([record(uid="cert_1", cn=LONG_CN)])

        assert _run(_request("rm", LONG_CN), client) == exit_codes.SUCCESS
        lines = capsys.readouterr().out.splitlines()
        assert sum(LONG_CN in line for line in lines) == 2
        assert any(
            f"Certificate {LONG_CN} (cert_1) removed" in line for line in lines
        )

    def test_declined(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _answer(monkeypatch, "\n")
        client = fake_client([record(uid="cert_1", cn="a.com")])
        with pytest.raises(UserAbortError):
            _run(_request("rm", "a.com"), client)
        client.delete.assert_not_called()


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestDispatch:
    def test_unknown_subcommand(self) -> None:
        with pytest.raises(UsageError, match="valid subcommand"):
            _run(_request("frobnicate"), fake_client())
