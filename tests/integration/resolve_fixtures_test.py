"""End-to-end resolution over the fixture GOPATH and GOROOT trees."""

from __future__ import annotations

from pathlib import Path

import pytest

from astools.core.config import SearchPaths
from astools.core.errors import TypeNotFoundError
from astools.core.resolver import ResolutionSession
from astools.models import GoFile, Method


@pytest.fixture
def session(fixture_search_paths: SearchPaths) -> ResolutionSession:
    return ResolutionSession(fixture_search_paths)


@pytest.fixture
def sample(session: ResolutionSession, sample_path: Path) -> GoFile:
    return session.scan(sample_path)


@pytest.fixture
def call(sample: GoFile) -> Method:
    fs = sample.interface("Fs")
    assert fs is not None
    method = fs.method("Call")
    assert method is not None
    return method


class TestSampleResolution:
    def test_dependency_argument(self, session: ResolutionSession, sample: GoFile, call: Method) -> None:
        amount = call.inputs[0]
        struct = session.extract_type(sample, amount)
        assert struct.name == "Decimal"
        assert [f.name for f in struct.fields] == ["value", "exp"]
        assert struct.file is not None
        assert struct.file.import_path == "github.com/shopspring/decimal"
        assert struct.file.package == "decimal"

    def test_stdlib_pointer_argument(self, session: ResolutionSession, sample: GoFile, call: Method) -> None:
        buf = call.inputs[1]
        assert buf.is_pointer
        struct = session.extract_type(sample, buf)
        assert struct.name == "Buffer"
        assert struct.file is not None
        assert struct.file.import_path == "bytes"

    def test_type_in_sibling_file_of_dependency(self, session: ResolutionSession, sample: GoFile) -> None:
        struct = sample.extract_type("decimal.RoundingMode", session)
        assert struct.file is not None
        assert struct.file.location is not None
        assert struct.file.location.name == "rounding.go"
        assert struct.file.import_path == "github.com/shopspring/decimal"

    def test_test_files_are_never_scanned(self, session: ResolutionSession, sample: GoFile) -> None:
        session.extract_type(sample, "decimal.RoundingMode")
        assert all(not p.name.endswith("_test.go") for p in session.scanned_files)

    def test_local_struct(self, session: ResolutionSession, sample: GoFile) -> None:
        control = sample.interface("Control")
        assert control is not None
        aircraft = control.method("Aircraft")
        assert aircraft is not None
        struct = session.extract_type(sample, aircraft.outputs[0])
        assert struct is sample.struct("Rocket")

    def test_resolution_is_idempotent(self, session: ResolutionSession, sample: GoFile, call: Method) -> None:
        first = session.extract_type(sample, call.inputs[0])
        second = session.extract_type(sample, call.inputs[0])
        assert first is second

    def test_qualified_names(self, session: ResolutionSession, sample: GoFile, call: Method) -> None:
        assert session.qualify(sample, call.inputs[0]) == "github.com/shopspring/decimal.Decimal"
        assert session.qualify(sample, call.inputs[1]) == "bytes.Buffer"

    def test_unresolvable_qualified_type(self, session: ResolutionSession, sample: GoFile) -> None:
        with pytest.raises(TypeNotFoundError):
            session.extract_type(sample, "decimal.Missing")


class TestAliasedImport:
    def test_explicit_alias(self, session: ResolutionSession, fixtures_dir: Path) -> None:
        wallet_file = session.scan(fixtures_dir / "aliased" / "wallet.go")
        wallet = wallet_file.struct("Wallet")
        assert wallet is not None
        balance = wallet.field("Balance")
        assert balance is not None
        assert balance.tag == '`json:"balance"`'
        assert balance.go_pkg_type() == ("dec", "Decimal")

        struct = session.extract_type(wallet_file, balance)
        assert struct.name == "Decimal"
        assert session.qualify(wallet_file, balance) == "github.com/shopspring/decimal.Decimal"


def test_every_named_argument_renders_from_source(sample: GoFile, sample_path: Path) -> None:
    source = sample_path.read_text(encoding="utf-8")
    for iface in sample.interfaces:
        for method in iface.methods:
            for arg in (*method.inputs, *method.outputs):
                assert arg.golang_type in source
