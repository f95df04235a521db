"""Tests for scanning a Go file into its model."""

from __future__ import annotations

from pathlib import Path

import pytest

from astools.core.errors import GoParseError
from astools.core.scan import interfaces_file, scan, scan_source, structs_file
from astools.models import GoFile


@pytest.fixture
def sample(sample_path: Path) -> GoFile:
    return scan(sample_path)


class TestScanSample:
    def test_package_and_doc(self, sample: GoFile) -> None:
        assert sample.package == "sample"
        assert sample.comment == "Some package description\n"
        assert sample.imports == {"bytes": "", "github.com/shopspring/decimal": ""}

    def test_struct_field_counts(self, sample: GoFile) -> None:
        assert [(s.name, len(s.fields)) for s in sample.structs] == [("Fuel", 2), ("Rocket", 6)]

    def test_struct_comments(self, sample: GoFile) -> None:
        fuel, rocket = sample.structs
        assert fuel.comment == "BBBBBBBBBBB\n"
        assert rocket.comment == "Rocket - This is a ROCKET!\nadsasd\nasdasd\n"

    def test_field_comments(self, sample: GoFile) -> None:
        fuel, rocket = sample.structs
        assert [f.comment for f in fuel.fields] == ["", "AAAAAAAAA\n"]
        assert [(f.name, f.comment) for f in rocket.fields] == [
            ("Power", "This is power\n"),
            ("Name", ""),
            ("Direction", "inline\n"),
            ("Tank", ""),
            ("V", ""),
            ("D", ""),
        ]

    def test_field_types(self, sample: GoFile) -> None:
        rocket = sample.structs[1]
        assert [f.golang_type for f in rocket.fields if f.name != "Direction"] == [
            "int",
            "string",
            "Fuel",
            "[]int",
            "map[int]string",
        ]

    def test_interface_methods_in_order(self, sample: GoFile) -> None:
        control = sample.interface("Control")
        assert control is not None
        assert control.comment == "Control?\n"
        assert [m.name for m in control.methods] == ["Land", "IsLanded", "Aircraft", "Launch"]
        assert control.methods[0].comment == "AA;;\n"
        assert control.methods[1].comment == ""

    def test_method_results(self, sample: GoFile) -> None:
        control = sample.interface("Control")
        assert control is not None
        is_landed = control.method("IsLanded")
        aircraft = control.method("Aircraft")
        launch = control.method("Launch")
        assert is_landed is not None and aircraft is not None and launch is not None

        assert [(a.name, a.golang_type) for a in is_landed.outputs] == [("success", "bool")]
        assert [(a.name, a.golang_type, a.is_pointer) for a in aircraft.outputs] == [("ret0", "*Rocket", True)]
        assert [(a.name, a.golang_type) for a in launch.inputs] == [("rocket", "*Rocket")]
        assert [a.is_error for a in launch.outputs] == [False, True]
        assert [a.golang_type for a in launch.non_error_outputs()] == ["bool"]

    def test_qualified_inputs(self, sample: GoFile) -> None:
        fs = sample.interface("Fs")
        assert fs is not None
        assert fs.comment == "Fs moves money around\n"
        call = fs.methods[0]
        assert [a.go_pkg_type() for a in call.inputs] == [("decimal", "Decimal"), ("", "*bytes.Buffer")]
        assert [a.name for a in call.outputs] == ["ret0"]
        assert call.outputs[0].is_error

    def test_constant(self, sample: GoFile) -> None:
        greeting = sample.value("Greeting")
        assert greeting is not None
        assert greeting.golang_value == '"HEllo!"'
        assert greeting.comment == "Greeting value\n"

    def test_rendered_types_come_from_source(self, sample: GoFile, sample_path: Path) -> None:
        source = sample_path.read_text(encoding="utf-8")
        args = [f for s in sample.structs for f in s.fields]
        args += [a for i in sample.interfaces for m in i.methods for a in (*m.inputs, *m.outputs)]
        assert args
        for arg in args:
            assert arg.golang_type
            assert arg.golang_type in source

    def test_location(self, sample: GoFile, sample_path: Path) -> None:
        assert sample.location == sample_path
        assert sample.directory == sample_path.parent
        assert sample.import_path is None
        assert sample.siblings is None


class TestScanHelpers:
    def test_structs_file(self, sample_path: Path) -> None:
        structs, printer = structs_file(sample_path)
        assert [s.name for s in structs] == ["Fuel", "Rocket"]
        assert printer.render(structs[0].fields[0].type) == "string"

    def test_interfaces_file(self, sample_path: Path) -> None:
        interfaces, printer = interfaces_file(sample_path)
        assert [i.name for i in interfaces] == ["Control", "Fs"]
        assert printer.render(interfaces[1].methods[0].inputs[0].type) == "decimal.Decimal"

    def test_struct_points_back_to_file(self, sample: GoFile) -> None:
        assert all(s.file is sample for s in sample.structs)


class TestScanErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.go"
        with pytest.raises(FileNotFoundError, match="File not found"):
            scan(missing)

    def test_syntax_error(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.go"
        broken.write_text("package p\n\ntype X struct {\n", encoding="utf-8")
        with pytest.raises(GoParseError) as excinfo:
            scan(broken)
        assert excinfo.value.path == str(broken)
        assert "Failed to parse" in str(excinfo.value)

    def test_missing_package_clause(self) -> None:
        with pytest.raises(GoParseError, match="missing package clause"):
            scan_source(b"type X struct{}\n")

    def test_scan_source_without_location(self) -> None:
        go_file = scan_source(b"package p\n")
        assert go_file.location is None
        assert go_file.directory is None
        assert go_file.structs == []
