#!/usr/bin/env python3

import json
import shutil
from pathlib import Path

import pytest

from constructor_gen.cli import create_parser, main

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Copy of the Go fixtures in a temporary directory."""
    monkeypatch.delenv("GOFILE", raising=False)
    for source in TEST_DATA.glob("*.go"):
        shutil.copy(source, tmp_path / source.name)
    return tmp_path


class TestParser:
    """Command-line flag parsing"""

    def test_camel_case_flag_spellings(self):
        args = create_parser().parse_args(
            [
                "--type=Service",
                "--constructorTypes=builder",
                "--setterPrefix=With",
                "--init=initialize",
                "--returnValue",
                "--withGetter",
            ]
        )
        assert args.type_name == "Service"
        assert args.patterns == "builder"
        assert args.mutator_prefix == "With"
        assert args.init_hook == "initialize"
        assert args.return_by_value is True
        assert args.emit_accessors is True

    def test_unset_flags_are_none(self):
        args = create_parser().parse_args(["-t", "Product"])
        assert args.return_by_value is None
        assert args.emit_accessors is None
        assert args.header is None
        assert args.dir == "."


class TestMain:
    """End-to-end runs of the command"""

    def test_writes_default_output(self, workdir):
        assert main(["--type", "Product", "--dir", str(workdir), "--with-getter"]) == 0
        code = (workdir / "product_gen.go").read_text()
        assert code.startswith("// Code generated by constructor-gen; DO NOT EDIT.\n")
        assert "func NewProduct(id int, name string, price float64, description string) *Product {" in code
        assert "func (p *Product) GetPrice() float64 {" in code
        assert "GetDescription" not in code

    def test_builder_flags(self, workdir):
        exit_code = main(
            [
                "--type=Service",
                f"--dir={workdir}",
                "--constructor-types=builder",
                "--setter-prefix=With",
                "--init=initialize",
                "--no-header",
            ]
        )
        assert exit_code == 0
        code = (workdir / "service_gen.go").read_text()
        assert code.startswith("package builder\n")
        assert "func (b *ServiceBuilder) WithMaxRetries(maxRetries int) *ServiceBuilder {" in code
        assert "WithInternal" not in code
        assert "\tv.initialize()\n" in code

    def test_explicit_file_and_output(self, workdir):
        output = workdir / "custom.go"
        exit_code = main(
            [
                "-t",
                "Server",
                "-f",
                str(workdir / "server.go"),
                "-o",
                str(output),
                "--constructor-types",
                "options",
                "--return-value",
            ]
        )
        assert exit_code == 0
        code = output.read_text()
        assert "func NewServerWithOptions(opts ...ServerOption) Server {" in code
        assert not (workdir / "server_gen.go").exists()

    def test_config_file(self, workdir):
        config = workdir / "gen.json"
        config.write_text(
            json.dumps(
                {
                    "type": "Repository",
                    "constructorTypes": ["allArgs", "options"],
                    "withGetter": True,
                }
            )
        )
        assert main(["--config", str(config), "--dir", str(workdir)]) == 0
        code = (workdir / "repository_gen.go").read_text()
        assert "func NewRepositoryWithOptions(" in code
        assert "func (r *Repository) GetConnCount() int {" in code

    def test_stdout(self, workdir, capsys):
        assert main(["--type", "Product", "--dir", str(workdir), "--stdout"]) == 0
        assert "NewProduct" in capsys.readouterr().out
        assert not (workdir / "product_gen.go").exists()

    def test_piped_stdout_matches_written_file(self, workdir, capsys, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setenv("COLUMNS", "80")
        (workdir / "long.go").write_text(
            "package app\n\n"
            "type VeryLongStructNameForWideOutput struct {\n"
            "\tfirstExtremelyLongFieldName  string\n"
            "\tsecondExtremelyLongFieldName string\n"
            "\tthirdExtremelyLongFieldName  string\n"
            "}\n"
        )
        args = ["--type", "VeryLongStructNameForWideOutput", "--dir", str(workdir)]

        assert main(args + ["--stdout"]) == 0
        printed = capsys.readouterr().out
        assert main(args) == 0
        written = (workdir / "verylongstructnameforwideoutput_gen.go").read_text()

        assert printed == written
        assert max(len(line) for line in printed.splitlines()) > 80
        assert "\t\tfirstExtremelyLongFieldName:" in printed

    def test_verbose_with_warnings(self, workdir, capsys):
        (workdir / "event.go").write_text(
            "package app\n\ntype Event struct {\n\tat time.Time\n}\n"
        )
        assert main(["--type", "Event", "--dir", str(workdir), "--verbose"]) == 0
        err = capsys.readouterr().err
        assert "Warnings" in err
        assert "Generation Metadata" in err

    def test_missing_type(self, capsys):
        assert main([]) == 1
        assert "--type is mandatory" in capsys.readouterr().err

    def test_struct_not_found(self, workdir):
        assert main(["--type", "Missing", "--dir", str(workdir)]) == 1

    def test_not_a_struct(self, workdir):
        assert main(["--type", "RepositoryID", "-f", str(workdir / "repository.go")]) == 1

    def test_missing_file(self, workdir):
        assert main(["--type", "Product", "-f", str(workdir / "nope.go")]) == 1

    def test_empty_constructor_types(self, workdir):
        assert main(["--type", "Product", "--dir", str(workdir), "--constructor-types", ""]) == 1

    def test_invalid_constructor_type(self, workdir):
        assert main(["--type", "Product", "--dir", str(workdir), "--constructor-types", "bogus"]) == 1

    def test_version(self, capsys):
        assert main(["--version"]) == 0
        assert "constructor-gen version" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__])
