#!/usr/bin/env python3

from pathlib import Path

import pytest

from constructor_gen.utils import (
    SourceLoaderError,
    declares_struct,
    default_output_path,
    find_source_file,
    load_go_source,
    write_generated_code,
)

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def go_package(tmp_path, monkeypatch):
    """A directory with a few Go files and no GOFILE set."""
    monkeypatch.delenv("GOFILE", raising=False)
    (tmp_path / "a_models.go").write_text("package app\n\ntype Other struct{}\n")
    (tmp_path / "b_gen.go").write_text("package app\n\ntype Target struct{ x int }\n")
    (tmp_path / "c_target.go").write_text(
        "package app\n\n// Target is the struct we look for.\ntype Target struct {\n\tname string\n}\n"
    )
    (tmp_path / "notes.txt").write_text("type Target struct{}\n")
    return tmp_path


class TestFindSourceFile:
    """Test cases for locating the declaring file"""

    def test_skips_generated_files(self, go_package):
        assert find_source_file("Target", go_package) == go_package / "c_target.go"

    def test_first_match_in_name_order(self, go_package):
        (go_package / "0_first.go").write_text("package app\ntype Target struct{}\n")
        assert find_source_file("Target", go_package) == go_package / "0_first.go"

    def test_gofile_is_used_as_is(self, go_package, monkeypatch):
        monkeypatch.setenv("GOFILE", "a_models.go")
        assert find_source_file("Target", go_package) == go_package / "a_models.go"

    def test_not_found(self, go_package):
        with pytest.raises(SourceLoaderError, match="could not find struct Missing"):
            find_source_file("Missing", go_package)

    def test_not_a_directory(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GOFILE", raising=False)
        with pytest.raises(SourceLoaderError, match="Not a directory"):
            find_source_file("Target", tmp_path / "nowhere")

    def test_unparsable_files_are_skipped(self, go_package):
        (go_package / "0_broken.go").write_text('package app\nvar s = "unterminated\n')
        assert find_source_file("Target", go_package) == go_package / "c_target.go"


class TestSourceIO:
    """Reading and writing Go files"""

    def test_load_go_source(self):
        assert "type Product struct" in load_go_source(TEST_DATA / "product.go")

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_go_source(tmp_path / "missing.go")

    def test_declares_struct(self):
        assert declares_struct(TEST_DATA / "server.go", "Server")
        assert not declares_struct(TEST_DATA / "server.go", "Product")

    def test_default_output_path(self):
        assert default_output_path(Path("pkg/service.go"), "Service") == Path(
            "pkg/service_gen.go"
        )
        assert default_output_path("models.go", "HTTPClient") == Path("httpclient_gen.go")

    def test_write_generated_code(self, tmp_path):
        path = write_generated_code(tmp_path / "out_gen.go", "package app\n")
        assert path.read_text() == "package app\n"

    def test_write_into_missing_directory(self, tmp_path):
        with pytest.raises(SourceLoaderError):
            write_generated_code(tmp_path / "missing" / "out_gen.go", "package app\n")


if __name__ == "__main__":
    pytest.main([__file__])
