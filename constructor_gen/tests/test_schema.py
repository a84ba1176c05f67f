#!/usr/bin/env python3

import dataclasses

import pytest

from constructor_gen.codegen.schema import Field, Struct, StructNotFoundError, Visibility


def make_struct():
    return Struct(
        type_name="Server",
        package="options",
        fields=[
            Field.from_declaration("address", "string"),
            Field.from_declaration("Port", "int"),
            Field.from_declaration("tlsKey", "string", 'constructor:"getter:false"'),
            Field.from_declaration("instanceID", "string", 'constructor:"setter:false"'),
            Field.from_declaration("internal", "string", 'constructor:"-"'),
        ],
    )


class TestField:
    """Test cases for the Field model"""

    def test_from_declaration_resolves_tag(self):
        f = Field.from_declaration("tlsKey", "string", '`constructor:"getter:false"`')
        assert f.skip_accessor
        assert not f.skip_all
        assert not f.skip_mutator
        assert f.tag == '`constructor:"getter:false"`'

    def test_visibility(self):
        assert Visibility.of("Name") is Visibility.EXPORTED
        assert Visibility.of("name") is Visibility.PRIVATE
        assert Visibility.of("_name") is Visibility.PRIVATE
        assert Field.from_declaration("Name", "string").exported

    def test_exported_field_has_no_accessor(self):
        f = Field.from_declaration("Name", "string")
        assert f.in_constructor
        assert not f.has_accessor

    def test_skip_all_overrides_everything(self):
        f = Field.from_declaration("secret", "string", 'constructor:"-"')
        assert not f.in_constructor
        assert not f.has_accessor

    def test_frozen(self):
        f = Field.from_declaration("name", "string")
        with pytest.raises(dataclasses.FrozenInstanceError):
            f.name = "other"


class TestStruct:
    """Derived views of the Struct model"""

    def test_constructor_fields(self):
        names = [f.name for f in make_struct().constructor_fields()]
        assert names == ["address", "Port", "tlsKey"]

    def test_accessor_fields(self):
        names = [f.name for f in make_struct().accessor_fields()]
        assert names == ["address", "instanceID"]

    def test_get_field(self):
        struct = make_struct()
        assert struct.get_field("Port").type == "int"
        assert struct.get_field("missing") is None

    def test_summary(self):
        assert make_struct().summary() == {
            "total_fields": 5,
            "constructor_fields": 3,
            "accessor_fields": 2,
            "skipped_fields": 1,
        }

    def test_fields_and_imports_are_immutable(self):
        struct = Struct("T", "p", [Field.from_declaration("a", "int")], {"time": "time"})
        assert isinstance(struct.fields, tuple)
        with pytest.raises(TypeError):
            struct.imports["os"] = "os"

    def test_not_found_is_lookup_error(self):
        assert issubclass(StructNotFoundError, LookupError)


if __name__ == "__main__":
    pytest.main([__file__])
