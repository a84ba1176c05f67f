#!/usr/bin/env python3

import pytest

from constructor_gen.codegen.naming import (
    accessor_name,
    is_go_keyword,
    mutator_name,
    option_name,
    parameter_name,
    receiver_name,
    to_lower_initial,
    to_upper_initial,
)


class TestInitialCase:
    """Only the first character changes"""

    @pytest.mark.parametrize(
        "name, expected",
        [("Name", "name"), ("HTTPClient", "hTTPClient"), ("name", "name"), ("", "")],
    )
    def test_to_lower_initial(self, name, expected):
        assert to_lower_initial(name) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [("name", "Name"), ("httpClient", "HttpClient"), ("ID", "ID"), ("", "")],
    )
    def test_to_upper_initial(self, name, expected):
        assert to_upper_initial(name) == expected


class TestDerivedNames:
    """Names of generated symbols"""

    def test_accessor_name(self):
        assert accessor_name("instanceID") == "GetInstanceID"

    def test_mutator_name(self):
        assert mutator_name("name") == "Name"
        assert mutator_name("name", "With") == "WithName"
        assert mutator_name("name", "") == "Name"

    def test_option_name(self):
        assert option_name("tlsKey") == "WithTlsKey"

    def test_parameter_name(self):
        assert parameter_name("Address") == "address"
        assert parameter_name("maxRetries") == "maxRetries"

    def test_keyword_parameter_gets_suffix(self):
        assert is_go_keyword("type")
        assert parameter_name("Type") == "type_"
        assert parameter_name("Range") == "range_"

    def test_receiver_name(self):
        assert receiver_name("Product") == "p"
        assert receiver_name("TestStruct") == "t"
        assert receiver_name("_hidden") == "v"
        assert receiver_name("") == "v"


if __name__ == "__main__":
    pytest.main([__file__])
