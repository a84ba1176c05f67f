#!/usr/bin/env python3

import pytest

from constructor_gen.codegen.tags import (
    NO_DIRECTIVES,
    TagDirectives,
    resolve_tag,
    resolve_tokens,
    should_skip_field,
    tokenize_tag,
)


class TestTokenizeTag:
    """Test cases for splitting raw tag text"""

    def test_empty_tag(self):
        assert tokenize_tag("") == []

    def test_backticks_and_quotes_are_removed(self):
        assert tokenize_tag('`json:"id" constructor:"-"`') == [
            ("json", "id"),
            ("constructor", "-"),
        ]

    def test_tokens_without_separator_are_dropped(self):
        assert tokenize_tag('garbage json:"x" :"y"') == [("json", "x")]


class TestResolveTag:
    """Table of tag texts and the directives they resolve to"""

    @pytest.mark.parametrize(
        "raw_tag, expected",
        [
            ("", (False, False, False)),
            ('`json:"name"`', (False, False, False)),
            ('constructor:"-"', (True, False, False)),
            ('`constructor:"-"`', (True, False, False)),
            ('constructor:"getter:false"', (False, True, False)),
            ('constructor:"setter:false"', (False, False, True)),
            ('constructor:"getter:false,setter:false"', (False, True, True)),
            ('newc:"-"', (True, False, False)),
            ('gonstructor:"-"', (True, False, False)),
            ('newc:"getter:false"', (False, False, False)),
            ('json:"id" constructor:"-"', (True, False, False)),
            ('constructor:"-" constructor:"getter:false"', (True, True, False)),
            ('constructor:"setter:false" constructor:"getter:false"', (False, True, True)),
            ('constructor:"other"', (False, False, False)),
            ('constructor:', (False, False, False)),
        ],
    )
    def test_resolution_table(self, raw_tag, expected):
        assert resolve_tag(raw_tag).as_tuple() == expected

    def test_later_tokens_never_retract_flags(self):
        directives = resolve_tag('constructor:"-" json:"name" constructor:"x"')
        assert directives.skip_all

    def test_no_directives_constant(self):
        assert resolve_tokens([]) == NO_DIRECTIVES == TagDirectives()

    def test_should_skip_field(self):
        assert should_skip_field('constructor:"-"')
        assert should_skip_field('gonstructor:"-"')
        assert not should_skip_field('constructor:"getter:false"')
        assert not should_skip_field("")


if __name__ == "__main__":
    pytest.main([__file__])
