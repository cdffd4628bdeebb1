"""
Entity normalizer tests

Non-breaking and narrow non-breaking spaces must survive decoding as
distinct codepoints, whichever way they were written.
"""

from markuptree.lib.entities import text_isWhitespace, text_normalize

NBSP = "\u00a0"
NNBSP = "\u202f"


class TestNonBreakingSpaces:
    """Test the three space characters"""

    def test_nbsp_forms_are_identical(self):
        """Named, decimal, hex and literal forms decode to U+00A0"""
        forms = ["a&nbsp;b", "a&#160;b", "a&#xA0;b", f"a{NBSP}b"]
        assert {text_normalize(form) for form in forms} == {f"a{NBSP}b"}

    def test_narrow_nbsp_forms_are_identical(self):
        """Numbered and literal forms decode to U+202F"""
        assert text_normalize("a&#8239;b") == f"a{NNBSP}b"
        assert text_normalize(f"a{NNBSP}b") == f"a{NNBSP}b"

    def test_plain_spaces_untouched(self):
        """Regular spaces contain neither no-break character"""
        text = text_normalize("This is a test with regular spaces only")
        assert NBSP not in text
        assert NNBSP not in text

    def test_spaces_stay_distinct(self):
        """The three spaces never collapse into each other"""
        assert text_normalize(" &nbsp;&#8239;") == f" {NBSP}{NNBSP}"


class TestOtherReferences:
    """Test general decoding behaviour"""

    def test_named_references(self):
        assert text_normalize("&lt;b&gt; &amp; &copy;") == "<b> & ©"

    def test_numeric_references(self):
        assert text_normalize("&#65;&#x42;") == "AB"

    def test_unresolvable_passes_through(self):
        """Unknown names are left as literal text"""
        assert text_normalize("&notarealentity; & friends") == "&notarealentity; & friends"

    def test_no_ampersand_is_identity(self):
        text = "nothing to decode"
        assert text_normalize(text) is text


class TestWhitespaceDetection:
    """Test which text counts as suppressible whitespace"""

    def test_ascii_whitespace(self):
        assert text_isWhitespace(" \n\t\r\f")

    def test_empty_is_not_whitespace(self):
        assert not text_isWhitespace("")

    def test_nbsp_is_content(self):
        """A lone no-break space is content, not whitespace"""
        assert not text_isWhitespace(NBSP)
        assert not text_isWhitespace(f" {NNBSP} ")


class TestSemicolonRule:
    """Only semicolon-terminated references are decoded"""

    def test_semicolonless_named_reference_kept(self):
        assert text_normalize("AT&T &copy 2020") == "AT&T &copy 2020"

    def test_known_prefix_of_unknown_name_kept(self):
        """'&not' is a legacy name, but '&notanentity;' is not a reference"""
        assert text_normalize("&notanentity;") == "&notanentity;"

    def test_terminated_references_still_decoded(self):
        assert text_normalize("&copy; &not; &#169;") == "© ¬ ©"
