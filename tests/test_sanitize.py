"""End-to-end tests for sanitize() and extract_plain_text()."""

import time

import pytest

from chathtml import DEFAULT_OPTIONS, SanitizeOptions, UnknownTagPolicy, extract_plain_text, html_to_text, sanitize

ESCAPE = DEFAULT_OPTIONS.replace(unknown_tags=UnknownTagPolicy.ESCAPE)


class TestKnownRepairs:
    def test_crossing_inline_tags(self):
        assert sanitize("<b>bold<i>both</b>italic</i>") == "<b>bold<i>both</i></b>italic"

    def test_script_is_dropped_with_its_content(self):
        assert sanitize("<script>alert(1)</script>hello") == "hello"

    def test_javascript_url_becomes_placeholder(self):
        assert sanitize('<a href="javascript:alert(1)">x</a>') == '<a href="#">x</a>'

    def test_language_hint_is_filtered(self):
        assert sanitize('<pre language="python;rm -rf">code</pre>') == '<pre language="pythonrm-rf">code</pre>'

    def test_crossing_block_tags(self):
        assert sanitize("<blockquote>text<pre>code</blockquote></pre>") == (
            "<blockquote>text<pre>code</pre></blockquote>"
        )


class TestRebalancing:
    def test_unclosed_tags_are_closed_at_end(self):
        assert sanitize("<b><i>x") == "<b><i>x</i></b>"

    def test_orphan_closer_is_discarded(self):
        assert sanitize("x</b>y") == "xy"

    def test_closer_of_line_break_is_discarded(self):
        assert sanitize("a</br>b") == "ab"

    def test_tag_names_are_lowercased(self):
        assert sanitize("<B>x</b>") == "<b>x</b>"

    def test_nested_links_are_split(self):
        text = '<a href="https://a.com">one<a href="https://b.com">two</a></a>'
        assert sanitize(text) == '<a href="https://a.com">one</a><a href="https://b.com">two</a>'

    def test_nested_link_closes_intermediate_tags(self):
        text = '<a href="x.com"><b>one<a href="y.com">two'
        assert sanitize(text) == '<a href="https://x.com"><b>one</b></a><a href="https://y.com">two</a>'

    def test_block_inside_inline_closes_the_inline_context(self):
        text = "<b>bold<i>it<blockquote>q</blockquote>after</i></b>"
        assert sanitize(text) == "<b>bold<i>it</i></b><blockquote>q</blockquote>after"

    def test_inline_inside_block_is_kept(self):
        text = "<blockquote><b>x</b> <code>y</code></blockquote>"
        assert sanitize(text) == text

    def test_empty_elements_are_kept(self):
        assert sanitize("<b></b>") == "<b></b>"

    def test_custom_block_tag_closes_inline(self):
        options = DEFAULT_OPTIONS.replace(allowed_tags=DEFAULT_OPTIONS.allowed_tags | {"h3"}, block_tags=["h3"])
        assert sanitize("<b>x<h3>t</h3></b>", options) == "<b>x</b><h3>t</h3>"

    def test_narrow_allowlist(self):
        assert sanitize("<i>x</i><b>y</b>", SanitizeOptions(allowed_tags=["b"])) == "x<b>y</b>"


class TestUnknownTags:
    def test_dropped_tags_keep_their_text(self):
        assert sanitize("<div><p>hi</p></div>") == "hi"

    def test_unclosed_script_drops_the_rest(self):
        assert sanitize("a<script>b<b>c</b>") == "a"

    def test_drop_content_matches_closer_case_insensitively(self):
        assert sanitize("<STYLE>p { color: red }</Style>ok") == "ok"

    def test_escape_policy(self):
        assert sanitize('<div class="x">hi</div>', ESCAPE) == "&lt;div class=&quot;x&quot;&gt;hi&lt;/div&gt;"

    def test_escape_policy_keeps_script_text_inert(self):
        assert sanitize("<script>alert(1)</script>", ESCAPE) == "&lt;script&gt;alert(1)&lt;/script&gt;"

    def test_escape_policy_still_balances_allowed_tags(self):
        assert sanitize("<b><div>x", ESCAPE) == "<b>&lt;div&gt;x</b>"


class TestTextAndFormatting:
    def test_empty_and_missing_input(self):
        assert sanitize("") == ""
        assert sanitize(None) == ""

    def test_bytes_input(self):
        assert sanitize("<b>é</b>".encode()) == "<b>é</b>"

    def test_stray_characters_are_escaped(self):
        assert sanitize("1 < 2 & 3 > 0") == "1 &lt; 2 &amp; 3 &gt; 0"

    def test_existing_references_are_kept(self):
        assert sanitize("&lt;b&gt; &amp; &#39;") == "&lt;b&gt; &amp; &#39;"

    def test_broken_tag_cannot_smuggle_attributes(self):
        result = sanitize("<img src=x onerror=alert(1) <b>x</b>")
        assert result == "&lt;img src=x onerror=alert(1) <b>x</b>"

    def test_comments_are_removed(self):
        assert sanitize("a<!-- <script>x</script> -->b") == "ab"

    def test_truncated_trailing_tag_is_removed(self):
        assert sanitize('see <b>this</b> <a href="https://exa') == "see <b>this</b> "

    def test_comparison_in_trailing_prose_is_kept(self):
        assert sanitize("<b>x</b> if 3 < 4 ok") == "<b>x</b> if 3 &lt; 4 ok"

    def test_line_breaks_are_canonical(self):
        assert sanitize("a<br/>b<BR />c<br class='x'>d") == "a<br>b<br>c<br>d"

    def test_line_break_before_quote_end_is_removed(self):
        assert sanitize("<blockquote>q<br><br></blockquote>") == "<blockquote>q</blockquote>"

    def test_spoilers(self):
        text = "<spoiler>a</spoiler> <tg-spoiler>b"
        assert sanitize(text) == '<span class="spoiler">a</span> <span class="spoiler">b</span>'

    def test_collapsible_quote(self):
        assert sanitize("<blockquote collapsible>q</blockquote>") == "<blockquote collapsible>q</blockquote>"
        options = DEFAULT_OPTIONS.replace(allow_collapsible_quotes=False)
        assert sanitize("<blockquote collapsible>q</blockquote>", options) == "<blockquote>q</blockquote>"

    def test_link_href_is_escaped(self):
        assert sanitize('<a href="https://e.com/?a=1&b=2">q</a>') == '<a href="https://e.com/?a=1&amp;b=2">q</a>'

    def test_link_without_href(self):
        assert sanitize("<a>x</a>") == "<a>x</a>"

    def test_code_loses_attributes(self):
        assert sanitize('<code class="language-py">x</code>') == "<code>x</code>"


class TestExtractPlainText:
    def test_strips_tags_and_decodes(self):
        assert extract_plain_text("<b>Hello</b>,<br>world &amp; <i>friends</i>") == "Hello,\nworld & friends"

    def test_collapses_whitespace(self):
        assert extract_plain_text("  a   b \n\n c  ") == "a b\nc"

    def test_drops_script_content(self):
        assert extract_plain_text("<script>x</script>text") == "text"

    def test_decodes_after_collapsing(self):
        assert extract_plain_text("a  &amp;&nbsp;&nbsp;b") == "a &\u00a0\u00a0b"

    def test_escaped_markup_comes_back_as_text(self):
        assert extract_plain_text("&lt;script&gt;") == "<script>"

    def test_empty(self):
        assert extract_plain_text("") == ""

    @pytest.mark.parametrize("text", ["<b>x", "<blockquote>a<br>b</blockquote>", "plain"])
    def test_never_contains_tags(self, text):
        assert "<" not in extract_plain_text(text)


class TestLargeInput:
    # Each case is linear; a quadratic pass would take minutes at this size
    LIMIT_SECONDS = 5.0

    def timed(self, func, *args):
        started = time.perf_counter()
        result = func(*args)
        assert time.perf_counter() - started < self.LIMIT_SECONDS
        return result

    def test_long_space_run_in_plain_text(self):
        assert self.timed(extract_plain_text, "a" + " " * 200_000 + "b") == "a b"

    def test_deep_stack_with_orphan_closers(self):
        n = 50_000
        result = self.timed(sanitize, "<b>" * n + "</i>" * n)
        assert result == "<b>" * n + "</b>" * n

    def test_many_inline_tags_before_blocks(self):
        n = 20_000
        result = self.timed(sanitize, "<pre>" * n + "<b><pre>x" * n)
        assert result.count("<pre>") == 2 * n

    def test_many_line_breaks_without_block_closer(self):
        result = self.timed(sanitize, "<br>" * 100_000 + "x")
        assert result == "<br>" * 100_000 + "x"

    def test_many_unclosed_angle_brackets_in_plain_text(self):
        assert self.timed(html_to_text, "<" * 100_000) == "<" * 100_000
