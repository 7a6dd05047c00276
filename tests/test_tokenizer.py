from character_ingest.delimiters import detect_delimiter, standardize_delimiters
from character_ingest.tokenizer import clean_value, tokenize_row


def test_clean_strips_whitespace_and_one_quote_layer():
    assert clean_value('  "小樱"  ') == "小樱"
    assert clean_value("'abc'") == "abc"
    assert clean_value("“curly”") == "curly"
    assert clean_value('""nested""') == '"nested"'


def test_clean_unescapes_sequences():
    assert clean_value('say ""hi""') == 'say "hi"'
    assert clean_value('say \\"hi\\"') == 'say "hi"'
    assert clean_value("line1\\nline2") == "line1\nline2"
    assert clean_value("a\\tb") == "a\tb"


def test_clean_is_idempotent_without_nested_quoting():
    for value in ['"a"', " b ", "x\\ty", "“q”", "plain", "", "'"]:
        once = clean_value(value)
        assert clean_value(once) == once


def test_clean_strips_one_quote_layer_per_call():
    once = clean_value('""x""')
    assert once == '"x"'
    assert clean_value(once) == "x"


def test_clean_non_string_is_empty():
    assert clean_value(None) == ""
    assert clean_value(3) == ""


def test_unquoted_row_round_trips():
    fields = ["小樱", "魔卡少女樱主角", "开朗勇敢", "CLAMP"]
    assert tokenize_row(",".join(fields)) == fields


def test_unquoted_row_splits_on_dominant_delimiter_only():
    assert tokenize_row("a\tb\tc,d") == ["a", "b", "c,d"]
    assert tokenize_row("a;b;c,d") == ["a", "b", "c,d"]


def test_quoted_row_keeps_delimiters_inside_quotes():
    assert tokenize_row('"A","包含,逗号"') == ["A", "包含,逗号"]
    assert tokenize_row('"A","x;y\tz"') == ["A", "x;y\tz"]


def test_quoted_row_treats_every_delimiter_as_terminator():
    assert tokenize_row('"a";"b"，"c"\t"d"；e') == ["a", "b", "c", "d", "e"]


def test_quoted_row_doubled_quote_is_literal():
    assert tokenize_row('"He said ""hi""",x') == ['He said "hi"', "x"]


def test_curly_quotes_are_content_inside_quoted_field():
    row = '"A","他说“你好，世界”","p"'
    assert tokenize_row(row) == ["A", "他说“你好，世界”", "p"]


def test_curly_quotes_do_not_force_quoted_mode():
    assert tokenize_row("A,他说“你好，世界”") == ["A", "他说“你好，世界”"]


def test_quoted_row_keeps_empty_fields():
    assert tokenize_row('"A","",true') == ["A", "", "true"]


def test_blank_row_has_no_fields():
    assert tokenize_row("") == []
    assert tokenize_row("   ") == []


def test_detect_delimiter_picks_highest_count():
    assert detect_delimiter("a,b;c;d;e") == ";"
    assert detect_delimiter("a，b，c,d") == "，"


def test_detect_delimiter_tie_and_default():
    assert detect_delimiter("a,b\tc") == "\t"
    assert detect_delimiter("abc") == ","
    assert detect_delimiter("abc", default="\t") == "\t"


def test_standardize_rewrites_outside_quotes_only():
    text, detected = standardize_delimiters('name;desc\n"a;b";c')
    assert detected == ";"
    assert text == 'name,desc\n"a;b",c'


def test_standardize_leaves_comma_text_alone():
    source = 'name,desc\n"a;b",c'
    assert standardize_delimiters(source) == (source, ",")
