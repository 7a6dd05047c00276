import pytest

from character_ingest.config import IngestionSettings
from character_ingest.dialects import CSV, JSON, LOCALIZED, template_for
from character_ingest.errors import (
    EmptyInput,
    InvalidJsonShape,
    NoRecordsParsed,
    TooFewRows,
)
from character_ingest.normalize import FieldNormalizer
from character_ingest.pipeline import ingest, ingest_json, ingest_text

SETTINGS = IngestionSettings(max_skip_details=5)


def run(text, dialect=CSV):
    normalizer = FieldNormalizer(image_picker=lambda images: images[0])
    return ingest_text(text, dialect, normalizer=normalizer, settings=SETTINGS)


def test_basic_record():
    result = run('name,description\n"小樱","魔卡少女樱主角"')
    assert len(result.records) == 1
    record = result.records[0]
    assert record.name == "小樱"
    assert record.description == "魔卡少女樱主角"
    assert record.tags == ("导入角色",)
    assert record.type == "other"
    assert record.is_official is False
    assert result.report.accepted == 1
    assert result.report.success_rate == 1.0


def test_multiline_prompt_is_one_record():
    result = run('name,prompt\n"A","line1\nline2"\n"B","p"')
    assert [r.name for r in result.records] == ["A", "B"]
    assert result.records[0].prompt == "line1\nline2"


def test_short_rows_rejected_long_rows_truncated():
    result = run('name,description,personality\n"A","d","p"\n"B","d"\n"C","d","p","extra"')
    assert [r.name for r in result.records] == ["A", "C"]
    assert result.records[1].personality == "p"
    report = result.report
    assert report.reason_counts()["fieldCountMismatch"] == 1
    assert report.skip_details[0].row == 3
    assert report.skip_details[0].reason == "fieldCountMismatch"


def test_blank_name_rows_are_skipped():
    result = run('name,description\n"","lots of text"\n"   ","x"\n"B","x"')
    assert [r.name for r in result.records] == ["B"]
    assert result.report.reason_counts()["missingName"] == 2
    assert "2 rows are missing a name" in result.report.issues()


def test_unrecognized_header_is_synthesized():
    text = '列1,列2\n"小樱","desc","开朗","prompt","魔法;少女","anime","魔卡少女樱","CLAMP","","true"'
    result = run(text)
    report = result.report
    assert report.header_synthesized
    assert len(report.header) == 10
    record = result.records[0]
    assert record.name == "小樱"
    assert record.tags == ("魔法", "少女")
    assert record.type == "anime"
    assert record.source == "魔卡少女樱"
    assert record.is_official is True


def test_unmatched_quote_is_recovered():
    result = run('name\n"A,B')
    assert [r.name for r in result.records] == ["A,B"]


def test_unmatched_quote_with_missing_fields_fails_with_report():
    with pytest.raises(NoRecordsParsed) as ctx:
        run('name,description\n"A,B')
    assert ctx.value.report.reason_counts()["fieldCountMismatch"] == 1
    assert "Check field counts against the header." in ctx.value.hints
    assert ctx.value.to_dict()["kind"] == "NoRecordsParsed"


def test_semicolon_and_tab_documents():
    result = run("name;description\n小樱;魔卡少女樱主角")
    assert result.report.delimiter == ";"
    assert result.records[0].description == "魔卡少女樱主角"

    result = run("name\tdescription\nA\tB")
    assert result.report.delimiter == "\t"
    assert result.records[0].description == "B"


def test_localized_dialect():
    result = run('角色名,角色描述,是否官方\n"小樱","主角",是', LOCALIZED)
    record = result.records[0]
    assert record.name == "小樱"
    assert record.description == "主角"
    assert record.is_official is True
    assert result.report.header == ("name", "description", "isOfficial")


def test_ingest_detects_dialect():
    assert ingest('角色名,角色描述\n"小樱","主角"').report.dialect == "localized"
    assert ingest('[{"name": "A"}]').report.dialect == "json"
    assert ingest('[{"name": "A"}]', filename="x.json").records[0].name == "A"
    assert ingest('name\nA').report.dialect == "csv"


def test_ingest_accepts_dialect_names():
    assert ingest("name\nA", "csv").records[0].name == "A"
    with pytest.raises(ValueError):
        ingest("name\nA", "xml")


def test_templates_parse_cleanly():
    assert len(run(template_for(CSV)).records) == 3
    localized = run(template_for(LOCALIZED), LOCALIZED)
    assert len(localized.records) == 3
    assert [r.is_official for r in localized.records] == [True, True, False]
    assert [r.type for r in localized.records] == ["anime", "anime", "other"]
    assert len(ingest(template_for(JSON)).records) == 2


def test_fatal_errors():
    with pytest.raises(EmptyInput):
        run("  \n ")
    with pytest.raises(TooFewRows):
        run("name,description")


def test_json_path():
    payload = '[{"name": "小樱", "tags": ["魔法", "少女"], "type": "动漫", "isOfficial": true}, {"description": "no name"}, "oops"]'
    result = ingest_json(payload, settings=SETTINGS)
    assert len(result.records) == 1
    record = result.records[0]
    assert record.tags == ("魔法", "少女")
    assert record.type == "anime"
    assert record.category == "official"
    counts = result.report.reason_counts()
    assert counts["missingName"] == 1
    assert counts["processingError"] == 1
    assert result.report.data_rows == 3
    assert result.report.success_rate == pytest.approx(1 / 3)


def test_json_accepts_parsed_list():
    result = ingest_json([{"name": "A"}, {"name": "B"}], settings=SETTINGS)
    assert [r.name for r in result.records] == ["A", "B"]
    assert len({r.id for r in result.records}) == 2


def test_json_shape_errors():
    with pytest.raises(InvalidJsonShape):
        ingest_json('{"name": "a"}')
    with pytest.raises(InvalidJsonShape):
        ingest_json("[{")
    with pytest.raises(EmptyInput):
        ingest_json("   ")
    with pytest.raises(NoRecordsParsed):
        ingest_json("[]")


def test_report_is_closed_after_run():
    report = run("name\nA").report
    with pytest.raises(RuntimeError):
        report.record_skip("emptyLine", 9)


def test_skip_details_are_capped():
    rows = "\n".join(f'"{i}",""' for i in range(10))
    result = run('description,name\n' + rows + '\n"x","ok"')
    assert result.report.reason_counts()["missingName"] == 10
    assert len(result.report.skip_details) == 5
    assert result.report.low_yield()


def test_report_model():
    result = run('name,description\n"A","d"\n"","x"')
    model = result.report.to_model(expected=10)
    assert model.summary.accepted == 1
    assert model.summary.data_rows == 2
    assert model.summary.success_rate == 0.5
    assert model.summary.low_yield is True
    assert model.reasons["missingName"] == 1
    assert model.type_distribution == {"other": 1}
    assert model.quality.with_description == 1


def test_curly_quotes_in_prose_are_kept_intact():
    result = run('name,description,personality\n"A","他说“你好，世界”","p"')
    record = result.records[0]
    assert record.description == "他说“你好，世界”"
    assert record.personality == "p"


def test_unquoted_commas_split_after_delimiter_rewrite():
    result = run("name\tdescription\nA\tx, y")
    assert result.report.delimiter == "\t"
    assert result.records[0].description == "x"
