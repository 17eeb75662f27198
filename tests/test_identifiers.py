import pytest

from snowcraft.identifiers import (
    AccountIdentifier,
    AccountObjectIdentifier,
    DatabaseObjectIdentifier,
    ExternalObjectIdentifier,
    SchemaObjectIdentifier,
    TableColumnIdentifier,
    parse_account_identifier,
    parse_account_object_identifier,
    parse_database_object_identifier,
    parse_external_object_identifier,
    parse_identifier,
    parse_schema_object_identifier,
    valid_object_identifier,
)


class TestFullyQualifiedName:
    @pytest.mark.parametrize(
        "identifier, expected",
        [
            (AccountObjectIdentifier("WH"), '"WH"'),
            (DatabaseObjectIdentifier("DB", "SCH"), '"DB"."SCH"'),
            (SchemaObjectIdentifier("DB", "SCH", "OBJ"), '"DB"."SCH"."OBJ"'),
            (TableColumnIdentifier("DB", "SCH", "TBL", "COL"), '"DB"."SCH"."TBL"."COL"'),
            (AccountIdentifier("ORG", "ACCT"), '"ORG"."ACCT"'),
            (AccountIdentifier.from_account_locator("XY12345"), '"XY12345"'),
            (
                ExternalObjectIdentifier(AccountIdentifier("ORG", "ACCT"), AccountObjectIdentifier("SHARE")),
                '"ORG"."ACCT"."SHARE"',
            ),
        ],
    )
    def test_fully_qualified_name(self, identifier, expected):
        assert identifier.fully_qualified_name() == expected
        assert str(identifier) == expected

    def test_case_is_preserved(self):
        assert AccountObjectIdentifier("my_wh").fully_qualified_name() == '"my_wh"'

    def test_embedded_quotes_are_doubled(self):
        assert AccountObjectIdentifier('a"b').fully_qualified_name() == '"a""b"'

    @pytest.mark.parametrize(
        "build",
        [
            lambda: AccountObjectIdentifier("a,b"),
            lambda: DatabaseObjectIdentifier("DB", "a,b"),
            lambda: SchemaObjectIdentifier("DB", "a,b", "OBJ"),
            lambda: TableColumnIdentifier("DB", "SCH", "TBL", "a,b"),
        ],
    )
    def test_commas_are_rejected(self, build):
        with pytest.raises(ValueError):
            build()

    def test_parent_identifiers(self):
        identifier = SchemaObjectIdentifier("DB", "SCH", "OBJ")
        assert identifier.database_id() == AccountObjectIdentifier("DB")
        assert identifier.schema_id() == DatabaseObjectIdentifier("DB", "SCH")
        assert TableColumnIdentifier("DB", "SCH", "TBL", "COL").table_id() == SchemaObjectIdentifier("DB", "SCH", "TBL")


class TestValidObjectIdentifier:
    @pytest.mark.parametrize(
        "identifier",
        [
            AccountObjectIdentifier("WH"),
            DatabaseObjectIdentifier("DB", "SCH"),
            SchemaObjectIdentifier("DB", "SCH", "OBJ"),
            AccountIdentifier.from_account_locator("XY12345"),
            ExternalObjectIdentifier(AccountIdentifier("ORG", "ACCT"), AccountObjectIdentifier("SHARE")),
        ],
    )
    def test_valid(self, identifier):
        assert valid_object_identifier(identifier)

    @pytest.mark.parametrize(
        "identifier",
        [
            None,
            "WH",
            AccountObjectIdentifier(""),
            DatabaseObjectIdentifier("", "SCH"),
            SchemaObjectIdentifier("DB", "", "OBJ"),
            AccountIdentifier("ORG", ""),
            ExternalObjectIdentifier(AccountIdentifier("ORG", "ACCT"), AccountObjectIdentifier("")),
        ],
    )
    def test_invalid(self, identifier):
        assert not valid_object_identifier(identifier)


class TestParseIdentifier:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ('"WH"', AccountObjectIdentifier("WH")),
            ("wh", AccountObjectIdentifier("wh")),
            ('"DB"."SCH"', DatabaseObjectIdentifier("DB", "SCH")),
            ("DB.SCH.OBJ", SchemaObjectIdentifier("DB", "SCH", "OBJ")),
            ('"DB"."SCH"."TBL"."COL"', TableColumnIdentifier("DB", "SCH", "TBL", "COL")),
            ('"a.b"."c"', DatabaseObjectIdentifier("a.b", "c")),
            ('"a""b"', AccountObjectIdentifier('a"b')),
        ],
    )
    def test_parse_identifier(self, text, expected):
        assert parse_identifier(text) == expected

    @pytest.mark.parametrize("text", ["", '"unterminated', "a.b.c.d.e"])
    def test_parse_identifier_rejects(self, text):
        with pytest.raises(ValueError):
            parse_identifier(text)

    def test_parse_exact_part_counts(self):
        assert parse_account_object_identifier('"WH"') == AccountObjectIdentifier("WH")
        assert parse_database_object_identifier("DB.SCH") == DatabaseObjectIdentifier("DB", "SCH")
        assert parse_schema_object_identifier('"DB"."SCH"."T"') == SchemaObjectIdentifier("DB", "SCH", "T")
        with pytest.raises(ValueError):
            parse_schema_object_identifier("DB.SCH")

    def test_parse_account_identifier(self):
        assert parse_account_identifier("ORG.ACCT") == AccountIdentifier("ORG", "ACCT")
        assert parse_account_identifier("XY12345") == AccountIdentifier.from_account_locator("XY12345")

    def test_parse_external_object_identifier(self):
        identifier = parse_external_object_identifier('"ORG"."ACCT"."SHARE"')
        assert identifier.account_identifier == AccountIdentifier("ORG", "ACCT")
        assert identifier.object_identifier == AccountObjectIdentifier("SHARE")
        assert identifier.name == "SHARE"

    @pytest.mark.parametrize(
        "name",
        ["WH", "my wh", 'quote"inside', "dot.inside", "ÜNICODE", "x" * 255, "x\ny", "x\r\ny"],
    )
    def test_quoting_round_trip(self, name):
        rendered = AccountObjectIdentifier(name).fully_qualified_name()
        assert parse_identifier(rendered).name == name

    def test_multiline_name_in_schema_object(self):
        identifier = SchemaObjectIdentifier("D", "S", "x\ny")
        assert parse_schema_object_identifier(identifier.fully_qualified_name()) == identifier
