import datetime
from decimal import Decimal

from airtable_utils.airtable import formulas
from airtable_utils.airtable.tests.base import TestCase


class TestFormulaBuilders(TestCase):
    def test_field(self):
        self.assertEqual(formulas.field("Name"), "{Name}")
        self.assertEqual(formulas.field("a}b"), "{a\\}b}")

    def test_quote(self):
        self.assertEqual(formulas.quote('say "hi"'), '"say \\"hi\\""')
        self.assertEqual(formulas.quote("C:\\tmp"), '"C:\\\\tmp"')
        self.assertEqual(formulas.quote(True), "TRUE()")
        self.assertEqual(formulas.quote(False), "FALSE()")
        self.assertEqual(formulas.quote(None), "BLANK()")
        self.assertEqual(formulas.quote(3), "3")
        self.assertEqual(formulas.quote(2.5), "2.5")
        self.assertEqual(formulas.quote(Decimal("1.10")), "1.10")
        self.assertEqual(
            formulas.quote(datetime.date(2024, 1, 2)), 'DATETIME_PARSE("2024-01-02")'
        )

    def test_comparisons(self):
        self.assertEqual(formulas.eq("Status", "Done"), '{Status}="Done"')
        self.assertEqual(formulas.ne("Status", "Done"), '{Status}!="Done"')
        self.assertEqual(formulas.gte("Score", 3), "{Score}>=3")
        self.assertEqual(formulas.lt("Score", 3), "{Score}<3")

    def test_logic(self):
        self.assertEqual(formulas.AND(), "TRUE()")
        self.assertEqual(formulas.OR(), "FALSE()")
        self.assertEqual(formulas.AND("{A}"), "{A}")
        self.assertEqual(
            formulas.AND(formulas.eq("Status", "Done"), formulas.gt("Score", 3)),
            'AND({Status}="Done", {Score}>3)',
        )
        self.assertEqual(formulas.OR("{A}", None, "{B}"), "OR({A}, {B})")
        self.assertEqual(formulas.NOT("{A}"), "NOT({A})")

    def test_contains_and_blank(self):
        self.assertEqual(
            formulas.contains("Name", "Ad"), 'FIND(LOWER("Ad"), LOWER({Name}))'
        )
        self.assertEqual(formulas.is_blank("Email"), "{Email}=BLANK()")
        self.assertEqual(formulas.is_not_blank("Email"), "NOT({Email}=BLANK())")

    def test_match(self):
        self.assertEqual(
            formulas.match({"Name": "Ada", "Age": 36}),
            'AND({Name}="Ada", {Age}=36)',
        )
        self.assertEqual(
            formulas.match({"Name": "Ada", "Age": 36}, match_any=True),
            'OR({Name}="Ada", {Age}=36)',
        )


class TestFormulaFromFilter(TestCase):
    def test_is_text_ignores_case_and_whitespace(self):
        self.assertEqual(
            formulas.formula_from_filter(
                {"field": "Name", "type": "is", "value": " Ada "}
            ),
            'LOWER({Name})=LOWER("Ada")',
        )

    def test_is_number(self):
        self.assertEqual(
            formulas.formula_from_filter({"field": "Age", "type": "is", "value": 3}),
            "{Age}=3",
        )

    def test_is_not(self):
        self.assertEqual(
            formulas.formula_from_filter(
                {"field": "Age", "type": "is_not", "value": 3}
            ),
            "NOT({Age}=3)",
        )

    def test_is_one_of(self):
        self.assertEqual(
            formulas.formula_from_filter(
                {"field": "Status", "type": "is_one_of", "value": ["a", "b"]}
            ),
            'OR({Status}="a", {Status}="b")',
        )
        self.assertEqual(
            formulas.formula_from_filter(
                {"field": "Status", "type": "is_none_of", "value": ["a"]}
            ),
            'NOT({Status}="a")',
        )

    def test_exists(self):
        self.assertEqual(
            formulas.formula_from_filter({"field": "Email", "type": "exists"}),
            "NOT({Email}=BLANK())",
        )
        self.assertEqual(
            formulas.formula_from_filter({"field": "Email", "type": "not_exists"}),
            "{Email}=BLANK()",
        )

    def test_contains(self):
        self.assertEqual(
            formulas.formula_from_filter(
                {"field": "Name", "type": "not_contains", "value": "x"}
            ),
            'NOT(FIND(LOWER("x"), LOWER({Name})))',
        )

    def test_unknown_filter_type(self):
        self.assertRaises(
            ValueError,
            formulas.formula_from_filter,
            {"field": "Name", "type": "startswith", "value": "A"},
        )

    def test_formula_from_filters(self):
        self.assertEqual(
            formulas.formula_from_filters(
                [
                    {"field": "Score", "type": "gt", "value": 3},
                    {"field": "Score", "type": "lt", "value": 9},
                ]
            ),
            "AND({Score}>3, {Score}<9)",
        )
