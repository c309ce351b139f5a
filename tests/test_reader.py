import unittest

from budget_doctor.reader import (
    detect_delimiter,
    find_structural_errors,
    read_grid,
    serialize_grid,
    validate_and_clean,
)


class ReadGridTests(unittest.TestCase):
    def test_quoted_fields_keep_delimiters_newlines_and_quotes(self):
        text = 'label,amount\nRent,"$3,215.00"\n"Note ""A""","line one\nline two"\n'
        grid = read_grid(text)
        self.assertEqual(grid[1], ["Rent", "$3,215.00"])
        self.assertEqual(grid[2], ['Note "A"', "line one\nline two"])

    def test_cells_are_trimmed_and_blank_rows_dropped(self):
        grid = read_grid("  Category , Amount \n\n , \nRent ,  $10 \n")
        self.assertEqual(grid, [["Category", "Amount"], ["Rent", "$10"]])

    def test_ragged_rows_stay_ragged(self):
        grid = read_grid("a,b,c\n1\n1,2,3,4\n")
        self.assertEqual([len(row) for row in grid], [3, 1, 4])

    def test_leading_bom_and_null_bytes_are_removed(self):
        grid = read_grid("\ufeffCategory,Amount\nRe\x00nt,$5\n")
        self.assertEqual(grid, [["Category", "Amount"], ["Rent", "$5"]])

    def test_cells_are_never_coerced(self):
        grid = read_grid("a,b\n007,1e5\n")
        self.assertEqual(grid[1], ["007", "1e5"])


class DelimiterDetectionTests(unittest.TestCase):
    def test_semicolon_file(self):
        self.assertEqual(detect_delimiter("Category;Amount\nRent;$5\nFood;$6\n"), ";")

    def test_tab_file(self):
        self.assertEqual(detect_delimiter("Category\tAmount\nRent\t$5\n"), "\t")

    def test_semicolons_inside_quoted_notes_do_not_win(self):
        text = (
            "Category,Amount,Note\n"
            'Rent,$3215,"due 1st; landlord; check; mailed"\n'
            'Groceries,$650,"aldi; farmers; market; weekly"\n'
        )
        self.assertEqual(detect_delimiter(text), ",")
        self.assertEqual([len(row) for row in read_grid(text)], [3, 3, 3])

    def test_consistent_comma_beats_wider_inconsistent_candidate(self):
        self.assertEqual(detect_delimiter("a,b\nc;d;e;f,g\nh;i;j;k,l\n"), ",")

    def test_commas_inside_quoted_cells_of_semicolon_file(self):
        self.assertEqual(detect_delimiter('Category;Note\nRent;"a,b,c"\nFood;"d,e"\n'), ";")

    def test_single_column_defaults_to_comma(self):
        self.assertEqual(detect_delimiter("Income\n$5\n"), ",")

    def test_empty_text_defaults_to_comma(self):
        self.assertEqual(detect_delimiter(""), ",")


class ValidateAndCleanTests(unittest.TestCase):
    def test_empty_input_is_an_error(self):
        for text in ("", "   \n\t\n"):
            with self.subTest(text=text):
                result = validate_and_clean(text)
                self.assertFalse(result.ok)
                self.assertEqual(result.cleaned_text, "")
                self.assertEqual(len(result.errors), 1)
                self.assertTrue(result.errors[0].startswith("EmptyInput:"))

    def test_unterminated_quote_is_reported_with_line_number(self):
        result = validate_and_clean('Category,Amount\nRent,"$3,215.00\nFood,$5\n')
        self.assertFalse(result.ok)
        self.assertEqual(len(result.errors), 1)
        self.assertTrue(result.errors[0].startswith("MalformedQuotes:"))
        self.assertIn("line ", result.errors[0])

    def test_text_after_closing_quote_is_reported(self):
        errors = find_structural_errors('a,b\nRent,"$1"x\n', ",")
        self.assertEqual(len(errors), 1)
        self.assertIn("MalformedQuotes", errors[0])

    def test_messy_text_is_normalised(self):
        messy = '  Category , Amount \n\n"Rent","$3,215.00",\n  Groceries  ,  650  \n'
        result = validate_and_clean(messy)
        self.assertTrue(result.ok, result.errors)
        self.assertEqual(result.errors, [])
        self.assertEqual(
            result.cleaned_text,
            'Category,Amount\r\nRent,"$3,215.00",\r\nGroceries,650\r\n',
        )

    def test_cleaned_text_is_a_fixed_point(self):
        messy = 'Category;Amount\n\nRent;"$3,215.00"\nNote;"a ""quoted"" word"\n'
        first = validate_and_clean(messy)
        second = validate_and_clean(first.cleaned_text)
        self.assertTrue(first.ok, first.errors)
        self.assertTrue(second.ok, second.errors)
        self.assertEqual(second.cleaned_text, first.cleaned_text)

    def test_cells_holding_other_delimiters_stay_a_fixed_point(self):
        cases = (
            'Note\n"a;b"\n"c;d"\n',
            'p,"a;b;c"\nq,r,"d;e;f"\n',
            'Category,Note\nRent,"a\tb|c"\n',
            "Category;Note\nRent;\"x,y\"\nFood;z\n",
        )
        for text in cases:
            with self.subTest(text=text):
                first = validate_and_clean(text)
                second = validate_and_clean(first.cleaned_text)
                self.assertTrue(first.ok, first.errors)
                self.assertEqual(second.cleaned_text, first.cleaned_text)

    def test_other_delimiters_are_quoted_on_output(self):
        result = validate_and_clean('Note\n"a;b"\n"c;d"\n')
        self.assertEqual(result.cleaned_text, 'Note\r\n"a;b"\r\n"c;d"\r\n')

    def test_semicolon_input_is_rewritten_with_commas(self):
        result = validate_and_clean("Category;Amount\nRent;$5\n")
        self.assertEqual(result.cleaned_text, "Category,Amount\r\nRent,$5\r\n")


class SerializeGridTests(unittest.TestCase):
    def test_minimal_quoting_and_crlf(self):
        text = serialize_grid([["a", "b,c"], ['say "hi"', ""]])
        self.assertEqual(text, 'a,"b,c"\r\n"say ""hi""",\r\n')

    def test_cells_holding_other_delimiters_are_quoted(self):
        text = serialize_grid([["a;b", "c|d", "e\tf", "plain"]])
        self.assertEqual(text, '"a;b","c|d","e\tf",plain\r\n')


if __name__ == "__main__":
    unittest.main()
