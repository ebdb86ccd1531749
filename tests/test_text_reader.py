import io
from unittest import TestCase

from wktcrs.utils.exceptions import LexicalError, UnexpectedEndOfInput
from wktcrs.wkt.text_reader import TextReader


class TestTextReader(TestCase):
    def test_tokens_and_offsets(self):
        """Test that keywords, quoted text, numbers and punctuation are split with their offsets"""
        with TextReader('ID["EPSG", 4326]') as reader:
            tokens = list(iter(reader.read_token, None))

        self.assertEqual([t.value for t in tokens], ["ID", "[", "EPSG", ",", "4326", "]"])
        self.assertEqual([t.offset for t in tokens], [0, 2, 3, 9, 11, 15])
        self.assertTrue(tokens[2].quoted)
        self.assertEqual(tokens[2].raw, '"EPSG"')
        self.assertFalse(tokens[4].quoted)

    def test_doubled_quotes_collapse(self):
        """Test that a doubled quote inside quoted text reads as one quote"""
        with TextReader('"Say ""hello"""') as reader:
            token = reader.read_token()

        self.assertEqual(token.value, 'Say "hello"')
        self.assertEqual(token.raw, '"Say ""hello"""')

    def test_typographic_quotes(self):
        """Test that typographic quotes delimit quoted text"""
        with TextReader("“Tokyo 1918”,") as reader:
            token = reader.read_token()
            following = reader.read_token()

        self.assertTrue(token.quoted)
        self.assertEqual(token.value, "Tokyo 1918")
        self.assertTrue(following.is_punctuation(","))

    def test_unterminated_quote(self):
        """Test that unterminated quoted text raises a lexical error at the opening quote"""
        with TextReader('DATUM["World Geodetic') as reader:
            reader.read_token()
            reader.read_token()
            with self.assertRaises(LexicalError) as cm:
                reader.read_token()

        self.assertEqual(cm.exception.offset, 6)

    def test_peek_does_not_consume(self):
        """Test that peeking ahead leaves the tokens in place"""
        with TextReader("CS[ellipsoidal,2]") as reader:
            self.assertEqual(reader.peek_token(3).value, "ellipsoidal")
            self.assertEqual(reader.offset, 0)
            self.assertEqual(reader.read_token().value, "CS")
            self.assertEqual(reader.peek_token().value, "[")
            self.assertIsNone(reader.peek_token(10))

    def test_numbers(self):
        """Test the numeric token readers"""
        with TextReader("6378137 -0.5 1E-06 3 +2") as reader:
            self.assertEqual(reader.read_number(), 6378137.0)
            self.assertEqual(reader.read_number(), -0.5)
            self.assertEqual(reader.read_unsigned_number(), 1e-06)
            self.assertEqual(reader.read_unsigned_integer(), 3)
            self.assertEqual(reader.read_integer(), 2)

    def test_invalid_number(self):
        """Test that a malformed number raises a lexical error"""
        with TextReader("12abc") as reader:
            with self.assertRaises(LexicalError) as cm:
                reader.read_number()

        self.assertEqual(cm.exception.token, "12abc")
        self.assertEqual(cm.exception.offset, 0)

    def test_signed_number_rejected_where_unsigned(self):
        with TextReader("-2") as reader:
            with self.assertRaises(LexicalError):
                reader.read_unsigned_number()

    def test_end_of_input(self):
        """Test that reading a required token past the end raises"""
        with TextReader("   ") as reader:
            self.assertIsNone(reader.read_token())
            with self.assertRaises(UnexpectedEndOfInput) as cm:
                reader.read_expected_token("keyword")

        self.assertEqual(cm.exception.offset, 3)
        self.assertEqual(cm.exception.expected, ("keyword",))

    def test_stream_is_closed(self):
        """Test that a stream source is read and closed on exit"""
        stream = io.StringIO('VDATUM["NAVD88"]')
        with TextReader(stream) as reader:
            self.assertEqual(reader.text, 'VDATUM["NAVD88"]')

        self.assertTrue(stream.closed)
