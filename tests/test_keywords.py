from unittest import TestCase

from wktcrs.constructs.unit import UnitType
from wktcrs.utils.exceptions import SemanticError, UnknownKeyword
from wktcrs.wkt.keywords import KEYWORDS, UNIT_KEYWORDS, Keyword


class TestKeywordRegistry(TestCase):
    def test_legacy_and_long_spellings(self):
        """Test that WKT1 and long WKT2 spellings resolve to the canonical keyword"""
        self.assertEqual(KEYWORDS.resolve("GEOGCS"), Keyword.GEOGCRS)
        self.assertEqual(KEYWORDS.resolve("GeographicCRS"), Keyword.GEOGCRS)
        self.assertEqual(KEYWORDS.resolve("projcs"), Keyword.PROJCRS)
        self.assertEqual(KEYWORDS.resolve("SPHEROID"), Keyword.ELLIPSOID)
        self.assertEqual(KEYWORDS.resolve("AUTHORITY"), Keyword.ID)
        self.assertEqual(KEYWORDS.resolve("VRF"), Keyword.VDATUM)
        self.assertEqual(KEYWORDS.resolve("COMPD_CS"), Keyword.COMPOUNDCRS)

    def test_unknown_spelling(self):
        self.assertIsNone(KEYWORDS.resolve("FOOCRS"))
        self.assertEqual(KEYWORDS.resolve_ambiguous("FOOCRS"), frozenset())
        with self.assertRaises(UnknownKeyword):
            KEYWORDS.resolve_required("FOOCRS")

    def test_bare_unit_is_ambiguous(self):
        """Test that the bare UNIT spelling stands for every unit keyword"""
        self.assertIsNone(KEYWORDS.resolve("UNIT"))
        self.assertEqual(KEYWORDS.resolve_ambiguous("unit"), UNIT_KEYWORDS)
        with self.assertRaises(UnknownKeyword):
            KEYWORDS.resolve_required("UNIT")

    def test_spellings(self):
        self.assertEqual(
            KEYWORDS.spellings(Keyword.GEOGCRS), ("GEOGCRS", "GEOGRAPHICCRS", "GEOGCS")
        )
        self.assertEqual(KEYWORDS.spellings(Keyword.BBOX), ("BBOX",))

    def test_resolve_unit_type(self):
        """Test that a bare UNIT is narrowed by the types its position expects"""
        self.assertEqual(KEYWORDS.resolve_unit_type("UNIT", {UnitType.ANGLE}), UnitType.ANGLE)
        self.assertEqual(KEYWORDS.resolve_unit_type("UNIT", {UnitType.LENGTH}), UnitType.LENGTH)
        # explicit keywords are not narrowed
        self.assertEqual(
            KEYWORDS.resolve_unit_type("LENGTHUNIT", {UnitType.ANGLE}), UnitType.LENGTH
        )
        self.assertEqual(
            KEYWORDS.resolve_unit_type("TEMPORALQUANTITY", {UnitType.UNIT}), UnitType.TIME
        )

    def test_resolve_unit_type_generic(self):
        """Test that a bare UNIT stays generic when the position allows it"""
        self.assertEqual(KEYWORDS.resolve_unit_type("UNIT", {UnitType.UNIT}), UnitType.UNIT)
        self.assertEqual(
            KEYWORDS.resolve_unit_type("UNIT", {UnitType.ANGLE, UnitType.LENGTH, UnitType.UNIT}),
            UnitType.UNIT,
        )

    def test_resolve_unit_type_errors(self):
        with self.assertRaises(SemanticError):
            KEYWORDS.resolve_unit_type("UNIT", {UnitType.ANGLE, UnitType.LENGTH})
        with self.assertRaises(UnknownKeyword):
            KEYWORDS.resolve_unit_type("DATUM", {UnitType.ANGLE})
