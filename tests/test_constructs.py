from unittest import TestCase

from wktcrs.constructs.axis import Axis, AxisDirection, Meridian
from wktcrs.constructs.coordinate_system import CoordinateSystem, CoordinateSystemType
from wktcrs.constructs.crs import BoundCRS, CompoundCRS, CRSKind, GeodeticCRS, VerticalCRS
from wktcrs.constructs.datum import (
    DatumEnsemble,
    DatumEnsembleMember,
    Dynamic,
    GeodeticReferenceFrame,
    VerticalReferenceFrame,
)
from wktcrs.constructs.ellipsoid import Ellipsoid, PrimeMeridian
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.operation import (
    AbridgedTransformation,
    MapProjection,
    OperationMethod,
    OperationParameter,
)
from wktcrs.constructs.unit import Unit, Units, UnitType, convert, default_unit, get_unit
from wktcrs.utils.crs import WGS84_ELLIPSOID, WGS84_GEOGRAPHIC
from wktcrs.utils.exceptions import SemanticError


def _vertical_cs() -> CoordinateSystem:
    return CoordinateSystem(
        CoordinateSystemType.VERTICAL,
        1,
        [Axis("gravity-related height", AxisDirection.UP, "H")],
        Units.METRE,
    )


def _navd88() -> VerticalCRS:
    return VerticalCRS(
        "NAVD88",
        _vertical_cs(),
        datum=VerticalReferenceFrame("North American Vertical Datum 1988"),
    )


class TestEllipsoid(TestCase):
    def test_oblate(self):
        """Test the derived axes of an oblate ellipsoid"""
        self.assertTrue(WGS84_ELLIPSOID.is_oblate())
        self.assertFalse(WGS84_ELLIPSOID.is_sphere())
        self.assertAlmostEqual(WGS84_ELLIPSOID.semi_minor_axis, 6356752.314245, places=5)
        self.assertAlmostEqual(WGS84_ELLIPSOID.flattening, 1 / 298.257223563)

    def test_sphere(self):
        """Test that an inverse flattening of 0 is a sphere"""
        sphere = Ellipsoid.oblate("Sphere", 6371000.0, 0.0)

        self.assertTrue(sphere.is_sphere())
        self.assertEqual(sphere.flattening, 0.0)
        self.assertEqual(sphere.semi_minor_axis, 6371000.0)

    def test_triaxial(self):
        """Test that a triaxial ellipsoid keeps its three axes and has no flattening"""
        io = Ellipsoid.triaxial("Io", 1829400.0, 1819400.0, 1815700.0)

        self.assertFalse(io.is_oblate())
        self.assertEqual(io.semi_median_axis, 1819400.0)
        self.assertEqual(io.semi_minor_axis, 1815700.0)
        with self.assertRaises(TypeError):
            io.inverse_flattening
        with self.assertRaises(TypeError):
            WGS84_ELLIPSOID.semi_median_axis

    def test_invalid(self):
        with self.assertRaises(SemanticError):
            Ellipsoid.oblate("Bad", -1.0, 298.0)
        with self.assertRaises(SemanticError):
            Ellipsoid.oblate("Bad", 6378137.0, -298.0)
        with self.assertRaises(SemanticError):
            Ellipsoid.oblate("Bad", 6378137.0, 298.0, Units.DEGREE)

    def test_prime_meridian_unit(self):
        """Test that a prime meridian only takes an angle unit"""
        paris = PrimeMeridian("Paris", 2.5969213, Units.GRAD)
        self.assertTrue(paris.has_unit())
        with self.assertRaises(SemanticError):
            PrimeMeridian("Paris", 2.5969213, Units.METRE)


class TestUnits(TestCase):
    def test_conversion_factor_required(self):
        """Test that only time units may leave the conversion factor out"""
        with self.assertRaises(SemanticError):
            Unit(UnitType.LENGTH, "metre")
        with self.assertRaises(SemanticError):
            Unit(UnitType.ANGLE, "degree", 0.0)
        self.assertFalse(Units.CALENDAR_MONTH.has_conversion_factor())

    def test_convert(self):
        self.assertEqual(convert(1.0, Units.KILOMETRE, Units.METRE), 1000.0)
        self.assertAlmostEqual(convert(180.0, Units.DEGREE, Units.RADIAN), 3.141592653589793)
        self.assertAlmostEqual(convert(3600.0, Units.ARC_SECOND, Units.DEGREE), 1.0)
        with self.assertRaises(ValueError):
            convert(1.0, Units.METRE, Units.DEGREE)
        with self.assertRaises(ValueError):
            convert(1.0, Units.CALENDAR_MONTH, Units.SECOND)

    def test_lookup(self):
        """Test the well-known unit lookups and defaults"""
        self.assertEqual(get_unit("Metre"), Units.METRE)
        self.assertEqual(get_unit("meter"), Units.METRE)
        self.assertEqual(get_unit("Foot_US"), Units.US_SURVEY_FOOT)
        self.assertIsNone(get_unit("metre", UnitType.ANGLE))
        self.assertIsNone(get_unit("furlong"))
        self.assertEqual(default_unit(UnitType.ANGLE), Units.DEGREE)
        with self.assertRaises(ValueError):
            default_unit(UnitType.UNIT)


class TestAxisAndCoordinateSystem(TestCase):
    def test_label(self):
        self.assertEqual(Axis("Easting", AxisDirection.EAST, "E").label, "Easting (E)")
        self.assertEqual(Axis(None, AxisDirection.UP, "h").label, "(h)")
        self.assertEqual(Axis("Latitude", AxisDirection.NORTH).label, "Latitude")

    def test_direction_names(self):
        """Test that directions are looked up case insensitively, with OTHER as unspecified"""
        self.assertEqual(AxisDirection.from_name("NORTH"), AxisDirection.NORTH)
        self.assertEqual(AxisDirection.from_name("geocentricx"), AxisDirection.GEOCENTRIC_X)
        self.assertEqual(AxisDirection.from_name("OTHER"), AxisDirection.UNSPECIFIED)
        self.assertIsNone(AxisDirection.from_name("sideways"))

    def test_axis_constraints(self):
        """Test that meridian and bearing are only allowed on the matching directions"""
        meridian = Meridian(90.0, Units.DEGREE)
        self.assertEqual(Axis("Easting", AxisDirection.SOUTH, "E", meridian=meridian).meridian, meridian)
        with self.assertRaises(SemanticError):
            Axis("Easting", AxisDirection.EAST, "E", meridian=meridian)
        with self.assertRaises(SemanticError):
            Axis("Northing", AxisDirection.NORTH, bearing=45.0)
        with self.assertRaises(SemanticError):
            Axis(None, AxisDirection.NORTH)
        with self.assertRaises(SemanticError):
            Axis("Northing", AxisDirection.NORTH, order=0)

    def test_dimension_must_match_axes(self):
        with self.assertRaises(SemanticError):
            CoordinateSystem(
                CoordinateSystemType.CARTESIAN,
                2,
                [Axis("Easting", AxisDirection.EAST, "E")],
            )
        with self.assertRaises(SemanticError):
            CoordinateSystem(CoordinateSystemType.CARTESIAN, 4, [])

    def test_ordinal_axes_have_no_unit(self):
        """Test that ordinal coordinate systems reject units"""
        axes = [Axis("Inline", AxisDirection.COLUMN_POSITIVE, "I")]
        self.assertIsNone(CoordinateSystem(CoordinateSystemType.ORDINAL, 1, axes).unit)
        with self.assertRaises(SemanticError):
            CoordinateSystem(CoordinateSystemType.ORDINAL, 1, axes, Units.METRE)

    def test_axis_unit_falls_back_to_shared_unit(self):
        axes = [
            Axis("latitude", AxisDirection.NORTH),
            Axis("longitude", AxisDirection.EAST),
            Axis("ellipsoidal height", AxisDirection.UP, "h", unit=Units.METRE),
        ]
        cs = CoordinateSystem(CoordinateSystemType.ELLIPSOIDAL, 3, axes, Units.DEGREE)

        self.assertEqual(cs.axis_unit(0), Units.DEGREE)
        self.assertEqual(cs.axis_unit(2), Units.METRE)

    def test_lists_are_frozen(self):
        """Test that list arguments are stored as tuples and absent ones stay None"""
        cs = _vertical_cs()

        self.assertIsInstance(cs.axes, tuple)
        self.assertIsNone(cs.identifiers)
        self.assertFalse(cs.axes[0].has_identifiers())


class TestCRS(TestCase):
    def test_geographic_requires_ellipsoidal_cs(self):
        with self.assertRaises(SemanticError):
            GeodeticCRS(
                "Bad",
                CRSKind.GEOGRAPHIC,
                CoordinateSystem(
                    CoordinateSystemType.CARTESIAN,
                    2,
                    [Axis("X", AxisDirection.EAST), Axis("Y", AxisDirection.NORTH)],
                ),
                datum=WGS84_GEOGRAPHIC.datum,
            )

    def test_datum_or_ensemble(self):
        """Test that a CRS takes exactly one of a datum and a datum ensemble"""
        ensemble = DatumEnsemble(
            "World Geodetic System 1984 ensemble",
            [DatumEnsembleMember("WGS 84 (G730)"), DatumEnsembleMember("WGS 84 (G873)")],
            2.0,
            WGS84_ELLIPSOID,
        )
        cs = WGS84_GEOGRAPHIC.coordinate_system

        crs = GeodeticCRS("WGS 84", CRSKind.GEOGRAPHIC, cs, ensemble=ensemble)
        self.assertEqual(crs.ellipsoid, WGS84_ELLIPSOID)
        self.assertIsNone(crs.prime_meridian)
        with self.assertRaises(SemanticError):
            GeodeticCRS("WGS 84", CRSKind.GEOGRAPHIC, cs, datum=WGS84_GEOGRAPHIC.datum, ensemble=ensemble)
        with self.assertRaises(SemanticError):
            GeodeticCRS("WGS 84", CRSKind.GEOGRAPHIC, cs)

    def test_datum_type_must_match_kind(self):
        with self.assertRaises(SemanticError):
            VerticalCRS("Bad", _vertical_cs(), datum=WGS84_GEOGRAPHIC.datum)

    def test_ensemble_needs_two_members(self):
        with self.assertRaises(SemanticError):
            DatumEnsemble("Lonely", [DatumEnsembleMember("Only")], 1.0)

    def test_vertical_ensemble_cannot_have_prime_meridian(self):
        with self.assertRaises(SemanticError):
            DatumEnsemble(
                "Heights",
                [DatumEnsembleMember("A"), DatumEnsembleMember("B")],
                1.0,
                prime_meridian=PrimeMeridian("Greenwich", 0.0),
            )

    def test_dynamic_model_identifiers_need_name(self):
        with self.assertRaises(SemanticError):
            Dynamic(2010.0, model_identifiers=[Identifier.epsg(1234)])

    def test_compound_components(self):
        """Test that a compound CRS needs two or more single CRS components"""
        compound = CompoundCRS("WGS 84 + NAVD88", [WGS84_GEOGRAPHIC, _navd88()])
        self.assertEqual(len(compound.components), 2)

        with self.assertRaises(SemanticError):
            CompoundCRS("Alone", [WGS84_GEOGRAPHIC])
        with self.assertRaises(SemanticError):
            CompoundCRS("Nested", [compound, _navd88()])

    def test_bound_crs_takes_source_name(self):
        transformation = AbridgedTransformation(
            "NAVD88 to WGS 84",
            OperationMethod("Vertical Offset"),
            [OperationParameter("Vertical Offset", 0.5, Units.METRE)],
        )
        bound = BoundCRS(_navd88(), WGS84_GEOGRAPHIC, transformation)

        self.assertEqual(bound.name, "NAVD88")
        with self.assertRaises(SemanticError):
            BoundCRS(bound, WGS84_GEOGRAPHIC, transformation)

    def test_identifier_lookup(self):
        self.assertEqual(WGS84_GEOGRAPHIC.identifier("epsg"), Identifier("EPSG", "4326"))
        self.assertIsNone(WGS84_GEOGRAPHIC.identifier("ESRI"))

    def test_extension_lookup(self):
        crs = GeodeticCRS(
            "WGS 84",
            CRSKind.GEOGRAPHIC,
            WGS84_GEOGRAPHIC.coordinate_system,
            datum=GeodeticReferenceFrame("WGS_1984", WGS84_ELLIPSOID),
            extensions=[("PROJ4", "+proj=longlat +datum=WGS84")],
        )
        self.assertEqual(crs.extension("proj4"), "+proj=longlat +datum=WGS84")
        self.assertIsNone(crs.extension("OTHER"))


class TestIdentifier(TestCase):
    def test_epsg(self):
        ident = Identifier.epsg(4326)

        self.assertEqual(str(ident), "EPSG:4326")
        self.assertEqual(ident.code, 4326)
        self.assertTrue(ident.is_epsg())
        self.assertIsNone(Identifier("ESRI", "ESRI_102100").code)


class TestParameterLookup(TestCase):
    def setUp(self):
        self.conversion = MapProjection(
            "UTM zone 31N",
            OperationMethod("Transverse_Mercator"),
            [
                OperationParameter("latitude_of_origin", 0.0),
                OperationParameter("central_meridian", 3.0),
                OperationParameter("scale_factor", 0.9996),
                OperationParameter("False easting", 500000.0, identifiers=[Identifier.epsg(8806)]),
            ],
        )

    def test_by_name(self):
        """Test that parameters are found by name in any case or by a well-known alias"""
        self.assertEqual(self.conversion.parameter("CENTRAL_MERIDIAN").value, 3.0)
        self.assertEqual(self.conversion.parameter("Longitude of natural origin").value, 3.0)
        self.assertEqual(self.conversion.parameter("Scale factor at natural origin").value, 0.9996)
        self.assertIsNone(self.conversion.parameter("Azimuth of initial line"))

    def test_by_code(self):
        """Test that parameters are found by EPSG identifier or through the method table"""
        self.assertEqual(self.conversion.parameter(8806).value, 500000.0)
        self.assertEqual(self.conversion.parameter(8801).value, 0.0)
        self.assertIsNone(self.conversion.parameter(8807))

    def test_method_well_known(self):
        self.assertEqual(self.conversion.method.well_known.code, 9807)
        self.assertIsNone(OperationMethod("Pole rotation").well_known)
        # an EPSG identifier wins over the name
        method = OperationMethod("Some TM", [Identifier.epsg(9808)])
        self.assertEqual(method.well_known.name, "Transverse Mercator (South Orientated)")
