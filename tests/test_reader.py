from unittest import TestCase

from wktcrs import CRSReader, read_crs, read_wkt
from wktcrs.constructs.axis import AxisDirection
from wktcrs.constructs.coordinate_operation import (
    ConcatenatedOperation,
    CoordinateMetadata,
    CoordinateOperation,
    PointMotionOperation,
)
from wktcrs.constructs.coordinate_system import CoordinateSystemType
from wktcrs.constructs.crs import (
    BaseProjectedCRS,
    BoundCRS,
    CompoundCRS,
    CRSKind,
    DerivedCRS,
    EngineeringCRS,
    GeodeticCRS,
    ParametricCRS,
    ProjectedCRS,
    TemporalCRS,
    VerticalCRS,
)
from wktcrs.constructs.date_time import DateTime
from wktcrs.constructs.ellipsoid import EllipsoidType
from wktcrs.constructs.identifier import Identifier
from wktcrs.constructs.operation import ParameterFile
from wktcrs.constructs.unit import Unit, Units, UnitType
from wktcrs.utils.exceptions import (
    LexicalError,
    MissingSeparator,
    SemanticError,
    UnexpectedEndOfInput,
    UnexpectedKeyword,
    UnknownKeyword,
    WKTSyntaxError,
)
from wktcrs.wkt.reader import (
    read_bound,
    read_compound,
    read_geographic,
    read_projected,
    read_vertical,
)
from tests import get_test_dir

ASSETS = get_test_dir() / "test_assets"

WGS84_GEOGCS = (
    'GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]],'
    'PRIMEM["Greenwich",0],UNIT["degree",0.0174532925199433]]'
)

NAVD88 = (
    'VERTCRS["NAVD88",VDATUM["North American Vertical Datum 1988"],'
    'CS[vertical,1],AXIS["gravity-related height (H)",up],LENGTHUNIT["metre",1.0]]'
)


def read_asset(name: str) -> str:
    return (ASSETS / name).read_text(encoding="utf-8")


class TestReadGeodetic(TestCase):
    def test_legacy_geographic(self):
        """Test that a WKT1 GEOGCS reads as a geographic CRS with an oblate ellipsoid"""
        crs = read_wkt(WGS84_GEOGCS)

        self.assertIsInstance(crs, GeodeticCRS)
        self.assertEqual(crs.kind, CRSKind.GEOGRAPHIC)
        self.assertEqual(crs.name, "WGS 84")
        self.assertEqual(crs.ellipsoid.ellipsoid_type, EllipsoidType.OBLATE)
        self.assertEqual(crs.ellipsoid.semi_major_axis, 6378137.0)
        self.assertEqual(crs.ellipsoid.inverse_flattening, 298.257223563)
        self.assertEqual(crs.prime_meridian.longitude, 0.0)
        self.assertEqual(crs.coordinate_system.unit, Units.DEGREE)

    def test_keyword_spellings(self):
        """Test that every spelling of a keyword reads to the same CRS"""
        body = (
            '["WGS 84",DATUM["WGS 84",ELLIPSOID["WGS 84",6378137,298.257223563]],'
            'CS[ellipsoidal,2],AXIS["lat",north],AXIS["lon",east],ANGLEUNIT["degree",0.0174532925199433]]'
        )
        for keyword in ("GEOGCRS", "GEOGRAPHICCRS", "geogcrs"):
            with self.subTest(keyword=keyword):
                crs = read_wkt(keyword + body)
                self.assertEqual(crs.kind, CRSKind.GEOGRAPHIC)
                self.assertEqual(crs.datum.name, "WGS 84")

    def test_unexpected_keyword_is_a_syntax_error(self):
        with self.assertRaises(UnexpectedKeyword):
            with CRSReader('VDATUM["NAVD88"]') as reader:
                reader.read_ellipsoid()

    def test_ensemble(self):
        """Test that a datum ensemble keeps its members, accuracy and prime meridian"""
        crs = read_wkt(read_asset("ensemble_wgs84.wkt"))
        ensemble = crs.ensemble

        self.assertIsNone(crs.datum)
        self.assertEqual(
            [m.name for m in ensemble.members],
            [
                "World Geodetic System 1984 (Transit)",
                "World Geodetic System 1984 (G730)",
                "World Geodetic System 1984 (G873)",
            ],
        )
        self.assertEqual(ensemble.members[1].identifiers, (Identifier("EPSG", "1152"),))
        self.assertEqual(ensemble.accuracy, 2.0)
        self.assertEqual(ensemble.ellipsoid.name, "WGS 84")
        self.assertEqual(crs.prime_meridian.name, "Greenwich")
        self.assertEqual(ensemble.identifier("EPSG").code, 6326)

    def test_usage(self):
        crs = read_wkt(read_asset("ensemble_wgs84.wkt"))
        usage = crs.usages[0]

        self.assertEqual(usage.scope, "Horizontal component of 3D system.")
        self.assertEqual(usage.extent.area_description, "World.")
        self.assertEqual(usage.extent.bounding_box.lower_left_longitude, -180.0)

    def test_datum_and_ensemble_rejected(self):
        """Test that a CRS supplying both a datum and an ensemble fails"""
        text = (
            'GEOGCRS["WGS 84",DATUM["World Geodetic System 1984",ELLIPSOID["WGS 84",6378137,298.257223563]],'
            'ENSEMBLE["WGS 84 ensemble",MEMBER["WGS 84 (G730)"],MEMBER["WGS 84 (G873)"],'
            'ELLIPSOID["WGS 84",6378137,298.257223563],ENSEMBLEACCURACY[2]],'
            'CS[ellipsoidal,2],AXIS["latitude",north],AXIS["longitude",east],'
            'ANGLEUNIT["degree",0.0174532925199433]]'
        )
        with self.assertRaises(SemanticError) as cm:
            read_wkt(text)

        self.assertEqual(cm.exception.production, "GEOGCRS")
        self.assertEqual(cm.exception.token, "ENSEMBLE")

    def test_missing_datum(self):
        with self.assertRaises(SemanticError) as cm:
            read_wkt('GEOGCRS["x",CS[ellipsoidal,2],AXIS["lat",north],AXIS["lon",east]]')

        self.assertEqual(cm.exception.expected, ("DATUM", "ENSEMBLE"))

    def test_dynamic(self):
        """Test that a dynamic frame keeps its epoch and deformation model"""
        text = (
            'GEOGCRS["NAD83(CSRS)v7",DYNAMIC[FRAMEEPOCH[2010.0],MODEL["NAD83(CSRS)v7 velocity grid"]],'
            'DATUM["North American Datum of 1983 (CSRS) version 7",'
            'ELLIPSOID["GRS 1980",6378137,298.257222101,LENGTHUNIT["metre",1.0]]],'
            'CS[ellipsoidal,2],AXIS["latitude",north],AXIS["longitude",east],'
            'ANGLEUNIT["degree",0.0174532925199433]]'
        )
        crs = read_wkt(text)

        self.assertEqual(crs.dynamic.frame_epoch, 2010.0)
        self.assertEqual(crs.dynamic.model_name, "NAD83(CSRS)v7 velocity grid")

    def test_geocentric(self):
        crs = read_wkt(read_asset("coordinate_operation_tokyo.wkt")).source

        self.assertEqual(crs.kind, CRSKind.GEODETIC)
        self.assertEqual(crs.coordinate_system.cs_type, CoordinateSystemType.CARTESIAN)
        self.assertEqual(
            [a.direction for a in crs.coordinate_system.axes],
            [AxisDirection.GEOCENTRIC_X, AxisDirection.GEOCENTRIC_Y, AxisDirection.GEOCENTRIC_Z],
        )
        self.assertEqual([a.order for a in crs.coordinate_system.axes], [1, 2, 3])

    def test_triaxial(self):
        text = (
            'GEODCRS["Io",DATUM["Io",TRIAXIAL["Io",1829400,1819400,1815700,LENGTHUNIT["metre",1]]],'
            'CS[Cartesian,3],AXIS["(X)",geocentricX],AXIS["(Y)",geocentricY],AXIS["(Z)",geocentricZ],'
            'LENGTHUNIT["metre",1]]'
        )
        crs = read_wkt(text)

        self.assertEqual(crs.ellipsoid.ellipsoid_type, EllipsoidType.TRIAXIAL)
        self.assertEqual(crs.ellipsoid.semi_median_axis, 1819400.0)


class TestReadProjected(TestCase):
    def test_projected(self):
        """Test that a WKT2 projected CRS keeps its base, conversion and axes"""
        crs = read_wkt(read_asset("utm10n.wkt"))

        self.assertIsInstance(crs, ProjectedCRS)
        self.assertEqual(crs.base.name, "WGS 84")
        self.assertEqual(crs.base.kind, CRSKind.GEOGRAPHIC)
        self.assertEqual(crs.base.prime_meridian.unit, Units.DEGREE)
        self.assertEqual(crs.conversion.method.identifier("EPSG").code, 9807)
        self.assertEqual(crs.conversion.parameter(8802).value, -123.0)
        self.assertEqual(crs.conversion.parameter("Scale factor at natural origin").unit, Units.UNITY)
        self.assertEqual([a.abbreviation for a in crs.coordinate_system.axes], ["E", "N"])
        self.assertEqual(crs.identifier("EPSG").code, 32610)

    def test_derived_projected(self):
        text = (
            'DERIVEDPROJCRS["Site grid",'
            'BASEPROJCRS["WGS 84 / UTM zone 10N",'
            'BASEGEOGCRS["WGS 84",DATUM["World Geodetic System 1984",ELLIPSOID["WGS 84",6378137,298.257223563]]],'
            'CONVERSION["UTM zone 10N",METHOD["Transverse Mercator",ID["EPSG",9807]],'
            'PARAMETER["Longitude of natural origin",-123,ANGLEUNIT["degree",0.0174532925199433]]]],'
            'DERIVINGCONVERSION["Site grid",METHOD["Similarity transformation",ID["EPSG",9621]],'
            'PARAMETER["Scale factor for source CRS axes",0.5,SCALEUNIT["unity",1]]],'
            'CS[Cartesian,2],AXIS["site east (x)",east],AXIS["site north (y)",north],'
            'LENGTHUNIT["metre",1]]'
        )
        crs = read_wkt(text)

        self.assertIsInstance(crs, DerivedCRS)
        self.assertEqual(crs.derived_kind, CRSKind.PROJECTED)
        self.assertIsInstance(crs.base, BaseProjectedCRS)
        self.assertEqual(crs.base.base.name, "WGS 84")
        self.assertEqual(crs.conversion.parameters[0].value, 0.5)


class TestReadOtherCRS(TestCase):
    def test_vertical(self):
        crs = read_wkt(read_asset("vertical_cgvd2013.wkt"))

        self.assertIsInstance(crs, VerticalCRS)
        self.assertEqual(crs.datum.name, "Canadian Geodetic Vertical Datum of 2013")
        self.assertEqual(crs.geoid_models[0].name, "CGG2013")
        self.assertEqual(crs.coordinate_system.axes[0].direction, AxisDirection.UP)

    def test_vertical_alias(self):
        """Test that the VRF spelling reads as a vertical reference frame"""
        crs = read_wkt(NAVD88.replace("VDATUM", "VRF"))
        self.assertEqual(crs.datum.name, "North American Vertical Datum 1988")

    def test_engineering(self):
        crs = read_wkt(read_asset("engineering_site.wkt"))

        self.assertIsInstance(crs, EngineeringCRS)
        self.assertEqual(crs.datum.anchor, "Peg in south corner")
        self.assertEqual(crs.coordinate_system.axes[0].direction, AxisDirection.SOUTH_WEST)
        self.assertEqual(crs.usages[0].extent.temporal_extent.start, "date/time t1")

    def test_polar_axis_units(self):
        """Test that bare axis units in a polar system are typed by the axis direction"""
        text = (
            'ENGCRS["Polar",ENGINEERINGDATUM["Peg"],CS[polar,2],'
            'AXIS["distance (r)",awayFrom,UNIT["metre",1]],'
            'AXIS["bearing (U)",clockwise,BEARING[234],UNIT["degree",0.0174532925199433]]]'
        )
        axes = read_wkt(text).coordinate_system.axes

        self.assertEqual(axes[0].unit.unit_type, UnitType.LENGTH)
        self.assertEqual(axes[1].unit.unit_type, UnitType.ANGLE)
        self.assertEqual(axes[1].bearing, 234.0)

    def test_parametric(self):
        crs = read_wkt(read_asset("parametric_wmo.wkt"))

        self.assertIsInstance(crs, ParametricCRS)
        self.assertEqual(crs.coordinate_system.unit.unit_type, UnitType.PARAMETRIC)
        self.assertEqual(crs.coordinate_system.unit.conversion_factor, 100.0)
        self.assertEqual(crs.datum.anchor, "1013.25 hPa at 15°C")

    def test_temporal(self):
        crs = read_wkt(read_asset("temporal_gps.wkt"))

        self.assertIsInstance(crs, TemporalCRS)
        self.assertEqual(crs.datum.origin, DateTime.parse("1980-01-01T00:00:00.0Z"))
        self.assertEqual(crs.coordinate_system.cs_type, CoordinateSystemType.TEMPORAL_COUNT)
        self.assertEqual(crs.coordinate_system.axes[0].unit, Unit(UnitType.TIME, "millisecond (ms)", 0.001))

    def test_temporal_calendar(self):
        """Test a calendar based time unit without a conversion factor"""
        text = (
            'TIMECRS["Calendar hours from 1979-12-29",'
            'TDATUM["29 December 1979",CALENDAR["proleptic Gregorian"],TIMEORIGIN[1979-12-29T00Z]],'
            'CS[temporalCount,1],AXIS["time",future,TIMEUNIT["hour"]]]'
        )
        crs = read_wkt(text)

        self.assertEqual(crs.datum.calendar, "proleptic Gregorian")
        self.assertEqual(crs.datum.origin.hour, 0)
        self.assertIsNone(crs.coordinate_system.axes[0].unit.conversion_factor)

    def test_temporal_date_time(self):
        crs = read_wkt('TIMECRS["DateTime",TDATUM["Gregorian calendar"],CS[TemporalDateTime,1],AXIS["time (T)",future]]')

        self.assertEqual(crs.coordinate_system.cs_type, CoordinateSystemType.TEMPORAL_DATE_TIME)
        self.assertIsNone(crs.datum.origin)

    def test_derived_geographic(self):
        crs = read_wkt(read_asset("derived_atlantic_pole.wkt"))

        self.assertIsInstance(crs, DerivedCRS)
        self.assertEqual(crs.derived_kind, CRSKind.GEOGRAPHIC)
        self.assertEqual(crs.base.dynamic.frame_epoch, 2005.0)
        self.assertEqual(crs.conversion.parameter("Axis rotation").value, -25.0)

    def test_derived_engineering_from_geodetic(self):
        text = (
            'ENGCRS["Topocentric example",'
            'BASEGEODCRS["WGS 84",DATUM["World Geodetic System 1984",ELLIPSOID["WGS 84",6378137,298.257223563]]],'
            'DERIVINGCONVERSION["Topocentric example",METHOD["Geocentric/topocentric conversions",ID["EPSG",9836]],'
            'PARAMETER["Geocentric X of topocentric origin",3771793.97,LENGTHUNIT["metre",1]]],'
            'CS[Cartesian,3],AXIS["topocentric East (U)",east],AXIS["topocentric North (V)",north],'
            'AXIS["topocentric height (W)",up],LENGTHUNIT["metre",1]]'
        )
        crs = read_wkt(text)

        self.assertEqual(crs.derived_kind, CRSKind.ENGINEERING)
        self.assertEqual(crs.base.kind, CRSKind.GEODETIC)

    def test_compound(self):
        crs = read_wkt(read_asset("compound_nad83_navd88.wkt"))

        self.assertIsInstance(crs, CompoundCRS)
        self.assertEqual([c.name for c in crs.components], ["NAD83", "NAVD88"])
        self.assertIsInstance(crs.components[1], VerticalCRS)

    def test_bound(self):
        crs = read_wkt(read_asset("bound_nad27_alaska.wkt"))

        self.assertIsInstance(crs, BoundCRS)
        self.assertEqual(crs.name, "NAD27")
        self.assertEqual(crs.target.name, "NAD83")
        files = crs.transformation.parameters
        self.assertTrue(all(isinstance(f, ParameterFile) for f in files))
        self.assertEqual(files[1].file_name, "alaska.los")


class TestReadOperations(TestCase):
    def test_coordinate_operation(self):
        operation = read_wkt(read_asset("coordinate_operation_tokyo.wkt"))

        self.assertIsInstance(operation, CoordinateOperation)
        self.assertEqual(operation.version, "GSI")
        self.assertEqual(operation.target.name, "JGD2000")
        self.assertEqual(operation.parameter("dY").value, 507.337)
        self.assertEqual(operation.accuracy, 1.0)

    def test_concatenated_operation(self):
        operation = read_wkt(read_asset("concatenated_rt90_kkj.wkt"))

        self.assertIsInstance(operation, ConcatenatedOperation)
        self.assertEqual([s.name for s in operation.steps], ["RT90 to ETRS89", "KKJ to ETRS89"])
        self.assertEqual(operation.steps[0].parameter("Scale difference").unit.name, "parts per million")
        self.assertEqual(operation.remark, "Step 2 is applied in reverse direction")
        self.assertIsNone(operation.usages[0].extent.bounding_box)

    def test_point_motion_operation(self):
        text = (
            'POINTMOTIONOPERATION["Canada velocity grid v7",'
            'SOURCECRS[GEOGCRS["NAD83(CSRS)v7",DATUM["North American Datum of 1983 (CSRS) version 7",'
            'ELLIPSOID["GRS 1980",6378137,298.257222101,LENGTHUNIT["metre",1]]],'
            'CS[ellipsoidal,3],AXIS["latitude",north,ANGLEUNIT["degree",0.0174532925199433]],'
            'AXIS["longitude",east,ANGLEUNIT["degree",0.0174532925199433]],'
            'AXIS["ellipsoidal height (h)",up,LENGTHUNIT["metre",1]]]],'
            'METHOD["Point motion by grid (Canada NTv2_Vel)"],'
            'PARAMETERFILE["Point motion velocity grid file","NAD83v70VG.gvb"],'
            'OPERATIONACCURACY[0.01]]'
        )
        operation = read_wkt(text)

        self.assertIsInstance(operation, PointMotionOperation)
        self.assertEqual(operation.parameters[0].file_name, "NAD83v70VG.gvb")
        self.assertEqual(operation.source.coordinate_system.axis_unit(2), Units.METRE)
        self.assertEqual(operation.accuracy, 0.01)

    def test_coordinate_metadata(self):
        text = (
            'COORDINATEMETADATA[GEOGCRS["ITRF2014",DYNAMIC[FRAMEEPOCH[2010]],'
            'DATUM["International Terrestrial Reference Frame 2014",ELLIPSOID["GRS 1980",6378137,298.257222101]],'
            'CS[ellipsoidal,2],AXIS["latitude",north],AXIS["longitude",east],'
            'ANGLEUNIT["degree",0.0174532925199433]],EPOCH[2016.47]]'
        )
        metadata = read_wkt(text)

        self.assertIsInstance(metadata, CoordinateMetadata)
        self.assertEqual(metadata.epoch, 2016.47)
        self.assertEqual(metadata.name, "ITRF2014")


class TestReadFragments(TestCase):
    def test_axis_with_meridian(self):
        """Test that an axis keeps its name, abbreviation, direction, meridian and order"""
        text = 'AXIS["Easting (E)",south,MERIDIAN[90,ANGLEUNIT["degree",0.0174532925199433]],ORDER[1]]'
        with CRSReader(text) as reader:
            axis = reader.read_axis()

        self.assertEqual(axis.name, "Easting")
        self.assertEqual(axis.abbreviation, "E")
        self.assertEqual(axis.direction, AxisDirection.SOUTH)
        self.assertEqual(axis.meridian.longitude, 90.0)
        self.assertEqual(axis.meridian.unit, Units.DEGREE)
        self.assertEqual(axis.order, 1)

    def test_identifier(self):
        text = 'ID["EPSG",4326,1,CITATION["IOGP"],URI["urn:ogc:def:crs:EPSG::4326"]]'
        with CRSReader(text) as reader:
            identifier = reader.read_identifier()

        self.assertEqual(identifier, Identifier("EPSG", "4326", "1", "IOGP", "urn:ogc:def:crs:EPSG::4326"))

    def test_text_identifier(self):
        with CRSReader('AUTHORITY["ESRI","ESRI_102100"]') as reader:
            self.assertEqual(reader.read_identifier().unique_id, "ESRI_102100")

    def test_bare_unit(self):
        """Test that a bare UNIT takes the type its position expects"""
        with CRSReader('UNIT["foot",0.3048]') as reader:
            unit = reader.read_unit({UnitType.LENGTH})
        self.assertEqual(unit.unit_type, UnitType.LENGTH)

        with CRSReader('UNIT["foot",0.3048]') as reader:
            self.assertEqual(reader.read_unit().unit_type, UnitType.UNIT)

    def test_usage_2015_form(self):
        """Test that SCOPE and extents written directly in the CRS read as a usage"""
        text = NAVD88[:-1] + (
            ',SCOPE["Geodesy."],AREA["USA"],BBOX[24.0,-125.0,49.0,-66.0],'
            'VERTICALEXTENT[-100,5000,LENGTHUNIT["metre",1]],TIMEEXTENT[1991-06-01,"present"]]'
        )
        usage = read_wkt(text).usages[0]

        self.assertEqual(usage.scope, "Geodesy.")
        self.assertEqual(usage.extent.vertical_extent.maximum_height, 5000.0)
        self.assertEqual(usage.extent.temporal_extent.start, DateTime(1991, 6, 1))
        self.assertEqual(usage.extent.temporal_extent.end, "present")

    def test_stream_source(self):
        """Test that a file object is read and closed"""
        with open(ASSETS / "utm10n.wkt", encoding="utf-8") as f:
            crs = read_wkt(f)
            self.assertTrue(f.closed)
        self.assertEqual(crs.name, "WGS 84 / UTM zone 10N")

    def test_delimiters_and_quotes(self):
        """Test that parentheses and typographic quotes are accepted"""
        crs = read_wkt('VERT_CS(“NAVD88”,VERT_DATUM("North American Vertical Datum 1988",2005),UNIT("metre",1)]')
        self.assertEqual(crs.name, "NAVD88")
        self.assertEqual(crs.coordinate_system.unit, Units.METRE)


class TestLenientMode(TestCase):
    def test_missing_separator_and_trailing_text(self):
        """Test that lenient mode warns about a missing separator and trailing text"""
        text = NAVD88.replace('"NAVD88",', '"NAVD88" ') + " trailing"

        with self.assertRaises(MissingSeparator):
            read_wkt(text)
        with self.assertLogs("wktcrs.wkt.reader", level="WARNING") as cm:
            crs = read_wkt(text, strict=False)

        self.assertEqual(crs.name, "NAVD88")
        self.assertEqual(len(cm.output), 2)
        self.assertIn("missing separator", cm.output[0])
        self.assertIn("ignoring text", cm.output[1])

    def test_lenient_still_rejects_bad_grammar(self):
        with self.assertRaises(UnknownKeyword):
            read_wkt('BOGUS["y"]', strict=False)


class TestReadErrors(TestCase):
    def test_unterminated_ellipsoid(self):
        """Test that an unterminated ELLIPSOID names the production and the end of input"""
        text = 'GEOGCRS["WGS 84",DATUM["World Geodetic System 1984",ELLIPSOID["WGS 84",6378137,298.257223563'
        with self.assertRaises(WKTSyntaxError) as cm:
            read_wkt(text)

        self.assertIsInstance(cm.exception, UnexpectedEndOfInput)
        self.assertEqual(cm.exception.production, "ELLIPSOID")
        self.assertEqual(cm.exception.offset, len(text))
        self.assertIn("in ELLIPSOID", str(cm.exception))

    def test_unterminated_ellipsoid_fragment(self):
        text = 'ELLIPSOID["WGS 84",6378137,298.257223563'
        with CRSReader(text) as reader:
            with self.assertRaises(UnexpectedEndOfInput) as cm:
                reader.read_ellipsoid()

        self.assertEqual(cm.exception.production, "ELLIPSOID")
        self.assertEqual(cm.exception.offset, len(text))

    def test_unknown_keyword(self):
        with self.assertRaises(UnknownKeyword) as cm:
            read_wkt('FOOCRS["x"]')

        self.assertEqual(cm.exception.offset, 0)
        self.assertIn("GEOGCRS", cm.exception.expected)

    def test_unexpected_keyword(self):
        with self.assertRaises(UnexpectedKeyword):
            read_wkt('DATUM["World Geodetic System 1984",ELLIPSOID["WGS 84",6378137,298.257223563]]')

    def test_unterminated_quote(self):
        with self.assertRaises(LexicalError) as cm:
            read_wkt('GEOGCRS["WGS 84')

        self.assertEqual(cm.exception.production, "GEOGCRS")
        self.assertEqual(cm.exception.offset, 8)

    def test_invalid_number(self):
        with self.assertRaises(LexicalError) as cm:
            read_wkt('VERTCRS["x",VDATUM["y"],CS[vertical,one]]')

        self.assertEqual(cm.exception.production, "CS")
        self.assertEqual(cm.exception.token, "one")

    def test_trailing_text(self):
        with self.assertRaises(WKTSyntaxError) as cm:
            read_wkt(NAVD88 + "]")

        self.assertEqual(cm.exception.offset, len(NAVD88))

    def test_unknown_axis_direction(self):
        with self.assertRaises(UnknownKeyword) as cm:
            read_wkt(NAVD88.replace(",up]", ",sideways]"))

        self.assertEqual(cm.exception.production, "AXIS")

    def test_empty_input(self):
        with self.assertRaises(UnexpectedEndOfInput):
            read_wkt("")

    def test_semantic_error_from_model(self):
        """Test that an invalid object raises a semantic error"""
        with self.assertRaises(SemanticError):
            read_wkt('VERTCRS["x",VDATUM["y"],CS[vertical,2],AXIS["h",up]]')

    def test_bad_towgs84_count(self):
        text = WGS84_GEOGCS.replace("298.257223563]]", "298.257223563],TOWGS84[1,2,3,4,5]]")
        with self.assertRaises(SemanticError) as cm:
            read_wkt(text)

        self.assertEqual(cm.exception.production, "TOWGS84")


class TestTypedReaders(TestCase):
    def test_matching_kind(self):
        self.assertEqual(read_projected(read_asset("utm10n.wkt")).name, "WGS 84 / UTM zone 10N")
        self.assertEqual(read_geographic(WGS84_GEOGCS).name, "WGS 84")
        self.assertEqual(read_vertical(NAVD88).name, "NAVD88")
        self.assertIsInstance(read_compound(read_asset("compound_nad83_navd88.wkt")), CompoundCRS)
        self.assertIsInstance(read_bound(read_asset("bound_nad27_alaska.wkt")), BoundCRS)

    def test_kind_mismatch(self):
        """Test that a typed reader rejects a CRS of another kind"""
        with self.assertRaises(SemanticError):
            read_geographic(read_asset("utm10n.wkt"))
        with self.assertRaises(SemanticError):
            read_crs(read_asset("coordinate_operation_tokyo.wkt"))

    def test_bound_legacy_is_unwrapped_for_the_check(self):
        """Test that a legacy CRS bound by TOWGS84 passes the check for its own kind"""
        crs = read_projected(read_asset("ed50_utm31n.wkt"))

        self.assertIsInstance(crs, BoundCRS)
        self.assertIsInstance(crs.source, ProjectedCRS)
