from unittest import TestCase

from wktcrs.constructs.unit import UnitType
from wktcrs.utils import epsg
from wktcrs.utils.epsg import OperationType


class TestEPSGTables(TestCase):
    def test_get_method(self):
        """Test method lookup by code, name, alias and WKT1 spelling"""
        self.assertEqual(epsg.get_method(9807).name, "Transverse Mercator")
        self.assertEqual(epsg.get_method("Transverse_Mercator").code, 9807)
        self.assertEqual(epsg.get_method("transverse mercator").code, 9807)
        self.assertEqual(epsg.get_method("Lambert_Conformal_Conic_2SP").code, 9802)
        self.assertEqual(epsg.get_method("Lambert Conic Conformal (2SP)").code, 9802)
        self.assertEqual(epsg.get_method("Mercator_1SP").code, 9804)
        self.assertIsNone(epsg.get_method("Pole rotation"))
        self.assertIsNone(epsg.get_method(1))

    def test_unparenthesized_spelling(self):
        """Test that the WKT1 form without the parenthesized variant matches"""
        self.assertEqual(epsg.get_method("Polar_Stereographic").code, 9810)
        self.assertEqual(
            [m.code for m in epsg.get_methods("Position_Vector_transformation")],
            [1033, 9606],
        )

    def test_get_parameter_in_method(self):
        """Test that a shared parameter name resolves among the parameters of the method"""
        tm = epsg.get_method(9807)
        lcc = epsg.get_method(9802)

        self.assertEqual(epsg.get_parameter("latitude_of_origin", tm).code, 8801)
        self.assertEqual(epsg.get_parameter("latitude_of_origin", lcc).code, 8821)
        self.assertEqual(epsg.get_parameter("false_easting", tm).code, 8806)
        self.assertEqual(epsg.get_parameter("false_easting", lcc).code, 8826)
        self.assertEqual(epsg.get_parameter("standard_parallel_1", lcc).code, 8823)
        self.assertIsNone(epsg.get_parameter("standard_parallel_1", tm))

    def test_get_parameter(self):
        self.assertEqual(epsg.get_parameter(8805).name, "Scale factor at natural origin")
        self.assertEqual(epsg.get_parameter(8805).unit_type, UnitType.SCALE)
        self.assertEqual(epsg.get_parameter("dX").code, 8605)
        self.assertIsNone(epsg.get_parameter("Latitude difference file").unit_type)
        self.assertIsNone(epsg.get_parameter("Bin grid origin I"))

    def test_method_parameters(self):
        nadcon = epsg.METHODS_BY_CODE[9613]

        self.assertEqual(nadcon.operation_type, OperationType.COORDINATE)
        self.assertEqual(
            [p.name for p in nadcon.parameters()],
            ["Latitude difference file", "Longitude difference file"],
        )

    def test_tables_are_read_only(self):
        with self.assertRaises(TypeError):
            epsg.METHODS_BY_CODE[1] = epsg.METHODS_BY_CODE[9807]
