"""
Tests for the classification of MULTIPOLE rows.
"""

import pytest

from latticekit.utilities.tfs_table import DataTable
from latticekit.utilities.mad_interface import get_multipole_type


def classify(**row):
    row.setdefault("NAME", "MP")
    row.setdefault("KEYWORD", "MULTIPOLE")
    return get_multipole_type(DataTable.from_records([row]), 0)


class TestMultipoleType:
    """Test get_multipole_type."""

    def test_single_quadrupole_coefficient(self):
        assert classify(L=0.5, K1L=0.1) == "QUADRUPOLE"

    def test_single_dipole_coefficient(self):
        assert classify(L=0.5, K0L=0.001) == "SBEND"

    @pytest.mark.parametrize("column,keyword", [
        ("K2L", "SEXTUPOLE"),
        ("K3L", "OCTUPOLE"),
        ("K4L", "DECAPOLE"),
    ])
    def test_higher_orders(self, column, keyword):
        assert classify(L=0.2, **{column: 1.0}) == keyword

    @pytest.mark.parametrize("length", [0.0, 1.0])
    def test_no_coefficients_is_drift(self, length):
        assert classify(L=length, K0L=0.0, K1L=0.0) == "DRIFT"

    def test_thin_multipole(self):
        assert classify(L=0.0, K1L=0.1) == "MULTIPOLE"
        assert classify(L=0.0, K1L=0.1, K3L=2.0) == "MULTIPOLE"

    def test_mixed_thick_multipole(self):
        assert classify(L=0.5, K1L=0.1, K2L=0.3) == "NOTIMPLEMENTED"

    def test_skew_coefficient(self, caplog):
        assert classify(L=0.0, K1L=0.1, K1S=0.2) == "NOTIMPLEMENTED"
        assert "Skew multipoles not implemented" in caplog.text

    def test_zero_skew_column_ignored(self):
        assert classify(L=0.5, K1L=0.1, K1S=0.0, KSL=0.0) == "QUADRUPOLE"

    def test_skew_dipole_column(self):
        assert classify(L=0.0, KSL=0.001) == "NOTIMPLEMENTED"
