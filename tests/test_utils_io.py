# test_utils_io.py
"""Test module for utils.io functions."""

import json

import pandas as pd
import pytest
import astropy.units as u
from astropy.table import Table
from unittest.mock import patch

from dynparallax.exceptions import ConfigurationError
from dynparallax.physics.solver import run_computation
from dynparallax.utils.io import (
    DataLoadError,
    DataSaveError,
    detect_export_format,
    export_result,
    iterations_to_dataframe,
    iterations_to_table,
    load_observations_csv,
    save_iterations_to_csv,
    save_result_to_json,
    save_results_to_csv
)


@pytest.fixture
def result():
    return run_computation(m1=3.9, m2=5.3, A=4.5, B=3.4, t=11.0, wanted_accuracy=1.0)


class TestLoadObservations:
    """Test CSV loading of observation batches."""

    def test_comma_separated(self, tmp_path):
        """Test loading a comma-separated file."""
        path = tmp_path / "obs.csv"
        path.write_text("name,m1,m2,A,B,t,wanted_accuracy\nref,3.9,5.3,4.5,3.4,11,1\nother,4.0,4.5,2.0,1.5,8,0.5\n")

        df = load_observations_csv(str(path))

        assert len(df) == 2
        assert df.iloc[0]['name'] == 'ref'
        assert df.iloc[1]['A'] == 2.0

    def test_semicolon_separated(self, tmp_path):
        """Test loading a semicolon-separated file."""
        path = tmp_path / "obs.csv"
        path.write_text("m1;m2;A;B;t\n3.9;5.3;4.5;3.4;11\n")

        df = load_observations_csv(str(path))

        assert len(df) == 1
        assert df.iloc[0]['t'] == 11

    def test_missing_columns(self, tmp_path):
        """Test that a file without all required columns is rejected."""
        path = tmp_path / "obs.csv"
        path.write_text("m1,m2,A\n3.9,5.3,4.5\n")

        with pytest.raises(DataLoadError, match="Required columns"):
            load_observations_csv(str(path))

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises DataLoadError."""
        with pytest.raises(DataLoadError, match="File not found"):
            load_observations_csv(str(tmp_path / "nope.csv"))

    def test_empty_file(self, tmp_path):
        """Test that an empty file raises DataLoadError."""
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(DataLoadError, match="no data"):
            load_observations_csv(str(path))

    def test_latin1_fallback(self, tmp_path):
        """Test decoding with the fallback encoding."""
        path = tmp_path / "obs.csv"
        path.write_bytes("name,m1,m2,A,B,t\nPraesepe \xe9,3.9,5.3,4.5,3.4,11\n".encode('latin-1'))

        df = load_observations_csv(str(path))

        assert df.iloc[0]['name'] == "Praesepe é"


class TestExport:
    """Test export of solver results."""

    def test_iterations_dataframe(self, result):
        """Test the tabular view of the iteration history."""
        df = iterations_to_dataframe(result)
        assert list(df.columns) == ['iteration', 'a', 'd', 'MAG1', 'MAG2', 'L1', 'L2', 'M1', 'M2', 'diff']
        assert len(df) == result.n_iterations
        assert df['iteration'].tolist() == [1, 2, 3]

    def test_csv(self, result, tmp_path):
        """Test the CSV iteration table."""
        path = tmp_path / "iterations.csv"
        save_iterations_to_csv(result, str(path))

        df = pd.read_csv(path)
        assert len(df) == 3
        assert df['d'].iloc[-1] == pytest.approx(result.final_result.distance_pc)

    def test_json(self, result, tmp_path):
        """Test that the JSON export holds the complete result."""
        path = tmp_path / "result.json"
        save_result_to_json(result, str(path))

        data = json.loads(path.read_text(encoding='utf-8'))
        assert data == json.loads(json.dumps(result.to_dict()))
        assert data['finalResult']['T'] == result.initial_values.period_years

    def test_astropy_table_units(self, result):
        """Test that the astropy table carries physical units and metadata."""
        table = iterations_to_table(result)
        assert table['d'].unit == u.pc
        assert table['a'].unit == u.AU
        assert table['M1'].unit == u.M_sun
        assert table['L1'].unit == u.W
        assert table.meta['CONVERGD'] is True
        assert table.meta['A_ARCSEC'] == 4.5

    def test_ecsv_export(self, result, tmp_path):
        """Test writing and reading back an ECSV table."""
        path = tmp_path / "iterations.ecsv"
        fmt = export_result(result, str(path))

        assert fmt == 'ecsv'
        table = Table.read(str(path), format='ascii.ecsv')
        assert len(table) == 3
        assert table['d'].unit == u.pc
        assert table.meta['MESSAGE'] == result.message

    def test_explicit_format_overrides_extension(self, result, tmp_path):
        """Test that an explicit format wins over the file extension."""
        path = tmp_path / "result.txt"
        assert export_result(result, str(path), fmt='json') == 'json'
        assert json.loads(path.read_text())['message'] == result.message

    def test_detect_export_format(self):
        """Test format detection from extensions."""
        assert detect_export_format("out.csv") == 'csv'
        assert detect_export_format("OUT.JSON") == 'json'
        assert detect_export_format("table.fits") == 'fits'
        assert detect_export_format("table.xml") == 'votable'

    def test_unknown_extension(self):
        """Test that an unknown extension is a configuration error."""
        with pytest.raises(ConfigurationError, match="Cannot infer"):
            detect_export_format("out.xlsx")

    def test_unknown_format(self, result, tmp_path):
        """Test that an unknown explicit format is a configuration error."""
        with pytest.raises(ConfigurationError, match="Unknown export format"):
            export_result(result, str(tmp_path / "out.csv"), fmt='parquet')

    def test_missing_directory(self, result, tmp_path):
        """Test that writing into a missing directory raises DataSaveError."""
        with pytest.raises(DataSaveError):
            save_result_to_json(result, str(tmp_path / "missing" / "result.json"))


class TestSaveResults:
    """Test batch summary output."""

    def test_save_rows(self, tmp_path):
        """Test saving summary rows."""
        path = tmp_path / "batch.csv"
        save_results_to_csv([{'name': 'a', 'd': 1.0}, {'name': 'b', 'd': 2.0}], str(path))

        df = pd.read_csv(path)
        assert df['name'].tolist() == ['a', 'b']

    def test_empty_results_write_nothing(self, tmp_path):
        """Test that no file is created for empty results."""
        path = tmp_path / "batch.csv"
        save_results_to_csv([], str(path))
        assert not path.exists()

    def test_permission_error(self, tmp_path):
        """Test that permission problems are reported as DataSaveError."""
        with patch('pandas.DataFrame.to_csv', side_effect=PermissionError("denied")):
            with pytest.raises(DataSaveError, match="Permission denied"):
                save_results_to_csv([{'name': 'a'}], str(tmp_path / "batch.csv"))
