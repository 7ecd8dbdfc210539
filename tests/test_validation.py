"""
Tests for configuration and input validation
"""

import pandas as pd
import pytest

from pyfesl.config import column_map, UNITS
from pyfesl.validation import (ValidationError, SchemaError, ConfigError, IntegrityError,
                               validate_column_map, validate_units, validate_detection_data)


@pytest.mark.unit
class TestColumnMap:
    """Role-to-column configuration"""

    def test_defaults(self):
        columns = column_map()
        assert columns.required() == ['animal_id', 'station_no', 'detection_timestamp_est',
                                      'date', 'deploy_lat', 'deploy_long']

    def test_required_roles_in_order(self):
        columns = column_map(animal='fish', lat='y')
        assert columns.required('lat', 'animal') == ['y', 'fish']

    def test_is_immutable(self):
        columns = column_map()
        with pytest.raises(AttributeError):
            columns.animal = 'fish'

    def test_with_overrides_returns_new_map(self):
        columns = column_map()
        other = columns.with_overrides(station='receiver')
        assert other.station == 'receiver'
        assert columns.station == 'station_no'

    def test_canonical_and_restore(self):
        frame = pd.DataFrame({'fish': ['F1'], 'receiver': ['A'], 'extra': [1]})
        columns = column_map(animal='fish', station='receiver')

        canonical = columns.canonical(frame, 'animal', 'station')
        assert list(canonical.columns) == ['animal_id', 'station']
        assert list(frame.columns) == ['fish', 'receiver', 'extra']
        assert list(columns.restore(canonical).columns) == ['fish', 'receiver']


@pytest.mark.unit
class TestValidators:
    """Schema and configuration validators"""

    @pytest.mark.parametrize('units', list(UNITS))
    def test_valid_units(self, units):
        assert validate_units(units)

    def test_invalid_units_message(self):
        with pytest.raises(ConfigError, match='seconds, minutes, hours, days, weeks'):
            validate_units('mins')

    def test_default_column_map(self):
        assert validate_column_map(None) == column_map()

    def test_column_map_type(self):
        with pytest.raises(ConfigError):
            validate_column_map({'animal': 'fish'})

    def test_empty_column_name(self):
        with pytest.raises(ConfigError):
            validate_column_map(column_map(station=''))

    def test_schema_error_lists_missing_and_available(self):
        frame = pd.DataFrame({'animal_id': [], 'station_no': []})
        with pytest.raises(SchemaError) as excinfo:
            validate_detection_data(frame, column_map(), roles=('animal', 'timestamp', 'lat'))

        assert excinfo.value.missing == ['detection_timestamp_est', 'deploy_lat']
        assert excinfo.value.available == ['animal_id', 'station_no']
        assert 'detection_timestamp_est, deploy_lat' in str(excinfo.value)

    def test_not_a_dataframe(self):
        with pytest.raises(SchemaError):
            validate_detection_data([{'animal_id': 'F1'}], column_map())

    def test_error_hierarchy(self):
        for error in (SchemaError, ConfigError, IntegrityError):
            assert issubclass(error, ValidationError)
