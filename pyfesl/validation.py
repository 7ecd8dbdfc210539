"""
Input validation utilities for FESL telemetry analyses
"""
import pandas as pd

from pyfesl.config import UNITS, ROLES, column_map, to_datetime

__all__ = ['ValidationError', 'SchemaError', 'ConfigError', 'IntegrityError',
           'validate_column_map', 'validate_units', 'validate_detection_data',
           'validate_timestamps']


class ValidationError(Exception):
    """Base class for every error raised by pyfesl"""
    pass


class SchemaError(ValidationError):
    """A detection table is missing required columns"""

    def __init__(self, missing, available):
        self.missing = list(missing)
        self.available = list(available)
        super().__init__(
            f"Missing required columns: {', '.join(map(str, self.missing))}\n"
            f"Available columns: {', '.join(map(str, self.available))}"
        )


class ConfigError(ValidationError):
    """A parameter falls outside its allowed values"""
    pass


class IntegrityError(ValidationError):
    """An expected lookup or join failed to match"""
    pass


def validate_column_map(columns):
    """
    Validate a column mapping and return it, substituting defaults for None.

    Parameters
    ----------
    columns : pyfesl.config.column_map or None
        Role-to-column mapping

    Raises
    ------
    ConfigError
        If ``columns`` is not a column_map or a role maps to an empty name

    Returns
    -------
    column_map
    """
    if columns is None:
        return column_map()
    if not isinstance(columns, column_map):
        raise ConfigError(
            f"columns must be a pyfesl.config.column_map, got {type(columns).__name__}"
        )
    for role in ROLES:
        name = getattr(columns, role)
        if not isinstance(name, str) or not name:
            raise ConfigError(f"Column for role '{role}' must be a non-empty string, got {name!r}")
    return columns


def validate_units(units):
    """
    Validate a duration unit.

    Raises
    ------
    ConfigError
        If ``units`` is not one of seconds, minutes, hours, days, weeks

    Returns
    -------
    bool
        True if validation passes
    """
    if units not in UNITS:
        raise ConfigError(
            f"Invalid units: '{units}'\n"
            f"Must be one of: {', '.join(UNITS)}"
        )
    return True


def validate_detection_data(detections, columns, roles=ROLES):
    """
    Validate a detection table has every column the requested roles need.

    Parameters
    ----------
    detections : pandas.DataFrame
        Detection table to validate
    columns : pyfesl.config.column_map
        Role-to-column mapping
    roles : sequence of str
        Roles the calling analysis reads

    Raises
    ------
    SchemaError
        Listing every missing column and all available columns

    Returns
    -------
    bool
        True if validation passes
    """
    if not isinstance(detections, pd.DataFrame):
        raise SchemaError(columns.required(*roles), [])

    required = columns.required(*roles)
    available = list(detections.columns)
    missing = [col for col in dict.fromkeys(required) if col not in available]
    if missing:
        raise SchemaError(missing, available)

    return True


def validate_timestamps(values, column):
    """
    Parse a timestamp column, see ``pyfesl.config.to_datetime``.

    Parameters
    ----------
    values : pandas.Series
        Raw timestamp values
    column : str
        Input column name, used in the error message

    Raises
    ------
    IntegrityError
        If a value cannot be read as a timestamp

    Returns
    -------
    pandas.Series
        datetime64 timestamps
    """
    try:
        return to_datetime(values)
    except (ValueError, TypeError) as err:
        raise IntegrityError(f"Unreadable timestamps in column '{column}': {err}") from err
