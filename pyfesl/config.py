# -*- coding: utf-8 -*-
"""
Column mapping and unit configuration for FESL telemetry analyses.

Detection exports rarely agree on column names.  Rather than resolving
names from the calling environment, every analysis takes an explicit
``column_map`` that names the input column playing each role.  The map is
immutable and passed by value, so one analysis can never change the
columns another one reads.

Roles
-----
- **animal**: tagged fish identifier
- **station**: receiver station (receiver label)
- **timestamp**: detection instant
- **date**: calendar day of the detection
- **lat** / **long**: receiver deployment coordinates

Typical Usage
-------------
>>> from pyfesl.config import column_map
>>> columns = column_map(animal='fish_id', station='receiver')
>>> columns.required('animal', 'station')
['fish_id', 'receiver']
>>> relocated = columns.with_overrides(lat='recovery_lat', long='recovery_long')
>>> relocated.required('lat', 'long')
['recovery_lat', 'recovery_long']
"""

from dataclasses import dataclass, fields, replace

import pandas as pd

# seconds per duration unit
UNITS = {
    'seconds': 1.0,
    'minutes': 60.0,
    'hours': 3600.0,
    'days': 86400.0,
    'weeks': 604800.0,
}

DEFAULT_UNITS = 'hours'

ROLES = ('animal', 'station', 'timestamp', 'date', 'lat', 'long')

# canonical names used inside the engines
CANONICAL = {
    'animal': 'animal_id',
    'station': 'station',
    'timestamp': 'timestamp',
    'date': 'date',
    'lat': 'lat',
    'long': 'long',
}


@dataclass(frozen=True)
class column_map():
    """
    Role-to-column mapping for a detection table.

    Defaults follow the GLATOS detection export.

    Attributes
    ----------
    animal : str
        Fish identifier column. Default ``'animal_id'``.
    station : str
        Receiver station column. Default ``'station_no'``.
    timestamp : str
        Detection timestamp column. Default ``'detection_timestamp_est'``.
    date : str
        Detection date column. Default ``'date'``.
    lat : str
        Receiver latitude column. Default ``'deploy_lat'``.
    long : str
        Receiver longitude column. Default ``'deploy_long'``.
    """
    animal: str = 'animal_id'
    station: str = 'station_no'
    timestamp: str = 'detection_timestamp_est'
    date: str = 'date'
    lat: str = 'deploy_lat'
    long: str = 'deploy_long'

    def required(self, *roles):
        """Input column names for ``roles`` (all roles if none given), in role order."""
        roles = roles or ROLES
        return [getattr(self, role) for role in roles]

    def canonical(self, detections, *roles):
        """
        Project ``detections`` onto ``roles`` and rename to canonical names.

        Returns a new DataFrame; the input is never modified.
        """
        roles = roles or ROLES
        projected = detections[self.required(*roles)].copy()
        projected.columns = [CANONICAL[role] for role in roles]
        return projected

    def restore(self, frame):
        """Rename canonical role columns in ``frame`` back to the caller's names."""
        mapping = {CANONICAL[f.name]: getattr(self, f.name) for f in fields(self)}
        return frame.rename(columns={k: v for k, v in mapping.items() if k in frame.columns})

    def with_overrides(self, **kwargs):
        """
        A copy of this map with some roles pointed at other columns.

        Useful when one export differs from a shared base map in only a
        column or two; the original map is left unchanged.
        """
        return replace(self, **kwargs)


def to_datetime(values):
    """Coerce a timestamp column to datetime64; numeric values are epoch seconds."""
    if pd.api.types.is_datetime64_any_dtype(values):
        return values
    if pd.api.types.is_numeric_dtype(values):
        return pd.to_datetime(values, unit='s')
    return pd.to_datetime(values)
