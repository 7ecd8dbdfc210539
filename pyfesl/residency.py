# -*- coding: utf-8 -*-
"""
Residency of tagged fish at acoustic receiver stations.

This module converts each fish's detection history into discrete residency
events at a station and totals their durations per day, fish and station.

Workflow
--------
1. **Project**: rename the configured columns to canonical roles
2. **Partition**: split detections by (fish, date) and order each partition
   by timestamp
3. **Lag**: attach the previous station and previous timestamp to every
   detection after the first of its partition
4. **Segment**: assign a run number that increments whenever the transition
   label (previous station, station) changes
5. **Events**: one residency event per (date, fish, previous station, run),
   spanning the first previous timestamp to the last timestamp
6. **Summarize**: sum event durations per (date, fish, station)

Residency Rules
---------------
- The first detection of a fish on a day has no predecessor and contributes
  no residency by itself.
- A run only grows past one detection while the fish is repeatedly detected
  at the same station.  A fish bouncing A -> B -> A makes every detection its
  own run.
- Duration is attributed to the station the fish moved *from*, so the time
  between the last detection at A and the first detection at B counts
  toward A.
- Segmentation restarts at every date boundary.  A stay that spans midnight
  becomes two events, one per day.

Typical Usage
-------------
>>> from pyfesl.residency import compute_residency
>>> from pyfesl.config import column_map
>>>
>>> residency = compute_residency(detections, units='hours')
>>> residency = compute_residency(
...     detections,
...     columns=column_map(animal='fish_id', station='receiver'),
...     units='days'
... )

Notes
-----
- Partitions are ordered by a stable sort on timestamp, so detections
  sharing a timestamp keep their input order.
- Fish identifiers are only compared for equality; they are never sorted.

See Also
--------
network.network_summary : Movement between receiver locations
summaries.individual_summary : Joins residency with detection counts
"""

import logging

import pandas as pd

from pyfesl.config import UNITS, DEFAULT_UNITS
from pyfesl.validation import (IntegrityError, validate_column_map, validate_timestamps,
                               validate_detection_data, validate_units)

__all__ = ['residency_events', 'compute_residency', 'RESIDENCE']

logger = logging.getLogger(__name__)

# output column holding a duration in the requested units
RESIDENCE = 'residence'

_PARTITION = ['animal_id', 'date']
_KEYS = ['animal_id', 'station', 'timestamp', 'date']
_EVENT_COLUMNS = ['date', 'animal_id', 'station', 'run_id', 'detection_count',
                  'time_start', 'time_end', RESIDENCE]
_SUMMARY_COLUMNS = ['date', 'animal_id', 'station', RESIDENCE]


def _lagged_detections(detections, columns):
    """Canonical detections with previous station and timestamp per partition."""
    frame = columns.canonical(detections)

    missing = frame[_KEYS].isna().any(axis=1)
    if missing.any():
        raise IntegrityError(
            f"{int(missing.sum())} detections have missing values in "
            f"{', '.join(columns.required('animal', 'station', 'timestamp', 'date'))}"
        )

    frame['timestamp'] = validate_timestamps(frame['timestamp'], columns.timestamp)
    frame = frame.sort_values('timestamp', kind='mergesort')

    partition = frame.groupby(_PARTITION, sort=False, observed=True)
    frame['prev_station'] = partition['station'].shift(1)
    frame['prev_timestamp'] = partition['timestamp'].shift(1)

    # the first detection of every partition has nothing to move from
    return frame[partition.cumcount() > 0].copy()


def _segment_runs(moves):
    """
    Number the maximal runs of identical transition labels in each partition.

    A new run starts whenever (prev_station, station) differs from the row
    before it; run numbers start at 0 in every partition.
    """
    partition = moves.groupby(_PARTITION, sort=False, observed=True)
    new_run = ((moves['prev_station'] != partition['prev_station'].shift(1)) |
               (moves['station'] != partition['station'].shift(1)))
    return new_run.astype('int64').groupby(
        [moves['animal_id'], moves['date']], sort=False, observed=True).cumsum() - 1


def _events(detections, columns, units):
    moves = _lagged_detections(detections, columns)
    if moves.empty:
        return pd.DataFrame(columns=_EVENT_COLUMNS)

    moves['run_id'] = _segment_runs(moves)

    events = (moves
              .groupby(['date', 'animal_id', 'prev_station', 'run_id'], sort=False, observed=True)
              .agg(detection_count=('station', 'size'),
                   time_start=('prev_timestamp', 'min'),
                   time_end=('timestamp', 'max'))
              .reset_index()
              .rename(columns={'prev_station': 'station'}))

    elapsed = (events['time_end'] - events['time_start']).dt.total_seconds()
    events[RESIDENCE] = elapsed / UNITS[units]

    logger.debug(f"Segmented {len(moves)} lagged detections into {len(events)} residency events")
    return events[_EVENT_COLUMNS]


def residency_events(detections, columns=None, units=DEFAULT_UNITS):
    """
    Segment detections into residency events.

    Parameters
    ----------
    detections : pandas.DataFrame
        Detection table with animal, station, timestamp, date, lat and long
        columns named by ``columns``
    columns : pyfesl.config.column_map, optional
        Role-to-column mapping. Default GLATOS names.
    units : str
        One of 'seconds', 'minutes', 'hours' (default), 'days', 'weeks'

    Returns
    -------
    pandas.DataFrame
        One row per event: date, animal, station (the station the fish was
        resident at), run_id, detection_count, time_start, time_end and
        residence, with the caller's column names restored.

    Raises
    ------
    SchemaError
        If a required column is missing
    ConfigError
        If ``units`` is invalid
    IntegrityError
        If an animal, station, timestamp or date value is missing
    """
    columns = validate_column_map(columns)
    validate_detection_data(detections, columns)
    validate_units(units)

    return columns.restore(_events(detections, columns, units))


def compute_residency(detections, columns=None, units=DEFAULT_UNITS):
    """
    Total residency per date, fish and station.

    A fish can make several separate stays at a station on the same day;
    their durations are summed.

    Parameters
    ----------
    detections : pandas.DataFrame
        Detection table, see ``residency_events``
    columns : pyfesl.config.column_map, optional
        Role-to-column mapping. Default GLATOS names.
    units : str
        One of 'seconds', 'minutes', 'hours' (default), 'days', 'weeks'

    Returns
    -------
    pandas.DataFrame
        Columns date, animal, station and residence (total duration in
        ``units``) under the caller's column names.

    Examples
    --------
    >>> residency = compute_residency(data_det)
    >>> residency = compute_residency(data_det, units='days')
    """
    columns = validate_column_map(columns)
    validate_detection_data(detections, columns)
    validate_units(units)

    logger.info(f"Calculating residency in {units} for {len(detections)} detections")
    events = _events(detections, columns, units)

    if events.empty:
        summary = pd.DataFrame(columns=_SUMMARY_COLUMNS)
    else:
        summary = (events
                   .groupby(['date', 'animal_id', 'station'], sort=False, observed=True)[RESIDENCE]
                   .sum()
                   .reset_index())

    logger.info(f"Residency calculated for {summary['animal_id'].nunique()} fish "
                f"across {len(summary)} fish-station-days")
    return columns.restore(summary)
