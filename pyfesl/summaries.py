# -*- coding: utf-8 -*-
"""
Detection and residency summaries at three levels of organization.

Summaries
---------
- **individual_summary**: per (date, fish, station) detection counts with
  residency, station coordinates and fish metadata
- **population_summary**: per (station, date) totals and the station's share
  of each day's detections, residency and fish
- **location_summary**: per station totals over the whole study
- **study_statistics**: dataset overview and summary statistics

Typical Usage
-------------
>>> from pyfesl import compute_residency, individual_summary, population_summary
>>> residency = compute_residency(detections)
>>> individual = individual_summary(detections, residency)
>>> population = population_summary(individual)
>>> location = location_summary(population)
>>> stats = study_statistics(detections, individual, population, location)

Notes
-----
- Fish-station-days without residency (a single detection that day) carry
  a missing residence in the individual summary and count as zero in the
  population summary.
- Proportions of a zero daily total are left missing.
"""

import logging

import numpy as np
import pandas as pd

from pyfesl.residency import RESIDENCE
from pyfesl.validation import SchemaError, validate_column_map, validate_detection_data

__all__ = ['ANIMAL_METADATA', 'individual_summary', 'population_summary',
           'location_summary', 'study_statistics']

logger = logging.getLogger(__name__)

# optional fish attributes carried into the individual summary when present
ANIMAL_METADATA = ['transmitter_codespace', 'transmitter_id', 'length']


def _require(frame, required, description):
    missing = [col for col in required if col not in frame.columns]
    if missing:
        logger.error(f"{description} is missing columns: {', '.join(missing)}")
        raise SchemaError(missing, frame.columns)


def individual_summary(detections, residency, columns=None):
    """
    Daily detections and residency per fish and station.

    Parameters
    ----------
    detections : pandas.DataFrame
        Detection table
    residency : pandas.DataFrame
        Output of ``compute_residency`` for the same detections
    columns : pyfesl.config.column_map, optional
        Role-to-column mapping

    Returns
    -------
    pandas.DataFrame
        date, animal, station, dets_fish_station, dets_fish, residence, lat,
        long and whichever of ANIMAL_METADATA the detections carry
    """
    columns = validate_column_map(columns)
    validate_detection_data(detections, columns)
    date, animal, station = columns.date, columns.animal, columns.station
    _require(residency, [date, animal, station, RESIDENCE], 'Residency table')

    daily = (detections.groupby([date, animal], sort=False, observed=True)
             .size().reset_index(name='dets_fish'))
    daily_station = (detections.groupby([date, animal, station], sort=False, observed=True)
                     .size().reset_index(name='dets_fish_station'))

    station_key = detections[[station, columns.lat, columns.long]].drop_duplicates(subset=station)
    metadata = [col for col in ANIMAL_METADATA if col in detections.columns]
    animal_key = detections[[animal] + metadata].drop_duplicates(subset=animal)

    individual = daily_station.merge(daily, on=[date, animal], how='left')
    if residency.empty:
        # an empty residency table has no dtypes to merge on
        individual[RESIDENCE] = np.nan
    else:
        individual = individual.merge(residency[[date, animal, station, RESIDENCE]],
                                      on=[date, animal, station], how='left')
    individual = (individual
                  .merge(station_key, on=station, how='left')
                  .merge(animal_key, on=animal, how='left'))

    logger.info(f"Individual summary complete: {len(individual):,} rows")
    return individual[[date, animal, station, 'dets_fish_station', 'dets_fish', RESIDENCE,
                       columns.lat, columns.long] + metadata]


def population_summary(individual, columns=None):
    """
    Daily totals per station and the station's share of each day.

    Parameters
    ----------
    individual : pandas.DataFrame
        Output of ``individual_summary``
    columns : pyfesl.config.column_map, optional
        Role-to-column mapping

    Returns
    -------
    pandas.DataFrame
        date, station, lat, long, dets, dets_total, dets_prop, residence,
        residence_total, residence_prop, fish_count, fish_count_total,
        fish_count_prop
    """
    columns = validate_column_map(columns)
    date, animal, station = columns.date, columns.animal, columns.station
    _require(individual, [date, animal, station, 'dets_fish_station', RESIDENCE,
                          columns.lat, columns.long], 'Individual summary')

    population = (individual
                  .groupby([station, date], sort=False, observed=True)
                  .agg(dets=('dets_fish_station', 'sum'),
                       residence=(RESIDENCE, 'sum'),
                       fish_count=(animal, 'nunique'))
                  .reset_index())
    population[RESIDENCE] = population[RESIDENCE].fillna(0.0)

    daily_totals = (individual
                    .groupby(date, sort=False, observed=True)
                    .agg(dets_total=('dets_fish_station', 'sum'),
                         residence_total=(RESIDENCE, 'sum'),
                         fish_count_total=(animal, 'nunique'))
                    .reset_index())

    station_key = individual[[station, columns.lat, columns.long]].drop_duplicates(subset=station)

    population = (population
                  .merge(station_key, on=station, how='left')
                  .merge(daily_totals, on=date, how='left'))

    population['dets_prop'] = population['dets'] / population['dets_total']
    population['residence_prop'] = (population[RESIDENCE] /
                                    population['residence_total'].replace(0.0, np.nan))
    population['fish_count_prop'] = population['fish_count'] / population['fish_count_total']

    logger.info(f"Population summary complete: {len(population):,} rows")
    return population[[date, station, columns.lat, columns.long,
                       'dets', 'dets_total', 'dets_prop',
                       RESIDENCE, 'residence_total', 'residence_prop',
                       'fish_count', 'fish_count_total', 'fish_count_prop']]


def location_summary(population, columns=None):
    """Study-wide detection and residency totals per station."""
    columns = validate_column_map(columns)
    station = columns.station
    _require(population, [station, columns.lat, columns.long, 'dets', RESIDENCE], 'Population summary')

    location = (population
                .groupby(station, sort=False, observed=True)
                .agg(lat=(columns.lat, 'mean'),
                     long=(columns.long, 'mean'),
                     dets_sum=('dets', 'sum'),
                     residence_mean=(RESIDENCE, 'mean'),
                     residence_sum=(RESIDENCE, 'sum'))
                .reset_index()
                .rename(columns={'lat': columns.lat, 'long': columns.long}))
    location['dets_prop'] = location['dets_sum'] / population['dets'].sum()

    logger.info(f"Location summary complete: {len(location):,} stations")
    return location[[station, columns.lat, columns.long, 'dets_sum', 'dets_prop',
                     'residence_mean', 'residence_sum']]


def study_statistics(detections, individual, population, location, columns=None, print_summary=True):
    """
    Dataset overview and individual, population and location statistics.

    Standard deviations use ddof=1.

    Returns
    -------
    dict
        Keys total_detections, unique_fish, unique_stations, date_min,
        date_max, study_days, dets_per_fish_mean/_sd,
        stations_per_fish_mean/_sd, daily_dets_mean/_sd,
        daily_residence_mean/_sd, dets_per_station_mean/_sd,
        dets_per_station_min/_max
    """
    columns = validate_column_map(columns)
    date, animal, station = columns.date, columns.animal, columns.station
    validate_detection_data(detections, columns, roles=('animal', 'station', 'date'))

    dates = pd.to_datetime(detections[date])
    per_fish = (individual
                .groupby(animal, sort=False, observed=True)
                .agg(total_dets=('dets_fish_station', 'sum'),
                     n_stations=(station, 'nunique')))

    summary_stats = {
        "total_detections": len(detections),
        "unique_fish": int(detections[animal].nunique()),
        "unique_stations": int(detections[station].nunique()),
        "date_min": dates.min(),
        "date_max": dates.max(),
        "study_days": (dates.max() - dates.min()) / pd.Timedelta(days=1),
        "dets_per_fish_mean": per_fish['total_dets'].mean(),
        "dets_per_fish_sd": per_fish['total_dets'].std(),
        "stations_per_fish_mean": per_fish['n_stations'].mean(),
        "stations_per_fish_sd": per_fish['n_stations'].std(),
        "daily_dets_mean": population['dets'].mean(),
        "daily_dets_sd": population['dets'].std(),
        "daily_residence_mean": population[RESIDENCE].mean(),
        "daily_residence_sd": population[RESIDENCE].std(),
        "dets_per_station_mean": location['dets_sum'].mean(),
        "dets_per_station_sd": location['dets_sum'].std(),
        "dets_per_station_min": location['dets_sum'].min(),
        "dets_per_station_max": location['dets_sum'].max(),
    }

    if print_summary:
        s = summary_stats
        print("\n--- SUMMARY STATISTICS ---\n")
        print("1. Dataset Overview")
        print(f"  Total detections: {s['total_detections']:,}")
        print(f"  Unique fish: {s['unique_fish']}")
        print(f"  Unique stations: {s['unique_stations']}")
        print(f"  Date range: {s['date_min']:%Y-%m-%d} to {s['date_max']:%Y-%m-%d}")
        print(f"  Study duration: {s['study_days']:g} days\n")
        print("2. Individual-level Summary")
        print(f"  Mean detections per fish: {s['dets_per_fish_mean']:.1f} ± SD {s['dets_per_fish_sd']:.1f}")
        print(f"  Mean stations per fish: {s['stations_per_fish_mean']:.1f} ± SD {s['stations_per_fish_sd']:.1f}\n")
        print("3. Population-level Summary")
        print(f"  Mean daily detections: {s['daily_dets_mean']:.1f} ± SD {s['daily_dets_sd']:.1f}")
        print(f"  Mean daily residence: {s['daily_residence_mean']:.1f} ± SD {s['daily_residence_sd']:.1f}\n")
        print("4. Location-level Summary")
        print(f"  Mean detections per station: {s['dets_per_station_mean']:.1f} ± SD {s['dets_per_station_sd']:.1f}")
        print(f"  Range: {s['dets_per_station_min']:.0f} - {s['dets_per_station_max']:.0f}\n")

    return summary_stats
