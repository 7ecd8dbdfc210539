# -*- coding: utf-8 -*-
"""
Movement networks between acoustic receiver locations.

This module turns each fish's ordered detections into a directed, weighted
network of movements between physical receiver locations.

Core Objects
------------
- **resolve_locations**: surrogate ``location_id`` per distinct
  (receiver, lat, long) and the receiver location table
- **build_movement_graph**: run-length reduced location sequence per fish,
  individual moves and aggregated edges
- **join_edge_coordinates**: edges with endpoint coordinates for plotting
- **network_summary**: runs all of the above and keeps every table

Location Identity
-----------------
Two detections share a location only when receiver label, latitude and
longitude all match exactly.  A receiver that was pulled and redeployed at
new coordinates therefore becomes two locations, and a fish moving between
the old and new positions makes a real movement rather than a self-loop.

Ordering
--------
The graph builder does **not** sort.  Detections must already be in
chronological order within each fish.  This differs from
``residency.compute_residency``, which sorts every (fish, date) partition
itself.  ``network_summary`` logs a warning when a fish's timestamps run
backwards but still uses the input order.

Typical Usage
-------------
>>> from pyfesl.network import network_summary
>>> net = network_summary(detections)
>>> net.receiver_locations   # location_id, receiver_label, lat, long, detection_frequency
>>> net.plot_data            # from, to, weight, from_lat, from_long, to_lat, to_long
>>> G = net.to_networkx()
>>> stats = net.summary()

See Also
--------
plotting.network_plot : Draws ``plot_data`` and ``receiver_locations``
residency.compute_residency : Daily residency at stations
"""

import logging

import networkx as nx
import pandas as pd

from pyfesl.validation import (IntegrityError, SchemaError, validate_column_map,
                               validate_detection_data, validate_timestamps)

__all__ = ['LOCATION_ID', 'resolve_locations', 'collapse_runs', 'animal_moves',
           'build_movement_graph', 'join_edge_coordinates', 'network_summary']

logger = logging.getLogger(__name__)

LOCATION_ID = 'location_id'

_LOCATION_COLUMNS = [LOCATION_ID, 'receiver_label', 'lat', 'long', 'detection_frequency']
_EDGE_COLUMNS = ['from', 'to', 'weight']
_SENTINEL = object()


def resolve_locations(detections, columns=None):
    """
    Assign every detection to a physical receiver location.

    Parameters
    ----------
    detections : pandas.DataFrame
        Detection table with station, lat and long columns
    columns : pyfesl.config.column_map, optional
        Role-to-column mapping

    Returns
    -------
    augmented : pandas.DataFrame
        Copy of ``detections`` with an Int64 ``location_id`` column.  Rows
        whose receiver or coordinates are missing get ``<NA>``.
    locations : pandas.DataFrame
        One row per location: location_id, receiver_label, lat, long and
        detection_frequency (number of detections at the location)

    Notes
    -----
    location_id numbers distinct (receiver, lat, long) tuples from 1 in
    order of first appearance.  Only equality of ids is meaningful.
    """
    columns = validate_column_map(columns)
    validate_detection_data(detections, columns, roles=('station', 'lat', 'long'))

    keys = pd.DataFrame({
        'receiver_label': detections[columns.station].values,
        'lat': pd.to_numeric(detections[columns.lat], errors='coerce').values,
        'long': pd.to_numeric(detections[columns.long], errors='coerce').values,
    })

    ordinal = keys.groupby(['receiver_label', 'lat', 'long'], sort=False, observed=True).ngroup()
    # rows with a missing key fall outside every group
    keys[LOCATION_ID] = (ordinal.where(ordinal >= 0) + 1).astype('Int64')

    unresolved = int(keys[LOCATION_ID].isna().sum())
    if unresolved:
        logger.warning(f"{unresolved} detections have a missing receiver or coordinate and no location")

    locations = (keys.dropna(subset=[LOCATION_ID])
                 .groupby(LOCATION_ID, sort=True)
                 .agg(receiver_label=('receiver_label', 'first'),
                      lat=('lat', 'first'),
                      long=('long', 'first'),
                      detection_frequency=('receiver_label', 'size'))
                 .reset_index())

    augmented = detections.copy()
    augmented[LOCATION_ID] = keys[LOCATION_ID].values

    relocated = locations['receiver_label'].duplicated(keep=False)
    logger.info(f"Resolved {len(locations)} receiver locations "
                f"({locations.loc[relocated, 'receiver_label'].nunique()} receivers deployed at more than one position)")
    return augmented, locations[_LOCATION_COLUMNS]


def collapse_runs(values):
    """Yield ``values`` with consecutive duplicates removed."""
    previous = _SENTINEL
    for value in values:
        if previous is _SENTINEL or value != previous:
            yield value
        previous = value


def animal_moves(animal, location_ids):
    """
    Transitions made by one fish.

    Parameters
    ----------
    animal : hashable
        Fish identifier attached to every transition
    location_ids : iterable
        The fish's location ids in chronological order

    Returns
    -------
    list of tuple
        ``(from, to, animal)`` for each adjacent pair of the run-length
        reduced path; empty when the fish never changes location.
    """
    path = list(collapse_runs(location_ids))
    return [(origin, destination, animal) for origin, destination in zip(path, path[1:])]


def build_movement_graph(augmented, columns=None):
    """
    Movement edges and individual moves from location-resolved detections.

    Parameters
    ----------
    augmented : pandas.DataFrame
        Output of ``resolve_locations``, chronological within each fish
    columns : pyfesl.config.column_map, optional
        Role-to-column mapping

    Returns
    -------
    edges : pandas.DataFrame
        from, to and weight (number of moves) for every observed directed
        pair of locations.  Pairs never observed have no row.
    individual_moves : pandas.DataFrame
        from, to and the animal column, one row per move, grouped by fish
        in order of first appearance

    Raises
    ------
    SchemaError
        If the animal or location_id column is missing
    IntegrityError
        If any detection has no resolved location
    """
    columns = validate_column_map(columns)
    validate_detection_data(augmented, columns, roles=('animal',))
    if LOCATION_ID not in augmented.columns:
        raise SchemaError([LOCATION_ID], augmented.columns)

    if augmented[columns.animal].isna().any():
        raise IntegrityError(
            f"{int(augmented[columns.animal].isna().sum())} detections have no value in {columns.animal}"
        )

    unresolved = augmented[LOCATION_ID].isna()
    if unresolved.any():
        fish = augmented.loc[unresolved, columns.animal].unique()
        raise IntegrityError(
            f"{int(unresolved.sum())} detections could not be resolved to a receiver location "
            f"for animals: {', '.join(map(str, fish[:10]))}"
        )

    records = []
    for animal, fish_dat in augmented.groupby(columns.animal, sort=False, observed=True):
        records.extend(animal_moves(animal, fish_dat[LOCATION_ID].tolist()))

    individual_moves = pd.DataFrame.from_records(records, columns=['from', 'to', columns.animal])
    if individual_moves.empty:
        edges = pd.DataFrame({'from': pd.Series(dtype='int64'),
                              'to': pd.Series(dtype='int64'),
                              'weight': pd.Series(dtype='int64')})
    else:
        edges = (individual_moves
                 .groupby(['from', 'to'], sort=False, observed=True)
                 .size()
                 .reset_index(name='weight'))

    logger.info(f"Built movement graph: {len(individual_moves)} moves over {len(edges)} edges "
                f"from {augmented[columns.animal].nunique()} fish")
    return edges[_EDGE_COLUMNS], individual_moves


def join_edge_coordinates(edges, locations):
    """
    Attach endpoint coordinates to movement edges.

    Returns
    -------
    pandas.DataFrame
        from, to, weight, from_lat, from_long, to_lat, to_long

    Raises
    ------
    IntegrityError
        If an edge endpoint is not in ``locations``
    """
    coords = locations.set_index(LOCATION_ID)[['lat', 'long']]

    endpoints = pd.concat([edges['from'], edges['to']], ignore_index=True)
    unmatched = endpoints[~endpoints.isin(coords.index)].unique()
    if len(unmatched):
        raise IntegrityError(
            f"Movement endpoints missing from the location table: {', '.join(map(str, unmatched))}"
        )

    plot_data = edges.copy()
    for end in ('from', 'to'):
        plot_data[f'{end}_lat'] = plot_data[end].map(coords['lat']).astype(float)
        plot_data[f'{end}_long'] = plot_data[end].map(coords['long']).astype(float)
    return plot_data


def _warn_if_unsorted(detections, columns):
    parsed = validate_timestamps(detections[columns.timestamp], columns.timestamp)
    timestamps = pd.Series(parsed.values, index=detections.index)
    backwards = timestamps.groupby(detections[columns.animal].values, sort=False, observed=True).diff() < pd.Timedelta(0)
    if backwards.any():
        fish = detections.loc[backwards.values, columns.animal].unique()
        logger.warning(
            f"Detections are not chronological for {len(fish)} fish "
            f"({', '.join(map(str, fish[:5]))}); movements follow input order"
        )


class network_summary():
    """
    Receiver locations and fish movement network for a detection table.

    Attributes
    ----------
    columns : pyfesl.config.column_map
        Role-to-column mapping in use
    detections : pandas.DataFrame
        Input detections with ``location_id`` attached
    receiver_locations : pandas.DataFrame
        location_id, receiver_label, lat, long, detection_frequency
    individual_moves : pandas.DataFrame
        from, to, animal; one row per move
    edges : pandas.DataFrame
        from, to, weight
    moves_matrix : pandas.DataFrame
        Cross tabulated move counts, rows are origins and columns destinations
    plot_data : pandas.DataFrame
        edges with from_lat, from_long, to_lat, to_long

    Methods
    -------
    to_networkx()
        Weighted networkx.DiGraph of the movement network
    summary(print_summary=True)
        Movement statistics

    Notes
    -----
    Detections must be chronological within each fish; they are not sorted.
    """

    def __init__(self, detections, columns=None):
        self.columns = validate_column_map(columns)
        validate_detection_data(detections, self.columns,
                                roles=('animal', 'station', 'timestamp', 'lat', 'long'))

        logger.info(f"Summarizing movement network for {len(detections)} detections")
        _warn_if_unsorted(detections, self.columns)

        self.detections, self.receiver_locations = resolve_locations(detections, self.columns)
        self.edges, self.individual_moves = build_movement_graph(self.detections, self.columns)
        self.plot_data = join_edge_coordinates(self.edges, self.receiver_locations)

        if self.individual_moves.empty:
            self.moves_matrix = pd.DataFrame()
        else:
            self.moves_matrix = pd.crosstab(self.individual_moves['from'], self.individual_moves['to'])

    def to_networkx(self):
        """Weighted DiGraph: nodes are location ids, edge ``weight`` is the move count."""
        G = nx.DiGraph()
        for row in self.receiver_locations.itertuples(index=False):
            G.add_node(int(row.location_id),
                       receiver=row.receiver_label,
                       lat=row.lat,
                       long=row.long,
                       detection_frequency=int(row.detection_frequency))
        G.add_weighted_edges_from(
            (int(origin), int(destination), int(weight))
            for origin, destination, weight in zip(self.edges['from'], self.edges['to'], self.edges['weight'])
        )
        return G

    def summary(self, print_summary=True):
        """Movement statistics as a dictionary, optionally printed."""
        animal = self.columns.animal
        moves_per_fish = self.individual_moves.groupby(animal).size()
        movers = set(moves_per_fish.index)
        stationary = [fish for fish in self.detections[animal].unique() if fish not in movers]

        summary_stats = {
            "unique_fish_count": int(self.detections[animal].nunique()),
            "stationary_fish_count": len(stationary),
            "location_count": len(self.receiver_locations),
            "receiver_count": int(self.receiver_locations['receiver_label'].nunique()),
            "edge_count": len(self.edges),
            "move_count": int(self.edges['weight'].sum()),
            "moves_per_fish": moves_per_fish.describe(),
            "top_edges": self.edges.sort_values('weight', ascending=False, kind='mergesort').head(10),
        }

        if print_summary:
            print("-" * 80)
            print("Movement Network Summary")
            print("-" * 80 + "\n")
            print(f"{summary_stats['unique_fish_count']} fish were detected at "
                  f"{summary_stats['location_count']} locations "
                  f"({summary_stats['receiver_count']} receivers).")
            print(f"{summary_stats['stationary_fish_count']} fish never moved between locations.\n")
            print(f"In total, {summary_stats['move_count']} moves were made along "
                  f"{summary_stats['edge_count']} directed edges.\n")
            print("Moves per fish:")
            print(summary_stats['moves_per_fish'], "\n")
            print("Most travelled edges:")
            print(summary_stats['top_edges'], "\n")

        return summary_stats
