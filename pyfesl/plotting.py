# -*- coding: utf-8 -*-
"""
Matplotlib figures for movement networks and detection summaries.

Every function draws from the plain tables produced by the analysis
modules and returns the matplotlib Figure, leaving saving or showing it to
the caller.

Figures
-------
- **network_plot**: receivers coloured by detection frequency joined by
  movement edges whose widths scale with traffic
- **abacus_plot**: station x date tiles coloured by each station's share of
  daily residence, overlaid with daily detection totals
- **detections_by_fish_plot**: fish ranked by total detections
- **durations_by_fish_plot**: fish ranked by days between first and last
  detection
"""

import logging

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib import rcParams
from matplotlib.collections import LineCollection

from pyfesl.residency import RESIDENCE
from pyfesl.validation import validate_column_map, validate_detection_data

__all__ = ['network_plot', 'abacus_plot', 'detections_by_fish_plot', 'durations_by_fish_plot']

logger = logging.getLogger(__name__)

rcParams['font.size'] = 6
rcParams['font.family'] = 'serif'

EDGE_COLOUR = '#8b7355'


def _scale_widths(weights, line_min, line_max):
    weights = np.asarray(weights, dtype=float)
    low, high = weights.min(), weights.max()
    if high == low:
        return np.full(len(weights), (line_min + line_max) / 2.0)
    return line_min + (weights - low) / (high - low) * (line_max - line_min)


def network_plot(net, min_traffic=1, line_min=0.5, line_max=2.5, title=None,
                 x_label='longitude', y_label='latitude', labels=False,
                 label_size=6, label_alpha=0.6, label_nudge=0.0, ax=None):
    """
    Plot a fish movement network.

    Parameters
    ----------
    net : pyfesl.network.network_summary
        Network to draw; uses ``plot_data`` and ``receiver_locations``
    min_traffic : int
        Edges with fewer moves are not drawn. Default 1.
    line_min, line_max : float
        Line width range for edges
    title : str, optional
        Axes title, useful when looping over fish
    labels : bool
        Label receivers with their names
    ax : matplotlib.axes.Axes, optional
        Axes to draw on; a new figure is created when None

    Returns
    -------
    matplotlib.figure.Figure
    """
    plot_data = net.plot_data[net.plot_data['weight'] >= min_traffic]
    locations = net.receiver_locations

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    else:
        fig = ax.figure

    if len(plot_data):
        segments = [[(fx, fy), (tx, ty)] for fx, fy, tx, ty in
                    zip(plot_data['from_long'], plot_data['from_lat'],
                        plot_data['to_long'], plot_data['to_lat'])]
        ax.add_collection(LineCollection(segments,
                                         linewidths=_scale_widths(plot_data['weight'], line_min, line_max),
                                         colors=EDGE_COLOUR,
                                         alpha=0.6,
                                         zorder=1))

    nodes = ax.scatter(locations['long'], locations['lat'],
                       c=locations['detection_frequency'],
                       cmap='viridis', s=30, edgecolors='k', linewidths=1.3, zorder=2)
    fig.colorbar(nodes, ax=ax, label='detections')

    if labels:
        for row in locations.itertuples(index=False):
            ax.text(row.long + label_nudge, row.lat, str(row.receiver_label),
                    fontsize=label_size, ha='left',
                    bbox=dict(boxstyle='round', facecolor='white', alpha=label_alpha))

    ax.autoscale_view()
    ax.set_xlabel(x_label)
    ax.set_ylabel(y_label)
    if title is not None:
        ax.set_title(str(title))

    logger.debug(f"Drew {len(plot_data)} edges and {len(locations)} receivers")
    return fig


def abacus_plot(population, columns=None):
    """
    Station by date tiles of residence share with daily detection totals.

    Stations are ordered by median longitude.
    """
    columns = validate_column_map(columns)
    date, station = columns.date, columns.station

    order = (population.groupby(station, sort=False, observed=True)[columns.long]
             .median().sort_values(kind='mergesort').index.tolist())
    position = {name: i for i, name in enumerate(order)}
    dates = pd.to_datetime(population[date])
    y = population[station].map(position)

    fig, ax = plt.subplots(figsize=(8, 5))
    tiles = ax.scatter(dates, y, c=population['residence_prop'], cmap='viridis',
                       vmin=0.0, vmax=1.0, marker='s', s=60)
    totals = population['dets_total'].astype(float)
    ax.scatter(dates, y, s=20 * totals / max(totals.max(), 1.0), color='black', alpha=0.1)
    fig.colorbar(tiles, ax=ax, label=f'Daily proportion of {RESIDENCE} time')

    ax.set_yticks(range(len(order)))
    ax.set_yticklabels([str(name) for name in order])
    ax.set_ylabel('Station (ordered by longitude)')
    ax.set_xlabel('Date')
    fig.autofmt_xdate()
    return fig


def detections_by_fish_plot(detections, columns=None):
    """Horizontal bars of total detections per fish, largest at the top."""
    columns = validate_column_map(columns)
    validate_detection_data(detections, columns, roles=('animal',))

    totals = detections.groupby(columns.animal, sort=False, observed=True).size().sort_values(kind='mergesort')

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.barh([str(fish) for fish in totals.index], totals.values, color='grey')
    ax.set_ylabel('Ranked fish identity')
    ax.set_xlabel('Total detections in dataset')
    return fig


def durations_by_fish_plot(detections, columns=None):
    """Horizontal bars of days between each fish's first and last detection date."""
    columns = validate_column_map(columns)
    validate_detection_data(detections, columns, roles=('animal', 'date'))

    dates = pd.to_datetime(detections[columns.date])
    span = dates.groupby(detections[columns.animal].values, sort=False, observed=True).agg(['min', 'max'])
    days = ((span['max'] - span['min']) / pd.Timedelta(days=1)).sort_values(kind='mergesort')

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.barh([str(fish) for fish in days.index], days.values, color='grey')
    ax.set_ylabel('Ranked fish identity')
    ax.set_xlabel('Total duration in dataset (days)')
    return fig
