"""
Shared pytest fixtures for pyfesl tests

This module provides reusable test fixtures for:
- GLATOS-formatted detection tables
- Hand-built detection histories with known residency and movements
- Receivers redeployed at new coordinates
"""

import matplotlib
matplotlib.use('Agg')

import pytest
import pandas as pd
import matplotlib.pyplot as plt

# receiver coordinates (lat, long)
STATIONS = {
    'A': (43.28, -79.85),
    'B': (43.29, -79.80),
    'C': (43.30, -79.78),
}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single function or class")
    config.addinivalue_line("markers", "smoke: installation and import checks")


def make_detections(rows):
    """
    Build a GLATOS-style detection table from (animal, station, timestamp) rows

    Rows keep the order given. The date column holds calendar days.
    """
    df = pd.DataFrame(rows, columns=['animal_id', 'station_no', 'detection_timestamp_est'])
    df['detection_timestamp_est'] = pd.to_datetime(df['detection_timestamp_est'])
    df['date'] = df['detection_timestamp_est'].dt.date
    df['deploy_lat'] = [STATIONS[s][0] for s in df['station_no']]
    df['deploy_long'] = [STATIONS[s][1] for s in df['station_no']]
    return df


@pytest.fixture
def sample_detections():
    """
    Two fish over two days at three stations

    F1 day 1: A A B B, day 2: B A
    F2 day 1: A,       day 2: C C C

    Returns:
        pd.DataFrame: detections, chronological within each fish
    """
    df = make_detections([
        ('F1', 'A', '2024-06-01 08:00'),
        ('F1', 'A', '2024-06-01 09:00'),
        ('F1', 'B', '2024-06-01 10:00'),
        ('F1', 'B', '2024-06-01 10:30'),
        ('F1', 'B', '2024-06-02 08:00'),
        ('F1', 'A', '2024-06-02 12:00'),
        ('F2', 'A', '2024-06-01 07:00'),
        ('F2', 'C', '2024-06-02 09:00'),
        ('F2', 'C', '2024-06-02 09:15'),
        ('F2', 'C', '2024-06-02 09:45'),
    ])
    df['transmitter_codespace'] = 'A69-9001'
    df['transmitter_id'] = df['animal_id'].map({'F1': 1001, 'F2': 1002})
    df['length'] = df['animal_id'].map({'F1': 512, 'F2': 478})
    return df


@pytest.fixture
def hourly_detections():
    """
    Factory for one fish detected hourly on one day at the given stations

    Returns:
        function: stations -> pd.DataFrame
    """
    def _build(stations, animal='F1', start='2024-06-01 00:00'):
        times = [pd.Timestamp(start) + pd.Timedelta(hours=i) for i in range(len(stations))]
        return make_detections([(animal, s, t) for s, t in zip(stations, times)])
    return _build


@pytest.fixture
def relocated_receiver_detections():
    """
    Receiver R1 deployed at two positions, F1 detected at both

    Returns:
        pd.DataFrame: detections with a relocated receiver
    """
    return pd.DataFrame({
        'animal_id': ['F1', 'F1', 'F1', 'F1'],
        'station_no': ['R1', 'R1', 'R1', 'R1'],
        'detection_timestamp_est': pd.to_datetime([
            '2024-06-01 08:00', '2024-06-01 09:00',
            '2024-07-01 08:00', '2024-07-01 09:00',
        ]),
        'date': pd.to_datetime(['2024-06-01', '2024-06-01', '2024-07-01', '2024-07-01']).date,
        'deploy_lat': [43.28, 43.28, 43.31, 43.31],
        'deploy_long': [-79.85, -79.85, -79.76, -79.76],
    })


@pytest.fixture(autouse=True)
def close_figures():
    """Close matplotlib figures created by a test"""
    yield
    plt.close('all')
