"""
pyfesl Detection Summary Example
================================

This script demonstrates a complete pyfesl workflow from a GLATOS detection
export through residency, summaries, the movement network and figures.

Before running:
1. Export detections with animal_id, station_no, detection_timestamp_est,
   deploy_lat and deploy_long columns
2. Update the project_dir variable below
"""

import os
import logging
import pandas as pd
import pyfesl
from pyfesl import setup_logging, column_map, ValidationError

# =============================================================================
# CONFIGURATION - Update these paths for your project
# =============================================================================

project_dir = r"C:\path\to\your\project"  # UPDATE THIS
detection_file = os.path.join(project_dir, 'detections.csv')
output_dir = os.path.join(project_dir, 'output')

units = 'hours'  # seconds, minutes, hours, days or weeks
columns = column_map()  # GLATOS names, override e.g. column_map(animal='fish_id')

os.makedirs(output_dir, exist_ok=True)
logger = setup_logging(level=logging.INFO, log_file=os.path.join(output_dir, 'pyfesl.log'))

# =============================================================================
# STEP 1: Load detections
# =============================================================================

logger.info("Step 1: Loading detections")
data_det = pd.read_csv(detection_file, parse_dates=[columns.timestamp])
data_det[columns.date] = data_det[columns.timestamp].dt.date

# movement networks need chronological detections within each fish
data_det = data_det.sort_values([columns.animal, columns.timestamp], kind='mergesort')
logger.info(f"  Found {len(data_det):,} detections of {data_det[columns.animal].nunique()} fish")

# =============================================================================
# STEP 2: Residency and summaries
# =============================================================================

logger.info("Step 2: Calculating residency and summaries")
try:
    df_residency = pyfesl.compute_residency(data_det, columns=columns, units=units)
    df_individual_summary = pyfesl.individual_summary(data_det, df_residency, columns=columns)
    df_population_summary = pyfesl.population_summary(df_individual_summary, columns=columns)
    df_location_summary = pyfesl.location_summary(df_population_summary, columns=columns)
except ValidationError as e:
    logger.error(f"Could not summarize detections: {e}")
    raise

pyfesl.study_statistics(data_det, df_individual_summary, df_population_summary,
                        df_location_summary, columns=columns)

# =============================================================================
# STEP 3: Movement network
# =============================================================================

logger.info("Step 3: Building the movement network")
net = pyfesl.network_summary(data_det, columns=columns)
net.summary()

# =============================================================================
# STEP 4: Export tables and figures
# =============================================================================

logger.info("Step 4: Exporting tables and figures")
df_individual_summary.to_csv(os.path.join(output_dir, 'df_individual_summary.csv'), index=False)
df_population_summary.to_csv(os.path.join(output_dir, 'df_population_summary.csv'), index=False)
df_location_summary.to_csv(os.path.join(output_dir, 'df_location_summary.csv'), index=False)
net.plot_data.to_csv(os.path.join(output_dir, 'movement_edges.csv'), index=False)
net.receiver_locations.to_csv(os.path.join(output_dir, 'receiver_locations.csv'), index=False)

figures = {
    'plot_network.png': pyfesl.network_plot(net, labels=True),
    'plot_abacus.png': pyfesl.abacus_plot(df_population_summary, columns=columns),
    'plot_detections_by_fish.png': pyfesl.detections_by_fish_plot(data_det, columns=columns),
    'plot_durations_by_fish.png': pyfesl.durations_by_fish_plot(data_det, columns=columns),
}
for name, fig in figures.items():
    fig.savefig(os.path.join(output_dir, name), dpi=300)

logger.info(f"Analysis complete, outputs written to {output_dir}")
