import numpy as np

from processing.pipeline import run_pipeline
from radar.scene import RadarConfig, Scene, Target
from visualization.fmcw_plot import LiveFmcwPlot


# -------------------------
# Radar Parameters
# -------------------------
config = RadarConfig(
    carrier_frequency=24e9,
    bandwidth=1e9,
    chirp_durations=(40e-6, 60e-6),
    sampling_frequency=20e6,
    sampling_duration=20e-6,
)

plot = LiveFmcwPlot(window_index=0)


# -------------------------
# Live Loop: sweep one target outwards while a second one stays put
# -------------------------
for target_range in np.arange(5.0, 95.0, 5.0):
    scene = Scene(
        config=config,
        targets=(
            Target(name="Mover", range=float(target_range), velocity=10.0, color="blue"),
            Target(name="Fixed", range=40.0, velocity=-10.0, color="red"),
        ),
    )

    result = run_pipeline(scene)
    plot.update(result, scene, title=f"Mover at {target_range:.0f} m")

plot.close()
