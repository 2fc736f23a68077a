# visualization/fmcw_plot.py

import matplotlib.pyplot as plt

from processing.pipeline import PipelineResult
from radar.scene import Scene, VELOCITY_SEARCH_BOUNDS


class LiveFmcwPlot:
    """
    Four-panel view of one pipeline run:

    - top-left: transmitted frequency and per-target beat frequency vs time
    - top-right: sampled capture-window signal (display render)
    - bottom-left: one-sided spectrum with detected peaks
    - bottom-right: range-velocity plane with ambiguity lines and targets

    Only enabled targets are drawn. Calling update() again redraws in
    place, so the same object can back an animation loop.
    """

    def __init__(
        self,
        window_index: int = 0,
        max_range: float = 100.0,
        velocity_bounds=VELOCITY_SEARCH_BOUNDS,
        interactive: bool = True,
    ):
        self.window_index = int(window_index)
        self.max_range = float(max_range)
        self.velocity_bounds = tuple(float(v) for v in velocity_bounds)
        self.interactive = bool(interactive)

        self.fig, axes = plt.subplots(2, 2, figsize=(12, 8))
        self.ax_time, self.ax_signal = axes[0]
        self.ax_spectrum, self.ax_rv = axes[1]
        self.ax_beat = self.ax_time.twinx()

        if self.interactive:
            plt.ion()

    def _draw_timeline(self, result: PipelineResult, scene: Scene):
        ax = self.ax_time
        ax.clear()
        t_us = result.time_grid * 1e6
        ax.plot(t_us, result.transmit_frequency / 1e9, color="black", linewidth=1.0, label="TX")
        ax.set_xlabel("Time (us)")
        ax.set_ylabel("TX frequency (GHz)")

        beat_ax = self.ax_beat
        beat_ax.clear()
        beat_ax.yaxis.tick_right()
        beat_ax.yaxis.set_label_position("right")
        for tgt in scene.enabled_targets:
            beat = result.beat_series[tgt.name]
            beat_ax.plot(t_us, beat / 1e6, color=tgt.color, linewidth=0.8, label=tgt.name)
        beat_ax.set_ylabel("Beat frequency (MHz)")

        for w in result.windows:
            start_us = w.window.start_time * 1e6
            ax.axvspan(start_us, start_us + w.window.duration * 1e6, color="grey", alpha=0.15)

        ax.set_title("Transmit timeline")

    def _draw_signal(self, result: PipelineResult):
        ax = self.ax_signal
        ax.clear()
        w = result.windows[self.window_index]
        ax.plot(w.display_times * 1e6, w.display_amplitude, linewidth=0.8)
        ax.plot(w.sample_times * 1e6, w.signal, ".", markersize=2)
        ax.set_xlabel("Time (us)")
        ax.set_ylabel("Amplitude")
        ax.set_title(f"Capture window {w.window.index}")

    def _draw_spectrum(self, result: PipelineResult, scene: Scene):
        ax = self.ax_spectrum
        ax.clear()
        w = result.windows[self.window_index]
        ax.plot(w.spectrum.frequencies / 1e6, w.spectrum.magnitudes, linewidth=1.0)
        if w.peaks:
            ax.scatter(
                [p.frequency / 1e6 for p in w.peaks],
                [p.magnitude for p in w.peaks],
                marker="o",
                facecolors="none",
                edgecolors="red",
            )
        ax.set_xlabel("Beat frequency (MHz)")
        ax.set_ylabel("Magnitude")
        ax.set_title(f"Spectrum ({scene.config.frequency_resolution / 1e3:.1f} kHz/bin)")

    def _draw_range_velocity(self, result: PipelineResult, scene: Scene):
        ax = self.ax_rv
        ax.clear()
        for line in result.ambiguity_lines:
            (r0, v0), (r1, v1) = line.start, line.end
            ax.plot([r0, r1], [v0, v1], linewidth=0.8, alpha=0.7)

        targets = scene.enabled_targets
        if targets:
            ax.scatter(
                [t.range for t in targets],
                [t.velocity for t in targets],
                c=[t.color for t in targets],
                s=64,
                zorder=3,
            )

        v_min, v_max = self.velocity_bounds
        ax.set_xlim(0.0, self.max_range)
        ax.set_ylim(v_min, v_max)
        ax.set_xlabel("Range (m)")
        ax.set_ylabel("Velocity (m/s)")
        ax.set_title("Range-velocity ambiguity")

    def update(self, result: PipelineResult, scene: Scene, title: str = "FMCW Radar"):
        if not 0 <= self.window_index < len(result.windows):
            raise IndexError(
                f"window_index {self.window_index} out of range for {len(result.windows)} windows"
            )

        self._draw_timeline(result, scene)
        self._draw_signal(result)
        self._draw_spectrum(result, scene)
        self._draw_range_velocity(result, scene)

        self.fig.suptitle(title)
        self.fig.canvas.draw_idle()
        if self.interactive:
            plt.pause(0.001)

    def close(self):
        if self.interactive:
            plt.ioff()
            plt.show()
        else:
            plt.close(self.fig)


def plot_fmcw_frame(result: PipelineResult, scene: Scene, window_index: int = 0,
                    title: str = "FMCW Radar", interactive: bool = False) -> LiveFmcwPlot:
    plot = LiveFmcwPlot(window_index=window_index, interactive=interactive)
    plot.update(result, scene, title=title)
    return plot
