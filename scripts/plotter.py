import matplotlib.pyplot as plt
import numpy as np

PHASE_LABELS = ["Acceleration", "Constant", "Deceleration"]
PHASE_COLORS = ["#1976D2", "#388E3C", "#FBC02D"]


def _finish(out_dir, fname, show):
    plt.tight_layout()
    path = out_dir / fname
    plt.savefig(path)
    if show:
        plt.show()
    plt.close()
    return path


def plot_delays_vs_step(params_list, simulators, out_dir, show=False):
    plt.figure(figsize=(10, 6))
    for p, sim in zip(params_list, simulators):
        t, x, v, a, phase = sim.simulate()
        plt.plot(x, 1.0 / v, label=p.name, color=p.color, lw=1.5)
    plt.xlabel("Step")
    plt.ylabel("Delay (s)")
    plt.title("Inter-step Delay per Step")
    plt.legend()
    plt.grid(True, which='both')
    return _finish(out_dir, "delay_vs_step.png", show)


def plot_velocity_and_accel_vs_time(params_list, simulators, out_dir, show=False):
    fig, ax_v = plt.subplots(figsize=(10, 6))
    ax_a = ax_v.twinx()
    for p, sim in zip(params_list, simulators):
        t, x, v, a, phase = sim.simulate()
        ax_v.plot(t, v, label=f"{p.name} velocity", color=p.color, lw=2)
        ax_a.plot(t, a, label=f"{p.name} accel", color=p.color, lw=1, ls="--")
        # Annotate phase boundaries where the phases exist
        const_idx = np.where(phase == "const")[0]
        decel_idx = np.where(phase == "decel")[0]
        if const_idx.size:
            ax_v.axvline(t[const_idx[0]], color=p.color, ls=':', lw=1, alpha=0.7)
        if decel_idx.size:
            ax_v.axvline(t[decel_idx[0]], color=p.color, ls=':', lw=1, alpha=0.7)
    ax_v.set_xlabel("Time (s)")
    ax_v.set_ylabel("Velocity (steps/s)")
    ax_a.set_ylabel("Acceleration (steps/s²)")
    ax_v.set_title("Velocity and Acceleration vs. Time")
    handles_v, labels_v = ax_v.get_legend_handles_labels()
    handles_a, labels_a = ax_a.get_legend_handles_labels()
    ax_v.legend(handles_v + handles_a, labels_v + labels_a, loc="upper right")
    return _finish(out_dir, "velocity_accel_vs_time.png", show)


def plot_velocity_vs_position(params_list, simulators, out_dir, show=False):
    plt.figure(figsize=(10, 6))
    for p, sim in zip(params_list, simulators):
        t, x, v, a, phase = sim.simulate()
        plt.plot(x, v, label=p.name, color=p.color, lw=2)

        const_idx = np.where(phase == "const")[0]
        if const_idx.size:
            span_start = x[const_idx[0]]
            span_end = x[const_idx[-1]]
            plt.axvspan(span_start, span_end, color=p.color, alpha=0.1,
                        label=f"{p.name} plateau")
            plt.scatter([span_start, span_end],
                        [v[const_idx[0]], v[const_idx[-1]]],
                        color='black', zorder=5)
    plt.xlabel("Position (steps)")
    plt.ylabel("Velocity (steps/s)")
    plt.title("Velocity vs. Position (Ramp-up / Plateau / Ramp-down)")
    plt.legend()
    return _finish(out_dir, "velocity_vs_position.png", show)


def plot_phase_breakdown_bar(breakdowns, labels, out_dir, fname="phase_breakdown.png", show=False):
    """Plot a horizontal stacked bar of the time spent in each phase per move."""
    fig, ax = plt.subplots(figsize=(10, 2 + len(labels)))
    max_total = max((bd["Total"] for bd in breakdowns), default=0.0) or 1.0

    for row, bd in enumerate(breakdowns):
        start = 0.0
        for phase, color in zip(PHASE_LABELS, PHASE_COLORS):
            duration = bd[phase]
            ax.barh(row, duration, left=start, height=0.5, color=color)
            start += duration
        ax.text(start + max_total * 0.02, row, f"{bd['Total']:.3f}s", va="center", ha="left", fontweight="bold")

    handles = [plt.Rectangle((0, 0), 1, 1, color=c) for c in PHASE_COLORS]
    ax.legend(handles, PHASE_LABELS, title="Phase", bbox_to_anchor=(1.01, 1), loc="upper left")
    ax.set_xlabel("Time (s)")
    ax.set_xlim(0, max_total * 1.2)
    ax.set_yticks(np.arange(len(labels)))
    ax.set_yticklabels(labels)
    ax.set_title("Move Time Breakdown by Phase")
    return _finish(out_dir, fname, show)


SWEEP_AXES = {
    "velocity": ("Max Velocity (steps/s)", "velocity_sweep.png"),
    "acceleration": ("Target Acceleration (steps/s²)", "acceleration_sweep.png"),
}


def plot_sweep_total_time(quantity, values, times, ideal_times, params, out_dir, show=False):
    """
    Plot generated move time against an ideal trapezoid over a 1-D sweep.

    ``quantity`` is "velocity" or "acceleration". The lower panel shows how
    much slower the step-wise ramp is than the continuous profile.
    """
    xlabel, fname = SWEEP_AXES[quantity]
    fig, (ax_t, ax_gap) = plt.subplots(2, 1, figsize=(10, 7), sharex=True,
                                       gridspec_kw={"height_ratios": [3, 1]})
    ax_t.plot(values, times, label=f"{params.name} ramp", color=params.color, marker='o')
    ax_t.plot(values, ideal_times, label="ideal trapezoid", color="black", ls="--", lw=1)
    ax_t.set_ylabel("Total Move Time (s)")
    ax_t.set_title(f"Move Time over {quantity.capitalize()} Sweep ({params.num_steps} steps)")
    ax_t.legend()
    ax_t.grid(True, which='both')

    gap = (np.asarray(times) / np.asarray(ideal_times) - 1.0) * 100
    ax_gap.bar(values, gap, width=(values[1] - values[0]) * 0.6 if len(values) > 1 else 1.0,
               color=params.color, alpha=0.6)
    ax_gap.axhline(0, color="black", lw=0.5)
    ax_gap.set_xlabel(xlabel)
    ax_gap.set_ylabel("Slower by (%)")
    return _finish(out_dir, fname, show)


def plot_velocity_accel_map(V, A, Z, params, out_dir, fname="velocity_accel_map.png", show=False):
    """Heat map of move time over (max velocity, target acceleration)."""
    fig, ax = plt.subplots(figsize=(9, 7))
    mesh = ax.pcolormesh(V, A, Z, cmap='viridis_r', shading='auto')
    contours = ax.contour(V, A, Z, colors='white', linewidths=0.8)
    ax.clabel(contours, fmt="%.3f s", fontsize=8)
    ax.set_xlabel('Max Velocity (steps/s)')
    ax.set_ylabel('Target Acceleration (steps/s²)')
    ax.set_title(f'Move Time for {params.num_steps} Steps ({params.name})')
    fig.colorbar(mesh, ax=ax, label='Total Time (s)')
    return _finish(out_dir, fname, show)


def plot_numeric_comparison(df, out_dir, show=False):
    fig, ax = plt.subplots(figsize=(8, 5))
    ind = np.arange(len(df.index))
    ax.bar(ind - 0.2, df["Max Accel Error"] * 100, width=0.4, label="Max", color="#E64A19")
    ax.bar(ind + 0.2, df["Mean Accel Error"] * 100, width=0.4, label="Mean", color="#1976D2")
    ax.set_xticks(ind)
    ax.set_xticklabels(df.index)
    ax.set_ylabel("Acceleration Error (%)")
    ax.set_title("Ramp Accuracy by Numeric Backend")
    ax.legend()
    return _finish(out_dir, "numeric_comparison.png", show)
