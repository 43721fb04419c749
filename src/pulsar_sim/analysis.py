"""Analyze a recorded visualizer run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
import math
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            value_raw = row.get("value", "")
            try:
                value: object = float(value_raw)
            except ValueError:
                value = value_raw
            events.append(
                {
                    "t": float(row["t_real"]),
                    "type": row["type"],
                    "name": row.get("name", ""),
                    "value": value,
                    "details": row.get("details", ""),
                }
            )
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def positions(ts: Dict[str, np.ndarray], body: str) -> np.ndarray:
    return np.stack([ts[f"{body}_x"], ts[f"{body}_y"], ts[f"{body}_z"]], axis=1)


def separation_residual(ts: Dict[str, np.ndarray], separation: float) -> float:
    """Largest deviation of the body-to-body distance from *separation*."""

    if not ts.get("t_real", np.array([])).size:
        return 0.0
    distance = np.linalg.norm(positions(ts, "pulsar") - positions(ts, "companion"), axis=1)
    return float(np.max(np.abs(distance - separation)))


def barycenter_residual(ts: Dict[str, np.ndarray]) -> float:
    """Largest distance of the mass-weighted centre from the origin.

    Uses the radii themselves as weights: m_p r_p = m_c r_c means the centre
    of mass lies on the line where ``r_c * p + r_p * c == 0``.
    """

    if not ts.get("t_real", np.array([])).size:
        return 0.0
    pulsar = positions(ts, "pulsar")
    companion = positions(ts, "companion")
    r_p = np.linalg.norm(pulsar, axis=1, keepdims=True)
    r_c = np.linalg.norm(companion, axis=1, keepdims=True)
    total = np.maximum(r_p + r_c, 1e-12)
    centre = (r_c * pulsar + r_p * companion) / total
    return float(np.max(np.linalg.norm(centre, axis=1)))


def estimate_period(ts: Dict[str, np.ndarray]) -> float | None:
    """Simulated time between the last two upward crossings of the phase angle."""

    if "angle" not in ts or ts["angle"].size < 2:
        return None
    turns = np.floor(ts["angle"] / (2.0 * math.pi))
    crossings = np.nonzero(np.diff(turns) > 0)[0]
    if crossings.size < 2:
        return None
    t_sim = ts["t_sim"]
    return float(t_sim[crossings[-1] + 1] - t_sim[crossings[-2] + 1])


def theoretical_period(total_mass: float, separation: float) -> float | None:
    if total_mass <= 0.0:
        return None
    return 2.0 * math.pi * math.sqrt(separation**3 / total_mass)


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {"set": 0, "rejected": 0, "preset": 0, "reset": 0}
    for event in events:
        if event["type"] in summary:
            summary[event["type"]] += 1
    return summary


def plot_orbit(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, axes = plt.subplots(1, 2, figsize=(11, 5))
    for ax, (i, j, label) in zip(axes, [(0, 1, "x–y"), (0, 2, "x–z")]):
        for body, color in (("pulsar", "#f8f9fa"), ("companion", "#8888ff")):
            pts = positions(ts, body)
            ax.plot(pts[:, i], pts[:, j], color=color, lw=1.2, label=body.capitalize())
        ax.scatter([0.0], [0.0], color="#ffa94d", s=30, label="Barycentre")
        ax.set_aspect("equal", "box")
        ax.set_title(f"Orbit ({label})")
        ax.set_facecolor("#0b1020")
        ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "orbit_projections.png", dpi=150)
    plt.close(fig)


def plot_positions(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    for axis, color in (("x", "#4dabf7"), ("y", "#94d82d"), ("z", "#9775fa")):
        ax.plot(ts["t_real"], ts[f"pulsar_{axis}"], color=color, label=f"pulsar {axis}")
    for event in events:
        if event["type"] == "rejected":
            ax.axvline(event["t"], color="#d9480f", linestyle="--", alpha=0.5)
    ax.set_xlabel("t [s]")
    ax.set_ylabel("position")
    ax.set_title("Pulsar position over time")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "pulsar_position.png", dpi=150)
    plt.close(fig)


def plot_beam(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    elevation = np.degrees(np.arcsin(np.clip(ts["beam_z"], -1.0, 1.0)))
    ax.plot(ts["t_real"], elevation, color="#22b8cf")
    ax.set_xlabel("t [s]")
    ax.set_ylabel("beam elevation towards +z [deg]")
    ax.set_title("Beam sweep")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "beam_sweep.png", dpi=150)
    plt.close(fig)


def print_summary(
    run_dir: Path,
    sep_residual: float,
    com_residual: float,
    T_theo: float | None,
    T_sim: float | None,
    event_summary: Dict[str, int],
) -> None:
    print(f"Run: {run_dir.name}")
    print(f" Separation residual = {sep_residual:.3e}")
    print(f" Barycentre residual = {com_residual:.3e}")
    if T_theo is not None:
        print(f" Theoretical period (initial masses) T_theo = {T_theo:.3f} s")
    else:
        print(" Theoretical period: not available")
    if T_sim is not None:
        print(f" Simulated period (last two phase wraps) T_sim = {T_sim:.3f} s")
    else:
        print(" Simulated period: needs at least two full orbits")
    print(
        " Events:" +
        ", ".join(f" {etype}: {count}" for etype, count in event_summary.items())
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded run and create figures.")
    parser.add_argument("run_dir", nargs="?", help="Path to a specific run directory")
    parser.add_argument("--runs-dir", default="data/runs", help="Base directory of recorded runs")
    args = parser.parse_args(argv)

    base_runs_dir = Path(args.runs_dir)
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No run given and last_run.txt is missing.")
        run_id = last_run_file.read_text(encoding="utf-8").strip()
        run_path = base_runs_dir / run_id

    if not run_path.is_dir():
        parser.error(f"Could not find run directory: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME

    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        parser.error("Run directory is missing required files (meta/timeseries/events).")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)

    if not ts or not ts.get("t_real", np.array([])).size:
        parser.error("timeseries.csv is empty, nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)
    separation = float(meta.get("separation", 10.0))
    initial = meta.get("initial_parameters", {})
    total_mass = float(initial.get("pulsarMass", 0.0)) + float(initial.get("companionMass", 0.0))

    plot_orbit(fig_dir, ts)
    plot_positions(fig_dir, ts, events)
    plot_beam(fig_dir, ts)

    print_summary(
        run_path,
        separation_residual(ts, separation),
        barycenter_residual(ts),
        theoretical_period(total_mass, separation),
        estimate_period(ts),
        summarize_events(events),
    )


if __name__ == "__main__":
    main()
