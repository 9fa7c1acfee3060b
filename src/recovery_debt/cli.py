"""CLI for the recovery_debt engine."""

from __future__ import annotations

import json
import logging
from datetime import datetime

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log ingest and pipeline details.")
def main(verbose: bool) -> None:
    """recovery-debt: training recovery debt and readiness estimation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _parse_now(value: str | None) -> datetime | None:
    if value is None:
        return None
    from recovery_debt.models import parse_timestamp

    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--now") from exc


@main.command("analyze")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Write the report JSON to file.")
@click.option("--state-out", default=None, help="Write only the new recovery state JSON to file.")
@click.option("--max-hr", default=None, type=float, help="Max heart rate (overrides the export profile).")
@click.option("--window", "window_days", type=click.Choice(["7", "30", "90"]), default="30",
              help="EPOC lookback window in days.")
@click.option("--now", "now_text", default=None, help="Evaluation time (ISO-8601, default: now).")
def analyze_cmd(
    file: str,
    output: str | None,
    state_out: str | None,
    max_hr: float | None,
    window_days: str,
    now_text: str | None,
) -> None:
    """Run the recovery pipeline on an exported health snapshot (JSON)."""
    from recovery_debt.analytics.pipeline import run_pipeline

    now = _parse_now(now_text)
    try:
        with open(file) as f:
            payload = json.load(f)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{file}: invalid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise click.ClickException(f"{file}: expected a JSON object")

    try:
        report = run_pipeline(payload, now=now, max_hr=max_hr, epoc_window_days=int(window_days))
    except (KeyError, ValueError) as exc:
        raise click.ClickException(f"{file}: invalid previous_state ({exc})") from exc

    state = report.state
    click.echo(f"\n{'=' * 60}")
    click.echo(f"  Recovery: {state.timestamp.isoformat()}")
    click.echo(f"{'=' * 60}")
    click.echo(f"  Status:     {state.status.value.upper()}")
    click.echo(f"  Debt:       {state.debt_score:.1f}")
    if state.is_ready:
        click.echo("  Hard ready: now")
    elif state.ready_for_hard_training_at is None:
        click.echo("  Hard ready: not while recovery is stalled")
    else:
        click.echo(f"  Hard ready: {state.ready_for_hard_training_at.isoformat()} "
                   f"(in {state.recovery_hours_remaining:.1f} h)")
    click.echo(f"  EPOC:       {report.epoc_hours_remaining:.1f} h left of "
               f"{report.epoc_hours_added:.1f} h ({report.epoc_window_days} days)")
    if report.modifier is not None:
        m = report.modifier
        click.echo(f"  Modifier:   {m.modifier:.2f} (sleep {m.sleep_factor:.2f}, "
                   f"hrv {m.hrv_factor:.2f}, rhr {m.rhr_factor:.2f}, "
                   f"stress {m.stress_factor:.2f})")
    if report.stress is not None:
        click.echo(f"  Indices:    recovery {report.stress.recovery_index}, "
                   f"stress {report.stress.stress_index}")
    click.echo(f"  Workouts:   {len(report.workouts)}, days: {len(report.daily_metrics)}")
    click.echo(f"{'=' * 60}")

    if output:
        with open(output, "w") as f:
            f.write(report.to_json())
        click.echo(f"\nReport written to {output}")
    if state_out:
        with open(state_out, "w") as f:
            f.write(state.to_json())
        click.echo(f"State written to {state_out}")


@main.command("load")
@click.option("--duration", "-d", required=True, type=float, help="Workout duration in minutes.")
@click.option("--zones", default=None, help="Comma-separated z1..z5 minutes, e.g. 10,10,10,10,10.")
@click.option("--avg-hr", default=None, type=float, help="Average heart rate (TRIMP).")
@click.option("--rest-hr", default=None, type=float, help="Resting heart rate (TRIMP).")
@click.option("--max-hr", default=None, type=float, help="Max heart rate (TRIMP).")
@click.option("--sex", type=click.Choice(["male", "female"]), default="male", help="TRIMP constants.")
@click.option("--rpe", default=None, type=float, help="Perceived exertion 1-10.")
@click.option("--type", "workout_type", default=None, help="Workout type, e.g. running.")
def load_cmd(
    duration: float,
    zones: str | None,
    avg_hr: float | None,
    rest_hr: float | None,
    max_hr: float | None,
    sex: str,
    rpe: float | None,
    workout_type: str | None,
) -> None:
    """Score a single workout's load."""
    from recovery_debt.analytics.load import LoadInputs, score_workout_load
    from recovery_debt.models import Sex, ZoneMinutes

    zone_minutes = None
    if zones:
        try:
            values = [float(v) for v in zones.split(",")]
            if len(values) != 5:
                raise ValueError("expected five values")
            zone_minutes = ZoneMinutes(*values)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--zones") from exc

    result = score_workout_load(
        LoadInputs(
            duration_minutes=duration,
            zone_minutes=zone_minutes,
            max_hr=max_hr,
            avg_heart_rate=avg_hr,
            resting_heart_rate=rest_hr,
            sex=Sex(sex),
            rpe=rpe,
            workout_type=workout_type,
        )
    )
    click.echo(f"Load: {result.load_score:.1f} ({result.method.value})")


@main.command("config")
def config_cmd() -> None:
    """Print the reference constant tables as JSON."""
    from recovery_debt import config

    tables = {
        "zones": config.DEFAULT_ZONE_CONFIG.model_dump(),
        "load": config.DEFAULT_LOAD_CONFIG.model_dump(),
        "debt": config.DEFAULT_DEBT_CONFIG.model_dump(),
        "epoc": config.DEFAULT_EPOC_CONFIG.model_dump(),
        "modifier": config.DEFAULT_MODIFIER_CONFIG.model_dump(),
        "stress": config.DEFAULT_STRESS_CONFIG.model_dump(),
    }
    click.echo(json.dumps(tables, indent=2))


if __name__ == "__main__":
    main()
