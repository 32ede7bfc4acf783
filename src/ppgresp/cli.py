"""CLI for ppgresp: respiratory rate from PPG recordings."""

from __future__ import annotations

import click

from ppgresp.config import PipelineConfig
from ppgresp.errors import RespRateError
from ppgresp.logging_config import setup_logging
from ppgresp.pipeline import DEFAULT_PIPELINE, PIPELINES

PIPELINE_CHOICE = click.Choice(list(PIPELINES))


def _config(ctx: click.Context) -> PipelineConfig:
    return ctx.obj["config"]


def _number(text: str) -> int | float:
    """Parse "64" as int (filter order, etc.) and "0.5" as float."""
    try:
        return int(text)
    except ValueError:
        return float(text)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline stages.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              default=None, help="TOML file with pipeline parameters.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """ppgresp: respiratory rate estimation from photoplethysmograms."""
    setup_logging(verbose=verbose, console_format="%(levelname)s: %(message)s")
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = (
            PipelineConfig.from_toml(config_path) if config_path else PipelineConfig()
        )
    except RespRateError as e:
        raise click.ClickException(str(e))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--fs", required=True, type=float, help="Sampling rate in Hz.")
@click.option("--pipeline", "-p", type=PIPELINE_CHOICE, default=DEFAULT_PIPELINE,
              show_default=True, help="Pipeline variant.")
@click.option("--band-low", type=float, default=None, help="Respiratory band low edge (Hz).")
@click.option("--band-high", type=float, default=None, help="Respiratory band high edge (Hz).")
@click.pass_context
def estimate(
    ctx: click.Context,
    file: str,
    fs: float,
    pipeline: str,
    band_low: float | None,
    band_high: float | None,
) -> None:
    """Estimate the respiratory rate of one PPG signal file."""
    from ppgresp.dataset import load_signal
    from ppgresp.pipeline import run_pipeline

    try:
        config = _config(ctx).with_overrides(band_low_hz=band_low, band_high_hz=band_high)
        result = run_pipeline(load_signal(file), fs, pipeline, config)
    except RespRateError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")

    click.echo(f"{result.rate_bpm:.1f} breaths/min "
               f"({result.pipeline}, conf {result.confidence:.2f}, {result.n_peaks} pulses)")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--pipeline", "-p", "pipelines", type=PIPELINE_CHOICE, multiple=True,
              help="Pipeline(s) to evaluate (default: all).")
@click.option("--output", "-o", default=None, help="Write reports as JSON to file.")
@click.pass_context
def evaluate(ctx: click.Context, file: str, pipelines: tuple[str, ...], output: str | None) -> None:
    """Score pipelines against reference rates in a JSONL subjects file."""
    import json

    from ppgresp.dataset import load_subjects
    from ppgresp.evaluation import evaluate_pipeline

    try:
        subjects = load_subjects(file)
        reports = [evaluate_pipeline(subjects, name, _config(ctx)) for name in pipelines or PIPELINES]
    except RespRateError as e:
        raise click.ClickException(str(e))

    for report in reports:
        click.echo(f"\n{'=' * 60}")
        click.echo(f"  Pipeline: {report.pipeline}")
        click.echo(f"{'=' * 60}")
        click.echo(f"  {'subject':<16}{'predicted':>10}{'true':>10}{'|error|':>10}")
        for row in report.rows:
            click.echo(f"  {str(row.subject_id):<16}{row.predicted_rate:>10.1f}"
                       f"{row.true_rate:>10.1f}{row.absolute_error:>10.1f}")
        for subject_id, reason in report.failures.items():
            click.echo(f"  {str(subject_id):<16}  FAILED  {reason}")
        metrics = report.metrics
        if metrics is not None:
            click.echo(f"  MAE:  {metrics.mae:.2f} breaths/min")
            click.echo(f"  RMSE: {metrics.rmse:.2f} breaths/min")
            if metrics.correlation is not None:
                click.echo(f"  r:    {metrics.correlation:.2f}")
            click.echo(f"  Bias: {metrics.bias:+.2f} "
                       f"(LoA {metrics.loa_lower:+.2f} .. {metrics.loa_upper:+.2f})")

    if output:
        with open(output, "w") as f:
            json.dump([r.to_dict() for r in reports], f, indent=2, default=str)
        click.echo(f"\nReports written to {output}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--param", required=True, help="Config field to vary, e.g. welch_window_sec.")
@click.option("--values", "values_csv", required=True, help="Comma-separated values.")
@click.option("--pipeline", "-p", type=PIPELINE_CHOICE, default="riiv-welch",
              show_default=True, help="Pipeline variant.")
@click.pass_context
def sweep(ctx: click.Context, file: str, param: str, values_csv: str, pipeline: str) -> None:
    """Evaluate a pipeline across values of one config parameter."""
    from ppgresp.dataset import load_subjects
    from ppgresp.evaluation import hyperparameter_sweep

    try:
        values = [_number(v) for v in values_csv.split(",") if v.strip()]
    except ValueError:
        raise click.BadParameter(f"not a list of numbers: {values_csv}", param_hint="--values")

    try:
        subjects = load_subjects(file)
        points = hyperparameter_sweep(subjects, param, values, pipeline, _config(ctx))
    except RespRateError as e:
        raise click.ClickException(str(e))

    click.echo(f"{param:>18}{'MAE':>10}{'RMSE':>10}{'failed':>8}")
    for point in points:
        if point.metrics is None:
            click.echo(f"{point.value:>18g}{'-':>10}{'-':>10}{point.n_failed:>8}")
        else:
            click.echo(f"{point.value:>18g}{point.metrics.mae:>10.2f}"
                       f"{point.metrics.rmse:>10.2f}{point.n_failed:>8}")


@main.command()
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--duration", "-d", default=60.0, show_default=True, help="Length in seconds.")
@click.option("--fs", default=125.0, show_default=True, help="Sampling rate in Hz.")
@click.option("--heart-rate", default=72.0, show_default=True, help="Beats per minute.")
@click.option("--resp-rate", default=18.0, show_default=True, help="Breaths per minute.")
@click.option("--am-depth", default=0.1, show_default=True, help="Amplitude modulation depth.")
@click.option("--noise", default=0.0, show_default=True, help="Gaussian noise std.")
@click.option("--seed", default=None, type=int, help="Noise seed.")
def synth(
    output: str,
    duration: float,
    fs: float,
    heart_rate: float,
    resp_rate: float,
    am_depth: float,
    noise: float,
    seed: int | None,
) -> None:
    """Write a synthetic PPG with a known respiratory rate."""
    from ppgresp.dataset import save_signal
    from ppgresp.synthetic import synthetic_ppg

    try:
        ppg = synthetic_ppg(
            duration, fs,
            heart_hz=heart_rate / 60.0,
            resp_hz=resp_rate / 60.0,
            am_depth=am_depth,
            noise_std=noise,
            seed=seed,
        )
    except RespRateError as e:
        raise click.ClickException(str(e))

    path = save_signal(output, ppg)
    click.echo(f"Wrote {ppg.size} samples ({duration:g}s @ {fs:g} Hz, "
               f"{resp_rate:g} breaths/min) to {path}")


if __name__ == "__main__":
    main()
