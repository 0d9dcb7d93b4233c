"""Command-line interface for dataset statistics and offline annotation."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path

from pystatdb.annotate import annotate_dataset_vaa, annotate_dataset_zd_plus, annotate_percentiles
from pystatdb.config import Settings, UnknownTierError
from pystatdb.config_loader import WeightProfile
from pystatdb.ingest import (
    DatasetFormatError,
    DatasetNotFoundError,
    DatasetRepository,
    TrackingFeedClient,
)
from pystatdb.stats import (
    format_percentile,
    find_similar_in_dataset,
    percentile_label,
    player_decision_plus,
    player_percentiles,
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Player statistics over stored dataset tiers")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory holding dataset JSON files")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    percentiles = commands.add_parser("percentiles", help="Show a player's percentile profile")
    percentiles.add_argument("player_id", type=int)
    percentiles.add_argument("--dataset", default="mlb2025", help="Dataset tier id")
    percentiles.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    similar = commands.add_parser("similar", help="List the most similar players")
    similar.add_argument("player_id", type=int)
    similar.add_argument("--dataset", default="mlb2025", help="Dataset tier id")
    similar.add_argument("--limit", type=int, default=5, help="Number of players to list")
    similar.add_argument("--weights-profile", type=Path, default=None, help="Load weight profile JSON")
    similar.add_argument("--save-profile", type=Path, default=None, help="Save the weights used as JSON")

    for name, help_text in (
        ("annotate-zd", "Fetch pitch data and store ZD+ and xwOBA on each record"),
        ("annotate-vaa", "Fetch pitch data and store per-pitch-type VAA on each record"),
    ):
        annotate = commands.add_parser(name, help=help_text)
        annotate.add_argument("--dataset", default="mlb2025", help="Dataset tier id")
        annotate.add_argument("--season", type=int, default=None, help="Season to fetch (default from settings)")
        annotate.add_argument("--delay", type=float, default=None, help="Seconds to wait between requests")
        annotate.add_argument("--report", type=Path, default=None, help="Optional path to write batch summary JSON")

    annotate_pct = commands.add_parser("annotate-percentiles", help="Store percentile maps on each record")
    annotate_pct.add_argument("--dataset", default="mlb2025", help="Dataset tier id")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.data_dir is not None:
        settings = replace(settings, data_dir=args.data_dir)
    return settings


def _show_percentiles(args: argparse.Namespace, repository: DatasetRepository) -> int:
    dataset = repository.load(args.dataset)
    record = dataset.find(args.player_id)
    if record is None:
        print(f"Player {args.player_id} not found in {dataset.dataset_id}")
        return 1
    index = repository.population_index
    percentiles = player_percentiles(record, dataset, index)
    decision = player_decision_plus(record, dataset, index)

    if args.json:
        payload = {
            "player_id": record.player_id,
            "full_name": record.full_name,
            "percentiles": percentiles,
            "decision_plus": decision,
            "zd_plus": record.get("zd_plus"),
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"{record.full_name} ({dataset.tier.name})")
    for definition in dataset.tier.metric_definitions:
        value = percentiles.get(definition.metric_id)
        print(f"  {definition.label:<22} {format_percentile(value):>6}  {percentile_label(value)}")
    print(f"  {'Decision+':<22} {'-' if decision is None else decision:>6}")
    return 0


def _show_similar(args: argparse.Namespace, repository: DatasetRepository) -> int:
    dataset = repository.load(args.dataset)
    record = dataset.find(args.player_id)
    if record is None:
        print(f"Player {args.player_id} not found in {dataset.dataset_id}")
        return 1

    weights = None
    metrics = None
    if args.weights_profile:
        profile = WeightProfile.load(args.weights_profile)
        weights = profile.weights
        metrics = profile.metrics
    results = find_similar_in_dataset(
        record,
        dataset,
        limit=max(1, args.limit),
        weights=weights,
        metrics=metrics,
    )
    if args.save_profile:
        used = dict(dataset.tier.similarity_weights) if weights is None else weights
        WeightProfile(used, list(metrics or dataset.tier.similarity_metrics)).save(args.save_profile)
        print(f"Saved weight profile to {args.save_profile}")

    if not results:
        print(f"No comparable players for {record.full_name}")
        return 0
    print(f"Most similar to {record.full_name} ({dataset.tier.name}):")
    for rank, result in enumerate(results, start=1):
        print(f"  {rank}. {result.player.full_name:<28} distance={result.distance:.3f} metrics={result.overlap}")
    return 0


def _annotate(args: argparse.Namespace, repository: DatasetRepository, settings: Settings) -> int:
    dataset = repository.load(args.dataset)
    delay = settings.fetch_delay if args.delay is None else max(0.0, args.delay)
    season = args.season or settings.season
    annotate = annotate_dataset_zd_plus if args.command == "annotate-zd" else annotate_dataset_vaa

    with TrackingFeedClient.from_settings(settings) as feed:
        annotated, summary = annotate(dataset, feed, delay=delay, season=season)

    path = repository.save(annotated)
    print(
        f"Annotated {summary.populated}/{summary.total} players "
        f"({summary.empty} without data, {summary.errors} errors, {summary.skipped} skipped)"
    )
    print(f"Wrote {path}")
    if args.report:
        args.report.write_text(json.dumps(summary.as_dict(), indent=2), encoding="utf-8")
        print(f"Wrote batch report to {args.report}")
    if summary.cancelled:
        print(f"Interrupted after {summary.processed} players; partial results saved")
        return 130
    return 0


def _annotate_percentiles(args: argparse.Namespace, repository: DatasetRepository) -> int:
    dataset = repository.load(args.dataset)
    annotated = annotate_percentiles(dataset, repository.population_index)
    path = repository.save(annotated)
    print(f"Wrote percentiles for {len(annotated)} players to {path}")
    return 0


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from pystatdb.api import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = _settings(args)

    if args.command == "serve":
        return _serve(args, settings)

    repository = DatasetRepository(settings.data_dir)
    try:
        if args.command == "percentiles":
            return _show_percentiles(args, repository)
        if args.command == "similar":
            return _show_similar(args, repository)
        if args.command == "annotate-percentiles":
            return _annotate_percentiles(args, repository)
        return _annotate(args, repository, settings)
    except (UnknownTierError, DatasetNotFoundError, DatasetFormatError) as exc:
        print(f"Error: {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
