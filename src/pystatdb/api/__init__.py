"""REST API for dataset-relative player statistics."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query

from pystatdb.api.schemas import (
    DatasetResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    MetricDifference,
    PercentileEntry,
    PlayerPercentilesResponse,
    PlayerSummary,
    SimilarityRequest,
    SimilarityResponse,
    SimilarPlayerResponse,
    ZoneBucketResponse,
    ZoneContactResponse,
)
from pystatdb.config import Settings, UnknownTierError, get_metric, iter_tiers
from pystatdb.ingest import (
    DatasetFormatError,
    DatasetNotFoundError,
    DatasetRepository,
    TrackingFeedClient,
    TrackingFeedError,
)
from pystatdb.models import Dataset, PlayerRecord
from pystatdb.stats import (
    SimilarityQuery,
    SimilarityResult,
    decision_plus_leaderboard,
    find_similar_in_dataset,
    format_percentile,
    league_discipline,
    metric_difference,
    percentile_label,
    player_decision_plus,
    player_percentiles,
    run_query,
    zone_contact_summary,
)


logger = logging.getLogger(__name__)


def _summary(record: PlayerRecord) -> PlayerSummary:
    team = record.get("team")
    return PlayerSummary(
        player_id=record.player_id,
        full_name=record.full_name,
        team=team if isinstance(team, str) else None,
    )


def _similar_response(
    target: PlayerRecord,
    results: List[SimilarityResult],
    metrics: List[str],
) -> List[SimilarPlayerResponse]:
    return [
        SimilarPlayerResponse(
            player=_summary(result.player),
            distance=result.distance,
            overlap=result.overlap,
            differences=[
                MetricDifference(
                    metric=metric_id,
                    target=get_metric(metric_id).value_of(target.attributes),
                    candidate=get_metric(metric_id).value_of(result.player.attributes),
                    difference=metric_difference(target, result.player, metric_id),
                )
                for metric_id in metrics
            ],
        )
        for result in results
    ]


def create_app(
    settings: Optional[Settings] = None,
    *,
    repository: Optional[DatasetRepository] = None,
    feed: Optional[TrackingFeedClient] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    owns_feed = feed is None
    feed = feed or TrackingFeedClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_feed:
            feed.close()

    app = FastAPI(title="pystatdb", lifespan=lifespan)
    app.state.settings = settings
    app.state.repository = repository or DatasetRepository(settings.data_dir)
    app.state.feed = feed

    def _dataset_or_404(dataset_id: str) -> Dataset:
        try:
            return app.state.repository.load(dataset_id)
        except UnknownTierError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown dataset {dataset_id}") from exc
        except DatasetNotFoundError as exc:
            raise HTTPException(status_code=404, detail=f"Dataset {dataset_id} is not available") from exc
        except DatasetFormatError as exc:
            logger.warning("Dataset %s is malformed: %s", dataset_id, exc)
            raise HTTPException(status_code=500, detail=f"Dataset {dataset_id} is malformed") from exc

    def _player_or_404(dataset: Dataset, player_id: int) -> PlayerRecord:
        record = dataset.find(player_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return record

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/datasets", response_model=List[DatasetResponse])
    async def list_datasets():
        return [
            DatasetResponse(
                dataset_id=tier.dataset_id,
                name=tier.name,
                data_file=tier.data_file,
                percentile_metrics=list(tier.percentile_metrics),
                similarity_metrics=list(tier.similarity_metrics),
                similarity_weights=dict(tier.similarity_weights),
            )
            for tier in iter_tiers()
        ]

    @app.get("/datasets/{dataset_id}/players/{player_id}/percentiles", response_model=PlayerPercentilesResponse)
    async def get_percentiles(dataset_id: str, player_id: int):
        dataset = _dataset_or_404(dataset_id)
        record = _player_or_404(dataset, player_id)
        index = app.state.repository.population_index
        percentiles = player_percentiles(record, dataset, index)
        entries = []
        for definition in dataset.tier.metric_definitions:
            value = percentiles.get(definition.metric_id)
            entries.append(
                PercentileEntry(
                    metric=definition.metric_id,
                    label=definition.label,
                    value=definition.value_of(record.attributes),
                    percentile=value,
                    rating=percentile_label(value),
                    display=format_percentile(value),
                )
            )
        zd_plus = record.value("zd_plus")
        return PlayerPercentilesResponse(
            dataset_id=dataset.dataset_id,
            player=_summary(record),
            percentiles=entries,
            decision_plus=player_decision_plus(record, dataset, index),
            zd_plus=int(zd_plus) if zd_plus is not None else None,
        )

    @app.get("/datasets/{dataset_id}/players/{player_id}/similar", response_model=SimilarityResponse)
    async def get_similar(dataset_id: str, player_id: int, limit: int = Query(5, ge=1, le=100)):
        dataset = _dataset_or_404(dataset_id)
        record = _player_or_404(dataset, player_id)
        metrics = list(dataset.tier.similarity_metrics)
        results = find_similar_in_dataset(record, dataset, limit=limit)
        return SimilarityResponse(
            dataset_id=dataset.dataset_id,
            metrics=metrics,
            weights=dict(dataset.tier.similarity_weights),
            results=_similar_response(record, results, metrics),
        )

    @app.post("/datasets/{dataset_id}/similar", response_model=SimilarityResponse)
    async def custom_similar(dataset_id: str, request: SimilarityRequest):
        dataset = _dataset_or_404(dataset_id)
        try:
            query = SimilarityQuery.from_values(request.metrics, weights=request.weights, limit=request.limit)
            results = run_query(query, dataset)
        except (KeyError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        metrics = list(query.metrics)
        weights = dict(dataset.tier.similarity_weights if request.weights is None else request.weights)
        return SimilarityResponse(
            dataset_id=dataset.dataset_id,
            metrics=metrics,
            weights=weights,
            results=_similar_response(query.target, results, metrics),
        )

    @app.get("/datasets/{dataset_id}/leaderboard", response_model=LeaderboardResponse)
    async def leaderboard(
        dataset_id: str,
        min_ab: float | None = Query(None, ge=0),
        min_pa: float | None = Query(None, ge=0),
        limit: int = Query(50, ge=1, le=1000),
    ):
        dataset = _dataset_or_404(dataset_id)
        index = app.state.repository.population_index
        league = league_discipline(dataset, index)
        rows = decision_plus_leaderboard(dataset, index, min_at_bats=min_ab, min_plate_appearances=min_pa)
        ab_metric = get_metric("ab")
        pa_metric = get_metric("pa")
        return LeaderboardResponse(
            dataset_id=dataset.dataset_id,
            league_zone_swing=league.zone_swing,
            league_chase=league.chase,
            entries=[
                LeaderboardEntry(
                    rank=rank,
                    player=_summary(record),
                    decision_plus=score,
                    ab=ab_metric.value_of(record.attributes),
                    pa=pa_metric.value_of(record.attributes),
                )
                for rank, (record, score) in enumerate(rows[:limit], start=1)
            ],
        )

    @app.get("/zone-contact/{player_id}", response_model=ZoneContactResponse)
    def zone_contact(player_id: int, season: int | None = Query(None, ge=1900)):
        resolved_season = season or app.state.settings.season
        try:
            events = app.state.feed.batter_pitches(player_id, season=resolved_season)
        except TrackingFeedError as exc:
            logger.warning("Zone contact fetch failed for %s: %s", player_id, exc)
            raise HTTPException(status_code=502, detail="Failed to fetch tracking data") from exc
        summary = zone_contact_summary(events)
        return ZoneContactResponse(
            player_id=player_id,
            season=resolved_season,
            zones=[ZoneBucketResponse(**zone) for zone in summary.zones],
            zd_plus=summary.zd_plus,
            zd_raw=summary.zd_raw,
            xwoba=summary.xwoba,
            pitch_count=summary.pitch_count,
        )

    return app
