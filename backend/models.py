from __future__ import annotations

from dataclasses import replace

from pydantic import BaseModel, Field

from pipeline.note_detection import AnalysisConfig


class AnalysisOverrides(BaseModel):
    buf_size: int | None = Field(default=None, gt=0, description="Window length in samples.")
    hop_size: int | None = Field(default=None, gt=0, description="Hop between windows in samples.")
    silence_threshold_db: float | None = Field(
        default=None, description="Windows quieter than this (dBFS) are skipped."
    )
    min_inter_onset_interval_s: float | None = Field(
        default=None, ge=0, description="Minimum gap between accepted onsets."
    )
    onset_velocity_threshold: float | None = Field(default=None, ge=0, le=1)
    sustained_velocity_threshold: float | None = Field(default=None, ge=0, le=1)
    merge_time_window_s: float | None = Field(default=None, ge=0)
    merge_pitch_window: float | None = Field(default=None, ge=0)

    def apply(self, base: AnalysisConfig) -> AnalysisConfig:
        changes = self.model_dump(exclude_none=True)
        if not changes:
            return base
        return replace(base, **changes)


class OnsetRequest(BaseModel):
    audio: str = Field(description="Base64 audio, optionally prefixed with a data URL marker.")
    config: AnalysisOverrides | None = Field(
        default=None,
        description="Per-request overrides of the analysis thresholds.",
    )


class OnsetResponse(BaseModel):
    notes: list[tuple[float, float, float]] = Field(
        description="(pitch, velocity, timestamp_seconds) triples sorted by time."
    )
    count: int
