"""
Generation Coordinator.

Turns one approved review into several angle-specific testimonial videos:

    review -> permission check -> for each angle:
        script -> voiceover -> video job -> download -> persist

Angles run one after another. A failed angle is cleaned up and recorded,
and the batch moves on until half of the angles have failed.
"""
import logging
import math
import sqlite3
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from proofreel.config import AppConfig
from proofreel.narrative import NarrativeAngle, NarrativeScript, NarrativeTemplateEngine
from proofreel.persistence import SQLitePermissionRepository, SQLiteVideoRepository, get_connection
from proofreel.providers import (
    AudioAsset,
    BaseVideoJobClient,
    BaseVoiceProvider,
    Clock,
    DownloadedVideo,
    ElevenLabsClient,
    GrokVideoClient,
    RetryPolicy,
    VideoJob,
    VoiceConfig,
)
from proofreel.providers.video import audio_file_uri

from .exceptions import AllGenerationsFailed, InvalidInput
from .models import (
    AngleFailure,
    GenerationBatchResult,
    GenerationOptions,
    Review,
    VideoArtifact,
)
from .permissions import PermissionGate
from .storage import DEFAULT_ORPHAN_GRACE_PERIOD, MediaStorage, ReconcileReport

logger = logging.getLogger(__name__)


class VideoArtifactSink(Protocol):
    def save_video_artifact(
        self,
        script_ref: str,
        file_path: str,
        duration: Optional[float],
        status: str = "completed",
        **metadata: Any,
    ) -> int:
        ...

    def list_video_paths(self) -> List[str]:
        ...


class AngleState(str, Enum):
    """Progress of a single angle through the pipeline."""
    IDLE = "idle"
    SCRIPT_READY = "script_ready"
    AUDIO_READY = "audio_ready"
    VIDEO_SUBMITTED = "video_submitted"
    VIDEO_POLLING = "video_polling"
    VIDEO_READY = "video_ready"
    PERSISTED = "persisted"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (AngleState.DONE, AngleState.FAILED)


@dataclass
class AngleRun:
    """Everything produced while generating one angle."""
    angle: NarrativeAngle
    review: Review
    options: GenerationOptions
    voice: Optional[VoiceConfig]
    state: AngleState = AngleState.IDLE
    script: Optional[NarrativeScript] = None
    audio_path: Optional[Path] = None
    audio: Optional[AudioAsset] = None
    job: Optional[VideoJob] = None
    video_path: Optional[Path] = None
    video: Optional[DownloadedVideo] = None
    artifact: Optional[VideoArtifact] = None
    error: Optional[BaseException] = None
    history: List[AngleState] = field(default_factory=list)

    @property
    def review_id(self) -> str:
        return str(self.review.id)

    @property
    def script_ref(self) -> str:
        return f"{self.review_id}:{self.angle.value}"

    def advance(self, state: AngleState) -> None:
        self.history.append(self.state)
        self.state = state


class GenerationCoordinator:
    """
    Orchestrates testimonial video generation for a review.

    All collaborators are injected; `from_config` wires the production ones.
    """

    def __init__(
        self,
        tts: BaseVoiceProvider,
        video: BaseVideoJobClient,
        permission_gate: PermissionGate,
        videos: VideoArtifactSink,
        storage: MediaStorage,
        engine: Optional[NarrativeTemplateEngine] = None,
        default_voice: Optional[VoiceConfig] = None,
        video_style: str = "testimonial",
    ):
        self.tts = tts
        self.video = video
        self.permission_gate = permission_gate
        self.videos = videos
        self.storage = storage
        self.engine = engine or NarrativeTemplateEngine()
        self.default_voice = default_voice
        self.video_style = video_style

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        conn: Optional[sqlite3.Connection] = None,
        clock: Optional[Clock] = None,
    ) -> "GenerationCoordinator":
        conn = conn or get_connection(config.database_path)
        retry = RetryPolicy.from_config(config.retry, clock=clock)
        return cls(
            tts=ElevenLabsClient(config.elevenlabs, retry_policy=retry),
            video=GrokVideoClient(config.video, retry_policy=retry, clock=clock),
            permission_gate=PermissionGate(SQLitePermissionRepository(conn)),
            videos=SQLiteVideoRepository(conn),
            storage=MediaStorage.from_config(config.storage),
            default_voice=VoiceConfig(
                voice_id=config.elevenlabs.voice_id,
                model_id=config.elevenlabs.model_id,
            ),
            video_style=config.video.style,
        )

    async def generate_batch(
        self,
        review: Review,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationBatchResult:
        """
        Generate one video per selected angle.

        Returns:
            GenerationBatchResult with the artifacts in angle priority order
            and the per-angle failures

        Raises:
            InvalidInput: review has no id or no text
            PermissionDenied: no approved consent record
            AllGenerationsFailed: not a single angle produced a video
        """
        options = options or GenerationOptions()
        self._validate_review(review)
        review_id = str(review.id)

        self.permission_gate.validate(review.id)
        self.storage.ensure_directories()

        angles = self.engine.select_angles(
            include_extended=options.include_extended_angles,
            variation_count=options.variation_count,
        )
        failure_threshold = math.ceil(len(angles) / 2)
        voice = self._voice_for(options)

        logger.info(
            f"[GEN] Starting batch for review {review_id}: "
            f"{len(angles)} angle(s) {[a.value for a in angles]}, {options.duration_seconds}s"
        )

        artifacts: List[VideoArtifact] = []
        failures: List[AngleFailure] = []
        skipped: List[NarrativeAngle] = []

        for index, angle in enumerate(angles):
            if len(failures) >= failure_threshold:
                skipped = list(angles[index:])
                logger.error(
                    f"[GEN] {len(failures)}/{len(angles)} angles failed for review {review_id}, "
                    f"skipping {[a.value for a in skipped]}"
                )
                break

            run = await self._run_angle(AngleRun(angle=angle, review=review, options=options, voice=voice))

            if run.state is AngleState.DONE:
                artifacts.append(run.artifact)
            else:
                failures.append(AngleFailure.from_exception(angle, run.error))

        attempted = len(artifacts) + len(failures)

        if not artifacts:
            raise AllGenerationsFailed(review_id, failures, attempted=attempted)

        logger.info(
            f"[GEN] Batch complete for review {review_id}: "
            f"{len(artifacts)} succeeded, {len(failures)} failed, {len(skipped)} skipped"
        )

        return GenerationBatchResult(
            review_id=review_id,
            artifacts=artifacts,
            failures=failures,
            attempted=attempted,
            skipped=skipped,
        )

    async def _run_angle(self, run: AngleRun) -> AngleRun:
        """Drive one angle to DONE or FAILED. Never raises for pipeline errors."""
        logger.info(f"[GEN] Generating {run.angle.value} video for review {run.review_id}")

        while not run.state.is_terminal:
            try:
                await self._step(run)
            except Exception as e:
                failed_in = run.state
                run.error = e
                run.advance(AngleState.FAILED)
                logger.error(
                    f"[GEN] {run.angle.value} failed during {failed_in.value} "
                    f"for review {run.review_id}: {type(e).__name__}: {e} "
                    f"(states: {' -> '.join(s.value for s in run.history)})"
                )
                self._cleanup(run)

        return run

    async def _step(self, run: AngleRun) -> None:
        """Perform the work that leads out of the current state."""
        state = run.state

        if state is AngleState.IDLE:
            run.script = self.engine.render(run.angle, run.review)
            run.advance(AngleState.SCRIPT_READY)

        elif state is AngleState.SCRIPT_READY:
            run.audio_path = self.storage.audio_path(run.review_id, run.angle.value)
            run.audio = await self.tts.synthesize(run.script.text, run.voice, run.audio_path)
            run.advance(AngleState.AUDIO_READY)

        elif state is AngleState.AUDIO_READY:
            run.job = await self.video.submit(
                prompt=run.script.text,
                audio_ref=audio_file_uri(run.audio.path),
                duration_seconds=run.options.duration_seconds,
                style=self.video_style,
            )
            run.advance(AngleState.VIDEO_SUBMITTED)

        elif state is AngleState.VIDEO_SUBMITTED:
            run.advance(AngleState.VIDEO_POLLING)

        elif state is AngleState.VIDEO_POLLING:
            run.job = await self.video.poll(run.job.id)
            run.video_path = self.storage.video_path(run.review_id, run.angle.value)
            run.video = await self.video.download(run.job.result_url, run.video_path)
            run.advance(AngleState.VIDEO_READY)

        elif state is AngleState.VIDEO_READY:
            duration = run.job.duration_seconds or float(run.options.duration_seconds)
            video_id = self.videos.save_video_artifact(
                script_ref=run.script_ref,
                file_path=str(run.video.path),
                duration=duration,
                status="completed",
                review_id=run.review_id,
                angle=run.angle.value,
                file_size_bytes=run.video.file_size_bytes,
            )
            run.artifact = VideoArtifact(
                id=video_id,
                review_id=run.review_id,
                angle=run.angle,
                angle_name=run.angle.display_name,
                file_path=str(run.video.path),
                duration_seconds=duration,
                file_size_bytes=run.video.file_size_bytes,
                script_text=run.script.text,
            )
            run.advance(AngleState.PERSISTED)

        elif state is AngleState.PERSISTED:
            self.storage.remove(run.audio_path, "temp audio")
            logger.info(
                f"[GEN] {run.angle.value} video ready: {run.artifact.file_path} "
                f"({run.artifact.file_size_bytes} bytes)"
            )
            run.advance(AngleState.DONE)

    def _cleanup(self, run: AngleRun) -> None:
        """Remove whatever files a failed angle left behind."""
        self.storage.remove(run.audio_path, "temp audio")
        self.storage.remove(run.video_path, "partial video")

    def _validate_review(self, review: Optional[Review]) -> None:
        if review is None:
            raise InvalidInput("Review is required", field="review")
        if review.id is None or not str(review.id).strip():
            raise InvalidInput("Review must have an id", field="id")
        if not (review.text or "").strip():
            raise InvalidInput("Review must have text", field="text")

    def _voice_for(self, options: GenerationOptions) -> Optional[VoiceConfig]:
        """Requested voice on top of the default settings; None leaves it to the TTS client."""
        base = self.default_voice
        if base is None:
            return VoiceConfig(voice_id=options.voice_id) if options.voice_id else None
        if options.voice_id and options.voice_id != base.voice_id:
            return VoiceConfig(
                voice_id=options.voice_id,
                model_id=base.model_id,
                stability=base.stability,
                similarity_boost=base.similarity_boost,
                style=base.style,
                use_speaker_boost=base.use_speaker_boost,
            )
        return base

    async def validate_prerequisites(self) -> Dict[str, Any]:
        """Check storage and API credentials before running a batch."""
        issues = self.storage.check_writable()

        if not self.tts.is_available:
            issues.append(f"Speech synthesis ({self.tts.name}) API key not configured")
        if not self.video.is_available:
            issues.append(f"Video generation ({self.video.name}) API key not configured")

        return {"valid": not issues, "issues": issues}

    def reconcile_orphans(
        self,
        grace_period: float = DEFAULT_ORPHAN_GRACE_PERIOD,
    ) -> ReconcileReport:
        """Sweep media files not referenced by any persisted video."""
        return self.storage.reconcile_orphans(
            self.videos.list_video_paths(),
            grace_period=grace_period,
        )

    async def aclose(self) -> None:
        await self.tts.aclose()
        await self.video.aclose()

    async def __aenter__(self) -> "GenerationCoordinator":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
