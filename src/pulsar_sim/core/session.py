"""Session object owning the parameter store, evaluator and run recorder."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from pulsar_sim.data.presets import get_preset

from .config import KINEMATICS_CFG, KinematicsCfg
from .errors import ParameterError
from .kinematics import FrameTransforms, KinematicEvaluator
from .logging_utils import RunLogger
from .model import ParameterStore, SetParameter

log = logging.getLogger(__name__)


class PulsarSession:
    """Applies UI edits and produces one :class:`FrameTransforms` per frame.

    Bad edits are logged, recorded and reported back as ``False``; they never
    reach the frame loop as exceptions.
    """

    def __init__(
        self,
        store: ParameterStore | None = None,
        evaluator: KinematicEvaluator | None = None,
        recorder: RunLogger | None = None,
        *,
        cfg: KinematicsCfg = KINEMATICS_CFG,
        record_every_frames: int = 2,
        on_error: Optional[Callable[[ParameterError], None]] = None,
    ) -> None:
        self.store = store or ParameterStore(cfg)
        self.evaluator = evaluator or KinematicEvaluator(cfg)
        self.recorder = recorder
        self.record_every_frames = max(1, record_every_frames)
        self.on_error = on_error
        self.frame_count = 0
        self.elapsed = 0.0
        self.last_error: ParameterError | None = None
        self.last_frame: FrameTransforms | None = None

    def apply(self, command: SetParameter) -> bool:
        try:
            value = self.store.apply(command)
        except ParameterError as exc:
            log.warning("Rejected edit %s=%r: %s", command.name, command.value, exc)
            self.last_error = exc
            self._record_event("rejected", command.name, command.value, str(exc))
            if self.on_error is not None:
                self.on_error(exc)
            return False
        self._record_event("set", command.name, value, "")
        return True

    def set(self, name: str, value: object) -> bool:
        return self.apply(SetParameter(name, value))

    def load_preset(self, key: str) -> bool:
        preset = get_preset(key)
        log.info("Loading preset %s", preset.name)
        self._record_event("preset", key, 0.0, preset.name)
        results = [self.apply(SetParameter(name, value)) for name, value in preset.items()]
        return all(results)

    def reset(self) -> None:
        self.store.reset()
        self.evaluator.reset()
        self._record_event("reset", "", 0.0, "")

    def frame(self, delta: float, elapsed: float) -> FrameTransforms:
        params = self.store.params
        transforms = self.evaluator.tick(delta, elapsed, params)
        self.elapsed = elapsed
        self.last_frame = transforms
        if self.recorder is not None and self.frame_count % self.record_every_frames == 0:
            beam_dir, _ = transforms.beam_directions()
            self.recorder.log_ts(
                [
                    elapsed,
                    transforms.time,
                    transforms.angle,
                    *transforms.pulsar.position,
                    *transforms.companion.position,
                    transforms.spin_angle,
                    *beam_dir,
                    params.total_mass,
                    params.time_speed,
                ]
            )
        self.frame_count += 1
        return transforms

    def write_meta(self) -> None:
        if self.recorder is None:
            return
        cfg = self.evaluator.cfg
        self.recorder.write_meta(
            {
                "separation": cfg.separation,
                "spin_follows_time_speed": cfg.spin_follows_time_speed,
                "record_every_frames": self.record_every_frames,
                "initial_parameters": self.store.snapshot(),
            }
        )

    def close(self) -> None:
        if self.recorder is not None:
            self.recorder.close()
            self.recorder = None

    def _record_event(self, kind: str, name: str, value: object, details: str) -> None:
        if self.recorder is None:
            return
        self.recorder.log_event([self.elapsed, kind, name, value, details])


__all__ = ["PulsarSession"]
