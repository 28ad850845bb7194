import numpy as np

from gradio_frontend.mvc.controller import StepCountController
from gradio_frontend.mvc.model import draw_annotations, save_uploaded
from step_core.types import PoseFrame, Posture


class FakeDetector:
    def __init__(self):
        self.closed = False

    def detect(self, frame_bgr):
        return None, None

    def close(self):
        self.closed = True


def blank_frame():
    return np.zeros((240, 320, 3), dtype=np.uint8)


def visible_landmarks():
    lm = np.full((33, 4), 0.5, dtype=np.float32)
    lm[:, 0] = np.linspace(0.2, 0.8, 33)
    lm[:, 1] = np.linspace(0.1, 0.9, 33)
    lm[:, 3] = 1.0
    return lm


def test_draw_annotations_returns_annotated_copy():
    frame = blank_frame()
    out = draw_annotations(frame, visible_landmarks(), 3, 0.6, "left_step", (0.25, 0.25, 0.25, 0.5))
    assert out.shape == frame.shape
    assert out.any()
    assert not frame.any()


def test_draw_annotations_without_landmarks_clamps_progress():
    out = draw_annotations(blank_frame(), None, 0, 1.3, "stand")
    assert out.shape == (240, 320, 3)


def test_save_uploaded(tmp_path):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"video-bytes")
    target = save_uploaded(str(src), "eval")
    assert target is not None
    with open(target, "rb") as f:
        assert f.read() == b"video-bytes"
    assert save_uploaded(None, "eval") is None


def test_controller_process_tracks_listener_updates(left_step):
    ctl = StepCountController(detector_factory=FakeDetector)
    txt = ""
    for i in range(6):
        txt, ann = ctl.process(PoseFrame(i / 30.0, left_step, visible_landmarks()), blank_frame())
    assert ctl.rep_count == 1
    assert ctl.progress > 0.99
    assert ctl.counter.posture is Posture.LEFT_STEP
    assert "已完成: 1" in txt
    assert ann.shape == (240, 320, 3)


def test_controller_process_reports_skipped_frame():
    ctl = StepCountController(detector_factory=FakeDetector)
    txt, _ = ctl.process(PoseFrame(0.0, None), blank_frame())
    assert "missing_data" in txt
    assert ctl.progress == 0.0


def test_controller_reset_starts_new_session(left_step):
    ctl = StepCountController(detector_factory=FakeDetector)
    for i in range(6):
        ctl.process(PoseFrame(i / 30.0, left_step), blank_frame())
    ctl.reset()
    assert ctl.rep_count == 0
    assert ctl.counter.rep_count == 0
    assert ctl.counter.smoothed_progress == 0.0


def test_start_evaluation_without_file():
    created = []

    def factory():
        created.append(FakeDetector())
        return created[-1]

    ctl = StepCountController(detector_factory=factory)
    out = list(ctl.start_evaluation(None))
    assert out == [("未提供待评测视频", None)]
    assert created == []


def test_start_evaluation_unreadable_source_closes_detector(tmp_path):
    created = []

    def factory():
        created.append(FakeDetector())
        return created[-1]

    bogus = tmp_path / "not_a_video.mp4"
    bogus.write_bytes(b"\x00\x01")
    ctl = StepCountController(detector_factory=factory)
    out = list(ctl.start_evaluation(str(bogus)))
    assert out[-1][0].startswith("计数过程出错")
    assert created and created[0].closed
