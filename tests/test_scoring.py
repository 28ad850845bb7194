import pytest

from step_core.config import LEFT_STEP_TEMPLATE, RIGHT_STEP_TEMPLATE, StepCounterConfig
from step_core.joints import extract_step_joints
from step_core.scoring import compute_step_angles, cosine_similarity, step_progress


def test_cosine_similarity_is_symmetric():
    pairs = [
        ((0.25, 0.25, 0.25, 0.5), (0.31, 0.22, 0.4, 0.47)),
        ((1.0, -2.0, 3.0), (0.5, 0.5, -0.1)),
        (LEFT_STEP_TEMPLATE, RIGHT_STEP_TEMPLATE),
    ]
    for a, b in pairs:
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_similarity_zero_vector_is_zero():
    assert cosine_similarity((0.0, 0.0, 0.0, 0.0), LEFT_STEP_TEMPLATE) == 0.0
    assert cosine_similarity(LEFT_STEP_TEMPLATE, (0.0, 0.0, 0.0, 0.0)) == 0.0


def test_cosine_similarity_ignores_magnitude():
    assert cosine_similarity((1.0, 2.0), (2.0, 4.0)) == pytest.approx(1.0)
    assert cosine_similarity((1.0, 0.0), (0.0, 3.0)) == pytest.approx(0.0)


def test_cosine_similarity_rejects_length_mismatch():
    with pytest.raises(ValueError):
        cosine_similarity((1.0, 2.0, 3.0), (1.0, 2.0))


def test_templates_are_distinguishable():
    assert cosine_similarity(LEFT_STEP_TEMPLATE, RIGHT_STEP_TEMPLATE) == pytest.approx(0.375 / 0.4375)


def test_step_progress_maps_window_to_unit_range():
    assert step_progress(0.95) == pytest.approx(0.0)
    assert step_progress(0.97) == pytest.approx(0.5)
    assert step_progress(0.99) == pytest.approx(1.0)
    # 下限截断为 0，上限不截断
    assert step_progress(0.5) == 0.0
    assert step_progress(1.0) == pytest.approx(1.25)


def test_step_progress_uses_config():
    cfg = StepCounterConfig(progress_floor=0.9, progress_span=0.1)
    assert step_progress(0.95, cfg) == pytest.approx(0.5)


def test_compute_step_angles_order(left_step, right_step, stand):
    assert compute_step_angles(extract_step_joints(left_step)) == pytest.approx(LEFT_STEP_TEMPLATE)
    assert compute_step_angles(extract_step_joints(right_step)) == pytest.approx(RIGHT_STEP_TEMPLATE)
    assert compute_step_angles(extract_step_joints(stand)) == pytest.approx((0.5, 0.5, 0.5, 0.5))
