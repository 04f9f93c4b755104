# tests/test_constants.py
from wrsn_ga import constants


def test_constants_defaults():
    assert isinstance(constants.DEFAULT_POP_NUM, int)
    assert constants.DEFAULT_POP_NUM > 0
    assert 0 <= constants.DEFAULT_CROSS_RATIO <= 100
    assert constants.SC_V_CRITICAL < constants.SC_V_MIN < constants.SC_V_MAX
    assert constants.MIN_ACOUS_DIST < constants.MAX_ACOUS_DIST
    # fitness weights sum to 1
    assert abs(constants.FIT_ALPHA + constants.FIT_BETA + constants.FIT_GAMMA - 1.0) < 1e-12
    assert constants.FIT_ALPHA > constants.FIT_BETA and constants.FIT_ALPHA > constants.FIT_GAMMA
    assert constants.WORKERS >= 1
