import json

import pytest

import params.text as params
from waveview import WaveAnimator, define_params


@pytest.fixture
def environ():
    return {}


@pytest.fixture
def group(environ):
    return define_params(params.ParameterGroup(environ))


def test_defaults_match_unconfigured_animator(group):
    values = group.getValues()
    animator = WaveAnimator.from_params(values)

    assert values["wave_height"] == 4
    assert values["wave_speed"] == 4
    assert values["frame_interval"] == 16
    assert values["draw_peak"] is False
    assert values["wave_style"] == "stroke"
    assert animator.state.amplitude == WaveAnimator().state.amplitude
    assert animator.state.speed == WaveAnimator().state.speed


def test_environment_overrides(group, environ):
    environ["WAVEVIEW_WAVE_HEIGHT"] = "15"
    environ["WAVEVIEW_WAVE_SPEED"] = "12"
    environ["WAVEVIEW_DRAW_PEAK"] = "true"
    environ["WAVEVIEW_BACKGROUND"] = "#80FFFFFF"

    values = group.getValues()
    animator = WaveAnimator.from_params(values)

    assert animator.state.amplitude == 200
    assert animator.state.speed == 0.25
    assert animator.draw_peak is True
    assert values["background"] == pytest.approx((1.0, 1.0, 1.0, 0x80 / 0xFF))


def test_bad_value_names_the_parameter(group, environ):
    environ["WAVEVIEW_WAVE_HEIGHT"] = "tall"

    with pytest.raises(ValueError, match="wave_height"):
        group.getValues()


def test_out_of_range_value(group, environ):
    environ["WAVEVIEW_FRAME_INTERVAL"] = "0"

    with pytest.raises(ValueError, match="frame_interval"):
        group.getValues()


def test_bad_choice(group, environ):
    environ["WAVEVIEW_WAVE_STYLE"] = "dotted"

    with pytest.raises(ValueError, match="wave_style"):
        group.getValues()


def test_load_json_overrides(group, environ, tmp_path):
    environ["WAVEVIEW_WAVE_HEIGHT"] = "1"
    path = tmp_path / "wave.json"
    path.write_text(json.dumps({
        "wave_height": 5,
        "wave_color": "#2196F3",
        "draw_peak": True,
        "nonsense": 1,
    }))

    group.load(str(path))
    values = group.getValues()

    assert values["wave_height"] == 5
    assert values["draw_peak"] is True
    assert values["wave_color"] == pytest.approx((0x21 / 0xFF, 0x96 / 0xFF, 0xF3 / 0xFF, 1.0))
    assert "nonsense" not in values


def test_load_rejects_non_object(group, tmp_path):
    path = tmp_path / "wave.json"
    path.write_text("[1, 2, 3]")

    with pytest.raises(ValueError):
        group.load(str(path))


def test_duplicate_definition(group):
    with pytest.raises(ValueError):
        group.define("wave_height", params.NumericParameter(0, 1, 1, 0))


def test_parameter_type_checks():
    with pytest.raises(TypeError):
        params.NumericParameter(0, 10, 1, "4")
    with pytest.raises(TypeError):
        params.ToggleParameter("yes")
    with pytest.raises(ValueError):
        params.ChoiceParameter(["a", "b"], "c")


def test_toggle_parse():
    toggle = params.ToggleParameter(False)

    assert toggle.parse("true") is True
    assert toggle.parse("false") is False
    assert toggle.parse(True) is True
    with pytest.raises(ValueError):
        toggle.parse("maybe")


def test_whole_number_from_either_source(group, environ, tmp_path):
    environ["WAVEVIEW_WAVE_SPEED"] = "6.0"
    path = tmp_path / "wave.json"
    path.write_text(json.dumps({"wave_height": 5.0}))

    group.load(str(path))
    values = group.getValues()

    assert values["wave_height"] == 5
    assert isinstance(values["wave_height"], int)
    assert values["wave_speed"] == 6
    assert isinstance(values["wave_speed"], int)


def test_fractional_level_from_environment(group, environ):
    environ["WAVEVIEW_WAVE_HEIGHT"] = "4.5"

    with pytest.raises(ValueError, match="wave_height"):
        group.getValues()


def test_fractional_level_from_json(group, tmp_path):
    path = tmp_path / "wave.json"
    path.write_text(json.dumps({"wave_height": 4.5}))

    group.load(str(path))
    with pytest.raises(ValueError, match="wave_height"):
        group.getValues()


def test_float_parameter_keeps_fraction():
    width = params.NumericParameter(0.5, 10.0, 0.5, 2.0)

    assert width.parse("2.5") == 2.5
    assert width.parse(3) == 3.0
