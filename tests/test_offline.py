import io
import json

import pytest

cairo = pytest.importorskip("cairo")

import offline


def events(*values):
    return io.StringIO("".join(json.dumps({"amplitude": v}) + "\n" for v in values))


def pixel(surface, x, y):
    """Return the (r, g, b) bytes of an opaque ARGB32 pixel."""
    surface.flush()
    data = surface.get_data()
    offset = y * surface.get_stride() + x * 4
    value = int.from_bytes(bytes(data[offset:offset + 4]), "little")
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def test_parse_unit():
    assert offline.parse_unit("100") == 100.0
    assert offline.parse_unit("72pt") == 72.0
    assert offline.parse_unit("1in") == 72.0
    assert offline.parse_unit("25.4mm") == pytest.approx(72.0)


def test_read_events_skips_bad_lines():
    stream = io.StringIO('{"amplitude": 1}\n\nnot json\n[1]\n{"speed": 2}\n')

    assert list(offline.read_events(stream)) == [{"amplitude": 1}, {"speed": 2}]


def test_oneshot_png(tmp_path):
    output = str(tmp_path / "wave.png")
    offline.main(["-f", "png", "-s", "200", "90", "-o", output], events(10, 20, 30))

    surface = cairo.ImageSurface.create_from_png(output)
    assert (surface.get_width(), surface.get_height()) == (200, 90)
    assert pixel(surface, 150, 5) == (0xBB, 0xDE, 0xFB)


def test_empty_input_renders_background(tmp_path):
    output = str(tmp_path / "wave.png")
    offline.main(["-f", "png", "-s", "50", "50", "-o", output], io.StringIO(""))

    surface = cairo.ImageSurface.create_from_png(output)
    assert pixel(surface, 25, 25) == (0xBB, 0xDE, 0xFB)


def test_sequence_png(tmp_path):
    output = tmp_path / "frames"
    offline.main(
        ["-m", "sequence", "-f", "png", "-s", "100", "90", "-o", str(output)],
        events(10, 20, 30))

    assert sorted(p.name for p in output.iterdir()) == ["0.png", "1.png", "2.png"]


def test_slideshow_pdf(tmp_path):
    output = tmp_path / "wave.pdf"
    offline.main(
        ["-m", "slideshow", "-f", "pdf", "-s", "100", "90", "-o", str(output)],
        events(10, 20))

    assert output.read_bytes().startswith(b"%PDF")


def test_png_requires_output():
    with pytest.raises(offline.UserError):
        offline.main(["-f", "png", "-s", "100", "90"], events(1))


def test_png_slideshow_is_rejected(tmp_path):
    output = str(tmp_path / "wave.png")
    with pytest.raises(offline.UserError):
        offline.main(
            ["-m", "slideshow", "-f", "png", "-s", "100", "90", "-o", output],
            events(1))


def test_non_positive_size_is_rejected(tmp_path):
    output = str(tmp_path / "wave.png")
    with pytest.raises(offline.UserError):
        offline.main(["-f", "png", "-s", "0", "90", "-o", output], events(1))


def test_oneshot_png_draws_wave(tmp_path):
    output = str(tmp_path / "wave.png")
    offline.main(
        ["-f", "png", "-s", "200", "90", "-t", "0", "-o", output],
        events(*[10] * 25))

    surface = cairo.ImageSurface.create_from_png(output)
    column = [pixel(surface, 50, y) for y in range(90)]
    # around y = 38.7, antialiased against the background
    assert any(
        all(abs(a - b) <= 16 for a, b in zip(color, (0x64, 0xB5, 0xF6)))
        for color in column[30:50]
    )
    assert column[5] == (0xBB, 0xDE, 0xFB)
    assert column[85] == (0xBB, 0xDE, 0xFB)


def test_slideshow_has_a_page_per_event(tmp_path):
    output = tmp_path / "wave.ps"
    offline.main(
        ["-m", "slideshow", "-f", "ps", "-s", "100", "90", "-o", str(output)],
        events(10, 20, 30))

    assert output.read_bytes().count(b"%%Page: ") == 3


def test_svg_slideshow_is_rejected(tmp_path):
    output = str(tmp_path / "wave.svg")
    with pytest.raises(offline.UserError):
        offline.main(
            ["-m", "slideshow", "-f", "svg", "-s", "100", "90", "-o", output],
            events(1))


def test_sequence_into_existing_file(tmp_path):
    output = tmp_path / "frames"
    output.write_text("")
    with pytest.raises(offline.UserError):
        offline.main(
            ["-m", "sequence", "-f", "png", "-s", "100", "90", "-o", str(output)],
            events(1))


def test_missing_config(tmp_path):
    output = str(tmp_path / "wave.png")
    with pytest.raises(offline.UserError):
        offline.main(
            ["-f", "png", "-s", "100", "90", "-o", output,
             "-c", str(tmp_path / "missing.json")],
            events(1))


def test_bad_config_value(tmp_path):
    config = tmp_path / "wave.json"
    config.write_text(json.dumps({"wave_height": "tall"}))
    output = str(tmp_path / "wave.png")
    with pytest.raises(offline.UserError, match="wave_height"):
        offline.main(
            ["-f", "png", "-s", "100", "90", "-o", output, "-c", str(config)],
            events(1))
