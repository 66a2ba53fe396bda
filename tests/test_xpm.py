import numpy as np
import pytest

from raycube.xpm import (
    TRANSPARENT,
    Texture,
    XpmError,
    color_from_text,
    load_xpm,
    parse_xpm,
    strip_comments,
)

SAMPLE = """/* XPM */
static char *sample[] = {
/* columns rows colors chars-per-pixel */
"3 2 3 1 ",
"  c None",
". c #FF0000",
"X c white",
/* pixels */
"X. ",
" .X"
};
"""


def test_parse_sample_pixels():
    texture = parse_xpm(SAMPLE)
    assert (texture.width, texture.height) == (3, 2)
    assert texture.pixels.tolist() == [
        [0xFFFFFF, 0xFF0000, TRANSPARENT],
        [TRANSPARENT, 0xFF0000, 0xFFFFFF],
    ]


def test_parse_two_chars_per_pixel():
    text = '"2 1 2 2", "aa c #000001", "bb c #000002", "bbaa"'
    texture = parse_xpm(text)
    assert texture.pixels.tolist() == [[0x000002, 0x000001]]


def test_later_definition_wins_for_short_keys():
    text = '"1 1 2 1", "a c #000001", "a c #000002", "a"'
    assert parse_xpm(text).pixels.tolist() == [[0x000002]]


def test_unknown_pixel_key_is_black():
    text = '"2 1 1 1", "a c #000001", "az"'
    assert parse_xpm(text).pixels.tolist() == [[0x000001, 0]]


def test_strip_comments_keeps_length_and_quoted_text():
    text = '/* gone */ "keep /* me */"'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "gone" not in result
    assert '"keep /* me */"' in result


def test_strip_line_comment_with_newline():
    text = '"a" // note\n"b"'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "note" not in result
    assert "\n" not in result
    assert result.startswith('"a"') and result.endswith('"b"')


def test_color_from_text_hex_and_names():
    assert color_from_text("#00ff00") == 0x00FF00
    assert color_from_text("white") == 0xFFFFFF
    assert color_from_text("light", "grey") == 0xD3D3D3
    assert color_from_text("NONE") == -1
    assert color_from_text("nosuchcolour") == 0


def test_hex_ignores_extra_word():
    assert color_from_text("#0000ff", "anything") == 0x0000FF


@pytest.mark.parametrize(
    "text",
    [
        "",
        '"0 1 1 1", "a c #000000", "a"',
        '"1 1"',
        '"1 1 1 1", "a s thing", "a"',
        '"1 1 1 1", "a c", "a"',
        '"2 2 1 1", "a c #000000", "aa"',
        '"2 1 1 1", "a c #000000", "a"',
    ],
)
def test_invalid_images_raise(text):
    with pytest.raises(XpmError):
        parse_xpm(text)


def test_load_xpm_from_file(tmp_path):
    path = tmp_path / "wall.xpm"
    path.write_text(SAMPLE, encoding="latin-1")
    texture = load_xpm(path)
    assert texture.pixels.tolist() == parse_xpm(SAMPLE).pixels.tolist()


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "missing.xpm")


def test_texture_rejects_wrong_shape():
    with pytest.raises(ValueError):
        Texture(width=2, height=2, pixels=np.zeros((3, 2), dtype=np.uint32))