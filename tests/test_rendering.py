import pytest
from PIL import Image

from pixelstamp import Color, DecodeFailure, Stamp, UnsupportedFormat, encode
from pixelstamp.rendering import GridLoader, grid_to_image, image_to_grid, load_grid
from pixelstamp.rendering.renderer import flat_samples

B = Color.BLACK
W = Color.WHITE


def colors_of(grid):
    return [color for _, _, color in Stamp.from_bitmap(encode(grid)).pixels()]


def test_rgb_thresholded_by_luma(make_image):
    path = make_image(
        "mixed.png",
        (4, 1),
        [(0, 0, 0), (255, 255, 255), (100, 100, 100), (200, 200, 200)],
    )
    grid = load_grid(path)
    assert (grid.width, grid.height, grid.depth) == (4, 1, 8)
    assert colors_of(grid) == [B, W, B, W]


def test_transparent_pixels_are_black(make_image):
    path = make_image(
        "alpha.png",
        (3, 1),
        [(255, 255, 255, 0), (255, 255, 255, 255), (0, 0, 0, 255)],
        mode="RGBA",
    )
    assert colors_of(load_grid(path)) == [B, W, B]


def test_one_bit_image(make_image):
    path = make_image("mono.bmp", (3, 2), [255, 0, 255, 0, 255, 0], mode="1")
    grid = load_grid(path)
    assert grid.depth == 1
    assert colors_of(grid) == [W, B, W, B, W, B]


def test_sixteen_bit_samples_keep_native_depth():
    img = Image.new("I;16", (2, 1))
    img.putpixel((0, 0), 1000)
    img.putpixel((1, 0), 40000)
    grid = image_to_grid(img)
    assert grid.depth == 16
    assert colors_of(grid) == [B, W]


def test_unsupported_extension(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    with pytest.raises(UnsupportedFormat):
        load_grid(str(path))
    with pytest.raises(UnsupportedFormat):
        GridLoader().load(str(tmp_path / "noext"))


def test_corrupt_image_is_decode_failure(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not really a png")
    with pytest.raises(DecodeFailure):
        load_grid(str(path))


def test_decode_failure_is_not_unsupported_format(tmp_path):
    path = tmp_path / "broken.gif"
    path.write_bytes(b"GIF89a")
    with pytest.raises(DecodeFailure) as excinfo:
        load_grid(str(path))
    assert not isinstance(excinfo.value, UnsupportedFormat)


def test_grid_to_image_round_trip(make_image):
    pixels = [255, 0, 0, 255, 255, 0, 0, 0, 255, 255]
    path = make_image("shape.png", (5, 2), pixels, mode="L")
    stamp = Stamp.from_bitmap(encode(load_grid(path)))

    rendered = grid_to_image(stamp)
    assert rendered.mode == "1"
    assert rendered.size == (5, 2)
    assert [255 if p else 0 for p in flat_samples(rendered)] == pixels
    assert list(flat_samples(grid_to_image(load_grid(path)))) == list(flat_samples(rendered))


def test_exif_orientation_applied(tmp_path):
    img = Image.new("L", (16, 8), 0)
    img.paste(255, (0, 0, 8, 8))
    exif = Image.Exif()
    exif[0x0112] = 3  # rotated 180 degrees
    path = tmp_path / "rotated.jpg"
    img.save(path, exif=exif, quality=95)
    stamp = Stamp.from_bitmap(encode(load_grid(str(path))))
    assert stamp.size == (16, 8)
    assert stamp.color_at(0, 0) is B
    assert stamp.color_at(15, 7) is W


def test_flat_samples_row_major():
    img = Image.new("L", (3, 2))
    img.putpixel((2, 0), 200)
    img.putpixel((0, 1), 17)
    assert flat_samples(img) == [0, 0, 200, 17, 0, 0]
