"""
Tests for imaging/bitmap.py - Loading, scaling and cropping.
"""

import pytest
from PIL import Image

from display_compiler.src.grid.grid_planner import GridCell
from display_compiler.src.imaging.bitmap import crop_tile, load_image, scale_to


class TestLoadImage:
    def test_converts_to_rgba(self):
        """Test loaded images are RGBA."""
        image = load_image(Image.new("RGB", (2, 2), (1, 2, 3)))
        assert image.mode == "RGBA"
        assert image.getpixel((0, 0)) == (1, 2, 3, 255)

    def test_loads_from_path(self, tmp_path):
        """Test images load from disk."""
        path = tmp_path / "in.png"
        Image.new("RGBA", (3, 2), (9, 9, 9, 255)).save(path)
        image = load_image(path)
        assert image.size == (3, 2)

    def test_missing_file_propagates(self, tmp_path):
        """Test loader errors reach the caller unchanged."""
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "missing.png")


class TestScaleTo:
    def test_same_size_is_untouched(self):
        """Test images already at size are returned as is."""
        image = Image.new("RGBA", (4, 4))
        assert scale_to(image, 4, 4) is image

    def test_resizes(self):
        """Test images are resized to the requested size."""
        image = Image.new("RGBA", (4, 4))
        assert scale_to(image, 10, 6).size == (10, 6)


class TestCropTile:
    def test_crops_cell_square(self):
        """Test cropping picks the cell's square by column and row."""
        image = Image.new("RGBA", (4, 4), (0, 0, 0, 255))
        image.putpixel((2, 2), (255, 0, 0, 255))
        tile = crop_tile(image, GridCell(column=1, row=1, index=3), 2)
        assert tile.size == (2, 2)
        assert tile.getpixel((0, 0)) == (255, 0, 0, 255)
